"""
Lazy flowpipe wrappers.

ShiftedFlowpipe and MappedFlowpipe keep a reference to the wrapped
flowpipe-like value and rewrite every query in terms of it, so several views
of one long flowpipe (e.g. projections onto different variable pairs) cost no
extra reach-set storage. Wrappers compose: a shift of a projection of a shift
is again a flowpipe-like value.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Iterator, List, Sequence, Tuple

import numpy as np

from cp_flowpipe.errors import PreconditionError
from cp_flowpipe.geometry import ConvexSet, projection_matrix

from .base import AbstractFlowpipe, Positions
from .reachset import ReachSet

logger = logging.getLogger(__name__)


def _check_flowpipe(F) -> AbstractFlowpipe:
    if not isinstance(F, AbstractFlowpipe):
        raise TypeError(f"Expected a flowpipe-like value, got {type(F).__name__}")
    return F


class ShiftedFlowpipe(AbstractFlowpipe):
    """
    Flowpipe shifted in time by a constant, computed lazily.

    Attributes
    ----------
    F : AbstractFlowpipe
        Original flowpipe
    t0 : float
        Time shift

    Notes
    -----
    Only the time domain seen through this wrapper is shifted: ``tspan``,
    ``tstart``, ``tend``, time queries and eager projections involving time
    use the spans of ``F`` plus ``t0``. The reach-sets themselves are not
    re-stamped, so ``fp[i].tspan`` is the unshifted span stored in ``F``.
    Use ``Flowpipe.shift`` to obtain shifted reach-sets.

    A convenience alias ``Shift`` is given.
    """

    def __init__(self, F: AbstractFlowpipe, t0):
        self.F = _check_flowpipe(F)
        self.t0 = t0

    def array(self) -> List[ReachSet]:
        return self.F.array()

    def __len__(self) -> int:
        return len(self.F)

    def __iter__(self) -> Iterator[ReachSet]:
        return iter(self.F)

    def _element(self, i: int) -> ReachSet:
        return self.F._element(i)

    def _view(self, positions: Positions) -> "ShiftedFlowpipe":
        return ShiftedFlowpipe(self.F._view(positions), self.t0)

    @property
    def flowpipe(self) -> AbstractFlowpipe:
        return self.F

    @property
    def time_shift(self):
        return self.t0

    @property
    def setrep(self):
        return self.F.setrep

    @property
    def dim(self) -> int:
        return self.F.dim

    @property
    def tstart(self) -> float:
        return self.F.tstart + self.t0

    @property
    def tend(self) -> float:
        return self.F.tend + self.t0

    @property
    def _chronological(self) -> bool:
        return self.F._chronological

    def _time_bounds(self) -> Tuple[np.ndarray, np.ndarray]:
        starts, ends = self.F._time_bounds()
        return starts + self.t0, ends + self.t0


Shift = ShiftedFlowpipe


class LinearMap:
    """Set transformation X -> M X, usable as the ``func`` of a MappedFlowpipe."""

    def __init__(self, M):
        self.matrix = np.atleast_2d(np.asarray(M, dtype=float))

    def __call__(self, X: ConvexSet) -> ConvexSet:
        return X.linear_map(self.matrix)

    def __repr__(self) -> str:
        return f"LinearMap({self.matrix.shape[0]}x{self.matrix.shape[1]})"


class MappedFlowpipe(AbstractFlowpipe):
    """
    Flowpipe whose sets are transformed on access.

    Attributes
    ----------
    F : AbstractFlowpipe
        Flowpipe
    func : callable
        Function mapping a set to a set; a LinearMap enables evaluating the
        support function without building the mapped sets

    Notes
    -----
    Mapped reach-sets are created on every access and never stored. Their
    time spans and tags are those of the underlying reach-sets.
    """

    def __init__(self, F: AbstractFlowpipe, func: Callable[[ConvexSet], ConvexSet]):
        self.F = _check_flowpipe(F)
        self.func = func

    def _map(self, X: ReachSet) -> ReachSet:
        return replace(X, set=self.func(X.set))

    def array(self) -> List[ReachSet]:
        return [self._map(X) for X in self.F]

    def __len__(self) -> int:
        return len(self.F)

    def __iter__(self) -> Iterator[ReachSet]:
        return (self._map(X) for X in self.F)

    def _element(self, i: int) -> ReachSet:
        return self._map(self.F._element(i))

    def _view(self, positions: Positions) -> "MappedFlowpipe":
        return MappedFlowpipe(self.F._view(positions), self.func)

    @property
    def flowpipe(self) -> AbstractFlowpipe:
        return self.F

    @property
    def dim(self) -> int:
        if isinstance(self.func, LinearMap):
            self._require_nonempty("dimension")
            return self.func.matrix.shape[0]
        return super().dim

    @property
    def tstart(self) -> float:
        return self.F.tstart

    @property
    def tend(self) -> float:
        return self.F.tend

    @property
    def _chronological(self) -> bool:
        return self.F._chronological

    def _time_bounds(self) -> Tuple[np.ndarray, np.ndarray]:
        return self.F._time_bounds()

    def support_function(self, d) -> float:
        if isinstance(self.func, LinearMap):
            M = self.func.matrix
            return self.F.support_function(M.T @ np.asarray(d, dtype=float))
        return super().support_function(d)

    def support_vector(self, d) -> np.ndarray:
        if isinstance(self.func, LinearMap):
            M = self.func.matrix
            return M @ self.F.support_vector(M.T @ np.asarray(d, dtype=float))
        return super().support_vector(d)


def shift_of(F: AbstractFlowpipe, t0) -> ShiftedFlowpipe:
    """Lazy time shift of a flowpipe-like value."""
    return ShiftedFlowpipe(F, t0)


def projection_of(F: AbstractFlowpipe, vars: Sequence[int]) -> MappedFlowpipe:
    """
    Return the lazy projection of a flowpipe.

    Parameters
    ----------
    F : AbstractFlowpipe
        Flowpipe-like value
    vars : sequence of int
        1-based variable indices, each in ``1..dim(F)``

    Returns
    -------
    MappedFlowpipe
        Flowpipe mapping each set ``X`` to ``M X``, where ``M`` is the
        projection matrix associated with ``vars``

    Raises
    ------
    PreconditionError
        If ``F`` is empty or a variable index is out of range. Time (index 0)
        is not a state variable; use the eager ``F.project(vars)`` for
        projections that include time.
    """
    vars = tuple(int(v) for v in vars)
    if 0 in vars:
        raise PreconditionError(
            "the time variable (index 0) cannot be projected lazily; "
            "use the eager `project(vars)` method instead"
        )
    M = projection_matrix(vars, F.dim)
    logger.debug(f"Lazy projection onto variables {vars} of a flowpipe with {len(F)} reach-sets")
    return MappedFlowpipe(F, LinearMap(M))


Projection = projection_of
