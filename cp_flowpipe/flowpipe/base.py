"""
Common interface of flowpipe-like values.

A flowpipe is the set union of an ordered sequence of reach-sets. Every
flowpipe-like value (eager Flowpipe, lazy shifted/mapped wrappers, hybrid
containers, slice views) implements AbstractFlowpipe, so consumers can query
any of them the same way:

    fp[i], fp[a:b], len(fp), iter(fp)      positional access (0-based)
    fp.tspan, fp.tstart, fp.tend           time domain
    fp(t), fp(Interval(a, b))              time-point / time-interval lookup
    fp.support_function(d)                 union semantics
    fp.project(vars)                       eager projection (0 denotes time)

Time lookup works on the arrays of start and end times returned by
``_time_bounds``; when the spans are known to be in chronological order
(``_chronological``), the lookup is a binary search, otherwise a scan.
"""

from __future__ import annotations

import logging
import operator
from abc import ABC, abstractmethod
from typing import Iterator, List, Sequence, Tuple, Union

import numpy as np

from cp_flowpipe.errors import DomainError, PreconditionError, UnsupportedOperationError
from cp_flowpipe.geometry import ConvexSet, Interval, cartesian_product, projection_matrix

from .reachset import ReachSet

logger = logging.getLogger(__name__)

Positions = Union[range, List[int]]


class AbstractFlowpipe(ABC):
    """Abstract type representing a flowpipe."""

    @abstractmethod
    def array(self) -> List[ReachSet]:
        """Ordered reach-sets of this flowpipe."""

    # -- sequence interface -------------------------------------------------

    def __len__(self) -> int:
        return len(self.array())

    def is_empty(self) -> bool:
        return len(self) == 0

    def __iter__(self) -> Iterator[ReachSet]:
        return iter(self.array())

    def __getitem__(self, key):
        n = len(self)
        if isinstance(key, slice):
            return self._view(range(n)[key])
        if isinstance(key, (list, tuple, np.ndarray)):
            return self._view([_normalize_index(i, n) for i in key])
        return self._element(_normalize_index(key, n))

    def first(self) -> ReachSet:
        return self[0]

    def last(self) -> ReachSet:
        return self[-1]

    def _element(self, i: int) -> ReachSet:
        return self.array()[i]

    def _view(self, positions: Positions) -> "AbstractFlowpipe":
        return SubFlowpipe(self, positions)

    # -- sets ---------------------------------------------------------------

    @property
    def set(self):
        raise UnsupportedOperationError(
            "a flowpipe is a sequence of reach-sets, not a single set; to retrieve "
            "the array of sets use `array()`, or retrieve the set at a given index "
            "with `set_at(ind)` (equivalently `fp[ind].set`)"
        )

    def set_at(self, ind: int) -> ConvexSet:
        """Set of the reach-set at position ``ind``."""
        return self[ind].set

    @property
    def setrep(self):
        """Set representation type of the reach-sets, or None if it cannot be determined."""
        return None if self.is_empty() else type(self.first().set)

    @property
    def flowpipe(self) -> "AbstractFlowpipe":
        """Underlying flowpipe (the flowpipe itself for eager types)."""
        return self

    @property
    def dim(self) -> int:
        self._require_nonempty("dimension")
        # the sets are assumed to share their dimension
        return self.first().dim

    def _require_nonempty(self, what: str) -> None:
        if self.is_empty():
            raise PreconditionError(f"the {what} is not defined because this flowpipe is empty")

    # -- time domain --------------------------------------------------------

    @property
    def tstart(self) -> float:
        self._require_nonempty("time span")
        return float(self._time_bounds()[0][0])

    @property
    def tend(self) -> float:
        self._require_nonempty("time span")
        return float(self._time_bounds()[1][-1])

    @property
    def tspan(self) -> Interval:
        return Interval(self.tstart, self.tend)

    @property
    def _chronological(self) -> bool:
        return False

    def _time_bounds(self) -> Tuple[np.ndarray, np.ndarray]:
        Xk = self.array()
        starts = np.array([X.tstart for X in Xk], dtype=float)
        ends = np.array([X.tend for X in Xk], dtype=float)
        return starts, ends

    def time_spans(self) -> List[Interval]:
        """
        Time spans of the reach-sets as seen through this flowpipe.

        Lazy time shifts are applied here, unlike in ``fp[i].tspan``.
        """
        starts, ends = self._time_bounds()
        return [Interval(a, b) for a, b in zip(starts, ends)]

    def __call__(self, t):
        return self.query(t)

    def query(self, t):
        """
        Evaluate the flowpipe at a time point or over a time interval.

        Parameters
        ----------
        t : float or Interval
            Time point, or closed time interval [alpha, beta]

        Returns
        -------
        ReachSet or AbstractFlowpipe
            For a time point: the first reach-set whose span contains ``t``.
            If ``t`` also belongs to the span of the next reach-set (``t`` is
            their shared boundary), a two-element view with both of them.
            For an interval: the contiguous view from the first reach-set
            containing alpha to the last reach-set containing beta.

        Raises
        ------
        DomainError
            If the time point, or either end of the interval, is not covered
        """
        positions = self.locate(t)
        if isinstance(t, Interval) or len(positions) > 1:
            return self[positions.start:positions.stop]
        return self[positions.start]

    def locate(self, t) -> range:
        """
        Positions of the reach-sets that ``query(t)`` returns.

        Parameters
        ----------
        t : float or Interval
            Time point or time interval

        Returns
        -------
        range
            Contiguous positions; two of them when a time point is the shared
            boundary of adjacent reach-sets
        """
        if isinstance(t, Interval):
            return self._locate_interval(t)
        return self._locate_point(t)

    def _span_or_none(self):
        return None if self.is_empty() else self.tspan

    def _locate_point(self, t) -> range:
        starts, ends = self._time_bounds()
        n = len(starts)
        if self._chronological:
            i = int(np.searchsorted(ends, t, side="left"))
            found = i < n and starts[i] <= t
        else:
            hits = np.flatnonzero((starts <= t) & (t <= ends))
            found = hits.size > 0
            i = int(hits[0]) if found else n

        if not found:
            span = self._span_or_none()
            raise DomainError(
                f"time {t} does not belong to the time span, {span}, of the given flowpipe",
                value=t,
                span=span,
            )

        if i + 1 < n and starts[i + 1] <= t <= ends[i + 1]:
            logger.debug(f"time {t} is the shared boundary of reach-sets {i} and {i + 1}")
            return range(i, i + 2)
        return range(i, i + 1)

    def _locate_interval(self, dt: Interval) -> range:
        alpha, beta = dt.lo, dt.hi
        starts, ends = self._time_bounds()
        n = len(starts)
        first = last = None
        if self._chronological:
            i = int(np.searchsorted(ends, alpha, side="left"))
            if i < n and starts[i] <= alpha:
                first = i
            j = int(np.searchsorted(starts, beta, side="right")) - 1
            if j >= 0 and ends[j] >= beta:
                last = j
        else:
            hits_alpha = np.flatnonzero((starts <= alpha) & (alpha <= ends))
            hits_beta = np.flatnonzero((starts <= beta) & (beta <= ends))
            if hits_alpha.size:
                first = int(hits_alpha[0])
            if hits_beta.size:
                last = int(hits_beta[-1])

        if first is None or last is None or first > last:
            span = self._span_or_none()
            raise DomainError(
                f"the time interval {dt} is not contained in the time span, {span}, "
                "of the given flowpipe",
                value=dt,
                span=span,
            )
        return range(first, last + 1)

    # -- set operations -----------------------------------------------------

    def support_function(self, d) -> float:
        """Support function of the union of the reach-sets in direction ``d``."""
        self._require_nonempty("support function")
        return max(X.support_function(d) for X in self)

    def support_vector(self, d) -> np.ndarray:
        """Support vector of the union: that of a reach-set maximizing the support function."""
        self._require_nonempty("support vector")
        best = max(self, key=lambda X: X.support_function(d))
        return best.support_vector(d)

    def project(self, vars: Sequence[int]) -> List[ConvexSet]:
        """
        Eager projection of each reach-set onto the given variables.

        Parameters
        ----------
        vars : sequence of int
            1-based variable indices; the index 0 denotes time

        Returns
        -------
        list[ConvexSet]
            One set per reach-set, of dimension ``len(vars)``. When time is
            requested, each set is the projection of ``tspan x set``.

        Notes
        -----
        See ``projection_of`` for the lazy counterpart.
        """
        vars = tuple(int(v) for v in vars)
        if 0 in vars:
            states = [v for v in vars if v != 0]
            if states and not self.is_empty():
                projection_matrix(states, self.dim)
            # shift the indices by one as we take the Cartesian product with the time spans
            aux = tuple(v + 1 for v in vars)
            return [
                cartesian_product(span, X.set).project(aux)
                for X, span in zip(self, self.time_spans())
            ]
        return [X.set.project(vars) for X in self]

    def __repr__(self) -> str:
        if self.is_empty():
            return f"{type(self).__name__}(length=0)"
        return f"{type(self).__name__}(length={len(self)}, tspan={self.tspan})"


def _normalize_index(i, n: int) -> int:
    i = operator.index(i)
    j = i + n if i < 0 else i
    if not 0 <= j < n:
        raise IndexError(f"index {i} is out of range for a flowpipe with {n} reach-sets")
    return j


def _compose(outer: Positions, inner: Positions) -> Positions:
    if isinstance(outer, range) and isinstance(inner, range) and inner.step > 0:
        return outer[inner.start:inner.stop:inner.step]
    return [outer[i] for i in inner]


class SubFlowpipe(AbstractFlowpipe):
    """
    View of a subset of the positions of a flowpipe-like value.

    Slicing and time-interval queries return this view; no reach-set is copied.

    Attributes
    ----------
    parent : AbstractFlowpipe
        Flowpipe being viewed
    indices : range or list[int]
        Positions of ``parent`` that make up the view, in order
    """

    def __init__(self, parent: AbstractFlowpipe, indices: Positions):
        self.parent = parent
        self.indices = indices

    def array(self) -> List[ReachSet]:
        return [self.parent._element(i) for i in self.indices]

    def __len__(self) -> int:
        return len(self.indices)

    def __iter__(self) -> Iterator[ReachSet]:
        return (self.parent._element(i) for i in self.indices)

    def _element(self, i: int) -> ReachSet:
        return self.parent._element(self.indices[i])

    def _view(self, positions: Positions) -> "SubFlowpipe":
        return SubFlowpipe(self.parent, _compose(self.indices, positions))

    @property
    def flowpipe(self) -> AbstractFlowpipe:
        return self.parent

    @property
    def setrep(self):
        return self.parent.setrep

    @property
    def _chronological(self) -> bool:
        ordered = isinstance(self.indices, range) and self.indices.step > 0
        return ordered and self.parent._chronological

    def _time_bounds(self) -> Tuple[np.ndarray, np.ndarray]:
        starts, ends = self.parent._time_bounds()
        idx = np.asarray(self.indices, dtype=int)
        return starts[idx], ends[idx]
