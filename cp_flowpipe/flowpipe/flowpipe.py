from __future__ import annotations

import logging
import warnings
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

import numpy as np

from .base import AbstractFlowpipe
from .extension import Extension
from .reachset import ReachSet

logger = logging.getLogger(__name__)


class Flowpipe(AbstractFlowpipe):
    """
    Eagerly stored sequence of reach-sets.

    Attributes
    ----------
    Xk : list[ReachSet]
        Reach-sets in chronological order: time spans are non-decreasing and
        cover [tstart, tend] without gaps (adjacent spans may share an endpoint)
    ext : Extension
        Producer metadata, e.g. the algorithm name or the step size used

    Notes
    -----
    All reach-sets are assumed to have the same dimension and the same set
    representation (``setrep``). Producers build a flowpipe with ``append`` /
    ``extend``; the query layer never mutates it. The start and end times are
    cached as arrays for binary search. The cache is rebuilt when the number
    of reach-sets changes or when the first or last reach-set is replaced in
    place (``fp.array()[-1] = X``); ``tstart`` and ``tend`` are always read
    from the first and last reach-sets.
    """

    def __init__(
        self,
        Xk: Optional[Iterable[ReachSet]] = None,
        ext: Optional[Union[Extension, Dict[str, Any]]] = None,
        setrep: Optional[type] = None,
    ):
        self.Xk: List[ReachSet] = []
        self.ext = ext if isinstance(ext, Extension) else Extension(ext)
        self._setrep = setrep
        self._bounds: Optional[Tuple[Tuple, np.ndarray, np.ndarray, bool]] = None
        if Xk is not None:
            self.extend(Xk)

    def array(self) -> List[ReachSet]:
        return self.Xk

    def __len__(self) -> int:
        return len(self.Xk)

    def _element(self, i: int) -> ReachSet:
        return self.Xk[i]

    @property
    def setrep(self) -> Optional[type]:
        return self._setrep

    def append(self, X: ReachSet) -> None:
        """Add a reach-set at the end of the flowpipe."""
        if not isinstance(X, ReachSet):
            raise TypeError(f"Flowpipe elements must be ReachSet, got {type(X).__name__}")
        if self._setrep is None:
            self._setrep = type(X.set)
        elif not isinstance(X.set, self._setrep):
            raise TypeError(
                f"Cannot add a reach-set of type {type(X.set).__name__} to a flowpipe "
                f"of {self._setrep.__name__} sets"
            )
        self.Xk.append(X)

    def extend(self, Xs: Iterable[ReachSet]) -> None:
        for X in Xs:
            self.append(X)

    # -- time lookup --------------------------------------------------------

    @property
    def tstart(self) -> float:
        self._require_nonempty("time span")
        return self.Xk[0].tstart

    @property
    def tend(self) -> float:
        self._require_nonempty("time span")
        return self.Xk[-1].tend

    def _bounds_key(self) -> Tuple:
        if not self.Xk:
            return (0,)
        return (len(self.Xk), id(self.Xk[0]), id(self.Xk[-1]))

    def _time_bounds(self) -> Tuple[np.ndarray, np.ndarray]:
        key = self._bounds_key()
        if self._bounds is None or self._bounds[0] != key:
            starts = np.array([X.tstart for X in self.Xk], dtype=float)
            ends = np.array([X.tend for X in self.Xk], dtype=float)
            chronological = bool(np.all(np.diff(starts) >= 0) and np.all(np.diff(ends) >= 0))
            if not chronological:
                warnings.warn(
                    "The time spans of this flowpipe are not in chronological order; "
                    "time queries fall back to a linear scan",
                    stacklevel=2,
                )
            self._bounds = (key, starts, ends, chronological)
            logger.debug(f"Cached time bounds of a flowpipe with {len(starts)} reach-sets")
        return self._bounds[1], self._bounds[2]

    @property
    def _chronological(self) -> bool:
        self._time_bounds()
        return self._bounds[3]

    # -- transforms ---------------------------------------------------------

    def shift(self, t0) -> "Flowpipe":
        """
        Return the time-shifted flowpipe by the given number.

        Parameters
        ----------
        t0 : float
            Time shift

        Returns
        -------
        Flowpipe
            New flowpipe such that the time span of each constituent reach-set
            has been shifted by ``t0``. The sets and the extension store are
            shared with this flowpipe.

        Notes
        -----
        See ``ShiftedFlowpipe`` for the lazy counterpart.
        """
        return Flowpipe([X.shift(t0) for X in self.Xk], self.ext, setrep=self._setrep)

    def similar(self) -> "Flowpipe":
        """New empty flowpipe with the same set representation."""
        return Flowpipe(setrep=self._setrep)
