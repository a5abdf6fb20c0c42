"""
Flowpipes of hybrid systems: one flowpipe per visited discrete location,
exposed as a single flattened flowpipe-like value.

The constituent flowpipes are not required to be chronologically disjoint
(different locations can be reached over overlapping time intervals), so
the time span of a hybrid flowpipe is the union bound of its constituents and
time queries scan the reach-sets instead of bisecting.
"""

from __future__ import annotations

import itertools
import logging
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple, Union

import numpy as np

from .base import AbstractFlowpipe
from .extension import Extension
from .reachset import ReachSet

logger = logging.getLogger(__name__)


def _rep_name(rep) -> str:
    # mixed hybrid flowpipes report one representation per location
    if isinstance(rep, tuple):
        return f"({', '.join(_rep_name(r) for r in rep)})"
    return getattr(rep, "__name__", repr(rep))


class HybridFlowpipe(AbstractFlowpipe):
    """
    Sequence of flowpipes of the same type, one per discrete location.

    Attributes
    ----------
    Fk : list[AbstractFlowpipe]
        Flowpipes in location order; all of the same class and set representation
    ext : Extension
        Producer metadata

    Notes
    -----
    Positional access is flattened: ``fp[i]`` counts reach-sets across all
    locations. Use ``location(k)`` to get the k-th constituent flowpipe.
    """

    def __init__(
        self,
        Fk: Iterable[AbstractFlowpipe] = (),
        ext: Optional[Union[Extension, Dict[str, Any]]] = None,
    ):
        self.Fk: List[AbstractFlowpipe] = []
        self.ext = ext if isinstance(ext, Extension) else Extension(ext)
        for F in Fk:
            self.append(F)
        logger.debug(f"Hybrid flowpipe with {len(self.Fk)} locations")

    def _check_location(self, F) -> None:
        if not isinstance(F, AbstractFlowpipe):
            raise TypeError(f"Expected a flowpipe-like value, got {type(F).__name__}")
        if not self.Fk:
            return
        if type(F) is not type(self.Fk[0]):
            raise TypeError(
                f"HybridFlowpipe requires flowpipes of a single type, got {type(F).__name__} "
                f"and {type(self.Fk[0]).__name__}; use MixedHybridFlowpipe instead"
            )
        reps = {G.setrep for G in self.Fk if G.setrep is not None}
        if F.setrep is not None and reps and F.setrep not in reps:
            raise TypeError(
                f"HybridFlowpipe requires a single set representation, got {_rep_name(F.setrep)} "
                f"and {_rep_name(next(iter(reps)))}; use MixedHybridFlowpipe instead"
            )

    def append(self, F: AbstractFlowpipe) -> None:
        """Add the flowpipe of the next visited location."""
        self._check_location(F)
        self.Fk.append(F)

    def location(self, k: int) -> AbstractFlowpipe:
        """Flowpipe of the k-th location."""
        return self.Fk[k]

    @property
    def nlocations(self) -> int:
        return len(self.Fk)

    def array(self) -> List[ReachSet]:
        return list(itertools.chain.from_iterable(F.array() for F in self.Fk))

    def __len__(self) -> int:
        return sum(len(F) for F in self.Fk)

    def __iter__(self) -> Iterator[ReachSet]:
        return itertools.chain.from_iterable(self.Fk)

    def _element(self, i: int) -> ReachSet:
        for F in self.Fk:
            n = len(F)
            if i < n:
                return F._element(i)
            i -= n
        raise IndexError(f"index {i} is out of range")

    @property
    def setrep(self):
        for F in self.Fk:
            if F.setrep is not None:
                return F.setrep
        return None

    def _nonempty(self) -> List[AbstractFlowpipe]:
        return [F for F in self.Fk if not F.is_empty()]

    @property
    def tstart(self) -> float:
        self._require_nonempty("time span")
        return min(F.tstart for F in self._nonempty())

    @property
    def tend(self) -> float:
        self._require_nonempty("time span")
        return max(F.tend for F in self._nonempty())

    def _time_bounds(self) -> Tuple[np.ndarray, np.ndarray]:
        if not self.Fk:
            return np.zeros(0), np.zeros(0)
        bounds = [F._time_bounds() for F in self.Fk]
        return (
            np.concatenate([b[0] for b in bounds]),
            np.concatenate([b[1] for b in bounds]),
        )


class MixedHybridFlowpipe(HybridFlowpipe):
    """
    Fixed collection of flowpipes of possibly different types, one per location.

    Each location may use its own set representation (e.g. zonotopes in one
    location and boxes in another) or its own flowpipe type (eager,
    shifted, mapped). Every constituent only needs to be an AbstractFlowpipe;
    the flattened view dispatches to it per element.

    Attributes
    ----------
    Fk : tuple[AbstractFlowpipe, ...]
        Flowpipes in location order
    ext : Extension
        Producer metadata
    """

    def __init__(
        self,
        Fk: Iterable[AbstractFlowpipe],
        ext: Optional[Union[Extension, Dict[str, Any]]] = None,
    ):
        Fk = tuple(Fk)
        for F in Fk:
            if not isinstance(F, AbstractFlowpipe):
                raise TypeError(f"Expected a flowpipe-like value, got {type(F).__name__}")
        self.Fk = Fk
        self.ext = ext if isinstance(ext, Extension) else Extension(ext)
        logger.debug(
            f"Mixed hybrid flowpipe with {len(Fk)} locations: "
            f"{[type(F).__name__ for F in Fk]}"
        )

    def append(self, F: AbstractFlowpipe) -> None:
        raise TypeError("MixedHybridFlowpipe has a fixed number of locations")

    @property
    def setrep(self) -> Tuple[Optional[type], ...]:
        """Set representation of each location."""
        return tuple(F.setrep for F in self.Fk)
