from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Sequence

import numpy as np

from cp_flowpipe.geometry import ConvexSet, Interval


@dataclass(frozen=True)
class ReachSet:
    """
    A set paired with the time span during which it bounds the reachable states.

    Attributes
    ----------
    set : ConvexSet
        Geometric set
    tspan : Interval
        Closed time interval [t0, t1]; a (t0, t1) pair is converted on construction
    tag : Any
        Optional producer tag, e.g. the discrete location the set belongs to
    """

    set: ConvexSet
    tspan: Interval
    tag: Any = None

    def __post_init__(self):
        if not isinstance(self.tspan, Interval):
            t0, t1 = self.tspan
            object.__setattr__(self, "tspan", Interval(t0, t1))

    @property
    def tstart(self) -> float:
        return self.tspan.lo

    @property
    def tend(self) -> float:
        return self.tspan.hi

    @property
    def dim(self) -> int:
        return self.set.dim

    def support_function(self, d) -> float:
        return self.set.support_function(d)

    def support_vector(self, d) -> np.ndarray:
        return self.set.support_vector(d)

    def shift(self, t0) -> "ReachSet":
        """Reach-set with the same set and tag, and the time span translated by ``t0``."""
        return replace(self, tspan=self.tspan.shift(t0))

    def project(self, vars: Sequence[int]) -> "ReachSet":
        """Reach-set whose set is projected onto the 1-based variables ``vars``."""
        return replace(self, set=self.set.project(vars))
