"""Flowpipe data model: reach-sets, flowpipes, lazy wrappers and hybrid containers."""

from .reachset import ReachSet
from .extension import Extension
from .base import AbstractFlowpipe, SubFlowpipe
from .flowpipe import Flowpipe
from .lazy import (
    ShiftedFlowpipe,
    MappedFlowpipe,
    LinearMap,
    Shift,
    Projection,
    shift_of,
    projection_of,
)
from .hybrid import HybridFlowpipe, MixedHybridFlowpipe

__all__ = [
    "ReachSet",
    "Extension",
    "AbstractFlowpipe",
    "SubFlowpipe",
    "Flowpipe",
    "ShiftedFlowpipe",
    "MappedFlowpipe",
    "LinearMap",
    "Shift",
    "Projection",
    "shift_of",
    "projection_of",
    "HybridFlowpipe",
    "MixedHybridFlowpipe",
]
