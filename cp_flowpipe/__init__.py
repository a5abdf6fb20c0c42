__version__ = "0.1.0"
__author__ = "Micah Condie"
__license__ = "Apache-2.0"


# Lazy-load optional subpackages (plotting pulls in matplotlib).
import importlib
from typing import Any

__all__ = [
    "config",
    "errors",
    "flowpipe",
    "geometry",
    "plotting",
    "Flowpipe",
    "ReachSet",
    "ShiftedFlowpipe",
    "MappedFlowpipe",
    "HybridFlowpipe",
    "MixedHybridFlowpipe",
    "Shift",
    "Projection",
    "shift_of",
    "projection_of",
    "Interval",
    "DomainError",
    "PreconditionError",
    "UnsupportedOperationError",
]

_SUBMODULES = {
    "config": "cp_flowpipe.config",
    "plotting": "cp_flowpipe.plotting",
}


def __getattr__(name: str) -> Any:
    if name in _SUBMODULES:
        module = importlib.import_module(_SUBMODULES[name])
        globals()[name] = module
        return module
    raise AttributeError(f"module {__name__} has no attribute {name!r}")


# Explicitly import key modules
from . import errors
from . import geometry
from . import flowpipe

from .errors import DomainError, PreconditionError, UnsupportedOperationError
from .geometry import Interval
from .flowpipe import (
    Flowpipe,
    ReachSet,
    ShiftedFlowpipe,
    MappedFlowpipe,
    HybridFlowpipe,
    MixedHybridFlowpipe,
    Shift,
    Projection,
    shift_of,
    projection_of,
)
