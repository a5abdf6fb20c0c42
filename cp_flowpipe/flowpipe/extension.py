"""
Producer metadata attached to flowpipes.

Producers record things like the algorithm name or the step size they used.
The store accepts only values that can be written out as JSON-like data, so
that whatever a producer attaches can later be serialized by a solution layer.
"""

from __future__ import annotations

from collections.abc import MutableMapping
from typing import Any, Dict, Iterator, Optional

import numpy as np

_SCALAR_TYPES = (bool, int, float, str)


def _check_value(value: Any, key: str) -> Any:
    if value is None or isinstance(value, _SCALAR_TYPES):
        return value
    if isinstance(value, np.generic):
        return value.item()
    if isinstance(value, np.ndarray):
        if value.dtype.kind not in "biuf":
            raise TypeError(f"Extension '{key}': unsupported array dtype {value.dtype}")
        return value
    if isinstance(value, (list, tuple)):
        return type(value)(_check_value(v, key) for v in value)
    if isinstance(value, dict):
        for k in value:
            if not isinstance(k, str):
                raise TypeError(f"Extension '{key}': nested keys must be str, got {type(k).__name__}")
        return {k: _check_value(v, key) for k, v in value.items()}
    raise TypeError(
        f"Extension '{key}': values of type {type(value).__name__} are not supported; "
        "use None, bool, int, float, str, numpy arrays, or lists/dicts of those"
    )


def _plain(value: Any) -> Any:
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    return value


class Extension(MutableMapping):
    """
    Key-value store for producer metadata.

    Keys are strings; values are restricted to None, bool, int, float, str,
    numeric numpy arrays, and lists/tuples/str-keyed dicts of those. Numpy
    scalars are stored as Python scalars.

    Examples
    --------
    >>> ext = Extension(algorithm="GLGM06", delta=0.01)
    >>> ext.get("max_order", 5)
    5
    """

    def __init__(self, data: Optional[Dict[str, Any]] = None, **kwargs):
        self._data: Dict[str, Any] = {}
        if data is not None:
            self.update(data)
        self.update(kwargs)

    def __setitem__(self, key: str, value: Any) -> None:
        if not isinstance(key, str):
            raise TypeError(f"Extension keys must be str, got {type(key).__name__}")
        self._data[key] = _check_value(value, key)

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __delitem__(self, key: str) -> None:
        del self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def to_dict(self) -> Dict[str, Any]:
        """Plain JSON-compatible copy of the store."""
        return {k: _plain(v) for k, v in self._data.items()}

    def __repr__(self) -> str:
        return f"Extension({self._data!r})"
