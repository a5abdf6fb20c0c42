"""
Exceptions raised by flowpipe queries.

All of them are local and synchronous: nothing in this package retries or
recovers from them. Out-of-range positional access uses the builtin
``IndexError``.
"""

from __future__ import annotations

from typing import Any, Optional


class FlowpipeError(Exception):
    """Base class for flowpipe errors."""


class DomainError(FlowpipeError, ValueError):
    """
    A time point or time interval is not covered by a flowpipe.

    Attributes
    ----------
    value : Any
        The queried time point or interval
    span : Any or None
        The time span of the flowpipe that was queried
    """

    def __init__(self, message: str, value: Any = None, span: Optional[Any] = None):
        super().__init__(message)
        self.value = value
        self.span = span


class PreconditionError(FlowpipeError, ValueError):
    """An operation is undefined for its input (e.g. the dimension of an empty flowpipe)."""


class UnsupportedOperationError(FlowpipeError, TypeError, AttributeError):
    """
    The operation does not apply to a flowpipe as a whole.

    Raised from attribute access (e.g. ``fp.set``), so it is also an
    AttributeError and ``hasattr(fp, "set")`` is False for flowpipes.
    """
