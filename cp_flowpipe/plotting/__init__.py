"""Plotting helpers for flowpipes (matplotlib)."""

from .flowpipes import plot_flowpipe

__all__ = ["plot_flowpipe"]
