"""
Flowpipe Query Specification Parser.

This module defines the YAML schema for queries evaluated against a flowpipe,
as used by the ``cp_flowpipe query`` command.

Example YAML format:
    query:
      time: 1.0                # time point lookup
      interval: [0.5, 2.5]     # time interval lookup
      shift: 10.0              # evaluate on the flowpipe lazily shifted in time
      vars: [0, 1]             # eager projection (1-based, 0 = time)
      direction: [1.0, 0.0]    # support function of the flowpipe
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import numpy as np
import yaml

from cp_flowpipe.flowpipe import AbstractFlowpipe, shift_of
from cp_flowpipe.geometry import Interval, box_approximation

logger = logging.getLogger(__name__)


@dataclass
class FlowpipeQuery:
    """
    Queries to evaluate against a flowpipe.

    Attributes
    ----------
    time : float or None
        Time point to look up
    interval : list[float] or None
        Time interval [alpha, beta] to look up
    shift : float or None
        Lazy time shift applied before every other query
    vars : list[int] or None
        Variables for the eager projection (1-based, 0 denotes time)
    direction : list[float] or None
        Direction for the support function of the flowpipe
    """

    time: Optional[float] = None
    interval: Optional[List[float]] = None
    shift: Optional[float] = None
    vars: Optional[List[int]] = None
    direction: Optional[List[float]] = None

    def __post_init__(self):
        if self.interval is not None:
            if len(self.interval) != 2:
                raise ValueError(f"Interval must have exactly 2 elements, got {len(self.interval)}")
            if self.interval[0] > self.interval[1]:
                raise ValueError(
                    f"Interval start {self.interval[0]} > end {self.interval[1]}"
                )
        if self.vars is not None:
            if not self.vars:
                raise ValueError("At least one variable is required for a projection")
            if any(int(v) < 0 for v in self.vars):
                raise ValueError(f"Variable indices must be non-negative, got {self.vars}")

    def run(self, fp: AbstractFlowpipe) -> Dict[str, Any]:
        """
        Evaluate the queries.

        Parameters
        ----------
        fp : AbstractFlowpipe
            Flowpipe to query

        Returns
        -------
        dict
            One entry per requested query, plus "length" and "tspan"
        """
        if self.shift is not None:
            fp = shift_of(fp, self.shift)

        result: Dict[str, Any] = {"length": len(fp)}
        if not fp.is_empty():
            result["tspan"] = [fp.tstart, fp.tend]
        spans = fp.time_spans()

        if self.time is not None:
            positions = fp.locate(self.time)
            result["time"] = {
                "t": self.time,
                "positions": list(positions),
                "tspans": [list(spans[i]) for i in positions],
            }

        if self.interval is not None:
            positions = fp.locate(Interval(*self.interval))
            result["interval"] = {
                "interval": list(self.interval),
                "positions": list(positions),
            }

        if self.vars is not None:
            boxes = [box_approximation(X) for X in fp.project(self.vars)]
            result["projection"] = {
                "vars": list(self.vars),
                "low": np.min([B.low for B in boxes], axis=0).tolist(),
                "high": np.max([B.high for B in boxes], axis=0).tolist(),
            }

        if self.direction is not None:
            result["support_function"] = fp.support_function(self.direction)

        logger.debug(f"Query results: {sorted(result)}")
        return result

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "FlowpipeQuery":
        """Load query specification from a YAML file."""
        path = Path(path)
        with open(path) as f:
            data = yaml.safe_load(f)
        return cls.from_dict(data or {})

    @classmethod
    def from_yaml_str(cls, yaml_str: str) -> "FlowpipeQuery":
        """Load from a YAML string."""
        data = yaml.safe_load(yaml_str)
        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FlowpipeQuery":
        """
        Create FlowpipeQuery from a parsed dictionary.

        Parameters
        ----------
        data : dict
            Parsed YAML data (expects a "query" key or direct fields)
        """
        if "query" in data:
            data = data["query"] or {}

        def _opt_float(key):
            return float(data[key]) if data.get(key) is not None else None

        interval = data.get("interval")
        vars = data.get("vars")
        direction = data.get("direction")
        return cls(
            time=_opt_float("time"),
            interval=[float(t) for t in interval] if interval is not None else None,
            shift=_opt_float("shift"),
            vars=[int(v) for v in vars] if vars is not None else None,
            direction=[float(d) for d in direction] if direction is not None else None,
        )
