"""
CP_Flowpipe Configuration Module - YAML-based flowpipe descriptions and queries.

Example usage:
    from cp_flowpipe.config import FlowpipeSpec, FlowpipeQuery

    # Build a flowpipe from a description
    fp = FlowpipeSpec.from_yaml("flowpipe.yaml").build()

    # Evaluate queries against it
    result = FlowpipeQuery.from_yaml("query.yaml").run(fp)
"""

from cp_flowpipe.config.flowpipe_spec import FlowpipeSpec, ReachSetSpec
from cp_flowpipe.config.query import FlowpipeQuery

__all__ = [
    "FlowpipeSpec",
    "ReachSetSpec",
    "FlowpipeQuery",
]
