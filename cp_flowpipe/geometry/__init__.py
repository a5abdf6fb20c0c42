"""
Geometric set representations for reach-sets.

This module contains the convex set types stored in reach-sets and the
operations the flowpipe layer consumes (support functions, linear images,
projections and Cartesian products).
"""

from .sets import (
    ConvexSet,
    Interval,
    TimeInterval,
    Hyperrectangle,
    Zonotope,
    CartesianProduct,
    LinearMapSet,
    projection_matrix,
)
from .operations import (
    linear_map,
    project,
    cartesian_product,
    box_approximation,
    vertices_2d,
)

__all__ = [
    "ConvexSet",
    "Interval",
    "TimeInterval",
    "Hyperrectangle",
    "Zonotope",
    "CartesianProduct",
    "LinearMapSet",
    "projection_matrix",
    "linear_map",
    "project",
    "cartesian_product",
    "box_approximation",
    "vertices_2d",
]
