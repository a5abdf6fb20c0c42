"""
Set operations used by the flowpipe layer: linear image, projection,
Cartesian product with a time interval, and 2D vertex sampling for plotting.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
from scipy.linalg import block_diag
from scipy.spatial import ConvexHull, QhullError

from .sets import (
    ConvexSet,
    CartesianProduct,
    Hyperrectangle,
    Interval,
    Zonotope,
)


def linear_map(M, X: ConvexSet) -> ConvexSet:
    """Linear image ``M X``."""
    return X.linear_map(M)


def project(X: ConvexSet, vars: Sequence[int]) -> ConvexSet:
    """Projection of ``X`` onto the 1-based variables ``vars``."""
    return X.project(vars)


def _as_box(X):
    if isinstance(X, Interval):
        return Hyperrectangle.from_bounds([X.lo], [X.hi])
    return X


def _as_zonotope(X):
    X = _as_box(X)
    if isinstance(X, Hyperrectangle):
        return Zonotope(X.center, np.diag(X.radius))
    return X


def cartesian_product(X: ConvexSet, Y: ConvexSet) -> ConvexSet:
    """
    Cartesian product ``X x Y``.

    Boxes give a box and zonotopes (and boxes) give a zonotope; any other
    combination is returned as a lazy CartesianProduct.
    """
    bX, bY = _as_box(X), _as_box(Y)
    if isinstance(bX, Hyperrectangle) and isinstance(bY, Hyperrectangle):
        return Hyperrectangle(
            np.concatenate([bX.center, bY.center]),
            np.concatenate([bX.radius, bY.radius]),
        )

    zX, zY = _as_zonotope(X), _as_zonotope(Y)
    if isinstance(zX, Zonotope) and isinstance(zY, Zonotope):
        return Zonotope(
            np.concatenate([zX.center, zY.center]),
            block_diag(zX.generators, zY.generators),
        )

    return CartesianProduct(X, Y)


def vertices_2d(X: ConvexSet, n_directions: int = 32) -> np.ndarray:
    """
    Polygon approximating a two-dimensional set from its support vectors.

    Parameters
    ----------
    X : ConvexSet
        Set of dimension 2
    n_directions : int
        Number of evenly spaced directions to sample

    Returns
    -------
    np.ndarray
        (k, 2) array of vertices in counterclockwise order
    """
    if X.dim != 2:
        raise ValueError(f"Expected a two-dimensional set, got dimension {X.dim}")

    angles = np.linspace(0, 2 * np.pi, n_directions, endpoint=False)
    directions = np.stack([np.cos(angles), np.sin(angles)], axis=1)
    points = np.unique(np.array([X.support_vector(d) for d in directions]), axis=0)

    if points.shape[0] < 3:
        return points
    try:
        hull = ConvexHull(points)
    except QhullError:
        # collinear points, e.g. a flat set
        return points
    return points[hull.vertices]


def box_approximation(X: ConvexSet) -> Hyperrectangle:
    """Tightest axis-aligned box containing ``X``, from 2n support function evaluations."""
    E = np.eye(X.dim)
    high = np.array([X.support_function(e) for e in E])
    low = np.array([-X.support_function(-e) for e in E])
    return Hyperrectangle.from_bounds(low, high)
