"""
Convex set representations used as reach-set contents.

Every set is described by its support function: for a direction d,

    rho(d, X)   = max { d . x : x in X }
    sigma(d, X) = argmax { d . x : x in X }

which is all a flowpipe needs in order to evaluate unions of sets without
ever building the union. The concrete classes below are thin numpy containers;
linear images are exact where the representation is closed under them and
lazy (LinearMapSet) otherwise.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

import numpy as np

from cp_flowpipe.errors import PreconditionError


def projection_matrix(vars: Sequence[int], n: int) -> np.ndarray:
    """
    Matrix selecting the given 1-based variables out of an n-dimensional vector.

    Parameters
    ----------
    vars : sequence of int
        Variable indices in ``1..n`` (repetitions allowed)
    n : int
        Ambient dimension

    Returns
    -------
    np.ndarray
        Array of shape (len(vars), n) with a single one per row

    Raises
    ------
    PreconditionError
        If a variable index lies outside ``1..n``
    """
    vars = [int(v) for v in vars]
    bad = [v for v in vars if not 1 <= v <= n]
    if bad:
        raise PreconditionError(
            f"variable indices {bad} are out of range for dimension {n} "
            f"(valid indices are 1..{n})"
        )
    M = np.zeros((len(vars), n))
    M[np.arange(len(vars)), np.asarray(vars, dtype=int) - 1] = 1.0
    return M


def _as_direction(d, n: int) -> np.ndarray:
    d = np.asarray(d, dtype=float).reshape(-1)
    if d.shape[0] != n:
        raise ValueError(f"Direction has length {d.shape[0]}, expected {n}")
    return d


class ConvexSet(ABC):
    """Abstract convex set defined through its support function."""

    # make numpy defer ``M @ X`` to __rmatmul__
    __array_ufunc__ = None

    @property
    @abstractmethod
    def dim(self) -> int:
        """Ambient dimension of the set."""

    @abstractmethod
    def support_vector(self, d) -> np.ndarray:
        """Return a point of the set that is extremal in direction ``d``."""

    def support_function(self, d) -> float:
        """Return the maximum of ``d . x`` over the set."""
        d = _as_direction(d, self.dim)
        return float(d @ self.support_vector(d))

    def linear_map(self, M) -> "ConvexSet":
        """Image of the set under the matrix ``M`` (lazy by default)."""
        return LinearMapSet(M, self)

    def project(self, vars: Sequence[int]) -> "ConvexSet":
        """
        Projection onto the given variables.

        Variables are 1-based, e.g. ``(1, 2)`` keeps the first two coordinates.
        """
        return self.linear_map(projection_matrix(vars, self.dim))

    def __rmatmul__(self, M) -> "ConvexSet":
        return self.linear_map(M)


class Interval(ConvexSet):
    """
    Closed interval [lo, hi].

    Used both as a one-dimensional set and as the time span of a reach-set.
    """

    __slots__ = ("lo", "hi")

    def __init__(self, lo, hi):
        lo = float(lo)
        hi = float(hi)
        if lo > hi:
            raise ValueError(f"Interval lower bound {lo} > upper bound {hi}")
        self.lo = lo
        self.hi = hi

    @property
    def dim(self) -> int:
        return 1

    @property
    def length(self) -> float:
        return self.hi - self.lo

    def support_vector(self, d) -> np.ndarray:
        d = _as_direction(d, 1)
        return np.array([self.hi if d[0] >= 0 else self.lo])

    def linear_map(self, M) -> ConvexSet:
        return Hyperrectangle.from_bounds([self.lo], [self.hi]).linear_map(M)

    def shift(self, t0) -> "Interval":
        return Interval(self.lo + t0, self.hi + t0)

    def __add__(self, t0) -> "Interval":
        return self.shift(t0)

    def __contains__(self, t) -> bool:
        return self.lo <= t <= self.hi

    def __iter__(self):
        yield self.lo
        yield self.hi

    def __eq__(self, other) -> bool:
        if not isinstance(other, Interval):
            return NotImplemented
        return self.lo == other.lo and self.hi == other.hi

    def __hash__(self):
        return hash((self.lo, self.hi))

    def __repr__(self) -> str:
        return f"Interval({self.lo}, {self.hi})"


TimeInterval = Interval


class Hyperrectangle(ConvexSet):
    """Axis-aligned box given by its center and (non-negative) radius."""

    def __init__(self, center, radius):
        self.center = np.asarray(center, dtype=float).reshape(-1)
        self.radius = np.asarray(radius, dtype=float).reshape(-1)
        if self.center.shape != self.radius.shape:
            raise ValueError(
                f"Center shape {self.center.shape} does not match radius shape {self.radius.shape}"
            )
        if np.any(self.radius < 0):
            raise ValueError("Hyperrectangle radius must be non-negative")

    @classmethod
    def from_bounds(cls, low, high) -> "Hyperrectangle":
        low = np.asarray(low, dtype=float).reshape(-1)
        high = np.asarray(high, dtype=float).reshape(-1)
        if np.any(low > high):
            raise ValueError(f"Lower bounds {low} exceed upper bounds {high}")
        return cls((low + high) / 2, (high - low) / 2)

    @property
    def dim(self) -> int:
        return self.center.shape[0]

    @property
    def low(self) -> np.ndarray:
        return self.center - self.radius

    @property
    def high(self) -> np.ndarray:
        return self.center + self.radius

    def support_vector(self, d) -> np.ndarray:
        d = _as_direction(d, self.dim)
        return self.center + np.where(d >= 0, self.radius, -self.radius)

    def linear_map(self, M) -> "Zonotope":
        return Zonotope(self.center, np.diag(self.radius)).linear_map(M)

    def project(self, vars: Sequence[int]) -> "Hyperrectangle":
        M = projection_matrix(vars, self.dim)
        return Hyperrectangle(M @ self.center, M @ self.radius)

    def __repr__(self) -> str:
        return f"Hyperrectangle(low={self.low.tolist()}, high={self.high.tolist()})"


class Zonotope(ConvexSet):
    """
    Zonotope {c + G xi : ||xi||_inf <= 1}.

    Generators are the columns of ``generators`` (shape n x p).
    """

    def __init__(self, center, generators):
        self.center = np.asarray(center, dtype=float).reshape(-1)
        G = np.asarray(generators, dtype=float)
        if G.ndim == 1:
            G = G.reshape(-1, 1)
        if G.shape[0] != self.center.shape[0]:
            raise ValueError(
                f"Generator matrix has {G.shape[0]} rows, expected {self.center.shape[0]}"
            )
        self.generators = G

    @property
    def dim(self) -> int:
        return self.center.shape[0]

    @property
    def ngens(self) -> int:
        return self.generators.shape[1]

    def support_vector(self, d) -> np.ndarray:
        d = _as_direction(d, self.dim)
        return self.center + self.generators @ np.where(d @ self.generators >= 0, 1.0, -1.0)

    def support_function(self, d) -> float:
        d = _as_direction(d, self.dim)
        return float(d @ self.center + np.sum(np.abs(d @ self.generators)))

    def linear_map(self, M) -> "Zonotope":
        M = np.atleast_2d(np.asarray(M, dtype=float))
        if M.shape[1] != self.dim:
            raise ValueError(f"Matrix with {M.shape[1]} columns cannot map a set of dimension {self.dim}")
        return Zonotope(M @ self.center, M @ self.generators)

    def __repr__(self) -> str:
        return f"Zonotope(dim={self.dim}, ngens={self.ngens})"


class CartesianProduct(ConvexSet):
    """Lazy Cartesian product X x Y."""

    def __init__(self, X: ConvexSet, Y: ConvexSet):
        self.X = X
        self.Y = Y

    @property
    def dim(self) -> int:
        return self.X.dim + self.Y.dim

    def support_vector(self, d) -> np.ndarray:
        d = _as_direction(d, self.dim)
        n1 = self.X.dim
        return np.concatenate([self.X.support_vector(d[:n1]), self.Y.support_vector(d[n1:])])

    def support_function(self, d) -> float:
        d = _as_direction(d, self.dim)
        n1 = self.X.dim
        return self.X.support_function(d[:n1]) + self.Y.support_function(d[n1:])

    def __repr__(self) -> str:
        return f"CartesianProduct({self.X!r}, {self.Y!r})"


class LinearMapSet(ConvexSet):
    """Lazy linear image M X, evaluated through rho(d, MX) = rho(M^T d, X)."""

    def __init__(self, M, X: ConvexSet):
        M = np.atleast_2d(np.asarray(M, dtype=float))
        if M.shape[1] != X.dim:
            raise ValueError(f"Matrix with {M.shape[1]} columns cannot map a set of dimension {X.dim}")
        self.M = M
        self.X = X

    @property
    def dim(self) -> int:
        return self.M.shape[0]

    def support_vector(self, d) -> np.ndarray:
        d = _as_direction(d, self.dim)
        return self.M @ self.X.support_vector(self.M.T @ d)

    def support_function(self, d) -> float:
        d = _as_direction(d, self.dim)
        return self.X.support_function(self.M.T @ d)

    def linear_map(self, M) -> "LinearMapSet":
        M = np.atleast_2d(np.asarray(M, dtype=float))
        return LinearMapSet(M @ self.M, self.X)

    def __repr__(self) -> str:
        return f"LinearMapSet({self.M.shape[0]}x{self.M.shape[1]}, {self.X!r})"
