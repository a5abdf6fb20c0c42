"""
Pytest configuration and shared fixtures for cp_flowpipe tests.
"""

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from cp_flowpipe.flowpipe import Flowpipe, ReachSet
from cp_flowpipe.geometry import Hyperrectangle, Zonotope


@pytest.fixture
def boxes():
    """Three boxes: box k spans x1 in [k, k+1] and x2 in [0, k+1]."""
    return [Hyperrectangle.from_bounds([k, 0.0], [k + 1, k + 1]) for k in range(3)]


@pytest.fixture
def flowpipe3(boxes):
    """Flowpipe with time spans [0, 1], [1, 2], [2, 3]."""
    return Flowpipe(
        [ReachSet(B, (k, k + 1)) for k, B in enumerate(boxes)],
        ext={"algorithm": "test", "delta": 1.0},
    )


@pytest.fixture
def long_flowpipe():
    """Flowpipe of 100 reach-sets with step 0.1 drifting along x1."""
    dt = 0.1
    Xk = [
        ReachSet(Hyperrectangle([k * dt, 0.0], [0.05, 0.05]), (k * dt, (k + 1) * dt))
        for k in range(100)
    ]
    return Flowpipe(Xk)


@pytest.fixture
def zonotope_flowpipe():
    """Two-step flowpipe of zonotopes with time spans [0, 0.5], [0.5, 1]."""
    G = np.array([[1.0, 0.5], [0.0, 0.5]])
    return Flowpipe([
        ReachSet(Zonotope([0.0, 0.0], G), (0.0, 0.5)),
        ReachSet(Zonotope([1.0, 1.0], G), (0.5, 1.0)),
    ])


@pytest.fixture
def box_flowpipe():
    """Two-step flowpipe of unit squares with time spans [0, 1], [1, 2]."""
    return Flowpipe([
        ReachSet(Hyperrectangle.from_bounds([0, 0], [1, 1]), (0.0, 1.0)),
        ReachSet(Hyperrectangle.from_bounds([1, 1], [2, 2]), (1.0, 2.0)),
    ])


@pytest.fixture
def flowpipe_yaml():
    """YAML description of the flowpipe3 fixture plus a query section."""
    return """
flowpipe:
  ext:
    algorithm: test
  sets:
    - tspan: [0, 1]
      low: [0, 0]
      high: [1, 1]
    - tspan: [1, 2]
      low: [1, 0]
      high: [2, 2]
    - tspan: [2, 3]
      low: [2, 0]
      high: [3, 3]
query:
  time: 1.0
  interval: [0.5, 2.5]
"""


@pytest.fixture
def hybrid_yaml():
    """YAML description of a two-location flowpipe with different set types."""
    return """
flowpipe:
  locations:
    - sets:
        - tspan: [0, 1]
          type: zonotope
          center: [0, 0]
          generators: [[1, 0], [0, 1]]
    - sets:
        - tspan: [1, 2]
          low: [1, 1]
          high: [2, 2]
          tag: 1
"""
