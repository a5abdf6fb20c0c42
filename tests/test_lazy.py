"""
Unit tests for the lazy flowpipe wrappers (time shift and linear map).
"""

import numpy as np
import pytest

from cp_flowpipe.errors import DomainError, PreconditionError
from cp_flowpipe.flowpipe import (
    Flowpipe,
    LinearMap,
    MappedFlowpipe,
    Projection,
    ReachSet,
    Shift,
    ShiftedFlowpipe,
    projection_of,
    shift_of,
)
from cp_flowpipe.geometry import Interval


class TestShiftedFlowpipe:
    """Tests for ShiftedFlowpipe."""

    def test_time_span_is_shifted(self, flowpipe3):
        """Test the observed time span is offset by t0."""
        S = shift_of(flowpipe3, 10)

        assert isinstance(S, ShiftedFlowpipe)
        assert S.tspan == Interval(10, 13)
        assert S.tstart == 10
        assert S.tend == 13

    def test_alias(self, flowpipe3):
        """Test the `Shift` alias builds a ShiftedFlowpipe."""
        assert Shift is ShiftedFlowpipe
        assert Shift(flowpipe3, 1.0).time_shift == 1.0

    def test_elements_are_not_restamped(self, flowpipe3):
        """Test reach-sets keep their stored span; only the wrapper is shifted."""
        S = shift_of(flowpipe3, 10)

        assert S[0] is flowpipe3[0]
        assert S[0].tspan == Interval(0, 1)
        assert S.time_spans()[0] == Interval(10, 11)
        assert S.array() is flowpipe3.array()

    def test_shift_law(self, flowpipe3):
        """Test shifted queries identify the same reach-sets as unshifted ones."""
        S = shift_of(flowpipe3, 10)

        for t in [0.0, 0.5, 1.0, 2.0, 2.7, 3.0]:
            assert S.locate(t + 10) == flowpipe3.locate(t)

        assert S(10.5) is flowpipe3[0]
        boundary = S(11.0)
        assert [X for X in boundary] == [flowpipe3[0], flowpipe3[1]]
        assert boundary.tspan == Interval(10, 12)

    def test_shift_law_fractional(self, long_flowpipe):
        """Test the shift law with a non-integer offset."""
        t0 = 0.25
        S = shift_of(long_flowpipe, t0)

        for t in [0.0, 0.1, 0.35, 5.0, 9.95]:
            assert S.locate(t + t0) == long_flowpipe.locate(t)

    def test_interval_query(self, flowpipe3):
        """Test interval queries are answered in shifted time."""
        S = shift_of(flowpipe3, 10)
        view = S(Interval(10.5, 12.5))

        assert len(view) == 3
        assert view.tspan == Interval(10, 13)

    def test_unshifted_time_is_outside(self, flowpipe3):
        """Test times valid only before the shift raise DomainError."""
        with pytest.raises(DomainError):
            shift_of(flowpipe3, 10)(0.5)

    def test_slicing(self, flowpipe3):
        """Test slices of a shifted flowpipe stay shifted."""
        view = shift_of(flowpipe3, 10)[1:]

        assert isinstance(view, ShiftedFlowpipe)
        assert view.tspan == Interval(11, 13)
        assert view[0] is flowpipe3[1]

    def test_nested_shift(self, flowpipe3):
        """Test shifts compose."""
        S = shift_of(shift_of(flowpipe3, 1), 2)

        assert S.tspan == Interval(3, 6)
        assert S.flowpipe.flowpipe is flowpipe3
        assert S(4.0) is not None

    def test_project_with_time_uses_shift(self, flowpipe3):
        """Test the eager projection with time uses the shifted spans."""
        X = shift_of(flowpipe3, 10).project((0, 1))[0]

        np.testing.assert_array_almost_equal(X.low, [10.0, 0.0])
        np.testing.assert_array_almost_equal(X.high, [11.0, 1.0])

    def test_delegated_properties(self, flowpipe3):
        """Test dimension, set representation and support function delegate."""
        S = shift_of(flowpipe3, 10)

        assert S.dim == 2
        assert S.setrep is flowpipe3.setrep
        assert S.support_function([1.0, 0.0]) == flowpipe3.support_function([1.0, 0.0])

    def test_empty(self):
        """Test a shifted empty flowpipe has no time span."""
        with pytest.raises(PreconditionError):
            shift_of(Flowpipe(), 1.0).tspan

    def test_rejects_non_flowpipe(self, boxes):
        """Test only flowpipe-like values can be wrapped."""
        with pytest.raises(TypeError):
            shift_of(boxes, 1.0)

    def test_sees_appended_reach_sets(self, boxes):
        """Test the wrapper borrows the flowpipe and observes later appends."""
        fp = Flowpipe([ReachSet(boxes[0], (0, 1))])
        S = shift_of(fp, 5)
        assert S.tend == 6

        fp.append(ReachSet(boxes[1], (1, 2)))
        assert S.tend == 7
        assert len(S) == 2


class TestMappedFlowpipe:
    """Tests for MappedFlowpipe and the lazy projection."""

    def test_projection_shape(self, flowpipe3):
        """Test the lazy projection has one reach-set per element of the given dimension."""
        P = projection_of(flowpipe3, [2])

        assert isinstance(P, MappedFlowpipe)
        assert len(P) == 3
        assert P.dim == 1
        assert all(X.dim == 1 for X in P)

    def test_alias(self):
        """Test the `Projection` alias."""
        assert Projection is projection_of

    def test_support_function(self, flowpipe3):
        """Test the support function is evaluated through the transpose."""
        P = projection_of(flowpipe3, [2])

        assert P.support_function([1.0]) == pytest.approx(3.0)
        assert P.support_function([-1.0]) == pytest.approx(0.0)
        np.testing.assert_array_almost_equal(P.support_vector([1.0]), [3.0])

    def test_mapped_reach_sets(self, flowpipe3):
        """Test mapped reach-sets keep time span and tag and are built on access."""
        P = projection_of(flowpipe3, [1])

        X = P[1]
        assert X.tspan is flowpipe3[1].tspan
        assert X.support_function([1.0]) == pytest.approx(2.0)
        assert P[1] is not P[1]
        assert flowpipe3[1].dim == 2

    def test_queries(self, flowpipe3):
        """Test time queries on a mapped flowpipe return mapped reach-sets."""
        P = projection_of(flowpipe3, [1, 2])

        assert P(0.5).dim == 2
        boundary = P(1.0)
        assert isinstance(boundary, MappedFlowpipe)
        assert len(boundary) == 2
        assert len(P(Interval(0.5, 2.5))) == 3

    def test_invalid_variables(self, flowpipe3):
        """Test out-of-range variables and time are rejected."""
        with pytest.raises(PreconditionError):
            projection_of(flowpipe3, [3])
        with pytest.raises(PreconditionError, match="time"):
            projection_of(flowpipe3, [0, 1])

    def test_projection_of_empty(self):
        """Test projecting an empty flowpipe is a precondition failure."""
        with pytest.raises(PreconditionError):
            projection_of(Flowpipe(), [1])

    def test_general_function(self, flowpipe3):
        """Test an arbitrary set function is applied on demand."""
        M = MappedFlowpipe(flowpipe3, lambda X: X.linear_map(2 * np.eye(2)))

        assert M.dim == 2
        assert M.support_function([1.0, 0.0]) == pytest.approx(6.0)

    def test_linear_map_of_zonotopes(self, zonotope_flowpipe):
        """Test a rotation applied lazily to zonotopes."""
        R = np.array([[0.0, -1.0], [1.0, 0.0]])
        M = MappedFlowpipe(zonotope_flowpipe, LinearMap(R))

        # rho(d, R Z) = rho(R^T d, Z)
        expected = zonotope_flowpipe.support_function(R.T @ np.array([0.0, 1.0]))
        assert M.support_function([0.0, 1.0]) == pytest.approx(expected)
        assert M[1].support_function([0.0, 1.0]) == pytest.approx(expected)

    def test_slicing(self, flowpipe3):
        """Test slices of a mapped flowpipe stay mapped."""
        view = projection_of(flowpipe3, [1])[1:]

        assert isinstance(view, MappedFlowpipe)
        assert len(view) == 2
        assert view.tspan == Interval(1, 3)

    def test_composition_with_shift(self, flowpipe3):
        """Test shift and projection compose in either order."""
        a = shift_of(projection_of(flowpipe3, [1]), 5)
        b = projection_of(shift_of(flowpipe3, 5), [1])

        assert a.tspan == Interval(5, 8)
        assert b.tspan == Interval(5, 8)
        assert a.locate(6.0) == b.locate(6.0) == range(0, 2)
        assert a.support_function([1.0]) == b.support_function([1.0])

    def test_multiple_views_share_storage(self, flowpipe3):
        """Test several projections borrow the same underlying flowpipe."""
        views = [projection_of(flowpipe3, v) for v in ([1], [2], [1, 2])]

        assert all(V.flowpipe is flowpipe3 for V in views)
