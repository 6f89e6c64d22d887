"""Unit tests for weight redistribution and weight status."""

from __future__ import annotations

import pytest

from src.comparison.models import Criterion, ScoringMethod
from src.comparison.weights import redistribute_weights, total_visible_weight, weight_status


def _make_criteria(count: int, hidden: set[int] = frozenset()) -> list[Criterion]:
    return [
        Criterion(id=f"c{n}", name=f"C{n}", weight=7, order=n, is_visible=n not in hidden)
        for n in range(count)
    ]


class TestRedistribute:
    @pytest.mark.parametrize("count", [1, 2, 3, 6, 7, 11, 100])
    def test_sums_to_total_with_spread_of_one(self, count):
        weights = [c.weight for c in redistribute_weights(_make_criteria(count))]
        assert sum(weights) == 100
        assert max(weights) - min(weights) <= 1

    def test_remainder_goes_to_first_in_order(self):
        criteria = _make_criteria(3)
        criteria.reverse()
        result = redistribute_weights(criteria)
        assert [c.id for c in result] == ["c2", "c1", "c0"]
        assert {c.id: c.weight for c in result} == {"c0": 34, "c1": 33, "c2": 33}

    def test_hidden_criteria_zeroed(self):
        result = redistribute_weights(_make_criteria(4, hidden={1}))
        assert [c.weight for c in result] == [34, 0, 33, 33]

    def test_all_hidden(self):
        result = redistribute_weights(_make_criteria(2, hidden={0, 1}))
        assert [c.weight for c in result] == [0, 0]

    def test_empty(self):
        assert redistribute_weights([]) == []

    def test_inputs_not_mutated(self):
        criteria = _make_criteria(3)
        redistribute_weights(criteria)
        assert [c.weight for c in criteria] == [7, 7, 7]


class TestWeightStatus:
    def test_visible_total(self):
        criteria = _make_criteria(3, hidden={2})
        assert total_visible_weight(criteria) == 14

    def test_invalid_under_weighted_average(self):
        status = weight_status(_make_criteria(3), ScoringMethod.WEIGHTED_AVERAGE)
        assert status.total == 21
        assert status.applies
        assert not status.is_valid

    def test_valid_after_redistribution(self):
        criteria = redistribute_weights(_make_criteria(3))
        assert weight_status(criteria, ScoringMethod.WEIGHTED_AVERAGE).is_valid

    def test_other_methods_always_valid(self):
        status = weight_status(_make_criteria(3), ScoringMethod.SIMPLE_AVERAGE)
        assert not status.applies
        assert status.is_valid
