"""Tests for ladder matching into fixed-size groups."""

import math

import pytest

from src.settlement_engine.group_matching import GroupPartitioner
from src.settlement_engine.models import ConfigurationError, Submission

LABELS = ["A", "B", "C", "D", "E", "F"]


# ── Helpers ──────────────────────────────────────────────────────────

def _ranked(n):
    """n submissions already in ranking order."""
    return [Submission(f"p{i}", float(n - i), demand=float(i)) for i in range(n)]


# ── Partitioning ─────────────────────────────────────────────────────

class TestPartition:
    def test_example_groups(self):
        ranked = [
            Submission("C", 10), Submission("A", 6),
            Submission("B", 4), Submission("D", 2),
        ]
        result = GroupPartitioner(2, LABELS).partition(ranked)
        assert result.ranking == ["C", "A", "B", "D"]
        assert [g.label for g in result.groups] == ["A", "B"]
        assert result.groups[0].players() == ["C", "A"]
        assert result.groups[1].players() == ["B", "D"]

    def test_empty(self):
        result = GroupPartitioner(3, LABELS).partition([])
        assert result.ranking == []
        assert result.groups == []
        assert result.bars == []

    @pytest.mark.parametrize("n,k", [(1, 4), (4, 4), (7, 3), (12, 4), (13, 4), (5, 1)])
    def test_sizes(self, n, k):
        result = GroupPartitioner(k, [str(i) for i in range(20)]).partition(_ranked(n))
        assert len(result.groups) == math.ceil(n / k)
        for group in result.groups[:-1]:
            assert group.size == k
        expected_last = n % k or k
        assert result.groups[-1].size == expected_last

    def test_concatenation_reproduces_ranking(self):
        result = GroupPartitioner(4, LABELS).partition(_ranked(10))
        flat = [p for g in result.groups for p in g.players()]
        assert flat == result.ranking == [f"p{i}" for i in range(10)]

    def test_labels_in_ranking_order(self):
        result = GroupPartitioner(2, LABELS).partition(_ranked(6))
        assert [g.label for g in result.groups] == ["A", "B", "C"]

    def test_entry_assignments(self):
        result = GroupPartitioner(3, LABELS).partition(_ranked(7))
        entries = result.entries()
        assert [e.rank for e in entries] == list(range(7))
        assert [e.group for e in entries] == ["A"] * 3 + ["B"] * 3 + ["C"]
        assert [e.position_in_group for e in entries] == [0, 1, 2, 0, 1, 2, 0]

    def test_every_entry_in_exactly_one_group(self):
        result = GroupPartitioner(3, LABELS).partition(_ranked(11))
        players = [p for g in result.groups for p in g.players()]
        assert len(players) == len(set(players)) == 11


# ── Bars ─────────────────────────────────────────────────────────────

class TestBars:
    def test_bars_mirror_members(self):
        result = GroupPartitioner(2, LABELS).partition(_ranked(3))
        assert result.bars == [[[3.0, 0.0], [2.0, 1.0]], [[1.0, 2.0]]]

    def test_missing_demand_is_none(self):
        ranked = [Submission("x", 5), Submission("y", 1)]
        result = GroupPartitioner(2, LABELS).partition(ranked)
        assert result.bars == [[[5, None], [1, None]]]


# ── Noisy values ─────────────────────────────────────────────────────

class TestNoisyValues:
    def test_default_noisy_value_is_contribution(self):
        result = GroupPartitioner(2, LABELS).partition(_ranked(2))
        assert [e.noisy_contribution for e in result.entries()] == [2.0, 1.0]

    def test_noisy_values_recorded(self):
        result = GroupPartitioner(2, LABELS).partition(
            _ranked(2), noisy_values={"p0": 9.5}
        )
        assert [e.noisy_contribution for e in result.entries()] == [9.5, 1.0]


# ── Configuration errors ─────────────────────────────────────────────

class TestConfigurationErrors:
    def test_labels_exhausted(self):
        with pytest.raises(ConfigurationError, match="group labels"):
            GroupPartitioner(2, ["A", "B"]).partition(_ranked(5))

    def test_labels_exactly_enough(self):
        result = GroupPartitioner(2, ["A", "B"]).partition(_ranked(4))
        assert len(result.groups) == 2

    def test_repeated_labels(self):
        with pytest.raises(ConfigurationError, match="repeated: B"):
            GroupPartitioner(2, ["A", "B", "B"])

    def test_empty_labels(self):
        with pytest.raises(ConfigurationError, match="group_labels"):
            GroupPartitioner(2, [])

    @pytest.mark.parametrize("size", [0, -1, True, 2.0])
    def test_invalid_size(self, size):
        with pytest.raises(ConfigurationError):
            GroupPartitioner(size, LABELS)
