"""Shared fixtures for the round settlement test suite."""

import random

import pytest

from src.settlement_engine.models import SettlementConfig, Submission


def make_submissions(*specs):
    """Build submissions from ``(player, contribution[, demand])`` tuples."""
    return [Submission(*spec) for spec in specs]


@pytest.fixture
def example_submissions():
    """Four players, no ties, no duplicates."""
    return make_submissions(("A", 6), ("B", 4), ("C", 10), ("D", 2))


@pytest.fixture
def example_config():
    return SettlementConfig(
        subgroup_size=2,
        group_labels=["A", "B", "C", "D"],
        initial_coins=10,
        group_account_divider=2,
    )


@pytest.fixture
def rng():
    return random.Random(1234)
