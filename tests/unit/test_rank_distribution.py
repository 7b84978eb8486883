"""
Unit tests for the per-round rank distribution table.
"""

import pytest

from tabulation.models import WeightedBallot
from tabulation.rank_distribution import compute_rank_distribution


@pytest.mark.unit
class TestRankDistribution:
    def test_full_ballots(self):
        ballots = [["A", "B", "C"], ["B", "A", "C"], ["A", "C", "B"]]
        distribution = compute_rank_distribution(["A", "B", "C"], ballots)
        assert distribution == {
            "A": [2, 1, 0],
            "B": [1, 1, 1],
            "C": [0, 1, 2],
        }

    def test_inactive_candidates_are_skipped_before_counting(self):
        # With B out, C moves up to second place on the first ballot
        ballots = [["A", "B", "C"], ["B", "C", "A"]]
        distribution = compute_rank_distribution(["A", "C"], ballots)
        assert distribution == {"A": [1, 1], "C": [1, 1]}

    def test_partial_ballots_leave_later_positions_empty(self):
        distribution = compute_rank_distribution(["A", "B", "C"], [["A"], ["B", "A"]])
        assert distribution == {"A": [1, 1, 0], "B": [1, 0, 0], "C": [0, 0, 0]}

    def test_weighted_ballots_count_once(self):
        ballots = [WeightedBallot(("A", "B"), 0.25), WeightedBallot(("B",), 1.0)]
        distribution = compute_rank_distribution(["A", "B"], ballots)
        assert distribution == {"A": [1, 0], "B": [1, 1]}

    def test_row_length_matches_active_count(self):
        active = ["A", "B", "C", "D"]
        distribution = compute_rank_distribution(active, [["D", "C"]])
        assert list(distribution) == active
        assert all(len(row) == len(active) for row in distribution.values())
        assert all(isinstance(n, int) for row in distribution.values() for n in row)

    def test_column_sums_never_exceed_ballot_count(self):
        ballots = [["A", "B"], ["B"], ["C", "A", "B"], ["A"]]
        distribution = compute_rank_distribution(["A", "B", "C"], ballots)
        for position in range(3):
            assert sum(row[position] for row in distribution.values()) <= len(ballots)
        # Everyone with an active choice contributes to position 0
        assert sum(row[0] for row in distribution.values()) == len(ballots)

    def test_empty_active_set(self):
        assert compute_rank_distribution([], [["A"]]) == {}
