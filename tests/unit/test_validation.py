"""
Unit tests for ballot validation.
"""

import pytest

from tabulation.errors import (
    DuplicateRanking,
    InvalidInput,
    MalformedBallot,
    UnknownCandidate,
)
from tabulation.validation import ValidationResult, validate_ballots

CANDIDATES = ["A", "B", "C"]


@pytest.mark.unit
class TestTopLevelLists:
    """Candidate and ballot lists themselves."""

    @pytest.mark.parametrize("candidates", [[], None, "ABC", {"A": 1}])
    def test_bad_candidate_list(self, candidates):
        result = validate_ballots(candidates, [["A"]])
        assert not result.valid
        assert "Candidates list must be a non-empty list" in result.errors
        assert all(isinstance(issue, InvalidInput) for issue in result.issues)

    @pytest.mark.parametrize("ballots", [[], None, "A,B"])
    def test_bad_ballot_list(self, ballots):
        result = validate_ballots(CANDIDATES, ballots)
        assert not result.valid
        assert result.errors == ["Ballots list must be a non-empty list"]

    def test_both_lists_reported_together(self):
        result = validate_ballots([], [])
        assert len(result.errors) == 2

    def test_duplicate_candidate_names(self):
        result = validate_ballots(["A", "B", "A"], [["A"]])
        assert not result.valid
        assert result.errors == ['Candidate "A" is listed twice']

    def test_non_string_candidate(self):
        result = validate_ballots(["A", 2], [["A"]])
        assert not result.valid
        assert isinstance(result.issues[0], InvalidInput)

    def test_tuples_are_accepted(self):
        result = validate_ballots(("A", "B"), (("A", "B"), ("B",)))
        assert result.valid


@pytest.mark.unit
class TestBallotChecks:
    """Per-ballot structural checks."""

    def test_valid_full_and_partial_ballots(self):
        result = validate_ballots(CANDIDATES, [["A", "B", "C"], ["B"], ["C", "A"]])
        assert result.valid
        assert result.errors == []
        assert bool(result) is True

    @pytest.mark.parametrize("ballot", [[], "A", None, ["A", 3]])
    def test_malformed_ballot(self, ballot):
        result = validate_ballots(CANDIDATES, [["A"], ballot])
        assert not result.valid
        assert result.errors == [
            "Ballot 2: must be a non-empty list of candidate names"
        ]
        assert isinstance(result.issues[0], MalformedBallot)
        assert result.issues[0].ballot_number == 2

    def test_unknown_candidate(self):
        result = validate_ballots(CANDIDATES, [["A", "Z"]])
        assert result.errors == ['Ballot 1: unknown candidate "Z"']
        issue = result.issues[0]
        assert isinstance(issue, UnknownCandidate)
        assert issue.candidate == "Z"

    def test_duplicate_ranking(self):
        result = validate_ballots(CANDIDATES, [["A", "B", "A"]])
        assert result.errors == ['Ballot 1: duplicate ranking for "A"']
        assert isinstance(result.issues[0], DuplicateRanking)

    def test_unknown_and_duplicate_on_same_entry(self):
        result = validate_ballots(CANDIDATES, [["Z", "Z"]])
        assert result.errors == [
            'Ballot 1: unknown candidate "Z"',
            'Ballot 1: unknown candidate "Z"',
            'Ballot 1: duplicate ranking for "Z"',
        ]

    def test_all_errors_across_ballots_collected(self):
        ballots = [["A", "X"], [], ["B", "B"], ["C"], ["Y", "A"]]
        result = validate_ballots(CANDIDATES, ballots)
        assert not result.valid
        assert result.errors == [
            'Ballot 1: unknown candidate "X"',
            "Ballot 2: must be a non-empty list of candidate names",
            'Ballot 3: duplicate ranking for "B"',
            'Ballot 5: unknown candidate "Y"',
        ]

    def test_validation_does_not_mutate_input(self):
        ballots = [["A", "B"], ["C"]]
        validate_ballots(CANDIDATES, ballots)
        assert ballots == [["A", "B"], ["C"]]


@pytest.mark.unit
def test_validation_result_to_dict():
    result = ValidationResult(valid=False, errors=["x"])
    assert result.to_dict() == {"valid": False, "errors": ["x"]}
