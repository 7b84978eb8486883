"""
Golden dataset validation tests.

These tests run both tabulation methods against hand-computed micro datasets
to ensure algorithmic correctness on known scenarios.
"""

import json
from pathlib import Path

import pytest

from tabulation.engine import create_engine
from tabulation.models import ElectionConfig

GOLDEN_DIR = Path(__file__).parent / "micro"
DATASET_NAMES = sorted(p.stem for p in GOLDEN_DIR.glob("*.json"))


def load_golden_dataset(name):
    """Load a golden dataset from JSON file."""
    with open(GOLDEN_DIR / f"{name}.json") as f:
        return json.load(f)


def expand_ballots(dataset):
    """Repeat each ranking by its count."""
    ballots = []
    for entry in dataset["ballots"]:
        ballots.extend([list(entry["ranking"]) for _ in range(entry["count"])])
    return ballots


def run_golden_election(dataset):
    config = ElectionConfig(
        candidates=dataset["candidates"],
        ballots=expand_ballots(dataset),
        method=dataset["method"],
        seats=dataset["seats"],
        title=dataset["description"],
    )
    return create_engine().run_election(config)


@pytest.mark.golden
def test_golden_datasets_present():
    """The hand-computed scenarios must be shipped with the tests."""
    assert len(DATASET_NAMES) >= 10


@pytest.mark.golden
@pytest.mark.parametrize("name", DATASET_NAMES)
def test_golden_winners(name):
    """Winners, tie flag and exhausted count match the hand computation."""
    dataset = load_golden_dataset(name)
    expected = dataset["hand_computed_results"]

    result = run_golden_election(dataset)

    assert result.winners == expected["winners"], (
        f"Winners mismatch: expected {expected['winners']}, got {result.winners}"
    )
    assert result.is_tie == expected["is_tie"]
    assert result.exhausted_ballots == expected["exhausted_ballots"]
    assert result.total_ballots == sum(b["count"] for b in dataset["ballots"])
    assert result.total_candidates == len(dataset["candidates"])
    if "tied_candidates" in expected:
        assert result.tied_candidates == expected["tied_candidates"]
    if "scores" in expected:
        assert result.scores == expected["scores"]


@pytest.mark.golden
@pytest.mark.parametrize("name", DATASET_NAMES)
def test_golden_rounds(name):
    """Every round's tallies, threshold and outcome match the hand computation."""
    dataset = load_golden_dataset(name)
    expected_rounds = dataset["hand_computed_results"]["rounds"]

    result = run_golden_election(dataset)

    assert len(result.rounds) == len(expected_rounds)
    for number, (actual, expected) in enumerate(zip(result.rounds, expected_rounds), 1):
        assert actual.round_number == number
        assert set(actual.tallies) == set(expected["tallies"])
        for candidate, votes in expected["tallies"].items():
            assert actual.tallies[candidate] == pytest.approx(votes), (
                f"Round {number} tally for {candidate}: "
                f"expected {votes}, got {actual.tallies[candidate]}"
            )
        assert actual.threshold == expected["threshold"]
        assert actual.eliminated == expected["eliminated"]
        assert actual.elected == expected["elected"]


@pytest.mark.golden
def test_stv_surplus_weights_scenario():
    """A's surplus of 3 out of 5 leaves B exactly 3 weighted votes."""
    dataset = load_golden_dataset("stv_surplus_transfer")
    result = run_golden_election(dataset)

    first, second = result.rounds
    surplus = first.tallies["A"] - first.threshold
    assert surplus == pytest.approx(3.0)
    assert second.tallies["B"] == pytest.approx(surplus)
    assert "A" not in second.tallies
