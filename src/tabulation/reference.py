"""
Cross-check IRV/STV results against the PyRankVote library.

PyRankVote breaks last-place ties one candidate at a time and uses its own
surplus rules, so a mismatch on a close election is a prompt to look closer
rather than proof of a bug. Borda has no PyRankVote counterpart.
"""

import logging
from typing import Dict, List, Optional

from pyrankvote import (
    Ballot,
    Candidate,
    instant_runoff_voting,
    single_transferable_vote,
)

from .constants import IRV
from .models import Result

logger = logging.getLogger(__name__)


class ReferenceVerifier:
    """
    Re-runs an election with PyRankVote and compares the winners.
    """

    def __init__(self, candidates: List[str], ballots: List[List[str]], seats: int = 1):
        """
        Initialize the verifier.

        Args:
            candidates: Every candidate in the election
            ballots: Validated ballots
            seats: Number of seats to fill
        """
        self.candidates = list(candidates)
        self.ballots = ballots
        self.seats = seats
        self.candidates_map: Dict[str, Candidate] = {}
        self.pyrankvote_result = None

    def _prepare_pyrankvote_data(self) -> List[Ballot]:
        """Convert ballots to PyRankVote objects."""
        self.candidates_map = {name: Candidate(name) for name in self.candidates}
        return [
            Ballot(ranked_candidates=[self.candidates_map[name] for name in ballot])
            for ballot in self.ballots
            if ballot
        ]

    def run_reference(self) -> List[str]:
        """
        Run the election through PyRankVote.

        Returns:
            Winner names in PyRankVote's order
        """
        pyrankvote_ballots = self._prepare_pyrankvote_data()

        if self.seats >= len(self.candidates_map):
            logger.warning(
                f"Seats ({self.seats}) >= candidates ({len(self.candidates_map)}), "
                "electing all candidates"
            )
            self.pyrankvote_result = None
            return list(self.candidates_map.keys())

        logger.info(
            f"Running PyRankVote with {len(self.candidates_map)} candidates, "
            f"{len(pyrankvote_ballots)} ballots, {self.seats} seat(s)"
        )
        if self.seats == 1:
            self.pyrankvote_result = instant_runoff_voting(
                candidates=list(self.candidates_map.values()),
                ballots=pyrankvote_ballots,
            )
        else:
            self.pyrankvote_result = single_transferable_vote(
                candidates=list(self.candidates_map.values()),
                ballots=pyrankvote_ballots,
                number_of_seats=self.seats,
            )

        return [winner.name for winner in self.pyrankvote_result.get_winners()]

    def verify_result(self, result: Result) -> Dict:
        """
        Compare our result with PyRankVote's.

        Args:
            result: Result produced by the IRV method for the same input

        Returns:
            Verification report dictionary
        """
        if result.method != IRV:
            logger.info(f"No reference implementation for method '{result.method}'")
            return {
                "skipped": True,
                "method": result.method,
                "verification_passed": None,
            }

        reference_winners = self.run_reference()
        ours = set(result.winners)
        theirs = set(reference_winners)

        report = {
            "skipped": False,
            "method": result.method,
            "winners_match": ours == theirs,
            "our_winners": list(result.winners),
            "reference_winners": reference_winners,
            "missing_winners": [w for w in reference_winners if w not in ours],
            "extra_winners": [w for w in result.winners if w not in theirs],
            "our_tie": result.is_tie,
        }
        # A tie on our side is an open outcome PyRankVote resolves arbitrarily
        report["verification_passed"] = report["winners_match"] and not result.is_tie
        if not report["winners_match"]:
            logger.warning(
                f"Winners differ from PyRankVote: ours {result.winners}, "
                f"reference {reference_winners}"
            )
        return report

    def get_pyrankvote_detailed_results(self) -> Optional[str]:
        """String form of PyRankVote's round report, if it ran."""
        if self.pyrankvote_result:
            return str(self.pyrankvote_result)
        return None


def generate_verification_report(verification_results: Dict) -> str:
    """
    Generate a human-readable verification report.

    Args:
        verification_results: Results from ReferenceVerifier.verify_result()

    Returns:
        Formatted verification report string
    """
    report = []
    report.append("=" * 60)
    report.append("REFERENCE CROSS-CHECK (PyRankVote)")
    report.append("=" * 60)

    if verification_results.get("skipped"):
        report.append(
            f"Skipped - no reference implementation for '{verification_results['method']}'"
        )
        return "\n".join(report)

    if verification_results["verification_passed"]:
        report.append("✅ Winners match PyRankVote")
    elif verification_results["winners_match"]:
        report.append("⚠️  Winners match, but our count ended in a tie")
    else:
        report.append("❌ Winners differ from PyRankVote")

    report.append(f"Our winners: {', '.join(verification_results['our_winners'])}")
    report.append(
        f"Reference winners: {', '.join(verification_results['reference_winners'])}"
    )
    if verification_results["missing_winners"]:
        report.append(
            f"Missing winners: {', '.join(verification_results['missing_winners'])}"
        )
    if verification_results["extra_winners"]:
        report.append(
            f"Extra winners: {', '.join(verification_results['extra_winners'])}"
        )

    return "\n".join(report)
