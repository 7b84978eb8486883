"""
Borda count, single- and multi-winner.

Points depend on the total number of candidates in the election, not on how
many a ballot ranks: with N candidates the candidate at position p earns
max(0, N - 1 - p). Unranked candidates earn nothing from that ballot.
"""

import logging
from typing import Dict, List, Sequence

import pandas as pd

from .constants import BORDA
from .models import Result, Round
from .rank_distribution import compute_rank_distribution
from .validation import ValidationResult, validate_ballots

logger = logging.getLogger(__name__)


def ballots_long_frame(ballots: Sequence[Sequence[str]]) -> pd.DataFrame:
    """
    Normalize ballots to long format, one row per ranked entry.

    Returns:
        DataFrame with ballot_id, candidate and rank_position (0 = top choice)
    """
    rows = [
        (ballot_id, candidate, position)
        for ballot_id, ballot in enumerate(ballots)
        for position, candidate in enumerate(ballot)
    ]
    frame = pd.DataFrame(rows, columns=["ballot_id", "candidate", "rank_position"])
    return frame.astype({"ballot_id": "int64", "rank_position": "int64"})


def calculate_borda_scores(
    candidates: Sequence[str], ballots: Sequence[Sequence[str]]
) -> Dict[str, int]:
    """
    Total Borda points per candidate, in candidate order.

    Args:
        candidates: Every candidate in the election
        ballots: Ranked ballots

    Returns:
        Mapping of candidate to accumulated points
    """
    n = len(candidates)
    long_df = ballots_long_frame(ballots)
    long_df = long_df[long_df["candidate"].isin(candidates)]
    points = (n - 1 - long_df["rank_position"]).clip(lower=0)
    totals = points.groupby(long_df["candidate"]).sum()
    return {candidate: int(totals.get(candidate, 0)) for candidate in candidates}


class BordaCountMethod:
    """Positional scoring: highest total wins, top scores fill multiple seats."""

    name = BORDA

    def validate(
        self, candidates: Sequence[str], ballots: Sequence[Sequence[str]]
    ) -> ValidationResult:
        return validate_ballots(candidates, ballots)

    def tabulate(
        self, candidates: List[str], ballots: List[List[str]], seats: int = 1
    ) -> Result:
        """
        Score every ballot and pick the winner(s).

        Args:
            candidates: Every candidate in the election
            ballots: Validated ballots
            seats: Number of seats to fill

        Returns:
            Result with per-candidate scores
        """
        logger.info(
            f"Starting Borda count: {len(candidates)} candidates, "
            f"{len(ballots)} ballots, {seats} seat(s)"
        )
        scores = calculate_borda_scores(candidates, ballots)
        distribution = compute_rank_distribution(candidates, ballots)

        if seats == 1:
            return self._tabulate_single_winner(candidates, ballots, scores, distribution)
        return self._tabulate_multi_winner(
            candidates, ballots, seats, scores, distribution
        )

    def _tabulate_single_winner(self, candidates, ballots, scores, distribution):
        max_score = max(scores.values())
        winners = [c for c, score in scores.items() if score == max_score]
        is_tie = len(winners) > 1

        if is_tie:
            logger.warning(f"Borda tie at {max_score} points: {winners}")
            summary = f"Tie between {' and '.join(winners)}. A tiebreaker is required."
        else:
            logger.info(f"Borda winner: {winners[0]} with {max_score} points")
            summary = f"{winners[0]} wins with {max_score} points."

        rounds = [
            Round(
                round_number=1,
                tallies=dict(scores),
                eliminated=None,
                elected=list(winners),
                total_active_ballots=len(ballots),
                threshold=None,
                rank_distribution=distribution,
            )
        ]

        return Result(
            method=self.name,
            candidates=list(candidates),
            rounds=rounds,
            winners=winners,
            is_tie=is_tie,
            summary=summary,
            total_ballots=len(ballots),
            total_candidates=len(candidates),
            exhausted_ballots=0,
            seats=1,
            scores=dict(scores),
            tied_candidates=list(winners) if is_tie else [],
        )

    def _tabulate_multi_winner(self, candidates, ballots, seats, scores, distribution):
        # sorted() is stable, so equal scores keep candidate order
        ordered = sorted(candidates, key=lambda c: scores[c], reverse=True)

        tied: List[str] = []
        if seats < len(ordered) and scores[ordered[seats - 1]] == scores[ordered[seats]]:
            cutoff = scores[ordered[seats - 1]]
            elected = [c for c in ordered if scores[c] > cutoff]
            tied = [c for c in ordered if scores[c] == cutoff]
            logger.warning(
                f"Borda tie at the seat cutoff ({cutoff} points): {tied}"
            )
        else:
            elected = ordered[:seats]

        rounds = [
            Round(
                round_number=i + 1,
                tallies=dict(scores),
                eliminated=None,
                elected=[candidate],
                total_active_ballots=len(ballots),
                threshold=None,
                rank_distribution=distribution,
                seat=i + 1,
                score=scores[candidate],
            )
            for i, candidate in enumerate(elected)
        ]
        if not rounds:
            # Nobody cleared the cutoff; keep the scoreboard
            rounds.append(
                Round(
                    round_number=1,
                    tallies=dict(scores),
                    eliminated=None,
                    elected=None,
                    total_active_ballots=len(ballots),
                    threshold=None,
                    rank_distribution=distribution,
                )
            )

        if tied:
            remaining = seats - len(elected)
            tie_text = (
                f"{remaining} remaining seat(s) tied between {', '.join(tied)}; "
                "a tiebreaker is required."
            )
            if elected:
                summary = f"Partial result: {', '.join(elected)} elected. {tie_text}"
            else:
                summary = f"No seats filled: {tie_text}"
        else:
            summary = f"{len(elected)} seats filled: {', '.join(elected)}."

        logger.info(f"Borda seats filled: {elected}")

        return Result(
            method=self.name,
            candidates=list(candidates),
            rounds=rounds,
            winners=elected,
            is_tie=bool(tied),
            summary=summary,
            total_ballots=len(ballots),
            total_candidates=len(candidates),
            exhausted_ballots=0,
            seats=seats,
            scores=dict(scores),
            tied_candidates=tied,
        )
