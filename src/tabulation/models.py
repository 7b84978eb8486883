import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from .errors import InvalidInput

logger = logging.getLogger(__name__)


def convert_numpy_types(obj: Any) -> Any:
    """Convert numpy types to native Python types for JSON serialization."""
    if isinstance(obj, np.integer):
        return int(obj)
    elif isinstance(obj, np.floating):
        return float(obj)
    elif isinstance(obj, np.ndarray):
        return obj.tolist()
    elif isinstance(obj, dict):
        return {k: convert_numpy_types(v) for k, v in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [convert_numpy_types(item) for item in obj]
    else:
        return obj


@dataclass
class ElectionConfig:
    """One election submission: who is running, how people voted, how to count."""

    candidates: List[str]
    ballots: List[List[str]]
    method: str
    seats: int = 1
    title: str = ""

    def __post_init__(self):
        if isinstance(self.seats, bool) or not isinstance(self.seats, int):
            raise InvalidInput(f"Seat count must be an integer, got {self.seats!r}")
        if self.seats < 1:
            raise InvalidInput(f"Seat count must be at least 1, got {self.seats}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ElectionConfig":
        """
        Build a config from a request payload or JSON document.

        Args:
            data: Mapping with ``candidates``, ``ballots``, ``method`` and
                optionally ``seats`` and ``title``

        Returns:
            ElectionConfig
        """
        missing = [key for key in ("candidates", "ballots", "method") if key not in data]
        if missing:
            raise InvalidInput(f"Election config missing: {', '.join(missing)}")

        seats = data.get("seats")
        return cls(
            candidates=data["candidates"],
            ballots=data["ballots"],
            method=data["method"],
            seats=1 if seats is None else seats,
            title=data.get("title") or "",
        )


@dataclass
class WeightedBallot:
    """An STV working copy of a ballot with its current transfer weight."""

    ranking: Tuple[str, ...]
    weight: float = 1.0

    def top_choice(self, active: Iterable[str]) -> Optional[str]:
        """First ranked candidate that is still active, or None if exhausted."""
        return next((c for c in self.ranking if c in active), None)


@dataclass(frozen=True)
class Round:
    """Snapshot of one tabulation round."""

    round_number: int
    tallies: Dict[str, float]
    eliminated: Optional[List[str]]
    elected: Optional[List[str]]
    total_active_ballots: int
    threshold: Optional[int]
    rank_distribution: Dict[str, List[int]] = field(default_factory=dict)
    # Borda multi-winner only
    seat: Optional[int] = None
    score: Optional[int] = None


@dataclass
class Result:
    """Outcome of one tabulation, with every round that produced it."""

    method: str
    candidates: List[str]
    rounds: List[Round]
    winners: List[str]
    is_tie: bool
    summary: str
    total_ballots: int
    total_candidates: int
    exhausted_ballots: int
    seats: int = 1
    title: str = ""
    timestamp: Optional[str] = None
    scores: Optional[Dict[str, int]] = None
    tied_candidates: List[str] = field(default_factory=list)

    @property
    def elected(self) -> List[str]:
        return self.winners

    def to_dict(self) -> Dict[str, Any]:
        """JSON-serializable representation of the result."""
        return convert_numpy_types(asdict(self))

    def get_round_summary(self) -> pd.DataFrame:
        """
        Get summary of all rounds as a DataFrame.

        Returns:
            DataFrame with one row per round and candidate tallied in it
        """
        if not self.rounds:
            return pd.DataFrame()

        summary_data = []
        elected_before = set()
        eliminated_before = set()
        for round_obj in self.rounds:
            for candidate in round_obj.tallies:
                summary_data.append(
                    {
                        "round": round_obj.round_number,
                        "candidate": candidate,
                        "votes": round_obj.tallies[candidate],
                        "threshold": round_obj.threshold,
                        "status": self._get_candidate_status(
                            candidate, round_obj, elected_before, eliminated_before
                        ),
                        "active_ballots": round_obj.total_active_ballots,
                    }
                )
            elected_before.update(round_obj.elected or [])
            eliminated_before.update(round_obj.eliminated or [])

        return pd.DataFrame(summary_data)

    @staticmethod
    def _get_candidate_status(
        candidate: str, round_obj: Round, elected_before: set, eliminated_before: set
    ) -> str:
        """Get the status of a candidate in a given round."""
        if candidate in (round_obj.elected or []):
            return "elected"
        elif candidate in (round_obj.eliminated or []):
            return "eliminated"
        elif candidate in elected_before:
            return "already_elected"
        elif candidate in eliminated_before:
            return "already_eliminated"
        else:
            return "continuing"

    def get_final_results(self) -> pd.DataFrame:
        """
        Get final election results.

        Each candidate is reported with the last tally they received, so a
        candidate eliminated early shows their total in the round they left.

        Returns:
            DataFrame with final results for all candidates
        """
        final_votes: Dict[str, float] = {c: 0 for c in self.candidates}
        final_votes.update(self.scores or {})
        for round_obj in self.rounds:
            final_votes.update(round_obj.tallies)

        results_data = []
        for candidate in self.candidates:
            results_data.append(
                {
                    "candidate": candidate,
                    "final_votes": final_votes[candidate],
                    "status": (
                        "elected" if candidate in self.winners else "not_elected"
                    ),
                    "election_round": next(
                        (
                            r.round_number
                            for r in self.rounds
                            if candidate in (r.elected or [])
                            and candidate in self.winners
                        ),
                        None,
                    ),
                }
            )

        return pd.DataFrame(results_data).sort_values(
            "final_votes", ascending=False, kind="stable"
        )


def copy_ballots(ballots: Sequence[Sequence[str]]) -> List[List[str]]:
    """Working copies of the caller's ballots; the originals are never mutated."""
    return [list(ballot) for ballot in ballots]
