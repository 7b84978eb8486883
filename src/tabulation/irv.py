"""
Instant-runoff voting and its multi-seat extension, single transferable vote.

One seat: each round counts every ballot for its top active choice. A
candidate holding a strict majority of the active ballots wins; otherwise
every candidate tied for last place is eliminated together.

Several seats: ballots carry a weight starting at 1.0. Candidates reaching
the Droop quota are elected and the ballots that elected them continue at
the fraction surplus / tally of their weight. Without anyone reaching quota,
the last-place candidates are eliminated.

Exhausted ballots (no active choice left) are dropped for good and counted.
The running count is passed into and returned from each tally step.
"""

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from .constants import IRV, TALLY_DECIMALS, WEIGHT_EPSILON
from .models import Result, Round, WeightedBallot, copy_ballots
from .rank_distribution import compute_rank_distribution
from .validation import ValidationResult, validate_ballots

logger = logging.getLogger(__name__)


def majority_threshold(total_active: int) -> int:
    """Strict majority of the active ballots: floor(total / 2) + 1."""
    return total_active // 2 + 1


def droop_quota(total_weight: float, seats: int) -> int:
    """
    Calculate Droop quota: floor(total_weight / (seats + 1)) + 1

    Args:
        total_weight: Sum of the continuing ballot weights
        seats: Seats still to fill

    Returns:
        Droop quota
    """
    return int(total_weight / (seats + 1)) + 1


def count_first_choices(
    ballots: List[List[str]], active: Sequence[str], exhausted: int
) -> Tuple[Dict[str, int], List[List[str]], int]:
    """
    Tally one vote per ballot for its top active choice.

    Args:
        ballots: Working ballots
        active: Candidates still in the count
        exhausted: Exhausted ballot count so far

    Returns:
        (tallies, ballots still active, updated exhausted count)
    """
    active_set = set(active)
    tallies = {c: 0 for c in active}
    still_active = []
    for ballot in ballots:
        top_choice = next((c for c in ballot if c in active_set), None)
        if top_choice is None:
            exhausted += 1
            continue
        tallies[top_choice] += 1
        still_active.append(ballot)
    return tallies, still_active, exhausted


def count_weighted_first_choices(
    ballots: List[WeightedBallot], active: Sequence[str], exhausted: int
) -> Tuple[Dict[str, float], List[Tuple[WeightedBallot, str]], int]:
    """
    Weighted version of count_first_choices.

    Returns:
        (tallies, (ballot, top choice) pairs for active ballots,
        updated exhausted count)
    """
    active_set = set(active)
    tallies = {c: 0.0 for c in active}
    assignments = []
    for ballot in ballots:
        top_choice = ballot.top_choice(active_set)
        if top_choice is None:
            exhausted += 1
            continue
        tallies[top_choice] += ballot.weight
        assignments.append((ballot, top_choice))
    return tallies, assignments, exhausted


def display_tallies(tallies: Dict[str, float]) -> Dict[str, float]:
    return {c: round(votes, TALLY_DECIMALS) for c, votes in tallies.items()}


class IRVMethod:
    """Instant-runoff for one seat, single transferable vote for more."""

    name = IRV

    def validate(
        self, candidates: Sequence[str], ballots: Sequence[Sequence[str]]
    ) -> ValidationResult:
        return validate_ballots(candidates, ballots)

    def tabulate(
        self, candidates: List[str], ballots: List[List[str]], seats: int = 1
    ) -> Result:
        """
        Run the elimination rounds until the seats are filled or a tie stops it.

        Args:
            candidates: Every candidate in the election
            ballots: Validated ballots
            seats: Number of seats to fill

        Returns:
            Result with one Round per counting step
        """
        logger.info(
            f"Starting {'IRV' if seats == 1 else 'STV'} tabulation: "
            f"{len(candidates)} candidates, {len(ballots)} ballots, {seats} seat(s)"
        )
        if seats == 1:
            return self._tabulate_single_winner(candidates, ballots)
        return self._tabulate_multi_winner(candidates, ballots, seats)

    def _tabulate_single_winner(
        self, candidates: List[str], ballots: List[List[str]]
    ) -> Result:
        active = list(candidates)
        working = copy_ballots(ballots)
        rounds: List[Round] = []
        exhausted = 0

        while len(active) > 1:
            round_number = len(rounds) + 1
            tallies, working, exhausted = count_first_choices(working, active, exhausted)
            total_active = len(working)
            threshold = majority_threshold(total_active)
            distribution = compute_rank_distribution(active, working)

            logger.info(
                f"Round {round_number}: {total_active} active ballots, "
                f"threshold {threshold}, tallies {tallies}"
            )

            majority = next((c for c in active if tallies[c] >= threshold), None)
            if majority is not None:
                logger.info(f"{majority} elected with {tallies[majority]} votes")
                rounds.append(
                    Round(
                        round_number=round_number,
                        tallies=tallies,
                        eliminated=None,
                        elected=[majority],
                        total_active_ballots=total_active,
                        threshold=threshold,
                        rank_distribution=distribution,
                    )
                )
                return self._build_result(
                    candidates, ballots, rounds, [majority], False, exhausted, 1
                )

            min_votes = min(tallies.values())
            if min_votes == max(tallies.values()):
                logger.warning(f"Complete tie among {active} at {min_votes} votes")
                rounds.append(
                    Round(
                        round_number=round_number,
                        tallies=tallies,
                        eliminated=None,
                        elected=None,
                        total_active_ballots=total_active,
                        threshold=threshold,
                        rank_distribution=distribution,
                    )
                )
                return self._build_result(
                    candidates, ballots, rounds, [], True, exhausted, 1
                )

            eliminated = [c for c in active if tallies[c] == min_votes]
            logger.info(f"Eliminating {eliminated} with {min_votes} votes each")
            rounds.append(
                Round(
                    round_number=round_number,
                    tallies=tallies,
                    eliminated=eliminated,
                    elected=None,
                    total_active_ballots=total_active,
                    threshold=threshold,
                    rank_distribution=distribution,
                )
            )
            active = [c for c in active if c not in eliminated]

        if len(active) == 1:
            winner = active[0]
            tallies, working, exhausted = count_first_choices(working, active, exhausted)
            total_active = len(working)
            logger.info(f"{winner} elected as the last remaining candidate")
            rounds.append(
                Round(
                    round_number=len(rounds) + 1,
                    tallies=tallies,
                    eliminated=None,
                    elected=[winner],
                    total_active_ballots=total_active,
                    threshold=majority_threshold(total_active),
                    rank_distribution=compute_rank_distribution(active, working),
                )
            )
            return self._build_result(
                candidates, ballots, rounds, [winner], False, exhausted, 1
            )

        return self._build_result(candidates, ballots, rounds, [], True, exhausted, 1)

    def _tabulate_multi_winner(
        self, candidates: List[str], ballots: List[List[str]], seats: int
    ) -> Result:
        active = list(candidates)
        weighted = [WeightedBallot(ranking=tuple(ballot)) for ballot in ballots]
        winners: List[str] = []
        rounds: List[Round] = []
        exhausted = 0

        while len(winners) < seats:
            seats_remaining = seats - len(winners)
            round_number = len(rounds) + 1

            if len(active) <= seats_remaining:
                rounds.append(self._elect_remaining(round_number, active, weighted))
                logger.info(f"Electing all remaining candidates: {active}")
                winners.extend(active)
                break

            tallies, assignments, exhausted = count_weighted_first_choices(
                weighted, active, exhausted
            )
            weighted = [ballot for ballot, _ in assignments]
            total_weight = sum(ballot.weight for ballot in weighted)
            quota = droop_quota(total_weight, seats_remaining)
            distribution = compute_rank_distribution(active, weighted)

            logger.info(
                f"Round {round_number}: weight {total_weight:.3f} over "
                f"{len(weighted)} ballots, quota {quota}, "
                f"tallies {display_tallies(tallies)}"
            )

            newly_elected = sorted(
                (c for c in active if tallies[c] >= quota),
                key=lambda c: tallies[c],
                reverse=True,
            )

            if newly_elected:
                rounds.append(
                    Round(
                        round_number=round_number,
                        tallies=display_tallies(tallies),
                        eliminated=None,
                        elected=list(newly_elected),
                        total_active_ballots=len(weighted),
                        threshold=quota,
                        rank_distribution=distribution,
                    )
                )
                for candidate in newly_elected:
                    winners.append(candidate)
                    self._transfer_surplus(candidate, tallies[candidate], quota, assignments)
                active = [c for c in active if c not in newly_elected]
                weighted = [b for b in weighted if b.weight > WEIGHT_EPSILON]
                continue

            min_votes = min(tallies.values())
            if min_votes == max(tallies.values()) and len(active) > seats_remaining:
                logger.warning(
                    f"Complete tie among {active}; {seats_remaining} seat(s) unfilled"
                )
                rounds.append(
                    Round(
                        round_number=round_number,
                        tallies=display_tallies(tallies),
                        eliminated=None,
                        elected=None,
                        total_active_ballots=len(weighted),
                        threshold=quota,
                        rank_distribution=distribution,
                    )
                )
                return self._build_result(
                    candidates, ballots, rounds, winners, True, exhausted, seats
                )

            eliminated = [c for c in active if tallies[c] == min_votes]
            logger.info(f"Eliminating {eliminated} with {min_votes:.3f} votes each")
            rounds.append(
                Round(
                    round_number=round_number,
                    tallies=display_tallies(tallies),
                    eliminated=eliminated,
                    elected=None,
                    total_active_ballots=len(weighted),
                    threshold=quota,
                    rank_distribution=distribution,
                )
            )
            active = [c for c in active if c not in eliminated]

        return self._build_result(
            candidates, ballots, rounds, winners, False, exhausted, seats
        )

    @staticmethod
    def _elect_remaining(
        round_number: int, active: List[str], weighted: List[WeightedBallot]
    ) -> Round:
        active_set = set(active)
        tallies = {c: 0.0 for c in active}
        total_active = 0
        for ballot in weighted:
            top_choice = ballot.top_choice(active_set)
            if top_choice is not None:
                tallies[top_choice] += ballot.weight
                total_active += 1

        return Round(
            round_number=round_number,
            tallies=display_tallies(tallies),
            eliminated=None,
            elected=list(active),
            total_active_ballots=total_active,
            threshold=None,
            rank_distribution=compute_rank_distribution(active, weighted),
        )

    @staticmethod
    def _transfer_surplus(
        candidate: str,
        tally: float,
        quota: int,
        assignments: List[Tuple[WeightedBallot, str]],
    ) -> None:
        """
        Reweight the ballots that elected ``candidate`` this round.

        Only ballots counted for the candidate in this round's tally are
        touched, so the weight carried forward never exceeds the surplus.
        """
        surplus = tally - quota
        transfer_value: Optional[float] = surplus / tally if surplus > 0 else None
        if transfer_value is not None:
            logger.debug(
                f"Transferring surplus from {candidate}: {surplus:.3f} votes "
                f"at value {transfer_value:.3f}"
            )

        for ballot, top_choice in assignments:
            if top_choice != candidate:
                continue
            if transfer_value is None:
                ballot.weight = 0.0
            else:
                ballot.weight *= transfer_value

    def _build_result(
        self,
        candidates: List[str],
        ballots: List[List[str]],
        rounds: List[Round],
        winners: List[str],
        is_tie: bool,
        exhausted: int,
        seats: int,
    ) -> Result:
        if is_tie:
            if winners:
                summary = (
                    f"Partial result: {', '.join(winners)} elected. "
                    "Remaining seats ended in a tie."
                )
            else:
                summary = "The election ended in a tie. No winner could be determined."
        elif len(winners) == 1:
            winner_votes = next(
                (r.tallies[winners[0]] for r in reversed(rounds) if winners[0] in r.tallies),
                0,
            )
            summary = f"{winners[0]} wins with {winner_votes} votes in round {len(rounds)}."
        else:
            summary = f"{len(winners)} seats filled: {', '.join(winners)}."

        logger.info(f"Tabulation complete: winners {winners}, {len(rounds)} round(s)")

        return Result(
            method=self.name,
            candidates=list(candidates),
            rounds=rounds,
            winners=list(winners),
            is_tie=is_tie,
            summary=summary,
            total_ballots=len(ballots),
            total_candidates=len(candidates),
            exhausted_ballots=exhausted,
            seats=seats,
        )
