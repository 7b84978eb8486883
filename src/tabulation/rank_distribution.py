from typing import Dict, Iterable, List, Sequence, Union

import numpy as np

from .models import WeightedBallot

BallotLike = Union[Sequence[str], WeightedBallot]


def compute_rank_distribution(
    active_candidates: Sequence[str], ballots: Iterable[BallotLike]
) -> Dict[str, List[int]]:
    """
    Count how many ballots place each active candidate at each position.

    Inactive candidates are dropped from every ballot first, so position 0 is
    a ballot's top active choice. Weighted ballots count once regardless of
    weight.

    Args:
        active_candidates: Candidates still in the count, in display order
        ballots: Plain rankings or WeightedBallot working copies

    Returns:
        Mapping of candidate to a count list of length len(active_candidates)
    """
    index = {candidate: i for i, candidate in enumerate(active_candidates)}
    counts = np.zeros((len(index), len(index)), dtype=np.int64)

    for ballot in ballots:
        ranking = ballot.ranking if isinstance(ballot, WeightedBallot) else ballot
        active_ranking = [c for c in ranking if c in index]
        for position, candidate in enumerate(active_ranking):
            counts[index[candidate], position] += 1

    return {candidate: counts[i].tolist() for candidate, i in index.items()}
