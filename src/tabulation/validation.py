"""
Structural validation of a candidate list and its ballots.

Shared by every voting method. Validation never stops at the first problem:
all issues across all ballots are gathered so the caller can show a complete
diagnostic in one pass.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, List

from .errors import (
    BallotValidationError,
    DuplicateRanking,
    InvalidInput,
    MalformedBallot,
    UnknownCandidate,
)

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    """Outcome of validating one submission."""

    valid: bool
    errors: List[str]
    issues: List[BallotValidationError] = field(default_factory=list, repr=False)

    def __bool__(self) -> bool:
        return self.valid

    def to_dict(self):
        return {"valid": self.valid, "errors": list(self.errors)}


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _collect_list_issues(candidates: Any, ballots: Any) -> List[BallotValidationError]:
    issues: List[BallotValidationError] = []

    if not _is_sequence(candidates) or len(candidates) == 0:
        issues.append(InvalidInput("Candidates list must be a non-empty list"))
    else:
        if not all(isinstance(c, str) and c for c in candidates):
            issues.append(
                InvalidInput("Candidates list must contain only non-empty names")
            )
        seen = set()
        for candidate in candidates:
            if not isinstance(candidate, str):
                continue
            if candidate in seen:
                issues.append(InvalidInput(f'Candidate "{candidate}" is listed twice'))
            seen.add(candidate)

    if not _is_sequence(ballots) or len(ballots) == 0:
        issues.append(InvalidInput("Ballots list must be a non-empty list"))

    return issues


def _collect_ballot_issues(
    ballot: Any, ballot_number: int, candidate_set: set
) -> List[BallotValidationError]:
    if (
        not _is_sequence(ballot)
        or len(ballot) == 0
        or not all(isinstance(choice, str) for choice in ballot)
    ):
        return [
            MalformedBallot("must be a non-empty list of candidate names", ballot_number)
        ]

    issues: List[BallotValidationError] = []
    seen = set()
    for choice in ballot:
        if choice not in candidate_set:
            issues.append(UnknownCandidate(choice, ballot_number))
        if choice in seen:
            issues.append(DuplicateRanking(choice, ballot_number))
        seen.add(choice)
    return issues


def validate_ballots(candidates: Any, ballots: Any) -> ValidationResult:
    """
    Check a candidate list and its ballots for structural problems.

    Partial rankings are valid; a ballot only has to name known candidates,
    each at most once.

    Args:
        candidates: Declared candidate names
        ballots: Ranked ballots, most preferred first

    Returns:
        ValidationResult with every problem found
    """
    issues = _collect_list_issues(candidates, ballots)
    if issues:
        return _finish(issues)

    candidate_set = set(candidates)
    for index, ballot in enumerate(ballots):
        issues.extend(_collect_ballot_issues(ballot, index + 1, candidate_set))

    return _finish(issues)


def _finish(issues: List[BallotValidationError]) -> ValidationResult:
    if issues:
        logger.info(f"Validation found {len(issues)} problem(s)")
    return ValidationResult(
        valid=not issues, errors=[str(issue) for issue in issues], issues=issues
    )
