"""
Error taxonomy for ballot validation and election dispatch.

Validation problems are collected as exception instances rather than raised,
so a caller can see every problem in a submission at once. Only the engine
raises: ``UnknownMethod`` when dispatch fails and ``ValidationFailed`` when
the validator rejected the submission.
"""

from typing import List, Optional


class ElectionError(Exception):
    """Base class for all tabulation errors."""


class BallotValidationError(ElectionError):
    """A structural problem found while validating a submission."""

    def __init__(self, message: str, ballot_number: Optional[int] = None):
        self.ballot_number = ballot_number
        self.detail = message
        if ballot_number is not None:
            message = f"Ballot {ballot_number}: {message}"
        super().__init__(message)


class InvalidInput(BallotValidationError):
    """The candidate or ballot list itself is malformed."""


class MalformedBallot(BallotValidationError):
    """A single ballot is not a non-empty list of candidate names."""


class UnknownCandidate(BallotValidationError):
    """A ballot ranks a name that is not a declared candidate."""

    def __init__(self, candidate, ballot_number: Optional[int] = None):
        self.candidate = candidate
        super().__init__(f'unknown candidate "{candidate}"', ballot_number)


class DuplicateRanking(BallotValidationError):
    """A ballot ranks the same candidate more than once."""

    def __init__(self, candidate, ballot_number: Optional[int] = None):
        self.candidate = candidate
        super().__init__(f'duplicate ranking for "{candidate}"', ballot_number)


class UnknownMethod(ElectionError):
    """No voting method is registered under the requested name."""

    def __init__(self, method: str, available: List[str]):
        self.method = method
        self.available = list(available)
        super().__init__(
            f'Unknown voting method: "{method}". Available: {", ".join(self.available)}'
        )


class ValidationFailed(ElectionError):
    """The submission failed validation; ``errors`` lists every problem."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("Ballot validation failed:\n" + "\n".join(self.errors))
