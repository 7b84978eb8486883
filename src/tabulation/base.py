"""
The interface every voting method implements.

A method is any object with a ``name`` and the two operations below; the
engine dispatches on ``name``. New methods implement the protocol directly.
"""

from typing import List, Protocol, Sequence, runtime_checkable

from .models import Result
from .validation import ValidationResult


@runtime_checkable
class VotingMethod(Protocol):
    name: str

    def validate(
        self, candidates: Sequence[str], ballots: Sequence[Sequence[str]]
    ) -> ValidationResult:
        """Check the submission; never raises for content problems."""
        ...

    def tabulate(
        self, candidates: List[str], ballots: List[List[str]], seats: int = 1
    ) -> Result:
        """Count validated ballots and return the round-by-round result."""
        ...
