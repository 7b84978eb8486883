"""
Tabulation engine for ranked-choice elections.

This module provides two counting methods behind one interface:
- IRVMethod: Instant-runoff for one seat, single transferable vote for more
- BordaCountMethod: Positional scoring, top scores fill the seats

ElectionEngine dispatches an ElectionConfig to the named method after
validating its ballots.
"""

from .borda import BordaCountMethod
from .engine import ElectionEngine, create_engine
from .errors import (
    DuplicateRanking,
    ElectionError,
    InvalidInput,
    MalformedBallot,
    UnknownCandidate,
    UnknownMethod,
    ValidationFailed,
)
from .irv import IRVMethod
from .models import ElectionConfig, Result, Round
from .rank_distribution import compute_rank_distribution
from .validation import ValidationResult, validate_ballots

__all__ = [
    "ElectionEngine",
    "create_engine",
    "IRVMethod",
    "BordaCountMethod",
    "ElectionConfig",
    "Result",
    "Round",
    "ValidationResult",
    "validate_ballots",
    "compute_rank_distribution",
    "ElectionError",
    "InvalidInput",
    "MalformedBallot",
    "UnknownCandidate",
    "DuplicateRanking",
    "UnknownMethod",
    "ValidationFailed",
]
