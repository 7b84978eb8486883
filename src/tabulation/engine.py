import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Sequence, Union

from .base import VotingMethod
from .borda import BordaCountMethod
from .errors import UnknownMethod, ValidationFailed
from .irv import IRVMethod
from .models import ElectionConfig, Result
from .validation import ValidationResult

logger = logging.getLogger(__name__)


class ElectionEngine:
    """
    Registry of voting methods by name.

    Registration is expected to happen once at startup; after that the
    engine is only read, so concurrent run_election calls are safe as long
    as each supplies its own data.
    """

    def __init__(self):
        self.methods: Dict[str, VotingMethod] = {}

    def register_method(self, method: VotingMethod) -> None:
        """Add a method under its name, replacing any earlier registration."""
        if not isinstance(method, VotingMethod):
            raise TypeError(
                f"{type(method).__name__} does not implement name/validate/tabulate"
            )
        if method.name in self.methods:
            logger.info(f"Replacing voting method '{method.name}'")
        self.methods[method.name] = method

    def get_available_methods(self) -> List[str]:
        return list(self.methods.keys())

    def get_method(self, name: str) -> VotingMethod:
        try:
            return self.methods[name]
        except KeyError:
            raise UnknownMethod(name, self.get_available_methods()) from None

    def validate(
        self, method: str, candidates: Sequence[str], ballots: Sequence[Sequence[str]]
    ) -> ValidationResult:
        """Run the named method's validator without tabulating."""
        return self.get_method(method).validate(candidates, ballots)

    def run_election(self, config: Union[ElectionConfig, Dict[str, Any]]) -> Result:
        """
        Validate and tabulate one election.

        Args:
            config: ElectionConfig or an equivalent mapping

        Returns:
            Result stamped with the submission's title and the current time

        Raises:
            UnknownMethod: config.method is not registered
            ValidationFailed: the ballots did not pass validation
        """
        if not isinstance(config, ElectionConfig):
            config = ElectionConfig.from_dict(config)

        voting_method = self.get_method(config.method)

        validation = voting_method.validate(config.candidates, config.ballots)
        if not validation.valid:
            logger.warning(
                f"Election '{config.title}' rejected with {len(validation.errors)} error(s)"
            )
            raise ValidationFailed(validation.errors)

        logger.info(
            f"Running election '{config.title}' with method '{config.method}'"
        )
        result = voting_method.tabulate(config.candidates, config.ballots, config.seats)
        return replace(
            result,
            title=config.title,
            timestamp=datetime.now(timezone.utc).isoformat(),
        )


def create_engine() -> ElectionEngine:
    """Engine with the built-in IRV and Borda methods registered."""
    engine = ElectionEngine()
    engine.register_method(IRVMethod())
    engine.register_method(BordaCountMethod())
    return engine
