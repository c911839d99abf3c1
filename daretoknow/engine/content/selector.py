"""Round option offering and anti-repetition prompt selection."""

import logging
import random

from daretoknow.engine.types import Difficulty, PromptKind
from .models import Option, Prompt
from .provider import ContentProvider

logger = logging.getLogger(__name__)


class PromptSelector:
    """Serves prompts while remembering which ones were already used.

    The used-prompt set lives as long as the selector does; the orchestrator
    owns one selector per process run, so repeats are avoided across every
    match of the tournament.
    """

    def __init__(
        self,
        provider: ContentProvider,
        options_per_round: int = 3,
        rng: random.Random | None = None,
    ):
        self.provider = provider
        self.options_per_round = options_per_round
        self._rng = rng or random.Random()
        self._used_ids: set[str] = set()

    @property
    def used_ids(self) -> frozenset[str]:
        return frozenset(self._used_ids)

    def offer_options(self, count: int | None = None) -> list[Option]:
        """Random (category, difficulty) pairs; each slot sampled independently."""
        categories = self.provider.list_categories()
        if not categories:
            logger.warning("No categories available, offering no options")
            return []

        difficulties = list(Difficulty)
        return [
            Option(
                category=self._rng.choice(categories),
                difficulty=self._rng.choice(difficulties),
            )
            for _ in range(count or self.options_per_round)
        ]

    def select(self, option: Option, kind: PromptKind) -> Prompt | None:
        """Pick a prompt for the option, relaxing constraints tier by tier."""
        used = self._used_ids
        tiers = [
            (
                "exact",
                lambda: self.provider.find_by_category_difficulty_kind(
                    option.category, option.difficulty, kind, used
                ),
            ),
            (
                "any difficulty",
                lambda: self.provider.find_by_category_kind(
                    option.category, kind, used
                ),
            ),
            (
                "exact with repeats",
                lambda: self.provider.find_by_category_difficulty_kind(
                    option.category, option.difficulty, kind, ()
                ),
            ),
            ("any category", lambda: self.provider.find_by_kind(kind, used)),
            (
                "any category with repeats",
                lambda: self.provider.find_by_kind(kind, ()),
            ),
        ]

        for label, lookup in tiers:
            prompt = lookup()
            if prompt is not None:
                if label != "exact":
                    logger.info(
                        f"Prompt fallback '{label}' used for "
                        f"{option.category}/{option.difficulty.value}/{kind.value}"
                    )
                self._used_ids.add(prompt.id)
                return prompt

        logger.warning(f"No {kind.value} prompt available in any category")
        return None
