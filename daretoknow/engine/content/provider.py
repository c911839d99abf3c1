"""Content provider contract and the in-memory implementation."""

import json
import logging
import random
import uuid
from abc import ABC, abstractmethod
from collections.abc import Callable, Collection, Iterable
from pathlib import Path
from typing import Any

import yaml

from daretoknow.engine.types import Difficulty, PromptKind
from .models import Category, Prompt

logger = logging.getLogger(__name__)


class ContentProvider(ABC):
    """Read-only query contract the engine needs from the prompt store."""

    @abstractmethod
    def find_by_category_difficulty_kind(
        self,
        category: str,
        difficulty: Difficulty,
        kind: PromptKind,
        exclude_ids: Collection[str] = (),
    ) -> Prompt | None:
        """Random prompt matching category, difficulty and kind."""
        pass

    @abstractmethod
    def find_by_category_kind(
        self, category: str, kind: PromptKind, exclude_ids: Collection[str] = ()
    ) -> Prompt | None:
        """Random prompt matching category and kind, any difficulty."""
        pass

    @abstractmethod
    def find_by_kind(
        self, kind: PromptKind, exclude_ids: Collection[str] = ()
    ) -> Prompt | None:
        """Random prompt of the given kind from any category."""
        pass

    @abstractmethod
    def list_categories(self) -> list[str]:
        """Names of all live categories."""
        pass


class InMemoryContentProvider(ContentProvider):
    """Prompt store held in memory, optionally loaded from a file."""

    def __init__(
        self,
        prompts: Iterable[Prompt] = (),
        categories: Iterable[str] = (),
        rng: random.Random | None = None,
    ):
        self._prompts: list[Prompt] = []
        self._categories: list[Category] = []
        self._rng = rng or random.Random()

        for name in categories:
            self.add_category(name)
        for prompt in prompts:
            self.add_prompt(prompt)

    @classmethod
    def load_from_file(
        cls, path: Path, rng: random.Random | None = None
    ) -> "InMemoryContentProvider":
        """Load categories and prompts from a JSON or YAML document."""
        if not path.exists():
            raise FileNotFoundError(f"Prompt file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            if path.suffix in (".yaml", ".yml"):
                data: Any = yaml.safe_load(f) or {}
            else:
                data = json.load(f)

        if isinstance(data, list):
            data = {"prompts": data}

        prompts = []
        for row in data.get("prompts", []):
            row = dict(row)
            row.setdefault("id", str(uuid.uuid4()))
            prompts.append(Prompt.model_validate(row))

        provider = cls(prompts, data.get("categories", []), rng=rng)
        logger.info(
            f"Loaded {len(provider._prompts)} prompts and "
            f"{len(provider._categories)} categories from {path}"
        )
        return provider

    def add_category(self, name: str) -> Category:
        """Register a category name (idempotent)."""
        for category in self._categories:
            if category.name == name:
                return category
        category = Category(id=str(uuid.uuid4()), name=name)
        self._categories.append(category)
        return category

    def add_prompt(self, prompt: Prompt) -> None:
        """Add a prompt, registering its category if unseen."""
        self.add_category(prompt.category)
        self._prompts.append(prompt)

    def all_prompts(self) -> list[Prompt]:
        return list(self._prompts)

    def list_categories(self) -> list[str]:
        return [c.name for c in self._categories]

    def find_by_category_difficulty_kind(
        self,
        category: str,
        difficulty: Difficulty,
        kind: PromptKind,
        exclude_ids: Collection[str] = (),
    ) -> Prompt | None:
        return self._pick(
            lambda p: p.category == category
            and p.difficulty == difficulty
            and p.kind == kind,
            exclude_ids,
        )

    def find_by_category_kind(
        self, category: str, kind: PromptKind, exclude_ids: Collection[str] = ()
    ) -> Prompt | None:
        return self._pick(
            lambda p: p.category == category and p.kind == kind, exclude_ids
        )

    def find_by_kind(
        self, kind: PromptKind, exclude_ids: Collection[str] = ()
    ) -> Prompt | None:
        return self._pick(lambda p: p.kind == kind, exclude_ids)

    def _pick(
        self, predicate: Callable[[Prompt], bool], exclude_ids: Collection[str]
    ) -> Prompt | None:
        candidates = [
            p for p in self._prompts if p.id not in exclude_ids and predicate(p)
        ]
        if not candidates:
            return None
        return self._rng.choice(candidates)
