"""Pytest configuration and shared fixtures.

Provides:
- A manual scheduler so timer ticks can be driven one at a time
- A small seeded prompt store
- Ready-made teams, matches, timers, state machines and managers
"""

import random
from collections.abc import Callable
from typing import Any

import pytest

from daretoknow.engine.config import GameConfig
from daretoknow.engine.content import InMemoryContentProvider, Prompt, PromptSelector
from daretoknow.engine.match import MatchRules, MatchStateMachine, MatchTimer
from daretoknow.engine.models import Match, Team, TeamMember
from daretoknow.engine.tournaments import TournamentManager


# =============================================================================
# TEST DOUBLES
# =============================================================================


class ManualHandle:
    """Pending callback registered with ManualScheduler."""

    def __init__(self, callback: Callable[[], None]):
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Scheduler whose callbacks only run when the test advances time."""

    def __init__(self):
        self.pending: list[ManualHandle] = []

    def call_later(self, delay: float, callback: Callable[[], None]) -> ManualHandle:
        handle = ManualHandle(callback)
        self.pending.append(handle)
        return handle

    @property
    def active(self) -> list[ManualHandle]:
        return [h for h in self.pending if not h.cancelled]

    def advance(self, ticks: int = 1) -> None:
        """Fire every due callback, once per tick."""
        for _ in range(ticks):
            due = self.active
            self.pending = []
            for handle in due:
                handle.callback()


type EventLog = list[tuple[str, Any]]


# =============================================================================
# SHARED FIXTURES - Available to all test modules
# =============================================================================


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def events() -> EventLog:
    """Every (event, payload) pair published by the engine."""
    return []


@pytest.fixture
def sink(events: EventLog) -> Callable[[str, Any], None]:
    def record(event: str, payload: Any) -> None:
        events.append((event, payload))

    return record


@pytest.fixture
def prompts() -> list[Prompt]:
    """One question per Science difficulty level plus a few Party dares."""
    return [
        Prompt(
            id="q-easy",
            category="Science",
            kind="question",
            difficulty="EASY",
            text="Which planet is the Red Planet?",
            choices=["Mars", "Venus"],
            correct_answer="Mars",
        ),
        Prompt(
            id="q-medium",
            category="Science",
            kind="question",
            difficulty="MEDIUM",
            text="Chemical symbol for sodium?",
            choices=["Na", "So"],
            correct_answer="Na",
        ),
        Prompt(
            id="q-hard",
            category="Science",
            kind="question",
            difficulty="HARD",
            text="How many bones in an adult human?",
            choices=["206", "216"],
            correct_answer="206",
        ),
        Prompt(
            id="d-easy",
            category="Party",
            kind="dare",
            difficulty="EASY",
            text="Sing a chorus.",
        ),
        Prompt(
            id="d-hard",
            category="Party",
            kind="dare",
            difficulty="HARD",
            text="Make the other team balance a book for a minute.",
            challenge_opponent=True,
        ),
    ]


@pytest.fixture
def provider(prompts: list[Prompt]) -> InMemoryContentProvider:
    return InMemoryContentProvider(prompts, rng=random.Random(7))


@pytest.fixture
def selector(provider: InMemoryContentProvider) -> PromptSelector:
    return PromptSelector(provider, rng=random.Random(7))


@pytest.fixture
def team_a() -> Team:
    return Team(name="Lions", color="#FF5733", members=[TeamMember(name="Ana")])


@pytest.fixture
def team_b() -> Team:
    return Team(name="Tigers", color="#33FF57", members=[TeamMember(name="Ben")])


@pytest.fixture
def match(team_a: Team, team_b: Team) -> Match:
    return Match(game_code="123456", team_a=team_a, team_b=team_b, total_rounds=3)


@pytest.fixture
def timer(sink: Callable[[str, Any], None], scheduler: ManualScheduler) -> MatchTimer:
    return MatchTimer(sink, scheduler)


@pytest.fixture
def finished() -> list[Match]:
    """Matches reported through the on_finished callback."""
    return []


@pytest.fixture
def machine(
    match: Match, selector: PromptSelector, timer: MatchTimer, finished: list[Match]
) -> MatchStateMachine:
    return MatchStateMachine(
        match, MatchRules(), selector, timer, on_finished=finished.append
    )


@pytest.fixture
def manager(
    provider: InMemoryContentProvider,
    sink: Callable[[str, Any], None],
    scheduler: ManualScheduler,
) -> TournamentManager:
    return TournamentManager(
        provider, GameConfig(), sink=sink, scheduler=scheduler, rng=random.Random(3)
    )


# =============================================================================
# PYTEST CONFIGURATION HOOKS
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
    config.addinivalue_line("markers", "unit: marks tests as unit tests")
