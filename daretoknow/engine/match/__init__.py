"""Match gameplay: phase machine, scoring rules and timer."""

from .scoring import dare_delta, round_delta, truth_delta
from .state_machine import MatchRules, MatchStateMachine
from .timer import TIMER_END, TIMER_UPDATE, LoopScheduler, MatchTimer, Scheduler

__all__ = [
    "dare_delta",
    "round_delta",
    "truth_delta",
    "MatchRules",
    "MatchStateMachine",
    "TIMER_END",
    "TIMER_UPDATE",
    "LoopScheduler",
    "MatchTimer",
    "Scheduler",
]
