"""LangGraph orchestrator package for the update-set trial loop."""

from autoupdate_bot.orchestrator.exceptions import (
    GraphBuildError,
    OrchestratorError,
    UnknownRevisionError,
)
from autoupdate_bot.orchestrator.graph import build_trial_graph
from autoupdate_bot.orchestrator.loop import DEFAULT_MAX_DURATION, LoopController
from autoupdate_bot.orchestrator.state import TrialState, make_initial_state

__all__ = [
    "DEFAULT_MAX_DURATION",
    "GraphBuildError",
    "LoopController",
    "OrchestratorError",
    "TrialState",
    "UnknownRevisionError",
    "build_trial_graph",
    "make_initial_state",
]
