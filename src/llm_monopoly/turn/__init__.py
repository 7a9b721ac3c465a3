"""
Turn core: legality, dispatch, and turn history.

The decision loop lives in `llm_monopoly.turn.orchestrator`.
"""

from llm_monopoly.turn.actions import Action, ActionName, ActionOutcome
from llm_monopoly.turn.dispatcher import ActionDispatcher
from llm_monopoly.turn.engine import GameEngine, MonopolyEngine
from llm_monopoly.turn.history import TurnHistory, TurnHistoryEntry
from llm_monopoly.turn.resolver import resolve
from llm_monopoly.turn.snapshot import GameStateSnapshot, build_snapshot
from llm_monopoly.turn.state import EngineState, capture_engine_state

__all__ = [
    "Action",
    "ActionDispatcher",
    "ActionName",
    "ActionOutcome",
    "EngineState",
    "GameEngine",
    "GameStateSnapshot",
    "MonopolyEngine",
    "TurnHistory",
    "TurnHistoryEntry",
    "build_snapshot",
    "capture_engine_state",
    "resolve",
]
