"""
Turn orchestration.

The orchestrator asks a decision client for actions and feeds them to the
dispatcher until the turn no longer needs a progression decision. Every
engine callback point (before rolling, on landing, when posting bail,
when bidding, when answering a trade) is a fresh entry into the same
bounded cycle.
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Deque, List, Optional

from llm_monopoly.agents.base import DecisionClient
from llm_monopoly.agents.tools import get_catalogue
from llm_monopoly.exceptions import DecisionError, DecisionInFlightError, OracleTransportError
from llm_monopoly.settings import TurnSettings, get_turn_settings
from llm_monopoly.turn.actions import (
    CONTINUATION_ACTIONS,
    TURN_PROGRESSION,
    Action,
    ActionName,
    ActionOutcome,
)
from llm_monopoly.turn.dispatcher import ActionDispatcher
from llm_monopoly.turn.engine import GameEngine
from llm_monopoly.turn.history import TurnHistory
from llm_monopoly.turn.resolver import resolve
from llm_monopoly.turn.snapshot import build_snapshot
from llm_monopoly.turn.state import EngineState

logger = logging.getLogger(__name__)


class Entry(str, Enum):
    """Engine callback points that start a decision cycle."""

    BEFORE_TURN = "before_turn"
    ON_LAND = "on_land"
    POST_BAIL = "post_bail"
    BID = "bid"
    TRADE_RESPONSE = "trade_response"


@dataclass(frozen=True)
class Notice:
    """Non-fatal event surfaced to observers."""

    kind: str
    actor: int
    message: str


class DecisionGuard:
    """
    In-flight flag for decision requests.

    A table shares one guard across all seats so that at most one decision
    is outstanding at a time, whichever actor it belongs to.
    """

    def __init__(self):
        self.holder: Optional[int] = None

    @property
    def busy(self) -> bool:
        return self.holder is not None


@dataclass
class CycleReport:
    """What happened during one decision cycle."""

    entry: Entry
    outcomes: List[ActionOutcome] = field(default_factory=list)
    decisions_requested: int = 0
    fallback_reason: Optional[str] = None

    @property
    def applied(self) -> List[ActionOutcome]:
        return [o for o in self.outcomes if o.applied]

    @property
    def last_applied(self) -> Optional[ActionOutcome]:
        applied = self.applied
        return applied[-1] if applied else None


class TurnOrchestrator:
    """
    Drives decisions for one actor.

    Attributes:
        engine: Engine collaborator seated for the actor.
        client: Decision client that proposes actions.
        history: Shared turn history ring buffer.
        action_queue: Pre-planned actions, consumed FIFO before asking the client.
    """

    def __init__(
        self,
        engine: GameEngine,
        client: DecisionClient,
        history: Optional[TurnHistory] = None,
        settings: Optional[TurnSettings] = None,
        observer: Optional[Callable[[Notice], None]] = None,
        guard: Optional[DecisionGuard] = None,
    ):
        self.engine = engine
        self.client = client
        self.settings = settings or get_turn_settings()
        self.history = history if history is not None else TurnHistory(self.settings.history_capacity)
        self.dispatcher = ActionDispatcher(engine, self.history)
        self.observer = observer
        self.action_queue: Deque[Action] = deque()
        self.guard = guard if guard is not None else DecisionGuard()

    @property
    def actor_id(self) -> int:
        return self.engine.actor_id

    @property
    def busy(self) -> bool:
        return self.guard.busy

    def enqueue(self, *actions: Action) -> None:
        self.action_queue.extend(actions)

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    async def before_turn(self) -> CycleReport:
        return await self.run_cycle(Entry.BEFORE_TURN)

    async def on_land(self) -> CycleReport:
        return await self.run_cycle(Entry.ON_LAND)

    async def post_bail(self) -> CycleReport:
        return await self.run_cycle(Entry.POST_BAIL)

    async def respond_to_trade(self) -> CycleReport:
        return await self.run_cycle(Entry.TRADE_RESPONSE)

    async def bid(self, square_index: Optional[int] = None, current_bid: Optional[int] = None) -> int:
        """
        Take one bidding decision.

        Returns:
            The amount bid, 0 for a pass, or -1 for leaving the auction
        """
        logger.debug(
            "Player %s bidding on square %s at $%s", self.actor_id, square_index, current_bid
        )
        report = await self.run_cycle(Entry.BID)
        outcome = report.last_applied
        if outcome is None:
            return 0
        if outcome.action.name == ActionName.BID:
            return int(outcome.action.args["amount"])
        if outcome.action.name == ActionName.EXIT_AUCTION:
            return -1
        return 0

    async def run_turn(self) -> List[CycleReport]:
        """
        Play this actor's turn across callback points.

        Stops when the turn passes to someone else, when an auction or
        trade offer needs other actors, or when the cycle limit is hit
        (the turn is then ended by force).
        """
        reports: List[CycleReport] = []
        for _ in range(self.settings.max_cycles_per_turn):
            state = self.engine.capture()
            if state.game_over or not state.is_my_turn or self._interrupted(state):
                return reports
            reports.append(await self.run_cycle(self._entry_for(state)))

        state = self.engine.capture()
        if state.is_my_turn and not state.game_over and not self._interrupted(state):
            report = CycleReport(Entry.ON_LAND)
            self._fallback(report, "turn cycle limit reached")
            reports.append(report)
        return reports

    @staticmethod
    def _entry_for(state: EngineState) -> Entry:
        if state.dice_rolled:
            return Entry.ON_LAND
        if state.in_jail:
            return Entry.POST_BAIL
        return Entry.BEFORE_TURN

    @staticmethod
    def _interrupted(state: EngineState) -> bool:
        return state.auction is not None or state.pending_trade is not None

    # ------------------------------------------------------------------
    # Decision cycle
    # ------------------------------------------------------------------

    async def run_cycle(self, entry: Entry) -> CycleReport:
        """
        One bounded decide/dispatch loop.

        Raises:
            DecisionInFlightError: if a decision is already outstanding.
        """
        if self.guard.busy:
            raise DecisionInFlightError(
                f"Player {self.actor_id} cannot decide while player {self.guard.holder} has a decision in flight"
            )

        report = CycleReport(entry)
        self.guard.holder = self.actor_id
        try:
            await self._cycle(report)
        finally:
            self.guard.holder = None
        return report

    async def _cycle(self, report: CycleReport) -> None:
        follow_up = False
        for _ in range(self.settings.max_iterations):
            state = self.engine.capture()
            legal = resolve(state)
            if not legal:
                return

            queued = bool(self.action_queue)
            try:
                action = await self._next_action(state, legal, report)
            except DecisionError as exc:
                kind = "transport_error" if isinstance(exc, OracleTransportError) else "protocol_error"
                self._notify(kind, str(exc))
                self._fallback(report, f"decision failed: {exc}")
                return
            except Exception as exc:
                logger.exception("Player %s decision client crashed", self.actor_id)
                self._notify("protocol_error", f"{type(exc).__name__}: {exc}")
                self._fallback(report, f"decision failed: {type(exc).__name__}")
                return

            if not queued:
                if action.name not in legal:
                    self._notify("protocol_error", f"{action.name.value} is not legal now")
                    self._fallback(report, f"illegal action {action.name.value}")
                    return
                if follow_up and action.name not in TURN_PROGRESSION:
                    self._notify("protocol_error", f"expected roll or end_turn, got {action.name.value}")
                    self._fallback(report, f"unexpected follow-up {action.name.value}")
                    return

            outcome = self.dispatcher.dispatch(action)
            report.outcomes.append(outcome)
            if not outcome.applied:
                self._on_rejected(report, outcome)
                return

            if action.name not in CONTINUATION_ACTIONS:
                return
            if not resolve(self.engine.capture()) & TURN_PROGRESSION:
                return
            follow_up = True

        self._fallback(report, "iteration limit reached")

    async def _next_action(self, state: EngineState, legal, report: CycleReport) -> Action:
        if self.action_queue:
            action = self.action_queue.popleft()
            logger.debug("Player %s using queued action %s", self.actor_id, action)
            return action

        snapshot = build_snapshot(state, self.history.entries(), self.settings.history_exposed)
        report.decisions_requested += 1
        action = await self.client.request_decision(snapshot, legal, get_catalogue())
        if action.rationale:
            self._notify("rationale", action.rationale)
        logger.info("Player %s chose %s", self.actor_id, action)
        return action

    def _on_rejected(self, report: CycleReport, outcome: ActionOutcome) -> None:
        """A failed dispatch ends the cycle; auctions and trade offers still need an answer."""
        if report.entry in (Entry.BID, Entry.TRADE_RESPONSE):
            self._fallback(report, f"{outcome.action.name.value} rejected: {outcome.reason}")

    def _fallback(self, report: CycleReport, reason: str) -> None:
        """Apply the safe action for the entry point."""
        report.fallback_reason = reason
        logger.warning("Player %s fallback (%s): %s", self.actor_id, report.entry.value, reason)

        if report.entry == Entry.BID:
            for name in (ActionName.PASS_BID, ActionName.EXIT_AUCTION):
                outcome = self.dispatcher.dispatch(Action(name))
                report.outcomes.append(outcome)
                if outcome.applied:
                    return
            return

        if report.entry == Entry.TRADE_RESPONSE:
            report.outcomes.append(
                self.dispatcher.dispatch(Action(ActionName.TRADE_RESPOND, {"accept": False}))
            )
            return

        report.outcomes.append(self.dispatcher.force_end_turn(reason))

    def _notify(self, kind: str, message: str) -> None:
        if kind != "rationale":
            logger.warning("Player %s %s: %s", self.actor_id, kind, message)
        if self.observer is None:
            return
        try:
            self.observer(Notice(kind, self.actor_id, message))
        except Exception as exc:
            logger.error("Observer error: %s", exc)

    async def aclose(self) -> None:
        await self.client.aclose()
