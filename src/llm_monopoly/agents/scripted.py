"""Deterministic decision client with a greedy policy."""

import random
from collections import deque
from typing import AbstractSet, Iterable, List, Optional, Sequence, Tuple, Union

from llm_monopoly.agents.base import DecisionClient
from llm_monopoly.agents.tools import ToolSpec
from llm_monopoly.turn.actions import CONTINUATION_ACTIONS, Action, ActionName
from llm_monopoly.turn.snapshot import GameStateSnapshot

# Cash kept back when deciding to build
BUILD_RESERVE = 200


class ScriptedDecisionClient(DecisionClient):
    """
    Offline decision client.

    Replays a script of actions first, then falls back to a simple greedy
    policy: buy unless the price is a large share of cash, build on
    monopolies once the dice are rolled, reject all trades, and bid in
    small steps up to half of its cash.

    Every request is recorded in `requests` so callers can inspect what
    was asked.
    """

    def __init__(self, script: Iterable[Union[Action, ActionName, str]] = (), seed: Optional[int] = None):
        self.script = deque(self._coerce(item) for item in script)
        self.rng = random.Random(seed)
        self.requests: List[Tuple[GameStateSnapshot, AbstractSet[ActionName]]] = []
        self._last_choice: Optional[ActionName] = None

    @staticmethod
    def _coerce(item: Union[Action, ActionName, str]) -> Union[Action, str]:
        if isinstance(item, Action):
            return item
        if isinstance(item, ActionName):
            return Action(item)
        # Raw names are resolved at request time so unknown names surface as decision errors
        return item

    def push(self, *items: Union[Action, ActionName, str]) -> None:
        self.script.extend(self._coerce(item) for item in items)

    async def request_decision(
        self,
        snapshot: GameStateSnapshot,
        legal_actions: AbstractSet[ActionName],
        catalogue: Sequence[ToolSpec],
    ) -> Action:
        self.requests.append((snapshot, frozenset(legal_actions)))
        if self.script:
            item = self.script.popleft()
            action = item if isinstance(item, Action) else Action(ActionName.parse(item))
        else:
            action = self.choose(snapshot, legal_actions)
        self._last_choice = action.name
        return action

    def choose(self, snapshot: GameStateSnapshot, legal: AbstractSet[ActionName]) -> Action:
        """
        Choose action with simple greedy strategy.

        Priority order:
        1. Answer trade offers and auctions
        2. Progress the turn right after a management action
        3. Buy properties (unless too expensive)
        4. Get out of jail when forced
        5. Build houses after rolling
        6. Roll dice, then end turn
        """
        me = snapshot.me

        if ActionName.TRADE_RESPOND in legal:
            return Action(ActionName.TRADE_RESPOND, {"accept": False})

        if ActionName.BID in legal or ActionName.PASS_BID in legal:
            return self._auction_move(snapshot, legal)

        if self._last_choice in CONTINUATION_ACTIONS:
            for name in (ActionName.ROLL, ActionName.END_TURN):
                if name in legal:
                    return Action(name)

        if ActionName.BUY in legal and ActionName.DECLINE_BUY in legal:
            price = snapshot.current_square.price
            if me.cash <= 0 or price > me.cash:
                return Action(ActionName.DECLINE_BUY)
            price_ratio = price / me.cash
            # Decline if property costs more than 40% of cash
            if price_ratio > 0.4:
                return Action(ActionName.DECLINE_BUY)
            # For moderately expensive properties, randomly decline 30% of the time
            if price_ratio > 0.2 and self.rng.random() < 0.3:
                return Action(ActionName.DECLINE_BUY)
            return Action(ActionName.BUY)

        if me.in_jail:
            if ActionName.JAIL_CARD in legal:
                return Action(ActionName.JAIL_CARD)
            if ActionName.PAY_FINE in legal and ActionName.ROLL not in legal:
                return Action(ActionName.PAY_FINE)

        if ActionName.BUILD in legal and snapshot.dice_rolled:
            target = self._build_target(snapshot)
            if target is not None:
                return Action(ActionName.BUILD, {"square_index": target})

        for name in (ActionName.ROLL, ActionName.END_TURN, ActionName.PAY_FINE):
            if name in legal:
                return Action(name)

        return Action(sorted(legal, key=lambda n: n.value)[0]) if legal else Action(ActionName.END_TURN)

    def _auction_move(self, snapshot: GameStateSnapshot, legal: AbstractSet[ActionName]) -> Action:
        auction = snapshot.auction
        current_bid = auction.current_bid if auction is not None else 0
        list_price = auction.square.price if auction is not None else 0
        max_bid = min(snapshot.me.cash // 2, list_price)

        if ActionName.BID in legal and current_bid + 10 <= max_bid:
            return Action(ActionName.BID, {"amount": current_bid + 10})
        if snapshot.me.cash <= current_bid and ActionName.EXIT_AUCTION in legal:
            return Action(ActionName.EXIT_AUCTION)
        return Action(ActionName.PASS_BID)

    def _build_target(self, snapshot: GameStateSnapshot) -> Optional[int]:
        """Lowest-built street in a buildable group that leaves a cash reserve."""
        me = snapshot.me
        candidates = []
        for group in me.buildable_groups:
            squares = me.properties_by_group.get(group, ())
            if not squares:
                continue
            level = min(s.buildings for s in squares)
            for square in squares:
                if square.buildings == level and level < 5 and me.cash - square.building_cost >= BUILD_RESERVE:
                    candidates.append((level, square.index))
        if not candidates:
            return None
        return min(candidates)[1]
