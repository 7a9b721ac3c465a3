"""
Engine collaborator boundary.

The turn core never touches game state directly; it reads it through
`capture()` and mutates it only through the operations below, each of
which reports success as a boolean.
"""

import logging
from typing import Protocol, Sequence

from llm_monopoly.game.game import GameState
from llm_monopoly.turn.state import EngineState, capture_engine_state

logger = logging.getLogger(__name__)


class GameEngine(Protocol):
    """Operations the turn core may invoke on behalf of one actor."""

    actor_id: int

    def capture(self) -> EngineState: ...

    def roll(self) -> bool: ...

    def end_turn(self) -> bool: ...

    def buy_property(self) -> bool: ...

    def decline_buy_property(self) -> bool: ...

    def build(self, square_index: int) -> bool: ...

    def sell_building(self, square_index: int) -> bool: ...

    def mortgage(self, square_index: int) -> bool: ...

    def unmortgage(self, square_index: int) -> bool: ...

    def use_jail_card(self) -> bool: ...

    def pay_jail_fine(self) -> bool: ...

    def initiate_trade(
        self,
        recipient_index: int,
        offered_squares: Sequence[int],
        requested_squares: Sequence[int],
        offered_money: int,
        requested_money: int,
    ) -> bool: ...

    def respond_to_trade(self, accept: bool) -> bool: ...

    def place_bid(self, amount: int) -> bool: ...

    def pass_bid(self) -> bool: ...

    def exit_auction(self) -> bool: ...


class MonopolyEngine:
    """`GameEngine` over the bundled `GameState` for one seated actor."""

    def __init__(self, game: GameState, actor_id: int):
        if actor_id not in game.players:
            raise ValueError(f"Unknown player {actor_id}")
        self.game = game
        self.actor_id = actor_id

    def capture(self) -> EngineState:
        return capture_engine_state(self.game, self.actor_id)

    def roll(self) -> bool:
        return self.game.roll(self.actor_id) is not None

    def end_turn(self) -> bool:
        if not self.game.is_current(self.actor_id):
            return False
        self.game.end_turn()
        return True

    def buy_property(self) -> bool:
        return self.game.buy_property(self.actor_id)

    def decline_buy_property(self) -> bool:
        return self.game.decline_purchase(self.actor_id)

    def build(self, square_index: int) -> bool:
        return self.game.build(self.actor_id, square_index)

    def sell_building(self, square_index: int) -> bool:
        return self.game.sell_building(self.actor_id, square_index)

    def mortgage(self, square_index: int) -> bool:
        return self.game.mortgage_property(self.actor_id, square_index)

    def unmortgage(self, square_index: int) -> bool:
        return self.game.unmortgage_property(self.actor_id, square_index)

    def use_jail_card(self) -> bool:
        return self.game.use_jail_card(self.actor_id)

    def pay_jail_fine(self) -> bool:
        return self.game.pay_jail_fine(self.actor_id)

    def initiate_trade(
        self,
        recipient_index: int,
        offered_squares: Sequence[int],
        requested_squares: Sequence[int],
        offered_money: int,
        requested_money: int,
    ) -> bool:
        trade = self.game.propose_trade(
            self.actor_id,
            recipient_index,
            offered_squares,
            requested_squares,
            offered_cash=offered_money,
            requested_cash=requested_money,
        )
        if trade is None:
            logger.debug("Trade from %s to %s rejected by engine", self.actor_id, recipient_index)
        return trade is not None

    def respond_to_trade(self, accept: bool) -> bool:
        return self.game.respond_to_trade(self.actor_id, accept)

    def place_bid(self, amount: int) -> bool:
        return self.game.place_bid(self.actor_id, amount)

    def pass_bid(self) -> bool:
        return self.game.pass_bid(self.actor_id)

    def exit_auction(self) -> bool:
        return self.game.exit_auction(self.actor_id)
