"""
Table-level game loop.

Seats one `TurnOrchestrator` per player over a shared engine and turn
history, plays turns in order, and settles auctions and trade offers by
calling the affected players' entry points.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from llm_monopoly.agents.base import DecisionClient
from llm_monopoly.game.game import GameState
from llm_monopoly.settings import TurnSettings, get_turn_settings
from llm_monopoly.turn.engine import MonopolyEngine
from llm_monopoly.turn.history import TurnHistory
from llm_monopoly.turn.orchestrator import DecisionGuard, Notice, TurnOrchestrator

logger = logging.getLogger(__name__)

# Safety limits to prevent infinite loops in case of bugs
MAX_INTERRUPTS_PER_TURN = 16
MAX_AUCTION_DECISIONS = 200


@dataclass(frozen=True)
class Standing:
    player_id: int
    name: str
    cash: int
    net_worth: int
    properties: int


class GameSession:
    """
    Runs a full game between decision clients.

    Attributes:
        game: The engine being played.
        history: Turn history shared by every seat.
        guard: In-flight guard shared by every seat.
        orchestrators: One orchestrator per player id.
    """

    def __init__(
        self,
        game: GameState,
        clients: Dict[int, DecisionClient],
        settings: Optional[TurnSettings] = None,
        observer: Optional[Callable[[Notice], None]] = None,
    ):
        missing = set(game.players) - set(clients)
        if missing:
            raise ValueError(f"No decision client for players {sorted(missing)}")

        self.game = game
        self.settings = settings or get_turn_settings()
        self.history = TurnHistory(self.settings.history_capacity)
        self.guard = DecisionGuard()
        self.orchestrators: Dict[int, TurnOrchestrator] = {
            pid: TurnOrchestrator(
                MonopolyEngine(game, pid),
                clients[pid],
                history=self.history,
                settings=self.settings,
                observer=observer,
                guard=self.guard,
            )
            for pid in sorted(game.players)
        }

    async def play(self, max_turns: Optional[int] = None) -> List[Standing]:
        """Play until the game ends or `max_turns` turns have passed."""
        if max_turns is not None:
            self.game.config.time_limit_turns = max_turns

        while not self.game.game_over:
            await self.play_turn()
            if max_turns is not None and self.game.turn_number >= max_turns:
                break

        return self.standings()

    async def play_turn(self) -> None:
        """Play the current player's turn, settling any auction or trade it opens."""
        player_id = self.game.get_current_player().player_id
        orchestrator = self.orchestrators[player_id]
        turn = self.game.turn_number

        for _ in range(MAX_INTERRUPTS_PER_TURN):
            await orchestrator.run_turn()

            if self.game.active_auction is not None:
                await self.settle_auction()
                continue
            if self.game.trade_manager.pending():
                await self.settle_trades()

            if self.game.game_over or self.game.turn_number != turn:
                return

        logger.warning("Player %s hit the interrupt limit, forcing end turn", player_id)
        orchestrator.dispatcher.force_end_turn("interrupt limit reached")

    async def settle_auction(self) -> None:
        """Rotate bidding decisions across active bidders until the auction closes."""
        auction = self.game.active_auction
        last_bidder: Optional[int] = None

        for _ in range(MAX_AUCTION_DECISIONS):
            if self.game.active_auction is not auction or auction.is_complete:
                return
            bidder = auction.next_bidder(after=last_bidder)
            if bidder is None:
                break
            amount = await self.orchestrators[bidder].bid(auction.property_position, auction.current_bid)
            logger.debug("Player %s auction decision: %s", bidder, amount)
            last_bidder = bidder

        if self.game.active_auction is auction:
            logger.warning("Auction for %s did not settle, closing it", auction.property_name)
            for pid in sorted(auction.active_bidders - {auction.high_bidder}):
                self.game.exit_auction(pid)

    async def settle_trades(self) -> None:
        """Ask each recipient to answer the offers addressed to them."""
        for trade in self.game.trade_manager.pending():
            await self.orchestrators[trade.recipient_id].respond_to_trade()
            if trade.is_pending:
                logger.warning("Trade %s was not answered, rejecting it", trade.trade_id)
                self.game.respond_to_trade(trade.recipient_id, accept=False)

    def standings(self) -> List[Standing]:
        """Players ordered by net worth, richest first."""
        rows = [
            Standing(
                player_id=p.player_id,
                name=p.name,
                cash=p.cash,
                net_worth=self.game.net_worth(p.player_id),
                properties=len(p.properties),
            )
            for p in self.game.players.values()
        ]
        return sorted(rows, key=lambda s: s.net_worth, reverse=True)

    async def aclose(self) -> None:
        for orchestrator in self.orchestrators.values():
            await orchestrator.aclose()
