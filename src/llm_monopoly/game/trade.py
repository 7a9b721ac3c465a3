"""
Trade offers between players.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from llm_monopoly.game.money import EventLog, EventType


@dataclass
class TradeOffer:
    """Items one side puts on the table."""

    cash: int = 0
    properties: Set[int] = field(default_factory=set)

    def is_empty(self) -> bool:
        return self.cash == 0 and not self.properties

    def __repr__(self) -> str:
        items = []
        if self.cash > 0:
            items.append(f"${self.cash}")
        if self.properties:
            items.append(f"{len(self.properties)} properties")
        return " + ".join(items) if items else "nothing"


class Trade:
    """
    A proposal from one player to another.

    Trade flow:
    1. Proposer creates trade with their offer and request
    2. Recipient accepts or rejects
    3. If accepted, items are transferred atomically by the game
    """

    def __init__(
        self,
        trade_id: int,
        proposer_id: int,
        recipient_id: int,
        proposer_offer: TradeOffer,
        recipient_offer: TradeOffer,
    ):
        self.trade_id = trade_id
        self.proposer_id = proposer_id
        self.recipient_id = recipient_id
        self.proposer_offer = proposer_offer
        self.recipient_offer = recipient_offer
        self.status = "pending"

    @property
    def is_pending(self) -> bool:
        return self.status == "pending"


class TradeManager:
    """Tracks pending and settled trades."""

    def __init__(self, event_log: EventLog):
        self.event_log = event_log
        self.trades: Dict[int, Trade] = {}
        self._next_id = 1

    def create_trade(
        self,
        proposer_id: int,
        recipient_id: int,
        proposer_offer: TradeOffer,
        recipient_offer: TradeOffer,
    ) -> Trade:
        trade = Trade(self._next_id, proposer_id, recipient_id, proposer_offer, recipient_offer)
        self.trades[trade.trade_id] = trade
        self._next_id += 1
        self.event_log.log(
            EventType.TRADE_PROPOSED,
            player_id=proposer_id,
            trade_id=trade.trade_id,
            recipient=recipient_id,
            offers=repr(proposer_offer),
            requests=repr(recipient_offer),
        )
        return trade

    def pending_for(self, player_id: int) -> Optional[Trade]:
        """Oldest pending trade addressed to a player."""
        for trade in self.trades.values():
            if trade.is_pending and trade.recipient_id == player_id:
                return trade
        return None

    def pending(self) -> List[Trade]:
        return [t for t in self.trades.values() if t.is_pending]

    def close(self, trade: Trade, accepted: bool) -> None:
        trade.status = "accepted" if accepted else "rejected"
        self.event_log.log(
            EventType.TRADE_ACCEPTED if accepted else EventType.TRADE_REJECTED,
            player_id=trade.recipient_id,
            trade_id=trade.trade_id,
        )
