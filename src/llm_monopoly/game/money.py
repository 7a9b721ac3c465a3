"""
Money management and event logging.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class EventType(Enum):
    """Types of game events."""

    GAME_START = "game_start"
    TURN_START = "turn_start"
    DICE_ROLL = "dice_roll"
    MOVE = "move"
    PASS_GO = "pass_go"
    LAND = "land"

    PURCHASE = "purchase"
    PURCHASE_DECLINED = "purchase_declined"
    AUCTION_START = "auction_start"
    AUCTION_BID = "auction_bid"
    AUCTION_PASS = "auction_pass"
    AUCTION_EXIT = "auction_exit"
    AUCTION_END = "auction_end"

    RENT_PAYMENT = "rent_payment"
    TAX_PAYMENT = "tax_payment"

    BUILD = "build"
    SELL_BUILDING = "sell_building"

    MORTGAGE = "mortgage"
    UNMORTGAGE = "unmortgage"

    GO_TO_JAIL = "go_to_jail"
    JAIL_ATTEMPT = "jail_attempt"
    JAIL_RELEASE = "jail_release"

    TRADE_PROPOSED = "trade_proposed"
    TRADE_ACCEPTED = "trade_accepted"
    TRADE_REJECTED = "trade_rejected"

    GAME_END = "game_end"


@dataclass
class GameEvent:
    """A logged event in the game."""

    event_type: EventType
    player_id: Optional[int] = None
    details: Dict[str, Any] = field(default_factory=dict)

    def __repr__(self) -> str:
        player_str = f"P{self.player_id}" if self.player_id is not None else "System"
        return f"[{player_str}] {self.event_type.value}: {self.details}"


class EventLog:
    """Manages the game event log."""

    def __init__(self):
        self.events: List[GameEvent] = []

    def log(self, event_type: EventType, player_id: Optional[int] = None, **details: Any) -> None:
        """Log a game event."""
        self.events.append(GameEvent(event_type, player_id, details))

    def of_type(self, event_type: EventType) -> List[GameEvent]:
        return [e for e in self.events if e.event_type == event_type]


class Bank:
    """
    Building supply. The bank has unlimited money but limited houses and hotels.
    """

    def __init__(self, house_limit: int = 32, hotel_limit: int = 12):
        self.houses_available = house_limit
        self.hotels_available = hotel_limit

    def take_building(self, current_level: int) -> bool:
        """
        Hand out the next building for a square at ``current_level``.

        Level 4 -> hotel returns four houses to the supply.
        """
        if current_level == 4:
            if self.hotels_available == 0:
                return False
            self.hotels_available -= 1
            self.houses_available += 4
            return True
        if self.houses_available == 0:
            return False
        self.houses_available -= 1
        return True

    def return_building(self, current_level: int) -> bool:
        """
        Take back the top building from a square at ``current_level``.

        Breaking a hotel down needs four houses from the supply.
        """
        if current_level == 5:
            if self.houses_available < 4:
                return False
            self.hotels_available += 1
            self.houses_available -= 4
            return True
        self.houses_available += 1
        return True
