"""
Action vocabulary shared by the resolver, dispatcher, and decision clients.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from llm_monopoly.exceptions import UnknownActionError


class ActionName(str, Enum):
    """Fixed catalogue of actions an actor can take."""

    ROLL = "roll"
    BUY = "buy"
    DECLINE_BUY = "decline_buy"
    END_TURN = "end_turn"
    JAIL_CARD = "jail_card"
    PAY_FINE = "pay_fine"
    BUILD = "build"
    SELL_BUILDING = "sell_building"
    MORTGAGE = "mortgage"
    UNMORTGAGE = "unmortgage"
    TRADE_INITIATE = "trade_initiate"
    TRADE_RESPOND = "trade_respond"
    BID = "bid"
    PASS_BID = "pass_bid"
    EXIT_AUCTION = "exit_auction"

    @classmethod
    def parse(cls, raw: str) -> "ActionName":
        """
        Resolve a name as written by an oracle.

        Accepts the canonical value in any case, hyphenated or snake_case,
        and the camelCase tool names used by earlier prompt versions.

        Raises:
            UnknownActionError: if the name is not in the catalogue.
        """
        if not isinstance(raw, str) or not raw.strip():
            raise UnknownActionError(str(raw))

        text = raw.strip()
        if text in _LEGACY_NAMES:
            return _LEGACY_NAMES[text]

        # rollDice -> roll_dice, end-turn -> end_turn
        normalized = re.sub(r"(?<=[a-z0-9])([A-Z])", r"_\1", text).replace("-", "_").lower()
        try:
            return cls(normalized)
        except ValueError:
            pass
        if normalized in _LEGACY_NAMES:
            return _LEGACY_NAMES[normalized]
        raise UnknownActionError(raw)


_LEGACY_NAMES: Dict[str, ActionName] = {
    "rollDice": ActionName.ROLL,
    "roll_dice": ActionName.ROLL,
    "buyProperty": ActionName.BUY,
    "buy_property": ActionName.BUY,
    "declineBuyProperty": ActionName.DECLINE_BUY,
    "decline_buy_property": ActionName.DECLINE_BUY,
    "endTurn": ActionName.END_TURN,
    "useJailCard": ActionName.JAIL_CARD,
    "use_jail_card": ActionName.JAIL_CARD,
    "payJailFine": ActionName.PAY_FINE,
    "pay_jail_fine": ActionName.PAY_FINE,
    "buyHouse": ActionName.BUILD,
    "buy_house": ActionName.BUILD,
    "sellHouse": ActionName.SELL_BUILDING,
    "sell_house": ActionName.SELL_BUILDING,
    "initiateTrade": ActionName.TRADE_INITIATE,
    "initiate_trade": ActionName.TRADE_INITIATE,
    "respondToTrade": ActionName.TRADE_RESPOND,
    "respond_to_trade": ActionName.TRADE_RESPOND,
    "placeBid": ActionName.BID,
    "place_bid": ActionName.BID,
    "passBid": ActionName.PASS_BID,
    "exitAuction": ActionName.EXIT_AUCTION,
}


# Actions that advance the turn state machine past its current phase.
TURN_PROGRESSION = frozenset({ActionName.ROLL, ActionName.END_TURN})

# Successful actions after which the orchestrator may need another decision.
CONTINUATION_ACTIONS = frozenset(
    {
        ActionName.BUY,
        ActionName.DECLINE_BUY,
        ActionName.BUILD,
        ActionName.SELL_BUILDING,
        ActionName.MORTGAGE,
        ActionName.UNMORTGAGE,
        ActionName.PAY_FINE,
        ActionName.JAIL_CARD,
    }
)

SQUARE_ACTIONS = frozenset(
    {
        ActionName.BUILD,
        ActionName.SELL_BUILDING,
        ActionName.MORTGAGE,
        ActionName.UNMORTGAGE,
    }
)

AUCTION_ACTIONS = frozenset({ActionName.BID, ActionName.PASS_BID, ActionName.EXIT_AUCTION})


@dataclass(frozen=True)
class Action:
    """A proposed action with its action-specific arguments."""

    name: ActionName
    args: Mapping[str, Any] = field(default_factory=dict)
    rationale: Optional[str] = field(default=None, compare=False)

    def __repr__(self) -> str:
        return f"Action({self.name.value}, {dict(self.args)})"


@dataclass(frozen=True)
class ActionOutcome:
    """Result of dispatching an action."""

    action: Action
    applied: bool
    reason: Optional[str] = None

    @classmethod
    def success(cls, action: Action) -> "ActionOutcome":
        return cls(action, True)

    @classmethod
    def rejected(cls, action: Action, reason: str) -> "ActionOutcome":
        return cls(action, False, reason)
