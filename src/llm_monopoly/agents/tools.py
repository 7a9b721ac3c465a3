"""
Tool catalogue presented to decision clients.

One entry per `ActionName`, each with a JSON-schema parameter object in
the OpenAI function-calling format.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from llm_monopoly.turn.actions import ActionName

NO_PARAMETERS: Dict[str, Any] = {"type": "object", "properties": {}}

SQUARE_INDEX_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "square_index": {
            "type": "integer",
            "minimum": 0,
            "maximum": 39,
            "description": "The index of the property (0-39)",
        }
    },
    "required": ["square_index"],
}


@dataclass(frozen=True)
class ToolSpec:
    name: ActionName
    description: str
    parameters: Dict[str, Any] = field(default_factory=lambda: dict(NO_PARAMETERS))

    def to_openai(self) -> Dict[str, Any]:
        return {
            "type": "function",
            "function": {
                "name": self.name.value,
                "description": self.description,
                "parameters": self.parameters,
            },
        }


CATALOGUE: Dict[ActionName, ToolSpec] = {
    spec.name: spec
    for spec in (
        ToolSpec(ActionName.ROLL, "Roll the dice to move your token"),
        ToolSpec(ActionName.BUY, "Buy the property you landed on"),
        ToolSpec(ActionName.DECLINE_BUY, "Decline to buy the property you landed on; it goes to auction"),
        ToolSpec(ActionName.END_TURN, "End your turn"),
        ToolSpec(ActionName.JAIL_CARD, "Use your Get Out of Jail Free card"),
        ToolSpec(ActionName.PAY_FINE, "Pay the fine to get out of jail"),
        ToolSpec(ActionName.BUILD, "Buy a house (or a hotel on top of four houses) for a property", SQUARE_INDEX_SCHEMA),
        ToolSpec(ActionName.SELL_BUILDING, "Sell a house from a property", SQUARE_INDEX_SCHEMA),
        ToolSpec(ActionName.MORTGAGE, "Mortgage a property", SQUARE_INDEX_SCHEMA),
        ToolSpec(ActionName.UNMORTGAGE, "Unmortgage a property", SQUARE_INDEX_SCHEMA),
        ToolSpec(
            ActionName.TRADE_INITIATE,
            "Initiate a trade with another player",
            {
                "type": "object",
                "properties": {
                    "recipient_index": {
                        "type": "integer",
                        "description": "The index of the player to trade with",
                    },
                    "offered_squares": {
                        "type": "array",
                        "items": {"type": "integer", "minimum": 0, "maximum": 39},
                        "description": "Indexes of properties to offer",
                    },
                    "requested_squares": {
                        "type": "array",
                        "items": {"type": "integer", "minimum": 0, "maximum": 39},
                        "description": "Indexes of properties to request",
                    },
                    "offered_money": {"type": "integer", "minimum": 0, "description": "Amount of money to offer"},
                    "requested_money": {"type": "integer", "minimum": 0, "description": "Amount of money to request"},
                },
                "required": ["recipient_index", "offered_squares", "requested_squares"],
            },
        ),
        ToolSpec(
            ActionName.TRADE_RESPOND,
            "Accept or reject a trade offer",
            {
                "type": "object",
                "properties": {
                    "accept": {"type": "boolean", "description": "True to accept, false to reject"},
                },
                "required": ["accept"],
            },
        ),
        ToolSpec(
            ActionName.BID,
            "Place a bid in an auction",
            {
                "type": "object",
                "properties": {
                    "amount": {"type": "integer", "minimum": 1, "description": "Bid amount"},
                },
                "required": ["amount"],
            },
        ),
        ToolSpec(ActionName.PASS_BID, "Pass on bidding in this round of the auction"),
        ToolSpec(ActionName.EXIT_AUCTION, "Exit the auction entirely"),
    )
}


def get_catalogue(names: Optional[Iterable[ActionName]] = None) -> List[ToolSpec]:
    """Tool specs in catalogue order, optionally restricted to `names`."""
    if names is None:
        return list(CATALOGUE.values())
    wanted = set(names)
    return [spec for name, spec in CATALOGUE.items() if name in wanted]


def to_openai_tools(catalogue: Iterable[ToolSpec]) -> List[Dict[str, Any]]:
    return [spec.to_openai() for spec in catalogue]
