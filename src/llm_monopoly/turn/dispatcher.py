"""
Validates proposed actions and applies them through the engine.
"""

import logging
import re
from typing import Any, Callable, Dict, List, Mapping, Optional

from llm_monopoly.exceptions import ValidationError
from llm_monopoly.game.board import BOARD_SIZE
from llm_monopoly.turn.actions import SQUARE_ACTIONS, Action, ActionName, ActionOutcome
from llm_monopoly.turn.engine import GameEngine
from llm_monopoly.turn.history import TurnHistory
from llm_monopoly.turn.resolver import resolve
from llm_monopoly.turn.state import EngineState

logger = logging.getLogger(__name__)

INTEGER_PATTERN = re.compile(r"-?[0-9]+")


def _as_int(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and INTEGER_PATTERN.fullmatch(value.strip()):
        return int(value.strip())
    raise ValidationError(f"{field} must be an integer, got {value!r}")


def _square_index(value: Any, field: str = "square_index") -> int:
    index = _as_int(value, field)
    if not 0 <= index < BOARD_SIZE:
        raise ValidationError(f"{field} {index} is outside the board")
    return index


def _square_list(value: Any, field: str) -> List[int]:
    if value is None:
        return []
    if not isinstance(value, (list, tuple, set, frozenset)):
        raise ValidationError(f"{field} must be a list of square indices")
    return sorted({_square_index(item, field) for item in value})


def _money(args: Mapping[str, Any], field: str) -> int:
    value = args.get(field)
    if value is None:
        return 0
    amount = _as_int(value, field)
    if amount < 0:
        raise ValidationError(f"{field} cannot be negative")
    return amount


class ActionDispatcher:
    """
    Applies actions for one actor.

    Every dispatch captures the engine state afresh and re-resolves the
    legal set before touching the engine. An action outside that set, or
    with bad arguments, is rejected without any engine call.
    """

    def __init__(self, engine: GameEngine, history: TurnHistory):
        self.engine = engine
        self.history = history
        self._handlers: Dict[ActionName, Callable[..., bool]] = {
            ActionName.ROLL: engine.roll,
            ActionName.BUY: engine.buy_property,
            ActionName.DECLINE_BUY: engine.decline_buy_property,
            ActionName.END_TURN: engine.end_turn,
            ActionName.JAIL_CARD: engine.use_jail_card,
            ActionName.PAY_FINE: engine.pay_jail_fine,
            ActionName.BUILD: engine.build,
            ActionName.SELL_BUILDING: engine.sell_building,
            ActionName.MORTGAGE: engine.mortgage,
            ActionName.UNMORTGAGE: engine.unmortgage,
            ActionName.TRADE_INITIATE: engine.initiate_trade,
            ActionName.TRADE_RESPOND: engine.respond_to_trade,
            ActionName.BID: engine.place_bid,
            ActionName.PASS_BID: engine.pass_bid,
            ActionName.EXIT_AUCTION: engine.exit_auction,
        }
        missing = set(ActionName) - set(self._handlers)
        if missing:
            raise TypeError(f"No handler for {sorted(m.value for m in missing)}")

    def dispatch(self, action: Action) -> ActionOutcome:
        """
        Validate and apply an action.

        Returns:
            ActionOutcome with applied=True only when the engine reported success
        """
        state = self.engine.capture()
        legal = resolve(state)
        if action.name not in legal:
            logger.info(
                "Rejected %s for player %s: not legal (legal: %s)",
                action.name.value,
                state.actor,
                sorted(a.value for a in legal),
            )
            return ActionOutcome.rejected(action, "not legal")

        try:
            kwargs = self._validate(action, state)
        except ValidationError as exc:
            logger.warning("Rejected %s for player %s: %s", action.name.value, state.actor, exc)
            return ActionOutcome.rejected(action, str(exc))

        if not self._handlers[action.name](**kwargs):
            logger.info("Engine refused %s for player %s", action.name.value, state.actor)
            return ActionOutcome.rejected(action, "engine refused")

        self._record(state, self._summarize(action, state, kwargs))
        return ActionOutcome.success(action)

    def force_end_turn(self, reason: Optional[str] = None) -> ActionOutcome:
        """
        End the turn without consulting the legal set.

        Only the turn actor can be forced; anyone else gets applied=False.
        """
        action = Action(ActionName.END_TURN)
        state = self.engine.capture()
        if not state.is_my_turn or state.game_over:
            return ActionOutcome.rejected(action, "not this actor's turn")

        if not self.engine.end_turn():
            return ActionOutcome.rejected(action, "engine refused")

        summary = "Ended turn (forced)"
        if reason:
            summary += f": {reason}"
        self._record(state, summary)
        return ActionOutcome(action, True, reason)

    def _record(self, state: EngineState, summary: str) -> None:
        me = state.me
        self.history.add(me.index, me.name, [summary])
        logger.info("%s: %s", me.name, summary)

    def _validate(self, action: Action, state: EngineState) -> Dict[str, Any]:
        """Convert action args into engine keyword arguments."""
        args = action.args or {}
        name = action.name

        if name in SQUARE_ACTIONS:
            if "square_index" not in args:
                raise ValidationError("square_index is required")
            index = _square_index(args["square_index"])
            if state.squares[index].owner != state.actor:
                raise ValidationError(f"square {index} is not owned by player {state.actor}")
            return {"square_index": index}

        if name == ActionName.TRADE_INITIATE:
            if "recipient_index" not in args:
                raise ValidationError("recipient_index is required")
            recipient = _as_int(args["recipient_index"], "recipient_index")
            if recipient == state.actor:
                raise ValidationError("cannot trade with yourself")
            try:
                other = state.actor_state(recipient)
            except KeyError:
                raise ValidationError(f"no player {recipient}") from None
            if other.bankrupt:
                raise ValidationError(f"player {recipient} is bankrupt")
            return {
                "recipient_index": recipient,
                "offered_squares": _square_list(args.get("offered_squares"), "offered_squares"),
                "requested_squares": _square_list(args.get("requested_squares"), "requested_squares"),
                "offered_money": _money(args, "offered_money"),
                "requested_money": _money(args, "requested_money"),
            }

        if name == ActionName.TRADE_RESPOND:
            accept = args.get("accept")
            if not isinstance(accept, bool):
                raise ValidationError("accept must be true or false")
            return {"accept": accept}

        if name == ActionName.BID:
            if "amount" not in args:
                raise ValidationError("amount is required")
            amount = _as_int(args["amount"], "amount")
            if amount <= 0:
                raise ValidationError("amount must be positive")
            return {"amount": amount}

        return {}

    def _summarize(self, action: Action, before: EngineState, kwargs: Mapping[str, Any]) -> str:
        """Human-readable history line for a successful action."""
        name = action.name
        square_name = before.squares[kwargs["square_index"]].name if "square_index" in kwargs else None

        if name == ActionName.ROLL:
            after = self.engine.capture()
            die1, die2 = after.last_roll or (0, 0)
            return f"Rolled dice: {die1}, {die2}"
        if name == ActionName.BUY:
            return f"Bought property: {before.current_square.name}"
        if name == ActionName.DECLINE_BUY:
            return f"Declined to buy property: {before.current_square.name}"
        if name == ActionName.END_TURN:
            return "Ended turn"
        if name == ActionName.BUILD:
            return f"Bought house for property: {square_name}"
        if name == ActionName.SELL_BUILDING:
            return f"Sold house for property: {square_name}"
        if name == ActionName.MORTGAGE:
            return f"Mortgaged property: {square_name}"
        if name == ActionName.UNMORTGAGE:
            return f"Unmortgaged property: {square_name}"
        if name == ActionName.JAIL_CARD:
            return "Used Get Out of Jail Free card"
        if name == ActionName.PAY_FINE:
            return f"Paid ${before.jail_fine} jail fine"
        if name == ActionName.TRADE_INITIATE:
            recipient = before.actor_state(kwargs["recipient_index"])
            return f"Initiated trade with {recipient.name}"
        if name == ActionName.TRADE_RESPOND:
            return "Accepted trade offer" if kwargs["accept"] else "Rejected trade offer"
        if name == ActionName.BID:
            return f"Placed bid: ${kwargs['amount']}"
        if name == ActionName.PASS_BID:
            return "Passed on bidding"
        return "Exited auction"
