"""
Legal action resolution.

`resolve` is a pure function of `EngineState`: the turn-flow state
machine over dice-rolled, in-jail, doubles-count and unresolved landing,
plus the auction and trade-response interrupts.
"""

from typing import FrozenSet, Set

from llm_monopoly.turn.actions import AUCTION_ACTIONS, ActionName
from llm_monopoly.turn.state import EngineState

LegalActionSet = FrozenSet[ActionName]

MAX_DOUBLES = 3

MANAGEMENT_ACTIONS = frozenset(
    {
        ActionName.BUILD,
        ActionName.SELL_BUILDING,
        ActionName.MORTGAGE,
        ActionName.UNMORTGAGE,
        ActionName.TRADE_INITIATE,
    }
)


def resolve(state: EngineState) -> LegalActionSet:
    """
    Get the set of actions the captured actor may take right now.

    Args:
        state: Engine state captured for the acting actor

    Returns:
        Frozen set of legal action names (order is meaningless)
    """
    if state.game_over:
        return frozenset()

    # Auctions interrupt normal turn flow for every bidder
    if state.auction is not None:
        if state.actor in state.auction.bidders:
            return AUCTION_ACTIONS
        return frozenset()

    if state.pending_trade is not None:
        return frozenset({ActionName.TRADE_RESPOND})

    if not state.is_my_turn:
        return frozenset()

    actions: Set[ActionName] = set()
    actor = state.me

    if not actor.in_jail:
        actions |= _free_actions(state)
    else:
        actions |= _jail_actions(state)

    if _management_open(state):
        actions |= MANAGEMENT_ACTIONS

    return frozenset(actions)


def _free_actions(state: EngineState) -> Set[ActionName]:
    actions: Set[ActionName] = set()

    if not state.dice_rolled:
        actions.add(ActionName.ROLL)
        return actions

    if 0 < state.doubles_count < MAX_DOUBLES:
        # Rolled doubles: must roll again
        actions.add(ActionName.ROLL)
    else:
        actions.add(ActionName.END_TURN)

    # Landing window
    if state.landing_unresolved and state.current_square.purchasable:
        actions.add(ActionName.BUY)
        actions.add(ActionName.DECLINE_BUY)

    return actions


def _jail_actions(state: EngineState) -> Set[ActionName]:
    actor = state.me
    can_pay = actor.cash >= state.jail_fine
    has_card = actor.jail_cards > 0

    if not state.dice_rolled:
        actions = {ActionName.ROLL}
        if can_pay:
            actions.add(ActionName.PAY_FINE)
        if has_card:
            actions.add(ActionName.JAIL_CARD)
        return actions

    if actor.jail_attempts < state.max_jail_attempts:
        return {ActionName.END_TURN}

    # Forced pay: the final attempt failed, so the actor must pay or use a card
    actions = set()
    if can_pay:
        actions.add(ActionName.PAY_FINE)
    if has_card:
        actions.add(ActionName.JAIL_CARD)
    if not actions:
        # Neither is possible; the turn still has to terminate
        actions.add(ActionName.END_TURN)
    return actions


def _management_open(state: EngineState) -> bool:
    """Not in jail, before rolling or after a non-doubles roll, and owns at least one square."""
    if state.in_jail:
        return False
    if state.dice_rolled and state.doubles_count != 0:
        return False
    return any(square.owner == state.actor for square in state.squares)
