"""
Tests for legal action resolution.
"""

from dataclasses import replace

from llm_monopoly.turn.actions import ActionName
from llm_monopoly.turn.resolver import MANAGEMENT_ACTIONS, resolve
from llm_monopoly.turn.state import AuctionState, TradeState, capture_engine_state


def with_actor(state, index=0, **changes):
    """Return a state with one actor's fields replaced."""
    actors = tuple(replace(a, **changes) if a.index == index else a for a in state.actors)
    return replace(state, actors=actors)


def with_owner(state, owner, *positions):
    squares = tuple(replace(s, owner=owner) if s.index in positions else s for s in state.squares)
    return replace(state, squares=squares)


def test_unrolled_free_actor_may_only_roll(basic_game):
    """Before rolling, outside jail, with nothing owned: exactly {roll}."""
    state = capture_engine_state(basic_game, 0)

    assert resolve(state) == {ActionName.ROLL}


def test_unrolled_owner_also_gets_management(basic_game, give):
    give(basic_game, 0, 1)
    state = capture_engine_state(basic_game, 0)

    assert resolve(state) == {ActionName.ROLL} | MANAGEMENT_ACTIONS


def test_pending_reroll_excludes_everything_else(basic_game, give):
    """After doubles the only legal action is another roll, even for owners."""
    give(basic_game, 0, 1, 3)
    base = capture_engine_state(basic_game, 0)

    for doubles in (1, 2):
        state = replace(base, dice_rolled=True, doubles_count=doubles, last_roll=(2, 2))
        assert resolve(state) == {ActionName.ROLL}


def test_landing_on_unowned_square_offers_purchase(basic_game):
    state = with_actor(capture_engine_state(basic_game, 0), position=6)
    state = replace(state, dice_rolled=True, doubles_count=0, last_roll=(2, 4), landing_unresolved=True)

    assert {ActionName.END_TURN, ActionName.BUY, ActionName.DECLINE_BUY} <= resolve(state)


def test_landing_during_doubles_offers_purchase_and_reroll(basic_game):
    state = with_actor(capture_engine_state(basic_game, 0), position=14)
    state = replace(state, dice_rolled=True, doubles_count=2, last_roll=(2, 2), landing_unresolved=True)

    assert resolve(state) == {ActionName.ROLL, ActionName.BUY, ActionName.DECLINE_BUY}


def test_resolved_landing_only_ends_turn(basic_game):
    state = with_actor(capture_engine_state(basic_game, 0), position=6)
    state = replace(state, dice_rolled=True, doubles_count=0, last_roll=(2, 4), landing_unresolved=False)

    assert resolve(state) == {ActionName.END_TURN}


def test_owned_square_is_not_purchasable(basic_game):
    state = with_owner(capture_engine_state(basic_game, 0), 1, 6)
    state = with_actor(state, position=6)
    state = replace(state, dice_rolled=True, last_roll=(2, 4), landing_unresolved=True)

    legal = resolve(state)
    assert ActionName.BUY not in legal
    assert ActionName.DECLINE_BUY not in legal


def test_resolve_is_idempotent(basic_game, give):
    give(basic_game, 0, 1, 3)
    state = capture_engine_state(basic_game, 0)

    assert resolve(state) == resolve(state)


def test_jail_without_means_may_only_roll(basic_game):
    """In jail with $30 and no card: pay-fine and jail-card are excluded."""
    state = with_actor(capture_engine_state(basic_game, 0), in_jail=True, position=10, cash=30, jail_cards=0)

    assert resolve(state) == {ActionName.ROLL}


def test_jail_with_cash_and_card(basic_game):
    state = with_actor(capture_engine_state(basic_game, 0), in_jail=True, position=10, jail_cards=1)

    assert resolve(state) == {ActionName.ROLL, ActionName.PAY_FINE, ActionName.JAIL_CARD}


def test_jail_closes_management_window(basic_game, give):
    give(basic_game, 0, 1)
    state = with_actor(capture_engine_state(basic_game, 0), in_jail=True, position=10)

    assert not resolve(state) & MANAGEMENT_ACTIONS


def test_failed_jail_attempt_ends_turn(basic_game):
    state = with_actor(capture_engine_state(basic_game, 0), in_jail=True, position=10, jail_attempts=1)
    state = replace(state, dice_rolled=True, last_roll=(1, 2))

    assert resolve(state) == {ActionName.END_TURN}


def test_final_failed_attempt_forces_payment(basic_game):
    state = with_actor(capture_engine_state(basic_game, 0), in_jail=True, position=10, jail_attempts=3)
    state = replace(state, dice_rolled=True, last_roll=(1, 2))

    assert resolve(state) == {ActionName.PAY_FINE}


def test_final_failed_attempt_without_means_still_ends_turn(basic_game):
    state = with_actor(
        capture_engine_state(basic_game, 0), in_jail=True, position=10, jail_attempts=3, cash=10
    )
    state = replace(state, dice_rolled=True, last_roll=(1, 2))

    assert resolve(state) == {ActionName.END_TURN}


def test_auction_bidders_get_auction_actions(basic_game):
    auction = AuctionState(square_index=6, current_bid=20, high_bidder=0, bidders=(0, 1))
    state = replace(capture_engine_state(basic_game, 1), auction=auction)

    assert resolve(state) == {ActionName.BID, ActionName.PASS_BID, ActionName.EXIT_AUCTION}


def test_auction_blocks_non_bidders(basic_game):
    auction = AuctionState(square_index=6, current_bid=20, high_bidder=1, bidders=(1,))
    state = replace(capture_engine_state(basic_game, 0), auction=auction)

    assert resolve(state) == frozenset()


def test_pending_trade_requires_response(basic_game):
    trade = TradeState(1, proposer=0, recipient=1, offered_squares=(1,), requested_squares=(),
                       offered_money=0, requested_money=50)
    state = replace(capture_engine_state(basic_game, 1), pending_trade=trade)

    assert resolve(state) == {ActionName.TRADE_RESPOND}


def test_other_actor_has_nothing_to_do(basic_game):
    assert resolve(capture_engine_state(basic_game, 1)) == frozenset()


def test_game_over_has_no_actions(basic_game):
    state = replace(capture_engine_state(basic_game, 0), game_over=True)

    assert resolve(state) == frozenset()
