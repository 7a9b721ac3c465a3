"""
Tests for action validation and dispatch.
"""

import pytest

from llm_monopoly.turn.actions import Action, ActionName
from llm_monopoly.turn.dispatcher import ActionDispatcher
from llm_monopoly.turn.engine import MonopolyEngine
from llm_monopoly.turn.history import TurnHistory

ENGINE_OPERATIONS = (
    "roll",
    "end_turn",
    "buy_property",
    "decline_buy_property",
    "build",
    "sell_building",
    "mortgage",
    "unmortgage",
    "use_jail_card",
    "pay_jail_fine",
    "initiate_trade",
    "respond_to_trade",
    "place_bid",
    "pass_bid",
    "exit_auction",
)


class RecordingEngine(MonopolyEngine):
    """Engine adapter that records every mutating call."""

    def __init__(self, game, actor_id):
        super().__init__(game, actor_id)
        self.calls = []
        for name in ENGINE_OPERATIONS:
            setattr(self, name, self._recorded(name, getattr(self, name)))

    def _recorded(self, name, method):
        def wrapper(*args, **kwargs):
            self.calls.append(name)
            return method(*args, **kwargs)

        return wrapper


@pytest.fixture
def history():
    return TurnHistory()


@pytest.fixture
def engine(basic_game):
    return RecordingEngine(basic_game, 0)


@pytest.fixture
def dispatcher(engine, history):
    return ActionDispatcher(engine, history)


def test_illegal_action_never_reaches_engine(dispatcher, engine):
    outcome = dispatcher.dispatch(Action(ActionName.BUY))

    assert not outcome.applied
    assert outcome.reason == "not legal"
    assert engine.calls == []


def test_other_actor_cannot_act_out_of_turn(basic_game, history):
    engine = RecordingEngine(basic_game, 1)
    outcome = ActionDispatcher(engine, history).dispatch(Action(ActionName.ROLL))

    assert not outcome.applied
    assert engine.calls == []
    assert basic_game.dice_rolled is False


def test_roll_is_applied_and_recorded(dispatcher, basic_game, dice, history):
    dice.push((3, 4))

    outcome = dispatcher.dispatch(Action(ActionName.ROLL))

    assert outcome.applied
    assert basic_game.players[0].position == 7
    assert history.entries()[0].actions == ("Rolled dice: 3, 4",)
    assert history.entries()[0].actor_name == "Alice"


def test_buy_after_landing(dispatcher, basic_game, dice, history):
    dice.push((2, 4))
    dispatcher.dispatch(Action(ActionName.ROLL))

    outcome = dispatcher.dispatch(Action(ActionName.BUY))

    assert outcome.applied
    assert basic_game.property_ownership[6].owner_id == 0
    assert basic_game.players[0].cash == 1400
    assert history.entries()[0].actions == ("Bought property: Oriental Avenue",)


def test_build_requires_square_index(dispatcher, engine, basic_game, give):
    give(basic_game, 0, 1, 3)

    outcome = dispatcher.dispatch(Action(ActionName.BUILD))

    assert not outcome.applied
    assert "square_index" in outcome.reason
    assert engine.calls == []


def test_build_rejects_square_owned_by_someone_else(dispatcher, engine, basic_game, give):
    give(basic_game, 0, 1)
    give(basic_game, 1, 3)

    outcome = dispatcher.dispatch(Action(ActionName.BUILD, {"square_index": 3}))

    assert not outcome.applied
    assert "not owned" in outcome.reason
    assert engine.calls == []


@pytest.mark.parametrize("value", ["abc", True, 2.5, None, 40, -1, "--5", "²", "1_0"])
def test_build_rejects_bad_square_index(dispatcher, engine, basic_game, give, value):
    give(basic_game, 0, 1, 3)

    outcome = dispatcher.dispatch(Action(ActionName.BUILD, {"square_index": value}))

    assert not outcome.applied
    assert engine.calls == []


def test_build_accepts_numeric_string(dispatcher, basic_game, give, history):
    give(basic_game, 0, 1, 3)

    outcome = dispatcher.dispatch(Action(ActionName.BUILD, {"square_index": "1"}))

    assert outcome.applied
    assert basic_game.property_ownership[1].houses == 1
    assert basic_game.players[0].cash == 1450
    assert history.entries()[0].actions == ("Bought house for property: Mediterranean Avenue",)


def test_engine_refusal_is_reported(dispatcher, engine, basic_game, give):
    """Railroads pass validation but the engine will not build on them."""
    give(basic_game, 0, 5)

    outcome = dispatcher.dispatch(Action(ActionName.BUILD, {"square_index": 5}))

    assert not outcome.applied
    assert outcome.reason == "engine refused"
    assert engine.calls == ["build"]


def test_mortgage_and_unmortgage(dispatcher, basic_game, give, history):
    give(basic_game, 0, 1)

    assert dispatcher.dispatch(Action(ActionName.MORTGAGE, {"square_index": 1})).applied
    assert basic_game.players[0].cash == 1530

    assert dispatcher.dispatch(Action(ActionName.UNMORTGAGE, {"square_index": 1})).applied
    assert basic_game.players[0].cash == 1497
    assert [e.actions[0] for e in history] == [
        "Unmortgaged property: Mediterranean Avenue",
        "Mortgaged property: Mediterranean Avenue",
    ]


def test_trade_with_self_is_rejected(dispatcher, engine, basic_game, give):
    give(basic_game, 0, 1)

    outcome = dispatcher.dispatch(Action(ActionName.TRADE_INITIATE, {"recipient_index": 0}))

    assert not outcome.applied
    assert engine.calls == []


def test_trade_with_unknown_player_is_rejected(dispatcher, engine, basic_game, give):
    give(basic_game, 0, 1)

    outcome = dispatcher.dispatch(Action(ActionName.TRADE_INITIATE, {"recipient_index": 7}))

    assert not outcome.applied
    assert "no player" in outcome.reason
    assert engine.calls == []


def test_trade_rejects_negative_money(dispatcher, engine, basic_game, give):
    give(basic_game, 0, 1)

    outcome = dispatcher.dispatch(
        Action(ActionName.TRADE_INITIATE, {"recipient_index": 1, "offered_money": -5})
    )

    assert not outcome.applied
    assert engine.calls == []


def test_trade_initiate_opens_offer(dispatcher, basic_game, give, history):
    give(basic_game, 0, 1)
    args = {
        "recipient_index": 1,
        "offered_squares": [1],
        "requested_squares": [],
        "offered_money": 0,
        "requested_money": 100,
    }

    outcome = dispatcher.dispatch(Action(ActionName.TRADE_INITIATE, args))

    assert outcome.applied
    trade = basic_game.trade_manager.pending_for(1)
    assert trade.proposer_offer.properties == {1}
    assert trade.recipient_offer.cash == 100
    assert history.entries()[0].actions == ("Initiated trade with Bob",)


def test_trade_response_needs_boolean(basic_game, give, history):
    give(basic_game, 0, 1)
    basic_game.propose_trade(0, 1, [1], [], requested_cash=50)
    engine = RecordingEngine(basic_game, 1)
    dispatcher = ActionDispatcher(engine, history)

    outcome = dispatcher.dispatch(Action(ActionName.TRADE_RESPOND, {"accept": "yes"}))

    assert not outcome.applied
    assert engine.calls == []

    outcome = dispatcher.dispatch(Action(ActionName.TRADE_RESPOND, {"accept": True}))

    assert outcome.applied
    assert basic_game.property_ownership[1].owner_id == 1
    assert history.entries()[0].actions == ("Accepted trade offer",)


def test_bid_must_be_positive(basic_game, history):
    basic_game.start_auction(6)
    engine = RecordingEngine(basic_game, 1)
    dispatcher = ActionDispatcher(engine, history)

    assert not dispatcher.dispatch(Action(ActionName.BID, {"amount": 0})).applied
    assert not dispatcher.dispatch(Action(ActionName.BID)).applied
    assert engine.calls == []

    assert dispatcher.dispatch(Action(ActionName.BID, {"amount": 25})).applied
    assert history.entries()[0].actions == ("Placed bid: $25",)


def test_force_end_turn_bypasses_legal_set(dispatcher, basic_game, history):
    """Before rolling, end_turn is not legal but can still be forced."""
    outcome = dispatcher.force_end_turn("decision failed")

    assert outcome.applied
    assert outcome.reason == "decision failed"
    assert basic_game.get_current_player().player_id == 1
    assert history.entries()[0].actions == ("Ended turn (forced): decision failed",)


def test_force_end_turn_only_for_turn_actor(basic_game, history):
    engine = RecordingEngine(basic_game, 1)

    outcome = ActionDispatcher(engine, history).force_end_turn()

    assert not outcome.applied
    assert engine.calls == []
    assert basic_game.get_current_player().player_id == 0
