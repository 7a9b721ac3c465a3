"""
Tests for full games between decision clients.
"""

import asyncio

import pytest

from llm_monopoly.agents.scripted import ScriptedDecisionClient
from llm_monopoly.game import GameConfig, Player, create_game
from llm_monopoly.session import GameSession
from llm_monopoly.settings import TurnSettings
from llm_monopoly.turn.actions import Action, ActionName


def make_session(num_players=2, seed=7):
    players = [Player(i, name) for i, name in enumerate(["Alice", "Bob", "Charlie", "Diana"][:num_players])]
    game = create_game(GameConfig(seed=seed), players)
    clients = {p.player_id: ScriptedDecisionClient(seed=seed + p.player_id) for p in players}
    return game, GameSession(game, clients, settings=TurnSettings(_env_file=None))


def test_scripted_game_runs_to_turn_limit():
    game, session = make_session(num_players=3)

    standings = asyncio.run(session.play(max_turns=40))

    assert game.game_over
    assert game.turn_number == 40
    assert len(standings) == 3
    assert standings[0].net_worth >= standings[-1].net_worth
    assert game.winner == standings[0].player_id
    assert game.active_auction is None
    assert not game.trade_manager.pending()


def test_history_is_shared_and_bounded():
    game, session = make_session()

    asyncio.run(session.play(max_turns=20))

    assert 0 < len(session.history) <= 10
    assert all(o.history is session.history for o in session.orchestrators.values())


def test_seats_share_one_in_flight_guard():
    game, session = make_session(num_players=3)

    assert all(o.guard is session.guard for o in session.orchestrators.values())
    assert not session.guard.busy


def test_declined_square_is_auctioned(game_config, two_players, dice):
    game = create_game(game_config, two_players, dice=dice)
    dice.push((2, 4))
    clients = {
        0: ScriptedDecisionClient(["roll", "decline_buy"]),
        1: ScriptedDecisionClient(),
    }
    session = GameSession(game, clients, settings=TurnSettings(_env_file=None))

    asyncio.run(session.play_turn())

    assert game.get_current_player().player_id == 1
    assert game.active_auction is None
    assert game.property_ownership[6].owner_id is not None


def test_trade_offer_is_answered_by_recipient(game_config, two_players, dice, give):
    game = create_game(game_config, two_players, dice=dice)
    give(game, 0, 1)
    dice.push((3, 4))
    offer = Action(
        ActionName.TRADE_INITIATE,
        {"recipient_index": 1, "offered_squares": [1], "requested_squares": [], "requested_money": 60},
    )
    recipient = ScriptedDecisionClient()
    clients = {0: ScriptedDecisionClient([offer, "roll", "end_turn"]), 1: recipient}
    session = GameSession(game, clients, settings=TurnSettings(_env_file=None))

    asyncio.run(session.play_turn())

    (trade,) = game.trade_manager.trades.values()
    assert trade.status == "rejected"
    assert game.property_ownership[1].owner_id == 0
    snapshot, legal = recipient.requests[0]
    assert legal == {ActionName.TRADE_RESPOND}
    assert snapshot.pending_trade.requested_money == 60
    assert game.get_current_player().player_id == 1


def test_missing_client_is_an_error(game_config, two_players):
    game = create_game(game_config, two_players)

    with pytest.raises(ValueError, match=r"\[1\]"):
        GameSession(game, {0: ScriptedDecisionClient()})
