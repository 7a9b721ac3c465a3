"""
Tests for per-player state and square transfers.
"""

from llm_monopoly.game.board import JAIL_POSITION
from llm_monopoly.game.player import PlayerState, PropertyOwnership, transfer_square


def test_imprison_resets_counters():
    player = PlayerState(0, "Alice", 1500, position=30, jail_turns=2, consecutive_doubles=2)

    player.imprison(JAIL_POSITION)

    assert player.position == JAIL_POSITION
    assert player.in_jail
    assert player.jail_turns == 0
    assert player.consecutive_doubles == 0

    player.jail_turns = 2
    player.release()

    assert not player.in_jail
    assert player.jail_turns == 0
    assert player.position == JAIL_POSITION


def test_transfer_square_moves_holdings(basic_game):
    alice, bob = basic_game.players[0], basic_game.players[1]
    ownership = basic_game.property_ownership[1]

    transfer_square(1, ownership, None, alice)
    transfer_square(1, ownership, alice, bob)

    assert ownership.owner_id == 1
    assert 1 not in alice.properties
    assert bob.properties == {1}


def test_unowned_square():
    ownership = PropertyOwnership()

    assert not ownership.is_owned()
    assert ownership.houses == 0
