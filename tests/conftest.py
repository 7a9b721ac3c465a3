"""Shared test fixtures for the Monopoly turn core."""

import pytest

from llm_monopoly.game import FixedDice, GameConfig, Player, create_game
from llm_monopoly.settings import TurnSettings
from llm_monopoly.turn.engine import MonopolyEngine
from llm_monopoly.turn.history import TurnHistory
from llm_monopoly.turn.orchestrator import TurnOrchestrator


@pytest.fixture
def game_config():
    """Default game configuration with fixed seed for reproducibility."""
    return GameConfig(seed=42)


@pytest.fixture
def two_players():
    """Two test players."""
    return [Player(0, "Alice"), Player(1, "Bob")]


@pytest.fixture
def three_players():
    """Three test players."""
    return [Player(0, "Alice"), Player(1, "Bob"), Player(2, "Charlie")]


@pytest.fixture
def dice():
    """Scripted dice; push rolls before acting."""
    return FixedDice()


@pytest.fixture
def basic_game(game_config, two_players, dice):
    """Two-player game driven by scripted dice."""
    return create_game(game_config, two_players, dice=dice)


@pytest.fixture
def three_player_game(game_config, three_players, dice):
    """Three-player game driven by scripted dice."""
    return create_game(game_config, three_players, dice=dice)


@pytest.fixture
def give():
    """Assign squares to a player without paying for them."""

    def _give(game, player_id, *positions, houses=0, mortgaged=False):
        for pos in positions:
            ownership = game.property_ownership[pos]
            ownership.owner_id = player_id
            ownership.houses = houses
            ownership.is_mortgaged = mortgaged
            game.players[player_id].properties.add(pos)

    return _give


@pytest.fixture
def turn_settings():
    return TurnSettings(max_iterations=8, max_cycles_per_turn=24, history_capacity=10, history_exposed=5)


@pytest.fixture
def make_orchestrator(turn_settings):
    """Build an orchestrator for one seat of a game."""

    def _make(game, player_id, client, history=None, observer=None, guard=None):
        return TurnOrchestrator(
            MonopolyEngine(game, player_id),
            client,
            history=history if history is not None else TurnHistory(turn_settings.history_capacity),
            settings=turn_settings,
            observer=observer,
            guard=guard,
        )

    return _make
