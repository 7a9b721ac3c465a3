"""
Monopoly Rules Engine

Deterministic implementation of the board game rules the turn core plays against.
"""

from llm_monopoly.game.board import Board
from llm_monopoly.game.config import GameConfig
from llm_monopoly.game.dice import Dice, FixedDice
from llm_monopoly.game.game import GameState, create_game
from llm_monopoly.game.player import Player, PlayerState

__all__ = [
    "Board",
    "Dice",
    "FixedDice",
    "GameConfig",
    "GameState",
    "Player",
    "PlayerState",
    "create_game",
]
