"""
Game configuration settings.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class GameConfig:
    """Configuration for a Monopoly game."""

    starting_cash: int = 1500
    go_salary: int = 200
    jail_fine: int = 50
    mortgage_interest_rate: float = 0.10

    house_limit: int = 32
    hotel_limit: int = 12

    max_jail_turns: int = 3
    max_doubles: int = 3

    time_limit_turns: Optional[int] = None

    seed: Optional[int] = None
