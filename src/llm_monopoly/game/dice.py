"""
Dice sources for the engine.
"""

import random
from collections import deque
from typing import Iterable, Optional, Tuple


class Dice:
    """Two six-sided dice backed by a seeded RNG."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def roll(self) -> Tuple[int, int]:
        return self.rng.randint(1, 6), self.rng.randint(1, 6)


class FixedDice(Dice):
    """
    Dice that replay a scripted sequence of rolls.

    Used for reproducible scenarios; falls back to the RNG once the
    script is exhausted.
    """

    def __init__(self, rolls: Iterable[Tuple[int, int]] = (), rng: Optional[random.Random] = None):
        super().__init__(rng or random.Random(0))
        self.script = deque(rolls)

    def push(self, *rolls: Tuple[int, int]) -> None:
        self.script.extend(rolls)

    def roll(self) -> Tuple[int, int]:
        if self.script:
            return self.script.popleft()
        return super().roll()
