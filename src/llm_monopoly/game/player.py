"""
Seats, per-player engine state, and square ownership.
"""

from dataclasses import dataclass, field
from typing import Optional, Set


@dataclass(frozen=True)
class Player:
    """A seat at the table, as passed to `create_game`."""

    player_id: int
    name: str


@dataclass
class PlayerState:
    """
    Mutable engine-side state of one actor.

    `jail_turns` counts failed doubles attempts during the current stay;
    `consecutive_doubles` counts doubles rolled this turn.
    """

    player_id: int
    name: str
    cash: int
    position: int = 0
    in_jail: bool = False
    jail_turns: int = 0
    get_out_of_jail_cards: int = 0
    is_bankrupt: bool = False
    properties: Set[int] = field(default_factory=set)
    consecutive_doubles: int = 0

    def can_afford(self, amount: int) -> bool:
        return self.cash >= amount

    def imprison(self, jail_position: int) -> None:
        """Move to the jail square and reset the doubles and attempt counters."""
        self.position = jail_position
        self.in_jail = True
        self.jail_turns = 0
        self.consecutive_doubles = 0

    def release(self) -> None:
        self.in_jail = False
        self.jail_turns = 0


@dataclass
class PropertyOwnership:
    """Owner, building level (5 is a hotel) and mortgage flag of an ownable square."""

    owner_id: Optional[int] = None
    houses: int = 0
    is_mortgaged: bool = False

    def is_owned(self) -> bool:
        return self.owner_id is not None


def transfer_square(
    position: int,
    ownership: PropertyOwnership,
    source: Optional[PlayerState],
    target: PlayerState,
) -> None:
    """Hand a square to `target`, keeping both holdings sets in step with the owner id."""
    if source is not None:
        source.properties.discard(position)
    target.properties.add(position)
    ownership.owner_id = target.player_id
