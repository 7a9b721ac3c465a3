"""
Board space definitions and types.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class SpaceType(Enum):
    """Types of spaces on the board."""

    GO = "go"
    PROPERTY = "property"
    RAILROAD = "railroad"
    UTILITY = "utility"
    TAX = "tax"
    CHANCE = "chance"
    COMMUNITY_CHEST = "community_chest"
    JAIL = "jail"
    GO_TO_JAIL = "go_to_jail"
    FREE_PARKING = "free_parking"


RAILROAD_GROUP = "railroad"
UTILITY_GROUP = "utility"


@dataclass
class Space:
    """Base class for a board space."""

    name: str
    position: int
    space_type: SpaceType

    @property
    def group(self) -> Optional[str]:
        """Ownership group of the space, None for squares that cannot be owned."""
        return None

    @property
    def price(self) -> int:
        return 0

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.name}', position={self.position})"


class SimpleSpace(Space):
    """A space with no purchase price: GO, jail, cards, parking."""

    def __init__(self, name: str, position: int, space_type: SpaceType):
        super().__init__(name, position, space_type)


class PropertySpace(Space):
    """A street that can be owned, built upon, and mortgaged."""

    def __init__(
        self,
        name: str,
        position: int,
        price: int,
        color_group: str,
        rents: tuple,
        house_cost: int,
    ):
        super().__init__(name, position, SpaceType.PROPERTY)
        self._price = price
        self.color_group = color_group
        # base rent, then 1-4 houses, then hotel
        self.rents = rents
        self.house_cost = house_cost
        self.mortgage_value = price // 2

    @property
    def group(self) -> str:
        return self.color_group

    @property
    def price(self) -> int:
        return self._price

    def get_rent(self, buildings: int, has_monopoly: bool) -> int:
        """
        Calculate rent for this property.

        Args:
            buildings: Number of houses (0-4) or 5 for hotel
            has_monopoly: Whether owner holds the complete, unmortgaged color set
        """
        if buildings == 0:
            return self.rents[0] * 2 if has_monopoly else self.rents[0]
        return self.rents[min(buildings, 5)]


class RailroadSpace(Space):
    """A railroad space."""

    def __init__(self, name: str, position: int, price: int = 200):
        super().__init__(name, position, SpaceType.RAILROAD)
        self._price = price
        self.mortgage_value = price // 2

    @property
    def group(self) -> str:
        return RAILROAD_GROUP

    @property
    def price(self) -> int:
        return self._price

    def get_rent(self, railroads_owned: int) -> int:
        """Calculate rent based on number of railroads owned by the owner."""
        return 25 * (2 ** (railroads_owned - 1))


class UtilitySpace(Space):
    """A utility space (Electric Company or Water Works)."""

    def __init__(self, name: str, position: int, price: int = 150):
        super().__init__(name, position, SpaceType.UTILITY)
        self._price = price
        self.mortgage_value = price // 2

    @property
    def group(self) -> str:
        return UTILITY_GROUP

    @property
    def price(self) -> int:
        return self._price

    def get_rent(self, dice_roll: int, utilities_owned: int) -> int:
        """Calculate rent based on dice roll and number of utilities owned."""
        multiplier = 4 if utilities_owned == 1 else 10
        return dice_roll * multiplier


class TaxSpace(Space):
    """A tax space (Income Tax or Luxury Tax)."""

    def __init__(self, name: str, position: int, amount: int):
        super().__init__(name, position, SpaceType.TAX)
        self.amount = amount


OWNABLE_TYPES = (SpaceType.PROPERTY, SpaceType.RAILROAD, SpaceType.UTILITY)
