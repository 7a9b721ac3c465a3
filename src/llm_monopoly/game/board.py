from typing import Dict, List, Optional

from llm_monopoly.game.spaces import (
    PropertySpace,
    RailroadSpace,
    SimpleSpace,
    Space,
    SpaceType,
    TaxSpace,
    UtilitySpace,
)

BOARD_SIZE = 40
JAIL_POSITION = 10

# Display order used when describing holdings: streets first, then railroads and utilities.
GROUP_ORDER = [
    "brown",
    "light_blue",
    "pink",
    "orange",
    "red",
    "yellow",
    "green",
    "dark_blue",
    "railroad",
    "utility",
]

GROUP_NAMES = {
    "brown": "Brown",
    "light_blue": "Light Blue",
    "pink": "Pink",
    "orange": "Orange",
    "red": "Red",
    "yellow": "Yellow",
    "green": "Green",
    "dark_blue": "Dark Blue",
    "railroad": "Railroad",
    "utility": "Utility",
}


def group_display_name(group: Optional[str]) -> str:
    """Human-readable name of an ownership group."""
    if group is None:
        return "Unknown"
    return GROUP_NAMES.get(group, group.replace("_", " ").title())


class Board:
    """The Monopoly game board with 40 spaces."""

    def __init__(self):
        self.spaces: List[Space] = self._create_standard_board()
        self.groups: Dict[str, List[int]] = self._build_groups()

    def _create_standard_board(self) -> List[Space]:
        """Create the standard 40-space Monopoly board."""
        return [
            # Bottom row (0-10)
            SimpleSpace("GO", 0, SpaceType.GO),
            PropertySpace("Mediterranean Avenue", 1, 60, "brown", (2, 10, 30, 90, 160, 250), 50),
            SimpleSpace("Community Chest", 2, SpaceType.COMMUNITY_CHEST),
            PropertySpace("Baltic Avenue", 3, 60, "brown", (4, 20, 60, 180, 320, 450), 50),
            TaxSpace("Income Tax", 4, 200),
            RailroadSpace("Reading Railroad", 5),
            PropertySpace("Oriental Avenue", 6, 100, "light_blue", (6, 30, 90, 270, 400, 550), 50),
            SimpleSpace("Chance", 7, SpaceType.CHANCE),
            PropertySpace("Vermont Avenue", 8, 100, "light_blue", (6, 30, 90, 270, 400, 550), 50),
            PropertySpace("Connecticut Avenue", 9, 120, "light_blue", (8, 40, 100, 300, 450, 600), 50),
            SimpleSpace("Jail", JAIL_POSITION, SpaceType.JAIL),
            # Left side (11-20)
            PropertySpace("St. Charles Place", 11, 140, "pink", (10, 50, 150, 450, 625, 750), 100),
            UtilitySpace("Electric Company", 12),
            PropertySpace("States Avenue", 13, 140, "pink", (10, 50, 150, 450, 625, 750), 100),
            PropertySpace("Virginia Avenue", 14, 160, "pink", (12, 60, 180, 500, 700, 900), 100),
            RailroadSpace("Pennsylvania Railroad", 15),
            PropertySpace("St. James Place", 16, 180, "orange", (14, 70, 200, 550, 750, 950), 100),
            SimpleSpace("Community Chest", 17, SpaceType.COMMUNITY_CHEST),
            PropertySpace("Tennessee Avenue", 18, 180, "orange", (14, 70, 200, 550, 750, 950), 100),
            PropertySpace("New York Avenue", 19, 200, "orange", (16, 80, 220, 600, 800, 1000), 100),
            SimpleSpace("Free Parking", 20, SpaceType.FREE_PARKING),
            # Top row (21-30)
            PropertySpace("Kentucky Avenue", 21, 220, "red", (18, 90, 250, 700, 875, 1050), 150),
            SimpleSpace("Chance", 22, SpaceType.CHANCE),
            PropertySpace("Indiana Avenue", 23, 220, "red", (18, 90, 250, 700, 875, 1050), 150),
            PropertySpace("Illinois Avenue", 24, 240, "red", (20, 100, 300, 750, 925, 1100), 150),
            RailroadSpace("B. & O. Railroad", 25),
            PropertySpace("Atlantic Avenue", 26, 260, "yellow", (22, 110, 330, 800, 975, 1150), 150),
            PropertySpace("Ventnor Avenue", 27, 260, "yellow", (22, 110, 330, 800, 975, 1150), 150),
            UtilitySpace("Water Works", 28),
            PropertySpace("Marvin Gardens", 29, 280, "yellow", (24, 120, 360, 850, 1025, 1200), 150),
            SimpleSpace("Go To Jail", 30, SpaceType.GO_TO_JAIL),
            # Right side (31-39)
            PropertySpace("Pacific Avenue", 31, 300, "green", (26, 130, 390, 900, 1100, 1275), 200),
            PropertySpace("North Carolina Avenue", 32, 300, "green", (26, 130, 390, 900, 1100, 1275), 200),
            SimpleSpace("Community Chest", 33, SpaceType.COMMUNITY_CHEST),
            PropertySpace("Pennsylvania Avenue", 34, 320, "green", (28, 150, 450, 1000, 1200, 1400), 200),
            RailroadSpace("Short Line", 35),
            SimpleSpace("Chance", 36, SpaceType.CHANCE),
            PropertySpace("Park Place", 37, 350, "dark_blue", (35, 175, 500, 1100, 1300, 1500), 200),
            TaxSpace("Luxury Tax", 38, 100),
            PropertySpace("Boardwalk", 39, 400, "dark_blue", (50, 200, 600, 1400, 1700, 2000), 200),
        ]

    def _build_groups(self) -> Dict[str, List[int]]:
        """Map every ownership group (colors, railroads, utilities) to its positions."""
        groups: Dict[str, List[int]] = {}
        for space in self.spaces:
            if space.group is not None:
                groups.setdefault(space.group, []).append(space.position)
        return groups

    def get_space(self, position: int) -> Space:
        """Get the space at the given position."""
        return self.spaces[position % BOARD_SIZE]

    def get_property_space(self, position: int) -> Optional[PropertySpace]:
        """Get a street space, or None if not a street."""
        space = self.get_space(position)
        return space if isinstance(space, PropertySpace) else None

    def get_group(self, group: str) -> List[int]:
        """Get all positions in an ownership group."""
        return self.groups.get(group, [])

    def get_all_railroads(self) -> List[int]:
        return self.get_group("railroad")

    def get_all_utilities(self) -> List[int]:
        return self.get_group("utility")
