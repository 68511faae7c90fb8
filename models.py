# Models for game elements of Quests of Zeus

from dataclasses import dataclass, field
from enum import Enum
from typing import List, NamedTuple, Optional, Dict


class CoreColor(Enum):
    """The six core colors, declared in color-wheel order."""
    BLACK = "black"
    PINK = "pink"
    BLUE = "blue"
    YELLOW = "yellow"
    GREEN = "green"
    RED = "red"


# black -> pink -> blue -> yellow -> green -> red -> black
COLOR_WHEEL: List[CoreColor] = list(CoreColor)

# Player colors double as the owner tag of shrines
PLAYER_COLORS: List[CoreColor] = [CoreColor.GREEN, CoreColor.BLUE, CoreColor.YELLOW, CoreColor.RED]

# A hex color is a core color or None ("none")
HexColor = Optional[CoreColor]


class Terrain(Enum):
    UNDECIDED = "undecided"  # Only exists during map generation
    ZEUS = "zeus"
    SEA = "sea"
    SHALLOW = "shallow"
    CITY = "city"
    OFFERINGS = "offerings"  # Cube sites
    TEMPLE = "temple"
    STATUE = "statue"  # Statue sites
    MONSTERS = "monsters"
    SHRINE = "shrine"


LAND_TERRAINS = frozenset({
    Terrain.ZEUS, Terrain.CITY, Terrain.OFFERINGS, Terrain.TEMPLE,
    Terrain.STATUE, Terrain.MONSTERS, Terrain.SHRINE,
})


class Phase(Enum):
    SETUP = "setup"
    ACTION = "action"
    END = "end"


class QuestType(Enum):
    TEMPLE = "temple"
    MONSTER = "monster"
    STATUE = "statue"
    SHRINE = "shrine"


class ItemType(Enum):
    CUBE = "cube"
    STATUE = "statue"


class ShrineReward(Enum):
    FAVOR = "favor"
    CARD = "card"
    SHIELD = "shield"


class ShrineStatus(Enum):
    HIDDEN = "hidden"
    VISIBLE = "visible"
    FILLED = "filled"


class HexCoordinates(NamedTuple):
    """Axial hex coordinates; s is derived as -q - r."""
    q: int
    r: int

    @property
    def s(self) -> int:
        return -self.q - self.r


@dataclass
class HexCell:
    """A single board hex. Coordinates are fixed, terrain and color mutate during generation."""
    q: int
    r: int
    terrain: Terrain = Terrain.UNDECIDED
    color: HexColor = None

    @property
    def coordinates(self) -> HexCoordinates:
        return HexCoordinates(self.q, self.r)


@dataclass
class Quest:
    """
    A quest a player must complete to win.
    A quest with color None is a wildcard: it binds to the first color it is used for.
    """
    type: QuestType
    color: HexColor = None
    is_completed: bool = False

    @property
    def is_wild(self) -> bool:
        return self.color is None


@dataclass
class StorageSlot:
    """One ship storage slot holding nothing, a cube or a statue."""
    item: Optional[ItemType] = None
    color: HexColor = None

    @property
    def is_empty(self) -> bool:
        return self.item is None


@dataclass(frozen=True)
class RecolorIntention:
    """A pending recolor of a die or card: target color and favor it will cost."""
    new_color: CoreColor
    favor_cost: int


# --- Pieces on land hexes ---

@dataclass
class CubeHex:
    """Offering site holding cubes players collect for temple quests."""
    q: int
    r: int
    cube_colors: List[CoreColor] = field(default_factory=list)

    @property
    def coordinates(self) -> HexCoordinates:
        return HexCoordinates(self.q, self.r)


@dataclass
class MonsterHex:
    q: int
    r: int
    monster_colors: List[CoreColor] = field(default_factory=list)

    @property
    def coordinates(self) -> HexCoordinates:
        return HexCoordinates(self.q, self.r)


@dataclass
class CityHex:
    """A city supplies statues of its own color."""
    q: int
    r: int
    color: CoreColor
    statues: int = 3

    @property
    def coordinates(self) -> HexCoordinates:
        return HexCoordinates(self.q, self.r)


@dataclass
class StatueHex:
    """Statue site with colored bases; a base moves to raised_statues once a statue is built on it."""
    q: int
    r: int
    empty_bases: List[CoreColor] = field(default_factory=list)
    raised_statues: List[CoreColor] = field(default_factory=list)

    @property
    def coordinates(self) -> HexCoordinates:
        return HexCoordinates(self.q, self.r)


@dataclass
class ShrineHex:
    """Shrine owned by one player color. Status goes hidden -> visible -> filled."""
    q: int
    r: int
    color: CoreColor
    owner: CoreColor
    reward: ShrineReward
    status: ShrineStatus = ShrineStatus.HIDDEN

    @property
    def coordinates(self) -> HexCoordinates:
        return HexCoordinates(self.q, self.r)


@dataclass
class Player:
    """
    Represents a player with a ship, oracle resources and quests.
    Players start at Zeus with 3 oracle dice; the ship moves 3 sea hops per
    die or card, and each extra favor spent adds one hop.
    """
    id: int
    name: str
    color: CoreColor
    ship_position: HexCoordinates
    favor: int = 0
    shield: int = 0
    oracle_dice: List[CoreColor] = field(default_factory=list)
    oracle_cards: List[CoreColor] = field(default_factory=list)
    storage: List[StorageSlot] = field(default_factory=lambda: [StorageSlot(), StorageSlot()])
    quests: List[Quest] = field(default_factory=list)
    used_oracle_card_this_turn: bool = False
    recolored_dice: Dict[CoreColor, RecolorIntention] = field(default_factory=dict)
    recolored_cards: Dict[CoreColor, RecolorIntention] = field(default_factory=dict)
    range: int = 3

    def gain_favor(self, amount: int) -> None:
        self.favor += amount

    def spend_favor(self, amount: int) -> None:
        """Deduct favor. Favor can never go negative, so overspending is an error."""
        if amount < 0 or amount > self.favor:
            raise ValueError(f"Player {self.id} cannot spend {amount} favor (has {self.favor})")
        self.favor -= amount

    # --- Storage ---

    def has_item(self, item: ItemType, color: CoreColor) -> bool:
        return any(slot.item == item and slot.color == color for slot in self.storage)

    def has_free_slot(self) -> bool:
        return any(slot.is_empty for slot in self.storage)

    def load_item(self, item: ItemType, color: CoreColor) -> bool:
        """Put an item into the first empty slot. Returns False if storage is full."""
        for slot in self.storage:
            if slot.is_empty:
                slot.item = item
                slot.color = color
                return True
        return False

    def unload_item(self, item: ItemType, color: CoreColor) -> bool:
        for slot in self.storage:
            if slot.item == item and slot.color == color:
                slot.item = None
                slot.color = None
                return True
        return False

    # --- Quests ---

    def get_quests_of_type(self, quest_type: QuestType) -> List[Quest]:
        return [quest for quest in self.quests if quest.type == quest_type]

    def find_quest_for_color(self, quest_type: QuestType, color: CoreColor) -> Optional[Quest]:
        """
        Find the quest a completion of the given type and color would satisfy.

        An open quest of that exact color is preferred. A wildcard is usable only
        if no quest of this type is already bound to the color.

        Returns:
            The matching incomplete quest, or None
        """
        quests = self.get_quests_of_type(quest_type)
        for quest in quests:
            if quest.color == color and not quest.is_completed:
                return quest
        if any(quest.color == color for quest in quests):
            return None
        for quest in quests:
            if quest.is_wild and not quest.is_completed:
                return quest
        return None

    def completed_quest_count(self) -> int:
        return sum(1 for quest in self.quests if quest.is_completed)

    def has_completed_all_quests(self) -> bool:
        return bool(self.quests) and all(quest.is_completed for quest in self.quests)

    def clear_turn_state(self) -> None:
        """Reset per-turn flags and drop any pending recolor intentions."""
        self.used_oracle_card_this_turn = False
        self.recolored_dice.clear()
        self.recolored_cards.clear()
