"""
Game state management for Quests of Zeus
Implements game state, game setup and the event log.

Setup: two players start at Zeus with 3 oracle dice each and favor 3 + id.
Every player has 12 quests (3 temple, 3 monster, 3 statue, 3 shrine).
Pieces: cubes on offering hexes, monsters, statues in cities, statue bases
and owned shrines.
"""

from __future__ import annotations
import json
import os
import random
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from hexmap import HexMap
from map_gen import generate_map
from models import (
    COLOR_WHEEL, PLAYER_COLORS, CityHex, CoreColor, CubeHex, HexCoordinates,
    MonsterHex, Phase, Player, Quest, QuestType, ShrineHex, ShrineReward,
    StatueHex, Terrain,
)
from oracle import create_oracle_deck, roll_oracle_dice

CONFIG_PATH = os.path.join(os.path.dirname(__file__), 'config.json')

DEFAULT_CONFIG: Dict[str, Any] = {
    'map_radius': 6,
    'player_count': 2,
    'monster_strength': 3,
    'max_shallow_conversions': 10,
    'base_move_range': 3,
    'dice_per_turn': 3,
    'oracle_card_copies': 5,
    'starting_favor': 3,
    'favor_per_spend': 2,
    'temple_favor_reward': 3,
    'shrine_favor_reward': 4,
}

QUESTS_PER_TYPE = 3
SHRINES_PER_OWNER = 3
SHRINE_REWARDS = [ShrineReward.FAVOR, ShrineReward.CARD, ShrineReward.SHIELD]
# Colors temple and monster quests are drawn from
QUEST_COLORS = [CoreColor.BLACK, CoreColor.BLUE, CoreColor.PINK, CoreColor.YELLOW]


@dataclass
class GameState:
    """
    Complete game state containing all game information.

    Play runs through phases setup -> action -> end; within the action
    phase players take turns in order and a new round starts whenever play
    returns to the first player.
    """
    hex_map: HexMap
    players: List[Player] = field(default_factory=list)
    game_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    current_player_index: int = 0
    round: int = 1
    phase: Phase = Phase.SETUP
    monster_strength: int = 3
    cube_hexes: List[CubeHex] = field(default_factory=list)
    monster_hexes: List[MonsterHex] = field(default_factory=list)
    city_hexes: List[CityHex] = field(default_factory=list)
    statue_hexes: List[StatueHex] = field(default_factory=list)
    shrine_hexes: List[ShrineHex] = field(default_factory=list)
    oracle_deck: List[CoreColor] = field(default_factory=list)
    config: Dict[str, Any] = field(default_factory=lambda: dict(DEFAULT_CONFIG))
    log: List[Dict[str, Any]] = field(default_factory=list)
    rng: random.Random = field(default_factory=random.Random, repr=False)

    def get_current_player(self) -> Player:
        return self.players[self.current_player_index]

    def get_player_by_id(self, player_id: int) -> Optional[Player]:
        """Get a player by their ID."""
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    def get_cube_hex(self, coords: Tuple[int, int]) -> Optional[CubeHex]:
        return _find_at(self.cube_hexes, coords)

    def get_monster_hex(self, coords: Tuple[int, int]) -> Optional[MonsterHex]:
        return _find_at(self.monster_hexes, coords)

    def get_city_hex(self, coords: Tuple[int, int]) -> Optional[CityHex]:
        return _find_at(self.city_hexes, coords)

    def get_statue_hex(self, coords: Tuple[int, int]) -> Optional[StatueHex]:
        return _find_at(self.statue_hexes, coords)

    def get_shrine_hex(self, coords: Tuple[int, int]) -> Optional[ShrineHex]:
        return _find_at(self.shrine_hexes, coords)


def _find_at(pieces, coords):
    target = HexCoordinates(*coords)
    for piece in pieces:
        if piece.coordinates == target:
            return piece
    return None


def log_event(game_state: GameState, event: str, **kwargs) -> None:
    """
    Add an event to the game state log.

    Args:
        game_state: Current game state
        event: Description of the event
        **kwargs: Additional event data to include
    """
    log_entry = {
        'round': game_state.round,
        'phase': game_state.phase.value,
        'event': event,
        **kwargs
    }
    game_state.log.append(log_entry)


def load_config(path: str = CONFIG_PATH) -> Dict[str, Any]:
    """
    Load tuning values from config.json, falling back to defaults.

    Unknown keys are ignored; a missing or invalid file yields the defaults.
    """
    config = dict(DEFAULT_CONFIG)
    try:
        with open(path, 'r') as f:
            loaded = json.load(f)
        for key in DEFAULT_CONFIG:
            if key in loaded:
                config[key] = loaded[key]
    except (FileNotFoundError, json.JSONDecodeError):
        # Use defaults if config file is missing or invalid
        pass
    return config


def create_quests(temple_colors: List[Optional[CoreColor]],
                  monster_colors: List[Optional[CoreColor]]) -> List[Quest]:
    """
    Create the 12 quests of a player.

    Temple and monster quests use the given colors (None = wildcard);
    statue and shrine quests are all wildcards.
    """
    quests = [Quest(QuestType.TEMPLE, color) for color in temple_colors]
    quests += [Quest(QuestType.MONSTER, color) for color in monster_colors]
    quests += [Quest(QuestType.STATUE) for _ in range(QUESTS_PER_TYPE)]
    quests += [Quest(QuestType.SHRINE) for _ in range(QUESTS_PER_TYPE)]
    return quests


def create_player(player_id: int, start: HexCoordinates, rng: random.Random,
                  quests: List[Quest], starting_favor: int = 3, dice: int = 3,
                  move_range: int = 3) -> Player:
    """
    Create a new player with ship at the start hex.

    Args:
        player_id: Zero-based player index
        start: Ship position (Zeus)
        rng: Random source for the opening dice roll
        quests: The player's quests
        starting_favor: Favor of player 0; later players get one more each
        dice: Number of oracle dice rolled
        move_range: Sea hops per die or card before favor

    Returns:
        New Player instance
    """
    return Player(
        id=player_id,
        name=f"Player {player_id + 1}",
        color=PLAYER_COLORS[player_id % len(PLAYER_COLORS)],
        ship_position=start,
        favor=starting_favor + player_id,
        oracle_dice=roll_oracle_dice(rng, dice),
        quests=quests,
        range=move_range,
    )


def setup_cube_hexes(hex_map: HexMap, rng: random.Random, player_count: int) -> List[CubeHex]:
    """Each offering hex takes one row of a shuffled Latin square over the color wheel."""
    wheel = list(COLOR_WHEEL)
    rng.shuffle(wheel)
    cube_hexes = []
    for index, cell in enumerate(hex_map.get_cells_by_terrain(Terrain.OFFERINGS)):
        row = wheel[index % len(wheel):] + wheel[:index % len(wheel)]
        cube_hexes.append(CubeHex(cell.q, cell.r, row[:player_count]))
    return cube_hexes


def setup_monster_hexes(hex_map: HexMap, rng: random.Random, player_count: int) -> List[MonsterHex]:
    """Deal player_count monsters of every color round-robin over the shuffled monster hexes."""
    cells = hex_map.get_cells_by_terrain(Terrain.MONSTERS)
    rng.shuffle(cells)
    monster_hexes = [MonsterHex(cell.q, cell.r) for cell in cells]
    if not monster_hexes:
        return monster_hexes
    monsters = [color for color in COLOR_WHEEL for _ in range(player_count)]
    rng.shuffle(monsters)
    for index, color in enumerate(monsters):
        monster_hexes[index % len(monster_hexes)].monster_colors.append(color)
    return monster_hexes


def setup_city_hexes(hex_map: HexMap) -> List[CityHex]:
    return [CityHex(cell.q, cell.r, cell.color) for cell in hex_map.get_cells_by_terrain(Terrain.CITY)]


def setup_statue_hexes(hex_map: HexMap, rng: random.Random) -> List[StatueHex]:
    """
    Give each statue site 3 base colors.

    The wheel is shuffled and appended three times, each copy rotated by a
    random 0-2 steps, then dealt out 3 colors per site.
    """
    wheel = list(COLOR_WHEEL)
    rng.shuffle(wheel)
    colors: List[CoreColor] = []
    for _ in range(3):
        shift = rng.randint(0, 2)
        colors += wheel[shift:] + wheel[:shift]

    statue_hexes = []
    for index, cell in enumerate(hex_map.get_cells_by_terrain(Terrain.STATUE)):
        bases = colors[(index * 3) % len(colors):(index * 3) % len(colors) + 3]
        statue_hexes.append(StatueHex(cell.q, cell.r, list(bases)))
    return statue_hexes


def setup_shrine_hexes(hex_map: HexMap, rng: random.Random) -> List[ShrineHex]:
    """
    Assign owners and rewards to shrines.

    Every owner color holds 3 shrines, each with a different reward.
    """
    cells = hex_map.get_cells_by_terrain(Terrain.SHRINE)
    rng.shuffle(cells)
    shrine_hexes = []
    for index, cell in enumerate(cells):
        owner = PLAYER_COLORS[(index // SHRINES_PER_OWNER) % len(PLAYER_COLORS)]
        reward = SHRINE_REWARDS[index % SHRINES_PER_OWNER]
        shrine_hexes.append(ShrineHex(cell.q, cell.r, cell.color, owner, reward))
    return shrine_hexes


def initialize_game(seed: Optional[int] = None, config: Optional[Dict[str, Any]] = None) -> GameState:
    """
    Initialize a new game state with generated map, players and pieces.

    Args:
        seed: Random seed; the same seed yields the same game
        config: Tuning values (defaults come from config.json)

    Returns:
        New GameState in the action phase
    """
    config = {**load_config(), **(config or {})}
    rng = random.Random(seed)

    hex_map = generate_map(
        radius=config['map_radius'],
        max_shallow_conversions=config['max_shallow_conversions'],
        rng=rng,
    )
    zeus = hex_map.get_zeus()

    game_state = GameState(
        hex_map=hex_map,
        monster_strength=config['monster_strength'],
        config=config,
        rng=rng,
    )

    quest_colors = list(QUEST_COLORS)
    rng.shuffle(quest_colors)
    temple_colors = quest_colors[:2] + [None]
    monster_colors = quest_colors[2:] + [None]

    for player_id in range(config['player_count']):
        game_state.players.append(create_player(
            player_id, zeus.coordinates, rng,
            create_quests(temple_colors, monster_colors),
            starting_favor=config['starting_favor'],
            dice=config['dice_per_turn'],
            move_range=config['base_move_range'],
        ))

    game_state.cube_hexes = setup_cube_hexes(hex_map, rng, config['player_count'])
    game_state.monster_hexes = setup_monster_hexes(hex_map, rng, config['player_count'])
    game_state.city_hexes = setup_city_hexes(hex_map)
    game_state.statue_hexes = setup_statue_hexes(hex_map, rng)
    game_state.shrine_hexes = setup_shrine_hexes(hex_map, rng)
    game_state.oracle_deck = create_oracle_deck(rng, config['oracle_card_copies'])

    game_state.phase = Phase.ACTION
    log_event(game_state, "Game initialized", seed=seed, players=len(game_state.players),
              warnings=list(hex_map.generation_warnings))
    return game_state


def get_game_summary(game_state: GameState) -> Dict:
    """
    Get a summary of the current game state for display.

    Args:
        game_state: Current game state

    Returns:
        Dictionary with game summary information
    """
    return {
        'game_id': game_state.game_id,
        'round': game_state.round,
        'phase': game_state.phase.value,
        'current_player': game_state.get_current_player().id if game_state.players else None,
        'players': [
            {
                'id': player.id,
                'name': player.name,
                'color': player.color.value,
                'ship_position': tuple(player.ship_position),
                'favor': player.favor,
                'shield': player.shield,
                'oracle_dice': [color.value for color in player.oracle_dice],
                'oracle_cards': [color.value for color in player.oracle_cards],
                'storage': [
                    {'item': slot.item.value, 'color': slot.color.value} if not slot.is_empty else None
                    for slot in player.storage
                ],
                'completed_quests': player.completed_quest_count(),
                'total_quests': len(player.quests),
            }
            for player in game_state.players
        ],
        'oracle_deck_size': len(game_state.oracle_deck),
        'map_radius': game_state.hex_map.radius,
    }
