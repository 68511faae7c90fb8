"""Shared test fixtures and helpers."""

import random

import pytest

from actions import PlayerActions
from engine import GameEngine
from hexmap import HexMap
from models import COLOR_WHEEL, PLAYER_COLORS, CoreColor, HexCoordinates, Phase, Player, Terrain
from movement import MovementSystem
from oracle import OracleSystem
from state import DEFAULT_CONFIG, GameState, create_quests

TEMPLE_COLORS = [CoreColor.BLACK, CoreColor.BLUE, None]
MONSTER_COLORS = [CoreColor.PINK, CoreColor.YELLOW, None]


# --- Fixtures ---


@pytest.fixture
def rng():
    """Deterministic RNG seeded at 42."""
    return random.Random(42)


@pytest.fixture
def engine():
    """Initialized engine (seed=42)."""
    engine = GameEngine(seed=42)
    engine.initialize_game()
    return engine


@pytest.fixture
def sea_map():
    """Radius-3 all-sea map with Zeus at the center."""
    return make_sea_map()


@pytest.fixture
def game_state(sea_map):
    """Two players at Zeus on the small sea map, action phase."""
    return make_game_state(sea_map)


@pytest.fixture
def actions(game_state):
    return make_actions(game_state)


# --- Helper functions ---


def sea_color(q, r):
    """Color pattern of make_sea_map: no two neighbors share a color."""
    return COLOR_WHEEL[(q - r) % 6]


def make_sea_map(radius=3):
    """Create an all-sea map, Zeus at (0, 0), colored so adjacent sea hexes differ."""
    hex_map = HexMap(radius, Terrain.SEA)
    for cell in hex_map:
        cell.color = sea_color(cell.q, cell.r)
    zeus = hex_map.get_cell((0, 0))
    zeus.terrain = Terrain.ZEUS
    zeus.color = None
    return hex_map


def set_land(hex_map, coords, terrain, color=None):
    cell = hex_map.get_cell(coords)
    cell.terrain = terrain
    cell.color = color
    return cell


def make_player(player_id=0, favor=5, dice=None, cards=None, position=(0, 0), quests=None):
    return Player(
        id=player_id,
        name=f"Player {player_id + 1}",
        color=PLAYER_COLORS[player_id],
        ship_position=HexCoordinates(*position),
        favor=favor,
        oracle_dice=list(dice) if dice is not None else [CoreColor.BLACK, CoreColor.PINK, CoreColor.BLUE],
        oracle_cards=list(cards) if cards is not None else [],
        quests=quests if quests is not None else create_quests(TEMPLE_COLORS, MONSTER_COLORS),
    )


def make_game_state(hex_map=None, players=None, deck=None):
    """Create a minimal game state in the action phase."""
    return GameState(
        game_id="test",
        hex_map=hex_map or make_sea_map(),
        players=players or [make_player(0), make_player(1)],
        phase=Phase.ACTION,
        oracle_deck=list(deck) if deck is not None else [CoreColor.RED, CoreColor.GREEN, CoreColor.YELLOW],
        config=dict(DEFAULT_CONFIG),
        rng=random.Random(42),
    )


def make_actions(game_state):
    return PlayerActions(game_state, MovementSystem(game_state.hex_map), OracleSystem(game_state.oracle_deck))


def snapshot(player):
    """Capture everything a rejected action must leave untouched."""
    return (
        player.favor,
        list(player.oracle_dice),
        list(player.oracle_cards),
        player.ship_position,
        player.used_oracle_card_this_turn,
        dict(player.recolored_dice),
        [(slot.item, slot.color) for slot in player.storage],
        [(quest.type, quest.color, quest.is_completed) for quest in player.quests],
    )
