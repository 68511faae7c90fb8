"""Tests for game setup, configuration and the event log."""

import json

import pytest

from models import COLOR_WHEEL, PLAYER_COLORS, CoreColor, Phase, QuestType, ShrineStatus, Terrain
from state import (
    DEFAULT_CONFIG,
    get_game_summary,
    initialize_game,
    load_config,
    log_event,
)
from conftest import make_game_state


@pytest.fixture(scope="module")
def game():
    return initialize_game(seed=42)


class TestConfig:
    def test_defaults_when_missing(self, tmp_path):
        assert load_config(str(tmp_path / "missing.json")) == DEFAULT_CONFIG

    def test_defaults_when_invalid(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json")
        assert load_config(str(path)) == DEFAULT_CONFIG

    def test_overrides_known_keys(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({'monster_strength': 2, 'unrelated': 1}))
        config = load_config(str(path))
        assert config['monster_strength'] == 2
        assert 'unrelated' not in config
        assert config['map_radius'] == 6

    def test_bundled_config_matches_defaults(self):
        assert load_config() == DEFAULT_CONFIG


class TestInitializeGame:
    def test_phase_and_turn(self, game):
        assert game.phase == Phase.ACTION
        assert game.round == 1
        assert game.current_player_index == 0

    def test_players(self, game):
        zeus = game.hex_map.get_zeus()
        assert len(game.players) == 2
        for player in game.players:
            assert player.ship_position == zeus.coordinates
            assert len(player.oracle_dice) == 3
            assert player.favor == 3 + player.id
            assert player.color == PLAYER_COLORS[player.id]
            assert player.oracle_cards == []

    def test_quests(self, game):
        for player in game.players:
            assert len(player.quests) == 12
            for quest_type in QuestType:
                assert len(player.get_quests_of_type(quest_type)) == 3
            temple_colors = [q.color for q in player.get_quests_of_type(QuestType.TEMPLE)]
            monster_colors = [q.color for q in player.get_quests_of_type(QuestType.MONSTER)]
            assert temple_colors.count(None) == 1
            assert monster_colors.count(None) == 1
            assert not set(temple_colors) & set(monster_colors) - {None}
            assert all(q.color is None for q in player.get_quests_of_type(QuestType.STATUE))
            assert not any(q.is_completed for q in player.quests)

    def test_quests_not_shared_between_players(self, game):
        first, second = game.players
        first.quests[0].is_completed = True
        assert not second.quests[0].is_completed
        first.quests[0].is_completed = False

    def test_oracle_deck(self, game):
        assert len(game.oracle_deck) == 30

    def test_cube_hexes_latin_square(self, game):
        assert len(game.cube_hexes) == 6
        all_cubes = []
        for cube_hex in game.cube_hexes:
            assert len(cube_hex.cube_colors) == 2
            assert len(set(cube_hex.cube_colors)) == 2
            assert game.hex_map.get_cell(cube_hex.coordinates).terrain == Terrain.OFFERINGS
            all_cubes += cube_hex.cube_colors
        for color in COLOR_WHEEL:
            assert all_cubes.count(color) == 2

    def test_monsters(self, game):
        assert len(game.monster_hexes) == 9
        monsters = [color for monster_hex in game.monster_hexes for color in monster_hex.monster_colors]
        assert len(monsters) == 12
        for color in COLOR_WHEEL:
            assert monsters.count(color) == 2
        assert all(1 <= len(m.monster_colors) <= 2 for m in game.monster_hexes)

    def test_cities(self, game):
        assert len(game.city_hexes) == 6
        assert all(city.statues == 3 for city in game.city_hexes)
        assert {city.color for city in game.city_hexes} == set(COLOR_WHEEL)

    def test_statue_hexes(self, game):
        assert len(game.statue_hexes) == 6
        for statue_hex in game.statue_hexes:
            assert len(statue_hex.empty_bases) == 3
            assert statue_hex.raised_statues == []

    def test_shrines(self, game):
        assert len(game.shrine_hexes) == 12
        for owner in PLAYER_COLORS:
            owned = [s for s in game.shrine_hexes if s.owner == owner]
            assert len(owned) == 3
            assert len({s.reward for s in owned}) == 3
        assert all(s.status == ShrineStatus.HIDDEN for s in game.shrine_hexes)
        for shrine in game.shrine_hexes:
            assert shrine.color == game.hex_map.get_cell(shrine.coordinates).color

    def test_piece_lookup(self, game):
        cube_hex = game.cube_hexes[0]
        assert game.get_cube_hex(cube_hex.coordinates) is cube_hex
        assert game.get_cube_hex((cube_hex.q, cube_hex.r)) is cube_hex
        assert game.get_monster_hex(cube_hex.coordinates) is None

    def test_same_seed_same_game(self):
        first, second = initialize_game(seed=7), initialize_game(seed=7)
        assert [p.oracle_dice for p in first.players] == [p.oracle_dice for p in second.players]
        assert first.oracle_deck == second.oracle_deck
        assert [c.cube_colors for c in first.cube_hexes] == [c.cube_colors for c in second.cube_hexes]

    def test_config_overrides(self):
        game = initialize_game(seed=3, config={'player_count': 3, 'monster_strength': 2})
        assert len(game.players) == 3
        assert game.monster_strength == 2
        assert all(len(c.cube_colors) == 3 for c in game.cube_hexes)

    def test_setup_logged(self, game):
        assert game.log[0]['event'] == "Game initialized"
        assert game.log[0]['phase'] == "action"


class TestLogAndSummary:
    def test_log_event(self):
        state = make_game_state()
        log_event(state, "Something happened", player_id=0)
        assert state.log[-1] == {'round': 1, 'phase': 'action', 'event': "Something happened", 'player_id': 0}

    def test_summary(self, game):
        summary = get_game_summary(game)
        assert summary['round'] == 1
        assert summary['phase'] == 'action'
        assert summary['current_player'] == 0
        assert summary['oracle_deck_size'] == 30
        assert len(summary['players']) == 2
        first = summary['players'][0]
        assert first['favor'] == 3
        assert first['total_quests'] == 12
        assert first['storage'] == [None, None]
        assert first['color'] == CoreColor.GREEN.value
