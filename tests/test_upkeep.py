"""Tests for end of turn and the win condition."""

import pytest

from models import COLOR_WHEEL, CoreColor, Phase, RecolorIntention
from upkeep import check_win_condition, end_turn
from conftest import make_game_state, make_player


class TestEndTurn:
    def test_advances_to_next_player(self):
        state = make_game_state()
        result = end_turn(state)
        assert state.current_player_index == 1
        assert result == {'previous_player': 0, 'current_player': 1, 'round': 1}

    def test_new_player_rolls_three_dice(self):
        state = make_game_state()
        state.players[1].oracle_dice = []
        end_turn(state)
        dice = state.players[1].oracle_dice
        assert len(dice) == 3
        assert all(die in COLOR_WHEEL for die in dice)

    def test_finished_player_state_cleared(self):
        state = make_game_state()
        player = state.players[0]
        player.used_oracle_card_this_turn = True
        player.recolored_dice[CoreColor.BLACK] = RecolorIntention(CoreColor.PINK, 1)
        player.recolored_cards[CoreColor.RED] = RecolorIntention(CoreColor.BLACK, 1)
        end_turn(state)
        assert player.used_oracle_card_this_turn is False
        assert player.recolored_dice == {}
        assert player.recolored_cards == {}

    def test_new_player_turn_state_clean(self):
        state = make_game_state()
        incoming = state.players[1]
        incoming.used_oracle_card_this_turn = True
        incoming.recolored_dice[CoreColor.BLUE] = RecolorIntention(CoreColor.YELLOW, 1)
        end_turn(state)
        assert incoming.used_oracle_card_this_turn is False
        assert incoming.recolored_dice == {}

    def test_round_increments_on_wrap(self):
        state = make_game_state(players=[make_player(0), make_player(1), make_player(2)])
        end_turn(state)
        end_turn(state)
        assert state.round == 1
        end_turn(state)
        assert state.current_player_index == 0
        assert state.round == 2

    def test_only_in_action_phase(self):
        state = make_game_state()
        state.phase = Phase.END
        with pytest.raises(ValueError):
            end_turn(state)
        assert state.current_player_index == 0

    def test_logged(self):
        state = make_game_state()
        end_turn(state)
        assert state.log[-1]['event'] == "Turn ended"
        assert state.log[-1]['current_player'] == 1


class TestWinCondition:
    def test_no_winner(self):
        state = make_game_state()
        assert check_win_condition(state) == (None, False)
        assert state.phase == Phase.ACTION

    def test_winner_ends_game(self):
        state = make_game_state()
        winner = state.players[1]
        for quest in winner.quests:
            quest.is_completed = True
        assert check_win_condition(state) == (winner, True)
        assert state.phase == Phase.END
        assert state.log[-1]['winner'] == 1

    def test_partial_progress_is_not_a_win(self):
        state = make_game_state()
        for quest in state.players[0].quests[:-1]:
            quest.is_completed = True
        assert check_win_condition(state) == (None, False)
