"""
Turn management for Quests of Zeus
Handles end of turn, dice rolls for the next player and the win condition.

End of turn:
- Clear the finishing player's card flag and recolor intentions
- Pass play to the next player, who rolls 3 fresh oracle dice
- Start a new round when play returns to the first player
"""

from typing import Dict, Optional, Tuple

from models import Phase, Player
from oracle import roll_oracle_dice
from state import GameState, log_event


def end_turn(game_state: GameState) -> Dict:
    """
    Finish the current player's turn.

    Args:
        game_state: Current game state

    Returns:
        Dictionary with the previous and new current player and the round

    Raises:
        ValueError: If called outside the action phase
    """
    if game_state.phase != Phase.ACTION:
        raise ValueError(f"Cannot end turn in {game_state.phase.value} phase")

    finished = game_state.get_current_player()
    finished.clear_turn_state()

    game_state.current_player_index = (game_state.current_player_index + 1) % len(game_state.players)
    if game_state.current_player_index == 0:
        game_state.round += 1

    current = game_state.get_current_player()
    current.oracle_dice = roll_oracle_dice(game_state.rng, game_state.config['dice_per_turn'])
    current.clear_turn_state()

    log_event(game_state, "Turn ended", previous_player=finished.id, current_player=current.id,
              dice=[color.value for color in current.oracle_dice])
    return {
        'previous_player': finished.id,
        'current_player': current.id,
        'round': game_state.round,
    }


def check_win_condition(game_state: GameState) -> Tuple[Optional[Player], bool]:
    """
    Check whether a player has completed every quest.

    The first such player in turn order wins and the game moves to the end phase.

    Returns:
        (winner, game_over)
    """
    for player in game_state.players:
        if player.has_completed_all_quests():
            if game_state.phase != Phase.END:
                game_state.phase = Phase.END
                log_event(game_state, "Game over", winner=player.id)
            return player, True
    return None, game_state.phase == Phase.END
