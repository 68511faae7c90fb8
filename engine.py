"""
Game engine for Quests of Zeus.

GameEngine owns one GameState together with the movement and oracle systems
that operate on it, and is the entry point for queries and player actions.
"""

from typing import Dict, List, Optional, Tuple

from actions import ActionResult, PlayerActions
from models import CoreColor, MonsterHex, CubeHex, Phase, Player
from movement import MovementSystem, PossibleMove
from oracle import OracleSystem
from state import GameState, get_game_summary, initialize_game, load_config, log_event
from upkeep import check_win_condition, end_turn


class GameNotInitializedError(Exception):
    """Raised when the engine is used before initialize_game()."""
    pass


class GameEngine:
    """
    Public API of the rules engine.

    Structured actions (movement and land actions) return ActionResult;
    simple oracle operations return bool.
    """

    def __init__(self, seed: Optional[int] = None, map_radius: Optional[int] = None,
                 player_count: Optional[int] = None, monster_strength: Optional[int] = None,
                 max_shallow_conversions: Optional[int] = None):
        self.seed = seed
        self.config = load_config()
        overrides = {
            'map_radius': map_radius,
            'player_count': player_count,
            'monster_strength': monster_strength,
            'max_shallow_conversions': max_shallow_conversions,
        }
        self.config.update({key: value for key, value in overrides.items() if value is not None})

        self.state: Optional[GameState] = None
        self.movement: Optional[MovementSystem] = None
        self.oracle: Optional[OracleSystem] = None
        self.actions: Optional[PlayerActions] = None

    def initialize_game(self) -> GameState:
        """Generate the map, set up players and pieces and start the action phase."""
        self.state = initialize_game(self.seed, self.config)
        self.movement = MovementSystem(self.state.hex_map)
        self.oracle = OracleSystem(self.state.oracle_deck, self.config['favor_per_spend'])
        self.actions = PlayerActions(self.state, self.movement, self.oracle)
        return self.state

    def is_game_initialized(self) -> bool:
        return self.state is not None

    def _ensure_initialized(self) -> GameState:
        if self.state is None:
            raise GameNotInitializedError("Game not initialized. Call initialize_game() first.")
        return self.state

    def _turn_player(self, player_id: int) -> Optional[Player]:
        """The player if it is their turn in the action phase, else None."""
        state = self._ensure_initialized()
        if state.phase != Phase.ACTION:
            return None
        player = state.get_current_player()
        return player if player.id == player_id else None

    # --- Queries ---

    def get_game_state(self) -> GameState:
        return self._ensure_initialized()

    def get_current_player(self) -> Player:
        return self._ensure_initialized().get_current_player()

    def get_player(self, player_id: int) -> Optional[Player]:
        return self._ensure_initialized().get_player_by_id(player_id)

    def get_available_moves(self, player_id: int, favor_budget: int = 0) -> List[Dict]:
        """
        All destinations reachable with any of the player's dice or cards.

        Args:
            player_id: Player to query
            favor_budget: Most favor the player is willing to spend on range

        Returns:
            One entry per resource and destination with its favor cost
        """
        player = self.get_player(player_id)
        if player is None:
            return []
        moves = []
        for kind, colors in (('die', player.oracle_dice), ('card', player.oracle_cards)):
            for color in dict.fromkeys(colors):
                for move in self._moves_for(player, color, kind == 'card', favor_budget):
                    moves.append({'q': move.q, 'r': move.r, 'color': move.color.value,
                                  'favor_cost': move.favor_cost, kind: color.value})
        return moves

    def _moves_for(self, player: Player, color: CoreColor, is_card: bool, available_favor: int) -> List[PossibleMove]:
        intentions = player.recolored_cards if is_card else player.recolored_dice
        intention = intentions.get(color)
        recolor_cost = intention.favor_cost if intention else 0
        effective_color = intention.new_color if intention else color
        max_favor = max(0, min(available_favor, player.favor) - recolor_cost)
        return self.movement.get_available_moves_for_color(
            player.ship_position, effective_color, player.range, max_favor)

    def get_available_moves_for_die(self, player_id: int, die_color: CoreColor,
                                    available_favor: int = 0) -> List[PossibleMove]:
        """Destinations for one die, taking its recolor intention into account."""
        player = self.get_player(player_id)
        if player is None or die_color not in player.oracle_dice:
            return []
        return self._moves_for(player, die_color, False, available_favor)

    def get_available_moves_for_card(self, player_id: int, card_color: CoreColor,
                                     available_favor: int = 0) -> List[PossibleMove]:
        player = self.get_player(player_id)
        if player is None or card_color not in player.oracle_cards:
            return []
        return self._moves_for(player, card_color, True, available_favor)

    def get_monsters_on_hex(self, coords: Tuple[int, int]) -> List[CoreColor]:
        monster_hex = self._ensure_initialized().get_monster_hex(coords)
        return list(monster_hex.monster_colors) if monster_hex else []

    def get_cube_hexes(self) -> List[CubeHex]:
        return self._ensure_initialized().cube_hexes

    def get_monster_hexes(self) -> List[MonsterHex]:
        return self._ensure_initialized().monster_hexes

    def check_win_condition(self) -> Tuple[Optional[Player], bool]:
        return check_win_condition(self._ensure_initialized())

    def get_game_summary(self) -> Dict:
        return get_game_summary(self._ensure_initialized())

    # --- Actions ---

    def move_ship(self, player_id: int, destination: Tuple[int, int], die: Optional[CoreColor] = None,
                  card: Optional[CoreColor] = None, favor_to_recolor: Optional[int] = None,
                  favor_for_range: int = 0) -> ActionResult:
        self._ensure_initialized()
        return self.actions.move_ship(player_id, destination, die, card, favor_to_recolor, favor_for_range)

    def collect_offering(self, player_id: int, target: Tuple[int, int], die: Optional[CoreColor] = None,
                         card: Optional[CoreColor] = None, favor_to_recolor: Optional[int] = None) -> ActionResult:
        self._ensure_initialized()
        return self.actions.collect_offering(player_id, target, die, card, favor_to_recolor)

    def fight_monster(self, player_id: int, target: Tuple[int, int], die: Optional[CoreColor] = None,
                      card: Optional[CoreColor] = None, favor_to_recolor: Optional[int] = None) -> ActionResult:
        self._ensure_initialized()
        return self._check_after(self.actions.fight_monster(player_id, target, die, card, favor_to_recolor))

    def build_temple(self, player_id: int, target: Tuple[int, int], die: Optional[CoreColor] = None,
                     card: Optional[CoreColor] = None, favor_to_recolor: Optional[int] = None) -> ActionResult:
        self._ensure_initialized()
        return self._check_after(self.actions.build_temple(player_id, target, die, card, favor_to_recolor))

    def load_statue(self, player_id: int, target: Tuple[int, int], die: Optional[CoreColor] = None,
                    card: Optional[CoreColor] = None, favor_to_recolor: Optional[int] = None) -> ActionResult:
        self._ensure_initialized()
        return self.actions.load_statue(player_id, target, die, card, favor_to_recolor)

    def build_statue(self, player_id: int, target: Tuple[int, int], die: Optional[CoreColor] = None,
                     card: Optional[CoreColor] = None, favor_to_recolor: Optional[int] = None) -> ActionResult:
        self._ensure_initialized()
        return self._check_after(self.actions.build_statue(player_id, target, die, card, favor_to_recolor))

    def activate_shrine(self, player_id: int, target: Tuple[int, int], die: Optional[CoreColor] = None,
                        card: Optional[CoreColor] = None, favor_to_recolor: Optional[int] = None) -> ActionResult:
        self._ensure_initialized()
        return self._check_after(self.actions.activate_shrine(player_id, target, die, card, favor_to_recolor))

    def spend_die_for_favor(self, player_id: int, die_color: CoreColor) -> bool:
        self._ensure_initialized()
        return self.actions.spend_die_for_favor(player_id, die_color)

    def spend_oracle_card_for_favor(self, player_id: int, card_color: CoreColor) -> bool:
        player = self._turn_player(player_id)
        return self._logged(player is not None and self.oracle.spend_oracle_card_for_favor(player, card_color),
                            "Card spent for favor", player_id, card=card_color.value)

    def draw_oracle_card(self, player_id: int, die_color: CoreColor) -> bool:
        player = self._turn_player(player_id)
        return self._logged(player is not None and self.oracle.draw_oracle_card(player, die_color),
                            "Oracle card drawn", player_id, die=die_color.value)

    def spend_oracle_card_to_draw_card(self, player_id: int, card_color: CoreColor) -> bool:
        player = self._turn_player(player_id)
        return self._logged(player is not None and self.oracle.spend_oracle_card_to_draw_card(player, card_color),
                            "Card traded for a new card", player_id, card=card_color.value)

    def set_recolor_intention(self, player_id: int, die_color: CoreColor, favor_cost: int) -> bool:
        player = self._turn_player(player_id)
        return player is not None and self.oracle.set_recolor_intention(player, die_color, favor_cost)

    def set_recolor_intention_for_card(self, player_id: int, card_color: CoreColor, favor_cost: int) -> bool:
        player = self._turn_player(player_id)
        return player is not None and self.oracle.set_recolor_intention_for_card(player, card_color, favor_cost)

    def clear_recolor_intention(self, player_id: int, die_color: CoreColor) -> bool:
        player = self._turn_player(player_id)
        return player is not None and self.oracle.clear_recolor_intention(player, die_color)

    def clear_recolor_intention_for_card(self, player_id: int, card_color: CoreColor) -> bool:
        player = self._turn_player(player_id)
        return player is not None and self.oracle.clear_recolor_intention_for_card(player, card_color)

    def end_turn(self) -> Dict:
        result = end_turn(self._ensure_initialized())
        check_win_condition(self.state)
        return result

    def _check_after(self, result: ActionResult) -> ActionResult:
        """Quest-completing actions can end the game."""
        if result.success:
            check_win_condition(self.state)
        return result

    def _logged(self, success: bool, event: str, player_id: int, **kwargs) -> bool:
        if success:
            log_event(self.state, event, player_id=player_id, **kwargs)
        return success
