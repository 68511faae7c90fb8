"""
Player actions for Quests of Zeus.

Every action spends one oracle die or one oracle card (optionally recolored
with favor) and is resolved validate-then-commit: all checks run first and
raise ActionValidationError, which is turned into a failed ActionResult, so a
rejected action never changes the game state.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple

from hexmap import hex_distance
from models import (
    CoreColor, HexCell, HexCoordinates, ItemType, Phase, Player, Quest,
    QuestType, ShrineHex, ShrineReward, ShrineStatus, Terrain,
)
from movement import MovementSystem
from oracle import OracleSystem, apply_recolor
from state import GameState, log_event


class ActionErrorType(Enum):
    WRONG_PHASE = "wrong_phase"
    INVALID_PLAYER = "invalid_player"
    BOTH_DIE_AND_CARD = "both_die_and_card"
    NO_DIE_OR_CARD = "no_die_or_card"
    DIE_NOT_AVAILABLE = "die_not_available"
    CARD_NOT_AVAILABLE = "card_not_available"
    SECOND_CARD = "second_card"
    INVALID_TARGET = "invalid_target"
    NOT_ENOUGH_FAVOR = "not_enough_favor"
    NOT_SEA = "not_sea"
    WRONG_COLOR = "wrong_color"
    NOT_REACHABLE = "not_reachable"
    RECOLORING_FAILED = "recoloring_failed"
    WRONG_TERRAIN = "wrong_terrain"
    PIECE_NOT_AVAILABLE = "piece_not_available"
    STORAGE_FULL = "storage_full"
    NO_MATCHING_QUEST = "no_matching_quest"
    NOT_ENOUGH_DICE = "not_enough_dice"
    SHRINE_UNAVAILABLE = "shrine_unavailable"
    UNKNOWN = "unknown"


@dataclass
class ActionError:
    type: ActionErrorType
    message: str
    details: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ActionResult:
    success: bool
    error: Optional[ActionError] = None


class ActionValidationError(Exception):
    """Exception raised when an action fails validation."""

    def __init__(self, error_type: ActionErrorType, message: str, **details):
        super().__init__(message)
        self.error_type = error_type
        self.details = details

    def to_error(self) -> ActionError:
        return ActionError(self.error_type, str(self), self.details)


@dataclass
class ResourceSpend:
    """A die or card about to be spent, with the color it will count as."""
    color: CoreColor
    is_card: bool
    recolor_cost: int
    effective_color: CoreColor


class PlayerActions:
    """Validation and resolution of everything a player does on their turn."""

    def __init__(self, game_state: GameState, movement: MovementSystem, oracle: OracleSystem):
        self.game_state = game_state
        self.movement = movement
        self.oracle = oracle

    # --- Shared validation ---

    def _run(self, action: str, player_id: int, resolve: Callable[[], Dict[str, Any]]) -> ActionResult:
        try:
            details = resolve()
        except ActionValidationError as e:
            log_event(self.game_state, f"{action} rejected: {e}", action=action,
                      player_id=player_id, error=e.error_type.value)
            return ActionResult(False, e.to_error())
        log_event(self.game_state, f"{action} resolved", action=action, player_id=player_id, **details)
        return ActionResult(True)

    def validate_turn(self, player_id: int) -> Player:
        """Check that actions are allowed and that it is this player's turn."""
        if self.game_state.phase != Phase.ACTION:
            raise ActionValidationError(
                ActionErrorType.WRONG_PHASE,
                f"Actions are not allowed in the {self.game_state.phase.value} phase")
        player = self.game_state.get_player_by_id(player_id)
        if player is None or player is not self.game_state.get_current_player():
            raise ActionValidationError(
                ActionErrorType.INVALID_PLAYER, f"It is not player {player_id}'s turn",
                player_id=player_id)
        return player

    def _resolve_resource(self, player: Player, die: Optional[CoreColor], card: Optional[CoreColor],
                          favor_to_recolor: Optional[int]) -> ResourceSpend:
        if die is not None and card is not None:
            raise ActionValidationError(ActionErrorType.BOTH_DIE_AND_CARD, "Use either a die or a card, not both")
        if die is None and card is None:
            raise ActionValidationError(ActionErrorType.NO_DIE_OR_CARD, "An oracle die or card is required")

        if die is not None:
            if die not in player.oracle_dice:
                raise ActionValidationError(
                    ActionErrorType.DIE_NOT_AVAILABLE, f"Player has no {die.value} die", die=die.value)
            intention = player.recolored_dice.get(die)
            color, is_card = die, False
        else:
            if card not in player.oracle_cards:
                raise ActionValidationError(
                    ActionErrorType.CARD_NOT_AVAILABLE, f"Player has no {card.value} card", card=card.value)
            if player.used_oracle_card_this_turn:
                raise ActionValidationError(ActionErrorType.SECOND_CARD, "Only one oracle card can be used per turn")
            intention = player.recolored_cards.get(card)
            color, is_card = card, True

        if favor_to_recolor is None:
            favor_to_recolor = intention.favor_cost if intention else 0
        return ResourceSpend(color, is_card, favor_to_recolor, apply_recolor(color, favor_to_recolor))

    def _check_favor(self, player: Player, *amounts: int) -> None:
        if any(amount < 0 for amount in amounts):
            raise ActionValidationError(ActionErrorType.NOT_ENOUGH_FAVOR, "Favor amounts cannot be negative")
        needed = sum(amounts)
        if needed > player.favor:
            raise ActionValidationError(
                ActionErrorType.NOT_ENOUGH_FAVOR,
                f"Needs {needed} favor, player has {player.favor}", needed=needed, available=player.favor)

    def _validate_land_target(self, player: Player, target: Tuple[int, int], terrain: Terrain) -> HexCell:
        """The target must be a hex of the given terrain on or next to the ship."""
        cell = self.game_state.hex_map.get_cell(target)
        if cell is None:
            raise ActionValidationError(ActionErrorType.INVALID_TARGET, f"Hex {tuple(target)} is not on the map")
        ship = player.ship_position
        if hex_distance(ship.q, ship.r, cell.q, cell.r) > 1:
            raise ActionValidationError(
                ActionErrorType.INVALID_TARGET, f"Hex {tuple(target)} is not adjacent to the ship")
        if cell.terrain != terrain:
            raise ActionValidationError(
                ActionErrorType.WRONG_TERRAIN, f"Hex {tuple(target)} is {cell.terrain.value}, not {terrain.value}")
        return cell

    def _prepare_land_action(self, player_id, target, terrain, die, card, favor_to_recolor):
        player = self.validate_turn(player_id)
        spend = self._resolve_resource(player, die, card, favor_to_recolor)
        cell = self._validate_land_target(player, target, terrain)
        self._check_favor(player, spend.recolor_cost)
        return player, spend, cell

    @staticmethod
    def _missing_piece(kind: str, target) -> ActionValidationError:
        return ActionValidationError(ActionErrorType.UNKNOWN, f"No {kind} record at hex {tuple(target)}")

    # --- Commit helpers ---

    def _commit_spend(self, player: Player, spend: ResourceSpend) -> None:
        """Consume the die or card, paying for its recolor."""
        resources = player.oracle_cards if spend.is_card else player.oracle_dice
        intentions = player.recolored_cards if spend.is_card else player.recolored_dice
        intention = intentions.get(spend.color)

        if spend.recolor_cost and intention is not None and intention.favor_cost == spend.recolor_cost:
            apply = self.oracle.apply_recoloring_for_card if spend.is_card else self.oracle.apply_recoloring
            if not apply(player, spend.color):
                raise ActionValidationError(
                    ActionErrorType.RECOLORING_FAILED, f"Could not recolor {spend.color.value}")
            resources.remove(spend.effective_color)
        else:
            player.spend_favor(spend.recolor_cost)
            self.oracle.discard_resource(resources, intentions, spend.color)

        if spend.is_card:
            player.used_oracle_card_this_turn = True

    def _grant_shrine_reward(self, player: Player, shrine: ShrineHex) -> None:
        if shrine.reward == ShrineReward.FAVOR:
            player.gain_favor(self.game_state.config['shrine_favor_reward'])
        elif shrine.reward == ShrineReward.CARD:
            card = self.oracle.take_card()
            if card is not None:
                player.oracle_cards.append(card)
        elif shrine.reward == ShrineReward.SHIELD:
            player.shield += 1

    @staticmethod
    def _open_quest_of_color(player: Player, quest_type: QuestType, color: CoreColor) -> Optional[Quest]:
        for quest in player.get_quests_of_type(quest_type):
            if quest.color == color and not quest.is_completed:
                return quest
        return None

    @staticmethod
    def _matching_quest(player: Player, quest_type: QuestType, color: CoreColor) -> Quest:
        quest = player.find_quest_for_color(quest_type, color)
        if quest is None:
            raise ActionValidationError(
                ActionErrorType.NO_MATCHING_QUEST, f"No open {quest_type.value} quest for {color.value}")
        return quest

    # --- Actions ---

    def move_ship(self, player_id: int, destination: Tuple[int, int], die: Optional[CoreColor] = None,
                  card: Optional[CoreColor] = None, favor_to_recolor: Optional[int] = None,
                  favor_for_range: int = 0) -> ActionResult:
        """
        Sail the ship to a sea hex matching the (recolored) die or card.

        The ship moves up to 3 sea hops plus one per favor_for_range.
        favor_to_recolor defaults to the stored recolor intention, if any.
        """
        def resolve():
            player = self.validate_turn(player_id)
            spend = self._resolve_resource(player, die, card, favor_to_recolor)

            target = HexCoordinates(*destination)
            cell = self.game_state.hex_map.get_cell(target)
            if cell is None or target == player.ship_position:
                raise ActionValidationError(
                    ActionErrorType.INVALID_TARGET, f"Cannot move to {tuple(target)}", destination=tuple(target))
            self._check_favor(player, spend.recolor_cost, favor_for_range)
            if cell.terrain != Terrain.SEA:
                raise ActionValidationError(
                    ActionErrorType.NOT_SEA, f"Hex {tuple(target)} is {cell.terrain.value}, not sea")
            if cell.color != spend.effective_color:
                raise ActionValidationError(
                    ActionErrorType.WRONG_COLOR,
                    f"Hex {tuple(target)} is {cell.color.value}, resource counts as {spend.effective_color.value}",
                    hex_color=cell.color.value, effective_color=spend.effective_color.value)

            move_range = player.range + favor_for_range
            is_valid, reason = self.movement.validate_move(
                player.ship_position, target, spend.effective_color, move_range, cell)
            if not is_valid:
                raise ActionValidationError(ActionErrorType.NOT_REACHABLE, reason, range=move_range)

            self._commit_spend(player, spend)
            player.spend_favor(favor_for_range)
            origin = player.ship_position
            player.ship_position = target
            return {'origin': tuple(origin), 'destination': tuple(target),
                    'color': spend.effective_color.value, 'favor_spent': spend.recolor_cost + favor_for_range}

        return self._run("move_ship", player_id, resolve)

    def collect_offering(self, player_id: int, target: Tuple[int, int], die: Optional[CoreColor] = None,
                         card: Optional[CoreColor] = None, favor_to_recolor: Optional[int] = None) -> ActionResult:
        """Load a cube of the resource's color from an offering hex for a temple quest."""
        def resolve():
            player, spend, cell = self._prepare_land_action(
                player_id, target, Terrain.OFFERINGS, die, card, favor_to_recolor)
            cube_hex = self.game_state.get_cube_hex(cell.coordinates)
            if cube_hex is None:
                raise self._missing_piece("offering", target)
            color = spend.effective_color
            if color not in cube_hex.cube_colors:
                raise ActionValidationError(ActionErrorType.PIECE_NOT_AVAILABLE, f"No {color.value} cube here")
            if not player.has_free_slot() or player.has_item(ItemType.CUBE, color):
                raise ActionValidationError(ActionErrorType.STORAGE_FULL, f"Cannot load a {color.value} cube")
            quest = self._matching_quest(player, QuestType.TEMPLE, color)

            self._commit_spend(player, spend)
            cube_hex.cube_colors.remove(color)
            player.load_item(ItemType.CUBE, color)
            quest.color = color
            return {'target': tuple(cell.coordinates), 'color': color.value}

        return self._run("collect_offering", player_id, resolve)

    def build_temple(self, player_id: int, target: Tuple[int, int], die: Optional[CoreColor] = None,
                     card: Optional[CoreColor] = None, favor_to_recolor: Optional[int] = None) -> ActionResult:
        """Deliver a stored cube to the temple of its color."""
        def resolve():
            player, spend, cell = self._prepare_land_action(
                player_id, target, Terrain.TEMPLE, die, card, favor_to_recolor)
            color = spend.effective_color
            if cell.color != color:
                raise ActionValidationError(
                    ActionErrorType.WRONG_COLOR, f"Temple is {cell.color.value}, resource counts as {color.value}")
            if not player.has_item(ItemType.CUBE, color):
                raise ActionValidationError(ActionErrorType.PIECE_NOT_AVAILABLE, f"No {color.value} cube in storage")
            quest = self._open_quest_of_color(player, QuestType.TEMPLE, color)
            if quest is None:
                raise ActionValidationError(ActionErrorType.NO_MATCHING_QUEST, f"No open temple quest for {color.value}")

            self._commit_spend(player, spend)
            player.unload_item(ItemType.CUBE, color)
            quest.is_completed = True
            player.gain_favor(self.game_state.config['temple_favor_reward'])
            return {'target': tuple(cell.coordinates), 'color': color.value}

        return self._run("build_temple", player_id, resolve)

    def fight_monster(self, player_id: int, target: Tuple[int, int], die: Optional[CoreColor] = None,
                      card: Optional[CoreColor] = None, favor_to_recolor: Optional[int] = None) -> ActionResult:
        """
        Defeat a monster of the resource's color.

        The fight costs monster_strength resources: the paying die or card
        counts as one and the rest are the first dice in hand.
        """
        def resolve():
            player, spend, cell = self._prepare_land_action(
                player_id, target, Terrain.MONSTERS, die, card, favor_to_recolor)
            strength = self.game_state.monster_strength
            available = len(player.oracle_dice) + (1 if spend.is_card else 0)
            if available < strength:
                raise ActionValidationError(
                    ActionErrorType.NOT_ENOUGH_DICE, f"Fighting needs {strength} oracle dice",
                    needed=strength, available=available)
            monster_hex = self.game_state.get_monster_hex(cell.coordinates)
            if monster_hex is None:
                raise self._missing_piece("monster", target)
            color = spend.effective_color
            if color not in monster_hex.monster_colors:
                raise ActionValidationError(ActionErrorType.PIECE_NOT_AVAILABLE, f"No {color.value} monster here")
            quest = self._matching_quest(player, QuestType.MONSTER, color)

            self._commit_spend(player, spend)
            for extra_die in player.oracle_dice[:max(strength - 1, 0)]:
                self.oracle.discard_resource(player.oracle_dice, player.recolored_dice, extra_die)
            monster_hex.monster_colors.remove(color)
            quest.color = color
            quest.is_completed = True
            return {'target': tuple(cell.coordinates), 'color': color.value}

        return self._run("fight_monster", player_id, resolve)

    def load_statue(self, player_id: int, target: Tuple[int, int], die: Optional[CoreColor] = None,
                    card: Optional[CoreColor] = None, favor_to_recolor: Optional[int] = None) -> ActionResult:
        """Take a statue from a city of the resource's color."""
        def resolve():
            player, spend, cell = self._prepare_land_action(
                player_id, target, Terrain.CITY, die, card, favor_to_recolor)
            color = spend.effective_color
            if cell.color != color:
                raise ActionValidationError(
                    ActionErrorType.WRONG_COLOR, f"City is {cell.color.value}, resource counts as {color.value}")
            city = self.game_state.get_city_hex(cell.coordinates)
            if city is None:
                raise self._missing_piece("city", target)
            if city.statues <= 0:
                raise ActionValidationError(ActionErrorType.PIECE_NOT_AVAILABLE, "City has no statues left")
            if not player.has_free_slot() or player.has_item(ItemType.STATUE, color):
                raise ActionValidationError(ActionErrorType.STORAGE_FULL, f"Cannot load a {color.value} statue")
            quest = self._matching_quest(player, QuestType.STATUE, color)

            self._commit_spend(player, spend)
            city.statues -= 1
            player.load_item(ItemType.STATUE, color)
            quest.color = color
            return {'target': tuple(cell.coordinates), 'color': color.value}

        return self._run("load_statue", player_id, resolve)

    def build_statue(self, player_id: int, target: Tuple[int, int], die: Optional[CoreColor] = None,
                     card: Optional[CoreColor] = None, favor_to_recolor: Optional[int] = None) -> ActionResult:
        """Raise a stored statue on an empty base of its color."""
        def resolve():
            player, spend, cell = self._prepare_land_action(
                player_id, target, Terrain.STATUE, die, card, favor_to_recolor)
            statue_hex = self.game_state.get_statue_hex(cell.coordinates)
            if statue_hex is None:
                raise self._missing_piece("statue site", target)
            color = spend.effective_color
            if not player.has_item(ItemType.STATUE, color) or color not in statue_hex.empty_bases:
                raise ActionValidationError(
                    ActionErrorType.PIECE_NOT_AVAILABLE, f"Cannot raise a {color.value} statue here")
            quest = self._open_quest_of_color(player, QuestType.STATUE, color)
            if quest is None:
                raise ActionValidationError(ActionErrorType.NO_MATCHING_QUEST, f"No open statue quest for {color.value}")

            self._commit_spend(player, spend)
            statue_hex.empty_bases.remove(color)
            statue_hex.raised_statues.append(color)
            player.unload_item(ItemType.STATUE, color)
            quest.is_completed = True
            return {'target': tuple(cell.coordinates), 'color': color.value}

        return self._run("build_statue", player_id, resolve)

    def activate_shrine(self, player_id: int, target: Tuple[int, int], die: Optional[CoreColor] = None,
                        card: Optional[CoreColor] = None, favor_to_recolor: Optional[int] = None) -> ActionResult:
        """
        Flip or fill a shrine of the resource's color.

        Another player may reveal a hidden shrine and takes its reward. Only the
        owner fills it, completing a shrine quest without a reward.
        """
        def resolve():
            player, spend, cell = self._prepare_land_action(
                player_id, target, Terrain.SHRINE, die, card, favor_to_recolor)
            color = spend.effective_color
            if cell.color != color:
                raise ActionValidationError(
                    ActionErrorType.WRONG_COLOR, f"Shrine is {cell.color.value}, resource counts as {color.value}")
            shrine = self.game_state.get_shrine_hex(cell.coordinates)
            if shrine is None:
                raise self._missing_piece("shrine", target)
            is_owner = shrine.owner == player.color
            if shrine.status == ShrineStatus.FILLED or (shrine.status == ShrineStatus.VISIBLE and not is_owner):
                raise ActionValidationError(
                    ActionErrorType.SHRINE_UNAVAILABLE, f"Shrine is {shrine.status.value}", status=shrine.status.value)
            quest = None
            if is_owner:
                quest = next((q for q in player.get_quests_of_type(QuestType.SHRINE) if not q.is_completed), None)
                if quest is None:
                    raise ActionValidationError(ActionErrorType.NO_MATCHING_QUEST, "No open shrine quest")

            self._commit_spend(player, spend)
            if is_owner:
                shrine.status = ShrineStatus.FILLED
                quest.is_completed = True
            else:
                shrine.status = ShrineStatus.VISIBLE
                self._grant_shrine_reward(player, shrine)
            return {'target': tuple(cell.coordinates), 'status': shrine.status.value, 'reward': shrine.reward.value}

        return self._run("activate_shrine", player_id, resolve)

    def spend_die_for_favor(self, player_id: int, die_color: CoreColor) -> bool:
        """Trade an oracle die for favor."""
        try:
            player = self.validate_turn(player_id)
        except ActionValidationError:
            return False
        if not self.oracle.spend_die_for_favor(player, die_color):
            return False
        log_event(self.game_state, "Die spent for favor", player_id=player_id, die=die_color.value)
        return True
