"""
Oracle economy for Quests of Zeus.

Oracle dice and cards carry a core color. Favor can shift that color along
the color wheel (one step per favor) before the die or card is used. Cards
come from a shared deck of 5 copies of every color.
"""

import random
from typing import Dict, List, Optional

from models import COLOR_WHEEL, CoreColor, Player, RecolorIntention

CARD_COPIES_PER_COLOR = 5
FAVOR_PER_SPEND = 2


def apply_recolor(color: CoreColor, favor_spent: int) -> CoreColor:
    """Move color favor_spent steps forward on the color wheel."""
    index = COLOR_WHEEL.index(color)
    return COLOR_WHEEL[(index + favor_spent) % len(COLOR_WHEEL)]


def roll_oracle_dice(rng: Optional[random.Random] = None, count: int = 3) -> List[CoreColor]:
    """Roll `count` oracle dice; each shows one of the six core colors."""
    rng = rng or random.Random()
    return [rng.choice(COLOR_WHEEL) for _ in range(count)]


def create_oracle_deck(rng: Optional[random.Random] = None, copies: int = CARD_COPIES_PER_COLOR) -> List[CoreColor]:
    """Build a shuffled deck holding `copies` cards of every core color."""
    rng = rng or random.Random()
    deck = [color for color in COLOR_WHEEL for _ in range(copies)]
    rng.shuffle(deck)
    return deck


class OracleSystem:
    """
    Operations on a player's dice and cards.

    Every method checks all of its preconditions before mutating anything and
    reports failure as False.
    """

    def __init__(self, deck: List[CoreColor], favor_per_spend: int = FAVOR_PER_SPEND):
        # Shared with GameState; the top of the deck is the end of the list
        self.deck = deck
        self.favor_per_spend = favor_per_spend

    @property
    def deck_size(self) -> int:
        return len(self.deck)

    def take_card(self) -> Optional[CoreColor]:
        return self.deck.pop() if self.deck else None

    # --- Recolor intentions ---

    def _set_intention(self, player: Player, resources: List[CoreColor],
                       intentions: Dict[CoreColor, RecolorIntention],
                       color: CoreColor, favor_cost: int) -> bool:
        if color not in resources or favor_cost < 0 or player.favor < favor_cost:
            return False
        if favor_cost == 0:
            intentions.pop(color, None)
            return True
        intentions[color] = RecolorIntention(apply_recolor(color, favor_cost), favor_cost)
        return True

    def set_recolor_intention(self, player: Player, die_color: CoreColor, favor_cost: int) -> bool:
        """
        Record that a die should be recolored by favor_cost steps when used.

        No favor is spent yet. Setting a cost of 0 clears the intention.
        """
        return self._set_intention(player, player.oracle_dice, player.recolored_dice, die_color, favor_cost)

    def set_recolor_intention_for_card(self, player: Player, card_color: CoreColor, favor_cost: int) -> bool:
        return self._set_intention(player, player.oracle_cards, player.recolored_cards, card_color, favor_cost)

    def clear_recolor_intention(self, player: Player, die_color: CoreColor) -> bool:
        return player.recolored_dice.pop(die_color, None) is not None

    def clear_recolor_intention_for_card(self, player: Player, card_color: CoreColor) -> bool:
        return player.recolored_cards.pop(card_color, None) is not None

    # --- Applying intentions ---

    def _apply(self, player: Player, resources: List[CoreColor],
               intentions: Dict[CoreColor, RecolorIntention], color: CoreColor) -> bool:
        intention = intentions.get(color)
        if intention is None or color not in resources:
            return False
        if player.favor < intention.favor_cost:
            return False
        resources[resources.index(color)] = intention.new_color
        player.spend_favor(intention.favor_cost)
        del intentions[color]
        return True

    def apply_recoloring(self, player: Player, die_color: CoreColor) -> bool:
        """
        Recolor one die according to its stored intention and pay the favor.

        The die keeps its place in the dice list; only its color changes.
        """
        return self._apply(player, player.oracle_dice, player.recolored_dice, die_color)

    def apply_recoloring_for_card(self, player: Player, card_color: CoreColor) -> bool:
        return self._apply(player, player.oracle_cards, player.recolored_cards, card_color)

    # --- Spending dice and cards ---

    @staticmethod
    def discard_resource(resources: List[CoreColor], intentions: Dict[CoreColor, RecolorIntention],
                         color: CoreColor) -> None:
        """Remove one resource; its color's intention stays while another of that color is held."""
        resources.remove(color)
        if color not in resources:
            intentions.pop(color, None)

    def draw_oracle_card(self, player: Player, die_color: CoreColor) -> bool:
        """Spend a die to draw the top card of the deck."""
        if die_color not in player.oracle_dice or not self.deck_size:
            return False
        self.discard_resource(player.oracle_dice, player.recolored_dice, die_color)
        player.oracle_cards.append(self.deck.pop())
        return True

    def spend_die_for_favor(self, player: Player, die_color: CoreColor) -> bool:
        """Spend a die for favor. A pending recolor on its color is not charged."""
        if die_color not in player.oracle_dice:
            return False
        self.discard_resource(player.oracle_dice, player.recolored_dice, die_color)
        player.gain_favor(self.favor_per_spend)
        return True

    def spend_oracle_card_for_favor(self, player: Player, card_color: CoreColor) -> bool:
        """Spend a card for favor; limited to one card per turn."""
        if card_color not in player.oracle_cards or player.used_oracle_card_this_turn:
            return False
        self.discard_resource(player.oracle_cards, player.recolored_cards, card_color)
        player.gain_favor(self.favor_per_spend)
        player.used_oracle_card_this_turn = True
        return True

    def spend_oracle_card_to_draw_card(self, player: Player, card_color: CoreColor) -> bool:
        """Trade a card for the top card of the deck; limited to one card per turn."""
        if card_color not in player.oracle_cards or player.used_oracle_card_this_turn:
            return False
        if not self.deck_size:
            return False
        self.discard_resource(player.oracle_cards, player.recolored_cards, card_color)
        player.oracle_cards.append(self.deck.pop())
        player.used_oracle_card_this_turn = True
        return True
