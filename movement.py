"""
Ship movement for Quests of Zeus.
Ships sail through sea hexes only; a die or card of a color lets the ship
end its move on a sea hex of that color within range.
"""

from collections import deque
from typing import Dict, List, NamedTuple, Optional, Tuple

from hexmap import HexMap
from models import CoreColor, HexCell, HexColor, HexCoordinates, Terrain


class ReachableTile(NamedTuple):
    q: int
    r: int
    color: HexColor


class PossibleMove(NamedTuple):
    q: int
    r: int
    color: CoreColor
    favor_cost: int


class MovementSystem:
    """Reachability and move validation over a HexMap."""

    def __init__(self, hex_map: HexMap):
        self.hex_map = hex_map

    def reachable_sea_tiles(self, origin: Tuple[int, int], move_range: int) -> List[ReachableTile]:
        """
        Breadth-first search from origin through sea hexes.

        The origin itself may be any terrain (ships start on Zeus) and is
        never part of the result.

        Args:
            origin: Starting coordinates
            move_range: Maximum number of hops

        Returns:
            Every sea hex within move_range hops, with its color
        """
        origin = HexCoordinates(*origin)
        visited = {origin}
        queue = deque([(origin, 0)])
        reachable = []

        while queue:
            current, steps = queue.popleft()
            if steps >= move_range:
                continue
            for neighbor in self.hex_map.get_neighbors(current):
                coords = neighbor.coordinates
                if coords in visited or neighbor.terrain != Terrain.SEA:
                    continue
                visited.add(coords)
                reachable.append(ReachableTile(neighbor.q, neighbor.r, neighbor.color))
                queue.append((coords, steps + 1))

        return reachable

    def validate_move(
        self,
        origin: Tuple[int, int],
        destination: Tuple[int, int],
        required_color: CoreColor,
        move_range: int,
        destination_cell: Optional[HexCell] = None
    ) -> Tuple[bool, Optional[str]]:
        """
        Check a move: destination exists, is sea, has the required color and is reachable.

        Returns:
            (is_valid, reason) where reason describes the first failed check
        """
        if destination not in self.hex_map:
            return False, f"Hex {tuple(destination)} does not exist"
        cell = destination_cell or self.hex_map.get_cell(destination)
        if cell.terrain != Terrain.SEA:
            return False, f"Hex {tuple(destination)} is {cell.terrain.value}, not sea"
        if cell.color != required_color:
            color = cell.color.value if cell.color else "none"
            return False, f"Hex {tuple(destination)} is {color}, needs {required_color.value}"

        target = HexCoordinates(*destination)
        for tile in self.reachable_sea_tiles(origin, move_range):
            if (tile.q, tile.r) == target:
                return True, None
        return False, f"Hex {tuple(destination)} is not within {move_range} sea hops"

    def get_available_moves_for_color(
        self,
        origin: Tuple[int, int],
        effective_color: CoreColor,
        base_range: int = 3,
        max_favor: int = 0
    ) -> List[PossibleMove]:
        """
        List sea hexes of a color the ship can reach, each with its smallest favor cost.

        Every extra favor spent adds one hop to the range.

        Args:
            origin: Ship position
            effective_color: Color of the (possibly recolored) die or card
            base_range: Hops available without spending favor
            max_favor: Most favor the player can put into range

        Returns:
            One PossibleMove per destination
        """
        origin = HexCoordinates(*origin)
        moves: Dict[HexCoordinates, PossibleMove] = {}
        for favor_spent in range(max(0, max_favor) + 1):
            for tile in self.reachable_sea_tiles(origin, base_range + favor_spent):
                coords = HexCoordinates(tile.q, tile.r)
                if tile.color != effective_color or coords == origin or coords in moves:
                    continue
                moves[coords] = PossibleMove(tile.q, tile.r, tile.color, favor_spent)
        return list(moves.values())
