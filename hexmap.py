"""
Hex board for Quests of Zeus.
A radius-R hexagon of cells in axial coordinates (q, r) with s = -q - r.
"""

from typing import Dict, Iterator, List, Optional, Tuple

from models import HexCell, HexCoordinates, Terrain

# Direction vectors indexed 0..5; corners of the map lie radius steps along each one
DIRECTIONS: List[Tuple[int, int]] = [(1, -1), (1, 0), (0, 1), (-1, 1), (-1, 0), (0, -1)]


def get_hex_neighbors(q: int, r: int) -> List[Tuple[int, int]]:
    """
    Get the 6 neighboring hex coordinates in axial system.

    Args:
        q: Axial coordinate q
        r: Axial coordinate r

    Returns:
        List of (q, r) coordinates in direction order
    """
    return [(q + dq, r + dr) for dq, dr in DIRECTIONS]


def get_adjacent(coords: Tuple[int, int], direction: int, distance: int = 1) -> HexCoordinates:
    """Walk `distance` steps from coords in the given direction (taken modulo 6)."""
    dq, dr = DIRECTIONS[direction % 6]
    return HexCoordinates(coords[0] + dq * distance, coords[1] + dr * distance)


def hex_distance(q1: int, r1: int, q2: int, r2: int) -> int:
    """
    Calculate distance between two hexes using axial coordinates.

    Args:
        q1, r1: Coordinates of first hex
        q2, r2: Coordinates of second hex

    Returns:
        Distance between hexes
    """
    return max(abs(q1 - q2), abs(r1 - r2), abs(-(q1 + r1) + (q2 + r2)))


def is_valid_hex(q: int, r: int, radius: int = 6) -> bool:
    """Check that |q|, |r| and |s| are all within the radius."""
    return abs(q) <= radius and abs(r) <= radius and abs(-q - r) <= radius


class HexMap:
    """
    The board: every coordinate of a radius-R hexagon mapped to a HexCell.

    The coordinate set never changes after construction; map generation
    mutates terrain and color of the cells in place.
    """

    def __init__(self, radius: int = 6, terrain: Terrain = Terrain.UNDECIDED):
        self.radius = radius
        self.cells: Dict[HexCoordinates, HexCell] = {}
        self.generation_warnings: List[str] = []
        for q in range(-radius, radius + 1):
            for r in range(max(-radius, -q - radius), min(radius, -q + radius) + 1):
                self.cells[HexCoordinates(q, r)] = HexCell(q=q, r=r, terrain=terrain)

    def __iter__(self) -> Iterator[HexCell]:
        return iter(self.cells.values())

    def __len__(self) -> int:
        return len(self.cells)

    def __contains__(self, coords) -> bool:
        return is_valid_hex(coords[0], coords[1], self.radius)

    def get_cell(self, coords: Tuple[int, int]) -> Optional[HexCell]:
        return self.cells.get(HexCoordinates(*coords))

    def get_neighbors(self, coords: Tuple[int, int]) -> List[HexCell]:
        """Cells adjacent to coords, skipping positions off the map."""
        neighbors = []
        for position in get_hex_neighbors(coords[0], coords[1]):
            cell = self.cells.get(HexCoordinates(*position))
            if cell is not None:
                neighbors.append(cell)
        return neighbors

    def get_neighbors_of_type(self, coords: Tuple[int, int], terrain: Terrain) -> List[HexCell]:
        return [cell for cell in self.get_neighbors(coords) if cell.terrain == terrain]

    def has_neighbor_of_type(self, coords: Tuple[int, int], terrain: Terrain) -> bool:
        return any(cell.terrain == terrain for cell in self.get_neighbors(coords))

    def get_cells_by_terrain(self, terrain: Terrain) -> List[HexCell]:
        return [cell for cell in self.cells.values() if cell.terrain == terrain]

    def get_zeus(self) -> HexCell:
        """Return the Zeus hub cell; a map without one was never finished generating."""
        for cell in self.cells.values():
            if cell.terrain == Terrain.ZEUS:
                return cell
        raise LookupError("Map has no Zeus hex")

    def corner(self, direction: int) -> HexCoordinates:
        """The corner reached by walking radius steps from the center."""
        return get_adjacent((0, 0), direction, self.radius)

    def terrain_counts(self) -> Dict[Terrain, int]:
        counts = {terrain: 0 for terrain in Terrain}
        for cell in self.cells.values():
            counts[cell.terrain] += 1
        return counts
