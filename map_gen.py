"""
Map generation module for Quests of Zeus
Implements procedural hex map generation on a radius-6 hexagon in axial coordinates.

Generation order:
- Zeus on a neighbor of the center, surrounded by sea
- One city near each of the 6 corners
- Special terrain (offerings, temples, statues, monsters, shrines) with fixed counts
- Remaining hexes become sea, sea gets colored, a few sea hexes become shallows
"""

import random
from collections import deque
from typing import Dict, List, Optional, Set, Tuple

from hexmap import HexMap, get_adjacent
from models import COLOR_WHEEL, HexCell, HexCoordinates, LAND_TERRAINS, Terrain
from sea_colors import assign_sea_colors, missing_colors, sea_color_statistics

CITY_COUNT = 6

# Placed in this order; shrines get each core color twice
TERRAIN_COUNTS: List[Tuple[Terrain, int]] = [
    (Terrain.OFFERINGS, 6),
    (Terrain.TEMPLE, 6),
    (Terrain.STATUE, 6),
    (Terrain.MONSTERS, 9),
    (Terrain.SHRINE, 12),
]

WATER_TERRAINS = (Terrain.SEA, Terrain.UNDECIDED)
NAVIGABLE_TERRAINS = (Terrain.SEA, Terrain.SHALLOW)


class MapGenerationError(Exception):
    """Raised when a generated map violates a structural invariant."""
    pass


def can_reach_zeus(
    hex_map: HexMap,
    start: Tuple[int, int],
    excluded: Optional[Tuple[int, int]] = None,
    passable: Tuple[Terrain, ...] = NAVIGABLE_TERRAINS
) -> bool:
    """
    Breadth-first search from start towards the Zeus hex.

    Args:
        hex_map: Map to search
        start: Starting hex coordinates
        excluded: Hex treated as blocked (e.g. a shallow candidate)
        passable: Terrains the path may run through

    Returns:
        True if a chain of passable hexes links start to a neighbor of Zeus
    """
    start = HexCoordinates(*start)
    visited: Set[HexCoordinates] = {start}
    if excluded is not None:
        visited.add(HexCoordinates(*excluded))
    queue = deque([start])

    while queue:
        current = queue.popleft()
        for neighbor in hex_map.get_neighbors(current):
            if neighbor.terrain == Terrain.ZEUS:
                return True
            coords = neighbor.coordinates
            if coords in visited or neighbor.terrain not in passable:
                continue
            visited.add(coords)
            queue.append(coords)

    return False


def _water_connected_to_zeus(hex_map: HexMap, excluded: HexCoordinates) -> bool:
    """Check that every sea/undecided hex (except `excluded`) connects to Zeus through water."""
    water = {
        cell.coordinates for cell in hex_map
        if cell.terrain in WATER_TERRAINS and cell.coordinates != excluded
    }
    zeus = hex_map.get_zeus()
    frontier = [cell.coordinates for cell in hex_map.get_neighbors(zeus.coordinates)
                if cell.coordinates in water]
    visited = set(frontier)
    queue = deque(frontier)
    while queue:
        current = queue.popleft()
        for neighbor in hex_map.get_neighbors(current):
            coords = neighbor.coordinates
            if coords in water and coords not in visited:
                visited.add(coords)
                queue.append(coords)
    return visited == water


def is_valid_placement(hex_map: HexMap, cell: HexCell) -> bool:
    """
    Check whether turning an undecided hex into land keeps the map navigable.

    The hex must keep a water neighbor, each adjacent land hex must keep
    another water neighbor, and all remaining water must stay connected to Zeus.
    """
    neighbors = hex_map.get_neighbors(cell.coordinates)
    if not any(n.terrain in WATER_TERRAINS for n in neighbors):
        return False

    for neighbor in neighbors:
        if neighbor.terrain not in LAND_TERRAINS:
            continue
        others = [n for n in hex_map.get_neighbors(neighbor.coordinates)
                  if n.coordinates != cell.coordinates and n.terrain in WATER_TERRAINS]
        if not others:
            return False

    return _water_connected_to_zeus(hex_map, cell.coordinates)


def place_zeus(hex_map: HexMap, rng: random.Random) -> HexCell:
    """Put Zeus on a random neighbor of the center and surround it with sea."""
    zeus = rng.choice(hex_map.get_neighbors((0, 0)))
    zeus.terrain = Terrain.ZEUS
    zeus.color = None
    for neighbor in hex_map.get_neighbors(zeus.coordinates):
        neighbor.terrain = Terrain.SEA
    return zeus


def place_cities(hex_map: HexMap, rng: random.Random) -> List[HexCell]:
    """
    Place one city near each corner of the map.

    For each corner direction an offset of +2 (distance 0-2) or +4 (distance
    0-1) is chosen and the city walks that far along the rim. If the target is
    no longer undecided the city falls back to the corner itself. Each city
    then sets up to 2 undecided neighbors to sea.

    Returns:
        The city cells in corner order
    """
    colors = list(COLOR_WHEEL)
    rng.shuffle(colors)
    cities = []

    for direction in range(CITY_COUNT):
        corner = hex_map.corner(direction)
        offset = rng.choice([2, 4])
        distance = rng.randint(0, 2 if offset == 2 else 1)
        target = hex_map.get_cell(get_adjacent(corner, direction + offset, distance))
        if target is None or target.terrain != Terrain.UNDECIDED:
            target = hex_map.get_cell(corner)

        target.terrain = Terrain.CITY
        target.color = colors[direction % len(colors)]
        cities.append(target)

        undecided = hex_map.get_neighbors_of_type(target.coordinates, Terrain.UNDECIDED)
        rng.shuffle(undecided)
        for neighbor in undecided[:2]:
            neighbor.terrain = Terrain.SEA

    return cities


def _colors_for(terrain: Terrain, count: int, rng: random.Random) -> List:
    if terrain == Terrain.TEMPLE:
        colors = list(COLOR_WHEEL)
    elif terrain == Terrain.SHRINE:
        colors = list(COLOR_WHEEL) * 2
    else:
        return [None] * count
    rng.shuffle(colors)
    colors = colors * (count // len(colors) + 1)
    return colors[:count]


def place_special_terrain(
    hex_map: HexMap,
    rng: random.Random,
    terrain_counts: List[Tuple[Terrain, int]] = TERRAIN_COUNTS
) -> Dict[Terrain, int]:
    """
    Place special terrain in fixed order on undecided hexes.

    A constrained pass only uses hexes passing `is_valid_placement`; if the
    count is still short, a relaxed pass fills the rest from any undecided
    hex. Shortfalls are reported as warnings, never raised.

    Returns:
        Number of hexes actually placed per terrain
    """
    placed_counts = {}
    for terrain, count in terrain_counts:
        colors = _colors_for(terrain, count, rng)
        placed = 0

        candidates = hex_map.get_cells_by_terrain(Terrain.UNDECIDED)
        rng.shuffle(candidates)
        for cell in candidates:
            if placed >= count:
                break
            if is_valid_placement(hex_map, cell):
                cell.terrain = terrain
                cell.color = colors[placed]
                placed += 1

        if placed < count:
            _warn(hex_map, f"Only {placed}/{count} {terrain.value} hexes passed placement "
                           f"constraints, placing the rest without them")
            leftovers = hex_map.get_cells_by_terrain(Terrain.UNDECIDED)
            rng.shuffle(leftovers)
            for cell in leftovers:
                if placed >= count:
                    break
                cell.terrain = terrain
                cell.color = colors[placed]
                placed += 1

        if placed < count:
            _warn(hex_map, f"Could not place all {terrain.value} hexes: {placed}/{count}")
        placed_counts[terrain] = placed

    return placed_counts


def fill_remaining_with_sea(hex_map: HexMap) -> int:
    cells = hex_map.get_cells_by_terrain(Terrain.UNDECIDED)
    for cell in cells:
        cell.terrain = Terrain.SEA
    return len(cells)


def can_convert_to_shallow(hex_map: HexMap, cell: HexCell) -> bool:
    """
    Check whether a sea hex may become a shallow.

    Shallows never touch Zeus or a city, every sea neighbor must still reach
    Zeus without passing through this hex, and every adjacent land hex must
    keep another sea neighbor.
    """
    if cell.terrain != Terrain.SEA:
        return False

    if (hex_map.has_neighbor_of_type(cell.coordinates, Terrain.ZEUS)
            or hex_map.has_neighbor_of_type(cell.coordinates, Terrain.CITY)):
        return False

    neighbors = hex_map.get_neighbors(cell.coordinates)

    for neighbor in neighbors:
        if neighbor.terrain == Terrain.SEA:
            if not can_reach_zeus(hex_map, neighbor.coordinates, excluded=cell.coordinates):
                return False
        elif neighbor.terrain != Terrain.SHALLOW:
            other_sea = [n for n in hex_map.get_neighbors_of_type(neighbor.coordinates, Terrain.SEA)
                         if n.coordinates != cell.coordinates]
            if not other_sea:
                return False

    return True


def convert_sea_to_shallows(hex_map: HexMap, rng: random.Random, max_conversions: int = 10) -> int:
    """
    Turn up to max_conversions shuffled sea hexes into shallows (color none).

    Returns:
        Number of hexes converted
    """
    candidates = hex_map.get_cells_by_terrain(Terrain.SEA)
    rng.shuffle(candidates)
    converted = 0
    for cell in candidates:
        if converted >= max_conversions:
            break
        if can_convert_to_shallow(hex_map, cell):
            cell.terrain = Terrain.SHALLOW
            cell.color = None
            converted += 1
    return converted


def _warn(hex_map: HexMap, message: str) -> None:
    print(f"Warning: {message}")
    hex_map.generation_warnings.append(message)


def generate_map(
    seed: Optional[int] = None,
    radius: int = 6,
    max_shallow_conversions: int = 10,
    rng: Optional[random.Random] = None
) -> HexMap:
    """
    Generate a procedural hex map for Quests of Zeus.

    Args:
        seed: Random seed for reproducible generation (ignored if rng given)
        radius: Map radius
        max_shallow_conversions: Upper bound on sea hexes turned into shallows
        rng: Random source shared with the rest of game setup

    Returns:
        Fully generated HexMap with no undecided hexes left
    """
    rng = rng or random.Random(seed)
    hex_map = HexMap(radius)

    place_zeus(hex_map, rng)
    place_cities(hex_map, rng)
    place_special_terrain(hex_map, rng)
    fill_remaining_with_sea(hex_map)
    assign_sea_colors(hex_map, rng)
    convert_sea_to_shallows(hex_map, rng, max_shallow_conversions)

    zeus_cells = hex_map.get_cells_by_terrain(Terrain.ZEUS)
    if len(zeus_cells) != 1:
        raise MapGenerationError(f"Expected exactly one Zeus hex, found {len(zeus_cells)}")

    return hex_map


def print_map_stats(hex_map: HexMap) -> None:
    """
    Print detailed statistics about the generated map.

    Args:
        hex_map: Generated map
    """
    counts = hex_map.terrain_counts()
    total = len(hex_map)

    print("\n" + "=" * 50)
    print("MAP STATISTICS")
    print("=" * 50)
    print(f"Total hexes: {total}")
    print(f"Map radius: {hex_map.radius}")
    print("-" * 30)

    for terrain, count in counts.items():
        if count:
            percentage = (count / total) * 100
            print(f"{terrain.value:12}: {count:3d} hexes ({percentage:5.1f}%)")

    stats = sea_color_statistics(hex_map)
    print("-" * 30)
    for color, count in stats['counts'].items():
        print(f"{color:12}: {count:3d} sea hexes")
    print(f"Mean {stats['mean']:.1f}, std {stats['std']:.2f}, spread {stats['spread']}, "
          f"same-color neighbors {stats['conflicts']}")
    absent = missing_colors(hex_map)
    if absent:
        print("✗ No sea hex is " + ", ".join(color.value for color in absent))

    for warning in hex_map.generation_warnings:
        print(f"✗ {warning}")
    print("=" * 50)


if __name__ == "__main__":
    print_map_stats(generate_map(seed=42))
