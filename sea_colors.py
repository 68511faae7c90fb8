"""
Sea color assignment for Quests of Zeus.

Every sea hex receives one of the six core colors. Adjacent sea hexes should
not share a color and the colors should be spread evenly over the sea; where
the neighborhood leaves no free color, the least conflicting one is used.
"""

import random
from typing import Dict, List, Optional

import numpy as np

from hexmap import HexMap
from models import COLOR_WHEEL, CoreColor, HexCell, Terrain


def least_conflicting_color(hex_map: HexMap, cell: HexCell) -> CoreColor:
    """
    Pick the color shared with the fewest adjacent sea hexes.

    Args:
        hex_map: Map being colored
        cell: Sea cell that has no conflict-free color left

    Returns:
        Color with minimal same-color sea neighbors (first in wheel order on ties)
    """
    conflicts = {color: 0 for color in COLOR_WHEEL}
    for neighbor in hex_map.get_neighbors_of_type(cell.coordinates, Terrain.SEA):
        if neighbor.color is not None:
            conflicts[neighbor.color] += 1
    return min(COLOR_WHEEL, key=lambda color: conflicts[color])


def assign_sea_colors(hex_map: HexMap, rng: Optional[random.Random] = None) -> Dict[CoreColor, int]:
    """
    Color every sea hex, avoiding colors of already-colored sea neighbors.

    Hexes are processed in shuffled order. Among the colors not used by any
    adjacent sea hex, the least-used color so far wins, ties broken at random.

    Args:
        hex_map: Map whose sea cells get colored in place
        rng: Random source (a fresh one if omitted)

    Returns:
        Number of sea hexes per color
    """
    rng = rng or random.Random()
    sea_cells = hex_map.get_cells_by_terrain(Terrain.SEA)
    for cell in sea_cells:
        cell.color = None
    rng.shuffle(sea_cells)

    usage = {color: 0 for color in COLOR_WHEEL}
    for cell in sea_cells:
        taken = {
            neighbor.color
            for neighbor in hex_map.get_neighbors_of_type(cell.coordinates, Terrain.SEA)
            if neighbor.color is not None
        }
        available = [color for color in COLOR_WHEEL if color not in taken]
        if available:
            fewest = min(usage[color] for color in available)
            chosen = rng.choice([color for color in available if usage[color] == fewest])
        else:
            chosen = least_conflicting_color(hex_map, cell)
        cell.color = chosen
        usage[chosen] += 1

    return usage


def count_adjacent_same_color_sea_hexes(hex_map: HexMap) -> int:
    """Count pairs of adjacent sea hexes that share a color; each pair counts once."""
    conflicts = 0
    for cell in hex_map.get_cells_by_terrain(Terrain.SEA):
        for neighbor in hex_map.get_neighbors_of_type(cell.coordinates, Terrain.SEA):
            if neighbor.color is not None and neighbor.color == cell.color:
                conflicts += 1
    return conflicts // 2


def sea_color_statistics(hex_map: HexMap) -> Dict:
    """
    Summarize how evenly the sea colors are distributed.

    Returns:
        Dictionary with per-color counts, mean, standard deviation,
        spread (max - min) and number of same-color conflicts
    """
    counts = {color: 0 for color in COLOR_WHEEL}
    for cell in hex_map.get_cells_by_terrain(Terrain.SEA):
        if cell.color is not None:
            counts[cell.color] += 1

    values = np.array([counts[color] for color in COLOR_WHEEL], dtype=float)
    return {
        'counts': {color.value: counts[color] for color in COLOR_WHEEL},
        'total': int(values.sum()),
        'mean': float(values.mean()),
        'std': float(values.std()),
        'spread': int(values.max() - values.min()),
        'conflicts': count_adjacent_same_color_sea_hexes(hex_map),
    }


def missing_colors(hex_map: HexMap) -> List[CoreColor]:
    """Core colors that no sea hex carries."""
    present = {cell.color for cell in hex_map.get_cells_by_terrain(Terrain.SEA)}
    return [color for color in COLOR_WHEEL if color not in present]
