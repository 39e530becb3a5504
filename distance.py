from typing import Sequence

import numpy as np

from models import ZONE_TRANSITION_PENALTY, WarehouseCfg
from storage import parse_location


def distance(a, b, cfg: WarehouseCfg) -> float:
    """
    Manhattan walking cost between two locations.

    Aisle offset is scaled by aisle width, shelf offset by shelf depth, and
    crossing between zones adds a flat penalty once per pair.
    """
    cfg.require_positive("aisle_width", "shelf_depth")
    loc_a = parse_location(a)
    loc_b = parse_location(b)
    aisle_distance = abs(loc_a.aisle - loc_b.aisle) * cfg.aisle_width
    shelf_distance = abs(loc_a.shelf - loc_b.shelf) * cfg.shelf_depth
    zone_distance = ZONE_TRANSITION_PENALTY if loc_a.zone != loc_b.zone else 0.0
    return float(aisle_distance + shelf_distance + zone_distance)


def travel_time(dist: float, cfg: WarehouseCfg) -> float:
    """Walking time in milliseconds."""
    cfg.require_positive("walking_speed")
    return dist / cfg.walking_speed * 1000.0


def build_distance_matrix(locations: Sequence, cfg: WarehouseCfg) -> np.ndarray:
    n = len(locations)
    parsed = [parse_location(loc) for loc in locations]
    matrix = np.zeros((n, n), dtype=float)
    for i in range(n):
        for j in range(i + 1, n):
            d = distance(parsed[i], parsed[j], cfg)
            matrix[i, j] = d
            matrix[j, i] = d
    return matrix


def tour_distance(tour: Sequence[int], matrix: np.ndarray) -> float:
    total = 0.0
    for i in range(len(tour) - 1):
        total += matrix[tour[i], tour[i + 1]]
    return float(total)
