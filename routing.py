from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, List, Sequence

import numpy as np

from distance import build_distance_matrix
from improvement import DEFAULT_MAX_ITERATIONS, two_opt
from models import Algorithm, PickTask, WarehouseCfg
from storage import parse_location, zone_index


@dataclass
class Tour:
    locations: List[str]  # start, visited locations..., start
    iterations: int = 0
    limit_reached: bool = False

    @property
    def visited(self) -> List[str]:
        return self.locations[1:-1]


def distinct_locations(tasks: Sequence[PickTask]) -> List[str]:
    """Bin locations in first-seen order, one entry per bin however many tasks share it."""
    seen = {}
    for task in tasks:
        seen.setdefault(task.bin_location, None)
    return list(seen)


def nearest_neighbor_tour(matrix: np.ndarray) -> List[int]:
    """
    Greedy index tour over every node of ``matrix``, starting and ending at node 0.
    Ties go to the lowest index.
    """
    n = len(matrix)
    if n == 0:
        return []
    visited = {0}
    tour = [0]
    current = 0
    while len(visited) < n:
        nearest = -1
        min_distance = float("inf")
        for i in range(n):
            if i in visited:
                continue
            d = matrix[current, i]
            if d < min_distance:
                min_distance = d
                nearest = i
        if nearest == -1:
            break
        visited.add(nearest)
        tour.append(nearest)
        current = nearest
    tour.append(0)
    return tour


def aisle_sweep_tour(start: str, locations: Sequence[str], cfg: WarehouseCfg) -> List[str]:
    """
    S-shape traversal: aisles nearest the entry aisle first, each aisle swept
    end to end. An aisle entered from a lower (or the same) aisle runs from
    the low shelf up; one entered from a higher aisle runs high to low.
    """
    start_loc = parse_location(start)
    by_aisle = defaultdict(list)
    for raw in locations:
        loc = parse_location(raw)
        by_aisle[loc.aisle].append(loc)

    sorted_aisles = sorted(by_aisle.keys(), key=lambda a: (abs(a - start_loc.aisle), a))

    route = [start]
    current = start_loc
    for aisle in sorted_aisles:
        aisle_locs = sorted(by_aisle[aisle], key=lambda loc: (loc.shelf, loc.location))
        if current.aisle > aisle:
            aisle_locs.reverse()
        route.extend(loc.location for loc in aisle_locs)
        current = aisle_locs[-1]
    route.append(start)
    return route


def zone_tour(start: str, locations: Sequence[str], cfg: WarehouseCfg) -> List[str]:
    """
    Visit zones in order of band distance from the start zone, running a
    nearest-neighbor walk inside each zone from the previous zone's exit.
    """
    start_loc = parse_location(start)
    by_zone: Dict[str, List[str]] = defaultdict(list)
    for raw in locations:
        by_zone[parse_location(raw).zone].append(raw)

    start_idx = zone_index(start_loc.zone)
    zone_order = sorted(by_zone.keys(), key=lambda z: (abs(zone_index(z) - start_idx), z))

    route = [start]
    current = start
    for zone in zone_order:
        nodes = [current] + by_zone[zone]
        sub_tour = nearest_neighbor_tour(build_distance_matrix(nodes, cfg))
        visited = [nodes[i] for i in sub_tour[1:-1]]
        route.extend(visited)
        if visited:
            current = visited[-1]
    route.append(start)
    return route


class RoutingPolicy:
    algorithm = None

    def build_tour(self, start: str, locations: Sequence[str], cfg: WarehouseCfg, **kwargs) -> Tour:
        raise NotImplementedError


class NearestNeighborRouting(RoutingPolicy):
    algorithm = Algorithm.NEAREST

    def build_tour(self, start, locations, cfg, **kwargs):
        nodes = [start] + list(locations)
        matrix = build_distance_matrix(nodes, cfg)
        index_tour = nearest_neighbor_tour(matrix)
        return Tour(locations=[nodes[i] for i in index_tour])


class TwoOptRouting(RoutingPolicy):
    algorithm = Algorithm.TSP

    def build_tour(self, start, locations, cfg, **kwargs):
        max_iterations = kwargs.get("max_iterations", DEFAULT_MAX_ITERATIONS)
        nodes = [start] + list(locations)
        matrix = build_distance_matrix(nodes, cfg)
        initial = nearest_neighbor_tour(matrix)
        result = two_opt(initial, matrix, max_iterations=max_iterations)
        return Tour(
            locations=[nodes[i] for i in result.tour],
            iterations=result.iterations,
            limit_reached=result.limit_reached,
        )


class SShapeRouting(RoutingPolicy):
    algorithm = Algorithm.AISLE

    def build_tour(self, start, locations, cfg, **kwargs):
        return Tour(locations=aisle_sweep_tour(start, locations, cfg))


class ZoneRouting(RoutingPolicy):
    algorithm = Algorithm.ZONE

    def build_tour(self, start, locations, cfg, **kwargs):
        return Tour(locations=zone_tour(start, locations, cfg))


_POLICIES: Dict[Algorithm, RoutingPolicy] = {
    Algorithm.TSP: TwoOptRouting(),
    Algorithm.NEAREST: NearestNeighborRouting(),
    Algorithm.AISLE: SShapeRouting(),
    Algorithm.ZONE: ZoneRouting(),
}


def get_policy(algorithm: Algorithm) -> RoutingPolicy:
    return _POLICIES[algorithm]
