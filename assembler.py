from collections import defaultdict
from typing import Dict, List, Sequence

from distance import distance, travel_time
from models import (
    Algorithm,
    OptimizedPickTask,
    OptimizedRoute,
    PickTask,
    WarehouseCfg,
    Waypoint,
    WaypointType,
)
from storage import to_coordinates

# Sweep-style routes count the walk back to the start in the route time.
RETURN_LEG_TIMED = {Algorithm.AISLE, Algorithm.ZONE}


def build_waypoints(tour: Sequence[str], cfg: WarehouseCfg) -> List[Waypoint]:
    last = len(tour) - 1
    waypoints = []
    for idx, location in enumerate(tour):
        if idx == 0:
            wp_type = WaypointType.START
        elif idx == last:
            wp_type = WaypointType.END
        else:
            wp_type = WaypointType.PICKUP
        waypoints.append(Waypoint(
            location=location,
            type=wp_type,
            sequence=idx,
            coordinates=to_coordinates(location, cfg),
        ))
    return waypoints


def assemble_route(tour: Sequence[str], tasks: Sequence[PickTask], cfg: WarehouseCfg,
                   algorithm: Algorithm, iterations: int = 0, limit_reached: bool = False) -> OptimizedRoute:
    """
    Turn a closed location tour into a sequenced, timed route.

    Every task at a visited bin is emitted in input order. Only the first
    task at a bin carries the walking leg; the others share its from/to
    locations with zero distance, so leg distances add up to the tour length.
    Route time is the sum of task times, plus the return leg for aisle and
    zone routes.
    """
    cfg.require_non_negative("pick_time")
    pick_ms = cfg.pick_time * 1000.0  # pick_time is in seconds; all route times are in ms

    tasks_by_location: Dict[str, List[PickTask]] = defaultdict(list)
    for task in tasks:
        tasks_by_location[task.bin_location].append(task)

    start = tour[0]
    optimized: List[OptimizedPickTask] = []
    current = start
    for location in tour[1:-1]:
        leg = distance(current, location, cfg)
        for k, task in enumerate(tasks_by_location.get(location, [])):
            d = leg if k == 0 else 0.0
            optimized.append(OptimizedPickTask(
                task=task,
                sequence=len(optimized) + 1,
                from_location=current,
                to_location=location,
                distance=d,
                estimated_time=travel_time(d, cfg) + pick_ms,
            ))
        current = location

    return_leg = distance(current, start, cfg)
    total_distance = sum(t.distance for t in optimized) + return_leg
    estimated_time = sum(t.estimated_time for t in optimized)
    if algorithm in RETURN_LEG_TIMED:
        estimated_time += travel_time(return_leg, cfg)

    return OptimizedRoute(
        tasks=optimized,
        total_distance=total_distance,
        estimated_time=estimated_time,
        waypoints=build_waypoints(tour, cfg),
        algorithm=algorithm,
        iterations=iterations,
        iteration_limit_reached=limit_reached,
    )
