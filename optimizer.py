import dataclasses
import logging
import threading
import time
from collections.abc import Mapping
from typing import Optional, Sequence

from assembler import assemble_route
from errors import ConfigurationError
from models import DEPOT, Algorithm, OptimizedRoute, PickTask, RouteOptions, WarehouseCfg
from routing import distinct_locations, get_policy
from storage import parse_location

logger = logging.getLogger(__name__)

# Empirical tuning thresholds, kept as-is for compatibility with existing pick plans.
TSP_MAX_TASKS = 10
ZONE_SPREAD_THRESHOLD = 2
AISLE_SPREAD_THRESHOLD = 3


def select_algorithm(tasks: Sequence[PickTask]) -> Algorithm:
    """
    Pick a strategy from task count and spread. Zone spread is checked
    before aisle spread, so a batch that is wide on both gets ZONE.
    """
    if len(tasks) <= TSP_MAX_TASKS:
        return Algorithm.TSP
    parsed = [parse_location(t.bin_location) for t in tasks]
    zones = {loc.zone for loc in parsed}
    aisles = {loc.aisle for loc in parsed}
    if len(zones) > ZONE_SPREAD_THRESHOLD:
        return Algorithm.ZONE
    if len(aisles) > AISLE_SPREAD_THRESHOLD:
        return Algorithm.AISLE
    return Algorithm.NEAREST


def _coerce_options(options) -> RouteOptions:
    if options is None:
        return RouteOptions()
    if isinstance(options, Mapping):
        known = {f.name for f in dataclasses.fields(RouteOptions)}
        unknown = sorted(set(options) - known)
        if unknown:
            raise ValueError(f"Unknown route option {unknown[0]!r}")
        options = RouteOptions(**options)
    algorithm = options.algorithm
    if algorithm is not None and not isinstance(algorithm, Algorithm):
        algorithm = Algorithm(algorithm)
    if options.max_iterations < 1:
        raise ValueError(f"max_iterations must be >= 1 (got {options.max_iterations})")
    return RouteOptions(algorithm=algorithm, max_iterations=options.max_iterations)


class RouteOptimizer:
    def __init__(self, cfg: Optional[WarehouseCfg] = None):
        self._cfg = cfg if cfg is not None else WarehouseCfg()
        self._lock = threading.Lock()

    def get_config(self) -> WarehouseCfg:
        cfg = self._cfg
        return dataclasses.replace(cfg, zone_layout=dict(cfg.zone_layout))

    def update_config(self, changes: Optional[Mapping] = None, **fields) -> None:
        """
        Shallow-merge top-level fields into a new config and swap it in.

        ``zone_layout`` is replaced as a whole mapping, never merged per
        zone. Values are not validated here; a bad geometry field only
        fails when a calculation needs it.
        """
        merged = dict(changes or {})
        merged.update(fields)
        known = {f.name for f in dataclasses.fields(WarehouseCfg)}
        unknown = sorted(set(merged) - known)
        if unknown:
            raise ConfigurationError(unknown[0], merged[unknown[0]], reason="is not a warehouse setting")
        if "zone_layout" in merged:
            merged["zone_layout"] = dict(merged["zone_layout"])
        with self._lock:
            self._cfg = dataclasses.replace(self._cfg, **merged)

    def optimize_route(self, tasks: Sequence[PickTask], start_location: str = DEPOT,
                       options=None, cfg: Optional[WarehouseCfg] = None) -> OptimizedRoute:
        # Pin one config for the whole call; a concurrent update only affects later calls.
        cfg = cfg if cfg is not None else self._cfg
        opts = _coerce_options(options)
        started = time.perf_counter()

        # Reject any malformed location before routing so no partial route is built.
        parse_location(start_location)
        for task in tasks:
            parse_location(task.bin_location)

        algorithm = opts.algorithm or select_algorithm(tasks)
        policy = get_policy(algorithm)
        tour = policy.build_tour(
            start_location, distinct_locations(tasks), cfg, max_iterations=opts.max_iterations
        )
        route = assemble_route(
            tour.locations, tasks, cfg, algorithm,
            iterations=tour.iterations, limit_reached=tour.limit_reached,
        )

        elapsed_ms = (time.perf_counter() - started) * 1000.0
        logger.info(
            "Route optimization completed in %.1fms using %s (%d tasks, %d stops, distance %.2f)",
            elapsed_ms, algorithm.value, len(route.tasks), len(tour.visited), route.total_distance,
        )
        return route


default_optimizer = RouteOptimizer()


def optimize_route(tasks: Sequence[PickTask], start_location: str = DEPOT, options=None,
                   cfg: Optional[WarehouseCfg] = None) -> OptimizedRoute:
    return default_optimizer.optimize_route(tasks, start_location, options, cfg=cfg)


def get_config() -> WarehouseCfg:
    return default_optimizer.get_config()


def update_config(changes: Optional[Mapping] = None, **fields) -> None:
    default_optimizer.update_config(changes, **fields)
