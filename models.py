from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from errors import ConfigurationError

DEPOT = "DEPOT"
ZONE_TRANSITION_PENALTY = 10.0


class Priority(Enum):
    LOW = "LOW"
    NORMAL = "NORMAL"
    HIGH = "HIGH"
    URGENT = "URGENT"


class Algorithm(Enum):
    TSP = "tsp"
    NEAREST = "nearest"
    AISLE = "aisle"
    ZONE = "zone"


class WaypointType(Enum):
    START = "start"
    PICKUP = "pickup"
    END = "end"


@dataclass(frozen=True)
class PickTask:
    task_id: str
    order_id: str
    sku: str
    quantity: int
    bin_location: str
    priority: Priority = Priority.NORMAL
    weight: Optional[float] = None


@dataclass(frozen=True)
class OptimizedPickTask:
    task: PickTask
    sequence: int
    from_location: str
    to_location: str
    distance: float
    estimated_time: float  # ms, travel + pick

    @property
    def task_id(self) -> str:
        return self.task.task_id

    @property
    def bin_location(self) -> str:
        return self.task.bin_location


@dataclass(frozen=True)
class Waypoint:
    location: str
    type: WaypointType
    sequence: int
    coordinates: Tuple[float, ...]


@dataclass
class OptimizedRoute:
    tasks: List[OptimizedPickTask]
    total_distance: float
    estimated_time: float  # ms
    waypoints: List[Waypoint]
    algorithm: Algorithm
    iterations: int = 0
    iteration_limit_reached: bool = False


@dataclass
class RouteOptions:
    algorithm: Optional[Algorithm] = None
    max_iterations: int = 1000


@dataclass(frozen=True)
class ZoneLayout:
    start_aisle: int
    end_aisle: int
    x: float
    y: float


def default_zone_layout() -> Dict[str, ZoneLayout]:
    return {
        "A": ZoneLayout(start_aisle=1, end_aisle=20, x=0.0, y=0.0),
        "B": ZoneLayout(start_aisle=1, end_aisle=15, x=100.0, y=0.0),
        "C": ZoneLayout(start_aisle=1, end_aisle=25, x=0.0, y=50.0),
        "D": ZoneLayout(start_aisle=1, end_aisle=10, x=100.0, y=50.0),
    }


@dataclass
class WarehouseCfg:
    aisle_width: float = 3.0        # spacing between aisles (m)
    shelf_depth: float = 1.0        # travel per shelf step along an aisle (m)
    shelf_height: float = 0.5       # vertical spacing between shelves (m)
    walking_speed: float = 1.4      # m/s
    pick_time: float = 15.0         # seconds per pick
    zone_layout: Dict[str, ZoneLayout] = field(default_factory=default_zone_layout)

    def require_positive(self, *names: str) -> None:
        """Fail on the first named geometry field that is missing or <= 0."""
        for name in names:
            value = getattr(self, name, None)
            if value is None:
                raise ConfigurationError(name, value, reason="is missing")
            if value <= 0:
                raise ConfigurationError(name, value)

    def require_non_negative(self, *names: str) -> None:
        for name in names:
            value = getattr(self, name, None)
            if value is None:
                raise ConfigurationError(name, value, reason="is missing")
            if value < 0:
                raise ConfigurationError(name, value, reason="must not be negative")
