import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from errors import LocationParseError
from models import DEPOT, WarehouseCfg

LOCATION_PATTERN = re.compile(r"([A-Z])-(\d+)-(\d+)([LR])?", re.ASCII)


class AisleSide(Enum):
    LEFT = "L"
    RIGHT = "R"


@dataclass(frozen=True)
class BinLocation:
    location: str
    zone: str
    aisle: int
    shelf: int
    side: Optional[AisleSide] = None

    @property
    def is_depot(self) -> bool:
        return self.location == DEPOT

    def __str__(self):
        return self.location


# The depot sits at the front of zone A, before aisle 1.
DEPOT_LOCATION = BinLocation(location=DEPOT, zone="A", aisle=0, shelf=0)


def parse_location(raw) -> BinLocation:
    """
    Parse a ``Z-A-S[side]`` bin location string, e.g. ``A-12-03`` or ``B-4-1L``.

    ``DEPOT`` bypasses the grammar and maps to zone A, aisle 0, shelf 0.
    The matched string is kept verbatim as the canonical form, so zero
    padding from the input survives a round trip.
    """
    if isinstance(raw, BinLocation):
        return raw
    if not isinstance(raw, str):
        raise LocationParseError(raw, reason="Location must be a string")
    if raw == DEPOT:
        return DEPOT_LOCATION
    match = LOCATION_PATTERN.fullmatch(raw)
    if not match:
        raise LocationParseError(raw)
    zone, aisle, shelf, side = match.groups()
    return BinLocation(
        location=raw,
        zone=zone,
        aisle=int(aisle),
        shelf=int(shelf),
        side=AisleSide(side) if side else None,
    )


def to_canonical_string(loc: BinLocation) -> str:
    return loc.location


def zone_index(zone: str) -> int:
    # Zones are laid out as parallel bands A=0, B=1, ...
    if not isinstance(zone, str) or len(zone) != 1 or not ("A" <= zone <= "Z"):
        raise LocationParseError(zone, reason="Unsupported zone identifier")
    return ord(zone) - ord("A")


def to_coordinates(location, cfg: WarehouseCfg) -> Tuple[float, ...]:
    """
    Map a location to display coordinates.

    The depot is ``(0, 0)``. Bin locations become ``(x, y, z)`` with x along
    the aisles, y the zone band index and z the shelf height. This is a
    banded approximation, not a full floor plan.
    """
    loc = parse_location(location)
    if loc.is_depot:
        return (0.0, 0.0)
    cfg.require_positive("aisle_width", "shelf_height")
    x = loc.aisle * cfg.aisle_width
    y = float(zone_index(loc.zone))
    z = loc.shelf * cfg.shelf_height
    return (x, y, z)


def gen_bin_locations(zones: Iterable[str], num_aisles: int, num_shelves: int) -> List[str]:
    locations = []
    for zone in zones:
        zone_index(zone)
        for aisle in range(1, num_aisles + 1):
            for shelf in range(1, num_shelves + 1):
                locations.append(f"{zone}-{aisle:02d}-{shelf:02d}")
    return locations
