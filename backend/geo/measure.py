from __future__ import annotations

import math
from functools import lru_cache
from typing import Literal, Sequence

from pyproj import Geod

# Same spherical radius the browser map library uses for distanceTo().
EARTH_RADIUS_M = 6_371_000.0

MeasureMethod = Literal["haversine", "geodesic"]


@lru_cache(maxsize=1)
def wgs84_geod() -> Geod:
    return Geod(ellps="WGS84")


def haversine_m(a: tuple[float, float], b: tuple[float, float]) -> float:
    """
    Great-circle distance in meters between two (lon, lat) points.
    """
    lon1, lat1 = a
    lon2, lat2 = b
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlmb = math.radians(lon2 - lon1)
    s = math.sin(dphi / 2.0) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlmb / 2.0) ** 2
    return 2.0 * EARTH_RADIUS_M * math.asin(min(1.0, math.sqrt(s)))


def measure_polyline(
    coords: Sequence[tuple[float, float]],
    *,
    method: MeasureMethod = "haversine",
) -> float:
    """
    Total length in kilometers of a drawn path given as (lon, lat) pairs.

    Fewer than two points measure zero.
    """
    if len(coords) < 2:
        return 0.0

    if method == "geodesic":
        lons = [float(lon) for lon, _ in coords]
        lats = [float(lat) for _, lat in coords]
        return float(wgs84_geod().line_length(lons, lats)) / 1000.0

    meters = 0.0
    for i in range(1, len(coords)):
        meters += haversine_m(coords[i - 1], coords[i])
    return meters / 1000.0


def format_km(km: float) -> str:
    return f"{km:.2f}"
