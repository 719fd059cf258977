from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class BBox:
    """
    WGS84 bounding box in lon/lat degrees.

    Convention used throughout this repo:
    - minLon, minLat, maxLon, maxLat
    """

    min_lon: float
    min_lat: float
    max_lon: float
    max_lat: float

    def normalized(self) -> "BBox":
        min_lon = min(self.min_lon, self.max_lon)
        max_lon = max(self.min_lon, self.max_lon)
        min_lat = min(self.min_lat, self.max_lat)
        max_lat = max(self.min_lat, self.max_lat)
        return BBox(min_lon=min_lon, min_lat=min_lat, max_lon=max_lon, max_lat=max_lat)

    def is_valid(self) -> bool:
        lons = (self.min_lon, self.max_lon)
        lats = (self.min_lat, self.max_lat)
        if not all(math.isfinite(v) for v in (*lons, *lats)):
            return False
        return all(-180.0 <= v <= 180.0 for v in lons) and all(
            -90.0 <= v <= 90.0 for v in lats
        )

    def center(self) -> dict[str, float]:
        b = self.normalized()
        return {"lon": (b.min_lon + b.max_lon) / 2.0, "lat": (b.min_lat + b.max_lat) / 2.0}

    def as_dict(self) -> dict[str, float]:
        return {
            "minLon": self.min_lon,
            "minLat": self.min_lat,
            "maxLon": self.max_lon,
            "maxLat": self.max_lat,
        }
