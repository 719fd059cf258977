from __future__ import annotations

import math
from typing import Iterable

from shapely.geometry import MultiPoint

from geo.aoi import BBox
from layers.types import PointFeature


def bounds_of_points(points: Iterable[PointFeature]) -> BBox | None:
    """
    Bounding envelope of all points that carry finite coordinates.

    Returns None when nothing usable is left, so callers can skip re-fitting.
    """
    coords = [
        (float(p.lon), float(p.lat))
        for p in points
        if p.has_coords and math.isfinite(p.lon) and math.isfinite(p.lat)  # type: ignore[arg-type]
    ]
    if not coords:
        return None

    min_lon, min_lat, max_lon, max_lat = MultiPoint(coords).bounds
    bbox = BBox(min_lon=min_lon, min_lat=min_lat, max_lon=max_lon, max_lat=max_lat)
    if not bbox.is_valid():
        return None
    return bbox
