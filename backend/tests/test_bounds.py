from __future__ import annotations

import math

from geo.aoi import BBox
from geo.bounds import bounds_of_points
from layers.types import PointFeature


def _pt(lon, lat) -> PointFeature:
    return PointFeature(id=f"{lon},{lat}", lon=lon, lat=lat, props={})


def test_bounds_of_points_envelope():
    bbox = bounds_of_points([_pt(-64.5, -18.0), _pt(-64.1, -17.5), _pt(-64.3, -18.4)])
    assert bbox == BBox(min_lon=-64.5, min_lat=-18.4, max_lon=-64.1, max_lat=-17.5)


def test_bounds_of_points_ignores_missing_and_non_finite_coords():
    bbox = bounds_of_points([_pt(None, None), _pt(math.nan, 1.0), _pt(2.0, 3.0)])
    assert bbox == BBox(min_lon=2.0, min_lat=3.0, max_lon=2.0, max_lat=3.0)


def test_bounds_of_points_empty_is_none():
    assert bounds_of_points([]) is None
    assert bounds_of_points([_pt(None, None)]) is None


def test_out_of_range_bounds_are_invalid():
    assert bounds_of_points([_pt(10.0, 95.0)]) is None
    assert not BBox(min_lon=0, min_lat=0, max_lon=math.inf, max_lat=1).is_valid()


def test_bbox_center_is_normalized():
    b = BBox(min_lon=2.0, min_lat=4.0, max_lon=0.0, max_lat=0.0)
    assert b.center() == {"lon": 1.0, "lat": 2.0}
