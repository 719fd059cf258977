from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from layers.types import FeatureCollection, PointFeature

logger = logging.getLogger(__name__)


def load_geojson_points(path: Path) -> FeatureCollection | None:
    """
    Load a GeoJSON FeatureCollection of investment points.

    Returns None when the file is missing or unreadable so the caller can skip
    the layer. Geometry is not validated: features without a usable point keep
    their attributes and get `lon`/`lat` set to None.
    """
    if not path.exists():
        logger.info("Dataset not found, skipping: %s", path)
        return None

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning("Dataset is not valid GeoJSON, skipping: %s (%s)", path, e)
        return None
    if not isinstance(data, dict):
        logger.warning("Dataset root is not a GeoJSON object, skipping: %s", path)
        return None
    return feature_collection_from_geojson(data, id_prefix=path.stem)


def feature_collection_from_geojson(
    data: dict[str, Any] | None, *, id_prefix: str = "feature"
) -> FeatureCollection | None:
    if not data:
        return None
    features = data.get("features")
    if not isinstance(features, list):
        return None

    out: list[PointFeature] = []
    for i, feature in enumerate(features):
        if not isinstance(feature, dict):
            continue
        geom = feature.get("geometry")
        props = feature.get("properties")
        geom = geom if isinstance(geom, dict) else {}
        props = props if isinstance(props, dict) else {}

        fid = str(feature.get("id") or props.get("id") or f"{id_prefix}-{i}")
        lon, lat = _point_coords(geom)
        out.append(PointFeature(id=fid, lon=lon, lat=lat, props=dict(props)))

    return FeatureCollection(features=tuple(out))


def _is_position(value: Any) -> bool:
    return isinstance(value, (list, tuple)) and len(value) >= 2


def _point_coords(geom: dict[str, Any]) -> tuple[float | None, float | None]:
    gtype = geom.get("type")
    coords = geom.get("coordinates")

    if gtype == "MultiPoint":
        # Rendered as a single marker at the first position.
        coords = coords[0] if isinstance(coords, (list, tuple)) and coords else None
    elif gtype != "Point":
        return None, None

    if not _is_position(coords):
        return None, None
    try:
        return float(coords[0]), float(coords[1])
    except (TypeError, ValueError):
        return None, None
