from __future__ import annotations

from typing import Any, Iterable

from layers.errors import UnknownBaseMapError
from viewer.types import ViewerBaseMap


def _google(lyrs: str) -> list[str]:
    return [
        f"https://{sub}.google.com/vt/lyrs={lyrs}&x={{x}}&y={{y}}&z={{z}}"
        for sub in ("mt0", "mt1", "mt2", "mt3")
    ]


DEFAULT_BASE_MAPS: tuple[ViewerBaseMap, ...] = (
    ViewerBaseMap(
        name="OpenStreetMap",
        tiles=[
            f"https://{sub}.tile.openstreetmap.org/{{z}}/{{x}}/{{y}}.png"
            for sub in ("a", "b", "c")
        ],
        attribution="© OpenStreetMap",
        maxZoom=19,
    ),
    ViewerBaseMap(
        name="Google Satélite", tiles=_google("s"), attribution="© Google", maxZoom=20
    ),
    ViewerBaseMap(
        name="Google Topográfico", tiles=_google("p"), attribution="© Google", maxZoom=20
    ),
)


def find_base_map(base_maps: Iterable[ViewerBaseMap], name: str) -> ViewerBaseMap:
    key = (name or "").strip()
    for bm in base_maps:
        if bm.name == key:
            return bm
    raise UnknownBaseMapError(key)


def mapbox_base_layers(base_map: ViewerBaseMap) -> list[dict[str, Any]]:
    """
    Raster tile layer drawn underneath all traces (used with style "white-bg").
    """
    return [
        {
            "below": "traces",
            "sourcetype": "raster",
            "sourceattribution": base_map.attribution,
            "source": list(base_map.tiles),
            "maxzoom": base_map.maxZoom,
        }
    ]
