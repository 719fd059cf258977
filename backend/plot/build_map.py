from __future__ import annotations

from typing import Any, Iterable

from geo.aoi import BBox
from layers.download import shapefile_link
from layers.filters import FilterState
from layers.types import LayerEntry
from markers.placement import ManualMarker
from plot.basemaps import mapbox_base_layers
from plot.traces import trace_layer, trace_manual_markers, trace_measurements
from plot.types import Measurement
from plot.view import fit_view_to_bbox
from viewer.types import ViewerBaseMap


def build_map_plot(
    layers: Iterable[LayerEntry],
    *,
    base_map: ViewerBaseMap,
    markers: Iterable[ManualMarker] = (),
    measurements: Iterable[Measurement] = (),
    filter_state: FilterState | None = None,
    view_center: dict[str, float] | None = None,
    view_zoom: float | None = None,
    fit_bbox: BBox | None = None,
    viewport: dict[str, int] | None = None,
    min_zoom: float = 0.0,
    info: str | None = None,
) -> dict[str, Any]:
    entries = list(layers)
    markers = list(markers)
    measurements = list(measurements)

    # Overlays in registration order, user drawings on top.
    traces: list[dict[str, Any]] = [trace_layer(e) for e in entries]
    if measurements:
        traces.append(trace_measurements(measurements))
    if markers:
        traces.append(trace_manual_markers(markers))

    center = view_center or {"lat": 0.0, "lon": 0.0}
    zoom = float(view_zoom) if view_zoom is not None else 2.0
    if fit_bbox is not None:
        center, zoom = fit_view_to_bbox(fit_bbox, viewport=viewport)
    zoom = max(zoom, min_zoom)

    meta: dict[str, Any] = {
        "legend": [{"name": e.name, "color": e.color} for e in entries],
        "layers": [
            {
                "name": e.name,
                "visible": e.visible,
                "download": shapefile_link(e.name).href,
            }
            for e in entries
        ],
        "baseMap": base_map.name,
    }
    if filter_state is not None:
        meta["filter"] = {"field": filter_state.field, "query": filter_state.query}
    if info is not None:
        meta["info"] = info

    meta["stats"] = {
        "layers": len(entries),
        "renderedPoints": sum(
            len([f for f in e.view if f.has_coords]) for e in entries if e.visible
        ),
        "renderedByLayer": {e.name: e.rendered_count for e in entries},
        "measurements": len(measurements),
        "markers": len(markers),
    }

    return {
        "data": traces,
        "layout": {
            "mapbox": {
                "center": center,
                "zoom": zoom,
                "style": "white-bg",
                "layers": mapbox_base_layers(base_map),
            },
            "showlegend": True,
            "legend": {
                "x": 0.99,
                "y": 0.99,
                "xanchor": "right",
                "yanchor": "top",
                "bgcolor": "rgba(255, 255, 255, 0.75)",
                "bordercolor": "rgba(120, 120, 120, 0.35)",
                "borderwidth": 1,
                "font": {"size": 11},
            },
            "margin": {"l": 0, "r": 0, "t": 0, "b": 0},
            "meta": meta,
        },
    }
