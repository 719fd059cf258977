from __future__ import annotations

from typing import Any, Iterable

from layers.types import LayerEntry
from markers.placement import MANUAL_MARKER_COLOR, ManualMarker
from plot.popup import format_lat_lng, hover_text, popup_html
from plot.types import Measurement

MEASURE_LINE_COLOR = "#38bdf8"
MARKER_SIZE = 14


def trace_layer(entry: LayerEntry) -> dict[str, Any]:
    """
    One trace per overlay, drawn from the filtered view only.

    Hidden layers stay in the legend ("legendonly") but draw nothing on the map.
    """
    feats = [f for f in entry.view if f.has_coords]
    return {
        "type": "scattermapbox",
        "name": entry.name,
        "legendgroup": entry.name,
        "visible": True if entry.visible else "legendonly",
        "lon": [f.lon for f in feats],
        "lat": [f.lat for f in feats],
        "mode": "markers",
        "marker": {"size": MARKER_SIZE, "color": entry.color, "opacity": 0.95},
        "hovertext": [hover_text(entry.name, f.props) for f in feats],
        "hoverinfo": "text",
        # Frontend opens customdata[1] as the click popup.
        "customdata": [[f.id, popup_html(entry.name, f.props)] for f in feats],
    }


def trace_manual_markers(markers: Iterable[ManualMarker]) -> dict[str, Any]:
    items = list(markers)
    return {
        "type": "scattermapbox",
        "name": "Marcadores",
        "lon": [m.lon for m in items],
        "lat": [m.lat for m in items],
        "mode": "markers",
        "marker": {"size": MARKER_SIZE, "color": MANUAL_MARKER_COLOR},
        "hovertext": [
            f"<b>{m.title}</b><br>{format_lat_lng(m.lat, m.lon)}" for m in items
        ],
        "hoverinfo": "text",
        "customdata": [[m.id] for m in items],
        "showlegend": False,
    }


def trace_measurements(measurements: Iterable[Measurement]) -> dict[str, Any]:
    lons: list[float | None] = []
    lats: list[float | None] = []
    texts: list[str | None] = []
    for m in measurements:
        if len(m.coords) < 2:
            continue
        label = f"Medición: {m.km:.2f} km"
        for lon, lat in m.coords:
            lons.append(lon)
            lats.append(lat)
            texts.append(label)
        lons.append(None)
        lats.append(None)
        texts.append(None)
    return {
        "type": "scattermapbox",
        "name": "Mediciones",
        "lon": lons,
        "lat": lats,
        "mode": "lines",
        "line": {"color": MEASURE_LINE_COLOR, "width": 3},
        "hovertext": texts,
        "hoverinfo": "text",
        "showlegend": False,
    }
