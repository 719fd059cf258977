from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Sequence

from geo.aoi import BBox
from geo.measure import MeasureMethod, format_km, measure_polyline
from layers.errors import UnknownFeatureError, UnknownLayerError
from layers.filters import FilterState
from layers.load_viewer import load_viewer_layers
from layers.registry import LayerRegistry
from markers.placement import ManualMarker, MarkerPlacement
from plot.basemaps import DEFAULT_BASE_MAPS, find_base_map
from plot.build_map import build_map_plot
from plot.popup import format_lat_lng, popup_html, popup_title
from plot.types import Measurement
from viewer.types import ViewerBaseMap, ViewerConfig

logger = logging.getLogger(__name__)

MSG_ARM_MARKER = "Haz clic en el mapa para colocar un marcador."
MSG_USER_DATA_CLEARED = "Mediciones y marcadores limpiados."
MSG_FILTER_CLEARED = "Filtro limpiado."


@dataclass
class ViewerSession:
    """
    Everything one map viewer holds between user actions.

    Passed explicitly to request handlers instead of living in a module global.
    Each public method corresponds to one UI action and updates `info`, the
    text shown in the viewer's info box.
    """

    config: ViewerConfig
    registry: LayerRegistry
    markers: MarkerPlacement = field(default_factory=MarkerPlacement)
    measurements: list[Measurement] = field(default_factory=list)
    base_map: str = ""
    info: str = ""
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)
    _measure_seq: int = field(default=0, repr=False)

    def __post_init__(self) -> None:
        if not self.base_map:
            self.base_map = self.config.defaultBaseMap or self.base_maps[0].name

    @property
    def base_maps(self) -> list[ViewerBaseMap]:
        return list(self.config.baseMaps) or list(DEFAULT_BASE_MAPS)

    def current_base_map(self) -> ViewerBaseMap:
        return find_base_map(self.base_maps, self.base_map)

    def select_base_map(self, name: str) -> ViewerBaseMap:
        with self._lock:
            bm = find_base_map(self.base_maps, name)
            self.base_map = bm.name
            return bm

    def set_layer_visibility(self, name: str, visible: bool) -> None:
        with self._lock:
            self.registry.set_visibility(name, visible)

    def apply_filter(self, field_name: str, query: str | None) -> FilterState:
        with self._lock:
            state = self.registry.set_filter(field_name, query)
            self.info = (
                f'Filtro aplicado sobre "{state.field}": {state.query}'
                if state.query
                else MSG_FILTER_CLEARED
            )
            return state

    def clear_filter(self) -> FilterState:
        with self._lock:
            state = self.registry.clear_filter()
            self.info = MSG_FILTER_CLEARED
            return state

    def measure(
        self,
        coords: Sequence[tuple[float, float]],
        *,
        method: MeasureMethod = "haversine",
    ) -> Measurement:
        km = measure_polyline(coords, method=method)
        with self._lock:
            self._measure_seq += 1
            m = Measurement(
                id=f"measure-{self._measure_seq}",
                coords=tuple((float(lon), float(lat)) for lon, lat in coords),
                km=km,
            )
            self.measurements.append(m)
            self.info = f"Medición: {format_km(km)} km."
            return m

    def arm_marker(self) -> None:
        with self._lock:
            self.markers.arm()
            self.info = MSG_ARM_MARKER

    def map_click(self, lon: float, lat: float) -> ManualMarker | None:
        with self._lock:
            marker = self.markers.handle_click(lon, lat)
            if marker is not None:
                self.info = f"Marcador añadido en {format_lat_lng(marker.lat, marker.lon)}."
            return marker

    def clear_user_data(self) -> None:
        with self._lock:
            self.measurements.clear()
            self.markers.clear()
            self.info = MSG_USER_DATA_CLEARED

    def feature_popup(self, layer_name: str, feature_id: str) -> dict[str, Any]:
        with self._lock:
            entry = self.registry.get(layer_name)
            feature = entry.source.get(feature_id)
            if feature is None:
                raise UnknownFeatureError(entry.name, feature_id)
            title = popup_title(entry.name, feature.props)
            self.info = f"{entry.name} • {title}"
            return {
                "layer": entry.name,
                "id": feature.id,
                "title": title,
                "html": popup_html(entry.name, feature.props),
            }

    def marker_popup(self, marker_id: str) -> ManualMarker:
        with self._lock:
            for marker in self.markers.markers:
                if marker.id == marker_id:
                    self.info = f"Marcador: {format_lat_lng(marker.lat, marker.lon)}."
                    return marker
            raise UnknownFeatureError("Marcadores", marker_id)

    def fit_bounds(self, layer_name: str | None = None) -> BBox | None:
        with self._lock:
            if layer_name is not None and layer_name not in self.registry:
                raise UnknownLayerError(layer_name)
            return self.registry.fit_bounds_for(layer_name)

    def initial_view(self) -> tuple[dict[str, float], float, BBox | None]:
        dv = self.config.defaultView
        center = {"lat": dv.center.lat, "lon": dv.center.lon}
        fit = self.fit_bounds() if self.config.fitToLayersOnLoad else None
        return center, dv.zoom, fit

    def plot(
        self,
        *,
        view_center: dict[str, float] | None = None,
        view_zoom: float | None = None,
        viewport: dict[str, int] | None = None,
    ) -> dict[str, Any]:
        """
        Map payload for the current state.

        Without a client view this is the startup view: the configured center,
        fitted to all loaded layers when they have valid bounds.
        """
        with self._lock:
            if view_center is not None and view_zoom is not None:
                center, zoom, fit = view_center, view_zoom, None
            else:
                center, zoom, fit = self.initial_view()
            return build_map_plot(
                self.registry.list_layers(),
                base_map=self.current_base_map(),
                markers=self.markers.markers,
                measurements=self.measurements,
                filter_state=self.registry.filter,
                view_center=center,
                view_zoom=zoom,
                fit_bbox=fit,
                viewport=viewport,
                min_zoom=self.config.defaultView.minZoom,
                info=self.info or None,
            )


def build_session(cfg: ViewerConfig) -> ViewerSession:
    registry = load_viewer_layers(cfg)
    logger.info("Viewer '%s' ready with %d layers", cfg.id, len(registry))
    return ViewerSession(config=cfg, registry=registry)
