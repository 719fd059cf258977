from __future__ import annotations

import pytest

from geo.aoi import BBox
from layers.registry import LayerRegistry
from markers.placement import ManualMarker
from plot.basemaps import DEFAULT_BASE_MAPS, find_base_map, mapbox_base_layers
from plot.build_map import build_map_plot
from plot.types import Measurement
from plot.view import fit_view_to_bbox
from layers.errors import UnknownBaseMapError

OSM = DEFAULT_BASE_MAPS[0]


def _traces_by_name(plot) -> dict:
    return {t["name"]: t for t in plot["data"]}


def test_build_map_plot_shape(registry: LayerRegistry):
    plot = build_map_plot(registry.list_layers(), base_map=OSM)
    assert set(plot.keys()) == {"data", "layout"}
    assert all(t["type"] == "scattermapbox" for t in plot["data"])
    assert [t["name"] for t in plot["data"]] == ["Riego", "Huertos"]
    mapbox = plot["layout"]["mapbox"]
    assert mapbox["style"] == "white-bg"
    assert mapbox["layers"][0]["sourcetype"] == "raster"
    assert plot["layout"]["meta"]["legend"] == [
        {"name": "Riego", "color": "#0000FF"},
        {"name": "Huertos", "color": "#9370DB"},
    ]


def test_layer_trace_uses_layer_color_and_skips_missing_geometry(registry):
    traces = _traces_by_name(build_map_plot(registry.list_layers(), base_map=OSM))
    huertos = traces["Huertos"]
    assert huertos["marker"]["color"] == "#9370DB"
    assert huertos["lon"] == [-64.50]
    assert huertos["customdata"][0][0] == "h1"
    assert huertos["customdata"][0][1].startswith("<strong>Verdecillos</strong>")


def test_filtered_plot_renders_only_matching_records(registry):
    registry.set_filter("Municipio", "comarapa")
    plot = build_map_plot(
        registry.list_layers(), base_map=OSM, filter_state=registry.filter
    )
    traces = _traces_by_name(plot)
    assert len(traces["Riego"]["lon"]) == 1
    assert traces["Riego"]["marker"]["color"] == "#0000FF"
    meta = plot["layout"]["meta"]
    assert meta["filter"] == {"field": "Municipio", "query": "comarapa"}
    assert meta["stats"]["renderedByLayer"] == {"Riego": 1, "Huertos": 1}


def test_popups_identical_before_and_after_filter(registry):
    before = _traces_by_name(build_map_plot(registry.list_layers(), base_map=OSM))
    registry.set_filter("Municipio", "comarapa")
    registry.clear_filter()
    after = _traces_by_name(build_map_plot(registry.list_layers(), base_map=OSM))
    assert before["Riego"]["customdata"] == after["Riego"]["customdata"]


def test_hidden_layer_stays_in_legend_only(registry):
    registry.set_visibility("Riego", False)
    plot = build_map_plot(registry.list_layers(), base_map=OSM)
    traces = _traces_by_name(plot)
    assert traces["Riego"]["visible"] == "legendonly"
    assert traces["Huertos"]["visible"] is True
    assert plot["layout"]["meta"]["stats"]["renderedPoints"] == 1


def test_user_drawings_are_rendered(registry):
    plot = build_map_plot(
        registry.list_layers(),
        base_map=OSM,
        markers=[ManualMarker(id="m1", lon=-64.0, lat=-18.0)],
        measurements=[Measurement(id="d1", coords=((0.0, 0.0), (0.0, 1.0)), km=111.19)],
    )
    traces = _traces_by_name(plot)
    assert traces["Marcadores"]["marker"]["color"] == "#22c55e"
    assert traces["Marcadores"]["customdata"] == [["m1"]]
    assert traces["Mediciones"]["lon"] == [0.0, 0.0, None]
    assert traces["Mediciones"]["line"]["color"] == "#38bdf8"


def test_fit_bbox_overrides_view(registry):
    bbox = registry.fit_bounds_for()
    plot = build_map_plot(
        registry.list_layers(),
        base_map=OSM,
        view_center={"lat": -18.489, "lon": -64.106},
        view_zoom=7,
        fit_bbox=bbox,
    )
    center = plot["layout"]["mapbox"]["center"]
    assert center["lon"] == pytest.approx((-64.60 + -64.50) / 2.0)
    assert plot["layout"]["mapbox"]["zoom"] > 7


def test_fitted_zoom_never_drops_below_min_zoom(registry):
    world = BBox(min_lon=-179.0, min_lat=-80.0, max_lon=179.0, max_lat=80.0)
    assert fit_view_to_bbox(world)[1] < 2.0
    plot = build_map_plot(
        registry.list_layers(),
        base_map=OSM,
        fit_bbox=world,
        min_zoom=2.0,
    )
    assert plot["layout"]["mapbox"]["zoom"] == 2.0

    plot = build_map_plot(registry.list_layers(), base_map=OSM, view_zoom=0.5, min_zoom=2.0)
    assert plot["layout"]["mapbox"]["zoom"] == 2.0


def test_fit_view_to_single_point_is_capped():
    center, zoom = fit_view_to_bbox(BBox(min_lon=1.0, min_lat=2.0, max_lon=1.0, max_lat=2.0))
    assert center == {"lon": 1.0, "lat": 2.0}
    assert zoom == 18.0


def test_padding_lowers_zoom():
    bbox = BBox(min_lon=-64.6, min_lat=-18.1, max_lon=-64.5, max_lat=-17.9)
    _, tight = fit_view_to_bbox(bbox, padding_px=0)
    _, padded = fit_view_to_bbox(bbox, padding_px=20)
    assert padded < tight


def test_base_map_lookup():
    assert find_base_map(DEFAULT_BASE_MAPS, "Google Satélite").maxZoom == 20
    with pytest.raises(UnknownBaseMapError):
        find_base_map(DEFAULT_BASE_MAPS, "Bing")
    layers = mapbox_base_layers(OSM)
    assert layers[0]["below"] == "traces"
    assert "{z}" in layers[0]["source"][0]
