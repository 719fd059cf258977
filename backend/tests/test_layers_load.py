from __future__ import annotations

import json

from layers.load_viewer import load_viewer_layers
from layers.loaders import feature_collection_from_geojson, load_geojson_points
from viewer.registry import get_viewer
from viewer.types import ViewerConfig


def test_load_geojson_points_missing_file_returns_none(tmp_path):
    assert load_geojson_points(tmp_path / "frutal.geojson") is None


def test_load_geojson_points_reads_coords_and_props(tmp_path):
    path = tmp_path / "apis.geojson"
    path.write_text(
        json.dumps(
            {
                "type": "FeatureCollection",
                "features": [
                    {
                        "type": "Feature",
                        "properties": {"Municipio": "Comarapa"},
                        "geometry": {"type": "Point", "coordinates": [-64.5, -17.9]},
                    },
                    {
                        "type": "Feature",
                        "properties": {"Municipio": "Saipina"},
                        "geometry": {"type": "MultiPoint", "coordinates": [[-64.6, -18.1], [0, 0]]},
                    },
                    {"type": "Feature", "properties": None, "geometry": None},
                ],
            }
        ),
        encoding="utf-8",
    )
    fc = load_geojson_points(path)
    assert fc is not None
    assert len(fc) == 3
    a, b, c = fc.features
    assert (a.lon, a.lat) == (-64.5, -17.9)
    assert a.id == "apis-0"
    assert (b.lon, b.lat) == (-64.6, -18.1)
    assert c.has_coords is False
    assert c.props == {}


def test_feature_collection_without_features_is_absent():
    assert feature_collection_from_geojson(None) is None
    assert feature_collection_from_geojson({"type": "FeatureCollection"}) is None


def test_feature_ids_come_from_geojson_when_present():
    fc = feature_collection_from_geojson(
        {"features": [{"id": "riego-9", "properties": {}, "geometry": None}]}
    )
    assert fc is not None
    assert fc.get("riego-9") is not None
    assert fc.get("nope") is None


def test_load_geovisor_skips_missing_datasets():
    cfg = get_viewer("geovisor").config
    registry = load_viewer_layers(cfg)
    names = [e.name for e in registry.list_layers()]
    assert names == ["Riego", "REPANA", "Huertos"]
    assert len(registry.get("Riego").source) == 3
    assert registry.filter.field == "Beneficiar"


def test_load_geovisor_comarapa_filter():
    registry = load_viewer_layers(get_viewer("geovisor").config)
    registry.set_filter("Municipio", "comarapa")
    assert registry.get("Riego").rendered_count == 1
    assert registry.get("REPANA").rendered_count == 1
    assert registry.get("Huertos").rendered_count == 1


def test_load_geojson_points_unparseable_file_returns_none(tmp_path):
    path = tmp_path / "frutal.geojson"
    path.write_text("window.frutalGeoJSON = {", encoding="utf-8")
    assert load_geojson_points(path) is None


def test_load_geojson_points_non_object_root_returns_none(tmp_path):
    path = tmp_path / "apis.geojson"
    path.write_text("[1, 2, 3]", encoding="utf-8")
    assert load_geojson_points(path) is None


def test_malformed_point_coordinates_are_not_drawn():
    fc = feature_collection_from_geojson(
        {
            "features": [
                {"properties": {"n": 1}, "geometry": {"type": "MultiPoint", "coordinates": [-64.5, -17.9]}},
                {"properties": {"n": 2}, "geometry": {"type": "Point", "coordinates": 5}},
                {"properties": {"n": 3}, "geometry": {"type": "Point", "coordinates": ["a", "b"]}},
                "not a feature",
            ]
        }
    )
    assert fc is not None
    assert len(fc) == 3
    assert all(not f.has_coords for f in fc.features)
    assert [f.props["n"] for f in fc.features] == [1, 2, 3]


def test_broken_dataset_is_omitted_and_other_layers_still_load(tmp_path, monkeypatch):
    (tmp_path / "riego.geojson").write_text(
        json.dumps(
            {
                "type": "FeatureCollection",
                "features": [
                    {
                        "type": "Feature",
                        "properties": {"Municipio": "Comarapa"},
                        "geometry": {"type": "Point", "coordinates": [-64.5, -17.9]},
                    }
                ],
            }
        ),
        encoding="utf-8",
    )
    (tmp_path / "frutal.geojson").write_text("{not json", encoding="utf-8")
    monkeypatch.setattr(
        "layers.load_viewer.resolve_repo_path", lambda rel: tmp_path / rel
    )

    cfg = ViewerConfig.model_validate(
        {
            "id": "t",
            "title": "T",
            "defaultView": {"center": {"lat": -18.0, "lon": -64.5}, "zoom": 7},
            "layers": [
                {"name": "Frutal", "path": "frutal.geojson"},
                {"name": "Riego", "path": "riego.geojson"},
            ],
        }
    )
    registry = load_viewer_layers(cfg)
    assert [e.name for e in registry.list_layers()] == ["Riego"]
    assert "Frutal" not in registry
