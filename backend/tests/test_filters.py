from __future__ import annotations

import pytest

from layers.errors import UnknownFilterFieldError
from layers.filters import FilterState, apply_filter, matches, normalize_filter_field
from layers.types import PointFeature


def test_normalize_filter_field_accepts_canonical_and_aliases():
    assert normalize_filter_field("Municipio") == "Municipio"
    assert normalize_filter_field(" COMUNIDAD ") == "Comunidad"
    assert normalize_filter_field("beneficiario") == "Beneficiar"


def test_normalize_filter_field_rejects_unknown_keys():
    with pytest.raises(UnknownFilterFieldError) as exc:
        normalize_filter_field("Foto")
    assert exc.value.supported == ("Municipio", "Comunidad", "Beneficiar")


def test_normalize_filter_field_respects_custom_set():
    assert normalize_filter_field("tipo", ["Tipo"]) == "Tipo"
    with pytest.raises(UnknownFilterFieldError):
        normalize_filter_field("Municipio", ["Tipo"])


def test_matches_is_substring_not_regex_or_equality():
    state = FilterState(field="Comunidad", query="a.b")
    assert matches({"Comunidad": "xa.by"}, state)
    assert not matches({"Comunidad": "axb"}, state)


def test_matches_empty_query_is_pass_through():
    state = FilterState(field="Comunidad", query="")
    assert matches({}, state)
    assert matches(None, state)
    assert not state.is_active


def test_apply_filter_keeps_order():
    feats = [
        PointFeature(id=str(i), lon=0.0, lat=0.0, props={"Municipio": m})
        for i, m in enumerate(["Comarapa", "Saipina", "comarapa norte"])
    ]
    out = apply_filter(feats, FilterState(field="Municipio", query="COMARAPA"))
    assert [f.id for f in out] == ["0", "2"]
