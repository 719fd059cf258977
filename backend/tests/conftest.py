import sys
from pathlib import Path

import pytest

# Ensure `backend/` is on sys.path so tests can import local modules
# like `layers.*`, `geo.*`, and `main`.
BACKEND_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(BACKEND_ROOT))

from layers.registry import LayerRegistry  # noqa: E402
from layers.types import FeatureCollection, PointFeature  # noqa: E402


def point(fid: str, lon: float | None, lat: float | None, **props) -> PointFeature:
    return PointFeature(id=fid, lon=lon, lat=lat, props=props)


@pytest.fixture
def riego() -> FeatureCollection:
    return FeatureCollection(
        features=(
            point("r1", -64.53, -17.91, Municipio="Comarapa", Beneficiar="Regantes San Isidro"),
            point("r2", -64.59, -18.08, Municipio="Saipina", Beneficiar="Sistema Chilón"),
            point("r3", -64.60, -18.09, Municipio="valle Grande", Comunidad="Saipina"),
        )
    )


@pytest.fixture
def huertos() -> FeatureCollection:
    return FeatureCollection(
        features=(
            point("h1", -64.50, -17.88, Municipio="Comarapa", Comunidad="Verdecillos"),
            point("h2", None, None, Municipio="Saipina", Beneficiar="Familia Rojas"),
        )
    )


@pytest.fixture
def registry(riego, huertos) -> LayerRegistry:
    reg = LayerRegistry()
    reg.register_layer("Riego", riego)
    reg.register_layer("Huertos", huertos)
    return reg
