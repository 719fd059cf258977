from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, Field


class ApiCenter(BaseModel):
    lat: float = Field(ge=-90.0, le=90.0)
    lon: float = Field(ge=-180.0, le=180.0)


class ApiViewport(BaseModel):
    width: int = Field(gt=0)
    height: int = Field(gt=0)


class ApiBbox(BaseModel):
    minLon: float
    minLat: float
    maxLon: float
    maxLat: float


class ApiLayer(BaseModel):
    name: str
    color: str
    visible: bool
    featureCount: int
    renderedCount: int
    download: str
    downloadName: str


class ApiLegendItem(BaseModel):
    name: str
    color: str


class ApiVisibility(BaseModel):
    visible: bool


class ApiFilter(BaseModel):
    field: str
    query: str = ""


class ApiFilterResult(BaseModel):
    field: str
    query: str
    renderedByLayer: dict[str, int]
    info: str


class ApiBounds(BaseModel):
    bbox: ApiBbox
    center: ApiCenter
    zoom: float


Lon = Annotated[float, Field(ge=-180.0, le=180.0, allow_inf_nan=False)]
Lat = Annotated[float, Field(ge=-90.0, le=90.0, allow_inf_nan=False)]


class ApiMeasureRequest(BaseModel):
    # [(lon, lat), ...] in drawing order
    coords: list[tuple[Lon, Lat]]
    method: Literal["haversine", "geodesic"] = "haversine"


class ApiMeasureResult(BaseModel):
    id: str
    km: float
    label: str
    info: str


class ApiMapClick(BaseModel):
    lat: Lat
    lon: Lon


class ApiMarker(BaseModel):
    id: str
    lat: float
    lon: float
    title: str


class ApiMapClickResult(BaseModel):
    mode: str
    marker: ApiMarker | None = None
    info: str


class ApiInfo(BaseModel):
    info: str
    mode: str | None = None


class ApiBaseMapChoice(BaseModel):
    name: str


class ApiPopup(BaseModel):
    layer: str
    id: str
    title: str
    html: str
    info: str


class ApiViewer(BaseModel):
    id: str
    title: str
    description: str
    center: ApiCenter
    zoom: float
    minZoom: float
    baseMaps: list[str]
    baseMap: str
    filterFields: list[str]
    filterField: str
