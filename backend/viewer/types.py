from __future__ import annotations

from pydantic import BaseModel, Field, model_validator


class ViewerCenter(BaseModel):
    lat: float
    lon: float


class ViewerDefaultView(BaseModel):
    center: ViewerCenter
    zoom: float = Field(ge=0.0, le=24.0)
    minZoom: float = Field(default=2.0, ge=0.0, le=24.0)


class ViewerLayerSource(BaseModel):
    name: str
    path: str
    # Only needed for names outside the built-in color table.
    color: str | None = None


class ViewerBaseMap(BaseModel):
    name: str
    tiles: list[str]
    attribution: str = ""
    maxZoom: int = Field(default=19, ge=0, le=24)


class ViewerConfig(BaseModel):
    id: str
    title: str
    description: str = ""
    defaultView: ViewerDefaultView
    layers: list[ViewerLayerSource]

    filterFields: list[str] = Field(
        default_factory=lambda: ["Municipio", "Comunidad", "Beneficiar"]
    )
    defaultFilterField: str = "Beneficiar"

    baseMaps: list[ViewerBaseMap] = Field(default_factory=list)
    defaultBaseMap: str | None = None

    # Repo-relative directory holding `<name>.zip` shapefile bundles.
    shapefileDir: str = "data/geovisor/shp"
    fitToLayersOnLoad: bool = True

    @model_validator(mode="after")
    def _check_fields(self) -> "ViewerConfig":
        if not self.filterFields:
            raise ValueError("filterFields must not be empty")
        if self.defaultFilterField not in self.filterFields:
            raise ValueError(
                f"defaultFilterField '{self.defaultFilterField}' is not in filterFields"
            )
        names = [b.name for b in self.baseMaps]
        if self.defaultBaseMap is not None and self.defaultBaseMap not in names:
            raise ValueError(f"defaultBaseMap '{self.defaultBaseMap}' is not configured")
        return self

    def color_overrides(self) -> dict[str, str]:
        return {layer.name: layer.color for layer in self.layers if layer.color}
