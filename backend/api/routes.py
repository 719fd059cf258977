from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import FileResponse

from api.models import (
    ApiBaseMapChoice,
    ApiBbox,
    ApiBounds,
    ApiCenter,
    ApiFilter,
    ApiFilterResult,
    ApiInfo,
    ApiLayer,
    ApiLegendItem,
    ApiMapClick,
    ApiMapClickResult,
    ApiMarker,
    ApiMeasureRequest,
    ApiMeasureResult,
    ApiPopup,
    ApiViewer,
    ApiViewport,
    ApiVisibility,
)
from api.telemetry import record_action
from geo.measure import format_km
from layers.download import shapefile_link, shapefile_path
from layers.registry import LayerRegistry
from layers.types import LayerEntry
from plot.view import fit_view_to_bbox
from telemetry.singleton import get_store
from viewer.registry import get_viewer, resolve_repo_path
from viewer.session import ViewerSession, build_session

router = APIRouter()


def get_session(request: Request) -> ViewerSession:
    session = getattr(request.app.state, "session", None)
    if session is None:
        session = build_session(get_viewer().config)
        request.app.state.session = session
    return session


def _rendered_by_layer(registry: LayerRegistry) -> dict[str, int]:
    return {e.name: e.rendered_count for e in registry.list_layers()}


def _api_layer(entry: LayerEntry) -> ApiLayer:
    link = shapefile_link(entry.name)
    return ApiLayer(
        name=entry.name,
        color=entry.color,
        visible=entry.visible,
        featureCount=len(entry.source),
        renderedCount=entry.rendered_count,
        download=link.href,
        downloadName=link.filename,
    )


@router.get("/health")
def health():
    return {"status": "ok"}


@router.get("/viewer", response_model=ApiViewer)
def viewer_info(session: ViewerSession = Depends(get_session)):
    cfg = session.config
    dv = cfg.defaultView
    return ApiViewer(
        id=cfg.id,
        title=cfg.title,
        description=cfg.description,
        center=ApiCenter(lat=dv.center.lat, lon=dv.center.lon),
        zoom=dv.zoom,
        minZoom=dv.minZoom,
        baseMaps=[b.name for b in session.base_maps],
        baseMap=session.base_map,
        filterFields=list(session.registry.filter_fields),
        filterField=session.registry.filter.field,
    )


@router.get("/layers", response_model=list[ApiLayer])
def list_layers(session: ViewerSession = Depends(get_session)):
    return [_api_layer(entry) for entry in session.registry.list_layers()]


@router.post("/layers/{name}/visibility", response_model=ApiLayer)
def set_visibility(
    name: str, body: ApiVisibility, session: ViewerSession = Depends(get_session)
):
    session.set_layer_visibility(name, body.visible)
    record_action(session, "visibility", layer=name, stats={"visible": body.visible})
    return _api_layer(session.registry.get(name))


@router.get("/layers/{name}/download")
def download_layer(name: str, session: ViewerSession = Depends(get_session)):
    entry = session.registry.get(name)
    path = shapefile_path(resolve_repo_path(session.config.shapefileDir), entry.name)
    if not path.exists():
        raise HTTPException(status_code=404, detail=f"No shapefile bundle for {entry.name}")
    record_action(session, "download", layer=entry.name)
    return FileResponse(
        path, media_type="application/zip", filename=shapefile_link(entry.name).filename
    )


@router.get("/legend", response_model=list[ApiLegendItem])
def legend(session: ViewerSession = Depends(get_session)):
    return [ApiLegendItem(name=n, color=c) for n, c in session.registry.legend()]


@router.get("/filter", response_model=ApiFilterResult)
def get_filter(session: ViewerSession = Depends(get_session)):
    state = session.registry.filter
    return ApiFilterResult(
        field=state.field,
        query=state.query,
        renderedByLayer=_rendered_by_layer(session.registry),
        info=session.info,
    )


@router.post("/filter", response_model=ApiFilterResult)
def apply_filter(body: ApiFilter, session: ViewerSession = Depends(get_session)):
    state = session.apply_filter(body.field, body.query)
    record_action(session, "filter")
    return ApiFilterResult(
        field=state.field,
        query=state.query,
        renderedByLayer=_rendered_by_layer(session.registry),
        info=session.info,
    )


@router.delete("/filter", response_model=ApiFilterResult)
def clear_filter(session: ViewerSession = Depends(get_session)):
    state = session.clear_filter()
    record_action(session, "filter")
    return ApiFilterResult(
        field=state.field,
        query=state.query,
        renderedByLayer=_rendered_by_layer(session.registry),
        info=session.info,
    )


@router.get("/bounds", response_model=ApiBounds | None)
def bounds(
    layer: str | None = None,
    width: int | None = Query(default=None, gt=0),
    height: int | None = Query(default=None, gt=0),
    session: ViewerSession = Depends(get_session),
):
    bbox = session.fit_bounds(layer)
    if bbox is None:
        return None
    viewport = {"width": width, "height": height} if width and height else None
    center, zoom = fit_view_to_bbox(bbox, viewport=viewport)
    return ApiBounds(
        bbox=ApiBbox(**bbox.as_dict()),
        center=ApiCenter(lat=center["lat"], lon=center["lon"]),
        zoom=max(zoom, session.config.defaultView.minZoom),
    )


@router.post("/measure", response_model=ApiMeasureResult)
def measure(body: ApiMeasureRequest, session: ViewerSession = Depends(get_session)):
    m = session.measure(body.coords, method=body.method)
    record_action(session, "measure", stats={"km": m.km, "points": len(m.coords)})
    return ApiMeasureResult(id=m.id, km=m.km, label=f"{format_km(m.km)} km", info=session.info)


@router.post("/markers/arm", response_model=ApiInfo)
def arm_marker(session: ViewerSession = Depends(get_session)):
    session.arm_marker()
    return ApiInfo(info=session.info, mode=session.markers.mode.value)


@router.post("/map/click", response_model=ApiMapClickResult)
def map_click(body: ApiMapClick, session: ViewerSession = Depends(get_session)):
    marker = session.map_click(body.lon, body.lat)
    if marker is not None:
        record_action(session, "marker")
    return ApiMapClickResult(
        mode=session.markers.mode.value,
        marker=ApiMarker(id=marker.id, lat=marker.lat, lon=marker.lon, title=marker.title)
        if marker is not None
        else None,
        info=session.info,
    )


@router.get("/markers/{marker_id}", response_model=ApiMapClickResult)
def marker_popup(marker_id: str, session: ViewerSession = Depends(get_session)):
    marker = session.marker_popup(marker_id)
    return ApiMapClickResult(
        mode=session.markers.mode.value,
        marker=ApiMarker(id=marker.id, lat=marker.lat, lon=marker.lon, title=marker.title),
        info=session.info,
    )


@router.delete("/user-data", response_model=ApiInfo)
def clear_user_data(session: ViewerSession = Depends(get_session)):
    session.clear_user_data()
    return ApiInfo(info=session.info, mode=session.markers.mode.value)


@router.post("/basemap", response_model=ApiInfo)
def select_base_map(body: ApiBaseMapChoice, session: ViewerSession = Depends(get_session)):
    bm = session.select_base_map(body.name)
    return ApiInfo(info=bm.name)


@router.get("/features/{layer}/{feature_id}", response_model=ApiPopup)
def feature_popup(layer: str, feature_id: str, session: ViewerSession = Depends(get_session)):
    popup = session.feature_popup(layer, feature_id)
    return ApiPopup(**popup, info=session.info)


@router.get("/plot")
def plot(
    lat: float | None = Query(default=None, ge=-90.0, le=90.0),
    lon: float | None = Query(default=None, ge=-180.0, le=180.0),
    zoom: float | None = Query(default=None, ge=0.0, le=24.0),
    width: int | None = Query(default=None, gt=0),
    height: int | None = Query(default=None, gt=0),
    session: ViewerSession = Depends(get_session),
):
    view_center = {"lat": lat, "lon": lon} if lat is not None and lon is not None else None
    viewport = (
        ApiViewport(width=width, height=height).model_dump() if width and height else None
    )
    return session.plot(view_center=view_center, view_zoom=zoom, viewport=viewport)


@router.get("/telemetry/summary")
def telemetry_summary(limit: int = Query(default=10, ge=1, le=200)):
    store = get_store()
    if store is None:
        raise HTTPException(status_code=404, detail="Telemetry is disabled")
    store.flush(timeout_s=1.0)
    return {"actions": store.summary(), "topQueries": store.top_queries(limit=limit)}
