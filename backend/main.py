import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.routes import router
from layers.errors import (
    UnknownBaseMapError,
    UnknownFeatureError,
    UnknownFilterFieldError,
    UnknownLayerError,
)
from viewer.registry import get_viewer
from viewer.session import build_session

logging.basicConfig(
    level=(os.getenv("GEOVISOR_LOG_LEVEL") or "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    entry = get_viewer()
    logger.info("Loading viewer '%s' from %s", entry.config.id, entry.path)
    app.state.session = build_session(entry.config)
    yield
    logger.info("Shutting down viewer '%s'", entry.config.id)


app = FastAPI(title="Geovisor API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        o.strip()
        for o in (os.getenv("GEOVISOR_CORS_ORIGINS") or "http://localhost:3000").split(",")
        if o.strip()
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(UnknownLayerError)
@app.exception_handler(UnknownFeatureError)
@app.exception_handler(UnknownBaseMapError)
async def not_found_handler(request: Request, exc: KeyError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(UnknownFilterFieldError)
async def bad_filter_handler(request: Request, exc: UnknownFilterFieldError):
    return JSONResponse(
        status_code=400,
        content={"detail": str(exc), "supported": list(exc.supported)},
    )


app.include_router(router)
