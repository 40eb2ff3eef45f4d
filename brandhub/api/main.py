"""
FastAPI app assembly: middleware, static uploads and router wiring.
"""
import logging
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.requests import Request
from starlette.responses import JSONResponse

from brandhub import __version__
from brandhub.api.assets import router as assets_router
from brandhub.api.audits import router as audits_router
from brandhub.api.brand_config import router as brand_config_router
from brandhub.api.brand_guidelines import router as brand_guidelines_router
from brandhub.api.chat import router as chat_router
from brandhub.api.colors import router as colors_router
from brandhub.api.content import router as content_router
from brandhub.api.google_auth import router as google_auth_router
from brandhub.api.sessions import router as sessions_router
from brandhub.api.templates import router as templates_router
from brandhub.api.tool_pages import router as tool_pages_router
from brandhub.api.tools import router as tools_router
from brandhub.api.users import router as users_router
from brandhub.services.storage import LOCAL_URL_PREFIX, StorageConfig
from brandhub.utils.feature_flags import get_feature_flags

# Configure logging
LOG_LEVEL_NAME = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_LEVEL = getattr(logging, LOG_LEVEL_NAME, logging.INFO)
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)
logger.setLevel(LOG_LEVEL)
logger.info("app_startup: log_level=%s", LOG_LEVEL_NAME)

DEFAULT_MAX_REQUEST_SIZE_BYTES = 110 * 1024 * 1024


def _max_request_size() -> int:
    raw = os.getenv("MAX_REQUEST_SIZE_BYTES")
    try:
        return int(raw) if raw else DEFAULT_MAX_REQUEST_SIZE_BYTES
    except ValueError:
        logger.warning("Ignoring non-integer MAX_REQUEST_SIZE_BYTES=%r", raw)
        return DEFAULT_MAX_REQUEST_SIZE_BYTES


MAX_REQUEST_SIZE_BYTES = _max_request_size()

app = FastAPI(
    title="Brand Hub",
    description="API for brand assets, color palettes, templates, brand tools and the AI brand assistant.",
    version=__version__,
)

origins = [
    "http://localhost",
    "http://localhost:3000",
    "http://localhost:5173",
    "http://localhost:8000",
]
origins.extend(o.strip() for o in os.getenv("CORS_ORIGINS", "").split(",") if o.strip())

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Middleware: reject oversized bodies before multipart parsing
@app.middleware("http")
async def limit_request_size(request: Request, call_next):
    length = request.headers.get("content-length")
    if length and length.isdigit() and int(length) > MAX_REQUEST_SIZE_BYTES:
        logger.warning("request_too_large: path=%s length=%s", request.url.path, length)
        return JSONResponse(
            {"detail": "Request body too large"},
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
        )
    return await call_next(request)


# Local storage fallback is served from the same origin
_local_upload_dir = Path(StorageConfig.from_env().local_dir)
_local_upload_dir.mkdir(parents=True, exist_ok=True)
app.mount(LOCAL_URL_PREFIX, StaticFiles(directory=str(_local_upload_dir)), name="uploads")

app.include_router(sessions_router)
app.include_router(google_auth_router)
app.include_router(users_router)
app.include_router(assets_router)
app.include_router(colors_router)
app.include_router(content_router)
app.include_router(templates_router)
app.include_router(tools_router)
app.include_router(tool_pages_router)
app.include_router(brand_config_router)
app.include_router(brand_guidelines_router)
app.include_router(chat_router)
app.include_router(audits_router)


@app.get("/")
def root():
    return {"service": "brandhub", "version": __version__}


@app.get("/health")
def health_check():
    return {"status": "ok", "service": "brandhub", "features": get_feature_flags()}
