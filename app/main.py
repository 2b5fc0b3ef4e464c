import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.dependencies import verify_api_key
from app.routers.samples import router as samples_router
from app.routers.sessions import router as sessions_router
from app.utils.exceptions import register_exception_handlers

SERVICE_NAME = "citysense-api"
VERSION = "0.1.0"

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
for name in ("httpx", "httpcore"):
    logging.getLogger(name).setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if not settings.openai_api_key:
        logger.warning("OPENAI_API_KEY not configured, every analysis will fail")
    logger.info("Using model=%s base_url=%s", settings.openai_model, settings.openai_base_url)
    yield


app = FastAPI(
    title="CitySense API",
    description="Multimodal civic infrastructure issue analysis",
    version=VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

_api_key_dep = [Depends(verify_api_key)]

app.include_router(sessions_router, prefix="/api/v1", dependencies=_api_key_dep)
app.include_router(samples_router, prefix="/api/v1", dependencies=_api_key_dep)


@app.get("/health")
async def health_check():
    return {"status": "success", "data": {"service": SERVICE_NAME, "version": VERSION}, "message": None}
