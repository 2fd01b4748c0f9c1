# formstamp/main.py

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from formstamp.core.config import settings
from formstamp.core.db import init_models
from formstamp.utils.logger import setup_app_logging, get_logger
from formstamp.templates.storage import LocalTemplateStore, build_template_store
# Local application imports - Routes
from formstamp.companies.router import router as company_routes
from formstamp.datapoints.router import router as datapoint_routes
from formstamp.templates.router import router as template_routes
from formstamp.rendering.router import router as generation_routes


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Create missing tables before serving requests
    """
    await init_models()
    yield


app = FastAPI(
    title=f"Formstamp - {settings.environment}",
    description="PDF template mapping and batch generation API",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# Configure logging
setup_app_logging(
    app,
    log_level=settings.log_level,
    use_json=settings.log_json or settings.is_production,
    log_file=settings.log_file,
    app_name="Formstamp",
    environment=settings.environment,
)
logger = get_logger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_cors_urls.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(datapoint_routes)
app.include_router(company_routes)
app.include_router(template_routes)
app.include_router(generation_routes)

# Uploaded templates are readable for editor previews when kept on disk
_store = build_template_store(settings)
if isinstance(_store, LocalTemplateStore):
    app.mount("/storage", StaticFiles(directory=str(_store.root)), name="storage")


@app.get("/api/health", tags=["Base"])
async def health_check():
    """
    Check that the server is up
    """
    logger.info("Calling health check")
    return {"ok": True}
