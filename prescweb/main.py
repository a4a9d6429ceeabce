# prescweb/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from prescweb.core.config import get_settings
from prescweb.core.database import SessionLocal, init_db
from prescweb.core.logging_config import configure_logging
from prescweb.api.v1.router import api_router
from prescweb.services.seed_service import seed_default_templates

settings = get_settings()

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables and seed default templates on startup."""
    if settings.auto_create_tables:
        init_db()
    if settings.seed_default_templates:
        db = SessionLocal()
        try:
            seed_default_templates(db)
        finally:
            db.close()
    logger.info("PrescWeb started env=%s db=%s", settings.app_env, settings.database_url)
    yield
    logger.info("PrescWeb shutting down")


app = FastAPI(
    title="PrescWeb",
    description="Clinic prescription writing API",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health", tags=["health"])
async def root_health() -> dict:
    """
    Global health check endpoint.
    """
    return {"status": "ok"}


app.include_router(api_router, prefix=settings.api_prefix)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("prescweb.main:app", host="0.0.0.0", port=3001, reload=True)
