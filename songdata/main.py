"""FastAPI application initialization."""

from contextlib import asynccontextmanager

import logfire
import sentry_sdk
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sentry_sdk.integrations.fastapi import FastApiIntegration

from songdata import __version__
from songdata.api import analyze, health
from songdata.config import get_settings
from songdata.logging_config import setup_logfire


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    settings = get_settings()

    setup_logfire(app)

    if settings.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            traces_sample_rate=settings.sentry_traces_sample_rate,
            integrations=[FastApiIntegration()],
        )

    logfire.info(
        "Application startup complete",
        environment=settings.env,
        tunebat_base_url=settings.tunebat_base_url,
        max_concurrent_scrapes=settings.max_concurrent_scrapes,
    )

    yield

    logfire.info("Application shutdown complete")


app = FastAPI(
    title="Song Data Analyzer",
    description="Musical attributes (key, BPM, energy, ...) for Spotify tracks",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router, tags=["health"])
app.include_router(health.router, prefix="/api", tags=["health"])
app.include_router(analyze.router, prefix="/api", tags=["analyze"])


@app.get("/")
def root():
    """Root endpoint."""
    return {
        "message": "Song Data Analyzer API",
        "version": __version__,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("songdata.main:app", host="0.0.0.0", port=get_settings().port)
