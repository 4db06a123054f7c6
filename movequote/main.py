from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from .config import settings
from .routers import estimation, pricing, jobs

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("movequote")

app = FastAPI(
    title="MoveQuote",
    description="Quote calculation engine for moving-service jobs",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin.strip() for origin in settings.CORS_ORIGINS.split(",") if origin.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routes
app.include_router(estimation.router, prefix="/api")
app.include_router(pricing.router, prefix="/api")
app.include_router(jobs.router, prefix="/api")


@app.get("/health")
def health():
    return {"status": "ok", "app": settings.APP_NAME}


@app.on_event("startup")
def log_startup():
    if settings.GOOGLE_MAPS_API_KEY:
        logger.info("%s started, routing via Google Routes", settings.APP_NAME)
    else:
        logger.warning("%s started without GOOGLE_MAPS_API_KEY: distances will use fallback estimates",
                       settings.APP_NAME)
