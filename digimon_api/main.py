"""FastAPI application initialization and configuration."""

import logging
import time

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from slowapi.middleware import SlowAPIMiddleware

from digimon_api.api.error_handlers import register_error_handlers
from digimon_api.api.v1.endpoints.digimons import limiter, router as digimons_router
from digimon_api.api.v1.endpoints.health import router as health_router
from digimon_api.config import settings

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Digimon API",
    description="Read-only REST API for Digimon records, evolution graphs and catalogue statistics.",
    version="1.0.0",
)

# --- Middleware ---

# Rate limiting
app.state.limiter = limiter
app.add_middleware(SlowAPIMiddleware)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)


# Request logging
@app.middleware("http")
async def log_requests(request: Request, call_next) -> Response:
    """Log every incoming request and its duration."""
    start = time.perf_counter()
    response: Response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s -> %s (%.1fms)",
        request.method,
        request.url.path,
        response.status_code,
        duration_ms,
    )
    return response


register_error_handlers(app)

# Register routes
app.include_router(digimons_router, prefix="/api/v1")
app.include_router(health_router, prefix="/api/v1")


@app.get("/", tags=["Health"])
async def root() -> dict:
    """Service info and endpoint index."""
    return {
        "service": "Digimon API",
        "version": "1.0.0",
        "endpoints": {
            "digimons": "/api/v1/digimons",
            "search": "/api/v1/digimons/search?q=<query>",
            "stats": "/api/v1/digimons/stats",
            "digimon_detail": "/api/v1/digimons/{id}",
            "evolutions": "/api/v1/digimons/{id}/evolutions",
            "by_name": "/api/v1/digimons/name/{name}",
            "health": "/api/v1/health",
            "docs": "/docs",
        },
    }


logger.info("Digimon API started (debug=%s)", settings.DEBUG)
