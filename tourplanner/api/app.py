"""
FastAPI application factory.

* Registers routes for tour optimization, ad-hoc planning and health.
* Closes the Redis pool and the DB engine on shutdown.
* Applies rate-limiting middleware.
* Swagger / OpenAPI UI available at ``/docs``.
"""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from tourplanner.api.middleware import limiter
from tourplanner.api.routes import health, planner, tours
from tourplanner.config import settings
from tourplanner.infrastructure.database import engine
from tourplanner.infrastructure.redis_client import close_pool

logging.basicConfig(level=settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Release pooled connections on shutdown."""
    yield
    await close_pool()
    await engine.dispose()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Tour Route Planner API",
        description=(
            "Orders the houses of a realtor's property tour into a short "
            "driving route, estimates its duration and links it to Google "
            "Maps directions.  Optimized orders can be saved back to the tour."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )

    # Rate limiter
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Routers
    app.include_router(tours.router, prefix="/api/v1")
    app.include_router(planner.router, prefix="/api/v1")
    app.include_router(health.router, prefix="/api/v1")

    return app
