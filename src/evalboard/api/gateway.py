"""
API Gateway -- FastAPI application factory.

Creates the FastAPI app with all routes, middleware, and dependencies.
This is the entrypoint for uvicorn:

    uvicorn evalboard.api.gateway:create_app --factory --host 0.0.0.0 --port 8000

Or run `evalboard serve`.

Security:
  - CORS restricted to configured origins (default: localhost only)
  - All external input validated at boundary

Route logic lives in routes/.
"""

import logging
import time

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..config import Settings
from ..logging_setup import configure_logging
from ..services import Services, build_services
from .routes import evaluate, health, results, test_cases

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    services: Services | None = None,
) -> FastAPI:
    """
    Application factory -- creates and configures the FastAPI app.

    Args:
        settings: Resolved configuration (loaded from the environment if None).
        services: Pre-built collaborators (built from settings if None).
    """
    if settings is None:
        settings = services.settings if services is not None else Settings.from_env()
    configure_logging(settings.log_level)

    application = FastAPI(
        title="evalboard API",
        description="LLM-as-judge evaluation of prompt/expected-output test cases",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type"],
    )

    if services is None:
        services = build_services(settings)

    application.state.services = services
    application.state.start_time = time.time()

    application.include_router(health.router, tags=["Health"])
    application.include_router(evaluate.router, prefix="/api", tags=["Evaluation"])
    application.include_router(test_cases.router, prefix="/api", tags=["Test Cases"])
    application.include_router(results.router, prefix="/api", tags=["Results"])

    logger.info(f"[Gateway] API gateway initialized (model={services.llm.model})")
    return application
