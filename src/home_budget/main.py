import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import IntegrityError

from home_budget.api.middleware.error_handler import (
    handle_budget_error,
    handle_generic_error,
    handle_integrity_error,
    handle_validation_error,
)
from home_budget.api.middleware.logging import RequestLoggingMiddleware, configure_logging
from home_budget.api.v1 import router as v1_router
from home_budget.api.v1.health import router as health_router
from home_budget.config import settings
from home_budget.core.exceptions import BudgetError
from home_budget.db.session import async_engine

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.log_level, settings.log_json)
    logger.info(f"Home budget API starting ({settings.app_env})")
    yield
    await async_engine.dispose()
    logger.info("Home budget API stopped")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Home Budget API",
        description="Household transactions, AI categorization and subscription tracking",
        version="0.1.0",
        debug=settings.debug,
        lifespan=lifespan,
    )

    # Add request logging middleware
    app.add_middleware(RequestLoggingMiddleware)

    # Register exception handlers (order matters - most specific first)
    app.add_exception_handler(BudgetError, handle_budget_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(IntegrityError, handle_integrity_error)
    app.add_exception_handler(Exception, handle_generic_error)

    # Register routers
    app.include_router(health_router)
    app.include_router(v1_router)

    return app


app = create_app()
