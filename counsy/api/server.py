"""FastAPI application setup"""
import logging
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from counsy.api.routes import router
from counsy.api.middleware import setup_cors, setup_rate_limiting
from counsy.config import LOG_LEVEL, validate_config
from counsy.exceptions import (
    AuthenticationError,
    ConfigurationError,
    CounsyError,
    RecordNotFoundError,
    StreakPersistenceError,
    ValidationError,
)
from counsy.services.container import ServiceContainer, build_container

# Configure logging
logging.basicConfig(
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    level=getattr(logging, LOG_LEVEL.upper(), logging.INFO)
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifecycle manager for FastAPI application"""
    # Startup
    logger.info("Starting API server...")

    container = getattr(app.state, "container", None)
    if container is None:
        validate_config()
        container = build_container()
        await container.db.init_pool()
        logger.info("Database pool initialized")
        app.state.container = container

    yield

    # Shutdown
    logger.info("Shutting down API server...")
    await container.db.close_pool()
    await container.completion_client.close()
    logger.info("Database pool closed")


def create_api_application(container: Optional[ServiceContainer] = None) -> FastAPI:
    """
    Create and configure FastAPI application

    Args:
        container: Prebuilt services (tests pass one with doubles). When
            omitted the container is built from config at startup.
    """
    app = FastAPI(
        title="Counsy API",
        description="REST API for the Counsy student wellness app",
        version="1.0.0",
        lifespan=lifespan
    )

    if container is not None:
        app.state.container = container

    # Setup middleware
    setup_cors(app)
    setup_rate_limiting(app)

    # Include routes
    app.include_router(router)

    @app.exception_handler(AuthenticationError)
    async def authentication_error_handler(request: Request, exc: AuthenticationError):
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content=exc.to_dict(),
            headers={"WWW-Authenticate": "Bearer"}
        )

    @app.exception_handler(ConfigurationError)
    async def configuration_error_handler(request: Request, exc: ConfigurationError):
        return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=exc.to_dict())

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return JSONResponse(
            status_code=422,
            content={**exc.to_dict(), "field": exc.field}
        )

    @app.exception_handler(RecordNotFoundError)
    async def not_found_handler(request: Request, exc: RecordNotFoundError):
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content=exc.to_dict())

    @app.exception_handler(StreakPersistenceError)
    async def streak_persistence_handler(request: Request, exc: StreakPersistenceError):
        return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=exc.to_dict())

    @app.exception_handler(CounsyError)
    async def counsy_error_handler(request: Request, exc: CounsyError):
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=exc.to_dict())

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "detail": str(exc)}
        )

    logger.info("FastAPI application created")

    return app


app = create_api_application()
