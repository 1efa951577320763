from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse
import time
import logging

from .api.auth import router as auth_router
from .api.appointments import router as appointments_router
from .core.config import Settings, get_settings
from .core.database import build_context, init_db
from .core.exceptions import ServiceError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables on startup and release the connection pool on shutdown."""
    context = app.state.context
    logger.info(f"Starting {context.settings.APP_NAME}...")
    logger.info(f"Using database {context.engine.url.render_as_string(hide_password=True)}")

    try:
        init_db(context.engine)
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize database: {str(e)}")
        raise

    logger.info("Application startup complete")
    yield

    logger.info(f"Shutting down {context.settings.APP_NAME}...")
    context.engine.dispose()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application.

    Raises a validation error when SECRET_KEY is missing outside DEBUG/TESTING.
    """
    settings = settings or get_settings()

    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.VERSION,
        description="Appointment booking between patients and doctors",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.context = build_context(settings)

    # Middleware setup
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.ALLOWED_HOSTS)

    # Request logging and timing
    @app.middleware("http")
    async def add_process_time_header(request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = str(process_time)

        logger.info(
            f"{request.method} {request.url.path} - "
            f"Status: {response.status_code} - "
            f"Time: {process_time:.4f}s"
        )

        return response

    # Exception handlers
    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        log = logger.error if exc.status_code >= 500 else logger.warning
        log(f"{request.method} {request.url.path} failed: {exc.title} - {exc.detail}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.title, "message": exc.detail},
            headers=exc.headers,
        )

    @app.exception_handler(Exception)
    async def internal_error_handler(request: Request, exc: Exception):
        logger.error(f"Internal server error on {request.method} {request.url.path}: {str(exc)}", exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal Server Error",
                "message": "An unexpected error occurred"
            }
        )

    # Include routers
    app.include_router(auth_router)
    app.include_router(appointments_router)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "timestamp": time.time(),
            "version": settings.VERSION
        }

    @app.get("/")
    async def root():
        """Root endpoint with API information."""
        return {
            "message": f"Welcome to {settings.APP_NAME} API",
            "version": settings.VERSION,
            "docs": "/docs",
            "health": "/health"
        }

    return app


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "clinic_booking.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        reload=get_settings().DEBUG,
        log_level="info"
    )
