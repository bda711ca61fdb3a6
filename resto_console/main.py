"""
Resto Console - Main Application Entry Point
Multi-tenant restaurant management API
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging
import structlog

from resto_console.core.config import get_settings
from resto_console.core.database import init_db
from resto_console.core.errors import register_exception_handlers
from resto_console.api import instances, login, menu, settings as settings_api, users

settings = get_settings()

# Configure structured logging
logging.basicConfig(format="%(message)s", level=logging.DEBUG if settings.DEBUG else logging.INFO)
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.JSONRenderer()
    ],
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
)

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    # Startup
    logger.info(f"Initializing {settings.APP_NAME} ({settings.ENVIRONMENT})")
    init_db()

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.APP_NAME}")


# Create FastAPI application
app = FastAPI(
    title="Resto Console API",
    description="Multi-tenant restaurant management: menu, users and settings per tenant",
    version="1.0.0",
    lifespan=lifespan,
)

# Configure middleware stack
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],
)

register_exception_handlers(app)

# Include routers
app.include_router(instances.router, prefix=f"{settings.API_PREFIX}/instances", tags=["instances"])
app.include_router(login.router, prefix=f"{settings.API_PREFIX}/login", tags=["login"])
app.include_router(menu.router, prefix=f"{settings.API_PREFIX}/menu", tags=["menu"])
app.include_router(settings_api.router, prefix=f"{settings.API_PREFIX}/settings", tags=["settings"])
app.include_router(users.router, prefix=f"{settings.API_PREFIX}/users", tags=["users"])


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "resto-console-api"}


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "Resto Console API",
        "version": "1.0.0",
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "resto_console.main:app",
        host="0.0.0.0",
        port=settings.PORT,
        reload=settings.ENVIRONMENT == "development",
        log_level="info",
    )
