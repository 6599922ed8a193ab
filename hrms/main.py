import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from hrms import __version__
from hrms.core.config import settings
from hrms.core.logging_config import setup_logging
from hrms.api.v1.api import api_router
from hrms.db.init_db import init_db
from hrms.middleware.logging import LoggingMiddleware
from hrms.utils.date_time import now_local

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info(f"Starting {settings.APP_NAME} v{__version__} ({settings.ENVIRONMENT})")
    await init_db()
    yield
    logger.info(f"Shutting down {settings.APP_NAME}")


# Create FastAPI app
app_config = {
    "title": settings.APP_NAME,
    "description": "Employees, attendance, leave and payroll",
    "version": __version__,
    "lifespan": lifespan,
}

app = FastAPI(**app_config)

# Add middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=settings.ALLOWED_METHODS,
    allow_headers=settings.ALLOWED_HEADERS
)
app.add_middleware(LoggingMiddleware)

# Include routers
app.include_router(api_router, prefix="/api/v1")

@app.get("/")
async def root():
    return {
        "message": f"Welcome to the {settings.APP_NAME}",
        "status": "active",
        "version": __version__,
        "docs": "/docs"
    }

@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "timestamp": now_local().isoformat(),
        "environment": settings.ENVIRONMENT,
    }


def run():
    """Run the API server"""
    import uvicorn
    uvicorn.run(
        "hrms.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG
    )


if __name__ == "__main__":
    run()
