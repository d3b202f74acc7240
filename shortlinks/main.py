"""
FastAPI Application Entry Point

This module initializes the FastAPI application and configures:
- API routes
- Middleware (logging, CORS)
- Application metadata
- Schema creation on startup and engine disposal on shutdown
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shortlinks.api import endpoints
from shortlinks.core.setting import settings
from shortlinks.db.session import close_db, init_db
from shortlinks.middleware.logging import add_logging_middleware

logging.getLogger("shortlinks").setLevel(settings.LOG_LEVEL.upper())

app = FastAPI(
    title="Short Link Service",
    description="Short links with per-visit analytics, built with FastAPI",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

add_logging_middleware(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Health endpoints defined before router to match before catch-all route
@app.get("/", tags=["Health"])
async def root():
    """Service information."""
    return {
        "message": "Short Link Service",
        "version": "1.0.0",
        "docs": "/docs"
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint for monitoring."""
    return {"status": "healthy", "environment": settings.ENV_SETTING.value}


app.include_router(endpoints.router, tags=["Short Links"])


@app.on_event("startup")
async def startup_event():
    """Create missing tables unless migrations manage the schema."""
    if settings.AUTO_CREATE_TABLES:
        await init_db()


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown."""
    await close_db()
