"""
Campus Feed API - FastAPI application entry point.
"""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .config import Settings, get_settings
from .context import AppContext
from .dependencies import check_body_content, enforce_rate_limit
from .middleware import RequestLoggingMiddleware
from .responses import api_exception_handler, request_validation_handler
from .routes import (
    schools_router,
    users_router,
    posts_router,
    comments_router,
    feed_router,
    health_router,
)


def create_app(settings: Optional[Settings] = None, context: Optional[AppContext] = None) -> FastAPI:
    """Build the application around a single AppContext."""
    settings = settings or get_settings()
    context = context or AppContext(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Manage application lifecycle - startup and shutdown"""
        context.start()
        yield
        context.shutdown()

    app = FastAPI(
        title=settings.app_name,
        description="School-scoped social feed with newest and trending views",
        version=__version__,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
        dependencies=[Depends(enforce_rate_limit), Depends(check_body_content)],
    )
    app.state.context = context

    app.add_exception_handler(StarletteHTTPException, api_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, api_exception_handler)

    # Request logging middleware (only in debug mode)
    if settings.debug:
        app.add_middleware(RequestLoggingMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Accept", "Origin", "X-Requested-With"],
        expose_headers=["X-RateLimit-Limit", "X-RateLimit-Remaining", "X-RateLimit-Reset"],
        max_age=3600,
    )

    app.include_router(schools_router)
    app.include_router(users_router)
    app.include_router(posts_router)
    app.include_router(comments_router)
    app.include_router(feed_router)
    app.include_router(health_router)

    @app.get("/")
    def root():
        return {"message": settings.app_name}

    return app


app = create_app()
