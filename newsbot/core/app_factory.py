"""Application factory."""
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from newsbot.core.config import settings
from newsbot.core.errors import ChatServiceError
from newsbot.core.logging import setup_logging, get_logger
from newsbot.core.lifecycle import lifespan
from newsbot.api import cache, chat, health, sessions

setup_logging(settings.log_level, settings.log_format)
logger = get_logger(__name__)


def create_app() -> FastAPI:
    """Build the chat service app: CORS, error rendering and the ``/api`` routers."""
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        lifespan=lifespan,
        docs_url=f"{settings.api_prefix}/docs",
        redoc_url=None,
        openapi_url=f"{settings.api_prefix}/openapi.json",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ChatServiceError)
    async def chat_service_error_handler(request: Request, exc: ChatServiceError):
        # 4xx are caller mistakes, 5xx are store or collaborator outages
        log = logger.error if exc.status_code >= 500 else logger.info
        log("%s %s -> %d: %s", request.method, request.url.path, exc.status_code, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error("%s %s crashed: %s", request.method, request.url.path, exc, exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": "An unexpected error occurred",
                "category": "unknown",
                "details": {},
            },
        )

    for router, tag in (
        (health.router, "health"),
        (chat.router, "chat"),
        (sessions.router, "sessions"),
        (cache.router, "cache"),
    ):
        app.include_router(router, prefix=settings.api_prefix, tags=[tag])

    @app.get("/")
    async def root() -> Dict[str, Any]:
        return {"service": settings.app_name, "version": settings.app_version}

    return app
