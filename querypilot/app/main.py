import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Header, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from querypilot.app.connectors.manager import ConnectionManager
from querypilot.app.core.errors import AppError
from querypilot.app.core.logging import init_logging
from querypilot.app.core.settings import settings
from querypilot.app.routers import chat, databases, health, validate
from querypilot.app.services.confirmation import ConversationRegistry


def api_key_guard(x_api_key: str | None = Header(default=None)):
    need = os.getenv("API_KEY")
    if need and x_api_key != need:
        raise HTTPException(status_code=401, detail="invalid api key")


def create_app(connections: Optional[ConnectionManager] = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        init_logging()
        if not settings.LLM_API_KEY:
            logger.warning("LLM_API_KEY is not set. SQL generation will not work.")
        yield
        app.state.connections.close_all()

    app = FastAPI(title="QueryPilot", version="0.1.0", lifespan=lifespan)
    app.state.connections = connections or ConnectionManager()
    app.state.conversations = ConversationRegistry()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.CLIENT_URL],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def _log_requests(request: Request, call_next):
        logger.info(f"{request.method} {request.url.path}")
        return await call_next(request)

    # Mount routers with guard
    guard = [Depends(api_key_guard)]
    app.include_router(chat.router, prefix="/api", dependencies=guard)
    app.include_router(validate.router, prefix="/api", dependencies=guard)
    app.include_router(databases.router, prefix="/api", dependencies=guard)
    app.include_router(health.router)

    @app.exception_handler(AppError)
    async def _app_error(request: Request, exc: AppError):
        logger.warning("request failed", code=exc.code, error=exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException):
        message = "Route not found" if exc.status_code == 404 else str(exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": True, "message": message, "path": request.url.path},
        )

    @app.exception_handler(Exception)
    async def _unhandled_error(request: Request, exc: Exception):
        logger.error("unhandled", exception=exc)
        return JSONResponse(
            status_code=500,
            content={"error": True, "message": str(exc) or "Internal server error"},
        )

    return app


app = create_app()
