from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from sqlmodel import SQLModel
from .error import ClientError, ServerError
import logging

logger = logging.getLogger(__name__)


async def handle_client_error(request: Request, exc: ClientError):
    error_dict = {"code": exc.base_error.code, "message": exc.base_error.message}
    logger.warning(f"Client error: {error_dict}")
    return JSONResponse(status_code=exc.status_code, content={"error": error_dict})


async def handle_server_error(request: Request, exc: ServerError):
    error_dict = {"code": exc.base_error.code, "message": "Internal server error"}
    logger.error(f"Server error: {exc.base_error.code}: {exc.base_error.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": error_dict})


def build_lifespan(ApplicationConfig):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        from chatweet.adapter.services.expiry_sweeper import ExpirySweeper
        from chatweet.depends import AsyncSessionLocal, engine

        if ApplicationConfig.CREATE_TABLES_ON_STARTUP:
            async with engine.begin() as conn:
                await conn.run_sync(SQLModel.metadata.create_all)
            logger.info("Session store tables ready.")

        sweeper = None
        if ApplicationConfig.CLEANUP_INTERVAL_SECONDS > 0:
            sweeper = ExpirySweeper(AsyncSessionLocal, ApplicationConfig.CLEANUP_INTERVAL_SECONDS)
            sweeper.start()

        yield

        if sweeper is not None:
            await sweeper.stop()
        await engine.dispose()
        logger.info("Database engine disposed.")

    return lifespan


def create_app(ApplicationConfig) -> FastAPI:
    app = FastAPI(
        title="ChatWeet Session Authority",
        version="0.1.0",
        lifespan=build_lifespan(ApplicationConfig),
    )

    allow_all = "*" in ApplicationConfig.CORS_ORIGINS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=not allow_all,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=ApplicationConfig.CORS_ALLOW_HEADERS,
    )

    from chatweet.domain import entities  # noqa: F401 (registers tables)
    from chatweet.api.routes import health_check, session_manager

    app.include_router(health_check.router, tags=["Health"])
    app.include_router(session_manager.router, prefix=ApplicationConfig.API_PREFIX, tags=["Sessions"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)

    return app
