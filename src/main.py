"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy import text

from config.settings import settings
from src.dash_admin.api.router import router as seed_router
from src.dash_common.database import engine
from src.dash_common.errors import AppError
from src.dash_common.response import error_response
from src.dash_gateway.api.router import router as auth_router
from src.dash_gateway.auth.dependencies import get_hasher
from src.dash_gateway.middleware.request_log import RequestLogMiddleware

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: validate hashing config, verify DB connection. Shutdown: dispose."""
    # Startup
    get_hasher()
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    yield
    # Shutdown
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


app.add_middleware(RequestLogMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    resp = error_response(
        exc.code,
        exc.message,
        request_id=getattr(request.state, "request_id", None),
    )
    return JSONResponse(
        status_code=exc.http_status,
        content=resp.model_dump(),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Field names only; rejected values may hold secrets or unencodable text
    fields = sorted({".".join(str(p) for p in err["loc"][1:]) for err in exc.errors()})
    resp = error_response(
        1000,
        f"Invalid request: {', '.join(fields) or 'body'}",
        request_id=getattr(request.state, "request_id", None),
    )
    return JSONResponse(status_code=422, content=resp.model_dump())


app.include_router(auth_router, prefix="/api/v1")
app.include_router(seed_router, prefix="/api/v1")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": "0.1.0"}
