"""FastAPI application entry point.

Run with: uvicorn src.main:app --port 8080
      or: python -m src.main
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from config.settings import settings
from src.ss_common.errors import AppError
from src.ss_common.logging_config import setup_logging
from src.ss_common.response import error_response
from src.ss_gateway.middleware.request_log import RequestLogMiddleware
from src.ss_supply.api.router import router as supply_router
from src.ss_supply.application.service import SupplyApplicationService

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: validate config, start balance schedulers. Shutdown: stop them."""
    # Startup: ConfigurationError here aborts the process
    setup_logging(settings.LOG_LEVEL)
    service = SupplyApplicationService(settings)
    await service.start()
    app.state.supply_service = service
    yield
    # Shutdown
    await service.stop()
    app.state.supply_service = None


app = FastAPI(
    title=settings.APP_NAME,
    version=VERSION,
    lifespan=lifespan,
)


app.add_middleware(RequestLogMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    resp = error_response(exc.code, exc.message, getattr(request.state, "request_id", None))
    return JSONResponse(
        status_code=exc.http_status,
        content=resp.model_dump(),
    )


app.include_router(supply_router)


@app.get("/")
async def root() -> Response:
    return Response(status_code=200)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": VERSION}


if __name__ == "__main__":
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
