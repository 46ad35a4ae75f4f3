from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from moments.config import configure_logging
from moments.errors import (
    AppError,
    ImageDecodeError,
    NetworkError,
    NotFoundError,
    ServerError,
    UnauthorizedError,
    ValidationError,
)
from moments.handlers import compose_handler

configure_logging()

app = FastAPI(title="Moments API")

app.include_router(compose_handler.router)

_STATUS_BY_ERROR: dict[type[AppError], int] = {
    ValidationError: 422,
    ImageDecodeError: 422,
    NotFoundError: 404,
    UnauthorizedError: 401,
    ServerError: 502,
    NetworkError: 502,
}


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    status = next((code for cls, code in _STATUS_BY_ERROR.items() if isinstance(exc, cls)), 500)
    return JSONResponse(status_code=status, content={"detail": str(exc)})


@app.get("/healthz")
async def healthz():
    return {"status": "ok"}
