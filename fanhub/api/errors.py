"""Global error handlers rendering domain errors with the request id."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from fanhub.core.errors import FanhubError, UnauthorizedError
from fanhub.core.logging import get_logger, get_request_id

logger = get_logger(__name__)


def install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(FanhubError)
    async def fanhub_error_handler(request: Request, exc: FanhubError) -> JSONResponse:
        logger.info(
            "request_failed",
            error=type(exc).__name__,
            detail=exc.detail,
            status_code=exc.status_code,
            path=request.url.path,
        )
        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, UnauthorizedError) else None
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail, "request_id": get_request_id()},
            headers=headers,
        )
