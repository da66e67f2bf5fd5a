"""Global exception handlers rendering the error envelope.

Every failure leaves the API as ``{"success": false, "error", "statusCode"}``.
Unhandled exceptions never leak internal details.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from digimon_api.errors import DigimonAPIError

logger = logging.getLogger(__name__)


def error_response(message: str, status_code: int = status.HTTP_400_BAD_REQUEST) -> dict:
    """Build the error envelope."""
    return {"success": False, "error": message, "statusCode": status_code}


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""

    @app.exception_handler(DigimonAPIError)
    async def digimon_api_error_handler(request: Request, exc: DigimonAPIError) -> JSONResponse:
        # Backend failures were already logged by the service
        return JSONResponse(
            status_code=exc.status_code,
            content=error_response(exc.message, exc.status_code),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.warning("Validation error on %s: %s", request.url.path, exc.errors())
        content = error_response("Parâmetros inválidos", status.HTTP_400_BAD_REQUEST)
        content["details"] = [
            {"field": ".".join(str(loc) for loc in e["loc"]), "message": e["msg"]}
            for e in exc.errors()
        ]
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=content)

    @app.exception_handler(RateLimitExceeded)
    async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
        logger.warning("Rate limit exceeded on %s: %s", request.url.path, exc.detail)
        response = JSONResponse(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            content=error_response(
                f"Rate limit exceeded: {exc.detail}", status.HTTP_429_TOO_MANY_REQUESTS
            ),
        )
        # Keep the X-RateLimit-* / Retry-After headers slowapi would have set
        view_rate_limit = getattr(request.state, "view_rate_limit", None)
        if view_rate_limit is not None:
            response = request.app.state.limiter._inject_headers(response, view_rate_limit)
        return response

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=error_response(str(exc.detail), exc.status_code),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Unhandled exception on %s: %s", request.url.path, exc, exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_response("Erro interno do servidor", status.HTTP_500_INTERNAL_SERVER_ERROR),
        )
