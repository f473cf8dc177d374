import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from sql_gateway.api.middleware import CORS_HEADERS
from sql_gateway.core.schemas import ErrorResponse

logger = logging.getLogger(__name__)

# Routing errors raised by the framework itself
ROUTING_MESSAGES = {
    status.HTTP_404_NOT_FOUND: "Endpoint not found",
    status.HTTP_405_METHOD_NOT_ALLOWED: "Method not allowed",
}


def error_response(status_code: int, message: str, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
        headers={**(headers or {}), **CORS_HEADERS},
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    message = ROUTING_MESSAGES.get(exc.status_code, exc.detail)
    return error_response(exc.status_code, message, exc.headers)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = errors[0]["msg"] if errors else "Invalid request"
    return error_response(status.HTTP_400_BAD_REQUEST, message)


# Last resort, one broken request must not take the service down
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc))


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
