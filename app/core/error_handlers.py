import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .exceptions import AppExceptionBase

logger = logging.getLogger(__name__)


async def app_exception_handler(request: Request, exc: AppExceptionBase):
    # 4xx are logged without a traceback
    if exc.status_code >= 500:
        logger.error(f"Application error on {request.url.path}: {exc.message}", exc_info=True)
    else:
        logger.warning(f"Rejected request on {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": {
                "code": exc.code,
                "message": exc.message,
            }
        },
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    logger.warning(f"{request.method} {request.url.path} answered {exc.status_code}: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": {
                "code": "HTTP_EXCEPTION",
                "message": exc.detail,
            }
        },
    )


async def generic_exception_handler(request: Request, exc: Exception):
    logger.critical(f"Unhandled exception: {str(exc)}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "code": "INTERNAL_SERVER_ERROR",
                "message": "An unexpected internal server error occurred.",
            }
        },
    )


def add_exception_handlers(app: FastAPI):
    app.add_exception_handler(AppExceptionBase, app_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
