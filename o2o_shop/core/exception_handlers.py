# o2o_shop/core/exception_handlers.py
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from o2o_shop.core.exceptions import BusinessException

logger = logging.getLogger(__name__)


async def business_exception_handler(request: Request, exc: BusinessException):
    """Map domain errors to `{"detail": message}` with the error's status code."""
    if exc.code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.warning("%s %s rejected: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.code, content={"detail": exc.message})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BusinessException, business_exception_handler)
