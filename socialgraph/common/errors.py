# socialgraph/common/errors.py

"""FastAPI exception handlers for typed failures.

Usage:
    from socialgraph.common.errors import register_exception_handlers

    app = FastAPI()
    register_exception_handlers(app)
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from socialgraph.core.errors import SocialGraphError, Unauthorized

logger = logging.getLogger(__name__)


async def socialgraph_error_handler(request: Request, exc: SocialGraphError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.debug("%s %s -> %s", request.method, request.url.path, exc.code)

    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthorized) else None
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SocialGraphError, socialgraph_error_handler)
