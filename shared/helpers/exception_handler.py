import logging

from fastapi import FastAPI, Request, HTTPException
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from shared.helpers.json_response_helper import failure_envelope
from shared.utils.app_status_code import AppStatusCode

logger = logging.getLogger(__name__)


def setup_exception_handlers(app: FastAPI):

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        # error_response() already built the envelope
        if isinstance(exc.detail, dict) and "status_code" in exc.detail:
            return JSONResponse(content=exc.detail, status_code=exc.status_code, headers=exc.headers)

        body = failure_envelope(str(exc.detail), str(exc.status_code or AppStatusCode.OPERATION_FAILED))
        return JSONResponse(content=body, status_code=exc.status_code or 400, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(content=failure_envelope(str(exc), AppStatusCode.INVALID_INPUT), status_code=422)

    # Catch all unhandled exceptions
    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception on %s", request.url.path)
        return JSONResponse(content=failure_envelope(str(exc)), status_code=500)
