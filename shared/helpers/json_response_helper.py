from typing import Any, NoReturn
from fastapi import HTTPException

from shared.utils.app_status_code import AppStatusCode
from shared.core.schemas import JsonOutResult


def failure_envelope(message: str, status_code: str = AppStatusCode.OPERATION_FAILED) -> dict:
    """Body of every non-2xx JSON answer."""
    return JsonOutResult(
        data=None,
        status="Failure",
        status_code=status_code,
        message=message
    ).model_dump()


def success_response(
    data: Any,
    message: str = "Success",
    status_code: str = AppStatusCode.DATA_RETRIEVED_SUCCESSFULLY
) -> JsonOutResult:
    return JsonOutResult(data=data, status="Success", status_code=status_code, message=message)


def error_response(
    message: str,
    status_code: str = AppStatusCode.OPERATION_FAILED,
    http_status: int = 400
) -> NoReturn:
    # picked up unchanged by the HTTPException handler
    raise HTTPException(status_code=http_status, detail=failure_envelope(message, status_code))
