"""JSON envelopes shared by all routes"""

from math import ceil
from typing import Any, Dict
import logging

from fastapi.responses import JSONResponse

from shared.models.base import BaseResponse, ErrorResponse
from ...domain.exceptions import DocumentOperationError, InvalidCompletionRequest, ResourceNotFoundError

logger = logging.getLogger(__name__)


def success_response(message: str, data: Any = None, status_code: int = 200, **extra: Any) -> JSONResponse:
    """Wrap ``data`` in the success envelope."""
    content = BaseResponse(message=message, data=data).model_dump()
    content.update(extra)
    return JSONResponse(status_code=status_code, content=content)


def error_status(exc: Exception) -> int:
    if isinstance(exc, ResourceNotFoundError):
        return 404
    if isinstance(exc, (ValueError, DocumentOperationError)):
        return 400
    return 500


def error_response(message: str, exc: Exception) -> JSONResponse:
    """Answer a failed operation with the error envelope."""
    status_code = error_status(exc)
    if status_code >= 500:
        logger.error(f"{message}: {exc}", exc_info=True)
    else:
        logger.warning(f"{message}: {exc}")

    return failure_response(message, str(exc), status_code)


def failure_response(message: str, error: Any = None, status_code: int = 500) -> JSONResponse:
    content = ErrorResponse(message=message, error=None if error is None else str(error)).model_dump()
    return JSONResponse(status_code=status_code, content=content)


def build_pagination(page: int, limit: int, total: int) -> Dict[str, int]:
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "totalPages": ceil(total / limit) if limit > 0 else 0,
    }


def openai_error_response(exc: Exception) -> JSONResponse:
    """Answer an OpenAI compatible route with OpenAI's error object."""
    if isinstance(exc, InvalidCompletionRequest):
        status_code, error_type, param = 400, "invalid_request_error", exc.param
        logger.warning(f"Rejected completion request: {exc}")
    else:
        status_code, error_type, param = 500, "server_error", None
        logger.error(f"Completion failed: {exc}", exc_info=True)

    return JSONResponse(
        status_code=status_code,
        content={"error": {"message": str(exc), "type": error_type, "param": param, "code": None}}
    )
