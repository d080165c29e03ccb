"""Maps domain errors to HTTP responses.

Installed as DRF's ``EXCEPTION_HANDLER``. Every error body has the shape
``{"error": {"code": ..., "message": ...}}``; only the domain error's
user-safe message is ever returned.
"""

import logging

from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

from eventdesk.domain.errors import DomainError, ErrorCode

logger = logging.getLogger(__name__)

ERROR_STATUS: dict[ErrorCode, int] = {
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorCode.NOT_ELIGIBLE: status.HTTP_403_FORBIDDEN,
    ErrorCode.ALREADY_REGISTERED: status.HTTP_409_CONFLICT,
    ErrorCode.ALREADY_ASSIGNED: status.HTTP_409_CONFLICT,
    ErrorCode.CAPACITY_EXCEEDED: status.HTTP_409_CONFLICT,
    ErrorCode.EVENT_NOT_BOOKABLE: status.HTTP_409_CONFLICT,
    ErrorCode.INVALID_TRANSITION: status.HTTP_409_CONFLICT,
    ErrorCode.INVALID_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    ErrorCode.PROVISIONING_FAILED: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorCode.CONFLICT_RETRY: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def error_body(code: str, message: str, **extra) -> dict:
    return {"error": {"code": code, "message": message, **extra}}


def domain_exception_handler(exc: Exception, context: dict) -> Response | None:
    if isinstance(exc, DomainError):
        http_status = ERROR_STATUS.get(exc.code, status.HTTP_400_BAD_REQUEST)
        logger.info("%s -> %d", exc, http_status)
        return Response(error_body(exc.code.value, exc.message), status=http_status)

    response = exception_handler(exc, context)
    if response is None:
        return None
    if isinstance(exc, ValidationError):
        response.data = error_body(
            ErrorCode.INVALID_INPUT.value, "Request body is invalid", details=response.data
        )
    elif isinstance(exc, APIException):
        response.data = error_body(str(exc.default_code).upper(), str(exc.detail))
    return response
