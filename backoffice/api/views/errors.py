"""
Translate failed service results into HTTP responses.

Body: ``{"detail": <message>, "code": <error code>, **error_data}``.
"""

from rest_framework import status
from rest_framework.response import Response

from backoffice.services import ErrorCodes, ServiceResult

CONFLICT_CODES = frozenset(
    {
        ErrorCodes.CLIENT_ALREADY_EXISTS,
        ErrorCodes.CLIENT_HAS_ORDERS,
        ErrorCodes.INSUFFICIENT_STOCK,
    }
)

BAD_REQUEST_CODES = frozenset(
    {
        ErrorCodes.VALIDATION_ERROR,
        ErrorCodes.INVALID_QUANTITY,
        ErrorCodes.INVALID_ORDER_STATE,
    }
)


def status_for_error(error_code: str) -> int:
    if error_code in ErrorCodes.NOT_FOUND_CODES:
        return status.HTTP_404_NOT_FOUND
    elif error_code == ErrorCodes.PERMISSION_DENIED:
        return status.HTTP_403_FORBIDDEN
    elif error_code in CONFLICT_CODES:
        return status.HTTP_409_CONFLICT
    elif error_code in BAD_REQUEST_CODES:
        return status.HTTP_400_BAD_REQUEST
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_response(result: ServiceResult) -> Response:
    body = {"detail": result.error_detail, "code": result.error}
    if result.error_data:
        for key, value in result.error_data.items():
            body.setdefault(key, value)
    return Response(body, status=status_for_error(result.error))


def invalid_input_response(errors) -> Response:
    """400 for request bodies rejected by a DRF serializer."""
    return Response(
        {"detail": "Invalid request data", "code": ErrorCodes.VALIDATION_ERROR, "errors": errors},
        status=status.HTTP_400_BAD_REQUEST,
    )
