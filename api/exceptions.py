"""
Custom Exception Handler for API
"""
from rest_framework import exceptions as drf_exceptions
from rest_framework.views import exception_handler
from rest_framework.response import Response
from rest_framework import status
import logging

from apps.core.exceptions import StoreException

logger = logging.getLogger(__name__)


DRF_CODES = {
    drf_exceptions.NotAuthenticated: "NOT_AUTHENTICATED",
    drf_exceptions.AuthenticationFailed: "NOT_AUTHENTICATED",
    drf_exceptions.PermissionDenied: "NOT_PERMITTED",
    drf_exceptions.NotFound: "NOT_FOUND",
    drf_exceptions.ValidationError: "VALIDATION_ERROR",
    drf_exceptions.Throttled: "THROTTLED",
}


def _drf_code(exc):
    for exc_class, code in DRF_CODES.items():
        if isinstance(exc, exc_class):
            return code
    return "API_ERROR"


def custom_exception_handler(exc, context):
    """
    Custom exception handler that provides consistent error responses.
    """
    if isinstance(exc, StoreException):
        logger.info(f"{exc.code}: {exc.message}")
        return Response(
            {
                "error": True,
                "code": exc.code,
                "message": exc.message,
                "details": exc.to_dict(),
                "status_code": exc.status_code
            },
            status=exc.status_code
        )

    # Call REST framework's default exception handler first
    response = exception_handler(exc, context)
    
    if response is not None:
        # Customize the response format
        response.data = {
            "error": True,
            "code": _drf_code(exc),
            "message": str(exc) if not isinstance(exc, drf_exceptions.ValidationError) else "Invalid request",
            "details": response.data if isinstance(response.data, dict) else {"detail": response.data},
            "status_code": response.status_code
        }
    else:
        # Handle unexpected exceptions
        logger.exception(f"Unhandled exception: {exc}")
        response = Response(
            {
                "error": True,
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
                "details": {"exception": str(exc)},
                "status_code": 500
            },
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )
    
    return response
