"""Translate domain errors into API responses."""
from __future__ import annotations

from typing import Dict, Type

from rest_framework import status
from rest_framework.response import Response

from .exceptions import (
    InvalidTransition,
    MarketplaceError,
    NotFound,
    StorageError,
    ValidationError,
)

STATUS_BY_ERROR: Dict[Type[MarketplaceError], int] = {
    NotFound: status.HTTP_404_NOT_FOUND,
    InvalidTransition: status.HTTP_400_BAD_REQUEST,
    ValidationError: status.HTTP_400_BAD_REQUEST,
    StorageError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def error_response(exc: MarketplaceError) -> Response:
    status_code = STATUS_BY_ERROR.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
    return Response({"detail": str(exc), "code": type(exc).__name__}, status=status_code)
