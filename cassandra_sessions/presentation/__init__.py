"""Presentation layer - HTTP API"""

from .api import api_router
from .exceptions import APIError, ErrorResponse, domain_error_to_api_error

__all__ = [
    "api_router",
    "APIError",
    "ErrorResponse",
    "domain_error_to_api_error",
]
