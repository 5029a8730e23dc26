from enum import Enum
from typing import Any, Dict, Optional
from fastapi import HTTPException, status


class ErrorCode(str, Enum):
    """Machine-readable codes carried by exceptions and HTTP error bodies."""
    # Directory sources
    SOURCE_HTTP_ERROR = "SOURCE_HTTP_ERROR"
    SOURCE_UNREACHABLE = "SOURCE_UNREACHABLE"
    MALFORMED_PAYLOAD = "MALFORMED_PAYLOAD"
    UNSUPPORTED_SOURCE = "UNSUPPORTED_SOURCE"
    # Capability registry
    MANIFEST_REJECTED = "MANIFEST_REJECTED"
    # HTTP surface
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    BAD_REQUEST = "BAD_REQUEST"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


class MetaAdapterException(Exception):
    """Base exception for the meta-adapter."""

    def __init__(
        self,
        message: str,
        error_code: Optional[ErrorCode] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class SourceFetchException(MetaAdapterException):
    """Raised when an API directory source cannot be fetched or parsed."""
    pass


class RegistrationException(MetaAdapterException):
    """Raised when the capability registry refuses a manifest."""
    pass


# HTTP errors returned by the endpoints
def create_http_exception(
    status_code: int,
    message: str,
    error_code: Optional[ErrorCode] = None,
    details: Optional[Dict[str, Any]] = None
) -> HTTPException:
    """Create an HTTP exception whose detail is {message, error_code, details}."""
    return HTTPException(
        status_code=status_code,
        detail={
            "message": message,
            "error_code": error_code.value if error_code else None,
            "details": details or {},
        }
    )


def not_found_exception(message: str = "Resource not found") -> HTTPException:
    return create_http_exception(status.HTTP_404_NOT_FOUND, message, ErrorCode.RESOURCE_NOT_FOUND)


def bad_request_exception(message: str = "Bad request") -> HTTPException:
    return create_http_exception(status.HTTP_400_BAD_REQUEST, message, ErrorCode.BAD_REQUEST)


def internal_server_exception(message: str = "Internal server error") -> HTTPException:
    return create_http_exception(status.HTTP_500_INTERNAL_SERVER_ERROR, message, ErrorCode.INTERNAL_SERVER_ERROR)
