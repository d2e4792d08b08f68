"""
BCE Cloud Python SDK - Exceptions

This module contains all custom exceptions used by the SDK.
"""

from typing import Any, Dict, Optional


class BceError(Exception):
    """
    Base exception for all BCE Cloud SDK errors.

    Attributes:
        message: Human-readable error message
        code: Error code if available
        details: Additional error details
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, code={self.code!r})"

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "code": self.code,
            "details": self.details,
        }


class ConfigurationError(BceError):
    """
    Raised when a client cannot be configured.

    This occurs at construction time when:
    - The region is malformed or not served by the requested service
    - The service identifier is unknown
    - A host template cannot be resolved
    """

    def __init__(self, message: str = "Invalid client configuration") -> None:
        super().__init__(message, code="CONFIGURATION_ERROR")


class SigningError(BceError):
    """
    Raised when a request cannot be signed.

    This can occur when:
    - The credential is missing an access key id or secret key
    - The expiration window is not a positive number of seconds
    """

    def __init__(self, message: str = "Request signing failed") -> None:
        super().__init__(message, code="SIGNING_ERROR")


class TransportError(BceError):
    """
    Raised when a request never produced a usable response.

    Covers connection failures, timeouts, and failures reading an
    upload source while its bytes are being sent. The underlying
    exception is chained as ``__cause__``.
    """

    def __init__(self, message: str = "Transport failure") -> None:
        super().__init__(message, code="TRANSPORT_ERROR")


class RemoteError(BceError):
    """
    Raised when the service answers with a non-2xx status.

    The payload is passed through exactly as the service sent it;
    interpreting service-specific error fields is left to the caller.

    Attributes:
        status_code: HTTP status code from the response
        raw_body: Undecoded response body
        payload: JSON-decoded body, or None when the body is not JSON
        request_id: Value of the ``x-bce-request-id`` response header
    """

    def __init__(
        self,
        status_code: int,
        raw_body: bytes = b"",
        payload: Any = None,
        request_id: Optional[str] = None,
    ) -> None:
        super().__init__(f"HTTP {status_code}", code="REMOTE_ERROR")
        self.status_code = status_code
        self.raw_body = raw_body
        self.payload = payload
        self.request_id = request_id

    def __str__(self) -> str:
        base = super().__str__()
        if self.request_id:
            return f"{base} (Request ID: {self.request_id})"
        return base

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result.update({
            "status_code": self.status_code,
            "request_id": self.request_id,
        })
        return result


class DecodeError(BceError):
    """
    Raised when a response body does not fit the requested materialization.

    Kept distinct from RemoteError: the service accepted the request,
    the client could not read what came back.

    Attributes:
        materialization: Name of the requested materialization
        raw_body: Undecoded response body
    """

    def __init__(
        self,
        message: str,
        materialization: Optional[str] = None,
        raw_body: bytes = b"",
    ) -> None:
        super().__init__(message, code="DECODE_ERROR")
        self.materialization = materialization
        self.raw_body = raw_body
