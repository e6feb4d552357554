"""
Exception classes for the RDAP lookup client.

All exceptions inherit from RDAPLookupError and provide structured
error information with codes, messages, and optional details.
"""

from typing import Optional


class RDAPLookupError(Exception):
    """Base exception for all RDAP lookup errors."""

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[dict] = None,
    ) -> None:
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"

    def to_dict(self) -> dict:
        """Convert exception to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class InvalidDomainError(RDAPLookupError):
    """Raised when a domain has no extractable TLD or fails input validation."""

    pass


class FetchError(RDAPLookupError):
    """Raised when the bootstrap registry cannot be fetched and no cache exists."""

    pass


class HTTPError(RDAPLookupError):
    """Raised when an RDAP server answers with a non-success status."""

    def __init__(
        self,
        status_code: int,
        url: str,
        reason: str = "",
    ) -> None:
        self.status_code = status_code
        self.url = url
        message = f"HTTP {status_code}: {reason}" if reason else f"HTTP {status_code}"
        super().__init__(
            code="http_error",
            message=message,
            details={"status_code": status_code, "url": url},
        )


class ConfigurationError(RDAPLookupError):
    """Raised when client or logging configuration is invalid."""

    pass


class ResponseError(RDAPLookupError):
    """Raised when an RDAP response body is not a JSON object."""

    pass
