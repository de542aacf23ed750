"""
Base Exception Class

This module contains ONLY the base exception class that all other exceptions
inherit from. Specialized exceptions live in their themed modules.
"""

from typing import Any


class StorefrontCacheError(Exception):
    """
    Base exception for all storefront cache errors.

    Attributes:
        message: Error message
        tenant_id: Tenant the failing operation was scoped to (if known)
        details: Additional error details (dict)

    Example:
        raise CacheConnectionError(
            "Remote store unreachable",
            tenant_id="shop-42",
            details={"operation": "GET", "cache_key": "tenant:shop-42:products"},
        )
    """

    def __init__(
        self, message: str, tenant_id: str | None = None, details: dict[str, Any] | None = None
    ):
        self.message = message
        self.tenant_id = tenant_id
        self.details = (details or {}).copy()
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for logging/API responses.

        Returns:
            Dict with error_type, message, tenant_id, and details
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "tenant_id": self.tenant_id,
            "details": self.details,
        }

    def with_suggestion(self, suggestion: str) -> "StorefrontCacheError":
        """Add a suggestion to help operators fix the error. Returns self."""
        self.details["suggestion"] = suggestion
        return self

    def with_context(self, **context) -> "StorefrontCacheError":
        """Add additional context to the error details. Returns self."""
        self.details.update(context)
        return self

    def __repr__(self) -> str:
        details_str = f", details={self.details}" if self.details else ""
        tenant_str = f", tenant_id='{self.tenant_id}'" if self.tenant_id else ""
        return f"{self.__class__.__name__}(message='{self.message}'{tenant_str}{details_str})"

    @classmethod
    def from_exception(
        cls,
        exc: Exception,
        message: str | None = None,
        tenant_id: str | None = None,
        **details
    ) -> "StorefrontCacheError":
        """
        Create an instance of this error class from another exception.

        Useful for wrapping transport exceptions (httpx, redis) with context.

        Example:
            >>> try:
            ...     await http.post(url, json=command)
            ... except httpx.HTTPError as e:
            ...     raise CacheConnectionError.from_exception(e, operation="GET")
        """
        error_message = message or str(exc)
        error_details = {
            "original_error": exc.__class__.__name__,
            "original_message": str(exc),
            **details
        }
        return cls(error_message, tenant_id=tenant_id, details=error_details)


class ConfigurationError(StorefrontCacheError):
    """Raised when configuration is invalid."""
    pass
