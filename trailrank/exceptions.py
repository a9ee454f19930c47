"""Custom exceptions for TrailRank."""


class TrailRankError(Exception):
    """Base exception for all TrailRank errors."""

    def __init__(self, message: str, details: dict | None = None):
        """Initialize exception.

        Args:
            message: Error message
            details: Optional dictionary with additional context
        """
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        """Return formatted error message."""
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class InputIntegrityError(TrailRankError):
    """Catalog or weight data is incomplete or inconsistent."""
    pass


class CatalogError(TrailRankError):
    """Catalog file cannot be read or parsed."""
    pass


class ConfigurationError(TrailRankError):
    """Configuration loading or validation errors."""
    pass
