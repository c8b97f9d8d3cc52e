"""Custom exceptions for awql."""

from typing import Any


class AwqlError(Exception):
    """Base exception for all awql errors."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
        }


class InterfaceError(AwqlError):
    """Misuse of a connection, statement or cursor (closed, no result)."""

    def __init__(self, resource: str, details: str = "is closed") -> None:
        super().__init__(f"{resource} {details}", resource=resource)


class ConfigurationError(AwqlError):
    """Connection string errors, raised before any network activity."""

    pass


class BadConnectionError(ConfigurationError):
    """Empty or unparseable connection string."""

    def __init__(self, details: str = "invalid connection string") -> None:
        super().__init__(f"Bad connection: {details}", details=details)


class InvalidAccountIdError(ConfigurationError):
    """Missing client customer id."""

    def __init__(self) -> None:
        super().__init__("Invalid account identifier")


class InvalidDeveloperTokenError(ConfigurationError):
    """Missing developer token."""

    def __init__(self) -> None:
        super().__init__("Invalid developer token")


class AuthenticationError(AwqlError):
    """Authentication-related errors."""

    pass


class BadTokenError(AuthenticationError):
    """Access token is missing, expired or cannot be refreshed."""

    def __init__(self, details: str | None = None) -> None:
        message = "Invalid access token"
        if details:
            message = f"{message}: {details}"
        super().__init__(message, details=details)


class QueryError(AwqlError):
    """Query preparation errors."""

    pass


class QueryBindingError(QueryError):
    """Arguments could not be bound to the query placeholders."""

    def __init__(self, expected: int, received: int, details: str | None = None) -> None:
        message = details or (
            f"Query binding failed: {expected} placeholders, {received} arguments"
        )
        super().__init__(message, expected=expected, received=received)


class NetworkError(AwqlError):
    """Report download could not be completed."""

    pass


class NoNetworkError(NetworkError):
    """Request could not be sent, no status code was received."""

    def __init__(self, details: str | None = None) -> None:
        message = "No network"
        if details:
            message = f"{message}: {details}"
        super().__init__(message, status_code=0, details=details)


class BadNetworkError(NetworkError):
    """Unexpected response status from the report download service."""

    def __init__(self, status_code: int) -> None:
        super().__init__(
            f"Bad network: unexpected status {status_code}",
            status_code=status_code,
        )


class ReportError(AwqlError):
    """Downloaded report could not be stored or parsed."""

    pass


class ReportParseError(ReportError):
    """Report payload is not UTF-8 CSV."""

    def __init__(self, details: str) -> None:
        super().__init__(f"Report parse failed: {details}", details=details)


class ReportStorageError(ReportError):
    """Report payload could not be written to the temp directory."""

    def __init__(self, path: str, details: str) -> None:
        super().__init__(f"Report storage failed for {path}: {details}", path=path, details=details)


class ApiError(AwqlError):
    """Report download refused the query (HTTP 400)."""

    def __init__(self, reason: str, message: str, field_path: str | None = None) -> None:
        super().__init__(
            f"API error {reason}: {message}",
            reason=reason,
            field_path=field_path,
        )
        self.reason = reason
        self.detail = message
        self.field_path = field_path
