"""awql: query the AdWords report download API like a database."""

from importlib.metadata import PackageNotFoundError, version

from awql.connection import Connection, connect
from awql.cursor import Cursor
from awql.exceptions import (
    ApiError,
    AwqlError,
    BadConnectionError,
    BadNetworkError,
    BadTokenError,
    InterfaceError,
    InvalidAccountIdError,
    InvalidDeveloperTokenError,
    NoNetworkError,
    QueryBindingError,
    ReportParseError,
    ReportStorageError,
)
from awql.rows import Rows
from awql.statement import Statement

try:
    __version__ = version("awql")
except PackageNotFoundError:
    # Package is not installed, use fallback
    __version__ = "0.0.0.dev"

apilevel = "2.0"
threadsafety = 1
paramstyle = "qmark"


def __getattr__(name):
    """Lazy import of cli_app to avoid circular imports."""
    if name == "cli_app":
        from awql.cli import app as cli_app

        return cli_app
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "__version__",
    "apilevel",
    "threadsafety",
    "paramstyle",
    "cli_app",
    "connect",
    "Connection",
    "Cursor",
    "Rows",
    "Statement",
    "AwqlError",
    "ApiError",
    "BadConnectionError",
    "BadNetworkError",
    "BadTokenError",
    "InterfaceError",
    "InvalidAccountIdError",
    "InvalidDeveloperTokenError",
    "NoNetworkError",
    "QueryBindingError",
    "ReportParseError",
    "ReportStorageError",
]
