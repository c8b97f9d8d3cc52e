"""Connections to the report download service."""

import threading
from typing import TYPE_CHECKING, Any

import httpx
import structlog

from awql.base import BaseConnection
from awql.dsn import ConnectionDescriptor, parse_dsn
from awql.exceptions import InterfaceError
from awql.statement import Statement

if TYPE_CHECKING:
    from awql.cursor import Cursor

logger = structlog.get_logger(__name__)


class Connection(BaseConnection):
    """
    Connection holding credentials and an HTTP client.

    The access token is the only state shared by statements of the same
    connection; refreshing and reading it happens under ``_auth_lock``.

    Usage:
        with connect("123-456-7890|devToken|accessToken") as conn:
            rows = conn.prepare("SELECT CampaignName FROM CAMPAIGN_PERFORMANCE_REPORT").execute()
    """

    def __init__(
        self,
        descriptor: ConnectionDescriptor,
        client: httpx.Client | None = None,
    ) -> None:
        self.descriptor = descriptor
        self._owns_client = client is None
        self.client = client or httpx.Client()
        self._auth_lock = threading.Lock()
        self._closed = False

        logger.debug(
            "Opened connection",
            account_id=descriptor.account_id,
            version=descriptor.options.version,
            refreshable=bool(descriptor.auth and descriptor.auth.refreshable),
        )

    @property
    def closed(self) -> bool:
        return self._closed

    def authorization_header(self) -> str | None:
        """
        Return the Authorization header value, refreshing the token if needed.

        Returns:
            Header value, or None when the connection has no auth material

        Raises:
            BadTokenError: If no valid token can be obtained
        """
        auth = self.descriptor.auth
        if auth is None:
            return None

        with self._auth_lock:
            auth.authenticate(self.client)
            return auth.header_value()

    def prepare(self, query: str) -> Statement:
        if self._closed:
            raise InterfaceError("Connection")
        return Statement(self, query)

    def cursor(self) -> "Cursor":
        """Return a DB-API cursor on this connection."""
        from awql.cursor import Cursor

        if self._closed:
            raise InterfaceError("Connection")
        return Cursor(self)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._owns_client:
            self.client.close()

    def __repr__(self) -> str:
        return (
            f"<Connection(account_id={self.descriptor.account_id!r}, "
            f"version={self.descriptor.options.version!r}, closed={self._closed})>"
        )


def connect(dsn: str, client: httpx.Client | None = None, **options: Any) -> Connection:
    """
    Open a connection.

    Args:
        dsn: Connection string, see awql.dsn
        client: Optional HTTP client (not closed with the connection)
        **options: Behaviour flags, see awql.dsn.parse_dsn

    Returns:
        Connection

    Raises:
        ConfigurationError: If the connection string is invalid
        BadTokenError: If an auth field is empty
    """
    return Connection(parse_dsn(dsn, **options), client=client)
