"""OAuth2 access token handling for report downloads."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

import httpx
import structlog

from awql.config import get_settings
from awql.exceptions import BadTokenError

logger = structlog.get_logger(__name__)

DEFAULT_TOKEN_TYPE = "Bearer"


@dataclass
class AuthKeys:
    """Long-lived credentials used to obtain new access tokens."""

    client_id: str = ""
    client_secret: str = ""
    refresh_token: str = ""

    def is_set(self) -> bool:
        return bool(self.client_id and self.client_secret and self.refresh_token)


@dataclass
class Token:
    """
    Access token snapshot.

    Attributes:
        access_token: Opaque bearer credential
        token_type: Authorization scheme, usually "Bearer"
        expiry: Expiration time (UTC), None for a token without expiry
    """

    access_token: str = ""
    token_type: str = ""
    expiry: datetime | None = None

    def __post_init__(self) -> None:
        # Naive expiry times are taken as UTC
        if self.expiry is not None and self.expiry.tzinfo is None:
            self.expiry = self.expiry.replace(tzinfo=timezone.utc)


@dataclass
class Auth:
    """
    Access token plus the optional keys to refresh it.

    A bare token (no keys) never expires and cannot be refreshed. A token
    backed by keys is obtained lazily on the first authenticate() call and
    refreshed whenever it is no longer valid.

    The snapshot is replaced in place by authenticate(). Callers sharing an
    Auth between threads must serialize authenticate() and header_value()
    (see Connection.authorization_header).
    """

    keys: AuthKeys = field(default_factory=AuthKeys)
    token: Token = field(default_factory=Token)

    @classmethod
    def from_access_token(cls, access_token: str) -> "Auth":
        return cls(token=Token(access_token=access_token, token_type=DEFAULT_TOKEN_TYPE))

    @property
    def refreshable(self) -> bool:
        return self.keys.is_set()

    def is_set(self) -> bool:
        """Check that every field of the token is populated."""
        if not (self.token.access_token and self.token.token_type):
            return False
        if self.token.expiry is None:
            return not self.refreshable
        return True

    def is_valid(self, now: datetime | None = None) -> bool:
        """Check that the token is set and not expired."""
        if not self.is_set():
            return False
        if self.token.expiry is None:
            return True
        now = now or datetime.now(timezone.utc)
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return now < self.token.expiry

    def header_value(self) -> str:
        """Render the Authorization header value, valid or not."""
        return f"{self.token.token_type} {self.token.access_token}"

    def __str__(self) -> str:
        return self.header_value()

    def authenticate(self, client: httpx.Client) -> None:
        """
        Make sure the access token is usable, refreshing it if needed.

        Args:
            client: HTTP client used for the token exchange

        Raises:
            BadTokenError: If the token is invalid and cannot be refreshed
        """
        if self.is_valid():
            return
        if not self.refreshable:
            raise BadTokenError("token expired and no refresh token available")

        self.token = self._refresh(client)

    def _refresh(self, client: httpx.Client) -> Token:
        """Exchange the refresh token for a new access token."""
        settings = get_settings()

        logger.debug("Refreshing access token", client_id=self.keys.client_id)

        try:
            response = client.post(
                settings.oauth_token_url,
                data={
                    "client_id": self.keys.client_id,
                    "client_secret": self.keys.client_secret,
                    "refresh_token": self.keys.refresh_token,
                    "grant_type": "refresh_token",
                },
                headers={"Accept": "application/json"},
                timeout=settings.request_timeout_seconds,
            )
        except httpx.HTTPError as e:
            raise BadTokenError(f"token exchange failed: {e}") from e

        if response.status_code != httpx.codes.OK:
            raise BadTokenError(f"token exchange returned {response.status_code}")

        try:
            payload = response.json()
        except ValueError as e:
            raise BadTokenError("token exchange returned invalid JSON") from e

        access_token = payload.get("access_token") if isinstance(payload, dict) else None
        if not access_token:
            raise BadTokenError("token exchange returned no access token")

        # expires_in from the response is ignored, the lifetime is fixed
        expiry = datetime.now(timezone.utc) + timedelta(
            seconds=settings.token_lifetime_seconds
        )
        return Token(
            access_token=access_token,
            token_type=payload.get("token_type") or DEFAULT_TOKEN_TYPE,
            expiry=expiry,
        )
