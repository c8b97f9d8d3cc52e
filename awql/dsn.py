"""Connection string parsing.

Accepted forms (fields separated by ``|``, version joined by ``:``)::

    account[:version]|developerToken
    account[:version]|developerToken|accessToken
    account[:version]|developerToken|clientId|clientSecret|refreshToken
"""

from dataclasses import dataclass, field
from typing import Any

from awql.auth import Auth, AuthKeys
from awql.config import get_settings
from awql.exceptions import (
    BadConnectionError,
    BadTokenError,
    InvalidAccountIdError,
    InvalidDeveloperTokenError,
)

DSN_SEPARATOR = "|"
VERSION_SEPARATOR = ":"


@dataclass(frozen=True)
class Options:
    """Report download behaviour, sent as request headers."""

    version: str = ""
    skip_column_header: bool = False
    skip_report_header: bool = False
    skip_report_summary: bool = False
    include_zero_impressions: bool = False
    use_raw_enum_values: bool = False

    def to_headers(self) -> dict[str, str]:
        """Render the boolean flags as lowercase header values."""
        flags = {
            "includeZeroImpressions": self.include_zero_impressions,
            "skipColumnHeader": self.skip_column_header,
            "skipReportHeader": self.skip_report_header,
            "skipReportSummary": self.skip_report_summary,
            "useRawEnumValues": self.use_raw_enum_values,
        }
        return {name: str(value).lower() for name, value in flags.items()}


@dataclass(frozen=True)
class ConnectionDescriptor:
    """Validated connection parameters."""

    account_id: str
    developer_token: str
    auth: Auth | None = None
    options: Options = field(default_factory=Options)


def parse_dsn(dsn: str, **options: Any) -> ConnectionDescriptor:
    """
    Parse and validate a connection string.

    Args:
        dsn: Connection string
        **options: Behaviour flags (skip_column_header, skip_report_header,
            skip_report_summary, include_zero_impressions, use_raw_enum_values)
            and a fallback version, used when the account field carries none

    Returns:
        ConnectionDescriptor

    Raises:
        BadConnectionError: If the string is empty or has the wrong field count
        InvalidAccountIdError: If the account id is empty
        InvalidDeveloperTokenError: If the developer token is empty
        BadTokenError: If an access token or refresh key field is empty
    """
    if not dsn:
        raise BadConnectionError("empty connection string")

    fields = dsn.split(DSN_SEPARATOR)
    if len(fields) not in (2, 3, 5):
        raise BadConnectionError(f"expected 2, 3 or 5 fields, got {len(fields)}")

    account_id, _, version = fields[0].partition(VERSION_SEPARATOR)
    if not account_id:
        raise InvalidAccountIdError()

    developer_token = fields[1]
    if not developer_token:
        raise InvalidDeveloperTokenError()

    auth = None
    if len(fields) == 3:
        if not fields[2]:
            raise BadTokenError("empty access token")
        auth = Auth.from_access_token(fields[2])
    elif len(fields) == 5:
        keys = AuthKeys(
            client_id=fields[2], client_secret=fields[3], refresh_token=fields[4]
        )
        if not keys.is_set():
            raise BadTokenError("incomplete refresh credentials")
        auth = Auth(keys=keys)

    version = version or options.pop("version", None) or get_settings().default_api_version
    try:
        opts = Options(version=version, **options)
    except TypeError as e:
        raise BadConnectionError(f"unknown option: {e}") from e

    return ConnectionDescriptor(
        account_id=account_id,
        developer_token=developer_token,
        auth=auth,
        options=opts,
    )
