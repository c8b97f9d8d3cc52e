"""Tests for connection string parsing."""
import pytest

from awql.dsn import Options, parse_dsn
from awql.exceptions import (
    BadConnectionError,
    BadTokenError,
    ConfigurationError,
    InvalidAccountIdError,
    InvalidDeveloperTokenError,
)


class TestInvalidConnectionStrings:
    """Each malformed string fails with its own error kind."""

    @pytest.mark.parametrize(
        "dsn,error",
        [
            ("", BadConnectionError),
            ("123-456-7890", BadConnectionError),
            ("123-456-7890|dEve1op3er7okeN|ya29.AcC3s57okeN|Oops", BadConnectionError),
            ("a|b|c|d|e|f", BadConnectionError),
            ("123-456-7890:v201607||ya29.AcC3s57okeN", InvalidDeveloperTokenError),
            ("|dEve1op3er7okeN|ya29.AcC3s57okeN", InvalidAccountIdError),
            (":v201607|dEve1op3er7okeN", InvalidAccountIdError),
            ("123-456-7890:v201607|dEve1op3er7okeN|", BadTokenError),
            ("123-456-7890|dEve1op3er7okeN||c1ien753cr37|1/R3Fr35h-70k3n", BadTokenError),
            ("123-456-7890|dEve1op3er7okeN|c1i3n7iD||1/R3Fr35h-70k3n", BadTokenError),
            ("123-456-7890|dEve1op3er7okeN|c1i3n7iD|c1ien753cr37|", BadTokenError),
        ],
    )
    def test_rejected(self, dsn, error):
        with pytest.raises(error):
            parse_dsn(dsn)

    def test_account_error_takes_precedence(self):
        """Both account and developer token empty reports the account first."""
        with pytest.raises(InvalidAccountIdError):
            parse_dsn("|")

    def test_errors_are_configuration_errors(self):
        with pytest.raises(ConfigurationError):
            parse_dsn("|dEve1op3er7okeN")

    def test_unknown_option(self):
        with pytest.raises(BadConnectionError):
            parse_dsn("123-456-7890|dEve1op3er7okeN", skip_everything=True)


class TestValidConnectionStrings:
    """Well-formed strings keep their fields verbatim."""

    def test_two_fields(self):
        descriptor = parse_dsn("123-456-7890|dEve1op3er7okeN")

        assert descriptor.account_id == "123-456-7890"
        assert descriptor.developer_token == "dEve1op3er7okeN"
        assert descriptor.auth is None
        assert descriptor.options.version == "v201609"

    def test_three_fields_bare_token(self):
        descriptor = parse_dsn("123-456-7890|dEve1op3er7okeN|ya29.AcC3s57okeN")

        assert descriptor.auth is not None
        assert descriptor.auth.token.access_token == "ya29.AcC3s57okeN"
        assert descriptor.auth.token.token_type == "Bearer"
        assert descriptor.auth.token.expiry is None
        assert not descriptor.auth.refreshable
        assert descriptor.auth.is_valid()

    def test_version_in_account_field(self):
        descriptor = parse_dsn("123-456-7890:v201607|dEve1op3er7okeN|ya29.AcC3s57okeN")

        assert descriptor.account_id == "123-456-7890"
        assert descriptor.options.version == "v201607"

    def test_empty_version_uses_default(self):
        descriptor = parse_dsn("123-456-7890:|dEve1op3er7okeN")

        assert descriptor.options.version == "v201609"

    def test_default_version_from_settings(self, monkeypatch):
        import awql.config

        monkeypatch.setenv("DEFAULT_API_VERSION", "v201708")
        awql.config.reset_settings()

        assert parse_dsn("123-456-7890|dEve1op3er7okeN").options.version == "v201708"

    def test_five_fields_refresh_keys(self):
        descriptor = parse_dsn(
            "123-456-7890|dEve1op3er7okeN|1234567890-c1i3n7iD.apps.googleusercontent.com"
            "|c1ien753cr37|1/R3Fr35h-70k3n"
        )

        keys = descriptor.auth.keys
        assert keys.client_id == "1234567890-c1i3n7iD.apps.googleusercontent.com"
        assert keys.client_secret == "c1ien753cr37"
        assert keys.refresh_token == "1/R3Fr35h-70k3n"
        assert descriptor.auth.refreshable
        # Obtained lazily on first use
        assert not descriptor.auth.is_set()

    def test_options(self):
        descriptor = parse_dsn(
            "123-456-7890|dEve1op3er7okeN",
            skip_report_header=True,
            use_raw_enum_values=True,
            version="v201705",
        )

        assert descriptor.options == Options(
            version="v201705",
            skip_report_header=True,
            use_raw_enum_values=True,
        )

    def test_version_in_dsn_wins_over_option(self):
        descriptor = parse_dsn("123-456-7890:v201607|dEve1op3er7okeN", version="v201705")

        assert descriptor.options.version == "v201607"


class TestOptionHeaders:
    def test_defaults_render_false(self):
        headers = Options(version="v201609").to_headers()

        assert headers == {
            "includeZeroImpressions": "false",
            "skipColumnHeader": "false",
            "skipReportHeader": "false",
            "skipReportSummary": "false",
            "useRawEnumValues": "false",
        }

    def test_flags_render_lowercase_true(self):
        headers = Options(skip_column_header=True, include_zero_impressions=True).to_headers()

        assert headers["skipColumnHeader"] == "true"
        assert headers["includeZeroImpressions"] == "true"
