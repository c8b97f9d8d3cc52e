"""Shared fixtures for unit tests."""
from collections.abc import Callable, Generator
from pathlib import Path

import httpx
import pytest

import awql.config
from awql.connection import Connection, connect

DSN_BARE = "123-456-7890|dEve1op3er7okeN"
DSN_TOKEN = "123-456-7890:v201607|dEve1op3er7okeN|ya29.AcC3s57okeN"
DSN_REFRESH = (
    "123-456-7890|dEve1op3er7okeN|1234567890-c1i3n7iD.apps.googleusercontent.com"
    "|c1ien753cr37|1/R3Fr35h-70k3n"
)

REPORT_CSV = (
    "Campaign ID,Campaign,Clicks\n"
    "1001,\"Brand, exact\",12\n"
    "1002,\"Generic \"\"shoes\"\"\",7\n"
)


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[Path, None, None]:
    """Point settings at a temporary directory and away from ~/.awql."""
    temp_dir = tmp_path / "reports"
    monkeypatch.setenv("TEMP_DIR", str(temp_dir))
    monkeypatch.setattr(awql.config, "load_yaml_config", lambda config_path=None: {})
    awql.config.reset_settings()

    yield temp_dir

    awql.config.reset_settings()


@pytest.fixture
def mock_connect() -> Generator[Callable[..., Connection], None, None]:
    """Open a connection whose HTTP traffic goes to a handler function."""
    connections = []

    def _connect(dsn: str, handler: Callable[[httpx.Request], httpx.Response], **options) -> Connection:
        client = httpx.Client(transport=httpx.MockTransport(handler))
        conn = connect(dsn, client=client, **options)
        connections.append((conn, client))
        return conn

    yield _connect

    for conn, client in connections:
        conn.close()
        client.close()
