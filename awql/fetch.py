"""Report download over HTTP."""

import contextlib
import json
import os
import tempfile
import time
import xml.etree.ElementTree as ElementTree
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

import httpx
import structlog

from awql.config import get_settings
from awql.exceptions import ApiError, BadNetworkError, NoNetworkError, ReportStorageError

if TYPE_CHECKING:
    from awql.connection import Connection

logger = structlog.get_logger(__name__)

REPORT_FORMAT = "CSV"
FILE_PREFIX = "awql"

_FNV64_OFFSET = 0xCBF29CE484222325
_FNV64_PRIME = 0x100000001B3
_FNV64_MASK = 0xFFFFFFFFFFFFFFFF


def fnv1_64(data: bytes) -> int:
    """64-bit FNV-1 hash."""
    h = _FNV64_OFFSET
    for byte in data:
        h = (h * _FNV64_PRIME) & _FNV64_MASK
        h ^= byte
    return h


def report_path(query: str, directory: Path | None = None) -> Path:
    """
    Build the file path used to store the report of a query.

    The name is derived from the query text, so the same query always
    lands on the same file.

    Example:
        /tmp/awql16027257112758723916.csv
    """
    directory = directory or get_settings().temp_dir
    digest = fnv1_64(query.encode("utf-8"))
    return directory / f"{FILE_PREFIX}{digest}.{REPORT_FORMAT.lower()}"


def write_report(path: Path, content: bytes) -> None:
    """
    Replace the report file at path with content.

    The payload goes to a sibling temp file first and is renamed onto
    path, so a reader of path sees either the old or the new report.

    Raises:
        ReportStorageError: If the directory or file cannot be written
    """
    tmp_name = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            dir=path.parent, prefix=f".{path.stem}.", suffix=".tmp", delete=False
        ) as f:
            tmp_name = f.name
            f.write(content)
        os.replace(tmp_name, path)
    except OSError as e:
        if tmp_name is not None:
            with contextlib.suppress(OSError):
                os.unlink(tmp_name)
        raise ReportStorageError(str(path), e.strerror or str(e)) from e


@dataclass(frozen=True)
class Report:
    """Downloaded report: the file it was saved to and its payload."""

    path: Path
    content: bytes


def parse_api_error(body: bytes) -> ApiError:
    """
    Build an ApiError from the body of a 400 response.

    Both the JSON form ``{"reason": ..., "message": ...}`` and the XML
    ``reportDownloadError/ApiError`` form are understood. Anything else is
    kept verbatim as the message.
    """
    text = body.decode("utf-8", errors="replace").strip()

    try:
        payload = json.loads(text)
    except ValueError:
        payload = None

    if isinstance(payload, dict):
        if isinstance(payload.get("error"), dict):
            payload = payload["error"]
        reason = payload.get("reason") or payload.get("type")
        message = payload.get("message") or payload.get("trigger")
        if not reason and not message:
            return ApiError("UNKNOWN", text)
        return ApiError(str(reason or "UNKNOWN"), str(message or ""), payload.get("fieldPath"))

    try:
        root = ElementTree.fromstring(text)
    except ElementTree.ParseError:
        return ApiError("UNKNOWN", text)

    node = root if root.tag == "ApiError" else root.find(".//ApiError")
    if node is None:
        return ApiError("UNKNOWN", text)

    return ApiError(
        node.findtext("type") or "UNKNOWN",
        node.findtext("trigger") or "",
        node.findtext("fieldPath") or None,
    )


class ReportDownloader:
    """
    Download AWQL reports for a connection.

    One POST per query, no retries. The response body is written to a file
    named after the query, which is replaced on every download, and is also
    returned in memory so callers never read back a file another download
    may be replacing.

    Usage:
        downloader = ReportDownloader(connection)
        report = downloader.download("SELECT CampaignName FROM CAMPAIGN_PERFORMANCE_REPORT")
    """

    def __init__(self, connection: "Connection") -> None:
        self.connection = connection

    @property
    def url(self) -> str:
        options = self.connection.descriptor.options
        return f"{get_settings().report_download_url}{options.version}"

    def build_headers(self) -> dict[str, str]:
        """
        Build the request headers.

        Raises:
            BadTokenError: If the connection has a token that cannot be used
        """
        descriptor = self.connection.descriptor
        headers = {
            "Content-Type": "application/x-www-form-urlencoded; param=value",
            "Accept": "*/*",
            "clientCustomerId": descriptor.account_id,
            "developerToken": descriptor.developer_token,
        }
        headers.update(descriptor.options.to_headers())

        authorization = self.connection.authorization_header()
        if authorization is not None:
            headers["Authorization"] = authorization

        return headers

    def download(self, query: str) -> Report:
        """
        Download the report of a bound query.

        Args:
            query: AWQL query with all placeholders bound

        Returns:
            Report with the CSV file path and the payload

        Raises:
            BadTokenError: If authentication fails (no request is sent)
            NoNetworkError: If the request could not be sent
            ApiError: If the service rejects the query
            BadNetworkError: On any other unexpected status
            ReportStorageError: If the payload cannot be saved
        """
        headers = self.build_headers()
        settings = get_settings()
        start_time = time.time()

        try:
            response = self.connection.client.post(
                self.url,
                data={"__rdquery": query, "__fmt": REPORT_FORMAT},
                headers=headers,
                timeout=settings.request_timeout_seconds,
            )
        except httpx.TransportError as e:
            raise NoNetworkError(str(e) or type(e).__name__) from e

        logger.debug(
            "Report download finished",
            query=query,
            status_code=response.status_code,
            size_bytes=len(response.content),
            elapsed_seconds=round(time.time() - start_time, 3),
        )

        if response.status_code != httpx.codes.OK:
            if response.status_code == 0:
                raise NoNetworkError()
            if response.status_code == httpx.codes.BAD_REQUEST:
                raise parse_api_error(response.content)
            raise BadNetworkError(response.status_code)

        path = report_path(query, settings.temp_dir)
        write_report(path, response.content)
        return Report(path=path, content=response.content)
