"""Prepared AWQL statements."""

import json
import math
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Sequence

import structlog

from awql.base import BaseStatement
from awql.exceptions import InterfaceError, QueryBindingError
from awql.fetch import ReportDownloader
from awql.rows import Rows, parse_report

if TYPE_CHECKING:
    from awql.connection import Connection

logger = structlog.get_logger(__name__)

PLACEHOLDER = "?"


def encode_value(value: Any) -> str:
    """
    Render a parameter as an AWQL literal.

    bool -> TRUE/FALSE, int -> digits, float/Decimal -> positional decimal,
    anything else -> double-quoted escaped string.

    Raises:
        QueryBindingError: For None (AWQL has no NULL literal) and for
            infinite or NaN numbers
    """
    if value is None:
        raise QueryBindingError(0, 0, "Query binding failed: NULL is not supported")
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise QueryBindingError(0, 0, f"Query binding failed: {value!r} is not a finite number")
        return format(Decimal(repr(value)), "f")
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise QueryBindingError(0, 0, f"Query binding failed: {value} is not a finite number")
        return format(value, "f")
    if isinstance(value, bytes):
        value = value.decode("utf-8")
    return json.dumps(str(value), ensure_ascii=False)


class Statement(BaseStatement):
    """
    Prepared statement.

    The query template is kept as prepared; each execution binds its own
    copy, so a statement can be executed again with other arguments.

    Usage:
        stmt = conn.prepare("SELECT CampaignName FROM CAMPAIGN_PERFORMANCE_REPORT WHERE Impressions > ?")
        rows = stmt.execute(100)
    """

    def __init__(self, connection: "Connection", query: str) -> None:
        self.connection = connection
        self.query = query
        self._closed = False

    def num_input(self) -> int:
        return self.query.count(PLACEHOLDER)

    def bind(self, args: Sequence[Any]) -> str:
        """
        Substitute placeholders left to right, one per argument.

        Args:
            args: Parameter values, in placeholder order

        Returns:
            Bound query text

        Raises:
            QueryBindingError: If fewer arguments than placeholders are given
        """
        expected = self.num_input()
        if len(args) < expected:
            raise QueryBindingError(expected, len(args))

        parts = self.query.split(PLACEHOLDER, expected)
        bound = [parts[0]]
        for value, part in zip(args, parts[1:]):
            bound.append(encode_value(value))
            bound.append(part)
        return "".join(bound)

    def execute(self, *args: Any) -> Rows:
        """
        Bind the arguments, download the report and parse it.

        Log entries emitted while executing carry the account id and API
        version of the connection.

        Returns:
            Rows cursor, header row skipped

        Raises:
            InterfaceError: If the statement or its connection is closed
            QueryBindingError: If binding fails
            ReportError: If the report cannot be stored or parsed
            AwqlError: Authentication, network or API errors from the download
        """
        if self._closed:
            raise InterfaceError("Statement")
        if self.connection.closed:
            raise InterfaceError("Connection")

        descriptor = self.connection.descriptor
        with structlog.contextvars.bound_contextvars(
            account_id=descriptor.account_id,
            api_version=descriptor.options.version,
        ):
            query = self.bind(args)
            report = ReportDownloader(self.connection).download(query)
            rows = parse_report(report.content)

            logger.debug("Report parsed", path=str(report.path), row_count=rows.row_count)
        return rows

    def close(self) -> None:
        self._closed = True
