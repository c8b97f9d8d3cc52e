"""Report parsing and row cursor."""

import csv
import io

from awql.base import BaseRows
from awql.exceptions import ReportParseError

# A report cell has no size bound; the csv module defaults to 128 KiB.
FIELD_SIZE_LIMIT = 2**31 - 1


class Rows(BaseRows):
    """
    Forward-only cursor over a parsed CSV report.

    Row 0 of the table is the column header and is never returned. A table
    with a header only, or no rows at all, yields nothing.

    Usage:
        rows = parse_report(payload)
        for row in rows:
            print(row)
    """

    def __init__(self, data: list[list[str]] | None = None) -> None:
        self._data = data or []
        self._position = 1
        self._closed = False

    @property
    def columns(self) -> list[str]:
        if not self._data:
            return []
        return list(self._data[0])

    @property
    def row_count(self) -> int:
        """Number of data rows, header excluded."""
        return max(len(self._data) - 1, 0)

    @property
    def closed(self) -> bool:
        return self._closed

    def next_row(self) -> list[str] | None:
        if self._position >= len(self._data):
            return None
        row = self._data[self._position]
        self._position += 1
        return list(row)

    def close(self) -> None:
        """Release the table. The report file on disk is left in place."""
        self._data = []
        self._closed = True

    def __repr__(self) -> str:
        return f"<Rows(columns={self.column_count}, rows={self.row_count})>"


def parse_report(payload: bytes) -> Rows:
    """
    Parse a downloaded CSV report.

    Args:
        payload: Response body of the report download

    Returns:
        Rows cursor positioned on the first data row

    Raises:
        ReportParseError: If the payload is not UTF-8 or not valid CSV
    """
    try:
        text = payload.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ReportParseError(f"not UTF-8 at byte {e.start}") from e

    if csv.field_size_limit() < FIELD_SIZE_LIMIT:
        csv.field_size_limit(FIELD_SIZE_LIMIT)

    try:
        return Rows(list(csv.reader(io.StringIO(text, newline=""))))
    except csv.Error as e:
        raise ReportParseError(str(e)) from e
