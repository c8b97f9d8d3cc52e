"""DB-API style cursor."""

from typing import TYPE_CHECKING, Any, Iterator, Sequence

from awql.exceptions import InterfaceError
from awql.rows import Rows

if TYPE_CHECKING:
    from awql.connection import Connection


class Cursor:
    """
    Cursor following the shape of PEP 249.

    Every cell is returned as a string, as found in the CSV report.

    Usage:
        cursor = conn.cursor()
        cursor.execute("SELECT CampaignId FROM CAMPAIGN_PERFORMANCE_REPORT WHERE Clicks > ?", (10,))
        for row in cursor.fetchall():
            print(row)
    """

    arraysize = 1

    def __init__(self, connection: "Connection") -> None:
        self.connection = connection
        self._rows: Rows | None = None
        self._closed = False

    @property
    def description(self) -> list[tuple] | None:
        if self._rows is None:
            return None
        return [(name, "STRING", None, None, None, None, None) for name in self._rows.columns]

    @property
    def rowcount(self) -> int:
        if self._rows is None:
            return -1
        return self._rows.row_count

    def execute(self, operation: str, parameters: Sequence[Any] = ()) -> "Cursor":
        """
        Run a query, replacing the previous result.

        Raises:
            InterfaceError: If the cursor is closed
        """
        self._check_open()
        if self._rows is not None:
            self._rows.close()
            self._rows = None

        self._rows = self.connection.prepare(operation).execute(*parameters)
        return self

    def fetchone(self) -> tuple[str, ...] | None:
        self._check_result()
        row = self._rows.next_row()
        return tuple(row) if row is not None else None

    def fetchmany(self, size: int | None = None) -> list[tuple[str, ...]]:
        if size is None:
            size = self.arraysize
        self._check_result()
        result = []
        for _ in range(size):
            row = self.fetchone()
            if row is None:
                break
            result.append(row)
        return result

    def fetchall(self) -> list[tuple[str, ...]]:
        self._check_result()
        return [tuple(row) for row in self._rows]

    def close(self) -> None:
        if self._rows is not None:
            self._rows.close()
            self._rows = None
        self._closed = True

    def _check_open(self) -> None:
        if self._closed:
            raise InterfaceError("Cursor")

    def _check_result(self) -> None:
        self._check_open()
        if self._rows is None:
            raise InterfaceError("Cursor", "has no result set")

    def __iter__(self) -> Iterator[tuple[str, ...]]:
        while True:
            row = self.fetchone()
            if row is None:
                return
            yield row

    def __enter__(self) -> "Cursor":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
