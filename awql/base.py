"""Driver interface: connection, statement and row cursor.

Each resource can be replaced by any object implementing the same
abstract methods, tests substitute fakes this way.
"""

from abc import ABC, abstractmethod
from typing import Any, Iterator


class BaseRows(ABC):
    """Forward-only cursor over a result table."""

    @property
    @abstractmethod
    def columns(self) -> list[str]:
        """Column names, empty when the result has no header."""
        pass

    @property
    def column_count(self) -> int:
        return len(self.columns)

    @abstractmethod
    def next_row(self) -> list[str] | None:
        """Return the next row's cells, or None once exhausted."""
        pass

    @abstractmethod
    def close(self) -> None:
        pass

    def __iter__(self) -> Iterator[list[str]]:
        return self

    def __next__(self) -> list[str]:
        row = self.next_row()
        if row is None:
            raise StopIteration
        return row


class BaseStatement(ABC):
    """Prepared query with ``?`` placeholders."""

    @abstractmethod
    def num_input(self) -> int:
        """Number of placeholders in the query."""
        pass

    @abstractmethod
    def execute(self, *args: Any) -> BaseRows:
        """Bind arguments, run the query and return its rows."""
        pass

    @abstractmethod
    def close(self) -> None:
        pass


class BaseConnection(ABC):
    """Open connection to the report download service."""

    @abstractmethod
    def prepare(self, query: str) -> BaseStatement:
        pass

    @abstractmethod
    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
