"""Core port contracts implemented by driver adapters."""

from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence


class CursorPort(Protocol):
    """Forward-only cursor over one executed query."""

    columns: Sequence[str]

    def fetch(self) -> Optional[Sequence[Any]]: ...

    def update_value(self, column: str, value: Any) -> None: ...

    def update_row(self) -> None: ...

    def close(self) -> None: ...


class StatementPort(Protocol):
    """Prepared statement with 1-based positional bindings."""

    def bind(self, index: int, value: Any) -> None: ...

    def bind_stream(self, index: int, stream: Any) -> None: ...

    def execute_query(self) -> CursorPort: ...

    def add_batch(self) -> None: ...

    def execute_batch(self) -> Sequence[Optional[int]]: ...

    def close(self) -> None: ...


class ConnectionPort(Protocol):
    """Live, non-autocommitting connection owned by one caller."""

    def disable_autocommit(self) -> None: ...

    def set_read_committed(self) -> None: ...

    def prepare(self, sql: str, *, updatable: bool = False) -> StatementPort: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...

    def close(self) -> None: ...


class DriverPort(Protocol):
    """Turns an address and driver properties into a connection."""

    def connect(self, address: str, properties: Mapping[str, str]) -> ConnectionPort: ...
