"""Driver adapter that connects through any PEP 249 module."""

from __future__ import annotations

import importlib
from typing import Any, Callable, Mapping, Optional

from .database import DbApiConnection
from .dialects import Dialect, dialect_for_module

_ADDRESS_KEYWORDS = {
    "pymysql": "host",
    "MySQLdb": "host",
    "mysql.connector": "host",
}


class DbApiDriver:
    """Connects with a DB-API `connect` callable and wraps the result."""

    def __init__(
        self,
        connect: Callable[..., Any],
        dialect: Optional[Dialect] = None,
        *,
        name: Optional[str] = None,
        address_keyword: Optional[str] = None,
    ):
        """Create driver.

        Args:
            connect: DB-API `connect` callable.
            dialect: Dialect of the target database; generic when omitted.
            name: Name used in diagnostics.
            address_keyword: Pass the address as this keyword argument instead
                of positionally (for drivers such as `pymysql`).
        """

        self._connect = connect
        self.dialect = dialect if dialect is not None else Dialect()
        self.name = name or getattr(connect, "__module__", None) or "dbapi"
        self.address_keyword = address_keyword

    @classmethod
    def from_module(cls, module_name: str) -> DbApiDriver:
        """Load a DB-API module by name.

        Raises:
            ImportError: If the module is missing or has no `connect()`.
        """

        module = importlib.import_module(module_name)
        connect = getattr(module, "connect", None)
        if not callable(connect):
            raise ImportError(f"Module {module_name!r} has no DB-API connect()")
        return cls(
            connect,
            dialect_for_module(module_name),
            name=module_name,
            address_keyword=_ADDRESS_KEYWORDS.get(module_name),
        )

    def connect(self, address: str, properties: Mapping[str, str]) -> DbApiConnection:
        kwargs = dict(properties)
        if self.address_keyword:
            kwargs[self.address_keyword] = address
            raw = self._connect(**kwargs)
        else:
            raw = self._connect(address, **kwargs)
        return DbApiConnection(raw, self.dialect)

    def __repr__(self) -> str:
        return f"DbApiDriver(name={self.name!r}, dialect={self.dialect.name!r})"
