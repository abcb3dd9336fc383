"""Connection settings consumed by the connection provisioner."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional


def is_blank(value: Any) -> bool:
    """Return True for `None` and for strings that are empty after stripping."""

    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


@dataclass(frozen=True)
class ConnectionParameters:
    """Opaque bundle of connection settings.

    Args:
        driver: Driver identity, either a registered name or a DB-API module name.
        address: Connection address handed to the driver (DSN, path, host).
        user: Optional user. Applied only together with `password`.
        password: Optional password. Never included in `repr` or error text.
        properties: Free-form engine properties passed to the driver.
    """

    driver: str
    address: str
    user: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)
    properties: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "properties", MappingProxyType(dict(self.properties)))

    @property
    def has_credentials(self) -> bool:
        return not is_blank(self.user) and not is_blank(self.password)

    def engine_properties(self) -> Dict[str, str]:
        """Return driver properties, with credentials merged in when both are set."""

        props = dict(self.properties)
        if self.has_credentials:
            props["user"] = self.user  # type: ignore[assignment]
            props["password"] = self.password  # type: ignore[assignment]
        return props

    def describe(self) -> str:
        """Describe the target for diagnostics without exposing the password."""

        text = f"driver '{self.driver}', address '{self.address}'"
        if self.has_credentials:
            text += f" and user '{self.user}'"
        return text
