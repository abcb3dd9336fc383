"""Registry mapping driver identities to driver adapters."""

from __future__ import annotations

from typing import Dict

from .contracts import DriverPort

_DRIVERS: Dict[str, DriverPort] = {}


def register_driver(identity: str, driver: DriverPort) -> None:
    """Register `driver` under `identity`, replacing any previous registration."""

    if not identity or not identity.strip():
        raise ValueError("driver identity must be a non-empty string")
    _DRIVERS[identity.strip()] = driver


def unregister_driver(identity: str) -> None:
    _DRIVERS.pop(identity.strip(), None)


def resolve_driver(identity: str) -> DriverPort:
    """Return the registered driver, or load `identity` as a DB-API module.

    Raises:
        ImportError: If the module cannot be imported or has no `connect()`.
    """

    key = identity.strip()
    driver = _DRIVERS.get(key)
    if driver is not None:
        return driver

    from ..ports.db_api.driver import DbApiDriver

    return DbApiDriver.from_module(key)
