"""Connection provisioning with failure translation."""

from __future__ import annotations

import logging
from typing import Optional

from ._resources import release
from .contracts import ConnectionPort
from .drivers import resolve_driver
from .errors import ConfigurationError, ConnectionError
from .params import ConnectionParameters, is_blank

logger = logging.getLogger(__name__)


def open_connection(params: ConnectionParameters) -> ConnectionPort:
    """Open a connection with autocommit disabled and read-committed isolation.

    Raises:
        ConfigurationError: If the driver identity or address is blank.
        ConnectionError: If the driver cannot be loaded or connecting fails.
    """

    if is_blank(params.driver):
        raise ConfigurationError("No driver identity given")
    if is_blank(params.address):
        raise ConfigurationError("No connection address given")

    conn: Optional[ConnectionPort] = None
    try:
        driver = resolve_driver(params.driver)
        conn = driver.connect(params.address, params.engine_properties())
        conn.disable_autocommit()
        conn.set_read_committed()
    except Exception as exc:
        if conn is not None:
            release(conn, "connection")
        raise ConnectionError(
            f"Failed to get database connection with {params.describe()}"
        ) from exc

    logger.debug("Connected with %s", params.describe())
    return conn
