"""Internal release helper shared by engine modules."""

from __future__ import annotations

import logging
from typing import Any

logger = logging.getLogger(__name__)


def release(resource: Any, label: str) -> None:
    """Close a resource, logging instead of raising when the close fails."""

    close = getattr(resource, "close", None)
    if not callable(close):
        return
    try:
        close()
    except Exception:
        logger.warning("Failed to close %s", label, exc_info=True)
