"""Value diffing between a fetched row and its pre-update snapshot."""

from __future__ import annotations

from typing import Any, List

from .params import is_blank
from .types import Row, RowSnapshot


def field_differs(name: str, value: Any, snapshot: RowSnapshot) -> bool:
    """Return True when `value` must be written back for column `name`.

    Blank names never differ. Names missing from the snapshot always differ.
    Two `None` values are equal; exactly one `None` differs; otherwise values
    are compared with `!=`.
    """

    if is_blank(name):
        return False
    if name not in snapshot:
        return True

    original = snapshot[name]
    if value is None and original is None:
        return False
    if value is None or original is None:
        return True
    return bool(value != original)


def changed_fields(row: Row, snapshot: RowSnapshot) -> List[str]:
    """Return the names of fields in `row` that differ from `snapshot`, in row order."""

    return [name for name, value in row.items() if field_differs(name, value, snapshot)]
