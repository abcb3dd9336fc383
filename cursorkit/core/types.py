"""Shared core type aliases used across contracts, engine, and ports."""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence

Row = Dict[str, Any]
RowSnapshot = Mapping[str, Any]
Rows = List[Row]
MaybeRow = Optional[Row]

ParamValues = Optional[Sequence[Any]]
ParamSets = Iterable[Sequence[Any]]

RowProcessor = Callable[[Row], Optional[bool]]
RowUpdater = Callable[[Row], Optional[bool]]

TimingSummary = Dict[str, float | int]
