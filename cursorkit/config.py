"""Load connection parameters from a dotenv-format file or the environment."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Mapping, Optional, Union

from dotenv import dotenv_values

from .core.errors import ConfigurationError
from .core.params import ConnectionParameters

DEFAULT_PREFIX = "CURSORKIT_"


def load_connection_parameters(
    path: Optional[Union[str, Path]] = None,
    *,
    prefix: str = DEFAULT_PREFIX,
) -> ConnectionParameters:
    """Build `ConnectionParameters` from `<prefix>*` keys.

    Keys: `DRIVER`, `ADDRESS`, `USER`, `PASSWORD`, and `PROPERTY_<name>` for
    each extra driver property. Values are read from `path` when given,
    otherwise from `os.environ`. Blank values are left for the connection
    provisioner to reject.

    Raises:
        ConfigurationError: If `path` does not exist.
    """

    if path is not None:
        file_path = Path(path)
        if not file_path.is_file():
            raise ConfigurationError(f"Settings file '{file_path.absolute()}' does not exist")
        values: Mapping[str, Optional[str]] = dotenv_values(file_path)
    else:
        values = os.environ
    return parameters_from_mapping(values, prefix=prefix)


def parameters_from_mapping(
    values: Mapping[str, Optional[str]],
    *,
    prefix: str = DEFAULT_PREFIX,
) -> ConnectionParameters:
    """Build `ConnectionParameters` from an already loaded key/value mapping."""

    property_prefix = f"{prefix}PROPERTY_"
    properties: Dict[str, str] = {}
    for key, value in values.items():
        if key.startswith(property_prefix) and value is not None:
            properties[key[len(property_prefix):]] = value

    return ConnectionParameters(
        driver=values.get(f"{prefix}DRIVER") or "",
        address=values.get(f"{prefix}ADDRESS") or "",
        user=values.get(f"{prefix}USER") or None,
        password=values.get(f"{prefix}PASSWORD") or None,
        properties=properties,
    )
