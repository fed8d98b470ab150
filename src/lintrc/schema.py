# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Schema validation for raw config data."""

from __future__ import annotations

import json
from collections.abc import Mapping
from functools import lru_cache
from importlib import resources
from typing import Any, Final

from jsonschema import Draft202012Validator, validators
from jsonschema.exceptions import ValidationError
from jsonschema.protocols import Validator

from .errors import ConfigSchemaError
from .types import JSONValue

SCHEMA_PACKAGE: Final[str] = "lintrc.conf"
SCHEMA_RESOURCE: Final[str] = "config.schema.json"

# Python config modules may hand over tuples and read-only mappings.
_TYPE_CHECKER = Draft202012Validator.TYPE_CHECKER.redefine_many(
    {
        "array": lambda _checker, instance: isinstance(instance, (list, tuple)),
        "object": lambda _checker, instance: isinstance(instance, Mapping),
    },
)
ConfigValidator = validators.extend(Draft202012Validator, type_checker=_TYPE_CHECKER)


@lru_cache(maxsize=1)
def load_config_schema() -> Mapping[str, JSONValue]:
    """Return the bundled JSON schema describing config data."""

    text = resources.files(SCHEMA_PACKAGE).joinpath(SCHEMA_RESOURCE).read_text(encoding="utf-8")
    return json.loads(text)


@lru_cache(maxsize=1)
def _validator() -> Validator:
    return ConfigValidator(load_config_schema())


def validate_config_schema(config_data: Any, source: str) -> None:
    """Validate ``config_data`` against the bundled config schema.

    Args:
        config_data: Raw config data read from a source or given in memory.
        source: Config name or path used to prefix the error message.

    Raises:
        ConfigSchemaError: If the data contains unknown keys or invalid values.
    """

    errors = sorted(_validator().iter_errors(config_data), key=lambda error: [str(part) for part in error.absolute_path])
    if errors:
        raise ConfigSchemaError(source, [_describe(error) for error in errors])


def _describe(error: ValidationError) -> str:
    location = "".join(
        f"[{part}]" if isinstance(part, int) else (f".{part}" if index else str(part))
        for index, part in enumerate(error.absolute_path)
    )
    if error.validator == "additionalProperties":
        return f"{location or 'Config'}: {error.message}"
    return f"Value at '{location or '<root>'}' is invalid: {error.message}"


__all__ = ["load_config_schema", "validate_config_schema"]
