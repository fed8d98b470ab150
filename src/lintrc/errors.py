# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Custom exceptions raised while resolving configuration fragments."""

from __future__ import annotations

from pathlib import Path


class ConfigError(RuntimeError):
    """Base class for every configuration resolution failure."""


class ConfigSchemaError(ConfigError):
    """Raised when config data contains unknown keys or malformed values."""

    def __init__(self, source: str, problems: list[str]) -> None:
        """Create the error from the offending source and its schema problems.

        Args:
            source: Config name or path used as the message prefix.
            problems: Human-readable descriptions of every violation.
        """

        self.source = source
        self.problems = list(problems)
        details = "\n".join(f"\t- {problem}" for problem in self.problems)
        super().__init__(f"{source or '<config>'}:\n\tConfiguration is invalid:\n{details}")


class SourceReadError(ConfigError):
    """Raised when a config source cannot be read or parsed."""

    def __init__(self, path: Path, message: str) -> None:
        """Create the error for ``path`` with the underlying ``message``.

        Args:
            path: Config source that failed to load.
            message: Description of the underlying failure.
        """

        self.path = path
        super().__init__(f"Cannot read config file: {path}\nError: {message}")


class ConfigFieldNotFoundError(SourceReadError):
    """Raised when a project manifest carries no nested config field."""


class MissingExtendError(ConfigError):
    """Raised when a base config named in ``extends`` cannot be found."""

    def __init__(self, config_name: str) -> None:
        self.config_name = config_name
        super().__init__(f'Failed to load config "{config_name}" to extend from.')


class WhitespaceInNameError(ConfigError):
    """Raised when a plugin identifier contains whitespace."""

    def __init__(self, plugin_name: str) -> None:
        self.plugin_name = plugin_name
        super().__init__(f"Whitespace found in plugin name '{plugin_name}'")


class InvalidPluginReferenceError(ConfigError):
    """Raised when a plugin is referenced by file path where a name is required."""


class DependencyLoadError(ConfigError):
    """Raised when a parser or plugin module cannot be resolved or imported."""

    def __init__(self, message: str, *, dependency_id: str, importer_path: str = "") -> None:
        """Create the error for the dependency ``dependency_id``.

        Args:
            message: Description of the load failure.
            dependency_id: Identifier of the parser or plugin being loaded.
            importer_path: Config file that declared the dependency.
        """

        self.dependency_id = dependency_id
        self.importer_path = importer_path
        super().__init__(message)


def append_reference(error: ConfigError, importer: str) -> ConfigError:
    """Append a ``Referenced from`` line to ``error`` and return it.

    Args:
        error: Error raised while loading an ``extends`` target.
        importer: Path or name of the config that declared the target.

    Returns:
        ConfigError: The same error instance with an updated message.
    """

    message = f"{error.args[0] if error.args else error}\nReferenced from: {importer}"
    error.args = (message, *error.args[1:])
    return error


__all__ = [
    "ConfigError",
    "ConfigFieldNotFoundError",
    "ConfigSchemaError",
    "DependencyLoadError",
    "InvalidPluginReferenceError",
    "MissingExtendError",
    "SourceReadError",
    "WhitespaceInNameError",
    "append_reference",
]
