# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Loading of parser and plugin dependencies declared by config data.

Load failures are returned as failed :class:`ConfigDependency` values rather
than raised, so that configs which never use a broken plugin keep working.
The stored error is raised when the failed dependency's definition is read.
"""

from __future__ import annotations

import importlib
import logging
import re
from collections.abc import Iterable, Mapping, MutableMapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Final, Generic, TypeVar, cast

from .errors import ConfigError, DependencyLoadError, InvalidPluginReferenceError, WhitespaceInNameError
from .io import load_json_config, load_yaml_config
from .modules import FreshModuleEvaluator, ModuleEvaluator, ModuleResolver
from .naming import get_shorthand_name, is_file_path, normalize_package_name
from .types import DEFAULT_PARSER_ID, IMPLICIT_CONFIG_NAME, PLUGIN_PACKAGE_PREFIX

LOGGER = logging.getLogger(__name__)

BUNDLED_PARSER_MODULE: Final[str] = "lintrc.default_parser"

DefinitionT = TypeVar("DefinitionT")

_WHITESPACE_RE = re.compile(r"\s")


@dataclass(frozen=True, slots=True)
class ConfigDependency(Generic[DefinitionT]):
    """Outcome of loading a parser or plugin.

    Exactly one of ``loaded`` (with ``file_path``) or ``error`` is meaningful.
    """

    id: str
    importer_name: str = ""
    importer_path: str = ""
    file_path: Path | None = None
    loaded: DefinitionT | None = field(default=None, repr=False, compare=False)
    error: ConfigError | None = None

    @classmethod
    def success(
        cls,
        dependency_id: str,
        definition: DefinitionT,
        *,
        file_path: Path | None,
        importer_name: str = "",
        importer_path: str = "",
    ) -> ConfigDependency[DefinitionT]:
        return cls(
            id=dependency_id,
            importer_name=importer_name,
            importer_path=importer_path,
            file_path=file_path,
            loaded=definition,
        )

    @classmethod
    def failure(
        cls,
        dependency_id: str,
        error: ConfigError,
        *,
        importer_name: str = "",
        importer_path: str = "",
    ) -> ConfigDependency[DefinitionT]:
        return cls(id=dependency_id, importer_name=importer_name, importer_path=importer_path, error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def definition(self) -> DefinitionT:
        """Return the loaded definition.

        Raises:
            ConfigError: The deferred load error when loading failed.
        """

        if self.error is not None:
            raise self.error
        return cast(DefinitionT, self.loaded)

    def to_json(self) -> dict[str, Any]:
        """Return a serialisable summary that omits the definition."""

        payload: dict[str, Any] = {"id": self.id, "importerName": self.importer_name}
        if self.error is not None:
            payload["error"] = str(self.error)
        else:
            payload["filePath"] = str(self.file_path) if self.file_path is not None else None
        return payload


def plugin_member(definition: Any, key: str) -> Mapping[str, Any]:
    """Return a mapping member (``rules``, ``configs``...) of a plugin definition.

    Definitions may be modules/objects exposing attributes or plain mappings.
    """

    value = definition.get(key) if isinstance(definition, Mapping) else getattr(definition, key, None)
    return value if isinstance(value, Mapping) else {}


@dataclass(slots=True)
class DependencyLoader:
    """Resolve and load parser/plugin modules for config fragments.

    Attributes:
        cwd: Project root; plugins are always resolved relative to it.
        resolver: Module resolution capability.
        evaluator: Executes Python dependency modules without caching.
        parser_pool: In-memory parsers keyed by exact id.
        plugin_pool: In-memory plugins keyed by package name or short id.
    """

    cwd: Path
    resolver: ModuleResolver = field(default_factory=ModuleResolver)
    evaluator: ModuleEvaluator = field(default_factory=FreshModuleEvaluator)
    parser_pool: MutableMapping[str, Any] = field(default_factory=dict)
    plugin_pool: MutableMapping[str, Any] = field(default_factory=dict)

    def load_parser(self, name_or_path: str, importer_path: str, importer_name: str) -> ConfigDependency[Any]:
        """Load the parser ``name_or_path`` relative to the importing config file.

        Args:
            name_or_path: Parser id or relative/absolute path as declared.
            importer_path: Config file declaring the parser (may be empty).
            importer_name: Config name declaring the parser.

        Returns:
            ConfigDependency[Any]: Loaded parser or the captured failure.
        """

        LOGGER.debug("Loading parser %r from %s", name_or_path, importer_path)
        if name_or_path in self.parser_pool:
            return ConfigDependency.success(
                name_or_path,
                self.parser_pool[name_or_path],
                file_path=Path(importer_path) if importer_path else None,
                importer_name=importer_name,
                importer_path=importer_path,
            )

        relative_to = Path(importer_path) if importer_path else self.cwd / IMPLICIT_CONFIG_NAME
        try:
            file_path = self.resolver.resolve(name_or_path, relative_to)
            definition = self.load_definition(file_path)
        except Exception as exc:  # parser code may raise anything while loading
            if name_or_path == DEFAULT_PARSER_ID:
                return self._load_bundled_parser(importer_path, importer_name)
            LOGGER.debug("Failed to load parser %s.", name_or_path)
            return ConfigDependency.failure(
                name_or_path,
                _load_error(
                    f"Failed to load parser {name_or_path}: {_describe(exc)} (relative to {relative_to})",
                    exc,
                    name_or_path,
                    importer_path,
                ),
                importer_name=importer_name,
                importer_path=importer_path,
            )
        LOGGER.debug("Loaded parser %s (%s)", name_or_path, file_path)
        return ConfigDependency.success(
            name_or_path,
            definition,
            file_path=file_path,
            importer_name=importer_name,
            importer_path=importer_path,
        )

    def load_plugin(self, name_or_path: str, importer_path: str, importer_name: str) -> ConfigDependency[Any]:
        """Load the plugin ``name_or_path`` relative to the project root.

        Args:
            name_or_path: Plugin short name, package name, or file path.
            importer_path: Config file declaring the plugin (diagnostics only).
            importer_name: Config name declaring the plugin (diagnostics only).

        Returns:
            ConfigDependency[Any]: Loaded plugin or the captured failure.

        Raises:
            WhitespaceInNameError: If the plugin name contains whitespace.
        """

        LOGGER.debug("Loading plugin %r from %s", name_or_path, importer_path)
        if is_file_path(name_or_path):
            request = plugin_id = name_or_path
        else:
            request = normalize_package_name(name_or_path, PLUGIN_PACKAGE_PREFIX)
            plugin_id = get_shorthand_name(request, PLUGIN_PACKAGE_PREFIX)
            if _WHITESPACE_RE.search(name_or_path):
                raise WhitespaceInNameError(request)
            for key in (request, plugin_id):
                if key in self.plugin_pool:
                    return ConfigDependency.success(
                        plugin_id,
                        self.plugin_pool[key],
                        file_path=Path(importer_path) if importer_path else None,
                        importer_name=importer_name,
                        importer_path=importer_path,
                    )

        relative_to = self.cwd / IMPLICIT_CONFIG_NAME
        try:
            file_path = self.resolver.resolve(request, relative_to)
            definition = self.load_definition(file_path)
        except Exception as exc:  # plugin code may raise anything while loading
            LOGGER.debug("Failed to load plugin %s.", request)
            error = _load_error(
                f"Failed to load plugin {request}: {_describe(exc)} (project root is {self.cwd})",
                exc,
                plugin_id,
                importer_path,
            )
            return ConfigDependency.failure(
                plugin_id,
                error,
                importer_name=importer_name,
                importer_path=importer_path,
            )
        LOGGER.debug("Loaded plugin %s (%s)", request, file_path)
        return ConfigDependency.success(
            plugin_id,
            definition,
            file_path=file_path,
            importer_name=importer_name,
            importer_path=importer_path,
        )

    def load_plugins(
        self,
        names: Iterable[str],
        importer_path: str,
        importer_name: str,
    ) -> dict[str, ConfigDependency[Any]]:
        """Load every plugin in ``names`` keyed by plugin id.

        Raises:
            InvalidPluginReferenceError: If an entry is a file path.
            WhitespaceInNameError: If an entry contains whitespace.
        """

        plugins: dict[str, ConfigDependency[Any]] = {}
        for name in names:
            if is_file_path(name):
                raise InvalidPluginReferenceError("Plugins array cannot includes file paths.")
            plugin = self.load_plugin(name, importer_path, importer_name)
            plugins[plugin.id] = plugin
        return plugins

    def load_definition(self, file_path: Path) -> Any:
        """Load a resolved dependency file without caching.

        Python modules yield the module object; JSON and YAML documents yield
        their parsed content.
        """

        suffix = file_path.suffix
        if suffix == ".py":
            return self.evaluator.evaluate(file_path)
        if suffix == ".json":
            return load_json_config(file_path)
        if suffix in {".yaml", ".yml"}:
            return load_yaml_config(file_path)
        raise ImportError(f"Unsupported module type: {file_path}", path=str(file_path))

    def _load_bundled_parser(self, importer_path: str, importer_name: str) -> ConfigDependency[Any]:
        module = importlib.import_module(BUNDLED_PARSER_MODULE)
        LOGGER.debug("Using bundled parser %s", DEFAULT_PARSER_ID)
        return ConfigDependency.success(
            DEFAULT_PARSER_ID,
            module,
            file_path=Path(module.__file__) if module.__file__ else None,
            importer_name=importer_name,
            importer_path=importer_path,
        )


def _describe(exc: BaseException) -> str:
    if isinstance(exc, (ModuleNotFoundError, ConfigError)):
        return str(exc)
    return f"{type(exc).__name__}: {exc}"


def _load_error(message: str, cause: BaseException, dependency_id: str, importer_path: str) -> DependencyLoadError:
    error = DependencyLoadError(message, dependency_id=dependency_id, importer_path=importer_path)
    error.__cause__ = cause
    return error


__all__ = [
    "BUNDLED_PARSER_MODULE",
    "ConfigDependency",
    "DependencyLoader",
    "plugin_member",
]
