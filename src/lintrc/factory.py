# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Factory that flattens config data into ordered fragment sequences.

The factory handles ``extends``, ``parser``, ``plugins`` and ``overrides``
for a single config source. Combining the sequences found in several
directories (cascading) is left to the caller, which passes the sequence of
the parent directory as ``parent``.

Within one source the output order is: ``extends`` results, plugin file
extension processors, the source's own fragment, then ``overrides`` results.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Mapping, MutableMapping
from dataclasses import replace
from pathlib import Path
from types import MappingProxyType
from typing import Any, Final

from .criteria import OverrideCriteria
from .dependency import ConfigDependency, DependencyLoader, plugin_member
from .errors import (
    ConfigError,
    ConfigFieldNotFoundError,
    InvalidPluginReferenceError,
    MissingExtendError,
    SourceReadError,
    append_reference,
)
from .fragments import ConfigFragment, FragmentSequence
from .io import load_config_source
from .modules import FreshModuleEvaluator, ModuleEvaluator, ModuleResolver
from .naming import is_file_path, normalize_package_name
from .schema import validate_config_schema
from .types import (
    BUILTIN_PREFIX,
    CONFIG_FILENAMES,
    CONFIG_PACKAGE_PREFIX,
    IMPLICIT_CONFIG_NAME,
    PLUGIN_PREFIX,
    ConfigData,
)

LOGGER = logging.getLogger(__name__)

_CONF_DIR: Final[Path] = Path(__file__).resolve().parent / "conf"
BUILTIN_CONFIGS: Final[Mapping[str, Path]] = MappingProxyType(
    {
        "eslint:recommended": _CONF_DIR / "eslint_recommended.json",
        "eslint:all": _CONF_DIR / "eslint_all.py",
    },
)

_Stack = tuple[str, ...]


class ConfigFragmentFactory:
    """Create :class:`FragmentSequence` objects from config data and files."""

    def __init__(
        self,
        *,
        cwd: Path | str | None = None,
        additional_parser_pool: MutableMapping[str, Any] | None = None,
        additional_plugin_pool: MutableMapping[str, Any] | None = None,
        resolver: ModuleResolver | None = None,
        evaluator: ModuleEvaluator | None = None,
    ) -> None:
        """Initialise the factory.

        Args:
            cwd: Project root. Plugins resolve relative to it and relative
                ``load_file``/``load_on_directory`` paths are anchored on it.
            additional_parser_pool: In-memory parsers keyed by id.
            additional_plugin_pool: In-memory plugins keyed by name or id.
            resolver: Module resolution capability override.
            evaluator: Python module evaluator override.
        """

        self._cwd = Path(cwd if cwd is not None else Path.cwd()).absolute()
        self._evaluator = evaluator or FreshModuleEvaluator()
        self._loader = DependencyLoader(
            cwd=self._cwd,
            resolver=resolver or ModuleResolver(),
            evaluator=self._evaluator,
            parser_pool=additional_parser_pool if additional_parser_pool is not None else {},
            plugin_pool=additional_plugin_pool if additional_plugin_pool is not None else {},
        )
        self._directory_cache: dict[Path, str] = {}

    @property
    def cwd(self) -> Path:
        return self._cwd

    @property
    def dependency_loader(self) -> DependencyLoader:
        return self._loader

    def create(
        self,
        config_data: ConfigData | None,
        *,
        file_path: Path | str | None = None,
        name: str | None = None,
        parent: FragmentSequence | None = None,
    ) -> FragmentSequence:
        """Create a sequence from in-memory config data (e.g. CLI options).

        Args:
            config_data: Config data, or ``None`` to return ``parent`` as is.
            file_path: Path the data is attributed to; anchors relative lookups.
            name: Display name of the config.
            parent: Sequence prepended unless the result declares ``root``.

        Returns:
            FragmentSequence: The flattened fragments.
        """

        if config_data is None:
            return parent if parent is not None else FragmentSequence()
        fragments = self._normalize_config_data(config_data, file_path, name, ())
        return FragmentSequence(fragments).with_parent(parent)

    def load_file(
        self,
        file_path: Path | str,
        *,
        name: str | None = None,
        parent: FragmentSequence | None = None,
    ) -> FragmentSequence:
        """Load a config file (e.g. the ``--config`` option).

        Raises:
            SourceReadError: If the file is missing or cannot be parsed.
        """

        absolute_path = self._cwd / file_path
        fragments = self._load_config_data(absolute_path, name, ())
        return FragmentSequence(fragments).with_parent(parent)

    def load_on_directory(
        self,
        directory_path: Path | str,
        *,
        name: str | None = None,
        parent: FragmentSequence | None = None,
    ) -> FragmentSequence:
        """Load the conventional config file of a directory if one exists.

        Returns:
            FragmentSequence: The directory's fragments, or ``parent`` (empty
            when no parent was given) if the directory has no config file.
        """

        absolute_path = self._cwd / directory_path
        fragments = self._load_config_data_on_directory(absolute_path, name)
        if fragments is None:
            return parent if parent is not None else FragmentSequence()
        return FragmentSequence(fragments).with_parent(parent)

    def add_plugin(self, name: str, definition: Any) -> None:
        """Register an in-memory plugin and invalidate directory lookups."""

        self._loader.plugin_pool[name] = definition
        self.clear_cache()

    def add_parser(self, name: str, definition: Any) -> None:
        """Register an in-memory parser and invalidate directory lookups."""

        self._loader.parser_pool[name] = definition
        self.clear_cache()

    def clear_cache(self) -> None:
        """Forget which config file each directory resolved to.

        The remembered filename is probed first on later lookups, so a
        higher-priority config file added next to it is only picked up after
        this call.
        """

        self._directory_cache.clear()

    def _read_source(self, file_path: Path) -> Any:
        try:
            return load_config_source(file_path, evaluator=self._evaluator)
        except FileNotFoundError as exc:
            raise SourceReadError(file_path, "No such file or directory") from exc

    def _load_config_data(self, file_path: Path, name: str | None, stack: _Stack) -> list[ConfigFragment]:
        key = str(file_path)
        _check_cycle(key, stack)
        config_data = self._read_source(file_path)
        return self._normalize_config_data(config_data, file_path, name, (*stack, key))

    def _load_config_data_on_directory(self, directory: Path, name: str | None) -> list[ConfigFragment] | None:
        for filename in self._candidate_filenames(directory):
            file_path = directory / filename
            try:
                config_data = load_config_source(file_path, evaluator=self._evaluator)
            except (FileNotFoundError, ConfigFieldNotFoundError):
                continue
            except SourceReadError as error:
                if not isinstance(error.__cause__, ModuleNotFoundError):
                    raise
                LOGGER.debug("Skipping %s: %s", file_path, error)
                continue
            if config_data is None:
                continue
            LOGGER.debug("Config file found: %s", file_path)
            self._directory_cache[directory] = filename
            return self._normalize_config_data(config_data, file_path, name, (str(file_path),))

        LOGGER.debug("Config file not found on %s", directory)
        self._directory_cache.pop(directory, None)
        return None

    def _candidate_filenames(self, directory: Path) -> Iterable[str]:
        cached = self._directory_cache.get(directory)
        if cached is None:
            return CONFIG_FILENAMES
        return (cached, *(filename for filename in CONFIG_FILENAMES if filename != cached))

    def _normalize_config_data(
        self,
        config_data: Any,
        file_path: Path | str | None,
        name: str | None,
        stack: _Stack,
    ) -> list[ConfigFragment]:
        resolved_path = str(self._cwd / file_path) if file_path else ""
        if not name:
            name = os.path.relpath(resolved_path, self._cwd) if resolved_path else ""
        validate_config_schema(config_data, name or resolved_path)
        return self._normalize_object_config_data(config_data, resolved_path, name, stack)

    def _normalize_object_config_data(
        self,
        config_data: ConfigData,
        file_path: str,
        name: str,
        stack: _Stack,
    ) -> list[ConfigFragment]:
        body = dict(config_data)
        files = body.pop("files", None)
        excluded_files = body.pop("excludedFiles", None)
        base_path = Path(file_path).parent if file_path else self._cwd
        criteria = OverrideCriteria.create(files, excluded_files, base_path, source=name)

        fragments: list[ConfigFragment] = []
        for fragment in self._normalize_object_config_data_body(body, file_path, name, stack):
            combined = OverrideCriteria.and_(criteria, fragment.criteria)
            if combined is not None:
                # Scoped fragments adopt the entry file's base path and never act as a root.
                fragment = replace(fragment, criteria=combined.with_base_path(base_path), root=None)
            fragments.append(fragment)
        return fragments

    def _normalize_object_config_data_body(
        self,
        body: ConfigData,
        file_path: str,
        name: str,
        stack: _Stack,
    ) -> list[ConfigFragment]:
        fragments: list[ConfigFragment] = []

        extends = body.get("extends")
        extend_list = extends if isinstance(extends, (list, tuple)) else [extends]
        for extend_name in extend_list:
            if extend_name:
                fragments.extend(self._load_extends(extend_name, file_path, name, stack))

        parser_name = body.get("parser")
        parser = self._loader.load_parser(parser_name, file_path, name) if parser_name else None
        plugin_list = body.get("plugins")
        plugins = self._loader.load_plugins(plugin_list, file_path, name) if plugin_list is not None else None

        if plugins:
            fragments.extend(self._take_file_extension_processors(plugins, file_path, name, stack))

        fragments.append(
            ConfigFragment(
                name=name,
                file_path=file_path,
                criteria=None,
                env=_freeze(body.get("env")),
                globals=_freeze(body.get("globals")),
                parser=parser,
                parser_options=_freeze(body.get("parserOptions")),
                plugins=MappingProxyType(plugins) if plugins is not None else None,
                processor=body.get("processor"),
                root=body.get("root"),
                rules=_freeze(body.get("rules")),
                settings=_freeze(body.get("settings")),
            ),
        )

        for index, override in enumerate(body.get("overrides") or ()):
            fragments.extend(
                self._normalize_object_config_data(override, file_path, f"{name}#overrides[{index}]", stack),
            )
        return fragments

    def _load_extends(self, extend_name: str, importer_path: str, importer_name: str, stack: _Stack) -> list[ConfigFragment]:
        LOGGER.debug("Loading {extends:%r} relative to %s", extend_name, importer_path)
        try:
            if extend_name.startswith(BUILTIN_PREFIX):
                return self._load_extended_builtin_config(extend_name, importer_name, stack)
            if extend_name.startswith(PLUGIN_PREFIX):
                return self._load_extended_plugin_config(extend_name, importer_path, importer_name, stack)
            return self._load_extended_shareable_config(extend_name, importer_path, importer_name, stack)
        except ConfigError as error:
            append_reference(error, importer_path or importer_name)
            raise

    def _load_extended_builtin_config(self, extend_name: str, importer_name: str, stack: _Stack) -> list[ConfigFragment]:
        builtin_path = BUILTIN_CONFIGS.get(extend_name)
        if builtin_path is None:
            raise MissingExtendError(extend_name)
        return self._load_config_data(builtin_path, f"{importer_name} » {extend_name}", stack)

    def _load_extended_plugin_config(
        self,
        extend_name: str,
        importer_path: str,
        importer_name: str,
        stack: _Stack,
    ) -> list[ConfigFragment]:
        slash_index = extend_name.rfind("/")
        if slash_index <= len(PLUGIN_PREFIX):
            raise MissingExtendError(extend_name)
        plugin_name = extend_name[len(PLUGIN_PREFIX) : slash_index]
        config_name = extend_name[slash_index + 1 :]
        if is_file_path(plugin_name):
            raise InvalidPluginReferenceError("'extends' cannot use a file path for plugins.")

        plugin = self._loader.load_plugin(plugin_name, importer_path, importer_name)
        if not plugin.ok:
            raise plugin.error or MissingExtendError(extend_name)
        config_data = plugin_member(plugin.definition, "configs").get(config_name)
        if config_data is None:
            raise MissingExtendError(extend_name)

        key = f"{PLUGIN_PREFIX}{plugin.id}/{config_name}"
        _check_cycle(key, stack)
        return self._normalize_config_data(
            config_data,
            plugin.file_path,
            f"{importer_name} » {key}",
            (*stack, key),
        )

    def _load_extended_shareable_config(
        self,
        extend_name: str,
        importer_path: str,
        importer_name: str,
        stack: _Stack,
    ) -> list[ConfigFragment]:
        relative_to = Path(importer_path) if importer_path else self._cwd / IMPLICIT_CONFIG_NAME
        if is_file_path(extend_name):
            request = extend_name
        elif extend_name.startswith("."):
            request = f"./{extend_name}"
        else:
            request = normalize_package_name(extend_name, CONFIG_PACKAGE_PREFIX)

        try:
            file_path = self._loader.resolver.resolve(request, relative_to)
        except ModuleNotFoundError as exc:
            raise MissingExtendError(extend_name) from exc
        LOGGER.debug("Loaded: %s (%s)", request, file_path)
        return self._load_config_data(file_path, f"{importer_name} » {request}", stack)

    def _take_file_extension_processors(
        self,
        plugins: Mapping[str, ConfigDependency[Any]],
        file_path: str,
        name: str,
        stack: _Stack,
    ) -> list[ConfigFragment]:
        fragments: list[ConfigFragment] = []
        for plugin_id, plugin in plugins.items():
            if not plugin.ok:
                continue
            for processor_id in plugin_member(plugin.definition, "processors"):
                if not processor_id.startswith("."):
                    continue
                fragments.extend(
                    self._normalize_object_config_data(
                        {"files": [f"*{processor_id}"], "processor": f"{plugin_id}/{processor_id}"},
                        file_path,
                        f'{name}#processors["{plugin_id}/{processor_id}"]',
                        stack,
                    ),
                )
        return fragments


def _freeze(value: Any) -> Mapping[str, Any] | None:
    if value is None:
        return None
    return MappingProxyType(dict(value))


def _check_cycle(key: str, stack: _Stack) -> None:
    if key in stack:
        chain = " -> ".join((*stack, key))
        raise ConfigError(f"Circular extends detected: {chain}")


__all__ = ["BUILTIN_CONFIGS", "ConfigFragmentFactory"]
