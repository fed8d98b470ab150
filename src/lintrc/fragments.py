# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Resolved config fragments and the per-file extraction algorithm."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from functools import cached_property
from pathlib import Path
from typing import Any, overload

from pydantic import BaseModel, ConfigDict, Field

from .criteria import OverrideCriteria
from .dependency import ConfigDependency, plugin_member


@dataclass(frozen=True, slots=True)
class ConfigFragment:
    """One normalised, precedence-ordered unit of configuration.

    ``root`` is tri-state: ``None`` means the source did not declare it.
    Fragments carrying a criteria always have ``root`` set to ``None``.
    """

    name: str
    file_path: str
    criteria: OverrideCriteria | None = None
    env: Mapping[str, Any] | None = None
    globals: Mapping[str, Any] | None = None
    parser: ConfigDependency[Any] | None = None
    parser_options: Mapping[str, Any] | None = None
    plugins: Mapping[str, ConfigDependency[Any]] | None = None
    processor: str | None = None
    root: bool | None = None
    rules: Mapping[str, Any] | None = None
    settings: Mapping[str, Any] | None = None

    def applies_to(self, file_path: Path) -> bool:
        """Return ``True`` when the fragment has no criteria or ``file_path`` matches it."""

        return self.criteria is None or self.criteria.test(file_path)


class ConfigFileContent(BaseModel):
    """Serialisable view of an extracted config, shaped like config file data."""

    model_config = ConfigDict(populate_by_name=True)

    env: dict[str, Any] = Field(default_factory=dict)
    globals: dict[str, Any] = Field(default_factory=dict)
    parser: str | None = None
    parser_options: dict[str, Any] = Field(default_factory=dict, alias="parserOptions")
    plugins: list[str] = Field(default_factory=list)
    processor: str | None = None
    rules: dict[str, list[Any]] = Field(default_factory=dict)
    settings: dict[str, Any] = Field(default_factory=dict)


@dataclass(slots=True)
class ExtractedConfig:
    """Effective configuration for one file, folded from matching fragments."""

    env: dict[str, Any] = field(default_factory=dict)
    globals: dict[str, Any] = field(default_factory=dict)
    parser: ConfigDependency[Any] | None = None
    parser_options: dict[str, Any] = field(default_factory=dict)
    plugins: dict[str, ConfigDependency[Any]] = field(default_factory=dict)
    processor: str | None = None
    root: bool | None = None
    rules: dict[str, list[Any]] = field(default_factory=dict)
    settings: dict[str, Any] = field(default_factory=dict)
    plugin_rules: dict[str, Any] = field(default_factory=dict)

    def apply(self, fragment: ConfigFragment) -> None:
        """Fold ``fragment`` into this config; ``fragment`` takes precedence."""

        if fragment.parser is not None:
            self.parser = fragment.parser
        if fragment.processor is not None:
            self.processor = fragment.processor
        if fragment.root is not None:
            self.root = fragment.root
        self.env.update(fragment.env or {})
        self.globals.update(fragment.globals or {})
        self.parser_options.update(fragment.parser_options or {})
        self.settings.update(fragment.settings or {})
        self.plugins.update(fragment.plugins or {})
        for rule_id, value in (fragment.rules or {}).items():
            self.rules[rule_id] = normalize_rule_entry(value)

    def to_config_file_content(self) -> ConfigFileContent:
        """Return a serialisable view shaped like config file data.

        Returns:
            ConfigFileContent: Parser as its file path (or id when it failed),
            plugins as ids, and plain dictionaries for the other fields.
        """

        parser: str | None = None
        if self.parser is not None:
            parser = str(self.parser.file_path) if self.parser.ok and self.parser.file_path else self.parser.id
        return ConfigFileContent(
            env=dict(self.env),
            globals=dict(self.globals),
            parser=parser,
            parser_options=dict(self.parser_options),
            plugins=[plugin_id for plugin_id in self.plugins if plugin_id],
            processor=self.processor,
            rules={rule_id: list(entry) for rule_id, entry in self.rules.items()},
            settings=dict(self.settings),
        )


class FragmentSequence(Sequence[ConfigFragment]):
    """Ordered, immutable list of config fragments; later entries win."""

    def __init__(self, fragments: Iterable[ConfigFragment] = ()) -> None:
        self._fragments: tuple[ConfigFragment, ...] = tuple(fragments)

    @overload
    def __getitem__(self, index: int) -> ConfigFragment: ...

    @overload
    def __getitem__(self, index: slice) -> FragmentSequence: ...

    def __getitem__(self, index: int | slice) -> ConfigFragment | FragmentSequence:
        if isinstance(index, slice):
            return FragmentSequence(self._fragments[index])
        return self._fragments[index]

    def __len__(self) -> int:
        return len(self._fragments)

    def __iter__(self) -> Iterator[ConfigFragment]:
        return iter(self._fragments)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FragmentSequence):
            return NotImplemented
        return self._fragments == other._fragments

    def __repr__(self) -> str:
        return f"FragmentSequence({[fragment.name for fragment in self._fragments]!r})"

    @property
    def root(self) -> bool:
        """Return the last ``root`` flag declared by an unscoped fragment."""

        for fragment in reversed(self._fragments):
            if fragment.root is not None:
                return fragment.root
        return False

    def with_parent(self, parent: FragmentSequence | None) -> FragmentSequence:
        """Return ``parent`` followed by this sequence unless this one is a root."""

        if parent is None or not parent or self.root:
            return self
        return FragmentSequence((*parent, *self._fragments))

    @cached_property
    def plugin_environments(self) -> Mapping[str, Any]:
        """Return environments of loaded plugins keyed ``<pluginId>/<name>``."""

        return _collect_plugin_members(self._fragments, "environments")

    @cached_property
    def plugin_processors(self) -> Mapping[str, Any]:
        """Return processors of loaded plugins keyed ``<pluginId>/<name>``."""

        return _collect_plugin_members(self._fragments, "processors")

    @cached_property
    def plugin_rules(self) -> Mapping[str, Any]:
        """Return rules of loaded plugins keyed ``<pluginId>/<name>``; the first plugin id wins."""

        return _collect_plugin_members(self._fragments, "rules")

    def matching(self, file_path: Path | str) -> tuple[ConfigFragment, ...]:
        """Return the fragments that apply to ``file_path``, in sequence order.

        Args:
            file_path: Absolute path of the file being configured.

        Returns:
            tuple[ConfigFragment, ...]: Unscoped fragments plus those whose criteria match.
        """

        target = Path(file_path)
        return tuple(fragment for fragment in self._fragments if fragment.applies_to(target))

    def extract(self, file_path: Path | str) -> ExtractedConfig:
        """Merge every fragment that applies to ``file_path`` into one config.

        Args:
            file_path: Absolute path of the file being configured.

        Returns:
            ExtractedConfig: Effective configuration; a new object per call.
        """

        selected = self.matching(file_path)
        config = ExtractedConfig()
        for fragment in selected:
            config.apply(fragment)
        config.plugin_rules = dict(_collect_plugin_members(selected, "rules"))
        return config


def normalize_rule_entry(value: Any) -> list[Any]:
    """Return a rule setting in ``[severity, *options]`` form."""

    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _collect_plugin_members(fragments: Iterable[ConfigFragment], member: str) -> dict[str, Any]:
    collected: dict[str, Any] = {}
    seen: set[str] = set()
    for fragment in fragments:
        for plugin_id, plugin in (fragment.plugins or {}).items():
            if not plugin.ok or plugin_id in seen:
                continue
            seen.add(plugin_id)
            for key, value in plugin_member(plugin.definition, member).items():
                collected.setdefault(f"{plugin_id}/{key}", value)
    return collected


__all__ = [
    "ConfigFileContent",
    "ConfigFragment",
    "ExtractedConfig",
    "FragmentSequence",
    "normalize_rule_entry",
]
