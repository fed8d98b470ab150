# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for fragment sequences and per-file extraction."""

from __future__ import annotations

from pathlib import Path

import pytest

from lintrc.criteria import OverrideCriteria
from lintrc.dependency import ConfigDependency
from lintrc.errors import DependencyLoadError
from lintrc.fragments import ConfigFragment, FragmentSequence, normalize_rule_entry


def _fragment(name: str, **fields: object) -> ConfigFragment:
    return ConfigFragment(name=name, file_path="", **fields)


def _plugin(plugin_id: str, definition: object) -> ConfigDependency[object]:
    return ConfigDependency.success(plugin_id, definition, file_path=None)


def test_later_rules_win_and_are_normalized(tmp_path: Path) -> None:
    sequence = FragmentSequence([_fragment("a", rules={"a": 1}), _fragment("b", rules={"a": 2, "b": 1})])

    assert sequence.extract(tmp_path / "x.js").rules == {"a": [2], "b": [1]}


def test_rule_options_are_replaced_not_merged(tmp_path: Path) -> None:
    sequence = FragmentSequence(
        [_fragment("a", rules={"quotes": ["error", "double"]}), _fragment("b", rules={"quotes": "warn"})],
    )

    assert sequence.extract(tmp_path / "x.js").rules == {"quotes": ["warn"]}


def test_mappings_merge_shallowly(tmp_path: Path) -> None:
    sequence = FragmentSequence(
        [
            _fragment("a", env={"browser": True}, settings={"shared": {"a": 1}}, parser_options={"ecmaVersion": 5}),
            _fragment("b", env={"node": True}, settings={"shared": {"b": 2}}, parser_options={"sourceType": "module"}),
        ],
    )

    extracted = sequence.extract(tmp_path / "x.js")

    assert extracted.env == {"browser": True, "node": True}
    assert extracted.settings == {"shared": {"b": 2}}
    assert extracted.parser_options == {"ecmaVersion": 5, "sourceType": "module"}


def test_scalars_take_the_last_defined_value(tmp_path: Path) -> None:
    first_parser = _plugin("first", object())
    second_parser = _plugin("second", object())
    sequence = FragmentSequence(
        [
            _fragment("a", parser=first_parser, processor="p/one", root=True),
            _fragment("b", parser=second_parser),
            _fragment("c", root=False),
        ],
    )

    extracted = sequence.extract(tmp_path / "x.js")

    assert extracted.parser is second_parser
    assert extracted.processor == "p/one"
    assert extracted.root is False


def test_only_matching_fragments_are_applied(tmp_path: Path) -> None:
    criteria = OverrideCriteria.create("*.ts", None, tmp_path)
    sequence = FragmentSequence(
        [_fragment("base", rules={"semi": "error"}), _fragment("ts", criteria=criteria, rules={"semi": "off"})],
    )

    assert sequence.extract(tmp_path / "a.ts").rules == {"semi": ["off"]}
    assert sequence.extract(tmp_path / "a.js").rules == {"semi": ["error"]}
    assert [fragment.name for fragment in sequence.matching(tmp_path / "a.js")] == ["base"]


def test_extract_requires_absolute_path_when_criteria_exist(tmp_path: Path) -> None:
    criteria = OverrideCriteria.create("*.ts", None, tmp_path)
    sequence = FragmentSequence([_fragment("ts", criteria=criteria)])

    with pytest.raises(ValueError):
        sequence.extract("a.ts")


def test_extract_returns_independent_objects(tmp_path: Path) -> None:
    sequence = FragmentSequence([_fragment("a", rules={"semi": "error"})])

    first = sequence.extract(tmp_path / "x.js")
    first.rules["semi"].append("always")
    second = sequence.extract(tmp_path / "x.js")

    assert first is not second
    assert second.rules == {"semi": ["error"]}


def test_plugins_union_and_plugin_rules_prefer_first_registration(tmp_path: Path) -> None:
    failed = ConfigDependency.failure("broken", DependencyLoadError("nope", dependency_id="broken"))
    sequence = FragmentSequence(
        [
            _fragment("a", plugins={"foo": _plugin("foo", {"rules": {"r": "first"}}), "broken": failed}),
            _fragment("b", plugins={"foo": _plugin("foo", {"rules": {"r": "second", "s": "second"}})}),
        ],
    )

    extracted = sequence.extract(tmp_path / "x.js")

    assert set(extracted.plugins) == {"foo", "broken"}
    assert extracted.plugin_rules == {"foo/r": "first"}
    assert sequence.plugin_rules == {"foo/r": "first"}


def test_plugin_rules_only_consider_matching_fragments(tmp_path: Path) -> None:
    criteria = OverrideCriteria.create("*.md", None, tmp_path)
    sequence = FragmentSequence(
        [_fragment("md", criteria=criteria, plugins={"md": _plugin("md", {"rules": {"heading": 1}})})],
    )

    assert sequence.extract(tmp_path / "x.js").plugin_rules == {}
    assert sequence.extract(tmp_path / "README.md").plugin_rules == {"md/heading": 1}
    assert sequence.plugin_rules == {"md/heading": 1}


def test_plugin_processors_and_environments(tmp_path: Path) -> None:
    plugin = _plugin("foo", {"processors": {".md": "proc"}, "environments": {"env": {"globals": {}}}})
    sequence = FragmentSequence([_fragment("a", plugins={"foo": plugin})])

    assert sequence.plugin_processors == {"foo/.md": "proc"}
    assert sequence.plugin_environments == {"foo/env": {"globals": {}}}


def test_root_follows_last_declaring_fragment() -> None:
    assert FragmentSequence().root is False
    assert FragmentSequence([_fragment("a", root=True), _fragment("b")]).root is True
    assert FragmentSequence([_fragment("a", root=True), _fragment("b", root=False)]).root is False


def test_with_parent() -> None:
    parent = FragmentSequence([_fragment("parent")])
    child = FragmentSequence([_fragment("child")])
    root_child = FragmentSequence([_fragment("root", root=True)])

    assert [fragment.name for fragment in child.with_parent(parent)] == ["parent", "child"]
    assert root_child.with_parent(parent) is root_child
    assert child.with_parent(None) is child
    assert child.with_parent(FragmentSequence()) is child


def test_sequence_behaves_like_an_immutable_list() -> None:
    sequence = FragmentSequence([_fragment("a"), _fragment("b"), _fragment("c")])

    assert len(sequence) == 3
    assert sequence[-1].name == "c"
    assert isinstance(sequence[1:], FragmentSequence)
    assert sequence[1:] == FragmentSequence([_fragment("b"), _fragment("c")])
    assert repr(sequence) == "FragmentSequence(['a', 'b', 'c'])"


def test_to_config_file_content_is_serializable(tmp_path: Path) -> None:
    parser = ConfigDependency.success("custom", object(), file_path=tmp_path / "parser.py")
    sequence = FragmentSequence(
        [
            _fragment(
                "a",
                parser=parser,
                parser_options={"ecmaVersion": 2020},
                plugins={"foo": _plugin("foo", {})},
                rules={"semi": ("error", "always")},
            ),
        ],
    )

    content = sequence.extract(tmp_path / "x.js").to_config_file_content().model_dump(by_alias=True)

    assert content["parser"] == str(tmp_path / "parser.py")
    assert content["parserOptions"] == {"ecmaVersion": 2020}
    assert content["plugins"] == ["foo"]
    assert content["rules"] == {"semi": ["error", "always"]}


def test_normalize_rule_entry() -> None:
    assert normalize_rule_entry("error") == ["error"]
    assert normalize_rule_entry(0) == [0]
    assert normalize_rule_entry(("warn", {"max": 2})) == ["warn", {"max": 2}]
