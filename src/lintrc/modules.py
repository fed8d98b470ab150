# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Module resolution and uncached module evaluation.

The resolver maps a request (package-style name or file path) plus the file
that issued it onto a module location on disk. The evaluator executes a
Python source file and returns the resulting module object without going
through :data:`sys.modules` or the bytecode cache, so edits to config,
parser, and plugin sources are observed on the next load.

Evaluating a module runs arbitrary code from the project being configured.
Callers that handle untrusted trees should inject their own evaluator.
"""

from __future__ import annotations

import importlib.util
import itertools
import logging
import re
import sys
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from pathlib import Path
from types import ModuleType
from typing import Final, Protocol, runtime_checkable

from .naming import is_file_path

LOGGER = logging.getLogger(__name__)

MODULE_SUFFIXES: Final[tuple[str, ...]] = (".py", ".json", ".yaml", ".yml")
PACKAGE_INIT: Final[str] = "__init__.py"

_MODULE_COUNTER = itertools.count()
_UNSAFE_NAME_RE = re.compile(r"\W")


@runtime_checkable
class ModuleEvaluator(Protocol):
    """Evaluate the Python module stored at a path and return it."""

    def evaluate(self, path: Path) -> ModuleType:
        """Execute ``path`` and return the resulting module.

        Args:
            path: Python source file to execute.

        Returns:
            ModuleType: Module namespace populated by the execution.
        """
        ...


class FreshModuleEvaluator:
    """Execute Python sources from disk on every call."""

    def evaluate(self, path: Path) -> ModuleType:
        module_name = f"_lintrc_fresh_{next(_MODULE_COUNTER)}_{_UNSAFE_NAME_RE.sub('_', path.stem)}"
        is_package = path.name == PACKAGE_INIT
        spec = importlib.util.spec_from_file_location(
            module_name,
            path,
            submodule_search_locations=[str(path.parent)] if is_package else None,
        )
        if spec is None:
            raise ImportError(f"Cannot create a module spec for {path}", path=str(path))
        module = importlib.util.module_from_spec(spec)
        code = compile(path.read_bytes(), str(path), "exec")
        sys.modules[module_name] = module
        try:
            exec(code, module.__dict__)  # noqa: S102 - config sources are code by contract
        finally:
            for loaded_name in [key for key in sys.modules if key == module_name or key.startswith(f"{module_name}.")]:
                sys.modules.pop(loaded_name, None)
        LOGGER.debug("Evaluated module %s", path)
        return module


@dataclass(slots=True)
class ModuleResolver:
    """Resolve module requests relative to the file that issued them.

    Attributes:
        search_path: Extra roots probed after the importer's ancestors.
            ``None`` means :data:`sys.path`.
    """

    search_path: Sequence[Path] | None = None

    def resolve(self, request: str, relative_to: Path) -> Path:
        """Return the absolute location of ``request``.

        Args:
            request: Package-style name or relative/absolute file path.
            relative_to: File whose directory anchors the lookup.

        Returns:
            Path: Resolved module file (a package resolves to its ``__init__.py``).

        Raises:
            ModuleNotFoundError: If no candidate exists.
        """

        base_dir = relative_to.parent
        found: Path | None = None
        if is_file_path(request):
            requested = Path(request)
            found = _probe(requested if requested.is_absolute() else base_dir / requested)
        else:
            for root in self._roots(base_dir):
                for segments in _name_variants(request):
                    if (found := _probe(root.joinpath(*segments))) is not None:
                        break
                if found is not None:
                    break
        if found is None:
            raise ModuleNotFoundError(f"Cannot find module '{request}' from '{base_dir}'", name=request)
        return found.resolve()

    def _roots(self, base_dir: Path) -> Iterator[Path]:
        seen: set[Path] = set()
        extra = self.search_path if self.search_path is not None else [Path(entry) for entry in sys.path if entry]
        for root in itertools.chain((base_dir,), base_dir.parents, extra):
            if root in seen:
                continue
            seen.add(root)
            yield root


def _name_variants(request: str) -> list[tuple[str, ...]]:
    segments = tuple(segment for segment in request.replace("\\", "/").split("/") if segment)
    importable = tuple(segment.lstrip("@").replace("-", "_") for segment in segments)
    return [segments] if importable == segments else [segments, importable]


def _probe(candidate: Path) -> Path | None:
    if candidate.is_file():
        return candidate
    for suffix in MODULE_SUFFIXES if candidate.name else ():
        suffixed = candidate.with_name(candidate.name + suffix)
        if suffixed.is_file():
            return suffixed
    package_init = candidate / PACKAGE_INIT
    if package_init.is_file():
        return package_init
    return None


__all__ = [
    "FreshModuleEvaluator",
    "MODULE_SUFFIXES",
    "ModuleEvaluator",
    "ModuleResolver",
]
