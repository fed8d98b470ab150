# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Resolve cascading lint configuration files into ordered fragment sequences."""

from __future__ import annotations

from .criteria import OverrideCriteria
from .dependency import ConfigDependency, DependencyLoader
from .errors import (
    ConfigError,
    ConfigFieldNotFoundError,
    ConfigSchemaError,
    DependencyLoadError,
    InvalidPluginReferenceError,
    MissingExtendError,
    SourceReadError,
    WhitespaceInNameError,
)
from .factory import ConfigFragmentFactory
from .fragments import ConfigFileContent, ConfigFragment, ExtractedConfig, FragmentSequence
from .modules import FreshModuleEvaluator, ModuleEvaluator, ModuleResolver

__all__ = [
    "ConfigDependency",
    "ConfigError",
    "ConfigFieldNotFoundError",
    "ConfigFileContent",
    "ConfigFragment",
    "ConfigFragmentFactory",
    "ConfigSchemaError",
    "DependencyLoadError",
    "DependencyLoader",
    "ExtractedConfig",
    "FragmentSequence",
    "FreshModuleEvaluator",
    "InvalidPluginReferenceError",
    "MissingExtendError",
    "ModuleEvaluator",
    "ModuleResolver",
    "OverrideCriteria",
    "SourceReadError",
    "WhitespaceInNameError",
]
