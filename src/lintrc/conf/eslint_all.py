# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Config enabling every core rule, referenced as ``eslint:all``."""

from lintrc.conf.core_rules import CORE_RULE_IDS, DEPRECATED_RULE_IDS

config = {"rules": {rule_id: "error" for rule_id in CORE_RULE_IDS if rule_id not in DEPRECATED_RULE_IDS}}
