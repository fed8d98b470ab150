# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Bundled configs (``eslint:recommended``, ``eslint:all``) and the config schema."""
