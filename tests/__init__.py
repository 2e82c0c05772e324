# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
fundwaterfall test suite.

Unit tests mirror the package layout; integration tests run distributions and
performance reports end to end.
"""
