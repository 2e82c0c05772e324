# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Integration tests for fundwaterfall components.

This package contains integration tests that verify proper interaction
between multiple components and subsystems.
""" 