# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Model(BaseModel):
    """Base Pydantic model with common configuration.

    Immutable models: inputs are snapshots supplied by the caller and results
    are never mutated after they are computed. Re-computation produces a new
    object instead of editing an existing one.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        frozen=True,  # Snapshots and results are immutable
        extra="forbid",  # Catches typos and missing field definitions immediately
    )
