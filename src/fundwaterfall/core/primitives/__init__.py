# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
fundwaterfall Core Primitives

Building blocks shared by the distribution and performance engines: the base
model, enums, constrained types, fixed-point money helpers, settings and
validators.
"""

from .enums import (
    CashFlowKindEnum,
    CashFlowPurposeEnum,
    ComputationWarningCode,
    PartnerKindEnum,
    PerformanceMethodologyEnum,
    TierKindEnum,
    WaterfallStructureEnum,
)
from .model import Model
from .money import (
    CENT,
    from_cents,
    percent_of,
    round_half_even,
    to_cents,
    to_decimal,
)
from .settings import AllocationSettings, EngineSettings, IRRSolverSettings
from .types import Money, Percent, PositiveFloat, PositiveInt, SignedMoney
from .validation import (
    validate_custom_tiers,
    validate_non_negative,
    validate_ownership_total,
    validate_tier_split,
    validate_unique_ids,
)

__all__ = [
    # Enums
    "CashFlowKindEnum",
    "CashFlowPurposeEnum",
    "ComputationWarningCode",
    "PartnerKindEnum",
    "PerformanceMethodologyEnum",
    "TierKindEnum",
    "WaterfallStructureEnum",
    # Model
    "Model",
    # Money
    "CENT",
    "from_cents",
    "percent_of",
    "round_half_even",
    "to_cents",
    "to_decimal",
    # Settings
    "AllocationSettings",
    "EngineSettings",
    "IRRSolverSettings",
    # Types
    "Money",
    "Percent",
    "PositiveFloat",
    "PositiveInt",
    "SignedMoney",
    # Validation
    "validate_custom_tiers",
    "validate_non_negative",
    "validate_ownership_total",
    "validate_tier_split",
    "validate_unique_ids",
]
