# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
fundwaterfall Core

Foundational building blocks shared by the distribution and performance
engines: primitives, the cash-flow ledger, exceptions and pure financial
calculations.
"""

from . import ledger, primitives
from .calculations import FinancialCalculations, IRRSolution
from .exceptions import FundWaterfallError, ValidationError
from .ledger import CashFlowEvent, CashFlowLedger, LedgerQueries
from .primitives import (
    AllocationSettings,
    CashFlowKindEnum,
    ComputationWarningCode,
    EngineSettings,
    IRRSolverSettings,
    Model,
    PartnerKindEnum,
    TierKindEnum,
    WaterfallStructureEnum,
)

__all__ = [
    # Subpackages
    "ledger",
    "primitives",
    # Calculations
    "FinancialCalculations",
    "IRRSolution",
    # Exceptions
    "FundWaterfallError",
    "ValidationError",
    # Ledger
    "CashFlowEvent",
    "CashFlowLedger",
    "LedgerQueries",
    # Primitives
    "AllocationSettings",
    "CashFlowKindEnum",
    "ComputationWarningCode",
    "EngineSettings",
    "IRRSolverSettings",
    "Model",
    "PartnerKindEnum",
    "TierKindEnum",
    "WaterfallStructureEnum",
]
