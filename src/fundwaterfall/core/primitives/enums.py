# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from enum import Enum


class WaterfallStructureEnum(str, Enum):
    """
    Distribution waterfall styles supported for a fund.

    - EUROPEAN: return of capital, preferred return, GP catch-up, residual split
    - AMERICAN: return of capital, preferred return, residual split (no catch-up)
    - HYBRID: evaluates both standard sequences and keeps one per `hybrid_logic`
    - CUSTOM: admin-configured tiers consumed strictly in order
    """

    EUROPEAN = "european"
    AMERICAN = "american"
    HYBRID = "hybrid"
    CUSTOM = "custom"


class TierKindEnum(str, Enum):
    """Kind of tier that produced a `TierResult`."""

    RETURN_OF_CAPITAL = "Return of Capital"
    PREFERRED_RETURN = "Preferred Return"
    CATCH_UP = "GP Catch-Up"
    RESIDUAL_SPLIT = "Residual Split"
    CUSTOM = "Custom"


class CashFlowKindEnum(str, Enum):
    """
    Kind of cash-flow event in the ledger.

    Sign convention (investor perspective, used for IRR):
    - CAPITAL_CALL: cash paid into the fund, NEGATIVE
    - DISTRIBUTION: cash paid out of the fund, POSITIVE
    """

    CAPITAL_CALL = "CapitalCall"
    DISTRIBUTION = "Distribution"


class PartnerKindEnum(str, Enum):
    """Recipient class of an allocation."""

    LP = "LP"
    GP = "GP"


class ComputationWarningCode(str, Enum):
    """Machine-readable codes for non-fatal metric warnings."""

    NON_CONVERGENT = "NonConvergent"


class CashFlowPurposeEnum(str, Enum):
    """
    What a capital call funds, when the fund tracks calls in detail.

    Tagged calls let gross performance exclude fee calls from invested capital.
    """

    INVESTMENT = "Investment"
    MANAGEMENT_FEE = "Management Fee"
    FUND_EXPENSE = "Fund Expense"


class PerformanceMethodologyEnum(str, Enum):
    """
    How gross performance separates fees from invested capital.

    - GRANULAR: fees are the capital calls tagged as management fees
    - GROSS_UP: fees are estimated from AUM, the fee rate and fund age
    """

    GRANULAR = "granular"
    GROSS_UP = "grossup"
