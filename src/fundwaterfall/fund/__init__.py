# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Fund terms, investor snapshots and ownership resolution.
"""

from .constructs import (
    create_american_fund,
    create_custom_fund,
    create_european_fund,
    investors_from_commitments,
)
from .entities import Investor
from .ownership import (
    CommitmentRecord,
    commitments_as_of,
    ownership_from_commitments,
    resolve_ownership,
)
from .structure import FundStructure, Tier

__all__ = [
    # Models
    "FundStructure",
    "Investor",
    "Tier",
    # Ownership
    "CommitmentRecord",
    "commitments_as_of",
    "ownership_from_commitments",
    "resolve_ownership",
    # Constructs
    "create_american_fund",
    "create_custom_fund",
    "create_european_fund",
    "investors_from_commitments",
]
