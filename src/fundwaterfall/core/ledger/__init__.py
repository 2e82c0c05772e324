# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Cash-flow ledger: immutable capital-call and distribution events plus
read-only queries.
"""

from .ledger import CashFlowLedger
from .queries import LedgerQueries
from .records import CashFlowEvent

__all__ = [
    "CashFlowEvent",
    "CashFlowLedger",
    "LedgerQueries",
]
