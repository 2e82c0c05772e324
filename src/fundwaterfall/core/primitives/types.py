# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from decimal import Decimal
from typing import Annotated

from pydantic import Field

# constrained types
Money = Annotated[Decimal, Field(ge=0, decimal_places=2)]  # whole cents
SignedMoney = Annotated[Decimal, Field(decimal_places=2)]  # gains and losses
Percent = Annotated[Decimal, Field(ge=0, le=100)]  # 0-100 scale, 8 == 8%
PositiveInt = Annotated[int, Field(strict=True, ge=1)]
PositiveFloat = Annotated[float, Field(gt=0)]
