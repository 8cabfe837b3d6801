"""
Copyright BOOSTRY Co., Ltd.

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.

You may obtain a copy of the License at
http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing,
software distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.

See the License for the specific language governing permissions and
limitations under the License.

SPDX-License-Identifier: Apache-2.0
"""

from typing import Optional

from pydantic import BaseModel, Field, NonNegativeInt

from app.model import EthereumAddress, HexBytesStr
from app.model.db import BondStatus
from app.model.schema.base import ResultSet, SortedPaginationQuery


############################
# COMMON
############################
class Bond(BaseModel):
    """Bond schema"""

    bond_id: int
    issuer_address: str
    interest_rate_bp: int
    coupon_rate_bp: int
    face_value: int
    available_units: int
    target_usd: int
    duration_sec: int
    maturity_timestamp: int
    status: BondStatus
    hts_token_id: Optional[str] = Field(..., description="Token id (0.0.N)")
    token_address: Optional[str] = Field(...)
    issued_units: int


############################
# REQUEST
############################
class CreateBondRequest(BaseModel):
    """Create bond schema (REQUEST)"""

    issuer: EthereumAddress
    interest_rate_bp: NonNegativeInt
    coupon_rate_bp: NonNegativeInt
    face_value: NonNegativeInt = Field(..., description="Face value per unit [tinybar]")
    available_units: NonNegativeInt
    target_usd: NonNegativeInt
    duration_sec: NonNegativeInt
    maturity_timestamp: NonNegativeInt = Field(..., description="Unix timestamp")


class IssueBondRequest(BaseModel):
    """Issue bond token schema (REQUEST)"""

    name: str
    symbol: str
    metadata: HexBytesStr = Field(
        "0x", description="Token memo bytes (truncated to 100 bytes)"
    )
    amount: NonNegativeInt
    value: NonNegativeInt = Field(..., description="Issue fee [tinybar]")


class PurchaseBondRequest(BaseModel):
    """Purchase bond schema (REQUEST)"""

    units: NonNegativeInt
    value: NonNegativeInt = Field(
        ..., description="Payment [tinybar], must equal face_value * units"
    )


class RedeemBondRequest(BaseModel):
    """Redeem bond schema (REQUEST)"""

    units: NonNegativeInt


class ListAllBondsQuery(SortedPaginationQuery):
    issuer_address: Optional[EthereumAddress] = Field(None, description="Issuer address")
    status: Optional[BondStatus] = Field(None, description="Bond status")


############################
# RESPONSE
############################
class CreateBondResponse(BaseModel):
    """Create bond schema (RESPONSE)"""

    bond_id: int


class IssueBondResponse(BaseModel):
    """Issue bond token schema (RESPONSE)"""

    bond_id: int
    hts_token_id: str
    token_address: str


class ListAllBondsResponse(BaseModel):
    """List all bonds schema (RESPONSE)"""

    result_set: ResultSet
    bonds: list[Bond]


class BondTokenBalanceResponse(BaseModel):
    """Bond token balance schema (RESPONSE)"""

    bond_id: int
    account_address: str
    balance: int
