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

from enum import IntEnum

from sqlalchemy import BigInteger, Integer, LargeBinary, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class BondStatus(IntEnum):
    """Bond status

    Values keep the on-chain ordinal order.
    DRAFT, IN_REVIEW and SETTLED are reserved: no operation transitions into them.
    """

    DRAFT = 0
    SUBMITTED = 1
    IN_REVIEW = 2
    APPROVED = 3
    ISSUED = 4
    MATURED = 5
    SETTLED = 6


class Bond(Base):
    """Bond Offering"""

    __tablename__ = "bond"

    # bond id (assigned from contract_state.next_bond_id)
    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    # issuer address
    issuer_address: Mapped[str] = mapped_column(String(42), nullable=False, index=True)
    # interest rate [basis points]
    interest_rate_bp: Mapped[int] = mapped_column(BigInteger, nullable=False)
    # coupon rate [basis points]
    coupon_rate_bp: Mapped[int] = mapped_column(BigInteger, nullable=False)
    # face value per unit [tinybar]
    face_value: Mapped[int] = mapped_column(BigInteger, nullable=False)
    # units offered
    available_units: Mapped[int] = mapped_column(BigInteger, nullable=False)
    # funding target [USD]
    target_usd: Mapped[int] = mapped_column(BigInteger, nullable=False)
    # duration [sec]
    duration_sec: Mapped[int] = mapped_column(BigInteger, nullable=False)
    # maturity (unix timestamp)
    maturity_timestamp: Mapped[int] = mapped_column(BigInteger, nullable=False)
    # status
    status: Mapped[BondStatus] = mapped_column(
        Integer, nullable=False, default=BondStatus.SUBMITTED
    )
    # token identifier bytes (set once at issuance)
    hts_token_id: Mapped[bytes | None] = mapped_column(LargeBinary(20), nullable=True)
    # units remaining in escrow for sale
    issued_units: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    # storage schema version of this row
    schema_version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
