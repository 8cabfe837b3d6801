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

from datetime import datetime
from enum import IntEnum

from sqlalchemy import JSON, BigInteger, Boolean, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, naive_utcnow


class ReentrancyStatus(IntEnum):
    NOT_ENTERED = 1
    ENTERED = 2


class ContractState(Base):
    """Bond Ledger Contract State (singleton row)"""

    __tablename__ = "contract_state"

    # always 1
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    # owner address (ZERO_ADDRESS after renouncement)
    owner_address: Mapped[str] = mapped_column(String(42), nullable=False)
    # circuit breaker
    paused: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    # fallback recipient of purchase proceeds
    treasury_address: Mapped[str] = mapped_column(String(42), nullable=False)
    # legacy HTS manager address
    hts_manager_address: Mapped[str] = mapped_column(String(42), nullable=False)
    # escrow account of the contract
    contract_address: Mapped[str] = mapped_column(String(42), nullable=False)
    # address of the running implementation
    implementation_address: Mapped[str | None] = mapped_column(
        String(42), nullable=True
    )
    # storage schema version
    schema_version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    # id assigned to the next created bond
    next_bond_id: Mapped[int] = mapped_column(BigInteger, nullable=False, default=1)
    # critical-section flag for purchase / redemption
    reentrancy_status: Mapped[ReentrancyStatus] = mapped_column(
        Integer, nullable=False, default=ReentrancyStatus.NOT_ENTERED
    )
    # issue fees retained by the contract since the last withdrawal [tinybar]
    collected_issue_fees: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=0
    )


class ContractEvent(Base):
    """Event emitted by the Bond Ledger Contract"""

    __tablename__ = "contract_event"

    # log index
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # event name
    event: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    # event arguments (declared argument order)
    args: Mapped[dict] = mapped_column(JSON, nullable=False)
    # block timestamp of the emitting call
    block_timestamp: Mapped[int] = mapped_column(BigInteger, nullable=False)
    # datetime when the event was recorded (UTC)
    recorded_datetime: Mapped[datetime | None] = mapped_column(
        DateTime, default=naive_utcnow
    )
