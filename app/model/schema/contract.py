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

from typing import Any, Optional

from pydantic import BaseModel, Field, NonNegativeInt

from app.model import EthereumAddress, HexBytesStr
from app.model.schema.base import ResultSet, SortedPaginationQuery


############################
# COMMON
############################
class ContractEvent(BaseModel):
    """Contract event schema"""

    id: int
    event: str
    args: dict[str, Any]
    block_timestamp: int


############################
# REQUEST
############################
class ReceiveHBARRequest(BaseModel):
    """Send plain HBAR to the contract schema (REQUEST)"""

    value: NonNegativeInt = Field(..., description="HBAR attached [tinybar]")


class UpdateTreasuryRequest(BaseModel):
    """Update treasury schema (REQUEST)"""

    treasury: EthereumAddress


class UpdateHTSManagerRequest(BaseModel):
    """Update HTS manager schema (REQUEST)"""

    hts_manager: EthereumAddress


class TransferOwnershipRequest(BaseModel):
    """Transfer ownership schema (REQUEST)"""

    new_owner: EthereumAddress


class RenounceOwnershipRequest(BaseModel):
    """Renounce ownership schema (REQUEST)"""

    confirm_owner: EthereumAddress = Field(
        ..., description="Must repeat the current owner address"
    )


class UpgradeContractRequest(BaseModel):
    """Upgrade contract schema (REQUEST)"""

    new_implementation: EthereumAddress
    data: HexBytesStr = Field("0x", description="Migration call data")
    value: NonNegativeInt = Field(0, description="HBAR attached [tinybar]")


class EmergencyWithdrawRequest(BaseModel):
    """Emergency withdraw schema (REQUEST)"""

    to: EthereumAddress


class ListAllContractEventsQuery(SortedPaginationQuery):
    event: Optional[str] = Field(None, description="Event name")


############################
# RESPONSE
############################
class ContractStateResponse(BaseModel):
    """Contract state schema (RESPONSE)"""

    contract_address: str
    owner: str
    paused: bool
    treasury: str
    hts_manager: str
    implementation: Optional[str] = Field(...)
    schema_version: int
    next_bond_id: int
    collected_issue_fees: int
    hbar_balance: int


class UpgradeContractResponse(BaseModel):
    """Upgrade contract schema (RESPONSE)"""

    implementation: str
    applied_versions: list[int]


class EmergencyWithdrawResponse(BaseModel):
    """Emergency withdraw schema (RESPONSE)"""

    to: str
    amount: int


class ListAllContractEventsResponse(BaseModel):
    """List all contract events schema (RESPONSE)"""

    result_set: ResultSet
    events: list[ContractEvent]
