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

from .account import AccountBalanceResponse
from .base import BasePaginationQuery, ResultSet, SortedPaginationQuery, SortOrder
from .bond import (
    Bond,
    BondTokenBalanceResponse,
    CreateBondRequest,
    CreateBondResponse,
    IssueBondRequest,
    IssueBondResponse,
    ListAllBondsQuery,
    ListAllBondsResponse,
    PurchaseBondRequest,
    RedeemBondRequest,
)
from .contract import (
    ContractEvent,
    ContractStateResponse,
    EmergencyWithdrawRequest,
    EmergencyWithdrawResponse,
    ListAllContractEventsQuery,
    ListAllContractEventsResponse,
    ReceiveHBARRequest,
    RenounceOwnershipRequest,
    TransferOwnershipRequest,
    UpdateHTSManagerRequest,
    UpdateTreasuryRequest,
    UpgradeContractRequest,
    UpgradeContractResponse,
)
from .issuer import IssuerResponse, RegisterIssuerRequest
