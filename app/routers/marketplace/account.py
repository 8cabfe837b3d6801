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

from typing import Annotated

from fastapi import APIRouter, Path

from app.database import DBSession
from app.model import EthereumAddress, to_checksum_address
from app.model.db import HbarAccount
from app.model.schema import AccountBalanceResponse
from app.utils.docs_utils import get_routers_responses
from app.utils.fastapi_utils import json_response

router = APIRouter(prefix="/accounts", tags=["account"])


# GET: /accounts/{account_address}/balance
@router.get(
    "/{account_address}/balance",
    operation_id="RetrieveAccountBalance",
    response_model=AccountBalanceResponse,
    responses=get_routers_responses(422),
)
def retrieve_account_balance(
    db: DBSession,
    account_address: Annotated[EthereumAddress, Path()],
):
    """Retrieve the HBAR balance of the account

    Unknown accounts are reported with zero balance.
    """
    _address = to_checksum_address(account_address)
    _account = db.get(HbarAccount, _address)

    return json_response(
        {
            "account_address": _address,
            "hbar_balance": _account.balance if _account is not None else 0,
            "accepts_hbar": _account.accepts_hbar if _account is not None else True,
        }
    )
