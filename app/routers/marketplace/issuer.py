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

from fastapi import APIRouter, Header, Path
from fastapi.exceptions import HTTPException

from app import log
from app.database import DBSession
from app.exceptions import (
    AuthorizationError,
    ContractRevertError,
    InvalidParameterError,
)
from app.model import EthereumAddress, to_checksum_address
from app.model.db import Issuer
from app.model.ledger import BondLedgerContract
from app.model.schema import IssuerResponse, RegisterIssuerRequest
from app.utils.check_utils import address_is_valid_address, validate_headers
from app.utils.docs_utils import get_routers_responses
from app.utils.fastapi_utils import json_response

LOG = log.get_logger()

router = APIRouter(prefix="/issuers", tags=["issuer"])


# POST: /issuers
@router.post(
    "",
    operation_id="RegisterIssuer",
    response_model=IssuerResponse,
    responses=get_routers_responses(422, InvalidParameterError, ContractRevertError),
)
def register_issuer(
    db: DBSession,
    data: RegisterIssuerRequest,
    caller_address: Annotated[str, Header()],
):
    """Register the caller as an issuer

    Registering again overwrites the wallet. The KYC flag is kept.
    """
    validate_headers(caller_address=(caller_address, address_is_valid_address))

    contract = BondLedgerContract(db)
    contract.register_issuer(wallet=data.wallet, tx_from=caller_address)
    db.commit()

    return json_response(__issuer_response(contract, caller_address))


# GET: /issuers/{issuer_address}
@router.get(
    "/{issuer_address}",
    operation_id="RetrieveIssuer",
    response_model=IssuerResponse,
    responses=get_routers_responses(422, 404),
)
def retrieve_issuer(
    db: DBSession,
    issuer_address: Annotated[EthereumAddress, Path()],
):
    """Retrieve the issuer"""
    _issuer = db.get(Issuer, to_checksum_address(issuer_address))
    if _issuer is None:
        raise HTTPException(status_code=404, detail="issuer not found")

    return json_response(
        {
            "issuer_address": _issuer.issuer_address,
            "wallet": _issuer.wallet_address,
            "kyc_approved": _issuer.kyc_approved,
            "connected": _issuer.connected,
        }
    )


# POST: /issuers/{issuer_address}/kyc/approve
@router.post(
    "/{issuer_address}/kyc/approve",
    operation_id="ApproveIssuerKYC",
    response_model=IssuerResponse,
    responses=get_routers_responses(422, AuthorizationError, ContractRevertError),
)
def approve_issuer_kyc(
    db: DBSession,
    issuer_address: Annotated[EthereumAddress, Path()],
    caller_address: Annotated[str, Header()],
):
    """Approve issuer KYC"""
    validate_headers(caller_address=(caller_address, address_is_valid_address))

    contract = BondLedgerContract(db)
    contract.approve_kyc(issuer=issuer_address, tx_from=caller_address)
    db.commit()

    return json_response(__issuer_response(contract, issuer_address))


# POST: /issuers/{issuer_address}/kyc/revoke
@router.post(
    "/{issuer_address}/kyc/revoke",
    operation_id="RevokeIssuerKYC",
    response_model=IssuerResponse,
    responses=get_routers_responses(422, AuthorizationError, ContractRevertError),
)
def revoke_issuer_kyc(
    db: DBSession,
    issuer_address: Annotated[EthereumAddress, Path()],
    caller_address: Annotated[str, Header()],
):
    """Revoke issuer KYC"""
    validate_headers(caller_address=(caller_address, address_is_valid_address))

    contract = BondLedgerContract(db)
    contract.revoke_kyc(issuer=issuer_address, tx_from=caller_address)
    db.commit()

    return json_response(__issuer_response(contract, issuer_address))


def __issuer_response(contract: BondLedgerContract, issuer_address: str) -> dict:
    _record = contract.issuers(issuer_address)
    return {
        "issuer_address": to_checksum_address(issuer_address),
        "wallet": _record.wallet,
        "kyc_approved": _record.kyc_approved,
        "connected": _record.connected,
    }
