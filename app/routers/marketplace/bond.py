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

from typing import Annotated, Sequence

from fastapi import APIRouter, Header, Path, Query
from fastapi.exceptions import HTTPException
from sqlalchemy import asc, desc, func, select
from web3 import Web3

from app import log
from app.database import DBSession
from app.exceptions import (
    AuthorizationError,
    ContractRevertError,
    Integer64bitLimitExceededError,
    InvalidParameterError,
    TokenServiceError,
)
from app.model import EthereumAddress, to_checksum_address
from app.model.db import Bond
from app.model.ledger import BondLedgerContract, HTSTokenId
from app.model.schema import (
    Bond as BondSchema,
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
from app.utils.check_utils import address_is_valid_address, validate_headers
from app.utils.docs_utils import get_routers_responses
from app.utils.fastapi_utils import json_response

LOG = log.get_logger()

router = APIRouter(prefix="/bonds", tags=["bond"])


# POST: /bonds
@router.post(
    "",
    operation_id="CreateBond",
    response_model=CreateBondResponse,
    responses=get_routers_responses(
        422,
        AuthorizationError,
        InvalidParameterError,
        Integer64bitLimitExceededError,
        ContractRevertError,
    ),
)
def create_bond(
    db: DBSession,
    data: CreateBondRequest,
    caller_address: Annotated[str, Header()],
):
    """Create a bond offering"""
    validate_headers(caller_address=(caller_address, address_is_valid_address))

    bond_id = BondLedgerContract(db).create_bond(
        issuer=data.issuer,
        interest_rate_bp=data.interest_rate_bp,
        coupon_rate_bp=data.coupon_rate_bp,
        face_value=data.face_value,
        available_units=data.available_units,
        target_usd=data.target_usd,
        duration_sec=data.duration_sec,
        maturity_timestamp=data.maturity_timestamp,
        tx_from=caller_address,
    )
    db.commit()

    return json_response({"bond_id": bond_id})


# GET: /bonds
@router.get(
    "",
    operation_id="ListAllBonds",
    response_model=ListAllBondsResponse,
    responses=get_routers_responses(422),
)
def list_all_bonds(
    db: DBSession,
    get_query: Annotated[ListAllBondsQuery, Query()],
):
    """List all bonds"""
    stmt = select(Bond)
    total = db.scalar(select(func.count()).select_from(stmt.subquery()))

    # Search Filter
    if get_query.issuer_address is not None:
        stmt = stmt.where(
            Bond.issuer_address == to_checksum_address(get_query.issuer_address)
        )
    if get_query.status is not None:
        stmt = stmt.where(Bond.status == get_query.status)
    count = db.scalar(select(func.count()).select_from(stmt.subquery()))

    # Sort
    if get_query.sort_order == 0:  # ASC
        stmt = stmt.order_by(asc(Bond.id))
    else:  # DESC
        stmt = stmt.order_by(desc(Bond.id))

    # Pagination
    if get_query.limit is not None:
        stmt = stmt.limit(get_query.limit)
    if get_query.offset is not None:
        stmt = stmt.offset(get_query.offset)

    _bonds: Sequence[Bond] = db.scalars(stmt).all()

    return json_response(
        {
            "result_set": {
                "count": count,
                "offset": get_query.offset,
                "limit": get_query.limit,
                "total": total,
            },
            "bonds": [__bond_response(_bond) for _bond in _bonds],
        }
    )


# GET: /bonds/{bond_id}
@router.get(
    "/{bond_id}",
    operation_id="RetrieveBond",
    response_model=BondSchema,
    responses=get_routers_responses(422, 404),
)
def retrieve_bond(db: DBSession, bond_id: Annotated[int, Path()]):
    """Retrieve the bond"""
    _bond = db.get(Bond, bond_id)
    if _bond is None:
        raise HTTPException(status_code=404, detail="bond not found")

    return json_response(__bond_response(_bond))


# GET: /bonds/{bond_id}/balances/{account_address}
@router.get(
    "/{bond_id}/balances/{account_address}",
    operation_id="RetrieveBondTokenBalance",
    response_model=BondTokenBalanceResponse,
    responses=get_routers_responses(422, 404),
)
def retrieve_bond_token_balance(
    db: DBSession,
    bond_id: Annotated[int, Path()],
    account_address: Annotated[EthereumAddress, Path()],
):
    """Retrieve the bond token balance of the account"""
    if db.get(Bond, bond_id) is None:
        raise HTTPException(status_code=404, detail="bond not found")

    balance = BondLedgerContract(db).token_balance_of(bond_id, account_address)

    return json_response(
        {
            "bond_id": bond_id,
            "account_address": to_checksum_address(account_address),
            "balance": balance,
        }
    )


# POST: /bonds/{bond_id}/approve
@router.post(
    "/{bond_id}/approve",
    operation_id="ApproveBond",
    response_model=None,
    responses=get_routers_responses(422, AuthorizationError, ContractRevertError),
)
def approve_bond(
    db: DBSession,
    bond_id: Annotated[int, Path()],
    caller_address: Annotated[str, Header()],
):
    """Approve the bond (issuer KYC must be approved)"""
    validate_headers(caller_address=(caller_address, address_is_valid_address))

    BondLedgerContract(db).approve_bond(bond_id=bond_id, tx_from=caller_address)
    db.commit()
    return


# POST: /bonds/{bond_id}/issue
@router.post(
    "/{bond_id}/issue",
    operation_id="IssueBondToken",
    response_model=IssueBondResponse,
    responses=get_routers_responses(
        422,
        AuthorizationError,
        InvalidParameterError,
        Integer64bitLimitExceededError,
        TokenServiceError,
        ContractRevertError,
    ),
)
def issue_bond_token(
    db: DBSession,
    bond_id: Annotated[int, Path()],
    data: IssueBondRequest,
    caller_address: Annotated[str, Header()],
):
    """Issue the bond token lot into the contract escrow"""
    validate_headers(caller_address=(caller_address, address_is_valid_address))

    token_id = BondLedgerContract(db).issue_bond(
        bond_id=bond_id,
        name=data.name,
        symbol=data.symbol,
        metadata=Web3.to_bytes(hexstr=data.metadata),
        amount=data.amount,
        tx_from=caller_address,
        value=data.value,
    )
    db.commit()

    return json_response(
        {
            "bond_id": bond_id,
            "hts_token_id": str(token_id),
            "token_address": token_id.address,
        }
    )


# POST: /bonds/{bond_id}/purchase
@router.post(
    "/{bond_id}/purchase",
    operation_id="PurchaseBond",
    response_model=None,
    responses=get_routers_responses(
        422,
        InvalidParameterError,
        Integer64bitLimitExceededError,
        TokenServiceError,
        ContractRevertError,
    ),
)
def purchase_bond(
    db: DBSession,
    bond_id: Annotated[int, Path()],
    data: PurchaseBondRequest,
    caller_address: Annotated[str, Header()],
):
    """Purchase bond units

    The attached value must be exactly face_value * units.
    """
    validate_headers(caller_address=(caller_address, address_is_valid_address))

    BondLedgerContract(db).buy_bond(
        bond_id=bond_id, units=data.units, tx_from=caller_address, value=data.value
    )
    db.commit()
    return


# POST: /bonds/{bond_id}/redeem
@router.post(
    "/{bond_id}/redeem",
    operation_id="RedeemBond",
    response_model=None,
    responses=get_routers_responses(
        422,
        InvalidParameterError,
        Integer64bitLimitExceededError,
        TokenServiceError,
        ContractRevertError,
    ),
)
def redeem_bond(
    db: DBSession,
    bond_id: Annotated[int, Path()],
    data: RedeemBondRequest,
    caller_address: Annotated[str, Header()],
):
    """Redeem matured bond units for principal plus interest"""
    validate_headers(caller_address=(caller_address, address_is_valid_address))

    BondLedgerContract(db).redeem_bond(
        bond_id=bond_id, units=data.units, tx_from=caller_address
    )
    db.commit()
    return


# POST: /bonds/{bond_id}/mature
@router.post(
    "/{bond_id}/mature",
    operation_id="MarkBondMature",
    response_model=None,
    responses=get_routers_responses(422, AuthorizationError, ContractRevertError),
)
def mark_bond_mature(
    db: DBSession,
    bond_id: Annotated[int, Path()],
    caller_address: Annotated[str, Header()],
):
    """Mark the bond as matured (maturity timestamp must have passed)"""
    validate_headers(caller_address=(caller_address, address_is_valid_address))

    BondLedgerContract(db).mark_mature(bond_id=bond_id, tx_from=caller_address)
    db.commit()
    return


def __bond_response(_bond: Bond) -> dict:
    token_id = (
        HTSTokenId.from_bytes(_bond.hts_token_id)
        if _bond.hts_token_id is not None
        else None
    )
    return {
        "bond_id": _bond.id,
        "issuer_address": _bond.issuer_address,
        "interest_rate_bp": _bond.interest_rate_bp,
        "coupon_rate_bp": _bond.coupon_rate_bp,
        "face_value": _bond.face_value,
        "available_units": _bond.available_units,
        "target_usd": _bond.target_usd,
        "duration_sec": _bond.duration_sec,
        "maturity_timestamp": _bond.maturity_timestamp,
        "status": _bond.status,
        "hts_token_id": str(token_id) if token_id is not None else None,
        "token_address": token_id.address if token_id is not None else None,
        "issued_units": _bond.issued_units,
    }
