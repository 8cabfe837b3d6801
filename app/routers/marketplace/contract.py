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

from fastapi import APIRouter, Header, Query
from fastapi.exceptions import HTTPException
from sqlalchemy import asc, desc, func, select
from sqlalchemy.orm import Session
from web3 import Web3

from app import log
from app.database import DBSession
from app.exceptions import (
    AuthorizationError,
    ContractRevertError,
    InvalidParameterError,
)
from app.model.db import ContractEvent, ContractState
from app.model.ledger import BondLedgerContract, HbarLedger
from app.model.schema import (
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
from app.utils.check_utils import address_is_valid_address, validate_headers
from app.utils.docs_utils import get_routers_responses
from app.utils.fastapi_utils import json_response

LOG = log.get_logger()

router = APIRouter(prefix="/contract", tags=["contract"])


# GET: /contract
@router.get(
    "",
    operation_id="RetrieveContractState",
    response_model=ContractStateResponse,
    responses=get_routers_responses(404),
)
def retrieve_contract_state(db: DBSession):
    """Retrieve the bond ledger contract state"""
    _state = __get_contract_state(db)
    hbar_balance = HbarLedger(db).balance_of(_state.contract_address)

    return json_response(
        {
            "contract_address": _state.contract_address,
            "owner": _state.owner_address,
            "paused": _state.paused,
            "treasury": _state.treasury_address,
            "hts_manager": _state.hts_manager_address,
            "implementation": _state.implementation_address,
            "schema_version": _state.schema_version,
            "next_bond_id": _state.next_bond_id,
            "collected_issue_fees": _state.collected_issue_fees,
            "hbar_balance": hbar_balance,
        }
    )


# GET: /contract/events
@router.get(
    "/events",
    operation_id="ListAllContractEvents",
    response_model=ListAllContractEventsResponse,
    responses=get_routers_responses(422),
)
def list_all_contract_events(
    db: DBSession,
    get_query: Annotated[ListAllContractEventsQuery, Query()],
):
    """List all contract events"""
    stmt = select(ContractEvent)
    total = db.scalar(select(func.count()).select_from(stmt.subquery()))

    # Search Filter
    if get_query.event is not None:
        stmt = stmt.where(ContractEvent.event == get_query.event)
    count = db.scalar(select(func.count()).select_from(stmt.subquery()))

    # Sort
    if get_query.sort_order == 0:  # ASC
        stmt = stmt.order_by(asc(ContractEvent.id))
    else:  # DESC
        stmt = stmt.order_by(desc(ContractEvent.id))

    # Pagination
    if get_query.limit is not None:
        stmt = stmt.limit(get_query.limit)
    if get_query.offset is not None:
        stmt = stmt.offset(get_query.offset)

    _events: Sequence[ContractEvent] = db.scalars(stmt).all()

    return json_response(
        {
            "result_set": {
                "count": count,
                "offset": get_query.offset,
                "limit": get_query.limit,
                "total": total,
            },
            "events": [
                {
                    "id": _event.id,
                    "event": _event.event,
                    "args": _event.args,
                    "block_timestamp": _event.block_timestamp,
                }
                for _event in _events
            ],
        }
    )


# POST: /contract/pause
@router.post(
    "/pause",
    operation_id="PauseContract",
    response_model=None,
    responses=get_routers_responses(422, AuthorizationError, ContractRevertError),
)
def pause_contract(db: DBSession, caller_address: Annotated[str, Header()]):
    """Pause the contract"""
    validate_headers(caller_address=(caller_address, address_is_valid_address))

    BondLedgerContract(db).pause(tx_from=caller_address)
    db.commit()
    return


# POST: /contract/unpause
@router.post(
    "/unpause",
    operation_id="UnpauseContract",
    response_model=None,
    responses=get_routers_responses(422, AuthorizationError, ContractRevertError),
)
def unpause_contract(db: DBSession, caller_address: Annotated[str, Header()]):
    """Unpause the contract"""
    validate_headers(caller_address=(caller_address, address_is_valid_address))

    BondLedgerContract(db).unpause(tx_from=caller_address)
    db.commit()
    return


# POST: /contract/receive
@router.post(
    "/receive",
    operation_id="SendHBARToContract",
    response_model=None,
    responses=get_routers_responses(422, InvalidParameterError, ContractRevertError),
)
def send_hbar_to_contract(
    db: DBSession,
    data: ReceiveHBARRequest,
    caller_address: Annotated[str, Header()],
):
    """Send plain HBAR to the contract"""
    validate_headers(caller_address=(caller_address, address_is_valid_address))

    BondLedgerContract(db).receive(tx_from=caller_address, value=data.value)
    db.commit()
    return


# POST: /contract/treasury
@router.post(
    "/treasury",
    operation_id="UpdateTreasury",
    response_model=None,
    responses=get_routers_responses(422, AuthorizationError, ContractRevertError),
)
def update_treasury(
    db: DBSession,
    data: UpdateTreasuryRequest,
    caller_address: Annotated[str, Header()],
):
    """Update the fallback treasury"""
    validate_headers(caller_address=(caller_address, address_is_valid_address))

    BondLedgerContract(db).set_treasury(treasury=data.treasury, tx_from=caller_address)
    db.commit()
    return


# POST: /contract/hts_manager
@router.post(
    "/hts_manager",
    operation_id="UpdateHTSManager",
    response_model=None,
    responses=get_routers_responses(422, AuthorizationError, ContractRevertError),
)
def update_hts_manager(
    db: DBSession,
    data: UpdateHTSManagerRequest,
    caller_address: Annotated[str, Header()],
):
    """Update the HTS manager address"""
    validate_headers(caller_address=(caller_address, address_is_valid_address))

    BondLedgerContract(db).set_hts_manager(
        hts_manager=data.hts_manager, tx_from=caller_address
    )
    db.commit()
    return


# POST: /contract/ownership/transfer
@router.post(
    "/ownership/transfer",
    operation_id="TransferContractOwnership",
    response_model=None,
    responses=get_routers_responses(422, AuthorizationError, ContractRevertError),
)
def transfer_contract_ownership(
    db: DBSession,
    data: TransferOwnershipRequest,
    caller_address: Annotated[str, Header()],
):
    """Transfer the contract ownership"""
    validate_headers(caller_address=(caller_address, address_is_valid_address))

    BondLedgerContract(db).transfer_ownership(
        new_owner=data.new_owner, tx_from=caller_address
    )
    db.commit()
    return


# POST: /contract/ownership/renounce
@router.post(
    "/ownership/renounce",
    operation_id="RenounceContractOwnership",
    response_model=None,
    responses=get_routers_responses(422, AuthorizationError, ContractRevertError),
)
def renounce_contract_ownership(
    db: DBSession,
    data: RenounceOwnershipRequest,
    caller_address: Annotated[str, Header()],
):
    """Renounce the contract ownership

    All owner-gated operations are disabled permanently afterwards.
    """
    validate_headers(caller_address=(caller_address, address_is_valid_address))

    BondLedgerContract(db).renounce_ownership(
        confirm_owner=data.confirm_owner, tx_from=caller_address
    )
    db.commit()
    return


# POST: /contract/upgrade
@router.post(
    "/upgrade",
    operation_id="UpgradeContract",
    response_model=UpgradeContractResponse,
    responses=get_routers_responses(
        422, AuthorizationError, InvalidParameterError, ContractRevertError
    ),
)
def upgrade_contract(
    db: DBSession,
    data: UpgradeContractRequest,
    caller_address: Annotated[str, Header()],
):
    """Upgrade the contract implementation and migrate stored state"""
    validate_headers(caller_address=(caller_address, address_is_valid_address))

    applied_versions = BondLedgerContract(db).upgrade_to_and_call(
        new_implementation=data.new_implementation,
        data=Web3.to_bytes(hexstr=data.data),
        tx_from=caller_address,
        value=data.value,
    )
    db.commit()

    return json_response(
        {
            "implementation": Web3.to_checksum_address(data.new_implementation),
            "applied_versions": applied_versions,
        }
    )


# POST: /contract/emergency_withdraw
@router.post(
    "/emergency_withdraw",
    operation_id="EmergencyWithdrawHBAR",
    response_model=EmergencyWithdrawResponse,
    responses=get_routers_responses(422, AuthorizationError, ContractRevertError),
)
def emergency_withdraw_hbar(
    db: DBSession,
    data: EmergencyWithdrawRequest,
    caller_address: Annotated[str, Header()],
):
    """Withdraw the whole contract HBAR balance"""
    validate_headers(caller_address=(caller_address, address_is_valid_address))

    amount = BondLedgerContract(db).emergency_withdraw_hbar(
        to=data.to, tx_from=caller_address
    )
    db.commit()

    return json_response({"to": data.to, "amount": amount})


def __get_contract_state(db: Session) -> ContractState:
    _state = db.scalars(select(ContractState).limit(1)).first()
    if _state is None:
        raise HTTPException(status_code=404, detail="contract is not initialized")
    return _state
