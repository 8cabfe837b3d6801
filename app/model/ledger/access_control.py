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

import time
from contextlib import contextmanager
from enum import StrEnum
from typing import Callable

from sqlalchemy import select
from sqlalchemy.orm import Session
from web3 import Web3

from app import log
from app.exceptions import AuthorizationError, ContractRevertError, InvalidParameterError
from app.model import to_checksum_address
from app.model.db import ContractState, ReentrancyStatus
from app.model.ledger.events import emit_event
from app.model.ledger.hbar import HbarLedger
from config import (
    BOND_CONTRACT_ADDRESS,
    CONTRACT_SCHEMA_VERSION,
    HTS_PRECOMPILE_ADDRESS,
    ZERO_ADDRESS,
)

LOG = log.get_logger()


class ContractAction(StrEnum):
    """Owner-gated contract actions"""

    APPROVE_KYC = "approveKYC"
    REVOKE_KYC = "revokeKYC"
    CREATE_BOND = "createBond"
    APPROVE_BOND = "approveBond"
    ISSUE_BOND = "issueBond"
    MARK_MATURE = "markMature"
    PAUSE = "pause"
    UNPAUSE = "unpause"
    EMERGENCY_WITHDRAW_HBAR = "emergencyWithdrawHBAR"
    SET_HTS_MANAGER = "setHTSManager"
    SET_TREASURY = "setTreasury"
    TRANSFER_OWNERSHIP = "transferOwnership"
    RENOUNCE_OWNERSHIP = "renounceOwnership"
    UPGRADE_TO_AND_CALL = "upgradeToAndCall"


class AccessControlledContract:
    """Single-owner access control, pause switch and re-entrancy guard

    Every public operation runs in its own SAVEPOINT: on any error all of its
    writes (state, balances, events) are rolled back. Committing the outer
    transaction is the caller's responsibility.
    """

    def __init__(
        self,
        db: Session,
        hbar: HbarLedger | None = None,
        clock: Callable[[], int] | None = None,
        contract_address: str = BOND_CONTRACT_ADDRESS,
    ):
        self.db = db
        self.hbar = hbar or HbarLedger(db)
        self.clock = clock or (lambda: int(time.time()))
        self.contract_address = to_checksum_address(contract_address)

    ###################################################
    # Initialization
    ###################################################
    def initialize(
        self,
        owner: str,
        treasury: str,
        hts_manager: str = HTS_PRECOMPILE_ADDRESS,
    ) -> ContractState:
        """Create the contract state (runs once)"""
        _owner = self._address(owner, "owner")
        _treasury = self._address(treasury, "treasury")
        _hts_manager = self._address(hts_manager, "hts_manager")
        with self.db.begin_nested():
            if self.db.get(ContractState, 1) is not None:
                raise ContractRevertError("100001")
            if _owner == ZERO_ADDRESS:
                raise ContractRevertError("100201")
            if _treasury == ZERO_ADDRESS:
                raise ContractRevertError("100501")

            state = ContractState()
            state.id = 1
            state.owner_address = _owner
            state.paused = False
            state.treasury_address = _treasury
            state.hts_manager_address = _hts_manager
            state.contract_address = self.contract_address
            state.implementation_address = None
            state.schema_version = CONTRACT_SCHEMA_VERSION
            state.next_bond_id = 1
            state.reentrancy_status = ReentrancyStatus.NOT_ENTERED
            state.collected_issue_fees = 0
            self.db.add(state)
            self._emit("OwnershipTransferred", ZERO_ADDRESS, _owner)

        LOG.info(f"Contract initialized: owner={_owner}, treasury={_treasury}")
        return state

    ###################################################
    # Authorization
    ###################################################
    def is_authorized(self, caller: str, action: ContractAction) -> bool:
        """Return whether caller may perform action

        All actions in ContractAction are reserved to the owner. After
        renouncement the owner is the zero address and nobody is authorized.
        """
        if not isinstance(caller, str) or not Web3.is_address(caller):
            return False
        owner = self._load_state().owner_address
        if owner == ZERO_ADDRESS:
            return False
        return to_checksum_address(caller) == owner

    def pause(self, tx_from: str):
        """Stop pausable operations (no-op if already paused)"""
        with self._transaction() as state:
            self._only_owner(tx_from, ContractAction.PAUSE)
            if not state.paused:
                state.paused = True
                self._emit("Paused", to_checksum_address(tx_from))
                LOG.info("Contract paused")

    def unpause(self, tx_from: str):
        """Resume pausable operations (no-op if not paused)"""
        with self._transaction() as state:
            self._only_owner(tx_from, ContractAction.UNPAUSE)
            if state.paused:
                state.paused = False
                self._emit("Unpaused", to_checksum_address(tx_from))
                LOG.info("Contract unpaused")

    def transfer_ownership(self, new_owner: str, tx_from: str):
        _new_owner = self._address(new_owner, "new_owner")
        with self._transaction() as state:
            self._only_owner(tx_from, ContractAction.TRANSFER_OWNERSHIP)
            if _new_owner == ZERO_ADDRESS:
                raise ContractRevertError("100201")
            previous_owner = state.owner_address
            state.owner_address = _new_owner
            self._emit("OwnershipTransferred", previous_owner, _new_owner)
        log.auth_info(previous_owner, f"ownership transferred to {_new_owner}")

    def renounce_ownership(self, confirm_owner: str, tx_from: str):
        """Give up ownership permanently

        confirm_owner must repeat the current owner address. Afterwards every
        owner-gated operation is disabled and cannot be re-enabled.
        """
        _confirm_owner = self._address(confirm_owner, "confirm_owner")
        with self._transaction() as state:
            self._only_owner(tx_from, ContractAction.RENOUNCE_OWNERSHIP)
            if _confirm_owner != state.owner_address:
                raise ContractRevertError("100202")
            previous_owner = state.owner_address
            state.owner_address = ZERO_ADDRESS
            self._emit("OwnershipTransferred", previous_owner, ZERO_ADDRESS)
        log.auth_info(previous_owner, "ownership renounced")

    ###################################################
    # Read
    ###################################################
    def owner(self) -> str:
        return self._load_state().owner_address

    def paused(self) -> bool:
        return self._load_state().paused

    ###################################################
    # Internal
    ###################################################
    def _load_state(self, for_update: bool = False) -> ContractState:
        stmt = select(ContractState).where(ContractState.id == 1).limit(1)
        if for_update:
            stmt = stmt.with_for_update()
        state = self.db.scalars(stmt).first()
        if state is None:
            raise ContractRevertError("100002")
        return state

    @contextmanager
    def _transaction(self):
        with self.db.begin_nested():
            yield self._load_state(for_update=True)

    @contextmanager
    def _non_reentrant(self, state: ContractState):
        if state.reentrancy_status == ReentrancyStatus.ENTERED:
            raise ContractRevertError("100301")
        state.reentrancy_status = ReentrancyStatus.ENTERED
        self.db.flush()
        yield
        # On error the enclosing SAVEPOINT restores NOT_ENTERED
        state.reentrancy_status = ReentrancyStatus.NOT_ENTERED
        self.db.flush()

    def _only_owner(self, tx_from: str, action: ContractAction):
        if not self.is_authorized(tx_from, action):
            log.auth_error(str(tx_from), f"unauthorized call: {action}")
            raise AuthorizationError(f"caller is not the owner: {action}")

    @staticmethod
    def _when_not_paused(state: ContractState):
        if state.paused:
            raise ContractRevertError("100101")

    def _receive_payment(self, tx_from: str, value: int):
        if value < 0:
            raise InvalidParameterError("value must be non-negative")
        if not self.hbar.collect(tx_from, self.contract_address, value):
            raise ContractRevertError("100701")

    def _emit(self, event: str, *values):
        emit_event(self.db, self.clock(), event, *values)

    @staticmethod
    def _address(value: str, name: str) -> str:
        if not isinstance(value, str) or not Web3.is_address(value):
            raise InvalidParameterError(f"{name} is not a valid address")
        return to_checksum_address(value)
