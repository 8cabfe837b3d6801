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

from typing import Callable, NamedTuple

from sqlalchemy.orm import Session

from app import log
from app.exceptions import (
    ContractRevertError,
    Integer64bitLimitExceededError,
    InvalidParameterError,
)
from app.model.db import Bond, BondStatus, Issuer
from app.model.ledger.access_control import AccessControlledContract, ContractAction
from app.model.ledger.hbar import HbarLedger
from app.model.ledger.hts import HTSBridge, HTSTokenId, LedgerTokenService, TokenService
from app.model.ledger.migration import migrate_schema
from app.model.ledger.settlement import (
    ProceedsForwarder,
    compute_redemption_payout,
    purchase_price,
)
from config import BOND_CONTRACT_ADDRESS, HTS_ISSUE_MIN_FEE, INT64_MAX, ZERO_ADDRESS

LOG = log.get_logger()


class BondRecord(NamedTuple):
    """bonds(id) in on-chain field order"""

    id: int
    issuer: str
    interest_rate_bp: int
    coupon_rate_bp: int
    face_value: int
    available_units: int
    target_usd: int
    duration_sec: int
    maturity_timestamp: int
    status: BondStatus
    hts_token_id: bytes
    issued_units: int


class IssuerRecord(NamedTuple):
    """issuers(address) in on-chain field order"""

    wallet: str
    kyc_approved: bool
    connected: bool


class BondLedgerContract(AccessControlledContract):
    """Micro-bond lifecycle contract

    Submitted -> Approved -> Issued -> Matured. Issuance mints a token lot
    into the contract escrow, purchases move tokens to buyers against an exact
    HBAR payment, and redemptions burn tokens against principal plus interest.
    """

    def __init__(
        self,
        db: Session,
        token_service: TokenService | None = None,
        hbar: HbarLedger | None = None,
        clock: Callable[[], int] | None = None,
        contract_address: str = BOND_CONTRACT_ADDRESS,
    ):
        super().__init__(db, hbar=hbar, clock=clock, contract_address=contract_address)
        self.token_service = token_service or LedgerTokenService(db)
        self.hts = HTSBridge(self.token_service)
        self.forwarder = ProceedsForwarder(self.hbar, self.contract_address)

    ###################################################
    # Issuer
    ###################################################
    def register_issuer(self, wallet: str, tx_from: str):
        """Register (or update) the caller as an issuer"""
        _issuer = self._address(tx_from, "tx_from")
        _wallet = self._address(wallet, "wallet")
        with self._transaction() as state:
            self._when_not_paused(state)
            if _wallet == ZERO_ADDRESS:
                raise ContractRevertError("110001")

            _record = self.__get_or_create_issuer(_issuer)
            _record.wallet_address = _wallet
            _record.connected = True
            self._emit("IssuerRegistered", _issuer, _wallet)
        LOG.info(f"Issuer registered: issuer={_issuer}, wallet={_wallet}")

    def approve_kyc(self, issuer: str, tx_from: str):
        self.__set_kyc(issuer, True, tx_from, ContractAction.APPROVE_KYC)

    def revoke_kyc(self, issuer: str, tx_from: str):
        self.__set_kyc(issuer, False, tx_from, ContractAction.REVOKE_KYC)

    def __set_kyc(
        self, issuer: str, approved: bool, tx_from: str, action: ContractAction
    ):
        _issuer = self._address(issuer, "issuer")
        with self._transaction():
            self._only_owner(tx_from, action)
            if _issuer == ZERO_ADDRESS:
                raise ContractRevertError("110101")

            _record = self.__get_or_create_issuer(_issuer)
            _record.kyc_approved = approved
            self._emit("KYCApproved", _issuer, approved)
        LOG.info(f"Issuer KYC updated: issuer={_issuer}, approved={approved}")

    ###################################################
    # Bond lifecycle
    ###################################################
    def create_bond(
        self,
        issuer: str,
        interest_rate_bp: int,
        coupon_rate_bp: int,
        face_value: int,
        available_units: int,
        target_usd: int,
        duration_sec: int,
        maturity_timestamp: int,
        tx_from: str,
    ) -> int:
        """Create a bond in Submitted status

        Terms are recorded as given. Their economic sanity (non-zero face
        value, maturity in the future, ...) is not checked here.

        Unlike the on-chain uint256 terms, each term is bounded to the signed
        64-bit range of the storage columns and a larger value raises
        Integer64bitLimitExceededError. This narrowing is deliberate.

        :return: bond id
        """
        _issuer = self._address(issuer, "issuer")
        terms = {
            "interest_rate_bp": interest_rate_bp,
            "coupon_rate_bp": coupon_rate_bp,
            "face_value": face_value,
            "available_units": available_units,
            "target_usd": target_usd,
            "duration_sec": duration_sec,
            "maturity_timestamp": maturity_timestamp,
        }
        for name, value in terms.items():
            self._uint(value, name, bounded=True)

        with self._transaction() as state:
            self._only_owner(tx_from, ContractAction.CREATE_BOND)
            if _issuer == ZERO_ADDRESS:
                raise ContractRevertError("120001")

            bond_id = state.next_bond_id
            state.next_bond_id = bond_id + 1

            _bond = Bond(**terms)
            _bond.id = bond_id
            _bond.issuer_address = _issuer
            _bond.status = BondStatus.SUBMITTED
            _bond.hts_token_id = None
            _bond.issued_units = 0
            _bond.schema_version = state.schema_version
            self.db.add(_bond)
            self._emit("BondCreated", bond_id, _issuer)

        LOG.info(f"Bond created: bond_id={bond_id}, issuer={_issuer}")
        return bond_id

    def approve_bond(self, bond_id: int, tx_from: str):
        with self._transaction():
            self._only_owner(tx_from, ContractAction.APPROVE_BOND)
            _bond = self.__get_bond(bond_id)
            if _bond.status not in (BondStatus.SUBMITTED, BondStatus.IN_REVIEW):
                raise ContractRevertError("120201")
            _issuer = self.db.get(Issuer, _bond.issuer_address)
            if _issuer is None or not _issuer.kyc_approved:
                raise ContractRevertError("120202")

            _bond.status = BondStatus.APPROVED
            self._emit("BondApproved", bond_id)
        LOG.info(f"Bond approved: bond_id={bond_id}")

    def issue_bond(
        self,
        bond_id: int,
        name: str,
        symbol: str,
        metadata: bytes,
        amount: int,
        tx_from: str,
        value: int = 0,
    ) -> HTSTokenId:
        """Mint the bond's token lot into the contract escrow

        The attached value is the issue fee. It stays in the contract and is
        accounted in collected_issue_fees.
        """
        if not isinstance(metadata, bytes):
            raise InvalidParameterError("metadata must be bytes")
        self._uint(amount, "amount")
        self._uint(value, "value")

        with self._transaction() as state:
            self._only_owner(tx_from, ContractAction.ISSUE_BOND)
            self._when_not_paused(state)
            self._receive_payment(tx_from, value)

            _bond = self.__get_bond(bond_id)
            if _bond.status != BondStatus.APPROVED:
                raise ContractRevertError("120301")
            if amount <= 0:
                raise ContractRevertError("120302")
            if amount != _bond.available_units:
                raise ContractRevertError("120303")
            if value < HTS_ISSUE_MIN_FEE:
                raise ContractRevertError("120304")

            token_id = self.hts.create_token(
                name=name,
                symbol=symbol,
                metadata=metadata,
                amount=amount,
                treasury=self.contract_address,
            )
            _bond.hts_token_id = token_id.to_bytes()
            _bond.issued_units = amount
            _bond.status = BondStatus.ISSUED
            state.collected_issue_fees += value
            self._emit("HTSIssued", bond_id, token_id.to_bytes(), amount)

        LOG.info(f"Bond issued: bond_id={bond_id}, token_id={token_id}, amount={amount}")
        return token_id

    def mark_mature(self, bond_id: int, tx_from: str):
        with self._transaction():
            self._only_owner(tx_from, ContractAction.MARK_MATURE)
            _bond = self.__get_bond(bond_id)
            if _bond.status != BondStatus.ISSUED:
                raise ContractRevertError("120401")
            if self.clock() < _bond.maturity_timestamp:
                raise ContractRevertError("120402")

            _bond.status = BondStatus.MATURED
            self._emit("BondMatured", bond_id)
        LOG.info(f"Bond matured: bond_id={bond_id}")

    ###################################################
    # Purchase / Redemption
    ###################################################
    def buy_bond(self, bond_id: int, units: int, tx_from: str, value: int):
        """Buy units against an exact HBAR payment

        Tokens move to the buyer and issued_units is reduced before the
        payment is forwarded to the issuer wallet (treasury as fallback).
        """
        _buyer = self._address(tx_from, "tx_from")
        self._uint(units, "units")
        self._uint(value, "value")

        with self._transaction() as state:
            with self._non_reentrant(state):
                self._when_not_paused(state)
                self._receive_payment(_buyer, value)

                _bond = self.__get_bond(bond_id)
                if _bond.status != BondStatus.ISSUED:
                    raise ContractRevertError("130001")
                if units <= 0:
                    raise ContractRevertError("130002")
                if units > _bond.issued_units:
                    raise ContractRevertError("130003")
                if value != purchase_price(_bond.face_value, units):
                    raise ContractRevertError("130004")

                token_id = HTSTokenId.from_bytes(_bond.hts_token_id)
                self.hts.transfer(token_id, self.contract_address, _buyer, units)
                _bond.issued_units -= units
                self._emit("BondPurchased", bond_id, _buyer, units, value)

                recipient, to_treasury = self.forwarder.forward_proceeds(
                    bond_id=bond_id,
                    wallet=self.__proceeds_wallet(_bond),
                    treasury=state.treasury_address,
                    amount=value,
                )
                self._emit("HBARForwarded", bond_id, recipient, value, to_treasury)

        LOG.info(
            f"Bond purchased: bond_id={bond_id}, buyer={_buyer}, units={units}, forwarded_to={recipient}"
        )

    def redeem_bond(self, bond_id: int, units: int, tx_from: str):
        """Burn matured units and pay out principal plus interest

        A failed payout reverts the whole redemption; unlike purchase there is
        no treasury fallback.
        """
        _investor = self._address(tx_from, "tx_from")
        self._uint(units, "units")

        with self._transaction() as state:
            with self._non_reentrant(state):
                self._when_not_paused(state)

                _bond = self.__get_bond(bond_id)
                if _bond.status != BondStatus.MATURED:
                    raise ContractRevertError("140001")
                if units <= 0:
                    raise ContractRevertError("140002")

                payout = compute_redemption_payout(
                    face_value=_bond.face_value,
                    units=units,
                    interest_rate_bp=_bond.interest_rate_bp,
                )
                token_id = HTSTokenId.from_bytes(_bond.hts_token_id)
                self.hts.transfer(token_id, _investor, self.contract_address, units)
                self.hts.burn(token_id, units)
                self._emit("HTSBurned", bond_id, units)

                self.forwarder.pay_out(bond_id, _investor, payout.payout)
                self._emit("BondRedeemed", bond_id, _investor, units, payout.payout)

        LOG.info(
            f"Bond redeemed: bond_id={bond_id}, investor={_investor}, units={units}, payout={payout.payout}"
        )

    ###################################################
    # Admin
    ###################################################
    def emergency_withdraw_hbar(self, to: str, tx_from: str) -> int:
        """Sweep the whole contract HBAR balance (issue fees included)"""
        _to = self._address(to, "to")
        with self._transaction() as state:
            self._only_owner(tx_from, ContractAction.EMERGENCY_WITHDRAW_HBAR)
            if _to == ZERO_ADDRESS:
                raise ContractRevertError("100601")

            amount = self.hbar.balance_of(self.contract_address)
            if not self.hbar.send(self.contract_address, _to, amount):
                raise ContractRevertError("100602")
            state.collected_issue_fees = 0
            self._emit("HBARWithdrawn", _to, amount)

        LOG.warning(f"Contract HBAR withdrawn: to={_to}, amount={amount}")
        return amount

    def set_hts_manager(self, hts_manager: str, tx_from: str):
        _hts_manager = self._address(hts_manager, "hts_manager")
        with self._transaction() as state:
            self._only_owner(tx_from, ContractAction.SET_HTS_MANAGER)
            if _hts_manager == ZERO_ADDRESS:
                raise ContractRevertError("100502")
            state.hts_manager_address = _hts_manager
            self._emit("LegacyHTSManagerUpdated", _hts_manager)

    def set_treasury(self, treasury: str, tx_from: str):
        _treasury = self._address(treasury, "treasury")
        with self._transaction() as state:
            self._only_owner(tx_from, ContractAction.SET_TREASURY)
            if _treasury == ZERO_ADDRESS:
                raise ContractRevertError("100501")
            previous_treasury = state.treasury_address
            state.treasury_address = _treasury
            self._emit("TreasuryUpdated", previous_treasury, _treasury)

    def upgrade_to_and_call(
        self, new_implementation: str, data: bytes, tx_from: str, value: int = 0
    ) -> list[int]:
        """Switch to a new implementation and migrate stored state

        :return: applied schema versions
        """
        _implementation = self._address(new_implementation, "new_implementation")
        self._uint(value, "value")
        with self._transaction() as state:
            self._only_owner(tx_from, ContractAction.UPGRADE_TO_AND_CALL)
            if _implementation == ZERO_ADDRESS:
                raise ContractRevertError("100401")
            self._receive_payment(tx_from, value)

            applied = migrate_schema(self.db, state, data)
            state.implementation_address = _implementation
            self._emit("ContractUpgraded", _implementation)

        LOG.info(
            f"Contract upgraded: implementation={_implementation}, migrations={applied}"
        )
        return applied

    def receive(self, tx_from: str, value: int):
        """Accept plain HBAR (payout liquidity top-up)"""
        _sender = self._address(tx_from, "tx_from")
        self._uint(value, "value")
        with self._transaction():
            self._receive_payment(_sender, value)

    ###################################################
    # Read
    ###################################################
    def bonds(self, bond_id: int) -> BondRecord:
        _bond = self.db.get(Bond, bond_id)
        if _bond is None:
            return BondRecord(
                0, ZERO_ADDRESS, 0, 0, 0, 0, 0, 0, 0, BondStatus.DRAFT, b"", 0
            )
        return BondRecord(
            id=_bond.id,
            issuer=_bond.issuer_address,
            interest_rate_bp=_bond.interest_rate_bp,
            coupon_rate_bp=_bond.coupon_rate_bp,
            face_value=_bond.face_value,
            available_units=_bond.available_units,
            target_usd=_bond.target_usd,
            duration_sec=_bond.duration_sec,
            maturity_timestamp=_bond.maturity_timestamp,
            status=BondStatus(_bond.status),
            hts_token_id=_bond.hts_token_id or b"",
            issued_units=_bond.issued_units,
        )

    def issuers(self, issuer: str) -> IssuerRecord:
        _issuer = self.db.get(Issuer, self._address(issuer, "issuer"))
        if _issuer is None:
            return IssuerRecord(ZERO_ADDRESS, False, False)
        return IssuerRecord(
            wallet=_issuer.wallet_address,
            kyc_approved=_issuer.kyc_approved,
            connected=_issuer.connected,
        )

    def treasury(self) -> str:
        return self._load_state().treasury_address

    def hts_manager(self) -> str:
        return self._load_state().hts_manager_address

    def collected_issue_fees(self) -> int:
        return self._load_state().collected_issue_fees

    def hbar_balance(self) -> int:
        return self.hbar.balance_of(self.contract_address)

    def token_balance_of(self, bond_id: int, account: str) -> int:
        _bond = self.db.get(Bond, bond_id)
        if _bond is None or not _bond.hts_token_id:
            return 0
        token_id = HTSTokenId.from_bytes(_bond.hts_token_id)
        return self.token_service.balance_of(
            token_id.address, self._address(account, "account")
        )

    ###################################################
    # Internal
    ###################################################
    def __get_bond(self, bond_id: int) -> Bond:
        _bond = self.db.get(Bond, bond_id) if isinstance(bond_id, int) else None
        if _bond is None:
            raise ContractRevertError("120101")
        return _bond

    def __get_or_create_issuer(self, issuer_address: str) -> Issuer:
        _issuer = self.db.get(Issuer, issuer_address)
        if _issuer is None:
            _issuer = Issuer()
            _issuer.issuer_address = issuer_address
            _issuer.wallet_address = ZERO_ADDRESS
            _issuer.kyc_approved = False
            _issuer.connected = False
            self.db.add(_issuer)
        return _issuer

    def __proceeds_wallet(self, bond: Bond) -> str:
        _issuer = self.db.get(Issuer, bond.issuer_address)
        if _issuer is None or _issuer.wallet_address == ZERO_ADDRESS:
            return bond.issuer_address
        return _issuer.wallet_address

    @staticmethod
    def _uint(value: int, name: str, bounded: bool = False) -> int:
        if not isinstance(value, int) or isinstance(value, bool) or value < 0:
            raise InvalidParameterError(f"{name} must be a non-negative integer")
        if bounded and value > INT64_MAX:
            raise Integer64bitLimitExceededError(f"{name} exceeds 64-bit range")
        return value
