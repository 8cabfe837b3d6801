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

import pytest
from sqlalchemy import select

from app.exceptions import (
    AuthorizationError,
    ContractRevertError,
    Integer64bitLimitExceededError,
    InvalidParameterError,
    TokenServiceError,
)
from app.model.db import (
    Bond,
    BondStatus,
    ContractEvent,
    ContractState,
    HTSToken,
    Issuer,
)
from app.model.ledger import HTSResponseCode, HTSTokenId
from config import HTS_ISSUE_MIN_FEE, INT64_MAX, ZERO_ADDRESS
from tests.account_config import default_account
from tests.utils.ledger_utils import LedgerTestUtils

OWNER = default_account("owner")
TREASURY = default_account("treasury")
ISSUER = default_account("issuer")
ISSUER_WALLET = default_account("issuer_wallet")
INVESTOR1 = default_account("investor1")
INVESTOR2 = default_account("investor2")
OTHER = default_account("other")


def get_events(db, event: str) -> list[dict]:
    _events = db.scalars(
        select(ContractEvent)
        .where(ContractEvent.event == event)
        .order_by(ContractEvent.id)
    ).all()
    return [_event.args for _event in _events]


def token_address_of(contract, bond_id: int) -> str:
    return HTSTokenId.from_bytes(contract.bonds(bond_id).hts_token_id).address


class TestRegisterIssuer:
    ###########################################################################
    # Normal Case
    ###########################################################################

    # <Normal_1>
    def test_normal_1(self, db, contract):
        contract.register_issuer(wallet=ISSUER_WALLET, tx_from=ISSUER)
        db.commit()

        # assertion
        assert contract.issuers(ISSUER) == (ISSUER_WALLET, False, True)
        assert get_events(db, "IssuerRegistered") == [
            {"issuer": ISSUER, "wallet": ISSUER_WALLET}
        ]

    # <Normal_2>
    # Re-registration overwrites the wallet and keeps KYC
    def test_normal_2(self, db, contract):
        contract.register_issuer(wallet=ISSUER_WALLET, tx_from=ISSUER)
        contract.approve_kyc(issuer=ISSUER, tx_from=OWNER)
        contract.register_issuer(wallet=OTHER, tx_from=ISSUER)
        db.commit()

        # assertion
        _issuer = contract.issuers(ISSUER)
        assert _issuer.wallet == OTHER
        assert _issuer.kyc_approved is True
        assert _issuer.connected is True
        assert len(get_events(db, "IssuerRegistered")) == 2

    # <Normal_3>
    # Lowercase addresses are normalized
    def test_normal_3(self, db, contract):
        contract.register_issuer(
            wallet=default_account("issuer_wallet").lower(), tx_from=ISSUER.lower()
        )
        db.commit()

        # assertion
        assert db.get(Issuer, ISSUER).wallet_address == ISSUER_WALLET

    ###########################################################################
    # Error Case
    ###########################################################################

    # <Error_1>
    # Wallet is the zero address
    def test_error_1(self, db, contract):
        with pytest.raises(ContractRevertError) as exc_info:
            contract.register_issuer(wallet=ZERO_ADDRESS, tx_from=ISSUER)

        # assertion
        assert exc_info.value.code == 110001
        assert db.get(Issuer, ISSUER) is None
        assert get_events(db, "IssuerRegistered") == []

    # <Error_2>
    # Paused
    def test_error_2(self, db, contract):
        contract.pause(tx_from=OWNER)

        with pytest.raises(ContractRevertError) as exc_info:
            contract.register_issuer(wallet=ISSUER_WALLET, tx_from=ISSUER)

        # assertion
        assert exc_info.value.code == 100101
        assert db.get(Issuer, ISSUER) is None

    # <Error_3>
    # Invalid address
    def test_error_3(self, db, contract):
        with pytest.raises(InvalidParameterError):
            contract.register_issuer(wallet="0x1234", tx_from=ISSUER)


class TestApproveKYC:
    ###########################################################################
    # Normal Case
    ###########################################################################

    # <Normal_1>
    def test_normal_1(self, db, contract):
        contract.register_issuer(wallet=ISSUER_WALLET, tx_from=ISSUER)
        contract.approve_kyc(issuer=ISSUER, tx_from=OWNER)
        db.commit()

        # assertion
        assert contract.issuers(ISSUER).kyc_approved is True
        assert get_events(db, "KYCApproved") == [{"issuer": ISSUER, "approved": True}]

    # <Normal_2>
    # Unregistered issuer
    def test_normal_2(self, db, contract):
        contract.approve_kyc(issuer=OTHER, tx_from=OWNER)
        db.commit()

        # assertion
        assert contract.issuers(OTHER) == (ZERO_ADDRESS, True, False)

    # <Normal_3>
    # Not gated by pause
    def test_normal_3(self, db, contract):
        contract.pause(tx_from=OWNER)
        contract.approve_kyc(issuer=ISSUER, tx_from=OWNER)
        db.commit()

        # assertion
        assert contract.issuers(ISSUER).kyc_approved is True

    ###########################################################################
    # Error Case
    ###########################################################################

    # <Error_1>
    # Caller is not the owner
    def test_error_1(self, db, contract):
        with pytest.raises(AuthorizationError):
            contract.approve_kyc(issuer=ISSUER, tx_from=ISSUER)

        # assertion
        assert contract.issuers(ISSUER).kyc_approved is False
        assert get_events(db, "KYCApproved") == []

    # <Error_2>
    # Issuer is the zero address
    def test_error_2(self, db, contract):
        with pytest.raises(ContractRevertError) as exc_info:
            contract.approve_kyc(issuer=ZERO_ADDRESS, tx_from=OWNER)

        # assertion
        assert exc_info.value.code == 110101


class TestRevokeKYC:
    ###########################################################################
    # Normal Case
    ###########################################################################

    # <Normal_1>
    def test_normal_1(self, db, contract):
        contract.approve_kyc(issuer=ISSUER, tx_from=OWNER)
        contract.revoke_kyc(issuer=ISSUER, tx_from=OWNER)
        db.commit()

        # assertion
        assert contract.issuers(ISSUER).kyc_approved is False
        assert get_events(db, "KYCApproved") == [
            {"issuer": ISSUER, "approved": True},
            {"issuer": ISSUER, "approved": False},
        ]

    ###########################################################################
    # Error Case
    ###########################################################################

    # <Error_1>
    # Caller is not the owner
    def test_error_1(self, db, contract):
        contract.approve_kyc(issuer=ISSUER, tx_from=OWNER)

        with pytest.raises(AuthorizationError):
            contract.revoke_kyc(issuer=ISSUER, tx_from=OTHER)

        # assertion
        assert contract.issuers(ISSUER).kyc_approved is True

    # <Error_2>
    # Issuer is the zero address
    def test_error_2(self, db, contract):
        with pytest.raises(ContractRevertError) as exc_info:
            contract.revoke_kyc(issuer=ZERO_ADDRESS, tx_from=OWNER)

        # assertion
        assert exc_info.value.code == 110101


class TestCreateBond:
    terms = {
        "interest_rate_bp": 500,
        "coupon_rate_bp": 250,
        "face_value": 100,
        "available_units": 1000,
        "target_usd": 5000,
        "duration_sec": 31536000,
        "maturity_timestamp": 1735689600,
    }

    ###########################################################################
    # Normal Case
    ###########################################################################

    # <Normal_1>
    def test_normal_1(self, db, contract):
        bond_id = contract.create_bond(issuer=ISSUER, tx_from=OWNER, **self.terms)
        db.commit()

        # assertion
        assert bond_id == 1
        assert contract.bonds(1) == (
            1,
            ISSUER,
            500,
            250,
            100,
            1000,
            5000,
            31536000,
            1735689600,
            BondStatus.SUBMITTED,
            b"",
            0,
        )
        assert get_events(db, "BondCreated") == [{"bondId": 1, "issuer": ISSUER}]

    # <Normal_2>
    # Ids are sequential
    def test_normal_2(self, db, contract):
        bond_id_1 = contract.create_bond(issuer=ISSUER, tx_from=OWNER, **self.terms)
        bond_id_2 = contract.create_bond(issuer=OTHER, tx_from=OWNER, **self.terms)
        db.commit()

        # assertion
        assert (bond_id_1, bond_id_2) == (1, 2)
        assert db.get(ContractState, 1).next_bond_id == 3

    # <Normal_3>
    # Not gated by pause; 64-bit maximum is accepted
    def test_normal_3(self, db, contract):
        contract.pause(tx_from=OWNER)
        terms = dict(self.terms, face_value=INT64_MAX)
        bond_id = contract.create_bond(issuer=ISSUER, tx_from=OWNER, **terms)
        db.commit()

        # assertion
        assert contract.bonds(bond_id).face_value == INT64_MAX

    ###########################################################################
    # Error Case
    ###########################################################################

    # <Error_1>
    # Caller is not the owner
    def test_error_1(self, db, contract):
        with pytest.raises(AuthorizationError):
            contract.create_bond(issuer=ISSUER, tx_from=ISSUER, **self.terms)

        # assertion
        assert db.get(Bond, 1) is None
        assert db.get(ContractState, 1).next_bond_id == 1

    # <Error_2>
    # Issuer is the zero address
    def test_error_2(self, db, contract):
        with pytest.raises(ContractRevertError) as exc_info:
            contract.create_bond(issuer=ZERO_ADDRESS, tx_from=OWNER, **self.terms)

        # assertion
        assert exc_info.value.code == 120001
        assert db.get(ContractState, 1).next_bond_id == 1

    # <Error_3>
    # Term exceeds 64-bit storage width
    def test_error_3(self, db, contract):
        terms = dict(self.terms, available_units=INT64_MAX + 1)
        with pytest.raises(Integer64bitLimitExceededError):
            contract.create_bond(issuer=ISSUER, tx_from=OWNER, **terms)

        # assertion
        assert db.get(Bond, 1) is None

    # <Error_4>
    # Negative term
    def test_error_4(self, db, contract):
        terms = dict(self.terms, face_value=-1)
        with pytest.raises(InvalidParameterError):
            contract.create_bond(issuer=ISSUER, tx_from=OWNER, **terms)

    # <Error_5>
    # Every term is bounded to the 64-bit storage width
    @pytest.mark.parametrize("name", list(terms))
    def test_error_5(self, db, contract, name):
        terms = dict(self.terms, **{name: INT64_MAX + 1})
        with pytest.raises(Integer64bitLimitExceededError):
            contract.create_bond(issuer=ISSUER, tx_from=OWNER, **terms)

        # assertion
        assert db.get(Bond, 1) is None
        assert db.get(ContractState, 1).next_bond_id == 1


class TestApproveBond:
    ###########################################################################
    # Normal Case
    ###########################################################################

    # <Normal_1>
    def test_normal_1(self, db, contract):
        bond_id = LedgerTestUtils.create_bond(contract, approve=False)
        contract.approve_bond(bond_id=bond_id, tx_from=OWNER)
        db.commit()

        # assertion
        assert contract.bonds(bond_id).status == BondStatus.APPROVED
        assert get_events(db, "BondApproved") == [{"bondId": bond_id}]

    # <Normal_2>
    # Bond in review can be approved
    def test_normal_2(self, db, contract):
        bond_id = LedgerTestUtils.create_bond(contract, approve=False)
        db.get(Bond, bond_id).status = BondStatus.IN_REVIEW
        db.commit()

        contract.approve_bond(bond_id=bond_id, tx_from=OWNER)
        db.commit()

        # assertion
        assert contract.bonds(bond_id).status == BondStatus.APPROVED
        assert get_events(db, "BondApproved") == [{"bondId": bond_id}]

    ###########################################################################
    # Error Case
    ###########################################################################

    # <Error_1>
    # Issuer KYC is not approved
    def test_error_1(self, db, contract):
        contract.register_issuer(wallet=ISSUER_WALLET, tx_from=ISSUER)
        bond_id = contract.create_bond(
            issuer=ISSUER, tx_from=OWNER, **TestCreateBond.terms
        )

        with pytest.raises(ContractRevertError) as exc_info:
            contract.approve_bond(bond_id=bond_id, tx_from=OWNER)

        # assertion
        assert exc_info.value.code == 120202
        assert contract.bonds(bond_id).status == BondStatus.SUBMITTED

    # <Error_2>
    # Issuer KYC was revoked after creation
    def test_error_2(self, db, contract):
        bond_id = LedgerTestUtils.create_bond(contract, approve=False)
        contract.revoke_kyc(issuer=ISSUER, tx_from=OWNER)

        with pytest.raises(ContractRevertError) as exc_info:
            contract.approve_bond(bond_id=bond_id, tx_from=OWNER)

        # assertion
        assert exc_info.value.code == 120202

    # <Error_3>
    # Already approved
    def test_error_3(self, db, contract):
        bond_id = LedgerTestUtils.create_bond(contract)

        with pytest.raises(ContractRevertError) as exc_info:
            contract.approve_bond(bond_id=bond_id, tx_from=OWNER)

        # assertion
        assert exc_info.value.code == 120201

    # <Error_4>
    # Bond does not exist
    def test_error_4(self, db, contract):
        with pytest.raises(ContractRevertError) as exc_info:
            contract.approve_bond(bond_id=99, tx_from=OWNER)

        # assertion
        assert exc_info.value.code == 120101

    # <Error_5>
    # Caller is not the owner
    def test_error_5(self, db, contract):
        bond_id = LedgerTestUtils.create_bond(contract, approve=False)

        with pytest.raises(AuthorizationError):
            contract.approve_bond(bond_id=bond_id, tx_from=ISSUER)

    # <Error_6>
    # Bond is in a status approveBond does not accept
    @pytest.mark.parametrize("status", [BondStatus.DRAFT, BondStatus.SETTLED])
    def test_error_6(self, db, contract, status):
        bond_id = LedgerTestUtils.create_bond(contract, approve=False)
        db.get(Bond, bond_id).status = status
        db.commit()

        with pytest.raises(ContractRevertError) as exc_info:
            contract.approve_bond(bond_id=bond_id, tx_from=OWNER)

        # assertion
        assert exc_info.value.code == 120201
        assert contract.bonds(bond_id).status == status
        assert get_events(db, "BondApproved") == []


class TestIssueBond:
    ###########################################################################
    # Normal Case
    ###########################################################################

    # <Normal_1>
    def test_normal_1(self, db, contract):
        bond_id = LedgerTestUtils.create_bond(contract)
        contract.hbar.credit(OWNER, HTS_ISSUE_MIN_FEE)

        token_id = contract.issue_bond(
            bond_id=bond_id,
            name="Micro Bond",
            symbol="MBOND",
            metadata=b"lot-1",
            amount=1000,
            tx_from=OWNER,
            value=HTS_ISSUE_MIN_FEE,
        )
        db.commit()

        # assertion
        _bond = contract.bonds(bond_id)
        assert _bond.status == BondStatus.ISSUED
        assert _bond.issued_units == 1000
        assert _bond.hts_token_id == token_id.to_bytes()
        assert str(token_id) == "0.0.1"

        token_address = token_id.address
        assert contract.token_service.total_supply(token_address) == 1000
        assert contract.token_balance_of(bond_id, contract.contract_address) == 1000

        assert contract.hbar.balance_of(OWNER) == 0
        assert contract.hbar_balance() == HTS_ISSUE_MIN_FEE
        assert contract.collected_issue_fees() == HTS_ISSUE_MIN_FEE

        assert get_events(db, "HTSIssued") == [
            {
                "bondId": bond_id,
                "htsTokenId": "0x" + token_id.to_bytes().hex(),
                "amount": 1000,
            }
        ]

    # <Normal_2>
    # Memo is silently truncated to 100 bytes
    def test_normal_2(self, db, contract):
        bond_id = LedgerTestUtils.create_bond(contract)
        contract.hbar.credit(OWNER, HTS_ISSUE_MIN_FEE)

        token_id = contract.issue_bond(
            bond_id=bond_id,
            name="Micro Bond",
            symbol="MBOND",
            metadata=b"a" * 150,
            amount=1000,
            tx_from=OWNER,
            value=HTS_ISSUE_MIN_FEE,
        )
        db.commit()

        # assertion
        _token = db.scalars(
            select(HTSToken).where(HTSToken.token_address == token_id.address)
        ).first()
        assert _token.memo == "a" * 100

    # <Normal_3>
    # Fee above the minimum is accepted and retained
    def test_normal_3(self, db, contract):
        bond_id = LedgerTestUtils.create_bond(contract)
        contract.hbar.credit(OWNER, HTS_ISSUE_MIN_FEE * 2)

        contract.issue_bond(
            bond_id=bond_id,
            name="Micro Bond",
            symbol="MBOND",
            metadata=b"",
            amount=1000,
            tx_from=OWNER,
            value=HTS_ISSUE_MIN_FEE * 2,
        )
        db.commit()

        # assertion
        assert contract.collected_issue_fees() == HTS_ISSUE_MIN_FEE * 2

    ###########################################################################
    # Error Case
    ###########################################################################

    def _issue(self, contract, bond_id, amount=1000, value=HTS_ISSUE_MIN_FEE, **kwargs):
        params = {
            "bond_id": bond_id,
            "name": "Micro Bond",
            "symbol": "MBOND",
            "metadata": b"",
            "amount": amount,
            "tx_from": OWNER,
            "value": value,
        }
        params.update(kwargs)
        return contract.issue_bond(**params)

    # <Error_1>
    # Bond is not approved: payment is returned
    def test_error_1(self, db, contract):
        bond_id = LedgerTestUtils.create_bond(contract, approve=False)
        contract.hbar.credit(OWNER, HTS_ISSUE_MIN_FEE)

        with pytest.raises(ContractRevertError) as exc_info:
            self._issue(contract, bond_id)

        # assertion
        assert exc_info.value.code == 120301
        assert contract.hbar.balance_of(OWNER) == HTS_ISSUE_MIN_FEE
        assert contract.hbar_balance() == 0

    # <Error_2>
    # Amount is zero
    def test_error_2(self, db, contract):
        bond_id = LedgerTestUtils.create_bond(contract)
        contract.hbar.credit(OWNER, HTS_ISSUE_MIN_FEE)

        with pytest.raises(ContractRevertError) as exc_info:
            self._issue(contract, bond_id, amount=0)

        # assertion
        assert exc_info.value.code == 120302

    # <Error_3>
    # Amount differs from available units
    def test_error_3(self, db, contract):
        bond_id = LedgerTestUtils.create_bond(contract)
        contract.hbar.credit(OWNER, HTS_ISSUE_MIN_FEE)

        with pytest.raises(ContractRevertError) as exc_info:
            self._issue(contract, bond_id, amount=999)

        # assertion
        assert exc_info.value.code == 120303
        assert contract.bonds(bond_id).status == BondStatus.APPROVED

    # <Error_4>
    # Fee below the minimum
    def test_error_4(self, db, contract):
        bond_id = LedgerTestUtils.create_bond(contract)
        contract.hbar.credit(OWNER, HTS_ISSUE_MIN_FEE)

        with pytest.raises(ContractRevertError) as exc_info:
            self._issue(contract, bond_id, value=HTS_ISSUE_MIN_FEE - 1)

        # assertion
        assert exc_info.value.code == 120304
        assert contract.hbar.balance_of(OWNER) == HTS_ISSUE_MIN_FEE

    # <Error_5>
    # Paused
    def test_error_5(self, db, contract):
        bond_id = LedgerTestUtils.create_bond(contract)
        contract.hbar.credit(OWNER, HTS_ISSUE_MIN_FEE)
        contract.pause(tx_from=OWNER)

        with pytest.raises(ContractRevertError) as exc_info:
            self._issue(contract, bond_id)

        # assertion
        assert exc_info.value.code == 100101

    # <Error_6>
    # Caller is not the owner
    def test_error_6(self, db, contract):
        bond_id = LedgerTestUtils.create_bond(contract)
        contract.hbar.credit(ISSUER, HTS_ISSUE_MIN_FEE)

        with pytest.raises(AuthorizationError):
            self._issue(contract, bond_id, tx_from=ISSUER)

        # assertion
        assert contract.hbar.balance_of(ISSUER) == HTS_ISSUE_MIN_FEE

    # <Error_7>
    # Token service rejects the request: everything is rolled back
    def test_error_7(self, db, contract):
        bond_id = LedgerTestUtils.create_bond(contract)
        contract.hbar.credit(OWNER, HTS_ISSUE_MIN_FEE)

        with pytest.raises(TokenServiceError) as exc_info:
            self._issue(contract, bond_id, symbol="")

        # assertion
        assert exc_info.value.response_code == HTSResponseCode.MISSING_TOKEN_SYMBOL
        _bond = contract.bonds(bond_id)
        assert _bond.status == BondStatus.APPROVED
        assert _bond.hts_token_id == b""
        assert _bond.issued_units == 0
        assert contract.hbar.balance_of(OWNER) == HTS_ISSUE_MIN_FEE
        assert contract.collected_issue_fees() == 0
        assert get_events(db, "HTSIssued") == []

    # <Error_8>
    # Caller cannot cover the attached payment
    def test_error_8(self, db, contract):
        bond_id = LedgerTestUtils.create_bond(contract)

        with pytest.raises(ContractRevertError) as exc_info:
            self._issue(contract, bond_id)

        # assertion
        assert exc_info.value.code == 100701

    # <Error_9>
    # Issued twice
    def test_error_9(self, db, contract):
        bond_id = LedgerTestUtils.create_issued_bond(db, contract)
        contract.hbar.credit(OWNER, HTS_ISSUE_MIN_FEE)

        with pytest.raises(ContractRevertError) as exc_info:
            self._issue(contract, bond_id)

        # assertion
        assert exc_info.value.code == 120301


class TestBuyBond:
    ###########################################################################
    # Normal Case
    ###########################################################################

    # <Normal_1>
    def test_normal_1(self, db, contract):
        bond_id = LedgerTestUtils.create_issued_bond(db, contract)
        contract.hbar.credit(INVESTOR1, 1000)

        contract.buy_bond(bond_id=bond_id, units=10, tx_from=INVESTOR1, value=1000)
        db.commit()

        # assertion
        assert contract.bonds(bond_id).issued_units == 990
        assert contract.token_balance_of(bond_id, INVESTOR1) == 10
        assert contract.token_balance_of(bond_id, contract.contract_address) == 990
        assert contract.hbar.balance_of(INVESTOR1) == 0
        assert contract.hbar.balance_of(ISSUER_WALLET) == 1000
        assert contract.hbar_balance() == HTS_ISSUE_MIN_FEE

        assert get_events(db, "BondPurchased") == [
            {"bondId": bond_id, "buyer": INVESTOR1, "units": 10, "amountPaid": 1000}
        ]
        assert get_events(db, "HBARForwarded") == [
            {"bondId": bond_id, "to": ISSUER_WALLET, "amount": 1000, "toTreasury": False}
        ]

    # <Normal_2>
    # Issuer wallet rejects HBAR: proceeds go to the treasury
    def test_normal_2(self, db, contract):
        bond_id = LedgerTestUtils.create_issued_bond(db, contract)
        contract.hbar.set_accepts_hbar(ISSUER_WALLET, False)
        contract.hbar.credit(INVESTOR1, 500)

        contract.buy_bond(bond_id=bond_id, units=5, tx_from=INVESTOR1, value=500)
        db.commit()

        # assertion
        assert contract.hbar.balance_of(ISSUER_WALLET) == 0
        assert contract.hbar.balance_of(TREASURY) == 500
        assert contract.token_balance_of(bond_id, INVESTOR1) == 5
        assert get_events(db, "HBARForwarded") == [
            {"bondId": bond_id, "to": TREASURY, "amount": 500, "toTreasury": True}
        ]

    # <Normal_3>
    # Issuer wallet re-enters on receipt: the nested call is rejected
    # and the proceeds fall back to the treasury
    def test_normal_3(self, db, contract):
        bond_id = LedgerTestUtils.create_issued_bond(db, contract)
        contract.hbar.credit(ISSUER_WALLET, 100)
        contract.hbar.credit(INVESTOR1, 100)

        reentry_errors = []

        def reenter(sender: str, amount: int):
            try:
                contract.buy_bond(
                    bond_id=bond_id, units=1, tx_from=ISSUER_WALLET, value=100
                )
            except ContractRevertError as err:
                reentry_errors.append(err.code)
                raise

        contract.hbar.register_receive_hook(ISSUER_WALLET, reenter)
        contract.buy_bond(bond_id=bond_id, units=1, tx_from=INVESTOR1, value=100)
        db.commit()

        # assertion
        assert reentry_errors == [100301]
        assert contract.bonds(bond_id).issued_units == 999
        assert contract.token_balance_of(bond_id, ISSUER_WALLET) == 0
        assert contract.hbar.balance_of(ISSUER_WALLET) == 100
        assert contract.hbar.balance_of(TREASURY) == 100
        assert get_events(db, "HBARForwarded")[-1]["toTreasury"] is True
        assert len(get_events(db, "BondPurchased")) == 1
        assert db.get(ContractState, 1).reentrancy_status == 1

    # <Normal_4>
    # Issuer without a registered wallet: proceeds go to the issuer address
    def test_normal_4(self, db, contract):
        contract.approve_kyc(issuer=OTHER, tx_from=OWNER)
        bond_id = contract.create_bond(
            issuer=OTHER, tx_from=OWNER, **TestCreateBond.terms
        )
        contract.approve_bond(bond_id=bond_id, tx_from=OWNER)
        contract.hbar.credit(OWNER, HTS_ISSUE_MIN_FEE)
        contract.issue_bond(
            bond_id=bond_id,
            name="Micro Bond",
            symbol="MBOND",
            metadata=b"",
            amount=1000,
            tx_from=OWNER,
            value=HTS_ISSUE_MIN_FEE,
        )
        contract.hbar.credit(INVESTOR1, 100)

        contract.buy_bond(bond_id=bond_id, units=1, tx_from=INVESTOR1, value=100)
        db.commit()

        # assertion
        assert contract.hbar.balance_of(OTHER) == 100
        assert get_events(db, "HBARForwarded")[-1]["to"] == OTHER

    # <Normal_5>
    # Issued units drain to zero across buyers
    def test_normal_5(self, db, contract):
        bond_id = LedgerTestUtils.create_issued_bond(db, contract)
        LedgerTestUtils.buy(db, contract, bond_id, 600, INVESTOR1)
        LedgerTestUtils.buy(db, contract, bond_id, 400, INVESTOR2)

        # assertion
        assert contract.bonds(bond_id).issued_units == 0
        assert contract.token_balance_of(bond_id, INVESTOR1) == 600
        assert contract.token_balance_of(bond_id, INVESTOR2) == 400
        assert contract.token_balance_of(bond_id, contract.contract_address) == 0

        contract.hbar.credit(INVESTOR1, 100)
        with pytest.raises(ContractRevertError) as exc_info:
            contract.buy_bond(bond_id=bond_id, units=1, tx_from=INVESTOR1, value=100)
        assert exc_info.value.code == 130003

    ###########################################################################
    # Error Case
    ###########################################################################

    # <Error_1>
    # Bond is not issued
    def test_error_1(self, db, contract):
        bond_id = LedgerTestUtils.create_bond(contract)
        contract.hbar.credit(INVESTOR1, 100)

        with pytest.raises(ContractRevertError) as exc_info:
            contract.buy_bond(bond_id=bond_id, units=1, tx_from=INVESTOR1, value=100)

        # assertion
        assert exc_info.value.code == 130001
        assert contract.hbar.balance_of(INVESTOR1) == 100

    # <Error_2>
    # Units is zero
    def test_error_2(self, db, contract):
        bond_id = LedgerTestUtils.create_issued_bond(db, contract)

        with pytest.raises(ContractRevertError) as exc_info:
            contract.buy_bond(bond_id=bond_id, units=0, tx_from=INVESTOR1, value=0)

        # assertion
        assert exc_info.value.code == 130002

    # <Error_3>
    # Units exceed issued units
    def test_error_3(self, db, contract):
        bond_id = LedgerTestUtils.create_issued_bond(db, contract)
        contract.hbar.credit(INVESTOR1, 100100)

        with pytest.raises(ContractRevertError) as exc_info:
            contract.buy_bond(
                bond_id=bond_id, units=1001, tx_from=INVESTOR1, value=100100
            )

        # assertion
        assert exc_info.value.code == 130003

    # <Error_4>
    # Overpayment
    def test_error_4(self, db, contract):
        bond_id = LedgerTestUtils.create_issued_bond(db, contract)
        contract.hbar.credit(INVESTOR1, 1001)

        with pytest.raises(ContractRevertError) as exc_info:
            contract.buy_bond(bond_id=bond_id, units=10, tx_from=INVESTOR1, value=1001)

        # assertion
        assert exc_info.value.code == 130004
        assert contract.hbar.balance_of(INVESTOR1) == 1001
        assert contract.bonds(bond_id).issued_units == 1000

    # <Error_5>
    # Underpayment
    def test_error_5(self, db, contract):
        bond_id = LedgerTestUtils.create_issued_bond(db, contract)
        contract.hbar.credit(INVESTOR1, 999)

        with pytest.raises(ContractRevertError) as exc_info:
            contract.buy_bond(bond_id=bond_id, units=10, tx_from=INVESTOR1, value=999)

        # assertion
        assert exc_info.value.code == 130004
        assert contract.hbar.balance_of(INVESTOR1) == 999

    # <Error_6>
    # Paused
    def test_error_6(self, db, contract):
        bond_id = LedgerTestUtils.create_issued_bond(db, contract)
        contract.hbar.credit(INVESTOR1, 100)
        contract.pause(tx_from=OWNER)

        with pytest.raises(ContractRevertError) as exc_info:
            contract.buy_bond(bond_id=bond_id, units=1, tx_from=INVESTOR1, value=100)

        # assertion
        assert exc_info.value.code == 100101

        # Resume after unpause
        contract.unpause(tx_from=OWNER)
        contract.buy_bond(bond_id=bond_id, units=1, tx_from=INVESTOR1, value=100)
        assert contract.token_balance_of(bond_id, INVESTOR1) == 1

    # <Error_7>
    # Issuer wallet and treasury both reject: the purchase is reverted
    def test_error_7(self, db, contract):
        bond_id = LedgerTestUtils.create_issued_bond(db, contract)
        contract.hbar.set_accepts_hbar(ISSUER_WALLET, False)
        contract.hbar.set_accepts_hbar(TREASURY, False)
        contract.hbar.credit(INVESTOR1, 100)

        with pytest.raises(ContractRevertError) as exc_info:
            contract.buy_bond(bond_id=bond_id, units=1, tx_from=INVESTOR1, value=100)

        # assertion
        assert exc_info.value.code == 130101
        assert contract.hbar.balance_of(INVESTOR1) == 100
        assert contract.token_balance_of(bond_id, INVESTOR1) == 0
        assert contract.bonds(bond_id).issued_units == 1000
        assert get_events(db, "BondPurchased") == []
        assert db.get(ContractState, 1).reentrancy_status == 1

    # <Error_8>
    # Buyer cannot cover the payment
    def test_error_8(self, db, contract):
        bond_id = LedgerTestUtils.create_issued_bond(db, contract)
        contract.hbar.credit(INVESTOR1, 99)

        with pytest.raises(ContractRevertError) as exc_info:
            contract.buy_bond(bond_id=bond_id, units=1, tx_from=INVESTOR1, value=100)

        # assertion
        assert exc_info.value.code == 100701

    # <Error_9>
    # Bond does not exist
    def test_error_9(self, db, contract):
        with pytest.raises(ContractRevertError) as exc_info:
            contract.buy_bond(bond_id=99, units=1, tx_from=INVESTOR1, value=0)

        # assertion
        assert exc_info.value.code == 120101


class TestMarkMature:
    ###########################################################################
    # Normal Case
    ###########################################################################

    # <Normal_1>
    def test_normal_1(self, db, contract, clock):
        bond_id = LedgerTestUtils.create_issued_bond(db, contract, duration_sec=3600)
        clock.advance(3600)

        contract.mark_mature(bond_id=bond_id, tx_from=OWNER)
        db.commit()

        # assertion
        assert contract.bonds(bond_id).status == BondStatus.MATURED
        assert get_events(db, "BondMatured") == [{"bondId": bond_id}]

    ###########################################################################
    # Error Case
    ###########################################################################

    # <Error_1>
    # Maturity has not been reached
    def test_error_1(self, db, contract, clock):
        bond_id = LedgerTestUtils.create_issued_bond(db, contract, duration_sec=3600)
        clock.advance(3599)

        with pytest.raises(ContractRevertError) as exc_info:
            contract.mark_mature(bond_id=bond_id, tx_from=OWNER)

        # assertion
        assert exc_info.value.code == 120402
        assert contract.bonds(bond_id).status == BondStatus.ISSUED

    # <Error_2>
    # Marked twice
    def test_error_2(self, db, contract, clock):
        bond_id = LedgerTestUtils.create_issued_bond(db, contract, duration_sec=3600)
        clock.advance(3600)
        contract.mark_mature(bond_id=bond_id, tx_from=OWNER)

        with pytest.raises(ContractRevertError) as exc_info:
            contract.mark_mature(bond_id=bond_id, tx_from=OWNER)

        # assertion
        assert exc_info.value.code == 120401
        assert len(get_events(db, "BondMatured")) == 1

    # <Error_3>
    # Bond is not issued
    def test_error_3(self, db, contract, clock):
        bond_id = LedgerTestUtils.create_bond(contract, duration_sec=0)

        with pytest.raises(ContractRevertError) as exc_info:
            contract.mark_mature(bond_id=bond_id, tx_from=OWNER)

        # assertion
        assert exc_info.value.code == 120401

    # <Error_4>
    # Caller is not the owner
    def test_error_4(self, db, contract, clock):
        bond_id = LedgerTestUtils.create_issued_bond(db, contract, duration_sec=0)

        with pytest.raises(AuthorizationError):
            contract.mark_mature(bond_id=bond_id, tx_from=ISSUER)


class TestRedeemBond:
    def _matured_bond(self, db, contract, clock, **kwargs) -> int:
        bond_id = LedgerTestUtils.create_issued_bond(
            db, contract, duration_sec=3600, **kwargs
        )
        return bond_id

    def _mature(self, db, contract, clock, bond_id):
        clock.advance(3600)
        contract.mark_mature(bond_id=bond_id, tx_from=OWNER)
        db.commit()

    ###########################################################################
    # Normal Case
    ###########################################################################

    # <Normal_1>
    # face value 100, 5 units, 500bp -> 525
    def test_normal_1(self, db, contract, clock):
        bond_id = self._matured_bond(db, contract, clock)
        LedgerTestUtils.buy(db, contract, bond_id, 5, INVESTOR1)
        self._mature(db, contract, clock, bond_id)
        token_address = token_address_of(contract, bond_id)

        contract.redeem_bond(bond_id=bond_id, units=5, tx_from=INVESTOR1)
        db.commit()

        # assertion
        assert contract.hbar.balance_of(INVESTOR1) == 525
        assert contract.token_balance_of(bond_id, INVESTOR1) == 0
        assert contract.token_service.total_supply(token_address) == 995
        assert get_events(db, "HTSBurned") == [{"bondId": bond_id, "amount": 5}]
        assert get_events(db, "BondRedeemed") == [
            {"bondId": bond_id, "investor": INVESTOR1, "units": 5, "payout": 525}
        ]
        # status is unchanged by redemption
        assert contract.bonds(bond_id).status == BondStatus.MATURED

    # <Normal_2>
    # Interest is truncated
    def test_normal_2(self, db, contract, clock):
        bond_id = self._matured_bond(
            db, contract, clock, face_value=3, interest_rate_bp=1
        )
        LedgerTestUtils.buy(db, contract, bond_id, 1, INVESTOR1)
        self._mature(db, contract, clock, bond_id)

        contract.redeem_bond(bond_id=bond_id, units=1, tx_from=INVESTOR1)
        db.commit()

        # assertion
        assert contract.hbar.balance_of(INVESTOR1) == 3

    # <Normal_3>
    # Round trip of 1000 units: buy all, mature, redeem all
    def test_normal_3(self, db, contract, clock):
        bond_id = self._matured_bond(db, contract, clock)
        token_address = token_address_of(contract, bond_id)
        LedgerTestUtils.buy(db, contract, bond_id, 1000, INVESTOR1)
        self._mature(db, contract, clock, bond_id)

        # payout liquidity: 1000 * 100 * 1.05
        contract.hbar.credit(OTHER, 105000)
        contract.receive(tx_from=OTHER, value=105000)
        contract.redeem_bond(bond_id=bond_id, units=1000, tx_from=INVESTOR1)
        db.commit()

        # assertion
        assert contract.bonds(bond_id).issued_units == 0
        assert contract.token_service.total_supply(token_address) == 0
        assert contract.token_balance_of(bond_id, INVESTOR1) == 0
        assert contract.hbar.balance_of(INVESTOR1) == 105000
        assert contract.hbar.balance_of(ISSUER_WALLET) == 100000

    # <Normal_4>
    # Partial redemptions
    def test_normal_4(self, db, contract, clock):
        bond_id = self._matured_bond(db, contract, clock)
        LedgerTestUtils.buy(db, contract, bond_id, 10, INVESTOR1)
        self._mature(db, contract, clock, bond_id)

        contract.redeem_bond(bond_id=bond_id, units=4, tx_from=INVESTOR1)
        contract.redeem_bond(bond_id=bond_id, units=6, tx_from=INVESTOR1)
        db.commit()

        # assertion
        assert contract.hbar.balance_of(INVESTOR1) == 420 + 630
        assert contract.token_balance_of(bond_id, INVESTOR1) == 0

    ###########################################################################
    # Error Case
    ###########################################################################

    # <Error_1>
    # Bond is not matured
    def test_error_1(self, db, contract, clock):
        bond_id = self._matured_bond(db, contract, clock)
        LedgerTestUtils.buy(db, contract, bond_id, 5, INVESTOR1)

        with pytest.raises(ContractRevertError) as exc_info:
            contract.redeem_bond(bond_id=bond_id, units=5, tx_from=INVESTOR1)

        # assertion
        assert exc_info.value.code == 140001

    # <Error_2>
    # Units is zero
    def test_error_2(self, db, contract, clock):
        bond_id = self._matured_bond(db, contract, clock)
        self._mature(db, contract, clock, bond_id)

        with pytest.raises(ContractRevertError) as exc_info:
            contract.redeem_bond(bond_id=bond_id, units=0, tx_from=INVESTOR1)

        # assertion
        assert exc_info.value.code == 140002

    # <Error_3>
    # Investor holds fewer units than requested
    def test_error_3(self, db, contract, clock):
        bond_id = self._matured_bond(db, contract, clock)
        LedgerTestUtils.buy(db, contract, bond_id, 5, INVESTOR1)
        self._mature(db, contract, clock, bond_id)

        with pytest.raises(TokenServiceError) as exc_info:
            contract.redeem_bond(bond_id=bond_id, units=6, tx_from=INVESTOR1)

        # assertion
        assert (
            exc_info.value.response_code == HTSResponseCode.INSUFFICIENT_TOKEN_BALANCE
        )
        assert contract.token_balance_of(bond_id, INVESTOR1) == 5
        assert contract.hbar.balance_of(INVESTOR1) == 0

    # <Error_4>
    # Investor rejects the payout: tokens stay with the investor
    def test_error_4(self, db, contract, clock):
        bond_id = self._matured_bond(db, contract, clock)
        token_address = token_address_of(contract, bond_id)
        LedgerTestUtils.buy(db, contract, bond_id, 5, INVESTOR1)
        self._mature(db, contract, clock, bond_id)
        contract.hbar.set_accepts_hbar(INVESTOR1, False)

        with pytest.raises(ContractRevertError) as exc_info:
            contract.redeem_bond(bond_id=bond_id, units=5, tx_from=INVESTOR1)

        # assertion
        assert exc_info.value.code == 140101
        assert contract.token_balance_of(bond_id, INVESTOR1) == 5
        assert contract.token_service.total_supply(token_address) == 1000
        assert get_events(db, "HTSBurned") == []

    # <Error_5>
    # Contract has no payout liquidity
    def test_error_5(self, db, contract, clock):
        bond_id = self._matured_bond(db, contract, clock)
        LedgerTestUtils.buy(db, contract, bond_id, 5, INVESTOR1)
        self._mature(db, contract, clock, bond_id)
        contract.emergency_withdraw_hbar(to=TREASURY, tx_from=OWNER)

        with pytest.raises(ContractRevertError) as exc_info:
            contract.redeem_bond(bond_id=bond_id, units=5, tx_from=INVESTOR1)

        # assertion
        assert exc_info.value.code == 140101

    # <Error_6>
    # Investor re-enters on receipt of the payout
    def test_error_6(self, db, contract, clock):
        bond_id = self._matured_bond(db, contract, clock)
        LedgerTestUtils.buy(db, contract, bond_id, 5, INVESTOR1)
        self._mature(db, contract, clock, bond_id)

        def reenter(sender: str, amount: int):
            contract.redeem_bond(bond_id=bond_id, units=1, tx_from=INVESTOR1)

        contract.hbar.register_receive_hook(INVESTOR1, reenter)

        with pytest.raises(ContractRevertError) as exc_info:
            contract.redeem_bond(bond_id=bond_id, units=4, tx_from=INVESTOR1)

        # assertion
        assert exc_info.value.code == 140101
        assert contract.token_balance_of(bond_id, INVESTOR1) == 5
        assert db.get(ContractState, 1).reentrancy_status == 1

    # <Error_7>
    # Paused
    def test_error_7(self, db, contract, clock):
        bond_id = self._matured_bond(db, contract, clock)
        LedgerTestUtils.buy(db, contract, bond_id, 5, INVESTOR1)
        self._mature(db, contract, clock, bond_id)
        contract.pause(tx_from=OWNER)

        with pytest.raises(ContractRevertError) as exc_info:
            contract.redeem_bond(bond_id=bond_id, units=5, tx_from=INVESTOR1)

        # assertion
        assert exc_info.value.code == 100101


class TestEmergencyWithdrawHBAR:
    ###########################################################################
    # Normal Case
    ###########################################################################

    # <Normal_1>
    def test_normal_1(self, db, contract):
        LedgerTestUtils.create_issued_bond(db, contract)
        contract.hbar.credit(OTHER, 500)
        contract.receive(tx_from=OTHER, value=500)

        amount = contract.emergency_withdraw_hbar(to=TREASURY, tx_from=OWNER)
        db.commit()

        # assertion
        assert amount == HTS_ISSUE_MIN_FEE + 500
        assert contract.hbar_balance() == 0
        assert contract.hbar.balance_of(TREASURY) == HTS_ISSUE_MIN_FEE + 500
        assert contract.collected_issue_fees() == 0
        assert get_events(db, "HBARWithdrawn") == [
            {"to": TREASURY, "amount": HTS_ISSUE_MIN_FEE + 500}
        ]

    ###########################################################################
    # Error Case
    ###########################################################################

    # <Error_1>
    # Recipient is the zero address
    def test_error_1(self, db, contract):
        with pytest.raises(ContractRevertError) as exc_info:
            contract.emergency_withdraw_hbar(to=ZERO_ADDRESS, tx_from=OWNER)

        # assertion
        assert exc_info.value.code == 100601

    # <Error_2>
    # Recipient rejects HBAR
    def test_error_2(self, db, contract):
        LedgerTestUtils.create_issued_bond(db, contract)
        contract.hbar.set_accepts_hbar(OTHER, False)

        with pytest.raises(ContractRevertError) as exc_info:
            contract.emergency_withdraw_hbar(to=OTHER, tx_from=OWNER)

        # assertion
        assert exc_info.value.code == 100602
        assert contract.hbar_balance() == HTS_ISSUE_MIN_FEE
        assert contract.collected_issue_fees() == HTS_ISSUE_MIN_FEE

    # <Error_3>
    # Caller is not the owner
    def test_error_3(self, db, contract):
        with pytest.raises(AuthorizationError):
            contract.emergency_withdraw_hbar(to=OTHER, tx_from=OTHER)


class TestSetTreasury:
    ###########################################################################
    # Normal Case
    ###########################################################################

    # <Normal_1>
    def test_normal_1(self, db, contract):
        contract.set_treasury(treasury=OTHER, tx_from=OWNER)
        db.commit()

        # assertion
        assert contract.treasury() == OTHER
        assert get_events(db, "TreasuryUpdated") == [
            {"previousTreasury": TREASURY, "newTreasury": OTHER}
        ]

    ###########################################################################
    # Error Case
    ###########################################################################

    # <Error_1>
    # Zero address
    def test_error_1(self, db, contract):
        with pytest.raises(ContractRevertError) as exc_info:
            contract.set_treasury(treasury=ZERO_ADDRESS, tx_from=OWNER)

        # assertion
        assert exc_info.value.code == 100501
        assert contract.treasury() == TREASURY

    # <Error_2>
    # Caller is not the owner
    def test_error_2(self, db, contract):
        with pytest.raises(AuthorizationError):
            contract.set_treasury(treasury=OTHER, tx_from=OTHER)


class TestSetHTSManager:
    ###########################################################################
    # Normal Case
    ###########################################################################

    # <Normal_1>
    def test_normal_1(self, db, contract):
        contract.set_hts_manager(hts_manager=OTHER, tx_from=OWNER)
        db.commit()

        # assertion
        assert contract.hts_manager() == OTHER
        assert get_events(db, "LegacyHTSManagerUpdated") == [{"newManager": OTHER}]

    ###########################################################################
    # Error Case
    ###########################################################################

    # <Error_1>
    # Zero address
    def test_error_1(self, db, contract):
        with pytest.raises(ContractRevertError) as exc_info:
            contract.set_hts_manager(hts_manager=ZERO_ADDRESS, tx_from=OWNER)

        # assertion
        assert exc_info.value.code == 100502

    # <Error_2>
    # Caller is not the owner
    def test_error_2(self, db, contract):
        with pytest.raises(AuthorizationError):
            contract.set_hts_manager(hts_manager=OTHER, tx_from=ISSUER)


class TestUpgradeToAndCall:
    new_implementation = "0x8000000000000000000000000000000000000008"

    ###########################################################################
    # Normal Case
    ###########################################################################

    # <Normal_1>
    # No pending migration
    def test_normal_1(self, db, contract):
        applied = contract.upgrade_to_and_call(
            new_implementation=self.new_implementation, data=b"", tx_from=OWNER
        )
        db.commit()

        # assertion
        assert applied == []
        _state = db.get(ContractState, 1)
        assert _state.implementation_address == self.new_implementation
        assert _state.schema_version == 1
        assert get_events(db, "ContractUpgraded") == [
            {"newImplementation": self.new_implementation}
        ]

    # <Normal_2>
    # Pending migration is applied with the call data
    def test_normal_2(self, db, contract, monkeypatch):
        from app.model.ledger import migration

        bond_id = LedgerTestUtils.create_bond(contract)
        calls = []
        monkeypatch.setitem(
            migration.SCHEMA_MIGRATIONS, 2, lambda _db, data: calls.append(data)
        )
        monkeypatch.setattr(migration, "CONTRACT_SCHEMA_VERSION", 2)

        applied = contract.upgrade_to_and_call(
            new_implementation=self.new_implementation, data=b"\x01", tx_from=OWNER
        )
        db.commit()

        # assertion
        assert applied == [2]
        assert calls == [b"\x01"]
        assert db.get(ContractState, 1).schema_version == 2
        db.expire_all()
        assert db.get(Bond, bond_id).schema_version == 2

    ###########################################################################
    # Error Case
    ###########################################################################

    # <Error_1>
    # Zero address
    def test_error_1(self, db, contract):
        with pytest.raises(ContractRevertError) as exc_info:
            contract.upgrade_to_and_call(
                new_implementation=ZERO_ADDRESS, data=b"", tx_from=OWNER
            )

        # assertion
        assert exc_info.value.code == 100401

    # <Error_2>
    # Migration is not registered
    def test_error_2(self, db, contract, monkeypatch):
        from app.model.ledger import migration

        monkeypatch.setattr(migration, "CONTRACT_SCHEMA_VERSION", 2)

        with pytest.raises(ContractRevertError) as exc_info:
            contract.upgrade_to_and_call(
                new_implementation=self.new_implementation, data=b"", tx_from=OWNER
            )

        # assertion
        assert exc_info.value.code == 100402
        _state = db.get(ContractState, 1)
        assert _state.implementation_address is None
        assert _state.schema_version == 1

    # <Error_3>
    # Caller is not the owner
    def test_error_3(self, db, contract):
        with pytest.raises(AuthorizationError):
            contract.upgrade_to_and_call(
                new_implementation=self.new_implementation, data=b"", tx_from=OTHER
            )


class TestReceive:
    ###########################################################################
    # Normal Case
    ###########################################################################

    # <Normal_1>
    # Always accepted, also while paused
    def test_normal_1(self, db, contract):
        contract.pause(tx_from=OWNER)
        contract.hbar.credit(OTHER, 300)

        contract.receive(tx_from=OTHER, value=300)
        db.commit()

        # assertion
        assert contract.hbar_balance() == 300
        assert contract.hbar.balance_of(OTHER) == 0
        assert contract.collected_issue_fees() == 0

    ###########################################################################
    # Error Case
    ###########################################################################

    # <Error_1>
    # Sender cannot cover the value
    def test_error_1(self, db, contract):
        with pytest.raises(ContractRevertError) as exc_info:
            contract.receive(tx_from=OTHER, value=1)

        # assertion
        assert exc_info.value.code == 100701


class TestBonds:
    ###########################################################################
    # Normal Case
    ###########################################################################

    # <Normal_1>
    # Unknown id returns the zero record
    def test_normal_1(self, db, contract):
        _bond = contract.bonds(1)

        # assertion
        assert _bond.id == 0
        assert _bond.issuer == ZERO_ADDRESS
        assert _bond.status == BondStatus.DRAFT
        assert _bond.hts_token_id == b""

    # <Normal_2>
    # issued_units never exceeds available_units through the lifecycle
    def test_normal_2(self, db, contract, clock):
        bond_id = LedgerTestUtils.create_bond(contract, duration_sec=10)

        def check():
            _bond = contract.bonds(bond_id)
            assert _bond.issued_units <= _bond.available_units

        check()
        contract.hbar.credit(OWNER, HTS_ISSUE_MIN_FEE)
        contract.issue_bond(
            bond_id=bond_id,
            name="Micro Bond",
            symbol="MBOND",
            metadata=b"",
            amount=1000,
            tx_from=OWNER,
            value=HTS_ISSUE_MIN_FEE,
        )
        check()
        LedgerTestUtils.buy(db, contract, bond_id, 250, INVESTOR1)
        check()
        clock.advance(10)
        contract.mark_mature(bond_id=bond_id, tx_from=OWNER)
        contract.redeem_bond(bond_id=bond_id, units=250, tx_from=INVESTOR1)
        check()
