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

from typing import Callable

from sqlalchemy import select
from sqlalchemy.orm import Session
from web3 import Web3

from app import log
from app.exceptions import AppError
from app.model import to_checksum_address
from app.model.db import HbarAccount

LOG = log.get_logger()

# (sender address, amount) -> None; raising AppError rejects the transfer
ReceiveHook = Callable[[str, int], None]


class HbarLedger:
    """Native currency (HBAR) accounts

    Transfers follow low-level call semantics: `send` reports failure with
    False instead of raising, and a failed transfer leaves no partial state.
    A receiving account can reject transfers either persistently
    (accepts_hbar=False) or through a receive hook that raises AppError.
    """

    def __init__(self, db: Session):
        self.db = db
        self._receive_hooks: dict[str, ReceiveHook] = {}

    def register_receive_hook(self, account_address: str, hook: ReceiveHook):
        self._receive_hooks[to_checksum_address(account_address)] = hook

    def remove_receive_hook(self, account_address: str):
        self._receive_hooks.pop(to_checksum_address(account_address), None)

    def balance_of(self, account_address: str) -> int:
        _account = self.db.scalars(
            select(HbarAccount)
            .where(HbarAccount.account_address == to_checksum_address(account_address))
            .limit(1)
        ).first()
        if _account is None:
            return 0
        return _account.balance

    def credit(self, account_address: str, amount: int):
        """Credit newly supplied HBAR (genesis / faucet)"""
        if amount < 0:
            raise ValueError("amount must be non-negative")
        _account = self._get_or_create(account_address)
        _account.balance += amount
        self.db.flush()

    def set_accepts_hbar(self, account_address: str, accepts: bool):
        _account = self._get_or_create(account_address)
        _account.accepts_hbar = accepts
        self.db.flush()

    def collect(self, from_address: str, to_address: str, amount: int) -> bool:
        """Move HBAR attached to a call into the called account

        The called contract always accepts attached value; receive policy and
        hooks are not consulted.
        """
        if amount == 0:
            return True
        sender = self._get_or_create(from_address)
        if sender.balance < amount:
            return False
        receiver = self._get_or_create(to_address)
        sender.balance -= amount
        receiver.balance += amount
        self.db.flush()
        return True

    def send(self, from_address: str, to_address: str, amount: int) -> bool:
        """Transfer HBAR, returning False if the transfer did not happen"""
        sender = self._get_or_create(from_address)
        receiver = self._get_or_create(to_address)
        if sender.balance < amount:
            LOG.warning(
                f"HBAR transfer failed: insufficient balance: from={sender.account_address}, amount={amount}"
            )
            return False
        if not receiver.accepts_hbar:
            LOG.warning(
                f"HBAR transfer rejected by receiver: to={receiver.account_address}, amount={amount}"
            )
            return False

        try:
            with self.db.begin_nested():
                sender.balance -= amount
                receiver.balance += amount
                self.db.flush()
                hook = self._receive_hooks.get(receiver.account_address)
                if hook is not None:
                    hook(sender.account_address, amount)
        except AppError as err:
            LOG.warning(
                f"HBAR transfer reverted by receiver: to={receiver.account_address}, amount={amount}, reason={err!r}"
            )
            return False
        return True

    def _get_or_create(self, account_address: str) -> HbarAccount:
        if not Web3.is_address(account_address):
            raise ValueError(f"invalid account address: {account_address}")
        _address = to_checksum_address(account_address)
        _account = self.db.get(HbarAccount, _address)
        if _account is None:
            _account = HbarAccount()
            _account.account_address = _address
            _account.balance = 0
            _account.accepts_hbar = True
            self.db.add(_account)
            self.db.flush()
        return _account
