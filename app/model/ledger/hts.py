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

import codecs
from dataclasses import dataclass
from enum import IntEnum
from typing import Protocol

from sqlalchemy import func, select
from sqlalchemy.orm import Session
from web3 import Web3

from app import log
from app.exceptions import Integer64bitLimitExceededError, TokenServiceError
from app.model import to_checksum_address
from app.model.db import HTSToken, HTSTokenBalance
from config import HTS_MEMO_MAX_BYTES, INT64_MAX

LOG = log.get_logger()


class HTSResponseCode(IntEnum):
    """Token service response codes (subset of Hedera ResponseCodeEnum)"""

    INVALID_ACCOUNT_ID = 15
    SUCCESS = 22
    INVALID_TOKEN_ID = 167
    MISSING_TOKEN_SYMBOL = 172
    INSUFFICIENT_TOKEN_BALANCE = 178


@dataclass(frozen=True)
class HTSTokenId:
    """Typed handle of a token on the token service

    Stored form is the 20-byte long-zero EVM address:
    shard (4 bytes) | realm (8 bytes) | num (8 bytes).
    """

    token_num: int
    shard: int = 0
    realm: int = 0

    @classmethod
    def from_bytes(cls, raw: bytes) -> "HTSTokenId":
        if raw is None or len(raw) != 20:
            raise ValueError("token id must be 20 bytes")
        return cls(
            shard=int.from_bytes(raw[0:4], "big"),
            realm=int.from_bytes(raw[4:12], "big"),
            token_num=int.from_bytes(raw[12:20], "big"),
        )

    @classmethod
    def from_address(cls, address: str) -> "HTSTokenId":
        return cls.from_bytes(Web3.to_bytes(hexstr=address))

    def to_bytes(self) -> bytes:
        return (
            self.shard.to_bytes(4, "big")
            + self.realm.to_bytes(8, "big")
            + self.token_num.to_bytes(8, "big")
        )

    @property
    def address(self) -> str:
        return Web3.to_checksum_address("0x" + self.to_bytes().hex())

    def __str__(self):
        return f"{self.shard}.{self.realm}.{self.token_num}"


class TokenService(Protocol):
    """Request/response interface of the fungible token service"""

    def create_fungible_token(
        self,
        name: str,
        symbol: str,
        memo: str,
        treasury: str,
        initial_supply: int,
        decimals: int,
    ) -> tuple[int, str | None]: ...

    def transfer_token(
        self, token_address: str, sender: str, receiver: str, amount: int
    ) -> int: ...

    def burn_token(self, token_address: str, amount: int) -> tuple[int, int]: ...


class LedgerTokenService:
    """Token service backed by the ledger database

    Writes share the caller's session, so they are rolled back together with
    the contract operation that issued them.
    """

    def __init__(self, db: Session):
        self.db = db

    def create_fungible_token(
        self,
        name: str,
        symbol: str,
        memo: str,
        treasury: str,
        initial_supply: int,
        decimals: int = 0,
    ) -> tuple[int, str | None]:
        if not symbol:
            return HTSResponseCode.MISSING_TOKEN_SYMBOL, None
        if not Web3.is_address(treasury):
            return HTSResponseCode.INVALID_ACCOUNT_ID, None

        latest_num = self.db.scalar(select(func.max(HTSToken.token_num)))
        token_id = HTSTokenId(token_num=(latest_num or 0) + 1)

        _token = HTSToken()
        _token.token_num = token_id.token_num
        _token.token_address = token_id.address
        _token.name = name
        _token.symbol = symbol
        _token.memo = memo
        _token.treasury_address = to_checksum_address(treasury)
        _token.total_supply = initial_supply
        _token.decimals = decimals
        self.db.add(_token)

        _balance = HTSTokenBalance()
        _balance.token_address = token_id.address
        _balance.account_address = to_checksum_address(treasury)
        _balance.balance = initial_supply
        self.db.add(_balance)
        self.db.flush()

        return HTSResponseCode.SUCCESS, token_id.address

    def transfer_token(
        self, token_address: str, sender: str, receiver: str, amount: int
    ) -> int:
        if self.__get_token(token_address) is None:
            return HTSResponseCode.INVALID_TOKEN_ID
        if not Web3.is_address(sender) or not Web3.is_address(receiver):
            return HTSResponseCode.INVALID_ACCOUNT_ID

        _from = self.__get_balance(token_address, sender)
        if _from.balance < amount:
            return HTSResponseCode.INSUFFICIENT_TOKEN_BALANCE
        _to = self.__get_balance(token_address, receiver)
        _from.balance -= amount
        _to.balance += amount
        self.db.flush()
        return HTSResponseCode.SUCCESS

    def burn_token(self, token_address: str, amount: int) -> tuple[int, int]:
        _token = self.__get_token(token_address)
        if _token is None:
            return HTSResponseCode.INVALID_TOKEN_ID, 0

        _treasury = self.__get_balance(token_address, _token.treasury_address)
        if _treasury.balance < amount:
            return HTSResponseCode.INSUFFICIENT_TOKEN_BALANCE, _token.total_supply
        _treasury.balance -= amount
        _token.total_supply -= amount
        self.db.flush()
        return HTSResponseCode.SUCCESS, _token.total_supply

    def balance_of(self, token_address: str, account_address: str) -> int:
        _balance = self.db.get(
            HTSTokenBalance,
            (to_checksum_address(token_address), to_checksum_address(account_address)),
        )
        if _balance is None:
            return 0
        return _balance.balance

    def total_supply(self, token_address: str) -> int:
        _token = self.__get_token(token_address)
        if _token is None:
            return 0
        return _token.total_supply

    def __get_token(self, token_address: str) -> HTSToken | None:
        if not Web3.is_address(token_address):
            return None
        return self.db.scalars(
            select(HTSToken)
            .where(HTSToken.token_address == to_checksum_address(token_address))
            .limit(1)
        ).first()

    def __get_balance(self, token_address: str, account_address: str):
        key = (to_checksum_address(token_address), to_checksum_address(account_address))
        _balance = self.db.get(HTSTokenBalance, key)
        if _balance is None:
            _balance = HTSTokenBalance()
            _balance.token_address = key[0]
            _balance.account_address = key[1]
            _balance.balance = 0
            self.db.add(_balance)
        return _balance


class HTSBridge:
    """Adapter between the bond ledger and the token service

    - Amounts are marshalled to the service's signed 64-bit width.
      Larger values are rejected before any call is made.
    - The token memo is the metadata truncated to HTS_MEMO_MAX_BYTES.
      Truncation is silent.
    - A non-success response code aborts the calling operation.
    """

    def __init__(self, token_service: TokenService):
        self.token_service = token_service

    @staticmethod
    def to_int64(value: int) -> int:
        if value > INT64_MAX or value < -INT64_MAX - 1:
            raise Integer64bitLimitExceededError(
                f"value {value} exceeds the token service integer width"
            )
        return value

    @staticmethod
    def truncate_memo(metadata: bytes) -> str:
        # Only a sequence left incomplete by the cut is dropped; other invalid
        # bytes decode to U+FFFD
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        return decoder.decode(metadata[:HTS_MEMO_MAX_BYTES], final=False)

    def create_token(
        self, name: str, symbol: str, metadata: bytes, amount: int, treasury: str
    ) -> HTSTokenId:
        initial_supply = self.to_int64(amount)
        response_code, token_address = self.token_service.create_fungible_token(
            name=name,
            symbol=symbol,
            memo=self.truncate_memo(metadata),
            treasury=treasury,
            initial_supply=initial_supply,
            decimals=0,
        )
        if response_code != HTSResponseCode.SUCCESS:
            raise TokenServiceError(response_code, "createFungibleToken")
        return HTSTokenId.from_address(token_address)

    def transfer(
        self, token_id: HTSTokenId, sender: str, receiver: str, amount: int
    ) -> None:
        response_code = self.token_service.transfer_token(
            token_address=token_id.address,
            sender=sender,
            receiver=receiver,
            amount=self.to_int64(amount),
        )
        if response_code != HTSResponseCode.SUCCESS:
            raise TokenServiceError(response_code, "transferToken")

    def burn(self, token_id: HTSTokenId, amount: int) -> int:
        response_code, new_total_supply = self.token_service.burn_token(
            token_address=token_id.address, amount=self.to_int64(amount)
        )
        if response_code != HTSResponseCode.SUCCESS:
            raise TokenServiceError(response_code, "burnToken")
        return new_total_supply
