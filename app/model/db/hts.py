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

from sqlalchemy import BigInteger, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class HTSToken(Base):
    """Fungible token created on the token service"""

    __tablename__ = "hts_token"

    # entity number (0.0.<token_num>)
    token_num: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=False
    )
    # long-zero EVM address
    token_address: Mapped[str] = mapped_column(String(42), nullable=False, unique=True)
    # token name
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    # token symbol
    symbol: Mapped[str] = mapped_column(String(100), nullable=False)
    # token memo
    memo: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    # treasury account
    treasury_address: Mapped[str] = mapped_column(String(42), nullable=False)
    # total supply
    total_supply: Mapped[int] = mapped_column(BigInteger, nullable=False)
    # decimals
    decimals: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class HTSTokenBalance(Base):
    """Token balance per account"""

    __tablename__ = "hts_token_balance"

    # token address
    token_address: Mapped[str] = mapped_column(String(42), primary_key=True)
    # account address
    account_address: Mapped[str] = mapped_column(String(42), primary_key=True)
    # balance
    balance: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
