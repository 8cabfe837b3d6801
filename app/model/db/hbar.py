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

from sqlalchemy import BigInteger, Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class HbarAccount(Base):
    """Native currency (HBAR) account"""

    __tablename__ = "hbar_account"

    # account address
    account_address: Mapped[str] = mapped_column(String(42), primary_key=True)
    # balance [tinybar]
    balance: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    # false if the account rejects incoming transfers
    accepts_hbar: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
