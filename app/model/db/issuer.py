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

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class Issuer(Base):
    """Registered Bond Issuer"""

    __tablename__ = "issuer"

    # issuer address (registering caller)
    issuer_address: Mapped[str] = mapped_column(String(42), primary_key=True)
    # address receiving purchase proceeds
    wallet_address: Mapped[str] = mapped_column(String(42), nullable=False)
    # KYC approved by the contract owner
    kyc_approved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    # true once the issuer has self-registered
    connected: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
