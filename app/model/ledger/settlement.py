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

from dataclasses import dataclass

from app import log
from app.exceptions import ContractRevertError
from app.model.ledger.hbar import HbarLedger
from config import BASIS_POINT_DENOMINATOR

LOG = log.get_logger()


@dataclass(frozen=True)
class RedemptionPayout:
    principal: int
    interest: int
    payout: int


def purchase_price(face_value: int, units: int) -> int:
    """Exact HBAR a buyer must attach for units"""
    return face_value * units


def compute_redemption_payout(
    face_value: int, units: int, interest_rate_bp: int
) -> RedemptionPayout:
    """Principal plus simple interest

    Interest is truncated by integer division, never rounded.
    """
    principal = face_value * units
    interest = principal * interest_rate_bp // BASIS_POINT_DENOMINATOR
    return RedemptionPayout(
        principal=principal, interest=interest, payout=principal + interest
    )


class ProceedsForwarder:
    """Moves HBAR out of the contract escrow

    Purchase proceeds go to the issuer wallet and fall back to the treasury.
    Redemption payouts have no fallback: a failed payout reverts the
    redemption and the investor keeps the tokens.
    """

    def __init__(self, hbar: HbarLedger, contract_address: str):
        self.hbar = hbar
        self.contract_address = contract_address

    def forward_proceeds(
        self, bond_id: int, wallet: str, treasury: str, amount: int
    ) -> tuple[str, bool]:
        """Forward purchase proceeds

        :return: (recipient, True if the treasury received the payment)
        """
        if self.hbar.send(self.contract_address, wallet, amount):
            return wallet, False

        LOG.warning(
            f"Forwarding to issuer wallet failed, falling back to treasury: bond_id={bond_id}, wallet={wallet}, amount={amount}"
        )
        if self.hbar.send(self.contract_address, treasury, amount):
            return treasury, True

        LOG.error(
            f"Forwarding to treasury failed: bond_id={bond_id}, treasury={treasury}, amount={amount}"
        )
        raise ContractRevertError("130101")

    def pay_out(self, bond_id: int, investor: str, amount: int):
        if not self.hbar.send(self.contract_address, investor, amount):
            LOG.error(
                f"Redemption payout failed: bond_id={bond_id}, investor={investor}, amount={amount}"
            )
            raise ContractRevertError("140101")
