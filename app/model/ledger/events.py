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

from sqlalchemy.orm import Session

from app.model.db import ContractEvent

# Event name -> argument names in emission order
EVENT_SIGNATURES: dict[str, tuple[str, ...]] = {
    "IssuerRegistered": ("issuer", "wallet"),
    "KYCApproved": ("issuer", "approved"),
    "BondCreated": ("bondId", "issuer"),
    "BondApproved": ("bondId",),
    "HTSIssued": ("bondId", "htsTokenId", "amount"),
    "BondPurchased": ("bondId", "buyer", "units", "amountPaid"),
    "HBARForwarded": ("bondId", "to", "amount", "toTreasury"),
    "BondMatured": ("bondId",),
    "BondRedeemed": ("bondId", "investor", "units", "payout"),
    "HTSBurned": ("bondId", "amount"),
    "ContractUpgraded": ("newImplementation",),
    "LegacyHTSManagerUpdated": ("newManager",),
    "OwnershipTransferred": ("previousOwner", "newOwner"),
    "Paused": ("account",),
    "Unpaused": ("account",),
    "TreasuryUpdated": ("previousTreasury", "newTreasury"),
    "HBARWithdrawn": ("to", "amount"),
}


def emit_event(db: Session, block_timestamp: int, event: str, *values) -> ContractEvent:
    """Append an event to the contract event log"""
    arg_names = EVENT_SIGNATURES[event]
    if len(arg_names) != len(values):
        raise TypeError(
            f"{event} takes {len(arg_names)} arguments but {len(values)} were given"
        )

    args = {}
    for name, value in zip(arg_names, values):
        if isinstance(value, bytes):
            value = "0x" + value.hex()
        args[name] = value

    _event = ContractEvent()
    _event.event = event
    _event.args = args
    _event.block_timestamp = block_timestamp
    db.add(_event)
    return _event
