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

from typing import Annotated, Any

from pydantic import WrapValidator
from pydantic_core.core_schema import ValidatorFunctionWrapHandler
from web3 import Web3

from config import ZERO_ADDRESS


def ethereum_address_validator(
    value: Any, handler: ValidatorFunctionWrapHandler, *args, **kwargs
):
    """Validator for ethereum address"""
    if value is not None:
        if not isinstance(value, str):
            raise ValueError("value must be of string")
        if not Web3.is_address(value):
            raise ValueError("invalid ethereum address")
    return value


EthereumAddress = Annotated[str, WrapValidator(ethereum_address_validator)]


def hex_bytes_validator(
    value: Any, handler: ValidatorFunctionWrapHandler, *args, **kwargs
):
    """Validate 0x-prefixed hex string"""
    if value is not None:
        if not isinstance(value, str):
            raise ValueError("value must be of string")
        if not value.startswith("0x"):
            raise ValueError("value must be 0x-prefixed hex string")
        try:
            Web3.to_bytes(hexstr=value)
        except ValueError:
            raise ValueError("value must be 0x-prefixed hex string")
    return value


HexBytesStr = Annotated[str, WrapValidator(hex_bytes_validator)]


def to_checksum_address(address: str) -> str:
    """Normalize an address to the checksum format used as ledger key"""
    if address == ZERO_ADDRESS:
        return address
    return Web3.to_checksum_address(address)
