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

from typing import Tuple

REVERT_CODE_MAP = {
    # Access control / admin (10XXXX)
    100001: "Contract is already initialized.",
    100002: "Contract is not initialized.",
    100101: "Contract is paused.",
    100201: "New owner is the zero address.",
    100202: "Confirmation address does not match the current owner.",
    100301: "Reentrant call.",
    100401: "New implementation is the zero address.",
    100402: "No migration is registered for the schema version.",
    100501: "Treasury is the zero address.",
    100502: "HTS manager is the zero address.",
    100601: "Withdrawal recipient is the zero address.",
    100602: "HBAR withdrawal failed.",
    100701: "Sender balance is insufficient for the attached payment.",
    # Issuer (11XXXX)
    110001: "Wallet is the zero address.",
    110101: "Issuer is the zero address.",
    # Bond lifecycle (12XXXX)
    120001: "Issuer is the zero address.",
    120101: "Bond does not exist.",
    120201: "Bond is not submitted or in review.",
    120202: "Issuer KYC is not approved.",
    120301: "Bond is not approved.",
    120302: "Issue amount must be greater than zero.",
    120303: "Issue amount must equal available units.",
    120304: "Attached payment is less than the issue fee.",
    120401: "Bond is not issued.",
    120402: "Bond has not reached maturity.",
    # Purchase (13XXXX)
    130001: "Bond is not issued.",
    130002: "Units must be greater than zero.",
    130003: "Units exceed issued units.",
    130004: "Attached payment does not equal face value times units.",
    130101: "HBAR forwarding to issuer and treasury failed.",
    # Redemption (14XXXX)
    140001: "Bond is not matured.",
    140002: "Units must be greater than zero.",
    140101: "Redemption payout failed.",
}


def error_code_msg(code_str: str) -> Tuple[int, str]:
    """Retrieve contract error message from error code.

    :param code_str: error code thrown by contract
    :return: [error_code, error_message]
    """
    if not code_str.isdigit():
        # If contract doesn't throw error code,
        # consider the raw message as an error log.
        return 999999, code_str

    code = int(code_str)
    return code, REVERT_CODE_MAP.get(code, code_str)
