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

from fastapi import status

from app.utils.contract_error_code import REVERT_CODE_MAP, error_code_msg


class AppError(Exception):
    status_code: int
    code: int | None = None
    code_list: list[int] | None = None


################################################
# 400_BAD_REQUEST
################################################
class BadRequestError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST


class InvalidParameterError(BadRequestError):
    code = 1


class Integer64bitLimitExceededError(BadRequestError):
    """
    Value exceeds the signed 64-bit width of the token service or ledger storage
    """

    code = 5


class TokenServiceError(BadRequestError):
    """
    Token service (HTS) returned a non-success response code
    """

    code = 11

    def __init__(self, response_code: int, operation: str):
        self.response_code = response_code
        self.operation = operation
        super().__init__(f"{operation} failed: response_code={response_code}")


class ContractRevertError(AppError):
    """
    Revert error occurs from the bond ledger contract

    - Error code: see app/utils/contract_error_code.py
    - If an unknown code is given, 999999 is returned.
    """

    status_code = status.HTTP_400_BAD_REQUEST
    code_list = list(REVERT_CODE_MAP.keys()) + [999999]

    def __init__(self, code_msg: str):
        code, message = error_code_msg(code_msg)
        self.code = code
        self.message = message
        super().__init__(message)

    def __repr__(self):
        return f"<ContractRevertError(code={self.code}, message={self.message})>"


################################################
# 401_UNAUTHORIZED
################################################
class AuthorizationError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = 1


################################################
# 503_SERVICE_UNAVAILABLE
################################################
class ServiceUnavailableError(AppError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    code = 1
