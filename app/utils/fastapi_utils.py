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

from typing import Any

import orjson
from fastapi.responses import ORJSONResponse

from app.exceptions import Integer64bitLimitExceededError
from config import RESPONSE_VALIDATION_MODE


def ledger_default(obj):
    """orjson fallback: raw ledger bytes (token ids, memos) render as 0x-hex"""
    if isinstance(obj, (bytes, bytearray, memoryview)):
        return "0x" + bytes(obj).hex()
    raise TypeError


class LedgerJSONResponse(ORJSONResponse):
    media_type = "application/json"

    def render(self, content: Any) -> bytes:
        try:
            return orjson.dumps(
                content, option=orjson.OPT_NON_STR_KEYS, default=ledger_default
            )
        except TypeError as err:
            # orjson refuses ints outside the signed/unsigned 64-bit range
            if "64-bit" in str(err):
                raise Integer64bitLimitExceededError(
                    "Response includes a ledger value beyond the 64-bit range"
                ) from None
            raise


def json_response(content: dict | list):
    """Serialize with orjson, or hand the content to FastAPI for response_model validation"""
    if RESPONSE_VALIDATION_MODE:
        return content
    return LedgerJSONResponse(content=content)
