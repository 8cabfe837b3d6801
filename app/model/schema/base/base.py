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

from enum import IntEnum
from typing import Optional

from pydantic import BaseModel, Field, NonNegativeInt


############################
# REQUEST
############################
class SortOrder(IntEnum):
    """Sort order (0: ASC, 1: DESC)"""

    ASC = 0
    DESC = 1


class BasePaginationQuery(BaseModel):
    offset: Optional[NonNegativeInt] = Field(None, description="Offset for pagination")
    limit: Optional[NonNegativeInt] = Field(None, description="Limit for pagination")


class SortedPaginationQuery(BasePaginationQuery):
    """Listing of ledger records ordered by their sequential id"""

    sort_order: Optional[SortOrder] = Field(
        SortOrder.ASC, description="Sort order by id (0: ASC, 1: DESC)"
    )


############################
# RESPONSE
############################
class ResultSet(BaseModel):
    """result set for pagination"""

    count: Optional[int] = Field(..., description="Records matching the filters")
    offset: Optional[int] = Field(...)
    limit: Optional[int] = Field(...)
    total: Optional[int] = Field(..., description="Records before filtering")
