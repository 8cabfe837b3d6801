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

from datetime import UTC, datetime

from sqlalchemy import DateTime
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from app.database import get_db_schema


def naive_utcnow() -> datetime:
    """Current UTC time without tzinfo (DateTime columns are naive)"""
    return datetime.now(UTC).replace(tzinfo=None)


class Base(DeclarativeBase):
    """Declarative base of the ledger tables

    Every row carries the UTC time it was inserted and last updated.
    Ledger time (block timestamps, maturity) is stored separately as unix seconds.
    """

    created: Mapped[datetime | None] = mapped_column(DateTime, default=naive_utcnow)
    modified: Mapped[datetime | None] = mapped_column(
        DateTime, default=naive_utcnow, onupdate=naive_utcnow
    )


# PostgreSQL deployments keep the ledger tables in DATABASE_SCHEMA
schema = get_db_schema()
if schema is not None:
    Base.__table_args__ = {"schema": schema}
