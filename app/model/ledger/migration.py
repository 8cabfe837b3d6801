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

from typing import Callable

from sqlalchemy import update
from sqlalchemy.orm import Session

from app import log
from app.exceptions import ContractRevertError
from app.model.db import Bond, ContractState
from config import CONTRACT_SCHEMA_VERSION

LOG = log.get_logger()

# (session, upgrade call data) -> None
SchemaMigration = Callable[[Session, bytes], None]

# Target schema version -> migration from the previous version.
# Schema changes are additive: new columns are added, existing ones keep
# their meaning.
SCHEMA_MIGRATIONS: dict[int, SchemaMigration] = {}


def register_migration(version: int):
    def decorator(func: SchemaMigration):
        SCHEMA_MIGRATIONS[version] = func
        return func

    return decorator


def migrate_schema(
    db: Session,
    state: ContractState,
    data: bytes = b"",
    target_version: int | None = None,
) -> list[int]:
    """Run registered migrations up to target_version

    :return: applied versions in order
    """
    if target_version is None:
        target_version = CONTRACT_SCHEMA_VERSION

    applied = []
    for version in range(state.schema_version + 1, target_version + 1):
        migration = SCHEMA_MIGRATIONS.get(version)
        if migration is None:
            raise ContractRevertError("100402")
        LOG.info(f"Applying schema migration: version={version}")
        migration(db, data)
        applied.append(version)

    if len(applied) > 0:
        db.execute(update(Bond).values(schema_version=target_version))
        state.schema_version = target_version
    return applied
