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

import os
import sys

path = os.path.join(os.path.dirname(__file__), "../")
sys.path.append(path)

from sqlalchemy import Table, inspect
from sqlalchemy.orm import Session

from app.database import SessionLocal, engine, get_db_schema
from app.exceptions import ContractRevertError
from app.model.db import Base
from app.model.ledger import BondLedgerContract
from config import CONTRACT_OWNER_ADDRESS, DEFAULT_TREASURY_ADDRESS


def reset():
    """Drop the alembic version table so that migrations restart from scratch"""
    schema = get_db_schema()
    if inspect(engine).has_table("alembic_version", schema=schema):
        table = Table("alembic_version", Base.metadata, schema=schema)
        table.drop(engine)


def initialize_contract(db: Session, owner: str, treasury: str):
    BondLedgerContract(db).initialize(owner=owner, treasury=treasury)
    db.commit()


def init():
    """Create the bond ledger contract state from CONTRACT_OWNER_ADDRESS and DEFAULT_TREASURY_ADDRESS"""
    if CONTRACT_OWNER_ADDRESS is None or DEFAULT_TREASURY_ADDRESS is None:
        print("CONTRACT_OWNER_ADDRESS and DEFAULT_TREASURY_ADDRESS must be set")
        sys.exit(1)

    db = SessionLocal()
    try:
        initialize_contract(db, CONTRACT_OWNER_ADDRESS, DEFAULT_TREASURY_ADDRESS)
    except ContractRevertError as err:
        print(f"Failed to initialize the contract: {err.message}")
        sys.exit(1)
    finally:
        db.close()


argv = sys.argv

if len(argv) > 1:
    if argv[1] == "reset":
        reset()
    elif argv[1] == "init":
        init()
