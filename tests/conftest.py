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

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import delete

from app.database import SessionLocal, db_session, engine
from app.main import app
from app.model.db import Base
from app.model.ledger import BondLedgerContract
from tests.account_config import default_account
from tests.utils.ledger_utils import FixedClock


#####################################################
# Test Client
#####################################################
@pytest.fixture(scope="session")
def client():
    client = TestClient(app)
    return client


#####################################################
# DB
#####################################################
@pytest.fixture(scope="session")
def db_engine():
    Base.metadata.create_all(engine)

    yield engine

    Base.metadata.drop_all(engine)


@pytest.fixture(scope="function")
def db(db_engine):
    # Create DB session
    _db = SessionLocal()

    def override_inject_db_session():
        return _db

    # Replace target API's dependency DB session.
    app.dependency_overrides[db_session] = override_inject_db_session

    yield _db

    _db.rollback()

    # Remove DB records
    for table in reversed(Base.metadata.sorted_tables):
        _db.execute(delete(table))
    _db.commit()
    _db.close()

    app.dependency_overrides[db_session] = db_session


#####################################################
# Bond ledger contract
#####################################################
@pytest.fixture(scope="function")
def clock():
    return FixedClock()


@pytest.fixture(scope="function")
def contract(db, clock):
    _contract = BondLedgerContract(db, clock=clock)
    _contract.initialize(
        owner=default_account("owner"), treasury=default_account("treasury")
    )
    db.commit()
    return _contract
