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

from typing import Annotated

from fastapi import Depends
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from config import DATABASE_SCHEMA, DATABASE_URL, DB_ECHO


def get_engine(uri: str):
    if uri.startswith("sqlite"):
        return get_sqlite_engine(uri)
    options = {
        "pool_recycle": 3600,
        "pool_size": 10,
        "pool_timeout": 30,
        "pool_pre_ping": True,
        "max_overflow": 30,
        "echo": DB_ECHO,
    }
    return create_engine(uri, **options)


def get_sqlite_engine(uri: str):
    _engine = create_engine(
        uri,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=DB_ECHO,
    )

    # NOTE:
    # pysqlite emits BEGIN lazily and breaks SAVEPOINT handling.
    # Disable its transaction control and emit BEGIN ourselves.
    @event.listens_for(_engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(_engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN")

    return _engine


# Create Engine
engine = get_engine(DATABASE_URL)

# Create Session Maker
SessionLocal = sessionmaker(autocommit=False, autoflush=True, bind=engine)


def db_session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


DBSession = Annotated[Session, Depends(db_session)]


def get_db_schema():
    if DATABASE_URL.startswith("sqlite"):
        return None
    return DATABASE_SCHEMA
