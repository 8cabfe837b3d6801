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

from fastapi import APIRouter
from sqlalchemy import select
from sqlalchemy.orm import Session

from app import log
from app.database import DBSession
from app.exceptions import ServiceUnavailableError
from app.model.db import ContractState
from app.utils.docs_utils import get_routers_responses

LOG = log.get_logger()

router = APIRouter(tags=["common"])


# GET: /healthcheck
@router.get(
    "/healthcheck",
    operation_id="ServiceHealthCheck",
    response_model=None,
    responses=get_routers_responses(ServiceUnavailableError),
)
def service_health_check(db: DBSession):
    """Service health check

    Check following services are available:
    - Database
    - Bond ledger contract (initialized)
    """
    errors = []

    try:
        # Check database is available
        db.connection()
        # Check contract state exists
        __check_contract_is_initialized(errors, db)
    except Exception as err:
        LOG.exception(err)
        errors.append("Can't connect to database")

    if len(errors) > 0:
        raise ServiceUnavailableError(errors)

    return


def __check_contract_is_initialized(errors: list, db: Session):
    """Check if the contract state has been initialized"""
    _state = db.scalars(select(ContractState).limit(1)).first()
    if _state is None:
        msg = "bond ledger contract is not initialized"
        LOG.error(msg)
        errors.append(msg)
