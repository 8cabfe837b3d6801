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

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from pydantic_core import ArgsKwargs, ErrorDetails
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.database import DBSession
from app.exceptions import (
    AppError,
    AuthorizationError,
    BadRequestError,
    ContractRevertError,
    ServiceUnavailableError,
)
from app.log import LOG, output_access_log
from app.routers.marketplace import account, bond, common, contract, issuer
from app.utils.docs_utils import custom_openapi
from config import SERVER_NAME

tags_metadata = [
    {"name": "root", "description": ""},
    {"name": "common", "description": "Common functions"},
    {"name": "contract", "description": "Contract administration"},
    {"name": "issuer", "description": "Issuer registration and KYC"},
    {"name": "bond", "description": "Bond lifecycle, purchase and redemption"},
    {"name": "account", "description": "HBAR accounts"},
]

app = FastAPI(
    title="microbond ledger",
    description="Micro-bond marketplace ledger for Hedera token service",
    version="1.0",
    license_info={
        "name": "Apache 2.0",
        "url": "http://www.apache.org/licenses/LICENSE-2.0.html",
    },
    openapi_tags=tags_metadata,
)


@app.middleware("http")
async def api_call_handler(request: Request, call_next):
    request_start_time = datetime.now(UTC).replace(tzinfo=None)
    response = await call_next(request)
    output_access_log(request, response, request_start_time)
    return response


app.openapi = custom_openapi(app)


###############################################################
# ROUTER
###############################################################


@app.get("/", tags=["root"])
def root(db: DBSession):
    try:
        db.connection()
    except Exception as err:
        LOG.exception("Database connection failed")
        raise ServiceUnavailableError(str(err)) from None
    return {"server": SERVER_NAME}


app.include_router(common.router)
app.include_router(contract.router)
app.include_router(issuer.router)
app.include_router(bond.router)
app.include_router(account.router)


###############################################################
# EXCEPTION
###############################################################


def error_response(
    status_code: int, title: str, code: int = 1, detail=None
) -> JSONResponse:
    content = {"meta": {"code": code, "title": title}}
    if detail is not None:
        content["detail"] = detail
    return JSONResponse(status_code=status_code, content=jsonable_encoder(content))


def convert_errors(
    e: ValidationError | RequestValidationError,
) -> list[ErrorDetails]:
    new_errors: list[ErrorDetails] = []
    for error in e.errors():
        # Drop the documentation link pydantic attaches to each error
        error.pop("url", None)
        # Query models validate ArgsKwargs, which is not JSON serializable
        if isinstance(error.get("input"), ArgsKwargs):
            error["input"] = error["input"].kwargs
        new_errors.append(error)
    return new_errors


# 500:InternalServerError
@app.exception_handler(500)
async def internal_server_error_handler(request: Request, exc: Exception):
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "InternalServerError"
    )


# 422:RequestValidationError
# NOTE: ValidationError covers models validated inside the handlers
@app.exception_handler(RequestValidationError)
@app.exception_handler(ValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError | ValidationError
):
    return error_response(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "RequestValidationError",
        detail=convert_errors(exc),
    )


# 400:ContractRevertError
@app.exception_handler(ContractRevertError)
async def contract_revert_error_handler(request: Request, exc: ContractRevertError):
    LOG.error(
        f"Contract call reverted: path={request.url.path}, code={exc.code}, message={exc.message}"
    )
    return error_response(
        exc.status_code, "ContractRevertError", code=exc.code, detail=exc.message
    )


# 400:BadRequestError
# 401:AuthorizationError
# 503:ServiceUnavailable
@app.exception_handler(BadRequestError)
@app.exception_handler(AuthorizationError)
@app.exception_handler(ServiceUnavailableError)
async def app_error_handler(request: Request, exc: AppError):
    return error_response(
        exc.status_code,
        exc.__class__.__name__,
        code=exc.code,
        detail=exc.args[0] if len(exc.args) > 0 else None,
    )


# 404:NotFound
@app.exception_handler(404)
async def not_found_error_handler(request: Request, exc: StarletteHTTPException):
    return error_response(
        status.HTTP_404_NOT_FOUND, "NotFound", detail=exc.detail
    )


# 405:MethodNotAllowed
@app.exception_handler(405)
async def method_not_allowed_error_handler(
    request: Request, exc: StarletteHTTPException
):
    return error_response(status.HTTP_405_METHOD_NOT_ALLOWED, "MethodNotAllowed")
