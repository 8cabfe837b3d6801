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

from enum import Enum
from functools import lru_cache
from typing import Any, List, Type, Union

from fastapi.openapi.utils import get_openapi
from pydantic import BaseModel, Field, create_model

from app.exceptions import AppError


class MetaModel(BaseModel):
    code: int
    title: str


class Error422DetailModel(BaseModel):
    loc: List[str] = Field(..., examples=[["header", "caller-address"]])
    msg: str = Field(..., examples=["field required"])
    type: str = Field(..., examples=["missing"])


def _default_error_model(
    status_code: int,
    titles: list[str],
    codes: list[int],
    detail_type: Any = str,
    detail_examples: list | None = None,
) -> Type[BaseModel]:
    """Build the generic error response model for a status code"""
    meta_model = create_model(
        f"Error{status_code}MetaModel",
        __base__=MetaModel,
        code=(int, Field(..., examples=codes)),
        title=(str, Field(..., examples=titles)),
    )
    detail_field = (
        Field(..., examples=detail_examples) if detail_examples else Field(...)
    )
    return create_model(
        f"Error{status_code}Model",
        meta=(meta_model, Field(...)),
        detail=(detail_type, detail_field),
    )


DEFAULT_RESPONSE: dict[int, dict[str, str | Type[BaseModel]]] = {
    400: {
        "description": "Invalid Parameter Error / Token Service Error / Contract Revert Error etc",
        "model": _default_error_model(
            400,
            titles=["InvalidParameterError", "TokenServiceError", "ContractRevertError"],
            codes=[1, 5, 11, 130004],
            detail_examples=[
                "Attached payment does not equal face value times units.",
                "createFungibleToken failed: response_code=172",
            ],
        ),
    },
    401: {
        "description": "Authorization Error",
        "model": _default_error_model(401, ["AuthorizationError"], [1]),
    },
    404: {
        "description": "Not Found Error",
        "model": _default_error_model(404, ["NotFound"], [1]),
    },
    405: {
        "description": "Method Not Allowed",
        "model": _default_error_model(405, ["MethodNotAllowed"], [1]),
    },
    422: {
        "description": "Validation Error",
        "model": _default_error_model(
            422, ["RequestValidationError"], [1], detail_type=List[Error422DetailModel]
        ),
    },
    503: {
        "description": "Service Unavailable Error",
        "model": _default_error_model(503, ["ServiceUnavailableError"], [1]),
    },
}


@lru_cache(None)
def create_error_model(app_error: Type[AppError]):
    """
    Create a response model from an AppError subclass.
    * create_model() generates a different model each time when called,
      so the result is cached per error class.

    @param app_error: AppError defined in app.exceptions
    @return: pydantic Model created dynamically
    """
    base_name = app_error.__name__
    codes = [app_error.code] if app_error.code is not None else app_error.code_list
    error_code_enum = Enum(f"{base_name}Code", {f"{code}": code for code in codes})
    metainfo_model = create_model(
        f"{base_name}Metainfo",
        code=(error_code_enum, Field(..., examples=codes[:1])),
        title=(str, Field(..., examples=[base_name])),
    )
    error_model = create_model(
        f"{base_name}Response",
        meta=(metainfo_model, Field(...)),
        detail=(str, Field()),
    )
    error_model.__doc__ = app_error.__doc__
    return error_model


def get_routers_responses(*args: Type[AppError] | int):
    """
    Return the responses dictionary for a router decorator.

    @param args: AppError classes or status codes of the generic error models
    @return: responses dict
    """
    responses_per_status_code: dict[int, list[Type[BaseModel]]] = {}
    for arg in args:
        if isinstance(arg, int):
            status_code, error_model = arg, DEFAULT_RESPONSE[arg]["model"]
        else:
            status_code, error_model = arg.status_code, create_error_model(arg)
        responses_per_status_code.setdefault(status_code, []).append(error_model)

    return {
        status_code: {
            "model": Union[tuple(set(error_models))],
            "description": DEFAULT_RESPONSE[status_code]["description"],
        }
        for status_code, error_models in responses_per_status_code.items()
    }


def custom_openapi(app):
    def openapi():
        openapi_schema = app.openapi_schema
        if openapi_schema is None:
            openapi_schema = get_openapi(
                title=app.title,
                version=app.version,
                openapi_version=app.openapi_version,
                description=app.description,
                routes=app.routes,
                tags=app.openapi_tags,
                servers=app.servers,
            )

        def _get(src: dict, *keys):
            tmp_src = src
            for key in keys:
                tmp_src = tmp_src.get(key)
                if tmp_src is None:
                    return None
            return tmp_src

        paths = _get(openapi_schema, "paths")
        if paths is not None:
            for path_info in paths.values():
                for router in path_info.values():
                    # Remove Default Validation Error Response Structure
                    # NOTE:
                    # HTTPValidationError is automatically added to APIs docs that have path, header, query,
                    # and body parameters.
                    # But HTTPValidationError does not have 'meta',
                    # and some APIs do not generate a Validation Error(API with no-required string parameter only, etc).
                    resp_422 = _get(router, "responses", "422")
                    if resp_422 is not None:
                        ref = _get(
                            resp_422, "content", "application/json", "schema", "$ref"
                        )
                        if ref == "#/components/schemas/HTTPValidationError":
                            router["responses"].pop("422")

                    # Remove empty response's contents
                    responses = _get(router, "responses")
                    for resp in responses.values():
                        schema = _get(resp, "content", "application/json", "schema")
                        if schema == {}:
                            resp.pop("content")
                        any_of: list | None = _get(schema, "anyOf")
                        if any_of is not None:
                            schema["anyOf"] = sorted(any_of, key=lambda x: x["$ref"])

        return openapi_schema

    return openapi
