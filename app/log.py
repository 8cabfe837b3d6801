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

import logging
import sys
import urllib.parse
from datetime import UTC, datetime
from typing import TextIO

from fastapi import Request, Response

from config import ACCESS_LOGFILE, APP_ENV, AUTH_LOGFILE, LOG_LEVEL

logging.basicConfig(level=LOG_LEVEL)
# Application log: bond lifecycle, settlement and reverted calls
LOG = logging.getLogger("bond_ledger")
LOG.propagate = False
# Owner-gated calls (accepted and rejected)
AUTH_LOG = logging.getLogger("bond_ledger_auth")
AUTH_LOG.propagate = False
ACCESS_LOG = logging.getLogger("bond_ledger_access")
ACCESS_LOG.propagate = False

INFO_FORMAT = "[%(asctime)s] {}[%(process)d] [%(levelname)s] %(message)s"
DEBUG_FORMAT = "[%(asctime)s] {}[%(process)d] [%(levelname)s] %(message)s [in %(pathname)s:%(lineno)d]"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S %z"
# [client ip] [caller address] message
# Contract-level auth events have no request: client ip is "-".
AUTH_FORMAT = "[%s] [%s] %s"
ACCESS_FORMAT = '"%s %s HTTP/%s" %d (%.6fsec)'


def __add_handler(logger: logging.Logger, stream: TextIO, fmt: str, tag: str = ""):
    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(fmt.format(tag), TIMESTAMP_FORMAT))
    logger.addHandler(handler)


if APP_ENV == "live":
    __add_handler(LOG, sys.stdout, INFO_FORMAT)
    __add_handler(AUTH_LOG, open(AUTH_LOGFILE, "a"), INFO_FORMAT, "[AUTH-LOG] ")
    __add_handler(ACCESS_LOG, open(ACCESS_LOGFILE, "a"), INFO_FORMAT, "[ACCESS-LOG] ")
elif APP_ENV in ("dev", "local"):
    __add_handler(LOG, sys.stdout, DEBUG_FORMAT)
    __add_handler(AUTH_LOG, sys.stdout, DEBUG_FORMAT, "[AUTH-LOG] ")
    # Access lines keep the live format
    __add_handler(ACCESS_LOG, sys.stdout, INFO_FORMAT, "[ACCESS-LOG] ")


def get_logger():
    return LOG


def auth_info(address: str, msg: str, req: Request | None = None):
    AUTH_LOG.info(__auth_format(req, address, msg))


def auth_error(address: str, msg: str, req: Request | None = None):
    AUTH_LOG.warning(__auth_format(req, address, msg))


def output_access_log(req: Request, res: Response, request_start_time: datetime):
    url = __get_url(req)
    if url == "/":
        return

    response_time = (
        datetime.now(UTC).replace(tzinfo=None) - request_start_time
    ).total_seconds()
    access_msg = ACCESS_FORMAT % (
        req.scope.get("method", ""),
        url,
        req.scope.get("http_version", ""),
        res.status_code,
        response_time,
    )
    caller_address = req.headers.get("caller-address", "None")
    ACCESS_LOG.info(__auth_format(req, caller_address, access_msg))


def __auth_format(req: Request | None, address: str, msg: str):
    if req is None or req.client is None:
        _host = "-"
    else:
        _host = req.client.host
    return AUTH_FORMAT % (_host, address, msg)


def __get_url(req: Request):
    scope = req.scope
    url = urllib.parse.quote(scope.get("root_path", "") + scope.get("path", ""))
    if scope.get("query_string"):
        url = f"{url}?{scope['query_string'].decode('ascii')}"
    return url
