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
import time
from typing import Annotated, Optional

import click
import httpx
import typer
from rich import print
from rich.console import Console
from rich.table import Table

from app.model.db import BondStatus

logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


app = typer.Typer(pretty_exceptions_show_locals=False)


def _fail(message: str, resp: httpx.Response):
    typer.echo(typer.style(message, fg="red"), err=True)
    print(resp.json())
    sys.exit(1)


@app.command(name="list")
def list_bonds(
    status: Annotated[
        Optional[str],
        typer.Argument(
            click_type=click.Choice(
                [s.name for s in BondStatus], case_sensitive=False
            )
        ),
    ] = None,
    issuer_address: Annotated[Optional[str], typer.Option()] = None,
    api_url: Annotated[
        str, typer.Argument(..., envvar="API_URL")
    ] = "http://localhost:5000",
):
    params = {}
    if status is not None:
        params["status"] = BondStatus[status.upper()].value
    if issuer_address is not None:
        params["issuer_address"] = issuer_address

    resp = httpx.get(url=f"{api_url}/bonds", params=params)
    if resp.status_code != 200:
        _fail("Failed to get bonds", resp)

    console = Console()

    bond_table = Table()
    bond_table.add_column("Bond ID")
    bond_table.add_column("Issuer")
    bond_table.add_column("Face Value")
    bond_table.add_column("Available Units")
    bond_table.add_column("Issued Units")
    bond_table.add_column("Maturity")
    bond_table.add_column("Token ID")
    bond_table.add_column("Status")

    for _bond in resp.json()["bonds"]:
        bond_table.add_row(
            str(_bond["bond_id"]),
            _bond["issuer_address"],
            str(_bond["face_value"]),
            str(_bond["available_units"]),
            str(_bond["issued_units"]),
            str(_bond["maturity_timestamp"]),
            _bond["hts_token_id"],
            BondStatus(_bond["status"]).name,
        )

    console.print(bond_table)


@app.command(name="mature-due")
def mature_due(
    owner_address: Annotated[str, typer.Argument(..., envvar="OWNER_ADDRESS")],
    api_url: Annotated[
        str, typer.Argument(..., envvar="API_URL")
    ] = "http://localhost:5000",
):
    """Mark every issued bond whose maturity has passed as matured"""
    resp = httpx.get(
        url=f"{api_url}/bonds", params={"status": BondStatus.ISSUED.value}
    )
    if resp.status_code != 200:
        _fail("Failed to get bonds", resp)

    now = int(time.time())
    matured = []
    for _bond in resp.json()["bonds"]:
        if _bond["maturity_timestamp"] > now:
            continue
        resp = httpx.post(
            url=f"{api_url}/bonds/{_bond['bond_id']}/mature",
            headers={"caller-address": owner_address},
        )
        if resp.status_code != 200:
            _fail(f"Failed to mark bond {_bond['bond_id']} as matured", resp)
        matured.append(_bond["bond_id"])

    typer.echo(typer.style(f"Matured {len(matured)} bond(s)", fg="blue"))
    print(f"bond_ids: {matured}")


@app.command(name="pause")
def pause(
    owner_address: Annotated[str, typer.Argument(..., envvar="OWNER_ADDRESS")],
    api_url: Annotated[
        str, typer.Argument(..., envvar="API_URL")
    ] = "http://localhost:5000",
):
    resp = httpx.post(
        url=f"{api_url}/contract/pause", headers={"caller-address": owner_address}
    )
    if resp.status_code != 200:
        _fail("Failed to pause the contract", resp)

    typer.echo(typer.style("Successfully paused the contract", fg="blue"))


@app.command(name="unpause")
def unpause(
    owner_address: Annotated[str, typer.Argument(..., envvar="OWNER_ADDRESS")],
    api_url: Annotated[
        str, typer.Argument(..., envvar="API_URL")
    ] = "http://localhost:5000",
):
    resp = httpx.post(
        url=f"{api_url}/contract/unpause", headers={"caller-address": owner_address}
    )
    if resp.status_code != 200:
        _fail("Failed to unpause the contract", resp)

    typer.echo(typer.style("Successfully unpaused the contract", fg="blue"))


if __name__ == "__main__":
    app()
