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

from tests.account_config import default_account


class TestRetrieveAccountBalance:
    # target API endpoint
    base_url = "/accounts/{account_address}/balance"

    ###########################################################################
    # Normal Case
    ###########################################################################

    # <Normal_1>
    def test_normal_1(self, client, db, contract):
        account = default_account("investor1")
        contract.hbar.credit(account, 12345)
        contract.hbar.set_accepts_hbar(account, False)
        db.commit()

        # request target api
        resp = client.get(self.base_url.format(account_address=account))

        # assertion
        assert resp.status_code == 200
        assert resp.json() == {
            "account_address": account,
            "hbar_balance": 12345,
            "accepts_hbar": False,
        }

    # <Normal_2>
    # Unknown account
    def test_normal_2(self, client, db, contract):
        account = default_account("investor2")

        # request target api
        resp = client.get(self.base_url.format(account_address=account))

        # assertion
        assert resp.status_code == 200
        assert resp.json() == {
            "account_address": account,
            "hbar_balance": 0,
            "accepts_hbar": True,
        }

    ###########################################################################
    # Error Case
    ###########################################################################

    # <Error_1>
    # Parameter Error(invalid address)
    def test_error_1(self, client, db, contract):
        # request target api
        resp = client.get(self.base_url.format(account_address="0x01"))

        # assertion
        assert resp.status_code == 422
        assert resp.json()["detail"][0]["loc"] == ["path", "account_address"]
