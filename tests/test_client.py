"""Tests for the requests-based API client and the CSV import script."""

import json

import pytest
import requests

from finance_tracker_client import FinanceTrackerAPI, summary_in_units
from import_transactions import build_payloads, parse_mapping
from finance_tracker_api.app.services.import_service import CsvImportError


def make_response(status_code, body=None):
    response = requests.Response()
    response.status_code = status_code
    response._content = json.dumps(body).encode("utf-8") if body is not None else b""
    response.url = "http://api.test"
    return response


class StubSession:
    """Records requests and replays canned responses."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def request(self, **kwargs):
        self.calls.append(kwargs)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def make_api(*responses, token="tok"):
    session = StubSession(*responses)
    return FinanceTrackerAPI(base_url="http://api.test/api/v1/", token=token, session=session), session


class TestFinanceTrackerAPI:
    def test_unwraps_data_and_sends_token(self):
        api, session = make_api(make_response(200, {"data": [{"id": "a1", "name": "Checking"}]}))
        accounts, error = api.list_accounts()
        assert error is None
        assert accounts == [{"id": "a1", "name": "Checking"}]
        call = session.calls[0]
        assert call["method"] == "GET"
        assert call["url"] == "http://api.test/api/v1/accounts/"
        assert call["headers"]["Authorization"] == "Bearer tok"

    def test_query_aliases_and_dropped_none(self):
        api, session = make_api(make_response(200, {"data": []}))
        api.list_transactions(date_from="2024-03-01", account_id="a1")
        assert session.calls[0]["params"] == {"from": "2024-03-01", "accountId": "a1"}

    def test_login_stores_token(self):
        api, session = make_api(make_response(200, {"access_token": "new", "token_type": "bearer"}), token=None)
        token, error = api.login("a@example.com", "secret")
        assert (token, error) == ("new", None)
        assert api.token == "new"
        assert "Authorization" not in session.calls[0]["headers"]

    def test_http_error_detail(self):
        api, _ = make_api(make_response(404, {"detail": "Account x not found"}))
        data, error = api.get_account("x")
        assert data is None
        assert error == {"status_code": 404, "message": "Account x not found"}

    def test_list_error_returns_empty_list(self):
        api, _ = make_api(make_response(401, {"detail": "Not authenticated"}))
        accounts, error = api.list_accounts()
        assert accounts == []
        assert error["status_code"] == 401

    def test_connection_error(self):
        api, _ = make_api(requests.ConnectionError("refused"))
        data, error = api.get_summary()
        assert data is None
        assert error == {"status_code": None, "message": "refused"}

    def test_import_csv_sends_string_column_keys(self):
        api, session = make_api(make_response(201, {"data": []}))
        api.import_csv("csv", "a1", {0: "date", 1: "payee", 2: "amount"})
        assert session.calls[0]["json"] == {
            "csv": "csv",
            "account_id": "a1",
            "columns": {"0": "date", "1": "payee", "2": "amount"},
        }

    def test_find_account_by_name(self):
        accounts = {"data": [{"id": "a1", "name": "Checking"}, {"id": "a2", "name": "Savings"}]}
        api, _ = make_api(make_response(200, accounts), make_response(200, accounts))
        assert api.find_account("savings") == ({"id": "a2", "name": "Savings"}, None)
        account, error = api.find_account("brokerage")
        assert account is None
        assert error["status_code"] == 404


def test_summary_in_units():
    summary = {
        "income_amount": 101000,
        "expenses_amount": -67500,
        "remaining_amount": 33500,
        "income_change": 10,
        "categories": [{"name": "Rent", "value": 30000}],
        "days": [{"date": "2024-03-01", "income": 1500, "expenses": 0}],
    }
    converted = summary_in_units(summary)
    assert converted["income_amount"] == 101.0
    assert converted["expenses_amount"] == -67.5
    assert converted["income_change"] == 10
    assert converted["categories"] == [{"name": "Rent", "value": 30.0}]
    assert converted["days"][0]["income"] == 1.5
    assert summary["income_amount"] == 101000


class TestImportScript:
    def test_parse_mapping(self):
        assert parse_mapping("0=date, 1=Payee,2=amount,3=skip") == {
            0: "date",
            1: "payee",
            2: "amount",
            3: "skip",
        }

    def test_parse_mapping_rejects_garbage(self):
        with pytest.raises(CsvImportError):
            parse_mapping("date=0")

    def test_build_payloads(self):
        csv_text = "When,Who,How much\n2024-03-01 09:30:00,Corner Grocery,-12.34\n"
        payloads = build_payloads(csv_text, {0: "date", 1: "payee", 2: "amount"}, "a1")
        assert payloads == [
            {
                "amount": -12340,
                "payee": "Corner Grocery",
                "notes": None,
                "date": "2024-03-01",
                "account_id": "a1",
                "category_id": None,
            }
        ]

    def test_build_payloads_matches_server_validation(self):
        csv_text = "When,Who,How much\n2024-03-01 09:30:00,Corner Grocery,1e20\n"
        with pytest.raises(CsvImportError, match="Row 1: invalid amount"):
            build_payloads(csv_text, {0: "date", 1: "payee", 2: "amount"}, "a1")
