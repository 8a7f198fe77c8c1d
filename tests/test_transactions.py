"""Tests for the transaction endpoints, bulk operations and CSV import."""

from .conftest import API, create_account, create_category, create_transaction


STATEMENT = (
    "Date,Description,Amount\n"
    "2024-03-01 09:30:00,Corner Grocery,-12.34\n"
    "2024-03-02 18:00:00,Employer,2500\n"
)


class TestTransactionCrud:
    def test_create_and_get(self, client, auth_headers):
        account = create_account(client, auth_headers)
        created = create_transaction(client, auth_headers, account_id=account["id"], notes="weekly")
        assert created["amount"] == -10_000
        assert created["date"] == "2024-03-01"
        assert created["category_id"] is None

        response = client.get(f"{API}/transactions/{created['id']}", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["data"] == created

    def test_list_filters_and_orders(self, client, auth_headers):
        checking = create_account(client, auth_headers, "Checking")
        savings = create_account(client, auth_headers, "Savings")
        food = create_category(client, auth_headers, "Food")
        create_transaction(client, auth_headers, account_id=checking["id"], date="2024-03-01", payee="B")
        create_transaction(
            client, auth_headers, account_id=checking["id"], date="2024-03-05", payee="A", category_id=food["id"]
        )
        create_transaction(client, auth_headers, account_id=savings["id"], date="2024-03-03", payee="C")
        create_transaction(client, auth_headers, account_id=checking["id"], date="2024-04-01", payee="Late")

        response = client.get(
            f"{API}/transactions/", params={"from": "2024-03-01", "to": "2024-03-31"}, headers=auth_headers
        )
        assert response.status_code == 200
        items = response.json()["data"]
        assert [item["payee"] for item in items] == ["A", "C", "B"]
        assert items[0]["account"] == "Checking"
        assert items[0]["category"] == "Food"
        assert items[1]["category"] is None

        response = client.get(
            f"{API}/transactions/",
            params={"from": "2024-03-01", "to": "2024-03-31", "accountId": savings["id"]},
            headers=auth_headers,
        )
        assert [item["payee"] for item in response.json()["data"]] == ["C"]

    def test_list_rejects_bad_dates(self, client, auth_headers):
        response = client.get(f"{API}/transactions/", params={"from": "yesterday"}, headers=auth_headers)
        assert response.status_code == 400
        response = client.get(
            f"{API}/transactions/", params={"from": "2024-03-02", "to": "2024-03-01"}, headers=auth_headers
        )
        assert response.status_code == 400

    def test_update(self, client, auth_headers):
        account = create_account(client, auth_headers)
        category = create_category(client, auth_headers)
        created = create_transaction(client, auth_headers, account_id=account["id"])
        payload = {
            "amount": 5000,
            "payee": "Refund",
            "date": "2024-03-09",
            "account_id": account["id"],
            "category_id": category["id"],
        }
        response = client.patch(f"{API}/transactions/{created['id']}", json=payload, headers=auth_headers)
        assert response.status_code == 200
        updated = response.json()["data"]
        assert updated["payee"] == "Refund"
        assert updated["category_id"] == category["id"]
        assert client.get(f"{API}/transactions/{created['id']}", headers=auth_headers).json()["data"] == updated

    def test_update_unknown_is_404(self, client, auth_headers):
        account = create_account(client, auth_headers)
        payload = {"amount": 1, "payee": "X", "date": "2024-03-01", "account_id": account["id"]}
        response = client.patch(f"{API}/transactions/missing", json=payload, headers=auth_headers)
        assert response.status_code == 404

    def test_delete(self, client, auth_headers):
        account = create_account(client, auth_headers)
        created = create_transaction(client, auth_headers, account_id=account["id"])
        response = client.delete(f"{API}/transactions/{created['id']}", headers=auth_headers)
        assert response.json()["data"] == {"id": created["id"]}
        assert client.delete(f"{API}/transactions/{created['id']}", headers=auth_headers).status_code == 404

    def test_missing_fields_are_validation_errors(self, client, auth_headers):
        account = create_account(client, auth_headers)
        response = client.post(
            f"{API}/transactions/", json={"amount": 1, "account_id": account["id"]}, headers=auth_headers
        )
        assert response.status_code == 422


class TestOwnership:
    def test_foreign_account_rejected(self, client, auth_headers, other_headers):
        theirs = create_account(client, other_headers)
        response = client.post(
            f"{API}/transactions/",
            json={"amount": -1, "payee": "X", "date": "2024-03-01", "account_id": theirs["id"]},
            headers=auth_headers,
        )
        assert response.status_code == 400
        assert "not found" in response.json()["detail"]

    def test_foreign_category_rejected_on_update(self, client, auth_headers, other_headers):
        account = create_account(client, auth_headers)
        created = create_transaction(client, auth_headers, account_id=account["id"])
        theirs = create_category(client, other_headers)
        payload = {
            "amount": -1,
            "payee": "X",
            "date": "2024-03-01",
            "account_id": account["id"],
            "category_id": theirs["id"],
        }
        response = client.patch(f"{API}/transactions/{created['id']}", json=payload, headers=auth_headers)
        assert response.status_code == 400

    def test_foreign_transactions_are_invisible(self, client, auth_headers, other_headers):
        account = create_account(client, auth_headers)
        created = create_transaction(client, auth_headers, account_id=account["id"])
        assert client.get(f"{API}/transactions/{created['id']}", headers=other_headers).status_code == 404
        assert client.delete(f"{API}/transactions/{created['id']}", headers=other_headers).status_code == 404
        response = client.get(
            f"{API}/transactions/", params={"from": "2024-01-01", "to": "2024-12-31"}, headers=other_headers
        )
        assert response.json()["data"] == []


class TestBulkOperations:
    def test_bulk_create(self, client, auth_headers):
        account = create_account(client, auth_headers)
        payload = [
            {"amount": -1000, "payee": "A", "date": "2024-03-01", "account_id": account["id"]},
            {"amount": 2000, "payee": "B", "date": "2024-03-02", "account_id": account["id"]},
        ]
        response = client.post(f"{API}/transactions/bulk-create", json=payload, headers=auth_headers)
        assert response.status_code == 201
        created = response.json()["data"]
        assert [item["payee"] for item in created] == ["A", "B"]
        assert len({item["id"] for item in created}) == 2

    def test_bulk_create_is_all_or_nothing(self, client, auth_headers, other_headers):
        account = create_account(client, auth_headers)
        theirs = create_account(client, other_headers)
        payload = [
            {"amount": -1000, "payee": "A", "date": "2024-03-01", "account_id": account["id"]},
            {"amount": -1000, "payee": "B", "date": "2024-03-01", "account_id": theirs["id"]},
        ]
        response = client.post(f"{API}/transactions/bulk-create", json=payload, headers=auth_headers)
        assert response.status_code == 400
        response = client.get(
            f"{API}/transactions/", params={"from": "2024-03-01", "to": "2024-03-01"}, headers=auth_headers
        )
        assert response.json()["data"] == []

    def test_bulk_create_empty(self, client, auth_headers):
        response = client.post(f"{API}/transactions/bulk-create", json=[], headers=auth_headers)
        assert response.status_code == 201
        assert response.json()["data"] == []

    def test_bulk_delete_only_own(self, client, auth_headers, other_headers):
        account = create_account(client, auth_headers)
        mine = create_transaction(client, auth_headers, account_id=account["id"])
        their_account = create_account(client, other_headers)
        theirs = create_transaction(client, other_headers, account_id=their_account["id"])

        response = client.post(
            f"{API}/transactions/bulk-delete", json={"ids": [mine["id"], theirs["id"]]}, headers=auth_headers
        )
        assert response.json()["data"] == [{"id": mine["id"]}]
        assert client.get(f"{API}/transactions/{theirs['id']}", headers=other_headers).status_code == 200


class TestCsvImport:
    def test_preview(self, client, auth_headers):
        response = client.post(f"{API}/transactions/import/preview", json={"csv": STATEMENT}, headers=auth_headers)
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["headers"] == ["Date", "Description", "Amount"]
        assert data["body"][0] == ["2024-03-01 09:30:00", "Corner Grocery", "-12.34"]

    def test_preview_of_empty_file(self, client, auth_headers):
        response = client.post(f"{API}/transactions/import/preview", json={"csv": ""}, headers=auth_headers)
        assert response.status_code == 400

    def test_import(self, client, auth_headers):
        account = create_account(client, auth_headers)
        payload = {"csv": STATEMENT, "account_id": account["id"], "columns": {"0": "date", "1": "payee", "2": "amount"}}
        response = client.post(f"{API}/transactions/import", json=payload, headers=auth_headers)
        assert response.status_code == 201
        created = response.json()["data"]
        assert [(item["date"], item["payee"], item["amount"]) for item in created] == [
            ("2024-03-01", "Corner Grocery", -12340),
            ("2024-03-02", "Employer", 2500000),
        ]
        assert all(item["account_id"] == account["id"] for item in created)

    def test_import_requires_every_field(self, client, auth_headers):
        account = create_account(client, auth_headers)
        payload = {"csv": STATEMENT, "account_id": account["id"], "columns": {"0": "date", "2": "amount"}}
        response = client.post(f"{API}/transactions/import", json=payload, headers=auth_headers)
        assert response.status_code == 400
        assert "payee" in response.json()["detail"]

    def test_import_rejects_bad_rows(self, client, auth_headers):
        account = create_account(client, auth_headers)
        csv_text = "Date,Payee,Amount\n2024-03-01,Shop,-1\n"
        payload = {"csv": csv_text, "account_id": account["id"], "columns": {"0": "date", "1": "payee", "2": "amount"}}
        response = client.post(f"{API}/transactions/import", json=payload, headers=auth_headers)
        assert response.status_code == 400
        assert "Row 1" in response.json()["detail"]

    def test_import_into_foreign_account(self, client, auth_headers, other_headers):
        theirs = create_account(client, other_headers)
        payload = {"csv": STATEMENT, "account_id": theirs["id"], "columns": {"0": "date", "1": "payee", "2": "amount"}}
        response = client.post(f"{API}/transactions/import", json=payload, headers=auth_headers)
        assert response.status_code == 400

    def test_unknown_field_is_validation_error(self, client, auth_headers):
        account = create_account(client, auth_headers)
        payload = {"csv": STATEMENT, "account_id": account["id"], "columns": {"0": "memo"}}
        response = client.post(f"{API}/transactions/import", json=payload, headers=auth_headers)
        assert response.status_code == 422


class TestAmountRange:
    def test_amount_beyond_integer_column_rejected(self, client, auth_headers):
        account = create_account(client, auth_headers)
        payload = {"amount": 10**20, "payee": "X", "date": "2024-03-01", "account_id": account["id"]}
        assert client.post(f"{API}/transactions/", json=payload, headers=auth_headers).status_code == 422
        assert client.post(f"{API}/transactions/bulk-create", json=[payload], headers=auth_headers).status_code == 422

        created = create_transaction(client, auth_headers, account_id=account["id"])
        response = client.patch(f"{API}/transactions/{created['id']}", json=payload, headers=auth_headers)
        assert response.status_code == 422

    def test_largest_amount_is_stored(self, client, auth_headers):
        account = create_account(client, auth_headers)
        created = create_transaction(client, auth_headers, account_id=account["id"], amount=-(2**63 - 1))
        response = client.get(f"{API}/transactions/{created['id']}", headers=auth_headers)
        assert response.json()["data"]["amount"] == -(2**63 - 1)

    def test_import_amount_beyond_integer_column_rejected(self, client, auth_headers):
        account = create_account(client, auth_headers)
        csv_text = "Date,Payee,Amount\n2024-03-01 09:30:00,Lottery,1e20\n"
        payload = {"csv": csv_text, "account_id": account["id"], "columns": {"0": "date", "1": "payee", "2": "amount"}}
        response = client.post(f"{API}/transactions/import", json=payload, headers=auth_headers)
        assert response.status_code == 400
        assert "Row 1: invalid amount" in response.json()["detail"]
