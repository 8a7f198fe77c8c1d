"""Finance Tracker API client.

A thin wrapper around the REST API served by ``finance_tracker_api``.
It uses the ``requests`` library and exposes one method per endpoint:

* :meth:`register` / :meth:`login` – obtain a bearer token.
* :meth:`list_accounts`, :meth:`create_account`, ... – account CRUD.
* :meth:`list_categories`, :meth:`create_category`, ... – category CRUD.
* :meth:`list_transactions`, :meth:`bulk_create_transactions`, ... –
  transaction CRUD and bulk operations.
* :meth:`preview_import` / :meth:`import_csv` – server-side CSV import.
* :meth:`get_summary` – dashboard summary.

Every method returns a tuple ``(data, error)``.  On success ``data`` is
the unwrapped ``data`` member of the response body and ``error`` is
``None``; on failure ``data`` is ``None`` (or an empty list for list
operations) and ``error`` is a dictionary with ``status_code`` and
``message``.

Amounts are exchanged in milliunits.  :func:`summary_in_units` converts
a summary into display units for presentation.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

import requests


logger = logging.getLogger(__name__)

Error = Dict[str, Any]


def from_milliunits(amount: int) -> float:
    return amount / 1000


def summary_in_units(summary: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy of a summary with every amount in display units."""
    converted = dict(summary)
    for key in ("income_amount", "expenses_amount", "remaining_amount"):
        converted[key] = from_milliunits(summary[key])
    converted["categories"] = [
        {**category, "value": from_milliunits(category["value"])}
        for category in summary.get("categories", [])
    ]
    converted["days"] = [
        {**day, "income": from_milliunits(day["income"]), "expenses": from_milliunits(day["expenses"])}
        for day in summary.get("days", [])
    ]
    return converted


class FinanceTrackerAPI:
    """Client for the Finance Tracker API.

    Args:
        base_url: Server URL including the version prefix, e.g.
            ``http://localhost:8000/api/v1``.
        token: Optional bearer token.  :meth:`login` sets it.
        session: Optional requests session.  If not supplied a session
            is created automatically.
        timeout: Per-request timeout in seconds.
    """

    def __init__(
        self,
        *,
        base_url: str,
        token: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(
        self, method: str, path: str, *, params: Dict[str, Any] | None = None,
        json_body: Any | None = None
    ) -> Tuple[Optional[Any], Optional[Error]]:
        """Perform an HTTP request to the API.

        Args:
            method: HTTP method (``GET``, ``POST``, ``PATCH``, ``DELETE``).
            path: Path relative to :attr:`base_url` (e.g. ``/accounts/``).
            params: Query parameters; ``None`` values are dropped.
            json_body: JSON body to send with the request.
        Returns:
            A tuple ``(body, error)`` with the parsed JSON body.
        """
        url = f"{self.base_url}{path}"
        headers: Dict[str, str] = {}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        if params:
            params = {key: value for key, value in params.items() if value is not None}
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                params=params or None,
                json=json_body,
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = ""
            if exc.response is not None:
                try:
                    err_json = exc.response.json()
                    detail = err_json.get("detail") if isinstance(err_json, dict) else None
                    message = detail if isinstance(detail, str) else str(detail or err_json)
                except ValueError:
                    message = exc.response.text
            if not message:
                message = str(exc)
            logger.error("API request failed (%s): %s", status, message)
            return None, {"status_code": status, "message": message}
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

    def _data(self, method: str, path: str, **kwargs: Any) -> Tuple[Optional[Any], Optional[Error]]:
        body, error = self._request(method, path, **kwargs)
        if error:
            return None, error
        if isinstance(body, dict) and "data" in body:
            return body["data"], None
        return body, None

    def _list(self, path: str, **kwargs: Any) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        data, error = self._data("GET", path, **kwargs)
        if error:
            return [], error
        return data or [], None

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------
    def register(self, email: str, password: str, full_name: Optional[str] = None) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._data("POST", "/users/", json_body={"email": email, "password": password, "full_name": full_name})

    def login(self, email: str, password: str) -> Tuple[Optional[str], Optional[Error]]:
        """Log in and remember the returned token for later calls."""
        body, error = self._request("POST", "/users/login", json_body={"email": email, "password": password})
        if error:
            return None, error
        self.token = body["access_token"]
        return self.token, None

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------
    def list_accounts(self) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        return self._list("/accounts/")

    def get_account(self, account_id: str) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._data("GET", f"/accounts/{account_id}")

    def create_account(self, name: str) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._data("POST", "/accounts/", json_body={"name": name})

    def update_account(self, account_id: str, name: str) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._data("PATCH", f"/accounts/{account_id}", json_body={"name": name})

    def delete_account(self, account_id: str) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._data("DELETE", f"/accounts/{account_id}")

    def bulk_delete_accounts(self, ids: List[str]) -> Tuple[Optional[List[Dict[str, Any]]], Optional[Error]]:
        return self._data("POST", "/accounts/bulk-delete", json_body={"ids": ids})

    def find_account(self, name_or_id: str) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Find an account by id or, failing that, by case-insensitive name."""
        accounts, error = self.list_accounts()
        if error:
            return None, error
        for account in accounts:
            if account["id"] == name_or_id:
                return account, None
        for account in accounts:
            if account["name"].lower() == name_or_id.lower():
                return account, None
        return None, {"status_code": 404, "message": f"Account {name_or_id} not found"}

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------
    def list_categories(self) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        return self._list("/categories/")

    def get_category(self, category_id: str) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._data("GET", f"/categories/{category_id}")

    def create_category(self, name: str) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._data("POST", "/categories/", json_body={"name": name})

    def update_category(self, category_id: str, name: str) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._data("PATCH", f"/categories/{category_id}", json_body={"name": name})

    def delete_category(self, category_id: str) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._data("DELETE", f"/categories/{category_id}")

    def bulk_delete_categories(self, ids: List[str]) -> Tuple[Optional[List[Dict[str, Any]]], Optional[Error]]:
        return self._data("POST", "/categories/bulk-delete", json_body={"ids": ids})

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------
    def list_transactions(
        self,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
        account_id: Optional[str] = None,
    ) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        return self._list(
            "/transactions/",
            params={"from": date_from, "to": date_to, "accountId": account_id},
        )

    def get_transaction(self, transaction_id: str) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._data("GET", f"/transactions/{transaction_id}")

    def create_transaction(self, payload: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._data("POST", "/transactions/", json_body=payload)

    def update_transaction(self, transaction_id: str, payload: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._data("PATCH", f"/transactions/{transaction_id}", json_body=payload)

    def delete_transaction(self, transaction_id: str) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._data("DELETE", f"/transactions/{transaction_id}")

    def bulk_create_transactions(self, payloads: List[Dict[str, Any]]) -> Tuple[Optional[List[Dict[str, Any]]], Optional[Error]]:
        return self._data("POST", "/transactions/bulk-create", json_body=payloads)

    def bulk_delete_transactions(self, ids: List[str]) -> Tuple[Optional[List[Dict[str, Any]]], Optional[Error]]:
        return self._data("POST", "/transactions/bulk-delete", json_body={"ids": ids})

    def preview_import(self, csv_text: str) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._data("POST", "/transactions/import/preview", json_body={"csv": csv_text})

    def import_csv(
        self, csv_text: str, account_id: str, columns: Dict[int, Optional[str]]
    ) -> Tuple[Optional[List[Dict[str, Any]]], Optional[Error]]:
        """Let the server map and store a CSV upload.

        ``columns`` maps column indexes to ``"amount"``, ``"date"``,
        ``"payee"`` or ``"skip"``.
        """
        payload = {
            "csv": csv_text,
            "account_id": account_id,
            "columns": {str(index): field for index, field in columns.items()},
        }
        return self._data("POST", "/transactions/import", json_body=payload)

    # ------------------------------------------------------------------
    # Summary
    # ------------------------------------------------------------------
    def get_summary(
        self,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
        account_id: Optional[str] = None,
    ) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._data(
            "GET",
            "/summary/",
            params={"from": date_from, "to": date_to, "accountId": account_id},
        )
