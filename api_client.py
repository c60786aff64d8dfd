"""HTTP client for the Expensia backend.

Every backend call goes through ``ApiClient._request``: it attaches the bearer
token kept in the session store and turns a 401 from any endpoint into a full
session teardown. Methods return the decoded response body untouched; the
``unwrap*`` helpers check it against the canonical ``{"response": ...}``
envelope.
"""

import logging

import requests

logger = logging.getLogger(__name__)


def _parse_seconds(value):
    if value is None or isinstance(value, bool):
        return None
    try:
        seconds = int(float(value))
    except (TypeError, ValueError):
        return None
    return seconds if seconds > 0 else None


class ApiError(Exception):
    """A backend call that failed. ``status`` is None for connection failures."""

    def __init__(self, status, message=None, code=None, retry_after=None):
        super().__init__(message or f"Request failed with status {status}")
        self.status = status
        self.message = message
        self.code = code
        self.retry_after = retry_after

    @classmethod
    def from_response(cls, response):
        try:
            body = response.json()
        except ValueError:
            body = None
        if not isinstance(body, dict):
            body = {}

        message = body.get("message")
        if message is not None and not isinstance(message, str):
            message = str(message)
        return cls(
            response.status_code,
            message=message or None,
            code=body.get("errorCode"),
            retry_after=_parse_seconds(body.get("retryAfter"))
            or _parse_seconds(response.headers.get("Retry-After")),
        )


class UnauthorizedError(ApiError):
    """401 from the backend. The session store is already cleared."""


class ResponseShapeError(ApiError):
    """A successful response that does not match the canonical envelope."""


def unwrap(body):
    if not isinstance(body, dict) or "response" not in body:
        raise ResponseShapeError(None, "Unexpected response from server")
    return body["response"]


def unwrap_list(body):
    payload = unwrap(body)
    if not isinstance(payload, list):
        raise ResponseShapeError(None, "Expected a list in server response")
    return payload


def unwrap_page(body):
    """Return ``(items, total_pages)`` from a paged envelope."""
    payload = unwrap(body)
    if not isinstance(payload, dict) or not isinstance(payload.get("data"), list):
        raise ResponseShapeError(None, "Expected a page of results in server response")
    total_pages = payload.get("totalNoOfPages", 0)
    if not isinstance(total_pages, int):
        raise ResponseShapeError(None, "Expected a page count in server response")
    return payload["data"], total_pages


class ApiClient:
    def __init__(self, base_url, store, timeout=10.0, session=None, on_unauthorized=None):
        self.base_url = base_url.rstrip("/")
        self.store = store
        self.timeout = timeout
        self.http = session or requests.Session()
        self.http.headers.update({"Accept": "application/json"})
        self.on_unauthorized = on_unauthorized

    def _request(self, method, path, params=None, json=None, files=None, data=None, token=None):
        headers = {}
        token = token or self.store.token
        if token:
            headers["Authorization"] = f"Bearer {token}"

        logger.debug("%s %s", method, path)
        try:
            response = self.http.request(
                method,
                self.base_url + path,
                params=params,
                json=json,
                files=files,
                data=data,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise ApiError(None, f"Connection failed: {e}") from e

        if response.status_code == 401:
            logger.info("%s %s returned 401, clearing session", method, path)
            self.store.clear()
            if self.on_unauthorized:
                self.on_unauthorized()
            raise UnauthorizedError.from_response(response)

        if not 200 <= response.status_code < 300:
            logger.warning("%s %s returned %s", method, path, response.status_code)
            raise ApiError.from_response(response)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    # Auth
    def sign_in(self, email, password):
        return self._request("POST", "/auth/signin", json={"email": email, "password": password})

    def sign_up(self, username, email, password):
        return self._request(
            "POST", "/auth/signup",
            json={"userName": username, "email": email, "password": password},
        )

    def verify_email(self, code):
        return self._request("GET", "/auth/signup/verify", params={"code": code})

    def resend_verification_code(self, email):
        return self._request("GET", "/auth/signup/resend", params={"email": email})

    def verify_email_for_password_reset(self, email):
        return self._request("GET", "/auth/forgotPassword/verifyEmail", params={"email": email})

    def verify_password_reset_code(self, code):
        return self._request("GET", "/auth/forgotPassword/verifyCode", params={"code": code})

    def reset_password(self, email, password):
        return self._request(
            "POST", "/auth/forgotPassword/resetPassword",
            json={"email": email, "password": password},
        )

    # Transactions
    def get_transactions_by_user(self, email, page_number, page_size, search_key="",
                                 sort_field="date", sort_direction="desc", transaction_type=""):
        params = {
            "email": email,
            "pageNumber": page_number,
            "pageSize": page_size,
            "searchKey": search_key,
            "sortField": sort_field,
            "sortDirec": sort_direction,
            "transactionType": transaction_type,
        }
        return self._request("GET", "/transaction/getByUser", params=params)

    def get_transaction_by_id(self, transaction_id):
        return self._request("GET", "/transaction/getById", params={"id": transaction_id})

    def add_transaction(self, data):
        return self._request("POST", "/transaction/new", json=data)

    def update_transaction(self, transaction_id, data):
        return self._request(
            "PUT", "/transaction/update", params={"transactionId": transaction_id}, json=data
        )

    def delete_transaction(self, transaction_id):
        return self._request("DELETE", "/transaction/delete", params={"transactionId": transaction_id})

    def get_all_transactions(self, page_number, page_size, search_key=""):
        params = {"pageNumber": page_number, "pageSize": page_size, "searchKey": search_key}
        return self._request("GET", "/transaction/getAll", params=params)

    # Categories
    def get_all_categories(self):
        return self._request("GET", "/category/getAll")

    def add_category(self, name, transaction_type_id):
        return self._request(
            "POST", "/category/new",
            json={"categoryName": name, "transactionTypeId": transaction_type_id},
        )

    def update_category(self, category_id, name, transaction_type_id):
        return self._request(
            "PUT", "/category/update", params={"categoryId": category_id},
            json={"categoryName": name, "transactionTypeId": transaction_type_id},
        )

    def toggle_category_status(self, category_id):
        return self._request("DELETE", "/category/delete", params={"categoryId": category_id})

    # Reports
    def get_total_income_or_expense(self, user_id, transaction_type_id, month, year):
        params = {"userId": user_id, "transactionTypeId": transaction_type_id, "month": month, "year": year}
        return self._request("GET", "/report/getTotalIncomeOrExpense", params=params)

    def get_total_no_of_transactions(self, user_id, month, year):
        params = {"userId": user_id, "month": month, "year": year}
        return self._request("GET", "/report/getTotalNoOfTransactions", params=params)

    def get_total_by_category(self, email, category_id, month, year):
        params = {"email": email, "categoryId": category_id, "month": month, "year": year}
        return self._request("GET", "/report/getTotalByCategory", params=params)

    def get_monthly_summary(self, email):
        return self._request("GET", "/report/getMonthlySummaryByUser", params={"email": email})

    def get_dashboard_summary(self, email):
        return self._request("GET", "/report/getDashboardSummary", params={"email": email})

    def get_category_expense_breakdown(self, email, month, year):
        params = {"email": email, "month": month, "year": year}
        return self._request("GET", "/report/getCategoryExpenseBreakdown", params=params)

    # Monthly budget
    def create_budget(self, user_id, amount, month, year):
        return self._request(
            "POST", "/budget/create",
            json={"amount": amount, "month": month, "year": year, "userId": user_id},
        )

    def get_budget(self, user_id, month, year):
        return self._request("GET", "/budget/get", params={"userId": user_id, "month": month, "year": year})

    # Saved transactions
    def create_saved_transaction(self, data):
        return self._request("POST", "/saved/create", json=data)

    def get_saved_transactions_by_user(self, user_id):
        return self._request("GET", "/saved/user", params={"id": user_id})

    def get_saved_transactions_by_month(self, user_id):
        return self._request("GET", "/saved/month", params={"id": user_id})

    def get_saved_transaction_by_id(self, saved_id):
        return self._request("GET", "/saved/", params={"id": saved_id})

    def add_saved_transaction(self, saved_id):
        return self._request("GET", "/saved/add", params={"id": saved_id})

    def edit_saved_transaction(self, saved_id, data):
        return self._request("PUT", "/saved/", params={"id": saved_id}, json=data)

    def delete_saved_transaction(self, saved_id):
        return self._request("DELETE", "/saved/", params={"id": saved_id})

    def skip_saved_transaction(self, saved_id):
        return self._request("GET", "/saved/skip", params={"id": saved_id})

    # Users and admin
    def get_all_users(self, page_number, page_size, search_key=""):
        params = {"pageNumber": page_number, "pageSize": page_size, "searchKey": search_key}
        return self._request("GET", "/user/getAll", params=params)

    def toggle_user_status(self, user_id, enable):
        if enable:
            return self._request("PUT", "/user/enable", params={"userId": user_id})
        return self._request("DELETE", "/user/disable", params={"userId": user_id})

    def change_password(self, email, new_password):
        return self._request(
            "POST", "/user/settings/changePassword",
            json={"email": email, "password": new_password},
        )

    def get_system_overview(self):
        return self._request("GET", "/admin/system-overview")

    # Profile image
    def upload_profile_image(self, email, filename, content, content_type):
        return self._request(
            "POST", "/user/settings/profileImg",
            data={"email": email},
            files={"file": (filename, content, content_type)},
        )

    def get_profile_image(self, email):
        return self._request("GET", "/user/settings/profileImg", params={"email": email})

    def delete_profile_image(self, email):
        return self._request("DELETE", "/user/settings/profileImg", params={"email": email})

    # Accounts
    def create_account(self, email, account_name, account_type, balance):
        return self._request(
            "POST", "/accounts/create",
            json={"accountName": account_name, "accountType": account_type, "balance": balance, "email": email},
        )

    def get_accounts_by_user(self, email):
        return self._request("GET", "/accounts/getByUser", params={"email": email})

    def get_account_by_id(self, account_id, email):
        return self._request("GET", "/accounts/getById", params={"accountId": account_id, "email": email})

    def update_account(self, account_id, email, account_name, account_type, balance):
        return self._request(
            "PUT", "/accounts/update", params={"accountId": account_id},
            json={"accountName": account_name, "accountType": account_type, "balance": balance, "email": email},
        )

    def delete_account(self, account_id, email):
        return self._request("DELETE", "/accounts/delete", params={"accountId": account_id, "email": email})

    # Category budgets
    def create_category_budget(self, email, category_id, amount, month, year):
        return self._request(
            "POST", "/budgets/create",
            json={"amount": amount, "month": month, "year": year, "categoryId": category_id, "email": email},
        )

    def get_category_budgets_by_user(self, email, month, year):
        return self._request("GET", "/budgets/getByUser", params={"email": email, "month": month, "year": year})

    def get_budget_progress(self, email, month, year):
        return self._request("GET", "/budgets/progress", params={"email": email, "month": month, "year": year})

    def update_category_budget(self, budget_id, email, category_id, amount, month, year):
        return self._request(
            "PUT", "/budgets/update", params={"budgetId": budget_id},
            json={"amount": amount, "month": month, "year": year, "categoryId": category_id, "email": email},
        )

    def delete_category_budget(self, budget_id, email):
        return self._request("DELETE", "/budgets/delete", params={"budgetId": budget_id, "email": email})

    # Preferences
    def get_user_preferences(self, email, token=None):
        return self._request("GET", "/user/settings/preferences", params={"email": email}, token=token)

    def update_user_preferences(self, email, timezone=None, currency=None):
        data = {"email": email}
        if timezone:
            data["timezone"] = timezone
        if currency:
            data["currency"] = currency
        return self._request("PUT", "/user/settings/preferences", json=data)
