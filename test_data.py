# test_data.py
import unittest
from datetime import date, time, timedelta
from unittest import mock

from api_client import ApiError, UnauthorizedError
from data import (
    build_saved_transaction_payload, build_transaction_payload, image_data_uri, load_budget_overview,
    load_dashboard, load_list, load_page, load_profile_image, load_saved_lists, load_value, submit,
    validate_account, validate_amount_and_category, validate_budget, validate_image, validate_new_password,
    validate_signup, with_due_status,
)
from formatting import DUE_TODAY, UPCOMING
from session import SessionUser

USER = SessionUser(id=7, username="ana", email="ana@example.com", roles=["ROLE_USER"])


class FakeSavedBackend:
    """Saved transactions endpoints over an in-memory list."""

    def __init__(self, today):
        self.today = today
        self.saved = [
            {"id": 1, "description": "Rent", "amount": 900, "frequency": "MONTHLY",
             "categoryName": "Housing", "nextDueDate": today.isoformat()},
            {"id": 2, "description": "Gym", "amount": 40, "frequency": "MONTHLY",
             "categoryName": "Health", "nextDueDate": (today + timedelta(days=10)).isoformat()},
        ]
        self.added = []

    def get_saved_transactions_by_user(self, user_id):
        return {"response": [dict(item) for item in self.saved]}

    def get_saved_transactions_by_month(self, user_id):
        due = [dict(item) for item in self.saved if date.fromisoformat(item["nextDueDate"]) <= self.today]
        return {"response": due}

    def add_saved_transaction(self, saved_id):
        item = next(item for item in self.saved if item["id"] == saved_id)
        self.added.append(saved_id)
        item["nextDueDate"] = (date.fromisoformat(item["nextDueDate"]) + timedelta(days=31)).isoformat()
        return {"response": "Transaction added"}


class FakeDashboardBackend:
    """Dashboard and budget endpoints; ``failures`` maps an endpoint to the error it raises."""

    def __init__(self, failures=None):
        self.failures = failures or {}
        self.categories = [
            {"id": 1, "name": "Food", "enabled": True, "transactionType": {"id": 1}},
            {"id": 2, "name": "Salary", "enabled": True, "transactionType": {"id": 2}},
            {"id": 3, "name": "Old", "enabled": False, "transactionType": {"id": 1}},
            {"id": 4, "name": "Fun", "enabled": True, "transactionType": {"id": 1}},
        ]
        self.category_totals = {1: 300, 4: 0}
        self.totals_requested = []

    def _respond(self, endpoint, value):
        if endpoint in self.failures:
            raise self.failures[endpoint]
        return {"response": value}

    def get_total_income_or_expense(self, user_id, type_id, month, year):
        if type_id == 2:
            return self._respond("income", 1200)
        return self._respond("expense", 450.5)

    def get_total_no_of_transactions(self, user_id, month, year):
        return self._respond("count", 4)

    def get_budget(self, user_id, month, year):
        return self._respond("budget", {"amount": 1000})

    def get_budget_progress(self, email, month, year):
        return self._respond("progress", [
            {"categoryName": "Food", "budgetedAmount": 400, "currentSpending": 300},
        ])

    def get_dashboard_summary(self, email):
        return self._respond("summary", {"totalBalance": 2500})

    def get_all_categories(self):
        return self._respond("categories", [dict(cat) for cat in self.categories])

    def get_total_by_category(self, email, category_id, month, year):
        self.totals_requested.append(category_id)
        return self._respond("by_category", self.category_totals.get(category_id, 0))

    def get_category_budgets_by_user(self, email, month, year):
        return self._respond("budgets", [{"id": 9, "categoryName": "Food", "amount": 400}])


class Redirected(Exception):
    pass


def make_session(client=None):
    session = mock.Mock()
    session.client = client or mock.Mock()
    return session


class TestLoading(unittest.TestCase):
    def test_load_list_unwraps(self):
        session = make_session()
        rows = load_list(session, lambda: {"response": [{"id": 1}]}, "Failed")
        self.assertEqual(rows, [{"id": 1}])
        session.handle_error.assert_not_called()

    def test_load_list_404_is_empty(self):
        session = make_session()

        def missing():
            raise ApiError(404, "No accounts found")

        self.assertEqual(load_list(session, missing, "Failed to load accounts"), [])
        session.handle_error.assert_not_called()

    def test_load_list_reports_other_errors(self):
        session = make_session()
        error = ApiError(500, "boom")

        def broken():
            raise error

        self.assertEqual(load_list(session, broken, "Failed to load accounts"), [])
        session.handle_error.assert_called_once_with(error, "Failed to load accounts")

    def test_quiet_load_still_reports_unauthorized(self):
        session = make_session()
        error = UnauthorizedError(401)

        def rejected():
            raise error

        load_list(session, rejected, "Failed", quiet=True)
        session.handle_error.assert_called_once_with(error, "Failed")

        def broken():
            raise ApiError(500)

        session.handle_error.reset_mock()
        self.assertEqual(load_list(session, broken, "Failed", quiet=True), [])
        session.handle_error.assert_not_called()

    def test_load_list_rejects_wrong_shape(self):
        session = make_session()
        self.assertEqual(load_list(session, lambda: {"response": {"id": 1}}, "Failed"), [])
        session.handle_error.assert_called_once()

    def test_load_page(self):
        session = make_session()
        items, pages = load_page(session, lambda: {"response": {"data": [{"id": 3}], "totalNoOfPages": 2}}, "Failed")
        self.assertEqual(items, [{"id": 3}])
        self.assertEqual(pages, 2)

    def test_load_value_defaults(self):
        session = make_session()
        self.assertEqual(load_value(session, lambda: {"response": None}, default={}), {})
        self.assertEqual(load_value(session, lambda: {"response": {"totalUsers": 3}}), {"totalUsers": 3})

    def test_profile_image(self):
        session = make_session()
        session.client.get_profile_image.return_value = {"response": "aGVsbG8="}

        image = load_profile_image(session, USER)

        session.client.get_profile_image.assert_called_once_with("ana@example.com")
        self.assertEqual(image_data_uri(image), "data:image/png;base64,aGVsbG8=")

    def test_missing_profile_image_is_quiet(self):
        session = make_session()
        session.client.get_profile_image.side_effect = ApiError(404, "No image")
        self.assertIsNone(load_profile_image(session, USER))
        self.assertIsNone(image_data_uri(None))

        session.client.get_profile_image.side_effect = ApiError(500)
        self.assertIsNone(load_profile_image(session, USER))
        session.handle_error.assert_not_called()

        error = ApiError(500)
        session.client.get_profile_image.side_effect = error
        load_profile_image(session, USER, "Failed to load profile image")
        session.handle_error.assert_called_once_with(error, "Failed to load profile image")


class TestSavedTransactions(unittest.TestCase):
    def test_confirm_refetches_both_lists(self):
        today = date.today()
        backend = FakeSavedBackend(today)
        session = make_session(backend)

        due, saved = load_saved_lists(session, USER)
        self.assertEqual([item["id"] for item in due], [1])
        self.assertEqual(with_due_status(due, today)[0]["status"], DUE_TODAY)

        self.assertTrue(submit(
            session, lambda: backend.add_saved_transaction(1),
            "Transaction added successfully", "Failed to add transaction",
        ))
        session.notify.success.assert_called_once_with("Transaction added successfully")

        due, saved = load_saved_lists(session, USER)
        self.assertEqual(due, [])
        rent = next(item for item in saved if item["id"] == 1)
        self.assertEqual(with_due_status([rent], today)[0]["status"], UPCOMING)
        session.handle_error.assert_not_called()

    def test_failed_submit_reports_and_returns_false(self):
        session = make_session()
        error = ApiError(400, "Already added")

        def rejected():
            raise error

        self.assertFalse(submit(session, rejected, "Transaction added successfully", "Failed to add transaction"))
        session.handle_error.assert_called_once_with(error, "Failed to add transaction")
        session.notify.success.assert_not_called()


class TestDashboard(unittest.TestCase):
    DASHBOARD_ERROR = "Failed to load dashboard data. Please ensure the backend is running."

    def test_loads_everything_together(self):
        backend = FakeDashboardBackend()
        session = make_session(backend)

        data = load_dashboard(session, USER, 3, 2024)

        self.assertEqual(data["income"], 1200.0)
        self.assertEqual(data["expense"], 450.5)
        self.assertEqual(data["cash_in_hand"], 749.5)
        self.assertEqual(data["count"], 4)
        self.assertEqual(data["budget"], {"amount": 1000})
        self.assertEqual(data["summary"], {"totalBalance": 2500})
        self.assertEqual(data["progress"][0]["percentage"], 75)
        # Enabled expense categories only, zero totals dropped
        self.assertEqual(sorted(backend.totals_requested), [1, 4])
        self.assertEqual(data["category_totals"], [{"name": "Food", "value": 300.0}])
        session.handle_error.assert_not_called()

    def test_partial_failure_reports_once_and_keeps_the_rest(self):
        error = ApiError(500, "boom")
        backend = FakeDashboardBackend({
            "expense": error,
            "progress": ApiError(404, "No budgets"),
            "summary": ApiError(503),
        })
        session = make_session(backend)

        data = load_dashboard(session, USER, 3, 2024)

        session.handle_error.assert_called_once_with(error, self.DASHBOARD_ERROR)
        self.assertEqual(data["income"], 1200.0)
        self.assertEqual(data["expense"], 0.0)
        self.assertEqual(data["cash_in_hand"], 1200.0)
        self.assertEqual(data["count"], 4)
        self.assertEqual(data["progress"], [])
        self.assertIsNone(data["summary"])
        self.assertEqual(data["category_totals"], [{"name": "Food", "value": 300.0}])

    def test_rejected_token_in_batch_stops_the_page(self):
        error = UnauthorizedError(401, "Token expired")
        backend = FakeDashboardBackend({"count": error, "budget": ApiError(500)})
        session = make_session(backend)

        def handle_error(e, fallback):
            if isinstance(e, UnauthorizedError):
                raise Redirected()

        session.handle_error.side_effect = handle_error

        with self.assertRaises(Redirected):
            load_dashboard(session, USER, 3, 2024)

        session.handle_error.assert_called_once_with(error, self.DASHBOARD_ERROR)
        self.assertEqual(backend.totals_requested, [])

    def test_budget_overview_filters_categories(self):
        session = make_session(FakeDashboardBackend())

        budgets, progress, categories = load_budget_overview(session, USER, 3, 2024)

        self.assertEqual([b["id"] for b in budgets], [9])
        self.assertEqual(progress[0]["remaining"], 100)
        self.assertEqual([c["name"] for c in categories], ["Food", "Salary", "Fun"])
        session.handle_error.assert_not_called()

    def test_budget_overview_reports_only_budget_failures(self):
        error = ApiError(500, "boom")
        backend = FakeDashboardBackend({
            "budgets": error,
            "progress": ApiError(503),
            "categories": ApiError(500),
        })
        session = make_session(backend)

        budgets, progress, categories = load_budget_overview(session, USER, 3, 2024)

        self.assertEqual((budgets, progress, categories), ([], [], []))
        session.handle_error.assert_called_once_with(error, "Failed to load budgets")

    def test_budget_overview_passes_unauthorized_on(self):
        error = UnauthorizedError(401)
        session = make_session(FakeDashboardBackend({"progress": error}))

        load_budget_overview(session, USER, 3, 2024)

        session.handle_error.assert_called_once_with(error, "Failed to load budget progress")


class TestValidation(unittest.TestCase):
    def test_amount_and_category(self):
        message = "Please fill in all required fields (Amount and Category)"
        self.assertEqual(validate_amount_and_category(0, 3), message)
        self.assertEqual(validate_amount_and_category(12.5, None), message)
        self.assertIsNone(validate_amount_and_category(12.5, 3))

    def test_budget(self):
        self.assertEqual(validate_budget(None, 100), "Please fill in all fields")
        self.assertEqual(validate_budget(3, -5), "Budget amount cannot be negative")
        self.assertIsNone(validate_budget(3, 100))

    def test_account(self):
        self.assertEqual(validate_account("  ", "CASH"), "Please enter an account name")
        self.assertEqual(validate_account("Wallet", "GOLD"), "Please choose an account type")
        self.assertIsNone(validate_account("Wallet", "CASH"))

    def test_passwords(self):
        self.assertEqual(validate_new_password("", ""), "Please fill in all fields")
        self.assertEqual(validate_new_password("short", "short"), "Password must be at least 8 characters long")
        self.assertEqual(validate_new_password("longenough", "different"), "Passwords do not match")
        self.assertIsNone(validate_new_password("longenough", "longenough"))
        self.assertEqual(validate_signup("", "a@b.com", "longenough", "longenough"), "Please fill in all fields")
        self.assertIsNone(validate_signup("ana", "a@b.com", "longenough", "longenough"))

    def test_image(self):
        self.assertEqual(validate_image("image/gif", 10), "Please upload a JPG, JPEG, or PNG image")
        self.assertEqual(validate_image("image/png", 11 * 1024 * 1024), "Image size must be less than 10MB")
        self.assertIsNone(validate_image("image/jpeg", 2048))


class TestPayloads(unittest.TestCase):
    def test_transaction_payload(self):
        payload = build_transaction_payload(USER, "Lunch", "12.5", date(2024, 3, 5), time(13, 45, 30), "4", 2)
        self.assertEqual(payload, {
            "description": "Lunch",
            "amount": 12.5,
            "date": "2024-03-05",
            "timestamp": "2024-03-05T13:45:00",
            "categoryId": 4,
            "accountId": 2,
            "userEmail": "ana@example.com",
        })

    def test_transaction_payload_without_account(self):
        payload = build_transaction_payload(USER, None, 3, date(2024, 3, 5), time(9, 0), 4)
        self.assertIsNone(payload["accountId"])
        self.assertEqual(payload["description"], "")

    def test_saved_payload_maps_frequency(self):
        payload = build_saved_transaction_payload(USER, "Rent", 900, date(2024, 4, 1), "one time", 4)
        self.assertEqual(payload["frequency"], "ONE_TIME")
        self.assertEqual(payload["upcomingDate"], "2024-04-01")
        self.assertEqual(payload["userId"], 7)
        weekly = build_saved_transaction_payload(USER, "Rent", 900, date(2024, 4, 1), "weekly", 4)
        self.assertEqual(weekly["frequency"], "WEEKLY")


if __name__ == "__main__":
    unittest.main()
