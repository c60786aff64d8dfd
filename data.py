"""Page-level data access: fetch, validate, build payloads, submit.

Pages call these with the session context; errors are reported through
``session.handle_error`` so a 401 always ends the session the same way.
"""

import logging
from datetime import date, datetime

from api_client import ApiError, UnauthorizedError, unwrap, unwrap_list, unwrap_page
from formatting import budget_percentage, budget_remaining, due_status, get_month_name, progress_level
from loaders import fetch_all

logger = logging.getLogger(__name__)

TRANSACTION_TYPE_EXPENSE = 1
TRANSACTION_TYPE_INCOME = 2
TRANSACTION_TYPES = {"Expense": TRANSACTION_TYPE_EXPENSE, "Income": TRANSACTION_TYPE_INCOME}

ACCOUNT_TYPES = ["CASH", "BANK", "CREDIT_CARD"]

FREQUENCIES = {
    "one time": "ONE_TIME",
    "daily": "DAILY",
    "monthly": "MONTHLY",
}

TIMEZONES = [
    "UTC", "America/New_York", "America/Chicago", "America/Denver", "America/Los_Angeles",
    "Europe/London", "Europe/Paris", "Europe/Berlin", "Asia/Tokyo", "Asia/Shanghai",
    "Asia/Kolkata", "Australia/Sydney",
]

MIN_PASSWORD_LENGTH = 8
MAX_IMAGE_BYTES = 10 * 1024 * 1024
IMAGE_TYPES = ("image/jpeg", "image/jpg", "image/png")


# Fetching

def _settle_list(session, error, fallback, quiet=False):
    if error.status == 404:
        return []
    if quiet and not isinstance(error, UnauthorizedError):
        logger.info("Ignoring failed lookup: %s", error)
        return []
    session.handle_error(error, fallback)
    return []


def load_list(session, call, fallback, quiet=False):
    """Fetch a list for the signed-in user; 404 means there is nothing yet."""
    try:
        return unwrap_list(call())
    except ApiError as e:
        return _settle_list(session, e, fallback, quiet)


def load_page(session, call, fallback):
    try:
        return unwrap_page(call())
    except ApiError as e:
        return _settle_list(session, e, fallback), 0


def load_value(session, call, fallback=None, default=None):
    """Fetch a single enveloped value. ``fallback=None`` keeps failures quiet."""
    try:
        value = unwrap(call())
    except ApiError as e:
        if e.status != 404 and (fallback or isinstance(e, UnauthorizedError)):
            session.handle_error(e, fallback or "Request failed")
        return default
    return default if value is None else value


def list_from_result(session, result, fallback, quiet=False):
    if not result.ok:
        return _settle_list(session, result.error, fallback, quiet)
    try:
        return unwrap_list(result.value)
    except ApiError as e:
        return _settle_list(session, e, fallback, quiet)


def page_from_result(session, result, fallback):
    if not result.ok:
        return _settle_list(session, result.error, fallback), 0
    try:
        return unwrap_page(result.value)
    except ApiError as e:
        return _settle_list(session, e, fallback), 0


def value_from_result(session, result, default=None):
    if result.ok:
        try:
            value = unwrap(result.value)
        except ApiError as e:
            session.handle_error(e, "Unexpected response from server")
            return default
        return default if value is None else value
    if isinstance(result.error, UnauthorizedError):
        session.handle_error(result.error, "")
    return default


def load_enabled_categories(session):
    categories = load_list(session, session.client.get_all_categories, "Failed to fetch categories", quiet=True)
    return [cat for cat in categories if cat.get("enabled")]


def load_profile_image(session, user, fallback=None):
    """Base64 profile picture, or None when the user has not uploaded one."""
    return load_value(session, lambda: session.client.get_profile_image(user.email), fallback)


def image_data_uri(image):
    return f"data:image/png;base64,{image}" if image else None


def category_type_id(category):
    return (category.get("transactionType") or {}).get("id")


def load_saved_lists(session, user):
    """Due occurrences and all saved transactions, fetched together."""
    client = session.client
    results = fetch_all(
        due=lambda: client.get_saved_transactions_by_month(user.id),
        saved=lambda: client.get_saved_transactions_by_user(user.id),
    )
    due = list_from_result(session, results["due"], "Failed to fetch due transactions", quiet=True)
    saved = list_from_result(session, results["saved"], "Failed to fetch saved transactions")
    return due, saved


def load_budget_overview(session, user, month, year):
    client = session.client
    results = fetch_all(
        budgets=lambda: client.get_category_budgets_by_user(user.email, month, year),
        progress=lambda: client.get_budget_progress(user.email, month, year),
        categories=client.get_all_categories,
    )
    budgets = list_from_result(session, results["budgets"], "Failed to load budgets")
    progress = list_from_result(session, results["progress"], "Failed to load budget progress", quiet=True)
    categories = list_from_result(session, results["categories"], "Failed to fetch categories", quiet=True)
    return budgets, budget_rows(progress), [c for c in categories if c.get("enabled")]


def load_dashboard(session, user, month, year):
    client = session.client
    results = fetch_all(
        income=lambda: client.get_total_income_or_expense(user.id, TRANSACTION_TYPE_INCOME, month, year),
        expense=lambda: client.get_total_income_or_expense(user.id, TRANSACTION_TYPE_EXPENSE, month, year),
        count=lambda: client.get_total_no_of_transactions(user.id, month, year),
        budget=lambda: client.get_budget(user.id, month, year),
        progress=lambda: client.get_budget_progress(user.email, month, year),
        summary=lambda: client.get_dashboard_summary(user.email),
        categories=client.get_all_categories,
    )

    totals = [results[name] for name in ("income", "expense", "count")]
    failed = [r.error for r in totals if not r.ok]
    if failed:
        session.handle_error(failed[0], "Failed to load dashboard data. Please ensure the backend is running.")

    income = float(value_from_result(session, results["income"], 0) or 0)
    expense = float(value_from_result(session, results["expense"], 0) or 0)
    categories = list_from_result(session, results["categories"], "Failed to fetch categories", quiet=True)
    expense_categories = [
        c for c in categories
        if c.get("enabled") and category_type_id(c) == TRANSACTION_TYPE_EXPENSE
    ]
    return {
        "income": income,
        "expense": expense,
        "cash_in_hand": income - expense,
        "count": int(value_from_result(session, results["count"], 0) or 0),
        "budget": value_from_result(session, results["budget"]),
        "progress": budget_rows(
            list_from_result(session, results["progress"], "Failed to load budget progress", quiet=True)
        ),
        "summary": value_from_result(session, results["summary"]),
        "category_totals": load_category_totals(session, user, expense_categories, month, year),
    }


def load_category_totals(session, user, categories, month, year):
    """Spending per expense category for the month, zero totals dropped."""
    client = session.client
    calls = {
        str(cat["id"]): (lambda cid=cat["id"]: client.get_total_by_category(user.email, cid, month, year))
        for cat in categories
    }
    results = fetch_all(**calls)
    totals = []
    for cat in categories:
        value = value_from_result(session, results[str(cat["id"])], 0)
        try:
            amount = float(value or 0)
        except (TypeError, ValueError):
            amount = 0.0
        if amount > 0:
            totals.append({"name": cat["name"], "value": amount})
    return totals


def monthly_chart_rows(summaries, limit=12):
    rows = [
        {
            "month": f"{get_month_name(s['month'])} {s['year']}",
            "income": s.get("totalIncome") or 0,
            "expense": s.get("totalExpense") or 0,
        }
        for s in summaries
    ]
    rows.reverse()
    return rows[:limit]


def breakdown_rows(breakdown):
    return [
        {"name": item.get("categoryName"), "value": item["totalAmount"]}
        for item in breakdown
        if item.get("totalAmount") and item["totalAmount"] > 0
    ]


# Derived values

def budget_rows(progress):
    rows = []
    for item in progress:
        budgeted = float(item.get("budgetedAmount") or 0)
        spent = float(item.get("currentSpending") or 0)
        percentage = budget_percentage(spent, budgeted)
        rows.append({
            **item,
            "percentage": percentage,
            "remaining": budget_remaining(budgeted, spent),
            "level": progress_level(percentage),
        })
    return rows


def with_due_status(saved, today=None):
    return [{**item, "status": due_status(item.get("nextDueDate"), today)} for item in saved]


# Validation

def _is_blank(value):
    return value is None or (isinstance(value, str) and not value.strip())


def validate_amount_and_category(amount, category_id):
    if _is_blank(amount) or not amount or _is_blank(category_id):
        return "Please fill in all required fields (Amount and Category)"
    return None


def validate_budget(category_id, amount):
    if _is_blank(category_id) or _is_blank(amount) or not amount:
        return "Please fill in all fields"
    if float(amount) < 0:
        return "Budget amount cannot be negative"
    return None


def validate_account(account_name, account_type):
    if _is_blank(account_name):
        return "Please enter an account name"
    if account_type not in ACCOUNT_TYPES:
        return "Please choose an account type"
    return None


def validate_category(name):
    if _is_blank(name):
        return "Please enter a category name"
    return None


def validate_new_password(password, confirm_password):
    if _is_blank(password) or _is_blank(confirm_password):
        return "Please fill in all fields"
    if len(password) < MIN_PASSWORD_LENGTH:
        return f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
    if password != confirm_password:
        return "Passwords do not match"
    return None


def validate_signup(username, email, password, confirm_password):
    if _is_blank(username) or _is_blank(email) or _is_blank(password) or _is_blank(confirm_password):
        return "Please fill in all fields"
    return validate_new_password(password, confirm_password)


def validate_image(content_type, size):
    if content_type not in IMAGE_TYPES:
        return "Please upload a JPG, JPEG, or PNG image"
    if size > MAX_IMAGE_BYTES:
        return "Image size must be less than 10MB"
    return None


# Payloads

def frequency_code(label):
    return FREQUENCIES.get(label, label.upper())


def build_transaction_payload(user, description, amount, tx_date, tx_time, category_id, account_id=None):
    timestamp = datetime.combine(tx_date, tx_time).replace(second=0, microsecond=0)
    return {
        "description": description or "",
        "amount": float(amount),
        "date": tx_date.isoformat(),
        "timestamp": timestamp.isoformat(),
        "categoryId": int(category_id),
        "accountId": int(account_id) if account_id else None,
        "userEmail": user.email,
    }


def build_saved_transaction_payload(user, description, amount, start_date, frequency, category_id, account_id=None):
    return {
        "description": description or "",
        "amount": float(amount),
        "upcomingDate": start_date.isoformat() if isinstance(start_date, date) else start_date,
        "frequency": frequency_code(frequency),
        "categoryId": int(category_id),
        "accountId": int(account_id) if account_id else None,
        "userId": user.id,
    }


# Mutations

def submit(session, call, success, fallback):
    """Run a mutating call; flash the outcome and return whether it worked."""
    try:
        call()
    except ApiError as e:
        session.handle_error(e, fallback)
        return False
    session.notify.success(success)
    return True
