from components.budget import render_budget_progress
from components.sidebar import render_sidebar
from components.transactions import render_transaction_form, render_transactions

__all__ = [
    "render_budget_progress",
    "render_sidebar",
    "render_transaction_form",
    "render_transactions",
]
