from datetime import date

import streamlit as st

from auth import run_page
from components import render_budget_progress
from components.actions import close_form, open_form, render_delete_action, month_year_selector
from data import TRANSACTION_TYPE_EXPENSE, category_type_id, load_budget_overview, submit, validate_budget
from formatting import format_currency, get_month_name

FORM_KEY = "edit_category_budget"
DELETE_KEY = "confirm_delete_budget"


def render_budget_form(session, user, categories, month, year):
    if FORM_KEY not in st.session_state:
        return

    budget = st.session_state[FORM_KEY]
    editing = bool(budget.get("id"))
    st.subheader("Edit Budget" if editing else "Add Budget")

    expense_categories = [c for c in categories if category_type_id(c) in (None, TRANSACTION_TYPE_EXPENSE)]
    category_ids = [c["id"] for c in expense_categories]
    names = {c["id"]: c["name"] for c in expense_categories}
    current = budget.get("categoryId")

    with st.form("budget_form"):
        category_id = st.selectbox(
            "Category",
            options=category_ids,
            format_func=lambda cid: names.get(cid, ""),
            index=category_ids.index(current) if current in category_ids else None,
            placeholder="Select a category",
        )
        amount = st.number_input("Amount", value=float(budget.get("amount") or 0), min_value=0.0, step=50.0)
        col_save, col_cancel = st.columns(2)
        with col_save:
            save_clicked = st.form_submit_button("Save", type="primary", use_container_width=True)
        with col_cancel:
            cancel_clicked = st.form_submit_button("Cancel", use_container_width=True)

    if cancel_clicked:
        close_form(FORM_KEY)
        st.rerun()

    if save_clicked:
        problem = validate_budget(category_id, amount)
        if problem:
            st.error(problem)
            return
        if editing:
            saved = submit(
                session,
                lambda: session.client.update_category_budget(budget["id"], user.email, category_id, amount, month, year),
                "Budget updated successfully", "Failed to save budget",
            )
        else:
            saved = submit(
                session,
                lambda: session.client.create_category_budget(user.email, category_id, amount, month, year),
                "Budget created successfully", "Failed to save budget",
            )
        if saved:
            close_form(FORM_KEY)
        st.rerun()


def render(session, user):
    st.title("Budgets")
    month, year = month_year_selector("budgets", date.today())
    if st.button("➕ Add Budget"):
        open_form(FORM_KEY)

    with st.spinner("Loading budgets..."):
        budgets, progress, categories = load_budget_overview(session, user, month, year)

    render_budget_form(session, user, categories, month, year)

    st.subheader(f"Progress for {get_month_name(month)} {year}")
    render_budget_progress(progress, user.currency)

    st.divider()
    st.subheader("Category Budgets")
    if not budgets:
        st.info("No budgets for this month yet.")
        return

    for budget in budgets:
        with st.container(border=True):
            col_name, col_amount = st.columns([3, 2])
            with col_name:
                st.markdown(f"**{budget.get('categoryName', '')}**")
            with col_amount:
                st.markdown(format_currency(budget.get("amount"), user.currency))
            col_edit, col_delete = st.columns(2, gap="small")
            with col_edit:
                if st.button("Edit", key=f"edit_budget_{budget['id']}", use_container_width=True):
                    open_form(FORM_KEY, budget)
            with col_delete:
                render_delete_action(
                    DELETE_KEY, budget["id"], f"Delete the **{budget.get('categoryName', '')}** budget?",
                    lambda budget_id=budget["id"]: submit(
                        session, lambda: session.client.delete_category_budget(budget_id, user.email),
                        "Budget deleted successfully", "Failed to delete budget",
                    ),
                )


run_page(render)
