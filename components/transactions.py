from datetime import date, datetime

import streamlit as st

from components.actions import close_form, open_form, render_delete_action
from data import build_transaction_payload, submit, validate_amount_and_category
from formatting import format_currency, format_date, format_transaction_type

FORM_KEY = "edit_transaction"
DELETE_KEY = "confirm_delete_transaction"


def render_transactions(session, user, transactions):
    """Render transaction rows with edit and delete actions."""
    if not transactions:
        st.info("No transactions found")
        return

    currency = user.currency
    for tx in transactions:
        category = tx.get("category") or {}
        type_name = format_transaction_type((category.get("transactionType") or {}).get("name"))
        account = (tx.get("account") or {}).get("accountName")

        with st.container(border=True):
            col_info, col_amount = st.columns([5, 2])
            with col_info:
                st.markdown(f"**{tx.get('description') or category.get('name', '')}**")
                meta = [format_date(tx.get("date"), user.timezone), category.get("name", ""), type_name]
                if account:
                    meta.append(account)
                st.caption(" · ".join(part for part in meta if part))
            with col_amount:
                sign = "+" if type_name == "Income" else "-"
                st.markdown(f"**{sign}{format_currency(tx.get('amount'), currency)}**")

            col_edit, col_delete = st.columns(2, gap="small")
            with col_edit:
                if st.button("Edit", key=f"edit_{tx['id']}", use_container_width=True):
                    open_form(FORM_KEY, tx)
            with col_delete:
                render_delete_action(
                    DELETE_KEY, tx["id"], "Are you sure you want to delete this transaction?",
                    lambda tx_id=tx["id"]: submit(
                        session, lambda: session.client.delete_transaction(tx_id),
                        "Transaction deleted successfully", "Failed to delete transaction",
                    ),
                )


def _initial_time(tx):
    if tx.get("timestamp"):
        try:
            return datetime.fromisoformat(tx["timestamp"]).time().replace(second=0, microsecond=0)
        except ValueError:
            pass
    return datetime.now().time().replace(second=0, microsecond=0)


def render_transaction_form(session, user, categories, accounts):
    """Add/edit form. Stays open with its values when the backend rejects it."""
    if FORM_KEY not in st.session_state:
        return

    tx = st.session_state[FORM_KEY]
    editing = bool(tx.get("id"))
    st.subheader("Edit Transaction" if editing else "Add Transaction")

    category_ids = [c["id"] for c in categories]
    category_names = {c["id"]: c["name"] for c in categories}
    account_ids = [None] + [a["id"] for a in accounts]
    account_names = {a["id"]: a["accountName"] for a in accounts}
    current_category = (tx.get("category") or {}).get("id")
    current_account = (tx.get("account") or {}).get("id")

    with st.form("transaction_form"):
        description = st.text_input("Description", value=tx.get("description") or "")
        amount = st.number_input("Amount", value=float(tx.get("amount") or 0), min_value=0.0, step=1.0)
        col_date, col_time = st.columns(2)
        with col_date:
            tx_date = st.date_input("Date", value=date.fromisoformat(tx["date"]) if tx.get("date") else date.today())
        with col_time:
            tx_time = st.time_input("Time", value=_initial_time(tx))
        category_id = st.selectbox(
            "Category",
            options=category_ids,
            format_func=lambda cid: category_names.get(cid, ""),
            index=category_ids.index(current_category) if current_category in category_ids else None,
            placeholder="Select a category",
        )
        account_id = st.selectbox(
            "Account (optional)",
            options=account_ids,
            format_func=lambda aid: "No account" if aid is None else account_names.get(aid, ""),
            index=account_ids.index(current_account) if current_account in account_ids else 0,
        )

        col_save, col_cancel = st.columns(2)
        with col_save:
            save_clicked = st.form_submit_button("Save", type="primary", use_container_width=True)
        with col_cancel:
            cancel_clicked = st.form_submit_button("Cancel", use_container_width=True)

    if cancel_clicked:
        close_form(FORM_KEY)
        st.rerun()

    if save_clicked:
        problem = validate_amount_and_category(amount, category_id)
        if problem:
            st.error(problem)
            return
        payload = build_transaction_payload(user, description, amount, tx_date, tx_time, category_id, account_id)
        if editing:
            saved = submit(
                session, lambda: session.client.update_transaction(tx["id"], payload),
                "Transaction updated successfully", "Failed to save transaction",
            )
        else:
            saved = submit(
                session, lambda: session.client.add_transaction(payload),
                "Transaction added successfully", "Failed to save transaction",
            )
        if saved:
            close_form(FORM_KEY)
        st.rerun()
