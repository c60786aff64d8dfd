from datetime import date

import streamlit as st

from auth import run_page
from components.actions import close_form, open_form, render_delete_action
from data import (
    FREQUENCIES,
    build_saved_transaction_payload,
    load_enabled_categories,
    load_list,
    load_saved_lists,
    submit,
    validate_amount_and_category,
    with_due_status,
)
from formatting import DUE_TODAY, OVERDUE, format_currency, format_date, get_relative_date

FORM_KEY = "edit_saved_transaction"
DELETE_KEY = "confirm_delete_saved"

STATUS_ICONS = {OVERDUE: "🔴", DUE_TODAY: "🟠"}


def render_saved_form(session, user):
    if FORM_KEY not in st.session_state:
        return

    saved = st.session_state[FORM_KEY]
    editing = bool(saved.get("id"))
    st.subheader("Edit Saved Transaction" if editing else "Add Saved Transaction")

    categories = load_enabled_categories(session)
    accounts = load_list(session, lambda: session.client.get_accounts_by_user(user.email),
                         "Failed to load accounts", quiet=True)
    category_ids = [c["id"] for c in categories]
    category_names = {c["id"]: c["name"] for c in categories}
    # Saved rows only carry the category name
    current_category = next((c["id"] for c in categories if c["name"] == saved.get("categoryName")), None)
    account_ids = [None] + [a["id"] for a in accounts]
    account_names = {a["id"]: a["accountName"] for a in accounts}
    frequencies = list(FREQUENCIES)
    current_frequency = (saved.get("frequency") or "monthly").lower().replace("_", " ")
    start = saved.get("nextDueDate") or saved.get("startDate")

    with st.form("saved_transaction_form"):
        description = st.text_input("Description", value=saved.get("description") or "")
        amount = st.number_input("Amount", value=float(saved.get("amount") or 0), min_value=0.0, step=1.0)
        start_date = st.date_input("Start Date", value=date.fromisoformat(start[:10]) if start else date.today())
        frequency = st.selectbox(
            "Frequency",
            options=frequencies,
            format_func=str.title,
            index=frequencies.index(current_frequency) if current_frequency in frequencies else 0,
        )
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
        payload = build_saved_transaction_payload(
            user, description, amount, start_date, frequency, category_id, account_id
        )
        if editing:
            ok = submit(
                session, lambda: session.client.edit_saved_transaction(saved["id"], payload),
                "Saved transaction updated successfully", "Failed to save transaction",
            )
        else:
            ok = submit(
                session, lambda: session.client.create_saved_transaction(payload),
                "Saved transaction created successfully", "Failed to save transaction",
            )
        if ok:
            close_form(FORM_KEY)
        st.rerun()


def render_due(session, user, due):
    st.subheader("Due Now")
    if not due:
        st.info("Nothing is due right now.")
        return

    for item in with_due_status(due):
        with st.container(border=True):
            col_info, col_amount = st.columns([4, 2])
            with col_info:
                st.markdown(f"**{item.get('description') or item.get('categoryName') or 'Unknown Category'}**")
                when = get_relative_date(item.get("nextDueDate")) if item.get("nextDueDate") else ""
                icon = STATUS_ICONS.get(item["status"], "")
                st.caption(f"{icon} {item['status']}" + (f" - {when}" if when else ""))
            with col_amount:
                st.markdown(f"**{format_currency(item.get('amount'), user.currency)}**")

            col_add, col_skip = st.columns(2, gap="small")
            with col_add:
                if st.button("Confirm", key=f"confirm_due_{item['id']}", type="primary", use_container_width=True):
                    submit(
                        session, lambda saved_id=item["id"]: session.client.add_saved_transaction(saved_id),
                        "Transaction added successfully", "Failed to add transaction",
                    )
                    # Both lists move on confirm, so refetch everything
                    st.rerun()
            with col_skip:
                if st.button("Skip", key=f"skip_due_{item['id']}", use_container_width=True):
                    submit(
                        session, lambda saved_id=item["id"]: session.client.skip_saved_transaction(saved_id),
                        "Transaction skipped", "Failed to skip transaction",
                    )
                    st.rerun()


def render_saved(session, user, saved):
    st.subheader("All Saved Transactions")
    if not saved:
        st.info("No saved transactions yet.")
        return

    for item in saved:
        with st.container(border=True):
            col_info, col_amount = st.columns([4, 2])
            with col_info:
                st.markdown(f"**{item.get('description') or item.get('categoryName') or 'Unknown'}**")
                meta = [item.get("categoryName") or "Unknown", (item.get("frequency") or "").replace("_", " ").title()]
                if item.get("nextDueDate"):
                    meta.append(f"Next: {format_date(item['nextDueDate'])}")
                st.caption(" • ".join(part for part in meta if part))
            with col_amount:
                st.markdown(f"**{format_currency(item.get('amount'), user.currency)}**")

            col_edit, col_delete = st.columns(2, gap="small")
            with col_edit:
                if st.button("Edit", key=f"edit_saved_{item['id']}", use_container_width=True):
                    open_form(FORM_KEY, item)
            with col_delete:
                render_delete_action(
                    DELETE_KEY, item["id"], "Delete this saved transaction?",
                    lambda saved_id=item["id"]: submit(
                        session, lambda: session.client.delete_saved_transaction(saved_id),
                        "Saved transaction deleted successfully", "Failed to delete saved transaction",
                    ),
                )


def render(session, user):
    st.title("Saved Transactions")
    if st.button("➕ Add Saved Transaction"):
        open_form(FORM_KEY)

    render_saved_form(session, user)

    with st.spinner("Loading saved transactions..."):
        due, saved = load_saved_lists(session, user)

    render_due(session, user, due)
    st.divider()
    render_saved(session, user, saved)


run_page(render)
