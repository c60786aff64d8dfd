import streamlit as st

from auth import run_page
from components.actions import close_form, open_form, render_delete_action
from data import ACCOUNT_TYPES, load_list, submit, validate_account
from formatting import format_currency

FORM_KEY = "edit_account"
DELETE_KEY = "confirm_delete_account"


def render_account_form(session, user):
    if FORM_KEY not in st.session_state:
        return

    account = st.session_state[FORM_KEY]
    editing = bool(account.get("id"))
    st.subheader("Edit Account" if editing else "Add Account")

    with st.form("account_form"):
        name = st.text_input("Account Name", value=account.get("accountName") or "")
        current_type = account.get("accountType")
        account_type = st.selectbox(
            "Type",
            options=ACCOUNT_TYPES,
            format_func=lambda t: t.replace("_", " ").title(),
            index=ACCOUNT_TYPES.index(current_type) if current_type in ACCOUNT_TYPES else 0,
        )
        balance = st.number_input("Balance", value=float(account.get("balance") or 0), step=10.0)
        col_save, col_cancel = st.columns(2)
        with col_save:
            save_clicked = st.form_submit_button("Save", type="primary", use_container_width=True)
        with col_cancel:
            cancel_clicked = st.form_submit_button("Cancel", use_container_width=True)

    if cancel_clicked:
        close_form(FORM_KEY)
        st.rerun()

    if save_clicked:
        problem = validate_account(name, account_type)
        if problem:
            st.error(problem)
            return
        if editing:
            saved = submit(
                session,
                lambda: session.client.update_account(account["id"], user.email, name, account_type, balance),
                "Account updated successfully", "Failed to save account",
            )
        else:
            saved = submit(
                session,
                lambda: session.client.create_account(user.email, name, account_type, balance),
                "Account created successfully", "Failed to save account",
            )
        if saved:
            close_form(FORM_KEY)
        st.rerun()


def render(session, user):
    st.title("Accounts")
    if st.button("➕ Add Account"):
        open_form(FORM_KEY)

    accounts = load_list(session, lambda: session.client.get_accounts_by_user(user.email), "Failed to load accounts")
    render_account_form(session, user)

    if not accounts:
        st.info("No accounts yet. Add one to start tracking balances.")
        return

    total = sum(float(a.get("balance") or 0) for a in accounts)
    st.metric("Total Balance", format_currency(total, user.currency))

    for account in accounts:
        with st.container(border=True):
            col_info, col_balance = st.columns([3, 2])
            with col_info:
                st.markdown(f"**{account['accountName']}**")
                st.caption(account.get("accountType", "").replace("_", " ").title())
            with col_balance:
                st.markdown(f"**{format_currency(account.get('balance'), user.currency)}**")

            col_edit, col_delete = st.columns(2, gap="small")
            with col_edit:
                if st.button("Edit", key=f"edit_account_{account['id']}", use_container_width=True):
                    open_form(FORM_KEY, account)
            with col_delete:
                render_delete_action(
                    DELETE_KEY, account["id"], f"Delete **{account['accountName']}**?",
                    lambda account_id=account["id"]: submit(
                        session, lambda: session.client.delete_account(account_id, user.email),
                        "Account deleted successfully", "Failed to delete account",
                    ),
                )


run_page(render)
