import streamlit as st

from auth import get_settings, run_page
from components import render_transaction_form, render_transactions
from components.actions import open_form
from components.transactions import FORM_KEY
from data import list_from_result, page_from_result
from loaders import fetch_all

TYPE_FILTERS = {"All": "", "Expense": "TYPE_EXPENSE", "Income": "TYPE_INCOME"}


def render(session, user):
    st.title("Transactions")
    client = session.client
    page_size = get_settings().page_size

    col_search, col_type, col_add = st.columns([3, 2, 1])
    with col_search:
        search_key = st.text_input("Search", placeholder="Search transactions", label_visibility="collapsed")
    with col_type:
        filter_type = st.selectbox("Type", options=list(TYPE_FILTERS), label_visibility="collapsed")
    with col_add:
        if st.button("➕ Add", use_container_width=True):
            open_form(FORM_KEY)

    # Back to the first page whenever the filters change
    filters = (search_key, filter_type)
    if st.session_state.get("transactions_filters") != filters:
        st.session_state["transactions_filters"] = filters
        st.session_state["transactions_page"] = 0
    page_number = st.session_state.get("transactions_page", 0)

    results = fetch_all(
        page=lambda: client.get_transactions_by_user(
            user.email, page_number, page_size,
            search_key=search_key, transaction_type=TYPE_FILTERS[filter_type],
        ),
        categories=client.get_all_categories,
        accounts=lambda: client.get_accounts_by_user(user.email),
    )
    transactions, total_pages = page_from_result(session, results["page"], "Failed to fetch transactions")
    categories = list_from_result(session, results["categories"], "Failed to fetch categories", quiet=True)
    accounts = list_from_result(session, results["accounts"], "Failed to load accounts", quiet=True)

    render_transaction_form(session, user, [c for c in categories if c.get("enabled")], accounts)

    render_transactions(session, user, transactions)

    if total_pages > 1:
        col_prev, col_info, col_next = st.columns([1, 2, 1])
        with col_prev:
            if st.button("← Previous", disabled=page_number <= 0, use_container_width=True):
                st.session_state["transactions_page"] = page_number - 1
                st.rerun()
        with col_info:
            st.caption(f"Page {page_number + 1} of {total_pages}")
        with col_next:
            if st.button("Next →", disabled=page_number >= total_pages - 1, use_container_width=True):
                st.session_state["transactions_page"] = page_number + 1
                st.rerun()


run_page(render)
