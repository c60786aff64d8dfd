import streamlit as st

from auth import get_settings, run_page
from data import load_page, submit
from formatting import format_currency


def render(session, user):
    st.title("User Management")
    search_key = st.text_input("Search", placeholder="Search users", label_visibility="collapsed")

    if st.session_state.get("users_search") != search_key:
        st.session_state["users_search"] = search_key
        st.session_state["users_page"] = 0
    page_number = st.session_state.get("users_page", 0)

    users, total_pages = load_page(
        session,
        lambda: session.client.get_all_users(page_number, get_settings().page_size, search_key),
        "Failed to fetch users",
    )
    if not users:
        st.info("No users found")
        return

    for row in users:
        with st.container(border=True):
            col_info, col_totals, col_action = st.columns([3, 3, 2])
            with col_info:
                st.markdown(f"**{row.get('username', '')}**")
                st.caption(row.get("email", ""))
            with col_totals:
                currency = row.get("currency") or user.currency
                st.caption(
                    f"Income {format_currency(row.get('totalIncome'), currency)} · "
                    f"Expense {format_currency(row.get('totalExpense'), currency)} · "
                    f"{row.get('totalTransactions') or 0} transactions"
                )
            with col_action:
                enabled = bool(row.get("enabled"))
                st.caption("🟢 Active" if enabled else "🔴 Disabled")
                if st.button("Disable" if enabled else "Enable", key=f"toggle_user_{row['id']}",
                             use_container_width=True):
                    submit(
                        session,
                        lambda: session.client.toggle_user_status(row["id"], not enabled),
                        f"User {'disabled' if enabled else 'enabled'} successfully",
                        "Failed to update user status",
                    )
                    st.rerun()

    if total_pages > 1:
        col_prev, col_info, col_next = st.columns([1, 2, 1])
        with col_prev:
            if st.button("← Previous", disabled=page_number <= 0, use_container_width=True):
                st.session_state["users_page"] = page_number - 1
                st.rerun()
        with col_info:
            st.caption(f"Page {page_number + 1} of {total_pages}")
        with col_next:
            if st.button("Next →", disabled=page_number >= total_pages - 1, use_container_width=True):
                st.session_state["users_page"] = page_number + 1
                st.rerun()


run_page(render, require_admin=True)
