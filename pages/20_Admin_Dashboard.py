import streamlit as st

from auth import run_page
from data import load_value
from session import ADMIN_DASHBOARD_PAGE


def render(session, user):
    st.title("Admin Dashboard")
    st.caption("System overview and management")

    with st.spinner("Loading system overview..."):
        overview = load_value(session, session.client.get_system_overview,
                              "Failed to load system overview", default={})

    col1, col2, col3 = st.columns(3)
    col1.metric("Total Users", overview.get("totalUsers", 0))
    col2.metric("Administrators", overview.get("totalAdmins", 0))
    col3.metric("Regular Users", overview.get("totalRegularUsers", 0))

    col4, col5 = st.columns(2)
    col4.metric("Storage Used", f"{float(overview.get('storageUsedMB') or 0):.2f} MB")
    col5.metric("System Status", "Online" if overview else "Unknown")

    logs = overview.get("recentLogs") or []
    if logs:
        st.subheader("Recent System Logs")
        st.code("\n".join(logs), language=None)

    st.subheader("Quick Actions")
    col_users, col_categories, col_refresh = st.columns(3)
    with col_users:
        st.page_link("pages/21_Admin_Users.py", label="Manage Users", icon="👥")
    with col_categories:
        st.page_link("pages/22_Admin_Categories.py", label="Manage Categories", icon="🏷️")
    with col_refresh:
        st.page_link(ADMIN_DASHBOARD_PAGE, label="Refresh", icon="🔄")


run_page(render, require_admin=True)
