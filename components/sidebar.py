import streamlit as st

from data import image_data_uri, load_profile_image
from session import ADMIN_DASHBOARD_PAGE, DASHBOARD_PAGE

USER_LINKS = [
    (DASHBOARD_PAGE, "Dashboard", "📊"),
    ("pages/2_Transactions.py", "Transactions", "💸"),
    ("pages/3_Accounts.py", "Accounts", "🏦"),
    ("pages/4_Budgets.py", "Budgets", "🎯"),
    ("pages/5_Saved_Transactions.py", "Saved Transactions", "🔁"),
    ("pages/6_Statistics.py", "Statistics", "📈"),
    ("pages/7_Settings.py", "Settings", "⚙️"),
]

ADMIN_LINKS = [
    (ADMIN_DASHBOARD_PAGE, "Admin Dashboard", "🛡️"),
    ("pages/21_Admin_Users.py", "Users", "👥"),
    ("pages/22_Admin_Categories.py", "Categories", "🏷️"),
    ("pages/23_Admin_Settings.py", "Settings", "⚙️"),
]


def render_sidebar(session, user):
    """Render the sidebar with user info and the links this user may open."""
    with st.sidebar:
        st.title("Expensia")
        image = load_profile_image(session, user)
        if image:
            st.image(image_data_uri(image), width=64)
        st.write(f"**{user.username or user.email}**")
        st.caption(user.email)

        st.divider()
        links = ADMIN_LINKS if session.is_admin() else USER_LINKS
        for page, label, icon in links:
            st.page_link(page, label=label, icon=icon)

        st.divider()
        if st.button("Logout", use_container_width=True):
            session.logout()
