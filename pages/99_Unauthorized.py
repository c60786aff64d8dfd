import streamlit as st

from auth import get_session
from notifications import render_flashes
from session import ADMIN_DASHBOARD_PAGE, DASHBOARD_PAGE, LOGIN_PAGE

st.set_page_config(page_title="Access Denied · Expensia", page_icon="⛔")

session = get_session()
render_flashes(session.notify)

st.title("⛔ Access Denied")
st.write("You do not have permission to view this page.")

if session.current_user is None:
    st.page_link(LOGIN_PAGE, label="Go to Sign In", icon="➡️")
else:
    st.page_link(ADMIN_DASHBOARD_PAGE if session.is_admin() else DASHBOARD_PAGE, label="Back to Dashboard", icon="🏠")
