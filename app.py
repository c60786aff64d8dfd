import streamlit as st

from auth import RESET_PASSWORD_PAGE, get_session, get_settings, redirect_signed_in, render_sign_in, render_sign_up
from notifications import render_flashes

st.set_page_config(page_title="Expensia", page_icon="💰")

session = get_session()
render_flashes(session.notify)
redirect_signed_in(session)

st.title("Expensia")
st.write("Track your spending, budgets and recurring payments.")

tab_signin, tab_signup = st.tabs(["Sign In", "Sign Up"])

with tab_signin:
    render_sign_in(session)
    col_forgot, col_google = st.columns(2)
    with col_forgot:
        st.page_link(RESET_PASSWORD_PAGE, label="Forgot password?", icon="🔑")
    with col_google:
        st.link_button("Continue with Google", get_settings().oauth_url, use_container_width=True)

with tab_signup:
    render_sign_up(session)
