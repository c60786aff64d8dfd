import streamlit as st

from auth import run_page
from components.profile import render_change_password, render_profile_image
from data import TIMEZONES, submit
from formatting import CURRENCIES


def render_preferences(session, user):
    st.subheader("Preferences")
    currencies = sorted(CURRENCIES)
    timezones = TIMEZONES if user.timezone in TIMEZONES else [user.timezone] + TIMEZONES

    with st.form("preferences_form"):
        currency = st.selectbox(
            "Currency", options=currencies,
            index=currencies.index(user.currency) if user.currency in currencies else 0,
        )
        timezone = st.selectbox("Timezone", options=timezones, index=timezones.index(user.timezone))
        submitted = st.form_submit_button("Save Preferences", type="primary")

    if submitted:
        if submit(
            session,
            lambda: session.client.update_user_preferences(user.email, timezone=timezone, currency=currency),
            "Preferences saved successfully", "Failed to save preferences",
        ):
            session.update_user(timezone=timezone, currency=currency)
        st.rerun()


def render(session, user):
    st.title("Settings")

    st.subheader("Profile")
    col1, col2 = st.columns(2)
    col1.text_input("Username", value=user.username or "", disabled=True)
    col2.text_input("Email", value=user.email, disabled=True)
    st.caption("Administrator" if session.is_admin() else "User")

    st.divider()
    render_profile_image(session, user)
    st.divider()
    render_preferences(session, user)
    st.divider()
    render_change_password(session, user)


run_page(render)
