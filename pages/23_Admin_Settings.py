import streamlit as st

from auth import run_page
from components.profile import render_change_password, render_profile_image


def render(session, user):
    st.title("Admin Settings")
    st.write(f"**{user.username or user.email}**")
    st.caption(f"{user.email} · Administrator")

    st.divider()
    render_profile_image(session, user)
    st.divider()
    render_change_password(session, user)


run_page(render, require_admin=True)
