import streamlit as st

from auth import get_session

st.set_page_config(page_title="Signing in · Expensia", page_icon="🔐")

session = get_session()
params = st.query_params

with st.spinner("Completing sign in..."):
    # Navigates away on every outcome
    session.complete_oauth(params.get("token"), params.get("email"), params.get("error"))
