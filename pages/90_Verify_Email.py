import streamlit as st

from auth import PENDING_EMAIL_KEY, VERIFIED_EMAIL_KEY, get_session
from components.verify import get_resend_state, render_code_timer, render_resend_control
from data import submit
from notifications import render_flashes
from session import LOGIN_PAGE

RESEND_STATE_KEY = "verify_email_resend"

st.set_page_config(page_title="Verify Email · Expensia", page_icon="✉️")

session = get_session()
render_flashes(session.notify)

st.title("Verify your email")

if st.session_state.get(VERIFIED_EMAIL_KEY):
    st.success("Email verified successfully! You can now sign in.")
    st.page_link(LOGIN_PAGE, label="Go to Sign In", icon="➡️")
    st.stop()

email = st.query_params.get("email") or st.session_state.get(PENDING_EMAIL_KEY)
if email:
    st.write(f"We sent a verification code to **{email}**.")
else:
    st.write("Enter the verification code we sent to your email.")

state = get_resend_state(RESEND_STATE_KEY)

with st.form("verify_email_form"):
    code = st.text_input("Verification Code", max_chars=10)
    submitted = st.form_submit_button("Verify", type="primary")

render_code_timer(state.code_timer)

if submitted:
    if not code.strip():
        st.error("Please enter the verification code")
    elif submit(
        session, lambda: session.client.verify_email(code.strip()),
        "Email verified successfully!", "Invalid verification code",
    ):
        st.session_state[VERIFIED_EMAIL_KEY] = True
        st.session_state.pop(PENDING_EMAIL_KEY, None)
        st.session_state.pop(RESEND_STATE_KEY, None)
        st.rerun()
    else:
        render_flashes(session.notify)

if email:
    render_resend_control(session, state, email)
else:
    st.caption("Email not found. Sign up again to get a new code.")

st.page_link(LOGIN_PAGE, label="Back to Sign In", icon="↩️")
