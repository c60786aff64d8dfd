import streamlit as st

from auth import get_session
from components.verify import render_code_timer
from countdown import CODE_LIFETIME_SECONDS, Countdown
from data import submit, validate_new_password
from notifications import render_flashes
from session import LOGIN_PAGE

STEP_KEY = "reset_step"
EMAIL_KEY = "reset_email"
TIMER_KEY = "reset_timer"


def restart_reset():
    for key in (STEP_KEY, EMAIL_KEY, TIMER_KEY):
        st.session_state.pop(key, None)


def render_email_step(session):
    st.write("Enter your account email and we will send you a reset code.")
    with st.form("reset_email_form"):
        email = st.text_input("Email")
        submitted = st.form_submit_button("Send Code", type="primary")
    if not submitted:
        return
    if not email.strip():
        st.error("Please enter your email")
        return
    if submit(
        session, lambda: session.client.verify_email_for_password_reset(email.strip()),
        "Verification code sent to your email", "Failed to send verification code",
    ):
        st.session_state[EMAIL_KEY] = email.strip()
        st.session_state[TIMER_KEY] = Countdown(CODE_LIFETIME_SECONDS)
        st.session_state[STEP_KEY] = "code"
    st.rerun()


def render_code_step(session):
    st.write(f"Enter the code we sent to **{st.session_state[EMAIL_KEY]}**.")
    with st.form("reset_code_form"):
        code = st.text_input("Verification Code", max_chars=10)
        submitted = st.form_submit_button("Verify Code", type="primary")

    timer = st.session_state[TIMER_KEY]
    render_code_timer(timer)

    if submitted:
        if not code.strip():
            st.error("Please enter the verification code")
            return
        if timer.expired:
            st.error("Code has expired. Please request a new one.")
            return
        if submit(
            session, lambda: session.client.verify_password_reset_code(code.strip()),
            "Code verified! Now set your new password", "Invalid verification code",
        ):
            st.session_state[STEP_KEY] = "password"
        st.rerun()

    if st.button("Use a different email"):
        restart_reset()
        st.rerun()


def render_password_step(session):
    with st.form("reset_password_form"):
        password = st.text_input("New Password", type="password")
        confirm_password = st.text_input("Confirm New Password", type="password")
        submitted = st.form_submit_button("Reset Password", type="primary")
    if not submitted:
        return

    problem = validate_new_password(password, confirm_password)
    if problem:
        st.error(problem)
        return
    email = st.session_state[EMAIL_KEY]
    if submit(
        session, lambda: session.client.reset_password(email, password),
        "Password reset successfully!", "Failed to reset password",
    ):
        restart_reset()
        st.switch_page(LOGIN_PAGE)
    st.rerun()


st.set_page_config(page_title="Reset Password · Expensia", page_icon="🔑")

session = get_session()
render_flashes(session.notify)

st.title("Reset your password")

step = st.session_state.get(STEP_KEY, "email")
if step == "code":
    render_code_step(session)
elif step == "password":
    render_password_step(session)
else:
    render_email_step(session)

st.page_link(LOGIN_PAGE, label="Back to Sign In", icon="↩️")
