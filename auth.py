import logging

import streamlit as st

from api_client import ApiClient, ApiError, UnauthorizedError
from components import render_sidebar
from config import Settings, log_level
from data import submit, validate_signup
from notifications import Flasher, render_flashes
from session import (
    ADMIN_DASHBOARD_PAGE,
    AUTHORIZED,
    DASHBOARD_PAGE,
    LOADING,
    LOGIN_PAGE,
    REDIRECT_LOGIN,
    REDIRECT_UNAUTHORIZED,
    SessionContext,
    UNAUTHORIZED_PAGE,
    guard_state,
)
from storage import SessionStore

logger = logging.getLogger(__name__)

SESSION_KEY = "session_context"
PENDING_EMAIL_KEY = "pending_verification_email"
VERIFIED_EMAIL_KEY = "email_verified"
VERIFY_EMAIL_PAGE = "pages/90_Verify_Email.py"
RESET_PASSWORD_PAGE = "pages/91_Reset_Password.py"


@st.cache_resource
def get_settings():
    """Load settings and configure logging once per server process."""
    logging.basicConfig(level=log_level(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    settings = Settings.load()
    logger.info("Using Expensia API at %s", settings.api_url)
    return settings


def get_session() -> SessionContext:
    """Session context for this browser session, restored on first use."""
    if SESSION_KEY not in st.session_state:
        settings = get_settings()
        store = SessionStore(st.session_state)
        client = ApiClient(settings.api_url, store, timeout=settings.timeout)
        session = SessionContext(client, store, navigate=st.switch_page, notify=Flasher(st.session_state))
        st.session_state[SESSION_KEY] = session
        session.restore()
    return st.session_state[SESSION_KEY]


def require_login(require_admin=False):
    """Check auth and redirect if needed. Returns the authenticated user."""
    session = get_session()
    state = guard_state(session, require_admin)

    if state == LOADING:
        with st.spinner("Loading..."):
            st.stop()
    if state == REDIRECT_LOGIN:
        st.switch_page(LOGIN_PAGE)
    if state == REDIRECT_UNAUTHORIZED:
        st.switch_page(UNAUTHORIZED_PAGE)
    return session.current_user


def run_page(render, require_admin=False):
    """Render a protected page: flashes, guard, sidebar, then the page body."""
    session = get_session()
    render_flashes(session.notify)
    user = require_login(require_admin)
    render_sidebar(session, user)
    try:
        render(session, user)
    except UnauthorizedError as e:
        session.handle_error(e, "")


def redirect_signed_in(session):
    if session.current_user is not None:
        st.switch_page(ADMIN_DASHBOARD_PAGE if session.is_admin() else DASHBOARD_PAGE)


def render_sign_in(session):
    with st.form("signin_form"):
        email = st.text_input("Email", key="signin_email")
        password = st.text_input("Password", type="password", key="signin_password")
        submitted = st.form_submit_button("Sign In", type="primary")
    if submitted:
        if not email or not password:
            st.error("Email and password are required.")
            return
        try:
            session.login(email, password)
        except ApiError:
            # login() already queued the message
            render_flashes(session.notify)


def start_verification(state, email):
    """Point the verify page at a new address and drop any earlier success."""
    state[PENDING_EMAIL_KEY] = email
    state.pop(VERIFIED_EMAIL_KEY, None)


def render_sign_up(session):
    with st.form("signup_form"):
        username = st.text_input("Username", key="signup_name")
        email = st.text_input("Email", key="signup_email")
        password = st.text_input("Password", type="password", key="signup_password")
        password_confirm = st.text_input("Confirm Password", type="password", key="signup_password_confirm")
        submitted = st.form_submit_button("Sign Up", type="primary")
    if not submitted:
        return

    problem = validate_signup(username, email, password, password_confirm)
    if problem:
        st.error(problem)
        return
    if submit(
        session,
        lambda: session.client.sign_up(username, email, password),
        "Account created! Please check your email for verification code.",
        "Failed to create account",
    ):
        start_verification(st.session_state, email)
        st.switch_page(VERIFY_EMAIL_PAGE)
    render_flashes(session.notify)
