import streamlit as st

from api_client import ApiError
from countdown import ResendState
from formatting import format_time


def get_resend_state(key):
    if key not in st.session_state:
        st.session_state[key] = ResendState()
    return st.session_state[key]


@st.fragment(run_every=1)
def render_code_timer(timer):
    """Ticks once a second without rerunning the whole page."""
    remaining = timer.remaining()
    if remaining > 0:
        st.caption(f"⏱️ Code expires in {format_time(remaining)}")
    else:
        st.warning("The code has expired. Request a new one.")


@st.fragment(run_every=1)
def render_resend_control(session, state, email):
    if state.exhausted:
        st.button("Resend code", disabled=True, key="resend_exhausted")
        st.caption("Maximum resend attempts reached.")
        return

    cooldown = state.cooldown.remaining()
    label = f"Resend code ({cooldown}s)" if cooldown else "Resend code"
    if st.button(label, disabled=not state.can_resend, key="resend_code"):
        try:
            session.client.resend_verification_code(email)
        except ApiError as e:
            state.failed(e)
            session.handle_error(e, "Failed to resend code")
        else:
            state.sent()
            session.notify.success("Verification code resent to your email")
        st.rerun()
