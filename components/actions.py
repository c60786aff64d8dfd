import streamlit as st

from formatting import get_month_name


def open_form(key, item=None):
    """Open an add (item=None) or edit form kept under ``key`` in session state."""
    st.session_state[key] = item or {}
    st.rerun()


def close_form(key):
    st.session_state.pop(key, None)


def render_delete_action(state_key, item_id, prompt, on_confirm):
    """Two-step delete: the first click asks, Confirm runs ``on_confirm``."""
    if st.session_state.get(state_key) == item_id:
        st.warning(prompt)
        col_confirm, col_cancel = st.columns(2, gap="small")
        with col_confirm:
            if st.button("Confirm", key=f"confirm_{state_key}_{item_id}", type="primary", use_container_width=True):
                del st.session_state[state_key]
                on_confirm()
                st.rerun()
        with col_cancel:
            if st.button("Cancel", key=f"cancel_{state_key}_{item_id}", use_container_width=True):
                del st.session_state[state_key]
                st.rerun()
    elif st.button("Delete", key=f"delete_{state_key}_{item_id}", use_container_width=True):
        st.session_state[state_key] = item_id
        st.rerun()


def month_year_selector(key, today):
    """Month and year pickers on one row. Returns ``(month, year)``."""
    col_month, col_year = st.columns(2)
    with col_month:
        month = st.selectbox(
            "Month",
            options=range(1, 13),
            format_func=get_month_name,
            index=today.month - 1,
            key=f"{key}_month",
        )
    with col_year:
        year = st.selectbox(
            "Year",
            options=range(today.year, today.year - 5, -1),
            index=0,
            key=f"{key}_year",
        )
    return month, year
