import streamlit as st

FLASH_KEY = "_flashes"

ICONS = {
    "success": "✅",
    "error": "❌",
    "info": "ℹ️",
}


class Flasher:
    """Queue of messages shown as toasts on the next render.

    Messages survive ``st.switch_page`` and ``st.rerun`` because they live
    in session state until ``pop_all`` drains them.
    """

    def __init__(self, state):
        self._state = state

    def _push(self, category, message):
        self._state.setdefault(FLASH_KEY, []).append((category, message))

    def success(self, message):
        self._push("success", message)

    def error(self, message):
        self._push("error", message)

    def info(self, message):
        self._push("info", message)

    def pop_all(self):
        return self._state.pop(FLASH_KEY, None) or []


def render_flashes(flasher):
    for category, message in flasher.pop_all():
        st.toast(message, icon=ICONS.get(category))
