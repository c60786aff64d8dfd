import streamlit as st

from auth import run_page
from components.actions import close_form, open_form
from data import TRANSACTION_TYPES, category_type_id, load_list, submit, validate_category
from formatting import format_transaction_type

FORM_KEY = "edit_category"


def render_category_form(session):
    if FORM_KEY not in st.session_state:
        return

    category = st.session_state[FORM_KEY]
    editing = bool(category.get("id"))
    st.subheader("Edit Category" if editing else "Add Category")
    type_names = list(TRANSACTION_TYPES)
    current_type = next(
        (name for name, type_id in TRANSACTION_TYPES.items() if type_id == category_type_id(category)), None
    )

    with st.form("category_form"):
        col1, col2 = st.columns(2)
        with col1:
            name = st.text_input("Name", value=category.get("name") or "")
        with col2:
            type_name = st.selectbox(
                "Type", options=type_names,
                index=type_names.index(current_type) if current_type else 0,
            )
        col_save, col_cancel = st.columns(2)
        with col_save:
            save_clicked = st.form_submit_button("Save", type="primary", use_container_width=True)
        with col_cancel:
            cancel_clicked = st.form_submit_button("Cancel", use_container_width=True)

    if cancel_clicked:
        close_form(FORM_KEY)
        st.rerun()

    if save_clicked:
        problem = validate_category(name)
        if problem:
            st.error(problem)
            return
        type_id = TRANSACTION_TYPES[type_name]
        if editing:
            saved = submit(
                session, lambda: session.client.update_category(category["id"], name.strip(), type_id),
                "Category updated successfully", "Failed to save category",
            )
        else:
            saved = submit(
                session, lambda: session.client.add_category(name.strip(), type_id),
                "Category created successfully", "Failed to save category",
            )
        if saved:
            close_form(FORM_KEY)
        st.rerun()


def render(session, user):
    st.title("Category Management")
    if st.button("➕ Add Category"):
        open_form(FORM_KEY)

    render_category_form(session)

    categories = load_list(session, session.client.get_all_categories, "Failed to fetch categories")
    if not categories:
        st.info("No categories yet. Add one above.")
        return

    for cat in categories:
        with st.container(border=True):
            col_name, col_type, col_actions = st.columns([3, 2, 3])
            with col_name:
                st.write(f"**{cat['name']}**")
                st.caption("🟢 Enabled" if cat.get("enabled") else "🔴 Disabled")
            with col_type:
                st.write(format_transaction_type((cat.get("transactionType") or {}).get("name")))
            with col_actions:
                col_edit, col_toggle = st.columns(2)
                with col_edit:
                    if st.button("Edit", key=f"edit_category_{cat['id']}", use_container_width=True):
                        open_form(FORM_KEY, cat)
                with col_toggle:
                    label = "Disable" if cat.get("enabled") else "Enable"
                    if st.button(label, key=f"toggle_category_{cat['id']}", use_container_width=True):
                        submit(
                            session, lambda: session.client.toggle_category_status(cat["id"]),
                            "Category status updated successfully", "Failed to update category status",
                        )
                        st.rerun()


run_page(render, require_admin=True)
