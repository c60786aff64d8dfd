import streamlit as st

from data import image_data_uri, load_profile_image, submit, validate_image, validate_new_password


def render_profile_image(session, user):
    """Profile picture from the backend (base64) with upload and remove."""
    st.subheader("Profile Image")

    image = load_profile_image(session, user, "Failed to load profile image")
    if image:
        st.image(image_data_uri(image), width=120)
        if st.button("Remove image"):
            if submit(
                session, lambda: session.client.delete_profile_image(user.email),
                "Profile image removed successfully", "Failed to remove image",
            ):
                session.update_user(profile_image=None)
            st.rerun()
    else:
        st.caption("No profile image")

    uploaded = st.file_uploader("Upload a new image", type=["jpg", "jpeg", "png"], key="profile_image_upload")
    if uploaded is not None and st.button("Upload", type="primary"):
        problem = validate_image(uploaded.type, uploaded.size)
        if problem:
            st.error(problem)
            return
        submit(
            session,
            lambda: session.client.upload_profile_image(user.email, uploaded.name, uploaded.getvalue(), uploaded.type),
            "Profile image uploaded successfully", "Failed to upload image",
        )
        st.rerun()


def render_change_password(session, user):
    st.subheader("Change Password")
    with st.form("change_password_form", clear_on_submit=False):
        current_password = st.text_input("Current Password", type="password")
        new_password = st.text_input("New Password", type="password")
        confirm_password = st.text_input("Confirm New Password", type="password")
        submitted = st.form_submit_button("Change Password", type="primary")

    if not submitted:
        return
    if not current_password:
        st.error("Please fill in all fields")
        return
    problem = validate_new_password(new_password, confirm_password)
    if problem:
        st.error(problem)
        return
    submit(
        session, lambda: session.client.change_password(user.email, new_password),
        "Password changed successfully", "Failed to change password",
    )
    st.rerun()
