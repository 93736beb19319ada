# Account sign-up, sign-in, admin gate and auth forms.
import base64
import logging

import streamlit as st

import config
import crypto
import db

log = logging.getLogger(__name__)

PUBLIC_USER_FIELDS = ("id", "email", "name", "role", "created_at", "updated_at")


def _public(user: dict) -> dict:
    return {k: user.get(k) for k in PUBLIC_USER_FIELDS}


def _normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def sign_up(email: str, password: str, name: str | None = None) -> dict:
    email = _normalize_email(email)
    if not email or "@" not in email:
        raise ValueError("Enter a valid email address.")
    if len(password or "") < config.MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {config.MIN_PASSWORD_LENGTH} characters.")
    role = "admin" if email in config.admin_emails() else "user"
    salt = crypto.generate_salt()
    user = db.create_user(
        email,
        (name or "").strip() or None,
        role,
        crypto.hash_password(password, salt),
        crypto.salt_to_b64(salt),
    )
    log.info("Created %s account %s", role, user["id"])
    return _public(user)


# Unknown emails run the same PBKDF2 verify as known ones.
_DUMMY_SALT = b"\0" * crypto.SALT_LENGTH
_DUMMY_HASH = base64.b64encode(b"\0" * crypto.KEY_LENGTH).decode("ascii")


def sign_in(email: str, password: str) -> dict:
    user = db.get_user_by_email(_normalize_email(email))
    if user:
        salt, hashed = crypto.b64_to_salt(user["salt"]), user["password_hash"]
    else:
        salt, hashed = _DUMMY_SALT, _DUMMY_HASH
    if not crypto.verify_password(password or "", salt, hashed) or not user:
        log.warning("Failed sign-in for %s", _normalize_email(email))
        raise ValueError("Invalid email or password.")
    return _public(user)


def is_admin(user: dict | None) -> bool:
    return bool(user) and user.get("role") == "admin"


def require_admin(user: dict | None) -> dict:
    if not is_admin(user):
        raise PermissionError("Admin access required.")
    return user


def current_user() -> dict | None:
    return st.session_state.get("user")


def sign_out() -> None:
    st.session_state.user = None
    st.session_state.page = "Dashboard"


def render_sign_in() -> None:
    st.markdown("### Sign in")
    with st.form("sign_in"):
        email = st.text_input("Email", key="signin_email")
        password = st.text_input("Password", type="password", key="signin_password")
        submitted = st.form_submit_button("Sign in")
        if submitted:
            try:
                st.session_state.user = sign_in(email, password)
                st.rerun()
            except ValueError as e:
                st.error(str(e))


def render_sign_up() -> None:
    st.markdown("### Create an account")
    with st.form("sign_up"):
        name = st.text_input("Name", key="signup_name")
        email = st.text_input("Email", key="signup_email")
        p1 = st.text_input(
            "Password", type="password", placeholder=f"At least {config.MIN_PASSWORD_LENGTH} characters", key="signup_p1"
        )
        p2 = st.text_input("Confirm password", type="password", key="signup_p2")
        submitted = st.form_submit_button("Sign up")
        if submitted:
            if p1 != p2:
                st.error("Passwords do not match.")
            else:
                try:
                    st.session_state.user = sign_up(email, p1, name)
                    st.rerun()
                except ValueError as e:
                    st.error(str(e))
