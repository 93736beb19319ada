# Bootcamp Reflections entry point: config, logging, auth gate and tab routing.
import logging

import streamlit as st
from pathlib import Path

import auth
import config
import db

TAGLINE = "Track your bootcamp journey with thoughtful reflections"
FOOTER_TEXT = "Reflections are private to you. Admins only see aggregated and exported data."
NAV_TABS = ["Dashboard", "Reflect", "Insights", "Settings"]
ADMIN_TAB = "Admin"

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

st.set_page_config(
    page_title=config.APP_NAME,
    page_icon="🧭",
    layout="centered",
    initial_sidebar_state="collapsed",
)
_css_path = Path(__file__).resolve().parent / "styles.css"
if _css_path.exists():
    st.markdown(f"<style>\n{_css_path.read_text()}\n</style>", unsafe_allow_html=True)

if "db_inited" not in st.session_state:
    db.init_db()
    st.session_state.db_inited = True

if "user" not in st.session_state:
    st.session_state.user = None
if "page" not in st.session_state:
    st.session_state.page = "Dashboard"


def _tabs(user):
    return NAV_TABS + [ADMIN_TAB] if auth.is_admin(user) else NAV_TABS


def _render_header(user):
    top_col1, top_col2 = st.columns([3, 1])
    with top_col1:
        st.markdown(f"# {config.APP_NAME}")
        st.markdown(f'<p class="tagline">{TAGLINE}</p>', unsafe_allow_html=True)
    with top_col2:
        st.caption(user.get("name") or user["email"])
        if st.button("Sign out", key="signout_btn"):
            auth.sign_out()
            st.rerun()
    tabs = _tabs(user)
    with st.container(key="nav_tabs"):
        tab_cols = st.columns(len(tabs))
        for i, tab in enumerate(tabs):
            with tab_cols[i]:
                is_active = st.session_state.page == tab
                if st.button(tab, key=f"nav_{tab}", type="primary" if is_active else "secondary"):
                    st.session_state.page = tab
                    st.rerun()
    st.markdown('<hr class="nav-tabs-separator" />', unsafe_allow_html=True)


def main():
    user = auth.current_user()
    if not user:
        st.markdown(f"# {config.APP_NAME}")
        st.markdown(f"**{TAGLINE}**")
        with st.container(key="auth_card"):
            mode = st.radio("Account", ["Sign in", "Sign up"], horizontal=True, label_visibility="collapsed")
            if mode == "Sign in":
                auth.render_sign_in()
            else:
                auth.render_sign_up()
        st.caption(FOOTER_TEXT)
        return

    if st.session_state.page not in _tabs(user):
        st.session_state.page = "Dashboard"
    _render_header(user)
    page = st.session_state.page
    if page == "Dashboard":
        from pages import dashboard
        dashboard.render(user)
    elif page == "Reflect":
        from pages import reflect
        reflect.render(user)
    elif page == "Insights":
        from pages import insights
        insights.render(user)
    elif page == ADMIN_TAB:
        from pages import admin
        admin.render(user)
    else:
        from pages import settings
        settings.render(user)
    st.caption(FOOTER_TEXT)


if __name__ == "__main__":
    main()
