# Settings tab: personal export and deletion; admin settings and rollup retention.
import streamlit as st
from datetime import datetime, time

import auth
import db
import export


def _render_admin_settings():
    st.markdown("### Platform settings")
    current = db.get_admin_settings()
    with st.form("admin_settings"):
        notifications = st.toggle("Reflection reminders enabled", value=current["notification_enabled"])
        reminder = st.time_input("Reminder time", value=time.fromisoformat(current["reminder_time"]))
        fmt = st.selectbox("Default export format", list(db.EXPORT_FORMATS), index=db.EXPORT_FORMATS.index(current["export_format"]))
        retention = st.number_input("Analytics retention (days)", min_value=1, value=int(current["analytics_retention_days"]))
        if st.form_submit_button("Save settings"):
            try:
                db.update_admin_settings({
                    "notification_enabled": notifications,
                    "reminder_time": reminder.strftime("%H:%M"),
                    "export_format": fmt,
                    "analytics_retention_days": int(retention),
                })
                st.success("Settings saved.")
            except Exception as e:
                st.error(str(e))

    st.caption(f"Remove daily rollups older than {current['analytics_retention_days']} days.")
    if st.button("Prune old analytics", key="prune_btn"):
        removed = db.prune_analytics(int(current["analytics_retention_days"]))
        st.success(f"Removed {removed} rollups.")


def render(user):
    st.markdown("### Settings")
    st.caption("Account and data options.")

    st.markdown("### Export your data")
    st.caption("Download all your reflections and daily analytics as JSON.")
    reflections = db.get_user_reflections(user["id"])
    now = datetime.now()
    if st.button("Export as JSON", key="export_btn", disabled=not reflections):
        st.download_button(
            "Download JSON",
            data=export.personal_export(reflections, db.get_user_analytics(user["id"]), "all", now),
            file_name=export.export_filename("json", prefix="reflections-export", now=now),
            mime="application/json",
            key="download_export",
        )

    st.markdown("### Delete all data")
    st.caption("Permanently delete all your reflections and analytics. Export before deletion. This cannot be undone.")
    if "delete_confirm" not in st.session_state:
        st.session_state.delete_confirm = False
    if st.button("Delete all data", key="delete_btn", disabled=not reflections):
        st.session_state.delete_confirm = True
    if st.session_state.delete_confirm:
        st.warning("Permanently delete all of your reflections?")
        col1, col2 = st.columns(2)
        with col1:
            if st.button("Yes, delete", key="delete_confirm_btn"):
                db.delete_user_data(user["id"])
                st.session_state.delete_confirm = False
                st.success("All data deleted.")
                st.rerun()
        with col2:
            if st.button("Cancel", key="delete_cancel"):
                st.session_state.delete_confirm = False
                st.rerun()

    if auth.is_admin(user):
        _render_admin_settings()
