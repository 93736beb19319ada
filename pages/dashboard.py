# Dashboard tab: 7-day stats, insights, recent reflections.
import streamlit as st
from datetime import datetime

import db
import sentiment
import trends

RECENT_REFLECTIONS = 10
ANALYTICS_DAYS = 30


def _render_stats(stats):
    cols = st.columns(4)
    cols[0].metric("Avg mood (7 days)", stats["avg_mood"])
    cols[1].metric("Avg energy (7 days)", stats["avg_energy"])
    cols[2].metric("Avg stress (7 days)", stats["avg_stress"])
    cols[3].metric("Reflections", stats["total_reflections"])


def _render_reflection(r, user_id):
    when = datetime.fromtimestamp(r["created_at"] / 1000.0).strftime("%b %d, %Y %H:%M")
    with st.expander(f"{r['title']} · {when}"):
        st.caption(
            f"Mood {r['mood_score']}/10 · Tone {trends.sentiment_band(r['sentiment_score'] or 0)}"
        )
        for field in sentiment.TEXT_FIELDS:
            value = r["content"].get(field)
            if value:
                st.markdown(f"**{field.replace('_', ' ').capitalize()}**: {value}")
        if r["keywords"]:
            st.caption("Keywords: " + ", ".join(r["keywords"][:5]))
        if st.button("Delete", key=f"del_{r['id']}"):
            try:
                db.delete_reflection(user_id, r["id"])
                st.rerun()
            except ValueError as e:
                st.error(str(e))


def render(user):
    reflections = db.get_user_reflections(user["id"], limit=RECENT_REFLECTIONS)
    analytics = db.get_user_analytics(user["id"], limit=ANALYTICS_DAYS)

    st.markdown(f"### Welcome back, {user.get('name') or 'there'}!")

    stats = trends.recent_stats(analytics)
    if stats:
        _render_stats(stats)

    insights = sentiment.generate_insights(reflections)
    if insights:
        st.markdown("### Insights")
        for line in insights:
            st.info(line)

    st.markdown("### Recent reflections")
    if not reflections:
        st.caption("No reflections yet. Head to the Reflect tab to write your first one.")
        return
    for r in reflections:
        _render_reflection(r, user["id"])
