# Admin tab: platform stats, export, reflection search, users, analytics overview, blog posts.
import streamlit as st
import pandas as pd
from datetime import datetime

import auth
import blog
import db
import export
import sentiment
import trends

EXPORT_RANGES = {"7": "Last 7 days", "30": "Last 30 days", "90": "Last 90 days", "all": "All time"}
TYPE_FILTERS = ["all", *db.REFLECTION_TYPES]
BLOG_CORPUS_SIZE = 100


def _render_stats():
    stats = trends.platform_stats(db.platform_counts())
    cols = st.columns(5)
    cols[0].metric("Users", stats["total_users"])
    cols[1].metric("Reflections", stats["total_reflections"])
    cols[2].metric("Avg mood", stats["avg_mood_score"])
    cols[3].metric("Avg sentiment", stats["avg_sentiment_score"])
    cols[4].metric("Active (7d)", stats["active_users"])
    return stats


def _render_export():
    st.markdown("### Data export")
    settings = db.get_admin_settings()
    col1, col2 = st.columns(2)
    with col1:
        time_range = st.selectbox("Time range", list(EXPORT_RANGES), index=1, format_func=EXPORT_RANGES.get, key="export_range")
    with col2:
        fmt = st.selectbox("Format", list(db.EXPORT_FORMATS), index=db.EXPORT_FORMATS.index(settings["export_format"]), key="export_fmt")
    if st.button("Prepare export", key="export_btn"):
        try:
            start, end = export.date_range(time_range)
            reflections = db.get_reflections(int(start.timestamp() * 1000), int(end.timestamp() * 1000))
            data, mime, filename = export.export(export.build_export_rows(reflections), fmt, start, end)
            st.download_button(f"Download {fmt.upper()}", data=data, file_name=filename, mime=mime, key="export_dl")
        except Exception as e:
            st.error(str(e))


def _render_reflections():
    col1, col2 = st.columns([3, 1])
    with col1:
        search = st.text_input("Search reflections", key="admin_search", placeholder="Search reflections...")
    with col2:
        rtype = st.selectbox("Type", TYPE_FILTERS, key="admin_type")
    shown = trends.filter_reflections(db.get_reflections(limit=100), search, rtype)
    if not shown:
        st.caption("No matching reflections.")
    for r in shown:
        when = datetime.fromtimestamp(r["created_at"] / 1000.0).strftime("%b %d, %Y %H:%M")
        line = f"**{r['title']}** · {r['type']} · {r.get('user_name') or 'Unknown User'} · {when} · Mood: {r['mood_score']}/10"
        if r["sentiment_score"] is not None:
            line += f" · Sentiment: {r['sentiment_score']:.2f}"
        st.markdown(line)
        if r["keywords"]:
            st.caption("Keywords: " + ", ".join(r["keywords"][:3]))


def _render_users():
    users = db.list_users()
    if not users:
        st.caption("No users yet.")
        return
    df = pd.DataFrame(users)
    df["joined"] = pd.to_datetime(df["created_at"], unit="ms").dt.strftime("%Y-%m-%d")
    st.dataframe(df[["name", "email", "role", "joined"]], hide_index=True)


def _render_analytics(stats):
    analytics = db.get_all_analytics()
    st.markdown("### Analytics overview")
    if analytics:
        df = pd.DataFrame(analytics[:10])
        st.dataframe(
            df[["date", "user_name", "mood_average", "stress_average", "energy_average", "reflection_count"]].round(1),
            hide_index=True,
        )
        top = trends.top_keywords(analytics, 10)
        if top:
            st.markdown("**Top keywords**")
            st.bar_chart(pd.DataFrame(top, columns=["keyword", "count"]).set_index("keyword"), y="count")
    else:
        st.caption("No analytics yet.")

    st.markdown("### Platform insights")
    for line in trends.platform_overview(stats):
        st.markdown(f"- {line}")
    for line in sentiment.generate_analytics_insights(analytics):
        st.markdown(f"- {line}")


def _render_blog():
    st.markdown("### Generate a community post")
    theme = st.selectbox("Theme", blog.THEMES, key="blog_theme")
    include_quotes = st.checkbox("Include anonymous quotes", value=True, key="blog_quotes")
    if st.button("Generate post", key="blog_generate"):
        corpus = db.get_reflections(limit=BLOG_CORPUS_SIZE)
        st.session_state.blog_draft = blog.generate_blog_post(corpus, theme, include_quotes)

    draft = st.session_state.get("blog_draft")
    if draft:
        st.markdown(f"#### {draft['title']}")
        st.caption(" · ".join(draft["tags"]))
        st.markdown(draft["content"])
        if st.button("Save draft", key="blog_save"):
            try:
                db.save_blog_post(draft)
                st.session_state.blog_draft = None
                st.success("Post saved.")
                st.rerun()
            except Exception as e:
                st.error(str(e))

    st.markdown("### Saved posts")
    for post in db.list_blog_posts():
        status = "published" if post["published"] else "draft"
        st.markdown(f"**{post['title']}** ({status})")
        st.caption(post["excerpt"])
        if not post["published"] and st.button("Publish", key=f"publish_{post['id']}"):
            try:
                db.publish_blog_post(post["id"])
                st.rerun()
            except ValueError as e:
                st.error(str(e))


def render(user):
    try:
        auth.require_admin(user)
    except PermissionError as e:
        st.error(str(e))
        return
    st.markdown("### Admin dashboard")
    st.caption("Monitor and manage the bootcamp reflection platform.")
    stats = _render_stats()
    _render_export()
    tab_reflections, tab_users, tab_analytics, tab_blog = st.tabs(["Reflections", "Users", "Analytics", "Blog"])
    with tab_reflections:
        _render_reflections()
    with tab_users:
        _render_users()
    with tab_analytics:
        _render_analytics(stats)
    with tab_blog:
        _render_blog()
