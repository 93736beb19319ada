# Insights tab: mood/energy/stress and sentiment charts, rollup insights, recurring keywords, export.
import streamlit as st
import pandas as pd

import db
import export
import sentiment
import trends

TIME_RANGES = {"7": "Last 7 days", "30": "Last 30 days", "90": "Last 90 days", "365": "Last year"}


def render(user):
    time_range = st.selectbox(
        "Time range", list(TIME_RANGES), index=1, format_func=TIME_RANGES.get, key="insights_range"
    )
    start, end = export.date_range(time_range)
    reflections = db.get_user_reflections(user["id"], since_ms=int(start.timestamp() * 1000))
    analytics = db.get_user_analytics(user["id"], since_date=start.strftime("%Y-%m-%d"))

    insights = sentiment.generate_analytics_insights(analytics)
    if insights:
        st.markdown("### Insights")
        for line in insights:
            st.info(line)

    frame = trends.chart_frame(analytics)
    st.markdown("### Mood trends")
    if frame.empty:
        st.caption("Write a few reflections to see your trends here.")
    else:
        st.line_chart(frame[["Mood", "Energy", "Stress"]], y_label="Score (1-10)")
        st.markdown("### Sentiment")
        st.bar_chart(frame[["Sentiment"]], y_label="Sentiment (-1 to 1)")

    st.markdown("### Reflection types")
    dist = trends.type_distribution(reflections)
    if dist:
        st.bar_chart(pd.DataFrame({"type": list(dist), "count": list(dist.values())}).set_index("type"), y="count")
    else:
        st.caption("No reflections in this range.")

    st.markdown("### Recurring themes")
    st.caption("Keywords that appear often. Top 5 below.")
    theme_data = trends.top_keywords(reflections, 5)
    if theme_data:
        st.bar_chart(
            pd.DataFrame(theme_data, columns=["theme", "count"]).set_index("theme"),
            y="count", x_label="Theme", y_label="Count",
        )
    else:
        st.caption("Write more entries to see themes here.")

    st.download_button(
        "Export my data (JSON)",
        data=export.personal_export(reflections, analytics, time_range, end),
        file_name=export.export_filename("json", prefix="my-analytics", now=end),
        mime="application/json",
        key="personal_export",
    )
