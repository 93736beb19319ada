# Reflect tab: reflection form per type, analyzed and stored on submit.
import streamlit as st

import db
import trends

TYPE_LABELS = {
    "daily": "Daily reflection",
    "weekly": "Weekly reflection",
    "project": "Project reflection",
    "mood": "Mood check-in",
}
PHASES = ["pre-bootcamp", "week-1-8", "week-9-16", "week-17-24", "post-graduation"]
SLIDERS = [
    ("overall_mood", "Overall mood"),
    ("energy_level", "Energy level"),
    ("stress_level", "Stress level"),
    ("motivation", "Motivation"),
]
TEXT_PROMPTS = {
    "daily": [
        ("daily_highlight", "What was the highlight of your day?"),
        ("challenges_faced", "What challenges did you face?"),
        ("learning_progress", "What did you learn today?"),
        ("goals_tomorrow", "What are your goals for tomorrow?"),
        ("gratitude", "What are you grateful for?"),
    ],
    "weekly": [
        ("daily_highlight", "What was the highlight of your week?"),
        ("biggest_learning", "What was your biggest learning this week?"),
        ("challenges_faced", "What challenges did you face?"),
        ("areas_for_improvement", "What would you like to improve?"),
        ("gratitude", "What are you grateful for?"),
    ],
    "project": [
        ("learning_progress", "What did you learn building this project?"),
        ("challenges_faced", "What challenges did you face?"),
        ("daily_highlight", "What are you most proud of?"),
        ("areas_for_improvement", "What would you do differently?"),
    ],
    "mood": [
        ("daily_highlight", "What is influencing your mood right now?"),
        ("gratitude", "One thing you're grateful for"),
    ],
}


def _collect(rtype: str) -> dict:
    content = {"phase": st.selectbox("Bootcamp phase", PHASES, index=1, key=f"{rtype}_phase")}
    cols = st.columns(2)
    for i, (field, label) in enumerate(SLIDERS):
        with cols[i % 2]:
            content[field] = st.slider(label, min_value=1, max_value=10, value=5, key=f"{rtype}_{field}")
    if rtype == "project":
        content["project_name"] = st.text_input("Project name", key="project_name")
        techs = st.text_input("Technologies used (comma separated)", key="project_techs")
        content["technologies_used"] = [t.strip() for t in techs.split(",") if t.strip()]
        content["project_satisfaction"] = st.slider("Project satisfaction", 1, 10, 5, key="project_satisfaction")
        content["collaboration_rating"] = st.slider("Collaboration", 1, 10, 5, key="project_collaboration")
    if rtype == "weekly":
        content["weekly_goals_met"] = st.checkbox("I met my goals this week", key="weekly_goals_met")
    for field, label in TEXT_PROMPTS[rtype]:
        content[field] = st.text_area(label, key=f"{rtype}_{field}", height=90)
    return content


def render(user):
    st.markdown("### New reflection")
    rtype = st.radio(
        "Reflection type", list(TYPE_LABELS), format_func=TYPE_LABELS.get, horizontal=True, key="reflect_type"
    )
    with st.form(f"reflect_{rtype}", clear_on_submit=True):
        content = _collect(rtype)
        submitted = st.form_submit_button("Save reflection", type="primary")

    if submitted:
        try:
            saved = db.create_reflection(user["id"], rtype, content)
        except Exception as e:
            st.error(str(e))
            return
        st.success("Reflection saved successfully!")
        st.caption(
            f"Tone: {trends.sentiment_band(saved['sentiment_score'])} ({saved['sentiment_score']:+.2f})"
        )
        if saved["keywords"]:
            st.caption("Keywords: " + ", ".join(saved["keywords"]))
