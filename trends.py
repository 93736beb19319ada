# Chart series, dashboard stats and platform overview from reflections and daily rollups.
import pandas as pd

import sentiment

ACTIVE_WINDOW_DAYS = 7
CHART_COLUMNS = {
    "mood_average": "Mood",
    "energy_average": "Energy",
    "stress_average": "Stress",
    "sentiment_score": "Sentiment",
    "reflection_count": "Reflections",
}
SEARCH_FIELDS = ("daily_highlight", "challenges_faced")


def chart_frame(analytics: list) -> pd.DataFrame:
    if not analytics:
        return pd.DataFrame(columns=list(CHART_COLUMNS.values()))
    df = pd.DataFrame(analytics)
    df = df[["date", *CHART_COLUMNS]].rename(columns=CHART_COLUMNS)
    df["date"] = pd.to_datetime(df["date"])
    return df.sort_values("date").set_index("date")


def recent_stats(analytics: list, days: int = ACTIVE_WINDOW_DAYS) -> dict | None:
    """Averages over the `days` most recent daily rollups."""
    recent = sorted(analytics, key=lambda a: a["date"], reverse=True)[:days]
    if not recent:
        return None
    n = len(recent)
    return {
        "avg_mood": round(sum(a["mood_average"] for a in recent) / n, 1),
        "avg_stress": round(sum(a["stress_average"] for a in recent) / n, 1),
        "avg_energy": round(sum(a["energy_average"] for a in recent) / n, 1),
        "total_reflections": sum(a["reflection_count"] for a in recent),
    }


def type_distribution(reflections: list) -> dict:
    counts = {}
    for r in reflections:
        counts[r.get("type")] = counts.get(r.get("type"), 0) + 1
    return counts


def sentiment_band(score: float) -> str:
    if score > 0.3:
        return "positive"
    if score > 0:
        return "mildly positive"
    if score > -0.3:
        return "mildly negative"
    return "negative"


def top_keywords(records: list, n: int = 10) -> list:
    return sentiment.aggregate_keywords(records)[:n]


def platform_stats(counts: dict) -> dict:
    moods = counts.get("mood_scores") or []
    sentiments = counts.get("sentiment_scores") or []
    avg_mood = sum(moods) / len(moods) if moods else 0
    avg_sentiment = sum(sentiments) / len(sentiments) if sentiments else 0
    return {
        "total_users": counts.get("total_users", 0),
        "total_reflections": counts.get("total_reflections", 0),
        "avg_mood_score": round(avg_mood, 1),
        "avg_sentiment_score": round(avg_sentiment, 2),
        "active_users": counts.get("active_users", 0),
    }


def platform_overview(stats: dict) -> list:
    return [
        f"Average mood score across all users: {stats['avg_mood_score']}/10",
        f"{stats['active_users']} users have been active in the last {ACTIVE_WINDOW_DAYS} days",
        f"{stats['total_reflections']} total reflections have been created",
        f"Overall sentiment is {'positive' if stats['avg_sentiment_score'] > 0 else 'negative'}",
    ]


def filter_reflections(reflections: list, search: str = "", rtype: str = "all") -> list:
    needle = (search or "").strip().lower()
    out = []
    for r in reflections:
        if rtype != "all" and r.get("type") != rtype:
            continue
        if needle:
            content = r.get("content") or {}
            haystack = [r.get("title") or ""] + [content.get(f) or "" for f in SEARCH_FIELDS]
            if not any(needle in str(h).lower() for h in haystack):
                continue
        out.append(r)
    return out
