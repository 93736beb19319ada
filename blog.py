# Procedural community blog posts assembled from aggregate reflection statistics.
import logging
import re
import time

import sentiment

log = logging.getLogger(__name__)

THEMES = [
    "weekly-recap",
    "mood-trends",
    "learning-highlights",
    "challenges-overcome",
    "success-stories",
    "community-insights",
]
QUOTE_FIELDS = (
    ("daily_highlight", 50),
    ("biggest_learning", 50),
    ("gratitude", 30),
    ("learning_progress", 50),
)
MIN_QUOTE_LENGTH = 30
MAX_QUOTE_LENGTH = 300
MAX_QUOTES = 10
QUOTES_PER_POST = 3
EXCERPT_LENGTH = 200
MAX_TAGS = 8
FIXED_TAGS = ("bootcamp", "reflection-analysis", "student-insights")
CONTENT_TAGS = (
    ("mood", "mood-tracking"),
    ("learning", "learning-journey"),
    ("challenge", "challenges"),
    ("success", "success-stories"),
    ("community", "community-insights"),
    ("trend", "data-analysis"),
)
TYPE_TAGS = {
    "daily": "daily-reflections",
    "weekly": "weekly-reviews",
    "project": "project-insights",
    "mood": "mood-tracking",
}
THEME_SECTIONS = {
    "challenges-overcome": ("## Challenges We Worked Through", "challenges"),
    "success-stories": ("## Wins Worth Celebrating", "successes"),
}


def calculate_trend(values: list) -> float:
    """Second-half mean minus first-half mean of a chronological series."""
    if len(values) < 2:
        return 0
    mid = len(values) // 2
    first, second = values[:mid], values[mid:]
    return sum(second) / len(second) - sum(first) / len(first)


def _mood_word(avg_mood: float) -> str:
    if avg_mood > 7:
        return "positive"
    if avg_mood > 4:
        return "balanced"
    return "challenging"


def _common_text(reflections: list, field: str) -> list:
    out = []
    for r in reflections:
        value = (r.get("content") or {}).get(field)
        if value and isinstance(value, str):
            out.append(value)
    return out[:5]


def analyze_reflections(reflections: list) -> dict:
    total = len(reflections)
    avg_mood = sum(r.get("mood_score") or 0 for r in reflections) / total if total else 0
    avg_sentiment = sum(r.get("sentiment_score") or 0 for r in reflections) / total if total else 0

    type_distribution = {}
    for r in reflections:
        type_distribution[r.get("type")] = type_distribution.get(r.get("type"), 0) + 1

    chronological = sorted(reflections, key=lambda r: r.get("created_at") or 0)
    return {
        "total_reflections": total,
        "avg_mood": avg_mood,
        "avg_sentiment": avg_sentiment,
        "type_distribution": type_distribution,
        "top_keywords": [k for k, _ in sentiment.aggregate_keywords(reflections)[:10]],
        "mood_trend": calculate_trend([r.get("mood_score") or 0 for r in chronological]),
        "challenges": _common_text(reflections, "challenges_faced"),
        "successes": _common_text(reflections, "daily_highlight"),
    }


def generate_title(theme: str, insights: dict) -> str:
    titles = {
        "weekly-recap": f"Weekly Bootcamp Insights: {'Rising' if insights['mood_trend'] > 0 else 'Steady'} Progress",
        "mood-trends": f"Mood Trends in Bootcamp: {_mood_word(insights['avg_mood']).title()} Journey",
        "learning-highlights": f"Learning Highlights: Key Insights from {insights['total_reflections']} Reflections",
        "challenges-overcome": "Overcoming Challenges: Stories from the Bootcamp Journey",
        "success-stories": "Success Stories: Celebrating Bootcamp Achievements",
        "community-insights": "Community Insights: Collective Wisdom from Our Bootcamp",
    }
    return titles.get(theme, f"Bootcamp Reflections: {theme}")


def generate_introduction(theme: str, insights: dict) -> str:
    n = insights["total_reflections"]
    intros = {
        "weekly-recap": f"This week, our bootcamp community shared {n} reflections, painting a picture of dedication, growth, and resilience. Here's what we learned from our collective journey.",
        "mood-trends": "Understanding the emotional journey of learning to code is crucial for success. Our analysis of recent reflections reveals important patterns about mood and motivation during the bootcamp experience.",
        "learning-highlights": f"Every day brings new discoveries and breakthroughs. From {n} recent reflections, we've identified the most significant learning moments and insights our community has shared.",
        "challenges-overcome": "The path to becoming a developer is filled with obstacles, but our community continues to show remarkable resilience. Here are the challenges we've faced and how we've overcome them.",
        "success-stories": "Success comes in many forms during a bootcamp journey. From small victories to major breakthroughs, our community has achieved remarkable things this week.",
        "community-insights": "Our bootcamp community is a treasure trove of wisdom and experience. These insights come from the collective reflections of our dedicated learners.",
    }
    return intros.get(theme, f"Welcome to our latest bootcamp insights, based on {n} recent reflections from our community.")


def extract_anonymous_quotes(reflections: list) -> list:
    quotes = []
    for r in reflections:
        content = r.get("content") or {}
        for field, min_len in QUOTE_FIELDS:
            value = content.get(field)
            if isinstance(value, str) and len(value) > min_len:
                quotes.append(value)
    quotes = [q.strip() for q in quotes if MIN_QUOTE_LENGTH < len(q) < MAX_QUOTE_LENGTH]
    return quotes[:MAX_QUOTES]


def generate_main_content(reflections: list, insights: dict, include_quotes: bool) -> str:
    avg_mood = insights["avg_mood"]
    lines = [
        "## Mood and Motivation Trends",
        "",
        f"The average mood score this period was {avg_mood:.1f}/10, indicating a {_mood_word(avg_mood)} overall experience. "
        f"Sentiment analysis shows {'positive' if insights['avg_sentiment'] > 0 else 'negative'} tone in reflections.",
        "",
    ]
    if insights["top_keywords"]:
        lines += [
            "## Common Learning Themes",
            "",
            f"The most frequently mentioned topics include: {', '.join(insights['top_keywords'][:5])}. "
            "This reflects our community's focus on core development skills and collaborative learning.",
            "",
        ]
    lines += ["## Reflection Patterns", ""]
    total = insights["total_reflections"]
    for rtype, count in insights["type_distribution"].items():
        pct = count / total * 100 if total else 0
        lines.append(f"- {str(rtype).capitalize()} reflections: {count} ({pct:.1f}%)")
    lines.append("")
    if include_quotes:
        lines += ["## Community Voices", ""]
        for quote in extract_anonymous_quotes(reflections)[:QUOTES_PER_POST]:
            lines += [f'> "{quote}"', ">", "> — Anonymous Community Member", ""]
    return "\n".join(lines).rstrip("\n")


def generate_theme_section(theme: str, insights: dict) -> str:
    """Bulleted challenges or highlights for the themes that feature them; empty otherwise."""
    if theme not in THEME_SECTIONS:
        return ""
    heading, key = THEME_SECTIONS[theme]
    entries = [e.strip() for e in insights[key] if e.strip() and len(e.strip()) < MAX_QUOTE_LENGTH]
    if not entries:
        return ""
    return "\n".join([heading, ""] + [f"- {e}" for e in entries[:QUOTES_PER_POST]])


def generate_insights_section(insights: dict) -> str:
    avg_mood = insights["avg_mood"]
    lines = ["## Key Insights", ""]
    if avg_mood > 7:
        lines.append(f"- **Positive Momentum**: The community is maintaining high spirits with an average mood of {avg_mood:.1f}/10.")
    elif avg_mood < 4:
        lines.append(f"- **Support Needed**: Lower mood scores ({avg_mood:.1f}/10) suggest the community could benefit from additional support.")
    if insights["mood_trend"] > 0:
        lines.append("- **Upward Trend**: Mood scores are improving over time, indicating positive progress.")
    elif insights["mood_trend"] < 0:
        lines.append("- **Attention Required**: Declining mood trends suggest we should focus on support and encouragement.")
    keywords = insights["top_keywords"]
    if "javascript" in keywords or "coding" in keywords:
        lines.append("- **Technical Focus**: Strong emphasis on core programming concepts and practical application.")
    if "teamwork" in keywords or "collaboration" in keywords:
        lines.append("- **Collaborative Learning**: Community members are actively engaging in peer learning and support.")
    return "\n".join(lines)


def generate_conclusion(insights: dict) -> str:
    parts = []
    if insights["avg_mood"] > 6:
        parts.append("Our community continues to demonstrate resilience and positive engagement.")
    else:
        parts.append("While we face challenges, our community's commitment to growth remains strong.")
    parts.append(f"With {insights['total_reflections']} reflections this period, we see an active and engaged learning community.")
    if insights["mood_trend"] > 0:
        parts.append("The upward trend in mood and motivation suggests we're on the right path.")
    else:
        parts.append("Let's continue supporting each other as we navigate this learning journey together.")
    return (
        "## Looking Forward\n\n" + " ".join(parts)
        + "\n\n*This post is generated from anonymized community reflections to provide insights while protecting individual privacy.*"
    )


def generate_excerpt(content: str) -> str:
    first = content.split("\n\n")[0]
    clean = re.sub(r"[#>-]", "", first).strip()
    return clean[:EXCERPT_LENGTH] + "..." if len(clean) > EXCERPT_LENGTH else clean


def generate_tags(content: str, reflections: list) -> list:
    lower = content.lower()
    specific = [tag for needle, tag in CONTENT_TAGS if needle in lower]
    for rtype in dict.fromkeys(r.get("type") for r in reflections):
        if rtype in TYPE_TAGS:
            specific.append(TYPE_TAGS[rtype])
    specific = [t for t in dict.fromkeys(specific) if t not in FIXED_TAGS]
    return specific[:MAX_TAGS - len(FIXED_TAGS)] + list(FIXED_TAGS)


def generate_blog_post(reflections: list, theme: str, include_quotes: bool = True) -> dict:
    """Build an unsaved post dict (title/content/excerpt/quotes/tags) for a theme.

    Quotes carry no author; the post never names users.
    """
    insights = analyze_reflections(reflections)
    sections = [
        generate_introduction(theme, insights),
        generate_main_content(reflections, insights, include_quotes),
        generate_theme_section(theme, insights),
        generate_insights_section(insights),
        generate_conclusion(insights),
    ]
    content = "\n\n".join(s for s in sections if s)
    now = int(time.time() * 1000)
    post = {
        "id": None,
        "title": generate_title(theme, insights),
        "content": content,
        "excerpt": generate_excerpt(content),
        "anonymous_quotes": extract_anonymous_quotes(reflections) if include_quotes else [],
        "tags": generate_tags(content, reflections),
        "published": False,
        "created_at": now,
        "updated_at": now,
    }
    log.info("Generated %s post from %d reflections", theme, len(reflections))
    return post
