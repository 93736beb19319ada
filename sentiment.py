# Lexicon sentiment, emotion vector, keywords and insight sentences for reflections.
import re
from collections import Counter

from vaderSentiment.vaderSentiment import SentimentIntensityAnalyzer

# Word -> valence weight. Only the lexicon is used; scoring is a plain sum.
LEXICON = SentimentIntensityAnalyzer().lexicon

SCORE_SCALE = 10
MAX_KEYWORDS = 10
MIN_KEYWORD_LENGTH = 4
TOP_INSIGHT_KEYWORDS = 3

TEXT_FIELDS = (
    "daily_highlight",
    "challenges_faced",
    "learning_progress",
    "goals_tomorrow",
    "gratitude",
    "biggest_learning",
    "areas_for_improvement",
)

EMOTION_KEYWORDS = {
    "joy": ("happy", "excited", "great", "awesome", "amazing", "wonderful", "fantastic",
            "love", "enjoy", "pleased", "delighted"),
    "sadness": ("sad", "disappointed", "down", "depressed", "upset", "unhappy", "miserable",
                "gloomy", "grief"),
    "anger": ("angry", "frustrated", "annoyed", "furious", "mad", "irritated", "outraged",
              "livid", "hate"),
    "fear": ("afraid", "scared", "worried", "anxious", "nervous", "concerned", "frightened",
             "panic", "stress"),
    "surprise": ("surprised", "shocked", "amazed", "astonished", "unexpected", "sudden",
                 "wow", "incredible"),
}

STOPWORDS = frozenset([
    'this', 'that', 'with', 'have', 'will', 'from', 'they', 'know',
    'want', 'been', 'good', 'much', 'some', 'time', 'very', 'when',
    'come', 'here', 'just', 'like', 'long', 'make', 'many', 'over',
    'such', 'take', 'than', 'them', 'well', 'were', 'what', 'your',
    'about', 'after', 'again', 'before', 'being', 'below', 'between',
    'both', 'during', 'each', 'further', 'having', 'into', 'more',
    'most', 'other', 'same', 'should', 'since', 'through', 'under',
    'until', 'while', 'would', 'could', 'there', 'their', 'these',
    'those', 'which', 'where', 'only', 'also', 'still', 'then',
])

MOOD_POSITIVE = "Your mood has been consistently positive!"
MOOD_LOW = "Your mood has been lower than usual. Consider reaching out for support."
STRESS_HIGH = "Your stress levels seem high. Consider stress management techniques."
STRESS_LOW = "Great job maintaining low stress levels!"
ENERGY_HIGH = "Your energy levels are strong!"
ENERGY_LOW = "Energy levels are low. Consider rest and self-care."
OUTLOOK_POSITIVE = "Your reflections show a positive outlook."
OUTLOOK_NEGATIVE = "Your reflections suggest some challenges. Consider seeking support."


def combine_text(content: dict | None) -> str:
    """Space-join the non-empty free-text fields of a reflection's content."""
    content = content or {}
    parts = []
    for field in TEXT_FIELDS:
        value = content.get(field)
        if isinstance(value, str) and value.strip():
            parts.append(value)
    return " ".join(parts)


def _tokens(text: str) -> list:
    return re.findall(r"[\w']+", (text or "").lower())


def analyze_sentiment(text: str) -> dict:
    if not (text or "").strip():
        return {"score": 0.0, "magnitude": 0.0, "emotions": classify_emotions("")}
    raw = sum(LEXICON.get(tok, 0.0) for tok in _tokens(text))
    score = max(-1.0, min(1.0, raw / SCORE_SCALE))
    return {"score": score, "magnitude": abs(score), "emotions": classify_emotions(text)}


def classify_emotions(text: str) -> dict:
    """Relative emotion intensity: keyword hit counts scaled so the top category is 1.0.

    Matching is by substring over the lower-cased text, so "download" counts
    toward sadness via "down".
    """
    lower = (text or "").lower()
    counts = {emotion: 0 for emotion in EMOTION_KEYWORDS}
    for emotion, keywords in EMOTION_KEYWORDS.items():
        for keyword in keywords:
            counts[emotion] += lower.count(keyword)
    top = max(counts.values())
    if top == 0:
        return {emotion: 0.0 for emotion in counts}
    return {emotion: n / top for emotion, n in counts.items()}


def extract_keywords(text: str) -> list:
    if not (text or "").strip():
        return []
    cleaned = re.sub(r"[^\w\s]", "", text.lower())
    terms = [w for w in cleaned.split() if len(w) >= MIN_KEYWORD_LENGTH and w not in STOPWORDS]
    # Counter keeps first-seen order and sorted() is stable, so ties stay in text order.
    counts = Counter(terms)
    ranked = sorted(counts.items(), key=lambda x: -x[1])[:MAX_KEYWORDS]
    return [t for t, _ in ranked]


def aggregate_keywords(records: list) -> list:
    counts = Counter()
    for r in records:
        for k in (r.get("keywords") or []):
            counts[k] += 1
    return sorted(counts.items(), key=lambda x: -x[1])


def _mean(values: list) -> float | None:
    return sum(values) / len(values) if values else None


def _numbers(values) -> list:
    return [v for v in values if isinstance(v, (int, float)) and not isinstance(v, bool)]


def _keyword_insight(records: list) -> list:
    top = [k for k, _ in aggregate_keywords(records)[:TOP_INSIGHT_KEYWORDS]]
    return [f"You frequently mention: {', '.join(top)}"] if top else []


def generate_insights(reflections: list) -> list:
    insights = []
    if not reflections:
        return insights
    contents = [r.get("content") or {} for r in reflections]

    avg_mood = _mean(_numbers(c.get("overall_mood") for c in contents))
    if avg_mood is not None:
        if avg_mood >= 7:
            insights.append(MOOD_POSITIVE)
        elif avg_mood <= 4:
            insights.append(MOOD_LOW)

    avg_stress = _mean(_numbers(c.get("stress_level") for c in contents))
    if avg_stress is not None:
        if avg_stress >= 7:
            insights.append(STRESS_HIGH)
        elif avg_stress <= 3:
            insights.append(STRESS_LOW)

    insights.extend(_keyword_insight(reflections))
    return insights


def generate_analytics_insights(analytics: list) -> list:
    """Insight sentences from daily rollups rather than raw reflections."""
    insights = []
    if not analytics:
        return insights

    avg_mood = _mean(_numbers(a.get("mood_average") for a in analytics))
    avg_stress = _mean(_numbers(a.get("stress_average") for a in analytics))
    avg_energy = _mean(_numbers(a.get("energy_average") for a in analytics))
    avg_sentiment = _mean(_numbers(a.get("sentiment_score") for a in analytics))

    if avg_mood is not None:
        if avg_mood >= 7:
            insights.append(MOOD_POSITIVE)
        elif avg_mood <= 4:
            insights.append(MOOD_LOW)
    if avg_stress is not None:
        if avg_stress >= 7:
            insights.append(STRESS_HIGH)
        elif avg_stress <= 3:
            insights.append(STRESS_LOW)
    if avg_energy is not None:
        if avg_energy >= 7:
            insights.append(ENERGY_HIGH)
        elif avg_energy <= 4:
            insights.append(ENERGY_LOW)
    if avg_sentiment is not None:
        if avg_sentiment > 0.3:
            insights.append(OUTLOOK_POSITIVE)
        elif avg_sentiment < -0.3:
            insights.append(OUTLOOK_NEGATIVE)

    insights.extend(_keyword_insight(analytics))
    return insights
