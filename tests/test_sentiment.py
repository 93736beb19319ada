"""
Unit tests for the reflection text analytics in sentiment.py.
"""
import pytest

import sentiment


class TestAnalyzeSentiment:
    """Lexicon sum, fixed /10 scaling and clamping."""

    def test_empty_text_is_neutral(self):
        result = sentiment.analyze_sentiment("")
        assert result["score"] == 0
        assert result["magnitude"] == 0
        assert set(result["emotions"]) == {"joy", "sadness", "anger", "fear", "surprise"}
        assert all(v == 0 for v in result["emotions"].values())

    def test_whitespace_only_is_neutral(self):
        assert sentiment.analyze_sentiment("   \n\t ")["score"] == 0

    def test_score_is_sum_of_weights_over_ten(self, monkeypatch):
        monkeypatch.setattr(sentiment, "LEXICON", {"great": 3.0, "bad": -2.0})
        result = sentiment.analyze_sentiment("Great day, great team, bad coffee")
        assert result["score"] == pytest.approx(0.4)
        assert result["magnitude"] == pytest.approx(0.4)

    def test_unmatched_tokens_contribute_nothing(self, monkeypatch):
        monkeypatch.setattr(sentiment, "LEXICON", {"great": 3.0})
        assert sentiment.analyze_sentiment("refactoring the parser")["score"] == 0

    def test_score_clamped_to_unit_range(self, monkeypatch):
        monkeypatch.setattr(sentiment, "LEXICON", {"love": 3.0, "hate": -3.0})
        assert sentiment.analyze_sentiment("love " * 20)["score"] == 1.0
        assert sentiment.analyze_sentiment("hate " * 20)["score"] == -1.0

    def test_positive_and_negative_text(self):
        assert sentiment.analyze_sentiment("I am happy and excited, this was a wonderful day")["score"] > 0
        assert sentiment.analyze_sentiment("terrible awful day, I feel sad and hurt")["score"] < 0

    @pytest.mark.parametrize("text", [
        "Ça va très bien 😀 — naïve café",
        "日本語のテキスト",
        "word " * 20000,
        "!!!???...",
    ])
    def test_total_over_unusual_input(self, text):
        result = sentiment.analyze_sentiment(text)
        assert -1 <= result["score"] <= 1
        assert result["magnitude"] == abs(result["score"])

    def test_repeated_calls_are_identical(self):
        text = "Struggled with recursion but the mentor session was amazing"
        assert sentiment.analyze_sentiment(text) == sentiment.analyze_sentiment(text)


class TestClassifyEmotions:
    """Keyword substring counts scaled so the strongest category is 1.0."""

    def test_no_matches_all_zero(self):
        assert sentiment.classify_emotions("nothing here") == {
            "joy": 0.0, "sadness": 0.0, "anger": 0.0, "fear": 0.0, "surprise": 0.0,
        }

    def test_normalized_to_max(self):
        result = sentiment.classify_emotions("Happy, HAPPY, but a bit sad")
        assert result["joy"] == 1.0
        assert result["sadness"] == 0.5
        assert result["anger"] == 0.0

    def test_substring_counts_toward_both_categories(self):
        result = sentiment.classify_emotions("unhappy")
        assert result["joy"] == 1.0
        assert result["sadness"] == 1.0

    def test_values_in_unit_range_with_a_maximum(self):
        result = sentiment.classify_emotions("worried and anxious, then surprised, then happy")
        assert all(0 <= v <= 1 for v in result.values())
        assert max(result.values()) == 1.0


class TestExtractKeywords:
    """Tokenize, filter stop-words and short tokens, rank by frequency."""

    def test_frequency_descending(self):
        assert sentiment.extract_keywords("the bird bird bird frog frog swan") == ["bird", "frog", "swan"]

    def test_three_letter_tokens_are_dropped(self):
        assert sentiment.extract_keywords("the cat cat cat dog dog bird") == ["bird"]

    def test_ties_keep_first_seen_order(self):
        assert sentiment.extract_keywords("zebra apple zebra apple mango") == ["zebra", "apple", "mango"]

    def test_punctuation_and_case(self):
        assert sentiment.extract_keywords("Python! python, PYTHON.") == ["python"]

    def test_stop_words_removed(self):
        assert sentiment.extract_keywords("this that with about would python") == ["python"]

    def test_at_most_ten(self):
        words = " ".join(f"word{chr(97 + i)}" for i in range(15))
        assert len(sentiment.extract_keywords(words)) == 10

    def test_empty(self):
        assert sentiment.extract_keywords("") == []
        assert sentiment.extract_keywords("a an it is") == []

    def test_repeated_calls_are_identical(self):
        text = "Über café café naïve naïve naïve ümlaut mango mango"
        first = sentiment.extract_keywords(text)
        assert first == sentiment.extract_keywords(text)
        assert first == ["naïve", "café", "mango", "über", "ümlaut"]

    def test_never_returns_stop_words_or_short_tokens(self):
        text = "When their team would debug, there were bugs and more bugs in the code base"
        for keyword in sentiment.extract_keywords(text):
            assert keyword not in sentiment.STOPWORDS
            assert len(keyword) > 3


class TestCombineText:

    def test_joins_non_empty_fields_in_order(self):
        content = {"gratitude": "my cohort", "daily_highlight": "shipped it", "challenges_faced": "  "}
        assert sentiment.combine_text(content) == "shipped it my cohort"

    def test_missing_content(self):
        assert sentiment.combine_text(None) == ""


def _reflection(mood=5, stress=5, keywords=None):
    return {"content": {"overall_mood": mood, "stress_level": stress}, "keywords": keywords or []}


class TestGenerateInsights:
    """Threshold rules over raw reflections."""

    def test_empty(self):
        assert sentiment.generate_insights([]) == []

    def test_positive_mood(self):
        insights = sentiment.generate_insights([_reflection(mood=8), _reflection(mood=8)])
        assert any("consistently positive" in i for i in insights)

    def test_low_mood(self):
        assert sentiment.generate_insights([_reflection(mood=3)]) == [sentiment.MOOD_LOW]

    def test_high_stress(self):
        insights = sentiment.generate_insights([_reflection(stress=8)])
        assert any("stress management techniques" in i for i in insights)

    def test_low_stress(self):
        assert sentiment.generate_insights([_reflection(stress=2)]) == [sentiment.STRESS_LOW]

    def test_middle_values_produce_nothing(self):
        assert sentiment.generate_insights([_reflection(mood=5, stress=5)]) == []

    def test_rule_order_and_top_three_keywords(self):
        reflections = [
            _reflection(mood=9, stress=8, keywords=["react", "python"]),
            _reflection(mood=7, stress=7, keywords=["python", "sql"]),
            _reflection(mood=8, stress=9, keywords=["css"]),
        ]
        assert sentiment.generate_insights(reflections) == [
            sentiment.MOOD_POSITIVE,
            sentiment.STRESS_HIGH,
            "You frequently mention: python, react, sql",
        ]

    def test_missing_sliders_are_ignored(self):
        assert sentiment.generate_insights([{"content": None, "keywords": None}]) == []


class TestGenerateAnalyticsInsights:
    """Same rule shape over daily rollups, plus energy and sentiment rules."""

    def test_empty(self):
        assert sentiment.generate_analytics_insights([]) == []

    def test_all_rules(self):
        rollups = [{
            "mood_average": 8.0,
            "stress_average": 2.0,
            "energy_average": 8.0,
            "sentiment_score": 0.5,
            "keywords": ["javascript"],
        }]
        assert sentiment.generate_analytics_insights(rollups) == [
            sentiment.MOOD_POSITIVE,
            sentiment.STRESS_LOW,
            sentiment.ENERGY_HIGH,
            sentiment.OUTLOOK_POSITIVE,
            "You frequently mention: javascript",
        ]

    def test_struggling_rollups(self):
        rollups = [{"mood_average": 3.0, "stress_average": 8.0, "energy_average": 3.0, "sentiment_score": -0.5, "keywords": []}]
        assert sentiment.generate_analytics_insights(rollups) == [
            sentiment.MOOD_LOW,
            sentiment.STRESS_HIGH,
            sentiment.ENERGY_LOW,
            sentiment.OUTLOOK_NEGATIVE,
        ]
