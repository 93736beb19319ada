"""
Tests for the SQLite store and the daily analytics rollup.
"""
from datetime import date

import pytest

from conftest import make_content, ms


class TestDayHelpers:

    def test_day_str_uses_local_calendar_day(self, temp_db):
        assert temp_db.day_str(ms(2024, 5, 1, 0, 0)) == "2024-05-01"
        assert temp_db.day_str(ms(2024, 5, 1, 23, 59)) == "2024-05-01"

    def test_day_bounds_cover_the_whole_day(self, temp_db):
        start, end = temp_db.day_bounds("2024-05-01")
        assert start == ms(2024, 5, 1)
        assert end == ms(2024, 5, 2) - 1
        assert temp_db.day_str(start) == temp_db.day_str(end) == "2024-05-01"


class TestCreateReflection:

    def test_stores_analysis_and_title(self, temp_db, user):
        content = make_content(overall_mood=8, daily_highlight="Pair programming on the weather project was wonderful",
                               learning_progress="Learned async javascript promises")
        saved = temp_db.create_reflection(user["id"], "daily", content, created_at=ms(2024, 5, 1, 10))

        stored = temp_db.get_reflection(saved["id"])
        assert stored["title"] == "Daily Reflection - 05/01/2024"
        assert stored["mood_score"] == 8
        assert stored["sentiment_score"] > 0
        assert "javascript" in stored["keywords"]
        assert stored["content"]["daily_highlight"] == content["daily_highlight"]
        assert "emotions" not in stored

    @pytest.mark.parametrize("rtype,content,expected", [
        ("weekly", {}, "Weekly Reflection - 05/01/2024"),
        ("mood", {}, "Mood Check-in - 05/01/2024"),
        ("project", {"project_name": "Weather App"}, "Project Reflection: Weather App"),
        ("project", {}, "Project Reflection: Unnamed Project"),
    ])
    def test_titles(self, temp_db, rtype, content, expected):
        assert temp_db.build_title(rtype, content, ms(2024, 5, 1, 10)) == expected

    def test_unknown_type(self, temp_db, user):
        with pytest.raises(ValueError):
            temp_db.create_reflection(user["id"], "monthly", make_content())

    def test_empty_text_is_neutral(self, temp_db, user):
        saved = temp_db.create_reflection(user["id"], "mood", make_content(), created_at=ms(2024, 5, 1, 10))
        assert saved["sentiment_score"] == 0
        assert saved["keywords"] == []


class TestDailyAnalytics:

    def test_one_row_per_user_per_day(self, temp_db, user):
        temp_db.create_reflection(user["id"], "daily", make_content(overall_mood=6, stress_level=4, energy_level=5,
                                                                     daily_highlight="debugging python"),
                                  created_at=ms(2024, 5, 1, 9))
        temp_db.create_reflection(user["id"], "mood", make_content(overall_mood=8, stress_level=2, energy_level=7,
                                                                    daily_highlight="python python tests"),
                                  created_at=ms(2024, 5, 1, 21))
        temp_db.create_reflection(user["id"], "mood", make_content(overall_mood=3), created_at=ms(2024, 5, 2, 9))

        rows = temp_db.get_user_analytics(user["id"])
        assert [r["date"] for r in rows] == ["2024-05-02", "2024-05-01"]
        day = rows[1]
        assert day["reflection_count"] == 2
        assert day["mood_average"] == 7
        assert day["stress_average"] == 3
        assert day["energy_average"] == 6
        assert day["keywords"][0] == "python"

    def test_delete_recomputes_and_removes_empty_day(self, temp_db, user):
        first = temp_db.create_reflection(user["id"], "mood", make_content(overall_mood=4), created_at=ms(2024, 5, 1, 9))
        second = temp_db.create_reflection(user["id"], "mood", make_content(overall_mood=8), created_at=ms(2024, 5, 1, 10))

        temp_db.delete_reflection(user["id"], first["id"])
        assert temp_db.get_user_analytics(user["id"])[0]["mood_average"] == 8

        temp_db.delete_reflection(user["id"], second["id"])
        assert temp_db.get_user_analytics(user["id"]) == []

    def test_cannot_delete_someone_elses_reflection(self, temp_db, user):
        other = temp_db.create_user("other@example.com", None, "user", "hash", "salt")
        saved = temp_db.create_reflection(other["id"], "mood", make_content(), created_at=ms(2024, 5, 1, 9))
        with pytest.raises(ValueError):
            temp_db.delete_reflection(user["id"], saved["id"])

    def test_since_date_filter_and_prune(self, temp_db, user):
        temp_db.create_reflection(user["id"], "mood", make_content(), created_at=ms(2023, 1, 1, 9))
        temp_db.create_reflection(user["id"], "mood", make_content(), created_at=ms(2024, 5, 1, 9))
        assert len(temp_db.get_user_analytics(user["id"], since_date="2024-01-01")) == 1

        removed = temp_db.prune_analytics(365, today=date(2024, 6, 1))
        assert removed == 1
        assert [r["date"] for r in temp_db.get_user_analytics(user["id"])] == ["2024-05-01"]


class TestReads:

    def test_reflections_joined_with_user(self, temp_db, user):
        temp_db.create_reflection(user["id"], "mood", make_content(), created_at=ms(2024, 5, 1, 9))
        rows = temp_db.get_reflections(start_ms=ms(2024, 4, 30), end_ms=ms(2024, 5, 2))
        assert rows[0]["user_name"] == "Sam"
        assert rows[0]["user_email"] == "student@example.com"
        assert temp_db.get_reflections(start_ms=ms(2024, 5, 2)) == []

    def test_platform_counts(self, temp_db, user):
        other = temp_db.create_user("other@example.com", None, "user", "hash", "salt")
        now = ms(2024, 5, 10, 12)
        temp_db.create_reflection(user["id"], "mood", make_content(overall_mood=6), created_at=ms(2024, 5, 9, 9))
        temp_db.create_reflection(user["id"], "mood", make_content(overall_mood=8), created_at=ms(2024, 5, 9, 10))
        temp_db.create_reflection(other["id"], "mood", make_content(overall_mood=4), created_at=ms(2024, 4, 1, 9))

        counts = temp_db.platform_counts(now)
        assert counts["total_users"] == 2
        assert counts["total_reflections"] == 3
        assert sorted(counts["mood_scores"]) == [4, 6, 8]
        assert counts["active_users"] == 1

    def test_duplicate_email(self, temp_db, user):
        with pytest.raises(ValueError):
            temp_db.create_user("student@example.com", None, "user", "hash", "salt")

    def test_delete_user_data(self, temp_db, user):
        temp_db.create_reflection(user["id"], "mood", make_content(), created_at=ms(2024, 5, 1, 9))
        temp_db.delete_user_data(user["id"])
        assert temp_db.get_user_reflections(user["id"]) == []
        assert temp_db.get_user_analytics(user["id"]) == []


class TestBlogPosts:

    def test_save_publish_list(self, temp_db):
        saved = temp_db.save_blog_post({
            "title": "Weekly Bootcamp Insights: Steady Progress",
            "content": "body",
            "excerpt": "body",
            "anonymous_quotes": ["quote"],
            "tags": ["bootcamp"],
            "published": False,
        })
        assert saved["published"] is False
        assert temp_db.list_blog_posts(published_only=True) == []

        temp_db.publish_blog_post(saved["id"])
        published = temp_db.list_blog_posts(published_only=True)
        assert [p["id"] for p in published] == [saved["id"]]
        assert published[0]["tags"] == ["bootcamp"]

    def test_publish_missing(self, temp_db):
        with pytest.raises(ValueError):
            temp_db.publish_blog_post("post_missing")


class TestAdminSettings:

    def test_defaults_then_update(self, temp_db):
        assert temp_db.get_admin_settings() == temp_db.DEFAULT_SETTINGS
        updated = temp_db.update_admin_settings({"export_format": "pdf", "analytics_retention_days": 90})
        assert updated["export_format"] == "pdf"
        assert updated["analytics_retention_days"] == 90
        assert updated["reminder_time"] == "20:00"

    def test_invalid_format(self, temp_db):
        with pytest.raises(ValueError):
            temp_db.update_admin_settings({"export_format": "xml"})
