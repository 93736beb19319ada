"""
Pytest fixtures for Bootcamp Reflections tests.
"""
import sys
from datetime import datetime
from pathlib import Path

import pytest

# Modules live at the repository root; make them importable from tests/.
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def ms(*args) -> int:
    """Epoch milliseconds for a local datetime."""
    return int(datetime(*args).timestamp() * 1000)


@pytest.fixture
def temp_db(tmp_path, monkeypatch):
    """Fresh SQLite database per test."""
    import db

    monkeypatch.setattr(db, "DB_PATH", tmp_path / "reflections-test.db")
    db.init_db()
    return db


@pytest.fixture
def fast_hashing(monkeypatch):
    """Cheap PBKDF2 so account tests stay quick."""
    import crypto

    monkeypatch.setattr(crypto, "PBKDF2_ITERATIONS", 1_000)


@pytest.fixture
def user(temp_db):
    return temp_db.create_user("student@example.com", "Sam", "user", "hash", "salt")


def make_content(**overrides) -> dict:
    content = {
        "phase": "week-1-8",
        "overall_mood": 5,
        "energy_level": 5,
        "stress_level": 5,
        "motivation": 5,
        "daily_highlight": "",
        "challenges_faced": "",
        "learning_progress": "",
        "goals_tomorrow": "",
        "gratitude": "",
    }
    content.update(overrides)
    return content
