# SQLite: schema, users, reflections, daily analytics rollup, blog posts, admin settings.
import json
import logging
import os
import sqlite3
import time
from datetime import date, datetime, timedelta

import config
import sentiment

log = logging.getLogger(__name__)

DB_PATH = config.DB_PATH
MS_DAY_MS = 24 * 60 * 60 * 1000
REFLECTION_TYPES = ("daily", "weekly", "project", "mood")
EXPORT_FORMATS = ("csv", "json", "pdf")
MAX_DAY_KEYWORDS = 10
DEFAULT_SETTINGS = {
    "notification_enabled": True,
    "reminder_time": "20:00",
    "export_format": "csv",
    "analytics_retention_days": 365,
}
REFLECTION_COLS = "r.id, r.user_id, r.type, r.title, r.content, r.mood_score, r.sentiment_score, r.keywords, r.created_at, r.updated_at"
ANALYTICS_COLS = "a.id, a.user_id, a.date, a.mood_average, a.stress_average, a.energy_average, a.reflection_count, a.sentiment_score, a.keywords, a.created_at"


def get_conn():
    conn = sqlite3.connect(DB_PATH)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def _with_conn(f):
    conn = get_conn()
    try:
        return f(conn)
    finally:
        conn.close()


def init_db():
    def run(c):
        c.executescript("""
            CREATE TABLE IF NOT EXISTS users (
                id TEXT PRIMARY KEY,
                email TEXT NOT NULL UNIQUE,
                name TEXT,
                role TEXT NOT NULL DEFAULT 'user' CHECK (role IN ('user', 'admin')),
                password_hash TEXT NOT NULL,
                salt TEXT NOT NULL,
                created_at INTEGER NOT NULL,
                updated_at INTEGER NOT NULL
            );
            CREATE TABLE IF NOT EXISTS reflections (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
                type TEXT NOT NULL CHECK (type IN ('daily', 'weekly', 'project', 'mood')),
                title TEXT NOT NULL,
                content TEXT NOT NULL,
                mood_score INTEGER,
                sentiment_score REAL,
                keywords TEXT,
                created_at INTEGER NOT NULL,
                updated_at INTEGER NOT NULL
            );
            CREATE INDEX IF NOT EXISTS idx_reflections_user ON reflections(user_id, created_at);
            CREATE INDEX IF NOT EXISTS idx_reflections_created_at ON reflections(created_at);
            CREATE TABLE IF NOT EXISTS analytics (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
                date TEXT NOT NULL,
                mood_average REAL NOT NULL,
                stress_average REAL NOT NULL,
                energy_average REAL NOT NULL,
                reflection_count INTEGER NOT NULL,
                sentiment_score REAL NOT NULL,
                keywords TEXT NOT NULL,
                created_at INTEGER NOT NULL,
                UNIQUE (user_id, date)
            );
            CREATE TABLE IF NOT EXISTS blog_posts (
                id TEXT PRIMARY KEY,
                title TEXT NOT NULL,
                content TEXT NOT NULL,
                excerpt TEXT NOT NULL,
                anonymous_quotes TEXT NOT NULL,
                tags TEXT NOT NULL,
                published INTEGER NOT NULL DEFAULT 0,
                created_at INTEGER NOT NULL,
                updated_at INTEGER NOT NULL
            );
            CREATE TABLE IF NOT EXISTS admin_settings (
                id TEXT PRIMARY KEY,
                notification_enabled INTEGER NOT NULL,
                reminder_time TEXT NOT NULL,
                export_format TEXT NOT NULL,
                analytics_retention_days INTEGER NOT NULL,
                updated_at INTEGER NOT NULL
            );
        """)
        c.commit()
    _with_conn(run)
    log.info("Database ready at %s", DB_PATH)


def _now_ms() -> int:
    return int(time.time() * 1000)


# Unique id; random suffix avoids collisions within the same millisecond.
def _new_id(prefix: str) -> str:
    return f"{prefix}_{_now_ms()}_{os.urandom(4).hex()}"


def day_str(ts_ms: int) -> str:
    return datetime.fromtimestamp(ts_ms / 1000.0).strftime("%Y-%m-%d")


def day_bounds(day: str) -> tuple[int, int]:
    start = datetime.strptime(day, "%Y-%m-%d")
    start_ms = int(start.timestamp() * 1000)
    end_ms = int((start + timedelta(days=1)).timestamp() * 1000) - 1
    return start_ms, end_ms


def _row_dict(row):
    return {k: row[k] for k in row.keys()} if hasattr(row, "keys") else dict(row)


# --- Users ---

def _row_to_user(row) -> dict:
    r = _row_dict(row)
    return {
        "id": r["id"],
        "email": r["email"],
        "name": r.get("name"),
        "role": r["role"],
        "password_hash": r["password_hash"],
        "salt": r["salt"],
        "created_at": r["created_at"],
        "updated_at": r["updated_at"],
    }


def create_user(email: str, name: str | None, role: str, password_hash: str, salt: str) -> dict:
    uid, now = _new_id("user"), _now_ms()

    def run(c):
        try:
            c.execute(
                "INSERT INTO users (id, email, name, role, password_hash, salt, created_at, updated_at) VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                (uid, email, name, role, password_hash, salt, now, now),
            )
        except sqlite3.IntegrityError:
            raise ValueError("An account with this email already exists.")
        c.commit()
    _with_conn(run)
    return get_user(uid)


def get_user(uid: str) -> dict | None:
    def run(c):
        row = c.execute("SELECT * FROM users WHERE id = ?", (uid,)).fetchone()
        return None if row is None else _row_to_user(row)
    return _with_conn(run)


def get_user_by_email(email: str) -> dict | None:
    def run(c):
        row = c.execute("SELECT * FROM users WHERE email = ?", (email,)).fetchone()
        return None if row is None else _row_to_user(row)
    return _with_conn(run)


def list_users(limit: int = 50) -> list:
    def run(c):
        rows = c.execute(
            "SELECT id, email, name, role, created_at FROM users ORDER BY created_at DESC LIMIT ?", (limit,)
        ).fetchall()
        return [_row_dict(r) for r in rows]
    return _with_conn(run)


# --- Reflections ---

def build_title(rtype: str, content: dict, ts_ms: int) -> str:
    today = datetime.fromtimestamp(ts_ms / 1000.0).strftime("%m/%d/%Y")
    if rtype == "daily":
        return f"Daily Reflection - {today}"
    if rtype == "weekly":
        return f"Weekly Reflection - {today}"
    if rtype == "project":
        return f"Project Reflection: {content.get('project_name') or 'Unnamed Project'}"
    if rtype == "mood":
        return f"Mood Check-in - {today}"
    return f"Reflection - {today}"


def _row_to_reflection(row) -> dict:
    r = _row_dict(row)
    out = {
        "id": r["id"],
        "user_id": r["user_id"],
        "type": r["type"],
        "title": r["title"],
        "content": json.loads(r["content"]) if r.get("content") else {},
        "mood_score": r.get("mood_score"),
        "sentiment_score": r.get("sentiment_score"),
        "keywords": json.loads(r["keywords"]) if r.get("keywords") else [],
        "created_at": r["created_at"],
        "updated_at": r["updated_at"],
    }
    if "user_email" in r:
        out["user_name"] = r.get("user_name")
        out["user_email"] = r.get("user_email")
    return out


def create_reflection(user_id: str, rtype: str, content: dict, created_at: int | None = None) -> dict:
    """Analyze and store a reflection, then refresh that day's rollup.

    Sentiment and keywords are computed once here; reflections have no
    edit path, so the stored analysis always matches the submitted text.
    """
    if rtype not in REFLECTION_TYPES:
        raise ValueError(f"Unknown reflection type: {rtype}")
    created = created_at if created_at is not None else _now_ms()
    text = sentiment.combine_text(content)
    analysis = sentiment.analyze_sentiment(text)
    keywords = sentiment.extract_keywords(text)
    reflection = {
        "id": _new_id("refl"),
        "user_id": user_id,
        "type": rtype,
        "title": build_title(rtype, content, created),
        "content": content,
        "mood_score": content.get("overall_mood"),
        "sentiment_score": analysis["score"],
        "keywords": keywords,
        "created_at": created,
        "updated_at": created,
    }

    def run(c):
        c.execute(
            "INSERT INTO reflections (id, user_id, type, title, content, mood_score, sentiment_score, keywords, created_at, updated_at) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (reflection["id"], user_id, rtype, reflection["title"], json.dumps(content), reflection["mood_score"],
             reflection["sentiment_score"], json.dumps(keywords), created, created),
        )
        c.commit()
    _with_conn(run)
    log.info("Stored %s reflection %s for %s", rtype, reflection["id"], user_id)
    calculate_daily_analytics(user_id, day_str(created))
    return reflection


def get_reflection(rid: str) -> dict | None:
    def run(c):
        row = c.execute(f"SELECT {REFLECTION_COLS} FROM reflections r WHERE r.id = ?", (rid,)).fetchone()
        return None if row is None else _row_to_reflection(row)
    return _with_conn(run)


def get_user_reflections(user_id: str, limit: int | None = None, since_ms: int | None = None) -> list:
    sql = f"SELECT {REFLECTION_COLS} FROM reflections r WHERE r.user_id = ?"
    params = [user_id]
    if since_ms is not None:
        sql += " AND r.created_at >= ?"
        params.append(since_ms)
    sql += " ORDER BY r.created_at DESC"
    if limit is not None:
        sql += " LIMIT ?"
        params.append(limit)

    def run(c):
        return [_row_to_reflection(r) for r in c.execute(sql, params).fetchall()]
    return _with_conn(run)


def get_reflections(start_ms: int | None = None, end_ms: int | None = None, limit: int | None = None) -> list:
    sql = (f"SELECT {REFLECTION_COLS}, u.name AS user_name, u.email AS user_email "
           "FROM reflections r LEFT JOIN users u ON u.id = r.user_id WHERE 1 = 1")
    params = []
    if start_ms is not None:
        sql += " AND r.created_at >= ?"
        params.append(start_ms)
    if end_ms is not None:
        sql += " AND r.created_at <= ?"
        params.append(end_ms)
    sql += " ORDER BY r.created_at DESC"
    if limit is not None:
        sql += " LIMIT ?"
        params.append(limit)

    def run(c):
        return [_row_to_reflection(r) for r in c.execute(sql, params).fetchall()]
    return _with_conn(run)


def delete_reflection(user_id: str, rid: str) -> None:
    existing = get_reflection(rid)
    if existing is None or existing["user_id"] != user_id:
        raise ValueError("Reflection not found.")

    def run(c):
        c.execute("DELETE FROM reflections WHERE id = ? AND user_id = ?", (rid, user_id))
        c.commit()
    _with_conn(run)
    log.info("Deleted reflection %s for %s", rid, user_id)
    calculate_daily_analytics(user_id, day_str(existing["created_at"]))


# --- Daily analytics rollup ---

def _avg(values: list) -> float:
    nums = [v for v in values if isinstance(v, (int, float))]
    return sum(nums) / len(nums) if nums else 0.0


def calculate_daily_analytics(user_id: str, day: str) -> dict | None:
    """Recompute the (user, day) rollup; the row is removed when the day is empty."""
    start_ms, end_ms = day_bounds(day)

    def load(c):
        rows = c.execute(
            f"SELECT {REFLECTION_COLS} FROM reflections r WHERE r.user_id = ? AND r.created_at >= ? AND r.created_at <= ? ORDER BY r.created_at",
            (user_id, start_ms, end_ms),
        ).fetchall()
        return [_row_to_reflection(r) for r in rows]
    reflections = _with_conn(load)

    if not reflections:
        def drop(c):
            c.execute("DELETE FROM analytics WHERE user_id = ? AND date = ?", (user_id, day))
            c.commit()
        _with_conn(drop)
        log.info("Removed empty rollup for %s on %s", user_id, day)
        return None

    contents = [r["content"] for r in reflections]
    row = {
        "id": _new_id("anl"),
        "user_id": user_id,
        "date": day,
        "mood_average": _avg([c.get("overall_mood") for c in contents]),
        "stress_average": _avg([c.get("stress_level") for c in contents]),
        "energy_average": _avg([c.get("energy_level") for c in contents]),
        "reflection_count": len(reflections),
        "sentiment_score": _avg([r["sentiment_score"] for r in reflections if r["sentiment_score"] is not None]),
        "keywords": [k for k, _ in sentiment.aggregate_keywords(reflections)[:MAX_DAY_KEYWORDS]],
        "created_at": _now_ms(),
    }

    def upsert(c):
        c.execute(
            "INSERT INTO analytics (id, user_id, date, mood_average, stress_average, energy_average, reflection_count, sentiment_score, keywords, created_at) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?) "
            "ON CONFLICT(user_id, date) DO UPDATE SET mood_average = excluded.mood_average, "
            "stress_average = excluded.stress_average, energy_average = excluded.energy_average, "
            "reflection_count = excluded.reflection_count, sentiment_score = excluded.sentiment_score, "
            "keywords = excluded.keywords",
            (row["id"], user_id, day, row["mood_average"], row["stress_average"], row["energy_average"],
             row["reflection_count"], row["sentiment_score"], json.dumps(row["keywords"]), row["created_at"]),
        )
        c.commit()
    _with_conn(upsert)
    log.info("Rollup for %s on %s: %d reflections", user_id, day, row["reflection_count"])
    return row


def _row_to_analytics(row) -> dict:
    r = _row_dict(row)
    r["keywords"] = json.loads(r["keywords"]) if r.get("keywords") else []
    return r


def get_user_analytics(user_id: str, limit: int | None = None, since_date: str | None = None) -> list:
    sql = f"SELECT {ANALYTICS_COLS} FROM analytics a WHERE a.user_id = ?"
    params = [user_id]
    if since_date is not None:
        sql += " AND a.date >= ?"
        params.append(since_date)
    sql += " ORDER BY a.date DESC"
    if limit is not None:
        sql += " LIMIT ?"
        params.append(limit)

    def run(c):
        return [_row_to_analytics(r) for r in c.execute(sql, params).fetchall()]
    return _with_conn(run)


def get_all_analytics(limit: int = 100) -> list:
    sql = (f"SELECT {ANALYTICS_COLS}, u.name AS user_name, u.email AS user_email "
           "FROM analytics a LEFT JOIN users u ON u.id = a.user_id ORDER BY a.date DESC LIMIT ?")

    def run(c):
        return [_row_to_analytics(r) for r in c.execute(sql, (limit,)).fetchall()]
    return _with_conn(run)


def prune_analytics(retention_days: int, today: date | None = None) -> int:
    cutoff = ((today or date.today()) - timedelta(days=retention_days)).isoformat()

    def run(c):
        cur = c.execute("DELETE FROM analytics WHERE date < ?", (cutoff,))
        c.commit()
        return cur.rowcount
    removed = _with_conn(run)
    log.info("Pruned %d rollups older than %s", removed, cutoff)
    return removed


def platform_counts(now_ms: int | None = None) -> dict:
    since = (now_ms if now_ms is not None else _now_ms()) - 7 * MS_DAY_MS

    def run(c):
        return {
            "total_users": c.execute("SELECT COUNT(*) FROM users").fetchone()[0],
            "total_reflections": c.execute("SELECT COUNT(*) FROM reflections").fetchone()[0],
            "mood_scores": [r[0] for r in c.execute("SELECT mood_score FROM reflections WHERE mood_score IS NOT NULL")],
            "sentiment_scores": [r[0] for r in c.execute("SELECT sentiment_score FROM reflections WHERE sentiment_score IS NOT NULL")],
            "active_users": c.execute(
                "SELECT COUNT(DISTINCT user_id) FROM reflections WHERE created_at >= ?", (since,)
            ).fetchone()[0],
        }
    return _with_conn(run)


def delete_user_data(user_id: str) -> None:
    def run(c):
        c.execute("DELETE FROM reflections WHERE user_id = ?", (user_id,))
        c.execute("DELETE FROM analytics WHERE user_id = ?", (user_id,))
        c.commit()
    _with_conn(run)
    log.info("Deleted all reflections and rollups for %s", user_id)


# --- Blog posts ---

def _row_to_post(row) -> dict:
    r = _row_dict(row)
    r["anonymous_quotes"] = json.loads(r["anonymous_quotes"])
    r["tags"] = json.loads(r["tags"])
    r["published"] = bool(r["published"])
    return r


def save_blog_post(post: dict) -> dict:
    pid, now = _new_id("post"), _now_ms()

    def run(c):
        c.execute(
            "INSERT INTO blog_posts (id, title, content, excerpt, anonymous_quotes, tags, published, created_at, updated_at) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (pid, post["title"], post["content"], post["excerpt"], json.dumps(post.get("anonymous_quotes") or []),
             json.dumps(post.get("tags") or []), int(bool(post.get("published"))), now, now),
        )
        c.commit()
        return _row_to_post(c.execute("SELECT * FROM blog_posts WHERE id = ?", (pid,)).fetchone())
    saved = _with_conn(run)
    log.info("Saved blog post %s", pid)
    return saved


def publish_blog_post(pid: str) -> None:
    def run(c):
        cur = c.execute("UPDATE blog_posts SET published = 1, updated_at = ? WHERE id = ?", (_now_ms(), pid))
        c.commit()
        return cur.rowcount
    if not _with_conn(run):
        raise ValueError("Blog post not found.")
    log.info("Published blog post %s", pid)


def list_blog_posts(published_only: bool = False) -> list:
    sql = "SELECT * FROM blog_posts"
    if published_only:
        sql += " WHERE published = 1"
    sql += " ORDER BY created_at DESC"

    def run(c):
        return [_row_to_post(r) for r in c.execute(sql).fetchall()]
    return _with_conn(run)


# --- Admin settings ---

def get_admin_settings() -> dict:
    def run(c):
        row = c.execute("SELECT * FROM admin_settings WHERE id = 'settings'").fetchone()
        if row is None:
            return dict(DEFAULT_SETTINGS)
        r = _row_dict(row)
        return {
            "notification_enabled": bool(r["notification_enabled"]),
            "reminder_time": r["reminder_time"],
            "export_format": r["export_format"],
            "analytics_retention_days": r["analytics_retention_days"],
            "updated_at": r["updated_at"],
        }
    return _with_conn(run)


def update_admin_settings(updates: dict) -> dict:
    merged = {**get_admin_settings(), **{k: v for k, v in updates.items() if k in DEFAULT_SETTINGS}}
    if merged["export_format"] not in EXPORT_FORMATS:
        raise ValueError("Invalid format")
    if int(merged["analytics_retention_days"]) < 1:
        raise ValueError("Retention must be at least one day.")

    def run(c):
        c.execute(
            "INSERT OR REPLACE INTO admin_settings (id, notification_enabled, reminder_time, export_format, analytics_retention_days, updated_at) "
            "VALUES ('settings', ?, ?, ?, ?, ?)",
            (int(bool(merged["notification_enabled"])), merged["reminder_time"], merged["export_format"],
             int(merged["analytics_retention_days"]), _now_ms()),
        )
        c.commit()
    _with_conn(run)
    return get_admin_settings()
