"""SQLite storage for competitions and their extracted results.

Tables:
  - competitions: one row per saved competition (year + name)
  - results: one row per athlete, linked by competition_id
"""

import datetime
import os
import sqlite3

from .models import CompetitionConfig, RESULT_FIELDS


RESULT_COLUMNS = ['athlete_name', 'category', 'age_grade'] + RESULT_FIELDS


def _create_tables(cur):
    """Create the schema if it does not exist yet."""
    cur.execute('''CREATE TABLE IF NOT EXISTS competitions (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        competition_year INTEGER,
        name TEXT NOT NULL,
        created_at TEXT
    )''')
    cur.execute('''CREATE TABLE IF NOT EXISTS results (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        competition_id INTEGER NOT NULL REFERENCES competitions(id) ON DELETE CASCADE,
        athlete_name TEXT NOT NULL,
        category TEXT,
        age_grade TEXT,
        snatch_best REAL,
        snatch_rank REAL,
        cj_best REAL,
        cj_rank REAL,
        total_weight REAL,
        total_rank REAL,
        created_at TEXT
    )''')


def _strip_or_none(val) -> str | None:
    if val is None:
        return None
    s = str(val).strip()
    return s or None


def save_competition(db_path: str, config: CompetitionConfig, rows: list[dict]) -> int:
    """Insert a competition and its result rows.

    Args:
        db_path: Path to the SQLite database (created if missing).
        config: CompetitionConfig with competition_year and name.
        rows: Result row dicts from the sanitizer.

    Returns:
        The id of the new competition.

    Raises:
        ValueError: if the competition name is blank or there are no rows.
    """
    name = (config.name or '').strip()
    if not name:
        raise ValueError("Competition name is required")
    if not rows:
        raise ValueError("At least one result row is required to save a competition")

    db_dir = os.path.dirname(os.path.abspath(db_path))
    os.makedirs(db_dir, exist_ok=True)

    now = datetime.datetime.now().isoformat(timespec='seconds')
    conn = sqlite3.connect(db_path)
    try:
        cur = conn.cursor()
        _create_tables(cur)

        cur.execute('''INSERT INTO competitions (competition_year, name, created_at)
                       VALUES (?, ?, ?)''',
                    (config.competition_year, name, now))
        competition_id = cur.lastrowid

        for r in rows:
            cur.execute('''INSERT INTO results
                (competition_id, athlete_name, category, age_grade,
                 snatch_best, snatch_rank, cj_best, cj_rank, total_weight, total_rank,
                 created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)''',
                (competition_id,
                 (r.get('athlete_name') or '').strip(),
                 _strip_or_none(r.get('category')),
                 _strip_or_none(r.get('age_grade')),
                 r.get('snatch_best'), r.get('snatch_rank'),
                 r.get('cj_best'), r.get('cj_rank'),
                 r.get('total_weight'), r.get('total_rank'),
                 now))

        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()

    return competition_id


def load_results(db_path: str, competition_id: int | None = None) -> list[dict]:
    """Read result rows back, each with competition_name and competition_year.

    All competitions are returned when competition_id is None.
    """
    query = f'''SELECT c.id AS competition_id, c.name AS competition_name,
                       c.competition_year, {", ".join("r." + col for col in RESULT_COLUMNS)}
                FROM results r
                JOIN competitions c ON c.id = r.competition_id'''
    params = ()
    if competition_id is not None:
        query += ' WHERE c.id = ?'
        params = (competition_id,)
    query += ' ORDER BY c.id, r.id'

    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    try:
        cur = conn.cursor()
        cur.execute(query, params)
        rows = [dict(row) for row in cur.fetchall()]
    finally:
        conn.close()
    return rows
