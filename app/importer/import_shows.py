"""
Show dataset importer.

This module rebuilds the SQLite catalog from the reviewed shows JSON file.
Every run is a full rebuild: the existing database file is deleted, the
schema is applied, and shows, themes and show-theme links are inserted
inside one transaction.

Bad entries are skipped and counted; they never abort the run. A failure
outside the per-entry handling rolls back everything.
"""

import json
import sqlite3
from dataclasses import asdict, dataclass
from numbers import Real
from pathlib import Path

from core.config import DB_PATH, SHOWS_JSON_PATH
from db.init import SCHEMA_PATH, init_db
from db.show_repo import get_or_create_show, get_or_create_theme, link_show_theme
from importer.age_range import parse_age_group
from importer.errors import ImportAbortedError, ImportFileError
from importer.levels import level_to_number

MIN_STIM_SCORE = 1
MAX_STIM_SCORE = 5

# Plain descriptive attributes copied as-is
TEXT_FIELDS = (
    "platform",
    "seasons",
    "avg_episode_length",
    "animation_style",
    "image_filename",
)

# Sensory attributes stored as the label plus a normalized *_num score
LEVEL_FIELDS = (
    "dialogue_intensity",
    "scene_frequency",
    "sound_effects_level",
    "total_music_level",
    "music_tempo",
    "total_sound_effect_time_level",
    "interactivity_level",
)

# Failures confined to a single entry
ROW_ERRORS = (
    sqlite3.IntegrityError,
    sqlite3.InterfaceError,
    sqlite3.ProgrammingError,
    LookupError,
    UnicodeError,
)


@dataclass
class ImportSummary:
    inserted: int = 0
    skipped: int = 0
    themes: int = 0
    links: int = 0
    errors: int = 0


def load_shows_json(json_path):
    """
    Read the dataset and return its list of entries.

    Raises ImportFileError if the file cannot be read or parsed, or if the
    top-level value is not an array.
    """
    path = Path(json_path)
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise ImportFileError(f"Could not read show data from {path}: {e}") from e

    if not isinstance(data, list):
        raise ImportFileError(f"Show data in {path} is not a JSON array")

    return data


def validate_entry(entry):
    """
    Return the trimmed title of a usable entry, or None.

    An entry needs a non-empty string title and a whole-number stimulation
    score between 1 and 5 (3.0 is accepted, 3.5 is not).
    """
    if not isinstance(entry, dict):
        return None

    title = entry.get("title")
    if not isinstance(title, str) or not title.strip():
        return None

    score = entry.get("stimulation_score")
    if isinstance(score, bool) or not isinstance(score, Real):
        return None
    if isinstance(score, float) and not score.is_integer():
        return None
    if not MIN_STIM_SCORE <= score <= MAX_STIM_SCORE:
        return None

    return title.strip()


def _scalar(value):
    if value is None or isinstance(value, (str, int, float)):
        return value
    return json.dumps(value)


def build_show_row(entry, title):
    ages = parse_age_group(entry.get("target_age_group"))

    row = {
        "title": title,
        "stimulation_score": int(entry["stimulation_score"]),
        "target_age_group": _scalar(entry.get("target_age_group")),
        "min_age": ages.min_age,
        "max_age": ages.max_age,
    }
    for field in TEXT_FIELDS:
        row[field] = _scalar(entry.get(field))
    for field in LEVEL_FIELDS:
        row[field] = _scalar(entry.get(field))
        row[f"{field}_num"] = level_to_number(entry.get(field))

    return row


def theme_names(value):
    if not isinstance(value, list):
        return []
    return [t.strip() for t in value if isinstance(t, str) and t.strip()]


def import_entry(conn, index, entry, summary, theme_cache):
    """
    Import one dataset entry inside its own savepoint.

    ``theme_cache`` maps lower-cased theme names to IDs for the current run.
    """
    title = validate_entry(entry)
    if title is None:
        label = entry.get("title") if isinstance(entry, dict) else entry
        print(f"[SKIP] Entry {index}: invalid title or stimulation score ({label!r})")
        summary.skipped += 1
        return

    row = build_show_row(entry, title)
    new_themes = {}
    links = 0

    conn.execute("SAVEPOINT show_entry")
    try:
        show_id, created = get_or_create_show(conn, row)
        if show_id is None:
            raise LookupError(f"no show ID for {title!r}")

        for name in theme_names(entry.get("themes")):
            key = name.lower()
            theme_id = theme_cache.get(key) or new_themes.get(key)
            if theme_id is None:
                theme_id = get_or_create_theme(conn, name)
                if theme_id is None:
                    raise LookupError(f"no theme ID for {name!r}")
                new_themes[key] = theme_id

            if link_show_theme(conn, show_id, theme_id):
                links += 1

    except ROW_ERRORS as e:
        conn.execute("ROLLBACK TO show_entry")
        conn.execute("RELEASE show_entry")
        print(f"[ERROR] Entry {index} ({title!r}): {e}")
        summary.errors += 1
        return

    conn.execute("RELEASE show_entry")

    if created:
        summary.inserted += 1
    else:
        print(f"[SKIP] Duplicate show title: {title!r}")
        summary.skipped += 1

    theme_cache.update(new_themes)
    summary.themes += len(new_themes)
    summary.links += links


def import_shows(json_path=SHOWS_JSON_PATH, db_path=DB_PATH, schema_path=SCHEMA_PATH):
    """
    Rebuild the catalog database from the JSON dataset.

    Returns an ImportSummary. Raises ImportFileError for an unusable source
    or schema file (nothing is written) and ImportAbortedError when the
    transaction had to be rolled back.
    """
    shows = load_shows_json(json_path)
    print(f"[INFO] Read {len(shows)} show entries from {json_path}")

    schema_path = Path(schema_path)
    if not schema_path.is_file():
        raise ImportFileError(f"Schema file not found: {schema_path}")

    db_path = Path(db_path)
    if db_path.exists():
        db_path.unlink()
        print(f"[INFO] Existing database deleted: {db_path}")

    db_path.parent.mkdir(parents=True, exist_ok=True)
    init_db(db_path, schema_path)

    summary = ImportSummary()
    theme_cache = {}

    # Transactions are managed explicitly
    conn = sqlite3.connect(db_path, isolation_level=None)
    try:
        conn.execute("PRAGMA foreign_keys = ON")
        conn.execute("BEGIN")

        for index, entry in enumerate(shows):
            import_entry(conn, index, entry, summary, theme_cache)

        conn.execute("COMMIT")

    except Exception as e:
        if conn.in_transaction:
            conn.execute("ROLLBACK")
            print("[ERROR] Transaction rolled back")
        raise ImportAbortedError(f"Import aborted: {e}") from e

    finally:
        conn.close()

    print(
        "[OK] Import complete: "
        + ", ".join(f"{key}={value}" for key, value in asdict(summary).items())
    )
    return summary
