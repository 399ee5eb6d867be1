"""
Tests for the show importer.

Covers:
- Full rebuild of the database file on every run
- Entry validation and skip counting
- Duplicate titles and case-insensitive theme deduplication
- Normalized age and level columns
- Fatal file-level errors
"""

import sqlite3

import pytest

from importer.errors import ImportAbortedError, ImportFileError
from importer.import_shows import import_shows, validate_entry

from conftest import SAMPLE_SHOWS


def _query(db_path, sql, params=()):
    conn = sqlite3.connect(db_path)
    try:
        return conn.execute(sql, params).fetchall()
    finally:
        conn.close()


def test_imports_sample_dataset(tmp_path, write_json):
    db_path = tmp_path / "shows.db"
    summary = import_shows(write_json(SAMPLE_SHOWS), db_path)

    assert summary.inserted == len(SAMPLE_SHOWS)
    assert summary.skipped == 0
    assert summary.errors == 0
    # Family, Adventure, Music, Education, STEM, Language, Nature, Comedy
    assert summary.themes == 8
    assert summary.links == sum(len(s["themes"]) for s in SAMPLE_SHOWS)

    assert _query(db_path, "SELECT COUNT(*) FROM shows") == [(7,)]
    assert _query(db_path, "SELECT COUNT(*) FROM themes") == [(8,)]


def test_age_and_level_columns_are_normalized(tmp_path, write_json):
    db_path = tmp_path / "shows.db"
    import_shows(write_json(SAMPLE_SHOWS), db_path)

    rows = dict(
        (title, rest)
        for title, *rest in _query(
            db_path,
            """
            SELECT title, min_age, max_age, dialogue_intensity_num,
                   scene_frequency_num, sound_effects_level_num,
                   total_music_level_num, interactivity_level_num
            FROM shows
            """,
        )
    )

    assert rows["Bluey"] == [4, 7, 3, 2, 2, 3, 2]
    assert rows["Cocomelon"] == [0, 3, 2, 5, 5, 5, 2]
    assert rows["Puffin Rock"] == [0, 99, 2, 2, 1, 2, 0]
    assert rows["Odd Squad"][:2] == [6, 99]
    # Unparseable age, "Varies" treated as moderate, missing levels stay NULL
    assert rows["Mystery Box"] == [None, None, 3, 3, None, None, 5]


def test_same_label_scores_the_same_in_every_dimension(tmp_path, write_json):
    db_path = tmp_path / "shows.db"
    entry = {
        "title": "Uniform",
        "stimulation_score": 3,
        "dialogue_intensity": "Moderate-High",
        "scene_frequency": "moderate-high",
        "sound_effects_level": " Moderate - High ",
        "total_music_level": "MODERATE-HIGH",
    }
    import_shows(write_json([entry]), db_path)

    assert _query(
        db_path,
        """
        SELECT dialogue_intensity_num, scene_frequency_num,
               sound_effects_level_num, total_music_level_num
        FROM shows
        """,
    ) == [(4, 4, 4, 4)]


@pytest.mark.parametrize("entry", [
    {"stimulation_score": 3},
    {"title": "   ", "stimulation_score": 3},
    {"title": 42, "stimulation_score": 3},
    {"title": "Zero", "stimulation_score": 0},
    {"title": "Six", "stimulation_score": 6},
    {"title": "Text", "stimulation_score": "3"},
    {"title": "Bool", "stimulation_score": True},
    {"title": "Half", "stimulation_score": 3.5},
    {"title": "Missing"},
    "not an object",
    None,
])
def test_invalid_entries_are_rejected(entry):
    assert validate_entry(entry) is None


def test_invalid_entries_are_skipped_not_fatal(tmp_path, write_json):
    db_path = tmp_path / "shows.db"
    shows = [
        {"title": "Good", "stimulation_score": 2},
        {"title": "Bad score", "stimulation_score": 9},
        {"title": "", "stimulation_score": 2},
        "garbage",
        {"title": "  Also Good  ", "stimulation_score": 5},
    ]
    summary = import_shows(write_json(shows), db_path)

    assert summary.inserted == 2
    assert summary.skipped == 3
    assert _query(db_path, "SELECT title FROM shows ORDER BY id") == [
        ("Good",),
        ("Also Good",),
    ]


def test_duplicate_titles_keep_one_row_and_merge_themes(tmp_path, write_json):
    db_path = tmp_path / "shows.db"
    shows = [
        {"title": "Bluey", "stimulation_score": 2, "themes": ["Family"]},
        {"title": "BLUEY", "stimulation_score": 4, "themes": ["Comedy", "family"]},
    ]
    summary = import_shows(write_json(shows), db_path)

    assert summary.inserted == 1
    assert summary.skipped == 1
    assert summary.links == 2

    assert _query(db_path, "SELECT id, title, stimulation_score FROM shows") == [
        (1, "Bluey", 2),
    ]
    assert _query(
        db_path,
        """
        SELECT st.show_id, t.name
        FROM show_themes st JOIN themes t ON t.id = st.theme_id
        ORDER BY t.name
        """,
    ) == [(1, "Comedy"), (1, "Family")]


def test_theme_names_are_unique_ignoring_case(tmp_path, write_json):
    db_path = tmp_path / "shows.db"
    shows = [
        {"title": "A", "stimulation_score": 1, "themes": ["Adventure", " adventure "]},
        {"title": "B", "stimulation_score": 1, "themes": ["ADVENTURE", "", 7]},
    ]
    summary = import_shows(write_json(shows), db_path)

    assert summary.themes == 1
    assert summary.links == 2
    assert _query(db_path, "SELECT name FROM themes") == [("Adventure",)]


def test_rerun_rebuilds_database(tmp_path, write_json):
    db_path = tmp_path / "shows.db"
    json_path = write_json(SAMPLE_SHOWS)

    import_shows(json_path, db_path)
    import_shows(json_path, db_path)

    assert _query(db_path, "SELECT COUNT(*) FROM shows") == [(7,)]
    assert _query(db_path, "SELECT COUNT(*) FROM show_themes") == [(13,)]


def test_existing_file_is_replaced(tmp_path, write_json):
    db_path = tmp_path / "shows.db"
    db_path.write_bytes(b"not a database")

    import_shows(write_json([{"title": "A", "stimulation_score": 1}]), db_path)

    assert _query(db_path, "SELECT title FROM shows") == [("A",)]


def test_malformed_json_is_fatal_before_any_write(tmp_path):
    json_path = tmp_path / "shows.json"
    json_path.write_text("[{not json", encoding="utf-8")
    db_path = tmp_path / "shows.db"
    db_path.write_bytes(b"previous")

    with pytest.raises(ImportFileError):
        import_shows(json_path, db_path)

    assert db_path.read_bytes() == b"previous"


def test_non_array_json_is_fatal(tmp_path, write_json):
    db_path = tmp_path / "shows.db"

    with pytest.raises(ImportFileError, match="not a JSON array"):
        import_shows(write_json({"title": "A"}), db_path)

    assert not db_path.exists()


def test_missing_json_file_is_fatal(tmp_path):
    with pytest.raises(ImportFileError):
        import_shows(tmp_path / "missing.json", tmp_path / "shows.db")


def test_missing_schema_is_fatal(tmp_path, write_json):
    with pytest.raises(ImportFileError, match="Schema file not found"):
        import_shows(
            write_json(SAMPLE_SHOWS),
            tmp_path / "shows.db",
            schema_path=tmp_path / "missing.sql",
        )


def test_unexpected_failure_rolls_back_everything(tmp_path, write_json, monkeypatch):
    import importer.import_shows as import_module

    calls = []
    original = import_module.link_show_theme

    def failing_link(conn, show_id, theme_id):
        calls.append(show_id)
        if len(calls) > 2:
            raise RuntimeError("disk on fire")
        return original(conn, show_id, theme_id)

    monkeypatch.setattr(import_module, "link_show_theme", failing_link)
    db_path = tmp_path / "shows.db"

    with pytest.raises(ImportAbortedError, match="disk on fire"):
        import_shows(write_json(SAMPLE_SHOWS), db_path)

    assert _query(db_path, "SELECT COUNT(*) FROM shows") == [(0,)]
    assert _query(db_path, "SELECT COUNT(*) FROM themes") == [(0,)]


def test_row_level_database_error_is_counted(tmp_path, write_json, monkeypatch):
    import importer.import_shows as import_module

    original = import_module.get_or_create_theme

    def failing_theme(conn, name):
        if name == "Broken":
            raise sqlite3.IntegrityError("constraint failed")
        return original(conn, name)

    monkeypatch.setattr(import_module, "get_or_create_theme", failing_theme)
    db_path = tmp_path / "shows.db"
    shows = [
        {"title": "A", "stimulation_score": 1, "themes": ["Fine"]},
        {"title": "B", "stimulation_score": 1, "themes": ["Fine", "Broken"]},
        {"title": "C", "stimulation_score": 1, "themes": ["Fine"]},
    ]
    summary = import_shows(write_json(shows), db_path)

    assert summary.errors == 1
    assert summary.inserted == 2
    assert summary.links == 2
    # The failed entry left nothing behind
    assert _query(db_path, "SELECT title FROM shows ORDER BY title") == [("A",), ("C",)]


def test_whole_number_float_score_is_stored_as_integer(tmp_path, write_json):
    db_path = tmp_path / "shows.db"
    summary = import_shows(write_json([{"title": "Float", "stimulation_score": 3.0}]), db_path)

    assert summary.inserted == 1
    assert _query(
        db_path, "SELECT stimulation_score, typeof(stimulation_score) FROM shows"
    ) == [(3, "integer")]


def test_unencodable_text_only_skips_its_entry(tmp_path, write_json):
    db_path = tmp_path / "shows.db"
    shows = [
        {"title": "Good", "stimulation_score": 2, "themes": ["Calm"]},
        {"title": "Bad\ud800", "stimulation_score": 2},
        {"title": "Broken Theme", "stimulation_score": 2, "themes": ["Calm", "X\udfff"]},
        {"title": "Also Good", "stimulation_score": 3},
    ]
    summary = import_shows(write_json(shows), db_path)

    assert summary.errors == 2
    assert summary.inserted == 2
    assert summary.links == 1
    assert _query(db_path, "SELECT title FROM shows ORDER BY id") == [
        ("Good",),
        ("Also Good",),
    ]
