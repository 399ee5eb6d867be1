"""
Show database repository helpers.

This module contains the write helpers used by the importer. Each
"get or create" helper inserts with ON CONFLICT DO NOTHING and then looks the
row up, so it returns the ID whether the row was new or already present.
"""

SHOW_COLUMNS = (
    "title",
    "stimulation_score",
    "platform",
    "target_age_group",
    "min_age",
    "max_age",
    "seasons",
    "avg_episode_length",
    "animation_style",
    "image_filename",
    "dialogue_intensity",
    "scene_frequency",
    "sound_effects_level",
    "total_music_level",
    "music_tempo",
    "total_sound_effect_time_level",
    "interactivity_level",
    "dialogue_intensity_num",
    "scene_frequency_num",
    "sound_effects_level_num",
    "total_music_level_num",
    "music_tempo_num",
    "total_sound_effect_time_level_num",
    "interactivity_level_num",
)


def get_show_id(conn, title):
    """
    Return the ID of the show with this title (ignoring case), or None.
    """
    row = conn.execute(
        "SELECT id FROM shows WHERE title = ? COLLATE NOCASE",
        (title,),
    ).fetchone()
    return row[0] if row else None


def get_or_create_show(conn, show):
    """
    Insert a show unless its title already exists.

    Expects a dict keyed by SHOW_COLUMNS (missing keys are stored as NULL).
    Returns (show_id, created).
    """
    placeholders = ", ".join("?" * len(SHOW_COLUMNS))
    cursor = conn.execute(
        f"""
        INSERT INTO shows ({", ".join(SHOW_COLUMNS)})
        VALUES ({placeholders})
        ON CONFLICT(title) DO NOTHING
        """,
        tuple(show.get(column) for column in SHOW_COLUMNS),
    )

    if cursor.rowcount == 1:
        return cursor.lastrowid, True

    return get_show_id(conn, show["title"]), False


def get_or_create_theme(conn, name):
    """
    Insert a theme unless one with the same name (ignoring case) exists.

    The first-seen spelling of a name is the one stored. Returns the ID.
    """
    conn.execute(
        """
        INSERT INTO themes (name)
        VALUES (?)
        ON CONFLICT(name) DO NOTHING
        """,
        (name,),
    )

    row = conn.execute(
        "SELECT id FROM themes WHERE name = ? COLLATE NOCASE",
        (name,),
    ).fetchone()
    return row[0] if row else None


def link_show_theme(conn, show_id, theme_id):
    """
    Link a show to a theme. Returns True if the link is new.
    """
    cursor = conn.execute(
        """
        INSERT OR IGNORE INTO show_themes (show_id, theme_id)
        VALUES (?, ?)
        """,
        (show_id, theme_id),
    )
    return cursor.rowcount == 1
