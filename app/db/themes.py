"""
Theme query helpers.

Themes are fetched for a whole page of shows with a single JOIN query and
merged onto the show rows, instead of one query per show.
"""


def get_themes_for_shows(database, show_ids):
    """
    Return a mapping of show ID to its theme names.

    IDs are deduplicated and filtered to positive integers first. Every
    requested valid ID is present in the result, mapped to ``[]`` when the
    show has no themes. An empty ID list returns ``{}`` without querying.
    """
    unique_ids = []
    for show_id in show_ids or []:
        if (
            isinstance(show_id, int)
            and not isinstance(show_id, bool)
            and show_id > 0
            and show_id not in unique_ids
        ):
            unique_ids.append(show_id)

    if not unique_ids:
        return {}

    placeholders = ",".join("?" * len(unique_ids))
    rows = database.fetch_all(
        f"""
        SELECT st.show_id, t.name
        FROM show_themes st
        JOIN themes t ON st.theme_id = t.id
        WHERE st.show_id IN ({placeholders})
        ORDER BY st.show_id, t.name COLLATE NOCASE
        """,
        unique_ids,
        context="retrieve themes for shows",
    )

    themes_by_show = {show_id: [] for show_id in unique_ids}
    for row in rows:
        themes_by_show[row["show_id"]].append(row["name"])

    return themes_by_show


def attach_themes_to_show_list(shows, themes_map):
    """
    Return copies of ``shows`` with a ``themes`` list set on each.
    """
    return [
        {**show, "themes": list(themes_map.get(show["id"]) or [])}
        for show in shows
    ]


def list_theme_names(database):
    """
    Return every theme name, ordered case-insensitively.
    """
    rows = database.fetch_all(
        """
        SELECT name
        FROM themes
        ORDER BY name COLLATE NOCASE
        """,
        context="retrieve themes",
    )

    return [row["name"] for row in rows]
