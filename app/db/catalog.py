"""
Catalog query helpers.

This module provides the read-side service functions behind the shows API:
the filtered catalog listing, single-show and comparison lookups, homepage
sections, title suggestions and the lightweight show list.

Every function takes the injected Database handle. Lookups where "nothing
found" is a valid outcome return None or an empty list; database failures
surface as db.errors exceptions, never as raw sqlite3 errors.
"""

import asyncio
import math

from core.config import MAX_COMPARE_SHOWS, SUGGESTION_LIMIT
from db.query_builder import MAX_SQLITE_INT, Like, build_show_query
from db.themes import attach_themes_to_show_list, get_themes_for_shows

# Columns needed for the homepage cards
CARD_COLUMNS = """
    id, title, stimulation_score, target_age_group,
    image_filename, interactivity_level
"""


def _with_themes(database, shows):
    themes_map = get_themes_for_shows(database, [show["id"] for show in shows])
    return attach_themes_to_show_list(shows, themes_map)


# ------------------------------------------------------------
# LISTING
# ------------------------------------------------------------

async def list_shows(database, filters):
    """
    Return one page of the filtered catalog.

    The page query and the COUNT query are independent and run
    concurrently; themes are then fetched for the page's IDs only.
    """
    query = build_show_query(filters)
    select_sql, select_params = query.select_sql(filters.limit, filters.offset)
    count_sql, count_params = query.count_sql()

    shows, count_row = await asyncio.gather(
        asyncio.to_thread(
            database.fetch_all, select_sql, select_params, "retrieve shows"
        ),
        asyncio.to_thread(
            database.fetch_one, count_sql, count_params, "count shows"
        ),
    )

    total_shows = count_row["total"] if count_row else 0
    shows = await asyncio.to_thread(_with_themes, database, shows)

    return {
        "shows": shows,
        "totalShows": total_shows,
        "totalPages": math.ceil(total_shows / filters.limit),
        "currentPage": filters.page,
        "limit": filters.limit,
    }


# ------------------------------------------------------------
# DETAIL / COMPARE
# ------------------------------------------------------------

def get_show_by_id(database, show_id):
    """
    Return the full show with its themes, or None if no show has this ID.
    """
    show = database.fetch_one(
        "SELECT * FROM shows WHERE id = ?",
        (show_id,),
        context="retrieve show",
    )
    if show is None:
        return None

    return _with_themes(database, [show])[0]


def get_show_by_title(database, title):
    """
    Return the show whose title matches exactly (ignoring case), or None.
    """
    show = database.fetch_one(
        "SELECT * FROM shows WHERE title = ? COLLATE NOCASE",
        (title,),
        context="retrieve show",
    )
    if show is None:
        return None

    return _with_themes(database, [show])[0]


def get_shows_for_comparison(database, show_ids):
    """
    Return up to MAX_COMPARE_SHOWS shows in the order the IDs were given.

    IDs that do not exist are left out of the result. Raises ValueError
    when more than MAX_COMPARE_SHOWS distinct IDs are requested.
    """
    ids = list(
        dict.fromkeys(
            i for i in show_ids
            if isinstance(i, int)
            and not isinstance(i, bool)
            and 0 < i <= MAX_SQLITE_INT
        )
    )
    if len(ids) > MAX_COMPARE_SHOWS:
        raise ValueError(f"Cannot compare more than {MAX_COMPARE_SHOWS} shows.")
    if not ids:
        return []

    placeholders = ",".join("?" * len(ids))
    rows = database.fetch_all(
        f"SELECT * FROM shows WHERE id IN ({placeholders})",
        ids,
        context="retrieve shows for comparison",
    )

    by_id = {show["id"]: show for show in _with_themes(database, rows)}
    return [by_id[i] for i in ids if i in by_id]


# ------------------------------------------------------------
# HOMEPAGE / SELECTORS
# ------------------------------------------------------------

async def get_homepage_data(database):
    """
    Return the homepage sections, each fetched concurrently.
    """
    featured, popular, rated, low_stim, high_interaction = await asyncio.gather(
        asyncio.to_thread(
            database.fetch_one,
            f"""
            SELECT {CARD_COLUMNS}, animation_style
            FROM shows
            ORDER BY RANDOM()
            LIMIT 1
            """,
            (),
            "retrieve featured show",
        ),
        asyncio.to_thread(
            database.fetch_all,
            f"""
            SELECT {CARD_COLUMNS}
            FROM shows
            ORDER BY stimulation_score DESC, title
            LIMIT 5
            """,
            (),
            "retrieve popular shows",
        ),
        asyncio.to_thread(
            database.fetch_all,
            f"""
            SELECT {CARD_COLUMNS}
            FROM shows
            WHERE stimulation_score = 5
            ORDER BY title
            LIMIT 5
            """,
            (),
            "retrieve top rated shows",
        ),
        asyncio.to_thread(
            database.fetch_all,
            f"""
            SELECT {CARD_COLUMNS}
            FROM shows
            WHERE stimulation_score <= 2
            ORDER BY stimulation_score ASC, title
            LIMIT 5
            """,
            (),
            "retrieve low stimulation shows",
        ),
        asyncio.to_thread(
            database.fetch_all,
            f"""
            SELECT {CARD_COLUMNS}
            FROM shows
            WHERE interactivity_level = 'High' COLLATE NOCASE
            ORDER BY title
            LIMIT 5
            """,
            (),
            "retrieve high interaction shows",
        ),
    )

    # One theme lookup for every show on the page
    all_ids = [show["id"] for show in popular + rated + low_stim + high_interaction]
    if featured:
        all_ids.append(featured["id"])
    themes_map = await asyncio.to_thread(get_themes_for_shows, database, all_ids)

    return {
        "featuredShow": (
            attach_themes_to_show_list([featured], themes_map)[0]
            if featured
            else None
        ),
        "popularShows": attach_themes_to_show_list(popular, themes_map),
        "ratedShows": attach_themes_to_show_list(rated, themes_map),
        "lowStimShows": attach_themes_to_show_list(low_stim, themes_map),
        "highInteractionShows": attach_themes_to_show_list(
            high_interaction, themes_map
        ),
    }


def get_suggestions(database, term, limit=SUGGESTION_LIMIT):
    """
    Return titles starting with ``term`` (ignoring case) for autocomplete.
    """
    term = (term or "").strip()
    if not term:
        return []

    condition, params = Like("title", term, prefix_only=True).render()
    rows = database.fetch_all(
        f"""
        SELECT DISTINCT title
        FROM shows
        WHERE {condition}
        ORDER BY title
        LIMIT ?
        """,
        params + [limit],
        context="retrieve suggestions",
    )

    return [row["title"] for row in rows]


def get_show_list(database):
    """
    Return ``{id, title}`` for every show, ordered by title.
    """
    return database.fetch_all(
        """
        SELECT id, title
        FROM shows
        ORDER BY title COLLATE NOCASE
        """,
        context="retrieve show list",
    )
