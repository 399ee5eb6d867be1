"""
Show catalog endpoints.

This module exposes:
- the filtered, sorted and paginated catalog listing
- single-show lookups by ID and by title
- the side-by-side comparison lookup

Listing parameters are never rejected: bad values fall back to defaults.
Detail lookups that need a specific show return 400 for a malformed ID and
404 when no show matches.
"""

from fastapi import APIRouter, Depends, HTTPException, Request

from api.deps import get_database
from core.config import MAX_COMPARE_SHOWS
from db.catalog import (
    get_show_by_id,
    get_show_by_title,
    get_shows_for_comparison,
    list_shows,
)
from db.query_builder import MAX_SQLITE_INT, ShowFilters, parse_int

router = APIRouter(prefix="/shows")


# ------------------------------------------------------------
# CATALOG
# ------------------------------------------------------------

@router.get("")
async def catalog_shows(request: Request, database=Depends(get_database)):
    filters = ShowFilters.from_query(request.query_params)
    return await list_shows(database, filters)


# ------------------------------------------------------------
# DETAIL
# Specific paths are registered before /{show_id}
# ------------------------------------------------------------

@router.get("/title/{title:path}")
def show_by_title(title: str, database=Depends(get_database)):
    show = get_show_by_title(database, title)
    if show is None:
        raise HTTPException(status_code=404, detail=f'Show with title "{title}" not found.')
    return show


@router.get("/compare")
def compare_shows(ids: str = None, database=Depends(get_database)):
    if not ids:
        raise HTTPException(status_code=400, detail="Missing 'ids' query parameter.")

    show_ids = [parse_int(i) for i in ids.split(",")]
    show_ids = list(dict.fromkeys(
        i for i in show_ids if i is not None and 0 < i <= MAX_SQLITE_INT
    ))

    if not show_ids:
        raise HTTPException(status_code=400, detail="No valid IDs provided.")
    if len(show_ids) > MAX_COMPARE_SHOWS:
        raise HTTPException(
            status_code=400,
            detail=f"Cannot compare more than {MAX_COMPARE_SHOWS} shows.",
        )

    return get_shows_for_comparison(database, show_ids)


@router.get("/{show_id}")
def show_by_id(show_id: str, database=Depends(get_database)):
    try:
        numeric_id = int(show_id)
    except ValueError:
        numeric_id = 0

    if not 0 < numeric_id <= MAX_SQLITE_INT:
        raise HTTPException(status_code=400, detail="Invalid show ID provided.")

    show = get_show_by_id(database, numeric_id)
    if show is None:
        raise HTTPException(status_code=404, detail=f"Show with ID {numeric_id} not found.")
    return show
