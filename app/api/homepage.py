"""
Homepage and selector endpoints.

These back the landing page sections, the theme filter options, the
search-box autocomplete and the comparison page's show picker.
"""

from fastapi import APIRouter, Depends

from api.deps import get_database
from db.catalog import get_homepage_data, get_show_list, get_suggestions
from db.errors import QueryError
from db.themes import list_theme_names

router = APIRouter()


@router.get("/homepage-data")
async def homepage_data(database=Depends(get_database)):
    return await get_homepage_data(database)


@router.get("/themes")
def themes(database=Depends(get_database)):
    return list_theme_names(database)


@router.get("/show-list")
def show_list(database=Depends(get_database)):
    return get_show_list(database)


@router.get("/suggestions")
def suggestions(term: str = None, database=Depends(get_database)):
    # Autocomplete degrades to no suggestions rather than an error
    try:
        return get_suggestions(database, term)
    except QueryError as e:
        print(f"[WARN] Suggestions unavailable for {term!r}: {e}")
        return []
