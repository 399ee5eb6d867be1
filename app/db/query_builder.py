"""
Catalog query builder.

Filters are accumulated as typed predicate objects and rendered to SQL with
``?`` placeholders. Values are never interpolated into the statement text;
the only identifiers that reach the SQL are the whitelisted sort columns.
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from core.config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE

MIN_STIM_SCORE = 1
MAX_STIM_SCORE = 5

# Largest value SQLite can bind as an INTEGER
MAX_SQLITE_INT = 2**63 - 1

MIN_FILTER_AGE = 0
MAX_FILTER_AGE = 99

SORT_COLUMNS = ("title", "stimulation_score")
SORT_ORDERS = ("asc", "desc")

COMPARISON_OPERATORS = ("=", "!=", "<", "<=", ">", ">=")

# Columns needed for a catalog card
LIST_COLUMNS = (
    "id",
    "title",
    "stimulation_score",
    "target_age_group",
    "min_age",
    "max_age",
    "image_filename",
    "interactivity_level",
    "dialogue_intensity",
    "scene_frequency",
)

INT_PREFIX_PATTERN = re.compile(r"^\s*([+-]?\d+)")


def parse_int(value) -> Optional[int]:
    """
    Leniently parse an integer query value.

    A leading integer prefix is accepted ("12abc" -> 12). Anything else
    returns None so that the caller can fall back to a default.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value

    match = INT_PREFIX_PATTERN.match(str(value))
    return int(match.group(1)) if match else None


def clamp(value, low, high):
    return max(low, min(high, value))


def escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Comparison:
    column: str
    operator: str
    value: object
    collate: Optional[str] = None

    def __post_init__(self):
        if self.operator not in COMPARISON_OPERATORS:
            raise ValueError(f"Unsupported operator: {self.operator}")

    def render(self) -> Tuple[str, list]:
        collate = f" COLLATE {self.collate}" if self.collate else ""
        return f"{self.column}{collate} {self.operator} ?", [self.value]


@dataclass(frozen=True)
class Like:
    """Case-insensitive substring (or prefix) match; wildcards are literal."""

    column: str
    text: str
    prefix_only: bool = False

    def render(self) -> Tuple[str, list]:
        escaped = escape_like(self.text)
        pattern = f"{escaped}%" if self.prefix_only else f"%{escaped}%"
        return f"{self.column} LIKE ? ESCAPE '\\'", [pattern]


@dataclass(frozen=True)
class InList:
    column: str
    values: Tuple
    collate: Optional[str] = None

    def render(self) -> Tuple[str, list]:
        collate = f" COLLATE {self.collate}" if self.collate else ""
        placeholders = ",".join("?" * len(self.values))
        return f"{self.column}{collate} IN ({placeholders})", list(self.values)


@dataclass(frozen=True)
class AgeOverlap:
    """
    Range-intersection test between a show's age band and the requested one.

    Shows with an unknown bound (NULL min_age or max_age) always match.
    """

    min_age: int
    max_age: int
    min_column: str = "s.min_age"
    max_column: str = "s.max_age"

    def render(self) -> Tuple[str, list]:
        sql = (
            f"(({self.max_column} >= ? AND {self.min_column} <= ?)"
            f" OR {self.min_column} IS NULL OR {self.max_column} IS NULL)"
        )
        return sql, [self.min_age, self.max_age]


# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------

@dataclass
class ShowFilters:
    search: Optional[str] = None
    min_age: Optional[int] = None
    max_age: Optional[int] = None
    stim_score_min: int = MIN_STIM_SCORE
    stim_score_max: int = MAX_STIM_SCORE
    themes: List[str] = field(default_factory=list)
    interactivity: Optional[str] = None
    dialogue: Optional[str] = None
    scene_freq: Optional[str] = None
    sort_by: str = "title"
    sort_order: str = "asc"
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @classmethod
    def from_query(cls, params) -> "ShowFilters":
        """
        Build filters from raw query-string values.

        Bad values are clamped or ignored, never rejected, so that the
        listing endpoint always has a valid page to return.
        """

        def text(name):
            value = params.get(name)
            if value is None:
                return None
            value = str(value).strip()
            return value or None

        filters = cls()
        filters.search = text("search")
        filters.interactivity = text("interactivity")
        filters.dialogue = text("dialogue")
        filters.scene_freq = text("sceneFreq")

        min_age = parse_int(params.get("minAge"))
        max_age = parse_int(params.get("maxAge"))
        if min_age is not None or max_age is not None:
            min_age = clamp(
                min_age if min_age is not None else MIN_FILTER_AGE,
                MIN_FILTER_AGE,
                MAX_FILTER_AGE,
            )
            max_age = clamp(
                max_age if max_age is not None else MAX_FILTER_AGE,
                MIN_FILTER_AGE,
                MAX_FILTER_AGE,
            )
            filters.min_age, filters.max_age = min(min_age, max_age), max(min_age, max_age)

        stim_min = parse_int(params.get("stimScoreMin"))
        if stim_min is not None:
            filters.stim_score_min = clamp(stim_min, MIN_STIM_SCORE, MAX_STIM_SCORE)
        stim_max = parse_int(params.get("stimScoreMax"))
        if stim_max is not None:
            filters.stim_score_max = clamp(stim_max, MIN_STIM_SCORE, MAX_STIM_SCORE)
        if filters.stim_score_min > filters.stim_score_max:
            filters.stim_score_min, filters.stim_score_max = (
                filters.stim_score_max,
                filters.stim_score_min,
            )

        seen = set()
        for name in (text("themes") or "").split(","):
            name = name.strip()
            if name and name.lower() not in seen:
                seen.add(name.lower())
                filters.themes.append(name)

        sort_by = (text("sortBy") or "").lower()
        filters.sort_by = sort_by if sort_by in SORT_COLUMNS else "title"
        sort_order = (text("sortOrder") or "").lower()
        filters.sort_order = sort_order if sort_order in SORT_ORDERS else "asc"

        limit = parse_int(params.get("limit"))
        if limit is None or limit < 1:
            limit = DEFAULT_PAGE_SIZE
        filters.limit = min(limit, MAX_PAGE_SIZE)

        # The OFFSET must still bind as a SQLite integer
        page = parse_int(params.get("page"))
        page = page if page is not None and page >= 1 else 1
        filters.page = min(page, MAX_SQLITE_INT // filters.limit)

        return filters


# ---------------------------------------------------------------------------
# Query
# ---------------------------------------------------------------------------

class ShowQuery:
    """
    Accumulates predicates for the shows listing and renders the page
    query and its matching COUNT query.
    """

    def __init__(self):
        self.predicates = []
        self.theme_names = []
        self.sort_column = "title"
        self.sort_order = "ASC"

    def where(self, predicate):
        self.predicates.append(predicate)
        return self

    def with_themes(self, names):
        self.theme_names = list(names)
        return self

    def order_by(self, column, order="asc"):
        if column not in SORT_COLUMNS:
            raise ValueError(f"Unsupported sort column: {column}")
        if order.lower() not in SORT_ORDERS:
            raise ValueError(f"Unsupported sort order: {order}")

        self.sort_column = column
        self.sort_order = order.upper()
        return self

    def all_predicates(self):
        if not self.theme_names:
            return list(self.predicates)

        # Any one of the requested themes is enough
        theme_match = InList("t.name", tuple(self.theme_names), collate="NOCASE")
        return [theme_match] + list(self.predicates)

    def _from_clause(self):
        sql = "FROM shows s"
        if self.theme_names:
            sql += (
                " JOIN show_themes st ON s.id = st.show_id"
                " JOIN themes t ON st.theme_id = t.id"
            )
        return sql

    def _where_clause(self):
        parts = []
        params = []
        for predicate in self.all_predicates():
            sql, values = predicate.render()
            parts.append(sql)
            params.extend(values)

        if not parts:
            return "", params
        return " WHERE " + " AND ".join(parts), params

    def _order_clause(self):
        sql = f" ORDER BY s.{self.sort_column} {self.sort_order}"
        if self.sort_column != "title":
            sql += ", s.title ASC"
        return sql

    def select_sql(self, limit, offset, columns=LIST_COLUMNS):
        """
        Render the page query.

        DISTINCT collapses the duplicate rows the theme join produces when a
        show carries several of the requested themes.
        """
        projection = ", ".join(f"s.{column}" for column in columns)
        where, params = self._where_clause()
        sql = (
            f"SELECT DISTINCT {projection} {self._from_clause()}{where}"
            f"{self._order_clause()} LIMIT ? OFFSET ?"
        )
        return sql, params + [limit, offset]

    def count_sql(self):
        where, params = self._where_clause()
        sql = f"SELECT COUNT(DISTINCT s.id) AS total {self._from_clause()}{where}"
        return sql, params


def build_show_query(filters: ShowFilters) -> ShowQuery:
    """
    Translate listing filters into a ShowQuery. All filters are ANDed.
    """
    query = ShowQuery()

    if filters.themes:
        query.with_themes(filters.themes)

    if filters.search:
        query.where(Like("s.title", filters.search))

    if filters.min_age is not None and filters.max_age is not None:
        query.where(AgeOverlap(filters.min_age, filters.max_age))

    if filters.stim_score_min > MIN_STIM_SCORE:
        query.where(Comparison("s.stimulation_score", ">=", filters.stim_score_min))
    if filters.stim_score_max < MAX_STIM_SCORE:
        query.where(Comparison("s.stimulation_score", "<=", filters.stim_score_max))

    exact_matches = (
        ("s.interactivity_level", filters.interactivity),
        ("s.dialogue_intensity", filters.dialogue),
        ("s.scene_frequency", filters.scene_freq),
    )
    for column, value in exact_matches:
        if value:
            query.where(Comparison(column, "=", value, collate="NOCASE"))

    query.order_by(filters.sort_by, filters.sort_order)
    return query
