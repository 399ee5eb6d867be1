"""
Database-layer exceptions.

Driver errors (sqlite3.Error) never leave the db package directly; they are
wrapped in one of these with a message describing what was being fetched.
"""


class CatalogError(Exception):
    """Base class for catalog database failures."""


class DatabaseUnavailable(CatalogError):
    """The database file could not be opened."""


class QueryError(CatalogError):
    """A statement failed while executing against an open database."""
