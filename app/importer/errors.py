"""
Import job exceptions.
"""


class ImportFileError(Exception):
    """The source file is missing or unusable. Raised before any write."""


class ImportAbortedError(Exception):
    """The import transaction was rolled back."""
