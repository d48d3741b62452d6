from __future__ import annotations


class PsychodiagError(Exception):
    """Base class for errors raised outside the scoring pipeline."""


class UnsupportedFileError(PsychodiagError):
    """Raised when a file other than a CSV export is handed to the loader."""


class UnknownCategoryError(PsychodiagError):
    """Raised when a breakdown is requested for an unknown test or category."""
