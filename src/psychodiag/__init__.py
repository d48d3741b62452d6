"""
psychodiag: scoring of a five-questionnaire CSV export.
"""
from __future__ import annotations

from psychodiag.config import APP_NAME, APP_VERSION

__version__ = APP_VERSION

__all__ = ["APP_NAME", "APP_VERSION", "__version__"]
