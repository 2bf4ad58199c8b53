"""
Exercise catalog for workout-planner.

CatalogExercise records are supplied by a CatalogProvider; the planner
filters them by session category and equipment before selection.
"""

from .base import CatalogExercise
from .catalog import (
    CatalogProvider,
    FileCatalogProvider,
    StaticCatalogProvider,
    filter_by_category,
    filter_by_equipment,
    matches_session_category,
)
from .loader import CatalogError, load_catalog

__all__ = [
    "CatalogExercise",
    "CatalogError",
    "CatalogProvider",
    "FileCatalogProvider",
    "StaticCatalogProvider",
    "filter_by_category",
    "filter_by_equipment",
    "load_catalog",
    "matches_session_category",
]
