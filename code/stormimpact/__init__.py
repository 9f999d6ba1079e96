"""
Storm impact report: reclassify NOAA storm events onto a fixed category
taxonomy and summarize casualties and economic damage per category.
"""

from .pipeline import ImpactTables, run_pipeline
from .taxonomy import (
    CATEGORIES,
    UNIT_MULTIPLIERS,
    Category,
    TaxonomyConfigError,
    compile_taxonomy,
    match_categories,
    validate_unit_table,
)

__all__ = [
    "ImpactTables",
    "run_pipeline",
    "CATEGORIES",
    "UNIT_MULTIPLIERS",
    "Category",
    "TaxonomyConfigError",
    "compile_taxonomy",
    "match_categories",
    "validate_unit_table",
]
