"""
pipeline.py

Reclassification & aggregation of raw storm event rows into the two report
tables (health impact, economic impact).

Stages (each either keeps a row unchanged-in-meaning or drops it):
  year filter -> projection -> normalization -> validity filter
  -> damage conversion -> category expansion -> grouped aggregation

Bad rows are dropped, never fatal. A malformed taxonomy or unit table raises
TaxonomyConfigError before any row is looked at. The input frame is not
modified.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Sequence, Tuple

import pandas as pd

from .aggregates import economic_impact, health_impact
from .config import DEFAULT_END_YEAR, DEFAULT_START_YEAR
from .taxonomy import (
    CATEGORIES,
    UNIT_MULTIPLIERS,
    Category,
    compile_taxonomy,
    validate_unit_table,
)
from .transforms import (
    convert_damage,
    drop_invalid,
    expand_categories,
    filter_years,
    normalize_columns,
    project_columns,
    unmatched_event_types,
)


@dataclass(frozen=True)
class ImpactTables:
    health: pd.DataFrame
    economic: pd.DataFrame
    unmatched: pd.DataFrame
    stage_counts: Dict[str, int] = field(default_factory=dict)


def run_pipeline(
    raw: pd.DataFrame,
    categories: Optional[Sequence[Category]] = None,
    units: Optional[Mapping[str, float]] = None,
    years: Tuple[int, int] = (DEFAULT_START_YEAR, DEFAULT_END_YEAR),
) -> ImpactTables:
    taxonomy = compile_taxonomy(CATEGORIES if categories is None else categories)
    unit_table = validate_unit_table(UNIT_MULTIPLIERS if units is None else units)
    if years[0] > years[1]:
        raise ValueError(f"Invalid year range: {years}")

    counts = {"raw": len(raw)}

    df = filter_years(raw, years)
    counts["in_years"] = len(df)

    df = normalize_columns(project_columns(df))
    df = drop_invalid(df, unit_table)
    counts["valid"] = len(df)

    df = convert_damage(df, unit_table)
    unmatched = unmatched_event_types(df, taxonomy)
    expanded = expand_categories(df, taxonomy)
    counts["unmatched"] = int(unmatched["count"].sum())
    counts["expanded"] = len(expanded)

    return ImpactTables(
        health=health_impact(expanded),
        economic=economic_impact(expanded),
        unmatched=unmatched,
        stage_counts=counts,
    )
