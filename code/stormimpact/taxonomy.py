"""
taxonomy.py

Fixed event-category taxonomy and damage unit table.

A category is a disjunction of clauses; a clause is a conjunction of regex
patterns. Nearly every category is a single one-pattern clause (an alternation
of substrings). "cold" also accepts a record that mentions a winter season
token together with a weather/mix token.

Categories are inclusive: a record is tagged once for every category it
matches, in declared order. A record matching nothing is not tagged at all.

Both tables are validated before use; anything malformed raises
TaxonomyConfigError so a bad edit fails before any data is touched.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List, Mapping, Sequence, Tuple

import pandas as pd


class TaxonomyConfigError(ValueError):
    """Raised when the category taxonomy or unit table is malformed."""
    pass


# ======================================================
# UNIT TABLE
# ======================================================

UNIT_MULTIPLIERS: Dict[str, float] = {
    "": 1.0,
    "k": 1e3,
    "m": 1e6,
    "b": 1e9,
}


# ======================================================
# CATEGORY TAXONOMY (declared order matters)
# ======================================================

@dataclass(frozen=True)
class Category:
    name: str
    clauses: Tuple[Tuple[str, ...], ...]


def _any(pattern: str) -> Tuple[Tuple[str, ...], ...]:
    return ((pattern,),)


def _literal(text: str) -> Tuple[Tuple[str, ...], ...]:
    return ((re.escape(text),),)


CATEGORIES: List[Category] = [
    Category("avalanche", _any(r"avalanch")),
    Category("blizzard", _any(r"blizzard")),
    Category("cold", ((r"cold|freez",), (r"winter|wintry", r"weather|mix"))),
    Category("drought", _any(r"drought")),
    Category("dust", _any(r"dust")),
    Category("flood", _any(r"flood|fld")),
    Category("fog", _any(r"fog")),
    Category("hail", _any(r"hail")),
    Category("heat", _any(r"heat|high temp|hyperthermia")),
    Category("high tide", _literal("high tide")),
    Category("low tide", _literal("low tide")),
    Category("hurricane", _any(r"hurricane|typhoon|tropical storm|tropical depression")),
    Category("ice", _any(r"ice|icy|glaze")),
    Category("landslide", _any(r"slide|landslump|mud")),
    Category("lightning", _any(r"lightning")),
    Category("rain", _any(r"rain|precip")),
    Category("snow", _any(r"snow")),
    Category("surf", _any(r"surf|rip current|high seas|swells")),
    Category("thunderstorm", _any(r"thunderstorm|tstm")),
    Category("tornado", _any(r"tornado|funnel|waterspout")),
    Category("wildfire", _any(r"fire")),
    Category("wind", _any(r"wind")),
]


# ======================================================
# COMPILED FORM
# ======================================================

@dataclass(frozen=True)
class CompiledCategory:
    name: str
    clauses: Tuple[Tuple[re.Pattern, ...], ...]

    def matches(self, text: str) -> bool:
        return any(all(p.search(text) for p in clause) for clause in self.clauses)

    def mask(self, texts: pd.Series) -> pd.Series:
        """Vectorized `matches` over a Series of normalized event text."""
        texts = texts.fillna("").astype(str)
        out = pd.Series(False, index=texts.index)
        for clause in self.clauses:
            hit = pd.Series(True, index=texts.index)
            for p in clause:
                hit &= texts.str.contains(p.pattern, flags=p.flags, regex=True)
            out |= hit
        return out


def validate_unit_table(units: Mapping[str, float]) -> Dict[str, float]:
    if not units:
        raise TaxonomyConfigError("Unit table is empty")
    if "" not in units:
        raise TaxonomyConfigError("Unit table must define the empty units code")

    table: Dict[str, float] = {}
    for code, mult in units.items():
        if not isinstance(code, str) or code != code.strip().lower():
            raise TaxonomyConfigError(f"Units code must be a lowercase, trimmed string: {code!r}")
        if isinstance(mult, bool) or not isinstance(mult, (int, float)) or not mult > 0:
            raise TaxonomyConfigError(f"Multiplier for units code {code!r} must be a positive number: {mult!r}")
        table[code] = float(mult)
    return table


def compile_taxonomy(categories: Sequence[Category]) -> List[CompiledCategory]:
    """
    Validate and compile the taxonomy.

    Raises:
        TaxonomyConfigError: empty taxonomy, blank or duplicate names, empty
            clauses, or a pattern that is not a valid regex
    """
    if not categories:
        raise TaxonomyConfigError("Category taxonomy is empty")

    seen = set()
    compiled: List[CompiledCategory] = []
    for cat in categories:
        if not isinstance(cat.name, str) or not cat.name.strip():
            raise TaxonomyConfigError(f"Category name must be a non-blank string: {cat.name!r}")
        if cat.name in seen:
            raise TaxonomyConfigError(f"Duplicate category name: {cat.name}")
        seen.add(cat.name)

        if not cat.clauses:
            raise TaxonomyConfigError(f"Category {cat.name!r} has no patterns")

        clauses = []
        for clause in cat.clauses:
            if not clause:
                raise TaxonomyConfigError(f"Category {cat.name!r} has an empty clause")
            pats = []
            for raw in clause:
                if not isinstance(raw, str) or raw == "":
                    raise TaxonomyConfigError(f"Category {cat.name!r} has a blank pattern")
                try:
                    pats.append(re.compile(raw, re.IGNORECASE))
                except re.error as exc:
                    raise TaxonomyConfigError(
                        f"Category {cat.name!r} pattern {raw!r} does not compile: {exc}"
                    ) from exc
            clauses.append(tuple(pats))
        compiled.append(CompiledCategory(cat.name, tuple(clauses)))

    return compiled


def match_categories(text: str, taxonomy: Sequence[CompiledCategory]) -> List[str]:
    """Category names matched by `text`, in taxonomy order."""
    return [c.name for c in taxonomy if c.matches(text)]
