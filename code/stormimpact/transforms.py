from typing import Mapping, Sequence, Tuple

import pandas as pd

from .taxonomy import CompiledCategory

COLUMN_MAP = {
    "EVTYPE": "event_type",
    "FATALITIES": "fatalities",
    "INJURIES": "injuries",
    "PROPDMG": "property_damage",
    "PROPDMGEXP": "property_damage_units",
    "CROPDMG": "crop_damage",
    "CROPDMGEXP": "crop_damage_units",
}

TEXT_COLS = ["event_type", "property_damage_units", "crop_damage_units"]
MEASURE_COLS = ["fatalities", "injuries", "property_damage", "crop_damage"]
DAMAGE_UNITS = {
    "property_damage": "property_damage_units",
    "crop_damage": "crop_damage_units",
}

SUMMARY_TOKEN = "summary"


def normalize_text(x) -> str:
    if pd.isna(x):
        return ""
    return str(x).lower().strip()


def filter_years(df: pd.DataFrame, years: Tuple[int, int], date_col: str = "BGN_DATE") -> pd.DataFrame:
    if date_col not in df.columns:
        raise ValueError(f"Missing required columns: {[date_col]}")
    start, end = years
    dates = pd.to_datetime(df[date_col], format="%m/%d/%Y %H:%M:%S", errors="coerce")
    # Some exports drop the time part; retry those before giving up on the row
    retry = dates.isna()
    if retry.any():
        dates.loc[retry] = pd.to_datetime(df.loc[retry, date_col], format="%m/%d/%Y", errors="coerce")
    year = dates.dt.year
    keep = year.notna() & year.between(start, end)
    return df.loc[keep].copy()


def project_columns(df: pd.DataFrame) -> pd.DataFrame:
    missing = [c for c in COLUMN_MAP if c not in df.columns]
    if missing:
        raise ValueError(f"Missing required columns: {missing}")
    out = df[list(COLUMN_MAP)].rename(columns=COLUMN_MAP).copy()
    for col in MEASURE_COLS:
        out[col] = pd.to_numeric(out[col], errors="coerce").fillna(0.0)
    return out


def normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    df = df.copy()
    for col in TEXT_COLS:
        df[col] = df[col].map(normalize_text).astype(str)
    return df


def drop_invalid(df: pd.DataFrame, units: Mapping[str, float]) -> pd.DataFrame:
    """
    Remove period-summary rows, rows with an unknown units code, and rows
    carrying a positive amount with no units code.
    """
    bad = df["event_type"].str.contains(SUMMARY_TOKEN, case=False, regex=False)
    for amount_col, units_col in DAMAGE_UNITS.items():
        bad |= ~df[units_col].isin(list(units))
        bad |= (df[amount_col] > 0) & (df[units_col] == "")
    return df.loc[~bad].copy()


def convert_damage(df: pd.DataFrame, units: Mapping[str, float]) -> pd.DataFrame:
    df = df.copy()
    for amount_col, units_col in DAMAGE_UNITS.items():
        df[amount_col] = df[amount_col] * df[units_col].map(units).astype(float)
    return df.drop(columns=list(DAMAGE_UNITS.values()))


def expand_categories(df: pd.DataFrame, taxonomy: Sequence[CompiledCategory]) -> pd.DataFrame:
    """
    One output row per (record, matching category), grouped in taxonomy order.
    Records matching no category produce no rows.
    """
    parts = []
    for cat in taxonomy:
        hit = df.loc[cat.mask(df["event_type"])]
        if hit.empty:
            continue
        parts.append(hit.drop(columns=["event_type"]).assign(category=cat.name))

    cols = ["category"] + MEASURE_COLS
    if not parts:
        return pd.DataFrame(columns=cols).astype({c: float for c in MEASURE_COLS})
    return pd.concat(parts, ignore_index=True)[cols]


def unmatched_event_types(df: pd.DataFrame, taxonomy: Sequence[CompiledCategory]) -> pd.DataFrame:
    matched = pd.Series(False, index=df.index)
    for cat in taxonomy:
        matched |= cat.mask(df["event_type"])
    left = df.loc[~matched, "event_type"]
    return (
        left.value_counts()
            .rename_axis("event_type")
            .reset_index(name="count")
            .sort_values(["count", "event_type"], ascending=[False, True], kind="mergesort")
            .reset_index(drop=True)
    )
