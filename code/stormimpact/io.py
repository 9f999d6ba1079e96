import os
from pathlib import Path
from typing import Optional

import pandas as pd
import requests
from dotenv import load_dotenv

from .config import (
    DEFAULT_DATA_CSV,
    DEFAULT_DATA_URL,
    DEFAULT_END_YEAR,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_START_YEAR,
    DEFAULT_TOP_N,
    Settings,
    build_settings,
)

RAW_COLUMNS = [
    "EVTYPE", "BGN_DATE", "FATALITIES", "INJURIES",
    "PROPDMG", "PROPDMGEXP", "CROPDMG", "CROPDMGEXP",
]

DOWNLOAD_TIMEOUT = 120
CHUNK_SIZE = 1 << 20


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


def load_settings(
    input_csv=None,
    output_dir=None,
    start_year: Optional[int] = None,
    end_year: Optional[int] = None,
    top_n: Optional[int] = None,
) -> Settings:
    load_dotenv()
    input_csv = input_csv or os.getenv("STORM_DATA_CSV", DEFAULT_DATA_CSV)
    output_dir = output_dir or os.getenv("REPORT_OUTPUT_DIR", DEFAULT_OUTPUT_DIR)
    data_url = os.getenv("STORM_DATA_URL", DEFAULT_DATA_URL)
    if not input_csv or not output_dir or not data_url:
        raise ValueError("STORM_DATA_CSV, REPORT_OUTPUT_DIR and STORM_DATA_URL must not be blank")

    return build_settings(
        input_csv,
        output_dir,
        data_url=data_url,
        start_year=start_year if start_year is not None else _env_int("REPORT_START_YEAR", DEFAULT_START_YEAR),
        end_year=end_year if end_year is not None else _env_int("REPORT_END_YEAR", DEFAULT_END_YEAR),
        top_n=top_n if top_n is not None else _env_int("REPORT_TOP_N", DEFAULT_TOP_N),
    )


def ensure_dirs(s: Settings):
    s.output_dir.mkdir(parents=True, exist_ok=True)
    s.charts_dir.mkdir(parents=True, exist_ok=True)
    s.tables_dir.mkdir(parents=True, exist_ok=True)


def fetch_dataset(url: str, path: Path, refresh: bool = False) -> Path:
    """
    Download the storm events archive to `path` unless a cached copy exists.

    The body is streamed to a sibling `.part` file and renamed into place once
    complete, so an interrupted download never leaves a truncated cache behind.
    """
    path = Path(path)
    if path.exists() and not refresh:
        print(f"→ Using cached dataset: {path}")
        return path

    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(path.name + ".part")
    print(f"→ Downloading {url}")
    try:
        with requests.get(url, stream=True, timeout=DOWNLOAD_TIMEOUT) as resp:
            resp.raise_for_status()
            with open(tmp, "wb") as fh:
                for chunk in resp.iter_content(chunk_size=CHUNK_SIZE):
                    if chunk:
                        fh.write(chunk)
        tmp.replace(path)
    finally:
        if tmp.exists():
            tmp.unlink()

    print(f"✓ Saved {path} ({path.stat().st_size:,} bytes)")
    return path


def load_storm_data(path: Path) -> pd.DataFrame:
    """
    Read the raw storm events CSV (plain or bz2) keeping only the columns the
    report needs. Compression is inferred from the file extension.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Storm data file not found: {path}")

    header = pd.read_csv(path, nrows=0)
    missing = [c for c in RAW_COLUMNS if c not in header.columns]
    if missing:
        raise ValueError(f"Missing required columns: {missing}")

    # Exponent columns mix digits and letters; read as text so "0" and "K" both survive
    dtypes = {"EVTYPE": str, "BGN_DATE": str, "PROPDMGEXP": str, "CROPDMGEXP": str}
    return pd.read_csv(path, usecols=RAW_COLUMNS, dtype=dtypes, keep_default_na=False)
