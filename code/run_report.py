#!/usr/bin/env python3
"""
run_report.py

Single entrypoint for the storm impact report:
fetch (cached) -> load -> reclassify/aggregate -> tables + charts.

Outputs (under REPORT_OUTPUT_DIR):
- tables/health_impact.csv
- tables/economic_impact.csv
- tables/unmatched_event_types.csv
- storm_impact_report.xlsx (one sheet per table)
- charts/health_impact.png
- charts/economic_impact.png

Settings come from .env / environment (see stormimpact.io.load_settings);
command-line flags win over both.

Usage:
  python run_report.py
  python run_report.py --start-year 2002 --end-year 2011 --top 10 --refresh
"""

from __future__ import annotations

import argparse
from typing import List, Optional

import matplotlib

matplotlib.use("Agg")

from stormimpact.charts import plot_economic_impact, plot_health_impact  # noqa: E402
from stormimpact.io import ensure_dirs, fetch_dataset, load_settings, load_storm_data  # noqa: E402
from stormimpact.pipeline import run_pipeline  # noqa: E402
from stormimpact.report import format_table, save_csv, save_excel  # noqa: E402
from stormimpact.taxonomy import TaxonomyConfigError  # noqa: E402


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Storm event health and economic impact report.")
    ap.add_argument("--input", help="Path of the cached storm data CSV (.csv or .csv.bz2)")
    ap.add_argument("--output-dir", help="Directory for tables, charts and workbook")
    ap.add_argument("--start-year", type=int, help="First year included (inclusive)")
    ap.add_argument("--end-year", type=int, help="Last year included (inclusive)")
    ap.add_argument("--top", type=int, help="Categories shown in each chart")
    ap.add_argument("--refresh", action="store_true", help="Re-download even if a cached file exists")
    return ap.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    s = load_settings(
        input_csv=args.input,
        output_dir=args.output_dir,
        start_year=args.start_year,
        end_year=args.end_year,
        top_n=args.top,
    )
    ensure_dirs(s)

    print("=" * 60)
    print("STORM IMPACT REPORT")
    print("=" * 60)
    print(f"Input:  {s.input_csv}")
    print(f"Output: {s.output_dir}")
    print(f"Years:  {s.start_year}-{s.end_year}")
    print()

    fetch_dataset(s.data_url, s.input_csv, refresh=args.refresh)
    raw = load_storm_data(s.input_csv)

    try:
        result = run_pipeline(raw, years=s.years)
    except TaxonomyConfigError as e:
        print(f"\n✗ Configuration error: {e}")
        raise

    c = result.stage_counts
    print(f"  Rows read:            {c['raw']:,}")
    print(f"  Rows in year range:   {c['in_years']:,}")
    print(f"  Rows after cleaning:  {c['valid']:,}")
    print(f"  Rows with no category (excluded): {c['unmatched']:,}")
    print(f"  Category-tagged rows: {c['expanded']:,}")

    tables = {
        "health_impact": result.health,
        "economic_impact": result.economic,
        "unmatched_event_types": result.unmatched,
    }
    for name, t in tables.items():
        save_csv(t, s.tables_dir / f"{name}.csv")
    save_excel(tables, s.output_dir / "storm_impact_report.xlsx")

    if result.health.empty:
        print("\n→ No categorized events in range; skipping charts")
    else:
        plot_health_impact(result.health, s.charts_dir / "health_impact.png", top_n=s.top_n)
        plot_economic_impact(result.economic, s.charts_dir / "economic_impact.png", top_n=s.top_n)

    print("\nMost harmful to population health:")
    print(format_table(
        result.health.head(s.top_n),
        float_cols=["fatalities_total", "injuries_total", "fatalities_mean", "injuries_mean"],
    ).to_string(index=False))
    print("\nGreatest economic consequences:")
    print(format_table(
        result.economic.head(s.top_n),
        money_cols=["property_damage_total", "crop_damage_total", "total_damage"],
        float_cols=["property_damage_mean", "crop_damage_mean"],
    ).to_string(index=False))

    print("\n✓ Report complete.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
