#!/usr/bin/env python3
"""
test_pipeline.py

End-to-end tests for run_pipeline on small in-memory storm data frames.

Tests:
- Documented scenarios (TSTM WIND, summary rows, invalid units, old rows)
- Aggregate sums/means against the expanded rows
- Sort order of both tables
- Configuration errors fail before aggregation
"""

import sys
import unittest
from pathlib import Path

import pandas as pd

# Add code directory to path
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "code"))

from helpers import raw_frame, raw_row
from stormimpact import Category, TaxonomyConfigError, run_pipeline


class TestPipelineScenarios(unittest.TestCase):

    def test_tstm_wind(self):
        raw = raw_frame(raw_row("TSTM WIND", date="7/4/2005 0:00:00", fatalities=1, propdmg=5, propexp="K"))
        result = run_pipeline(raw)

        health = result.health.set_index("category")
        economic = result.economic.set_index("category")
        self.assertEqual(sorted(health.index), ["thunderstorm", "wind"])
        for cat in ("thunderstorm", "wind"):
            self.assertGreaterEqual(health.loc[cat, "fatalities_total"], 1)
            self.assertEqual(economic.loc[cat, "property_damage_total"], 5000)
        self.assertEqual(result.stage_counts["expanded"], 2)

    def test_summary_row_excluded(self):
        raw = raw_frame(raw_row("URBAN/SML STREAM FLD SUMMARY", date="3/2/2003 0:00:00", fatalities=4))
        result = run_pipeline(raw)
        self.assertTrue(result.health.empty)
        self.assertTrue(result.economic.empty)
        self.assertTrue(result.unmatched.empty)
        self.assertEqual(result.stage_counts["valid"], 0)

    def test_invalid_units_excluded(self):
        raw = raw_frame(
            raw_row("HAIL", propdmg=100, propexp="x", injuries=3),
            raw_row("HAIL", injuries=1),
        )
        result = run_pipeline(raw)
        self.assertEqual(result.health.set_index("category").loc["hail", "injuries_total"], 1)

    def test_out_of_range_year_excluded(self):
        raw = raw_frame(
            raw_row("TORNADO", date="5/3/1995 0:00:00", fatalities=40, propdmg=1, propexp="B"),
            raw_row("TORNADO", date="5/3/2008 0:00:00", fatalities=2),
        )
        result = run_pipeline(raw)
        tornado = result.health.set_index("category").loc["tornado"]
        self.assertEqual(tornado["fatalities_total"], 2)
        self.assertEqual(result.economic.set_index("category").loc["tornado", "property_damage_total"], 0)

    def test_custom_year_range(self):
        raw = raw_frame(raw_row("TORNADO", date="5/3/1995 0:00:00", fatalities=40))
        result = run_pipeline(raw, years=(1990, 1999))
        self.assertEqual(result.health.iloc[0]["fatalities_total"], 40)

    def test_all_nan_event_type_outside_years(self):
        nan = float("nan")
        raw = pd.DataFrame({
            "EVTYPE": [nan, nan],
            "BGN_DATE": ["1/1/1990 0:00:00", "7/4/1991 0:00:00"],
            "FATALITIES": [1, 0],
            "INJURIES": [0, 2],
            "PROPDMG": [0.0, 0.0],
            "PROPDMGEXP": [nan, nan],
            "CROPDMG": [0.0, 0.0],
            "CROPDMGEXP": [nan, nan],
        })
        result = run_pipeline(raw)
        self.assertTrue(result.health.empty)
        self.assertTrue(result.economic.empty)
        self.assertTrue(result.unmatched.empty)
        self.assertEqual(result.stage_counts["in_years"], 0)

    def test_all_nan_event_type_in_years(self):
        nan = float("nan")
        raw = pd.DataFrame({
            "EVTYPE": [nan],
            "BGN_DATE": ["1/1/2005 0:00:00"],
            "FATALITIES": [1],
            "INJURIES": [0],
            "PROPDMG": [0.0],
            "PROPDMGEXP": [nan],
            "CROPDMG": [0.0],
            "CROPDMGEXP": [nan],
        })
        result = run_pipeline(raw)
        self.assertTrue(result.health.empty)
        self.assertEqual(result.stage_counts["valid"], 1)
        self.assertEqual(result.stage_counts["unmatched"], 1)

    def test_input_not_modified(self):
        raw = raw_frame(raw_row(" Tstm Wind ", propdmg=5, propexp="k"))
        before = raw.copy()
        run_pipeline(raw)
        pd.testing.assert_frame_equal(raw, before)


class TestPipelineAggregation(unittest.TestCase):

    def setUp(self):
        self.raw = raw_frame(
            raw_row("TORNADO", fatalities=3, injuries=20, propdmg=2, propexp="M"),
            raw_row("TORNADO", fatalities=1, injuries=4, propdmg=500, propexp="K"),
            raw_row("EXCESSIVE HEAT", fatalities=12, injuries=30),
            raw_row("FLASH FLOOD", fatalities=2, propdmg=1.2, propexp="B", cropdmg=30, cropexp="M"),
            raw_row("DROUGHT", cropdmg=2.5, cropexp="b"),
            raw_row("THUNDERSTORM WIND/HAIL", injuries=2, propdmg=10, propexp="k", cropdmg=1, cropexp="k"),
            raw_row("SEICHE", fatalities=1),
        )
        self.result = run_pipeline(self.raw)

    def test_sums_and_means(self):
        health = self.result.health.set_index("category")
        self.assertEqual(health.loc["tornado", "count"], 2)
        self.assertEqual(health.loc["tornado", "fatalities_total"], 4)
        self.assertEqual(health.loc["tornado", "fatalities_mean"], 2)
        self.assertEqual(health.loc["tornado", "injuries_mean"], 12)

        economic = self.result.economic.set_index("category")
        self.assertEqual(economic.loc["tornado", "property_damage_total"], 2.5e6)
        self.assertEqual(economic.loc["tornado", "property_damage_mean"], 1.25e6)
        self.assertEqual(economic.loc["drought", "crop_damage_total"], 2.5e9)

    def test_multi_category_row_counted_in_each(self):
        health = self.result.health.set_index("category")
        for cat in ("thunderstorm", "wind", "hail"):
            self.assertEqual(health.loc[cat, "injuries_total"], 2)
        # counts across categories exceed the number of matched rows
        self.assertEqual(health["count"].sum(), self.result.stage_counts["expanded"])
        self.assertGreater(health["count"].sum(), self.result.stage_counts["valid"] - self.result.stage_counts["unmatched"])

    def test_unmatched_reported(self):
        self.assertEqual(self.result.unmatched["event_type"].tolist(), ["seiche"])
        self.assertEqual(self.result.stage_counts["unmatched"], 1)
        self.assertNotIn("seiche", self.result.health["category"].tolist())

    def test_sort_order(self):
        self.assertEqual(self.result.health.iloc[0]["category"], "heat")
        self.assertTrue(self.result.health["fatalities_total"].is_monotonic_decreasing)

        self.assertEqual(self.result.economic["category"].tolist()[:2], ["drought", "flood"])
        self.assertTrue(self.result.economic["total_damage"].is_monotonic_decreasing)

    def test_deterministic(self):
        again = run_pipeline(self.raw)
        pd.testing.assert_frame_equal(self.result.health, again.health)
        pd.testing.assert_frame_equal(self.result.economic, again.economic)


class TestPipelineConfigErrors(unittest.TestCase):

    def setUp(self):
        self.raw = raw_frame(raw_row("HAIL"))

    def test_bad_pattern(self):
        with self.assertRaises(TaxonomyConfigError):
            run_pipeline(self.raw, categories=[Category("hail", (("[hail",),))])

    def test_empty_taxonomy(self):
        with self.assertRaises(TaxonomyConfigError):
            run_pipeline(self.raw, categories=[])

    def test_bad_unit_table(self):
        with self.assertRaises(TaxonomyConfigError):
            run_pipeline(self.raw, units={"k": 1e3})

    def test_inverted_years(self):
        with self.assertRaises(ValueError):
            run_pipeline(self.raw, years=(2011, 2002))

    def test_config_checked_before_data(self):
        # a frame missing every column would fail projection; config fails first
        with self.assertRaises(TaxonomyConfigError):
            run_pipeline(pd.DataFrame({"X": [1]}), units={})


if __name__ == "__main__":
    unittest.main(verbosity=2)
