"""Shared fixtures for the storm impact tests."""

import pandas as pd


def raw_row(evtype, date="4/18/2005 0:00:00", fatalities=0, injuries=0,
            propdmg=0, propexp="", cropdmg=0, cropexp=""):
    return {
        "STATE": "AL",
        "EVTYPE": evtype,
        "BGN_DATE": date,
        "FATALITIES": fatalities,
        "INJURIES": injuries,
        "PROPDMG": propdmg,
        "PROPDMGEXP": propexp,
        "CROPDMG": cropdmg,
        "CROPDMGEXP": cropexp,
        "REMARKS": "",
    }


def raw_frame(*rows):
    return pd.DataFrame(list(rows))
