import pandas as pd

HEALTH_MEASURES = ["fatalities", "injuries"]
ECONOMIC_MEASURES = ["property_damage", "crop_damage"]


def category_stats(df, measures):
    g = df.astype({m: float for m in measures}).groupby("category", sort=True)[measures]
    totals = g.sum().add_suffix("_total")
    means = g.mean().add_suffix("_mean")
    out = pd.concat([g.size().rename("count"), totals, means], axis=1)
    return out.rename_axis("category").reset_index()


def _rank(df, key):
    # category name is already ascending from groupby; mergesort keeps it for ties
    return df.sort_values(key, ascending=False, kind="mergesort").reset_index(drop=True)


def health_impact(df):
    out = category_stats(df, HEALTH_MEASURES)
    return _rank(out, "fatalities_total")


def economic_impact(df):
    out = category_stats(df, ECONOMIC_MEASURES)
    out["total_damage"] = out["property_damage_total"] + out["crop_damage_total"]
    return _rank(out, "total_damage")
