import pandas as pd


def save_csv(df, path):
    df.to_csv(path, index=False)

def save_excel(tables, path):
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        for name, df in tables.items():
            df.to_excel(writer, sheet_name=name[:31], index=False)

def format_table(df, money_cols=(), float_cols=()):
    """Printable copy of a report table: money in $ millions, other floats to 2dp."""
    out = df.copy()
    for col in money_cols:
        out[col] = out[col].map(lambda v: f"${v / 1e6:,.1f}M")
    for col in float_cols:
        out[col] = out[col].map(lambda v: f"{v:,.2f}")
    return out
