from dataclasses import dataclass
from pathlib import Path

DEFAULT_DATA_URL = "https://d396qusza40orc.cloudfront.net/repdata%2Fdata%2FStormData.csv.bz2"
DEFAULT_DATA_CSV = "data/StormData.csv.bz2"
DEFAULT_OUTPUT_DIR = "outputs"
DEFAULT_START_YEAR = 2002
DEFAULT_END_YEAR = 2011
DEFAULT_TOP_N = 10

@dataclass(frozen=True)
class Settings:
    data_url: str
    input_csv: Path
    output_dir: Path
    charts_dir: Path
    tables_dir: Path
    start_year: int = DEFAULT_START_YEAR
    end_year: int = DEFAULT_END_YEAR
    top_n: int = DEFAULT_TOP_N

    @property
    def years(self):
        return (self.start_year, self.end_year)

def build_settings(
    input_csv: str,
    output_dir: str,
    data_url: str = DEFAULT_DATA_URL,
    start_year: int = DEFAULT_START_YEAR,
    end_year: int = DEFAULT_END_YEAR,
    top_n: int = DEFAULT_TOP_N,
) -> Settings:
    if start_year > end_year:
        raise ValueError(f"start_year {start_year} is after end_year {end_year}")
    if top_n < 1:
        raise ValueError(f"top_n must be positive, got {top_n}")
    out = Path(output_dir)
    return Settings(
        data_url=data_url,
        input_csv=Path(input_csv),
        output_dir=out,
        charts_dir=out / "charts",
        tables_dir=out / "tables",
        start_year=start_year,
        end_year=end_year,
        top_n=top_n,
    )
