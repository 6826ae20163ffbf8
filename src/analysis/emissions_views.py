"""
Dashboard-facing selections and analytical outputs over emission records.

The chart views only ever ask for a handful of slices of the dataset:

- one year, for the bar chart, scatter plot and map (`records_for_year`,
  `top_emitters`);
- a set of countries across every year, for the trend lines
  (`country_trends`);
- the union of both, re-serialized as CSV for the export button
  (`export_records_csv`).

On top of those, two artefacts computed with pandas/matplotlib:

- `build_correlation_summary`: one row per year with the Pearson
  correlation between GDP per capita and CO2 per capita and the top
  emitters;
- `build_gdp_vs_co2_scatter`: PNG scatter of GDP per capita (log scale)
  against total CO2, bubble area following population.
"""

from __future__ import annotations

import csv
import io
import logging
from collections import defaultdict
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from transformations import EmissionRecord, build_emissions_dataframe

logger = logging.getLogger(__name__)

DEFAULT_SELECTED_YEAR = 2020
DEFAULT_SELECTED_COUNTRIES = ("United States", "China", "India", "Russia")
TOP_EMITTERS_LIMIT = 15

EXPORT_HEADER = ["Country", "Year", "CO2_Emissions", "Population", "GDP_Per_Capita"]

ANALYSIS_OUTPUT_DIR = Path("analysis")
SCATTER_PNG_NAME = "gdp_vs_co2_scatter_{year}.png"


def available_years(records: Iterable[EmissionRecord]) -> List[int]:
    """Distinct years, most recent first (order of the year selector)."""
    return sorted({record.year for record in records}, reverse=True)


def available_countries(records: Iterable[EmissionRecord]) -> List[str]:
    return sorted({record.country for record in records})


def records_for_year(records: Iterable[EmissionRecord], year: int) -> List[EmissionRecord]:
    return [record for record in records if record.year == year]


def top_emitters(
    records: Iterable[EmissionRecord],
    year: int,
    limit: int = TOP_EMITTERS_LIMIT,
) -> List[EmissionRecord]:
    """Records of `year` sorted by total CO2, largest first, capped at `limit`."""
    if limit <= 0:
        return []
    year_records = records_for_year(records, year)
    year_records.sort(key=lambda record: record.co2_emissions, reverse=True)
    return year_records[:limit]


def country_trends(
    records: Iterable[EmissionRecord],
    countries: Iterable[str],
) -> Dict[str, List[EmissionRecord]]:
    """
    Year-ordered series per selected country.

    Countries without data are left out of the result; duplicate
    country-years are kept as they come.
    """
    wanted = set(countries)
    series: Dict[str, List[EmissionRecord]] = defaultdict(list)
    for record in records:
        if record.country in wanted:
            series[record.country].append(record)
    return {country: sorted(rows, key=lambda r: r.year) for country, rows in series.items()}


def select_export_records(
    records: Iterable[EmissionRecord],
    *,
    year: Optional[int] = None,
    countries: Sequence[str] = (),
) -> List[EmissionRecord]:
    """
    Records matching the current dashboard selection.

    A record is kept when it belongs to the selected year OR to one of the
    selected countries. With no selection at all every record is kept.
    """
    if year is None and not countries:
        return list(records)
    wanted = set(countries)
    return [record for record in records if record.year == year or record.country in wanted]


def _format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def export_records_csv(
    records: Iterable[EmissionRecord],
    *,
    year: Optional[int] = None,
    countries: Sequence[str] = (),
) -> str:
    """
    CSV text for the export button.

    Columns: Country, Year, CO2_Emissions, Population, GDP_Per_Capita.
    Country names containing commas are quoted.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(EXPORT_HEADER)
    for record in select_export_records(records, year=year, countries=countries):
        writer.writerow(
            [
                record.country,
                record.year,
                _format_number(record.co2_emissions),
                _format_number(record.population),
                _format_number(record.gdp_per_capita),
            ]
        )
    return buffer.getvalue()


def export_filename(year: int) -> str:
    return f"co2_emissions_{year}.csv"


def _format_top_emitters(df_year: pd.DataFrame, n: int = 5) -> str:
    df_sorted = df_year.sort_values(by="co2_emissions", ascending=False).head(n)
    return ";".join(
        f"{name}: {value:.1f}"
        for name, value in zip(
            df_sorted["country"].astype(str).tolist(),
            df_sorted["co2_emissions"].astype(float).tolist(),
        )
    )


def build_correlation_summary(
    records: Iterable[EmissionRecord],
    years: Sequence[int],
) -> pd.DataFrame:
    """
    One row per requested year.

    Columns: year, n_countries, pearson_correlation_gdp_co2 (GDP per capita
    against CO2 per capita; NaN when fewer than two countries have data),
    top5_emitters ("Country: Mt" joined by ";").
    """
    df_all = build_emissions_dataframe(records)
    rows = []
    for year in years:
        df_year = df_all[(df_all["year"] == year) & (df_all["co2_per_capita"] > 0)]
        corr = float("nan")
        if len(df_year) >= 2:
            corr = df_year["gdp_per_capita"].corr(df_year["co2_per_capita"], method="pearson")

        rows.append(
            {
                "year": year,
                "n_countries": int(df_year["country"].nunique()),
                "pearson_correlation_gdp_co2": corr,
                "top5_emitters": _format_top_emitters(df_all[df_all["year"] == year]),
            }
        )

    return pd.DataFrame(
        rows,
        columns=["year", "n_countries", "pearson_correlation_gdp_co2", "top5_emitters"],
    )


def build_gdp_vs_co2_scatter(
    records: Iterable[EmissionRecord],
    year: int = DEFAULT_SELECTED_YEAR,
    *,
    output_dir: Path | str = ANALYSIS_OUTPUT_DIR,
    annotate_top_n: int = 5,
) -> Path:
    """
    Save the GDP per capita vs CO2 scatter for `year` as a PNG.

    X: gdp_per_capita (log scale)
    Y: co2_emissions
    Size: population
    """
    df = build_emissions_dataframe(records_for_year(records, year))
    if df.empty:
        raise RuntimeError(f"No emission records available for year={year}")

    x = df["gdp_per_capita"].to_numpy()
    y = df["co2_emissions"].to_numpy()
    population = df["population"].to_numpy()
    # Bubble area grows with sqrt(population), between 3 and 30 points of radius.
    radius = 3 + 27 * np.sqrt(population / population.max())

    fig, ax = plt.subplots(figsize=(10, 6))
    scatter = ax.scatter(
        x,
        y,
        s=radius ** 2,
        c=y,
        cmap="RdYlBu_r",
        alpha=0.7,
        edgecolors="white",
        linewidths=0.5,
    )
    fig.colorbar(scatter, ax=ax, label="CO2 emissions (Mt)")
    ax.set_xscale("log")
    ax.set_xlabel("GDP per capita (USD, log scale)")
    ax.set_ylabel("CO2 emissions (Mt)")
    ax.set_title(f"CO2 emissions vs GDP per capita - {year}")
    ax.grid(True, linestyle="--", alpha=0.3)

    if annotate_top_n > 0:
        for i in np.argsort(-y)[:annotate_top_n]:
            ax.annotate(
                str(df.iloc[i]["country"]),
                (x[i], y[i]),
                textcoords="offset points",
                xytext=(5, 5),
                fontsize=8,
                alpha=0.8,
            )

    fig.tight_layout()

    output_root = Path(output_dir)
    output_root.mkdir(parents=True, exist_ok=True)
    output_path = output_root / SCATTER_PNG_NAME.format(year=year)
    fig.savefig(output_path, dpi=150)
    plt.close(fig)
    logger.info("Wrote scatter plot to %s", output_path)
    return output_path


__all__ = [
    "DEFAULT_SELECTED_YEAR",
    "DEFAULT_SELECTED_COUNTRIES",
    "TOP_EMITTERS_LIMIT",
    "EXPORT_HEADER",
    "ANALYSIS_OUTPUT_DIR",
    "available_years",
    "available_countries",
    "records_for_year",
    "top_emitters",
    "country_trends",
    "select_export_records",
    "export_records_csv",
    "export_filename",
    "build_correlation_summary",
    "build_gdp_vs_co2_scatter",
]
