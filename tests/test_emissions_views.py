import math

import numpy as np
import pytest

from analysis.emissions_views import (
    EXPORT_HEADER,
    available_countries,
    available_years,
    build_correlation_summary,
    build_gdp_vs_co2_scatter,
    country_trends,
    export_filename,
    export_records_csv,
    records_for_year,
    select_export_records,
    top_emitters,
)
from transformations import EmissionRecord, generate_synthetic_emissions


def _record(country, year, co2, population=10.0, gdp=1000.0, co2_per_capita=1.0):
    return EmissionRecord(country, year, co2, population, gdp, co2_per_capita)


RECORDS = [
    _record("China", 2020, 10175.0, 1439.0, 10500.0, 7.1),
    _record("United States", 2020, 4713.0, 331.0, 63500.0, 14.2),
    _record("India", 2020, 2442.0, 1380.0, 1900.0, 1.8),
    _record("China", 2019, 10000.0, 1430.0, 10200.0, 7.0),
    _record("Bonaire, Sint Eustatius and Saba", 2019, 0.3, 0.021, 23809.5, 14.3),
]


def test_available_years_descending():
    assert available_years(RECORDS) == [2020, 2019]


def test_available_countries_sorted():
    assert available_countries(RECORDS) == [
        "Bonaire, Sint Eustatius and Saba",
        "China",
        "India",
        "United States",
    ]


def test_records_for_year():
    assert [r.country for r in records_for_year(RECORDS, 2019)] == ["China", "Bonaire, Sint Eustatius and Saba"]


def test_top_emitters_sorted_and_limited():
    top = top_emitters(RECORDS, 2020, limit=2)
    assert [r.country for r in top] == ["China", "United States"]
    assert top_emitters(RECORDS, 2020, limit=0) == []
    assert top_emitters(RECORDS, 1995) == []


def test_country_trends_are_year_sorted():
    trends = country_trends(RECORDS, ["China", "Narnia"])
    assert list(trends) == ["China"]
    assert [r.year for r in trends["China"]] == [2019, 2020]


def test_export_selection_is_year_or_country():
    selected = select_export_records(RECORDS, year=2019, countries=["India"])
    assert [(r.country, r.year) for r in selected] == [
        ("India", 2020),
        ("China", 2019),
        ("Bonaire, Sint Eustatius and Saba", 2019),
    ]


def test_export_without_selection_keeps_everything():
    assert select_export_records(RECORDS) == RECORDS


def test_export_csv_text():
    text = export_records_csv(RECORDS, year=2019)
    lines = text.splitlines()

    assert lines[0] == ",".join(EXPORT_HEADER)
    assert lines[1] == "China,2019,10000,1430,10200"
    assert lines[2] == '"Bonaire, Sint Eustatius and Saba",2019,0.3,0.021,23809.5'
    assert len(lines) == 3


def test_export_filename():
    assert export_filename(2020) == "co2_emissions_2020.csv"


def test_correlation_summary_rows_per_year():
    records = generate_synthetic_emissions(rng=np.random.default_rng(5))
    summary = build_correlation_summary(records, [1990, 2020, 1800])

    assert list(summary["year"]) == [1990, 2020, 1800]
    assert list(summary["n_countries"]) == [30, 30, 0]
    assert -1.0 <= summary.loc[1, "pearson_correlation_gdp_co2"] <= 1.0
    assert math.isnan(summary.loc[2, "pearson_correlation_gdp_co2"])
    assert summary.loc[1, "top5_emitters"].count(";") == 4
    assert summary.loc[2, "top5_emitters"] == ""


def test_scatter_png_is_written(tmp_path):
    path = build_gdp_vs_co2_scatter(RECORDS, 2020, output_dir=tmp_path)
    assert path == tmp_path / "gdp_vs_co2_scatter_2020.png"
    assert path.stat().st_size > 0


def test_scatter_without_data_raises(tmp_path):
    with pytest.raises(RuntimeError):
        build_gdp_vs_co2_scatter(RECORDS, 1995, output_dir=tmp_path)
