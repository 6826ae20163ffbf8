"""
Synthetic fallback dataset.

Used only when the OWID CSV cannot be fetched or parsed, so the dashboard
still has something to draw. Values are randomized around approximate 2020
figures per country and follow the same `EmissionRecord` schema as the
real data. Every call draws new numbers unless a seeded generator is given.
"""

from __future__ import annotations

import math
from typing import Dict, Iterable, List, Optional

import numpy as np

from .emission_records import MAX_YEAR, MIN_YEAR, EmissionRecord

# Approximate 2020 values: CO2 (Mt), population (millions), GDP per capita (USD).
BASELINE_2020: Dict[str, Dict[str, float]] = {
    "China": {"co2": 10175, "pop": 1439, "gdp": 10500},
    "United States": {"co2": 4713, "pop": 331, "gdp": 63500},
    "India": {"co2": 2442, "pop": 1380, "gdp": 1900},
    "Russia": {"co2": 1577, "pop": 146, "gdp": 11600},
    "Japan": {"co2": 1061, "pop": 126, "gdp": 40100},
    "Germany": {"co2": 644, "pop": 83, "gdp": 46500},
    "Iran": {"co2": 633, "pop": 84, "gdp": 2900},
    "South Korea": {"co2": 571, "pop": 52, "gdp": 31800},
    "Saudi Arabia": {"co2": 517, "pop": 35, "gdp": 23000},
    "Indonesia": {"co2": 486, "pop": 274, "gdp": 3900},
    "Canada": {"co2": 481, "pop": 38, "gdp": 46300},
    "Mexico": {"co2": 441, "pop": 129, "gdp": 9700},
    "Brazil": {"co2": 419, "pop": 213, "gdp": 7500},
    "South Africa": {"co2": 390, "pop": 60, "gdp": 6000},
    "Turkey": {"co2": 353, "pop": 85, "gdp": 9100},
    "Australia": {"co2": 348, "pop": 26, "gdp": 55100},
    "United Kingdom": {"co2": 326, "pop": 67, "gdp": 42300},
    "Poland": {"co2": 282, "pop": 38, "gdp": 15200},
    "Italy": {"co2": 254, "pop": 60, "gdp": 31300},
    "France": {"co2": 249, "pop": 68, "gdp": 39000},
    "Ukraine": {"co2": 185, "pop": 44, "gdp": 3700},
    "Spain": {"co2": 184, "pop": 47, "gdp": 27000},
    "Thailand": {"co2": 183, "pop": 70, "gdp": 7200},
    "Egypt": {"co2": 181, "pop": 103, "gdp": 3000},
    "Malaysia": {"co2": 178, "pop": 33, "gdp": 11200},
    "Argentina": {"co2": 153, "pop": 45, "gdp": 8900},
    "Netherlands": {"co2": 153, "pop": 17, "gdp": 52300},
    "Kazakhstan": {"co2": 142, "pop": 19, "gdp": 9100},
    "Pakistan": {"co2": 138, "pop": 225, "gdp": 1300},
    "Vietnam": {"co2": 136, "pop": 98, "gdp": 2800},
}

SYNTHETIC_COUNTRIES = list(BASELINE_2020)

# Used for names passed explicitly that have no baseline.
DEFAULT_BASELINE = {"co2": 100, "pop": 50, "gdp": 5000}

MIN_CO2 = 1
MIN_POPULATION = 1
MIN_GDP_PER_CAPITA = 500


def _co2_growth(country: str, progress: float, rng: np.random.Generator) -> float:
    if country == "China":
        return progress ** 0.8 * 2.5 + 0.3
    if country == "United States":
        return 0.8 + progress * 0.4 + math.sin(progress * math.pi) * 0.1
    return 0.6 + progress * 0.8 + rng.random() * 0.3


def generate_synthetic_emissions(
    *,
    rng: Optional[np.random.Generator] = None,
    countries: Optional[Iterable[str]] = None,
    start_year: int = MIN_YEAR,
    end_year: int = MAX_YEAR,
) -> List[EmissionRecord]:
    """
    Build one record per (country, year) for the requested span.

    Trends: China grows fastest, the United States stays roughly flat,
    everyone else grows linearly with noise. Population and GDP per capita
    grow linearly with noise. Values are floored so every record passes the
    same constraints as real data.
    """
    if start_year > end_year:
        raise ValueError(f"start_year ({start_year}) is greater than end_year ({end_year})")
    if start_year < MIN_YEAR or end_year > MAX_YEAR:
        raise ValueError(f"Years must stay within {MIN_YEAR}-{MAX_YEAR}, got {start_year}-{end_year}")

    rng = rng if rng is not None else np.random.default_rng()
    names = list(countries) if countries is not None else SYNTHETIC_COUNTRIES
    years = list(range(start_year, end_year + 1))
    span = max(len(years) - 1, 1)

    records: List[EmissionRecord] = []
    for country in names:
        base = BASELINE_2020.get(country, DEFAULT_BASELINE)

        for index, year in enumerate(years):
            progress = index / span

            growth = _co2_growth(country, progress, rng)
            co2 = max(MIN_CO2, round(base["co2"] * growth * (0.8 + rng.random() * 0.4)))

            pop_growth = 0.7 + progress * 0.4 + rng.random() * 0.1
            population = max(MIN_POPULATION, round(base["pop"] * pop_growth))

            gdp_growth = 0.5 + progress * 0.8 + rng.random() * 0.2
            gdp_per_capita = max(MIN_GDP_PER_CAPITA, round(base["gdp"] * gdp_growth))

            records.append(
                EmissionRecord(
                    country=country,
                    year=year,
                    co2_emissions=float(co2),
                    population=float(population),
                    gdp_per_capita=float(gdp_per_capita),
                    # Mt / millions of people = tonnes per person
                    co2_per_capita=round(co2 / population, 2),
                )
            )

    return records


__all__ = [
    "BASELINE_2020",
    "SYNTHETIC_COUNTRIES",
    "generate_synthetic_emissions",
]
