"""
Normalization of OWID CO2 rows into typed emission records.

Each data line goes through three steps:

- split into fields (`csv_row_parser.parse_csv_line`);
- mapped by header name into an `EmissionCandidate`, with numeric fields
  parsed leniently (unparseable text becomes NaN instead of an error);
- validated against the dataset constraints and converted into an
  `EmissionRecord` (population in millions, GDP per capita derived from the
  raw GDP and raw population).

Rows that fail are not raised to the caller: `build_emission_records`
returns them as a tally of `RejectionReason` next to the accepted records.
"""

from __future__ import annotations

import logging
import math
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence

import pandas as pd

from common.errors import MalformedRowError, RejectionReason, ValidationRejection
from .csv_row_parser import iter_csv_lines, parse_csv_line

logger = logging.getLogger(__name__)

MIN_YEAR = 1990
MAX_YEAR = 2022

# Aggregate rows published next to the countries.
WORLD_AGGREGATE = "World"
INCOME_GROUP_MARKER = "income"

POPULATION_UNIT = 1_000_000

COUNTRY_COLUMN = "country"
YEAR_COLUMN = "year"
CO2_COLUMN = "co2"
POPULATION_COLUMN = "population"
GDP_COLUMN = "gdp"
CO2_PER_CAPITA_COLUMN = "co2_per_capita"

REQUIRED_COLUMNS = (
    COUNTRY_COLUMN,
    YEAR_COLUMN,
    CO2_COLUMN,
    POPULATION_COLUMN,
    GDP_COLUMN,
    CO2_PER_CAPITA_COLUMN,
)

RECORD_COLUMNS = [
    "country",
    "year",
    "co2_emissions",
    "population",
    "gdp_per_capita",
    "co2_per_capita",
]


@dataclass(frozen=True)
class EmissionRecord:
    """One country-year observation ready for the dashboard views."""

    country: str
    year: int
    co2_emissions: float
    population: float
    gdp_per_capita: float
    co2_per_capita: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "country": self.country,
            "year": self.year,
            "co2_emissions": self.co2_emissions,
            "population": self.population,
            "gdp_per_capita": self.gdp_per_capita,
            "co2_per_capita": self.co2_per_capita,
        }


@dataclass(frozen=True)
class EmissionCandidate:
    """
    A row mapped by header name but not yet validated.

    Numeric fields hold NaN when the source text was missing or not a
    number; `year` is None in the same situation.
    """

    country: str
    year: Optional[int]
    co2: float
    population_raw: float
    gdp_raw: float
    co2_per_capita_raw: float

    def to_record(self) -> EmissionRecord:
        """Apply unit conversions. Only meaningful for validated candidates."""
        return EmissionRecord(
            country=self.country,
            year=int(self.year),  # type: ignore[arg-type]
            co2_emissions=self.co2,
            population=self.population_raw / POPULATION_UNIT,
            gdp_per_capita=self.gdp_raw / self.population_raw,
            co2_per_capita=0.0 if math.isnan(self.co2_per_capita_raw) else self.co2_per_capita_raw,
        )


@dataclass
class NormalizationResult:
    records: List[EmissionRecord] = field(default_factory=list)
    rejections: Counter = field(default_factory=Counter)
    rows_read: int = 0

    @property
    def rejected_count(self) -> int:
        return sum(self.rejections.values())


def parse_float(text: Optional[str]) -> float:
    """Parse `text` as a finite float, NaN when it is not a number."""
    # float() and int() accept digit separators such as "1_000".
    if text is None or "_" in text:
        return math.nan
    try:
        value = float(text)
    except ValueError:
        return math.nan
    if not math.isfinite(value):
        return math.nan
    return value


def parse_year(text: Optional[str]) -> Optional[int]:
    if text is None or "_" in text:
        return None
    try:
        return int(text)
    except ValueError:
        pass
    value = parse_float(text)
    if math.isnan(value) or not value.is_integer():
        return None
    return int(value)


def normalize_row(headers: Sequence[str], values: Sequence[str]) -> EmissionCandidate:
    """
    Map one split data line onto the header and parse its fields.

    Raises MalformedRowError when the line has fewer values than there are
    headers. Missing columns or unparseable numbers never raise; they show
    up as NaN (or a None year) on the candidate.
    """
    if len(values) < len(headers):
        raise MalformedRowError(len(headers), len(values))

    row = dict(zip(headers, values))

    return EmissionCandidate(
        country=row.get(COUNTRY_COLUMN, "").strip(),
        year=parse_year(row.get(YEAR_COLUMN)),
        co2=parse_float(row.get(CO2_COLUMN)),
        population_raw=parse_float(row.get(POPULATION_COLUMN)),
        gdp_raw=parse_float(row.get(GDP_COLUMN)),
        co2_per_capita_raw=parse_float(row.get(CO2_PER_CAPITA_COLUMN)),
    )


def is_aggregate_country(country: str) -> bool:
    """True for "World" and income-group rows such as "High-income countries"."""
    return country == WORLD_AGGREGATE or INCOME_GROUP_MARKER in country


def validate_candidate(candidate: EmissionCandidate) -> None:
    """Raise ValidationRejection unless the candidate satisfies every constraint."""
    if not candidate.country:
        raise ValidationRejection(RejectionReason.MISSING_COUNTRY)

    if is_aggregate_country(candidate.country):
        raise ValidationRejection(RejectionReason.AGGREGATE_ROW, candidate.country)

    if candidate.year is None:
        raise ValidationRejection(RejectionReason.INVALID_YEAR, candidate.country)

    if not MIN_YEAR <= candidate.year <= MAX_YEAR:
        raise ValidationRejection(RejectionReason.YEAR_OUT_OF_RANGE, str(candidate.year))

    numbers = {
        CO2_COLUMN: candidate.co2,
        POPULATION_COLUMN: candidate.population_raw,
        GDP_COLUMN: candidate.gdp_raw,
    }
    for name, value in numbers.items():
        if math.isnan(value):
            raise ValidationRejection(RejectionReason.NON_NUMERIC_VALUE, name)
    for name, value in numbers.items():
        if value <= 0:
            raise ValidationRejection(RejectionReason.NON_POSITIVE_VALUE, name)


def _split_header(line: str) -> List[str]:
    headers = parse_csv_line(line.lstrip("\ufeff"))
    missing = [col for col in REQUIRED_COLUMNS if col not in headers]
    if missing:
        # Logged once per file; affected rows are counted as rejections.
        logger.warning("CSV header is missing expected columns: %s", ", ".join(missing))
    return headers


def normalize_lines(lines: Iterable[str]) -> NormalizationResult:
    """
    Turn CSV lines (header first) into validated records.

    Malformed and rejected rows are counted in the result, never raised.
    """
    result = NormalizationResult()
    headers: Optional[List[str]] = None

    for line in lines:
        if headers is None:
            headers = _split_header(line)
            continue

        result.rows_read += 1
        try:
            candidate = normalize_row(headers, parse_csv_line(line))
            validate_candidate(candidate)
        except MalformedRowError:
            result.rejections[RejectionReason.MALFORMED_ROW] += 1
            continue
        except ValidationRejection as rejection:
            result.rejections[rejection.reason] += 1
            continue

        result.records.append(candidate.to_record())

    return result


def build_emission_records(raw_csv: str) -> NormalizationResult:
    """Parse, normalize and filter the full text of the OWID CSV."""
    result = normalize_lines(iter_csv_lines(raw_csv))
    logger.info(
        "Normalized %d of %d rows (%d rejected)",
        len(result.records),
        result.rows_read,
        result.rejected_count,
    )
    return result


def build_emissions_dataframe(records: Iterable[EmissionRecord]) -> pd.DataFrame:
    """
    Tabular view of the records.

    The frame keeps the same columns (and dtypes) even when `records` is
    empty, so callers can rely on a stable schema.
    """
    rows = [record.to_dict() for record in records]
    if not rows:
        return pd.DataFrame(columns=RECORD_COLUMNS).astype(
            {
                "country": "string",
                "year": "int64",
                "co2_emissions": "float64",
                "population": "float64",
                "gdp_per_capita": "float64",
                "co2_per_capita": "float64",
            }
        )

    df = pd.DataFrame(rows, columns=RECORD_COLUMNS)
    df["country"] = df["country"].astype("string")
    df["year"] = df["year"].astype("int64")
    for col in ["co2_emissions", "population", "gdp_per_capita", "co2_per_capita"]:
        df[col] = pd.to_numeric(df[col], errors="coerce")
    return df


__all__ = [
    "MIN_YEAR",
    "MAX_YEAR",
    "REQUIRED_COLUMNS",
    "RECORD_COLUMNS",
    "EmissionRecord",
    "EmissionCandidate",
    "NormalizationResult",
    "parse_float",
    "parse_year",
    "normalize_row",
    "is_aggregate_country",
    "validate_candidate",
    "normalize_lines",
    "build_emission_records",
    "build_emissions_dataframe",
]
