"""
Transformations layer
---------------------

Turns the raw OWID CSV text into typed `EmissionRecord`s, and produces the
synthetic dataset used when the source is unavailable.
"""

from .csv_row_parser import iter_csv_lines, parse_csv_line  # noqa: F401
from .emission_records import (  # noqa: F401
    MAX_YEAR,
    MIN_YEAR,
    EmissionCandidate,
    EmissionRecord,
    NormalizationResult,
    build_emission_records,
    build_emissions_dataframe,
    normalize_row,
    validate_candidate,
)
from .synthetic_emissions import (  # noqa: F401
    SYNTHETIC_COUNTRIES,
    generate_synthetic_emissions,
)

__all__ = [
    "MIN_YEAR",
    "MAX_YEAR",
    "SYNTHETIC_COUNTRIES",
    "EmissionCandidate",
    "EmissionRecord",
    "NormalizationResult",
    "parse_csv_line",
    "iter_csv_lines",
    "normalize_row",
    "validate_candidate",
    "build_emission_records",
    "build_emissions_dataframe",
    "generate_synthetic_emissions",
]
