"""
Analysis layer
--------------

Selections consumed by the dashboard views, CSV export and analytical
artefacts (correlation summary, scatter plot) built from emission records.
"""

from .emissions_views import (  # noqa: F401
    ANALYSIS_OUTPUT_DIR,
    DEFAULT_SELECTED_COUNTRIES,
    DEFAULT_SELECTED_YEAR,
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

__all__ = [
    "ANALYSIS_OUTPUT_DIR",
    "DEFAULT_SELECTED_COUNTRIES",
    "DEFAULT_SELECTED_YEAR",
    "EXPORT_HEADER",
    "available_countries",
    "available_years",
    "records_for_year",
    "top_emitters",
    "country_trends",
    "select_export_records",
    "export_records_csv",
    "export_filename",
    "build_correlation_summary",
    "build_gdp_vs_co2_scatter",
]
