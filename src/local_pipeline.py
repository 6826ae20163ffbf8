"""
Local entrypoint for the CO2 emissions dataset pipeline.

Runs, in order:

1. Dataset load (OWID CSV, or the synthetic fallback when unavailable)
2. Top emitters for the selected year
3. Trend summary for the selected countries
4. Optional CSV export of the current selection
5. Optional correlation summary and scatter plot

Intended usage (local):

    PYTHONPATH=src python -m local_pipeline --year 2020 --export out/co2_2020.csv
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from analysis import (
    DEFAULT_SELECTED_COUNTRIES,
    DEFAULT_SELECTED_YEAR,
    build_correlation_summary,
    build_gdp_vs_co2_scatter,
    country_trends,
    export_records_csv,
    top_emitters,
)
from emissions_loader import EmissionsDataLoader, LoadedDataset
from env_loader import get_settings


async def run_local_pipeline(
    *,
    year: int = DEFAULT_SELECTED_YEAR,
    countries: Sequence[str] = DEFAULT_SELECTED_COUNTRIES,
    top_n: int = 15,
    export_path: Optional[Path] = None,
    analysis_dir: Optional[Path] = None,
    loader: Optional[EmissionsDataLoader] = None,
) -> Dict[str, List[Path]]:
    """
    Run the pipeline end-to-end and print a short report.

    Returns a mapping of step name to generated files (empty lists when a
    step wrote nothing).
    """
    artefacts: Dict[str, List[Path]] = {"export": [], "analysis": []}
    loader = loader or EmissionsDataLoader(get_settings())

    print("[1/5] Loading emissions dataset...")
    dataset: LoadedDataset = await loader.load()
    print(f"      {len(dataset)} records ({dataset.provenance.value})")
    if dataset.is_synthetic:
        print(f"      Source unavailable, using synthetic data: {dataset.error}")
    for reason, count in sorted(dataset.rejections.items(), key=lambda item: item[0].value):
        print(f"      rejected {reason.value}: {count}")

    print(f"[2/5] Top {top_n} emitters in {year}...")
    for rank, record in enumerate(top_emitters(dataset.records, year, top_n), start=1):
        print(f"      {rank:>2}. {record.country}: {record.co2_emissions:,.1f} Mt")

    print("[3/5] Trends for selected countries...")
    for country, series in country_trends(dataset.records, countries).items():
        first, last = series[0], series[-1]
        print(
            f"      {country}: {first.year} {first.co2_emissions:,.1f} Mt -> "
            f"{last.year} {last.co2_emissions:,.1f} Mt"
        )

    if export_path is not None:
        print(f"[4/5] Exporting selection to {export_path}...")
        export_path.parent.mkdir(parents=True, exist_ok=True)
        export_path.write_text(
            export_records_csv(dataset.records, year=year, countries=countries),
            encoding="utf-8",
        )
        artefacts["export"].append(export_path)
    else:
        print("[4/5] Export skipped.")

    if analysis_dir is not None:
        print(f"[5/5] Writing analytical outputs to {analysis_dir}...")
        analysis_dir.mkdir(parents=True, exist_ok=True)
        summary_path = analysis_dir / "correlation_summary.csv"
        build_correlation_summary(dataset.records, [year]).to_csv(summary_path, index=False)
        artefacts["analysis"].append(summary_path)
        try:
            scatter_path = build_gdp_vs_co2_scatter(dataset.records, year, output_dir=analysis_dir)
        except RuntimeError as exc:
            print(f"      Scatter plot skipped: {exc}")
        else:
            artefacts["analysis"].append(scatter_path)
    else:
        print("[5/5] Analytical outputs skipped.")

    print("\nPipeline completed successfully.")
    return artefacts


def _split_countries(value: str) -> List[str]:
    return [name.strip() for name in value.split(",") if name.strip()]


def main(argv: Optional[Sequence[str]] = None) -> None:
    import argparse

    parser = argparse.ArgumentParser(
        description="Load the CO2 emissions dataset and print the dashboard selections.",
    )
    parser.add_argument(
        "--year",
        type=int,
        default=DEFAULT_SELECTED_YEAR,
        help="Selected year for the top emitters and export (default: 2020).",
    )
    parser.add_argument(
        "--countries",
        type=_split_countries,
        default=list(DEFAULT_SELECTED_COUNTRIES),
        help="Comma-separated countries for the trend summary.",
    )
    parser.add_argument(
        "--top",
        type=int,
        default=15,
        help="How many emitters to list (default: 15).",
    )
    parser.add_argument(
        "--export",
        type=Path,
        default=None,
        help="Write the CSV export of the current selection to this path.",
    )
    parser.add_argument(
        "--analysis-dir",
        type=Path,
        default=None,
        help="Directory for the correlation summary and scatter plot.",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    asyncio.run(
        run_local_pipeline(
            year=args.year,
            countries=args.countries,
            top_n=args.top,
            export_path=args.export,
            analysis_dir=args.analysis_dir,
        )
    )


if __name__ == "__main__":
    main()


__all__ = ["run_local_pipeline", "main"]
