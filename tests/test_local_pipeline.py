import asyncio

import numpy as np

from emissions_loader import EmissionsDataLoader
from env_loader import PipelineSettings
from local_pipeline import run_local_pipeline

SETTINGS = PipelineSettings(dataset_url="https://example.test/owid-co2-data.csv")


def test_pipeline_reports_and_writes_artefacts(tmp_path, ok_session, capsys):
    loader = EmissionsDataLoader(SETTINGS, session=ok_session)
    export_path = tmp_path / "out" / "co2_emissions_2020.csv"

    artefacts = asyncio.run(
        run_local_pipeline(
            year=2020,
            countries=["Testland"],
            export_path=export_path,
            analysis_dir=tmp_path / "analysis",
            loader=loader,
        )
    )

    out = capsys.readouterr().out
    assert "4 records (real)" in out
    assert "rejected aggregate_row: 2" in out
    assert "1. China" in out

    assert artefacts["export"] == [export_path]
    lines = export_path.read_text(encoding="utf-8").splitlines()
    assert lines[1] == "Testland,2005,100.5,5,50000"
    assert lines[2].startswith("China,2020,10175,1439,10423.9")
    assert len(lines) == 3
    assert len(artefacts["analysis"]) == 2
    assert all(p.exists() for p in artefacts["analysis"])


def test_pipeline_with_unreachable_source(failing_session, capsys):
    loader = EmissionsDataLoader(SETTINGS, session=failing_session, rng=np.random.default_rng(0))

    artefacts = asyncio.run(run_local_pipeline(loader=loader))

    out = capsys.readouterr().out
    assert "(synthetic)" in out
    assert "Export skipped." in out
    assert artefacts == {"export": [], "analysis": []}


def test_analysis_for_year_without_records_is_skipped(tmp_path, ok_session, capsys):
    loader = EmissionsDataLoader(SETTINGS, session=ok_session)

    artefacts = asyncio.run(
        run_local_pipeline(year=2021, analysis_dir=tmp_path, loader=loader)
    )

    out = capsys.readouterr().out
    assert "Scatter plot skipped: No emission records available for year=2021" in out
    assert "Pipeline completed successfully." in out
    assert artefacts["analysis"] == [tmp_path / "correlation_summary.csv"]
    assert not (tmp_path / "gdp_vs_co2_scatter_2021.png").exists()
