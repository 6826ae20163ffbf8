import os

import pytest

from env_loader import (
    DEFAULT_OWID_CO2_URL,
    PipelineSettings,
    get_settings,
    load_dotenv_if_present,
)


def test_defaults_from_empty_environment():
    assert get_settings({}) == PipelineSettings()
    assert get_settings({}).dataset_url == DEFAULT_OWID_CO2_URL


def test_values_are_read_from_environment():
    settings = get_settings(
        {
            "OWID_CO2_URL": "https://mirror.test/co2.csv",
            "OWID_CO2_TIMEOUT": "12.5",
            "EMISSIONS_MIN_YEAR": "2000",
            "EMISSIONS_MAX_YEAR": "2010",
        }
    )
    assert settings.dataset_url == "https://mirror.test/co2.csv"
    assert settings.request_timeout == 12.5
    assert (settings.min_year, settings.max_year) == (2000, 2010)


@pytest.mark.parametrize(
    "env",
    [
        {"OWID_CO2_TIMEOUT": "soon"},
        {"OWID_CO2_TIMEOUT": "0"},
        {"EMISSIONS_MIN_YEAR": "nineteen"},
        {"EMISSIONS_MIN_YEAR": "2010", "EMISSIONS_MAX_YEAR": "2000"},
        {"EMISSIONS_MAX_YEAR": "2030"},
    ],
)
def test_invalid_values_raise(env):
    with pytest.raises(ValueError):
        get_settings(env)


def test_dotenv_does_not_override_existing(tmp_path, monkeypatch):
    env_file = tmp_path / ".env"
    env_file.write_text(
        "# comment\n"
        "CO2_TEST_NEW='from file'\n"
        "export CO2_TEST_EXPORTED=yes\n"
        "CO2_TEST_EXISTING=from file\n"
        "not a pair\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("CO2_TEST_EXISTING", "from env")
    monkeypatch.delenv("CO2_TEST_NEW", raising=False)
    monkeypatch.delenv("CO2_TEST_EXPORTED", raising=False)

    load_dotenv_if_present(str(env_file))

    assert os.environ["CO2_TEST_NEW"] == "from file"
    assert os.environ["CO2_TEST_EXPORTED"] == "yes"
    assert os.environ["CO2_TEST_EXISTING"] == "from env"
    monkeypatch.delenv("CO2_TEST_NEW")
    monkeypatch.delenv("CO2_TEST_EXPORTED")


def test_missing_dotenv_is_ignored(tmp_path):
    load_dotenv_if_present(str(tmp_path / "missing.env"))
