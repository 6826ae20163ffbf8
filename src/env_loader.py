"""
Environment-driven configuration for the emissions pipeline.

Settings come from environment variables. For local development a `.env`
file in the working directory is read first; values already present in
os.environ always win over the file.

Recognised variables:

    OWID_CO2_URL         remote CSV with the OWID CO2 dataset
    OWID_CO2_TIMEOUT     request timeout in seconds (empty = transport default)
    EMISSIONS_MIN_YEAR   first year produced by the synthetic fallback
    EMISSIONS_MAX_YEAR   last year produced by the synthetic fallback
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

DEFAULT_OWID_CO2_URL = "https://raw.githubusercontent.com/owid/co2-data/master/owid-co2-data.csv"
DEFAULT_MIN_YEAR = 1990
DEFAULT_MAX_YEAR = 2022


def _parse_env_line(line: str) -> Optional[tuple[str, str]]:
    line = line.strip()
    if not line or line.startswith("#") or "=" not in line:
        return None
    if line.startswith("export "):
        line = line[len("export "):]
    key, value = line.split("=", 1)
    key = key.strip()
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        value = value[1:-1]
    if not key:
        return None
    return key, value


def load_dotenv_if_present(path: str | None = None) -> None:
    """
    Read KEY=VALUE pairs from a `.env` file into os.environ.

    Missing or unreadable files are ignored. Existing variables are never
    overwritten.
    """
    env_path = Path(path or ".env")
    if not env_path.exists():
        return

    try:
        text = env_path.read_text(encoding="utf-8")
    except OSError:
        return

    for raw_line in text.splitlines():
        parsed = _parse_env_line(raw_line)
        if parsed is None:
            continue
        key, value = parsed
        os.environ.setdefault(key, value)


@dataclass(frozen=True)
class PipelineSettings:
    dataset_url: str = DEFAULT_OWID_CO2_URL
    request_timeout: Optional[float] = None
    min_year: int = DEFAULT_MIN_YEAR
    max_year: int = DEFAULT_MAX_YEAR


def _read_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = (env.get(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"Environment variable {name} must be an integer, got {raw!r}") from exc


def _read_timeout(env: Mapping[str, str], name: str) -> Optional[float]:
    raw = (env.get(name) or "").strip()
    if not raw:
        return None
    try:
        timeout = float(raw)
    except ValueError as exc:
        raise ValueError(f"Environment variable {name} must be a number, got {raw!r}") from exc
    if timeout <= 0:
        raise ValueError(f"Environment variable {name} must be positive, got {raw!r}")
    return timeout


def get_settings(env: Mapping[str, str] | None = None) -> PipelineSettings:
    """
    Build PipelineSettings from the environment.

    When `env` is omitted the process environment is used, after loading a
    local `.env` if one exists.
    """
    if env is None:
        load_dotenv_if_present()
        env = os.environ

    min_year = _read_int(env, "EMISSIONS_MIN_YEAR", DEFAULT_MIN_YEAR)
    max_year = _read_int(env, "EMISSIONS_MAX_YEAR", DEFAULT_MAX_YEAR)
    if min_year > max_year:
        raise ValueError(f"EMISSIONS_MIN_YEAR ({min_year}) is greater than EMISSIONS_MAX_YEAR ({max_year})")
    if min_year < DEFAULT_MIN_YEAR or max_year > DEFAULT_MAX_YEAR:
        raise ValueError(
            f"Synthetic year span {min_year}-{max_year} must stay within "
            f"{DEFAULT_MIN_YEAR}-{DEFAULT_MAX_YEAR}"
        )

    return PipelineSettings(
        dataset_url=(env.get("OWID_CO2_URL") or "").strip() or DEFAULT_OWID_CO2_URL,
        request_timeout=_read_timeout(env, "OWID_CO2_TIMEOUT"),
        min_year=min_year,
        max_year=max_year,
    )


__all__ = [
    "DEFAULT_OWID_CO2_URL",
    "DEFAULT_MIN_YEAR",
    "DEFAULT_MAX_YEAR",
    "PipelineSettings",
    "get_settings",
    "load_dotenv_if_present",
]
