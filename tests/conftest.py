from __future__ import annotations

from typing import List, Optional

import pytest
import requests

HEADER = "iso_code,country,year,co2,co2_per_capita,gdp,population"

SAMPLE_CSV = "\n".join(
    [
        HEADER,
        "TST,Testland,2005,100.5,20.1,250000000000,5000000",
        "CHN,China,2020,10175,7.1,15000000000000,1439000000",
        "OWID_WRL,World,2020,35000,4.5,130000000000000,7800000000",
        "OWID_HIC,High-income countries,2020,11000,9.8,60000000000000,1200000000",
        "BES,\"Bonaire, Sint Eustatius and Saba\",2010,0.3,,500000000,21000",
        "FRA,France,1989,380,6.5,2000000000000,56000000",
        "FRA,France,2023,300,4.6,3000000000000,68000000",
        "FRA,France,2022,305,,2900000000000,68000000",
        "DEU,Germany,2020,0,7.7,4000000000000,83000000",
        "ITA,Italy,2020,300,5.0,n/a,60000000",
        "ESP,Spain,2020",
    ]
)


class FakeResponse:
    def __init__(self, status_code: int = 200, text: str = "") -> None:
        self.status_code = status_code
        self.encoding: Optional[str] = None
        self.text = text


class FakeSession:
    """Stands in for requests.Session; records every GET."""

    def __init__(self, response: Optional[FakeResponse] = None, exc: Optional[Exception] = None) -> None:
        self.response = response
        self.exc = exc
        self.calls: List[str] = []

    def get(self, url, headers=None, timeout=None):
        self.calls.append(url)
        if self.exc is not None:
            raise self.exc
        return self.response


@pytest.fixture
def sample_csv() -> str:
    return SAMPLE_CSV


@pytest.fixture
def ok_session(sample_csv) -> FakeSession:
    return FakeSession(FakeResponse(200, sample_csv))


@pytest.fixture
def failing_session() -> FakeSession:
    return FakeSession(FakeResponse(503, "Service Unavailable"))


@pytest.fixture
def offline_session() -> FakeSession:
    return FakeSession(exc=requests.exceptions.ConnectionError("connection refused"))
