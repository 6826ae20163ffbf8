"""
RAW retrieval of the Our World in Data CO2 dataset.

A single GET against the published CSV. The response body is returned as
text; parsing and normalization live in `transformations`. Nothing is
cached here and nothing is retried: the loader decides what to do when the
source is unavailable.
"""

from __future__ import annotations

import logging
from typing import Optional

import requests

from common.errors import NetworkError, TransportError
from env_loader import DEFAULT_OWID_CO2_URL

logger = logging.getLogger(__name__)

USER_AGENT = "co2-emissions-pipeline/0.1"


def fetch_owid_co2_csv(
    url: str = DEFAULT_OWID_CO2_URL,
    *,
    session: Optional[requests.Session] = None,
    timeout: Optional[float] = None,
) -> str:
    """
    Download the CSV at `url` and return its body decoded as UTF-8.

    Raises
    ------
    TransportError
        The server answered with a status outside 2xx.
    NetworkError
        The request never produced a response (DNS, refused connection,
        timeout, broken stream).
    """
    http = session or requests
    logger.info("Fetching %s", url)
    try:
        response = http.get(url, headers={"User-Agent": USER_AGENT}, timeout=timeout)
    except requests.exceptions.RequestException as exc:
        raise NetworkError(url, str(exc)) from exc

    if not 200 <= response.status_code < 300:
        raise TransportError(response.status_code, url)

    response.encoding = "utf-8"
    text = response.text
    logger.info("Fetched %d characters from %s", len(text), url)
    return text


__all__ = [
    "USER_AGENT",
    "fetch_owid_co2_csv",
]
