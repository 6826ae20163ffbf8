from __future__ import annotations

from enum import Enum


class RejectionReason(str, Enum):
    """Why a CSV row did not make it into the normalized dataset."""

    MALFORMED_ROW = "malformed_row"
    MISSING_COUNTRY = "missing_country"
    INVALID_YEAR = "invalid_year"
    YEAR_OUT_OF_RANGE = "year_out_of_range"
    NON_NUMERIC_VALUE = "non_numeric_value"
    NON_POSITIVE_VALUE = "non_positive_value"
    AGGREGATE_ROW = "aggregate_row"


class EmissionsPipelineError(Exception):
    """Base class for every error raised by the emissions pipeline."""


class TransportError(EmissionsPipelineError):
    """The remote dataset answered with a non-success HTTP status."""

    def __init__(self, status_code: int, url: str) -> None:
        super().__init__(f"Unexpected HTTP status {status_code} fetching {url}")
        self.status_code = status_code
        self.url = url


class NetworkError(EmissionsPipelineError):
    """The connection to the remote dataset could not be established."""

    def __init__(self, url: str, detail: str | None = None) -> None:
        message = f"Network failure fetching {url}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.url = url


class MalformedRowError(EmissionsPipelineError):
    """A data line carries fewer fields than the header."""

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(f"Expected at least {expected} fields, got {actual}")
        self.expected = expected
        self.actual = actual


class ValidationRejection(EmissionsPipelineError):
    """A parsed row violates one of the dataset's domain constraints."""

    def __init__(self, reason: RejectionReason, detail: str = "") -> None:
        super().__init__(f"{reason.value}: {detail}" if detail else reason.value)
        self.reason = reason
        self.detail = detail


__all__ = [
    "RejectionReason",
    "EmissionsPipelineError",
    "TransportError",
    "NetworkError",
    "MalformedRowError",
    "ValidationRejection",
]
