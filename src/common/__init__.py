"""
Common helpers
--------------

Shared error taxonomy used across ingestion, transformations and the loader.
"""

from .errors import (  # noqa: F401
    EmissionsPipelineError,
    MalformedRowError,
    NetworkError,
    RejectionReason,
    TransportError,
    ValidationRejection,
)

__all__ = [
    "EmissionsPipelineError",
    "TransportError",
    "NetworkError",
    "MalformedRowError",
    "RejectionReason",
    "ValidationRejection",
]
