"""
Ingestion layer
---------------

Network retrieval of the raw emissions dataset.
"""

from .owid_co2_ingestion import (  # noqa: F401
    fetch_owid_co2_csv,
)

__all__ = [
    "fetch_owid_co2_csv",
]
