"""
Dataset loading lifecycle for the emissions dashboard.

`EmissionsDataLoader` owns the in-memory cache: the first load fetches the
OWID CSV, normalizes it and keeps the result for the life of the process
(or until `reset()`). When the source cannot be fetched or parsed the
loader falls back to the synthetic dataset instead of raising, and tags
the result with its provenance so views can tell the two apart.

Typical usage:

    from emissions_loader import load_emissions_data

    dataset = await load_emissions_data()
    if dataset.is_synthetic:
        ...
"""

from __future__ import annotations

import asyncio
import logging
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional, Tuple

import numpy as np
import requests

from env_loader import PipelineSettings, get_settings
from ingestion_api.owid_co2_ingestion import fetch_owid_co2_csv
from transformations import EmissionRecord, build_emission_records, generate_synthetic_emissions

logger = logging.getLogger(__name__)


class Provenance(str, Enum):
    REAL = "real"
    SYNTHETIC = "synthetic"


@dataclass(frozen=True)
class LoadedDataset:
    """Records handed to the views, plus where they came from."""

    records: Tuple[EmissionRecord, ...]
    provenance: Provenance
    rejections: Counter = field(default_factory=Counter)
    error: Optional[str] = None
    source_url: Optional[str] = None

    @property
    def is_synthetic(self) -> bool:
        return self.provenance is Provenance.SYNTHETIC

    @property
    def rejected_count(self) -> int:
        return sum(self.rejections.values())

    def __len__(self) -> int:
        return len(self.records)


class EmissionsDataLoader:
    """
    Memoizing loader for the emissions dataset.

    Concurrent `load()` calls on the same event loop share one in-flight
    load. Nothing here is thread-safe.
    """

    def __init__(
        self,
        settings: Optional[PipelineSettings] = None,
        *,
        fetcher: Optional[Callable[[str], str]] = None,
        session: Optional[requests.Session] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._fetcher = fetcher
        self._session = session
        self._rng = rng
        self._cached: Optional[LoadedDataset] = None
        self._inflight: Optional[asyncio.Task] = None
        # Bumped by reset(); loads started before it must not write the cache.
        self._generation = 0

    @property
    def is_loaded(self) -> bool:
        return self._cached is not None

    @property
    def cached(self) -> Optional[LoadedDataset]:
        return self._cached

    def reset(self) -> None:
        """Forget the cached dataset; the next load goes back to the source."""
        self._cached = None
        self._inflight = None
        self._generation += 1

    async def load(self) -> LoadedDataset:
        if self._cached is not None:
            return self._cached

        loop = asyncio.get_running_loop()
        task = self._inflight
        if task is None or task.done() or task.get_loop() is not loop:
            task = loop.create_task(self._load_uncached())
            self._inflight = task

        # One cancelled caller must not cancel the shared load.
        return await asyncio.shield(task)

    def load_sync(self) -> LoadedDataset:
        """Blocking variant of `load()` for scripts without an event loop."""
        if self._cached is not None:
            return self._cached
        return asyncio.run(self.load())

    def _fetch(self) -> str:
        url = self.settings.dataset_url
        if self._fetcher is not None:
            return self._fetcher(url)
        return fetch_owid_co2_csv(url, session=self._session, timeout=self.settings.request_timeout)

    def _synthetic(self, error: str) -> LoadedDataset:
        records = generate_synthetic_emissions(
            rng=self._rng,
            start_year=self.settings.min_year,
            end_year=self.settings.max_year,
        )
        return LoadedDataset(
            records=tuple(records),
            provenance=Provenance.SYNTHETIC,
            error=error,
            source_url=None,
        )

    async def _load_uncached(self) -> LoadedDataset:
        url = self.settings.dataset_url
        generation = self._generation
        try:
            raw_csv = await asyncio.to_thread(self._fetch)
            result = build_emission_records(raw_csv)
        except Exception as exc:  # noqa: BLE001
            # Any failure resolves to the synthetic dataset.
            logger.exception("Falling back to synthetic emissions data: %s", exc)
            dataset = self._synthetic(str(exc))
        else:
            if not result.records:
                logger.warning("No valid rows in %s (%d rejected)", url, result.rejected_count)
            dataset = LoadedDataset(
                records=tuple(result.records),
                provenance=Provenance.REAL,
                rejections=result.rejections,
                source_url=url,
            )

        logger.info(
            "Loaded %d %s emission records (%d rows rejected)",
            len(dataset),
            dataset.provenance.value,
            dataset.rejected_count,
        )
        if generation == self._generation:
            self._cached = dataset
            self._inflight = None
        return dataset


_default_loader: Optional[EmissionsDataLoader] = None


def get_default_loader() -> EmissionsDataLoader:
    global _default_loader
    if _default_loader is None:
        try:
            settings = get_settings()
        except ValueError as exc:
            logger.error("Invalid pipeline settings, using defaults: %s", exc)
            settings = PipelineSettings()
        _default_loader = EmissionsDataLoader(settings)
    return _default_loader


async def load_emissions_data() -> LoadedDataset:
    """Load (once per process) the dataset through the default loader."""
    return await get_default_loader().load()


def reset_emissions_cache() -> None:
    if _default_loader is not None:
        _default_loader.reset()


__all__ = [
    "Provenance",
    "LoadedDataset",
    "EmissionsDataLoader",
    "get_default_loader",
    "load_emissions_data",
    "reset_emissions_cache",
]
