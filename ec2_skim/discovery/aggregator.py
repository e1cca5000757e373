"""Fetch every (region, filter group) pair and merge the results by instance id."""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait

from . import InstanceFetcher
from .models import FilterGroup, InstanceRecord

logger = logging.getLogger(__name__)


class InstanceAggregator:
    """Builds the deduplicated instance universe.

    Pairs are visited region by region, and within a region filter group by
    filter group. A later fetch overwrites an earlier record with the same
    instance id. Any fetch failure aborts the whole aggregation.
    """

    def __init__(self, fetcher: InstanceFetcher, max_workers: int = 1):
        self._fetcher = fetcher
        self._max_workers = max_workers

    def aggregate(
        self, regions: Sequence[str], filter_groups: Sequence[FilterGroup]
    ) -> dict[str, InstanceRecord]:
        start = time.monotonic()
        pairs = [(region, group) for region in regions for group in filter_groups]

        if self._max_workers > 1 and len(pairs) > 1:
            results = self._fetch_parallel(pairs)
        else:
            results = [self._fetcher.fetch(region, group) for region, group in pairs]

        universe: dict[str, InstanceRecord] = {}
        for records in results:
            for record in records:
                if not record.instance_id:
                    logger.debug("Dropping instance without an id in %s", record.region)
                    continue
                universe[record.instance_id] = record

        logger.info(
            "Aggregated %d unique instances from %d queries",
            len(universe),
            len(pairs),
            extra={
                "total_instances": len(universe),
                "elapsed_seconds": round(time.monotonic() - start, 2),
            },
        )
        return universe

    def _fetch_parallel(
        self, pairs: list[tuple[str, FilterGroup]]
    ) -> list[list[InstanceRecord]]:
        """Fetch pairs concurrently; results come back in pair order for a deterministic merge."""
        executor = ThreadPoolExecutor(max_workers=min(self._max_workers, len(pairs)))
        futures: list[Future] = [
            executor.submit(self._fetcher.fetch, region, group) for region, group in pairs
        ]
        try:
            done, _ = wait(futures, return_when=FIRST_EXCEPTION)
            for future in futures:
                if future in done and future.exception() is not None:
                    raise future.exception()
            return [future.result() for future in futures]
        finally:
            # Pending fetches are dropped once any of them has failed
            executor.shutdown(wait=True, cancel_futures=True)
