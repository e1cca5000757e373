"""Instance discovery package: the fetcher Protocol the aggregator depends on."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .models import FilterGroup, InstanceRecord


@runtime_checkable
class InstanceFetcher(Protocol):
    """Protocol that every instance fetcher must satisfy."""

    def fetch(self, region: str, filters: FilterGroup | None = None) -> list[InstanceRecord]:
        """Return every instance in ``region`` matching ``filters``, across all pages."""
        ...
