"""Pipeline: parse filters -> aggregate instances -> render -> select -> resolve addresses."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from .config import AppConfig
from .discovery import InstanceFetcher
from .discovery.aggregator import InstanceAggregator
from .discovery.filters import parse_filter_groups
from .exceptions import AddressUnavailable
from .presentation import Selector
from .presentation.presenter import Presenter

logger = logging.getLogger(__name__)


class InstancePicker:
    """Runs one pick: discover, let the user choose, and return the chosen addresses."""

    def __init__(self, config: AppConfig, fetcher: InstanceFetcher, selector: Selector):
        self._config = config
        self._aggregator = InstanceAggregator(fetcher, max_workers=config.aws.max_workers)
        self._selector = selector

    def run(
        self,
        regions: Sequence[str],
        raw_filters: Sequence[str] | None = None,
        extra_display_tags: Sequence[str] | None = None,
        public_ip: bool = False,
    ) -> list[str]:
        """Return the addresses of the chosen instances, empty when nothing was chosen."""
        filter_groups = parse_filter_groups(raw_filters)
        universe = self._aggregator.aggregate(regions, filter_groups)
        if not universe:
            logger.warning("No instances matched in %s", ", ".join(regions))
            return []

        presenter = Presenter(
            [*self._config.display.tags, *(extra_display_tags or ())],
            id_width=self._config.display.id_width,
        )
        presentation = presenter.present(universe)

        indices = self._selector.choose(presentation.lines)
        chosen = presentation.resolve_all(indices)

        addresses = []
        for record in chosen:
            address = record.address(public=public_ip)
            if address is None:
                raise AddressUnavailable(record.instance_id, "public" if public_ip else "private")
            addresses.append(address)
        return addresses
