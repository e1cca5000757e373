"""AWS boto3 client that lists EC2 instances for one region and filter group."""

from __future__ import annotations

import logging
import threading
from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError, InvalidRegionError, ProfileNotFound

from ..config import AWSConfig
from ..exceptions import ConfigError, InvalidRegion, QueryFailed
from .models import FilterGroup, InstanceRecord

logger = logging.getLogger(__name__)


class EC2InstanceFetcher:
    """Runs paginated describe_instances queries, one boto3 client per region."""

    def __init__(self, aws_config: AWSConfig):
        self._config = aws_config

        session_kwargs: dict[str, Any] = {}
        if aws_config.credential_profile:
            session_kwargs["profile_name"] = aws_config.credential_profile

        try:
            self._session = boto3.Session(**session_kwargs)
        except ProfileNotFound as exc:
            raise ConfigError(str(exc)) from exc
        self._client_config = Config(
            connect_timeout=aws_config.connect_timeout_seconds,
            read_timeout=aws_config.read_timeout_seconds,
            retries={"max_attempts": aws_config.max_attempts, "mode": "standard"},
        )
        self._clients: dict[str, Any] = {}
        self._known_regions: set[str] | None = None
        self._lock = threading.Lock()

    def fetch(self, region: str, filters: FilterGroup | None = None) -> list[InstanceRecord]:
        """Return every instance matching ``filters`` in ``region``.

        Follows ``NextToken`` until EC2 stops returning one, flattening the
        reservation/instance nesting in page order.
        """
        client = self._client_for(region)
        request: dict[str, Any] = {"MaxResults": self._config.page_size}
        if filters is not None:
            request["Filters"] = filters.to_api()

        instances: list[InstanceRecord] = []
        pages = 0
        while True:
            if pages >= self._config.max_pages:
                raise QueryFailed(
                    region, f"pagination did not finish after {self._config.max_pages} pages"
                )
            response = self._describe_page(client, region, request)
            pages += 1

            page_instances = [
                InstanceRecord.from_api(raw, region)
                for reservation in response.get("Reservations") or []
                for raw in reservation.get("Instances") or []
            ]
            instances.extend(page_instances)
            logger.debug("Page %d in %s returned %d instances", pages, region, len(page_instances))

            next_token = response.get("NextToken")
            if not next_token:
                break
            request["NextToken"] = next_token

        logger.info(
            "Fetched %d instances from %s",
            len(instances),
            region,
            extra={
                "region": region,
                "filter_group": filters.describe() if filters is not None else None,
                "pages": pages,
                "instances": len(instances),
            },
        )
        return instances

    def _describe_page(self, client: Any, region: str, request: dict[str, Any]) -> dict[str, Any]:
        try:
            return client.describe_instances(**request)
        except ClientError as exc:
            error = exc.response.get("Error", {})
            raise QueryFailed(
                region, error.get("Message") or str(exc), error_code=error.get("Code")
            ) from exc
        except BotoCoreError as exc:
            raise QueryFailed(region, str(exc)) from exc

    # ── Region resolution ─────────────────────────────────────────────

    def _client_for(self, region: str) -> Any:
        """Return the cached EC2 client for ``region``, creating it on first use."""
        with self._lock:
            client = self._clients.get(region)
            if client is not None:
                return client

            if region not in self._available_regions():
                raise InvalidRegion(region)
            try:
                client = self._session.client("ec2", region_name=region, config=self._client_config)
            except InvalidRegionError as exc:
                raise InvalidRegion(region) from exc

            self._clients[region] = client
            return client

    def _available_regions(self) -> set[str]:
        """All EC2 region names botocore knows, across every partition."""
        if self._known_regions is None:
            regions: set[str] = set()
            for partition in self._session.get_available_partitions():
                regions.update(self._session.get_available_regions("ec2", partition_name=partition))
            self._known_regions = regions
        return self._known_regions
