"""Data models for instance queries and the instances they return."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

RUNNING_STATE_FILTER_NAME = "instance-state-name"


@dataclass(frozen=True)
class Filter:
    """One describe-instances predicate. ``values=None`` means no value constraint."""

    name: str
    values: tuple[str, ...] | None = None

    def to_api(self) -> dict[str, Any]:
        """Render as the ``Filters`` entry expected by EC2."""
        api: dict[str, Any] = {"Name": self.name}
        if self.values is not None:
            api["Values"] = list(self.values)
        return api


@dataclass(frozen=True)
class FilterGroup:
    """An ordered set of filters that together form one query against a region."""

    filters: tuple[Filter, ...] = ()

    def __iter__(self):
        return iter(self.filters)

    def __len__(self) -> int:
        return len(self.filters)

    def to_api(self) -> list[dict[str, Any]]:
        return [f.to_api() for f in self.filters]

    def describe(self) -> str:
        """Compact ``name=v1,v2;name2`` form, used in log output."""
        parts = []
        for f in self.filters:
            parts.append(f.name if f.values is None else f"{f.name}={','.join(f.values)}")
        return ";".join(parts)


@dataclass(frozen=True)
class InstanceRecord:
    """A single EC2 instance as returned by describe_instances."""

    instance_id: str | None
    region: str
    tags: dict[str, str] = field(default_factory=dict)
    private_ip: str | None = None
    public_ip: str | None = None
    state: str | None = None
    instance_type: str | None = None
    availability_zone: str | None = None
    launch_time: datetime | None = None

    @classmethod
    def from_api(cls, raw: dict[str, Any], region: str) -> InstanceRecord:
        """Build a record from a raw describe_instances instance dict.

        Tags lacking either a key or a value are skipped.
        """
        tags = {
            t["Key"]: t["Value"]
            for t in raw.get("Tags") or []
            if t.get("Key") is not None and t.get("Value") is not None
        }

        launch_time: datetime | None = raw.get("LaunchTime")
        if isinstance(launch_time, datetime) and launch_time.tzinfo is None:
            launch_time = launch_time.replace(tzinfo=timezone.utc)

        return cls(
            instance_id=raw.get("InstanceId") or None,
            region=region,
            tags=tags,
            private_ip=raw.get("PrivateIpAddress") or None,
            public_ip=raw.get("PublicIpAddress") or None,
            state=(raw.get("State") or {}).get("Name"),
            instance_type=raw.get("InstanceType"),
            availability_zone=(raw.get("Placement") or {}).get("AvailabilityZone") or None,
            launch_time=launch_time,
        )

    def address(self, public: bool = False) -> str | None:
        """The public or private IP address, whichever is requested."""
        return self.public_ip if public else self.private_ip
