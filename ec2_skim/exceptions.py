"""Custom exception hierarchy for the instance picker."""


class PickerError(Exception):
    """Base exception for all picker errors."""


class ConfigError(PickerError):
    """Invalid or missing configuration."""


class InvalidRegion(PickerError):
    """The region name cannot be resolved to an EC2 endpoint."""

    def __init__(self, region: str, message: str | None = None):
        super().__init__(message or f"Invalid region name: {region!r}")
        self.region = region


class QueryFailed(PickerError):
    """A describe-instances page request failed."""

    def __init__(self, region: str, detail: str, error_code: str | None = None):
        super().__init__(f"Instance query failed in {region}: {detail}")
        self.region = region
        self.detail = detail
        self.error_code = error_code


class IndexOutOfRange(PickerError, IndexError):
    """The selector returned a line index that was never displayed."""

    def __init__(self, index: int, size: int):
        super().__init__(f"Selection index {index} outside display table of {size} entries")
        self.index = index
        self.size = size


class AddressUnavailable(PickerError):
    """The chosen instance has no address of the requested kind."""

    def __init__(self, instance_id: str, kind: str):
        super().__init__(f"Instance {instance_id} has no {kind} IP address")
        self.instance_id = instance_id
        self.kind = kind
