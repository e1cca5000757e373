"""Render the instance universe as selector lines and map chosen lines back to records."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

from ..discovery.models import InstanceRecord
from ..exceptions import IndexOutOfRange


@dataclass(frozen=True)
class Presentation:
    """Display index table and the lines rendered from it, index for index."""

    records: tuple[InstanceRecord, ...]
    lines: tuple[str, ...]

    def __len__(self) -> int:
        return len(self.records)

    def resolve(self, index: int) -> InstanceRecord:
        """The record behind line ``index``."""
        if not 0 <= index < len(self.records):
            raise IndexOutOfRange(index, len(self.records))
        return self.records[index]

    def resolve_all(self, indices: Iterable[int]) -> list[InstanceRecord]:
        return [self.resolve(i) for i in indices]


class Presenter:
    """Formats records as ``<id padded>: tag=value tag=value``."""

    def __init__(self, display_tags: Sequence[str], id_width: int = 19):
        # dict.fromkeys keeps first-seen order while dropping repeats
        self._display_tags = tuple(dict.fromkeys(display_tags))
        self._id_width = id_width

    @property
    def display_tags(self) -> tuple[str, ...]:
        return self._display_tags

    def render_line(self, record: InstanceRecord) -> str:
        line = f"{record.instance_id or '':<{self._id_width}}: "
        pairs = [f"{tag}={record.tags[tag]}" for tag in self._display_tags if tag in record.tags]
        return line + " ".join(pairs)

    def present(self, universe: Mapping[str, InstanceRecord]) -> Presentation:
        """Snapshot the universe once; both lines and lookups use that snapshot."""
        records = tuple(universe.values())
        return Presentation(records=records, lines=tuple(self.render_line(r) for r in records))
