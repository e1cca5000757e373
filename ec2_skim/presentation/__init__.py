"""Presentation package: the selector Protocol the picker depends on."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable


@runtime_checkable
class Selector(Protocol):
    """Protocol for an interactive line chooser."""

    def choose(self, lines: Sequence[str]) -> list[int]:
        """Return the indices of the chosen lines in display order. Empty when cancelled."""
        ...
