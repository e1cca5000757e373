"""Interactive fuzzy chooser built on questionary."""

from __future__ import annotations

import logging
from collections.abc import Sequence

import questionary
from questionary import Choice, Style

logger = logging.getLogger(__name__)

CUSTOM_STYLE = Style(
    [
        ("qmark", "fg:#5f87ff bold"),
        ("question", "bold"),
        ("answer", "fg:#00d787 bold"),
        ("pointer", "fg:#00d787 bold"),
        ("highlighted", "fg:#00d787 bold"),
        ("selected", "fg:#00d787"),
        ("instruction", "fg:#858585"),
    ]
)


class QuestionarySelector:
    """Presents lines in a searchable list; type to filter, Enter to choose."""

    def __init__(self, multi: bool = False, message: str = "Select an instance"):
        self._multi = multi
        self._message = message

    def choose(self, lines: Sequence[str]) -> list[int]:
        if not lines:
            logger.info("Nothing to choose from")
            return []

        choices = [Choice(title=line, value=index) for index, line in enumerate(lines)]

        if self._multi:
            answer = questionary.checkbox(
                self._message,
                choices=choices,
                style=CUSTOM_STYLE,
                use_search_filter=True,
                use_jk_keys=False,
                instruction="(type to filter, Space to mark, Enter to confirm)",
            ).ask()
            selected = sorted(answer) if answer else []
        else:
            answer = questionary.select(
                self._message,
                choices=choices,
                style=CUSTOM_STYLE,
                use_search_filter=True,
                use_jk_keys=False,
                instruction="(type to filter, Enter to select)",
            ).ask()
            selected = [] if answer is None else [answer]

        if not selected:
            logger.info("Selection cancelled")
        return selected
