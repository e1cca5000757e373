"""Parse ``--filter`` strings into filter groups.

Syntax of one raw string: ``name1=v1,v2;name2=v3;name3``. Semicolons separate
clauses, the first ``=`` in a clause splits the name from a comma-separated value
list, and a clause without ``=`` has no value constraint. Parsing is purely
syntactic; empty names or values are passed through for EC2 to judge.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .models import RUNNING_STATE_FILTER_NAME, Filter, FilterGroup

logger = logging.getLogger(__name__)

RUNNING_STATE_FILTER = Filter(RUNNING_STATE_FILTER_NAME, ("running",))


def parse_clause(clause: str) -> Filter:
    name, sep, values = clause.partition("=")
    if not sep:
        return Filter(name)
    return Filter(name, tuple(values.split(",")))


def parse_filter_group(raw: str) -> FilterGroup:
    """Parse one raw filter string, prefixed with the implicit running-state filter.

    Every clause is appended after the prefix in order, including one that names
    ``instance-state-name``; EC2 ANDs them.
    """
    filters = [RUNNING_STATE_FILTER]
    for clause in raw.split(";"):
        parsed = parse_clause(clause)
        if parsed.name == RUNNING_STATE_FILTER_NAME:
            logger.debug("Filter %r is combined with the default running-state filter", clause)
        filters.append(parsed)
    return FilterGroup(tuple(filters))


def parse_filter_groups(raw_filters: Iterable[str] | None) -> list[FilterGroup]:
    """One group per raw string, or a single running-state-only group when none are given."""
    groups = [parse_filter_group(raw) for raw in raw_filters or ()]
    if not groups:
        groups.append(FilterGroup((RUNNING_STATE_FILTER,)))
    return groups
