"""
Search and filter over the in-memory resource list.

The visible subset is always derived from the full collection; nothing here
mutates or caches the input.
"""

from dataclasses import dataclass
from typing import List, Sequence

from relief.config import FILTER_ALL
from relief.models import Resource


def matches_query(resource: Resource, query: str) -> bool:
    """Case-insensitive substring match on name, location name or address."""
    if not query:
        return True
    needle = query.lower()
    return (
        needle in resource.name.lower()
        or needle in resource.location_name.lower()
        or needle in resource.address.lower()
    )


def filter_resources(
    resources: Sequence[Resource],
    query: str = "",
    type_filter: str = FILTER_ALL,
    status_filter: str = FILTER_ALL,
) -> List[Resource]:
    """Return the resources passing all three criteria, in input order."""
    return [
        r for r in resources
        if matches_query(r, query)
        and (type_filter == FILTER_ALL or r.type == type_filter)
        and (status_filter == FILTER_ALL or r.status == status_filter)
    ]


@dataclass(frozen=True)
class FilterCriteria:
    """The three dashboard filter inputs."""
    query: str = ""
    type_filter: str = FILTER_ALL
    status_filter: str = FILTER_ALL

    def apply(self, resources: Sequence[Resource]) -> List[Resource]:
        return filter_resources(resources, self.query, self.type_filter, self.status_filter)

    def is_active(self) -> bool:
        return bool(self.query) or self.type_filter != FILTER_ALL or self.status_filter != FILTER_ALL
