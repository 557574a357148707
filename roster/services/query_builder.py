"""List query construction."""

import re
from dataclasses import dataclass, field
from typing import Any

from roster.models.enums import SortField


@dataclass
class ListQuery:
    """An aggregation pipeline over one collection.

    Stages always appear in the order match, sort, limit, project; stages for
    parameters that were not given are left out.
    """

    collection: str
    pipeline: list[dict[str, Any]] = field(default_factory=list)

    def stage(self, name: str) -> dict[str, Any] | None:
        """Get the operand of a stage, if present."""
        for stage in self.pipeline:
            if name in stage:
                return stage[name]
        return None


def contains_filter(field_name: str, text: str) -> dict[str, Any]:
    """Case-sensitive literal substring match on a field."""
    return {field_name: {"$regex": re.escape(text)}}


def build_list_query(
    collection: str,
    *,
    search: str | None = None,
    sort_by: SortField | str | None = None,
    limit: int | None = None,
    search_field: str = "name",
    hidden: tuple[str, ...] = (),
) -> ListQuery:
    """Build the list query for a collection."""
    query = ListQuery(collection)

    if search is not None:
        search = search.strip()
        if search:
            query.pipeline.append({"$match": contains_filter(search_field, search)})

    if sort_by is not None:
        sort_field = sort_by.value if isinstance(sort_by, SortField) else sort_by
        query.pipeline.append({"$sort": {sort_field: 1}})

    if limit is not None:
        query.pipeline.append({"$limit": limit})

    if hidden:
        query.pipeline.append({"$project": {name: 0 for name in hidden}})

    return query
