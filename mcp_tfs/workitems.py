"""Normalization of raw work item payloads into a stable result shape."""

from collections.abc import Mapping
from typing import Any

WORK_ITEM_TYPE = "System.WorkItemType"
TITLE = "System.Title"
DESCRIPTION = "System.Description"
ACCEPTANCE_CRITERIA = "Microsoft.VSTS.Common.AcceptanceCriteria"
STATE = "System.State"
AREA_PATH = "System.AreaPath"
ITERATION_PATH = "System.IterationPath"
TAGS = "System.Tags"
PRIORITY = "Microsoft.VSTS.Common.Priority"
BACKLOG_PRIORITY = "Microsoft.VSTS.Common.BacklogPriority"

DEFAULT_FIELDS = [
    "System.Id",
    WORK_ITEM_TYPE,
    TITLE,
    DESCRIPTION,
    ACCEPTANCE_CRITERIA,
    STATE,
    AREA_PATH,
    ITERATION_PATH,
    TAGS,
    PRIORITY,
    BACKLOG_PRIORITY,
]

PARENT_LINK = "System.LinkTypes.Hierarchy-Reverse"
CHILD_LINK = "System.LinkTypes.Hierarchy-Forward"


class WorkItemFields:
    """Read-only view over a work item's ``fields`` mapping."""

    def __init__(self, fields: Mapping[str, Any] | None):
        self._fields = fields or {}

    def get(self, name: str) -> Any:
        return self._fields.get(name)

    @property
    def work_item_type(self) -> str | None:
        return self.get(WORK_ITEM_TYPE)

    @property
    def title(self) -> str | None:
        return self.get(TITLE)

    @property
    def description(self) -> str | None:
        return self.get(DESCRIPTION)

    @property
    def acceptance_criteria(self) -> str | None:
        return self.get(ACCEPTANCE_CRITERIA)

    @property
    def state(self) -> str | None:
        return self.get(STATE)

    @property
    def area_path(self) -> str | None:
        return self.get(AREA_PATH)

    @property
    def iteration_path(self) -> str | None:
        return self.get(ITERATION_PATH)

    @property
    def tags(self) -> list[str]:
        raw = self.get(TAGS)
        if not raw:
            return []
        return [t.strip() for t in raw.split(";") if t.strip()]

    @property
    def priority(self) -> Any:
        value = self.get(PRIORITY)
        if value is None:
            value = self.get(BACKLOG_PRIORITY)
        return value


def _related_id(url: str | None) -> str | None:
    segment = (url or "").rsplit("/", 1)[-1]
    return segment if segment.isascii() and segment.isdecimal() else None


def _related_ids(relations, link_type: str) -> list[str]:
    ids = []
    for rel in relations:
        if rel.get("rel") != link_type:
            continue
        related = _related_id(rel.get("url"))
        if related:
            ids.append(related)
    return ids


def normalize_work_item(item: Mapping[str, Any]) -> dict:
    f = WorkItemFields(item.get("fields"))
    relations = item.get("relations") or []
    return {
        "id": item.get("id"),
        "type": f.work_item_type,
        "title": f.title,
        "description": f.description,
        "acceptanceCriteria": f.acceptance_criteria,
        "state": f.state,
        "areaPath": f.area_path,
        "iterationPath": f.iteration_path,
        "tags": f.tags,
        "priority": f.priority,
        "relations": {
            "parents": _related_ids(relations, PARENT_LINK),
            "children": _related_ids(relations, CHILD_LINK),
        },
    }
