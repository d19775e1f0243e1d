"""Work item queries: discover IDs with WIQL, then fetch them in one batch."""

import logging
import math
from dataclasses import dataclass

from mcp_tfs.client import tfs_request
from mcp_tfs.config import TfsConfig
from mcp_tfs.wiql import build_wiql
from mcp_tfs.workitems import DEFAULT_FIELDS, normalize_work_item

logger = logging.getLogger(__name__)

DEFAULT_EXPAND = "relations"


# ---------------------------------------------------------------------------
# ID sources
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TypeFilterSource:
    types: tuple

    def wiql(self) -> str:
        return build_wiql(self.types)


@dataclass(frozen=True)
class WiqlSource:
    text: str

    def wiql(self) -> str:
        return self.text


def _run_wiql(config: TfsConfig, project: str | None, wiql: str) -> list[int]:
    data = tfs_request(config, project, "wit/wiql", method="POST", body={"query": wiql})
    return [wi["id"] for wi in data.get("workItems") or []]


def cap_ids(ids: list, top) -> list:
    """First ``top`` IDs in order; no cap unless ``top`` is a finite number."""
    if isinstance(top, bool) or not isinstance(top, (int, float)) or not math.isfinite(top):
        return ids
    return ids[:max(0, int(top))]


def _discover_and_fetch(config: TfsConfig, project, source, top=None, fields=None, expand=None) -> list[dict]:
    ids = _run_wiql(config, project, source.wiql())
    logger.info("WIQL matched %d work items", len(ids))
    if not ids:
        return []
    ids = cap_ids(ids, top)
    if not ids:
        return []
    return get_work_items(config, project, ids, fields=fields, expand=expand)


# ---------------------------------------------------------------------------
# Public operations
# ---------------------------------------------------------------------------

def query_by_type(config: TfsConfig, params: dict) -> list[dict]:
    source = TypeFilterSource(tuple(params.get("types") or ()))
    return _discover_and_fetch(
        config,
        params.get("project"),
        source,
        top=params.get("top"),
        fields=params.get("fields"),
        expand=params.get("expand"),
    )


def query_wiql(config: TfsConfig, params: dict) -> list[dict]:
    return _discover_and_fetch(
        config,
        params.get("project"),
        WiqlSource(params["wiql"]),
        top=params.get("top"),
        fields=params.get("fields"),
        expand=params.get("expand"),
    )


def get_work_items(config: TfsConfig, project: str | None, ids, fields=None, expand=None) -> list[dict]:
    """Fetch and normalize work items, keeping the order the server returns.

    ``$expand`` and ``fields`` are mutually exclusive on this endpoint, so the
    field list is only sent when expansion is turned off with ``"none"``.
    """
    if not ids:
        return []
    fields = fields or DEFAULT_FIELDS
    expand = DEFAULT_EXPAND if expand is None else str(expand)

    query = {"ids": ",".join(str(i) for i in ids)}
    if expand and expand != "none":
        query["$expand"] = expand
    else:
        query["fields"] = ",".join(fields)

    # project is not part of the collection-scoped URL
    data = tfs_request(config, project, "wit/workitems", query=query, scope="collection")
    return [normalize_work_item(item) for item in data.get("value") or []]


def get_work_item_by_id(config: TfsConfig, project: str | None, work_item_id) -> dict | None:
    items = get_work_items(config, project, [work_item_id])
    return items[0] if items else None
