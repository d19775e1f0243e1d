"""Run each query path once against the configured server and print the results."""

import json
import sys

from mcp_tfs.config import load_config
from mcp_tfs.errors import TfsError
from mcp_tfs.queries import get_work_items, query_by_type, query_wiql

SMOKE_WIQL = (
    "SELECT [System.Id] FROM WorkItems WHERE [System.WorkItemType] = 'Epic' "
    "ORDER BY [System.ChangedDate] DESC"
)


def run_smoke(config) -> dict:
    items = query_by_type(config, {"types": ["Epic"], "top": 5})
    wiql_items = query_wiql(config, {"wiql": SMOKE_WIQL, "top": 5})
    ids = [item["id"] for item in items]
    batch = get_work_items(config, config.project, ids, expand="none") if ids else []
    return {
        "byType": {"count": len(items), "items": items},
        "wiql":   {"count": len(wiql_items), "items": wiql_items},
        "batch":  {"count": len(batch), "items": batch},
    }


def main() -> int:
    try:
        result = run_smoke(load_config())
    except TfsError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
