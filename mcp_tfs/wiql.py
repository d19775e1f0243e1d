"""WIQL query construction."""


def build_wiql(types=None) -> str:
    """Select work item IDs, newest change first, optionally filtered by type.

    Type names are quoted as given; callers are trusted not to embed quotes.
    """
    clauses = []
    if types:
        type_list = ", ".join(f"'{t}'" for t in types)
        clauses.append(f"[System.WorkItemType] IN ({type_list})")

    parts = ["SELECT [System.Id]", "FROM WorkItems"]
    if clauses:
        parts.append("WHERE " + " AND ".join(clauses))
    parts.append("ORDER BY [System.ChangedDate] DESC")
    return " ".join(parts)
