"""
Tabular summaries of the resource list – counts by type and status, and the
preview table printed by the terminal dashboard.
"""

from dataclasses import fields
from typing import Any, Dict, List, Sequence

import pandas as pd

from relief.config import MAX_PREVIEW_ROWS, RESOURCE_STATUSES, RESOURCE_TYPES
from relief.models import Resource

PREVIEW_COLUMNS = ["id", "name", "type", "status", "quantity", "location_name"]


def resources_frame(resources: Sequence[Resource]) -> pd.DataFrame:
    """One row per resource, in the given order."""
    return pd.DataFrame([r.to_dict() for r in resources], columns=[f.name for f in fields(Resource)])


def summarize_resources(resources: Sequence[Resource]) -> Dict[str, Any]:
    """
    Count resources by type, by status and by type x status.
    Every known type and status is present in the output, with zeros.
    """
    df = resources_frame(resources)

    by_type = df["type"].value_counts().reindex(list(RESOURCE_TYPES), fill_value=0)
    by_status = df["status"].value_counts().reindex(list(RESOURCE_STATUSES), fill_value=0)
    if df.empty:
        matrix = pd.DataFrame(0, index=list(RESOURCE_TYPES), columns=list(RESOURCE_STATUSES))
    else:
        matrix = (
            pd.crosstab(df["type"], df["status"])
            .reindex(index=list(RESOURCE_TYPES), columns=list(RESOURCE_STATUSES), fill_value=0)
        )

    quantities = pd.to_numeric(df["quantity"], errors="coerce")
    return {
        "total": int(len(df)),
        "by_type": {k: int(v) for k, v in by_type.items()},
        "by_status": {k: int(v) for k, v in by_status.items()},
        "matrix": {t: {s: int(matrix.loc[t, s]) for s in RESOURCE_STATUSES} for t in RESOURCE_TYPES},
        "total_quantity": int(quantities.fillna(0).sum()),
    }


def format_summary(summary: Dict[str, Any]) -> str:
    """Markdown rendering of a summary for the terminal."""
    if summary["total"] == 0:
        return "(no resources)"
    matrix = pd.DataFrame.from_dict(summary["matrix"], orient="index")
    matrix.index.name = "type"
    lines: List[str] = [
        f"Total resources: {summary['total']} (total quantity {summary['total_quantity']})",
        "",
        matrix.to_markdown(),
    ]
    return "\n".join(lines)


def format_preview(resources: Sequence[Resource]) -> str:
    if not resources:
        return "(no resources found matching your criteria)"
    df = resources_frame(resources)[PREVIEW_COLUMNS]
    return df.head(MAX_PREVIEW_ROWS).to_string(index=False)
