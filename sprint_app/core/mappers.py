"""Mapping raw Azure DevOps JSON payloads into domain model instances."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import Any

import pandas as pd

from .classification import classify_cluster
from .models import (
    ErrorRecord,
    Iteration,
    TimeFrame,
    WorkItem,
    WorkItemCluster,
    WorkItemRelation,
)


def _parse_timestamp(value: Any) -> datetime | None:
    if not value:
        return None
    ts = pd.to_datetime(value, utc=True, errors="coerce")
    if ts is None or pd.isna(ts):
        return None
    return ts.to_pydatetime()


def _parse_time_frame(value: Any) -> TimeFrame | None:
    if value is None:
        return None
    if isinstance(value, int):
        # Older api-versions serialize the enum as its ordinal
        ordinals = (TimeFrame.PAST, TimeFrame.CURRENT, TimeFrame.FUTURE)
        return ordinals[value] if 0 <= value < len(ordinals) else None
    try:
        return TimeFrame(str(value).strip().lower())
    except ValueError:
        return None


def map_relation(raw: dict[str, Any]) -> WorkItemRelation:
    return WorkItemRelation(
        rel=raw.get("rel") or "",
        url=raw.get("url") or "",
        attributes=dict(raw.get("attributes") or {}),
    )


def map_work_item(raw: dict[str, Any]) -> WorkItem:
    if "id" not in raw:
        raise ValueError("Work item payload has no id")
    return WorkItem(
        id=int(raw["id"]),
        url=raw.get("url") or "",
        fields=dict(raw.get("fields") or {}),
        relations=[map_relation(r) for r in raw.get("relations") or [] if isinstance(r, dict)],
    )


def map_iteration(raw: dict[str, Any]) -> Iteration:
    attrs = raw.get("attributes") or {}
    return Iteration(
        id=str(raw.get("id") or ""),
        name=raw.get("name") or "",
        path=raw.get("path") or "",
        time_frame=_parse_time_frame(attrs.get("timeFrame")),
        start_date=_parse_timestamp(attrs.get("startDate")),
        finish_date=_parse_timestamp(attrs.get("finishDate")),
    )


def clusters_to_dataframe(clusters: Iterable[WorkItemCluster]) -> pd.DataFrame:
    """One row per work item with the action planned for its cluster."""
    rows: list[dict[str, Any]] = []
    for idx, cluster in enumerate(clusters, start=1):
        action = classify_cluster(cluster).value
        for item in cluster.all_items:
            rows.append(
                {
                    "id": item.id,
                    "title": item.title,
                    "type": item.type,
                    "state": item.state,
                    "role": "parent" if item is cluster.parent else "child",
                    "action": action,
                    "cluster": idx,
                    "iteration_path": item.iteration_path,
                }
            )
    return pd.DataFrame(rows)


def errors_to_dataframe(records: Iterable[ErrorRecord]) -> pd.DataFrame:
    rows = [{"id": r.work_item_id, "error": r.error} for r in records]
    if not rows:
        return pd.DataFrame(columns=["id", "error"])
    df = pd.DataFrame(rows)
    df["id"] = df["id"].astype("Int64")
    return df
