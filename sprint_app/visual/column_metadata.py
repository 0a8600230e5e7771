"""Central column metadata and helpers for table rendering."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import streamlit as st

# Mapping of raw column keys to (label, help text, format key)
# format key: "int" -> integer, None -> default text column
COLUMN_METADATA: dict[str, tuple[str, str, str | None]] = {
    "title": ("Title", "Work item title.", None),
    "type": ("Type", "Work item type (User Story, Bug, Ticket, Task).", None),
    "state": ("State", "Current workflow state in Azure DevOps.", None),
    "role": ("Role", "Whether the item owns the cluster or sits beneath it.", None),
    "action": ("Planned Action", "What closing the sprint will do with this cluster.", None),
    "cluster": ("Cluster", "Parent/children group the item belongs to.", "int"),
    "iteration_path": ("Iteration", "Iteration path the item is currently planned in.", None),
    "error": ("Error", "Failure recorded while closing a sprint.", None),
}


def apply_column_metadata(
    columns: Iterable[str],
    existing: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Return a column_config dictionary with human labels and hover help."""

    config: dict[str, Any] = dict(existing or {})
    for col in columns:
        if col in config:
            continue
        meta = COLUMN_METADATA.get(col)
        if not meta:
            continue
        label, help_text, fmt = meta
        if fmt == "int":
            config[col] = st.column_config.NumberColumn(label, help=help_text, format="%d")
        else:
            config[col] = st.column_config.Column(label, help=help_text)
    return config
