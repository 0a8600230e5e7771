"""Chart builders (Altair) for the close preview."""

from __future__ import annotations

import altair as alt
import pandas as pd

ACTION_ORDER = ["carry forward", "resolve", "split"]


def action_breakdown(preview: pd.DataFrame):
    """Bar chart of clusters and work items per planned action."""
    if preview.empty or "action" not in preview.columns:
        return None, pd.DataFrame()
    counts = (
        preview.groupby("action")
        .agg(clusters=("cluster", "nunique"), items=("id", "count"))
        .reindex(ACTION_ORDER, fill_value=0)
        .rename_axis("action")
        .reset_index()
    )
    chart = (
        alt.Chart(counts)
        .mark_bar()
        .encode(
            x=alt.X("action:N", sort=ACTION_ORDER, title="Planned action"),
            y=alt.Y("clusters:Q", title="Clusters"),
            tooltip=["action", "clusters", "items"],
        )
        .properties(height=220)
    )
    return chart, counts
