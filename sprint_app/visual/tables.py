"""Reusable table helpers for Streamlit rendering."""

from __future__ import annotations

from urllib.parse import quote

import pandas as pd
import streamlit as st

from sprint_app.core.column_config import get_columns


def work_item_url(organization_url: str, project: str, work_item_id) -> str:
    return f"{organization_url.rstrip('/')}/{quote(project)}/_workitems/edit/{work_item_id}"


def add_work_item_link(
    df: pd.DataFrame,
    organization_url: str,
    project: str,
    id_col: str = "id",
    label: str = "Work Item",
):
    if df.empty or id_col not in df.columns:
        return df, {}
    out = df.copy()
    out[label] = out[id_col].apply(
        lambda i: work_item_url(organization_url, project, i) if pd.notna(i) else ""
    )
    cfg = {
        label: st.column_config.LinkColumn(
            label,
            display_text=r"edit/(.*)$",
            help="Open in Azure DevOps",
            width="small",
        )
    }
    return out, cfg


def prepare_table(
    df: pd.DataFrame,
    organization_url: str,
    project: str,
    set_name: str,
) -> tuple[pd.DataFrame, list[str], dict[str, object]]:
    if df.empty:
        return df, [], {}

    table, cfg = add_work_item_link(df, organization_url, project)
    canonical = get_columns(set_name) or []
    display_cols: list[str] = [col for col in canonical if col in table.columns]
    if not display_cols:
        display_cols = [col for col in table.columns if col != "id"]
    return table, display_cols, cfg
