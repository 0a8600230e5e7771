"""Error Log page: failures recorded by sprint closing runs."""

from __future__ import annotations

import streamlit as st

from sprint_app.app import register_page
from sprint_app.core.config import SETTINGS
from sprint_app.core.error_log import open_error_log
from sprint_app.core.mappers import errors_to_dataframe
from sprint_app.visual.column_metadata import apply_column_metadata
from sprint_app.visual.tables import prepare_table


@register_page("Error Log")
def error_log_page():
    st.title("Error Log")
    st.caption("Failures recorded while closing sprints. Each entry names the work item when known.")
    log_path = st.session_state.get("error_log_path", SETTINGS.error_log_path)
    error_log = open_error_log(st.session_state, log_path)
    records = error_log.read()
    if not records:
        st.success("No errors recorded.")
        return

    df = errors_to_dataframe(records).head(SETTINGS.max_table_rows)
    prepared, display_cols, cfg = prepare_table(
        df,
        st.session_state.get("devops_org_url", ""),
        st.session_state.get("devops_project", ""),
        "errors",
    )
    st.dataframe(prepared[display_cols], hide_index=True, column_config=apply_column_metadata(display_cols, cfg))
    csv = df.to_csv(index=False).encode(SETTINGS.download_encoding)
    st.download_button(
        "Download Error Log CSV",
        data=csv,
        file_name="sprint_close_errors.csv",
        mime="text/csv",
    )
    if st.button("Clear error log"):
        error_log.clear()
        st.rerun()
