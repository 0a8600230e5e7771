"""Close Sprint page.

Shows the closing targets for the configured team, previews how every cluster
of the source iteration will be handled, and runs the close with a progress bar.
"""

from __future__ import annotations

from datetime import datetime

import pandas as pd
import pytz
import streamlit as st

from sprint_app.app import register_page
from sprint_app.core.config import SETTINGS, TIMEZONE
from sprint_app.core.error_log import open_error_log
from sprint_app.core.errors import FetchError
from sprint_app.core.mappers import errors_to_dataframe
from sprint_app.core.models import Iteration
from sprint_app.core.service import SprintService, closing_plans
from sprint_app.visual.charts import action_breakdown
from sprint_app.visual.column_metadata import apply_column_metadata
from sprint_app.visual.progress import ProgressReporter
from sprint_app.visual.tables import prepare_table

TZ = pytz.timezone(TIMEZONE)


def _format_date(value: datetime | None) -> str:
    if value is None:
        return "?"
    return value.astimezone(TZ).strftime("%Y-%m-%d")


def _describe(iteration: Iteration) -> str:
    return f"{iteration.name} ({_format_date(iteration.start_date)} to {_format_date(iteration.finish_date)})"


def _render_table(df: pd.DataFrame, set_name: str) -> None:
    org_url = st.session_state.get("devops_org_url", "")
    project = st.session_state.get("devops_project", "")
    prepared, display_cols, cfg = prepare_table(df, org_url, project, set_name)
    if not display_cols:
        return
    column_config = apply_column_metadata(display_cols, cfg)
    st.dataframe(prepared[display_cols], hide_index=True, column_config=column_config)


@register_page("Close Sprint")
def close_sprint_page():
    st.title("Close Sprint")
    st.caption("Carry unfinished work into the next iteration and resolve what is done.")
    service: SprintService | None = st.session_state.get("sprint_service")
    if service is None:
        st.warning("Initialize connection on Setup page first.")
        return

    try:
        targets = service.closing_targets()
    except Exception as exc:  # pragma: no cover - network errors
        st.error(f"Failed to load team iterations: {exc}")
        return
    plans = closing_plans(targets)
    if not plans:
        st.info("No closable iteration: the team needs a current iteration and a past or future one.")
        return

    plan = st.selectbox("Closing plan", plans, format_func=lambda p: p.label)
    col1, col2 = st.columns(2)
    col1.metric("Source", plan.source.name, help=_describe(plan.source))
    col2.metric("Destination", plan.destination.name, help=_describe(plan.destination))

    if st.button("Preview"):
        reporter = ProgressReporter(f"Reading work items of {plan.source.name}")
        try:
            st.session_state["close_preview"] = (plan.source.id, service.preview(plan.source))
            reporter.complete("Preview ready.")
        except FetchError as exc:
            reporter.error(str(exc))

    cached = st.session_state.get("close_preview")
    if cached and cached[0] == plan.source.id:
        preview = cached[1]
        if preview.empty:
            st.info("No open parent work items in this iteration.")
        else:
            chart, _counts = action_breakdown(preview)
            if chart is not None:
                st.altair_chart(chart, use_container_width=True)
            _render_table(preview, "preview")

    st.markdown("---")
    confirmed = st.checkbox(f"Do you want to proceed in closing {plan.source.name}?")
    if not st.button(plan.label, type="primary", disabled=not confirmed):
        return

    log_path = st.session_state.get("error_log_path", SETTINGS.error_log_path)
    error_log = open_error_log(st.session_state, log_path)
    reporter = ProgressReporter("Closing Sprint")
    try:
        report = service.close_sprint(plan.source, plan.destination, error_log, progress=reporter.callback)
    except FetchError as exc:
        reporter.error(str(exc))
        return
    st.session_state.pop("close_preview", None)

    summary = f"{report.clusters} cluster(s), {len(report.created)} created, {len(report.updated)} updated"
    if report.succeeded:
        reporter.complete(f"Sprint successfully closed: {summary}.")
        return
    reporter.warning(f"Sprint closed with {len(report.errors)} error(s): {summary}.")
    _render_table(errors_to_dataframe(report.errors), "errors")
