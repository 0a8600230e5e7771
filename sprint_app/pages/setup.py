"""Connection setup page: collect Azure DevOps credentials and initialize SprintService."""

from __future__ import annotations

import streamlit as st

from sprint_app.app import register_page
from sprint_app.core.config import SETTINGS
from sprint_app.core.devops_client import DevOpsAPI
from sprint_app.core.service import SprintService


def devops_secret(name: str) -> str | None:
    """Read a secret from a [devops] section, falling back to top-level keys."""
    devops_secrets = st.secrets.get("devops", {})
    return devops_secrets.get(name) or st.secrets.get(name)


@register_page("Setup / Connection")
def setup_page():
    st.title("Azure DevOps Connection Setup")
    st.caption("Enter credentials (use secrets manager in production).")

    org_url = st.text_input(
        "Organization URL",
        value=st.session_state.get("devops_org_url") or devops_secret("DEVOPS_ORG_URL") or "",
        placeholder="https://dev.azure.com/my-org",
    )
    project = st.text_input(
        "Project",
        value=st.session_state.get("devops_project") or devops_secret("DEVOPS_PROJECT") or "",
    )
    team = st.text_input(
        "Team",
        value=st.session_state.get("devops_team") or devops_secret("DEVOPS_TEAM") or "",
    )
    token = st.text_input(
        "Personal Access Token",
        type="password",
        value=devops_secret("DEVOPS_PAT") or "",
    )
    ttl = st.number_input("Iteration cache TTL (seconds)", min_value=60, max_value=3600, value=300)
    keep_on_disk = st.checkbox(
        "Keep the error log on disk",
        value=bool(st.session_state.get("error_log_path", SETTINGS.error_log_path)),
        help=f"Failures are appended to {SETTINGS.error_log_path} and survive restarts.",
    )
    init_btn = st.button("Initialize Connection", type="primary")

    if init_btn:
        if not (org_url and project and team and token):
            st.error("All fields required.")
            return
        try:
            api = DevOpsAPI(org_url, project, team, token)
            api._cache_ttl = float(ttl)
            # Resolves project and team ids, surfacing bad credentials early
            api.team_context
            st.session_state["devops_org_url"] = org_url
            st.session_state["devops_project"] = project
            st.session_state["devops_team"] = team
            st.session_state["error_log_path"] = SETTINGS.error_log_path if keep_on_disk else ""
            st.session_state["sprint_service"] = SprintService(api)
            st.success("Connection initialized.")
        except Exception as e:  # pragma: no cover
            st.error(f"Failed to initialize Azure DevOps client: {e}")

    if "sprint_service" in st.session_state:
        st.info("SprintService ready.")
