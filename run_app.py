"""Convenience launcher for the Streamlit app.

Usage:
  streamlit run run_app.py

Automatically imports every module in ``sprint_app/pages`` so each page
decorated with ``@register_page`` registers itself without manual edits here.
"""

from importlib import import_module
from pathlib import Path

import streamlit as st

from sprint_app.app import main

st.set_page_config(layout="wide")


def _auto_init_sprint_service():
    """Initialize the Azure DevOps service from Streamlit secrets if available."""
    if "sprint_service" in st.session_state:
        return

    from sprint_app.pages.setup import devops_secret

    org_url = devops_secret("DEVOPS_ORG_URL")
    project = devops_secret("DEVOPS_PROJECT")
    team = devops_secret("DEVOPS_TEAM")
    token = devops_secret("DEVOPS_PAT")

    if org_url and project and team and token:
        st.sidebar.info("Secrets found, attempting to connect to Azure DevOps...")
        try:
            from sprint_app.core.devops_client import DevOpsAPI
            from sprint_app.core.service import SprintService

            api = DevOpsAPI(org_url, project, team, token)
            api.team_context
            st.session_state["devops_org_url"] = org_url
            st.session_state["devops_project"] = project
            st.session_state["devops_team"] = team
            st.session_state["sprint_service"] = SprintService(api)
            st.sidebar.success("Azure DevOps connection successful!")
        except Exception as e:
            st.sidebar.error(f"Azure DevOps connection failed: {e}")
            st.session_state.pop("sprint_service", None)
    else:
        st.sidebar.warning("Azure DevOps secrets not found. Please use the Setup page.")


_auto_init_sprint_service()

PAGES_DIR = Path(__file__).parent / "sprint_app" / "pages"
for py in sorted(PAGES_DIR.glob("[!_]*.py")):
    mod_name = f"sprint_app.pages.{py.stem}"
    try:
        import_module(mod_name)
    except Exception as e:  # pragma: no cover - defensive
        print(f"Failed importing page {mod_name}: {e}")

if __name__ == "__main__":
    main()
