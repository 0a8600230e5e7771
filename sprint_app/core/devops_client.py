"""Azure DevOps REST client wrapper (Work + Work Item Tracking APIs)."""

from __future__ import annotations

import logging
import time
from typing import Any, Protocol
from urllib.parse import quote

import requests

from .config import DEVOPS_API_VERSION, ITERATION_CACHE_TTL, WORK_ITEMS_BATCH_SIZE
from .models import TeamContext

logger = logging.getLogger(__name__)

JSON_PATCH_CONTENT_TYPE = "application/json-patch+json"


class WorkItemStore(Protocol):
    """Operations the sprint closer needs from the remote work item store."""

    def get_iteration_work_items(self, team_context: TeamContext, iteration_id: str) -> list[dict[str, Any]]: ...

    def get_work_items_by_ids(self, ids: list[int], expand: str = "All") -> list[dict[str, Any]]: ...

    def create_work_item(
        self, patch: list[dict[str, Any]], project_id: str, work_item_type: str
    ) -> dict[str, Any]: ...

    def update_work_item(self, patch: list[dict[str, Any]], work_item_id: int) -> dict[str, Any]: ...


class DevOpsAPIError(RuntimeError):
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class DevOpsAPI:
    def __init__(
        self,
        organization_url: str,
        project: str,
        team: str,
        token: str,
        *,
        session: requests.Session | None = None,
    ):
        self.organization_url = organization_url.rstrip("/")
        self.project = project
        self.team = team
        self.session = session or requests.Session()
        # Personal access tokens go in the password slot of basic auth
        self.session.auth = ("", token)
        self._team_context: TeamContext | None = None
        # Simple in-memory cache for team iterations: (timestamp, data)
        self._cache: tuple[float, list[dict[str, Any]]] | None = None
        self._cache_ttl = ITERATION_CACHE_TTL

    def clear_cache(self) -> None:
        """Reset the in-memory iteration cache."""
        self._cache = None

    # ------------------ Request helpers ------------------
    def _url(self, *segments: str) -> str:
        return "/".join([self.organization_url, *(quote(s, safe="$_") for s in segments)])

    def _request(self, method: str, url: str, **kwargs) -> Any:
        params = dict(kwargs.pop("params", None) or {})
        params.setdefault("api-version", DEVOPS_API_VERSION)
        resp = self.session.request(method, url, params=params, **kwargs)
        if resp.status_code >= 400:
            logger.warning("%s %s failed with %s", method, url, resp.status_code)
            raise DevOpsAPIError(
                f"{method} {url} failed {resp.status_code}: {resp.text[:200]}",
                status_code=resp.status_code,
            )
        if not resp.content:
            return {}
        return resp.json()

    # ------------------ Core API ------------------
    @property
    def team_context(self) -> TeamContext:
        """Project and team names plus their ids, resolved on first use."""
        if self._team_context is None:
            project = self._request("GET", self._url("_apis", "projects", self.project))
            team = self._request("GET", self._url("_apis", "projects", self.project, "teams", self.team))
            self._team_context = TeamContext(
                project=self.project,
                project_id=str(project.get("id") or self.project),
                team=self.team,
                team_id=str(team.get("id") or self.team),
            )
        return self._team_context

    # ------------------ Work API ------------------
    def get_team_iterations(self) -> list[dict[str, Any]]:
        now = time.time()
        if self._cache and (now - self._cache[0]) < self._cache_ttl:
            return self._cache[1]
        url = self._url(self.project, self.team, "_apis", "work", "teamsettings", "iterations")
        data = self._request("GET", url)
        out = list(data.get("value", []))
        self._cache = (now, out)
        return out

    def get_iteration_work_items(self, team_context: TeamContext, iteration_id: str) -> list[dict[str, Any]]:
        """Work item links of an iteration, each shaped ``{"target": {"id": ...}}``."""
        url = self._url(
            team_context.project,
            team_context.team,
            "_apis",
            "work",
            "teamsettings",
            "iterations",
            iteration_id,
            "workitems",
        )
        data = self._request("GET", url)
        return [rel for rel in data.get("workItemRelations", []) if rel.get("target")]

    # ------------------ Work Item Tracking API ------------------
    def get_work_items_by_ids(self, ids: list[int], expand: str = "All") -> list[dict[str, Any]]:
        if not ids:
            return []
        url = self._url(self.project, "_apis", "wit", "workitems")
        out: list[dict[str, Any]] = []
        for start in range(0, len(ids), WORK_ITEMS_BATCH_SIZE):
            chunk = ids[start : start + WORK_ITEMS_BATCH_SIZE]
            params = {"ids": ",".join(str(i) for i in chunk), "$expand": expand}
            data = self._request("GET", url, params=params)
            out.extend(data.get("value", []))
        return out

    def create_work_item(
        self,
        patch: list[dict[str, Any]],
        project_id: str,
        work_item_type: str,
    ) -> dict[str, Any]:
        url = self._url(project_id, "_apis", "wit", "workitems", f"${work_item_type}")
        return self._request("POST", url, json=patch, headers={"Content-Type": JSON_PATCH_CONTENT_TYPE})

    def update_work_item(self, patch: list[dict[str, Any]], work_item_id: int) -> dict[str, Any]:
        url = self._url("_apis", "wit", "workitems", str(work_item_id))
        return self._request("PATCH", url, json=patch, headers={"Content-Type": JSON_PATCH_CONTENT_TYPE})
