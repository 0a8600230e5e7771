"""In-memory stand-ins for the Azure DevOps store used across tests."""

from __future__ import annotations

import copy

from sprint_app.core.devops_client import DevOpsAPI, DevOpsAPIError
from sprint_app.core.models import Iteration, TeamContext, TimeFrame

BASE_URL = "https://dev.azure.com/org/_apis/wit/workItems"
SPRINT_1 = Iteration(id="it-1", name="Sprint 2.1", path="Proj\\Sprint 2.1", time_frame=TimeFrame.CURRENT)
SPRINT_2 = Iteration(id="it-2", name="Sprint 2.2", path="Proj\\Sprint 2.2", time_frame=TimeFrame.FUTURE)


def work_item(item_id, item_type, state, title, *, parent=None, iteration=SPRINT_1.path, **fields):
    raw = {
        "id": item_id,
        "url": f"{BASE_URL}/{item_id}",
        "fields": {
            "System.Id": item_id,
            "System.WorkItemType": item_type,
            "System.State": state,
            "System.Title": title,
            "System.IterationPath": iteration,
            "System.Rev": 3,
            **fields,
        },
        "relations": [],
    }
    if parent is not None:
        raw["relations"].append({"rel": "System.LinkTypes.Hierarchy-Reverse", "url": f"{BASE_URL}/{parent}"})
    return raw


class FakeStore(DevOpsAPI):
    """Records every mutation and applies it to an in-memory item table."""

    def __init__(self):
        self.organization_url = "https://dev.azure.com/org"
        self.project = "Proj"
        self.team = "Proj Team"
        self._team_context = TeamContext("Proj", "proj-id", "Proj Team", "team-id")
        self._cache = None
        self.items: dict[int, dict] = {}
        self.iterations: dict[str, list[int]] = {}
        self.team_iterations: list[dict] = []
        self.calls: list[tuple] = []
        self.fail_updates: set[int] = set()
        self.fail_creates: set[str] = set()
        self.fail_fetch = False
        self._next_id = 1000

    def add(self, *raws, iteration=SPRINT_1.id):
        for raw in raws:
            self.items[raw["id"]] = raw
            self.iterations.setdefault(iteration, []).append(raw["id"])

    def get_team_iterations(self):
        return self.team_iterations

    def get_iteration_work_items(self, team_context, iteration_id):
        if self.fail_fetch:
            raise DevOpsAPIError("GET iterations failed 503: unavailable", status_code=503)
        return [{"target": {"id": i}} for i in self.iterations.get(iteration_id, [])]

    def get_work_items_by_ids(self, ids, expand="All"):
        return [copy.deepcopy(self.items[i]) for i in ids if i in self.items]

    def create_work_item(self, patch, project_id, work_item_type):
        self.calls.append(("create", work_item_type, patch))
        title = next((op["value"] for op in patch if op["path"] == "/fields/System.Title"), "")
        if title in self.fail_creates:
            raise DevOpsAPIError(f"POST failed 400: cannot create {title}", status_code=400)
        new_id = self._next_id
        self._next_id += 1
        raw = {
            "id": new_id,
            "url": f"{BASE_URL}/{new_id}",
            "fields": {"System.WorkItemType": work_item_type, "System.State": "New"},
            "relations": [],
        }
        self._apply(raw, patch)
        self.items[new_id] = raw
        return copy.deepcopy(raw)

    def update_work_item(self, patch, work_item_id):
        self.calls.append(("update", work_item_id, patch))
        if work_item_id in self.fail_updates:
            raise DevOpsAPIError(f"PATCH failed 409: conflict on {work_item_id}", status_code=409)
        raw = self.items[work_item_id]
        self._apply(raw, patch)
        return copy.deepcopy(raw)

    @staticmethod
    def _apply(raw, patch):
        for op in patch:
            path = op["path"]
            if path.startswith("/fields/"):
                raw["fields"][path[len("/fields/") :]] = op["value"]
            elif path == "/relations/-":
                raw["relations"].append(op["value"])
            elif op["op"] == "remove":
                raw["relations"].pop(int(path.rsplit("/", 1)[1]))

    def updates_for(self, work_item_id):
        return [patch for kind, target, patch in self.calls if kind == "update" and target == work_item_id]

    def creates(self):
        return [patch for kind, _type, patch in self.calls if kind == "create"]
