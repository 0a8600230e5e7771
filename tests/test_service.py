from sprint_app.core.error_log import SlotErrorLog
from sprint_app.core.models import Iteration, TimeFrame
from sprint_app.core.service import SprintService, closing_plans, select_closing_targets

from helpers import SPRINT_1, SPRINT_2, work_item


def _it(name, frame):
    return Iteration(id=name, name=name, path=f"Proj\\{name}", time_frame=frame)


def test_targets_pick_latest_past():
    targets = select_closing_targets(
        [
            _it("S1", TimeFrame.PAST),
            _it("S2", TimeFrame.PAST),
            _it("S3", TimeFrame.CURRENT),
            _it("S4", TimeFrame.FUTURE),
            _it("S5", TimeFrame.FUTURE),
        ]
    )
    assert (targets.previous.name, targets.current.name, targets.future.name) == ("S2", "S3", "S4")


def test_plans_require_both_ends():
    targets = select_closing_targets([_it("S1", TimeFrame.PAST), _it("S2", TimeFrame.CURRENT)])
    plans = closing_plans(targets)
    assert [p.label for p in plans] == ["Close Previous Sprint: S1"]
    assert (plans[0].source.name, plans[0].destination.name) == ("S1", "S2")


def test_no_current_iteration_means_no_plans():
    assert closing_plans(select_closing_targets([_it("S1", TimeFrame.PAST)])) == []


def test_service_maps_team_iterations(store):
    store.team_iterations = [
        {"id": "1", "name": "Sprint 2.1", "path": "Proj\\Sprint 2.1", "attributes": {"timeFrame": "current"}},
        {"id": "2", "name": "Sprint 2.2", "path": "Proj\\Sprint 2.2", "attributes": {"timeFrame": "future"}},
    ]
    plans = closing_plans(SprintService(store).closing_targets())
    assert [p.label for p in plans] == ["Close Sprint: Sprint 2.1"]


def test_preview_lists_planned_actions(store):
    store.add(
        work_item(1, "User Story", "Active", "Login"),
        work_item(2, "Task", "New", "T2", parent=1),
        work_item(3, "Bug", "Active", "Crash"),
        work_item(4, "Task", "Active", "T4", parent=3),
        work_item(5, "Task", "Closed", "T5", parent=3),
    )
    df = SprintService(store).preview(SPRINT_1)
    actions = df.drop_duplicates("cluster").set_index("id")["action"].to_dict()
    assert actions == {1: "carry forward", 3: "split"}
    assert store.calls == []


def test_close_sprint_runs_processor(store):
    store.add(
        work_item(1, "User Story", "Active", "Login"),
        work_item(2, "Task", "Closed", "T2", parent=1),
    )
    log = SlotErrorLog({})
    progress = []
    report = SprintService(store).close_sprint(SPRINT_1, SPRINT_2, log, progress=progress.append)
    assert report.succeeded
    assert progress == [100]
    assert store.items[1]["fields"]["System.State"] == "Resolved"
