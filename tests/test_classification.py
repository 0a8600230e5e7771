from sprint_app.core.classification import (
    ClusterAction,
    classify_cluster,
    closing_state,
    has_sprint_number,
)
from sprint_app.core.mappers import map_work_item
from sprint_app.core.models import WorkItemCluster

from helpers import work_item


def _story(state="Active", title="Story"):
    return map_work_item(work_item(1, "User Story", state, title))


def _task(item_id, state):
    return map_work_item(work_item(item_id, "Task", state, f"Task {item_id}", parent=1))


def test_all_new_children_carry_forward():
    cluster = WorkItemCluster(_story(), [_task(2, "New"), _task(3, "New")])
    assert classify_cluster(cluster) is ClusterAction.CARRY_FORWARD


def test_all_closed_children_resolve():
    cluster = WorkItemCluster(_story(), [_task(2, "Closed"), _task(3, "Closed")])
    assert classify_cluster(cluster) is ClusterAction.RESOLVE


def test_mixed_children_split():
    cluster = WorkItemCluster(_story(), [_task(2, "New"), _task(3, "Active"), _task(4, "Closed")])
    assert classify_cluster(cluster) is ClusterAction.SPLIT


def test_no_children_is_never_resolved():
    cluster = WorkItemCluster(_story(), [])
    assert classify_cluster(cluster) is not ClusterAction.RESOLVE
    assert classify_cluster(cluster) is ClusterAction.CARRY_FORWARD


def test_orphan_new_tasks_do_not_carry_forward():
    cluster = WorkItemCluster(None, [_task(2, "New")])
    assert classify_cluster(cluster) is ClusterAction.SPLIT


def test_orphan_closed_tasks_resolve():
    cluster = WorkItemCluster(None, [_task(2, "Closed")])
    assert classify_cluster(cluster) is ClusterAction.RESOLVE


def test_empty_orphan_cluster_is_not_resolved():
    assert classify_cluster(WorkItemCluster(None, [])) is ClusterAction.SPLIT


def test_has_sprint_number():
    assert has_sprint_number("Feature 2.1")
    assert not has_sprint_number("Feature 2")
    assert not has_sprint_number("2.1 Feature")
    assert not has_sprint_number(None)


def test_closing_state_by_type():
    assert closing_state(_task(2, "Active")) == "Closed"
    assert closing_state(_story()) == "Resolved"
