"""SprintProcessor: classifies clusters and issues the closing mutations.

Every remote call runs as one fallible step. A failed step is folded into the
run's error list, the injected error sink, and the log; it never stops the
remaining children of a cluster or the clusters after it. Steps are issued
sequentially so a parent copy exists (and its URL is known) before any child
is linked to it.

Runs are not idempotent: re-running after a partial failure copies again.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from functools import partial
from typing import Any

from .classification import ClusterAction, classify_cluster, closing_state, has_sprint_number
from .config import STATE_CLOSED, STATE_NEW, STATE_RESOLVED
from .devops_client import WorkItemStore
from .error_log import ErrorSink
from .errors import FetchError, MissingParentError, MutationError
from .grouping import select_all_clusters
from .mappers import map_work_item
from .models import ErrorRecord, Iteration, PatchDocument, TeamContext, WorkItem, WorkItemCluster, patch_to_wire
from .patches import (
    copy_with_child_relation,
    copy_with_parent_relation,
    mark_superseded,
    move_to_iteration,
    relink_child,
    transition_state,
)

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int], None]


@dataclass(slots=True)
class StepResult:
    ok: bool
    value: Any = None
    error: MutationError | None = None


@dataclass(slots=True)
class CloseReport:
    source: Iteration
    destination: Iteration
    clusters: int = 0
    created: list[int] = field(default_factory=list)
    updated: list[int] = field(default_factory=list)
    errors: list[ErrorRecord] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return not self.errors


class SprintProcessor:
    def __init__(self, store: WorkItemStore, team_context: TeamContext, error_sink: ErrorSink):
        self.store = store
        self.team_context = team_context
        self.error_sink = error_sink

    def process(
        self,
        source: Iteration,
        destination: Iteration,
        on_progress: ProgressCallback | None = None,
    ) -> CloseReport:
        """Close ``source`` by carrying its unfinished work into ``destination``.

        Only a ``FetchError`` escapes; every other failure ends up in the
        returned report and the error sink.
        """
        report = CloseReport(source=source, destination=destination)
        try:
            clusters = select_all_clusters(self.store, self.team_context, source)
        except FetchError as exc:
            self._record(ErrorRecord(error=str(exc)))
            logger.error("Aborting close of %s: %s", source.name, exc)
            raise

        total = sum(len(c.all_items) for c in clusters)
        completed = 0
        for cluster in clusters:
            self._process_cluster(cluster, destination, report)
            report.clusters += 1
            completed += len(cluster.all_items)
            if on_progress and total:
                on_progress(completed * 100 // total)
        if on_progress and not total:
            on_progress(100)

        logger.info(
            "Closed %s into %s: %d cluster(s), %d created, %d updated, %d error(s)",
            source.name,
            destination.name,
            report.clusters,
            len(report.created),
            len(report.updated),
            len(report.errors),
        )
        return report

    def _process_cluster(self, cluster: WorkItemCluster, destination: Iteration, report: CloseReport) -> None:
        action = classify_cluster(cluster)
        logger.debug(
            "Cluster %s (%d children) -> %s",
            cluster.parent.id if cluster.parent else "<no parent>",
            len(cluster.children),
            action.value,
        )
        if action is ClusterAction.CARRY_FORWARD:
            self._carry_forward(cluster, destination, report)
        elif action is ClusterAction.RESOLVE:
            self._resolve(cluster, report)
        else:
            self._split(cluster, destination, report)

    # ------------------ Actions ------------------
    def _carry_forward(self, cluster: WorkItemCluster, destination: Iteration, report: CloseReport) -> None:
        parent = cluster.parent
        if not has_sprint_number(parent.title):
            for item in cluster.all_items:
                self._update(report, "move_to_iteration", item.id, move_to_iteration(destination.path))
            return
        copied = self._copy_parent(parent, destination, report)
        if copied is None:
            return
        for child in cluster.children:
            self._relink(report, child, copied.url, destination)

    def _resolve(self, cluster: WorkItemCluster, report: CloseReport) -> None:
        if cluster.parent is None:
            self._fold(report, StepResult(False, error=MissingParentError("resolve", "No parent work item")))
            return
        self._update(report, "resolve", cluster.parent.id, transition_state(STATE_RESOLVED))

    def _split(self, cluster: WorkItemCluster, destination: Iteration, report: CloseReport) -> None:
        parent = cluster.parent
        if parent is None:
            self._fold(report, StepResult(False, error=MissingParentError("split", "No parent work item")))
            return
        copied = self._copy_parent(parent, destination, report)
        if copied is None:
            return
        for child in cluster.children:
            if child.state == STATE_CLOSED:
                continue
            if child.state == STATE_NEW:
                self._relink(report, child, copied.url, destination)
                continue
            build = partial(copy_with_child_relation, child, copied.url, destination.path, destination.name)
            if self._create(report, "copy_with_child_relation", child, build).ok:
                self._update(report, "close_work_item", child.id, transition_state(STATE_CLOSED))
        self._update(report, "close_work_item", parent.id, transition_state(closing_state(parent)))

    # ------------------ Steps ------------------
    def _copy_parent(self, parent: WorkItem, destination: Iteration, report: CloseReport) -> WorkItem | None:
        # Build the copy first so bad relation data leaves the original untouched
        built = self._step(
            "copy_with_parent_relation",
            parent.id,
            lambda: copy_with_parent_relation(parent, destination.path, destination.name),
        )
        if not self._fold(report, built).ok:
            return None
        if not self._update(report, "mark_superseded", parent.id, mark_superseded(parent)).ok:
            return None
        result = self._create(report, "copy_with_parent_relation", parent, lambda: built.value)
        return result.value if result.ok else None

    def _relink(self, report: CloseReport, child: WorkItem, parent_url: str, destination: Iteration) -> StepResult:
        def run():
            # Relation positions may have moved since the cluster was read
            fresh = self.store.get_work_items_by_ids([child.id], expand="Relations")
            current = map_work_item(fresh[0]) if fresh else child
            patch = relink_child(current, parent_url, destination.path)
            return self.store.update_work_item(patch_to_wire(patch), child.id)

        result = self._step("relink_child", child.id, run)
        if result.ok:
            report.updated.append(child.id)
        return self._fold(report, result)

    def _update(self, report: CloseReport, operation: str, item_id: int, patch: PatchDocument) -> StepResult:
        result = self._step(operation, item_id, lambda: self.store.update_work_item(patch_to_wire(patch), item_id))
        if result.ok:
            report.updated.append(item_id)
        return self._fold(report, result)

    def _create(
        self,
        report: CloseReport,
        operation: str,
        source: WorkItem,
        build: Callable[[], PatchDocument],
    ) -> StepResult:
        def run():
            patch = build()
            raw = self.store.create_work_item(patch_to_wire(patch), self.team_context.project_id, source.type)
            return map_work_item(raw)

        result = self._step(operation, source.id, run)
        if result.ok:
            report.created.append(result.value.id)
        return self._fold(report, result)

    def _step(self, operation: str, item_id: int | None, fn: Callable[[], Any]) -> StepResult:
        try:
            return StepResult(True, value=fn())
        except MutationError as exc:
            return StepResult(False, error=exc)
        except Exception as exc:
            return StepResult(False, error=MutationError(operation, str(exc), item_id))

    def _fold(self, report: CloseReport, result: StepResult) -> StepResult:
        if result.ok:
            return result
        exc = result.error
        record = ErrorRecord(error=str(exc), work_item_id=exc.work_item_id)
        report.errors.append(record)
        self._record(record)
        if exc.latent_bug:
            logger.error("Invariant violated in %s: %s", exc.operation, exc)
        else:
            logger.warning("%s failed: %s", exc.operation, exc)
        return result

    def _record(self, record: ErrorRecord) -> None:
        # A broken sink must not abort the run; the report still holds the record
        try:
            self.error_sink.record(record)
        except Exception as exc:
            logger.warning("Could not write to error log: %s (%s)", exc, record.error)
