"""SprintService: iteration selection, close preview, and the closing run."""

from __future__ import annotations

from dataclasses import dataclass

import pandas as pd

from .devops_client import DevOpsAPI
from .error_log import ErrorSink
from .grouping import select_all_clusters
from .mappers import clusters_to_dataframe, map_iteration
from .models import Iteration, TimeFrame, WorkItemCluster
from .processor import CloseReport, ProgressCallback, SprintProcessor


@dataclass(slots=True)
class ClosingTargets:
    previous: Iteration | None
    current: Iteration | None
    future: Iteration | None


@dataclass(slots=True)
class ClosingPlan:
    label: str
    source: Iteration
    destination: Iteration


def select_closing_targets(iterations: list[Iteration]) -> ClosingTargets:
    """Pick the current iteration, the most recent past one, and the next one.

    Team iterations come back in schedule order, so the most recent past
    iteration is the last one tagged ``past``.
    """
    past = [it for it in iterations if it.time_frame is TimeFrame.PAST]
    current = next((it for it in iterations if it.time_frame is TimeFrame.CURRENT), None)
    future = next((it for it in iterations if it.time_frame is TimeFrame.FUTURE), None)
    return ClosingTargets(previous=past[-1] if past else None, current=current, future=future)


def closing_plans(targets: ClosingTargets) -> list[ClosingPlan]:
    """Available closing plans: current into future, previous into current."""
    plans: list[ClosingPlan] = []
    if targets.current and targets.future:
        plans.append(ClosingPlan(f"Close Sprint: {targets.current.name}", targets.current, targets.future))
    if targets.previous and targets.current:
        plans.append(
            ClosingPlan(f"Close Previous Sprint: {targets.previous.name}", targets.previous, targets.current)
        )
    return plans


class SprintService:
    def __init__(self, api: DevOpsAPI):
        self.api = api

    def get_iterations(self) -> list[Iteration]:
        return [map_iteration(raw) for raw in self.api.get_team_iterations()]

    def closing_targets(self) -> ClosingTargets:
        return select_closing_targets(self.get_iterations())

    def clusters(self, iteration: Iteration) -> list[WorkItemCluster]:
        return select_all_clusters(self.api, self.api.team_context, iteration)

    def preview(self, iteration: Iteration) -> pd.DataFrame:
        """Work items of ``iteration`` with the action planned for each cluster."""
        return clusters_to_dataframe(self.clusters(iteration))

    def close_sprint(
        self,
        source: Iteration,
        destination: Iteration,
        error_sink: ErrorSink,
        *,
        progress: ProgressCallback | None = None,
    ) -> CloseReport:
        processor = SprintProcessor(self.api, self.api.team_context, error_sink)
        return processor.process(source, destination, progress)
