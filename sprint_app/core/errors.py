"""Error taxonomy for the sprint closing run."""

from __future__ import annotations


class SprintCloseError(Exception):
    """Base class for every error raised or recorded while closing a sprint."""


class FetchError(SprintCloseError):
    """Work items for the source iteration could not be retrieved.

    Aborts the whole run since no clusters are known.
    """


class MutationError(SprintCloseError):
    """A single create/update step failed. Recorded; the run continues."""

    latent_bug = False

    def __init__(self, operation: str, message: str, work_item_id: int | None = None):
        self.operation = operation
        self.work_item_id = work_item_id
        self.message = message
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.work_item_id is None:
            return f"{self.operation}: {self.message}"
        return f"{self.operation}: {self.work_item_id}: {self.message}"


class MissingParentError(MutationError):
    """A cluster that needs a parent work item has none."""


class InvariantError(MutationError):
    """Work item data broke an assumption the closing rules depend on."""

    latent_bug = True
