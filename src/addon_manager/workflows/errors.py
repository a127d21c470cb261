"""Error taxonomy for workflow lifecycle operations.

None of these are retried here; callers decide what to do with them.
"""

from __future__ import annotations


class WorkflowError(Exception):
    """Base class for workflow lifecycle failures."""


class ValidationError(WorkflowError):
    """The workflow type or target name is unusable. Permanent."""


class SubmissionError(WorkflowError):
    """The resource API rejected the workflow or could not be reached."""


class WorkflowAlreadyExists(SubmissionError):
    def __init__(self, namespace: str, name: str) -> None:
        super().__init__(f"Workflow {namespace}/{name} already exists")
        self.namespace = namespace
        self.name = name


class NotFoundError(WorkflowError):
    def __init__(self, namespace: str, name: str) -> None:
        super().__init__(f"Workflow {namespace}/{name} not found")
        self.namespace = namespace
        self.name = name


class DeletionError(WorkflowError):
    """The resource API rejected a delete request."""
