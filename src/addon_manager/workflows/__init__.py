"""Workflow lifecycle for addon install/delete steps.

- `TemplateRenderer`: WorkflowType template -> Workflow document
- `WorkflowSubmitter`: create/get/delete/list Workflows through the dynamic API
- `from_install_outcome`: install outcome -> addon phase
- `WorkflowLifecycle`: the install/delete contract for a single Addon
"""

from addon_manager.workflows.errors import (
    DeletionError,
    NotFoundError,
    SubmissionError,
    ValidationError,
    WorkflowAlreadyExists,
    WorkflowError,
)
from addon_manager.workflows.factory import LifecycleFactory
from addon_manager.workflows.lifecycle import AddonLifecycle, WorkflowLifecycle
from addon_manager.workflows.phase import from_install_outcome
from addon_manager.workflows.renderer import TemplateRenderer
from addon_manager.workflows.resource import OwnerReference, WorkflowResource
from addon_manager.workflows.submitter import WorkflowSubmitter

__all__ = [
    "AddonLifecycle",
    "DeletionError",
    "LifecycleFactory",
    "NotFoundError",
    "OwnerReference",
    "SubmissionError",
    "TemplateRenderer",
    "ValidationError",
    "WorkflowAlreadyExists",
    "WorkflowError",
    "WorkflowLifecycle",
    "WorkflowResource",
    "WorkflowSubmitter",
    "from_install_outcome",
]
