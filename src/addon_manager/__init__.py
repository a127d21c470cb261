"""Addon manager workflow lifecycle.

Renders addon install/delete steps into Argo Workflows, submits or removes
them through the cluster API, and reports the resulting addon phase.
"""

__version__ = "0.1.0"

from addon_manager.api.v1alpha1 import Addon, Phase, WorkflowType
from addon_manager.workflows.lifecycle import AddonLifecycle, WorkflowLifecycle

__all__ = ["__version__", "Addon", "AddonLifecycle", "Phase", "WorkflowLifecycle", "WorkflowType"]
