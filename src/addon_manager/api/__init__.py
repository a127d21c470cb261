"""Typed API objects consumed by the workflow lifecycle."""

from addon_manager.api.v1alpha1 import (
    Addon,
    AddonSpec,
    LabelSelector,
    LifecycleWorkflowSpec,
    ObjectMeta,
    PackageSpec,
    Phase,
    PkgType,
    WorkflowType,
)

__all__ = [
    "Addon",
    "AddonSpec",
    "LabelSelector",
    "LifecycleWorkflowSpec",
    "ObjectMeta",
    "PackageSpec",
    "Phase",
    "PkgType",
    "WorkflowType",
]
