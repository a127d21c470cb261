"""Shared constants and resource identities."""

from addon_manager.common.gvr import (
    ADDON_LABEL,
    ROLE_ANNOTATION,
    GroupVersion,
    GroupVersionKind,
    GroupVersionResource,
    addon_gvk,
    addon_gvr,
    workflow_gvk,
    workflow_gvr,
)

__all__ = [
    "ADDON_LABEL",
    "ROLE_ANNOTATION",
    "GroupVersion",
    "GroupVersionKind",
    "GroupVersionResource",
    "addon_gvk",
    "addon_gvr",
    "workflow_gvk",
    "workflow_gvr",
]
