"""A small registry of the kinds this process knows how to handle.

Typed kinds are registered with the Python class that models them; kinds that
are only ever handled as plain documents (e.g. Argo `Workflow`) are registered
by name.
"""

from __future__ import annotations

from addon_manager.api.v1alpha1 import Addon
from addon_manager.common.gvr import (
    GroupVersion,
    GroupVersionKind,
    addon_gvk,
    workflow_gvk,
)


class NotRegisteredError(LookupError):
    pass


class Scheme:
    def __init__(self) -> None:
        self._kinds: set[GroupVersionKind] = set()
        self._types: dict[type, GroupVersionKind] = {}

    def add_known_types(self, group_version: GroupVersion, *types: type) -> None:
        """Register classes under `group_version`, using the class name as kind."""

        for cls in types:
            gvk = GroupVersionKind(
                group=group_version.group, version=group_version.version, kind=cls.__name__
            )
            self._kinds.add(gvk)
            self._types[cls] = gvk

    def add_known_kinds(self, group_version: GroupVersion, *kinds: str) -> None:
        for kind in kinds:
            self._kinds.add(
                GroupVersionKind(group=group_version.group, version=group_version.version, kind=kind)
            )

    def recognizes(self, gvk: GroupVersionKind) -> bool:
        return gvk in self._kinds

    def object_kind(self, obj: object) -> GroupVersionKind:
        """Return the registered kind for an object's type.

        Raises:
            NotRegisteredError: if the type was never registered.
        """

        for cls in type(obj).__mro__:
            gvk = self._types.get(cls)
            if gvk is not None:
                return gvk
        raise NotRegisteredError(f"no kind is registered for the type {type(obj).__name__}")


def new_scheme() -> Scheme:
    """Build a scheme with the Addon and Workflow kinds registered."""

    scheme = Scheme()
    scheme.add_known_types(addon_gvk().group_version(), Addon)
    scheme.add_known_kinds(addon_gvk().group_version(), "AddonList")
    scheme.add_known_kinds(workflow_gvk().group_version(), "Workflow", "WorkflowList")
    return scheme
