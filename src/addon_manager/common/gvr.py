"""Group/version/kind identities for the resources this package touches."""

from __future__ import annotations

from dataclasses import dataclass

ADDON_GROUP = "addonmgr.keikoproj.io"
WORKFLOW_GROUP = "argoproj.io"
API_VERSION = "v1alpha1"

ADDON_LABEL = f"{ADDON_GROUP}/addon"
ROLE_ANNOTATION = f"{ADDON_GROUP}/role"


@dataclass(frozen=True, slots=True)
class GroupVersion:
    group: str
    version: str

    @property
    def api_version(self) -> str:
        """The `apiVersion` string ("group/version", or just "version" for core)."""

        if not self.group:
            return self.version
        return f"{self.group}/{self.version}"

    @staticmethod
    def parse(api_version: str) -> GroupVersion:
        group, sep, version = api_version.partition("/")
        if not sep:
            return GroupVersion(group="", version=group)
        return GroupVersion(group=group, version=version)


@dataclass(frozen=True, slots=True)
class GroupVersionKind:
    group: str
    version: str
    kind: str

    def group_version(self) -> GroupVersion:
        return GroupVersion(group=self.group, version=self.version)


@dataclass(frozen=True, slots=True)
class GroupVersionResource:
    group: str
    version: str
    resource: str

    def group_version(self) -> GroupVersion:
        return GroupVersion(group=self.group, version=self.version)


def addon_gvr() -> GroupVersionResource:
    return GroupVersionResource(group=ADDON_GROUP, version=API_VERSION, resource="addons")


def addon_gvk() -> GroupVersionKind:
    return GroupVersionKind(group=ADDON_GROUP, version=API_VERSION, kind="Addon")


def workflow_gvr() -> GroupVersionResource:
    return GroupVersionResource(group=WORKFLOW_GROUP, version=API_VERSION, resource="workflows")


def workflow_gvk() -> GroupVersionKind:
    return GroupVersionKind(group=WORKFLOW_GROUP, version=API_VERSION, kind="Workflow")
