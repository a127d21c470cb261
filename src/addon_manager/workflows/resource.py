"""The submittable Workflow document.

Fields the lifecycle cares about are typed; everything else in the template
(`spec`, `status`, unknown metadata keys) is carried opaquely so that template
content survives a render/submit/read cycle unchanged.
"""

from __future__ import annotations

import copy
import dataclasses
from dataclasses import dataclass, field
from typing import Any, ClassVar

from addon_manager.common.gvr import workflow_gvk

_TYPED_METADATA_KEYS = frozenset(
    {"name", "generateName", "namespace", "labels", "annotations", "ownerReferences"}
)


@dataclass(frozen=True, slots=True)
class OwnerReference:
    api_version: str
    kind: str
    name: str
    uid: str
    controller: bool = True
    block_owner_deletion: bool = True

    def to_json(self) -> dict[str, object]:
        return {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "name": self.name,
            "uid": self.uid,
            "controller": self.controller,
            "blockOwnerDeletion": self.block_owner_deletion,
        }

    @staticmethod
    def from_json(obj: dict[str, Any]) -> OwnerReference:
        return OwnerReference(
            api_version=str(obj.get("apiVersion", "")),
            kind=str(obj.get("kind", "")),
            name=str(obj.get("name", "")),
            uid=str(obj.get("uid", "")),
            controller=bool(obj.get("controller", False)),
            block_owner_deletion=bool(obj.get("blockOwnerDeletion", False)),
        )


def _str_map(value: object) -> dict[str, str]:
    if not isinstance(value, dict):
        return {}
    return {str(k): str(v) for k, v in value.items()}


@dataclass(frozen=True, slots=True)
class WorkflowResource:
    API_VERSION: ClassVar[str] = workflow_gvk().group_version().api_version
    KIND: ClassVar[str] = workflow_gvk().kind

    namespace: str
    name: str = ""
    generate_name: str = ""
    labels: dict[str, str] = field(default_factory=dict)
    annotations: dict[str, str] = field(default_factory=dict)
    owner_references: tuple[OwnerReference, ...] = ()
    # Untyped metadata (uid, resourceVersion, creationTimestamp, finalizers, ...).
    extra_metadata: dict[str, Any] = field(default_factory=dict)
    # Everything outside apiVersion/kind/metadata.
    body: dict[str, Any] = field(default_factory=dict)

    @property
    def uid(self) -> str | None:
        uid = self.extra_metadata.get("uid")
        return uid if isinstance(uid, str) else None

    @property
    def display_name(self) -> str:
        """The exact name, or the generate-name prefix when not yet named."""

        return self.name or self.generate_name

    def with_owner(self, ref: OwnerReference) -> WorkflowResource:
        others = tuple(r for r in self.owner_references if r.uid != ref.uid or not ref.uid)
        return dataclasses.replace(self, owner_references=(*others, ref))

    def to_manifest(self) -> dict[str, Any]:
        metadata: dict[str, Any] = copy.deepcopy(self.extra_metadata)
        metadata["namespace"] = self.namespace
        if self.name:
            metadata["name"] = self.name
        if self.generate_name:
            metadata["generateName"] = self.generate_name
        if self.labels:
            metadata["labels"] = dict(self.labels)
        if self.annotations:
            metadata["annotations"] = dict(self.annotations)
        if self.owner_references:
            metadata["ownerReferences"] = [r.to_json() for r in self.owner_references]

        manifest: dict[str, Any] = {
            "apiVersion": self.API_VERSION,
            "kind": self.KIND,
            "metadata": metadata,
        }
        manifest.update(copy.deepcopy(self.body))
        return manifest

    @staticmethod
    def from_manifest(obj: dict[str, Any]) -> WorkflowResource:
        raw_meta = obj.get("metadata")
        metadata: dict[str, Any] = raw_meta if isinstance(raw_meta, dict) else {}

        refs_raw = metadata.get("ownerReferences")
        refs = tuple(
            OwnerReference.from_json(r)
            for r in (refs_raw if isinstance(refs_raw, list) else [])
            if isinstance(r, dict)
        )
        return WorkflowResource(
            namespace=str(metadata.get("namespace", "")),
            name=str(metadata.get("name", "")),
            generate_name=str(metadata.get("generateName", "")),
            labels=_str_map(metadata.get("labels")),
            annotations=_str_map(metadata.get("annotations")),
            owner_references=refs,
            extra_metadata={
                k: copy.deepcopy(v) for k, v in metadata.items() if k not in _TYPED_METADATA_KEYS
            },
            body={
                k: copy.deepcopy(v)
                for k, v in obj.items()
                if k not in {"apiVersion", "kind", "metadata"}
            },
        )
