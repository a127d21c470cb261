"""In-memory dynamic resource client.

Behaves like the API server for the operations we use: names are unique per
(resource, namespace), `generateName` is honoured, and missing or duplicate
objects raise `NotFound` / `AlreadyExists`.
"""

from __future__ import annotations

import copy
import secrets
import string
import threading
import uuid
from datetime import UTC, datetime
from typing import Any

from addon_manager.common.gvr import GroupVersionResource
from addon_manager.kube.errors import AlreadyExists, ApiError, NotFound

_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits

_Key = tuple[GroupVersionResource, str, str]


def _matches_selector(labels: dict[str, str], selector: str | None) -> bool:
    # Only equality terms ("a=b,c=d") are supported.
    if not selector:
        return True
    for term in selector.split(","):
        key, sep, value = term.strip().partition("=")
        if not sep:
            return False
        if labels.get(key.strip()) != value.strip():
            return False
    return True


class FakeDynamicClient:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._objects: dict[_Key, dict[str, Any]] = {}
        self._resource_version = 0

    def create(
        self,
        gvr: GroupVersionResource,
        namespace: str,
        manifest: dict[str, Any],
        *,
        timeout: float | None = None,
    ) -> dict[str, Any]:
        _ = timeout
        obj = copy.deepcopy(manifest)
        metadata = obj.setdefault("metadata", {})
        if not isinstance(metadata, dict):
            raise ApiError("metadata must be an object", status=422, reason="Invalid")

        ns = metadata.get("namespace") or namespace
        if ns != namespace:
            raise ApiError(
                f"the namespace of the object ({ns}) does not match the request ({namespace})",
                status=400,
                reason="BadRequest",
            )

        with self._lock:
            name = metadata.get("name")
            if not name:
                prefix = metadata.get("generateName")
                if not prefix:
                    raise ApiError(
                        "name or generateName is required", status=422, reason="Invalid"
                    )
                name = self._generate_name(gvr, namespace, prefix)

            key = (gvr, namespace, name)
            if key in self._objects:
                raise AlreadyExists(f'{gvr.resource} "{name}" already exists')

            self._resource_version += 1
            metadata.update(
                {
                    "name": name,
                    "namespace": namespace,
                    "uid": str(uuid.uuid4()),
                    "resourceVersion": str(self._resource_version),
                    "creationTimestamp": datetime.now(tz=UTC).strftime("%Y-%m-%dT%H:%M:%SZ"),
                }
            )
            self._objects[key] = obj
            return copy.deepcopy(obj)

    def _generate_name(self, gvr: GroupVersionResource, namespace: str, prefix: str) -> str:
        while True:
            suffix = "".join(secrets.choice(_SUFFIX_ALPHABET) for _ in range(5))
            candidate = f"{prefix}{suffix}"
            if (gvr, namespace, candidate) not in self._objects:
                return candidate

    def get(
        self,
        gvr: GroupVersionResource,
        namespace: str,
        name: str,
        *,
        timeout: float | None = None,
    ) -> dict[str, Any]:
        _ = timeout
        with self._lock:
            obj = self._objects.get((gvr, namespace, name))
            if obj is None:
                raise NotFound(f'{gvr.resource} "{name}" not found')
            return copy.deepcopy(obj)

    def delete(
        self,
        gvr: GroupVersionResource,
        namespace: str,
        name: str,
        *,
        timeout: float | None = None,
    ) -> None:
        _ = timeout
        with self._lock:
            if self._objects.pop((gvr, namespace, name), None) is None:
                raise NotFound(f'{gvr.resource} "{name}" not found')

    def list(
        self,
        gvr: GroupVersionResource,
        namespace: str,
        *,
        label_selector: str | None = None,
        timeout: float | None = None,
    ) -> list[dict[str, Any]]:
        _ = timeout
        with self._lock:
            out = []
            for (obj_gvr, obj_ns, _name), obj in sorted(
                self._objects.items(), key=lambda kv: kv[0][2]
            ):
                if obj_gvr != gvr or obj_ns != namespace:
                    continue
                labels = obj.get("metadata", {}).get("labels") or {}
                if _matches_selector(labels, label_selector):
                    out.append(copy.deepcopy(obj))
            return out

    def close(self) -> None:
        """No-op; present for parity with `RestDynamicClient`."""
