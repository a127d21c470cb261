"""Clients for the cluster resource API.

`DynamicResourceClient` is the schema-agnostic capability the workflow code
depends on: namespaced create/get/delete/list of plain JSON documents
identified by group/version/resource. `RestDynamicClient` implements it over
the API server's REST interface; `kube.fake.FakeDynamicClient` implements it
in memory.

`AddonClient` layers typed access to Addon objects on top of any dynamic
client.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Protocol

import requests
from pydantic import ValidationError

from addon_manager.api.v1alpha1 import Addon
from addon_manager.common.gvr import GroupVersionResource, addon_gvr
from addon_manager.kube.errors import AlreadyExists, ApiError, NotFound

logger = logging.getLogger(__name__)


class DynamicResourceClient(Protocol):
    def create(
        self,
        gvr: GroupVersionResource,
        namespace: str,
        manifest: dict[str, Any],
        *,
        timeout: float | None = None,
    ) -> dict[str, Any]: ...

    def get(
        self,
        gvr: GroupVersionResource,
        namespace: str,
        name: str,
        *,
        timeout: float | None = None,
    ) -> dict[str, Any]: ...

    def delete(
        self,
        gvr: GroupVersionResource,
        namespace: str,
        name: str,
        *,
        timeout: float | None = None,
    ) -> None: ...

    def list(
        self,
        gvr: GroupVersionResource,
        namespace: str,
        *,
        label_selector: str | None = None,
        timeout: float | None = None,
    ) -> list[dict[str, Any]]: ...


class StructuredClient(Protocol):
    """Typed read access to Addon objects."""

    def get_addon(self, namespace: str, name: str, *, timeout: float | None = None) -> Addon: ...


def new_session(
    *,
    token: str = "",
    ca_cert: Path | None = None,
    verify_ssl: bool = True,
) -> requests.Session:
    """Create a `requests.Session` authenticated against the API server."""

    session = requests.Session()
    session.headers.update(
        {
            "Accept": "application/json",
            "User-Agent": "addon-manager-workflows",
        }
    )
    if token:
        session.headers["Authorization"] = f"Bearer {token}"
    if not verify_ssl:
        session.verify = False
    elif ca_cert is not None:
        session.verify = str(ca_cert)
    return session


def _status_message(resp: requests.Response) -> tuple[str, str]:
    """Extract (reason, message) from a Kubernetes `Status` error body."""

    try:
        data = resp.json()
    except ValueError:
        return "", resp.text.strip()
    if not isinstance(data, dict):
        return "", resp.text.strip()
    reason = data.get("reason")
    message = data.get("message")
    return (
        reason if isinstance(reason, str) else "",
        message if isinstance(message, str) else resp.text.strip(),
    )


class RestDynamicClient:
    """Dynamic resource client backed by the API server's REST interface."""

    def __init__(
        self,
        *,
        api_server: str,
        session: requests.Session | None = None,
        timeout: float = 30.0,
    ) -> None:
        if not api_server:
            raise ValueError("API server URL is required")
        self._base_url = api_server.rstrip("/")
        self._session = session or new_session()
        self._timeout = timeout

    def _collection_url(self, gvr: GroupVersionResource, namespace: str) -> str:
        if not namespace:
            raise ValueError("namespace is required")
        if gvr.group:
            prefix = f"{self._base_url}/apis/{gvr.group}/{gvr.version}"
        else:
            prefix = f"{self._base_url}/api/{gvr.version}"
        return f"{prefix}/namespaces/{namespace}/{gvr.resource}"

    def _object_url(self, gvr: GroupVersionResource, namespace: str, name: str) -> str:
        if not name:
            raise ValueError("name is required")
        return f"{self._collection_url(gvr, namespace)}/{name}"

    def _request(self, method: str, url: str, *, timeout: float | None, **kwargs: Any) -> Any:
        try:
            resp = self._session.request(
                method, url, timeout=timeout if timeout is not None else self._timeout, **kwargs
            )
        except requests.RequestException as e:
            raise ApiError(f"{method} {url} failed: {e}") from e

        if resp.status_code < 400:
            if not resp.content:
                return None
            return resp.json()

        reason, message = _status_message(resp)
        if resp.status_code == 404:
            raise NotFound(message or f"{url} not found")
        if resp.status_code == 409 and reason == "AlreadyExists":
            raise AlreadyExists(message or f"{url} already exists")
        raise ApiError(
            message or f"{method} {url} returned {resp.status_code}",
            status=resp.status_code,
            reason=reason,
        )

    def create(
        self,
        gvr: GroupVersionResource,
        namespace: str,
        manifest: dict[str, Any],
        *,
        timeout: float | None = None,
    ) -> dict[str, Any]:
        url = self._collection_url(gvr, namespace)
        logger.debug("Creating resource", extra={"url": url})
        data = self._request("POST", url, json=manifest, timeout=timeout)
        if not isinstance(data, dict):
            raise ApiError(f"Unexpected create response from {url}")
        return data

    def get(
        self,
        gvr: GroupVersionResource,
        namespace: str,
        name: str,
        *,
        timeout: float | None = None,
    ) -> dict[str, Any]:
        url = self._object_url(gvr, namespace, name)
        data = self._request("GET", url, timeout=timeout)
        if not isinstance(data, dict):
            raise ApiError(f"Unexpected get response from {url}")
        return data

    def delete(
        self,
        gvr: GroupVersionResource,
        namespace: str,
        name: str,
        *,
        timeout: float | None = None,
    ) -> None:
        url = self._object_url(gvr, namespace, name)
        logger.debug("Deleting resource", extra={"url": url})
        self._request(
            "DELETE",
            url,
            json={"kind": "DeleteOptions", "apiVersion": "v1", "propagationPolicy": "Background"},
            timeout=timeout,
        )

    def list(
        self,
        gvr: GroupVersionResource,
        namespace: str,
        *,
        label_selector: str | None = None,
        timeout: float | None = None,
    ) -> list[dict[str, Any]]:
        url = self._collection_url(gvr, namespace)
        params = {"labelSelector": label_selector} if label_selector else None
        data = self._request("GET", url, params=params, timeout=timeout)
        items = data.get("items") if isinstance(data, dict) else None
        if not isinstance(items, list):
            return []
        return [item for item in items if isinstance(item, dict)]

    def close(self) -> None:
        self._session.close()


class AddonClient:
    """Typed Addon access on top of a dynamic client."""

    def __init__(self, dynamic: DynamicResourceClient) -> None:
        self._dynamic = dynamic

    def get_addon(self, namespace: str, name: str, *, timeout: float | None = None) -> Addon:
        raw = self._dynamic.get(addon_gvr(), namespace, name, timeout=timeout)
        try:
            return Addon.model_validate(raw)
        except ValidationError as e:
            raise ApiError(f"Addon {namespace}/{name} has an unexpected shape: {e}") from e
