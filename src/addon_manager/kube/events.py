"""Event recording against the owning Addon.

Recording is fire-and-forget: recorders never raise to their caller.
"""

from __future__ import annotations

import logging
import threading
import uuid
from datetime import UTC, datetime
from typing import Protocol

import requests

from addon_manager.api.v1alpha1 import Addon

logger = logging.getLogger(__name__)

EVENT_TYPE_NORMAL = "Normal"
EVENT_TYPE_WARNING = "Warning"

DEFAULT_COMPONENT = "addons"


class EventRecorder(Protocol):
    def event(self, obj: Addon, event_type: str, reason: str, message: str) -> None: ...


class FakeRecorder:
    """Keeps recorded events in memory as "<type> <reason> <message>" strings."""

    def __init__(self, component: str = DEFAULT_COMPONENT) -> None:
        self.component = component
        self.events: list[str] = []
        self._lock = threading.Lock()

    def event(self, obj: Addon, event_type: str, reason: str, message: str) -> None:
        _ = obj
        with self._lock:
            self.events.append(f"{event_type} {reason} {message}")


class ApiEventRecorder:
    """Posts core/v1 `Event` objects to the API server."""

    def __init__(
        self,
        *,
        api_server: str,
        session: requests.Session,
        component: str = DEFAULT_COMPONENT,
        timeout: float = 10.0,
    ) -> None:
        self._base_url = api_server.rstrip("/")
        self._session = session
        self._timeout = timeout
        self.component = component

    def _build_event(self, obj: Addon, event_type: str, reason: str, message: str) -> dict[str, object]:
        now = datetime.now(tz=UTC).strftime("%Y-%m-%dT%H:%M:%SZ")
        involved: dict[str, object] = {
            "apiVersion": obj.api_version,
            "kind": obj.kind,
            "name": obj.name,
            "namespace": obj.namespace,
        }
        if obj.metadata.uid:
            involved["uid"] = obj.metadata.uid
        return {
            "apiVersion": "v1",
            "kind": "Event",
            "metadata": {
                "name": f"{obj.name}.{uuid.uuid4().hex[:16]}",
                "namespace": obj.namespace,
            },
            "involvedObject": involved,
            "type": event_type,
            "reason": reason,
            "message": message,
            "source": {"component": self.component},
            "firstTimestamp": now,
            "lastTimestamp": now,
            "count": 1,
        }

    def event(self, obj: Addon, event_type: str, reason: str, message: str) -> None:
        if not obj.namespace:
            logger.warning("Skipping event for object without namespace", extra={"reason": reason})
            return

        url = f"{self._base_url}/api/v1/namespaces/{obj.namespace}/events"
        try:
            resp = self._session.post(
                url, json=self._build_event(obj, event_type, reason, message), timeout=self._timeout
            )
            resp.raise_for_status()
        except requests.RequestException as e:
            logger.warning(
                "Failed to record event",
                extra={"addon": obj.name, "namespace": obj.namespace, "reason": reason, "error": str(e)},
            )
