"""Workflow-backed addon lifecycle.

An addon's install and delete steps run as Argo Workflows. The lifecycle
renders a step's template, submits it owned by the Addon, reports the
resulting phase and records an event on the Addon.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from addon_manager.api.v1alpha1 import Addon, Phase, WorkflowType
from addon_manager.common.gvr import workflow_gvk
from addon_manager.kube.dynamic import DynamicResourceClient, StructuredClient
from addon_manager.kube.errors import ApiError, NotFound
from addon_manager.kube.events import EVENT_TYPE_NORMAL, EVENT_TYPE_WARNING, EventRecorder
from addon_manager.kube.scheme import NotRegisteredError, Scheme
from addon_manager.workflows.errors import SubmissionError, ValidationError, WorkflowError
from addon_manager.workflows.phase import from_install_outcome
from addon_manager.workflows.renderer import TemplateRenderer
from addon_manager.workflows.resource import OwnerReference
from addon_manager.workflows.submitter import WorkflowSubmitter

logger = logging.getLogger(__name__)

REASON_INSTALLING = "Installing"
REASON_FAILED = "Failed"


class AddonLifecycle(ABC):
    """Install/delete contract for one Addon.

    Implementations are bound to a single Addon for their whole life and keep
    no state between calls.
    """

    @abstractmethod
    def install(
        self,
        workflow_type: WorkflowType,
        name: str,
        *,
        timeout: float | None = None,
    ) -> tuple[Phase, WorkflowError | None]:
        """Start an install step.

        Returns:
            The resulting phase and, on failure, the error that caused it. A
            phase is always returned so callers can update addon status.
        """

    @abstractmethod
    def delete(self, name: str, *, timeout: float | None = None) -> None:
        """Remove a previously submitted step.

        Raises:
            NotFoundError: nothing by that name exists.
            DeletionError: the removal was rejected.
        """


class WorkflowLifecycle(AddonLifecycle):
    def __init__(
        self,
        client: StructuredClient,
        dynamic_client: DynamicResourceClient,
        addon: Addon,
        recorder: EventRecorder,
        scheme: Scheme,
    ) -> None:
        self._client = client
        self._addon = addon
        self._recorder = recorder
        self._scheme = scheme
        self._renderer = TemplateRenderer(addon)
        self._submitter = WorkflowSubmitter(dynamic_client)

    @property
    def addon(self) -> Addon:
        return self._addon

    def install(
        self,
        workflow_type: WorkflowType,
        name: str,
        *,
        timeout: float | None = None,
    ) -> tuple[Phase, WorkflowError | None]:
        err: WorkflowError | None = None
        submitted = name
        try:
            resource = self._renderer.render(workflow_type, name)
            owner = self._owner_reference(timeout=timeout)
            if owner is not None:
                resource = resource.with_owner(owner)
            created = self._submitter.create(self._addon.namespace, resource, timeout=timeout)
            submitted = created.name
        except WorkflowError as e:
            err = e

        phase = from_install_outcome(err)
        if err is None:
            logger.info(
                "Addon install workflow started",
                extra={"addon": self._addon.name, "namespace": self._addon.namespace, "workflow": submitted},
            )
            self._record(
                EVENT_TYPE_NORMAL,
                REASON_INSTALLING,
                f"Workflow {submitted} submitted for addon {self._addon.name}",
            )
        else:
            logger.error(
                "Addon install workflow failed",
                extra={
                    "addon": self._addon.name,
                    "namespace": self._addon.namespace,
                    "workflow": name,
                    "error": str(err),
                },
            )
            self._record(
                EVENT_TYPE_WARNING,
                REASON_FAILED,
                f"Failed to submit workflow {name or workflow_type.name_prefix}: {err}",
            )
        return phase, err

    def delete(self, name: str, *, timeout: float | None = None) -> None:
        self._submitter.delete(self._addon.namespace, name, timeout=timeout)

    def _owner_reference(self, *, timeout: float | None) -> OwnerReference | None:
        """Build the Addon owner reference for a Workflow.

        Returns None (and logs) when the Addon has no uid and is not stored in
        the cluster yet.
        """

        try:
            gvk = self._scheme.object_kind(self._addon)
        except NotRegisteredError as e:
            raise ValidationError(f"cannot set workflow owner: {e}") from e
        if not self._scheme.recognizes(workflow_gvk()):
            raise ValidationError("the Workflow kind is not registered in the scheme")

        uid = self._addon.metadata.uid
        if not uid:
            try:
                stored = self._client.get_addon(
                    self._addon.namespace, self._addon.name, timeout=timeout
                )
            except NotFound:
                logger.warning(
                    "Addon not found in cluster; submitting workflow without owner reference",
                    extra={"addon": self._addon.name, "namespace": self._addon.namespace},
                )
                return None
            except ApiError as e:
                raise SubmissionError(
                    f"failed to look up addon {self._addon.namespace}/{self._addon.name}: {e}"
                ) from e
            uid = stored.metadata.uid
            if not uid:
                return None

        return OwnerReference(
            api_version=gvk.group_version().api_version,
            kind=gvk.kind,
            name=self._addon.name,
            uid=uid,
        )

    def _record(self, event_type: str, reason: str, message: str) -> None:
        try:
            self._recorder.event(self._addon, event_type, reason, message)
        except Exception:
            logger.warning(
                "Event recording failed",
                extra={"addon": self._addon.name, "reason": reason},
                exc_info=True,
            )
