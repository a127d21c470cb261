"""Create, read and delete Workflow resources through the dynamic API."""

from __future__ import annotations

import logging

from addon_manager.common.gvr import workflow_gvr
from addon_manager.kube.dynamic import DynamicResourceClient
from addon_manager.kube.errors import AlreadyExists, ApiError, NotFound
from addon_manager.workflows.errors import (
    DeletionError,
    NotFoundError,
    SubmissionError,
    WorkflowAlreadyExists,
    WorkflowError,
)
from addon_manager.workflows.resource import WorkflowResource

logger = logging.getLogger(__name__)


class WorkflowSubmitter:
    """Thin, error-classifying wrapper around the dynamic client for Workflows."""

    def __init__(self, dynamic: DynamicResourceClient) -> None:
        self._dynamic = dynamic
        self._gvr = workflow_gvr()

    def create(
        self, namespace: str, resource: WorkflowResource, *, timeout: float | None = None
    ) -> WorkflowResource:
        """Submit `resource` and return it as stored by the API.

        Raises:
            WorkflowAlreadyExists: a Workflow with that name is already present.
            SubmissionError: any other rejection or transport failure.
        """

        try:
            created = self._dynamic.create(
                self._gvr, namespace, resource.to_manifest(), timeout=timeout
            )
        except AlreadyExists as e:
            raise WorkflowAlreadyExists(namespace, resource.display_name) from e
        except ApiError as e:
            raise SubmissionError(
                f"failed to submit workflow {namespace}/{resource.display_name}: {e}"
            ) from e
        except (TypeError, ValueError) as e:
            # The manifest could not be encoded as a request body.
            raise SubmissionError(
                f"failed to encode workflow {namespace}/{resource.display_name}: {e}"
            ) from e

        stored = WorkflowResource.from_manifest(created)
        logger.info(
            "Workflow submitted",
            extra={"namespace": namespace, "workflow": stored.name, "uid": stored.uid},
        )
        return stored

    def get(self, namespace: str, name: str, *, timeout: float | None = None) -> WorkflowResource:
        try:
            raw = self._dynamic.get(self._gvr, namespace, name, timeout=timeout)
        except NotFound as e:
            raise NotFoundError(namespace, name) from e
        except ApiError as e:
            raise WorkflowError(f"failed to get workflow {namespace}/{name}: {e}") from e
        return WorkflowResource.from_manifest(raw)

    def delete(self, namespace: str, name: str, *, timeout: float | None = None) -> None:
        """Delete an existing Workflow.

        A missing Workflow is an error, not a no-op.

        Raises:
            NotFoundError: no Workflow with that name exists.
            DeletionError: the lookup or delete request was rejected.
        """

        try:
            self._dynamic.get(self._gvr, namespace, name, timeout=timeout)
        except NotFound as e:
            raise NotFoundError(namespace, name) from e
        except ApiError as e:
            raise DeletionError(f"failed to look up workflow {namespace}/{name}: {e}") from e

        try:
            self._dynamic.delete(self._gvr, namespace, name, timeout=timeout)
        except NotFound as e:
            # Removed between lookup and delete.
            raise NotFoundError(namespace, name) from e
        except ApiError as e:
            raise DeletionError(f"failed to delete workflow {namespace}/{name}: {e}") from e

        logger.info("Workflow deleted", extra={"namespace": namespace, "workflow": name})

    def list(
        self,
        namespace: str,
        *,
        label_selector: str | None = None,
        timeout: float | None = None,
    ) -> list[WorkflowResource]:
        try:
            items = self._dynamic.list(
                self._gvr, namespace, label_selector=label_selector, timeout=timeout
            )
        except ApiError as e:
            raise WorkflowError(f"failed to list workflows in {namespace}: {e}") from e
        return [WorkflowResource.from_manifest(item) for item in items]
