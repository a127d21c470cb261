"""Factory for choosing an addon lifecycle implementation."""

import logging

from addon_manager.api.v1alpha1 import Addon, PkgType
from addon_manager.kube.dynamic import DynamicResourceClient, StructuredClient
from addon_manager.kube.events import EventRecorder
from addon_manager.kube.scheme import Scheme
from addon_manager.workflows.lifecycle import AddonLifecycle, WorkflowLifecycle

logger = logging.getLogger(__name__)

# Both package types run their install/delete steps as workflows.
_LIFECYCLES: dict[PkgType, type[WorkflowLifecycle]] = {
    PkgType.HELM: WorkflowLifecycle,
    PkgType.COMPOSITE: WorkflowLifecycle,
}


class LifecycleFactory:
    """Factory for creating addon lifecycle instances."""

    @staticmethod
    def create(
        client: StructuredClient,
        dynamic_client: DynamicResourceClient,
        addon: Addon,
        recorder: EventRecorder,
        scheme: Scheme,
    ) -> AddonLifecycle:
        """Create the lifecycle for an addon based on its package type.

        Raises:
            ValueError: If the package type is not supported.
        """
        pkg_type = addon.spec.pkg_type
        logger.debug(f"Creating lifecycle for package type: {pkg_type.value}")

        lifecycle_cls = _LIFECYCLES.get(pkg_type)
        if lifecycle_cls is None:
            raise ValueError(f"Unsupported package type: {pkg_type.value}")
        return lifecycle_cls(client, dynamic_client, addon, recorder, scheme)
