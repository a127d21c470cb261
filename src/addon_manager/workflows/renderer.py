"""Render a WorkflowType template into a submittable Workflow."""

from __future__ import annotations

import json
import logging
import re
from typing import Any

import yaml

from addon_manager.api.v1alpha1 import Addon, WorkflowType
from addon_manager.common.gvr import ADDON_LABEL, ROLE_ANNOTATION
from addon_manager.workflows.errors import ValidationError
from addon_manager.workflows.resource import WorkflowResource

logger = logging.getLogger(__name__)

_DNS1123_SUBDOMAIN = re.compile(r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?(\.[a-z0-9]([-a-z0-9]*[a-z0-9])?)*$")
_MAX_NAME_LENGTH = 253
# The API server appends a 5 character random suffix to generateName.
_GENERATED_SUFFIX_LENGTH = 5


def _validate_name(name: str) -> None:
    if len(name) > _MAX_NAME_LENGTH or not _DNS1123_SUBDOMAIN.match(name):
        raise ValidationError(
            f"invalid workflow name {name!r}: must be a lowercase RFC 1123 subdomain"
        )


def _validate_generate_name(prefix: str) -> None:
    # Validate as if the suffix had already been appended.
    if len(prefix) + _GENERATED_SUFFIX_LENGTH > _MAX_NAME_LENGTH or not _DNS1123_SUBDOMAIN.match(
        prefix + "x" * _GENERATED_SUFFIX_LENGTH
    ):
        raise ValidationError(
            f"invalid workflow generateName {prefix!r}: must be a lowercase RFC 1123 subdomain prefix"
        )


def _string_map(value: object, field_name: str) -> dict[str, str]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValidationError(f"template metadata.{field_name} must be a mapping")
    for k, v in value.items():
        if not isinstance(k, str) or not isinstance(v, str):
            raise ValidationError(
                f"template metadata.{field_name} must map strings to strings, got {k!r}: {v!r}"
            )
    return dict(value)


class _TemplateLoader(yaml.SafeLoader):
    """SafeLoader that leaves timestamps as plain strings."""


_TemplateLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != "tag:yaml.org,2002:timestamp"]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


class TemplateRenderer:
    """Turns WorkflowType templates into Workflow resources for one Addon.

    Rendering is a pure transformation: nothing is submitted and no state is
    kept between calls.
    """

    def __init__(self, addon: Addon) -> None:
        self._addon = addon

    def render(self, workflow_type: WorkflowType, target_name: str) -> WorkflowResource:
        """Render `workflow_type` into a Workflow named after `target_name`.

        A non-empty `target_name` is used as the exact name, unless it ends in
        "-" in which case it becomes a generateName prefix. With an empty
        `target_name` the generateName is derived from `namePrefix`.

        Raises:
            ValidationError: the template is empty or malformed, or no valid
                name can be derived.
        """

        namespace = self._addon.namespace
        if not namespace:
            raise ValidationError("addon namespace is required to render a workflow")
        if not self._addon.name:
            raise ValidationError("addon name is required to render a workflow")

        document = self._parse_template(workflow_type.template)
        name, generate_name = self._resolve_name(workflow_type, target_name)

        raw_meta = document.get("metadata")
        if raw_meta is None:
            raw_meta = {}
        if not isinstance(raw_meta, dict):
            raise ValidationError("template metadata must be a mapping")

        template_ns = raw_meta.get("namespace")
        if template_ns and template_ns != namespace:
            logger.debug(
                "Overriding template namespace with addon namespace",
                extra={"template_namespace": template_ns, "namespace": namespace},
            )

        labels = _string_map(raw_meta.get("labels"), "labels")
        labels[ADDON_LABEL] = self._addon.name
        annotations = _string_map(raw_meta.get("annotations"), "annotations")
        if workflow_type.role:
            annotations[ROLE_ANNOTATION] = workflow_type.role

        extra_metadata = {
            k: v
            for k, v in raw_meta.items()
            if k
            not in {"name", "generateName", "namespace", "labels", "annotations", "ownerReferences"}
        }
        body = {k: v for k, v in document.items() if k not in {"apiVersion", "kind", "metadata"}}

        resource = WorkflowResource(
            namespace=namespace,
            name=name,
            generate_name=generate_name,
            labels=labels,
            annotations=annotations,
            extra_metadata=extra_metadata,
            body=body,
        )
        logger.debug(
            "Rendered workflow",
            extra={"namespace": namespace, "workflow": resource.display_name},
        )
        return resource

    @staticmethod
    def _parse_template(template: str) -> dict[str, Any]:
        if not template.strip():
            raise ValidationError("workflow template is empty")

        try:
            document = yaml.load(template, Loader=_TemplateLoader)
        except yaml.YAMLError as e:
            raise ValidationError(f"workflow template is not valid YAML: {e}") from e

        if not isinstance(document, dict):
            raise ValidationError("workflow template must be a mapping")

        # The manifest is sent as JSON, so binary, set and NaN values cannot be submitted.
        try:
            json.dumps(document, allow_nan=False)
        except (TypeError, ValueError) as e:
            raise ValidationError(f"workflow template is not JSON-compatible: {e}") from e

        api_version = document.get("apiVersion")
        if api_version is not None and api_version != WorkflowResource.API_VERSION:
            raise ValidationError(
                f"workflow template apiVersion must be {WorkflowResource.API_VERSION}, "
                f"got {api_version!r}"
            )
        kind = document.get("kind")
        if kind is not None and kind != WorkflowResource.KIND:
            raise ValidationError(
                f"workflow template kind must be {WorkflowResource.KIND}, got {kind!r}"
            )
        if not isinstance(document.get("spec"), dict):
            raise ValidationError("workflow template must contain a spec mapping")
        return document

    @staticmethod
    def _resolve_name(workflow_type: WorkflowType, target_name: str) -> tuple[str, str]:
        """Return (name, generate_name); exactly one is non-empty."""

        target = target_name.strip()
        if target:
            if target.endswith("-"):
                _validate_generate_name(target)
                return "", target
            _validate_name(target)
            return target, ""

        prefix = workflow_type.name_prefix.strip()
        if not prefix:
            raise ValidationError("either a target name or a workflow namePrefix is required")
        generate_name = prefix if prefix.endswith("-") else f"{prefix}-"
        _validate_generate_name(generate_name)
        return "", generate_name
