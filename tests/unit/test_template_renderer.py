"""Unit tests for rendering WorkflowType templates."""

from __future__ import annotations

import pytest

from addon_manager.api.v1alpha1 import Addon, ObjectMeta, WorkflowType
from addon_manager.common.gvr import ADDON_LABEL, ROLE_ANNOTATION
from addon_manager.workflows.errors import ValidationError
from addon_manager.workflows.renderer import TemplateRenderer

MINIMAL_TEMPLATE = """
apiVersion: argoproj.io/v1alpha1
kind: Workflow
metadata:
  namespace: elsewhere
  labels:
    team: platform
  annotations:
    note: keep-me
  finalizers: [cleanup]
spec:
  entrypoint: main
  templates:
    - name: main
      container:
        image: alpine:latest
"""


@pytest.fixture
def renderer(addon: Addon) -> TemplateRenderer:
    return TemplateRenderer(addon)


def test_render_exact_name(renderer: TemplateRenderer, workflow_type: WorkflowType) -> None:
    wf = renderer.render(workflow_type, "addon-wf-test")

    assert wf.name == "addon-wf-test"
    assert wf.generate_name == ""
    assert wf.namespace == "default"

    manifest = wf.to_manifest()
    assert manifest["apiVersion"] == "argoproj.io/v1alpha1"
    assert manifest["kind"] == "Workflow"
    assert manifest["metadata"]["name"] == "addon-wf-test"


def test_render_keeps_template_body(renderer: TemplateRenderer, workflow_type: WorkflowType) -> None:
    wf = renderer.render(workflow_type, "addon-wf-test")

    templates = wf.body["spec"]["templates"]
    assert [t["name"] for t in templates] == [
        "python-script-example",
        "gen-random-int",
        "print-message",
    ]
    assert templates[0]["steps"][1][0]["arguments"]["parameters"][0]["value"] == (
        "{{steps.generate.outputs.result}}"
    )


def test_render_merges_metadata(renderer: TemplateRenderer) -> None:
    wt = WorkflowType(name_prefix="p", role="arn:aws:iam::123:role/x", template=MINIMAL_TEMPLATE)
    wf = renderer.render(wt, "addon-wf-test")

    # Namespace always comes from the addon.
    assert wf.namespace == "default"
    assert wf.labels == {"team": "platform", ADDON_LABEL: "foo"}
    assert wf.annotations == {"note": "keep-me", ROLE_ANNOTATION: "arn:aws:iam::123:role/x"}
    assert wf.to_manifest()["metadata"]["finalizers"] == ["cleanup"]


def test_render_without_role_adds_no_annotation(renderer: TemplateRenderer) -> None:
    wf = renderer.render(WorkflowType(template=MINIMAL_TEMPLATE), "addon-wf-test")
    assert ROLE_ANNOTATION not in wf.annotations


def test_trailing_dash_target_is_generate_name(renderer: TemplateRenderer) -> None:
    wf = renderer.render(WorkflowType(template=MINIMAL_TEMPLATE), "foo-install-")

    assert wf.name == ""
    assert wf.generate_name == "foo-install-"
    assert "name" not in wf.to_manifest()["metadata"]


def test_empty_target_uses_name_prefix(renderer: TemplateRenderer) -> None:
    wf = renderer.render(WorkflowType(name_prefix="foo-prereqs", template=MINIMAL_TEMPLATE), "")
    assert wf.generate_name == "foo-prereqs-"


def test_empty_target_without_prefix_fails(renderer: TemplateRenderer) -> None:
    with pytest.raises(ValidationError):
        renderer.render(WorkflowType(template=MINIMAL_TEMPLATE), "")


@pytest.mark.parametrize(
    "template",
    [
        "",
        "   \n",
        "spec: [unclosed",
        "- just\n- a list\n",
        "kind: Workflow\n",
        "apiVersion: v1\nkind: Workflow\nspec: {}\n",
        "apiVersion: argoproj.io/v1alpha1\nkind: CronWorkflow\nspec: {}\n",
        "metadata: nope\nspec: {}\n",
        "metadata:\n  labels: [a]\nspec: {}\n",
        "metadata:\n  labels:\n    enabled: true\nspec: {}\n",
        "metadata:\n  annotations:\n    replicas: 3\nspec: {}\n",
        "spec:\n  data: !!binary aGVsbG8=\n",
        "spec:\n  tags: !!set {a, b}\n",
        "spec:\n  ratio: .nan\n",
    ],
)
def test_invalid_templates_fail(renderer: TemplateRenderer, template: str) -> None:
    with pytest.raises(ValidationError):
        renderer.render(WorkflowType(name_prefix="p", template=template), "addon-wf-test")


@pytest.mark.parametrize("name", ["Addon-WF", "addon_wf", "-addon", "a" * 254])
def test_invalid_names_fail(renderer: TemplateRenderer, name: str) -> None:
    with pytest.raises(ValidationError):
        renderer.render(WorkflowType(template=MINIMAL_TEMPLATE), name)


def test_addon_without_namespace_fails() -> None:
    renderer = TemplateRenderer(Addon(metadata=ObjectMeta(name="foo")))
    with pytest.raises(ValidationError):
        renderer.render(WorkflowType(template=MINIMAL_TEMPLATE), "addon-wf-test")


def test_render_is_pure(renderer: TemplateRenderer, workflow_type: WorkflowType) -> None:
    first = renderer.render(workflow_type, "addon-wf-test")
    first.body["spec"]["entrypoint"] = "mutated"

    second = renderer.render(workflow_type, "addon-wf-test")
    assert second.body["spec"]["entrypoint"] == "python-script-example"


def test_addon_without_name_fails() -> None:
    renderer = TemplateRenderer(Addon(metadata=ObjectMeta(namespace="default")))
    with pytest.raises(ValidationError, match="addon name"):
        renderer.render(WorkflowType(template=MINIMAL_TEMPLATE), "addon-wf-test")


def test_dates_stay_strings(renderer: TemplateRenderer) -> None:
    template = (
        "spec:\n"
        "  entrypoint: main\n"
        "  arguments:\n"
        "    parameters:\n"
        "      - name: release\n"
        "        value: 2024-01-01\n"
        "      - name: cutoff\n"
        "        value: 2024-01-01T10:00:00Z\n"
    )

    wf = renderer.render(WorkflowType(template=template), "addon-wf-test")

    params = wf.body["spec"]["arguments"]["parameters"]
    assert params[0]["value"] == "2024-01-01"
    assert params[1]["value"] == "2024-01-01T10:00:00Z"
