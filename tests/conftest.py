"""Test configuration and fixtures."""

from __future__ import annotations

import pytest

from addon_manager.api.v1alpha1 import (
    Addon,
    AddonSpec,
    LabelSelector,
    ObjectMeta,
    PkgType,
    WorkflowType,
)
from addon_manager.kube.dynamic import AddonClient
from addon_manager.kube.events import FakeRecorder
from addon_manager.kube.fake import FakeDynamicClient
from addon_manager.kube.scheme import Scheme, new_scheme
from addon_manager.workflows.lifecycle import WorkflowLifecycle

WF_SPEC_TEMPLATE = """
apiVersion: argoproj.io/v1alpha1
kind: Workflow
metadata:
  generateName: scripts-python-
spec:
  entrypoint: python-script-example
  templates:
    - name: python-script-example
      steps:
        - - name: generate
            template: gen-random-int
        - - name: print
            template: print-message
            arguments:
              parameters:
                - name: message
                  value: "{{steps.generate.outputs.result}}"

    - name: gen-random-int
      script:
        image: python:alpine3.6
        command: [python]
        source: |
          import random
          i = random.randint(1, 100)
          print(i)
    - name: print-message
      inputs:
        parameters:
          - name: message
      container:
        image: alpine:latest
        command: [sh, -c]
        args: ["echo result was: {{inputs.parameters.message}}"]
"""


@pytest.fixture
def scheme() -> Scheme:
    """Provide a scheme with Addon and Workflow kinds registered."""
    return new_scheme()


@pytest.fixture
def dyn_client() -> FakeDynamicClient:
    """Provide an empty in-memory dynamic client."""
    return FakeDynamicClient()


@pytest.fixture
def recorder() -> FakeRecorder:
    return FakeRecorder()


@pytest.fixture
def addon() -> Addon:
    """Provide the `foo/default` test addon."""
    return Addon(
        metadata=ObjectMeta(name="foo", namespace="default"),
        spec=AddonSpec(
            pkg_name="my-addon",
            pkg_version="1.0.0",
            pkg_type=PkgType.HELM,
            pkg_description="",
            pkg_deps={"core/A": "*", "core/B": "v1.0.0"},
            selector=LabelSelector(match_labels={"app": "my-app"}),
        ),
    )


@pytest.fixture
def workflow_type() -> WorkflowType:
    return WorkflowType(name_prefix="test", role="myrole", template=WF_SPEC_TEMPLATE)


@pytest.fixture
def lifecycle(
    dyn_client: FakeDynamicClient,
    addon: Addon,
    recorder: FakeRecorder,
    scheme: Scheme,
) -> WorkflowLifecycle:
    return WorkflowLifecycle(AddonClient(dyn_client), dyn_client, addon, recorder, scheme)
