"""Unit tests for the Addon API models."""

from __future__ import annotations

import pytest

from addon_manager.api.v1alpha1 import (
    Addon,
    LabelSelector,
    LabelSelectorRequirement,
    PkgType,
)
from addon_manager.common.gvr import GroupVersion, addon_gvk, workflow_gvk
from addon_manager.kube.scheme import NotRegisteredError, Scheme, new_scheme


def test_addon_parses_wire_shape() -> None:
    addon = Addon.model_validate(
        {
            "metadata": {"name": "foo", "namespace": "default"},
            "spec": {
                "pkgName": "my-addon",
                "pkgVersion": "1.0.0",
                "pkgType": "composite",
                "pkgDeps": {"core/A": "*", "core/B": "v1.0.0"},
                "selector": {"matchLabels": {"app": "my-app"}},
                "lifecycle": {
                    "install": {"namePrefix": "foo", "role": "r", "template": "spec: {}"}
                },
            },
        }
    )

    assert addon.name == "foo"
    assert addon.namespace == "default"
    assert addon.spec.pkg_type == PkgType.COMPOSITE
    assert addon.spec.package_spec.pkg_name == "my-addon"
    assert addon.spec.selector.match_labels == {"app": "my-app"}
    assert addon.spec.lifecycle.install is not None
    assert addon.spec.lifecycle.install.name_prefix == "foo"
    assert addon.spec.lifecycle.delete is None


def test_label_selector_query() -> None:
    selector = LabelSelector(
        match_labels={"b": "2", "a": "1"},
        match_expressions=[
            LabelSelectorRequirement(key="env", operator="In", values=["dev", "qa"]),
            LabelSelectorRequirement(key="legacy", operator="DoesNotExist"),
        ],
    )
    assert selector.to_query() == "a=1,b=2,env in (dev,qa),!legacy"


def test_label_selector_rejects_unknown_operator() -> None:
    selector = LabelSelector(
        match_expressions=[LabelSelectorRequirement(key="x", operator="Gt", values=["1"])]
    )
    with pytest.raises(ValueError):
        selector.to_query()


def test_default_scheme_knows_addon_and_workflow() -> None:
    scheme = new_scheme()
    assert scheme.recognizes(workflow_gvk())
    assert scheme.object_kind(Addon()) == addon_gvk()


def test_empty_scheme_rejects_addon() -> None:
    with pytest.raises(NotRegisteredError):
        Scheme().object_kind(Addon())


def test_group_version_parse() -> None:
    assert GroupVersion.parse("argoproj.io/v1alpha1") == GroupVersion("argoproj.io", "v1alpha1")
    assert GroupVersion.parse("v1").api_version == "v1"
