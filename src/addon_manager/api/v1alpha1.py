"""Addon API types (addonmgr.keikoproj.io/v1alpha1).

These mirror the JSON shape stored in the cluster (camelCase keys). Models
accept either the wire alias or the Python field name.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class _ApiModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class PkgType(str, Enum):
    HELM = "helm"
    COMPOSITE = "composite"


class Phase(str, Enum):
    """Addon-visible lifecycle phase.

    Install/delete only ever produce PENDING or FAILED. RUNNING and SUCCEEDED
    are set by whatever watches the submitted workflow afterwards.
    """

    PENDING = "Pending"
    RUNNING = "Running"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"


class ObjectMeta(_ApiModel):
    name: str = ""
    namespace: str = ""
    uid: str = ""
    labels: dict[str, str] = Field(default_factory=dict)
    annotations: dict[str, str] = Field(default_factory=dict)


class LabelSelectorRequirement(_ApiModel):
    key: str
    operator: str
    values: list[str] = Field(default_factory=list)


class LabelSelector(_ApiModel):
    match_labels: dict[str, str] = Field(default_factory=dict, alias="matchLabels")
    match_expressions: list[LabelSelectorRequirement] = Field(
        default_factory=list, alias="matchExpressions"
    )

    def to_query(self) -> str:
        """Render as a label selector query string ("a=b,c in (d,e)")."""

        parts = [f"{k}={v}" for k, v in sorted(self.match_labels.items())]
        for req in self.match_expressions:
            op = req.operator
            if op == "In":
                parts.append(f"{req.key} in ({','.join(req.values)})")
            elif op == "NotIn":
                parts.append(f"{req.key} notin ({','.join(req.values)})")
            elif op == "Exists":
                parts.append(req.key)
            elif op == "DoesNotExist":
                parts.append(f"!{req.key}")
            else:
                raise ValueError(f"Unsupported label selector operator: {op}")
        return ",".join(parts)


class WorkflowType(_ApiModel):
    """Template descriptor for a single lifecycle workflow.

    All fields default to empty so that an unset step can be represented;
    validity is checked when the template is rendered.
    """

    name_prefix: str = Field(default="", alias="namePrefix")
    role: str = ""
    template: str = ""


class LifecycleWorkflowSpec(_ApiModel):
    prereqs: WorkflowType | None = None
    install: WorkflowType | None = None
    delete: WorkflowType | None = None


class PackageSpec(_ApiModel):
    pkg_name: str = Field(default="", alias="pkgName")
    pkg_version: str = Field(default="", alias="pkgVersion")
    pkg_type: PkgType = Field(default=PkgType.COMPOSITE, alias="pkgType")
    pkg_description: str = Field(default="", alias="pkgDescription")
    pkg_deps: dict[str, str] = Field(default_factory=dict, alias="pkgDeps")


class AddonSpec(PackageSpec):
    """Addon spec; package fields are inlined at the top level on the wire."""

    selector: LabelSelector = Field(default_factory=LabelSelector)
    lifecycle: LifecycleWorkflowSpec = Field(default_factory=LifecycleWorkflowSpec)

    @property
    def package_spec(self) -> PackageSpec:
        return PackageSpec(
            pkg_name=self.pkg_name,
            pkg_version=self.pkg_version,
            pkg_type=self.pkg_type,
            pkg_description=self.pkg_description,
            pkg_deps=dict(self.pkg_deps),
        )


class Addon(_ApiModel):
    api_version: str = Field(default="addonmgr.keikoproj.io/v1alpha1", alias="apiVersion")
    kind: str = "Addon"
    metadata: ObjectMeta = Field(default_factory=ObjectMeta)
    spec: AddonSpec = Field(default_factory=AddonSpec)

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def namespace(self) -> str:
        return self.metadata.namespace
