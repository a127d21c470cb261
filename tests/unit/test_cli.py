"""Unit tests for the CLI, wired to the in-memory dynamic client."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import Mock

import pytest
import requests
import yaml

from addon_manager import cli
from addon_manager.common.gvr import workflow_gvr
from addon_manager.kube.fake import FakeDynamicClient

ADDON_MANIFEST = {
    "apiVersion": "addonmgr.keikoproj.io/v1alpha1",
    "kind": "Addon",
    "metadata": {"name": "foo", "namespace": "default"},
    "spec": {
        "pkgName": "my-addon",
        "pkgVersion": "1.0.0",
        "pkgType": "helm",
        "pkgDeps": {"core/A": "*", "core/B": "v1.0.0"},
        "selector": {"matchLabels": {"app": "my-app"}},
        "lifecycle": {
            "install": {
                "namePrefix": "foo-install",
                "role": "myrole",
                "template": "kind: Workflow\nspec:\n  entrypoint: main\n",
            }
        },
    },
}


@pytest.fixture
def fake_cluster(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> FakeDynamicClient:
    for var in ("KUBE_API_SERVER", "KUBE_TOKEN", "ADDONMGR_REQUEST_TIMEOUT_SECONDS", "LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("KUBE_TOKEN_FILE", str(tmp_path / "no-token"))
    monkeypatch.chdir(tmp_path)

    dynamic = FakeDynamicClient()
    monkeypatch.setattr(cli, "RestDynamicClient", lambda **_kwargs: dynamic)
    monkeypatch.setattr(cli, "new_session", lambda **_kwargs: Mock(spec=requests.Session))
    monkeypatch.setattr(cli, "configure_logging", lambda _level: None)
    return dynamic


@pytest.fixture
def addon_file(tmp_path: Path) -> Path:
    path = tmp_path / "addon.yaml"
    path.write_text(yaml.safe_dump(ADDON_MANIFEST), encoding="utf-8")
    return path


def test_install_step_from_addon(
    fake_cluster: FakeDynamicClient, addon_file: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    rc = cli.main(["install", "--addon", str(addon_file), "--step", "install"])

    assert rc == 0
    assert capsys.readouterr().out.strip() == "Pending"
    items = fake_cluster.list(workflow_gvr(), "default")
    assert len(items) == 1
    assert items[0]["metadata"]["name"].startswith("foo-install-")


def test_install_missing_step_is_usage_error(
    fake_cluster: FakeDynamicClient, addon_file: Path
) -> None:
    rc = cli.main(["install", "--addon", str(addon_file), "--step", "delete"])

    assert rc == 2
    assert fake_cluster.list(workflow_gvr(), "default") == []


def test_install_invalid_workflow_reports_failed(
    fake_cluster: FakeDynamicClient,
    addon_file: Path,
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    wf_file = tmp_path / "wf.yaml"
    wf_file.write_text("namePrefix: x\nrole: r\ntemplate: ''\n", encoding="utf-8")

    rc = cli.main(
        ["install", "--addon", str(addon_file), "--workflow", str(wf_file), "--name", "wf-1"]
    )

    assert rc == 1
    assert capsys.readouterr().out.strip() == "Failed"


def test_delete_round_trip(
    fake_cluster: FakeDynamicClient, addon_file: Path, tmp_path: Path
) -> None:
    wf_file = tmp_path / "wf.yaml"
    wf_file.write_text("kind: Workflow\nspec:\n  entrypoint: main\n", encoding="utf-8")

    assert (
        cli.main(
            [
                "install",
                "--addon",
                str(addon_file),
                "--workflow",
                str(wf_file),
                "--name",
                "addon-wf-test",
            ]
        )
        == 0
    )
    assert cli.main(["delete", "--addon", str(addon_file), "--name", "addon-wf-test"]) == 0
    assert cli.main(["delete", "--addon", str(addon_file), "--name", "addon-wf-test"]) == 1


def test_configuration_error_exit_code(
    fake_cluster: FakeDynamicClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("ADDONMGR_REQUEST_TIMEOUT_SECONDS", "-1")

    assert cli.main(["list", "--namespace", "default"]) == 2
