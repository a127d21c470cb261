#!/usr/bin/env python3
"""Programmatic install/delete example.

This demonstrates using the lifecycle components directly:

* load settings from `.env`
* build clients for the cluster API
* submit a workflow for an addon, then remove it

The Addon manifest path and workflow name are passed as arguments.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Sequence

from addon_manager.api.v1alpha1 import Phase
from addon_manager.cli import load_addon, workflow_for_step
from addon_manager.config import ManagerSettings
from addon_manager.kube.dynamic import AddonClient, RestDynamicClient, new_session
from addon_manager.kube.events import ApiEventRecorder
from addon_manager.kube.scheme import new_scheme
from addon_manager.logging import configure_logging
from addon_manager.workflows.errors import NotFoundError
from addon_manager.workflows.lifecycle import WorkflowLifecycle


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Install then delete an addon workflow.")
    parser.add_argument("--addon", type=Path, required=True, help="Path to the Addon manifest")
    parser.add_argument("--name", required=True, help="Workflow name")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    settings = ManagerSettings()
    configure_logging(settings.log_level)

    session = new_session(
        token=settings.resolve_token(),
        ca_cert=settings.resolve_ca_cert(),
        verify_ssl=settings.kube_verify_ssl,
    )
    dynamic = RestDynamicClient(api_server=settings.kube_api_server, session=session)
    recorder = ApiEventRecorder(
        api_server=settings.kube_api_server, session=session, component=settings.event_component
    )

    addon = load_addon(args.addon)
    lifecycle = WorkflowLifecycle(AddonClient(dynamic), dynamic, addon, recorder, new_scheme())

    phase, err = lifecycle.install(workflow_for_step(addon, "install"), args.name)
    print(f"Install phase: {phase.value}")
    if phase == Phase.FAILED:
        print(f"Error: {err}")
        return 1

    try:
        lifecycle.delete(args.name)
    except NotFoundError as exc:
        print(str(exc))
        return 1

    print(f"Deleted workflow {addon.namespace}/{args.name}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
