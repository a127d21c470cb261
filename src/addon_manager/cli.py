"""CLI entrypoint: run addon workflow steps against a cluster by hand.

Useful for exercising a WorkflowType template outside the controller.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from addon_manager import __version__
from addon_manager.api.v1alpha1 import Addon, Phase, WorkflowType
from addon_manager.config import ManagerSettings
from addon_manager.kube.dynamic import AddonClient, RestDynamicClient, new_session
from addon_manager.kube.events import ApiEventRecorder
from addon_manager.kube.scheme import new_scheme
from addon_manager.logging import configure_logging
from addon_manager.workflows.errors import NotFoundError, WorkflowError
from addon_manager.workflows.factory import LifecycleFactory
from addon_manager.workflows.submitter import WorkflowSubmitter

logger = logging.getLogger(__name__)

LIFECYCLE_STEPS = ("prereqs", "install", "delete")


class CliError(Exception):
    pass


def _load_yaml(path: Path) -> Any:
    try:
        return yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise CliError(f"Cannot read {path}: {e}") from e
    except yaml.YAMLError as e:
        raise CliError(f"Invalid YAML in {path}: {e}") from e


def load_addon(path: Path) -> Addon:
    raw = _load_yaml(path)
    if not isinstance(raw, dict):
        raise CliError(f"{path} does not contain an Addon object")
    try:
        return Addon.model_validate(raw)
    except PydanticValidationError as e:
        raise CliError(f"{path} is not a valid Addon: {e}") from e


def load_workflow_type(path: Path) -> WorkflowType:
    """Load a WorkflowType file.

    The file is either a mapping with namePrefix/role/template keys, or a bare
    Workflow manifest used as the template verbatim.
    """

    raw = _load_yaml(path)
    if not isinstance(raw, dict):
        raise CliError(f"{path} does not contain a WorkflowType")
    if "template" in raw:
        try:
            return WorkflowType.model_validate(raw)
        except PydanticValidationError as e:
            raise CliError(f"{path} is not a valid WorkflowType: {e}") from e
    return WorkflowType(template=path.read_text(encoding="utf-8"))


def workflow_for_step(addon: Addon, step: str) -> WorkflowType:
    workflow_type = getattr(addon.spec.lifecycle, step, None)
    if workflow_type is None:
        raise CliError(f"Addon {addon.name} does not define a {step} workflow")
    return workflow_type


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="addonmgr-workflow",
        description="Submit and remove addon lifecycle workflows",
    )
    parser.add_argument(
        "--version", action="version", version=f"addon-manager-workflows {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    install = subparsers.add_parser("install", help="Render and submit an addon workflow")
    install.add_argument("--addon", type=Path, required=True, help="Path to the Addon manifest")
    source = install.add_mutually_exclusive_group(required=True)
    source.add_argument("--workflow", type=Path, help="Path to a WorkflowType or Workflow file")
    source.add_argument(
        "--step", choices=LIFECYCLE_STEPS, help="Use the workflow defined on the Addon"
    )
    install.add_argument(
        "--name",
        default="",
        help="Workflow name; a trailing '-' makes it a generateName prefix "
        "(default: derived from namePrefix)",
    )

    delete = subparsers.add_parser("delete", help="Delete a submitted addon workflow")
    delete.add_argument("--addon", type=Path, required=True, help="Path to the Addon manifest")
    delete.add_argument("--name", required=True, help="Workflow name")

    list_cmd = subparsers.add_parser("list", help="List workflows in a namespace")
    list_cmd.add_argument("--namespace", required=True)
    list_cmd.add_argument("--selector", default=None, help="Label selector, e.g. 'a=b'")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = ManagerSettings()
    except PydanticValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your environment / .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    configure_logging(settings.log_level)

    session = new_session(
        token=settings.resolve_token(),
        ca_cert=settings.resolve_ca_cert(),
        verify_ssl=settings.kube_verify_ssl,
    )
    dynamic = RestDynamicClient(
        api_server=settings.kube_api_server,
        session=session,
        timeout=settings.request_timeout_seconds,
    )

    try:
        if args.command == "list":
            submitter = WorkflowSubmitter(dynamic)
            for wf in submitter.list(args.namespace, label_selector=args.selector):
                status = wf.body.get("status")
                wf_phase = status.get("phase") if isinstance(status, dict) else None
                print(json.dumps({"name": wf.name, "phase": wf_phase}))
            return 0

        addon = load_addon(args.addon)
        recorder = ApiEventRecorder(
            api_server=settings.kube_api_server,
            session=session,
            component=settings.event_component,
        )
        lifecycle = LifecycleFactory.create(
            AddonClient(dynamic), dynamic, addon, recorder, new_scheme()
        )

        if args.command == "install":
            if args.step:
                workflow_type = workflow_for_step(addon, args.step)
            else:
                workflow_type = load_workflow_type(args.workflow)
            phase, err = lifecycle.install(
                workflow_type, args.name, timeout=settings.request_timeout_seconds
            )
            print(phase.value)
            if err is not None:
                print(f"Error: {err}", file=sys.stderr)
            return 0 if phase == Phase.PENDING else 1

        if args.command == "delete":
            try:
                lifecycle.delete(args.name, timeout=settings.request_timeout_seconds)
            except NotFoundError as e:
                print(str(e), file=sys.stderr)
                return 1
            print(f"Deleted workflow {addon.namespace}/{args.name}")
            return 0

        parser.error(f"Unknown command: {args.command}")
        return 2
    except CliError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except WorkflowError as e:
        logger.error("Command failed", extra={"command": args.command, "error": str(e)})
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        dynamic.close()


if __name__ == "__main__":
    raise SystemExit(main())
