"""CLI entry point for eks-idp, built on cli-core-yo.

Provides ``plan`` and ``reconcile`` commands for managing the OIDC identity
provider associated with an EKS cluster.

Usage::

    eks-idp --help
    eks-idp plan --config idp.yaml --profile my-profile
    eks-idp plan --config idp.yaml --detailed-exitcode
    eks-idp reconcile --config idp.yaml --region us-west-2
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any, Optional, Tuple

import typer
from cli_core_yo import output
from cli_core_yo.app import create_app
from cli_core_yo.runtime import _reset, get_context, initialize
from cli_core_yo.spec import CliSpec, XdgSpec
from pydantic import ValidationError

from eks_idp import ui
from eks_idp.identityprovider.procedures import ProcedureKind
from eks_idp.workflow.reconcile import (
    EXIT_AWS_FAILURE,
    EXIT_CHANGES_PENDING,
    EXIT_SUCCESS,
    EXIT_VALIDATION_FAILURE,
    ReconcileError,
    ReconcileResult,
)

# ── App specification ────────────────────────────────────────────────────────

spec = CliSpec(
    prog_name="eks-idp",
    app_display_name="EKS Identity Provider Reconciler",
    dist_name="eks-idp-reconciler",
    root_help=(
        "Plan and apply the OIDC identity provider association "
        "of an Amazon EKS cluster."
    ),
    xdg=XdgSpec(app_dir_name="eks-idp"),
)

app = create_app(spec)


# ── Root callback (global options) ───────────────────────────────────────────


@app.callback()
def _root_callback(
    json_flag: bool = typer.Option(
        False, "--json", "-j", help="Output as JSON."
    ),
) -> None:
    """EKS identity provider reconciler."""
    _reset()
    debug = os.environ.get("CLI_CORE_YO_DEBUG") == "1"
    xdg_paths = app._cli_core_yo_xdg_paths  # type: ignore[attr-defined]
    initialize(spec, xdg_paths, json_mode=json_flag, debug=debug)


# ── shared option handling ───────────────────────────────────────────────────


def _load(config: str, profile: Optional[str], region: Optional[str]) -> Tuple[Any, Any, Any]:
    """Load config + build an EKS client, mapping failures to exit codes.

    Returns ``(cfg, desired, eks_client)``.
    """
    from eks_idp.aws.context import AWSContext
    from eks_idp.config.loader import desired_identity_provider, load_config

    try:
        cfg = load_config(config)
        desired = desired_identity_provider(cfg)
    except (FileNotFoundError, ValueError, ValidationError) as exc:
        output.error(f"Invalid config {config}: {exc}")
        raise typer.Exit(EXIT_VALIDATION_FAILURE) from exc

    try:
        aws_ctx = AWSContext.build(region or cfg.region, profile=profile)
    except RuntimeError as exc:
        output.error(f"AWS context failed: {exc}")
        raise typer.Exit(EXIT_AWS_FAILURE) from exc

    return cfg, desired, aws_ctx.eks()


def _run(
    eks_client: Any,
    cluster_name: str,
    desired: Any,
    *,
    dry_run: bool,
) -> ReconcileResult:
    from eks_idp.workflow.reconcile import reconcile_identity_provider

    try:
        return reconcile_identity_provider(
            eks_client, cluster_name, desired, dry_run=dry_run,
        )
    except ReconcileError as exc:
        output.error(f"Reconcile failed: {exc}")
        _report(exc.result, "FAILED")
        raise typer.Exit(EXIT_AWS_FAILURE) from exc


def _json_mode() -> bool:
    return get_context().json_mode


def _report(result: ReconcileResult, title: str) -> None:
    """Print *result*: one JSON document with --json, console output otherwise."""
    if _json_mode():
        output.emit_json(result.to_dict())
        return

    ui.phase(title)
    ui.print_plan(result.cluster_name, result.planned)
    for name in result.executed:
        ui.step(name)
    if result.status:
        ui.detail("status", result.status)
    if result.error:
        ui.fail(result.error)
    elif result.dry_run and result.has_changes:
        ui.warn("Dry run: no procedures were executed")
    elif ProcedureKind.DISASSOCIATE.value in result.executed:
        ui.warn(
            "Disassociated the current identity provider; "
            "a changed config is associated on the next pass"
        )


# ── plan command ─────────────────────────────────────────────────────────────


@app.command()
def plan(
    config: str = typer.Option(
        ...,
        "--config",
        help="Path to the identity provider config YAML.",
    ),
    profile: Optional[str] = typer.Option(
        None,
        "--profile",
        help="AWS CLI profile. Defaults to AWS_PROFILE env var.",
    ),
    region: Optional[str] = typer.Option(
        None,
        "--region",
        help="AWS region. Defaults to the config file, then AWS_DEFAULT_REGION.",
    ),
    detailed_exitcode: bool = typer.Option(
        False,
        "--detailed-exitcode",
        help="Exit 3 when the plan has pending changes.",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug logging.",
    ),
) -> None:
    """Show the procedures a reconcile would run (no changes are made).

    Exit codes: 0 = success, 1 = invalid config, 2 = AWS error,
    3 = changes pending (with --detailed-exitcode).
    """
    if debug:
        logging.basicConfig(level=logging.DEBUG)

    cfg, desired, eks_client = _load(config, profile, region)
    output.action(f"Planning identity provider for cluster '{cfg.cluster_name}' ...")

    result = _run(eks_client, cfg.cluster_name, desired, dry_run=True)
    _report(result, "PLAN")

    if detailed_exitcode and result.has_changes:
        raise typer.Exit(EXIT_CHANGES_PENDING)
    raise typer.Exit(EXIT_SUCCESS)


# ── reconcile command ────────────────────────────────────────────────────────


@app.command()
def reconcile(
    config: str = typer.Option(
        ...,
        "--config",
        help="Path to the identity provider config YAML.",
    ),
    profile: Optional[str] = typer.Option(
        None,
        "--profile",
        help="AWS CLI profile. Defaults to AWS_PROFILE env var.",
    ),
    region: Optional[str] = typer.Option(
        None,
        "--region",
        help="AWS region. Defaults to the config file, then AWS_DEFAULT_REGION.",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Compute the plan but do not execute it.",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug logging.",
    ),
) -> None:
    """Run one reconcile pass: observe, plan, execute.

    Disassociation and association of a changed provider take two passes;
    run the command again once the old association is gone.
    """
    if debug:
        logging.basicConfig(level=logging.DEBUG)

    cfg, desired, eks_client = _load(config, profile, region)
    output.action(f"Reconciling identity provider for cluster '{cfg.cluster_name}' ...")

    result = _run(eks_client, cfg.cluster_name, desired, dry_run=dry_run)
    _report(result, "RECONCILE")

    output.success("Reconcile complete.")
    raise typer.Exit(EXIT_SUCCESS)


# ── Entry point ──────────────────────────────────────────────────────────────


def main() -> int:
    """Run the CLI and return an exit code."""
    try:
        app()
        return 0
    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else 0


if __name__ == "__main__":
    sys.exit(main())
