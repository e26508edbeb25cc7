"""CLI entry point: monodeploy.

Subcommands:
    monodeploy check                # Dependency version consistency across packages
    monodeploy bundle               # Build and deploy services with production deps
    monodeploy services             # List the service registry
"""

from __future__ import annotations

import json
import sys
from dataclasses import replace
from pathlib import Path

import click

from monodeploy.checker.consistency import check_workspace
from monodeploy.checker.models import ConsistencyReport
from monodeploy.config import Settings, load_settings
from monodeploy.core.logging import setup_logging
from monodeploy.deploy.models import DeploymentReport, DeploymentStatus
from monodeploy.deploy.orchestrator import DeploymentOrchestrator
from monodeploy.deploy.registry import SERVICE_REGISTRY, get_services
from monodeploy.deploy.toolchain import PnpmToolchain
from monodeploy.exceptions import ConfigError, UnknownServiceError

_STATUS_ICONS = {
    DeploymentStatus.DEPLOYED: "+",
    DeploymentStatus.SOURCE_MISSING: "-",
    DeploymentStatus.EXTRACT_FAILED: "!",
    DeploymentStatus.BUILD_FAILED: "!",
}


def _format_size(size: int) -> str:
    value = float(size)
    if value < 1024:
        return f"{size} B"
    for unit in ("KB", "MB", "GB"):
        value /= 1024
        if value < 1024 or unit == "GB":
            break
    return f"{value:.1f} {unit}"


def _settings(ctx: click.Context, root: str | None, prefix: str | None) -> Settings:
    settings: Settings = ctx.obj["settings"]
    if root is not None:
        settings = replace(settings, root=Path(root).resolve())
    if prefix is not None:
        settings = replace(settings, package_prefix=prefix)
    return settings


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """monodeploy: version checks and service bundling for a pnpm workspace."""
    try:
        settings = load_settings()
    except ConfigError as e:
        raise click.UsageError(str(e))
    setup_logging("DEBUG" if verbose else settings.log_level, settings.log_format)
    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


# ── check ──


def _print_report(report: ConsistencyReport) -> None:
    for failure in report.failures:
        click.echo(f"Warning: skipped {failure.path} ({failure.kind}): {failure.message}", err=True)

    if report.ok:
        click.echo(
            f"All dependency versions are consistent across {len(report.packages)} package(s)"
        )
        return

    for violation in report.violations:
        click.echo(f"Inconsistent versions for {violation.dependency_name}:", err=True)
        for usage in violation.usages:
            click.echo(f"  {usage.version} used by: {', '.join(usage.packages)}", err=True)
        click.echo("", err=True)

    click.echo(f"{len(report.violations)} version inconsistency(ies) detected.", err=True)
    click.echo("To fix:", err=True)
    click.echo("  1. Update package.json files to use the same version", err=True)
    click.echo("  2. Or add the version to pnpm.overrides in the root package.json", err=True)
    click.echo("  3. Run pnpm install to apply changes", err=True)


@main.command("check")
@click.option("--root", default=None, type=click.Path(file_okay=False), help="Workspace root")
@click.option("--prefix", default=None, help="Package directory prefix")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def check(ctx: click.Context, root: str | None, prefix: str | None, as_json: bool) -> None:
    """Check that every package pins the same version of each shared dependency."""
    settings = _settings(ctx, root, prefix)
    if not settings.root.is_dir():
        click.echo(f"Error: {settings.root} is not a directory", err=True)
        sys.exit(2)

    report = check_workspace(settings.root, settings.package_prefix)

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
    else:
        _print_report(report)
    sys.exit(report.exit_code)


# ── bundle ──


def _print_deployment(report: DeploymentReport) -> None:
    if report.submodule_warning:
        click.echo("Warning: failed to initialize git submodules", err=True)
        click.echo("  If running outside a git checkout, this is expected.", err=True)

    if report.build_failed:
        click.echo("Build failed:", err=True)
        click.echo(report.build_error or "", err=True)

    for result in report.results:
        icon = _STATUS_ICONS.get(result.status, "?")
        click.echo(f"  [{icon}] {result.service}  {result.status.value}")
        for warning in result.warnings:
            click.echo(f"      warning: {warning}")
        if result.error and result.status is DeploymentStatus.EXTRACT_FAILED:
            last_line = (result.error.strip().splitlines() or [""])[-1]
            click.echo(f"      error: {last_line}")

    if not report.build_failed:
        click.echo(f"\nOutput: {report.target_root}")
        click.echo(f"Bundle size: {_format_size(report.size_bytes)}")


@main.command("bundle")
@click.option("--root", default=None, type=click.Path(file_okay=False), help="Workspace root")
@click.option("--target", default=None, type=click.Path(file_okay=False), help="Deployment root")
@click.option("--prefix", default=None, help="Package directory prefix")
@click.option("--service", "services", multiple=True, help="Only bundle these services")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def bundle(
    ctx: click.Context,
    root: str | None,
    target: str | None,
    prefix: str | None,
    services: tuple[str, ...],
    as_json: bool,
) -> None:
    """Build all services and deploy each with production dependencies only."""
    settings = _settings(ctx, root, prefix)
    if target is not None:
        settings = replace(settings, target=Path(target).resolve())

    try:
        specs = get_services(services)
    except UnknownServiceError as e:
        raise click.UsageError(str(e))

    toolchain = PnpmToolchain(
        pnpm=settings.pnpm,
        git=settings.git,
        timeout=settings.command_timeout,
    )
    orchestrator = DeploymentOrchestrator(toolchain, settings.root, settings.package_prefix)
    report = orchestrator.deploy(specs, settings.target_root)

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
    else:
        _print_deployment(report)
    sys.exit(report.exit_code)


# ── services ──


@main.command("services")
@click.option("--prefix", default=None, help="Package directory prefix")
@click.pass_context
def services_list(ctx: click.Context, prefix: str | None) -> None:
    """List the registered services and their extra artifacts."""
    settings = _settings(ctx, None, prefix)
    for spec in SERVICE_REGISTRY:
        click.echo(f"  {spec.name:30s} -> {spec.deploy_dir_for(settings.package_prefix)}")
        for artifact in spec.extra_artifacts:
            flag = "required" if artifact.required else "optional"
            click.echo(f"      {artifact.source} -> {artifact.dest} ({flag})")


if __name__ == "__main__":
    main()
