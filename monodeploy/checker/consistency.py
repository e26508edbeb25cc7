"""Consistency check over a version index."""

from __future__ import annotations

from pathlib import Path

import structlog

from monodeploy.checker.index import VersionIndex, build_version_index
from monodeploy.checker.models import ConsistencyReport, Violation
from monodeploy.manifest.discovery import discover_packages

log = structlog.get_logger("monodeploy.checker")


def check_consistency(index: VersionIndex) -> ConsistencyReport:
    """Report every dependency declared with more than one version string.

    Versions are compared as exact text: ``^1.0.0`` and ``1.0.0`` differ.
    Violations are sorted by dependency name.
    """
    violations = tuple(
        Violation(dependency_name=name, usages=tuple(index.usages(name)))
        for name in sorted(index.names())
        if len(index.usages(name)) > 1
    )
    return ConsistencyReport(
        violations=violations,
        failures=tuple(index.failures),
        packages=tuple(index.packages),
    )


def check_workspace(root: Path, prefix: str) -> ConsistencyReport:
    """Discover the workspace packages under *root* and check them."""
    package_paths = discover_packages(root, prefix)
    log.info("checker.scan_started", root=str(root), packages=len(package_paths))
    report = check_consistency(build_version_index(root, package_paths))
    log.info(
        "checker.scan_finished",
        violations=len(report.violations),
        skipped=len(report.failures),
    )
    return report
