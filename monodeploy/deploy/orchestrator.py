"""Deployment orchestrator: build once, extract each service, place artifacts.

Pipeline for one bundle run:
    1. Best-effort git submodule sync
    2. One batched workspace build (fatal on failure)
    3. Per service: source check -> production extraction -> extra artifacts
    4. Swap the populated staging directory into the target root

Everything is written into a staging directory next to the target root and
swapped in at the end, so an interrupted run never leaves a half-merged
mix of the previous and the current deployment.
"""

from __future__ import annotations

import os
import shutil
import tempfile
from collections.abc import Sequence
from pathlib import Path

import structlog

from monodeploy.config import DEFAULT_PACKAGE_PREFIX
from monodeploy.deploy.models import (
    ArtifactCopy,
    ArtifactSpec,
    DeploymentReport,
    DeploymentResult,
    DeploymentStatus,
    ServiceSpec,
)
from monodeploy.deploy.toolchain import Toolchain
from monodeploy.exceptions import BuildError, ExtractError, SubmoduleSyncError

log = structlog.get_logger("monodeploy.deploy")


class DeploymentOrchestrator:
    """Bundle registered services into isolated production-only directories."""

    def __init__(
        self,
        toolchain: Toolchain,
        root: Path,
        prefix: str = DEFAULT_PACKAGE_PREFIX,
    ) -> None:
        self.toolchain = toolchain
        self.root = root
        self.prefix = prefix

    def deploy(self, services: Sequence[ServiceSpec], target_root: Path) -> DeploymentReport:
        """Run a full bundle into *target_root*, replacing whatever was there.

        Per-service failures are recorded in the report. A failed batched
        build marks every service ``BUILD_FAILED`` and leaves *target_root*
        empty.
        """
        report = DeploymentReport(target_root=str(target_root))

        try:
            self.toolchain.sync_submodules(self.root)
        except SubmoduleSyncError as e:
            # Expected when running outside a git checkout
            log.warning("deploy.submodule_sync_failed", error=e.output)
            report.submodule_warning = e.output or str(e)

        target_root.parent.mkdir(parents=True, exist_ok=True)
        staging = Path(
            tempfile.mkdtemp(prefix=f".{target_root.name}-staging-", dir=target_root.parent)
        )
        os.chmod(staging, 0o755)

        try:
            log.info("deploy.build_started", services=len(services))
            try:
                self.toolchain.build_all(self.root, self.prefix)
            except BuildError as e:
                log.error("deploy.build_failed", error=e.output)
                report.build_error = e.output or str(e)
                report.results = [
                    DeploymentResult(
                        service=spec.name,
                        status=DeploymentStatus.BUILD_FAILED,
                        error=report.build_error,
                    )
                    for spec in services
                ]
                _reset_dir(target_root)
                return report

            for spec in services:
                report.results.append(self._deploy_service(spec, staging, target_root))

            _swap_into_place(staging, target_root)
        finally:
            if staging.exists():
                shutil.rmtree(staging, ignore_errors=True)

        report.size_bytes = _dir_size(target_root)
        log.info(
            "deploy.finished",
            target=str(target_root),
            deployed=len(report.by_status(DeploymentStatus.DEPLOYED)),
            failed=len(report.by_status(DeploymentStatus.EXTRACT_FAILED)),
            missing=len(report.by_status(DeploymentStatus.SOURCE_MISSING)),
            size_bytes=report.size_bytes,
        )
        return report

    def _deploy_service(
        self, spec: ServiceSpec, staging: Path, target_root: Path
    ) -> DeploymentResult:
        source = self.root / spec.name
        if not source.is_dir():
            log.warning("deploy.source_missing", service=spec.name, path=str(source))
            return DeploymentResult(service=spec.name, status=DeploymentStatus.SOURCE_MISSING)

        deploy_dir = spec.deploy_dir_for(self.prefix)
        dest = staging / deploy_dir
        log.info("deploy.extracting", service=spec.name, dest=deploy_dir)
        try:
            self.toolchain.extract(self.root, spec.name, dest)
        except ExtractError as e:
            log.error("deploy.extract_failed", service=spec.name, error=e.output)
            shutil.rmtree(dest, ignore_errors=True)
            return DeploymentResult(
                service=spec.name,
                status=DeploymentStatus.EXTRACT_FAILED,
                error=e.output or str(e),
            )

        artifacts = [_copy_artifact(spec.name, source, dest, a) for a in spec.extra_artifacts]
        return DeploymentResult(
            service=spec.name,
            status=DeploymentStatus.DEPLOYED,
            deploy_path=str(target_root / deploy_dir),
            artifacts=artifacts,
        )


def _copy_artifact(service: str, source: Path, dest: Path, artifact: ArtifactSpec) -> ArtifactCopy:
    src = source / artifact.source
    if not src.exists():
        if artifact.required:
            log.warning("deploy.artifact_missing", service=service, artifact=artifact.source)
            status = "missing"
        else:
            log.debug("deploy.artifact_skipped", service=service, artifact=artifact.source)
            status = "skipped"
        return ArtifactCopy(source=artifact.source, dest=artifact.dest, status=status)

    dst = dest / artifact.dest
    try:
        dst.parent.mkdir(parents=True, exist_ok=True)
        if src.is_dir():
            shutil.copytree(src, dst, dirs_exist_ok=True)
        else:
            shutil.copy2(src, dst)
    except (shutil.Error, OSError) as e:
        log.warning(
            "deploy.artifact_copy_failed",
            service=service,
            artifact=artifact.source,
            error=str(e),
        )
        if dst.is_dir():
            shutil.rmtree(dst, ignore_errors=True)
        return ArtifactCopy(
            source=artifact.source, dest=artifact.dest, status="failed", error=str(e)
        )
    log.debug("deploy.artifact_copied", service=service, artifact=artifact.source)
    return ArtifactCopy(source=artifact.source, dest=artifact.dest, status="copied")


def _reset_dir(path: Path) -> None:
    if path.exists():
        shutil.rmtree(path)
    path.mkdir(parents=True)


def _swap_into_place(staging: Path, target_root: Path) -> None:
    """Replace *target_root* with *staging* using renames on the same filesystem."""
    previous = None
    if target_root.exists():
        previous = target_root.with_name(f"{staging.name}-previous")
        os.replace(target_root, previous)
    os.replace(staging, target_root)
    if previous is not None:
        shutil.rmtree(previous, ignore_errors=True)


def _dir_size(path: Path) -> int:
    total = 0
    for f in path.rglob("*"):
        if f.is_file() and not f.is_symlink():
            total += f.stat().st_size
    return total
