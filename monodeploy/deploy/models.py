"""Data models for service deployment."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from monodeploy.config import DEFAULT_PACKAGE_PREFIX


class DeploymentStatus(Enum):
    """Terminal state of one service in a bundle run."""

    DEPLOYED = "deployed"
    SOURCE_MISSING = "source_missing"
    BUILD_FAILED = "build_failed"
    EXTRACT_FAILED = "extract_failed"


@dataclass(frozen=True)
class ArtifactSpec:
    """An extra directory copied after extraction.

    ``source`` is relative to the service source directory, ``dest`` to the
    service deployment directory.
    """

    source: str
    dest: str
    required: bool = False


@dataclass(frozen=True)
class ServiceSpec:
    name: str
    extra_artifacts: tuple[ArtifactSpec, ...] = ()

    def deploy_dir_for(self, prefix: str) -> str:
        """Deployment directory name: the service name without *prefix*."""
        if prefix and self.name.startswith(prefix):
            return self.name[len(prefix) :]
        return self.name

    @property
    def deploy_dir(self) -> str:
        return self.deploy_dir_for(DEFAULT_PACKAGE_PREFIX)


@dataclass
class ArtifactCopy:
    source: str
    dest: str
    status: str  # "copied" | "skipped" | "missing" | "failed"
    error: str | None = None

    def to_dict(self) -> dict[str, str | None]:
        return {
            "source": self.source,
            "dest": self.dest,
            "status": self.status,
            "error": self.error,
        }


@dataclass
class DeploymentResult:
    """Outcome for one service."""

    service: str
    status: DeploymentStatus
    deploy_path: str | None = None
    artifacts: list[ArtifactCopy] = field(default_factory=list)
    error: str | None = None

    @property
    def warnings(self) -> list[str]:
        """Required artifacts whose source was absent, and copies that failed."""
        warnings = []
        for a in self.artifacts:
            if a.status == "missing":
                warnings.append(f"required artifact '{a.source}' not found")
            elif a.status == "failed":
                warnings.append(f"failed to copy artifact '{a.source}': {a.error}")
        return warnings

    @property
    def copied(self) -> list[ArtifactCopy]:
        return [a for a in self.artifacts if a.status == "copied"]

    @property
    def skipped(self) -> list[ArtifactCopy]:
        return [a for a in self.artifacts if a.status != "copied"]

    def to_dict(self) -> dict[str, Any]:
        return {
            "service": self.service,
            "status": self.status.value,
            "deploy_path": self.deploy_path,
            "artifacts": [a.to_dict() for a in self.artifacts],
            "warnings": self.warnings,
            "error": self.error,
        }


@dataclass
class DeploymentReport:
    """Itemized result of a bundle run."""

    target_root: str
    results: list[DeploymentResult] = field(default_factory=list)
    build_error: str | None = None
    submodule_warning: str | None = None
    size_bytes: int = 0

    @property
    def build_failed(self) -> bool:
        return self.build_error is not None

    @property
    def exit_code(self) -> int:
        return 1 if self.build_failed else 0

    def by_status(self, status: DeploymentStatus) -> list[DeploymentResult]:
        return [r for r in self.results if r.status is status]

    def to_dict(self) -> dict[str, Any]:
        return {
            "target_root": self.target_root,
            "build_failed": self.build_failed,
            "build_error": self.build_error,
            "submodule_warning": self.submodule_warning,
            "size_bytes": self.size_bytes,
            "services": [r.to_dict() for r in self.results],
        }
