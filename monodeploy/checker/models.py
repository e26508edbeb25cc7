"""Data models for the consistency checker."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from monodeploy.manifest.models import ManifestFailure


@dataclass(frozen=True)
class VersionUsage:
    """One declared version of a dependency and the packages declaring it."""

    version: str
    packages: tuple[str, ...] = ()  # first-seen order, no duplicates

    def to_dict(self) -> dict[str, Any]:
        return {"version": self.version, "packages": list(self.packages)}


@dataclass(frozen=True)
class Violation:
    """A dependency declared at more than one version across the workspace."""

    dependency_name: str
    usages: tuple[VersionUsage, ...]

    @property
    def versions(self) -> list[str]:
        return [u.version for u in self.usages]

    def to_dict(self) -> dict[str, Any]:
        return {
            "dependency": self.dependency_name,
            "usages": [u.to_dict() for u in self.usages],
        }


@dataclass(frozen=True)
class ConsistencyReport:
    """Result of a consistency check. Drives the check command's exit status."""

    violations: tuple[Violation, ...] = ()
    failures: tuple[ManifestFailure, ...] = ()
    packages: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.violations

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "packages": list(self.packages),
            "violations": [v.to_dict() for v in self.violations],
            "skipped": [f.to_dict() for f in self.failures],
        }
