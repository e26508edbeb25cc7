"""Data models for workspace package manifests."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class PackageManifest:
    """Declared dependencies of one workspace package."""

    name: str
    path: str  # workspace-relative directory, e.g. "mcp-opener"
    dependencies: dict[str, str] = field(default_factory=dict)
    dev_dependencies: dict[str, str] = field(default_factory=dict)

    def all_dependencies(self) -> dict[str, str]:
        """Production and development dependencies combined (production first)."""
        return {**self.dependencies, **self.dev_dependencies}


@dataclass(frozen=True)
class ManifestFailure:
    """A package excluded from the index because its manifest could not be used."""

    path: str
    kind: str  # "unreadable" | "invalid"
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"path": self.path, "kind": self.kind, "message": self.message}
