"""Version index: dependency name to declared versions across the workspace."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from pathlib import Path

import structlog

from monodeploy.checker.models import VersionUsage
from monodeploy.exceptions import ManifestError
from monodeploy.manifest.models import ManifestFailure, PackageManifest
from monodeploy.manifest.reader import read_manifest

log = structlog.get_logger("monodeploy.checker")


class VersionIndex:
    """Maps each dependency name to its distinct declared versions.

    Usages for one name keep first-seen order; packages are expected to be
    added in sorted path order so that order is reproducible.
    """

    def __init__(self) -> None:
        self._usages: dict[str, dict[str, list[str]]] = {}
        self.packages: list[str] = []
        self.failures: list[ManifestFailure] = []

    def add(self, name: str, version: str, package: str) -> None:
        packages = self._usages.setdefault(name, {}).setdefault(version, [])
        if package not in packages:
            packages.append(package)

    def add_manifest(self, manifest: PackageManifest) -> None:
        self.packages.append(manifest.name)
        for name, version in manifest.all_dependencies().items():
            self.add(name, version, manifest.name)

    def usages(self, name: str) -> list[VersionUsage]:
        """Snapshot of the usages of *name*; later additions do not change it."""
        return [
            VersionUsage(version=version, packages=tuple(packages))
            for version, packages in self._usages.get(name, {}).items()
        ]

    def names(self) -> list[str]:
        return list(self._usages)

    def __contains__(self, name: object) -> bool:
        return name in self._usages

    def __len__(self) -> int:
        return len(self._usages)

    def __iter__(self) -> Iterator[str]:
        return iter(self._usages)


def build_version_index(root: Path, package_paths: Iterable[str]) -> VersionIndex:
    """Read every package manifest and fold it into a :class:`VersionIndex`.

    Packages whose manifest cannot be read or is invalid are excluded and
    recorded in ``index.failures``; the scan carries on with the rest.
    """
    index = VersionIndex()
    for package_path in sorted(package_paths):
        try:
            manifest = read_manifest(root, package_path)
        except ManifestError as e:
            log.warning(
                "checker.manifest_skipped",
                package=package_path,
                kind=e.kind,
                reason=e.message,
            )
            index.failures.append(
                ManifestFailure(path=package_path, kind=e.kind, message=e.message)
            )
            continue
        index.add_manifest(manifest)

    log.debug(
        "checker.index_built",
        packages=len(index.packages),
        dependencies=len(index),
        skipped=len(index.failures),
    )
    return index
