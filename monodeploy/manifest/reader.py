"""Reader for package.json manifests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from monodeploy.exceptions import ManifestInvalid, ManifestUnreadable
from monodeploy.manifest.models import PackageManifest

MANIFEST_FILENAME = "package.json"


def read_manifest(root: Path, package_path: str) -> PackageManifest:
    """Load the manifest of the package at ``root / package_path``.

    Raises:
        ManifestUnreadable: file missing or unreadable, invalid JSON,
            or a top-level value that is not an object.
        ManifestInvalid: ``name``, ``dependencies`` or ``devDependencies``
            have the wrong shape, or one dependency is declared in both maps
            with different versions.
    """
    manifest_path = root / package_path / MANIFEST_FILENAME
    try:
        content = manifest_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ManifestUnreadable(package_path, f"cannot read {MANIFEST_FILENAME}: {e}")

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ManifestUnreadable(package_path, f"invalid JSON in {MANIFEST_FILENAME}: {e}")

    if not isinstance(data, dict):
        raise ManifestUnreadable(package_path, f"{MANIFEST_FILENAME} is not a JSON object")

    name = data.get("name", Path(package_path).name)
    if not isinstance(name, str) or not name:
        raise ManifestInvalid(package_path, "'name' must be a non-empty string")

    deps = _dependency_map(package_path, data, "dependencies")
    dev_deps = _dependency_map(package_path, data, "devDependencies")

    for dep_name in deps.keys() & dev_deps.keys():
        if deps[dep_name] != dev_deps[dep_name]:
            raise ManifestInvalid(
                package_path,
                f"'{dep_name}' is declared as {deps[dep_name]!r} in dependencies "
                f"and {dev_deps[dep_name]!r} in devDependencies",
            )

    return PackageManifest(
        name=name,
        path=package_path,
        dependencies=deps,
        dev_dependencies=dev_deps,
    )


def _dependency_map(package_path: str, data: dict[str, Any], field: str) -> dict[str, str]:
    raw = data.get(field)
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ManifestInvalid(package_path, f"'{field}' must be an object")
    for key, value in raw.items():
        if not isinstance(value, str):
            raise ManifestInvalid(
                package_path, f"'{field}.{key}' must be a version string, got {value!r}"
            )
    return dict(raw)
