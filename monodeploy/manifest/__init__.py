"""Workspace manifests: discovery and package.json reading."""

from monodeploy.manifest.discovery import discover_packages
from monodeploy.manifest.models import ManifestFailure, PackageManifest
from monodeploy.manifest.reader import read_manifest

__all__ = ["ManifestFailure", "PackageManifest", "discover_packages", "read_manifest"]
