"""Dependency version consistency checker."""

from monodeploy.checker.consistency import check_consistency, check_workspace
from monodeploy.checker.index import VersionIndex, build_version_index
from monodeploy.checker.models import ConsistencyReport, VersionUsage, Violation

__all__ = [
    "ConsistencyReport",
    "VersionIndex",
    "VersionUsage",
    "Violation",
    "build_version_index",
    "check_consistency",
    "check_workspace",
]
