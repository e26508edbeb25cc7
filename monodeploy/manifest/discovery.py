"""Workspace discovery: find package directories by name prefix."""

from __future__ import annotations

from pathlib import Path


def discover_packages(root: Path, prefix: str) -> list[str]:
    """Return workspace-relative package directories under *root*.

    A package is an immediate child directory whose name starts with
    *prefix*. The result is sorted so every scan sees the same order.
    """
    return sorted(
        entry.name
        for entry in root.iterdir()
        if entry.is_dir() and entry.name.startswith(prefix)
    )
