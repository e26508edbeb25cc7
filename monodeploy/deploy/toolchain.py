"""External collaborators: git submodule sync, pnpm build and pnpm deploy.

Each call runs one blocking subprocess. Failures raise a ToolchainError
subclass carrying the command and its captured output; callers decide
whether the failure is fatal.
"""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Protocol, runtime_checkable

import structlog

from monodeploy.exceptions import (
    BuildError,
    ExtractError,
    SubmoduleSyncError,
    ToolchainError,
)

log = structlog.get_logger("monodeploy.toolchain")


@runtime_checkable
class Toolchain(Protocol):
    """Interface the deployment orchestrator drives."""

    def sync_submodules(self, root: Path) -> None: ...

    def build_all(self, root: Path, prefix: str) -> None: ...

    def extract(self, root: Path, service: str, dest: Path) -> None: ...


class PnpmToolchain:
    """Toolchain backed by the ``git`` and ``pnpm`` executables."""

    def __init__(
        self,
        pnpm: str = "pnpm",
        git: str = "git",
        timeout: float | None = None,
    ) -> None:
        self.pnpm = pnpm
        self.git = git
        self.timeout = timeout

    def sync_submodules(self, root: Path) -> None:
        self._run(
            [self.git, "submodule", "update", "--init", "--recursive"],
            cwd=root,
            error=SubmoduleSyncError,
        )

    def build_all(self, root: Path, prefix: str) -> None:
        self._run(
            [self.pnpm, "-r", "--filter", f"./{prefix}*", "build"],
            cwd=root,
            error=BuildError,
        )

    def extract(self, root: Path, service: str, dest: Path) -> None:
        # --legacy is required by pnpm v10+ for deploy outside injected workspaces
        self._run(
            [self.pnpm, "--filter", service, "deploy", str(dest), "--prod", "--legacy"],
            cwd=root,
            error=ExtractError,
        )

    def _run(self, cmd: list[str], cwd: Path, error: type[ToolchainError]) -> None:
        log.debug("toolchain.run", command=" ".join(cmd), cwd=str(cwd))
        try:
            result = subprocess.run(
                cmd,
                cwd=cwd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            raise error(cmd, None, f"timed out after {self.timeout}s")
        except OSError as e:
            raise error(cmd, None, str(e))

        if result.returncode != 0:
            output = (result.stderr or "").strip() or (result.stdout or "").strip()
            raise error(cmd, result.returncode, output)
