"""Custom exceptions for monodeploy."""

from __future__ import annotations


class MonodeployError(Exception):
    """Base exception for all monodeploy errors."""


class ConfigError(MonodeployError):
    """Raised when an environment setting cannot be parsed."""


class ManifestError(MonodeployError):
    """Base for per-package manifest failures (never fatal to a whole scan)."""

    kind = "manifest"

    def __init__(self, path: str, message: str):
        self.path = path
        self.message = message
        super().__init__(f"{path}: {message}")


class ManifestUnreadable(ManifestError):
    """package.json is missing, unreadable, or not a JSON object."""

    kind = "unreadable"


class ManifestInvalid(ManifestError):
    """package.json parses but its dependency fields are malformed."""

    kind = "invalid"


class ToolchainError(MonodeployError):
    """Raised when an external command (git, pnpm) fails."""

    def __init__(self, command: list[str], returncode: int | None, output: str):
        self.command = command
        self.returncode = returncode
        self.output = output
        rc = "no exit code" if returncode is None else f"rc={returncode}"
        super().__init__(f"{' '.join(command)} failed ({rc}): {output[-1000:]}")


class SubmoduleSyncError(ToolchainError):
    """git submodule update failed (best effort, never fatal)."""


class BuildError(ToolchainError):
    """The batched workspace build failed."""


class ExtractError(ToolchainError):
    """Production-dependency extraction of one service failed."""


class UnknownServiceError(MonodeployError):
    """Raised when a requested service is not in the registry."""

    def __init__(self, names: list[str]):
        self.names = names
        super().__init__(f"Unknown service(s): {', '.join(names)}")
