"""Runtime settings read from MONODEPLOY_* environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from monodeploy.exceptions import ConfigError

DEFAULT_PACKAGE_PREFIX = "mcp-"
DEFAULT_TARGET = Path("plugin") / "servers"


@dataclass(frozen=True)
class Settings:
    """Resolved settings for one invocation.

    CLI options override these values; see ``monodeploy.cli``.
    """

    root: Path
    package_prefix: str = DEFAULT_PACKAGE_PREFIX
    target: Path | None = None
    pnpm: str = "pnpm"
    git: str = "git"
    command_timeout: float | None = None
    log_level: str = "INFO"
    log_format: str = "console"

    @property
    def target_root(self) -> Path:
        if self.target is None:
            return self.root / DEFAULT_TARGET
        if self.target.is_absolute():
            return self.target
        return self.root / self.target


def _parse_timeout(raw: str | None) -> float | None:
    if raw is None or not raw.strip():
        return None
    try:
        value = float(raw)
    except ValueError:
        raise ConfigError(f"MONODEPLOY_COMMAND_TIMEOUT must be a number, got {raw!r}")
    if value <= 0:
        raise ConfigError(f"MONODEPLOY_COMMAND_TIMEOUT must be positive, got {raw!r}")
    return value


def load_settings(environ: dict[str, str] | None = None) -> Settings:
    """Build :class:`Settings` from the environment.

    Reads:
        MONODEPLOY_ROOT             workspace root (default: cwd)
        MONODEPLOY_PACKAGE_PREFIX   package directory prefix (default: mcp-)
        MONODEPLOY_TARGET           deployment root (default: <root>/plugin/servers)
        MONODEPLOY_PNPM / MONODEPLOY_GIT  executables
        MONODEPLOY_COMMAND_TIMEOUT  seconds per external command (default: none)
        MONODEPLOY_LOG_LEVEL        log level (default: INFO)
        MONODEPLOY_LOG_FORMAT       console | json (default: console)
    """
    env = os.environ if environ is None else environ

    root = Path(env.get("MONODEPLOY_ROOT") or Path.cwd()).resolve()
    target = env.get("MONODEPLOY_TARGET")

    return Settings(
        root=root,
        package_prefix=env.get("MONODEPLOY_PACKAGE_PREFIX", DEFAULT_PACKAGE_PREFIX),
        target=Path(target) if target else None,
        pnpm=env.get("MONODEPLOY_PNPM", "pnpm"),
        git=env.get("MONODEPLOY_GIT", "git"),
        command_timeout=_parse_timeout(env.get("MONODEPLOY_COMMAND_TIMEOUT")),
        log_level=env.get("MONODEPLOY_LOG_LEVEL", "INFO").upper(),
        log_format=env.get("MONODEPLOY_LOG_FORMAT", "console").lower(),
    )
