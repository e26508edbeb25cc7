"""Service registry: the services bundled into the plugin, in deploy order.

Adding a service means adding a row here; per-service copy steps are data.
"""

from __future__ import annotations

from collections.abc import Iterable

from monodeploy.deploy.models import ArtifactSpec, ServiceSpec
from monodeploy.exceptions import UnknownServiceError

SERVICE_REGISTRY: tuple[ServiceSpec, ...] = (
    ServiceSpec("mcp-domain-checker"),
    ServiceSpec("mcp-domain-checker-price"),
    ServiceSpec("mcp-gitlab-ci"),
    ServiceSpec("mcp-opener"),
    ServiceSpec(
        "mcp-stream-workflow",
        extra_artifacts=(
            ArtifactSpec("prompts", "prompts"),
            ArtifactSpec("templates", "templates"),
        ),
    ),
    ServiceSpec(
        "mcp-stream-workflow-status",
        extra_artifacts=(ArtifactSpec("dashboard/dist", "dashboard/dist", required=True),),
    ),
)


def get_services(
    names: Iterable[str] | None = None,
    registry: tuple[ServiceSpec, ...] = SERVICE_REGISTRY,
) -> list[ServiceSpec]:
    """Return registry rows, optionally restricted to *names* (registry order kept)."""
    if not names:
        return list(registry)
    wanted = set(names)
    unknown = sorted(wanted - {s.name for s in registry})
    if unknown:
        raise UnknownServiceError(unknown)
    return [s for s in registry if s.name in wanted]
