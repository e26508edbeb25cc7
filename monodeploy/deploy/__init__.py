"""Service bundling: batched build, production extraction, artifact placement."""

from monodeploy.deploy.models import (
    ArtifactCopy,
    ArtifactSpec,
    DeploymentReport,
    DeploymentResult,
    DeploymentStatus,
    ServiceSpec,
)
from monodeploy.deploy.orchestrator import DeploymentOrchestrator
from monodeploy.deploy.registry import SERVICE_REGISTRY, get_services
from monodeploy.deploy.toolchain import PnpmToolchain, Toolchain

__all__ = [
    "SERVICE_REGISTRY",
    "ArtifactCopy",
    "ArtifactSpec",
    "DeploymentOrchestrator",
    "DeploymentReport",
    "DeploymentResult",
    "DeploymentStatus",
    "PnpmToolchain",
    "ServiceSpec",
    "Toolchain",
    "get_services",
]
