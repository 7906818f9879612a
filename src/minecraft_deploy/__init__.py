"""minecraft-deploy: Helm deployment unit for a Minecraft server on Kubernetes.

This package resolves a small stack configuration into values for the
itzg Minecraft server chart and installs it with Helm.

Example usage:
    from minecraft_deploy import Cluster, Helm, StackConfig, build

    cfg = StackConfig.from_file("Pulumi.prod.yaml")
    installer = Helm(Cluster(context="homelab"))
    namespace, release_name = build(cfg, installer)
"""

__version__ = "0.1.0"

from minecraft_deploy.builder import DeploymentSettings, build, build_release_request, build_values, resolve_settings
from minecraft_deploy.cli import cli
from minecraft_deploy.cluster import Cluster
from minecraft_deploy.config import ConfigurationSource, DeployEnvironment, StackConfig
from minecraft_deploy.exceptions import (
    BinaryNotFoundError,
    ClusterConnectionError,
    ConfigError,
    ConfigFileError,
    ConfigTypeError,
    HelmReleaseError,
    MinecraftDeployError,
    UnsupportedPlatformError,
)
from minecraft_deploy.helm import Helm
from minecraft_deploy.host import Host
from minecraft_deploy.models import ChartInstaller, HelmRelease, ReleaseHandle, ReleaseRequest

__all__ = [
    # Version
    "__version__",
    # Main CLI
    "cli",
    # Builder
    "DeploymentSettings",
    "build",
    "build_release_request",
    "build_values",
    "resolve_settings",
    # Configuration
    "ConfigurationSource",
    "DeployEnvironment",
    "StackConfig",
    # Classes
    "Cluster",
    "Helm",
    "Host",
    # Models
    "ChartInstaller",
    "HelmRelease",
    "ReleaseHandle",
    "ReleaseRequest",
    # Exceptions
    "MinecraftDeployError",
    "ConfigError",
    "ConfigFileError",
    "ConfigTypeError",
    "ClusterConnectionError",
    "BinaryNotFoundError",
    "UnsupportedPlatformError",
    "HelmReleaseError",
]
