"""Custom exceptions for minecraft-deploy.

This module defines the exception hierarchy used throughout the application
to provide meaningful error messages and proper error handling.
"""


class MinecraftDeployError(Exception):
    """Base exception for all minecraft-deploy errors.

    All custom exceptions in this package inherit from this class,
    allowing callers to catch all minecraft-deploy errors with a single
    except clause if desired.
    """

    pass


class ConfigError(MinecraftDeployError):
    """Raised when the stack configuration cannot be used.

    This can occur when:
    - A --set override is not in KEY=VALUE form
    - An override targets a different configuration namespace
    """

    pass


class ConfigFileError(ConfigError):
    """Raised when a stack configuration file cannot be loaded.

    This can occur when:
    - The file does not exist
    - The file is not valid YAML
    - The document or its 'config' section is not a mapping
    """

    pass


class ConfigTypeError(ConfigError):
    """Raised when a configuration value cannot be coerced to the requested type."""

    pass


class ClusterConnectionError(MinecraftDeployError):
    """Raised when connection to the Kubernetes cluster fails.

    This can occur when:
    - The kubeconfig is invalid or missing
    - The requested context does not exist
    - The cluster is unreachable
    """

    pass


class BinaryNotFoundError(MinecraftDeployError):
    """Raised when the helm binary is not found.

    This can occur when:
    - The binary is not installed and cannot be downloaded
    - The requested helm version does not exist upstream
    """

    pass


class UnsupportedPlatformError(MinecraftDeployError):
    """Raised when the current platform is not supported.

    minecraft-deploy supports:
    - Operating systems: Linux, macOS (Darwin)
    - CPU architectures: x86_64 (amd64), arm64
    """

    pass


class HelmReleaseError(MinecraftDeployError):
    """Raised when helm rejects or fails to apply a release.

    Carries helm's stderr so the cause (unknown chart version,
    unreachable repository, API server rejection) reaches the user.
    """

    def __init__(self, message: str, stderr: str = "") -> None:
        super().__init__(message)
        self.stderr = stderr
