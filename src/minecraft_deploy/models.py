"""Data models for minecraft-deploy.

This module provides type-safe data structures for the deployment,
replacing loosely-typed dictionaries with proper Python data classes.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, NamedTuple, Protocol


class OutputFormat(str, Enum):
    """Supported formats for the exported deployment outputs.

    Inherits from str to allow direct use as a click choice value.
    """

    TABLE = "table"
    JSON = "json"
    YAML = "yaml"


@dataclass(frozen=True, slots=True)
class ReleaseRequest:
    """Everything a chart installer needs to converge a release.

    Attributes:
        name: The Helm release name.
        chart: The chart name inside the repository.
        repo: URL of the chart repository.
        namespace: Target Kubernetes namespace.
        version: Chart version, or None for the latest published one.
        values: Nested chart values.

    """

    name: str
    chart: str
    repo: str
    namespace: str
    version: str | None = None
    values: dict[str, Any] = field(default_factory=dict)


class HelmRelease(NamedTuple):
    """A Helm release as reported by helm after install or upgrade.

    Attributes:
        name: The release name.
        namespace: The namespace the release lives in.
        revision: The release revision number.
        status: Helm status string (e.g. 'deployed').
        chart: Chart reference as '<name>-<version>'.
        app_version: The chart's appVersion, empty when unknown.

    """

    name: str
    namespace: str
    revision: int
    status: str
    chart: str
    app_version: str

    @classmethod
    def from_helm_json(cls, payload: dict[str, Any]) -> "HelmRelease":
        """Build a HelmRelease from helm's '--output json' release document.

        Args:
            payload: The decoded JSON document.

        Returns:
            The parsed release.

        Raises:
            KeyError: If the document lacks the release name or namespace.

        """
        metadata: dict[str, Any] = payload.get("chart", {}).get("metadata", {})
        chart_name = metadata.get("name", "")
        chart_version = metadata.get("version", "")
        chart = f"{chart_name}-{chart_version}" if chart_name and chart_version else chart_name
        return cls(
            name=payload["name"],
            namespace=payload["namespace"],
            revision=int(payload.get("version", 0)),
            status=payload.get("info", {}).get("status", ""),
            chart=chart,
            app_version=metadata.get("appVersion", ""),
        )


class ReleaseHandle(NamedTuple):
    """Result of a chart installation.

    Attributes:
        namespace: The Kubernetes namespace object (V1Namespace) the release targets.
        release: The Helm release that was installed or upgraded.

    """

    namespace: Any
    release: HelmRelease


class ChartInstaller(Protocol):
    """Anything able to converge cluster state to a ReleaseRequest."""

    def install(self, request: ReleaseRequest) -> ReleaseHandle: ...
