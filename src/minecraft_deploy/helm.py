"""Helm chart installer.

This module provides the Helm class, which converges a ReleaseRequest by
making sure the namespace exists and running 'helm upgrade --install'.
"""

import contextlib
import json
import subprocess
from pathlib import Path
from tempfile import NamedTemporaryFile

import yaml
from icecream import ic

from minecraft_deploy import console
from minecraft_deploy.cluster import Cluster
from minecraft_deploy.exceptions import BinaryNotFoundError, HelmReleaseError
from minecraft_deploy.models import HelmRelease, ReleaseHandle, ReleaseRequest

_ERR_HELM_NOT_FOUND = "helm not found at '{binary}'; install helm or pass --helm-version"


class Helm:
    """Chart installer backed by the helm binary.

    Attributes:
        cluster: Cluster used for the kube context and namespace management.
        binary: Path or name of the helm binary.
        timeout: Helm operation timeout (e.g. '10m').
        wait: Whether helm waits for the release's resources to become ready.

    """

    def __init__(self, cluster: Cluster, *, binary: str = "helm", timeout: str = "10m", wait: bool = False) -> None:
        self.cluster: Cluster = cluster
        self.binary: str = binary
        self.timeout: str = timeout
        self.wait: bool = wait

    def __repr__(self) -> str:
        """Return a detailed string representation for debugging."""
        return f"Helm(binary={self.binary!r}, context={self.cluster.context!r}, wait={self.wait!r})"

    def command(self, request: ReleaseRequest, values_file: Path) -> list[str]:
        """Build the 'helm upgrade --install' command for a request.

        Args:
            request: The release to converge.
            values_file: Path of the YAML file holding the chart values.

        Returns:
            List of command arguments ready for subprocess execution.

        """
        cmd: list[str] = [
            self.binary,
            "upgrade",
            "--install",
            request.name,
            request.chart,
            "--repo",
            request.repo,
            "--namespace",
            request.namespace,
            f"--kube-context={self.cluster.context}",
            "--values",
            str(values_file),
            "--timeout",
            self.timeout,
            "--output",
            "json",
        ]
        if request.version:
            cmd.extend(["--version", request.version])
        if self.wait:
            cmd.append("--wait")
        return cmd

    def install(self, request: ReleaseRequest) -> ReleaseHandle:
        """Install or upgrade the release described by request.

        Args:
            request: The release to converge.

        Returns:
            The namespace object and the release reported by helm.

        Raises:
            ClusterConnectionError: If the cluster is unreachable.
            BinaryNotFoundError: If the helm binary cannot be executed.
            HelmReleaseError: If helm fails or prints an unreadable release.

        """
        namespace = self.cluster.ensure_namespace(request.namespace)

        # delete=False and close right away so helm can reopen the file
        values_file = NamedTemporaryFile("w", suffix=".yaml", delete=False)
        values_path = Path(values_file.name)
        try:
            with values_file:
                yaml.safe_dump(request.values, values_file, sort_keys=False)

            cmd = self.command(request, values_path)
            ic(cmd)

            chart_ref = f"{request.chart}@{request.version}" if request.version else request.chart
            console.action(f"Deploying {console.highlight(chart_ref)} as release {console.highlight(request.name)}")
            try:
                with console.spinner("Running helm upgrade --install..."):
                    result = subprocess.run(cmd, capture_output=True, text=True, check=True)
            except FileNotFoundError as err:
                raise BinaryNotFoundError(_ERR_HELM_NOT_FOUND.format(binary=self.binary)) from err
            except subprocess.CalledProcessError as err:
                stderr = (err.stderr or "").strip()
                details = f": {stderr}" if stderr else ""
                raise HelmReleaseError(
                    f"helm upgrade --install failed (exit code {err.returncode}){details}",
                    stderr=stderr,
                ) from err
        finally:
            with contextlib.suppress(OSError):
                values_path.unlink(missing_ok=True)

        release = self._parse_release(result.stdout)
        console.success(f"Release {console.highlight(release.name)} is {release.status or 'applied'}")
        return ReleaseHandle(namespace=namespace, release=release)

    @staticmethod
    def _parse_release(output: str) -> HelmRelease:
        """Parse helm's JSON release document.

        Raises:
            HelmReleaseError: If the output is not a release document.

        """
        try:
            payload = json.loads(output)
            release = HelmRelease.from_helm_json(payload)
        except (ValueError, KeyError, TypeError, AttributeError) as err:
            raise HelmReleaseError(f"Could not parse helm output as a release: {err}") from err
        ic(release)
        return release
