"""Host system utilities for minecraft-deploy.

This module provides the Host class for locating or downloading the
helm binary and detecting the current platform.
"""

import contextlib
import os
import platform
import re
import shutil
import stat
import tarfile
import tempfile
from pathlib import Path

import requests
from icecream import ic

from minecraft_deploy import console
from minecraft_deploy.exceptions import BinaryNotFoundError, UnsupportedPlatformError

DEFAULT_HELM_VERSION = "3.18.4"

# Semantic version pattern for validation
_SEMVER_PATTERN = re.compile(r"^\d+\.\d+\.\d+(?:-[\w.]+)?(?:\+[\w.]+)?$")


def normalize_version(version: str) -> str:
    """Normalize a version string by removing a leading 'v' prefix if present.

    Args:
        version: The version string (e.g., 'v3.18.4' or '3.18.4').

    Returns:
        The version string without leading 'v' (e.g., '3.18.4').

    Raises:
        ValueError: If version is empty or doesn't match semantic versioning.

    """
    if not version:
        raise ValueError("Version string cannot be None or empty")

    normalized = version[1:] if version.startswith("v") else version

    if not _SEMVER_PATTERN.match(normalized):
        raise ValueError(f"Invalid version format: '{normalized}' does not match semantic versioning pattern")

    return normalized


class Host:
    """Manages the helm binary on the local machine.

    Attributes:
        base_url: Base URL for helm release tarballs.
        bin_location: Local directory for storing downloaded helm binaries.
        cpu_type: Detected CPU architecture (amd64 or arm64).
        system: Detected operating system (linux or darwin).

    """

    def __init__(self) -> None:
        """Initialize Host with platform detection."""
        self.base_url: str = "https://get.helm.sh"
        xdg_data_home = os.environ.get("XDG_DATA_HOME")
        base_path = Path(xdg_data_home) if xdg_data_home else Path.home() / ".local" / "share"
        self.bin_location: Path = base_path / "minecraft-deploy" / "bin"
        self.cpu_type: str = self._get_cpu_type()
        self.system: str = self._get_system_type()

    @staticmethod
    def _get_cpu_type() -> str:
        """Detect and return the CPU architecture.

        Raises:
            UnsupportedPlatformError: If the CPU architecture is not supported.

        """
        match platform.machine():
            case "x86_64" | "amd64":
                return "amd64"
            case "arm64" | "aarch64":
                return "arm64"
            case _:
                raise UnsupportedPlatformError(f"Unsupported CPU architecture: {platform.machine()}")

    @staticmethod
    def _get_system_type() -> str:
        """Detect and return the operating system type.

        Raises:
            UnsupportedPlatformError: If the operating system is not supported.

        """
        match platform.system():
            case "Linux":
                return "linux"
            case "Darwin":
                return "darwin"
            case _:
                raise UnsupportedPlatformError(f"Unsupported operating system: {platform.system()}")

    def __repr__(self) -> str:
        """Return a detailed string representation for debugging."""
        return (
            f"Host(system={self.system!r}, cpu_type={self.cpu_type!r}, "
            f"bin_location={self.bin_location!r})"
        )

    @property
    def _platform(self) -> str:
        return f"{self.system}-{self.cpu_type}"

    def _download_helm_binary(self, version: str) -> None:
        """Download and unpack the helm binary for the specified version.

        Args:
            version: The helm version to download (may include 'v' prefix).

        Raises:
            BinaryNotFoundError: If the requested version is not available.
            ValueError: If version format is invalid.

        """
        normalized = normalize_version(version)
        console.action(f"Downloading helm {console.highlight(f'v{normalized}')}")

        archive = f"helm-v{normalized}-{self._platform}.tar.gz"
        url = f"{self.base_url}/{archive}"
        ic(url)
        local_path = Path(tempfile.gettempdir()) / archive

        self.bin_location.mkdir(parents=True, exist_ok=True)

        try:
            with requests.get(url, timeout=60, stream=True) as r:
                if r.status_code in (403, 404):
                    raise BinaryNotFoundError(f"helm version {normalized} is not available for download")
                r.raise_for_status()

                total_size = int(r.headers.get("content-length", 0))

                with console.create_download_progress() as progress:
                    task = progress.add_task(f"helm v{normalized}", total=total_size)

                    with local_path.open("wb") as f:
                        for chunk in r.iter_content(chunk_size=8192):
                            if chunk:
                                f.write(chunk)
                                progress.update(task, advance=len(chunk))

            with tarfile.open(local_path, "r:gz") as tar:
                self._safe_extract_helm(tar, normalized)
        finally:
            with contextlib.suppress(OSError):
                local_path.unlink(missing_ok=True)

        binary = self.get_binary_path(normalized)
        binary.chmod(binary.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        console.success(f"helm saved to {console.highlight(str(binary))}")

    def _safe_extract_helm(self, tar: tarfile.TarFile, version: str) -> None:
        """Extract only the helm binary from a release tarball.

        Args:
            tar: The open TarFile object to extract from.
            version: The normalized version used to name the extracted binary.

        Raises:
            BinaryNotFoundError: If the archive has no helm binary for this platform.
            ValueError: If path traversal is detected.

        """
        wanted = f"{self._platform}/helm"
        member = next((m for m in tar.getmembers() if m.name == wanted and m.isfile()), None)
        if member is None:
            raise BinaryNotFoundError(f"helm binary '{wanted}' not found in archive for version {version}")

        target_name = f"helm-{version}"
        member.name = target_name

        if hasattr(tarfile, "data_filter"):
            tar.extract(member, path=self.bin_location, filter="data")
        else:
            extract_path = (self.bin_location / target_name).resolve()
            if not extract_path.is_relative_to(self.bin_location.resolve()):
                raise ValueError(f"Path traversal detected: {extract_path}")
            tar.extract(member, path=self.bin_location)

    def get_binary_path(self, version: str) -> Path:
        """Get the path of the cached helm binary for the specified version."""
        return self.bin_location / f"helm-{normalize_version(version)}"

    def ensure_helm_binary(self, version: str) -> Path:
        """Ensure the helm binary for the specified version exists locally.

        Args:
            version: The helm version (may include 'v' prefix).

        Returns:
            The path of the binary.

        Raises:
            BinaryNotFoundError: If the binary cannot be downloaded.
            ValueError: If version format is invalid.

        """
        binary_path = self.get_binary_path(version)
        if not binary_path.exists():
            console.info(f"helm binary not found at {console.highlight(str(binary_path))}")
            self._download_helm_binary(version)
        return binary_path

    def resolve_helm_binary(self, version: str | None = None) -> str:
        """Return the helm binary to run.

        A pinned version always uses (and if needed downloads) the cached
        binary. Without one, the helm found on PATH wins and the default
        pinned version is downloaded only as a fallback.

        Args:
            version: Optional helm version to pin.

        Returns:
            Path of the helm binary as a string.

        """
        if version:
            return str(self.ensure_helm_binary(version))

        system_binary = shutil.which("helm")
        if system_binary is not None:
            ic(system_binary)
            return system_binary

        console.warning(f"helm not found in PATH, falling back to helm v{DEFAULT_HELM_VERSION}")
        return str(self.ensure_helm_binary(DEFAULT_HELM_VERSION))
