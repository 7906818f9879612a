"""Shared test fixtures for minecraft-deploy tests."""

from unittest.mock import MagicMock, patch

import pytest
from kubernetes import client

from minecraft_deploy.models import HelmRelease, ReleaseHandle


class RecordingInstaller:
    """Chart installer that records requests and echoes a fixed release."""

    def __init__(self, release_name: str = "minecraft", namespace: str | None = None) -> None:
        self.release_name = release_name
        self.namespace = namespace
        self.requests = []

    def install(self, request):
        self.requests.append(request)
        namespace = self.namespace or request.namespace
        return ReleaseHandle(
            namespace=client.V1Namespace(metadata=client.V1ObjectMeta(name=namespace)),
            release=HelmRelease(
                name=self.release_name,
                namespace=namespace,
                revision=1,
                status="deployed",
                chart="minecraft-4.26.0",
                app_version="SeeValues",
            ),
        )


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep the developer's environment overrides out of the tests."""
    monkeypatch.delenv("MINECRAFT_VERSION", raising=False)
    monkeypatch.delenv("MINECRAFT_HELM_VERSION", raising=False)


@pytest.fixture
def installer():
    """A recording chart installer."""
    return RecordingInstaller()


@pytest.fixture
def mock_kube_contexts():
    """Mock kubernetes config contexts."""
    with patch("kubernetes.config.list_kube_config_contexts") as mock:
        mock.return_value = (
            [{"name": "test-context"}, {"name": "homelab"}],
            {"name": "test-context"},
        )
        yield mock


@pytest.fixture
def mock_kube_config():
    """Mock kubernetes config loading."""
    with patch("kubernetes.config.load_kube_config") as mock:
        yield mock


@pytest.fixture
def mock_core_v1_api():
    """Mock CoreV1Api for namespace operations."""
    with patch("kubernetes.client.CoreV1Api") as mock:
        api_instance = MagicMock()
        mock.return_value = api_instance
        yield api_instance


@pytest.fixture
def cluster_mocks(mock_kube_contexts, mock_kube_config, mock_core_v1_api):
    """Combined fixture for creating a Cluster instance."""
    return {
        "contexts": mock_kube_contexts,
        "config": mock_kube_config,
        "core_api": mock_core_v1_api,
    }


@pytest.fixture
def mock_subprocess():
    """Mock subprocess.run for command execution."""
    with patch("subprocess.run") as mock:
        mock.return_value = MagicMock(returncode=0, stdout=SAMPLE_RELEASE_JSON, stderr="")
        yield mock


@pytest.fixture
def stack_file(tmp_path):
    """Write a Pulumi-style stack file and return its path."""
    path = tmp_path / "Pulumi.test.yaml"
    path.write_text(SAMPLE_STACK_YAML)
    return path


SAMPLE_STACK_YAML = """config:
  minecraft:namespace: games
  minecraft:maxPlayers: 50
  minecraft:enableRcon: false
  minecraft:motd: Hello from the stack file
  kubernetes:context: homelab
"""

SAMPLE_RELEASE_JSON = """{
  "name": "minecraft",
  "namespace": "games",
  "version": 3,
  "info": {"status": "deployed", "description": "Upgrade complete"},
  "chart": {"metadata": {"name": "minecraft", "version": "4.26.0", "appVersion": "SeeValues"}}
}"""
