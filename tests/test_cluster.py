"""Tests for cluster.py module."""

from unittest.mock import MagicMock, patch

import click
import pytest
from kubernetes.client.exceptions import ApiException
from kubernetes.config.config_exception import ConfigException
from urllib3.exceptions import MaxRetryError, NewConnectionError

from minecraft_deploy.cluster import MANAGED_BY_LABEL, Cluster
from minecraft_deploy.exceptions import ClusterConnectionError


class TestClusterContextSelection:
    """Tests for context selection functionality."""

    def test_current_context(self, mock_kube_contexts, mock_kube_config):
        """Test using current context without selection."""
        cluster = Cluster()

        assert cluster.context == "test-context"
        mock_kube_config.assert_called_once_with(context="test-context")

    def test_explicit_context(self, mock_kube_contexts, mock_kube_config):
        """Test an explicit context wins over the current one."""
        cluster = Cluster(context="homelab")

        assert cluster.context == "homelab"
        mock_kube_config.assert_called_once_with(context="homelab")

    def test_unknown_explicit_context(self, mock_kube_contexts, mock_kube_config):
        """Test error when the explicit context does not exist."""
        with pytest.raises(ClusterConnectionError) as exc_info:
            Cluster(context="nowhere")

        assert "nowhere" in str(exc_info.value)
        mock_kube_config.assert_not_called()

    def test_set_context_with_selection(self, mock_kube_contexts, mock_kube_config):
        """Test prompting user for context selection."""
        with patch("questionary.select") as mock_select:
            mock_select.return_value.ask.return_value = "homelab"

            cluster = Cluster(select_context=True)

            assert cluster.context == "homelab"
            mock_select.assert_called_once()
            assert mock_select.call_args.kwargs["choices"] == ["test-context", "homelab"]

    def test_selection_cancelled(self, mock_kube_contexts, mock_kube_config):
        """Test aborting when the prompt is cancelled."""
        with patch("questionary.select") as mock_select:
            mock_select.return_value.ask.return_value = None

            with pytest.raises(click.Abort):
                Cluster(select_context=True)

    def test_invalid_kubeconfig(self):
        """Test error when kubeconfig is invalid or missing."""
        with patch("kubernetes.config.list_kube_config_contexts") as mock_contexts:
            mock_contexts.side_effect = ConfigException("Invalid kube-config file. No configuration found.")

            with pytest.raises(ClusterConnectionError) as exc_info:
                Cluster()

            assert "Invalid or missing kubeconfig" in str(exc_info.value)

    def test_repr(self, mock_kube_contexts, mock_kube_config):
        """Test repr includes the context."""
        assert repr(Cluster()) == "Cluster(context='test-context')"


class TestClusterEnsureNamespace:
    """Tests for namespace management."""

    def test_existing_namespace(self, cluster_mocks):
        """Test an existing namespace is returned as is."""
        existing = MagicMock()
        existing.metadata.name = "games"
        cluster_mocks["core_api"].read_namespace.return_value = existing

        cluster = Cluster()
        namespace = cluster.ensure_namespace("games")

        assert namespace is existing
        cluster_mocks["core_api"].create_namespace.assert_not_called()

    def test_missing_namespace_is_created(self, cluster_mocks):
        """Test a missing namespace is created with the managed-by label."""
        api = cluster_mocks["core_api"]
        api.read_namespace.side_effect = ApiException(status=404, reason="Not Found")
        created = MagicMock()
        created.metadata.name = "games"
        api.create_namespace.return_value = created

        namespace = Cluster().ensure_namespace("games")

        assert namespace is created
        body = api.create_namespace.call_args.kwargs["body"]
        assert body.metadata.name == "games"
        assert body.metadata.labels == {MANAGED_BY_LABEL: "minecraft-deploy"}

    def test_other_api_errors_propagate(self, cluster_mocks):
        """Test API errors other than 404 are not swallowed."""
        cluster_mocks["core_api"].read_namespace.side_effect = ApiException(status=403, reason="Forbidden")

        with pytest.raises(ApiException) as exc_info:
            Cluster().ensure_namespace("games")

        assert exc_info.value.status == 403
        cluster_mocks["core_api"].create_namespace.assert_not_called()

    def test_unreachable_cluster(self, cluster_mocks):
        """Test error when the API server is unreachable."""
        connection_error = NewConnectionError(
            None, "Failed to establish a new connection: [Errno 111] Connection refused"
        )
        cluster_mocks["core_api"].read_namespace.side_effect = MaxRetryError(
            pool=None, url="/api/v1/namespaces/games", reason=connection_error
        )

        with pytest.raises(ClusterConnectionError) as exc_info:
            Cluster().ensure_namespace("games")

        assert "Failed to connect" in str(exc_info.value)
