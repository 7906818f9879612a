"""Kubernetes cluster interaction utilities.

This module provides the Cluster class for selecting a kubeconfig context
and making sure the release namespace exists.
"""

from typing import Any

import click
import questionary
from icecream import ic
from kubernetes import client, config
from kubernetes.client.exceptions import ApiException
from kubernetes.config.config_exception import ConfigException
from urllib3.exceptions import MaxRetryError

from minecraft_deploy import console
from minecraft_deploy.exceptions import ClusterConnectionError
from minecraft_deploy.styles import POINTER, PROMPT_STYLE, QMARK

MANAGED_BY_LABEL = "app.kubernetes.io/managed-by"
MANAGED_BY_VALUE = "minecraft-deploy"


class Cluster:
    """Manages Kubernetes cluster interactions for the deployment.

    Attributes:
        context: The active Kubernetes context name.

    """

    def __init__(self, *, select_context: bool = False, context: str | None = None) -> None:
        """Initialize Cluster and load the kubeconfig for the chosen context.

        Args:
            select_context: If True, prompt user to select a context.
            context: Explicit context name; takes precedence over select_context.

        """
        self.context: str = self._set_context(select_context=select_context, context=context)
        config.load_kube_config(context=self.context)

    @staticmethod
    def _set_context(*, select_context: bool, context: str | None) -> str:
        """Pick the Kubernetes context to use.

        Returns:
            The explicit, selected, or current context name.

        Raises:
            ClusterConnectionError: If kubeconfig is invalid or the context is unknown.
            click.Abort: If user cancels context selection.

        """
        try:
            contexts, current_context = config.list_kube_config_contexts()
        except ConfigException as e:
            raise ClusterConnectionError(f"Invalid or missing kubeconfig: {e}") from e

        context_names: list[str] = [ctx["name"] for ctx in contexts]

        if context is not None:
            if context not in context_names:
                raise ClusterConnectionError(f"Context '{context}' not found in kubeconfig")
            chosen = context
        elif select_context:
            selected: str | None = questionary.select(
                "Select context to deploy to",
                choices=context_names,
                default=current_context["name"] if current_context else None,
                style=PROMPT_STYLE,
                pointer=POINTER,
                qmark=QMARK,
            ).ask()
            if selected is None:
                console.warning("Context selection cancelled.")
                raise click.Abort()
            chosen = selected
        else:
            if not current_context:
                raise ClusterConnectionError("No current context set in kubeconfig")
            chosen = str(current_context["name"])

        console.action(f"Working with {console.highlight(chosen)} cluster")
        return chosen

    @staticmethod
    def ensure_namespace(name: str) -> Any:
        """Return the namespace object, creating the namespace when it is absent.

        Args:
            name: The namespace name.

        Returns:
            The V1Namespace as reported by the API server.

        Raises:
            ClusterConnectionError: If the cluster is unreachable.
            ApiException: For API errors other than 'not found'.

        """
        core_v1_api = client.CoreV1Api()
        try:
            try:
                namespace = core_v1_api.read_namespace(name=name)
                console.step(f"Namespace {console.highlight(name)} already exists")
            except ApiException as e:
                if e.status != 404:
                    raise
                body = client.V1Namespace(
                    metadata=client.V1ObjectMeta(
                        name=name,
                        labels={MANAGED_BY_LABEL: MANAGED_BY_VALUE},
                    )
                )
                namespace = core_v1_api.create_namespace(body=body)
                console.success(f"Created namespace {console.highlight(name)}")
        except MaxRetryError as e:
            raise ClusterConnectionError(f"Failed to connect to the Kubernetes cluster: {e.reason}") from e

        ic(namespace.metadata.name)
        return namespace

    def __repr__(self) -> str:
        """Return a detailed string representation for debugging."""
        return f"Cluster(context={self.context!r})"
