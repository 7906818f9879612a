#!/usr/bin/env python
"""Command-line interface for minecraft-deploy.

This module provides the main CLI entry point, which resolves the stack
configuration, deploys the Minecraft server chart and prints the
exported outputs for other deployment units.
"""

import sys

import click
from icecream import ic

from minecraft_deploy import __version__, console
from minecraft_deploy.builder import build, build_release_request, resolve_settings
from minecraft_deploy.cluster import Cluster
from minecraft_deploy.config import DeployEnvironment, StackConfig
from minecraft_deploy.exceptions import (
    BinaryNotFoundError,
    ClusterConnectionError,
    ConfigError,
    HelmReleaseError,
    UnsupportedPlatformError,
)
from minecraft_deploy.helm import Helm
from minecraft_deploy.host import Host
from minecraft_deploy.models import OutputFormat


def load_config(stack_file: str | None, overrides: tuple[str, ...]) -> StackConfig:
    """Build the configuration source from the stack file and --set overrides."""
    cfg = StackConfig.from_file(stack_file) if stack_file else StackConfig()
    if overrides:
        cfg = cfg.with_overrides(overrides)
    ic(cfg)
    return cfg


def show_dry_run(cfg: StackConfig, env: DeployEnvironment) -> None:
    """Print the release that would be applied without touching the cluster."""
    request = build_release_request(resolve_settings(cfg, env))
    console.summary_panel(
        "Dry Run",
        {
            "Release": request.name,
            "Chart": request.chart,
            "Repository": request.repo,
            "Version": request.version or "latest",
            "Namespace": request.namespace,
        },
    )
    console.yaml_block(request.values)


def print_outputs(namespace: str, release_name: str, output: OutputFormat) -> None:
    """Print the exported outputs in the requested format."""
    outputs = {"minecraftNamespace": namespace, "releaseName": release_name}
    match output:
        case OutputFormat.JSON:
            console.json_block(outputs)
        case OutputFormat.YAML:
            console.yaml_block(outputs)
        case OutputFormat.TABLE:
            console.newline()
            console.summary_panel("Minecraft Deployed", outputs)


@click.command(help="Deploy a Minecraft server to Kubernetes with Helm")
@click.option("--version", "-v", required=False, is_flag=True, help="print version")
@click.option("--debug", required=False, is_flag=True, help="print debug information")
@click.option("--stack-file", "-f", required=False, type=click.Path(dir_okay=False), help="stack YAML with minecraft:* config")
@click.option("--set", "overrides", multiple=True, metavar="KEY=VALUE", help="override a config value")
@click.option("--context", required=False, help="kube context to deploy to")
@click.option("--select", required=False, is_flag=True, default=False, help="prompt for context select")
@click.option("--helm-version", required=False, help="helm version to use (downloaded if missing)")
@click.option("--wait", required=False, is_flag=True, help="wait for the release to become ready")
@click.option("--dry-run", required=False, is_flag=True, help="print the resolved values and exit")
@click.option(
    "--output",
    "-o",
    type=click.Choice([f.value for f in OutputFormat]),
    default=OutputFormat.TABLE.value,
    show_default=True,
    help="format of the exported outputs",
)
def cli(
    version: bool,
    debug: bool,
    stack_file: str | None,
    overrides: tuple[str, ...],
    context: str | None,
    select: bool,
    helm_version: str | None,
    wait: bool,
    dry_run: bool,
    output: str,
) -> None:
    """Process CLI arguments and run the deployment.

    Args:
        version: Print version and exit.
        debug: Enable debug output.
        stack_file: Path to the stack configuration file.
        overrides: KEY=VALUE configuration overrides.
        context: Kubernetes context to deploy to.
        select: Prompt for Kubernetes context selection.
        helm_version: Pin the helm binary version.
        wait: Make helm wait for the release.
        dry_run: Print the resolved values instead of deploying.
        output: Format of the exported outputs.

    """
    if not debug:
        ic.disable()
    else:
        ic.enable()

    if version:
        click.echo(__version__)
        return

    env = DeployEnvironment.from_environ()
    ic(env)

    try:
        cfg = load_config(stack_file, overrides)

        if dry_run:
            show_dry_run(cfg, env)
            return

        try:
            binary = Host().resolve_helm_binary(helm_version)
        except ValueError as e:
            raise BinaryNotFoundError(f"Invalid helm version '{helm_version}': {e}") from e
        installer = Helm(Cluster(select_context=select, context=context), binary=binary, wait=wait)
        namespace, release_name = build(cfg, installer, env)
    except ConfigError as e:
        console.error(f"Invalid configuration: {e}")
        sys.exit(1)
    except ClusterConnectionError as e:
        console.error(f"Cluster connection failed: {e}")
        sys.exit(1)
    except (BinaryNotFoundError, UnsupportedPlatformError) as e:
        console.error(str(e))
        sys.exit(1)
    except HelmReleaseError as e:
        console.error(f"Deployment failed: {e}")
        sys.exit(1)

    print_outputs(namespace, release_name, OutputFormat(output))


if __name__ == "__main__":
    cli()
