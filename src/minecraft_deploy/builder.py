"""Deployment descriptor builder.

Resolves the stack configuration and environment overrides into a single
immutable settings object, turns it into the chart values for the itzg
Minecraft server chart and hands the result to a chart installer.
"""

from dataclasses import dataclass
from typing import Any

from icecream import ic

from minecraft_deploy.config import ConfigurationSource, DeployEnvironment
from minecraft_deploy.models import ChartInstaller, ReleaseRequest

RELEASE_NAME = "minecraft"
CHART_NAME = "minecraft"
CHART_REPO = "https://itzg.github.io/minecraft-server-charts/"

DEFAULT_NAMESPACE = "minecraft"
DEFAULT_SERVER_VERSION = "1.21.6"
DEFAULT_SERVER_TYPE = "VANILLA"
DEFAULT_GAME_MODE = "survival"
DEFAULT_DIFFICULTY = "easy"
DEFAULT_MAX_PLAYERS = 20
DEFAULT_MOTD = "Welcome to Minecraft on Kubernetes!"
DEFAULT_MEMORY = "1024M"
DEFAULT_ENABLE_RCON = True
DEFAULT_CPU_LIMIT = "2"
DEFAULT_MEMORY_LIMIT = "4Gi"
DEFAULT_STORAGE_SIZE = "10Gi"
DEFAULT_STORAGE_CLASS = "truenas-hdd-mirror-nfs"

SERVICE_TYPE = "ClusterIP"
RCON_PASSWORD = "minecraft"
CPU_REQUEST = "500m"
MEMORY_REQUEST = "512Mi"
ACCESS_MODES = ("ReadWriteOnce",)


@dataclass(frozen=True, slots=True)
class DeploymentSettings:
    """Fully resolved deployment settings.

    Every field holds a value once resolved; only chart_version may be
    None, meaning the latest chart published in the repository.
    """

    namespace: str = DEFAULT_NAMESPACE
    chart_version: str | None = None
    server_version: str = DEFAULT_SERVER_VERSION
    server_type: str = DEFAULT_SERVER_TYPE
    game_mode: str = DEFAULT_GAME_MODE
    difficulty: str = DEFAULT_DIFFICULTY
    max_players: int | float = DEFAULT_MAX_PLAYERS
    motd: str = DEFAULT_MOTD
    memory: str = DEFAULT_MEMORY
    enable_rcon: bool = DEFAULT_ENABLE_RCON
    cpu_limit: str = DEFAULT_CPU_LIMIT
    memory_limit: str = DEFAULT_MEMORY_LIMIT
    storage_size: str = DEFAULT_STORAGE_SIZE
    storage_class: str = DEFAULT_STORAGE_CLASS


def _override(env_value: str | None, cfg: ConfigurationSource, key: str, default: str) -> str:
    """Resolve a field as environment value, then config value, then default."""
    if env_value:
        return env_value
    return cfg.get(key, default)


def resolve_settings(cfg: ConfigurationSource, env: DeployEnvironment) -> DeploymentSettings:
    """Merge environment overrides, configuration values and defaults.

    No validation is done here; invalid values are left for the chart
    and the API server to reject.

    Args:
        cfg: Source of the named configuration values.
        env: Environment overrides captured at startup.

    Returns:
        The resolved settings.

    """
    chart_version = env.chart_version or cfg.get("chartVersion", "") or None
    settings = DeploymentSettings(
        namespace=cfg.get("namespace", DEFAULT_NAMESPACE),
        chart_version=chart_version,
        server_version=_override(env.minecraft_version, cfg, "serverVersion", DEFAULT_SERVER_VERSION),
        server_type=cfg.get("serverType", DEFAULT_SERVER_TYPE),
        game_mode=cfg.get("gamemode", DEFAULT_GAME_MODE),
        difficulty=cfg.get("difficulty", DEFAULT_DIFFICULTY),
        max_players=cfg.number("maxPlayers", DEFAULT_MAX_PLAYERS),
        motd=cfg.get("motd", DEFAULT_MOTD),
        memory=cfg.get("memory", DEFAULT_MEMORY),
        enable_rcon=cfg.bool("enableRcon", DEFAULT_ENABLE_RCON),
        cpu_limit=cfg.get("cpuLimit", DEFAULT_CPU_LIMIT),
        memory_limit=cfg.get("memoryLimit", DEFAULT_MEMORY_LIMIT),
        storage_size=cfg.get("storageSize", DEFAULT_STORAGE_SIZE),
        storage_class=cfg.get("storageClass", DEFAULT_STORAGE_CLASS),
    )
    ic(settings)
    return settings


def build_values(settings: DeploymentSettings) -> dict[str, Any]:
    """Build the chart values for the given settings.

    Args:
        settings: The resolved deployment settings.

    Returns:
        A freshly allocated nested values mapping.

    """
    return {
        "minecraftServer": {
            "eula": "TRUE",
            "version": settings.server_version,
            "type": settings.server_type,
            "gameMode": settings.game_mode,
            "difficulty": settings.difficulty,
            "maxPlayers": settings.max_players,
            "motd": settings.motd,
            "memory": settings.memory,
            "serviceType": SERVICE_TYPE,
            "rcon": {
                "enabled": settings.enable_rcon,
                # TODO: source the RCON password from a Kubernetes secret instead of a shared literal
                "password": RCON_PASSWORD,
            },
        },
        "resources": {
            "requests": {
                "cpu": CPU_REQUEST,
                "memory": MEMORY_REQUEST,
            },
            "limits": {
                "cpu": settings.cpu_limit,
                "memory": settings.memory_limit,
            },
        },
        "persistence": {
            "dataDir": {
                "enabled": True,
                # The chart spells this key with a capital S
                "Size": settings.storage_size,
                "storageClass": settings.storage_class,
                "accessModes": list(ACCESS_MODES),
            },
        },
    }


def build_release_request(settings: DeploymentSettings) -> ReleaseRequest:
    """Wrap the chart values into a request for the chart installer."""
    return ReleaseRequest(
        name=RELEASE_NAME,
        chart=CHART_NAME,
        repo=CHART_REPO,
        namespace=settings.namespace,
        version=settings.chart_version,
        values=build_values(settings),
    )


def build(
    cfg: ConfigurationSource,
    installer: ChartInstaller,
    env: DeployEnvironment | None = None,
) -> tuple[str, str]:
    """Resolve the deployment and ask the installer to apply it.

    The installer is called exactly once; any error it raises reaches the
    caller unchanged.

    Args:
        cfg: Source of the named configuration values.
        installer: The chart installer that converges the release.
        env: Environment overrides; read from the process environment when omitted.

    Returns:
        The namespace name and the release name reported by the installer.

    """
    if env is None:
        env = DeployEnvironment.from_environ()

    request = build_release_request(resolve_settings(cfg, env))
    ic(request)

    handle = installer.install(request)
    return handle.namespace.metadata.name, handle.release.name
