"""Stack configuration sources.

This module provides the ConfigurationSource protocol consumed by the
deployment builder, a YAML-backed implementation reading Pulumi-style
stack files, and a snapshot of the environment overrides.
"""

import os
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

import yaml
from icecream import ic

from minecraft_deploy.exceptions import ConfigError, ConfigFileError, ConfigTypeError

CONFIG_NAMESPACE = "minecraft"

HELM_VERSION_ENV = "MINECRAFT_HELM_VERSION"
MINECRAFT_VERSION_ENV = "MINECRAFT_VERSION"

_TRUE_STRINGS = frozenset({"true"})
_FALSE_STRINGS = frozenset({"false"})


class ConfigurationSource(Protocol):
    """Read access to named configuration values with defaults."""

    def get(self, key: str, default: str) -> str: ...

    def number(self, key: str, default: int | float) -> int | float: ...

    def bool(self, key: str, default: bool) -> bool: ...


class StackConfig:
    """Configuration values for one namespace of a stack.

    Keys are stored without their namespace prefix; a stack file entry
    'minecraft:motd' is looked up as 'motd'.

    Attributes:
        namespace: The configuration namespace (e.g. 'minecraft').

    """

    def __init__(self, namespace: str = CONFIG_NAMESPACE, values: Mapping[str, Any] | None = None) -> None:
        self.namespace: str = namespace
        self._values: dict[str, Any] = dict(values or {})

    @classmethod
    def from_file(cls, path: str | Path, namespace: str = CONFIG_NAMESPACE) -> "StackConfig":
        """Load the namespace's values from a stack YAML file.

        The file is expected to look like a Pulumi stack file::

            config:
              minecraft:namespace: games
              minecraft:maxPlayers: 50

        Entries belonging to other namespaces are ignored.

        Args:
            path: Path to the stack file.
            namespace: The configuration namespace to extract.

        Returns:
            A StackConfig holding the namespace's values.

        Raises:
            ConfigFileError: If the file is missing, malformed, or not a mapping.

        """
        try:
            with open(path) as stream:
                document = yaml.safe_load(stream)
        except FileNotFoundError as err:
            raise ConfigFileError(f"Stack file '{path}' does not exist") from err
        except yaml.YAMLError as err:
            raise ConfigFileError(f"Stack file '{path}' contains malformed YAML: {err}") from err

        if document is None:
            return cls(namespace=namespace)
        if not isinstance(document, dict):
            raise ConfigFileError(f"Stack file '{path}' does not contain a YAML mapping")

        entries = document.get("config") or {}
        if not isinstance(entries, dict):
            raise ConfigFileError(f"The 'config' section of '{path}' is not a mapping")

        prefix = f"{namespace}:"
        values = {key[len(prefix):]: value for key, value in entries.items() if str(key).startswith(prefix)}
        ic(values)
        return cls(namespace=namespace, values=values)

    def with_overrides(self, pairs: Iterable[str]) -> "StackConfig":
        """Return a copy with KEY=VALUE overrides applied.

        Args:
            pairs: Overrides such as 'motd=Hello' or 'minecraft:maxPlayers=50'.

        Returns:
            A new StackConfig; this instance is left untouched.

        Raises:
            ConfigError: If a pair has no '=' or names another namespace.

        """
        values = dict(self._values)
        for pair in pairs:
            key, sep, value = pair.partition("=")
            key = key.strip()
            if not sep or not key:
                raise ConfigError(f"Invalid override '{pair}': expected KEY=VALUE")
            if ":" in key:
                namespace, _, key = key.partition(":")
                if namespace != self.namespace:
                    raise ConfigError(
                        f"Override '{pair}' targets namespace '{namespace}', expected '{self.namespace}'"
                    )
            values[key] = value
        return StackConfig(namespace=self.namespace, values=values)

    def __contains__(self, key: str) -> bool:
        return self._lookup(key) is not None

    def __repr__(self) -> str:
        """Return a detailed string representation for debugging."""
        return f"StackConfig(namespace={self.namespace!r}, keys={sorted(self._values)!r})"

    def _full_key(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    def _lookup(self, key: str) -> Any:
        """Return the raw value for key; a YAML null counts as unset and yields None."""
        return self._values.get(key)

    def get(self, key: str, default: str) -> str:
        """Return the value for key as a string, or default when unset."""
        value = self._lookup(key)
        if value is None:
            return default
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)

    def number(self, key: str, default: int | float) -> int | float:
        """Return the value for key as a number, or default when unset.

        Integral values are returned as int.

        Raises:
            ConfigTypeError: If the value is not numeric.

        """
        value = self._lookup(key)
        if value is None:
            return default
        if isinstance(value, bool):
            raise ConfigTypeError(f"Configuration value '{self._full_key(key)}' is a boolean, expected a number")
        if isinstance(value, (int, float)):
            number = value
        else:
            try:
                number = float(str(value).strip())
            except ValueError as err:
                raise ConfigTypeError(
                    f"Configuration value '{self._full_key(key)}' is not a number: {value!r}"
                ) from err
        if isinstance(number, float) and number.is_integer():
            return int(number)
        return number

    def bool(self, key: str, default: bool) -> bool:
        """Return the value for key as a boolean, or default when unset.

        Raises:
            ConfigTypeError: If the value is neither a boolean nor 'true'/'false'.

        """
        value = self._lookup(key)
        if value is None:
            return default
        if isinstance(value, bool):
            return value
        text = str(value).strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
        raise ConfigTypeError(f"Configuration value '{self._full_key(key)}' is not a boolean: {value!r}")


@dataclass(frozen=True, slots=True)
class DeployEnvironment:
    """Environment overrides, read once at startup.

    Attributes:
        chart_version: Helm chart version from MINECRAFT_HELM_VERSION.
        minecraft_version: Server version from MINECRAFT_VERSION.

    """

    chart_version: str | None = None
    minecraft_version: str | None = None

    @classmethod
    def from_environ(cls, environ: Mapping[str, str] | None = None) -> "DeployEnvironment":
        """Snapshot the overrides from environ (defaults to os.environ).

        Empty values are treated as unset.
        """
        env = os.environ if environ is None else environ
        return cls(
            chart_version=env.get(HELM_VERSION_ENV) or None,
            minecraft_version=env.get(MINECRAFT_VERSION_ENV) or None,
        )
