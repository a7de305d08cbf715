"""Configuration sources for agent-bridge.

Each source loads configuration data from one place (a JSON file, a YAML
file, or environment variables) as a plain dictionary.
"""

from __future__ import annotations

import json
import os
from abc import ABC, abstractmethod
from collections.abc import Mapping
from pathlib import Path
from typing import Any, ClassVar

import yaml

from agent_bridge.core import ConfigError, get_logger

logger = get_logger("config.sources")


class IConfigSource(ABC):
    """Interface for configuration sources."""

    @abstractmethod
    def load(self) -> dict[str, Any]:
        """Load configuration from source.

        Returns:
            Dictionary containing configuration data.
            Returns empty dict if source doesn't exist.

        Raises:
            ConfigError: If source exists but cannot be parsed.
        """
        ...

    @abstractmethod
    def exists(self) -> bool:
        """Check if source exists."""
        ...


class _FileSource(IConfigSource):
    """Shared plumbing for file-backed sources."""

    FORMAT: ClassVar[str] = ""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.is_file()

    def load(self) -> dict[str, Any]:
        if not self.exists():
            return {}
        try:
            content = self._path.read_text(encoding="utf-8")
        except OSError as e:
            logger.warning("Cannot read %s: %s", self._path, e)
            raise ConfigError(f"Cannot read {self._path}: {e}") from e
        if not content.strip():
            return {}

        data = self._parse(content)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(
                f"{self.FORMAT} root must be a mapping in {self._path}, "
                f"got {type(data).__name__}"
            )
        return data

    @abstractmethod
    def _parse(self, content: str) -> Any:
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self._path)!r})"


class JsonFileSource(_FileSource):
    """Load configuration from a JSON file."""

    FORMAT: ClassVar[str] = "JSON"

    def _parse(self, content: str) -> Any:
        try:
            return json.loads(content)
        except json.JSONDecodeError as e:
            logger.warning("Invalid JSON in %s: %s", self._path, e)
            raise ConfigError(f"Invalid JSON in {self._path}: {e}") from e


class YamlFileSource(_FileSource):
    """Load configuration from a YAML file."""

    FORMAT: ClassVar[str] = "YAML"

    def _parse(self, content: str) -> Any:
        try:
            return yaml.safe_load(content)
        except yaml.YAMLError as e:
            logger.warning("Invalid YAML in %s: %s", self._path, e)
            raise ConfigError(f"Invalid YAML in {self._path}: {e}") from e


class EnvironmentSource(IConfigSource):
    """Load configuration from environment variables.

    Environment variables are mapped to configuration paths:
    - AGENT_BRIDGE_AGENT -> agent_preset
    - AGENT_BRIDGE_CUSTOM_AGENT_CMD -> custom_agent_cmd
    - AGENT_BRIDGE_TIMEOUT -> execution.timeout
    - AGENT_BRIDGE_AUTONOMOUS -> execution.autonomous
    - AGENT_BRIDGE_USE_SUBSCRIPTION -> execution.use_subscription
    - AGENT_BRIDGE_WORK_DIR -> execution.work_dir
    """

    PREFIX: ClassVar[str] = "AGENT_BRIDGE_"

    # Environment variable name -> top-level key or (section, key)
    MAPPINGS: ClassVar[dict[str, str | tuple[str, str]]] = {
        "AGENT_BRIDGE_AGENT": "agent_preset",
        "AGENT_BRIDGE_CUSTOM_AGENT_CMD": "custom_agent_cmd",
        "AGENT_BRIDGE_TIMEOUT": ("execution", "timeout"),
        "AGENT_BRIDGE_AUTONOMOUS": ("execution", "autonomous"),
        "AGENT_BRIDGE_USE_SUBSCRIPTION": ("execution", "use_subscription"),
        "AGENT_BRIDGE_WORK_DIR": ("execution", "work_dir"),
    }

    BOOLEAN_KEYS: ClassVar[frozenset[str]] = frozenset({"autonomous", "use_subscription"})
    FLOAT_KEYS: ClassVar[frozenset[str]] = frozenset({"timeout"})

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        """Initialize environment source.

        Args:
            environ: Environment mapping. Defaults to os.environ.
        """
        self._environ = dict(environ) if environ is not None else dict(os.environ)

    def load(self) -> dict[str, Any]:
        config: dict[str, Any] = {}
        for env_var, path in self.MAPPINGS.items():
            value = self._environ.get(env_var)
            if value is not None:
                self._set_nested(config, path, self._convert_value(value, path))
        return config

    def exists(self) -> bool:
        """Environment always exists."""
        return True

    def _set_nested(
        self,
        d: dict[str, Any],
        path: str | tuple[str, str],
        value: Any,
    ) -> None:
        if isinstance(path, str):
            d[path] = value
        else:
            section, key = path
            d.setdefault(section, {})[key] = value

    def _convert_value(self, value: str, path: str | tuple[str, str]) -> Any:
        """Convert a string value to the type its key expects.

        Invalid numbers are passed through as strings so model validation
        reports them.
        """
        key = path[1] if isinstance(path, tuple) else path

        if key in self.BOOLEAN_KEYS:
            return value.strip().lower() in ("true", "1", "yes", "on")

        if key in self.FLOAT_KEYS:
            try:
                return float(value)
            except ValueError:
                logger.warning("Invalid number for %s: %s", key, value)
                return value

        return value

    def __repr__(self) -> str:
        return "EnvironmentSource()"
