"""Configuration loader for agent-bridge.

This module implements the ConfigLoader class that handles hierarchical
configuration loading, merging, validation, and live reload.
"""

from __future__ import annotations

import copy
import threading
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError
from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

if TYPE_CHECKING:
    from watchdog.observers.api import BaseObserver

from agent_bridge.config.models import AgentBridgeConfig
from agent_bridge.config.sources import (
    EnvironmentSource,
    IConfigSource,
    JsonFileSource,
    YamlFileSource,
)
from agent_bridge.core import ConfigError, get_logger

logger = get_logger("config.loader")

CONFIG_DIR_NAME = ".agent-bridge"


class ConfigLoader:
    """Configuration loader with hierarchical merging.

    Load order (later overrides earlier):
    1. Defaults (from AgentBridgeConfig)
    2. User config (~/.agent-bridge/config.json or .yaml)
    3. Project config (./.agent-bridge/config.json or .yaml)
    4. Local overrides (./.agent-bridge/config.local.json)
    5. Environment variables (AGENT_BRIDGE_*)

    Thread Safety:
    - The current config is swapped under a lock on reload
    - The file watcher runs in its own thread and calls reload()
    - Observers are notified outside the lock
    """

    def __init__(
        self,
        user_dir: Path | None = None,
        project_dir: Path | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        """Initialize configuration loader.

        Args:
            user_dir: User configuration directory. Defaults to ~/.agent-bridge
            project_dir: Project configuration directory. Defaults to ./.agent-bridge
            environ: Environment to read AGENT_BRIDGE_* from. Defaults to os.environ
        """
        self._user_dir = user_dir or Path.home() / CONFIG_DIR_NAME
        self._project_dir = project_dir or Path.cwd() / CONFIG_DIR_NAME
        self._environ = environ
        self._config: AgentBridgeConfig | None = None
        self._observers: list[Callable[[AgentBridgeConfig], None]] = []
        self._file_watcher: BaseObserver | None = None
        self._change_handler: _ConfigChangeHandler | None = None
        self._lock = threading.Lock()

    @property
    def config(self) -> AgentBridgeConfig:
        """Get current configuration, loading it on first access."""
        with self._lock:
            if self._config is None:
                self._config = self.load_all()
            return self._config

    @property
    def user_dir(self) -> Path:
        return self._user_dir

    @property
    def project_dir(self) -> Path:
        return self._project_dir

    def load_all(self) -> AgentBridgeConfig:
        """Load and merge all configuration sources.

        Returns:
            Validated AgentBridgeConfig with all sources merged.

        Raises:
            ConfigError: If the merged configuration fails validation.
        """
        config: dict[str, Any] = AgentBridgeConfig().model_dump()

        for source in self._file_sources():
            config = self._load_and_merge(config, source)
        config = self._load_and_merge(config, EnvironmentSource(self._environ))

        try:
            return AgentBridgeConfig.model_validate(config)
        except ValidationError as e:
            logger.error("Configuration validation failed: %s", e)
            raise ConfigError(f"Configuration validation failed: {e}") from e

    def _file_sources(self) -> list[IConfigSource]:
        """File sources in load order; JSON is preferred over YAML per directory."""
        sources: list[IConfigSource] = []
        for directory in (self._user_dir, self._project_dir):
            json_path = directory / "config.json"
            yaml_path = directory / "config.yaml"
            if json_path.is_file():
                sources.append(JsonFileSource(json_path))
            elif yaml_path.is_file():
                sources.append(YamlFileSource(yaml_path))
        sources.append(JsonFileSource(self._project_dir / "config.local.json"))
        return sources

    def _load_and_merge(
        self,
        base: dict[str, Any],
        source: IConfigSource,
    ) -> dict[str, Any]:
        """Load from source and merge into base; unreadable sources are skipped."""
        try:
            if source.exists():
                override = source.load()
                if override:
                    logger.debug("Loaded config from %s", source)
                    return self.merge(base, override)
                logger.debug("Config source %s exists but returned empty", source)
        except ConfigError as e:
            logger.debug("Skipped config source %s: %s", source, e)
        except FileNotFoundError:
            # Deleted between exists() and load()
            logger.debug("Config source %s disappeared before load", source)
        return base

    def load(self, path: Path) -> dict[str, Any]:
        """Load a single configuration file.

        Raises:
            ConfigError: If the format is unsupported or the file is invalid.
        """
        suffix = path.suffix.lower()
        if suffix == ".json":
            return JsonFileSource(path).load()
        if suffix in (".yaml", ".yml"):
            return YamlFileSource(path).load()
        raise ConfigError(f"Unsupported configuration format: {suffix}")

    def merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two configuration dictionaries.

        Nested dictionaries are merged recursively, other values are replaced.
        The result shares no references with either input.
        """
        result = copy.deepcopy(base)
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self.merge(result[key], value)
            else:
                result[key] = copy.deepcopy(value)
        return result

    def validate(self, config: dict[str, Any]) -> tuple[bool, list[str]]:
        """Validate a configuration dictionary against the schema."""
        try:
            AgentBridgeConfig.model_validate(config)
            return True, []
        except ValidationError as e:
            return False, [str(e)]

    def reload(self) -> None:
        """Reload configuration from all sources.

        If the new configuration is invalid the old one is kept.
        """
        try:
            new_config = self.load_all()
        except ConfigError as e:
            logger.error("Failed to reload configuration: %s", e)
            return

        with self._lock:
            self._config = new_config
        self._notify_observers(new_config)
        logger.info("Configuration reloaded")

    def watch(self) -> None:
        """Start watching the user and project config directories.

        A change to a .json or .yaml file triggers a debounced reload.
        """
        if self._file_watcher is not None:
            return

        handler = _ConfigChangeHandler(self)
        self._change_handler = handler
        self._file_watcher = Observer()

        for path in (self._user_dir, self._project_dir):
            if path.is_dir():
                self._file_watcher.schedule(handler, str(path), recursive=False)
                logger.debug("Watching %s for configuration changes", path)

        self._file_watcher.start()
        logger.info("Configuration file watcher started")

    def stop_watching(self) -> None:
        """Stop watching configuration files. Safe to call multiple times."""
        if self._file_watcher is not None:
            self._file_watcher.stop()
            self._file_watcher.join(timeout=5.0)
            self._file_watcher = None
            logger.info("Configuration file watcher stopped")
        if self._change_handler is not None:
            self._change_handler.cancel()
            self._change_handler = None

    @property
    def is_watching(self) -> bool:
        return self._file_watcher is not None

    def add_observer(self, callback: Callable[[AgentBridgeConfig], None]) -> None:
        """Add a callback receiving each reloaded configuration."""
        if callback not in self._observers:
            self._observers.append(callback)

    def remove_observer(self, callback: Callable[[AgentBridgeConfig], None]) -> None:
        if callback in self._observers:
            self._observers.remove(callback)

    def _notify_observers(self, config: AgentBridgeConfig) -> None:
        for observer in list(self._observers):
            try:
                observer(config)
            except Exception:
                logger.exception("Config observer %r failed", observer)


class _ConfigChangeHandler(FileSystemEventHandler):
    """File system event handler for config changes.

    Bursts of events (editor auto-save) collapse into a single reload.
    """

    # Debounce window in seconds
    DEBOUNCE_SECONDS = 0.5

    def __init__(self, loader: ConfigLoader) -> None:
        super().__init__()
        self._loader = loader
        self._pending_reload: threading.Timer | None = None
        self._lock = threading.Lock()

    def _schedule_reload(self, src_path: str) -> None:
        with self._lock:
            if self._pending_reload is not None:
                self._pending_reload.cancel()

            def do_reload() -> None:
                with self._lock:
                    self._pending_reload = None
                logger.debug("Debounced config reload triggered by: %s", src_path)
                self._loader.reload()

            self._pending_reload = threading.Timer(self.DEBOUNCE_SECONDS, do_reload)
            self._pending_reload.daemon = True
            self._pending_reload.start()
            logger.debug("Config change detected, reload scheduled: %s", src_path)

    def cancel(self) -> None:
        """Drop a scheduled reload that has not fired yet."""
        with self._lock:
            if self._pending_reload is not None:
                self._pending_reload.cancel()
                self._pending_reload = None

    @staticmethod
    def _is_config_file(path: str) -> bool:
        """Check if path is a config file rather than an editor temp file."""
        name = Path(path).name
        if name.startswith((".#", ".__")) or name.endswith((".swp", ".tmp", "~", ".bak")):
            return False
        return name.endswith((".json", ".yaml", ".yml"))

    def on_modified(self, event: FileSystemEvent) -> None:
        if not event.is_directory and self._is_config_file(str(event.src_path)):
            self._schedule_reload(str(event.src_path))

    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory and self._is_config_file(str(event.src_path)):
            self._schedule_reload(str(event.src_path))
