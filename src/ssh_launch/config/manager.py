"""Settings manager for loading, regenerating, and validating settings."""

from __future__ import annotations

from dataclasses import fields
from datetime import datetime
from pathlib import Path
from typing import Dict, Any, List, Optional
import json
import logging
import os
import shutil

from .schema import (
    AppSettings,
    HostSettings,
    PathsConfig,
    default_host_settings,
)
from ssh_launch.utils.ssh_utils import expand_home

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / '.ssh-launch'
SETTINGS_PATH = CONFIG_DIR / 'settings.json'
SETTINGS_ENV_VAR = 'SSH_LAUNCH_SETTINGS'

# JSON key for each HostSettings field
_HOST_KEYS = {
    'port': 'Port',
    'user': 'User',
    'post_connect_command': 'PostConnectCommand',
    'working_directory': 'WorkingDirectory',
}
_PATH_KEYS = {
    'ssh_config': 'SSHConfig',
    'ssh_dir': 'SSHDir',
    'default_ssh_dir': 'DefaultSSHDir',
}


def default_settings_path() -> Path:
    """Settings file location, honouring the SSH_LAUNCH_SETTINGS override."""
    override = os.environ.get(SETTINGS_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return SETTINGS_PATH


def create_backup(settings_path: Path) -> Optional[Path]:
    """Copy a settings file aside before it is overwritten.

    Args:
        settings_path: Path to the settings file

    Returns:
        Path of the backup, or None if nothing was backed up
    """
    if not settings_path.exists():
        return None

    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    backup_path = settings_path.with_name(f'{settings_path.name}.bak.{timestamp}')

    try:
        shutil.copy2(settings_path, backup_path)
        logger.info("Created backup: %s", backup_path)
        return backup_path
    except OSError as e:
        logger.warning("Failed to create backup: %s", e)
        return None


class SettingsManager:
    """Loads the settings file, regenerating it when absent or malformed.

    Settings are loaded once and then treated as read-only; components
    receive the AppSettings instance explicitly.

    Example:
        manager = SettingsManager()
        settings = manager.get()
    """

    def __init__(self, settings_path: Optional[Path] = None,
                 home: Optional[Path] = None) -> None:
        """Initialize the settings manager.

        Args:
            settings_path: Settings file (default: ~/.ssh-launch/settings.json)
            home: Directory substituted for the {HOME} placeholder
        """
        self._settings: Optional[AppSettings] = None
        self._settings_path = Path(settings_path) if settings_path else default_settings_path()
        self._home = Path(home) if home else Path.home()

    @property
    def settings_path(self) -> Path:
        return self._settings_path

    def load(self) -> AppSettings:
        """Load settings from disk.

        Writes and returns the default settings if the file is absent, empty
        or cannot be parsed. A malformed file is backed up first.

        Returns:
            AppSettings with all path placeholders resolved
        """
        if not self._settings_path.exists():
            logger.info("No settings file found at %s, writing defaults", self._settings_path)
            return self._regenerate()

        try:
            text = self._settings_path.read_text(encoding='utf-8')
        except OSError as e:
            logger.error("Error reading settings: %s", e)
            return self._regenerate()

        if not text.strip():
            logger.info("Settings file %s is empty, writing defaults", self._settings_path)
            return self._regenerate()

        try:
            raw_data = json.loads(text)
            self._settings = self._deserialize(raw_data)
        except json.JSONDecodeError as e:
            logger.error("Settings file is corrupted (invalid JSON): %s", e)
            create_backup(self._settings_path)
            return self._regenerate()
        except (TypeError, ValueError) as e:
            logger.error("Settings file is malformed: %s", e)
            create_backup(self._settings_path)
            return self._regenerate()

        for warning in self._validate(self._settings):
            logger.warning(warning)

        return self._settings

    def get(self) -> AppSettings:
        """Get current settings (cached).

        Returns:
            AppSettings instance
        """
        if self._settings is None:
            self._settings = self.load()
        return self._settings

    def write_default(self) -> None:
        """Write the default settings document, placeholders unresolved."""
        self._settings_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self._settings_path, 'w', encoding='utf-8') as f:
            json.dump(self._serialize(AppSettings()), f, indent=2)
        logger.info("Wrote default settings to %s", self._settings_path)

    def _regenerate(self) -> AppSettings:
        try:
            self.write_default()
        except OSError as e:
            logger.error("Error writing default settings: %s", e)
        self._settings = self._deserialize(self._serialize(AppSettings()))
        return self._settings

    def _validate(self, settings: AppSettings) -> List[str]:
        """Validate settings and return list of warnings.

        Args:
            settings: AppSettings instance to validate

        Returns:
            List of warning messages (empty if valid)
        """
        warnings = []

        tiers = [('Defaults', settings.defaults)]
        tiers.extend(
            (f"PerHostSettings '{alias}'", override)
            for alias, override in settings.per_host.items()
        )
        for label, tier in tiers:
            if tier.port is not None and not (1 <= tier.port <= 65535):
                warnings.append(
                    f"Invalid port {tier.port} in {label}, should be 1-65535"
                )
            if tier.working_directory and not Path(tier.working_directory).is_dir():
                warnings.append(
                    f"WorkingDirectory in {label} does not exist: "
                    f"{tier.working_directory}"
                )

        if not Path(settings.paths.ssh_config).exists():
            warnings.append(
                f"SSHConfig path does not exist: {settings.paths.ssh_config}"
            )

        for alias, override in settings.per_host.items():
            if all(getattr(override, f.name) is None for f in fields(HostSettings)):
                warnings.append(f"PerHostSettings '{alias}' overrides nothing")

        return warnings

    def _serialize(self, settings: AppSettings) -> Dict[str, Any]:
        """Convert AppSettings to the JSON document layout.

        Args:
            settings: AppSettings instance

        Returns:
            Dictionary ready for JSON serialization
        """
        return {
            'Paths': {
                key: getattr(settings.paths, name)
                for name, key in _PATH_KEYS.items()
            },
            'HostDescriptions': dict(settings.host_descriptions),
            'Defaults': self._host_to_dict(settings.defaults),
            'PerHostSettings': {
                alias: self._host_to_dict(override)
                for alias, override in settings.per_host.items()
            },
        }

    def _deserialize(self, raw_data: Any) -> AppSettings:
        """Convert the JSON document to AppSettings, resolving placeholders.

        Args:
            raw_data: Parsed JSON document

        Returns:
            AppSettings instance

        Raises:
            ValueError: If a section or value has the wrong shape
        """
        if not isinstance(raw_data, dict):
            raise ValueError("settings document must be a JSON object")

        paths_data = _section(raw_data, 'Paths')
        fallback_paths = PathsConfig()
        paths = PathsConfig(**{
            name: self._resolve(str(paths_data.get(key) or getattr(fallback_paths, name)))
            for name, key in _PATH_KEYS.items()
        })

        descriptions = {
            str(alias): str(text)
            for alias, text in _section(raw_data, 'HostDescriptions').items()
        }

        defaults = self._host_from_dict(_section(raw_data, 'Defaults'))
        for f in fields(HostSettings):
            if getattr(defaults, f.name) is None:
                setattr(defaults, f.name, getattr(default_host_settings(), f.name))

        per_host = {}
        for alias, override in _section(raw_data, 'PerHostSettings').items():
            if not isinstance(override, dict):
                raise ValueError(f"PerHostSettings '{alias}' must be an object")
            per_host[str(alias)] = self._host_from_dict(override)

        return AppSettings(
            paths=paths,
            host_descriptions=descriptions,
            defaults=defaults,
            per_host=per_host,
        )

    def _host_from_dict(self, data: Dict[str, Any]) -> HostSettings:
        values: Dict[str, Any] = {}
        for name, key in _HOST_KEYS.items():
            value = data.get(key)
            if value is None:
                continue
            if name == 'port':
                values[name] = _parse_port(value)
            elif name == 'working_directory':
                values[name] = self._resolve(str(value)) if value else ''
            else:
                values[name] = str(value)
        return HostSettings(**values)

    @staticmethod
    def _host_to_dict(settings: HostSettings) -> Dict[str, Any]:
        return {
            key: getattr(settings, name)
            for name, key in _HOST_KEYS.items()
            if getattr(settings, name) is not None
        }

    def _resolve(self, value: str) -> str:
        return expand_home(value, self._home)


def _parse_port(value: Any) -> int:
    """Convert a settings Port value, rejecting anything but a whole 1-65535."""
    if isinstance(value, bool):
        raise ValueError(f"Port must be an integer, got {value!r}")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"Port must be an integer, got {value!r}")
        port = int(value)
    elif isinstance(value, str):
        if not value.strip().isdecimal():
            raise ValueError(f"Port must be an integer, got {value!r}")
        port = int(value)
    else:
        port = int(value)
    if not 1 <= port <= 65535:
        raise ValueError(f"Port {port} is outside 1-65535")
    return port


def _section(raw_data: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = raw_data.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ValueError(f"'{name}' section must be an object")
    return section
