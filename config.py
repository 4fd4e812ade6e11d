"""
Configuration management for profile_keeper.

Supports:
- TOML config files
- Environment variables
- Command-line overrides
- Sensible defaults

Priority (highest to lowest):
1. Command-line arguments
2. Environment variables
3. Config file
4. Defaults
"""

import os
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional, Dict, Any

try:
    import tomllib  # Python 3.11+
except ImportError:
    import tomli as tomllib  # Declared for older Python


# Default config file locations (searched in order)
CONFIG_SEARCH_PATHS = [
    Path.cwd() / "profile_keeper.toml",
    Path.home() / ".profile_keeper" / "config.toml",
    Path.home() / ".config" / "profile_keeper" / "config.toml",
]

DEFAULT_STORE_PATH = "~/.profile_keeper/store.json"


class ConfigError(Exception):
    """Configuration file missing or unreadable."""


@dataclass
class StorageConfig:
    """Where the shared key/value store lives."""
    backend: str = "json"
    path: str = DEFAULT_STORE_PATH
    dsn: str = ""
    table: str = "profile_kv"
    quota_bytes: int = 0


@dataclass
class HostConfig:
    """The host application whose configuration is being snapshotted."""
    config_key: str = "settings"
    reload_command: str = ""
    reload_timeout: int = 30


@dataclass
class ProfilesConfig:
    """Key namespace used by profile_keeper inside the shared store."""
    prefix: str = "gcp_profile_"
    ui_state_key: str = "gcp_ui_state_v1"


@dataclass
class OutputConfig:
    """Output configuration."""
    quiet: bool = False


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "WARNING"
    file: str = ""


@dataclass
class Config:
    """Main configuration container."""
    storage: StorageConfig = field(default_factory=StorageConfig)
    host: HostConfig = field(default_factory=HostConfig)
    profiles: ProfilesConfig = field(default_factory=ProfilesConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Source tracking
    _config_file: Optional[Path] = None

    @classmethod
    def load(cls, config_path: Optional[str] = None) -> "Config":
        """
        Load configuration from file.

        Args:
            config_path: Explicit path to config file. If None, searches default locations.

        Returns:
            Config instance with loaded values

        Raises:
            ConfigError: Explicit file missing, or any file not valid TOML
        """
        config = cls()

        if config_path:
            path = Path(config_path).expanduser()
            if not path.exists():
                raise ConfigError(f"Config file not found: {config_path}")
        else:
            path = cls._find_config_file()

        if path:
            config = cls._load_from_file(path)
            config._config_file = path

        return config.override_from_env()

    @classmethod
    def _find_config_file(cls) -> Optional[Path]:
        """Find config file in default locations."""
        for path in CONFIG_SEARCH_PATHS:
            if path.exists():
                return path
        return None

    @classmethod
    def _load_from_file(cls, path: Path) -> "Config":
        """Load config from TOML file."""
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML in {path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Cannot read {path}: {e}") from e

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Create Config from dictionary."""
        config = cls()

        # Storage
        if "storage" in data:
            st = data["storage"]
            config.storage = StorageConfig(
                backend=st.get("backend", config.storage.backend),
                path=st.get("path", config.storage.path),
                dsn=st.get("dsn", config.storage.dsn),
                table=st.get("table", config.storage.table),
                quota_bytes=st.get("quota_bytes", config.storage.quota_bytes),
            )

        # Host
        if "host" in data:
            host = data["host"]
            config.host = HostConfig(
                config_key=host.get("config_key", config.host.config_key),
                reload_command=host.get("reload_command", config.host.reload_command),
                reload_timeout=host.get("reload_timeout", config.host.reload_timeout),
            )

        # Profiles
        if "profiles" in data:
            prof = data["profiles"]
            config.profiles = ProfilesConfig(
                prefix=prof.get("prefix", config.profiles.prefix),
                ui_state_key=prof.get("ui_state_key", config.profiles.ui_state_key),
            )

        # Output
        if "output" in data:
            out = data["output"]
            config.output = OutputConfig(
                quiet=out.get("quiet", config.output.quiet),
            )

        # Logging
        if "logging" in data:
            log = data["logging"]
            config.logging = LoggingConfig(
                level=str(log.get("level", config.logging.level)).upper(),
                file=log.get("file", config.logging.file),
            )

        return config

    def override_from_env(self, environ: Optional[Dict[str, str]] = None) -> "Config":
        """Apply PROFILE_KEEPER_* environment variables."""
        env = os.environ if environ is None else environ

        if env.get("PROFILE_KEEPER_STORE"):
            self.storage.path = env["PROFILE_KEEPER_STORE"]
        if env.get("PROFILE_KEEPER_DSN"):
            self.storage.dsn = env["PROFILE_KEEPER_DSN"]
        if env.get("PROFILE_KEEPER_LOG_LEVEL"):
            self.logging.level = env["PROFILE_KEEPER_LOG_LEVEL"].upper()

        return self

    def override_from_args(self, args) -> "Config":
        """
        Override config values from argparse namespace.

        Args with value None are ignored (keeping config file values).
        """
        # Storage overrides
        if getattr(args, "backend", None):
            self.storage.backend = args.backend
        if getattr(args, "store", None):
            self.storage.path = args.store
        if getattr(args, "dsn", None):
            self.storage.dsn = args.dsn

        # Host overrides
        if getattr(args, "host_key", None):
            self.host.config_key = args.host_key
        if getattr(args, "reload_command", None):
            self.host.reload_command = args.reload_command
        if getattr(args, "no_reload", None):
            self.host.reload_command = ""

        # Profiles overrides
        if getattr(args, "prefix", None):
            self.profiles.prefix = args.prefix

        # Output overrides
        if getattr(args, "quiet", None):
            self.output.quiet = args.quiet

        # Logging overrides
        if getattr(args, "verbose", None):
            self.logging.level = "DEBUG"
        if getattr(args, "log_file", None):
            self.logging.file = args.log_file

        return self

    def validate(self) -> list:
        """
        Validate configuration.

        Returns:
            List of validation error messages (empty if valid)
        """
        from .storage.backends import BACKENDS

        errors = []

        if self.storage.backend not in BACKENDS:
            errors.append(
                f"Unknown storage backend '{self.storage.backend}' "
                f"(expected one of: {', '.join(BACKENDS)})"
            )
        if self.storage.backend == "json" and not self.storage.path:
            errors.append("Storage path is required for the json backend")
        if self.storage.backend == "postgres" and not self.storage.dsn:
            errors.append("A DSN is required for the postgres backend. Set PROFILE_KEEPER_DSN or [storage].dsn")
        quota = self.storage.quota_bytes
        if isinstance(quota, bool) or not isinstance(quota, int) or quota < 0:
            errors.append(f"quota_bytes must be 0 (unlimited) or a positive integer, got {quota!r}")

        timeout = self.host.reload_timeout
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
            errors.append(f"reload_timeout must be a positive number of seconds, got {timeout!r}")

        if not self.host.config_key:
            errors.append("Host configuration key is required")
        if not self.profiles.prefix:
            errors.append("Profile prefix must not be empty")
        if self.profiles.prefix and self.host.config_key.startswith(self.profiles.prefix):
            errors.append("Host configuration key must not use the profile prefix")
        if self.profiles.ui_state_key.startswith(self.profiles.prefix):
            errors.append("UI state key must not use the profile prefix")

        return errors

    def summary(self, include_config_path: bool = True) -> str:
        """Generate human-readable config summary."""
        lines = []

        if include_config_path:
            if self._config_file:
                lines.append(f"Config: {self._config_file}")
            else:
                lines.append("Config: (defaults)")

        if self.storage.backend == "json":
            lines.append(f"Store: json ({self.storage.path})")
        elif self.storage.backend == "postgres":
            lines.append(f"Store: postgres (table {self.storage.table})")
        else:
            lines.append(f"Store: {self.storage.backend}")

        lines.append(f"Host key: {self.host.config_key}")
        lines.append(f"Profile prefix: {self.profiles.prefix}")
        if self.host.reload_command:
            lines.append(f"Reload: {self.host.reload_command}")

        return "\n".join(lines)


EXAMPLE_CONFIG = """# profile_keeper Configuration

[storage]
backend = "json"            # json | postgres | memory
path = "~/.profile_keeper/store.json"
dsn = ""                    # postgres only, or PROFILE_KEEPER_DSN
table = "profile_kv"
quota_bytes = 0             # 0 = unlimited

[host]
config_key = "settings"
reload_command = ""         # run after a profile is applied
reload_timeout = 30

[profiles]
prefix = "gcp_profile_"
ui_state_key = "gcp_ui_state_v1"

[output]
quiet = false

[logging]
level = "WARNING"
file = ""
"""


def create_example_config(path: str = "profile_keeper.toml") -> Path:
    """Create example config file."""
    target = Path(path)

    if target.exists():
        raise FileExistsError(f"Config file already exists: {path}")

    target.write_text(EXAMPLE_CONFIG)
    return target
