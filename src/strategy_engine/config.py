"""Strategy Engine Configuration

Configuration loading with environment variable support and sensible defaults.

Environment Variables:
    STRATEGY_CONFIG_PATH: Path to config file (default: .strategy/config.yaml in project root)
    STRATEGY_STORE_PATH: Override entity store path from config
    STRATEGY_LOG_LEVEL: Override logging level from config

Configuration Schema:
    store:
        backend: str - "sqlite" or "memory" (default: "sqlite")
        path: str - Path to SQLite store (default: .strategy/strategy.db)
        timeout: float - SQLite busy timeout in seconds (default: 5.0)
    integrity:
        enforce_references: bool - Reject links/edges to unknown ids (default: False)
    logging:
        level: str - Logging level (default: "INFO")
"""

import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .store import EntityStore, InMemoryEntityStore, SQLiteEntityStore
from .store.database import STRATEGY_DIR, get_default_db_path

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config.yaml"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

STORE_BACKENDS = ("sqlite", "memory")


class ConfigurationError(Exception):
    """Raised when configuration is invalid or cannot be loaded."""
    pass


# Default configuration values
DEFAULT_CONFIG: Dict[str, Any] = {
    "store": {
        "backend": "sqlite",
        "path": None,  # Use .strategy/strategy.db in project root
        "timeout": 5.0,
    },
    "integrity": {
        "enforce_references": False,
    },
    "logging": {
        "level": "INFO",
    },
}


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Deep merge override dict into base dict.

    Args:
        base: Base dictionary (defaults)
        override: Override dictionary (user config)

    Returns:
        Merged dictionary with override values taking precedence
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _resolve_path(path: Optional[str], base_dir: Path) -> Optional[Path]:
    """
    Resolve a path, making relative paths absolute from base_dir.

    Args:
        path: Path string (absolute or relative) or None
        base_dir: Base directory for relative path resolution

    Returns:
        Resolved absolute Path or None if path was None
    """
    if path is None:
        return None

    path_obj = Path(path)
    if path_obj.is_absolute():
        return path_obj
    return (base_dir / path_obj).resolve()


def get_project_root(start: Optional[Path] = None) -> Path:
    """Find project root by looking for a .strategy directory.

    Walks up from ``start`` (default: cwd). Falls back to ``start`` itself.
    """
    cwd = Path(start) if start else Path.cwd()
    for path in [cwd] + list(cwd.parents):
        if (path / STRATEGY_DIR).is_dir():
            return path
    return cwd


def _read_yaml(path: Path) -> Dict[str, Any]:
    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise yaml.YAMLError(f"top-level value must be a mapping, got {type(data).__name__}")
    return data


def load_config(
    config_path: Optional[str] = None,
    project_root: Optional[Path] = None,
) -> Dict[str, Any]:
    """
    Load configuration from YAML file with environment variable overrides.

    Configuration Loading Order (later overrides earlier):
    1. Default values (DEFAULT_CONFIG)
    2. Config file (from STRATEGY_CONFIG_PATH, config_path, or .strategy/config.yaml)
    3. Environment variable overrides (STRATEGY_STORE_PATH, STRATEGY_LOG_LEVEL)

    Args:
        config_path: Explicit config file path (overrides STRATEGY_CONFIG_PATH)
        project_root: Project root for relative path resolution

    Returns:
        Merged configuration dictionary

    Raises:
        ConfigurationError: If an explicit config file is invalid YAML or
            names an unknown store backend
    """
    if project_root is None:
        project_root = get_project_root()

    config = copy.deepcopy(DEFAULT_CONFIG)

    file_path = config_path or os.environ.get("STRATEGY_CONFIG_PATH")

    if file_path:
        # Explicit config path - must be valid if it exists
        resolved_path = _resolve_path(file_path, project_root)
        if resolved_path and resolved_path.exists():
            try:
                config = _deep_merge(config, _read_yaml(resolved_path))
                logger.info(f"Loaded configuration from: {resolved_path}")
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Invalid YAML in config file: {e}")
            except IOError as e:
                raise ConfigurationError(f"Cannot read config file: {e}")
        else:
            logger.warning(f"Config file not found (using defaults): {file_path}")
    else:
        default_config_path = project_root / STRATEGY_DIR / CONFIG_FILENAME
        if default_config_path.exists():
            try:
                config = _deep_merge(config, _read_yaml(default_config_path))
                logger.info(f"Loaded configuration from: {default_config_path}")
            except yaml.YAMLError as e:
                logger.warning(f"Invalid YAML in default config (ignoring): {e}")
            except IOError as e:
                logger.warning(f"Cannot read default config (ignoring): {e}")
        else:
            logger.debug("No config file found, using defaults")

    # Apply environment variable overrides
    store_path_override = os.environ.get("STRATEGY_STORE_PATH")
    if store_path_override:
        config.setdefault("store", {})["path"] = store_path_override
        logger.info(f"Store path override from env: {store_path_override}")

    log_level_override = os.environ.get("STRATEGY_LOG_LEVEL")
    if log_level_override:
        config.setdefault("logging", {})["level"] = log_level_override

    backend = config.get("store", {}).get("backend", "sqlite")
    if backend not in STORE_BACKENDS:
        raise ConfigurationError(
            f"Unknown store backend '{backend}' (expected one of {', '.join(STORE_BACKENDS)})"
        )

    # Resolve store path
    store_path = config.get("store", {}).get("path")
    if store_path:
        resolved = _resolve_path(store_path, project_root)
        config["store"]["path"] = str(resolved) if resolved else None

    return config


def get_store_path(config: Dict[str, Any], project_root: Optional[Path] = None) -> Path:
    """
    Get entity store path from config or default.

    Args:
        config: Configuration dictionary from load_config()
        project_root: Project root for default path calculation

    Returns:
        Path to the SQLite store file
    """
    path_str = config.get("store", {}).get("path")
    if path_str:
        return Path(path_str)
    return get_default_db_path(project_root or get_project_root())


def enforce_references(config: Dict[str, Any]) -> bool:
    """Whether engines should reject references to unknown ids."""
    return bool(config.get("integrity", {}).get("enforce_references", False))


def create_store(
    config: Dict[str, Any], project_root: Optional[Path] = None
) -> EntityStore:
    """Build the entity store named by the configuration."""
    store_config = config.get("store", {})
    if store_config.get("backend", "sqlite") == "memory":
        return InMemoryEntityStore()
    return SQLiteEntityStore(
        db_path=get_store_path(config, project_root),
        timeout=float(store_config.get("timeout", 5.0)),
    )


def configure_logging(config: Dict[str, Any]) -> None:
    """Configure root logging from the ``logging.level`` setting."""
    level_name = str(config.get("logging", {}).get("level", "INFO")).upper()
    level = getattr(logging, level_name, None)
    if not isinstance(level, int):
        logger.warning(f"Unknown log level '{level_name}', using INFO")
        level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)
