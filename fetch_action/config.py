"""
Configuration loader for fetch_action.
Loads settings from config.json with fallback defaults.
"""

import json
from pathlib import Path
from dataclasses import dataclass, field, asdict
from typing import Dict, Optional

from fetch_action.utils.logging_config import get_logger

logger = get_logger("config")

DEFAULT_CONFIG_PATH = Path(__file__).parent / "config.json"


@dataclass
class ClientConfig:
    """HTTP client configuration for the default transport."""
    base_url: str = ""
    timeout: float = 30.0
    connect_timeout: float = 10.0
    follow_redirects: bool = True
    user_agent: str = "fetch-action/0.1"
    default_headers: Dict[str, str] = field(default_factory=dict)


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    log_dir: Optional[str] = None
    console: bool = True
    file: bool = False


@dataclass
class Config:
    """Main configuration class."""
    client: ClientConfig = field(default_factory=ClientConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, data: dict) -> "Config":
        """Create Config from dictionary."""
        return cls(
            client=ClientConfig(**data.get("client", {})),
            logging=LoggingConfig(**data.get("logging", {})),
        )

    def to_dict(self) -> dict:
        """Convert Config to dictionary."""
        return {
            "client": asdict(self.client),
            "logging": asdict(self.logging),
        }


# Global config instance
_config: Optional[Config] = None


def load_config(config_path: Optional[str] = None) -> Config:
    """
    Load configuration from JSON file.

    Args:
        config_path: Path to config.json. If None, looks in same directory as this file.

    Returns:
        Config instance with loaded or default values.
    """
    global _config

    resolved_path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH

    if resolved_path.exists():
        try:
            with open(resolved_path, 'r') as f:
                data = json.load(f)
            _config = Config.from_dict(data)
            logger.debug(f"Loaded configuration from {resolved_path}")
        except (OSError, ValueError, TypeError) as e:
            logger.warning(f"Error loading {resolved_path}: {e}. Using defaults.")
            _config = Config()
    else:
        logger.debug(f"{resolved_path} not found. Using defaults.")
        _config = Config()

    return _config


def get_config() -> Config:
    """
    Get the current configuration. Loads from file if not already loaded.
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def set_config(config: Optional[Config]) -> None:
    """
    Set a custom configuration. Passing None forces a reload on next access.
    """
    global _config
    _config = config


def save_config(config: Config, config_path: Optional[str] = None) -> None:
    """
    Save configuration to JSON file.

    Args:
        config: Config instance to save.
        config_path: Path to save to. If None, saves to default location.
    """
    resolved_path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH

    with open(resolved_path, 'w') as f:
        json.dump(config.to_dict(), f, indent=4)

    logger.info(f"Saved configuration to {resolved_path}")
