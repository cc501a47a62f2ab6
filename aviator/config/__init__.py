"""YAML configuration with defaults from config/config.yaml.example."""

from aviator.config.settings import (
    get_bet_limits,
    get_session_config,
    get_status_server_config,
    get_store_config,
    read_config,
)

__all__ = [
    "get_bet_limits",
    "get_session_config",
    "get_status_server_config",
    "get_store_config",
    "read_config",
]
