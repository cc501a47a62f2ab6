"""Unified config: store, session, bet limits and status server sections.

Defaults: loaded from config/config.yaml.example (single source of truth, no code-level defaults).
User config is deep-merged over the defaults.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

logger = logging.getLogger(__name__)

# Lazy-loaded example config (single source of truth for defaults)
_EXAMPLE_CONFIG: Optional[Dict[str, Any]] = None


def _example_path() -> Path:
    return Path(__file__).resolve().parent.parent.parent / "config" / "config.yaml.example"


def _load_example_config() -> Dict[str, Any]:
    """Load config.yaml.example as defaults. No code-level defaults."""
    global _EXAMPLE_CONFIG
    if _EXAMPLE_CONFIG is None:
        with open(_example_path(), encoding="utf-8") as f:
            _EXAMPLE_CONFIG = yaml.safe_load(f) or {}
    return _EXAMPLE_CONFIG


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge override into base. Override values take precedence."""
    out = dict(base)
    for k, v in override.items():
        if k in out and isinstance(out[k], dict) and isinstance(v, dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out


def _merged_config(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """Merge config with example so missing keys come from the example file."""
    return _deep_merge(_load_example_config(), cfg)


def _section(cfg: Dict[str, Any], section: str) -> Dict[str, Any]:
    sec = cfg.get(section)
    return dict(sec) if isinstance(sec, dict) else {}


def read_config(config_path: Optional[str] = None) -> Tuple[Dict[str, Any], str]:
    """
    Load YAML config. Path order: argument, AVIATOR_CONFIG env, config/config.yaml,
    then the example file. Returns (config, resolved_path).
    """
    config_path = config_path or os.environ.get("AVIATOR_CONFIG", "config/config.yaml")
    if not Path(config_path).exists():
        logger.warning("Config %s not found; using %s", config_path, _example_path().name)
        config_path = str(_example_path())
    config_path = str(Path(config_path).resolve())
    with open(config_path, "r", encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}
    return config, config_path


def get_store_config(config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return store config (isolate_listener_errors)."""
    s = _section(_merged_config(config or {}), "store")
    return {"isolate_listener_errors": bool(s.get("isolate_listener_errors"))}


def get_session_config(config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return session config (currency, user_id)."""
    s = _section(_merged_config(config or {}), "session")
    user_id = s.get("user_id")
    return {
        "currency": s.get("currency") or "",
        "user_id": int(user_id) if user_id is not None else None,
    }


def get_bet_limits(config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return bet limits for guards (min_amount, max_amount, min_auto_cashout). None disables a check."""
    b = _section(_merged_config(config or {}), "bet")
    return {
        "min_amount": b.get("min_amount"),
        "max_amount": b.get("max_amount"),
        "min_auto_cashout": b.get("min_auto_cashout"),
    }


def get_status_server_config(config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return status server config (host, port, history_limit)."""
    s = _section(_merged_config(config or {}), "status_server")
    return {
        "host": s.get("host"),
        "port": int(s["port"]) if s.get("port") is not None else None,
        "history_limit": int(s["history_limit"]) if s.get("history_limit") is not None else None,
    }
