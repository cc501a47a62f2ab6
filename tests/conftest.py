"""Pytest fixtures for aviator-state tests."""

import sys
from pathlib import Path

import pytest
import yaml

# Ensure project root is in path for aviator imports
_project_root = Path(__file__).resolve().parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))


def _project_root() -> Path:
    return Path(__file__).resolve().parent.parent


@pytest.fixture
def project_root() -> Path:
    return _project_root()


@pytest.fixture
def config_path(project_root: Path) -> Path:
    """Path to config file. Prefers config.yaml, falls back to example."""
    cfg = project_root / "config" / "config.yaml"
    if cfg.exists():
        return cfg
    return project_root / "config" / "config.yaml.example"


@pytest.fixture
def config(config_path: Path) -> dict:
    """Load config dict from YAML."""
    with open(config_path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


@pytest.fixture
def store():
    from aviator.core.store import Store

    return Store()


@pytest.fixture
def atoms(store):
    from aviator.core.atoms import AtomFactory

    return AtomFactory(store)


@pytest.fixture
def gateway():
    from aviator.app.gateway import NullGateway

    return NullGateway()


@pytest.fixture
def session(gateway):
    """Session with user_id=7, KES currency and a fixed clock."""
    from aviator.app.crash_session import CrashSession

    cfg = {"session": {"user_id": 7, "currency": "KES"}}
    return CrashSession(config=cfg, gateway=gateway, clock=lambda: 1000.0)


@pytest.fixture
def dispatcher(session):
    from aviator.app.dispatcher import EventDispatcher

    return EventDispatcher(session)
