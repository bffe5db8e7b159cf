"""
Configuration Manager for Telofy sync.

Central place for runtime constants. Every tunable is declared here and can
be overridden from config/runtime.yaml.

Usage:
    from core.config_manager import config
    url = config.API_URL
"""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

from core.exceptions import ConfigError


CONFIG_DIR = Path(__file__).parent.parent / "config"
RUNTIME_CONFIG_PATH = CONFIG_DIR / "runtime.yaml"

API_URL_ENV = "TELOFY_API_URL"

SYNC_POLICIES = ("reject", "queue")


@dataclass
class SyncConfig:
    """
    Runtime constants for the sync service.
    """

    # === Transport ===

    # Remote store base URL (TELOFY_API_URL overrides both default and yaml)
    API_URL: str = "http://localhost:3000"

    # Per-request timeout, enforced by the HTTP client only.
    # The reconciliation engine itself imposes no timeout.
    REQUEST_TIMEOUT_SECONDS: float = 30.0

    # === Reconciliation ===

    # What a second sync call does while a pass is running:
    # "reject" raises SyncInProgressError, "queue" waits for the running pass
    CONCURRENT_SYNC_POLICY: str = "reject"

    # Fallbacks for downloaded objectives that omit these fields
    DEFAULT_DAILY_COMMITMENT_MINUTES: int = 60
    DEFAULT_PRIORITY: int = 1


def _load_runtime_config(path: Optional[Path] = None) -> dict:
    """Load runtime overrides, if any."""
    target = path if path is not None else RUNTIME_CONFIG_PATH
    if not target.exists():
        return {}

    try:
        with open(target, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (yaml.YAMLError, OSError):
        return {}
    return data if isinstance(data, dict) else {}


def get_config(path: Optional[Path] = None) -> SyncConfig:
    """
    Build a configuration instance.

    Priority: TELOFY_API_URL env var (API_URL only) > runtime.yaml > defaults
    """
    base = SyncConfig()
    overrides = _load_runtime_config(path)

    for key, value in overrides.items():
        if hasattr(base, key):
            setattr(base, key, value)

    env_url = os.getenv(API_URL_ENV, "").strip()
    if env_url:
        base.API_URL = env_url

    base.API_URL = base.API_URL.rstrip("/")
    if base.CONCURRENT_SYNC_POLICY not in SYNC_POLICIES:
        raise ConfigError(
            f"CONCURRENT_SYNC_POLICY must be one of {SYNC_POLICIES}, "
            f"got {base.CONCURRENT_SYNC_POLICY!r}",
            config_path=str(path if path is not None else RUNTIME_CONFIG_PATH),
        )
    return base


# module-level instance
config = get_config()
