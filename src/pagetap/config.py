"""Configuration management for pagetap.

Reads the `[pagetap]` table from pagetap.toml in the current or a parent
directory. Every key is optional.

    [pagetap]
    host = "localhost"
    port = 9222
    timeout = 30.0
    resource_types = ["Document", "Script", "Image", "Stylesheet", "Other"]

PAGETAP_PORT in the environment overrides `port`.

PUBLIC API:
  - PageTapConfig: Resolved settings
  - load_config: Find, read and resolve pagetap.toml
"""

import logging
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from pagetap.events import RESOURCE_TYPE_ORDER

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "pagetap.toml"


@dataclass
class PageTapConfig:
    """Settings for connecting to Chrome and reporting metrics.

    Attributes:
        host: Host running Chrome with remote debugging enabled.
        port: Chrome debugging port.
        timeout: Seconds to wait for commands and for the load event.
        resource_types: Resource types shown in reports, in display order.
        path: File the settings came from, None for defaults.
    """

    host: str = "localhost"
    port: int = 9222
    timeout: float = 30.0
    resource_types: list[str] = field(default_factory=lambda: list(RESOURCE_TYPE_ORDER))
    path: Optional[Path] = None


def _find_config_file() -> Optional[Path]:
    """Find pagetap.toml in current or parent directories."""
    current = Path.cwd()

    for parent in [current] + list(current.parents):
        config_file = parent / CONFIG_FILENAME
        if config_file.exists():
            return config_file

    return None


def _load_config(path: Optional[Path] = None) -> dict:
    """Load raw configuration from file."""
    if path is None or not path.exists():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def load_config(path: Optional[Path] = None) -> PageTapConfig:
    """Resolve settings from pagetap.toml and the environment.

    Args:
        path: Explicit config file. Searched for when omitted.

    Returns:
        PageTapConfig with defaults for anything not set.

    Raises:
        ValueError: A value has the wrong type.
    """
    if path is None:
        path = _find_config_file()

    data = _load_config(path).get("pagetap", {})
    config = PageTapConfig(path=path if data else None)

    if "host" in data:
        config.host = str(data["host"])
    if "port" in data:
        config.port = int(data["port"])
    if "timeout" in data:
        config.timeout = float(data["timeout"])
    if "resource_types" in data:
        types = data["resource_types"]
        if not isinstance(types, list) or not all(isinstance(t, str) for t in types):
            raise ValueError(f"{path}: resource_types must be a list of strings")
        config.resource_types = types

    if env_port := os.environ.get("PAGETAP_PORT"):
        config.port = int(env_port)

    logger.debug(f"Config: {config}")
    return config


__all__ = ["PageTapConfig", "load_config"]
