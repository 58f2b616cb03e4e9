"""Reads the layered TOML files under ``config/``.

Layers, lowest precedence first:

    config/default.toml         required, ships with the service
    config/<MEDCENTER_ENV>.toml optional per-deployment overrides

Environment variables are applied later, by the settings class.
"""

import os
import tomllib
from pathlib import Path
from typing import Any

CONFIG_DIR_VAR = "MEDCENTER_CONFIG_DIR"
ENVIRONMENT_VAR = "MEDCENTER_ENV"
DEFAULT_ENVIRONMENT = "development"
BASE_FILE = "default.toml"

# How many directories above the working directory to search
_SEARCH_DEPTH = 5


def _search_upwards(start: Path) -> Path | None:
    candidate = start
    for _ in range(_SEARCH_DEPTH):
        if (candidate / "config").is_dir():
            return candidate / "config"
        candidate = candidate.parent
    return None


def get_config_dir() -> Path:
    """Directory holding the TOML layers.

    An explicit MEDCENTER_CONFIG_DIR must point at an existing
    directory. Without it, the nearest ``config/`` at or above the
    working directory is used, falling back to a relative ``config``.
    """
    explicit = os.environ.get(CONFIG_DIR_VAR)
    if explicit:
        directory = Path(explicit)
        if not directory.exists():
            raise FileNotFoundError(f"{CONFIG_DIR_VAR} points at a missing directory: {explicit}")
        return directory

    return _search_upwards(Path.cwd()) or Path("config")


def get_environment() -> str:
    return os.environ.get(ENVIRONMENT_VAR, DEFAULT_ENVIRONMENT)


def load_toml(file_path: Path) -> dict[str, Any]:
    """Parse one TOML file into a dict.

    Raises:
        FileNotFoundError: If there is no file at ``file_path``
        tomllib.TOMLDecodeError: On malformed TOML
    """
    try:
        raw = file_path.read_bytes()
    except FileNotFoundError:
        raise FileNotFoundError(f"No TOML file at {file_path}") from None
    return tomllib.loads(raw.decode("utf-8"))


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Overlay ``override`` on ``base``, table by table.

    Tables present on both sides are merged; any other value from
    ``override`` replaces the one in ``base``. Neither argument is
    modified.
    """
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            value = deep_merge(current, value)
        merged[key] = value
    return merged


def load_config() -> dict[str, Any]:
    """Combine the base layer with the current environment's layer.

    Raises:
        FileNotFoundError: If config/default.toml is missing
    """
    directory = get_config_dir()
    base_path = directory / BASE_FILE
    if not base_path.is_file():
        raise FileNotFoundError(
            f"Missing {base_path}; every deployment needs a {BASE_FILE} "
            f"(or set {CONFIG_DIR_VAR} to the directory holding one)"
        )

    layers = [base_path, directory / f"{get_environment()}.toml"]
    config: dict[str, Any] = {}
    for path in layers:
        if path.is_file():
            config = deep_merge(config, load_toml(path))
    return config
