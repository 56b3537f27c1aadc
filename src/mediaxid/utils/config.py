"""Config utility for persistent mediaxid defaults.

Reads and writes ~/.config/mediaxid/config.toml (or under $XDG_CONFIG_HOME).
Uses tomli/tomli-w for TOML parsing and writing.

Known keys:
- ``xid.preferred_source``: default external-id source filter for the CLI.
- ``image.sizes``: default size classes for image lookups, in priority order.
"""

import contextlib
import os
from pathlib import Path
from typing import Any, TypeVar, cast

import tomli
import tomli_w

# Determine config directory respecting XDG_CONFIG_HOME if set.
_xdg_config_home = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
CONFIG_DIR = _xdg_config_home / "mediaxid"
CONFIG_FILE = CONFIG_DIR / "config.toml"

T = TypeVar("T")


def _read_config_file() -> dict[str, Any]:
    """Read the TOML config file if it exists, returning a (nested) dict."""
    if not CONFIG_FILE.exists():
        return {}
    with CONFIG_FILE.open("rb") as f:
        return tomli.load(f)


def _lookup_nested(data: dict[str, Any], dotted_key: str) -> Any | None:
    """Retrieve a nested value from *data* given a dotted key path.

    Example: dotted_key="xid.preferred_source" reads
    ``data["xid"]["preferred_source"]``, returning None if any level is missing.
    """
    current: Any = data
    for part in dotted_key.split("."):
        if not isinstance(current, dict):
            return None
        current = current.get(part)
        if current is None:
            return None
    return current


def _make_env_var_name(dotted_key: str, prefix: str = "MEDIAXID_") -> str:
    """Convert a dotted key path to an uppercase ENV var name.

    Example: "xid.preferred_source" -> "MEDIAXID_XID_PREFERRED_SOURCE".
    """
    return prefix + dotted_key.replace(".", "_").upper()


def _coerce(value: Any, default: T) -> T:
    """Coerce an env or config *value* to the type of *default* where possible."""
    if isinstance(default, bool):
        if isinstance(value, bool):
            return cast(T, value)
        if isinstance(value, str):
            return cast(T, value.lower() in {"1", "true", "yes", "on"})
        return default
    if isinstance(default, int):
        if isinstance(value, int):
            return cast(T, value)
        if isinstance(value, str):
            with contextlib.suppress(ValueError):
                return cast(T, int(value))
        return default
    if isinstance(default, float):
        if isinstance(value, (int, float)):
            return cast(T, float(value))
        if isinstance(value, str):
            with contextlib.suppress(ValueError):
                return cast(T, float(value))
        return default
    if isinstance(default, list):
        # Env vars carry lists as comma-separated strings.
        if isinstance(value, str):
            return cast(T, [item.strip() for item in value.split(",") if item.strip()])
        if isinstance(value, list):
            return cast(T, [str(item) for item in value])
        return default
    return cast(T, value)


def resolve_setting(
    key: str,
    *,
    default: T,
    cli_value: T | None = None,
) -> T:
    """Resolve a configuration *key* using precedence CLI > env > config > default.

    Args:
        key: Dotted key path, e.g. ``"xid.preferred_source"``.
        default: Value to fall back to when no overrides found.
        cli_value: Value passed from CLI option (may be ``None`` when not provided).

    Returns:
        The resolved value with type matching *default* (or *cli_value*).
    """
    if cli_value is not None:
        return cli_value

    env_var = _make_env_var_name(key)
    if env_var in os.environ:
        return _coerce(os.environ[env_var], default)

    file_val = _lookup_nested(_read_config_file(), key)
    if file_val is not None:
        return _coerce(file_val, default)

    return default


def set_default_preferred_source(source: str) -> None:
    """Persist the default external-id source in config.toml.

    Args:
        source: The source name (e.g. "tmsid"). Empty clears the filter.
    """
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    data = _read_config_file()
    data.setdefault("xid", {})["preferred_source"] = source
    with CONFIG_FILE.open("wb") as f:
        tomli_w.dump(data, f)
