"""
Configuration management for SBOM Dependents.

Loads settings from:
1. Explicit overrides (CLI flags)
2. SBOM_DEPENDENTS_* environment variables (a .env file is honored)
3. .sbom-dependents.toml (local config)
4. pyproject.toml (project-level config)
"""

import os
import tomllib
from pathlib import Path

from dotenv import load_dotenv

from sbom_dependents.dependency_graph import DEFAULT_ROOT_NODE

load_dotenv()

# Directory searched for config files (the directory the tool runs in)
PROJECT_ROOT = Path.cwd()

CONFIG_FILE_NAME = ".sbom-dependents.toml"
CONFIG_SECTION = "sbom-dependents"

# Default: -1 (no depth limit)
DEFAULT_MAX_DEPTH = -1

# Global settings (can be overridden)
_ROOT_NODE: str | None = None
_VERBOSE: bool | None = None


def load_config_file(config_path: Path) -> dict:
    """Load a TOML configuration file."""
    if not config_path.exists():
        return {}
    try:
        with open(config_path, "rb") as f:
            return tomllib.load(f)
    except Exception as e:
        raise ValueError(f"Failed to load config from {config_path}: {e}") from e


def get_config() -> dict:
    """
    Load the [tool.sbom-dependents] table from configuration files.

    Priority:
    1. .sbom-dependents.toml (local config, highest priority)
    2. pyproject.toml (project-level config, fallback)

    Returns:
        The settings table, or an empty dict if neither file has one.
    """
    for file_name in (CONFIG_FILE_NAME, "pyproject.toml"):
        config = load_config_file(PROJECT_ROOT / file_name)
        section = config.get("tool", {}).get(CONFIG_SECTION, {})
        if section:
            return section
    return {}


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def get_root_node() -> str:
    """
    Get the name of the synthetic root node excluded from results.

    Priority:
    1. Explicitly set value via set_root_node()
    2. SBOM_DEPENDENTS_ROOT_NODE environment variable
    3. root_node in config files
    4. Default: "RPM-Packages"

    An empty string disables the exclusion.

    Returns:
        Root node name.
    """
    if _ROOT_NODE is not None:
        return _ROOT_NODE

    env_root_node = os.getenv("SBOM_DEPENDENTS_ROOT_NODE")
    if env_root_node is not None:
        return env_root_node

    config = get_config()
    if "root_node" in config:
        return str(config["root_node"])

    return DEFAULT_ROOT_NODE


def set_root_node(name: str) -> None:
    """
    Set the root node name explicitly.

    Args:
        name: Root node name, or "" to disable the exclusion.
    """
    global _ROOT_NODE
    _ROOT_NODE = name


def is_verbose_enabled() -> bool:
    """
    Check if verbose logging is enabled.

    Priority:
    1. Explicitly set value via set_verbose()
    2. SBOM_DEPENDENTS_VERBOSE environment variable
    3. verbose in config files
    4. Default: False

    Returns:
        Whether verbose logging is enabled.
    """
    if _VERBOSE is not None:
        return _VERBOSE

    env_verbose = os.getenv("SBOM_DEPENDENTS_VERBOSE")
    if env_verbose:
        return _parse_bool(env_verbose)

    config = get_config()
    if "verbose" in config:
        return bool(config["verbose"])

    return False


def set_verbose(verbose: bool) -> None:
    """
    Set the verbose setting globally.

    Args:
        verbose: Whether to enable verbose logging.
    """
    global _VERBOSE
    _VERBOSE = verbose


def get_max_depth() -> int:
    """
    Get the default maximum search depth.

    Priority:
    1. SBOM_DEPENDENTS_MAX_DEPTH environment variable
    2. max_depth in config files
    3. Default: -1 (unlimited)

    Returns:
        Maximum depth; 0 or negative means unlimited.
    """
    env_max_depth = os.getenv("SBOM_DEPENDENTS_MAX_DEPTH")
    if env_max_depth:
        try:
            return int(env_max_depth)
        except ValueError:
            pass

    config = get_config()
    if "max_depth" in config:
        return int(config["max_depth"])

    return DEFAULT_MAX_DEPTH


def reset_config() -> None:
    """Clear explicitly set values so file and environment settings apply."""
    global _ROOT_NODE, _VERBOSE
    _ROOT_NODE = None
    _VERBOSE = None
