"""
Centralized path configuration for the SDK.

Supports:
- Local config: ./config/sdk_config.properties
- External overlay: CONFIG_DIR=/path/to/private/config
- Fallback to .example.<ext> when the real file is missing

Usage:
    from sdkcore.core.paths import get_config_path

    # Optional config (None when nothing found)
    config_path = get_config_path("sdk_config.properties")

    # Required config (raises if not found)
    config_path = get_config_path("sdk_config.properties", required=True)
"""
import os
import logging
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)

# From sdkcore/core/paths.py -> sdkcore/core -> sdkcore -> repo root
_REPO_ROOT = Path(__file__).parent.parent.parent
_DEFAULT_CONFIG_DIR = _REPO_ROOT / "config"

CONFIG_DIR = Path(os.getenv("CONFIG_DIR", str(_DEFAULT_CONFIG_DIR)))


def _example_name(filename: str) -> Optional[str]:
    """sdk_config.properties -> sdk_config.example.properties"""
    stem, dot, ext = filename.rpartition(".")
    if not dot or not stem:
        return None
    return f"{stem}.example.{ext}"


def _candidates(filename: str) -> List[Path]:
    dirs = [CONFIG_DIR]
    if CONFIG_DIR != _DEFAULT_CONFIG_DIR:
        dirs.append(_DEFAULT_CONFIG_DIR)

    example_name = _example_name(filename)
    candidates = []
    for directory in dirs:
        candidates.append(directory / filename)
        if example_name:
            candidates.append(directory / example_name)
    return candidates


def get_config_path(filename: str, required: bool = False) -> Optional[Path]:
    """
    Resolve config file path with fallback logic.

    Resolution order:
    1. CONFIG_DIR / filename
    2. CONFIG_DIR / <stem>.example.<ext>
    3. Default config dir / filename
    4. Default config dir / <stem>.example.<ext>

    Args:
        filename: Config filename (e.g., "sdk_config.properties")
        required: If True, raise FileNotFoundError when not found

    Returns:
        Path to config file, or None if not found and not required

    Raises:
        FileNotFoundError: If required=True and file not found
    """
    candidates = _candidates(filename)

    for path in candidates:
        if path.exists():
            logger.debug(f"Config '{filename}' resolved to: {path}")
            return path

    if required:
        searched = [str(c) for c in candidates]
        raise FileNotFoundError(
            f"Required config file '{filename}' not found.\n"
            f"Searched: {searched}\n"
            f"Hint: Copy {_example_name(filename) or filename} to {filename} and customize it."
        )

    logger.debug(f"Config '{filename}' not found (optional)")
    return None


def is_using_external_config() -> bool:
    """Check if using external CONFIG_DIR."""
    return CONFIG_DIR != _DEFAULT_CONFIG_DIR
