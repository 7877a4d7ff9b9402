# cactus/utils/utils.py
"""
cactus.utils.utils
==================

Core utility functions for the Cactus editor.

- Configuration: a hardcoded built-in default configuration, recursively
  merged with user settings from `~/.config/cactus/config.toml`.
- First-run setup: creates the user configuration directory and an empty
  `.env` file so environment overrides have an obvious home.
- Helpers: dictionary deep-merge and hex to xterm-256 color conversion.

The application is always runnable, even if user configuration files are
missing or corrupted, by falling back to the embedded defaults.
"""

import logging
from pathlib import Path
from typing import Any, Dict

import toml

logger = logging.getLogger("cactus")

# --- Constants ---
WHITE_FG_IDX = 255

CONFIG_DIR_NAME = "cactus"

ENV_TEMPLATE = """# Environment overrides for the Cactus editor.
# Set CACTUS_KEYTRACE=1 to record raw key presses in keytrace.log.
CACTUS_KEYTRACE=
"""

# Built-in configuration. User config is merged on top of this.
DEFAULT_CONFIG: Dict[str, Any] = {
    "editor": {
        "quit_times": 3,
        "message_timeout": 5,
    },
    "colors": {
        "default": "#C9D1D9",
        "comment": "#56B6C2",
        "mlcomment": "#56B6C2",
        "keyword": "#E5C07B",
        "type": "#98C379",
        "string": "#C678DD",
        "number": "#E06C75",
        "match": "#61AFEF",
    },
    "keybindings": {
        "quit": "ctrl+q",
        "save_file": "ctrl+s",
        "find": "ctrl+f",
        "refresh": "ctrl+l",
    },
    "logging": {
        "file_level": "DEBUG",
        "console_level": "WARNING",
        "log_to_console": False,
        "separate_error_log": False,
    },
    "syntax": {},
}


# --- Helper Functions ---

def get_config_dir() -> Path:
    """Return the per-user configuration directory."""
    return Path.home() / ".config" / CONFIG_DIR_NAME


def ensure_user_config_exists() -> None:
    """Checks for user config files in `~/.config/cactus` and creates them if missing."""
    try:
        config_dir = get_config_dir()
        user_env_path = config_dir / ".env"

        config_dir.mkdir(parents=True, exist_ok=True)

        if not user_env_path.exists():
            user_env_path.write_text(ENV_TEMPLATE, encoding="utf-8")
            logger.info(f"Created user .env template at: {user_env_path}")

    except OSError as e:
        logger.critical(f"Could not create user configuration files: {e}", exc_info=True)


def load_config() -> Dict[str, Any]:
    """
    Loads and merges configurations, ensuring the application can always run.
    """
    final_config = deep_merge({}, DEFAULT_CONFIG)
    logger.debug("Loaded embedded default configuration.")

    ensure_user_config_exists()

    user_config_path = get_config_dir() / "config.toml"
    if user_config_path.is_file():
        try:
            user_config = toml.load(user_config_path)
            final_config = deep_merge(final_config, user_config)
            logger.info(f"Successfully loaded and merged user config from {user_config_path}")
        except (toml.TomlDecodeError, OSError) as e:
            logger.error(f"Could not parse user config '{user_config_path}': {e}. Using defaults.")

    return final_config


def deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Recursively merges the `override` dictionary into the `base` dictionary.
    """
    result = base.copy()
    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def hex_to_xterm(hex_color: str) -> int:
    """
    Converts a hexadecimal color string to the nearest xterm-256 color index.
    """
    hex_color = hex_color.lstrip("#")
    if len(hex_color) != 6:
        return WHITE_FG_IDX
    try:
        r, g, b = (int(hex_color[i:i+2], 16) for i in (0, 2, 4))
    except ValueError:
        return WHITE_FG_IDX

    if r == g == b:
        if r < 8:
            return 16
        if r > 248:
            return 231
        return round(((r - 8) / 247) * 24) + 232

    return int(
        16
        + (36 * round(r / 255 * 5))
        + (6 * round(g / 255 * 5))
        + round(b / 255 * 5)
    )
