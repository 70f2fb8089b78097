# guit/utils/utils.py
"""
guit.utils.utils.py
===================

This module provides a collection of core utility functions for guit.

Key functionalities include:
- Automatic User Configuration: Manages the creation and loading of user-specific
  configuration files (`config.toml`, `.env`) in `~/.config/guit`, ensuring a
  seamless first-run experience.
- Robust Configuration Loading: Implements a multi-layered strategy that loads a
  hardcoded, built-in default configuration, then recursively merges it with
  user-defined settings from `~/.config/guit/config.toml`.
- Safe Subprocess Execution: A wrapper around `subprocess.run` for safely
  executing external commands (git, in practice).
- Helper Utilities: Includes functions for deep-merging dictionaries and color conversion.

This architecture ensures the application is always runnable, even if user
configuration files are missing or corrupted, by falling back to the
embedded defaults.
"""

import copy
import logging
import subprocess
from pathlib import Path
from typing import Any, Dict, List

import toml

logger = logging.getLogger("guit")

# --- Constants ---
WHITE_FG_IDX = 255

CONFIG_DIR = Path.home() / ".config" / "guit"

ENV_TEMPLATE = """# Environment toggles for guit
# GUIT_KEYTRACE=1 writes every decoded key press to keytrace.log
GUIT_KEYTRACE=
# GUIT_LOG_LEVEL overrides [logging].file_level (DEBUG, INFO, WARNING, ...)
GUIT_LOG_LEVEL=
"""

# The embedded defaults. The user's config.toml is merged on top of this,
# so the application can ALWAYS start.
DEFAULT_CONFIG: Dict[str, Any] = {
    "repository": {"commit_limit": 20, "reflog_limit": 100, "git_timeout": 5},
    "settings": {"tick_interval_ms": 250},
    "keybindings": {
        "move_up": ["up", "k"],
        "move_down": ["down", "j"],
        "move_left": ["left", "h"],
        "move_right": ["right", "l"],
        "next_pane": ["tab"],
    },
    "logging": {
        "log_file": str(CONFIG_DIR / "guit.log"),
        "file_level": "DEBUG",
    },
    "styles": {
        "title": {"fg": "magenta", "modifiers": ["bold"]},
        "normal": {"fg": "white", "modifiers": []},
        "highlighted": {"fg": "black", "bg": "green", "modifiers": ["bold"]},
        "error": {"fg": "red", "modifiers": ["bold"]},
        "active_border": {"fg": "light_blue", "modifiers": []},
        "hash": {"fg": "yellow", "modifiers": []},
        "author": {"fg": "light_blue", "modifiers": []},
        "hotkey": {"fg": "green", "modifiers": []},
    },
}


# --- Helper Functions ---

def ensure_user_config_exists(config_dir: Path = CONFIG_DIR) -> None:
    """Checks for user config files in `~/.config/guit` and creates them if missing."""
    try:
        user_config_path = config_dir / "config.toml"
        user_env_path = config_dir / ".env"

        config_dir.mkdir(parents=True, exist_ok=True)

        if not user_config_path.exists():
            header = "# guit configuration. Values shown are the built-in defaults.\n\n"
            user_config_path.write_text(header + toml.dumps(DEFAULT_CONFIG), encoding="utf-8")
            logger.info(f"Created user config template at: {user_config_path}")

        if not user_env_path.exists():
            user_env_path.write_text(ENV_TEMPLATE, encoding="utf-8")
            logger.info(f"Created user .env template at: {user_env_path}")

    except Exception as e:
        logger.critical(f"Could not create user configuration files: {e}", exc_info=True)


def load_config(config_dir: Path = CONFIG_DIR) -> Dict[str, Any]:
    """
    Loads and merges configurations, ensuring the application can always run.
    """
    final_config = copy.deepcopy(DEFAULT_CONFIG)
    logger.debug("Loaded embedded default configuration.")

    ensure_user_config_exists(config_dir)

    user_config_path = config_dir / "config.toml"
    if user_config_path.is_file():
        try:
            user_config = toml.load(user_config_path)
            final_config = deep_merge(final_config, user_config)
            logger.info(f"Successfully loaded and merged user config from {user_config_path}")
        except Exception as e:
            logger.error(f"Could not parse user config '{user_config_path}': {e}. Using defaults.")

    return final_config


def safe_run(cmd: List[str], text: bool = True, **kwargs: Any) -> subprocess.CompletedProcess:
    """
    Executes a command safely, capturing output and handling common exceptions.

    With ``text=False`` stdout/stderr are returned as raw bytes, which lets
    callers decode each record on its own terms.
    """
    empty: Any = "" if text else b""
    decoding: Dict[str, Any] = {"text": True, "encoding": "utf-8", "errors": "replace"} if text else {}
    try:
        return subprocess.run(cmd, capture_output=True, check=False, **decoding, **kwargs)
    except FileNotFoundError as e:
        logger.error(f"Command not found: {cmd[0]!r}")
        return subprocess.CompletedProcess(cmd, 127, stdout=empty, stderr=_as_output(str(e), text))
    except subprocess.TimeoutExpired as e:
        logger.warning(f"Command timed out: {' '.join(cmd)}")
        return subprocess.CompletedProcess(cmd, -9, stdout=e.stdout or empty, stderr=e.stderr or empty)
    except Exception as e:
        logger.exception(f"An unexpected error occurred while running command: {' '.join(cmd)}")
        return subprocess.CompletedProcess(cmd, -1, stdout=empty, stderr=_as_output(str(e), text))


def _as_output(message: str, text: bool) -> Any:
    return message if text else message.encode("utf-8", "replace")


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
        if r < 8: return 16
        if r > 248: return 231
        return round(((r - 8) / 247) * 24) + 232

    return int(
        16
        + (36 * round(r / 255 * 5))
        + (6 * round(g / 255 * 5))
        + round(b / 255 * 5)
    )
