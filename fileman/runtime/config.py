"""Settings stored as one JSON object in the user config directory.

Keys: ``show_hidden``, ``tree_roots``, ``left_pane_percent``, ``log_level``
and ``lister_workers``. Readers sanitize every value and fall back to a
default, so a hand-edited or truncated file never stops the browser.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from platformdirs import user_config_dir

logger = logging.getLogger(__name__)

APP_NAME = "fileman"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / "config.json"

DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_LISTER_WORKERS = 4
MAX_LISTER_WORKERS = 32


def load_config() -> dict[str, object]:
    """Read the settings object; anything but a readable JSON object reads as ``{}``."""
    try:
        raw = CONFIG_PATH.read_text(encoding="utf-8")
        loaded = json.loads(raw)
    except (OSError, ValueError):
        return {}
    if not isinstance(loaded, dict):
        return {}
    return loaded


def save_config(data: dict[str, object]) -> None:
    """Write ``data`` back; a failed write is logged and otherwise ignored."""
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2, sort_keys=True) + "\n", encoding="utf-8")
    except (OSError, TypeError, ValueError) as exc:
        logger.warning("could not write config %s: %s", CONFIG_PATH, exc)


def _update(key: str, value: object) -> None:
    data = load_config()
    data[key] = value
    save_config(data)


def load_show_hidden() -> bool:
    value = load_config().get("show_hidden", False)
    return value if isinstance(value, bool) else False


def save_show_hidden(show_hidden: bool) -> None:
    _update("show_hidden", bool(show_hidden))


def load_tree_roots() -> list[Path]:
    """Configured tree roots that still name directories, first occurrence wins."""
    value = load_config().get("tree_roots")
    if not isinstance(value, list):
        return []
    roots: list[Path] = []
    for item in value:
        if not isinstance(item, str) or not item.strip():
            continue
        root = Path(item).expanduser()
        if root not in roots and root.is_dir():
            roots.append(root)
    return roots


def save_tree_roots(roots: list[Path]) -> None:
    _update("tree_roots", [str(root) for root in roots])


def load_left_pane_percent() -> float | None:
    value = load_config().get("left_pane_percent")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value) if 0 < value < 100 else None


def save_left_pane_percent(total_width: int, left_width: int) -> None:
    """Remember the tree pane's share of ``total_width``, kept within 1..99 percent."""
    if total_width <= 0:
        return
    share = 100.0 * left_width / total_width
    _update("left_pane_percent", round(min(99.0, max(1.0, share)), 2))


def load_log_level() -> str:
    value = load_config().get("log_level")
    if isinstance(value, str):
        name = value.strip().upper()
        if isinstance(logging.getLevelName(name), int):
            return name
    return DEFAULT_LOG_LEVEL


def load_lister_workers() -> int:
    """Listing pool size; non-positive or non-integer values use the default."""
    value = load_config().get("lister_workers")
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        return DEFAULT_LISTER_WORKERS
    return min(value, MAX_LISTER_WORKERS)
