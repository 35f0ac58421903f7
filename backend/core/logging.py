import logging
import os
from typing import Optional


def _coerce_level(value: Optional[str]) -> int:
    if isinstance(value, str):
        # getLevelName maps a known name to its number, anything else to a string
        level = logging.getLevelName(value.upper().strip())
        if isinstance(level, int):
            return level
    return logging.INFO


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the ``inventory`` namespace.

    The namespace root gets one stdout handler the first time this is called;
    level comes from LOG_LEVEL (default INFO).
    """
    root = logging.getLogger("inventory")
    if not getattr(root, "_inventory_configured", False):
        level = _coerce_level(os.environ.get("LOG_LEVEL", "INFO"))
        root.setLevel(level)
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        root.addHandler(handler)
        root.propagate = False
        setattr(root, "_inventory_configured", True)
    return root.getChild(name)
