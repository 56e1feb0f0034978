from __future__ import annotations
import logging
import os

NOISY_LOGGERS = ("urllib3", "multipart")


def _level_from_env(default: int) -> int:
    name = os.environ.get("CLOUDMASTER_LOG_LEVEL", "").strip().upper()
    if not name:
        return default
    value = logging.getLevelName(name)
    return value if isinstance(value, int) else default


def setup_console_logging(level: int = logging.INFO) -> None:
    """
    Call once at app/CLI start. CLOUDMASTER_LOG_LEVEL overrides the level.
    """
    level = _level_from_env(level)
    root = logging.getLogger()
    if root.handlers:
        # already configured (uvicorn, pytest)
        root.setLevel(level)
        return

    root.setLevel(level)
    h = logging.StreamHandler()
    fmt = logging.Formatter(
        "[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    h.setFormatter(fmt)
    root.addHandler(h)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
