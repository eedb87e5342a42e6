# logger.py
"""Logging do app: um logger raiz "shadow_fruit" com canais por assunto."""
from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from typing import Dict, Optional

ROOT_LOGGER = "shadow_fruit"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

DEFAULT_CHANNELS = {
    "state": True,
    "storage": True,
    "ai": True,
}


@dataclass
class LoggerConfig:
    level: int = logging.INFO
    channels: Dict[str, bool] = field(default_factory=lambda: DEFAULT_CHANNELS.copy())

    @classmethod
    def from_level_name(cls, level_name: Optional[str]) -> "LoggerConfig":
        level = getattr(logging, str(level_name or "INFO").upper(), logging.INFO)
        if not isinstance(level, int):
            level = logging.INFO
        return cls(level=level)


_configured = False


def init_logging(config: Optional[LoggerConfig] = None) -> logging.Logger:
    """
    Configura o logger raiz uma única vez por processo.
    O Streamlit reexecuta o script a cada interação; chamadas seguintes só
    ajustam o nível.
    """
    global _configured
    config = config or LoggerConfig()
    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(config.level)

    if not _configured:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
        root.propagate = False
        _configured = True

    for name, enabled in config.channels.items():
        logging.getLogger(f"{ROOT_LOGGER}.{name}").disabled = not enabled
    return root


def get_logger(channel: str) -> logging.Logger:
    return logging.getLogger(f"{ROOT_LOGGER}.{channel}")
