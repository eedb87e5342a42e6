# config.py
# Configuração: variável de ambiente > st.secrets > default
from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Optional

import streamlit as st

from shadow_fruit.logger import get_logger

log = get_logger("state")

DEFAULT_MODEL = "gpt-4.1-mini"
DEFAULT_DATA_DIR = ".shadow_fruit"
OPENAI_CHAT_URL = "https://api.openai.com/v1/chat/completions"


def _secret(name: str) -> Any:
    try:
        return st.secrets[name]
    except Exception as exc:  # sem secrets.toml o Streamlit levanta erro próprio
        log.debug("secret %s indisponível: %s", name, exc)
        return None


def get_setting(name: str, default: Optional[str] = None) -> Optional[str]:
    value = os.environ.get(name)
    if value:
        return value
    value = _secret(name)
    if value:
        return str(value)
    return default


def openai_api_key() -> Optional[str]:
    return get_setting("OPENAI_API_KEY")


def openai_model() -> str:
    return get_setting("SHADOW_FRUIT_MODEL", DEFAULT_MODEL) or DEFAULT_MODEL


def data_dir() -> Path:
    return Path(get_setting("SHADOW_FRUIT_DATA_DIR", DEFAULT_DATA_DIR) or DEFAULT_DATA_DIR)


def log_level() -> str:
    return get_setting("SHADOW_FRUIT_LOG_LEVEL", "INFO") or "INFO"
