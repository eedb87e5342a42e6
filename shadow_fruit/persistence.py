# persistence.py
# Save/load do documento JSON único (substitui o localStorage da versão browser)
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Optional, Union

from shadow_data import STORAGE_KEY
from shadow_fruit.logger import get_logger

log = get_logger("storage")


class JsonDocumentStore:
    """
    Guarda o estado inteiro num arquivo ``<dir>/<key>.json``.

    - ``load`` devolve None quando o arquivo não existe ou está corrompido
      (o erro é logado, nunca propagado);
    - ``save`` reescreve o documento inteiro (último a escrever vence).
    """

    def __init__(self, directory: Union[str, Path], key: str = STORAGE_KEY):
        self.directory = Path(directory)
        self.key = key

    @property
    def path(self) -> Path:
        return self.directory / f"{self.key}.json"

    def load(self) -> Optional[dict]:
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            log.error("Failed to load state from %s: %s", self.path, exc)
            return None
        if not isinstance(data, dict):
            log.error("Failed to load state from %s: top level is %s", self.path, type(data).__name__)
            return None
        return data

    def save(self, document: dict) -> bool:
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            tmp = self.path.with_suffix(".json.tmp")
            tmp.write_text(json.dumps(document, ensure_ascii=False, indent=2), encoding="utf-8")
            os.replace(tmp, self.path)
        except (OSError, TypeError, ValueError) as exc:
            log.error("Failed to save state to %s: %s", self.path, exc)
            return False
        return True

    def clear(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass

