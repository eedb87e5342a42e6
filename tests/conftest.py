from __future__ import annotations

import json
from typing import Optional

import pytest


class MemoryDocumentStore:
    """Store em memória com a mesma interface do JsonDocumentStore."""

    def __init__(self, document: Optional[dict] = None):
        self.document = json.loads(json.dumps(document)) if document is not None else None
        self.saves = 0

    def load(self) -> Optional[dict]:
        return self.document

    def save(self, document: dict) -> bool:
        self.document = json.loads(json.dumps(document))
        self.saves += 1
        return True

    def clear(self) -> None:
        self.document = None


@pytest.fixture
def store() -> MemoryDocumentStore:
    return MemoryDocumentStore()
