# -*- coding: utf-8 -*-

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Iterable, List, Optional

from .workspace import Workspace


log = logging.getLogger("newvocab.custom_store")


def _dump_json(path: str, obj) -> None:
    tmp = path + ".tmp"
    with open(tmp, "w", encoding="utf-8") as f:
        json.dump(obj, f, ensure_ascii=False, indent=2)
    os.replace(tmp, path)


class CustomVocabStore:
    """Persist the user's custom known words as a flat JSON list."""

    def __init__(self, workspace: Optional[Workspace] = None, *, path: Optional[Path] = None):
        self.ws = workspace or Workspace.from_env()
        self.path = Path(path) if path is not None else self.ws.custom_vocab_path()

    def load(self) -> List[str]:
        if not self.path.exists():
            return []
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            log.warning("ignoring unreadable custom vocabulary %s: %s", self.path, e)
            return []
        if not isinstance(data, list):
            log.warning("ignoring custom vocabulary %s: not a list", self.path)
            return []
        return [str(w).strip() for w in data if isinstance(w, str) and w.strip()]

    def save(self, words: Iterable[str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        items = sorted({str(w).strip() for w in words if str(w or "").strip()})
        _dump_json(str(self.path), items)

    def add(self, words: Iterable[str]) -> List[str]:
        merged = set(self.load())
        merged.update(w.strip() for w in words if w.strip())
        self.save(merged)
        return sorted(merged)

    def clear(self) -> None:
        self.save([])
