# -*- coding: utf-8 -*-

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Workspace:
    """
    Filesystem workspace holding the curriculum data and user state.

    Layout under `data_dir`:
      - lexicons/<source file>.json   (lesson -> word list, one file per curriculum)
      - levels/tbcl_data.json         (word -> TBCL level)
      - custom_vocab.json             (user-added known words, flat list)
      - logs/
      - exports/
    """

    data_dir: Path

    @staticmethod
    def default() -> "Workspace":
        return Workspace(Path(os.getcwd()) / "NewVocab_data")

    @staticmethod
    def from_env() -> "Workspace":
        env_dir = (os.environ.get("NEWVOCAB_DATA_DIR", "") or "").strip()
        if env_dir:
            return Workspace(Path(env_dir))
        return Workspace.default()

    def ensure_dirs(self) -> None:
        for rel in [
            "lexicons",
            "levels",
            "logs",
            "exports",
        ]:
            try:
                (self.data_dir / rel).mkdir(parents=True, exist_ok=True)
            except Exception:
                pass

    def lexicon_path(self, filename: str) -> Path:
        return self.data_dir / "lexicons" / str(filename).strip()

    def level_table_path(self) -> Path:
        return self.data_dir / "levels" / "tbcl_data.json"

    def custom_vocab_path(self) -> Path:
        return self.data_dir / "custom_vocab.json"

    def logs_dir(self) -> Path:
        return self.data_dir / "logs"

    def exports_dir(self) -> Path:
        return self.data_dir / "exports"
