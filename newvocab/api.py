# -*- coding: utf-8 -*-

from __future__ import annotations

import datetime as _dt
import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from .custom_store import CustomVocabStore
from .report import build_export, result_to_markdown, result_to_text
from .selection import GroupState, parse_lesson_ref
from .session import SessionConfig, SessionView, VocabSession
from .workspace import Workspace


FORMATS = ("json", "md", "text")


def _now_slug() -> str:
    return _dt.datetime.now().strftime("%Y%m%d_%H%M%S")


@dataclass(frozen=True)
class VocabExport:
    export_path: str
    data: Dict[str, Any]


class NewVocab:
    """
    One-object facade over a workspace and its session:

      - select(): mark lessons (or whole groups) as already taught
      - analyze(): list the new words of a text
      - render()/export(): JSON, Markdown or copy-friendly text
    """

    def __init__(
        self,
        *,
        data_dir: str = "",
        segmenter: str = "",
        source: str = "",
        load_saved_custom: bool = False,
        session: Optional[VocabSession] = None,
    ):
        self.ws = Workspace(Path(data_dir)) if str(data_dir or "").strip() else Workspace.from_env()
        self.ws.ensure_dirs()

        env_cfg = SessionConfig.from_env()
        self.config = SessionConfig(
            segmenter=(segmenter or "").strip() or env_cfg.segmenter,
            default_source=(source or "").strip() or env_cfg.default_source,
        )
        self.session = session or VocabSession.from_workspace(self.ws, config=self.config)
        self.custom_store = CustomVocabStore(self.ws)
        if load_saved_custom:
            saved = self.custom_store.load()
            if saved:
                self.session.set_custom_vocabulary(saved)

    def __repr__(self) -> str:  # pragma: no cover
        return (
            f"NewVocab(data_dir={str(self.ws.data_dir)!r}, source={self.session.active_source!r}, "
            f"segmenter={self.session.segmenter.name!r})"
        )

    def select(self, refs: Iterable[str] = (), *, groups: Iterable[str] = ()) -> SessionView:
        """Select lessons given as "src:key" and groups given as "src:group name"."""

        for raw in refs:
            src, key = parse_lesson_ref(raw)
            if not self.session.selection.is_selected(src, key):
                self.session.toggle_lesson(src, key)
        for raw in groups:
            src, name = parse_lesson_ref(raw)
            keys = self.session.group_keys(src, name)
            if self.session.selection.group_state(src, keys) is not GroupState.ALL:
                self.session.toggle_group(src, keys)
        return self.session.view()

    def add_custom(self, words: Union[str, Iterable[str]]) -> SessionView:
        self.session.add_custom_vocabulary(words)
        return self.session.view()

    def analyze(self, text: str) -> SessionView:
        self.session.analyze(text)
        return self.session.view()

    def export_data(self) -> Dict[str, Any]:
        s = self.session
        selected = [f"{src}:{key}" for src, key in s.selection.selected]
        return build_export(s.result, info=s.source_info(), text_length=len(s.text), selected=selected)

    def render(self, fmt: str = "json") -> str:
        f = (fmt or "json").strip().lower()
        if f not in FORMATS:
            raise ValueError(f"unknown format {fmt!r} (choose from: {', '.join(FORMATS)})")
        if f == "text":
            return result_to_text(self.session.result, info=self.session.source_info())
        data = self.export_data()
        if f == "md":
            return result_to_markdown(data)
        return json.dumps(data, ensure_ascii=False, indent=2)

    def export(self, *, fmt: str = "json", name: str = "") -> VocabExport:
        ext = {"json": "json", "md": "md", "text": "txt"}.get((fmt or "json").strip().lower(), "json")
        out_dir = self.ws.exports_dir()
        os.makedirs(out_dir, exist_ok=True)
        path = out_dir / f"{(name or '').strip() or 'newvocab_' + _now_slug()}.{ext}"
        content = self.render(fmt)
        tmp = str(path) + ".tmp"
        with open(tmp, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp, path)
        return VocabExport(export_path=str(path), data=self.export_data())

    def words(self) -> List[str]:
        return [it.word for it in self.session.result]
