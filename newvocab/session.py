# -*- coding: utf-8 -*-

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Optional, Sequence, Tuple, Union

from .errors import InitializationError, InvalidReferenceError
from .lexicon import DEFAULT_SOURCES, KnownWordDictionary, LexiconStore, SourceInfo, group_lessons
from .locator import HighlightLocator, Match
from .pipeline import AnalysisItem, AnalysisPipeline
from .relearn import RelearningController
from .segmenters import Segmenter, make_segmenter
from .selection import BlocklistManager, GroupState
from .workspace import Workspace


log = logging.getLogger("newvocab.session")


@dataclass(frozen=True)
class SessionConfig:
    segmenter: str = "jieba"
    bias_multi_char: bool = True
    use_grammar_heuristics: bool = True
    default_source: str = "lai"
    dictionary_freq: int = 2000
    protect_freq: int = 200000

    @staticmethod
    def from_env() -> "SessionConfig":
        seg = (os.environ.get("NEWVOCAB_SEGMENTER", "") or "").strip().lower()
        src = (os.environ.get("NEWVOCAB_SOURCE", "") or "").strip()
        return SessionConfig(segmenter=seg or "jieba", default_source=src or "lai")


@dataclass(frozen=True)
class SessionView:
    """What a presentation layer needs after any command."""

    active_source: str
    blocklist: FrozenSet[str]
    result: Tuple[AnalysisItem, ...]
    selected_count: int
    analyzed: bool
    text_length: int = 0


@dataclass(frozen=True)
class GroupView:
    name: str
    keys: Tuple[str, ...]
    state: GroupState
    single: bool
    word_count: int


class VocabSession:
    """
    Owns all analysis state for one user: loaded lexicons, the known-word
    dictionary, lesson selection, the last result and the highlight cursor.
    """

    def __init__(
        self,
        store: LexiconStore,
        *,
        config: Optional[SessionConfig] = None,
        segmenter: Optional[Segmenter] = None,
    ):
        if not store.ready:
            raise InitializationError("lexicon store is not fully loaded")
        self.config = config or SessionConfig()
        self.store = store
        self.known = KnownWordDictionary()
        self.store.build_indices(self.known)

        self.selection = BlocklistManager(store, self.known)
        self.segmenter = segmenter or make_segmenter(
            self.config.segmenter,
            dictionary_freq=self.config.dictionary_freq,
            protect_freq=self.config.protect_freq,
        )
        self.pipeline = AnalysisPipeline(
            store,
            self.known,
            self.selection,
            self.segmenter,
            bias_multi_char=self.config.bias_multi_char,
            use_grammar_heuristics=self.config.use_grammar_heuristics,
        )
        self.relearn = RelearningController(self.known, self.selection, self.pipeline)
        self.locator = HighlightLocator()

        default = self.config.default_source
        self.active_source = default if default in store.sources else sorted(store.sources)[0]
        self.text = ""
        self.result: List[AnalysisItem] = []
        self.analyzed = False
        log.info("session ready: segmenter=%s known_words=%d", self.segmenter.name, len(self.known))

    @classmethod
    def from_workspace(
        cls,
        workspace: Workspace,
        *,
        config: Optional[SessionConfig] = None,
        source_infos: Sequence[SourceInfo] = DEFAULT_SOURCES,
        segmenter: Optional[Segmenter] = None,
    ) -> "VocabSession":
        store = LexiconStore.load(workspace, source_infos=source_infos)
        return cls(store, config=config, segmenter=segmenter)

    def view(self) -> SessionView:
        return SessionView(
            active_source=self.active_source,
            blocklist=self.selection.blocklist,
            result=tuple(self.result),
            selected_count=self.selection.selected_count(self.active_source),
            analyzed=self.analyzed,
            text_length=len(self.text),
        )

    def apply(self, command) -> SessionView:
        command.apply(self)
        return self.view()

    # --- selection ---------------------------------------------------------

    def _refresh(self) -> None:
        # Keep a shown result in sync with the new blocklist/source.
        if self.analyzed and self.text.strip():
            self.analyze(self.text)

    def set_source(self, source: str) -> None:
        if source not in self.store.sources:
            raise InvalidReferenceError(f"unknown source: {source!r}")
        self.active_source = source
        self._refresh()

    def toggle_lesson(self, source: str, key: str) -> None:
        self.selection.toggle_lesson(source, key)
        self._refresh()

    def toggle_group(self, source: str, group: Union[str, Iterable[str]]) -> None:
        keys = self.group_keys(source, group) if isinstance(group, str) else list(group)
        self.selection.toggle_group(source, keys)
        self._refresh()

    def add_custom_vocabulary(self, words: Union[str, Iterable[str]]) -> None:
        self.selection.add_custom_vocabulary(words)
        self._refresh()

    def set_custom_vocabulary(self, words: Union[str, Iterable[str]]) -> None:
        self.selection.set_custom_vocabulary(words)
        self._refresh()

    def clear_custom_vocabulary(self) -> None:
        self.selection.clear_custom_vocabulary()
        self._refresh()

    def lesson_groups(self, source: Optional[str] = None) -> List[GroupView]:
        sid = source or self.active_source
        src = self.store.source(sid)
        if src is None:
            raise InvalidReferenceError(f"unknown source: {sid!r}")
        out: List[GroupView] = []
        for g in group_lessons(src.lessons.keys()):
            out.append(
                GroupView(
                    name=g.name,
                    keys=g.keys,
                    state=self.selection.group_state(sid, g.keys),
                    single=g.single,
                    word_count=sum(len(src.words(k)) for k in g.keys),
                )
            )
        return out

    def group_keys(self, source: str, group_name: str) -> List[str]:
        src = self.store.source(source)
        if src is None:
            raise InvalidReferenceError(f"unknown source: {source!r}")
        for g in group_lessons(src.lessons.keys()):
            if g.name == group_name:
                return list(g.keys)
        raise InvalidReferenceError(f"unknown lesson group {group_name!r} in source {source!r}")

    # --- analysis ----------------------------------------------------------

    def analyze(self, text: str) -> List[AnalysisItem]:
        """
        Full run. Blank text is a no-op: the previous result stays as it is
        and `analyzed` keeps its value.
        """

        if not (text or "").strip():
            log.debug("analyze skipped: empty text")
            return self.result
        self.text = text
        self.result = self.pipeline.run(text, self.active_source)
        self.analyzed = True
        self.locator.reset()
        return self.result

    def merge(self, index: int) -> List[AnalysisItem]:
        return self.relearn.merge(self.result, index, self.active_source)

    def split(self, index: int, parts: Union[str, Iterable[str]], *, confirmed: bool = False) -> List[AnalysisItem]:
        return self.relearn.split(self.result, index, parts, self.active_source, confirmed=confirmed)

    def locate(self, word: str, text: Optional[str] = None) -> Optional[Match]:
        return self.locator.locate(self.text if text is None else text, word)

    def source_info(self, source: Optional[str] = None) -> SourceInfo:
        sid = source or self.active_source
        src = self.store.source(sid)
        if src is None:
            raise InvalidReferenceError(f"unknown source: {sid!r}")
        return src.info
