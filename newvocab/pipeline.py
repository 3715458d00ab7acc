# -*- coding: utf-8 -*-

from __future__ import annotations

import logging
import re
from dataclasses import asdict, dataclass
from typing import AbstractSet, Any, Dict, Iterable, List, Mapping, Optional

from .errors import InitializationError, SegmenterUnavailable
from .lexicon import KnownWordDictionary, LexiconStore
from .segmenters import BasicSegmenter, Segmenter
from .selection import BlocklistManager


log = logging.getLogger("newvocab.pipeline")

# Segmentation-dictionary value for known words without a TBCL entry.
NO_LEVEL = "-"

_LEVEL_NUM_RE = re.compile(r"\d+")


@dataclass(frozen=True)
class AnalysisItem:
    word: str
    level: Optional[str] = None
    source_lesson: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def extract_level(raw: Optional[str]) -> Optional[str]:
    """First numeral run of a level entry ("第3級" -> "3"), else the raw entry."""

    if raw is None:
        return None
    s = str(raw).strip()
    if not s:
        return None
    m = _LEVEL_NUM_RE.search(s)
    return m.group(0) if m else s


def is_punctuation(token: str) -> bool:
    """True when the token holds no letter or ideograph (punctuation, digits, spaces)."""

    return not any(ch.isalpha() for ch in token or "")


def build_segmentation_dict(level_table: Mapping[str, str], known: Iterable[str]) -> Dict[str, str]:
    out = dict(level_table)
    for w in known:
        if w not in out:
            out[w] = NO_LEVEL
    return out


def filter_tokens(tokens: Iterable[str], blocklist: AbstractSet[str]) -> List[str]:
    seen = set()
    out: List[str] = []
    for tok in tokens:
        w = (tok or "").strip()
        if not w or is_punctuation(w):
            continue
        if w in blocklist or w in seen:
            continue
        seen.add(w)
        out.append(w)
    return out


class AnalysisPipeline:
    """
    text -> deduplicated, annotated new-word list.

    The segmenter is injected; when it reports itself unavailable the call is
    served by `fallback` (a BasicSegmenter unless told otherwise).
    """

    def __init__(
        self,
        store: LexiconStore,
        known: KnownWordDictionary,
        selection: BlocklistManager,
        segmenter: Segmenter,
        *,
        fallback: Optional[Segmenter] = None,
        bias_multi_char: bool = True,
        use_grammar_heuristics: bool = True,
    ):
        self.store = store
        self.known = known
        self.selection = selection
        self.segmenter = segmenter
        self.fallback = fallback or BasicSegmenter()
        self.bias_multi_char = bool(bias_multi_char)
        self.use_grammar_heuristics = bool(use_grammar_heuristics)

    def annotate(self, word: str, active_source: str) -> AnalysisItem:
        return AnalysisItem(
            word=word,
            level=extract_level(self.store.level_table.get(word)),
            source_lesson=self.store.source_lesson(active_source, word),
        )

    def segment(self, text: str, dictionary: Mapping[str, str], protect: AbstractSet[str]) -> List[str]:
        try:
            return list(
                self.segmenter.segment(
                    text,
                    dictionary,
                    protect,
                    self.bias_multi_char,
                    self.use_grammar_heuristics,
                )
            )
        except SegmenterUnavailable as e:
            log.warning("segmenter %s unavailable, using %s: %s", self.segmenter.name, self.fallback.name, e)
            return list(self.fallback.segment(text, dictionary, protect, self.bias_multi_char, self.use_grammar_heuristics))

    def run(self, text: str, active_source: str) -> List[AnalysisItem]:
        if not self.store.ready:
            raise InitializationError("lexicon data is not loaded")
        blocklist = self.selection.recompute_blocklist()
        seg_dict = build_segmentation_dict(self.store.level_table, self.known)
        tokens = self.segment(text, seg_dict, blocklist)
        words = filter_tokens(tokens, blocklist)
        log.info(
            "analyzed %d chars: %d tokens -> %d new words (blocklist=%d, source=%s)",
            len(text),
            len(tokens),
            len(words),
            len(blocklist),
            active_source,
        )
        return [self.annotate(w, active_source) for w in words]
