# -*- coding: utf-8 -*-

from __future__ import annotations

import logging
import re
from typing import AbstractSet, Dict, List, Mapping, Optional

import jieba

from .errors import SegmenterUnavailable


log = logging.getLogger("newvocab.segmenters")

_IDEO = "㐀-䶿一-鿿豈-﫿"
_BASIC_TOKEN_RE = re.compile(
    rf"(?P<space>\s+)|(?P<han>[{_IDEO}]+)|(?P<word>(?:(?![{_IDEO}])[^\W_])+)|(?P<other>\S)"
)
_MAX_MATCH_LEN = 8


class Segmenter:
    """Capability: text + known-term dictionary -> token list."""

    name = "base"

    def segment(
        self,
        text: str,
        dictionary: Mapping[str, str],
        protect: AbstractSet[str],
        bias_multi_char: bool = True,
        use_grammar_heuristics: bool = True,
    ) -> List[str]:
        raise NotImplementedError


class BasicSegmenter(Segmenter):
    """
    Deterministic fallback: whitespace, latin/digit runs, ideograph runs.

    Ideograph runs are cut by forward maximum matching. Protected words are
    always matched whole, whatever their length; dictionary words join them
    only with `bias_multi_char` and up to eight characters. Characters that
    start no known word come out one by one.
    """

    name = "basic"

    def segment(self, text, dictionary, protect, bias_multi_char=True, use_grammar_heuristics=True):
        vocab = set()
        max_len = 1
        if bias_multi_char:
            vocab = {w for w in dictionary if len(w) > 1}
            max_len = min(_MAX_MATCH_LEN, max((len(w) for w in vocab), default=1))
        protected = {w for w in protect if len(w) > 1}
        vocab.update(protected)
        max_len = max(max_len, max((len(w) for w in protected), default=1))

        out: List[str] = []
        for m in _BASIC_TOKEN_RE.finditer(text or ""):
            tok = m.group(0)
            if m.lastgroup == "han" and vocab:
                out.extend(_forward_max_match(tok, vocab, max_len))
            else:
                out.append(tok)
        return out


def _forward_max_match(run: str, vocab: AbstractSet[str], max_len: int) -> List[str]:
    out: List[str] = []
    i = 0
    n = len(run)
    while i < n:
        step = 1
        for size in range(min(max_len, n - i), 1, -1):
            if run[i : i + size] in vocab:
                step = size
                break
        out.append(run[i : i + step])
        i += step
    return out


class JiebaSegmenter(Segmenter):
    """
    Dictionary-biased segmentation on a private `jieba.Tokenizer`.

    Dictionary words are registered with `dictionary_freq`, protected
    (already-known) words with the larger `protect_freq` so jieba never cuts
    them apart. Words that later leave the dictionary are deleted from the
    tokenizer (frequency 0), which is how split corrections take effect.
    """

    name = "jieba"

    def __init__(self, *, dictionary_freq: int = 2000, protect_freq: int = 200000, tokenizer=None):
        self.dictionary_freq = int(dictionary_freq)
        self.protect_freq = int(protect_freq)
        self._tokenizer = tokenizer
        self._applied: Dict[str, int] = {}

    def _ensure_tokenizer(self):
        if self._tokenizer is None:
            jieba.setLogLevel(logging.WARNING)
            tk = jieba.Tokenizer()
            try:
                tk.initialize()
            except Exception as e:
                raise SegmenterUnavailable(f"jieba dictionary failed to load: {e}") from e
            self._tokenizer = tk
        return self._tokenizer

    def _sync(self, dictionary: Mapping[str, str], protect: AbstractSet[str], bias_multi_char: bool) -> None:
        tk = self._ensure_tokenizer()
        wanted: Dict[str, int] = {}
        if bias_multi_char:
            for w in dictionary:
                if len(w) > 1:
                    wanted[w] = self.dictionary_freq
        for w in protect:
            if len(w) > 1:
                wanted[w] = self.protect_freq

        added = 0
        for w, freq in wanted.items():
            if self._applied.get(w) != freq:
                tk.add_word(w, freq=freq)
                added += 1
        removed = 0
        for w, freq in list(self._applied.items()):
            if w not in wanted:
                if freq != 0:
                    tk.del_word(w)
                    removed += 1
                wanted[w] = 0
        self._applied = wanted
        if added or removed:
            log.debug("jieba dictionary sync: +%d -%d", added, removed)

    def segment(self, text, dictionary, protect, bias_multi_char=True, use_grammar_heuristics=True):
        self._sync(dictionary, protect, bias_multi_char)
        return self._tokenizer.lcut(text or "", cut_all=False, HMM=bool(use_grammar_heuristics))


SEGMENTERS = {
    "jieba": JiebaSegmenter,
    "basic": BasicSegmenter,
}


def make_segmenter(name: str, *, dictionary_freq: Optional[int] = None, protect_freq: Optional[int] = None) -> Segmenter:
    key = str(name or "").strip().lower() or "jieba"
    if key not in SEGMENTERS:
        raise ValueError(f"unknown segmenter {name!r} (choose from: {', '.join(sorted(SEGMENTERS))})")
    if key == "jieba":
        kwargs = {}
        if dictionary_freq is not None:
            kwargs["dictionary_freq"] = int(dictionary_freq)
        if protect_freq is not None:
            kwargs["protect_freq"] = int(protect_freq)
        return JiebaSegmenter(**kwargs)
    return BasicSegmenter()
