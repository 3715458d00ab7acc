# -*- coding: utf-8 -*-

from __future__ import annotations

import enum
import logging
from typing import FrozenSet, Iterable, List, Optional, Set, Tuple, Union

from .errors import InvalidReferenceError
from .lexicon import KnownWordDictionary, LexiconStore


log = logging.getLogger("newvocab.selection")

LessonRef = Tuple[str, str]


class GroupState(str, enum.Enum):
    ALL = "all"
    SOME = "some"
    NONE = "none"


def split_words(words: Union[str, Iterable[str]]) -> List[str]:
    if isinstance(words, str):
        items = words.split()
    else:
        items = [str(w or "") for w in words]
    return [w.strip() for w in items if w.strip()]


def parse_lesson_ref(raw: str) -> LessonRef:
    """Parse "lai:B1" style references (the lesson key may contain ':')."""

    src, sep, key = str(raw or "").partition(":")
    if not sep or not src.strip() or not key.strip():
        raise InvalidReferenceError(f"expected <source>:<lesson>, got {raw!r}")
    return src.strip(), key.strip()


class BlocklistManager:
    """
    Lesson selection + custom vocabulary, and the blocklist derived from them.

    Every mutator ends with `recompute_blocklist()`, so `blocklist` is never
    stale with respect to its inputs.
    """

    def __init__(self, store: LexiconStore, known: Optional[KnownWordDictionary] = None):
        self.store = store
        self.known = known
        self._selected: Set[LessonRef] = set()
        self._custom: Set[str] = set()
        self._blocklist: FrozenSet[str] = frozenset()

    @property
    def selected(self) -> FrozenSet[LessonRef]:
        return frozenset(self._selected)

    @property
    def custom_vocabulary(self) -> FrozenSet[str]:
        return frozenset(self._custom)

    @property
    def blocklist(self) -> FrozenSet[str]:
        return self._blocklist

    def _check(self, source: str, key: str) -> None:
        src = self.store.source(source)
        if src is None:
            raise InvalidReferenceError(f"unknown source: {source!r}")
        if not src.has_lesson(key):
            raise InvalidReferenceError(f"unknown lesson {key!r} in source {source!r}")

    def recompute_blocklist(self) -> FrozenSet[str]:
        words: Set[str] = set(self._custom)
        for source, key in self._selected:
            src = self.store.source(source)
            if src is not None:
                words.update(src.words(key))
        self._blocklist = frozenset(words)
        return self._blocklist

    def is_selected(self, source: str, key: str) -> bool:
        return (source, key) in self._selected

    def toggle_lesson(self, source: str, key: str) -> FrozenSet[str]:
        self._check(source, key)
        ref = (source, key)
        if ref in self._selected:
            self._selected.discard(ref)
        else:
            self._selected.add(ref)
        log.debug("toggle %s:%s -> %s", source, key, ref in self._selected)
        return self.recompute_blocklist()

    def toggle_group(self, source: str, keys: Iterable[str]) -> FrozenSet[str]:
        keys = list(keys)
        if not keys:
            raise InvalidReferenceError("empty lesson group")
        # Validate the whole group first so a bad key leaves nothing half-flipped.
        for k in keys:
            self._check(source, k)
        if self.group_state(source, keys) is GroupState.ALL:
            for k in keys:
                self._selected.discard((source, k))
        else:
            for k in keys:
                self._selected.add((source, k))
        return self.recompute_blocklist()

    def group_state(self, source: str, keys: Iterable[str]) -> GroupState:
        keys = list(keys)
        hit = sum(1 for k in keys if (source, k) in self._selected)
        if keys and hit == len(keys):
            return GroupState.ALL
        if hit > 0:
            return GroupState.SOME
        return GroupState.NONE

    def selected_count(self, source: str) -> int:
        return sum(1 for s, _k in self._selected if s == source)

    def add_custom_vocabulary(self, words: Union[str, Iterable[str]]) -> FrozenSet[str]:
        items = split_words(words)
        self._custom.update(items)
        if self.known is not None:
            # Custom words also inform the segmenter.
            self.known.update(items)
        return self.recompute_blocklist()

    def set_custom_vocabulary(self, words: Union[str, Iterable[str]]) -> FrozenSet[str]:
        self._custom = set()
        return self.add_custom_vocabulary(words)

    def clear_custom_vocabulary(self) -> FrozenSet[str]:
        self._custom.clear()
        return self.recompute_blocklist()
