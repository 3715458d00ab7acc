# -*- coding: utf-8 -*-

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

from .errors import InitializationError
from .workspace import Workspace


log = logging.getLogger("newvocab.lexicon")

_NUM_RUN_RE = re.compile(r"(\d+)")
_BOOK_KEY_RE = re.compile(r"^(\d+)-\d+")
_B_KEY_RE = re.compile(r"^B\d+")

WHOLE_BOOK_GROUP = "全冊"


def natural_key(s: str) -> Tuple:
    """
    Sort key comparing digit runs by value and text case-insensitively.

    "1-2" < "1-10", "B2" < "b10". Ties fall back to the raw string so the
    order stays total.
    """

    parts: List[Tuple[int, object]] = []
    for i, chunk in enumerate(_NUM_RUN_RE.split(str(s or ""))):
        if not chunk:
            continue
        if i % 2 == 1:
            parts.append((0, int(chunk)))
        else:
            parts.append((1, chunk.casefold()))
    return (tuple(parts), str(s or ""))


def natural_sorted(keys: Iterable[str]) -> List[str]:
    return sorted(keys, key=natural_key)


@dataclass(frozen=True)
class SourceInfo:
    id: str
    name: str
    tag: str
    filename: str


# Curricula shipped with the tool; the registry is open for additions.
DEFAULT_SOURCES: Tuple[SourceInfo, ...] = (
    SourceInfo(id="lai", name="來學華語", tag="來", filename="learn_chinese_data.json"),
    SourceInfo(id="mtc", name="當代中文", tag="當", filename="mtc_data.json"),
)


class KnownWordDictionary:
    """Mutable bias set for the segmenter. Never used for filtering."""

    def __init__(self, words: Iterable[str] = ()):
        self._words = set()
        self.update(words)

    def add(self, word: str) -> bool:
        w = str(word or "").strip()
        if not w or w in self._words:
            return False
        self._words.add(w)
        return True

    def update(self, words: Iterable[str]) -> int:
        return sum(1 for w in words if self.add(w))

    def discard(self, word: str) -> bool:
        w = str(word or "").strip()
        if w in self._words:
            self._words.discard(w)
            return True
        return False

    def __contains__(self, word: object) -> bool:
        return word in self._words

    def __iter__(self) -> Iterator[str]:
        return iter(self._words)

    def __len__(self) -> int:
        return len(self._words)

    def snapshot(self) -> frozenset:
        return frozenset(self._words)


def build_reverse_index(
    source_id: str,
    lessons: Mapping[str, Sequence[str]],
    known: Optional[KnownWordDictionary] = None,
) -> Dict[str, str]:
    """
    word -> earliest lesson key of one source.

    Lessons are scanned in natural order so that the first (earliest) lesson
    containing a word wins no matter how the input mapping is ordered. Every
    word is also added to `known` when given.
    """

    index: Dict[str, str] = {}
    for key in natural_sorted(lessons.keys()):
        for w in lessons[key]:
            if known is not None:
                known.add(w)
            if w not in index:
                index[w] = key
    log.debug("reverse index %s: %d words from %d lessons", source_id, len(index), len(lessons))
    return index


@dataclass(frozen=True)
class LexiconSource:
    info: SourceInfo
    lessons: Mapping[str, Tuple[str, ...]]

    @property
    def id(self) -> str:
        return self.info.id

    def lesson_keys(self) -> List[str]:
        return natural_sorted(self.lessons.keys())

    def has_lesson(self, key: str) -> bool:
        return key in self.lessons

    def words(self, key: str) -> Tuple[str, ...]:
        return self.lessons.get(key, ())


@dataclass(frozen=True)
class LessonGroup:
    name: str
    keys: Tuple[str, ...]

    @property
    def single(self) -> bool:
        # e.g. lai "B1": a group that is one lesson named after itself
        return len(self.keys) == 1 and self.keys[0] == self.name


def group_name_for(key: str) -> str:
    m = _BOOK_KEY_RE.match(key)
    if m:
        return f"第 {m.group(1)} 冊"
    if _B_KEY_RE.match(key):
        return key
    return WHOLE_BOOK_GROUP


def group_lessons(keys: Iterable[str]) -> List[LessonGroup]:
    groups: Dict[str, List[str]] = {}
    order: List[str] = []
    for key in natural_sorted(keys):
        name = group_name_for(key)
        if name not in groups:
            groups[name] = []
            order.append(name)
        groups[name].append(key)
    return [LessonGroup(name=n, keys=tuple(groups[n])) for n in order]


def _validate_lessons(name: str, data: object) -> Dict[str, Tuple[str, ...]]:
    if not isinstance(data, dict):
        raise InitializationError(f"{name}: expected a JSON object of lesson -> word list")
    out: Dict[str, Tuple[str, ...]] = {}
    for key, words in data.items():
        if not isinstance(words, list) or not all(isinstance(w, str) for w in words):
            raise InitializationError(f"{name}: lesson {key!r} must map to a list of strings")
        out[str(key)] = tuple(w.strip() for w in words if w.strip())
    return out


def _validate_levels(name: str, data: object) -> Dict[str, str]:
    if not isinstance(data, dict):
        raise InitializationError(f"{name}: expected a JSON object of word -> level")
    out: Dict[str, str] = {}
    for word, level in data.items():
        if isinstance(level, (int, float)) and not isinstance(level, bool):
            level = str(int(level))
        if not isinstance(level, str):
            raise InitializationError(f"{name}: level of {word!r} must be a string")
        out[str(word)] = level
    return out


def _read_json(path: Path) -> object:
    if not path.exists():
        raise InitializationError(f"missing data file: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError) as e:
        raise InitializationError(f"cannot read {path}: {e}") from e


@dataclass
class LexiconStore:
    """
    Read-only curriculum data: sources, their reverse indices and the level table.

    Only a fully loaded store is `ready`; sessions refuse to analyze otherwise.
    """

    sources: Dict[str, LexiconSource] = field(default_factory=dict)
    reverse_index: Dict[str, Dict[str, str]] = field(default_factory=dict)
    level_table: Dict[str, str] = field(default_factory=dict)
    ready: bool = False

    @classmethod
    def from_mappings(
        cls,
        lexicons: Mapping[str, object],
        level_table: object,
        *,
        source_infos: Sequence[SourceInfo] = DEFAULT_SOURCES,
    ) -> "LexiconStore":
        infos = {s.id: s for s in source_infos}
        store = cls()
        store.level_table = _validate_levels("level table", level_table)
        for sid, data in lexicons.items():
            info = infos.get(sid) or SourceInfo(id=sid, name=sid, tag=sid, filename=f"{sid}.json")
            lessons = _validate_lessons(sid, data)
            store.sources[sid] = LexiconSource(info=info, lessons=lessons)
        if not store.sources:
            raise InitializationError("no lexicon source loaded")
        store.ready = True
        log.info("loaded %d sources, %d level entries", len(store.sources), len(store.level_table))
        return store

    @classmethod
    def load(cls, workspace: Workspace, *, source_infos: Sequence[SourceInfo] = DEFAULT_SOURCES) -> "LexiconStore":
        lexicons = {s.id: _read_json(workspace.lexicon_path(s.filename)) for s in source_infos}
        levels = _read_json(workspace.level_table_path())
        return cls.from_mappings(lexicons, levels, source_infos=source_infos)

    def build_indices(self, known: KnownWordDictionary) -> None:
        for sid in natural_sorted(self.sources.keys()):
            self.reverse_index[sid] = build_reverse_index(sid, self.sources[sid].lessons, known)

    def source(self, source_id: str) -> Optional[LexiconSource]:
        return self.sources.get(source_id)

    def source_lesson(self, source_id: str, word: str) -> Optional[str]:
        return self.reverse_index.get(source_id, {}).get(word)
