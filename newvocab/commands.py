# -*- coding: utf-8 -*-
"""
Commands applied to a `VocabSession` through `VocabSession.apply`.

Each returns nothing itself; `apply` hands back the refreshed `SessionView`
so a UI only ever consumes views.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple


@dataclass(frozen=True)
class SetSource:
    source: str

    def apply(self, session) -> None:
        session.set_source(self.source)


@dataclass(frozen=True)
class ToggleLesson:
    source: str
    key: str

    def apply(self, session) -> None:
        session.toggle_lesson(self.source, self.key)


@dataclass(frozen=True)
class ToggleGroup:
    """Toggle a display group by name, or an explicit tuple of lesson keys."""

    source: str
    group: str = ""
    keys: Tuple[str, ...] = field(default_factory=tuple)

    def apply(self, session) -> None:
        session.toggle_group(self.source, tuple(self.keys) if self.keys else self.group)


@dataclass(frozen=True)
class AddCustomVocabulary:
    words: Tuple[str, ...]

    def apply(self, session) -> None:
        session.add_custom_vocabulary(self.words)


@dataclass(frozen=True)
class SetCustomVocabulary:
    words: Tuple[str, ...]

    def apply(self, session) -> None:
        session.set_custom_vocabulary(self.words)


@dataclass(frozen=True)
class ClearCustomVocabulary:
    def apply(self, session) -> None:
        session.clear_custom_vocabulary()


@dataclass(frozen=True)
class Analyze:
    text: str

    def apply(self, session) -> None:
        session.analyze(self.text)


@dataclass(frozen=True)
class Merge:
    index: int

    def apply(self, session) -> None:
        session.merge(self.index)


@dataclass(frozen=True)
class Split:
    index: int
    parts: Tuple[str, ...]
    confirmed: bool = False

    def apply(self, session) -> None:
        session.split(self.index, self.parts, confirmed=self.confirmed)
