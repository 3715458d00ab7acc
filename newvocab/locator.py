# -*- coding: utf-8 -*-

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass
class SearchState:
    word: str = ""
    last_offset: int = -1
    text: Optional[str] = None


@dataclass(frozen=True)
class Match:
    offset: int
    end: int
    # search restarted from the beginning of the text
    wrapped: bool = False
    # the word occurs exactly once; repeated calls keep showing this spot
    sole: bool = False


class HighlightLocator:
    """
    Cyclic search of a result word in the source text.

    Repeated calls with the same word walk through its occurrences and wrap
    around. `locate` returns None only when the word does not occur at all.
    """

    def __init__(self):
        self.state = SearchState()

    def reset(self) -> None:
        self.state = SearchState()

    def locate(self, text: str, word: str) -> Optional[Match]:
        text = text or ""
        word = word or ""
        st = self.state
        if not word:
            return None
        if st.text != text or st.word != word:
            st = self.state = SearchState(word=word, last_offset=-1, text=text)

        first = text.find(word)
        if first < 0:
            st.last_offset = -1
            return None
        sole = text.find(word, first + 1) < 0

        wrapped = False
        idx = text.find(word, st.last_offset + 1)
        if idx < 0:
            idx = first
            wrapped = st.last_offset >= 0
        st.last_offset = idx
        return Match(offset=idx, end=idx + len(word), wrapped=wrapped, sole=sole)


def highlight_segments(text: str, match: Match) -> Tuple[str, str, str]:
    """(before, target, after) for an overlay that marks the located word."""

    return text[: match.offset], text[match.offset : match.end], text[match.end :]
