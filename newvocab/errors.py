# -*- coding: utf-8 -*-

from __future__ import annotations


class NewVocabError(RuntimeError):
    pass


class InitializationError(NewVocabError):
    """Lexicon or level data is missing/malformed; no analysis is possible."""


class InvalidReferenceError(NewVocabError, ValueError):
    """Unknown source/lesson, out-of-range result index, or empty split."""


class AmbiguousCorrectionError(NewVocabError):
    """A split whose parts do not spell the original word, awaiting confirmation."""

    def __init__(self, original: str, parts):
        self.original = str(original)
        self.parts = list(parts)
        super().__init__(f"split parts {''.join(self.parts)!r} do not match {self.original!r}; confirm to apply")


class SegmenterUnavailable(NewVocabError):
    pass
