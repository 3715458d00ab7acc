# -*- coding: utf-8 -*-
"""
NewVocab: find the vocabulary of a Chinese text that the chosen textbook
lessons have not taught yet, tagged with TBCL levels.

Public API (stable):
  - NewVocab
  - VocabSession / SessionConfig
  - Workspace
  - LexiconStore
"""

from __future__ import annotations

from ._version import VERSION as __version__
from .api import NewVocab, VocabExport
from .errors import (
    AmbiguousCorrectionError,
    InitializationError,
    InvalidReferenceError,
    NewVocabError,
    SegmenterUnavailable,
)
from .lexicon import LexiconStore, natural_key
from .pipeline import AnalysisItem
from .session import SessionConfig, SessionView, VocabSession
from .workspace import Workspace

__all__ = [
    "NewVocab",
    "VocabExport",
    "VocabSession",
    "SessionConfig",
    "SessionView",
    "AnalysisItem",
    "LexiconStore",
    "Workspace",
    "natural_key",
    "NewVocabError",
    "InitializationError",
    "InvalidReferenceError",
    "AmbiguousCorrectionError",
    "SegmenterUnavailable",
    "__version__",
]
