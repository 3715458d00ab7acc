# -*- coding: utf-8 -*-

import json
from pathlib import Path

from newvocab.lexicon import LexiconStore
from newvocab.segmenters import Segmenter
from newvocab.session import SessionConfig, VocabSession
from newvocab.workspace import Workspace


LAI = {
    "B2": ["我們", "喜歡", "謝謝"],
    "B1": ["你好", "謝謝", "我"],
    "B10": ["書", "看書"],
}

MTC = {
    "1-10": ["世界", "你好"],
    "1-2": ["你好", "老師"],
    "2-1": ["學生"],
}

LEVELS = {"世界": "2", "喜歡": "第1級", "看": "1", "書": "基礎", "老師": "1"}


class ListSegmenter(Segmenter):
    """Returns a fixed token list and records what it was called with."""

    name = "list"

    def __init__(self, tokens):
        self.tokens = list(tokens)
        self.calls = []

    def segment(self, text, dictionary, protect, bias_multi_char=True, use_grammar_heuristics=True):
        self.calls.append(
            {
                "text": text,
                "dictionary": dict(dictionary),
                "protect": set(protect),
                "bias_multi_char": bias_multi_char,
                "use_grammar_heuristics": use_grammar_heuristics,
            }
        )
        return list(self.tokens)


def make_store(lai=None, mtc=None, levels=None) -> LexiconStore:
    return LexiconStore.from_mappings(
        {"lai": LAI if lai is None else lai, "mtc": MTC if mtc is None else mtc},
        LEVELS if levels is None else levels,
    )


def make_session(tokens=None, *, segmenter=None, **store_kwargs) -> VocabSession:
    seg = segmenter if segmenter is not None else ListSegmenter(tokens or [])
    return VocabSession(make_store(**store_kwargs), config=SessionConfig(segmenter="basic"), segmenter=seg)


def write_workspace(root: str, *, lai=None, mtc=None, levels=None) -> Workspace:
    ws = Workspace(Path(root))
    ws.ensure_dirs()
    for filename, data in [
        ("learn_chinese_data.json", LAI if lai is None else lai),
        ("mtc_data.json", MTC if mtc is None else mtc),
    ]:
        with open(ws.lexicon_path(filename), "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False)
    with open(ws.level_table_path(), "w", encoding="utf-8") as f:
        json.dump(LEVELS if levels is None else levels, f, ensure_ascii=False)
    return ws
