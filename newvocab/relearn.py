# -*- coding: utf-8 -*-

from __future__ import annotations

import logging
from typing import Iterable, List, Union

from .errors import AmbiguousCorrectionError, InvalidReferenceError
from .lexicon import KnownWordDictionary
from .pipeline import AnalysisItem, AnalysisPipeline
from .selection import BlocklistManager, split_words


log = logging.getLogger("newvocab.relearn")


def parse_split_input(text: str) -> List[str]:
    return split_words(str(text or ""))


class RelearningController:
    """
    Merge/split corrections on the last analysis result.

    Both operations teach the known-word dictionary first and then patch the
    result list in place, so the next full run segments the same way the
    user just corrected by hand. A word never appears twice in the result.
    """

    def __init__(
        self,
        known: KnownWordDictionary,
        selection: BlocklistManager,
        pipeline: AnalysisPipeline,
    ):
        self.known = known
        self.selection = selection
        self.pipeline = pipeline

    def merge(self, result: List[AnalysisItem], index: int, active_source: str) -> List[AnalysisItem]:
        i = int(index)
        if i < 0 or i + 1 >= len(result):
            raise InvalidReferenceError(f"cannot merge at index {index}: needs an item after it (result has {len(result)})")

        combined = result[i].word + result[i + 1].word
        self.known.add(combined)
        blocklist = self.selection.recompute_blocklist()

        others = [it.word for j, it in enumerate(result) if j not in (i, i + 1)]
        if combined in blocklist:
            del result[i : i + 2]
            log.info("merge %d: %r is already known, dropped both parts", i, combined)
        elif combined in others[:i]:
            del result[i : i + 2]
            log.info("merge %d: %r already listed earlier", i, combined)
        else:
            result[i : i + 2] = [self.pipeline.annotate(combined, active_source)]
            _drop_later_duplicates(result, i)
            log.info("merge %d: %r", i, combined)
        return result

    def split(
        self,
        result: List[AnalysisItem],
        index: int,
        parts: Union[str, Iterable[str]],
        active_source: str,
        *,
        confirmed: bool = False,
    ) -> List[AnalysisItem]:
        i = int(index)
        if i < 0 or i >= len(result):
            raise InvalidReferenceError(f"cannot split at index {index} (result has {len(result)})")
        pieces = parse_split_input(parts) if isinstance(parts, str) else split_words(parts)
        if not pieces:
            raise InvalidReferenceError("split needs at least one part")

        original = result[i].word
        if "".join(pieces) != original and not confirmed:
            raise AmbiguousCorrectionError(original, pieces)

        self.known.discard(original)
        self.known.update(pieces)
        blocklist = self.selection.recompute_blocklist()

        taken = {it.word for it in result[:i]}
        new_items: List[AnalysisItem] = []
        for p in pieces:
            if p in blocklist or p in taken:
                continue
            taken.add(p)
            new_items.append(self.pipeline.annotate(p, active_source))
        result[i : i + 1] = new_items
        for k in range(i, i + len(new_items)):
            _drop_later_duplicates(result, k)
        log.info("split %d: %r -> %s (%d kept)", i, original, pieces, len(new_items))
        return result


def _drop_later_duplicates(result: List[AnalysisItem], index: int) -> None:
    word = result[index].word
    result[:] = [it for j, it in enumerate(result) if j <= index or it.word != word]
