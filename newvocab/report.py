# -*- coding: utf-8 -*-

from __future__ import annotations

import datetime as _dt
import time
from typing import Any, Dict, Iterable, List, Optional

from .lexicon import SourceInfo, natural_sorted
from .pipeline import AnalysisItem


def level_label(level: Optional[str]) -> str:
    return f"TBCL {level}" if level else "TBCL無"


def source_label(lesson: Optional[str], info: SourceInfo) -> str:
    return f"{info.tag} {lesson}" if lesson else f"《{info.tag}》無"


def _md_escape(s: str) -> str:
    return (s or "").replace("\r", "").replace("\n", " ").replace("|", "\\|").strip()


def build_export(
    items: Iterable[AnalysisItem],
    *,
    info: SourceInfo,
    text_length: int,
    selected: Iterable[str] = (),
    created_at: Optional[float] = None,
) -> Dict[str, Any]:
    rows = [it.to_dict() for it in items]
    return {
        "meta": {
            "created_at": int(created_at if created_at is not None else time.time()),
            "source": info.id,
            "source_name": info.name,
            "source_tag": info.tag,
            "selected_lessons": natural_sorted(selected),
        },
        "stats": {"text_length": int(text_length), "new_words": len(rows)},
        "items": rows,
    }


def stats_line(text_length: int, new_words: int) -> str:
    return f"總字數: {int(text_length)}  生詞數: {int(new_words)}"


def result_to_text(items: Iterable[AnalysisItem], *, info: SourceInfo) -> str:
    """Plain list for copy/paste: one "n. word  TBCL x  tag lesson" line per word."""

    lines: List[str] = []
    for idx, it in enumerate(items, start=1):
        lines.append(f"{idx}. {it.word}\t{level_label(it.level)}\t{source_label(it.source_lesson, info)}")
    return "\n".join(lines)


def result_to_markdown(export: Dict[str, Any]) -> str:
    r = export if isinstance(export, dict) else {}
    meta = r.get("meta", {}) if isinstance(r.get("meta", {}), dict) else {}
    stats = r.get("stats", {}) if isinstance(r.get("stats", {}), dict) else {}
    items = r.get("items", []) if isinstance(r.get("items", []), list) else []
    info = SourceInfo(
        id=str(meta.get("source", "") or ""),
        name=str(meta.get("source_name", "") or ""),
        tag=str(meta.get("source_tag", "") or meta.get("source", "") or ""),
        filename="",
    )

    lines: List[str] = []
    lines.append("# 生詞分析報告")
    lines.append("")
    ts = int(meta.get("created_at", 0) or 0)
    when = _dt.datetime.fromtimestamp(ts).strftime("%Y-%m-%d %H:%M:%S") if ts > 0 else "（無）"
    lines.append(f"- 生成時間：{when}")
    lines.append(f"- 教材：{_md_escape(info.name or info.id or '（無）')}")
    sel = meta.get("selected_lessons", []) or []
    lines.append(f"- 已學課別：{_md_escape(', '.join(str(s) for s in sel)) if sel else '（無）'}")
    lines.append(f"- 總字數：{int(stats.get('text_length', 0) or 0)}")
    lines.append(f"- 生詞數：{int(stats.get('new_words', len(items)) or 0)}")
    lines.append("")
    if not items:
        lines.append("沒有生詞（全部被過濾或無內容）。")
        return "\n".join(lines) + "\n"

    lines.append("| # | 詞 | TBCL | 出處 |")
    lines.append("|---|---|---|---|")
    for idx, row in enumerate(items, start=1):
        if not isinstance(row, dict):
            continue
        word = _md_escape(str(row.get("word", "") or ""))
        lvl = level_label(row.get("level"))
        src = source_label(row.get("source_lesson"), info)
        lines.append(f"| {idx} | {word} | {lvl} | {_md_escape(src)} |")
    return "\n".join(lines) + "\n"
