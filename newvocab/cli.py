# -*- coding: utf-8 -*-

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
import traceback
from pathlib import Path
from typing import Optional

from .api import FORMATS, NewVocab
from .custom_store import CustomVocabStore
from .errors import AmbiguousCorrectionError, InvalidReferenceError
from .locator import HighlightLocator, highlight_segments
from .logconfig import setup_logging
from .report import stats_line
from .segmenters import SEGMENTERS
from .selection import GroupState
from .textio import read_text_input
from .workspace import Workspace


log = logging.getLogger("newvocab.cli")

_STATE_MARK = {GroupState.ALL: "[x]", GroupState.SOME: "[-]", GroupState.NONE: "[ ]"}


def _print_json(obj) -> None:
    print(json.dumps(obj, ensure_ascii=False, indent=2))


def _workspace(args: argparse.Namespace) -> Workspace:
    d = str(getattr(args, "data_dir", "") or "").strip()
    return Workspace(Path(d)) if d else Workspace.from_env()


def _read_input(args: argparse.Namespace) -> str:
    if getattr(args, "file", ""):
        return read_text_input(str(args.file))
    if getattr(args, "text", None) is not None:
        return str(args.text)
    return sys.stdin.read()


def _parse_split_arg(raw: str):
    idx, sep, parts = str(raw or "").partition(":")
    if not sep or not idx.strip().lstrip("-").isdigit():
        raise InvalidReferenceError(f"expected <index>:<parts>, got {raw!r}")
    return int(idx), parts


def _cmd_analyze(args: argparse.Namespace) -> int:
    nv = NewVocab(
        data_dir=str(args.data_dir or ""),
        segmenter=str(args.segmenter or ""),
        source=str(args.source or ""),
        load_saved_custom=bool(args.saved_custom),
    )
    nv.select(args.select or [], groups=args.select_group or [])
    if args.custom:
        nv.add_custom(" ".join(args.custom))

    text = _read_input(args)
    view = nv.analyze(text)
    if not view.analyzed:
        print("Nothing to analyze (empty text).")
        return 0

    # Corrections run in the order given, each against the list left by the previous one.
    for op in args.ops or []:
        kind, value = op
        if kind == "merge":
            nv.session.merge(int(value))
        else:
            idx, parts = _parse_split_arg(value)
            try:
                nv.session.split(idx, parts, confirmed=bool(args.yes))
            except AmbiguousCorrectionError as e:
                print(f"Split not applied: {e} (pass --yes to apply anyway)")
                return 3

    if args.export:
        out = nv.export(fmt=str(args.format), name=str(args.export_name or ""))
        print(f"Export written to: {out.export_path}")
        return 0

    print(nv.render(str(args.format)))
    if args.format == "text":
        print("")
        print(stats_line(len(nv.session.text), len(nv.session.result)))
    return 0


def _cmd_lessons(args: argparse.Namespace) -> int:
    nv = NewVocab(data_dir=str(args.data_dir or ""), segmenter="basic", source=str(args.source or ""))
    nv.select(args.select or [])
    sid = nv.session.active_source
    info = nv.session.source_info()
    print(f"{info.name} ({sid}) · selected: {nv.session.selection.selected_count(sid)}")
    for g in nv.session.lesson_groups():
        count = f"{g.word_count} 詞" if g.single else f"{len(g.keys)} 課"
        print(f"{_STATE_MARK[g.state]} {g.name} ({count})")
        if not g.single and args.verbose:
            for k in g.keys:
                mark = "[x]" if nv.session.selection.is_selected(sid, k) else "[ ]"
                print(f"    {mark} {k}")
    return 0


def _cmd_locate(args: argparse.Namespace) -> int:
    text = _read_input(args)
    loc = HighlightLocator()
    for _ in range(max(1, int(args.times))):
        m = loc.locate(text, str(args.word))
        if m is None:
            print(f"Not found: {args.word}")
            return 1
        before, target, _after = highlight_segments(text, m)
        line_no = before.count("\n") + 1
        note = " (only occurrence)" if m.sole else (" (wrapped)" if m.wrapped else "")
        print(f"offset={m.offset} line={line_no} [{target}]{note}")
    return 0


def _cmd_custom_list(args: argparse.Namespace) -> int:
    _print_json(CustomVocabStore(_workspace(args)).load())
    return 0


def _cmd_custom_add(args: argparse.Namespace) -> int:
    words = " ".join(args.words or []).split()
    _print_json(CustomVocabStore(_workspace(args)).add(words))
    return 0


def _cmd_custom_clear(args: argparse.Namespace) -> int:
    CustomVocabStore(_workspace(args)).clear()
    print("Custom vocabulary cleared.")
    return 0


class _AppendOp(argparse.Action):
    def __call__(self, parser, namespace, values, option_string=None):
        ops = list(getattr(namespace, "ops", None) or [])
        ops.append((self.const, values))
        setattr(namespace, "ops", ops)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="nvf", description="NewVocab CLI (find untaught vocabulary in a Chinese text).")
    ap.add_argument("--data-dir", default="", help="Workspace data dir (default: env NEWVOCAB_DATA_DIR or ./NewVocab_data)")
    sub = ap.add_subparsers(dest="cmd", required=True)

    sp_an = sub.add_parser("analyze", help="List new words of a text against the lessons already taught.")
    src_in = sp_an.add_mutually_exclusive_group()
    src_in.add_argument("--text", default=None, help="Text to analyze (default: read stdin)")
    src_in.add_argument("--file", default="", help="UTF-8 text file or text-based PDF")
    sp_an.add_argument("--source", default="", help="Active curriculum for source tags (e.g. lai, mtc)")
    sp_an.add_argument("--select", action="append", help="Taught lesson as <source>:<lesson> (repeatable)")
    sp_an.add_argument("--select-group", action="append", help="Taught group as <source>:<group name> (repeatable)")
    sp_an.add_argument("--custom", action="append", help="Extra known words, whitespace separated (repeatable)")
    sp_an.add_argument("--saved-custom", action="store_true", help="Also block the saved custom vocabulary")
    sp_an.add_argument("--merge", action=_AppendOp, const="merge", type=int, metavar="INDEX", help="Merge result item INDEX with the next one")
    sp_an.add_argument("--split", action=_AppendOp, const="split", metavar="INDEX:PARTS", help='Split item INDEX, e.g. "3:看 書"')
    sp_an.add_argument("--yes", action="store_true", help="Apply splits whose parts do not spell the original word")
    sp_an.add_argument("--segmenter", default="", choices=[""] + sorted(SEGMENTERS.keys()), help="Segmentation engine")
    sp_an.add_argument("--format", default="text", choices=list(FORMATS))
    sp_an.add_argument("--export", action="store_true", help="Write the result to <data_dir>/exports")
    sp_an.add_argument("--export-name", default="", help="Export file name without extension (default auto)")
    sp_an.set_defaults(func=_cmd_analyze, ops=[])

    sp_ls = sub.add_parser("lessons", help="Show lesson groups of a curriculum with selection state.")
    sp_ls.add_argument("--source", default="", help="Curriculum id (default: lai)")
    sp_ls.add_argument("--select", action="append", help="Preview selection as <source>:<lesson> (repeatable)")
    sp_ls.add_argument("-v", "--verbose", action="store_true", help="List the lessons inside each group")
    sp_ls.set_defaults(func=_cmd_lessons)

    sp_loc = sub.add_parser("locate", help="Find successive occurrences of a word in a text.")
    loc_in = sp_loc.add_mutually_exclusive_group()
    loc_in.add_argument("--text", default=None)
    loc_in.add_argument("--file", default="")
    sp_loc.add_argument("--word", required=True)
    sp_loc.add_argument("--times", type=int, default=1, help="Number of successive searches")
    sp_loc.set_defaults(func=_cmd_locate)

    sp_cv = sub.add_parser("custom", help="Manage the saved custom vocabulary.")
    sub_cv = sp_cv.add_subparsers(dest="custom_cmd", required=True)
    sp_cl = sub_cv.add_parser("list", help="Print saved words.")
    sp_cl.set_defaults(func=_cmd_custom_list)
    sp_ca = sub_cv.add_parser("add", help="Add words (whitespace separated).")
    sp_ca.add_argument("words", nargs="+")
    sp_ca.set_defaults(func=_cmd_custom_add)
    sp_cc = sub_cv.add_parser("clear", help="Remove all saved words.")
    sp_cc.set_defaults(func=_cmd_custom_clear)

    return ap


def main(argv: Optional[list[str]] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)
    fn = getattr(args, "func", None)
    if fn is None:
        ap.print_help()
        return 2
    try:
        setup_logging(_workspace(args))
    except Exception:
        logging.basicConfig(level=logging.WARNING)
    try:
        return int(fn(args) or 0)
    except KeyboardInterrupt:
        print("Canceled.")
        return 130
    except Exception as e:
        msg = str(e or "").strip() or e.__class__.__name__
        log.error("%s failed: %s", getattr(args, "cmd", "?"), msg)
        print(f"Error: {msg}")
        if (os.environ.get("NEWVOCAB_DEBUG", "") or "").strip():
            traceback.print_exc()
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main(sys.argv[1:]))
