# -*- coding: utf-8 -*-

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import fitz  # PyMuPDF


def extract_pdf_pages(pdf_path: Path, *, max_pages: Optional[int] = None) -> List[str]:
    doc = fitz.open(str(pdf_path))
    try:
        pages: List[str] = []
        for page_index, page in enumerate(doc, start=1):
            if max_pages is not None and page_index > int(max_pages):
                break
            pages.append(_extract_page_text_blocks(page))
        return pages
    finally:
        doc.close()


def _extract_page_text_blocks(page) -> str:
    blocks = page.get_text("blocks") or []
    text_blocks = []
    for block in blocks:
        if not isinstance(block, (list, tuple)) or len(block) < 5:
            continue
        text = block[4]
        if not isinstance(text, str):
            continue
        # image blocks carry type 1
        if len(block) >= 7 and isinstance(block[6], int) and block[6] != 0:
            continue
        text = text.strip()
        if not text:
            continue
        text_blocks.append((float(block[1]), float(block[0]), text))

    text_blocks.sort(key=lambda t: (round(t[0], 1), round(t[1], 1)))
    return "\n".join(t[2] for t in text_blocks)


def read_text_input(path: str, *, max_pages: Optional[int] = None) -> str:
    """Text of a UTF-8 text file or a text-based PDF."""

    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(str(p))
    if p.suffix.lower() == ".pdf":
        return "\n".join(extract_pdf_pages(p, max_pages=max_pages))
    return p.read_text(encoding="utf-8-sig")
