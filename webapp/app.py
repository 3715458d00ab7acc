# -*- coding: utf-8 -*-

from __future__ import annotations

import logging
import threading
import time
from dataclasses import asdict
from typing import Any, Dict, Optional

try:
    from fastapi import Body, FastAPI, HTTPException
    from fastapi.middleware.cors import CORSMiddleware
except Exception as e:  # pragma: no cover
    raise RuntimeError("Missing web dependencies. Install: pip install 'newvocab[web]'") from e

from newvocab._version import VERSION
from newvocab.custom_store import CustomVocabStore
from newvocab.errors import AmbiguousCorrectionError, InitializationError, InvalidReferenceError
from newvocab.locator import highlight_segments
from newvocab.report import build_export, result_to_markdown, result_to_text
from newvocab.session import SessionConfig, SessionView, VocabSession
from newvocab.workspace import Workspace


log = logging.getLogger("newvocab.web")


def _view_json(view: SessionView) -> Dict[str, Any]:
    return {
        "ok": True,
        "source": view.active_source,
        "analyzed": view.analyzed,
        "selected_count": view.selected_count,
        "blocklist_size": len(view.blocklist),
        "stats": {"text_length": view.text_length, "new_words": len(view.result)},
        "items": [it.to_dict() for it in view.result],
    }


def create_app(
    session: Optional[VocabSession] = None,
    *,
    workspace: Optional[Workspace] = None,
) -> FastAPI:
    app = FastAPI(title="NewVocab", version=str(VERSION or "0.0.0"))
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    ws = workspace or Workspace.from_env()
    init_error = ""
    if session is None:
        try:
            session = VocabSession.from_workspace(ws, config=SessionConfig.from_env())
        except InitializationError as e:
            init_error = str(e)
            log.error("data load failed, API disabled: %s", init_error)
    custom_store = CustomVocabStore(ws)
    # Sync endpoints run on a thread pool; the session itself is single-threaded.
    lock = threading.Lock()

    def _session() -> VocabSession:
        if session is None:
            raise HTTPException(status_code=503, detail=f"data not loaded: {init_error}")
        return session

    def _run(fn) -> Dict[str, Any]:
        s = _session()
        with lock:
            try:
                fn(s)
            except InvalidReferenceError as e:
                raise HTTPException(status_code=400, detail=str(e))
            except AmbiguousCorrectionError as e:
                raise HTTPException(
                    status_code=409,
                    detail={"error": str(e), "original": e.original, "parts": e.parts, "needs_confirmation": True},
                )
            return _view_json(s.view())

    app.state.session = session
    app.state.started_at = time.time()

    @app.get("/api/health")
    def health():
        return {"ok": session is not None, "time": time.time(), "error": init_error}

    @app.get("/api/sources")
    def sources():
        s = _session()
        return {
            "ok": True,
            "active": s.active_source,
            "sources": [asdict(src.info) for _sid, src in sorted(s.store.sources.items())],
        }

    @app.get("/api/lessons")
    def lessons(source: str = ""):
        s = _session()
        with lock:
            try:
                groups = s.lesson_groups(source or None)
            except InvalidReferenceError as e:
                raise HTTPException(status_code=400, detail=str(e))
            sid = source or s.active_source
            return {
                "ok": True,
                "source": sid,
                "selected_count": s.selection.selected_count(sid),
                "groups": [
                    {
                        "name": g.name,
                        "state": g.state.value,
                        "single": g.single,
                        "word_count": g.word_count,
                        "lessons": [{"key": k, "selected": s.selection.is_selected(sid, k)} for k in g.keys],
                    }
                    for g in groups
                ],
            }

    @app.post("/api/source")
    def set_source(payload: dict = Body(...)):
        src = (payload.get("source", "") or "").strip()
        return _run(lambda s: s.set_source(src))

    @app.post("/api/lessons/toggle")
    def toggle_lesson(payload: dict = Body(...)):
        src = (payload.get("source", "") or "").strip()
        key = (payload.get("key", "") or "").strip()
        if not src or not key:
            raise HTTPException(status_code=400, detail="source and key required")
        return _run(lambda s: s.toggle_lesson(src, key))

    @app.post("/api/lessons/toggle_group")
    def toggle_group(payload: dict = Body(...)):
        src = (payload.get("source", "") or "").strip()
        keys = payload.get("keys") or []
        group = (payload.get("group", "") or "").strip()
        if not src or not (keys or group):
            raise HTTPException(status_code=400, detail="source and group (or keys) required")
        target = [str(k) for k in keys] if keys else group
        return _run(lambda s: s.toggle_group(src, target))

    @app.post("/api/custom")
    def add_custom(payload: dict = Body(...)):
        words = payload.get("words", "")
        save = bool(payload.get("save", False))

        def _do(s: VocabSession) -> None:
            s.add_custom_vocabulary(words)
            if save:
                custom_store.save(s.selection.custom_vocabulary)

        return _run(_do)

    @app.post("/api/custom/clear")
    def clear_custom(payload: dict = Body(default={})):
        save = bool(payload.get("save", False))

        def _do(s: VocabSession) -> None:
            s.clear_custom_vocabulary()
            if save:
                custom_store.clear()

        return _run(_do)

    @app.post("/api/analyze")
    def analyze(payload: dict = Body(...)):
        text = str(payload.get("text", "") or "")
        return _run(lambda s: s.analyze(text))

    @app.post("/api/merge")
    def merge(payload: dict = Body(...)):
        try:
            index = int(payload.get("index"))
        except (TypeError, ValueError):
            raise HTTPException(status_code=400, detail="index required")
        return _run(lambda s: s.merge(index))

    @app.post("/api/split")
    def split(payload: dict = Body(...)):
        try:
            index = int(payload.get("index"))
        except (TypeError, ValueError):
            raise HTTPException(status_code=400, detail="index required")
        parts = payload.get("parts", "")
        confirmed = bool(payload.get("confirmed", False))
        return _run(lambda s: s.split(index, parts, confirmed=confirmed))

    @app.post("/api/locate")
    def locate(payload: dict = Body(...)):
        word = (payload.get("word", "") or "").strip()
        if not word:
            raise HTTPException(status_code=400, detail="word required")
        s = _session()
        with lock:
            text = payload.get("text")
            m = s.locate(word, None if text is None else str(text))
            if m is None:
                return {"ok": True, "found": False, "word": word}
            before, target, after = highlight_segments(s.text if text is None else str(text), m)
            return {
                "ok": True,
                "found": True,
                "word": word,
                "offset": m.offset,
                "end": m.end,
                "wrapped": m.wrapped,
                "sole": m.sole,
                "segments": {"before": before, "target": target, "after": after},
            }

    @app.get("/api/export")
    def export(fmt: str = "json"):
        s = _session()
        with lock:
            info = s.source_info()
            if fmt == "text":
                return {"ok": True, "format": fmt, "content": result_to_text(s.result, info=info)}
            selected = [f"{src}:{key}" for src, key in s.selection.selected]
            data = build_export(s.result, info=info, text_length=len(s.text), selected=selected)
            if fmt == "md":
                return {"ok": True, "format": fmt, "content": result_to_markdown(data)}
            if fmt != "json":
                raise HTTPException(status_code=400, detail=f"unknown format: {fmt}")
            return data

    return app


app = create_app()
