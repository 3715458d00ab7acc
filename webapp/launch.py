# -*- coding: utf-8 -*-

from __future__ import annotations

import json
import logging
import logging.config
import os
import socket
import traceback
import urllib.request
import webbrowser
from typing import Optional, Tuple

from newvocab.logconfig import build_log_config, resolve_log_path
from newvocab.workspace import Workspace


log = logging.getLogger("newvocab.launch")


def _env_flag(name: str) -> bool:
    return (os.environ.get(name, "") or "").strip().lower() not in ("", "0", "false", "no")


def _is_newvocab(host: str, port: int) -> bool:
    """A NewVocab server answers /api/health with both `ok` and `error` keys."""

    try:
        with urllib.request.urlopen(f"http://{host}:{port}/api/health", timeout=0.4) as resp:
            if getattr(resp, "status", 200) != 200:
                return False
            data = json.loads(resp.read().decode("utf-8", errors="replace"))
    except (OSError, ValueError):
        return False
    return isinstance(data, dict) and "ok" in data and "error" in data


def _can_bind(host: str, port: int) -> bool:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        try:
            s.bind((host, port))
        except OSError:
            return False
    return True


def pick_port(host: str, preferred: int, tries: int) -> Tuple[int, bool]:
    """(port, already_running). Falls back to `preferred` when nothing is free."""

    candidates = range(preferred, preferred + max(1, tries))
    for port in candidates:
        if _is_newvocab(host, port):
            return port, True
    free: Optional[int] = next((p for p in candidates if _can_bind(host, p)), None)
    return (preferred if free is None else free), False


def _open(url: str) -> None:
    try:
        webbrowser.open(url)
    except webbrowser.Error as e:
        log.warning("cannot open browser: %s", e)


def main() -> None:
    host = os.environ.get("NEWVOCAB_HOST", "127.0.0.1")
    preferred = int(os.environ.get("NEWVOCAB_PORT", "7870"))
    tries = int(os.environ.get("NEWVOCAB_PORT_MAX_TRIES", "20"))
    open_browser = _env_flag("NEWVOCAB_OPEN_BROWSER")

    ws = Workspace.from_env()
    ws.ensure_dirs()
    log_path = resolve_log_path(ws, "web.log")
    log_config = build_log_config(log_path)
    try:
        logging.config.dictConfig(log_config)
    except (ValueError, TypeError, AttributeError, ImportError):
        logging.basicConfig(level=logging.INFO)
    log.info("NewVocab web: data_dir=%s log=%s", ws.data_dir, log_path)

    port, running = pick_port(host, preferred, tries)
    url = f"http://{host}:{port}/docs"
    if running:
        log.info("already running at %s", url)
        if open_browser:
            _open(url)
        return
    log.info("serving on %s (preferred port %s)", url, preferred)
    if open_browser:
        _open(url)

    import uvicorn  # lazy: the app module loads lexicons on import

    from webapp import app as app_module

    try:
        config = uvicorn.Config(
            app_module.app,
            host=host,
            port=port,
            log_level=os.environ.get("NEWVOCAB_LOG_LEVEL", "info").lower(),
            log_config=log_config,
        )
        uvicorn.Server(config).run()
    except Exception:
        log.error("server stopped with an error:\n%s", traceback.format_exc())
        raise


if __name__ == "__main__":
    main()
