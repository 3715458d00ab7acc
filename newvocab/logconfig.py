# -*- coding: utf-8 -*-

from __future__ import annotations

import logging
import logging.config
import os
import sys
from pathlib import Path
from typing import Optional

from .workspace import Workspace


def resolve_log_path(workspace: Workspace, name: str = "newvocab.log") -> Path:
    raw = (os.environ.get("NEWVOCAB_LOG_FILE") or "").strip()
    if raw:
        try:
            p = Path(raw)
            if not p.is_absolute():
                p = workspace.data_dir.joinpath(p)
            p.parent.mkdir(parents=True, exist_ok=True)
            return p
        except Exception:
            pass
    p = workspace.logs_dir().joinpath(name)
    try:
        p.parent.mkdir(parents=True, exist_ok=True)
    except Exception:
        pass
    return p


def build_log_config(log_path: Path, *, level: str = "INFO", console: bool = True) -> dict:
    handlers: dict = {
        "file": {
            "class": "logging.FileHandler",
            "formatter": "default",
            "filename": str(log_path),
            "encoding": "utf-8",
        }
    }
    handler_names = ["file"]
    # pythonw has no console; only add stderr when available.
    if console and getattr(sys, "stderr", None) is not None:
        handlers["stderr"] = {
            "class": "logging.StreamHandler",
            "formatter": "default",
            "stream": "ext://sys.stderr",
            "level": "WARNING",
        }
        handler_names.append("stderr")

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"default": {"format": "%(asctime)s %(levelname)s %(name)s: %(message)s"}},
        "handlers": handlers,
        "loggers": {
            "newvocab": {"handlers": handler_names, "level": level, "propagate": False},
            "uvicorn": {"handlers": handler_names, "level": "INFO", "propagate": False},
            "uvicorn.error": {"handlers": handler_names, "level": "INFO", "propagate": False},
            "uvicorn.access": {"handlers": handler_names, "level": "INFO", "propagate": False},
        },
        "root": {"handlers": handler_names, "level": "WARNING"},
    }


def setup_logging(workspace: Workspace, *, name: str = "newvocab.log", level: Optional[str] = None) -> Path:
    log_path = resolve_log_path(workspace, name)
    lvl = (level or os.environ.get("NEWVOCAB_LOG_LEVEL", "") or "INFO").strip().upper()
    try:
        logging.config.dictConfig(build_log_config(log_path, level=lvl))
    except Exception:
        logging.basicConfig(level=logging.INFO)
    return log_path
