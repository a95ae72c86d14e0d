# config.py

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from pngscan.crc import CRC_ENGINES, get_crc_engine
from pngscan.errors import ConfigError
from pngscan.raw_chunk import MAX_CHUNK_LENGTH

# Default config lives next to the package
CONFIG_DIR = Path(__file__).resolve().parent.parent / "config"
CONFIG_FILE = CONFIG_DIR / "pngscan.yaml"

REPORT_FORMATS = ("text", "csv")


# Load a YAML config; an explicit path must exist, the default one may be absent
def load_cfg(path: Optional[Union[str, Path]] = None) -> dict:
    if path is None:
        if not CONFIG_FILE.is_file():
            return {}
        path = CONFIG_FILE
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"config file not found at: {path}")
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: top level must be a mapping, got {type(data).__name__}")
    return data


# cfg['a']['b']['c'] from 'a.b.c'
def _get(cfg: dict, path: str, default=None):
    cur = cfg
    for k in path.split("."):
        if not isinstance(cur, dict) or k not in cur:
            return default
        cur = cur[k]
    return cur


# Keyword arguments for scanner.scan()
def scan_options(cfg: Optional[dict]) -> Dict[str, Any]:
    cfg = cfg or {}
    try:
        max_length = int(_get(cfg, "scan.max_chunk_length", MAX_CHUNK_LENGTH))
    except (TypeError, ValueError):
        raise ConfigError("scan.max_chunk_length must be an integer") from None
    if not 0 <= max_length <= MAX_CHUNK_LENGTH:
        raise ConfigError(f"scan.max_chunk_length must be within 0..{MAX_CHUNK_LENGTH}, got {max_length}")

    engine = str(_get(cfg, "scan.crc_engine", "table"))
    if engine not in CRC_ENGINES:
        raise ConfigError(f"scan.crc_engine must be one of {sorted(CRC_ENGINES)}, got {engine!r}")
    return {"max_length": max_length, "crc_func": get_crc_engine(engine)}


def report_options(cfg: Optional[dict]) -> Dict[str, Any]:
    cfg = cfg or {}
    fmt = str(_get(cfg, "report.format", "text"))
    if fmt not in REPORT_FORMATS:
        raise ConfigError(f"report.format must be one of {list(REPORT_FORMATS)}, got {fmt!r}")
    try:
        preview = int(_get(cfg, "report.text_preview", 64))
    except (TypeError, ValueError):
        raise ConfigError("report.text_preview must be an integer") from None
    if preview < 0:
        raise ConfigError(f"report.text_preview must be >= 0, got {preview}")
    return {
        "format": fmt,
        "show_unused": bool(_get(cfg, "report.show_unused", True)),
        "preview": preview,
    }


def log_level(cfg: Optional[dict]) -> int:
    name = str(_get(cfg or {}, "logging.level", "WARNING")).upper()
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        raise ConfigError(f"logging.level: unknown level {name!r}")
    return level


__all__ = ["CONFIG_FILE", "load_cfg", "scan_options", "report_options", "log_level"]
