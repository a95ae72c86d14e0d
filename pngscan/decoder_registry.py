#decoder_registry.py

from __future__ import annotations

import inspect
import logging
import sys
from importlib.util import module_from_spec, spec_from_file_location
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

from pngscan.errors import ChunkError, SpecViolation
from pngscan.raw_chunk import RawChunk, ensure_structurally_valid

logger = logging.getLogger(__name__)

DECODERS_DIR = "decoders"


def iter_decoder_files(subdir: str) -> List[Path]:
    base = Path(__file__).resolve().parent / subdir
    files: List[Path] = []
    if not base.is_dir():
        return files
    for entry in sorted(base.iterdir()):
        if entry.is_dir():
            continue
        if entry.suffix != ".py":
            continue
        if entry.name.startswith("__"):
            continue
        files.append(entry)
    return files


def load_module_from_path(subdir: str, path: Path):
    mod_name = f"pngscan.{subdir}.{path.stem}"
    # Reuse a module that was already imported normally
    if mod_name in sys.modules:
        return sys.modules[mod_name]
    spec = spec_from_file_location(mod_name, str(path))
    if spec is None or spec.loader is None:
        return None
    module = module_from_spec(spec)
    sys.modules[mod_name] = module
    try:
        spec.loader.exec_module(module)
        return module
    except Exception:
        del sys.modules[mod_name]
        logger.warning("failed to load decoder module %s", path, exc_info=True)
        return None


# Each decoder module exposes parse_<TYPE>(chunk) -> view | None
def discover_decoders(subdir: str) -> Dict[str, Callable]:
    registry: Dict[str, Callable] = {}
    for file_path in iter_decoder_files(subdir):
        module = load_module_from_path(subdir, file_path)
        if module is None:
            continue
        for name, fn in inspect.getmembers(module, inspect.isfunction):
            if not name.startswith("parse_"):
                continue
            type_code = name[len("parse_"):]
            if len(type_code) != 4:
                continue
            if type_code in registry:
                logger.warning("duplicate decoder for %s in %s ignored", type_code, file_path.name)
                continue
            registry[type_code] = fn
    logger.debug("registered decoders: %s", sorted(registry))
    return registry


DECODERS: Dict[str, Callable] = discover_decoders(DECODERS_DIR)


def get_decoder(type_code) -> Optional[Callable]:
    return DECODERS.get(str(type_code))


def available_types() -> List[str]:
    return sorted(DECODERS.keys())


# Per-type verdict, independent of the CRC
# Unknown types pass with no view; known types pass when the view exists and accepts its values
def decode(chunk: RawChunk) -> Tuple[bool, object]:
    decoder = get_decoder(chunk.type_code)
    if decoder is None:
        return True, None
    try:
        view = decoder(chunk)
        if view is None:
            return False, None
        return bool(view.is_valid()), view
    except ChunkError as exc:
        logger.debug("decoder for %s at %d failed: %s", chunk.type_code, chunk.offset, exc)
        return False, None


def is_spec_valid(chunk: RawChunk) -> bool:
    if not (chunk.type_code.is_valid() and chunk.crc_ok):
        return False
    passed, _view = decode(chunk)
    return passed


def ensure_spec_valid(chunk: RawChunk):
    ensure_structurally_valid(chunk)
    passed, view = decode(chunk)
    if not passed:
        if view is None:
            raise SpecViolation(f"{chunk.type_code} payload of {chunk.length} bytes has the wrong shape", chunk.offset)
        raise SpecViolation(f"{chunk.type_code} values out of range: {view.summary()}", chunk.offset)
    return view


__all__ = [
    "DECODERS",
    "get_decoder",
    "available_types",
    "decode",
    "is_spec_valid",
    "ensure_spec_valid",
]
