# cli.py

from __future__ import annotations

import argparse
import contextlib
import logging
import sys
from typing import Iterable, Optional

from pngscan.config import load_cfg, log_level, report_options
from pngscan.errors import ConfigError
from pngscan.reconstruct import analyze
from pngscan.report import summarize, write_csv, write_text

logger = logging.getLogger(__name__)


def setup_logging(level: int) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def parse_args(argv: Optional[Iterable[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pngscan",
        description="Locate PNG signatures and chunks in an arbitrary byte stream",
    )
    parser.add_argument("input", nargs="?", default="-", help="input file, '-' for stdin")
    parser.add_argument("-o", "--output", default="-", help="output file, '-' for stdout")
    parser.add_argument("--cfg", default=None, help="path to a pngscan.yaml config")
    parser.add_argument("--format", choices=("text", "csv"), default=None, help="override report.format")
    parser.add_argument("--summary", action="store_true", help="print summary features instead of records")
    parser.add_argument("--debug", action="store_true", help="enable debug logging")
    return parser.parse_args(None if argv is None else list(argv))


def read_input(path: str) -> bytes:
    if path == "-":
        return sys.stdin.buffer.read()
    with open(path, "rb") as f:
        return f.read()


@contextlib.contextmanager
def open_output(path: str):
    if path == "-":
        yield sys.stdout
        sys.stdout.flush()
        return
    with open(path, "w", encoding="utf-8", newline="") as f:
        yield f


def main(argv: Optional[Iterable[str]] = None) -> int:
    args = parse_args(argv)

    try:
        cfg = load_cfg(args.cfg)
        opts = report_options(cfg)
        level = logging.DEBUG if args.debug else log_level(cfg)
    except (ConfigError, FileNotFoundError) as exc:
        raise SystemExit(f"pngscan: {exc}")
    setup_logging(level)

    try:
        data = read_input(args.input)
    except OSError as exc:
        raise SystemExit(f"pngscan: cannot read {args.input}: {exc}")
    logger.info("scanning %d bytes from %s", len(data), args.input)

    try:
        report = analyze(data, cfg)
    except ConfigError as exc:
        raise SystemExit(f"pngscan: {exc}")

    fmt = args.format or opts["format"]
    with open_output(args.output) as out:
        if args.summary:
            for name, value in summarize(report.records, report.size).items():
                out.write(f"{name}\t{value}\n")
        elif fmt == "csv":
            write_csv(report.records, out, show_unused=opts["show_unused"])
        else:
            write_text(report.records, out, preview=opts["preview"], show_unused=opts["show_unused"])
    return 0


if __name__ == "__main__":
    sys.exit(main())
