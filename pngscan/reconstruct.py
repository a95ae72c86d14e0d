# reconstruct.py

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from pngscan.chunk_type import IEND
from pngscan.config import scan_options
from pngscan.decoder_registry import decode
from pngscan.raw_chunk import RawChunk
from pngscan.report import (
    ANCHOR_BARE,
    ANCHOR_SIGNATURE,
    END_BROKEN,
    END_CLEAN_EOF,
    END_IEND,
    STATUS_CRC_MISMATCH,
    STATUS_OK,
    STATUS_SPEC_VIOLATION,
    ReportRecord,
    chain_end_record,
    chain_start_record,
    chunk_record,
    signature_record,
    truncated_record,
    unused_record,
)
from pngscan.scanner import SIG_LEN, ScanResult, scan

logger = logging.getLogger(__name__)


class ValidatedChunk:
    # Raw chunk plus the per-type verdict; crc mismatch takes precedence in status
    __slots__ = ("offset", "chunk", "type_passed", "view")

    def __init__(self, offset: int, chunk: RawChunk) -> None:
        self.offset = offset
        self.chunk = chunk
        self.type_passed, self.view = decode(chunk)

    @property
    def crc_ok(self) -> bool:
        return self.chunk.crc_ok

    @property
    def spec_valid(self) -> bool:
        return self.chunk.crc_ok and self.type_passed

    @property
    def status(self) -> str:
        if not self.chunk.crc_ok:
            return STATUS_CRC_MISMATCH
        if not self.type_passed:
            return STATUS_SPEC_VIOLATION
        return STATUS_OK

    def __repr__(self) -> str:
        return f"ValidatedChunk(offset={self.offset}, type={self.chunk.type_code}, status={self.status})"


class Chain:
    def __init__(self, anchor: str, start: int, signature_offset: Optional[int] = None) -> None:
        self.anchor = anchor
        # First chunk offset (signature offset + 8 for signature chains)
        self.start = start
        self.signature_offset = signature_offset
        self.chunks: List[ValidatedChunk] = []
        self.end_reason: Optional[str] = None
        self.end_offset: Optional[int] = None

    def __len__(self) -> int:
        return len(self.chunks)

    @property
    def type_codes(self) -> List[str]:
        return [str(vc.chunk.type_code) for vc in self.chunks]

    def __repr__(self) -> str:
        return f"Chain({self.anchor}@{self.start}, {self.type_codes}, end={self.end_reason})"


class Report:
    def __init__(self, size: int) -> None:
        self.size = size
        self.records: List[ReportRecord] = []
        self.chains: List[Chain] = []
        self.unused: List[tuple] = []
        self.truncated: List = []

    @property
    def signature_chains(self) -> List[Chain]:
        return [c for c in self.chains if c.anchor == ANCHOR_SIGNATURE]

    @property
    def bare_chains(self) -> List[Chain]:
        return [c for c in self.chains if c.anchor == ANCHOR_BARE]

    def records_of(self, kind: str) -> List[ReportRecord]:
        return [r for r in self.records if r.kind == kind]

    def __repr__(self) -> str:
        return f"Report(size={self.size}, chains={len(self.chains)}, unused={len(self.unused)})"


class _Emitter:
    def __init__(self, report: Report, sink: Optional[Callable[[ReportRecord], None]]) -> None:
        self.report = report
        self.sink = sink

    def __call__(self, record: ReportRecord) -> None:
        self.report.records.append(record)
        if self.sink is not None:
            self.sink(record)


# Follow successor links from `cursor`, consuming every chunk taken
def _walk(result: ScanResult, chain: Chain, cursor: int, emit: _Emitter) -> None:
    n = result.size
    while cursor in result.successors:
        chunk = result.chunks.pop(cursor)
        nxt = result.successors.pop(cursor)
        vchunk = ValidatedChunk(cursor, chunk)
        chain.chunks.append(vchunk)
        emit(chunk_record(vchunk))
        cursor = nxt
        if chunk.type_code == IEND:
            chain.end_reason = END_IEND
            break
    else:
        chain.end_reason = END_CLEAN_EOF if cursor == n else END_BROKEN
    chain.end_offset = cursor
    logger.debug("%r ended at %d", chain, cursor)
    emit(chain_end_record(cursor, chain.end_reason))


# Turn scanner tables into ordered chains and anomalies.
# Mutates result.chunks / result.successors: consumed candidates are removed.
def reconstruct(result: ScanResult, sink: Optional[Callable[[ReportRecord], None]] = None) -> Report:
    report = Report(result.size)
    emit = _Emitter(report, sink)

    # 1. Signature-rooted chains, in discovery order
    for sig in result.signatures:
        chain = Chain(ANCHOR_SIGNATURE, sig + SIG_LEN, signature_offset=sig)
        report.chains.append(chain)
        emit(chain_start_record(sig, ANCHOR_SIGNATURE))
        emit(signature_record(sig))
        _walk(result, chain, sig + SIG_LEN, emit)

    # 2. Orphan chains over whatever is left, lowest offset first
    for offset in sorted(result.chunks):
        if offset not in result.chunks:
            continue
        chain = Chain(ANCHOR_BARE, offset)
        report.chains.append(chain)
        emit(chain_start_record(offset, ANCHOR_BARE))
        _walk(result, chain, offset, emit)

    # 3. Unused bytes with their literal value
    for offset in result.unused:
        value = result.buffer[offset]
        report.unused.append((offset, value))
        emit(unused_record(offset, value))

    # 4. Headers whose body ran past the end of the buffer
    for head in result.truncated:
        report.truncated.append(head)
        emit(truncated_record(head))

    return report


# Scan + reconstruct with options taken from a loaded config
def analyze(buffer, cfg: Optional[dict] = None, sink: Optional[Callable[[ReportRecord], None]] = None) -> Report:
    result = scan(buffer, **scan_options(cfg))
    return reconstruct(result, sink=sink)


__all__ = [
    "ValidatedChunk",
    "Chain",
    "Report",
    "reconstruct",
    "analyze",
    "ANCHOR_SIGNATURE",
    "ANCHOR_BARE",
    "END_IEND",
    "END_BROKEN",
    "END_CLEAN_EOF",
]
