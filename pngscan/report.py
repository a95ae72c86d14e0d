# report.py

from __future__ import annotations

import csv
import json
from typing import Any, Dict, Iterable, List, Optional, TextIO

from pngscan.coverage import overlap_offsets

# Column order for CSV output
RECORD_FIELDS = (
    "kind",
    "offset",
    "length",
    "type_code",
    "status",
    "anchor",
    "reason",
    "value",
    "raw_crc",
    "summary",
)

KIND_SIGNATURE = "signature"
KIND_CHAIN_START = "chain_start"
KIND_CHUNK = "chunk"
KIND_CHAIN_END = "chain_end"
KIND_UNUSED = "unused"
KIND_TRUNCATED = "truncated"

STATUS_OK = "ok"
STATUS_CRC_MISMATCH = "crc_mismatch"
STATUS_SPEC_VIOLATION = "spec_violation"

ANCHOR_SIGNATURE = "signature"
ANCHOR_BARE = "bare"

END_IEND = "iend"
END_BROKEN = "broken_link"
END_CLEAN_EOF = "clean_eof"


class ReportRecord:
    """
    One structured line of scan output.

    Every kind shares this type; fields that do not apply to a kind stay None.
    `length` is the span length for signatures (8), the payload length for
    chunks and the declared length for truncated heads.
    """

    __slots__ = RECORD_FIELDS

    def __init__(self, kind: str, offset: int, **fields: Any) -> None:
        self.kind = kind
        self.offset = offset
        for name in RECORD_FIELDS[2:]:
            setattr(self, name, fields.pop(name, None))
        if fields:
            raise TypeError(f"unknown record fields: {sorted(fields)}")

    # Bytes of the buffer this record accounts for, or None for markers
    @property
    def span(self) -> Optional[int]:
        if self.kind == KIND_SIGNATURE:
            return self.length
        if self.kind == KIND_CHUNK:
            return self.length + 12
        if self.kind == KIND_UNUSED:
            return 1
        return None

    def as_row(self) -> Dict[str, Any]:
        row = {name: getattr(self, name) for name in RECORD_FIELDS}
        if row["type_code"] is not None:
            row["type_code"] = str(row["type_code"])
        if row["raw_crc"] is not None:
            row["raw_crc"] = row["raw_crc"].hex()
        if row["summary"] is not None:
            row["summary"] = json.dumps(row["summary"], default=_json_default, ensure_ascii=False)
        return row

    def __eq__(self, other) -> bool:
        if not isinstance(other, ReportRecord):
            return NotImplemented
        return all(getattr(self, n) == getattr(other, n) for n in RECORD_FIELDS)

    def __repr__(self) -> str:
        parts = [f"{n}={getattr(self, n)!r}" for n in RECORD_FIELDS[1:] if getattr(self, n) is not None]
        return f"ReportRecord({self.kind!r}, {', '.join(parts)})"


def _json_default(value):
    if isinstance(value, (bytes, bytearray)):
        return value.hex()
    return str(value)


def signature_record(offset: int) -> ReportRecord:
    return ReportRecord(KIND_SIGNATURE, offset, length=8)


def chain_start_record(offset: int, anchor: str) -> ReportRecord:
    return ReportRecord(KIND_CHAIN_START, offset, anchor=anchor)


def chain_end_record(offset: int, reason: str) -> ReportRecord:
    return ReportRecord(KIND_CHAIN_END, offset, reason=reason)


# Decoded summary for good chunks; raw CRC bytes for anything that failed
def chunk_record(vchunk) -> ReportRecord:
    chunk = vchunk.chunk
    fields: Dict[str, Any] = {
        "length": chunk.length,
        "type_code": chunk.type_code,
        "status": vchunk.status,
    }
    if vchunk.status == STATUS_OK:
        if vchunk.view is not None:
            fields["summary"] = vchunk.view.summary()
    else:
        fields["raw_crc"] = chunk.raw_crc
        if vchunk.status == STATUS_SPEC_VIOLATION and vchunk.view is not None:
            fields["summary"] = vchunk.view.summary()
    return ReportRecord(KIND_CHUNK, vchunk.offset, **fields)


def unused_record(offset: int, value: int) -> ReportRecord:
    return ReportRecord(KIND_UNUSED, offset, value=value)


def truncated_record(head) -> ReportRecord:
    return ReportRecord(
        KIND_TRUNCATED,
        head.offset,
        length=head.declared_length,
        type_code=head.type_code,
    )


def _format_value(value: Any, preview: int) -> str:
    if isinstance(value, str):
        if len(value) > preview:
            value = value[:preview] + "..."
        return repr(value)
    if isinstance(value, (bytes, bytearray)):
        shown = bytes(value[:preview]).hex(" ")
        more = "" if len(value) <= preview else f" (+{len(value) - preview} bytes)"
        return f"[{shown}{more}]"
    return str(value)


def _format_summary(summary: Dict[str, Any], preview: int) -> str:
    inner = ", ".join(f"{k}: {_format_value(v, preview)}" for k, v in summary.items() if v is not None)
    return "{" + inner + "}"


# One human-readable line per record
def render_text(record: ReportRecord, preview: int = 64) -> str:
    kind = record.kind
    if kind == KIND_SIGNATURE:
        return f"Found PNG signature at {record.offset}"
    if kind == KIND_CHAIN_START:
        return f"chain start at {record.offset} ({record.anchor})"
    if kind == KIND_CHAIN_END:
        return f"chain end at {record.offset}: {record.reason}"
    if kind == KIND_UNUSED:
        return f"unused byte at {record.offset}: 0x{record.value:02X}"
    if kind == KIND_TRUNCATED:
        return f"truncated {record.type_code} header at {record.offset}, declared length {record.length}"
    if kind == KIND_CHUNK:
        line = f"  chunk {record.type_code} at {record.offset}, len: {record.length}"
        if record.status != STATUS_OK:
            line += f", {record.status}, crc: [{record.raw_crc.hex(' ')}]"
        if record.summary is not None:
            line += " " + _format_summary(record.summary, preview)
        return line
    raise ValueError(f"unknown record kind: {kind!r}")


def write_text(records: Iterable[ReportRecord], out: TextIO, *, preview: int = 64, show_unused: bool = True) -> int:
    count = 0
    for r in records:
        if r.kind == KIND_UNUSED and not show_unused:
            continue
        out.write(render_text(r, preview) + "\n")
        count += 1
    return count


def write_csv(records: Iterable[ReportRecord], out: TextIO, *, show_unused: bool = True) -> int:
    writer = csv.DictWriter(out, fieldnames=list(RECORD_FIELDS), extrasaction="ignore")
    writer.writeheader()
    count = 0
    for r in records:
        if r.kind == KIND_UNUSED and not show_unused:
            continue
        row = r.as_row()
        writer.writerow({k: ("" if row.get(k) is None else row.get(k)) for k in RECORD_FIELDS})
        count += 1
    return count


# Default summary features, same keys as summarize()
DEF_SUMMARY = {
    "png_signatures_count": 0,
    "png_chains_count": 0,
    "png_bare_chains_count": 0,
    "png_chunks_count": 0,
    "png_crc_mismatch_count": 0,
    "png_spec_violation_count": 0,
    "png_iend_chains_count": 0,
    "png_broken_chains_count": 0,
    "png_unused_bytes": 0,
    "png_truncated_heads": 0,
    "png_overlap_bytes": 0,
    "parser_ok": False,
    "structure_consistent": False,
}


# Flat feature dict for one analysed buffer
def summarize(records: List[ReportRecord], size: int) -> Dict[str, Any]:
    out = DEF_SUMMARY.copy()
    for r in records:
        if r.kind == KIND_SIGNATURE:
            out["png_signatures_count"] += 1
        elif r.kind == KIND_CHAIN_START:
            out["png_chains_count"] += 1
            if r.anchor == ANCHOR_BARE:
                out["png_bare_chains_count"] += 1
        elif r.kind == KIND_CHUNK:
            out["png_chunks_count"] += 1
            if r.status == STATUS_CRC_MISMATCH:
                out["png_crc_mismatch_count"] += 1
            elif r.status == STATUS_SPEC_VIOLATION:
                out["png_spec_violation_count"] += 1
        elif r.kind == KIND_CHAIN_END:
            if r.reason == END_IEND:
                out["png_iend_chains_count"] += 1
            elif r.reason == END_BROKEN:
                out["png_broken_chains_count"] += 1
        elif r.kind == KIND_UNUSED:
            out["png_unused_bytes"] += 1
        elif r.kind == KIND_TRUNCATED:
            out["png_truncated_heads"] += 1
    signature_chains = out["png_chains_count"] - out["png_bare_chains_count"]
    out["png_overlap_bytes"] = int(len(overlap_offsets(records, size)))

    # Aggregate flags: at least one signature chain, and nothing damaged or left over
    out["parser_ok"] = bool(signature_chains >= 1)
    out["structure_consistent"] = bool(
        out["parser_ok"]
        and out["png_iend_chains_count"] >= 1
        and out["png_crc_mismatch_count"] == 0
        and out["png_spec_violation_count"] == 0
        and out["png_broken_chains_count"] == 0
        and out["png_unused_bytes"] == 0
    )
    return out


__all__ = [
    "RECORD_FIELDS",
    "ReportRecord",
    "signature_record",
    "chain_start_record",
    "chain_end_record",
    "chunk_record",
    "unused_record",
    "truncated_record",
    "render_text",
    "write_text",
    "write_csv",
    "summarize",
    "DEF_SUMMARY",
    "STATUS_OK",
    "STATUS_CRC_MISMATCH",
    "STATUS_SPEC_VIOLATION",
    "ANCHOR_SIGNATURE",
    "ANCHOR_BARE",
    "END_IEND",
    "END_BROKEN",
    "END_CLEAN_EOF",
]
