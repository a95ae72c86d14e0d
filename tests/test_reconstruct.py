"""Tests for chain reconstruction and byte coverage."""

import struct

import numpy as np

from pngscan.coverage import coverage_counts, is_partition, overlap_offsets, uncovered_offsets
from pngscan.reconstruct import (
    ANCHOR_BARE,
    ANCHOR_SIGNATURE,
    END_BROKEN,
    END_CLEAN_EOF,
    END_IEND,
    analyze,
    reconstruct,
)
from pngscan.scanner import scan


def kinds(report):
    return [r.kind for r in report.records]


def test_empty_input_gives_empty_report():
    report = analyze(b"")
    assert report.records == []
    assert report.chains == []


def test_scenario_a_signature_ihdr_iend(minimal_png):
    report = analyze(minimal_png)
    assert len(report.chains) == 1
    chain = report.chains[0]
    assert chain.anchor == ANCHOR_SIGNATURE
    assert chain.signature_offset == 0
    assert chain.start == 8
    assert chain.type_codes == ["IHDR", "IEND"]
    assert chain.end_reason == END_IEND
    assert report.unused == []
    assert kinds(report) == ["chain_start", "signature", "chunk", "chunk", "chain_end"]
    ihdr = report.records[2]
    assert ihdr.status == "ok"
    assert ihdr.summary["width"] == 1
    assert ihdr.raw_crc is None


def test_scenario_b_bare_iend(iend_chunk):
    report = analyze(iend_chunk)
    assert len(report.chains) == 1
    chain = report.chains[0]
    assert chain.anchor == ANCHOR_BARE
    assert chain.start == 0
    assert len(chain) == 1
    assert chain.end_reason == END_IEND
    assert report.records[0].anchor == ANCHOR_BARE
    assert report.unused == []


def test_scenario_c_crc_bit_flip(signature, ihdr_chunk):
    damaged = bytearray(ihdr_chunk)
    damaged[-1] ^= 0x01
    data = signature + bytes(damaged)
    report = analyze(data)
    assert len(report.chains) == 1
    chain = report.chains[0]
    assert chain.type_codes == ["IHDR"]
    assert chain.chunks[0].status == "crc_mismatch"
    assert chain.end_reason == END_CLEAN_EOF
    record = report.records_of("chunk")[0]
    assert record.status == "crc_mismatch"
    assert record.raw_crc == bytes(damaged[-4:])
    assert record.summary is None


def test_scenario_d_single_unused_byte():
    report = analyze(b"\x7f")
    assert report.chains == []
    assert report.unused == [(0, 0x7F)]
    records = report.records_of("unused")
    assert len(records) == 1
    assert (records[0].offset, records[0].value) == (0, 0x7F)


def test_broken_chain(signature, ihdr_chunk):
    data = signature + ihdr_chunk + b"\xff\xff\xff\xff"
    report = analyze(data)
    chain = report.chains[0]
    assert chain.end_reason == END_BROKEN
    assert chain.end_offset == 33
    assert [off for off, _ in report.unused] == [33, 34, 35, 36]


def test_concatenated_pngs(minimal_png):
    report = analyze(minimal_png + minimal_png)
    assert [c.signature_offset for c in report.signature_chains] == [0, 45]
    assert report.bare_chains == []
    assert all(c.end_reason == END_IEND for c in report.chains)


def test_orphan_chain_consumes_its_successors(make_chunk, iend_chunk):
    time_chunk = make_chunk(b"tIME", struct.pack(">HBBBBB", 2024, 5, 6, 7, 8, 9))
    report = analyze(time_chunk + iend_chunk)
    assert len(report.chains) == 1
    assert report.chains[0].anchor == ANCHOR_BARE
    assert report.chains[0].type_codes == ["tIME", "IEND"]


def test_chunks_after_iend_start_an_orphan_chain(minimal_png, make_chunk):
    trailer = make_chunk(b"tEXt", b"k\x00v")
    report = analyze(minimal_png + trailer)
    assert len(report.signature_chains) == 1
    assert len(report.bare_chains) == 1
    bare = report.bare_chains[0]
    assert bare.start == 45
    assert bare.type_codes == ["tEXt"]
    assert bare.end_reason == END_CLEAN_EOF


def test_spec_violation_shows_crc_and_summary(signature, make_chunk, ihdr_payload, iend_chunk):
    data = signature + make_chunk(b"IHDR", ihdr_payload(colour_type=3, bit_depth=16)) + iend_chunk
    report = analyze(data)
    record = report.records_of("chunk")[0]
    assert record.status == "spec_violation"
    assert record.raw_crc is not None
    assert record.summary["bit_depth"] == 16
    assert report.chains[0].end_reason == END_IEND


def test_candidates_consumed_once(minimal_png):
    result = scan(minimal_png)
    reconstruct(result)
    assert result.chunks == {}
    assert result.successors == {}


def test_sink_receives_every_record(minimal_png):
    seen = []
    report = analyze(minimal_png + b"\x00", sink=seen.append)
    assert seen == report.records
    assert seen[-1].kind == "unused"


def test_truncated_heads_reported_last(minimal_png):
    data = minimal_png + struct.pack(">I", 500) + b"IDAT" + b"\x00\x00"
    report = analyze(data)
    assert report.records[-1].kind == "truncated"
    assert report.records[-1].offset == 45
    assert report.records[-1].length == 500


def test_config_options_reach_the_scanner(make_chunk):
    data = make_chunk(b"IDAT", b"\x00" * 40)
    assert len(analyze(data).chains) == 1
    report = analyze(data, {"scan": {"max_chunk_length": 16, "crc_engine": "zlib"}})
    assert report.chains == []


# Coverage partition

def test_partition_holds_for_unambiguous_input(minimal_png, iend_chunk):
    data = minimal_png + b"\x00\x00\x00" + iend_chunk
    report = analyze(data)
    assert [c.anchor for c in report.chains] == [ANCHOR_SIGNATURE, ANCHOR_BARE]
    assert [off for off, _ in report.unused] == [45, 46, 47]
    counts = coverage_counts(report.records, len(data))
    assert counts.shape == (len(data),)
    assert np.all(counts == 1)
    assert is_partition(report.records, len(data))


def test_partition_with_broken_chain(signature, ihdr_chunk):
    data = signature + ihdr_chunk + b"\xff\xff\xff\xff"
    report = analyze(data)
    assert is_partition(report.records, len(data))


def test_partition_trivial_cases():
    assert is_partition(analyze(b"").records, 0)
    assert is_partition(analyze(b"\x01\x02\x03").records, 3)


def test_nested_candidate_is_double_covered(signature, make_chunk, iend_chunk):
    # An IEND hidden inside a private chunk's payload is also found as a bare
    # chain; the forward-only unused-byte pass never reconciles the overlap.
    data = signature + make_chunk(b"prIv", iend_chunk)
    report = analyze(data)
    assert [c.anchor for c in report.chains] == [ANCHOR_SIGNATURE, ANCHOR_BARE]
    assert report.chains[0].end_reason == END_CLEAN_EOF
    assert report.chains[1].start == 16
    assert not is_partition(report.records, len(data))
    assert list(overlap_offsets(report.records, len(data))) == list(range(16, 28))
    assert len(uncovered_offsets(report.records, len(data))) == 0
