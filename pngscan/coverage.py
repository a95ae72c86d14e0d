# coverage.py

from __future__ import annotations

from typing import Iterable

import numpy as np


# How many reported spans (signature, chunk, unused byte) claim each offset.
# Markers (chain start/end, truncated heads) carry no span and are skipped.
def coverage_counts(records: Iterable, size: int) -> np.ndarray:
    counts = np.zeros(size, dtype=np.int32)
    for r in records:
        span = r.span
        if not span:
            continue
        start = max(0, r.offset)
        end = min(size, r.offset + span)
        if start < end:
            counts[start:end] += 1
    return counts


# Every offset claimed exactly once
def is_partition(records: Iterable, size: int) -> bool:
    return bool(np.all(coverage_counts(records, size) == 1))


def overlap_offsets(records: Iterable, size: int) -> np.ndarray:
    return np.flatnonzero(coverage_counts(records, size) > 1)


def uncovered_offsets(records: Iterable, size: int) -> np.ndarray:
    return np.flatnonzero(coverage_counts(records, size) == 0)


__all__ = ["coverage_counts", "is_partition", "overlap_offsets", "uncovered_offsets"]
