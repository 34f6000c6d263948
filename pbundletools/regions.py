"""Grouping of per-pair coverage ratios into high/low coverage regions."""

from __future__ import annotations

import math
import struct
from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal

CoverageRow = tuple[int, int, float, int, int]

_THRESHOLD_EPS = 0.0001
_HIGH_MAX_DIST = 10000
_HIGH_MIN_RANGE = 10000
_LOW_MAX_DIST = 100
_LOW_MIN_RANGE = 20000


@dataclass(frozen=True)
class CoverageRegion:
    """A grouped region with mean ratio and mean counts."""

    bgn: int
    end: int
    ratio: float
    count0: float
    count1: float


def _to_f32(value: float) -> float:
    return struct.unpack("<f", struct.pack("<f", value))[0]


def _format_float(value: float) -> str:
    """Shortest single-precision decimal text, without exponent notation."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    target = _to_f32(value)
    text = repr(target)
    for digits in range(1, 10):
        candidate = f"{target:.{digits}g}"
        if _to_f32(float(candidate)) == target:
            text = candidate
            break
    return format(Decimal(text), "f")


def _summarize(chunk: list[CoverageRow]) -> CoverageRegion:
    count = len(chunk)
    return CoverageRegion(
        bgn=chunk[0][0],
        end=chunk[-1][1],
        ratio=sum(row[2] for row in chunk) / count,
        count0=sum(row[3] for row in chunk) / count,
        count1=sum(row[4] for row in chunk) / count,
    )


def filter_and_group_regions(
    regions: Sequence[CoverageRow], max_dist: int, min_range: int
) -> list[CoverageRegion]:
    """Chain rows closer than max_dist; keep chains spanning more than min_range.

    The row that breaks a chain is discarded rather than starting a new one.
    """
    chunks: list[list[CoverageRow]] = []
    chunk: list[CoverageRow] = []
    for row in regions:
        if not chunk:
            chunk.append(row)
            continue
        if row[0] - chunk[-1][1] < max_dist:
            chunk.append(row)
        else:
            if chunk[-1][1] - chunk[0][0] > min_range:
                chunks.append(chunk)
            chunk = []
    if chunk and chunk[-1][1] - chunk[0][0] > min_range:
        chunks.append(chunk)
    return [_summarize(c) for c in chunks]


def coverage_regions(
    out_data: Sequence[CoverageRow], threshold: float
) -> list[CoverageRegion]:
    """High and low coverage regions relative to threshold, sorted by start."""
    high = [row for row in out_data if row[2] > threshold + _THRESHOLD_EPS]
    low = [row for row in out_data if row[2] < threshold - _THRESHOLD_EPS]
    regions = filter_and_group_regions(high, _HIGH_MAX_DIST, _HIGH_MIN_RANGE)
    regions += filter_and_group_regions(low, _LOW_MAX_DIST, _LOW_MIN_RANGE)
    regions.sort(key=lambda region: region.bgn)
    return regions


def format_region_line(
    ctg: str, region: CoverageRegion, prefix: str | None = None
) -> str:
    """Tab-separated BED line for a region; the ratio is labelled when prefix is given."""
    ratio = _format_float(region.ratio)
    if prefix is not None:
        ratio = f"{prefix}:{ratio}"
    return "\t".join(
        [
            ctg,
            str(region.bgn),
            str(region.end),
            ratio,
            _format_float(region.count0),
            _format_float(region.count1),
        ]
    )