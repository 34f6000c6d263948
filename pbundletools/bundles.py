"""Principal bundle BED records: parsing and the segment type."""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from os import PathLike

PARSE_ERROR = "bed file parsing error"

_U32_RE = re.compile(r"\+?[0-9]+")
_U32_MAX = 2**32 - 1


@dataclass(frozen=True, order=True)
class BundleSegment:
    """One contig interval assigned to a principal bundle."""

    bgn: int
    end: int
    bundle_id: int
    bundle_v_count: int
    bundle_dir: int
    bundle_v_bgn: int
    bundle_v_end: int

    def length(self) -> int:
        """Length of the interval in base pairs, regardless of orientation."""
        return abs(self.end - self.bgn)

    def is_major(self) -> bool:
        """True when the segment covers more than half of the bundle's vertices."""
        return abs(self.bundle_v_bgn - self.bundle_v_end) > self.bundle_v_count * 0.5


def _parse_u32(text: str) -> int:
    if not _U32_RE.fullmatch(text):
        raise ValueError(PARSE_ERROR)
    value = int(text)
    if value > _U32_MAX:
        raise ValueError(PARSE_ERROR)
    return value


def parse_bundle_line(line: str) -> tuple[str, BundleSegment] | None:
    """Parse one BED line into (contig, segment); None for blank or comment lines."""
    line = line.strip()
    if not line or line.startswith("#"):
        return None
    fields = line.split("\t")
    if len(fields) < 4:
        raise ValueError(PARSE_ERROR)
    bundle_fields = fields[3].split(":")
    if len(bundle_fields) < 5:
        raise ValueError(PARSE_ERROR)
    segment = BundleSegment(
        bgn=_parse_u32(fields[1]),
        end=_parse_u32(fields[2]),
        bundle_id=_parse_u32(bundle_fields[0]),
        bundle_v_count=_parse_u32(bundle_fields[1]),
        bundle_dir=_parse_u32(bundle_fields[2]),
        bundle_v_bgn=_parse_u32(bundle_fields[3]),
        bundle_v_end=_parse_u32(bundle_fields[4]),
    )
    return fields[0], segment


def iter_bundle_records(lines: Iterable[str]) -> Iterator[tuple[str, BundleSegment]]:
    """Yield (contig, segment) pairs from BED lines, skipping blanks and comments."""
    for line in lines:
        record = parse_bundle_line(line)
        if record is not None:
            yield record


def read_bundle_bed(path: str | PathLike[str]) -> dict[str, list[BundleSegment]]:
    """Read a principal bundle BED file, grouping segments by contig in file order."""
    ctg_data: dict[str, list[BundleSegment]] = {}
    with open(path, encoding="utf-8") as handle:
        for ctg, segment in iter_bundle_records(handle):
            ctg_data.setdefault(ctg, []).append(segment)
    return ctg_data