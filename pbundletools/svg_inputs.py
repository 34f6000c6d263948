"""Input files and layout helpers for drawing principal bundle tracks."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from os import PathLike

from pbundletools.regions import _to_f32

BundleRecord = tuple[int, int, int, int]

_BED_ERROR = "bed file parsing error"
_REGION_ERROR = "annotation bed file parsing error"
_OFFSET_ERROR = "offset file parsing error"
_DDG_ERROR = "error on parsing the dendrogram file"

_UNSIGNED_RE = re.compile(r"\+?[0-9]+")
_SIGNED_RE = re.compile(r"[+-]?[0-9]+")
_U32_MAX = 2**32 - 1
_I64_MIN = -(2**63)
_I64_MAX = 2**63 - 1

MIN_TRACK_RANGE = 10000

CMAP: tuple[str, ...] = (
    "#870098", "#00aaa5", "#3bff00", "#ec0000", "#00a2c3", "#00f400", "#ff1500", "#0092dd",
    "#00dc00", "#ff8100", "#007ddd", "#00c700", "#ffb100", "#0038dd", "#00af00", "#fcd200",
    "#0000d5", "#009a00", "#f1e700", "#0000b1", "#00a55d", "#d4f700", "#4300a2", "#00aa93",
    "#a1ff00", "#dc0000", "#00aaab", "#1dff00", "#f40000", "#009fcb", "#00ef00", "#ff2d00",
    "#008ddd", "#00d700", "#ff9900", "#0078dd", "#00c200", "#ffb900", "#0025dd", "#00aa00",
    "#f9d700", "#0000c9", "#009b13", "#efed00", "#0300aa", "#00a773", "#ccf900", "#63009e",
    "#00aa98", "#84ff00", "#e10000", "#00a7b3", "#00ff00", "#f90000", "#009bd7", "#00ea00",
    "#ff4500", "#0088dd", "#00d200", "#ffa100", "#005ddd", "#00bc00", "#ffc100", "#0013dd",
    "#00a400", "#f7dd00", "#0000c1", "#009f33", "#e8f000", "#1800a7", "#00aa88", "#c4fc00",
    "#78009b", "#00aaa0", "#67ff00", "#e60000", "#00a4bb", "#00fa00", "#fe0000", "#0098dd",
    "#00e200", "#ff5d00", "#0082dd", "#00cc00", "#ffa900", "#004bdd", "#00b400", "#ffc900",
    "#0000dd", "#009f00", "#f4e200", "#0000b9", "#00a248", "#dcf400", "#2d00a4", "#00aa8d",
    "#bcff00",
)


@dataclass(frozen=True)
class AnnotationRegion:
    """A titled, coloured interval drawn under a contig's bundle track."""

    bgn: int
    end: int
    title: str
    color: str


@dataclass
class Dendrogram:
    """Leaves, internal nodes and node positions read from a dendrogram file."""

    leaves: list[tuple[int, str]] = field(default_factory=list)
    internal_nodes: list[tuple[int, int, int, int, float]] = field(default_factory=list)
    positions: dict[int, tuple[float, float, int]] = field(default_factory=dict)


def _parse_u32(text: str, message: str) -> int:
    if not _UNSIGNED_RE.fullmatch(text):
        raise ValueError(message)
    value = int(text)
    if value > _U32_MAX:
        raise ValueError(message)
    return value


def _parse_usize(text: str, message: str) -> int:
    if not _UNSIGNED_RE.fullmatch(text):
        raise ValueError(message)
    return int(text)


def _parse_i64(text: str, message: str) -> int:
    if not _SIGNED_RE.fullmatch(text):
        raise ValueError(message)
    value = int(text)
    if not _I64_MIN <= value <= _I64_MAX:
        raise ValueError(message)
    return value


def _parse_f32(text: str, message: str) -> float:
    if "_" in text:
        raise ValueError(message)
    try:
        return _to_f32(float(text))
    except (ValueError, OverflowError):
        raise ValueError(message) from None


def _data_lines(path: str | PathLike[str]):
    with open(path, encoding="utf-8") as handle:
        for line in handle:
            line = line.strip()
            if line and not line.startswith("#"):
                yield line


def read_svg_bundle_bed(
    path: str | PathLike[str],
) -> tuple[dict[str, list[BundleRecord]], int]:
    """Read (bgn, end, bundle_id, direction) records per contig and the largest end."""
    ctg_data: dict[str, list[BundleRecord]] = {}
    max_range = 0
    for line in _data_lines(path):
        fields = line.split("\t")
        if len(fields) < 4:
            raise ValueError(_BED_ERROR)
        bgn = _parse_u32(fields[1], _BED_ERROR)
        end = _parse_u32(fields[2], _BED_ERROR)
        max_range = max(max_range, end)
        bundle_fields = fields[3].split(":")
        if len(bundle_fields) < 3:
            raise ValueError(_BED_ERROR)
        bundle_id = _parse_u32(bundle_fields[0], _BED_ERROR)
        bundle_dir = _parse_u32(bundle_fields[2], _BED_ERROR)
        ctg_data.setdefault(fields[0], []).append((bgn, end, bundle_id, bundle_dir))
    return ctg_data, max_range


def read_annotation_regions(path: str | PathLike[str]) -> dict[str, list[AnnotationRegion]]:
    """Read 'contig, bgn, end, title, color' lines grouped by contig in file order."""
    regions: dict[str, list[AnnotationRegion]] = {}
    for line in _data_lines(path):
        fields = line.split("\t")
        if len(fields) < 5:
            raise ValueError(_REGION_ERROR)
        region = AnnotationRegion(
            bgn=_parse_u32(fields[1], _REGION_ERROR),
            end=_parse_u32(fields[2], _REGION_ERROR),
            title=fields[3],
            color=fields[4],
        )
        regions.setdefault(fields[0], []).append(region)
    return regions


def read_offsets(path: str | PathLike[str]) -> dict[str, int]:
    """Read 'contig<TAB>offset' lines; a later line for a contig replaces an earlier one."""
    offsets: dict[str, int] = {}
    for line in _data_lines(path):
        fields = line.split("\t")
        if len(fields) < 2:
            raise ValueError(_OFFSET_ERROR)
        offsets[fields[0]] = _parse_i64(fields[1], _OFFSET_ERROR)
    return offsets


def read_annotations(path: str | PathLike[str]) -> list[tuple[str, str]]:
    """Read 'contig[<TAB>annotation]' lines in order; a missing annotation is ''."""
    result: list[tuple[str, str]] = []
    for line in _data_lines(path):
        fields = line.split("\t")
        annotation = fields[1] if len(fields) > 1 else ""
        result.append((fields[0], annotation))
    return result


def read_dendrogram(path: str | PathLike[str]) -> Dendrogram:
    """Read the L, I and P records of a dendrogram file; other lines are ignored."""
    dendrogram = Dendrogram()
    with open(path, encoding="utf-8") as handle:
        for line in handle:
            fields = line.strip().split("\t")
            tag = fields[0]
            try:
                if tag == "L":
                    dendrogram.leaves.append((_parse_usize(fields[1], _DDG_ERROR), fields[2]))
                elif tag == "I":
                    dendrogram.internal_nodes.append(
                        (
                            _parse_usize(fields[1], _DDG_ERROR),
                            _parse_usize(fields[2], _DDG_ERROR),
                            _parse_usize(fields[3], _DDG_ERROR),
                            _parse_usize(fields[4], _DDG_ERROR),
                            _parse_f32(fields[5], _DDG_ERROR),
                        )
                    )
                elif tag == "P":
                    node_id = _parse_usize(fields[1], _DDG_ERROR)
                    dendrogram.positions[node_id] = (
                        _parse_f32(fields[2], _DDG_ERROR),
                        _parse_f32(fields[3], _DDG_ERROR),
                        _parse_usize(fields[4], _DDG_ERROR),
                    )
            except IndexError:
                raise ValueError(_DDG_ERROR) from None
    return dendrogram


def track_range_for(max_range: int, track_range: int | None = None) -> int:
    """The explicit track range, or max_range rounded up to 10 kb (at least 10 kb)."""
    if track_range is not None:
        return track_range
    rounded = int(math.ceil(_to_f32(max_range / 10000.0)) * 10000)
    return max(rounded, MIN_TRACK_RANGE)


def tick_interval_for(track_range: int) -> int:
    """A power of ten giving roughly ten ticks or fewer across the track."""
    step = _to_f32(0.1)
    tick = 1
    tmp = _to_f32(_to_f32(float(track_range)) * step)
    while tmp > 1.01:
        tick *= 10
        tmp = _to_f32(tmp * step)
    return tick


def bundle_colors(bundle_id: int) -> tuple[str, str]:
    """Fill and stroke colours for a bundle."""
    fill = CMAP[((bundle_id * 57) & _U32_MAX) % 59]
    stroke = CMAP[93 - ((bundle_id * 31) & _U32_MAX) % 47]
    return fill, stroke