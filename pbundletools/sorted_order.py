"""Ordering of contigs by counts of their long principal bundles."""

from __future__ import annotations

import argparse
from collections import Counter, defaultdict
from collections.abc import Mapping, Sequence
from pathlib import Path

from pbundletools.bundles import BundleSegment, read_bundle_bed

Node = tuple[int, int]


def _with_extension(prefix: str, ext: str) -> Path:
    path = Path(prefix)
    return path.with_name(f"{path.stem}.{ext}")


def node_length_order(ctg_data: Mapping[str, Sequence[BundleSegment]]) -> list[Node]:
    """(bundle_id, direction) nodes of major segments, by mean length, longest first."""
    lengths: dict[Node, list[int]] = defaultdict(list)
    for segments in ctg_data.values():
        for segment in segments:
            if segment.is_major():
                lengths[(segment.bundle_id, segment.bundle_dir)].append(segment.length())
    ranked = sorted(
        ((sum(values) / len(values), node) for node, values in lengths.items()),
        reverse=True,
    )
    return [node for _, node in ranked]


def sort_keys(
    ctg_data: Mapping[str, Sequence[BundleSegment]],
) -> list[tuple[str, list[int]]]:
    """Contigs with their per-node major-segment counts, in descending key order."""
    order = node_length_order(ctg_data)
    keyed = []
    for ctg, segments in ctg_data.items():
        counts = Counter(
            (s.bundle_id, s.bundle_dir) for s in segments if s.is_major()
        )
        keyed.append(([counts.get(node, 0) for node in order], ctg))
    keyed.sort(reverse=True)
    return [(ctg, key) for key, ctg in keyed]


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="pgr-pbundle-bed2sorted",
        description="Generate annotation file with a sorting order from the "
        "principal bundle decomposition",
    )
    parser.add_argument("bed_file_path", help="the path to the principal bundle bed file")
    parser.add_argument("output_prefix", help="the prefix of the output file")
    args = parser.parse_args(argv)

    ctg_data = read_bundle_bed(args.bed_file_path)
    with open(_with_extension(args.output_prefix, "ord"), "w", encoding="utf-8") as out:
        for ctg, key in sort_keys(ctg_data):
            out.write(f"{ctg}\t{','.join(str(k) for k in key)}\n")
    return 0