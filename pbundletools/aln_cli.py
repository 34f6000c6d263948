"""Bundle-decomposition alignment of selected contigs, written as JSON."""

from __future__ import annotations

import argparse
import dataclasses
import json
from collections.abc import Mapping, Sequence
from os import PathLike
from pathlib import Path

from pbundletools.align import AlnType, align_bundles
from pbundletools.bundles import BundleSegment, read_bundle_bed

PathStep = tuple[int, int, AlnType, BundleSegment, BundleSegment]
AlignmentPath = tuple[str, str, list[PathStep]]


def _with_extension(prefix: str, ext: str) -> Path:
    path = Path(prefix)
    return path.with_name(f"{path.stem}.{ext}")


def read_contig_list(path: str | PathLike[str]) -> list[str]:
    """Read the contig names to align, one per line, surrounding whitespace removed."""
    with open(path, encoding="utf-8") as handle:
        return [line.strip() for line in handle]


def build_alignment_paths(
    ctg_data: Mapping[str, Sequence[BundleSegment]], ctg_names: Sequence[str]
) -> list[AlignmentPath]:
    """Align every listed contig (query) to the first listed one (target).

    Each path step is (q_idx, t_idx, aln_type, target_segment, query_segment).
    """
    selected = []
    for name in ctg_names:
        if name not in ctg_data:
            raise KeyError(f"ctg name not found: {name}")
        selected.append((name, ctg_data[name]))
    if not selected:
        return []

    target_ctg, target_bundles = selected[0]
    paths: list[AlignmentPath] = []
    for query_ctg, query_bundles in selected[1:]:
        alignment = align_bundles(query_bundles, target_bundles)
        steps = [
            (
                step.q_idx,
                step.t_idx,
                step.aln_type,
                target_bundles[step.t_idx],
                query_bundles[step.q_idx],
            )
            for step in alignment.path
        ]
        paths.append((target_ctg, query_ctg, steps))
    return paths


def _to_json(paths: list[AlignmentPath]) -> str:
    payload = [
        [
            target,
            query,
            [
                [q_idx, t_idx, aln_type.value, dataclasses.asdict(t_seg), dataclasses.asdict(q_seg)]
                for q_idx, t_idx, aln_type, t_seg, q_seg in steps
            ],
        ]
        for target, query, steps in paths
    ]
    return json.dumps(payload, sort_keys=True, separators=(",", ":"))


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="pgr-pbundle-aln",
        description="Generate alignment between sequences using bundle decomposition "
        "from a principal bundle bed file",
    )
    parser.add_argument("bed_file_path", help="the path to the principal bundle bed file")
    parser.add_argument(
        "aln_spec", help="a file with the contig ids that should be aligned to each other"
    )
    parser.add_argument("output_prefix", help="the prefix of the output file")
    args = parser.parse_args(argv)

    ctg_data = read_bundle_bed(args.bed_file_path)
    ctg_names = read_contig_list(args.aln_spec)
    paths = build_alignment_paths(ctg_data, ctg_names)

    out_path = _with_extension(args.output_prefix, "bln.json")
    out_path.write_text(_to_json(paths), encoding="utf-8")
    return 0