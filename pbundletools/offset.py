"""Offsets that line contigs up with the first one by their best-scoring bundle anchor."""

from __future__ import annotations

import argparse
from collections.abc import Mapping, Sequence
from os import PathLike
from pathlib import Path

from pbundletools.align import AlnType
from pbundletools.bundles import BundleSegment, read_bundle_bed

ScoredStep = tuple[int, int, AlnType, int, int, int]


def _with_extension(prefix: str, ext: str) -> Path:
    path = Path(prefix)
    return path.with_name(f"{path.stem}.{ext}")


def _same_bundle(q: BundleSegment, t: BundleSegment) -> bool:
    return q.bundle_id == t.bundle_id and q.bundle_dir == t.bundle_dir


def align_bundles_scored(
    q_bundles: Sequence[BundleSegment], t_bundles: Sequence[BundleSegment]
) -> tuple[float, int, int, list[ScoredStep]]:
    """Align two bundle lists, keeping the cumulative score of every path step.

    Matches score twice the shorter length; a step along the target (INSERTION)
    costs the query segment length, a step along the query (DELETION) costs the
    target segment length. Returns (distance, diff_len, max_len, path) where each
    path step is (q_idx, t_idx, aln_type, q_bundle_id, t_bundle_id, score).
    """
    if not q_bundles or not t_bundles:
        raise ValueError("cannot align an empty bundle list")

    scores: dict[tuple[int, int], int] = {}
    moves: dict[tuple[int, int], AlnType] = {}

    for t_idx, t_seg in enumerate(t_bundles):
        for q_idx, q_seg in enumerate(q_bundles):
            q_len = q_seg.length()
            t_len = t_seg.length()
            min_len = min(q_len, t_len)
            best_type = AlnType.MATCH
            best_score: int | None = None
            if q_idx == 0 and t_idx == 0:
                best_score = 2 * min_len if _same_bundle(q_seg, t_seg) else 0
            if q_idx > 0 and t_idx > 0 and _same_bundle(q_seg, t_seg):
                best_score = 2 * min_len + scores[(q_idx - 1, t_idx - 1)]
            if t_idx > 0:
                score = -q_len + scores[(q_idx, t_idx - 1)]
                if best_score is None or score > best_score:
                    best_type, best_score = AlnType.INSERTION, score
            if q_idx > 0:
                score = -t_len + scores[(q_idx - 1, t_idx)]
                if best_score is None or score > best_score:
                    best_type, best_score = AlnType.DELETION, score
            assert best_score is not None
            moves[(q_idx, t_idx)] = best_type
            scores[(q_idx, t_idx)] = best_score

    q_idx = len(q_bundles) - 1
    t_idx = len(t_bundles) - 1
    diff_len = 0
    max_len = 1
    path: list[ScoredStep] = []
    while (aln_type := moves.get((q_idx, t_idx))) is not None:
        q_seg = q_bundles[q_idx]
        t_seg = t_bundles[t_idx]
        if aln_type is AlnType.MATCH:
            q_len, t_len = q_seg.length(), t_seg.length()
            diff_delta = abs(q_len - t_len)
            max_delta = max(q_len, t_len)
            next_q, next_t = q_idx - 1, t_idx - 1
        elif aln_type is AlnType.DELETION:
            diff_delta = max_delta = q_seg.length()
            next_q, next_t = q_idx - 1, t_idx
        else:
            diff_delta = max_delta = t_seg.length()
            next_q, next_t = q_idx, t_idx - 1
        diff_len += diff_delta
        max_len += max_delta
        path.append(
            (
                q_idx,
                t_idx,
                aln_type,
                q_seg.bundle_id,
                t_seg.bundle_id,
                scores.get((q_idx, t_idx), 0),
            )
        )
        q_idx, t_idx = next_q, next_t

    path.reverse()
    return diff_len / max_len, diff_len, max_len, path


def read_contigs_of_interest(
    path: str | PathLike[str], ctg_data: Mapping[str, Sequence[BundleSegment]]
) -> list[tuple[str, str, list[BundleSegment]]]:
    """Read 'contig[<TAB>annotation]' lines, returning (contig, annotation, segments)."""
    result: list[tuple[str, str, list[BundleSegment]]] = []
    with open(path, encoding="utf-8") as handle:
        for line in handle:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            fields = line.split("\t")
            ctg = fields[0]
            if ctg not in ctg_data:
                raise KeyError(f"ctg name not found: {ctg}")
            annotation = fields[1] if len(fields) > 1 else ""
            result.append((ctg, annotation, list(ctg_data[ctg])))
    return result


def anchor_offset(
    q_bundles: Sequence[BundleSegment],
    t_bundles: Sequence[BundleSegment],
    alt_mode: bool = False,
) -> int:
    """Offset to add to query positions so its anchor bundle lines up with the target.

    The default anchor ends the best local run of path score gains; in the
    alternate mode it is the step with the single largest score gain.
    """
    _, _, _, path = align_bundles_scored(q_bundles, t_bundles)
    best_anchor: tuple[int, int] | None = None
    best_single_anchor: tuple[int, int] | None = None
    last_global = 0
    current = 0
    best = 0
    best_single = 0
    for q_idx, t_idx, _aln_type, _q_bid, _t_bid, global_score in path:
        gain = global_score - last_global
        if gain > best_single:
            best_single = gain
            best_single_anchor = (q_idx, t_idx)
        current = max(current + gain, 0)
        if current > best:
            best = current
            best_anchor = (q_idx, t_idx)
        last_global = global_score

    anchor = best_single_anchor if alt_mode else best_anchor
    if anchor is None:
        return 0
    return t_bundles[anchor[1]].bgn - q_bundles[anchor[0]].bgn


def compute_offsets(
    ctg_items: Sequence[tuple[str, Sequence[BundleSegment]]], alt_mode: bool = False
) -> list[tuple[str, int]]:
    """Offsets of every contig relative to the first one, which gets 0."""
    if not ctg_items:
        raise ValueError("no contigs to compute offsets for")
    ref_ctg, ref_bundles = ctg_items[0]
    offsets = [(ref_ctg, 0)]
    for ctg, bundles in ctg_items[1:]:
        offsets.append((ctg, anchor_offset(bundles, ref_bundles, alt_mode)))
    return offsets


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="pgr-pbundle-bed2offset",
        description="Generate offsets between sequences using bundle decomposition "
        "from a principal bundle bed file",
    )
    parser.add_argument("bed_file_path", help="the path to the principal bundle bed file")
    parser.add_argument("output_prefix", help="the prefix of the output file")
    parser.add_argument("--ctgs-of-interest", dest="ctgs_of_interest", default=None)
    parser.add_argument(
        "--alt-anchoring-mode",
        dest="alt_anchoring_mode",
        action="store_true",
        help="use alternate anchoring method",
    )
    args = parser.parse_args(argv)

    ctg_data = read_bundle_bed(args.bed_file_path)
    if args.ctgs_of_interest is not None:
        items = [
            (ctg, data)
            for ctg, _annotation, data in read_contigs_of_interest(
                args.ctgs_of_interest, ctg_data
            )
        ]
    else:
        items = sorted(ctg_data.items())

    offsets = compute_offsets(items, args.alt_anchoring_mode)
    with open(_with_extension(args.output_prefix, "offset"), "w", encoding="utf-8") as out:
        for ctg, offset in offsets:
            out.write(f"{ctg}\t{offset}\n")
    return 0