"""Pairwise bundle-alignment distances, average-linkage tree and dendrogram."""

from __future__ import annotations

import argparse
import itertools
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from pbundletools.align import Alignment, align_bundles
from pbundletools.bundles import BundleSegment, read_bundle_bed
from pbundletools.regions import _format_float


@dataclass(frozen=True)
class LinkageStep:
    """One merge of two clusters; new clusters are labelled n + step index."""

    cluster1: int
    cluster2: int
    dissimilarity: float
    size: int


def _with_extension(prefix: str, ext: str) -> Path:
    path = Path(prefix)
    return path.with_name(f"{path.stem}.{ext}")


def _pair(a: int, b: int) -> tuple[int, int]:
    return (a, b) if a < b else (b, a)


def average_linkage(condensed: Sequence[float], n: int) -> list[LinkageStep]:
    """Average-linkage (UPGMA) clustering of a condensed distance matrix."""
    if n < 1:
        raise ValueError("at least one observation is needed")
    if len(condensed) != n * (n - 1) // 2:
        raise ValueError("condensed matrix size does not match the observation count")

    dist = dict(zip(itertools.combinations(range(n), 2), condensed))
    sizes = {i: 1 for i in range(n)}
    steps: list[LinkageStep] = []
    for label in range(n, 2 * n - 1):
        (a, b), d = min(dist.items(), key=lambda item: item[1])
        size_a = sizes.pop(a)
        size_b = sizes.pop(b)
        merged = {
            (k, label): (size_a * dist[_pair(a, k)] + size_b * dist[_pair(b, k)])
            / (size_a + size_b)
            for k in sizes
        }
        dist = {
            key: value
            for key, value in dist.items()
            if a not in key and b not in key
        }
        dist.update(merged)
        sizes[label] = size_a + size_b
        steps.append(LinkageStep(a, b, d, size_a + size_b))
    return steps


def pairwise_distances(
    ctg_items: Sequence[tuple[str, Sequence[BundleSegment]]],
) -> dict[tuple[int, int], Alignment]:
    """For each index pair i <= j, the larger-distance alignment of the two directions."""
    result: dict[tuple[int, int], Alignment] = {}
    for i, (_, bundles0) in enumerate(ctg_items):
        for j, (_, bundles1) in enumerate(ctg_items):
            if i > j:
                continue
            aln0 = align_bundles(bundles0, bundles1)
            aln1 = align_bundles(bundles1, bundles0)
            result[(i, j)] = aln0 if aln0.distance > aln1.distance else aln1
    return result


def newick_tree(steps: Sequence[LinkageStep], n: int) -> tuple[str, list[int]]:
    """Newick text (without the final ';') and the leaf order of the root cluster."""
    nodes: dict[int, tuple[str, list[int], float]] = {
        i: (str(i), [i], 0.0) for i in range(n)
    }
    last_node = 0
    for c, step in enumerate(steps):
        text1, members1, height1 = nodes.pop(step.cluster1)
        text2, members2, height2 = nodes.pop(step.cluster2)
        d = step.dissimilarity
        if len(members1) > len(members2):
            text = f"({text1}:{_format_float(d - height1)}, {text2}:{_format_float(d - height2)})"
            members = members1 + members2
        else:
            text = f"({text2}:{_format_float(d - height2)}, {text1}:{_format_float(d - height1)})"
            members = members2 + members1
        last_node = c + n
        nodes[last_node] = (text, members, d)
    text, members, _ = nodes.get(last_node, ("", [], 0.0))
    return text, members


def dendrogram_lines(
    steps: Sequence[LinkageStep], leaf_order: Sequence[int], names: Sequence[str]
) -> list[str]:
    """Lines of the dendrogram file: leaves (L), internal nodes (I), positions (P)."""
    n = len(names)
    lines: list[str] = []
    positions: dict[int, tuple[float, float, int]] = {}
    for position, idx in enumerate(leaf_order):
        positions[idx] = (float(position), 0.0, 1)
        lines.append(f"L\t{idx}\t{names[idx]}")
    for c, step in enumerate(steps):
        pos0, _, size0 = positions[step.cluster1]
        pos1, _, size1 = positions[step.cluster2]
        pos = (size0 * pos0 + size1 * pos1) / (size0 + size1)
        lines.append(
            f"I\t{c + n}\t{step.cluster1}\t{step.cluster2}\t{step.size}\t"
            f"{_format_float(step.dissimilarity)}"
        )
        positions[c + n] = (pos, step.dissimilarity, step.size)
    for vid in sorted(positions):
        pos, height, size = positions[vid]
        lines.append(f"P\t{vid}\t{_format_float(pos)}\t{_format_float(height)}\t{size}")
    return lines


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="pgr-pbundle-bed2dist",
        description="Generate alignment scores between sequences using bundle "
        "decomposition from a principal bundle bed file",
    )
    parser.add_argument("bed_file_path", help="the path to the principal bundle bed file")
    parser.add_argument("output_prefix", help="the prefix of the output file")
    args = parser.parse_args(argv)

    ctg_items = sorted(
        (ctg, sorted(segs)) for ctg, segs in read_bundle_bed(args.bed_file_path).items()
    )
    n = len(ctg_items)
    names = [ctg for ctg, _ in ctg_items]
    distances = pairwise_distances(ctg_items)

    with open(_with_extension(args.output_prefix, "dist"), "w", encoding="utf-8") as out:
        for (i, j), aln in distances.items():
            fields = f"{_format_float(aln.distance)} {aln.diff_len} {aln.max_len}"
            out.write(f"{names[i]} {names[j]} {fields}\n")
            if i != j:
                out.write(f"{names[j]} {names[i]} {fields}\n")

    condensed = [
        distances[(i, j)].distance for i, j in itertools.combinations(range(n), 2)
    ]
    steps = average_linkage(condensed, n)
    tree, leaf_order = newick_tree(steps, n)

    _with_extension(args.output_prefix, "nwk").write_text(f"{tree};\n", encoding="utf-8")
    ddg_text = "".join(f"{line}\n" for line in dendrogram_lines(steps, leaf_order, names))
    _with_extension(args.output_prefix, "ddg").write_text(ddg_text, encoding="utf-8")
    return 0