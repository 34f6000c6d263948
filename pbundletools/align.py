"""Dynamic-programming alignment of two contigs' bundle decompositions."""

from __future__ import annotations

import enum
from collections.abc import Sequence
from dataclasses import dataclass, field

from pbundletools.bundles import BundleSegment

_NO_SCORE = float("-inf")


class AlnType(enum.Enum):
    """Kind of step in a bundle alignment path."""

    MATCH = "Match"
    INSERTION = "Insertion"
    DELETION = "Deletion"


@dataclass(frozen=True)
class AlignmentStep:
    """One step of the traced-back alignment path."""

    q_idx: int
    t_idx: int
    aln_type: AlnType
    q_bundle_id: int
    t_bundle_id: int
    diff_len_delta: int
    max_len_delta: int


@dataclass(frozen=True)
class Alignment:
    """Result of aligning a query bundle list against a target bundle list."""

    distance: float
    diff_len: int
    max_len: int
    path: list[AlignmentStep] = field(default_factory=list)


def _same_bundle(q: BundleSegment, t: BundleSegment) -> bool:
    return q.bundle_id == t.bundle_id and q.bundle_dir == t.bundle_dir


def align_bundles(
    q_bundles: Sequence[BundleSegment], t_bundles: Sequence[BundleSegment]
) -> Alignment:
    """Align two bundle sequences; matches score twice the shorter length,
    gaps cost twice the length of the opposite segment."""
    if not q_bundles or not t_bundles:
        raise ValueError("cannot align an empty bundle list")

    scores: dict[tuple[int, int], float] = {}
    moves: dict[tuple[int, int], AlnType] = {}

    for t_idx, t_seg in enumerate(t_bundles):
        for q_idx, q_seg in enumerate(q_bundles):
            q_len = q_seg.length()
            t_len = t_seg.length()
            min_len = min(q_len, t_len)
            best_type, best_score = AlnType.MATCH, _NO_SCORE
            if _same_bundle(q_seg, t_seg):
                if q_idx == 0 and t_idx == 0:
                    best_score = 2 * min_len
                elif q_idx > 0 and t_idx > 0:
                    best_score = 2 * min_len + scores[(q_idx - 1, t_idx - 1)]
            if t_idx > 0:
                score = -2 * q_len + scores[(q_idx, t_idx - 1)]
                if score > best_score:
                    best_type, best_score = AlnType.DELETION, score
            if q_idx > 0:
                score = -2 * t_len + scores[(q_idx - 1, t_idx)]
                if score > best_score:
                    best_type, best_score = AlnType.INSERTION, score
            moves[(q_idx, t_idx)] = best_type
            scores[(q_idx, t_idx)] = best_score

    q_idx = len(q_bundles) - 1
    t_idx = len(t_bundles) - 1
    diff_len = 0
    max_len = 1
    path: list[AlignmentStep] = []
    while (aln_type := moves.get((q_idx, t_idx))) is not None:
        q_seg = q_bundles[q_idx]
        t_seg = t_bundles[t_idx]
        if aln_type is AlnType.MATCH:
            q_len, t_len = q_seg.length(), t_seg.length()
            diff_delta = abs(q_len - t_len)
            max_delta = max(q_len, t_len)
            next_q, next_t = q_idx - 1, t_idx - 1
        elif aln_type is AlnType.INSERTION:
            diff_delta = max_delta = q_seg.length()
            next_q, next_t = q_idx - 1, t_idx
        else:
            diff_delta = max_delta = t_seg.length()
            next_q, next_t = q_idx, t_idx - 1
        diff_len += diff_delta
        max_len += max_delta
        path.append(
            AlignmentStep(
                q_idx,
                t_idx,
                aln_type,
                q_seg.bundle_id,
                t_seg.bundle_id,
                diff_delta,
                max_delta,
            )
        )
        q_idx, t_idx = next_q, next_t

    path.reverse()
    return Alignment(diff_len / max_len, diff_len, max_len, path)