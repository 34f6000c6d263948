import pytest

from pbundletools.align import AlnType, align_bundles
from pbundletools.bundles import BundleSegment


def _seg(bgn, end, bundle_id, direction=0):
    return BundleSegment(bgn, end, bundle_id, 10, direction, 0, 9)


A = _seg(0, 100, 1)
B = _seg(100, 150, 2)
C = _seg(150, 250, 3)


def test_identical_lists_align_perfectly():
    bundles = [A, B, C]
    aln = align_bundles(bundles, bundles)
    assert aln.diff_len == 0
    assert aln.distance == 0
    assert aln.max_len == 1 + sum(s.length() for s in bundles)
    assert [step.aln_type for step in aln.path] == [AlnType.MATCH] * 3
    assert [(s.q_idx, s.t_idx) for s in aln.path] == [(0, 0), (1, 1), (2, 2)]


def test_extra_query_bundle_is_insertion():
    aln = align_bundles([A, B, C], [A, C])
    assert [s.aln_type for s in aln.path] == [
        AlnType.MATCH,
        AlnType.INSERTION,
        AlnType.MATCH,
    ]
    assert [(s.q_idx, s.t_idx) for s in aln.path] == [(0, 0), (1, 0), (2, 1)]
    assert aln.diff_len == B.length()
    assert aln.distance == aln.diff_len / aln.max_len


def test_extra_target_bundle_is_deletion():
    aln = align_bundles([A, C], [A, B, C])
    assert [s.aln_type for s in aln.path] == [
        AlnType.MATCH,
        AlnType.DELETION,
        AlnType.MATCH,
    ]
    assert aln.diff_len == B.length()


def test_path_records_bundle_ids():
    q = [A, B, C]
    t = [A, C]
    aln = align_bundles(q, t)
    for step in aln.path:
        assert step.q_bundle_id == q[step.q_idx].bundle_id
        assert step.t_bundle_id == t[step.t_idx].bundle_id
    assert sum(s.diff_len_delta for s in aln.path) == aln.diff_len
    assert 1 + sum(s.max_len_delta for s in aln.path) == aln.max_len


@pytest.mark.parametrize("q,t", [([], [A]), ([A], []), ([], [])])
def test_empty_input_raises(q, t):
    with pytest.raises(ValueError):
        align_bundles(q, t)