import json

import pytest

from pbundletools.align import AlnType, align_bundles
from pbundletools.aln_cli import build_alignment_paths, main, read_contig_list
from pbundletools.bundles import BundleSegment


def seg(bgn, end, bid, direction=0):
    return BundleSegment(bgn, end, bid, 10, direction, 0, 10)


def write_bed(path, data):
    lines = []
    for ctg, segs in data.items():
        for s in segs:
            lines.append(
                f"{ctg}\t{s.bgn}\t{s.end}\t{s.bundle_id}:{s.bundle_v_count}:"
                f"{s.bundle_dir}:{s.bundle_v_bgn}:{s.bundle_v_end}"
            )
    path.write_text("\n".join(lines) + "\n")


def test_read_contig_list_strips_whitespace(tmp_path):
    spec = tmp_path / "spec.txt"
    spec.write_text(" ctg1 \nctg2\n")
    assert read_contig_list(spec) == ["ctg1", "ctg2"]


def test_identical_contigs_align_by_matches():
    segs = [seg(0, 100, 1), seg(100, 250, 2)]
    data = {"t": segs, "q": list(segs)}
    paths = build_alignment_paths(data, ["t", "q"])
    assert len(paths) == 1
    target, query, steps = paths[0]
    assert (target, query) == ("t", "q")
    assert [s[2] for s in steps] == [AlnType.MATCH, AlnType.MATCH]
    assert [(s[0], s[1]) for s in steps] == [(0, 0), (1, 1)]
    assert all(s[3] == s[4] for s in steps)


def test_single_contig_gives_no_paths():
    assert build_alignment_paths({"t": [seg(0, 10, 1)]}, ["t"]) == []


def test_missing_contig_raises():
    with pytest.raises(KeyError):
        build_alignment_paths({"t": [seg(0, 10, 1)]}, ["t", "absent"])


def test_main_writes_json(tmp_path):
    t_segs = [seg(0, 100, 1), seg(100, 300, 2), seg(300, 350, 3)]
    q_segs = [seg(0, 120, 1), seg(120, 300, 2)]
    bed = tmp_path / "in.bed"
    write_bed(bed, {"t": t_segs, "q": q_segs})
    spec = tmp_path / "spec.txt"
    spec.write_text("t\nq\n")
    assert main([str(bed), str(spec), str(tmp_path / "out")]) == 0

    data = json.loads((tmp_path / "out.bln.json").read_text())
    expected = align_bundles(q_segs, t_segs)
    assert len(data) == 1
    assert data[0][:2] == ["t", "q"]
    assert len(data[0][2]) == len(expected.path)
    for entry, step in zip(data[0][2], expected.path):
        assert entry[0] == step.q_idx
        assert entry[1] == step.t_idx
        assert entry[2] == step.aln_type.value
        assert entry[3]["bgn"] == t_segs[step.t_idx].bgn
        assert entry[4]["end"] == q_segs[step.q_idx].end


def test_main_replaces_prefix_extension(tmp_path):
    bed = tmp_path / "in.bed"
    write_bed(bed, {"t": [seg(0, 10, 1)]})
    spec = tmp_path / "spec.txt"
    spec.write_text("t\n")
    main([str(bed), str(spec), str(tmp_path / "out.txt")])
    assert json.loads((tmp_path / "out.bln.json").read_text()) == []