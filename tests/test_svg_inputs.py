import pytest

from pbundletools.svg_inputs import (
    CMAP,
    AnnotationRegion,
    bundle_colors,
    read_annotation_regions,
    read_annotations,
    read_dendrogram,
    read_offsets,
    read_svg_bundle_bed,
    tick_interval_for,
    track_range_for,
)


def _write(tmp_path, name, text):
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


def test_read_svg_bundle_bed_groups_and_max(tmp_path):
    path = _write(
        tmp_path,
        "b.bed",
        "# header\n\nctgA\t0\t100\t3:10:0:1:9\nctgB\t5\t900\t4:10:1:0:9\nctgA\t100\t250\t4:10:1:0:9\n",
    )
    data, max_range = read_svg_bundle_bed(path)
    assert data["ctgA"] == [(0, 100, 3, 0), (100, 250, 4, 1)]
    assert data["ctgB"] == [(5, 900, 4, 1)]
    assert max_range == 900


def test_read_svg_bundle_bed_bad_number(tmp_path):
    path = _write(tmp_path, "b.bed", "ctgA\tx\t100\t3:10:0:1:9\n")
    with pytest.raises(ValueError, match="bed file parsing error"):
        read_svg_bundle_bed(path)


def test_read_svg_bundle_bed_missing_field(tmp_path):
    path = _write(tmp_path, "b.bed", "ctgA\t0\t100\n")
    with pytest.raises(ValueError):
        read_svg_bundle_bed(path)


def test_read_annotation_regions(tmp_path):
    path = _write(tmp_path, "r.bed", "ctgA\t10\t20\tgeneX\t#ff0000\nctgA\t30\t40\tgeneY\tblue\n")
    regions = read_annotation_regions(path)
    assert regions == {
        "ctgA": [
            AnnotationRegion(10, 20, "geneX", "#ff0000"),
            AnnotationRegion(30, 40, "geneY", "blue"),
        ]
    }


def test_read_annotation_regions_error(tmp_path):
    path = _write(tmp_path, "r.bed", "ctgA\t10\t20\tgeneX\n")
    with pytest.raises(ValueError, match="annotation bed file parsing error"):
        read_annotation_regions(path)


def test_read_offsets_last_wins_and_negative(tmp_path):
    path = _write(tmp_path, "o.offset", "ctgA\t5\nctgB\t-12\nctgA\t7\n")
    assert read_offsets(path) == {"ctgA": 7, "ctgB": -12}


def test_read_offsets_error(tmp_path):
    path = _write(tmp_path, "o.offset", "ctgA\tabc\n")
    with pytest.raises(ValueError, match="offset file parsing error"):
        read_offsets(path)


def test_read_annotations(tmp_path):
    path = _write(tmp_path, "a.txt", "ctgB\tsecond label\n#skip\nctgA\n")
    assert read_annotations(path) == [("ctgB", "second label"), ("ctgA", "")]


def test_read_dendrogram(tmp_path):
    path = _write(
        tmp_path,
        "t.ddg",
        "L\t1\tctgB\nL\t0\tctgA\nI\t2\t0\t1\t2\t0.5\nP\t0\t1\t0\t1\nP\t1\t0\t0\t1\nP\t2\t0.5\t0.5\t2\nX\tignored\n",
    )
    ddg = read_dendrogram(path)
    assert ddg.leaves == [(1, "ctgB"), (0, "ctgA")]
    assert ddg.internal_nodes == [(2, 0, 1, 2, 0.5)]
    assert ddg.positions[2] == (0.5, 0.5, 2)
    assert set(ddg.positions) == {0, 1, 2}


def test_read_dendrogram_error(tmp_path):
    path = _write(tmp_path, "t.ddg", "I\t2\t0\n")
    with pytest.raises(ValueError, match="dendrogram"):
        read_dendrogram(path)


def test_track_range_explicit_and_minimum():
    assert track_range_for(123456, 777) == 777
    assert track_range_for(0) == 10000
    assert track_range_for(10000) == 10000


def test_track_range_rounds_up():
    assert track_range_for(12345) == 20000
    for value in (1, 9999, 10001, 55555):
        result = track_range_for(value)
        assert result >= value
        assert result % 10000 == 0
        assert result - value < 10000 or value < 10000


def test_tick_interval():
    assert tick_interval_for(10000) == 1000
    for track in (10000, 20000, 150000, 2_000_000):
        tick = tick_interval_for(track)
        assert tick <= track
        assert track / tick <= 100


def test_bundle_colors_pinned():
    assert bundle_colors(0) == ("#870098", "#dcf400")
    assert bundle_colors(1) == ("#0088dd", "#ffc100")


def test_bundle_colors_in_palette():
    for bundle_id in range(200):
        fill, stroke = bundle_colors(bundle_id)
        assert fill in CMAP
        assert stroke in CMAP
    assert bundle_colors(59)[0] == bundle_colors(0)[0]