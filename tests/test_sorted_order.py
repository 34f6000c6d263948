from pbundletools.bundles import BundleSegment
from pbundletools.sorted_order import main, node_length_order, sort_keys


def seg(bgn, end, bid, direction=0, major=True):
    return BundleSegment(bgn, end, bid, 10, direction, 0, 10 if major else 2)


def test_node_length_order_longest_first_and_major_only():
    data = {
        "A": [seg(0, 100, 1), seg(100, 150, 2), seg(150, 400, 3, major=False)],
    }
    assert node_length_order(data) == [(1, 0), (2, 0)]


def test_node_length_order_separates_directions():
    data = {"A": [seg(0, 30, 5, 0), seg(30, 300, 5, 1)]}
    assert node_length_order(data) == [(5, 1), (5, 0)]


def test_sort_keys_more_copies_first():
    data = {
        "B": [seg(0, 100, 1), seg(100, 150, 2)],
        "A": [seg(0, 100, 1), seg(100, 200, 1), seg(200, 250, 2)],
    }
    result = sort_keys(data)
    order = node_length_order(data)
    assert [ctg for ctg, _ in result] == ["A", "B"]
    assert all(len(key) == len(order) for _, key in result)
    assert result[0][1] > result[1][1]


def test_sort_keys_ties_broken_by_name_descending():
    segs = [seg(0, 100, 1)]
    result = sort_keys({"a": segs, "b": list(segs)})
    assert [ctg for ctg, _ in result] == ["b", "a"]
    assert result[0][1] == result[1][1]


def test_main_writes_ord_file(tmp_path):
    bed = tmp_path / "in.bed"
    bed.write_text(
        "# header\n"
        "c1\t0\t100\t1:10:0:0:10\n"
        "c2\t0\t100\t1:10:0:0:10\n"
        "c2\t100\t300\t1:10:0:0:10\n"
        "\n"
        "c3\t0\t40\t2:10:1:0:10\n"
    )
    assert main([str(bed), str(tmp_path / "out")]) == 0
    lines = (tmp_path / "out.ord").read_text().splitlines()
    assert [line.split("\t")[0] for line in lines][0] == "c2"
    assert sorted(line.split("\t")[0] for line in lines) == ["c1", "c2", "c3"]
    keys = [[int(v) for v in line.split("\t")[1].split(",")] for line in lines]
    assert keys == sorted(keys, reverse=True)