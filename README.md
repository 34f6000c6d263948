# pbundletools

Command-line tools and a small Python library for working with
principal bundle decompositions of sequences stored in BED files.

Each line of a principal bundle BED file describes one segment of a
contig:

```
contig<TAB>bgn<TAB>end<TAB>bundle_id:bundle_v_count:bundle_dir:bundle_v_bgn:bundle_v_end
```

Empty lines and lines starting with `#` are ignored. A malformed line
raises `ValueError("bed file parsing error")`.

The package has no third-party dependencies.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Commands

Every command takes an output prefix; the output file name is the
prefix's stem with a new extension (for example `out` becomes
`out.dist`).

### `pbundle-aln`

Aligns contigs to each other by their bundle decomposition. The
alignment spec file lists contig names, one per line; the first one is
the target and every other one is aligned to it as a query. A name that
is not in the BED file raises `KeyError`.

```
pbundle-aln bundles.bed aln_spec.txt out
```

Writes `out.bln.json`: a list of `[target, query, steps]`, each step
being `[q_idx, t_idx, aln_type, target_segment, query_segment]`.

### `pbundle-bed2dist`

Computes pairwise bundle-alignment distances between all contigs
(sorted by name) and clusters them with average linkage.

```
pbundle-bed2dist bundles.bed out
```

Writes `out.dist` (`ctg0 ctg1 distance diff_len max_len`, both
orderings of each pair), `out.nwk` (Newick tree) and `out.ddg`
(dendrogram with `L`, `I` and `P` records, usable by
`pbundle-bed2svg --ddg-file`).

### `pbundle-bed2sorted`

Orders contigs by how often they contain the longest bundles. Only
segments covering more than half of their bundle's vertices count.

```
pbundle-bed2sorted bundles.bed out
```

Writes `out.ord`, one contig per line with its comma-separated sort key.

### `pbundle-bed2offset`

Computes a horizontal offset for each contig so that it lines up with
the first contig at the best-scoring anchor point of their bundle
alignment. Without `--ctgs-of-interest` all contigs are used, sorted by
name; with it, the contigs listed in that file (one per line, an
optional tab-separated annotation after the name) in file order.
`--alt-anchoring-mode` anchors on the single step with the largest
score gain instead of the best run of gains.

```
pbundle-bed2offset bundles.bed out [--ctgs-of-interest FILE] [--alt-anchoring-mode]
```

Writes `out.offset` (`contig<TAB>offset`), usable by
`pbundle-bed2svg --offsets`.

### `pbundle-bed2svg`

Draws the bundle decomposition of every contig as an SVG, optionally
with a dendrogram tree, annotation text, annotated regions and offsets.

```
pbundle-bed2svg bundles.bed out --ddg-file out.ddg --offsets out.offset --html
```

Writes `out.svg`, and with `--html` also `out.html`, whose script
toggles highlighting of all segments of a bundle when one is clicked.

Input options:

- `--ddg-file`: dendrogram file; tracks follow its leaf order and the
  tree is drawn on the left.
- `--annotations`: `contig[<TAB>text]` lines; tracks follow this order
  and the text is shown on the right (default: contig names, sorted).
- `--annotation-region-bedfile`: `contig, bgn, end, title, color` lines
  drawn as coloured lines under each track.
- `--offsets`: `contig<TAB>offset` lines shifting each track.

Layout options: `--track-range`, `--track-tick-interval`,
`--track-panel-width` (1600), `--track-scaling` (1.0),
`--left-padding` (30), `--stroke-width` (0.5),
`--annotation-region-stroke-width` (2.5), `--annotation-panel-width`
(500.0), `--highlight-repeats` (1.0; above 1.0001 widens the border of
bundles occurring more than once on a contig), `--no-tooltips`,
`--h-factor` (1.5). Run `pbundle-bed2svg --help` for the full list.

## Library use

```python
from pbundletools.bundles import read_bundle_bed
from pbundletools.align import align_bundles

ctg_data = read_bundle_bed("bundles.bed")
alignment = align_bundles(ctg_data["ctg_a"], ctg_data["ctg_b"])
print(alignment.distance, alignment.diff_len, alignment.max_len)
for step in alignment.path:
    print(step.q_idx, step.t_idx, step.aln_type)
```

Modules:

- `pbundletools.bundles`: `BundleSegment`, `parse_bundle_line`,
  `iter_bundle_records`, `read_bundle_bed`.
- `pbundletools.align`: `AlnType`, `AlignmentStep`, `Alignment`,
  `align_bundles`.
- `pbundletools.regions`: `CoverageRegion`, `filter_and_group_regions`,
  `coverage_regions` and `format_region_line`, which group rows of
  `(bgn, end, ratio, count0, count1)` into high- and low-coverage BED
  regions around a threshold.
- `pbundletools.aln_cli`, `pbundletools.dist`,
  `pbundletools.sorted_order`, `pbundletools.offset`,
  `pbundletools.svg_inputs` and `pbundletools.svg_render`: the
  functions behind the commands (`average_linkage`, `newick_tree`,
  `sort_keys`, `anchor_offset`, `compute_offsets`, `build_tracks`,
  `render_svg`, `render_html` and others).
- `pbundletools.version`: `version_string(name, version, cwd)` builds a
  version line from the branch and commit of a git checkout (runs
  `git`; falls back to a fixed label when git is unavailable or the
  directory is not a repository).

## What the package does not do

The package reads principal bundle BED files and files produced by its
own commands. It does not build sequence indexes, read FASTA/FASTQ or
archive files, or compute shimmer-pair coverage from sequence
databases. `pbundletools.regions` groups coverage ratios you supply, but
there is no command that produces them.