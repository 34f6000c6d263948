"""SVG and HTML rendering of principal bundle tracks."""

from __future__ import annotations

import argparse
from collections import Counter
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from xml.sax.saxutils import escape

from pbundletools.regions import _format_float, _to_f32
from pbundletools.svg_inputs import (
    AnnotationRegion,
    BundleRecord,
    Dendrogram,
    bundle_colors,
    read_annotation_regions,
    read_annotations,
    read_dendrogram,
    read_offsets,
    read_svg_bundle_bed,
    tick_interval_for,
    track_range_for,
)

_SVG_NS = "http://www.w3.org/2000/svg"
_DEFAULT_LEFT_PADDING = 30
_ATTR_ENTITIES = {'"': "&quot;"}

_HIGHLIGHT_SCRIPT = """
<script>
document.addEventListener('readystatechange', event => {
    if (event.target.readyState !== "complete") {
        return;
    }
    const bundles = document.getElementsByClassName("bundle");
    for (const bundle of bundles) {
        bundle.onclick = function (e) {
            const classes = Array.from(e.target.classList);
            const isHighlighted = classes.includes("highlighted");
            const bundleId = classes.find(c => c.match("bundle_")) || "";
            for (const member of document.getElementsByClassName(bundleId)) {
                if (isHighlighted) {
                    member.classList.remove("highlighted");
                } else {
                    member.classList.add("highlighted");
                }
            }
        };
    }
});
</script>
"""


@dataclass
class SvgOptions:
    """Layout and styling settings for the bundle track figure."""

    track_range: int | None = None
    track_tick_interval: int | None = None
    track_panel_width: int = 1600
    track_scaling: float = 1.0
    left_padding: int | None = None
    stroke_width: float = 0.5
    annotation_region_stroke_width: float = 2.5
    annotation_panel_width: float = 500.0
    highlight_repeats: float = 1.0
    no_tooltips: bool = False
    h_factor: float = 1.5


@dataclass
class Track:
    """One contig row: its label, bundle segments and annotation regions."""

    ctg: str
    annotation: str
    bundles: list[BundleRecord] = field(default_factory=list)
    regions: list[AnnotationRegion] = field(default_factory=list)


def _with_extension(prefix: str, ext: str) -> Path:
    path = Path(prefix)
    return path.with_name(f"{path.stem}.{ext}")


def _num(value: int | float | str) -> str:
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _format_float(value)
    return value


def _element(name: str, attrs: Sequence[tuple[str, object]], content: str = "") -> str:
    attr_text = "".join(
        f' {key}="{escape(_num(value), _ATTR_ENTITIES)}"' for key, value in attrs
    )
    if not content:
        return f"<{name}{attr_text}/>"
    return f"<{name}{attr_text}>{content}</{name}>"


def _title(text: str) -> str:
    return _element("title", [], escape(text))


def build_tracks(
    ctg_data: Mapping[str, Sequence[BundleRecord]],
    annotations: Sequence[tuple[str, str]] | None = None,
    regions: Mapping[str, Sequence[AnnotationRegion]] | None = None,
    dendrogram: Dendrogram | None = None,
) -> list[Track]:
    """Tracks in annotation-file order, dendrogram leaf order, or sorted by contig."""
    regions = regions or {}

    def make(ctg: str, annotation: str) -> Track:
        if ctg not in ctg_data:
            raise KeyError(f"ctg name not found: {ctg}")
        return Track(ctg, annotation, list(ctg_data[ctg]), list(regions.get(ctg, [])))

    if annotations is not None:
        ann_map = {ctg: annotation for ctg, annotation in annotations}
        tracks = [make(ctg, annotation) for ctg, annotation in annotations]
    else:
        ann_map = {ctg: ctg for ctg in ctg_data}
        tracks = [make(ctg, ctg) for ctg in sorted(ctg_data)]

    if dendrogram is not None:
        tracks = [make(ctg, ann_map.get(ctg, "")) for _, ctg in dendrogram.leaves]
    return tracks


def _bundle_groups(
    track: Track,
    options: SvgOptions,
    offset: int,
    scaling: float,
    left_padding: float,
    y_offset: float,
    styles: dict[str, str],
) -> list[str]:
    counts = Counter(bundle_id for _, _, bundle_id, _ in track.bundles)
    halfwidth = _to_f32(5.0 * options.track_scaling)
    bottom0 = _to_f32(-halfwidth * _to_f32(0.6))
    top0 = _to_f32(halfwidth * _to_f32(0.6))
    bottom1 = _to_f32(-halfwidth * _to_f32(0.8))
    top1 = _to_f32(halfwidth * _to_f32(0.8))
    transform = f"translate({_num(left_padding)} {_num(y_offset)})"
    groups = []
    for bgn0, end0, bundle_id, direction in track.bundles:
        bgn = _to_f32(_to_f32(float(bgn0 + offset)) * scaling)
        end = _to_f32(_to_f32(float(end0 + offset)) * scaling)
        if direction == 1:
            bgn, end = end, bgn
        arrow_end = end
        if direction == 0:
            end = bgn if end - halfwidth < bgn else _to_f32(end - halfwidth)
        else:
            end = bgn if end + halfwidth > bgn else _to_f32(end + halfwidth)

        bundle_class = f"bundle_{bundle_id:05}"
        fill, stroke = bundle_colors(bundle_id)
        styles.setdefault(
            bundle_class,
            f".{bundle_class} {{fill:{fill}; stroke:{stroke}; "
            f"stroke-width:{_num(_to_f32(options.stroke_width))}; fill-opacity:0.5}}",
        )
        if counts[bundle_id] > 1 and options.highlight_repeats > 1.0001:
            bundle_class = f"{bundle_class} repeat"

        b, e, a = _num(bgn), _num(end), _num(arrow_end)
        d = (
            f"M {b} {_num(bottom0)} L {b} {_num(top0)} L {e} {_num(top0)} "
            f"L {e} {_num(top1)} L {a} 0 L {e} {_num(bottom1)} L {e} {_num(bottom0)} Z"
        )
        title = "" if options.no_tooltips else _title(f"{track.ctg}:{bgn0}-{end0}:{bundle_id}")
        path = _element("path", [("d", d), ("class", f"bundle {bundle_class}")], title)
        groups.append(_element("g", [("transform", transform)], path))
    return groups


def _region_groups(
    track: Track,
    options: SvgOptions,
    offset: int,
    scaling: float,
    left_padding: float,
    y_offset: float,
) -> list[str]:
    transform = f"translate({_num(left_padding)} {_num(y_offset)})"
    groups = []
    for region in track.regions:
        bgn = _to_f32(_to_f32(float(region.bgn + offset)) * scaling)
        end = _to_f32(_to_f32(float(region.end + offset)) * scaling)
        title = "" if options.no_tooltips else _title(region.title)
        path = _element(
            "path",
            [
                ("class", "region"),
                ("stroke", region.color),
                ("stroke-width", _to_f32(options.annotation_region_stroke_width)),
                ("d", f"M {_num(bgn)} 8 L {_num(end)} 8"),
            ],
            title,
        )
        groups.append(_element("g", [("transform", transform)], path))
    return groups


def render_svg(
    tracks: Sequence[Track],
    options: SvgOptions | None = None,
    offsets: Mapping[str, int] | None = None,
    dendrogram: Dendrogram | None = None,
    max_range: int | None = None,
) -> str:
    """Render the bundle tracks, scale bar and optional clustering tree as SVG text."""
    options = options or SvgOptions()
    offsets = offsets or {}
    if max_range is None:
        max_range = max((end for t in tracks for _, end, _, _ in t.bundles), default=0)

    left_padding_int = (
        options.left_padding if options.left_padding is not None else _DEFAULT_LEFT_PADDING
    )
    track_range = track_range_for(max_range, options.track_range)
    tick_interval = (
        options.track_tick_interval
        if options.track_tick_interval is not None
        else tick_interval_for(track_range)
    )
    if tick_interval <= 0:
        raise ValueError("track tick interval must be positive")

    scaling = _to_f32(options.track_panel_width / (track_range + 2 * left_padding_int))
    left_padding = float(left_padding_int)
    track_scaling = _to_f32(options.track_scaling)
    if any(track.regions for track in tracks):
        delta_y = _to_f32(
            _to_f32(22.0 * track_scaling)
            + _to_f32(_to_f32(options.annotation_region_stroke_width) * 0.5)
        )
    else:
        delta_y = _to_f32(16.0 * track_scaling)

    label_x = _to_f32(20.0 + left_padding + _to_f32(track_range * scaling))
    styles: dict[str, str] = {}
    track_elements: list[str] = []
    y_offset = 0.0
    for track in tracks:
        offset = offsets.get(track.ctg, 0)
        bundles = _bundle_groups(track, options, offset, scaling, left_padding, y_offset, styles)
        regions = _region_groups(track, options, offset, scaling, left_padding, y_offset)
        text = _element(
            "text",
            [
                ("x", label_x),
                ("y", _to_f32(y_offset + 2.0)),
                ("font-size", "10px"),
                ("font-family", "monospace"),
            ],
            escape(track.annotation),
        )
        track_elements.append(text)
        track_elements.extend(bundles)
        track_elements.extend(regions)
        y_offset = _to_f32(y_offset + delta_y)

    internal_nodes = dendrogram.internal_nodes if dendrogram is not None else []
    tree_width = _to_f32(0.15 * options.track_panel_width) if internal_nodes else 0.0
    total_width = _to_f32(
        tree_width + options.track_panel_width + _to_f32(options.annotation_panel_width)
    )

    children: list[str] = []
    stroke_width = _to_f32(options.stroke_width)
    stroke_width_rep = _to_f32(stroke_width * _to_f32(options.highlight_repeats))
    css = [
        f".repeat {{stroke-width:{_num(stroke_width_rep)};}}",
        f".bundle:hover {{ stroke-width:{_num(_to_f32(stroke_width * 2.0))};}}",
        f".repeat:hover {{ stroke-width:{_num(_to_f32(stroke_width_rep * 2.0))};}}",
        ".region { stroke-opacity: 0.5 };",
        *styles.values(),
        f"path.highlighted {{transform: scaleY({_num(_to_f32(options.h_factor))}); "
        "fill-opacity:1}",
    ]
    children.append(_element("style", [("type", "text/css")], escape("\n".join(css))))

    if dendrogram is not None:
        positions = dendrogram.positions
        for node_id, child0, child1, _size, _height in internal_nodes:
            _, n_height, _ = positions[node_id]
            c0_pos, c0_height, _ = positions[child0]
            c1_pos, c1_height, _ = positions[child1]
            c0_y = _num(_to_f32(c0_pos * delta_y))
            c1_y = _num(_to_f32(c1_pos * delta_y))
            n_x = _num(_to_f32(-0.8 * tree_width * n_height))
            c0_x = _num(_to_f32(-0.8 * tree_width * c0_height))
            c1_x = _num(_to_f32(-0.8 * tree_width * c1_height))
            d = f"M {c0_x} {c0_y} L {n_x} {c0_y} L {n_x} {c1_y} L {c1_x} {c1_y}"
            children.append(
                _element(
                    "path",
                    [("fill", "none"), ("stroke", "#000"), ("stroke-width", "1"), ("d", d)],
                )
            )

    lp = _num(left_padding)
    right_end = _num(_to_f32(_to_f32(track_range * scaling) + left_padding))
    children.append(
        _element(
            "path",
            [
                ("stroke", "#000"),
                ("fill", "none"),
                ("stroke-width", 1),
                ("d", f"M {lp} -14 L {lp} -20 L {right_end} -20 L {right_end} -14 "),
            ],
        )
    )
    for tick in range(tick_interval, track_range + 1, tick_interval):
        x = _num(_to_f32(_to_f32(tick * scaling) + left_padding))
        children.append(
            _element(
                "path",
                [
                    ("stroke", "#000"),
                    ("fill", "none"),
                    ("stroke-width", 1),
                    ("d", f"M {x} -16 L {x} -20"),
                ],
            )
        )
    children.append(
        _element(
            "text",
            [("x", label_x), ("y", -14), ("font-size", "10px"), ("font-family", "sans-serif")],
            f"{track_range} bps",
        )
    )
    children.extend(track_elements)

    view_box = " ".join(
        [
            _num(_to_f32(-tree_width)),
            "-32",
            _num(total_width),
            _num(_to_f32(24.0 + y_offset)),
        ]
    )
    body = "\n" + "\n".join(children) + "\n"
    return _element(
        "svg",
        [
            ("xmlns", _SVG_NS),
            ("viewBox", view_box),
            ("width", total_width),
            ("height", _to_f32(56.0 + y_offset)),
            ("preserveAspectRatio", "none"),
            ("id", "bundleViwer"),
        ],
        body,
    ) + "\n"


def render_html(svg_text: str) -> str:
    """Wrap SVG text in an HTML page whose script toggles bundle highlighting on click."""
    return f"<html><body>\n{_HIGHLIGHT_SCRIPT}\n{svg_text}\n</body></html>\n"


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="pgr-pbundle-bed2svg",
        description="Generate SVG from a principal bundle bed file",
    )
    parser.add_argument("bed_file_path", help="the path to the principal bundle bed file")
    parser.add_argument("output_prefix", help="the prefix of the output file")
    parser.add_argument("--ddg-file", dest="ddg_file", default=None)
    parser.add_argument("--annotations", default=None)
    parser.add_argument(
        "--annotation-region-bedfile", dest="annotation_region_bedfile", default=None
    )
    parser.add_argument("--offsets", default=None)
    parser.add_argument("--track-range", dest="track_range", type=int, default=None)
    parser.add_argument(
        "--track-tick-interval", dest="track_tick_interval", type=int, default=None
    )
    parser.add_argument("--track-panel-width", dest="track_panel_width", type=int, default=1600)
    parser.add_argument("--track-scaling", dest="track_scaling", type=float, default=1.0)
    parser.add_argument("--left-padding", dest="left_padding", type=int, default=None)
    parser.add_argument("--stroke-width", dest="stroke_width", type=float, default=0.5)
    parser.add_argument(
        "--annotation-region-stroke-width",
        dest="annotation_region_stroke_width",
        type=float,
        default=2.5,
    )
    parser.add_argument(
        "--annotation-panel-width", dest="annotation_panel_width", type=float, default=500.0
    )
    parser.add_argument(
        "--highlight-repeats", dest="highlight_repeats", type=float, default=1.0
    )
    parser.add_argument("--html", action="store_true")
    parser.add_argument("--no-tooltips", dest="no_tooltips", action="store_true")
    parser.add_argument("--h-factor", dest="h_factor", type=float, default=1.5)
    args = parser.parse_args(argv)

    regions = (
        read_annotation_regions(args.annotation_region_bedfile)
        if args.annotation_region_bedfile
        else {}
    )
    offsets = read_offsets(args.offsets) if args.offsets else {}
    ctg_data, max_range = read_svg_bundle_bed(args.bed_file_path)
    annotations = read_annotations(args.annotations) if args.annotations else None
    dendrogram = read_dendrogram(args.ddg_file) if args.ddg_file else None

    options = SvgOptions(
        track_range=args.track_range,
        track_tick_interval=args.track_tick_interval,
        track_panel_width=args.track_panel_width,
        track_scaling=args.track_scaling,
        left_padding=args.left_padding,
        stroke_width=args.stroke_width,
        annotation_region_stroke_width=args.annotation_region_stroke_width,
        annotation_panel_width=args.annotation_panel_width,
        highlight_repeats=args.highlight_repeats,
        no_tooltips=args.no_tooltips,
        h_factor=args.h_factor,
    )
    tracks = build_tracks(ctg_data, annotations, regions, dendrogram)
    svg_text = render_svg(tracks, options, offsets, dendrogram, max_range)

    if args.html:
        _with_extension(args.output_prefix, "html").write_text(
            render_html(svg_text), encoding="utf-8"
        )
    _with_extension(args.output_prefix, "svg").write_text(svg_text, encoding="utf-8")
    return 0