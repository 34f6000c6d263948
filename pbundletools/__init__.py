"""Principal bundle BED tools: parsing, bundle alignment, distances and trees, ordering, offsets, coverage regions and SVG views."""

__version__ = "0.1.0"