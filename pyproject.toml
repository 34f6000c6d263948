[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pbundletools"
version = "0.1.0"
description = "Tools for principal bundle decompositions of sequences: alignment, distances, ordering, offsets and SVG views"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "bioinformatics",
    "genomics",
    "pangenome",
    "principal bundles",
    "bed",
    "svg",
    "dendrogram",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Bio-Informatics",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
pbundle-aln = "pbundletools.aln_cli:main"
pbundle-bed2dist = "pbundletools.dist:main"
pbundle-bed2sorted = "pbundletools.sorted_order:main"
pbundle-bed2offset = "pbundletools.offset:main"
pbundle-bed2svg = "pbundletools.svg_render:main"

[tool.hatch.build.targets.wheel]
packages = ["pbundletools"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
