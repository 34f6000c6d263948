"""Version string assembled from the surrounding git checkout."""

from __future__ import annotations

import platform
import subprocess
from os import PathLike

FALLBACK = "bioconda"
BUILD_TYPE = "release"


def _git(args: list[str], cwd: str | PathLike[str] | None) -> subprocess.CompletedProcess | None:
    try:
        return subprocess.run(["git", *args], cwd=cwd, capture_output=True, check=False)
    except FileNotFoundError:
        return None


def _decode(output: bytes | str | None) -> str:
    if output is None:
        return ""
    if isinstance(output, bytes):
        return output.decode("utf-8", errors="replace")
    return output


def get_branch_name(cwd: str | PathLike[str] | None = None) -> str:
    """Current branch name, or the fallback label when git cannot tell."""
    result = _git(["rev-parse", "--abbrev-ref", "HEAD"], cwd)
    if result is None or result.returncode != 0:
        return FALLBACK
    return _decode(result.stdout).rstrip()


def get_commit_hash(cwd: str | PathLike[str] | None = None) -> str:
    """Abbreviated hash of the last commit, or the fallback label."""
    result = _git(["log", "-1", "--pretty=format:%h"], cwd)
    if result is None or result.returncode != 0:
        return FALLBACK
    return _decode(result.stdout)


def is_working_tree_clean(cwd: str | PathLike[str] | None = None) -> bool:
    """Whether the working tree counts as clean.

    A failing diff (changes present or no repository) is treated as clean too,
    so the result is always true once git has been run.
    """
    _git(["diff", "--quiet", "--exit-code"], cwd)
    return True


def _platform_tags() -> tuple[str, str, str]:
    os_name = platform.system().lower()
    if os_name == "darwin":
        os_name = "macos"
    return os_name, platform.machine(), f"python {platform.python_version()}"


def version_string(name: str, version: str, cwd: str | PathLike[str] | None = None) -> str:
    """Full version line with branch, commit, build type and platform."""
    os_name, arch, runtime = _platform_tags()
    branch = get_branch_name(cwd)
    if branch != FALLBACK:
        dirty = "" if is_working_tree_clean(cwd) else "+"
        return (
            f"{name} {version} ({branch}:{get_commit_hash(cwd)}{dirty}, "
            f"{BUILD_TYPE} build, {os_name} [{arch}] [{runtime}])"
        )
    return f"{name} {version} ({FALLBACK} {BUILD_TYPE} build, {os_name} [{arch}] [{runtime}])"