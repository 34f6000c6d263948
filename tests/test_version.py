import subprocess
from unittest.mock import patch

from pbundletools.version import (
    get_branch_name,
    get_commit_hash,
    is_working_tree_clean,
    version_string,
)


def _fake_git(branch=b"main\n", commit=b"abc1234", code=0):
    def run(args, **kwargs):
        if args[1] == "rev-parse":
            return subprocess.CompletedProcess(args, code, stdout=branch, stderr=b"")
        if args[1] == "log":
            return subprocess.CompletedProcess(args, code, stdout=commit, stderr=b"")
        return subprocess.CompletedProcess(args, 1, stdout=b"", stderr=b"")

    return run


def test_branch_name_is_stripped(tmp_path):
    with patch("pbundletools.version.subprocess.run", side_effect=_fake_git()):
        assert get_branch_name(tmp_path) == "main"


def test_commit_hash_from_git(tmp_path):
    with patch("pbundletools.version.subprocess.run", side_effect=_fake_git()):
        assert get_commit_hash(tmp_path) == "abc1234"


def test_failed_git_falls_back(tmp_path):
    with patch("pbundletools.version.subprocess.run", side_effect=_fake_git(code=128)):
        assert get_branch_name(tmp_path) == "bioconda"
        assert get_commit_hash(tmp_path) == "bioconda"


def test_missing_git_falls_back(tmp_path):
    with patch("pbundletools.version.subprocess.run", side_effect=FileNotFoundError):
        assert get_branch_name(tmp_path) == "bioconda"
        assert is_working_tree_clean(tmp_path) is True


def test_dirty_diff_still_counts_as_clean(tmp_path):
    with patch("pbundletools.version.subprocess.run", side_effect=_fake_git()):
        assert is_working_tree_clean(tmp_path) is True


def test_version_string_with_branch(tmp_path):
    with patch("pbundletools.version.subprocess.run", side_effect=_fake_git()):
        text = version_string("pgr", "0.1.0", tmp_path)
    assert text.startswith("pgr 0.1.0 (main:abc1234, release build, ")
    assert text.endswith("])")


def test_version_string_fallback(tmp_path):
    with patch("pbundletools.version.subprocess.run", side_effect=_fake_git(code=1)):
        text = version_string("pgr", "0.1.0", tmp_path)
    assert text.startswith("pgr 0.1.0 (bioconda release build, ")
    assert "main" not in text


def test_non_repository_directory(tmp_path, monkeypatch):
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path.parent))
    assert get_branch_name(tmp_path) == "bioconda"
    assert get_commit_hash(tmp_path) == "bioconda"