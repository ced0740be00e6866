"""Tests for repository path helpers."""

import pytest

from codeowners.errors import InvalidInputError
from codeowners.paths import (
    folder_of,
    normalize_path,
    parent_folders,
    relative_to,
    require_absolute_path,
    resolve_import_path,
    segment_count,
)


def test_parent_folders_closest_first() -> None:
    """Verify ancestors are listed from the immediate parent up to the root."""
    assert parent_folders("/foo/bar/baz.md") == ["/foo/bar/", "/foo/", "/"]
    assert parent_folders("/README.md") == ["/"]


def test_folder_of() -> None:
    """Verify that folders always end with a slash."""
    assert folder_of("/foo/OWNERS") == "/foo/"
    assert folder_of("/OWNERS") == "/"


def test_segment_count() -> None:
    """Verify segment counting used for distances."""
    depth_3 = 3
    assert segment_count("/foo/bar/baz.md") == depth_3
    assert segment_count("/foo/") == 1
    assert segment_count("/") == 0


def test_relative_to() -> None:
    """Verify paths are made relative to an ancestor folder."""
    assert relative_to("/foo/", "/foo/bar/baz.md") == "bar/baz.md"
    assert relative_to("/", "/foo/bar/baz.md") == "foo/bar/baz.md"
    with pytest.raises(ValueError, match="not located under"):
        relative_to("/other/", "/foo/bar.md")


def test_resolve_import_path() -> None:
    """Verify relative import paths are resolved against the importing folder."""
    assert resolve_import_path("/foo/bar/", "../OWNERS") == "/foo/OWNERS"
    assert resolve_import_path("/foo/", "sub/OWNERS") == "/foo/sub/OWNERS"
    assert resolve_import_path("/foo/", "/x/OWNERS") == "/x/OWNERS"
    assert resolve_import_path("/", "../../OWNERS") == "/OWNERS"


def test_normalize_path() -> None:
    """Verify duplicate slashes and dot segments are collapsed."""
    assert normalize_path("/foo//bar/./x.txt") == "/foo/bar/x.txt"
    assert normalize_path("//a") == "/a"


@pytest.mark.parametrize("path", ["", None, "foo/bar.txt", "/"])
def test_require_absolute_path_rejects_invalid(path: str | None) -> None:
    """Verify that missing, relative or root paths are rejected."""
    with pytest.raises(InvalidInputError):
        require_absolute_path(path)


def test_require_absolute_path_normalizes() -> None:
    """Verify that valid paths are returned normalized."""
    assert require_absolute_path("/foo/../bar/x.txt") == "/bar/x.txt"
