import os
from pathlib import Path

import pytest

from core import check_destination, check_source, check_target_free, check_target_name
from core.safety_checks import is_within


def test_check_source(tmp_path: Path) -> None:
    assert check_source(tmp_path) == (True, None)

    ok, error = check_source(tmp_path / "missing")
    assert not ok and "does not exist" in error

    (tmp_path / "f").write_text("x")
    ok, error = check_source(tmp_path / "f")
    assert not ok and "not a directory" in error


def test_check_destination(tmp_path: Path) -> None:
    src = tmp_path / "src"
    src.mkdir()

    assert check_destination(tmp_path / "dst", src) == (True, None)
    assert not check_destination(src, src)[0]
    assert not check_destination(src / "inner", src)[0]
    assert not check_destination(tmp_path / "a" / "b", src)[0]


def test_dangling_link_is_not_free(tmp_path: Path) -> None:
    link = tmp_path / "link"
    os.symlink(tmp_path / "nowhere", link)
    ok, error = check_target_free(link)
    assert not ok and "already exists" in error
    assert check_target_free(tmp_path / "other") == (True, None)


@pytest.mark.parametrize("name", ["", ".", "..", "a/b", "a\0b"])
def test_invalid_target_names(name) -> None:
    assert check_target_name(name)[0] is False


def test_valid_target_name() -> None:
    assert check_target_name("newproject.properties") == (True, None)


def test_is_within(tmp_path: Path) -> None:
    assert is_within(tmp_path, tmp_path)
    assert is_within(tmp_path / "x" / "y", tmp_path)
    assert not is_within(tmp_path.parent / "sibling", tmp_path)
