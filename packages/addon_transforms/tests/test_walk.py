from __future__ import annotations

from pathlib import Path

import pytest

from addon_transforms.walk import iter_files, walk


def test_walk_returns_every_leaf_relative_to_root(tmp_path: Path) -> None:
    (tmp_path / "b").mkdir()
    (tmp_path / "a").write_text("a", encoding="utf-8")
    (tmp_path / "b" / "c").write_text("c", encoding="utf-8")
    (tmp_path / "b" / "d").write_text("d", encoding="utf-8")

    files = walk(tmp_path)

    assert sorted(files) == ["a", "b/c", "b/d"]
    assert len(files) == len(set(files))


def test_walk_descends_nested_directories_and_skips_empty_ones(tmp_path: Path) -> None:
    deep = tmp_path / "x" / "y" / "z"
    deep.mkdir(parents=True)
    (deep / "leaf.svg").write_text("<svg/>", encoding="utf-8")
    (tmp_path / "empty").mkdir()

    assert walk(tmp_path) == ["x/y/z/leaf.svg"]


def test_walk_is_deterministic(tmp_path: Path) -> None:
    for name in ["zeta.js", "alpha.js", "mid.css"]:
        (tmp_path / name).write_text("", encoding="utf-8")

    assert walk(tmp_path) == ["alpha.js", "mid.css", "zeta.js"]
    assert walk(tmp_path) == walk(tmp_path)


def test_iter_files_is_lazy(tmp_path: Path) -> None:
    (tmp_path / "one").write_text("", encoding="utf-8")
    it = iter_files(tmp_path)
    assert next(it) == "one"
    with pytest.raises(StopIteration):
        next(it)


def test_walk_missing_root_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        walk(tmp_path / "missing")
