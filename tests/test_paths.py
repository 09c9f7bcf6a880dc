"""Tests for mirrored output path mapping."""

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

from textoutline.detector import DetectorKind
from textoutline.errors import PathError, WriteError
from textoutline.paths import (
    OutputTarget, check_output_root, ensure_output_root, output_roots_for, resolve,
)
from textoutline.walker import ImageFile


def _image_file(root: Path, relative: str) -> ImageFile:
    return ImageFile(path=root / relative, relative_path=Path(relative))


def test_output_roots_are_siblings_of_input(tmp_path):
    roots = output_roots_for(tmp_path / "photos", [DetectorKind.EAST, DetectorKind.DB])
    assert roots == {
        DetectorKind.EAST: tmp_path.resolve() / "ImagesProcessedWithEAST",
        DetectorKind.DB: tmp_path.resolve() / "ImagesProcessedWithDB50",
    }


def test_output_roots_only_for_enabled_kinds(tmp_path):
    roots = output_roots_for(tmp_path / "photos", [DetectorKind.DB])
    assert list(roots) == [DetectorKind.DB]


def test_output_roots_ignore_trailing_separator(tmp_path):
    with_sep = output_roots_for(str(tmp_path / "photos") + "/", [DetectorKind.EAST])
    assert with_sep[DetectorKind.EAST] == tmp_path.resolve() / "ImagesProcessedWithEAST"


def test_resolve_mirrors_relative_path(tmp_path):
    out = tmp_path / "out"
    target = resolve(_image_file(tmp_path / "in", "a/b/img.png"), out)

    assert isinstance(target, OutputTarget)
    assert target.path == out / "a" / "b" / "img.png"
    assert target.output_root == out
    assert target.relative_path == Path("a/b/img.png")
    assert target.path.parent.is_dir()
    assert not target.path.exists()


def test_resolve_is_idempotent(tmp_path):
    out = tmp_path / "out"
    image_file = _image_file(tmp_path / "in", "sub/img.jpg")
    first = resolve(image_file, out)
    second = resolve(image_file, out)
    assert first == second


def test_concurrent_resolve_into_same_directory(tmp_path):
    out = tmp_path / "out"
    files = [_image_file(tmp_path / "in", f"x/y/z/img{i}.png") for i in range(32)]

    with ThreadPoolExecutor(max_workers=8) as executor:
        targets = list(executor.map(lambda f: resolve(f, out), files))

    assert len({t.path for t in targets}) == 32
    assert (out / "x" / "y" / "z").is_dir()


def test_resolve_failure_is_write_error(tmp_path):
    out = tmp_path / "out"
    out.mkdir()
    (out / "blocked").write_text("a file where a directory should be")

    with pytest.raises(WriteError):
        resolve(_image_file(tmp_path / "in", "blocked/img.png"), out)


def test_ensure_output_root_creates_and_tolerates_existing(tmp_path):
    root = tmp_path / "ImagesProcessedWithEAST"
    assert ensure_output_root(root) == root
    assert ensure_output_root(root) == root
    assert root.is_dir()


def test_ensure_output_root_failure_is_path_error(tmp_path):
    root = tmp_path / "ImagesProcessedWithDB50"
    root.write_text("occupied")
    with pytest.raises(PathError, match="Cannot create output directory"):
        ensure_output_root(root)


def test_output_root_named_like_input_is_rejected(tmp_path):
    root = tmp_path / "ImagesProcessedWithEAST"
    [east_root] = output_roots_for(root, [DetectorKind.EAST]).values()
    with pytest.raises(PathError, match="would overwrite input"):
        check_output_root(root, east_root)


def test_output_root_above_input_is_rejected(tmp_path):
    with pytest.raises(PathError):
        check_output_root(tmp_path / "a" / "b", tmp_path / "a")


def test_sibling_and_nested_output_roots_are_accepted(tmp_path):
    root = tmp_path / "photos"
    check_output_root(root, tmp_path / "ImagesProcessedWithEAST")
    check_output_root(root, root / "annotated")
