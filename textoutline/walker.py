"""Recursive discovery of image files under a scan root."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator

from .errors import PathError
from .utils import ImagePath, is_image_file, setup_logger

logger = setup_logger(__name__)


@dataclass(frozen=True)
class ImageFile:
    """An image discovered by the walker."""

    path: Path           # absolute
    relative_path: Path  # relative to the scan root


def iter_image_files(root: ImagePath, exclude: Iterable[ImagePath] = ()) -> Iterator[ImageFile]:
    """Yield every supported image under ``root``, recursively.

    Only regular files with a ``.png``, ``.jpg`` or ``.jpeg`` extension
    (any case) are produced. Symlinks are skipped and symlinked directories
    are never entered. Directories in ``exclude`` are pruned from the walk.
    Order is unspecified.

    Args:
        root: Directory to scan
        exclude: Directories to skip entirely, e.g. output roots

    Raises:
        PathError: If root does not exist, is not a directory or cannot be
            listed. Raised before the first item is produced.
    """
    root = Path(root).resolve()
    if not root.exists():
        raise PathError(f"Input path '{root}' does not exist")
    if not root.is_dir():
        raise PathError(f"Input path '{root}' is not a directory")
    try:
        with os.scandir(root):
            pass
    except OSError as e:
        raise PathError(f"Input path '{root}' is not readable: {e}") from e

    return _walk(root, {Path(p).resolve() for p in exclude})


def _walk(root: Path, excluded: set) -> Iterator[ImageFile]:
    def _on_error(err: OSError) -> None:
        logger.warning(f"Cannot read directory {err.filename}: {err.strerror}")

    for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error, followlinks=False):
        current = Path(dirpath)
        # os.walk honours in-place edits of dirnames
        dirnames[:] = [
            d for d in dirnames
            if not (current / d).is_symlink() and (current / d) not in excluded
        ]

        for name in filenames:
            path = current / name
            if not is_image_file(path):
                continue
            if path.is_symlink() or not path.is_file():
                logger.debug(f"Skipping non-regular entry: {path}")
                continue
            yield ImageFile(path=path, relative_path=path.relative_to(root))
