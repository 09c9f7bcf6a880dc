"""Mirrored output paths for annotated images."""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable

from .detector import DetectorKind
from .errors import PathError, WriteError
from .utils import ImagePath, setup_logger
from .walker import ImageFile

logger = setup_logger(__name__)


@dataclass(frozen=True)
class OutputTarget:
    """Where one detector's annotated copy of one file is written."""

    output_root: Path
    relative_path: Path
    path: Path


def output_roots_for(input_root: ImagePath, kinds: Iterable[DetectorKind]) -> Dict[DetectorKind, Path]:
    """Compute the output root of each detector kind.

    Output trees are siblings of the input root: for ``P/R`` the EAST tree is
    ``P/ImagesProcessedWithEAST`` and the DB tree ``P/ImagesProcessedWithDB50``.
    """
    parent = Path(input_root).resolve().parent
    return {kind: parent / kind.output_dir_name for kind in kinds}


def check_output_root(input_root: ImagePath, output_root: ImagePath) -> None:
    """Reject an output root that is the input root or one of its ancestors.

    Raises:
        PathError: If writing under ``output_root`` could overwrite inputs
    """
    source = Path(input_root).resolve()
    target = Path(output_root).resolve()
    if target == source or target in source.parents:
        raise PathError(f"Output directory '{target}' would overwrite input '{source}'")


def ensure_output_root(path: Path) -> Path:
    """Create an output root if needed.

    Raises:
        PathError: If the directory cannot be created
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise PathError(f"Cannot create output directory '{path}': {e}") from e
    logger.debug(f"Output root ready: {path}")
    return path


def resolve(file: ImageFile, output_root: Path) -> OutputTarget:
    """Map an input file to its mirrored location under ``output_root``.

    Missing ancestor directories are created. ``mkdir(exist_ok=True)``
    tolerates a directory appearing concurrently, so two tasks resolving
    into the same subdirectory both succeed.

    Raises:
        WriteError: If the destination directory cannot be created
    """
    path = output_root / file.relative_path
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise WriteError(f"Cannot create directory '{path.parent}': {e}") from e
    return OutputTarget(output_root=output_root, relative_path=file.relative_path, path=path)
