"""Common test fixtures."""

import threading
from pathlib import Path
from typing import List, Optional, Set

import cv2
import numpy as np
import pytest

from textoutline.detector import DetectorKind
from textoutline.errors import DetectionError


SQUARE = np.array([[10, 10], [50, 10], [50, 40], [10, 40]], dtype=np.int32)


def make_text_image(width: int = 120, height: int = 80) -> np.ndarray:
    """Create a white BGR image with some black text on it."""
    image = np.full((height, width, 3), 255, dtype=np.uint8)
    cv2.putText(image, "TEST", (10, 50), cv2.FONT_HERSHEY_SIMPLEX, 1, (0, 0, 0), 2)
    return image


MARKER = 7


def mark_image(image: np.ndarray, marker: int = MARKER) -> np.ndarray:
    """Tag an image so FakeDetector(fail_marker=marker) fails on it. Use PNG."""
    image[0, 0] = (marker, marker, marker)
    return image


def write_image(path: Path, image: Optional[np.ndarray] = None) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    assert cv2.imwrite(str(path), make_text_image() if image is None else image)
    return path


class FakeDetector:
    """Stand-in for TextDetector that returns a fixed polygon.

    Args:
        kind: Detector kind reported to the coordinator
        fail_marker: Raise DetectionError for images whose top-left blue
            value equals this marker (see mark_image)
        fail_load: Make load() raise DetectionError
    """

    def __init__(self, kind: DetectorKind, fail_marker: Optional[int] = None,
                 fail_load: bool = False, mutate: bool = False) -> None:
        self.kind = kind
        self.fail_marker = fail_marker
        self.fail_load = fail_load
        self.mutate = mutate
        self.load_calls = 0
        self.seen: List[np.ndarray] = []
        self.threads: Set[str] = set()
        self._lock = threading.Lock()

    def load(self) -> None:
        self.load_calls += 1
        if self.fail_load:
            raise DetectionError(f"{self.kind.name} model not found")

    def detect(self, image: np.ndarray) -> List[np.ndarray]:
        with self._lock:
            self.seen.append(image)
            self.threads.add(threading.current_thread().name)
        if self.fail_load:
            raise DetectionError(f"{self.kind.name} model not found")
        if self.fail_marker is not None and int(image[0, 0, 0]) == self.fail_marker:
            raise DetectionError(f"{self.kind.name} inference failed")
        if self.mutate:
            image[:] = 0
        return [SQUARE.copy()]


@pytest.fixture
def input_root(tmp_path: Path) -> Path:
    """Input tree with img1.jpg, sub/img2.png and sub/notes.txt."""
    root = tmp_path / "input"
    write_image(root / "img1.jpg")
    write_image(root / "sub" / "img2.png")
    (root / "sub" / "notes.txt").write_text("not an image")
    return root


@pytest.fixture
def east_detector() -> FakeDetector:
    return FakeDetector(DetectorKind.EAST)


@pytest.fixture
def db_detector() -> FakeDetector:
    return FakeDetector(DetectorKind.DB)
