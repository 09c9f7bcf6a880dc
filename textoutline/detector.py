"""Text detection with OpenCV's DNN text detection models.

Two fixed profiles are supported: EAST (rotated quadrilaterals) and DB
(differentiable binarization, arbitrary contours). Both are wrapped by
TextDetector, which owns one loaded model and returns polygons.

WARNING: the Python binding of TextDetectionModel.detect() has two
overloads. Depending on the OpenCV build it returns either
``(detections, confidences)`` or just ``detections``; see _unpack_detections.
"""

import enum
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Tuple

import cv2
import numpy as np

from .errors import ConfigError, DetectionError
from .utils import DetectionResult, ImageArray, ImagePath, setup_logger

logger = setup_logger(__name__)

# Network input size for EAST. Must be a multiple of 32; the reference
# OpenCV sample uses 320×320.
EAST_INPUT_SIZE = (736, 736)
DB_INPUT_SIZE = (736, 736)

# Per-channel mean subtracted from the blob
CHANNEL_MEAN = (122.679, 116.669, 104.007)


class DetectorKind(enum.Enum):
    EAST = "east"
    DB = "db"

    @property
    def output_dir_name(self) -> str:
        return _OUTPUT_DIR_NAMES[self]


_OUTPUT_DIR_NAMES = {
    DetectorKind.EAST: "ImagesProcessedWithEAST",
    DetectorKind.DB: "ImagesProcessedWithDB50",
}


@dataclass(frozen=True)
class DetectorConfig:
    """Fixed inference parameters for one detector profile."""

    kind: DetectorKind
    input_size: Tuple[int, int]
    mean: Tuple[float, float, float] = CHANNEL_MEAN
    scale: float = 1.0
    swap_rb: bool = False
    # EAST only
    confidence_threshold: Optional[float] = None
    nms_threshold: Optional[float] = None
    # DB only
    binary_threshold: Optional[float] = None
    polygon_threshold: Optional[float] = None
    max_candidates: Optional[int] = None
    unclip_ratio: Optional[float] = None


def east_config(input_size: Tuple[int, int] = EAST_INPUT_SIZE) -> DetectorConfig:
    """Build the EAST profile.

    Raises:
        ConfigError: If a dimension is not a positive multiple of 32
    """
    width, height = input_size
    if width <= 0 or height <= 0 or width % 32 or height % 32:
        raise ConfigError(f"EAST input size must be a positive multiple of 32, got {width}x{height}")
    return DetectorConfig(
        kind=DetectorKind.EAST,
        input_size=(width, height),
        scale=1.0,
        swap_rb=True,
        confidence_threshold=0.5,
        nms_threshold=0.4,
    )


def db_config() -> DetectorConfig:
    """Build the DB profile."""
    return DetectorConfig(
        kind=DetectorKind.DB,
        input_size=DB_INPUT_SIZE,
        scale=1.0 / 255.0,
        swap_rb=False,
        binary_threshold=0.3,
        polygon_threshold=0.1,
        max_candidates=10000,
        unclip_ratio=1.5,
    )


class TextDetector:
    """One loaded text detection model with a fixed profile.

    The model is loaded on first use (or by an explicit ``load()``). A load
    failure is remembered: every later ``detect`` raises the same
    DetectionError instead of retrying.
    """

    def __init__(self, model_path: ImagePath, config: DetectorConfig) -> None:
        self.model_path = Path(model_path)
        self.config = config
        self._model = None
        self._load_error: Optional[DetectionError] = None
        self._lock = threading.Lock()

    @property
    def kind(self) -> DetectorKind:
        return self.config.kind

    def load(self) -> None:
        """Load the model now.

        Raises:
            DetectionError: If the artifact is missing or invalid
        """
        with self._lock:
            self._ensure_loaded()

    def detect(self, image: ImageArray) -> DetectionResult:
        """Detect text regions in an image.

        Args:
            image: Input image as H×W×3 BGR uint8 numpy array

        Returns:
            List of int32 polygons of shape (k, 2), k >= 3. Empty when no
            text is found.

        Raises:
            DetectionError: If the model cannot be loaded or inference fails
        """
        if not isinstance(image, np.ndarray) or image.ndim != 3 or image.shape[2] != 3:
            raise DetectionError("Image must be H×W×3 BGR")

        # Inference is serialized per model; cv2.dnn nets are not re-entrant
        with self._lock:
            model = self._ensure_loaded()
            try:
                result = model.detect(image)
            except Exception as e:
                raise DetectionError(f"{self.kind.name} inference failed: {e}") from e

        polygons = _unpack_detections(result)
        logger.debug(f"{self.kind.name} found {len(polygons)} text regions")
        return polygons

    def _ensure_loaded(self):
        if self._model is not None:
            return self._model
        if self._load_error is not None:
            raise self._load_error

        try:
            self._model = _create_model(self.model_path, self.config)
        except DetectionError as e:
            self._load_error = e
            raise
        logger.info(f"{self.kind.name} model loaded from: {self.model_path}")
        return self._model


def _create_model(model_path: Path, config: DetectorConfig):
    if not model_path.is_file():
        raise DetectionError(f"{config.kind.name} model not found: {model_path}")

    try:
        if config.kind is DetectorKind.EAST:
            model = cv2.dnn.TextDetectionModel_EAST(str(model_path))
            model.setConfidenceThreshold(config.confidence_threshold)
            model.setNMSThreshold(config.nms_threshold)
        else:
            model = cv2.dnn.TextDetectionModel_DB(str(model_path))
            model.setBinaryThreshold(config.binary_threshold)
            model.setPolygonThreshold(config.polygon_threshold)
            model.setMaxCandidates(config.max_candidates)
            model.setUnclipRatio(config.unclip_ratio)
        model.setInputParams(config.scale, config.input_size, config.mean, config.swap_rb)
    except Exception as e:
        raise DetectionError(f"Failed to load {config.kind.name} model '{model_path}': {e}") from e
    return model


def _unpack_detections(result) -> DetectionResult:
    """Normalize TextDetectionModel.detect() output to a list of polygons."""
    detections = result
    if isinstance(result, tuple) and len(result) == 2:
        # (detections, confidences): confidences is flat, a polygon is 2-D
        if np.asarray(result[1]).ndim <= 1:
            detections = result[0]

    polygons = []
    for points in detections:
        polygon = np.asarray(points, dtype=np.float32).reshape(-1, 2)
        if polygon.shape[0] < 3:
            continue
        polygons.append(np.round(polygon).astype(np.int32))
    return polygons


def build_detectors(east_model: Optional[ImagePath] = None,
                    db_model: Optional[ImagePath] = None,
                    east_input_size: Tuple[int, int] = EAST_INPUT_SIZE) -> Dict[DetectorKind, TextDetector]:
    """Create one detector per supplied model artifact.

    Returns:
        Mapping of enabled kinds to their detectors; empty if neither
        artifact was given.

    Raises:
        ConfigError: If the EAST input size is invalid
    """
    detectors = {}
    if east_model:
        detectors[DetectorKind.EAST] = TextDetector(east_model, east_config(east_input_size))
    if db_model:
        detectors[DetectorKind.DB] = TextDetector(db_model, db_config())
    return detectors
