"""Textoutline: outline text regions across a directory tree of images.

This package walks an input tree, runs the EAST and/or DB text detectors on
every image concurrently and writes annotated copies into output trees that
mirror the input layout.
"""

__version__ = "0.1.0"

from .errors import (
    AnnotationError,
    ConfigError,
    PathError,
    ImageDecodeError,
    DetectionError,
    WriteError,
)
from .walker import ImageFile, iter_image_files
from .detector import (
    DetectorKind,
    DetectorConfig,
    TextDetector,
    east_config,
    db_config,
    build_detectors,
)
from .paths import OutputTarget, output_roots_for, ensure_output_root, resolve
from .renderer import render_polygons, write_annotated
from .coordinator import TaskCoordinator, Task, TaskResult, RunSummary, CoordinatorState
from .metrics import Stopwatch, timing_report
from .utils import load_image, save_image, setup_logger

# CLI entry point
from .cli import main

__all__ = [
    "AnnotationError",
    "ConfigError",
    "PathError",
    "ImageDecodeError",
    "DetectionError",
    "WriteError",
    "ImageFile",
    "iter_image_files",
    "DetectorKind",
    "DetectorConfig",
    "TextDetector",
    "east_config",
    "db_config",
    "build_detectors",
    "OutputTarget",
    "output_roots_for",
    "ensure_output_root",
    "resolve",
    "render_polygons",
    "write_annotated",
    "TaskCoordinator",
    "Task",
    "TaskResult",
    "RunSummary",
    "CoordinatorState",
    "Stopwatch",
    "timing_report",
    "load_image",
    "save_image",
    "setup_logger",
    "main",
]
