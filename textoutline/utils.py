"""Shared utilities and type definitions for textoutline."""

import cv2
import numpy as np
from pathlib import Path
from typing import List, Tuple, Union
import logging

from .errors import ImageDecodeError, WriteError

# Type aliases for clarity
ImageArray = np.ndarray  # H×W×3 BGR uint8
Polygon = np.ndarray     # k×2 int32, k >= 3
DetectionResult = List[Polygon]
Color = Tuple[int, int, int]  # BGR color tuple
ImagePath = Union[str, Path]

# Supported image extensions
IMAGE_EXTENSIONS = {'.jpg', '.jpeg', '.png'}

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logger(name: str, level: int = logging.INFO) -> logging.Logger:
    """Set up a logger with consistent formatting.

    Args:
        name: Logger name
        level: Logging level

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    if not logger.handlers:  # Avoid duplicate handlers
        handler = logging.StreamHandler()
        formatter = logging.Formatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(level)
    return logger


def is_image_file(path: ImagePath) -> bool:
    """Return True if the path has a supported image extension."""
    return Path(path).suffix.lower() in IMAGE_EXTENSIONS


def load_image(image_path: ImagePath) -> ImageArray:
    """Load an image from file path.

    Args:
        image_path: Path to image file

    Returns:
        Image array in BGR format

    Raises:
        ImageDecodeError: If image cannot be loaded
    """
    try:
        image = cv2.imread(str(image_path), cv2.IMREAD_COLOR)
    except cv2.error as e:
        raise ImageDecodeError(f"Could not load image: {image_path}") from e
    if image is None:
        raise ImageDecodeError(f"Could not load image: {image_path}")
    return image


def save_image(image: ImageArray, output_path: ImagePath, quality: int = 97) -> None:
    """Save an image to file with quality control.

    Args:
        image: Image array in BGR format
        output_path: Path where to save the image
        quality: JPEG quality (0-100)

    Raises:
        WriteError: If the directory is missing, the format is unsupported
            or the encoder fails
    """
    output_path = Path(output_path)
    suffix = output_path.suffix.lower()

    if not output_path.parent.is_dir():
        raise WriteError(f"Output directory does not exist: {output_path.parent}")

    if suffix in {'.jpg', '.jpeg'}:
        params = [cv2.IMWRITE_JPEG_QUALITY, quality]
    elif suffix == '.png':
        params = [cv2.IMWRITE_PNG_COMPRESSION, 8]
    else:
        raise WriteError(f"Unsupported output format '{output_path.suffix}': {output_path}")

    try:
        success = cv2.imwrite(str(output_path), image, params)
    except cv2.error as e:
        raise WriteError(f"Could not save image to: {output_path}") from e
    if not success:
        raise WriteError(f"Could not save image to: {output_path}")
