"""Drawing detected text regions onto images."""

from typing import Sequence

import cv2
import numpy as np

from .utils import Color, ImageArray, ImagePath, Polygon, save_image

OUTLINE_COLOR: Color = (0, 255, 0)  # BGR green
OUTLINE_THICKNESS = 2


def render_polygons(image: ImageArray,
                    polygons: Sequence[Polygon],
                    color: Color = OUTLINE_COLOR,
                    thickness: int = OUTLINE_THICKNESS) -> ImageArray:
    """Draw each polygon as a closed outline on a copy of the image.

    Args:
        image: Source image as H×W×3 BGR uint8 array; left untouched
        polygons: Polygons as (k, 2) integer arrays
        color: Outline color in BGR
        thickness: Stroke width in pixels

    Returns:
        Annotated copy of the image
    """
    annotated = image.copy()
    if polygons:
        contours = [np.asarray(p, dtype=np.int32).reshape(-1, 1, 2) for p in polygons]
        cv2.polylines(annotated, contours, isClosed=True, color=color, thickness=thickness)
    return annotated


def write_annotated(image: ImageArray, path: ImagePath) -> None:
    """Persist an annotated image using the codec implied by its extension.

    Raises:
        WriteError: If the parent directory is missing, the format is
            unsupported or encoding fails
    """
    save_image(image, path)
