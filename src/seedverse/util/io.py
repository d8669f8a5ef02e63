"""Writers for pixel buffers and body configuration files."""

import json
import logging
from pathlib import Path

import numpy as np
from PIL import Image

from seedverse.exceptions import ResourceUnavailable

logger = logging.getLogger(__name__)

_MODES = {2: "L", 3: "RGB", 4: "RGBA"}


def _image_mode(pixels):
    if pixels.ndim == 2:
        return "L"
    assert pixels.ndim == 3 and pixels.shape[2] in (3, 4), (
        f"Cannot encode a pixel buffer of shape {pixels.shape}"
    )
    return _MODES[pixels.shape[2]]


def write_image(path, pixels):
    """
    Encode a pixel buffer with Pillow, the format follows the file extension

    Args:
        path (str or Path):
            Output file, parent directories are created as needed
        pixels (np.ndarray):
            uint8 array of shape (height, width) for grayscale or
            (height, width, 3|4) for RGB/RGBA

    Returns:
        path (Path):
            The written file
    """
    path = Path(path)
    pixels = np.ascontiguousarray(pixels, dtype=np.uint8)
    mode = _image_mode(pixels)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        Image.fromarray(pixels).save(path)
    except (OSError, ValueError, KeyError) as err:
        raise ResourceUnavailable(f"Could not write image {path}: {err}") from err
    logger.debug("Wrote %s image %s %s", mode, pixels.shape[:2], path)
    return path


def write_config(body, path):
    """
    Write a body's parameters as JSON, leaving out fields the body has no use
    for (ring fields without a ring, etc.)
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(body.to_dict(), f, indent=2)
    except OSError as err:
        raise ResourceUnavailable(f"Could not write config {path}: {err}") from err
    logger.debug("Wrote config for %s to %s", body.name, path)
    return path
