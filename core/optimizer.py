"""
Image optimizer.

Turns raw source bytes into a bounded working bitmap. The long-edge cap is
what keeps a full-resolution camera photo from exhausting memory later in
the pipeline, so it is applied before anything is sliced.
"""

import logging
from typing import Optional

import config
from .errors import DecodeError
from .image_utils import decode_image, resize_image
from .models import PuzzleImage

logger = logging.getLogger(__name__)


def fit_within(width: int, height: int, max_dimension: int):
    """
    Compute the optimized size for an image.

    The long edge becomes exactly max_dimension when it is larger;
    smaller images are left alone (never upscaled).
    """
    long_edge = max(width, height)
    if long_edge <= max_dimension:
        return width, height

    scale = max_dimension / long_edge
    if width >= height:
        return max_dimension, max(1, int(round(height * scale)))
    return max(1, int(round(width * scale))), max_dimension


def optimize(raw_bytes: bytes, label: str = "",
             image_config: Optional[config.ImageConfig] = None) -> PuzzleImage:
    """
    Decode and downscale image bytes.

    Args:
        raw_bytes: Encoded source image
        label: Display name carried on the result
        image_config: Limits to apply (defaults to config.DEFAULT_IMAGE_CONFIG)

    Returns:
        PuzzleImage with both dimensions <= image_config.max_dimension

    Raises:
        DecodeError: Unsupported format, corrupt or empty bytes
    """
    image_config = image_config or config.DEFAULT_IMAGE_CONFIG

    pixels, fmt = decode_image(raw_bytes, image_config.max_dimension)
    if fmt not in image_config.supported_formats:
        raise DecodeError(f"Unsupported image format: {fmt or 'unknown'}")

    h, w = pixels.shape[:2]
    if w < 1 or h < 1:
        raise DecodeError(f"Invalid image dimensions: {w}x{h}")

    new_w, new_h = fit_within(w, h, image_config.max_dimension)
    if (new_w, new_h) != (w, h):
        pixels = resize_image(pixels, width=new_w, height=new_h)
        logger.debug("Downscaled %s from %dx%d to %dx%d", label, w, h, new_w, new_h)

    pixels.setflags(write=False)
    return PuzzleImage(pixels=pixels, source_label=label)
