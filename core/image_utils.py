"""Low-level image operations."""

import io

import cv2
import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from .errors import DecodeError

# Pillow refuses headers that declare more pixels than Image.MAX_IMAGE_PIXELS
UNREADABLE = (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError)


def decode_image(data: bytes, max_dimension=None):
    """
    Decode image bytes into an RGB array.

    Args:
        data: Encoded image bytes
        max_dimension: Optional long-edge target. JPEG sources larger than
            this are decoded at a reduced scale that still covers it.

    Returns:
        (rgb array, lowercase Pillow format name)

    Raises:
        DecodeError: If the bytes are empty, unrecognised, truncated or too large
    """
    if not data:
        raise DecodeError("Image data is empty")
    try:
        pic = Image.open(io.BytesIO(data))
        fmt = (pic.format or "").lower()
        if max_dimension:
            pic.draft("RGB", (max_dimension, max_dimension))
        pic = pic.convert("RGB")
    except UNREADABLE as e:
        raise DecodeError(f"Could not decode image: {e}") from e
    return np.array(pic), fmt


def probe_size(data: bytes):
    """Read (width, height) from the image header without decoding pixels."""
    try:
        return Image.open(io.BytesIO(data)).size
    except UNREADABLE as e:
        raise DecodeError(f"Could not read image header: {e}") from e


def correct_orientation(data: bytes, quality: int = 85) -> bytes:
    """
    Apply the EXIF orientation tag to the pixels and re-encode as JPEG.

    Bytes without an orientation tag are returned unchanged.
    """
    try:
        pic = Image.open(io.BytesIO(data))
        orientation = pic.getexif().get(0x0112, 1)
        if orientation == 1:
            return data
        upright = ImageOps.exif_transpose(pic).convert("RGB")
    except UNREADABLE as e:
        raise DecodeError(f"Could not read captured photo: {e}") from e

    out = io.BytesIO()
    upright.save(out, format="JPEG", quality=quality)
    return out.getvalue()


def encode_image(image: np.ndarray, ext: str = ".png", quality: int = 85) -> bytes:
    """Encode an RGB array with OpenCV (ext like '.png' or '.jpg')."""
    bgr = cv2.cvtColor(image, cv2.COLOR_RGB2BGR)
    params = [cv2.IMWRITE_JPEG_QUALITY, quality] if ext.lower() in (".jpg", ".jpeg") else []
    ok, buf = cv2.imencode(ext, bgr, params)
    if not ok:
        raise ValueError(f"Could not encode image as {ext}")
    return buf.tobytes()


def resize_image(image, width=None, height=None):
    """Resize image maintaining aspect ratio if only one dimension given."""
    h, w = image.shape[:2]

    if width is None and height is None:
        return image

    if width is None:
        ratio = height / h
        width = max(1, int(round(w * ratio)))
    elif height is None:
        ratio = width / w
        height = max(1, int(round(h * ratio)))

    return cv2.resize(image, (width, height), interpolation=cv2.INTER_AREA)
