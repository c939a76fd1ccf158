"""Synthetic images for tests."""

import io
import struct
import zlib

import numpy as np
from PIL import Image

from core.models import PuzzleImage


def gradient_array(width: int, height: int) -> np.ndarray:
    """RGB array whose pixels encode their own coordinates."""
    ys, xs = np.mgrid[0:height, 0:width]
    img = np.zeros((height, width, 3), dtype=np.uint8)
    img[..., 0] = xs % 256
    img[..., 1] = ys % 256
    img[..., 2] = (xs + ys) % 256
    return img


def puzzle_image(width: int, height: int, label: str = "test") -> PuzzleImage:
    return PuzzleImage(pixels=gradient_array(width, height), source_label=label)


def encoded(width: int, height: int, fmt: str = "PNG", exif=None) -> bytes:
    pic = Image.fromarray(gradient_array(width, height))
    out = io.BytesIO()
    if exif is not None:
        pic.save(out, format=fmt, exif=exif)
    else:
        pic.save(out, format=fmt)
    return out.getvalue()


def png_header(width: int, height: int) -> bytes:
    """PNG signature plus an IHDR chunk declaring width x height and no pixel data."""
    body = b"IHDR" + struct.pack(">IIBBBBB", width, height, 8, 2, 0, 0, 0)
    return b"\x89PNG\r\n\x1a\n" + struct.pack(">I", 13) + body + struct.pack(">I", zlib.crc32(body))
