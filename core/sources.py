"""
Image source adapters.

Every source exposes obtain() -> RawImage. Sources:
- AssetSource: random pick from a bundled asset catalog
- GallerySource: a file chosen by the user (None path = cancelled)
- CameraSource: a captured frame, EXIF orientation corrected
"""

import json
import logging
import random
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional, Union

import cv2

import config
from .errors import CaptureFailed, DecodeError, SourceUnavailable
from .image_utils import correct_orientation

logger = logging.getLogger(__name__)

IMAGE_SUFFIXES = {".jpg", ".jpeg", ".png", ".webp", ".bmp"}


@dataclass(frozen=True)
class RawImage:
    """Undecoded image bytes plus the name shown to the player."""
    data: bytes
    display_name: str
    origin: str


@dataclass(frozen=True)
class AssetEntry:
    file: str
    display_name: str
    category: str = ""


class AssetCatalog:
    """Fixed list of bundled images, addressed by filename relative to root."""

    def __init__(self, entries: List[AssetEntry], root: Union[str, Path] = "."):
        self.entries = list(entries)
        self.root = Path(root)

    def __len__(self):
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    @classmethod
    def load(cls, manifest_path: Union[str, Path]) -> 'AssetCatalog':
        """
        Load a catalog from a JSON manifest.

        The manifest is a list of {"file", "name", "category"} objects;
        files are resolved relative to the manifest's directory.
        """
        manifest_path = Path(manifest_path)
        try:
            with open(manifest_path, "r", encoding="utf-8") as f:
                raw = json.load(f)
            entries = [
                AssetEntry(
                    file=item["file"],
                    display_name=item.get("name") or _title_from_stem(item["file"]),
                    category=item.get("category", ""),
                )
                for item in raw
            ]
        except (OSError, json.JSONDecodeError, KeyError, TypeError, AttributeError) as e:
            raise SourceUnavailable(f"Invalid asset catalog {manifest_path}: {e}") from e
        return cls(entries, root=manifest_path.parent)

    @classmethod
    def from_directory(cls, root: Union[str, Path]) -> 'AssetCatalog':
        """Discover images under root; the sub-directory name becomes the category."""
        root = Path(root)
        entries = []
        if not root.is_dir():
            return cls(entries, root=root)

        for path in sorted(root.rglob("*")):
            if not path.is_file() or path.suffix.lower() not in IMAGE_SUFFIXES:
                continue
            rel = path.relative_to(root)
            category = rel.parts[0] if len(rel.parts) > 1 else ""
            entries.append(AssetEntry(file=rel.as_posix(), display_name=_title_from_stem(path.name),
                                      category=category))
        return cls(entries, root=root)

    def choose(self, rng: Optional[random.Random] = None) -> AssetEntry:
        """Pick one entry uniformly at random."""
        if not self.entries:
            raise SourceUnavailable("Asset catalog is empty")
        rng = rng or random
        return self.entries[rng.randrange(len(self.entries))]

    def read(self, entry: AssetEntry) -> bytes:
        path = self.root / entry.file
        try:
            return path.read_bytes()
        except OSError as e:
            raise SourceUnavailable(f"Asset not readable: {path}") from e


def _title_from_stem(filename: str) -> str:
    return Path(filename).stem.replace("_", " ").replace("-", " ").title()


class AssetSource:
    def __init__(self, catalog: AssetCatalog, rng: Optional[random.Random] = None):
        self.catalog = catalog
        self.rng = rng

    def obtain(self) -> RawImage:
        entry = self.catalog.choose(self.rng)
        logger.info("Selected asset %s (%s)", entry.file, entry.display_name)
        return RawImage(data=self.catalog.read(entry), display_name=entry.display_name, origin="asset")


class GallerySource:
    """A user-picked file. A path of None means the picker was dismissed."""

    def __init__(self, path: Optional[Union[str, Path]]):
        self.path = Path(path) if path is not None else None

    def obtain(self) -> RawImage:
        if self.path is None:
            raise SourceUnavailable("No image selected")
        try:
            data = self.path.read_bytes()
        except PermissionError as e:
            raise SourceUnavailable(f"Permission denied: {self.path}") from e
        except OSError as e:
            raise SourceUnavailable(f"Image not found: {self.path}") from e
        return RawImage(data=data, display_name=self.path.name, origin="gallery")


def capture_frame(device_index: int = 0, quality: int = 90) -> bytes:
    """Grab a single frame from a camera device and return it as JPEG bytes."""
    cap = cv2.VideoCapture(device_index)
    try:
        if not cap.isOpened():
            raise CaptureFailed(f"Camera {device_index} could not be opened")
        ok, frame = cap.read()
        if not ok or frame is None:
            raise CaptureFailed(f"Camera {device_index} returned no frame")
    finally:
        cap.release()

    ok, buf = cv2.imencode(".jpg", frame, [cv2.IMWRITE_JPEG_QUALITY, quality])
    if not ok:
        raise CaptureFailed("Could not encode captured frame")
    return buf.tobytes()


class CameraSource:
    """
    Camera capture.

    Args:
        capture: Callable returning JPEG bytes, or None if the user cancelled.
                 Defaults to capture_frame(device_index).
        device_index: OpenCV device used by the default capture
        image_config: Supplies the JPEG quality for re-encoding
    """

    def __init__(self, capture: Optional[Callable[[], Optional[bytes]]] = None,
                 device_index: int = 0,
                 image_config: Optional[config.ImageConfig] = None):
        self.image_config = image_config or config.DEFAULT_IMAGE_CONFIG
        self.capture = capture or (lambda: capture_frame(device_index, quality=self.image_config.jpeg_quality))

    def obtain(self) -> RawImage:
        try:
            data = self.capture()
        except (SourceUnavailable, CaptureFailed):
            raise
        except PermissionError as e:
            raise SourceUnavailable("Camera permission denied") from e
        except Exception as e:
            raise CaptureFailed(f"Camera capture failed: {e}") from e

        if data is None:
            raise SourceUnavailable("Capture cancelled")
        if not data:
            raise CaptureFailed("Camera returned an empty image")

        try:
            data = correct_orientation(data, quality=self.image_config.jpeg_quality)
        except DecodeError as e:
            raise CaptureFailed(str(e)) from e

        name = f"Photo_{datetime.now().isoformat(timespec='seconds')}.jpg"
        return RawImage(data=data, display_name=name, origin="camera")

