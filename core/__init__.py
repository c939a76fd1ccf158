"""Core image processing: sources, optimization, splitting and settings."""
from .errors import (
    PuzzleError,
    SourceUnavailable,
    CaptureFailed,
    DecodeError,
    InvalidGridSpec,
    InvalidSlot,
    SettingsError
)
from .models import GridSpec, PuzzleImage, Piece
from .optimizer import optimize
from .splitting import partition, piece_boxes
from .sources import AssetCatalog, AssetEntry, AssetSource, GallerySource, CameraSource, RawImage
from .settings import GameSettings, MemorySettingsStore, JsonSettingsStore
