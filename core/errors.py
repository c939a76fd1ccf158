"""Error taxonomy for the puzzle pipeline.

All of these are recoverable: the caller reports them and keeps the
previous puzzle, if any.
"""


class PuzzleError(Exception):
    """Base class for every error raised by the puzzle pipeline."""


class SourceUnavailable(PuzzleError):
    """The image source could not be read (permission denied, cancelled, missing file)."""


class CaptureFailed(PuzzleError):
    """The camera pipeline failed to produce a frame."""


class DecodeError(PuzzleError):
    """The bytes are not a supported or readable image."""


class InvalidGridSpec(PuzzleError, ValueError):
    """Rows/columns are not usable for the requested image."""


class InvalidSlot(PuzzleError, IndexError):
    """A board slot index is outside [0, piece_count)."""


class SettingsError(PuzzleError):
    """The settings file could not be written."""
