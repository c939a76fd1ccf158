"""
Puzzle session.

Runs the full pipeline for one player:
1. obtain bytes from a source
2. optimize them into a bounded PuzzleImage
3. partition with the grid read from settings
4. shuffle onto a fresh board

Results are committed together or not at all. Each load is tagged with a
ticket; when a newer load has started, an older one's result is dropped
on arrival and the session keeps whatever it had.
"""

import logging
import random
import threading
from dataclasses import replace
from typing import Callable, List, Optional, Tuple

import config
from core.errors import PuzzleError
from core.image_utils import probe_size
from core.models import GridSpec, Piece, PuzzleImage
from core.optimizer import optimize
from core.settings import SettingsStore
from core.splitting import partition
from game.board import BoardState
from game.tracker import BoardEvent, PuzzleTracker

from .metrics import ProcessingReport, complexity_level, image_entropy

logger = logging.getLogger(__name__)


class PuzzleSession:
    """
    Args:
        settings: Store consulted for the grid before partitioning
        image_config: Optimizer limits
        rng: Random source for shuffling
    """

    def __init__(self, settings: SettingsStore,
                 image_config: Optional[config.ImageConfig] = None,
                 rng: Optional[random.Random] = None):
        self.settings = settings
        self.image_config = image_config or config.DEFAULT_IMAGE_CONFIG
        self._rng = rng
        self._lock = threading.Lock()
        self._generation = 0
        self._listeners: List[Callable[[BoardEvent], None]] = []

        self._image: Optional[PuzzleImage] = None
        self._grid: Optional[GridSpec] = None
        self._pieces: Tuple[Piece, ...] = ()
        self._tracker: Optional[PuzzleTracker] = None
        self._report: Optional[ProcessingReport] = None

    # ------------------------------------------------------------------
    # Read-only views for the rendering side
    # ------------------------------------------------------------------

    @property
    def image(self) -> Optional[PuzzleImage]:
        return self._image

    @property
    def grid(self) -> Optional[GridSpec]:
        return self._grid

    @property
    def pieces(self) -> Tuple[Piece, ...]:
        return self._pieces

    @property
    def board(self) -> Optional[BoardState]:
        return self._tracker.board if self._tracker else None

    @property
    def report(self) -> Optional[ProcessingReport]:
        return self._report

    @property
    def has_puzzle(self) -> bool:
        return self._tracker is not None

    def subscribe(self, listener: Callable[[BoardEvent], None]) -> Callable[[], None]:
        """Listen to board events of this and every later puzzle."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _forward(self, event: BoardEvent) -> None:
        for listener in list(self._listeners):
            listener(event)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def begin_load(self) -> int:
        """Start a new request; every earlier ticket becomes stale."""
        with self._lock:
            self._generation += 1
            return self._generation

    def cancel(self) -> None:
        """Abandon any in-flight load; the current puzzle is kept."""
        self.begin_load()

    def is_current(self, ticket: int) -> bool:
        return ticket == self._generation

    def process(self, ticket: int, source) -> Optional[ProcessingReport]:
        """
        Run the pipeline for a ticket obtained from begin_load().

        Returns:
            The processing report, or None when the ticket was superseded

        Raises:
            PuzzleError: Any pipeline failure; the previous puzzle stays active
        """
        report = ProcessingReport()

        with report.stage("obtain"):
            raw = source.obtain()
        if not self.is_current(ticket):
            logger.info("Discarding superseded load of %s", raw.display_name)
            return None

        report.source_label = raw.display_name
        report.origin = raw.origin
        report.original_bytes = len(raw.data)

        with report.stage("optimize"):
            image = optimize(raw.data, raw.display_name, self.image_config)
        report.original_size = probe_size(raw.data)
        report.optimized_size = image.size
        report.image_entropy = image_entropy(image.pixels)
        report.complexity_level = complexity_level(report.image_entropy)

        grid = self.settings.get_grid_spec()
        with report.stage("partition"):
            pieces = partition(image, grid)
        if not self._commit(ticket, image, grid, pieces, report):
            return None
        return report

    def load(self, source) -> Optional[ProcessingReport]:
        """Synchronous load; supersedes anything in flight."""
        return self.process(self.begin_load(), source)

    def load_in_background(self, source,
                           on_done: Optional[Callable[[Optional[ProcessingReport]], None]] = None,
                           on_error: Optional[Callable[[PuzzleError], None]] = None) -> threading.Thread:
        """
        Load on a worker thread. A later load (or cancel) wins over this one.

        on_error receives pipeline errors; without it they are logged.
        """
        ticket = self.begin_load()

        def run():
            try:
                result = self.process(ticket, source)
            except PuzzleError as e:
                if on_error:
                    on_error(e)
                else:
                    logger.error("Background load failed: %s", e)
                return
            if on_done:
                on_done(result)

        worker = threading.Thread(target=run, name=f"puzzle-load-{ticket}", daemon=True)
        worker.start()
        return worker

    def _commit(self, ticket: int, image: PuzzleImage, grid: GridSpec,
                pieces: List[Piece], report: ProcessingReport) -> bool:
        report.grid = (grid.rows, grid.columns)
        with report.stage("shuffle"):
            tracker = PuzzleTracker(len(pieces), rng=self._rng, shuffle=True)

        with self._lock:
            if ticket != self._generation:
                logger.info("Discarding superseded puzzle for %s", image.source_label)
                return False
            self._image = image
            self._grid = grid
            self._pieces = tuple(pieces)
            self._tracker = tracker
            self._report = report

        tracker.subscribe(self._forward)
        logger.info("Started %s puzzle from %s", grid, image.source_label)
        tracker.announce()
        return True

    # ------------------------------------------------------------------
    # Difficulty and play
    # ------------------------------------------------------------------

    def set_difficulty(self, grid: GridSpec) -> None:
        """
        Save a new grid and, if an image is loaded, rebuild the puzzle with it.

        The pieces are cut before anything is saved, so a failure leaves
        settings and board untouched.
        """
        image = self._image
        if image is None:
            self.settings.set_grid_spec(grid)
            return

        report = replace(self._report, timings_ms={})
        with report.stage("partition"):
            pieces = partition(image, grid)
        self.settings.set_grid_spec(grid)
        ticket = self.begin_load()
        self._commit(ticket, image, grid, pieces, report)

    def _require_tracker(self) -> PuzzleTracker:
        if self._tracker is None:
            raise PuzzleError("No puzzle loaded")
        return self._tracker

    def swap(self, slot_a: int, slot_b: int) -> BoardState:
        return self._require_tracker().swap(slot_a, slot_b)

    def reshuffle(self) -> BoardState:
        return self._require_tracker().reshuffle()

    def restart(self) -> BoardState:
        return self._require_tracker().restart()
