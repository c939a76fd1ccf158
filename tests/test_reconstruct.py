"""Tests for board rendering, metrics and the CLI writer."""

import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import json
import random

import numpy as np
import pytest

from core import GridSpec, MemorySettingsStore, partition
from game import BoardState, swap
from pipeline import render_board
from pipeline.metrics import complexity_level, image_entropy
from helpers import puzzle_image


def test_solved_board_reproduces_source():
    image = puzzle_image(101, 67)
    grid = GridSpec(4, 5)
    pieces = partition(image, grid)
    out = render_board(pieces, BoardState.solved(grid.piece_count), grid, image.width, image.height)
    assert np.array_equal(out, image.pixels)


def test_swapped_equal_sized_pieces_land_in_each_others_slot():
    image = puzzle_image(90, 90)
    grid = GridSpec(3, 3)
    pieces = partition(image, grid)
    board = swap(BoardState.solved(9), 0, 4)

    out = render_board(pieces, board, grid, 90, 90)
    assert np.array_equal(out[0:30, 0:30], pieces[4].bitmap)
    assert np.array_equal(out[30:60, 30:60], pieces[0].bitmap)


def test_edge_piece_is_resized_into_interior_slot():
    image = puzzle_image(100, 100)
    grid = GridSpec(3, 3)
    pieces = partition(image, grid)
    board = swap(BoardState.solved(9), 0, 8)

    out = render_board(pieces, board, grid, 100, 100)
    assert out.shape == (100, 100, 3)
    assert np.array_equal(out[33:66, 33:66], pieces[4].bitmap)


def test_render_with_numbers_keeps_shape():
    image = puzzle_image(120, 120)
    grid = GridSpec(2, 2)
    pieces = partition(image, grid)
    board = BoardState.shuffled(4, random.Random(1))
    out = render_board(pieces, board, grid, 120, 120, show_numbers=True)
    assert out.shape == (120, 120, 3)


def test_render_piece_count_mismatch():
    image = puzzle_image(40, 40)
    pieces = partition(image, GridSpec(2, 2))
    with pytest.raises(ValueError):
        render_board(pieces, BoardState.solved(9), GridSpec(3, 3), 40, 40)


def test_grid_finer_than_image_renders():
    image = puzzle_image(2, 2)
    grid = GridSpec(3, 3)
    pieces = partition(image, grid)

    solved = render_board(pieces, BoardState.solved(9), grid, 2, 2)
    assert np.array_equal(solved, image.pixels)

    # the whole image now sits in a zero-area slot
    board = swap(BoardState.solved(9), 0, 8)
    moved = render_board(pieces, board, grid, 2, 2)
    assert moved.shape == (2, 2, 3)
    assert not moved.any()
    assert render_board(pieces, board, grid, 2, 2, show_numbers=True).shape == (2, 2, 3)


def test_entropy_of_flat_and_noisy_images():
    flat = np.full((32, 32, 3), 128, dtype=np.uint8)
    noisy = np.random.default_rng(0).integers(0, 256, size=(64, 64, 3), dtype=np.uint8)

    assert image_entropy(flat) == 0.0
    assert complexity_level(image_entropy(flat)) == "low"
    assert image_entropy(noisy) > 7.0
    assert complexity_level(image_entropy(noisy)) == "high"


def test_write_puzzle_outputs_manifest(tmp_path):
    from make_puzzle import write_puzzle
    from pipeline import PuzzleSession
    from core.sources import RawImage
    from helpers import encoded

    class Source:
        def obtain(self):
            return RawImage(encoded(50, 40), "Sample", "test")

    settings = MemorySettingsStore()
    settings.set_grid_spec(GridSpec(2, 3))
    session = PuzzleSession(settings, rng=random.Random(0))
    session.load(Source())

    manifest_path = write_puzzle(session, tmp_path / "out")
    manifest = json.loads(manifest_path.read_text())

    assert manifest["rows"] == 2 and manifest["cols"] == 3
    assert manifest["arrangement"] == list(session.board.slot_to_piece)
    assert len(manifest["pieces"]) == 6
    assert manifest["pieces"]["5"]["box"] == [32, 20, 50, 40]
    assert (tmp_path / "out" / "pieces" / "p_5.png").exists()
    assert (tmp_path / "out" / "full.png").exists()


def test_parse_grid():
    import argparse
    from make_puzzle import parse_grid

    assert parse_grid("4x5") == GridSpec(4, 5)
    with pytest.raises(argparse.ArgumentTypeError):
        parse_grid("4by5")
    with pytest.raises(argparse.ArgumentTypeError):
        parse_grid("0x3")


def test_write_puzzle_with_empty_pieces(tmp_path):
    from make_puzzle import write_puzzle
    from pipeline import PuzzleSession
    from core.sources import RawImage
    from helpers import encoded

    class Source:
        def obtain(self):
            return RawImage(encoded(3, 3), "Tiny", "test")

    settings = MemorySettingsStore()
    settings.set_grid_spec(GridSpec(4, 4))
    session = PuzzleSession(settings, rng=random.Random(0))
    session.load(Source())

    manifest = json.loads(write_puzzle(session, tmp_path / "out").read_text())
    assert len(manifest["pieces"]) == 16
    assert manifest["pieces"]["0"]["file"] is None
    assert manifest["pieces"]["15"]["file"] == "pieces/p_15.png"
    assert (tmp_path / "out" / "pieces" / "p_15.png").exists()


@pytest.mark.parametrize("value", ["0", "-5"])
def test_cli_rejects_bad_max_dimension(value, monkeypatch, capsys):
    from make_puzzle import main

    monkeypatch.setattr(sys, "argv", ["make_puzzle.py", "photo.png", "--max-dimension", value])
    with pytest.raises(SystemExit) as exc:
        main()
    assert exc.value.code == 2
    assert "max_dimension" in capsys.readouterr().err


def test_cli_rejects_bad_env_override(monkeypatch, capsys):
    from make_puzzle import main

    monkeypatch.setenv("PUZZLE_MAX_DIMENSION", "large")
    monkeypatch.setattr(sys, "argv", ["make_puzzle.py", "photo.png"])
    with pytest.raises(SystemExit) as exc:
        main()
    assert exc.value.code == 2
    assert "PUZZLE_MAX_DIMENSION" in capsys.readouterr().err
