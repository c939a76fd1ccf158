#!/usr/bin/env python
"""
Picture Puzzle Maker

Usage:
    python make_puzzle.py <image_path> [--grid RxC] [--output <dir>]
    python make_puzzle.py --assets <dir> [--grid RxC]
    python make_puzzle.py --camera

Examples:
    python make_puzzle.py ./photos/cat.jpg --grid 4x4 --output ./puzzles/cat
    python make_puzzle.py --assets ./assets --seed 7 --preview

Writes each piece as a PNG, the optimized source image, and puzzle.json
describing the grid, piece boxes and the shuffled arrangement.
"""

import argparse
import json
import logging
import random
import sys
from pathlib import Path

import config
from core import (
    AssetCatalog,
    AssetSource,
    CameraSource,
    GallerySource,
    GridSpec,
    JsonSettingsStore,
    PuzzleError,
)
from core.image_utils import encode_image
from pipeline import PuzzleSession, render_board


def parse_grid(text: str) -> GridSpec:
    try:
        rows, cols = (int(part) for part in text.lower().split("x"))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Grid must look like 4x4, got {text!r}")
    try:
        return GridSpec(rows, cols)
    except PuzzleError as e:
        raise argparse.ArgumentTypeError(str(e))


def build_source(args, image_config):
    if args.camera:
        return CameraSource(device_index=args.device, image_config=image_config)
    if args.assets:
        manifest = Path(args.assets) / "catalog.json"
        if manifest.exists():
            catalog = AssetCatalog.load(manifest)
        else:
            catalog = AssetCatalog.from_directory(args.assets)
        return AssetSource(catalog, rng=random.Random(args.seed) if args.seed is not None else None)
    return GallerySource(args.image_path)


def write_puzzle(session: PuzzleSession, output_dir: Path) -> Path:
    """Write pieces, the optimized image and the manifest; returns the manifest path."""
    pieces_dir = output_dir / "pieces"
    pieces_dir.mkdir(parents=True, exist_ok=True)

    image = session.image
    (output_dir / "full.png").write_bytes(encode_image(image.pixels, ".png"))

    piece_map = {}
    for piece in session.pieces:
        # PNG cannot hold a zero-area image
        file_name = None
        if not piece.is_empty:
            piece_path = pieces_dir / f"p_{piece.index}.png"
            piece_path.write_bytes(encode_image(piece.bitmap, ".png"))
            file_name = piece_path.relative_to(output_dir).as_posix()
        piece_map[str(piece.index)] = {
            "file": file_name,
            "row": piece.row,
            "col": piece.col,
            "box": list(piece.box),
        }

    manifest = {
        "display_name": image.source_label,
        "width": image.width,
        "height": image.height,
        "rows": session.grid.rows,
        "cols": session.grid.columns,
        "arrangement": list(session.board.slot_to_piece),
        "pieces": piece_map,
    }
    manifest_path = output_dir / "puzzle.json"
    with open(manifest_path, "w", encoding="utf-8") as f:
        json.dump(manifest, f, indent=2)
    return manifest_path


def main():
    parser = argparse.ArgumentParser(
        description="Slice a picture into a shuffled grid puzzle",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Sources (pick one):
  image_path      A picture file
  --assets DIR    Random image from DIR (catalog.json if present)
  --camera        Capture a frame from a camera
        """
    )
    parser.add_argument("image_path", nargs="?", help="Path to the source image")
    parser.add_argument("--assets", "-a", help="Asset directory to pick a random image from")
    parser.add_argument("--camera", action="store_true", help="Capture from a camera")
    parser.add_argument("--device", type=int, default=0, help="Camera device index")
    parser.add_argument("--grid", "-g", type=parse_grid,
                        help="Grid as RowsxCols (default: last used, or 3x3)")
    parser.add_argument("--output", "-o", default="./puzzle", help="Output directory")
    parser.add_argument("--settings", default=str(config.SETTINGS_PATH), help="Settings file")
    parser.add_argument("--max-dimension", type=int, help="Long-edge cap for the optimized image")
    parser.add_argument("--seed", type=int, help="Random seed for asset choice and shuffle")
    parser.add_argument("--preview", action="store_true", help="Display the shuffled board")
    parser.add_argument("--quiet", "-q", action="store_true", help="Suppress output")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log pipeline details")

    args = parser.parse_args()

    if sum(bool(x) for x in (args.image_path, args.assets, args.camera)) != 1:
        parser.error("choose exactly one of image_path, --assets or --camera")

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    verbose = not args.quiet

    try:
        image_config = config.ImageConfig.from_env()
        if args.max_dimension is not None:
            image_config = config.ImageConfig(max_dimension=args.max_dimension,
                                              jpeg_quality=image_config.jpeg_quality)
    except ValueError as e:
        parser.error(str(e))

    settings = JsonSettingsStore(args.settings)
    session = PuzzleSession(settings, image_config=image_config,
                            rng=random.Random(args.seed) if args.seed is not None else None)

    try:
        if args.grid:
            session.set_difficulty(args.grid)
        if args.grid and not args.grid.is_standard_difficulty:
            print(f"Warning: {args.grid} is outside the usual "
                  f"{config.MIN_PIECES}-{config.MAX_PIECES} piece range")
        report = session.load(build_source(args, image_config))
        manifest_path = write_puzzle(session, Path(args.output))
    except PuzzleError as e:
        print(f"Error: {e}")
        sys.exit(1)

    if verbose:
        print(report.summary())
        print(f"\nArrangement: {list(session.board.slot_to_piece)}")
        print(f"Saved: {manifest_path}")

    if args.preview:
        from visualization import display_board

        board_image = render_board(session.pieces, session.board, session.grid,
                                   session.image.width, session.image.height, show_numbers=True)
        display_board(board_image, session.image.pixels)


if __name__ == "__main__":
    main()
