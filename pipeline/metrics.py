"""
Processing metrics.

Records how long each pipeline stage took, how much the optimizer shrank
the source, and a rough complexity estimate of the picture (grayscale
Shannon entropy).
"""

import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Tuple

import cv2
import numpy as np


@dataclass
class ProcessingReport:
    source_label: str = ""
    origin: str = ""
    grid: Tuple[int, int] = (0, 0)
    original_bytes: int = 0
    original_size: Tuple[int, int] = (0, 0)
    optimized_size: Tuple[int, int] = (0, 0)
    timings_ms: Dict[str, float] = field(default_factory=dict)
    image_entropy: float = 0.0
    complexity_level: str = ""

    @property
    def total_ms(self) -> float:
        return sum(self.timings_ms.values())

    @property
    def was_downscaled(self) -> bool:
        return self.original_size != self.optimized_size

    @contextmanager
    def stage(self, name: str):
        """Time a block and store it under timings_ms[name]."""
        start = time.perf_counter()
        try:
            yield
        finally:
            self.timings_ms[name] = (time.perf_counter() - start) * 1000.0

    def summary(self) -> str:
        lines = [
            f"Image: {self.source_label} ({self.origin})",
            f"Size: {self.original_size[0]}x{self.original_size[1]} -> "
            f"{self.optimized_size[0]}x{self.optimized_size[1]} ({self.original_bytes} bytes)",
            f"Grid: {self.grid[0]}x{self.grid[1]}",
            f"Complexity: {self.complexity_level} (entropy {self.image_entropy:.2f} bits)",
        ]
        for name, ms in self.timings_ms.items():
            lines.append(f"  {name:<10} {ms:8.1f} ms")
        lines.append(f"  {'total':<10} {self.total_ms:8.1f} ms")
        return "\n".join(lines)


def image_entropy(pixels: np.ndarray) -> float:
    """Shannon entropy (bits) of the grayscale histogram, 0..8."""
    gray = pixels if pixels.ndim == 2 else cv2.cvtColor(pixels, cv2.COLOR_RGB2GRAY)
    hist = np.bincount(gray.ravel(), minlength=256).astype(np.float64)
    total = hist.sum()
    if total == 0:
        return 0.0
    p = hist[hist > 0] / total
    return float(-np.sum(p * np.log2(p)))


def complexity_level(entropy: float) -> str:
    if entropy < 4.0:
        return "low"
    if entropy < 6.5:
        return "medium"
    return "high"
