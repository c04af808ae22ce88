"""Fixed color table and the colorization of escape results."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from .evaluator import Bound, EscapeResult, Escaped

RGB = tuple[int, int, int]

BOUND_COLOR: RGB = (0, 0, 0)

PALETTE: tuple[RGB, ...] = (
    (42, 72, 88),
    (41, 77, 93),
    (39, 81, 99),
    (37, 86, 103),
    (34, 91, 108),
    (30, 96, 113),
    (26, 101, 117),
    (21, 106, 121),
    (14, 111, 125),
    (5, 116, 128),
    (0, 121, 131),
    (0, 126, 134),
    (0, 132, 136),
    (0, 137, 138),
    (0, 142, 140),
    (0, 147, 141),
    (0, 152, 142),
    (3, 157, 143),
    (18, 162, 143),
    (30, 167, 143),
    (40, 172, 143),
    (50, 177, 142),
    (60, 182, 141),
    (70, 187, 140),
    (80, 191, 139),
    (90, 196, 137),
    (100, 201, 135),
    (110, 205, 133),
    (121, 210, 131),
    (131, 214, 129),
    (142, 218, 127),
    (153, 222, 124),
    (165, 226, 122),
    (176, 230, 120),
    (188, 234, 117),
    (200, 237, 115),
    (212, 241, 113),
    (224, 244, 112),
    (237, 247, 111),
    (250, 250, 110),
)

# Only the first 26 entries are reachable with the classic lookup.
PALETTE_MODULUS = 26
FULL_PALETTE_MODULUS = len(PALETTE)


def check_modulus(palette: Sequence[RGB], modulus: int) -> None:
    if modulus <= 0:
        raise ValueError(f"palette modulus must be positive, got {modulus}")
    if modulus > len(palette):
        raise ValueError(f"palette modulus {modulus} exceeds palette size {len(palette)}")


def colorize(
    result: EscapeResult,
    palette: Sequence[RGB] = PALETTE,
    modulus: int = PALETTE_MODULUS,
) -> RGB:
    """Map a single escape result to its display color."""

    if isinstance(result, Bound):
        return BOUND_COLOR
    if isinstance(result, Escaped):
        check_modulus(palette, modulus)
        return tuple(palette[result.iteration % modulus])
    raise TypeError(f"not an escape result: {result!r}")


def colorize_counts(
    counts: np.ndarray,
    palette: Sequence[RGB] = PALETTE,
    modulus: int = PALETTE_MODULUS,
) -> np.ndarray:
    """Vectorized ``colorize`` over an escape-count grid (``-1`` marks bound points)."""

    check_modulus(palette, modulus)
    table = np.asarray(palette, dtype=np.uint8)
    counts = np.asarray(counts)
    bound = counts < 0
    indices = np.where(bound, 0, counts) % modulus
    rgb = table[indices]
    rgb[bound] = BOUND_COLOR
    return rgb


def palette_from_colormap(name: str, size: int = len(PALETTE)) -> tuple[RGB, ...]:
    """Sample ``size`` evenly spaced colors from a matplotlib colormap."""

    try:
        from matplotlib import colormaps as _mpl_colormaps
        cmap = _mpl_colormaps[name]
    except ImportError:  # Matplotlib < 3.5
        from matplotlib import cm as _mpl_colormaps  # type: ignore
        cmap = _mpl_colormaps.get_cmap(name)

    samples = cmap(np.linspace(0.0, 1.0, size))
    rgb = np.uint8(np.clip(samples[:, :3] * 255, 0, 255))
    return tuple(tuple(int(channel) for channel in row) for row in rgb)
