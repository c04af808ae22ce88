"""Viewport values, the pixel to plane transform and navigation commands."""

from __future__ import annotations

import enum
from dataclasses import dataclass, replace
from typing import Optional

import numpy as np


@dataclass(frozen=True)
class Viewport:
    """Region of the complex plane shown by a render.

    ``center`` is the reference-corner offset and ``zoom`` the full span
    covered along both axes of the output grid.
    """

    center: tuple[float, float] = (1.0, 0.0)
    zoom: float = 4.0

    def pan(self, dx: float, dy: float) -> "Viewport":
        return replace(self, center=(self.center[0] + dx, self.center[1] + dy))

    def scaled(self, factor: float) -> "Viewport":
        return replace(self, zoom=self.zoom * factor)


@dataclass(frozen=True)
class SamplingMetadata:
    """Per-axis affine transform from pixel indices to plane coordinates."""

    x_offset: float
    y_offset: float
    zoom: float
    x_res: int
    y_res: int


def sampling_metadata(viewport: Viewport, x_res: int, y_res: int) -> SamplingMetadata:
    if x_res <= 0 or y_res <= 0:
        raise ValueError(f"transform size must be positive, got {x_res}x{y_res}")
    zoom = float(viewport.zoom)
    return SamplingMetadata(
        x_offset=float(viewport.center[0]) + zoom / 2.0,
        y_offset=float(viewport.center[1]) + zoom / 2.0,
        zoom=zoom,
        x_res=int(x_res),
        y_res=int(y_res),
    )


def pixel_to_complex(metadata: SamplingMetadata, px, py):
    """Plane coordinates of pixel column ``px`` and row ``py``.

    Works on scalars and on numpy arrays alike; the y-axis is flipped so that
    increasing rows move towards smaller imaginary parts.
    """

    x = (px / metadata.x_res) * metadata.zoom - metadata.x_offset
    y = -((py / metadata.y_res) * metadata.zoom - metadata.y_offset)
    return x, y


def sample_axes(metadata: SamplingMetadata, width: int, height: int) -> tuple[np.ndarray, np.ndarray]:
    """Real parts for every column and imaginary parts for every row."""

    cols = np.arange(width, dtype=np.float64)
    rows = np.arange(height, dtype=np.float64)
    xs, _ = pixel_to_complex(metadata, cols, np.float64(0.0))
    _, ys = pixel_to_complex(metadata, np.float64(0.0), rows)
    return np.asarray(xs, dtype=np.float64), np.asarray(ys, dtype=np.float64)


class Command(enum.Enum):
    PAN_LEFT = "left"
    PAN_RIGHT = "right"
    PAN_UP = "up"
    PAN_DOWN = "down"
    ZOOM_IN = "j"
    ZOOM_OUT = "k"


_KEY_ALIASES = {command.value: command for command in Command}


def command_for_key(key: str) -> Optional[Command]:
    """Navigation command bound to ``key``; ``None`` for keys that do nothing."""

    return _KEY_ALIASES.get(key.strip().lower())


def navigate(viewport: Viewport, command: Command) -> Viewport:
    """Return the viewport that results from applying ``command``."""

    step = viewport.zoom / 4.0
    if command is Command.PAN_LEFT:
        return viewport.pan(step, 0.0)
    if command is Command.PAN_RIGHT:
        return viewport.pan(-step, 0.0)
    if command is Command.PAN_UP:
        return viewport.pan(0.0, step)
    if command is Command.PAN_DOWN:
        return viewport.pan(0.0, -step)
    if command is Command.ZOOM_IN:
        return viewport.scaled(0.5)
    if command is Command.ZOOM_OUT:
        return viewport.scaled(2.0)
    raise ValueError(f"unknown navigation command: {command!r}")
