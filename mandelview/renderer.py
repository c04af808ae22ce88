"""Rendering primitives for Mandelbrot pixel buffers."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Optional

import numpy as np
import PIL.Image
import tensorflow as tf

from .evaluator import (
    BOUND_COUNT,
    DEFAULT_DIVERGENCE_RADIUS,
    DEFAULT_ITERATION_CAP,
    escape_count,
    evaluate,
)
from .palette import PALETTE, PALETTE_MODULUS, RGB, check_modulus, colorize_counts
from .viewport import SamplingMetadata, Viewport, pixel_to_complex, sample_axes, sampling_metadata

BACKENDS = ("tensorflow", "python")


@dataclass(frozen=True)
class RenderParameters:
    """Numeric and color settings shared by every pixel of a render."""

    iteration_cap: int = DEFAULT_ITERATION_CAP
    divergence_radius: float = DEFAULT_DIVERGENCE_RADIUS
    palette: tuple[RGB, ...] = field(default=PALETTE, repr=False)
    palette_modulus: int = PALETTE_MODULUS


@dataclass(frozen=True)
class PixelBuffer:
    """A complete ``height x width`` RGB grid stored row-major."""

    pixels: np.ndarray

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    def pixel(self, px: int, py: int) -> RGB:
        r, g, b = self.pixels[py, px]
        return int(r), int(g), int(b)

    def to_image(self) -> PIL.Image.Image:
        return PIL.Image.fromarray(self.pixels)


@tf.function
def _escape_step(
    i: tf.Tensor,
    zr: tf.Tensor,
    zi: tf.Tensor,
    cr: tf.Tensor,
    ci: tf.Tensor,
    counts: tf.Tensor,
    active: tf.Tensor,
    radius: tf.Tensor,
) -> tuple[tf.Tensor, tf.Tensor, tf.Tensor, tf.Tensor]:
    """Advance every point that has not escaped by one update."""

    zr_new = (zr * zr - zi * zi) + cr
    zi_new = (zr * zi + zi * zr) + ci
    zr = tf.where(active, zr_new, zr)
    zi = tf.where(active, zi_new, zi)
    escaped_now = tf.logical_and(active, tf.abs(tf.complex(zr, zi)) > radius)
    counts = tf.where(escaped_now, i, counts)
    active = tf.logical_and(active, tf.logical_not(escaped_now))
    return zr, zi, counts, active


@tf.function
def _escape_run(cr: tf.Tensor, ci: tf.Tensor, iteration_cap: tf.Tensor, radius: tf.Tensor) -> tf.Tensor:
    """Iterate the whole grid with a TensorFlow while loop and return escape counts."""

    iteration_cap = tf.cast(iteration_cap, tf.int32)
    i = tf.constant(0, dtype=tf.int32)
    zr = tf.zeros_like(cr)
    zi = tf.zeros_like(ci)
    counts = tf.fill(tf.shape(cr), tf.constant(BOUND_COUNT, dtype=tf.int32))
    active = tf.ones_like(counts, tf.bool)

    def cond(i, zr, zi, counts, active):
        return tf.logical_and(tf.less(i, iteration_cap), tf.reduce_any(active))

    def body(i, zr, zi, counts, active):
        zr, zi, counts, active = _escape_step(i, zr, zi, cr, ci, counts, active, radius)
        return i + 1, zr, zi, counts, active

    _, _, _, counts, _ = tf.while_loop(cond, body, (i, zr, zi, counts, active))
    return counts


def _check_dimensions(width: int, height: int) -> None:
    if int(width) <= 0 or int(height) <= 0:
        raise ValueError(f"output dimensions must be positive, got {width}x{height}")


def _metadata_for(
    viewport: Viewport,
    width: int,
    height: int,
    transform_size: Optional[tuple[int, int]],
) -> SamplingMetadata:
    x_res, y_res = transform_size if transform_size is not None else (width, height)
    return sampling_metadata(viewport, x_res, y_res)


def _escape_grid_tensorflow(
    metadata: SamplingMetadata,
    width: int,
    height: int,
    params: RenderParameters,
    device: Optional[str],
) -> np.ndarray:
    xs, ys = sample_axes(metadata, width, height)
    with tf.device(device if device is not None else "/CPU:0"):
        x_tf = tf.convert_to_tensor(xs, dtype=tf.float64)
        y_tf = tf.convert_to_tensor(ys, dtype=tf.float64)
        cr, ci = tf.meshgrid(x_tf, y_tf)
        counts = _escape_run(
            cr,
            ci,
            tf.constant(params.iteration_cap, dtype=tf.int32),
            tf.constant(params.divergence_radius, dtype=tf.float64),
        )
    return counts.numpy().astype(np.int32, copy=False)


def _escape_row(metadata: SamplingMetadata, py: int, width: int, params: RenderParameters) -> list[int]:
    row = []
    for px in range(width):
        x, y = pixel_to_complex(metadata, px, py)
        result = evaluate(complex(x, y), params.iteration_cap, params.divergence_radius)
        row.append(escape_count(result))
    return row


def _escape_grid_python(
    metadata: SamplingMetadata,
    width: int,
    height: int,
    params: RenderParameters,
    workers: Optional[int],
) -> np.ndarray:
    counts = np.empty((height, width), dtype=np.int32)
    if workers is not None and workers > 1:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            rows = pool.map(lambda py: _escape_row(metadata, py, width, params), range(height))
            for py, row in enumerate(rows):
                counts[py, :] = row
    else:
        for py in range(height):
            counts[py, :] = _escape_row(metadata, py, width, params)
    return counts


def escape_grid(
    viewport: Viewport,
    width: int,
    height: int,
    *,
    parameters: Optional[RenderParameters] = None,
    backend: str = "tensorflow",
    device: Optional[str] = None,
    workers: Optional[int] = None,
    transform_size: Optional[tuple[int, int]] = None,
) -> np.ndarray:
    """Escape iteration of every pixel, ``-1`` where the point stayed bound."""

    _check_dimensions(width, height)
    params = parameters if parameters is not None else RenderParameters()
    metadata = _metadata_for(viewport, width, height, transform_size)
    if backend == "tensorflow":
        return _escape_grid_tensorflow(metadata, int(width), int(height), params, device)
    if backend == "python":
        return _escape_grid_python(metadata, int(width), int(height), params, workers)
    raise ValueError(f"unknown backend '{backend}'. Valid choices: {', '.join(BACKENDS)}.")


def render(
    viewport: Viewport,
    out_width: int,
    out_height: int,
    *,
    parameters: Optional[RenderParameters] = None,
    backend: str = "tensorflow",
    device: Optional[str] = None,
    workers: Optional[int] = None,
    transform_size: Optional[tuple[int, int]] = None,
) -> PixelBuffer:
    """Render ``viewport`` into a freshly allocated ``out_width x out_height`` buffer."""

    params = parameters if parameters is not None else RenderParameters()
    check_modulus(params.palette, params.palette_modulus)
    counts = escape_grid(
        viewport,
        out_width,
        out_height,
        parameters=params,
        backend=backend,
        device=device,
        workers=workers,
        transform_size=transform_size,
    )
    pixels = colorize_counts(counts, params.palette, params.palette_modulus)
    return PixelBuffer(pixels=np.ascontiguousarray(pixels, dtype=np.uint8))
