"""Public API for the Mandelbrot explorer."""

from .config import ExplorerConfig
from .evaluator import BOUND, Bound, EscapeResult, Escaped, evaluate
from .palette import FULL_PALETTE_MODULUS, PALETTE, PALETTE_MODULUS, colorize, colorize_counts, palette_from_colormap
from .renderer import PixelBuffer, RenderParameters, escape_grid, render
from .session import ExplorerSession
from .viewport import Command, SamplingMetadata, Viewport, command_for_key, navigate, pixel_to_complex

__all__ = [
    "BOUND",
    "Bound",
    "Command",
    "EscapeResult",
    "Escaped",
    "ExplorerConfig",
    "ExplorerSession",
    "FULL_PALETTE_MODULUS",
    "PALETTE",
    "PALETTE_MODULUS",
    "PixelBuffer",
    "RenderParameters",
    "SamplingMetadata",
    "Viewport",
    "colorize",
    "colorize_counts",
    "command_for_key",
    "escape_grid",
    "evaluate",
    "navigate",
    "palette_from_colormap",
    "pixel_to_complex",
    "render",
]
