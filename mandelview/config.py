"""Configuration shared by the explorer session and the command line."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .renderer import RenderParameters
from .viewport import Viewport


@dataclass(frozen=True)
class ExplorerConfig:
    window_size: tuple[int, int] = (512, 512)
    oversample: int = 2
    reference_transform: bool = False
    start: Viewport = field(default_factory=Viewport)
    parameters: RenderParameters = field(default_factory=RenderParameters)
    backend: str = "tensorflow"
    device: Optional[str] = None
    workers: Optional[int] = None

    @property
    def output_size(self) -> tuple[int, int]:
        return self.window_size[0] * self.oversample, self.window_size[1] * self.oversample

    @property
    def transform_size(self) -> Optional[tuple[int, int]]:
        # The classic viewer samples its oversampled texture with the window's
        # own dimensions, so the texture covers twice the zoom span.
        if self.reference_transform:
            return self.window_size
        return None
