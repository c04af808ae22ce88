"""Application state for interactive exploration of the set."""

from __future__ import annotations

from collections import deque
from typing import Callable, Optional

from .config import ExplorerConfig
from .renderer import PixelBuffer, render
from .viewport import Command, Viewport, command_for_key, navigate

Renderer = Callable[..., PixelBuffer]

HISTORY_LIMIT = 256


class ExplorerSession:
    """Thread an immutable :class:`Viewport` through navigation commands.

    Every accepted command yields a new viewport followed by exactly one
    render; keys without a binding leave the session untouched.
    """

    def __init__(
        self,
        config: ExplorerConfig,
        renderer: Renderer = render,
        history_limit: Optional[int] = HISTORY_LIMIT,
    ) -> None:
        self.config = config
        self._renderer = renderer
        self.viewport: Viewport = config.start
        self.buffer: Optional[PixelBuffer] = None
        self.render_count = 0
        self.history: deque[Viewport] = deque(maxlen=history_limit)

    def _render(self) -> PixelBuffer:
        width, height = self.config.output_size
        buffer = self._renderer(
            self.viewport,
            width,
            height,
            parameters=self.config.parameters,
            backend=self.config.backend,
            device=self.config.device,
            workers=self.config.workers,
            transform_size=self.config.transform_size,
        )
        self.buffer = buffer
        self.render_count += 1
        self.history.append(self.viewport)
        return buffer

    def start(self) -> PixelBuffer:
        return self._render()

    def apply(self, command: Command) -> PixelBuffer:
        self.viewport = navigate(self.viewport, command)
        return self._render()

    def handle_key(self, key: str) -> Optional[PixelBuffer]:
        command = command_for_key(key)
        if command is None:
            return None
        return self.apply(command)
