import numpy as np
import pytest

from mandelview.config import ExplorerConfig
from mandelview.renderer import PixelBuffer, RenderParameters
from mandelview.session import ExplorerSession
from mandelview.viewport import Command, Viewport


class RecordingRenderer:
    def __init__(self):
        self.calls = []

    def __call__(self, viewport, width, height, **kwargs):
        self.calls.append((viewport, width, height, kwargs))
        return PixelBuffer(pixels=np.zeros((height, width, 3), dtype=np.uint8))


@pytest.fixture
def recorder():
    return RecordingRenderer()


def test_config_defaults():
    config = ExplorerConfig()
    assert config.window_size == (512, 512)
    assert config.output_size == (1024, 1024)
    assert config.transform_size is None
    assert config.start == Viewport(center=(1.0, 0.0), zoom=4.0)
    assert config.parameters.iteration_cap == 1000
    assert config.parameters.divergence_radius == 2.0


def test_reference_transform_uses_window_size():
    config = ExplorerConfig(window_size=(300, 200), oversample=3, reference_transform=True)
    assert config.output_size == (900, 600)
    assert config.transform_size == (300, 200)


def test_start_renders_initial_view(recorder):
    session = ExplorerSession(ExplorerConfig(window_size=(8, 6)), renderer=recorder)
    buffer = session.start()
    assert session.render_count == 1
    assert session.buffer is buffer
    viewport, width, height, kwargs = recorder.calls[0]
    assert viewport == Viewport()
    assert (width, height) == (16, 12)
    assert kwargs["transform_size"] is None
    assert kwargs["backend"] == "tensorflow"


def test_each_command_renders_once(recorder):
    session = ExplorerSession(ExplorerConfig(window_size=(4, 4)), renderer=recorder)
    session.start()
    session.handle_key("left")
    session.handle_key("J")
    assert session.render_count == 3
    assert len(recorder.calls) == 3
    assert session.viewport == Viewport(center=(2.0, 0.0), zoom=2.0)
    assert [call[0] for call in recorder.calls] == list(session.history)


def test_unbound_key_is_a_no_op(recorder):
    session = ExplorerSession(ExplorerConfig(window_size=(4, 4)), renderer=recorder)
    session.start()
    before = session.viewport
    assert session.handle_key("q") is None
    assert session.render_count == 1
    assert session.viewport is before


def test_apply_threads_new_viewports(recorder):
    session = ExplorerSession(ExplorerConfig(window_size=(4, 4)), renderer=recorder)
    session.start()
    first = session.viewport
    session.apply(Command.ZOOM_OUT)
    session.apply(Command.ZOOM_IN)
    assert session.viewport == first
    assert session.viewport is not first
    assert len(session.history) == 3


def test_session_with_real_renderer():
    config = ExplorerConfig(
        window_size=(4, 3),
        oversample=1,
        parameters=RenderParameters(iteration_cap=50),
        backend="python",
    )
    session = ExplorerSession(config)
    buffer = session.start()
    assert buffer.pixels.shape == (3, 4, 3)
    moved = session.handle_key("k")
    assert moved.pixels.shape == (3, 4, 3)
    assert session.viewport.zoom == 8.0


def test_history_keeps_only_recent_viewports(recorder):
    session = ExplorerSession(ExplorerConfig(window_size=(4, 4)), renderer=recorder, history_limit=2)
    session.start()
    session.handle_key("left")
    session.handle_key("j")
    assert session.render_count == 3
    assert list(session.history) == [
        Viewport(center=(2.0, 0.0), zoom=4.0),
        Viewport(center=(2.0, 0.0), zoom=2.0),
    ]
