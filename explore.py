import os
import sys
import warnings
from argparse import ArgumentParser
from pathlib import Path
from typing import Any

_VERBOSE_FLAGS = {"--verbose", "-v"}
_cli_verbose = any(arg in _VERBOSE_FLAGS for arg in sys.argv[1:])
_env_log_level = os.environ.get("TF_CPP_MIN_LOG_LEVEL")
_suppress_messages = (not _cli_verbose) and _env_log_level != "0"

if _suppress_messages and _env_log_level is None:
    os.environ["TF_CPP_MIN_LOG_LEVEL"] = "3"

if _suppress_messages:
    warnings.filterwarnings(
        "ignore",
        message=r"Protobuf gencode version .* is exactly one major version older than the runtime version .*",
        category=UserWarning,
        module="google.protobuf",
    )

VERBOSE = _cli_verbose


def log(message, *args, **kwargs):
    if VERBOSE:
        print(message, *args, **kwargs)


import tensorflow as tf
import imageio
import PIL.Image

if _suppress_messages:
    tf.get_logger().setLevel("ERROR")

from mandelview import (
    FULL_PALETTE_MODULUS,
    PALETTE,
    PALETTE_MODULUS,
    ExplorerConfig,
    ExplorerSession,
    PixelBuffer,
    RenderParameters,
    Viewport,
    command_for_key,
    palette_from_colormap,
)
from mandelview.renderer import BACKENDS

DEFAULT_DEVICE = '/CPU:0'


def build_parser():
    parser = ArgumentParser(description='Render and navigate the Mandelbrot set without a window.')

    parser.add_argument('--center', type=float, nargs=2,
                        dest='center', help='reference-corner offset of the viewport in the complex plane',
                        metavar=('X', 'Y'), default=[1.0, 0.0])

    parser.add_argument('--zoom', type=float,
                        dest='zoom', help='span of the complex plane visible along each axis',
                        metavar='ZOOM', default=4.0)

    parser.add_argument('--width', type=int,
                        dest='width', help='logical window width in pixels',
                        metavar='WIDTH', default=512)

    parser.add_argument('--height', type=int,
                        dest='height', help='logical window height in pixels',
                        metavar='HEIGHT', default=512)

    parser.add_argument('--oversample', type=int,
                        dest='oversample', help='factor between window size and rendered resolution',
                        metavar='FACTOR', default=2)

    parser.add_argument('--reference-transform', dest='reference_transform', action='store_true',
                        help='sample the oversampled buffer with the window size, as the classic viewer does')

    parser.add_argument('--max-iterations', type=int,
                        dest='max_iterations', help='iteration cap before a point counts as bound',
                        metavar='MAX_ITERATIONS', default=1000)

    parser.add_argument('--radius', type=float,
                        dest='radius', help='divergence radius',
                        metavar='RADIUS', default=2.0)

    parser.add_argument('--full-palette', dest='full_palette', action='store_true',
                        help='cycle through all %d palette entries instead of the first %d'
                             % (FULL_PALETTE_MODULUS, PALETTE_MODULUS))

    parser.add_argument('--colormap', type=str,
                        dest='colormap', help='matplotlib colormap to sample the palette from (e.g. "viridis")',
                        metavar='COLORMAP', default=None)

    parser.add_argument('--backend', choices=BACKENDS, default='tensorflow',
                        help='escape-time kernel to use')

    parser.add_argument('--device', type=str, default=DEFAULT_DEVICE,
                        help='TensorFlow device for the tensorflow backend')

    parser.add_argument('--workers', type=int, default=None,
                        help='threads used by the python backend')

    parser.add_argument('--keys', type=str, default='',
                        help='comma separated navigation keys applied in order (left, right, up, down, j, k)')

    parser.add_argument('--output', type=str, default='mandelbrot.png',
                        help='file the final view is written to. Format follows the extension.')

    parser.add_argument('--gif', type=str, default=None,
                        help='optional GIF collecting every rendered view')

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging, including TensorFlow diagnostics.')

    return parser


def resolve_palette(opt):
    if opt.colormap is None:
        return PALETTE
    try:
        return palette_from_colormap(opt.colormap)
    except (KeyError, ValueError):
        print(f"Unknown colormap '{opt.colormap}', using the built-in palette.")
        return PALETTE


def config_from_args(opt, parser: ArgumentParser) -> ExplorerConfig:
    if opt.width <= 0 or opt.height <= 0:
        parser.error('--width and --height must be positive.')
    if opt.oversample <= 0:
        parser.error('--oversample must be positive.')
    if opt.zoom <= 0:
        parser.error('--zoom must be positive.')
    if opt.max_iterations < 0:
        parser.error('--max-iterations must not be negative.')
    if opt.radius <= 0:
        parser.error('--radius must be positive.')
    if opt.workers is not None and opt.workers <= 0:
        parser.error('--workers must be positive.')

    parameters = RenderParameters(
        iteration_cap=opt.max_iterations,
        divergence_radius=opt.radius,
        palette=resolve_palette(opt),
        palette_modulus=FULL_PALETTE_MODULUS if opt.full_palette else PALETTE_MODULUS,
    )

    return ExplorerConfig(
        window_size=(opt.width, opt.height),
        oversample=opt.oversample,
        reference_transform=bool(opt.reference_transform),
        start=Viewport(center=(opt.center[0], opt.center[1]), zoom=opt.zoom),
        parameters=parameters,
        backend=opt.backend,
        device=opt.device,
        workers=opt.workers,
    )


def parse_keys(keys: str) -> list[str]:
    return [key.strip() for key in keys.split(',') if key.strip()]


def _pil_format_name(ext: str) -> str:
    upper = ext.upper()
    if upper == "JPG":
        return "JPEG"
    if upper == "TIF":
        return "TIFF"
    return upper


def write_single_image(image: PIL.Image.Image, output_path: Path) -> None:
    """Write ``image`` to ``output_path`` in the format named by its extension."""

    pil_format = _pil_format_name(output_path.suffix.lstrip(".") or "png")
    output_path.parent.mkdir(parents=True, exist_ok=True)
    image.save(str(output_path), format=pil_format)


def write_gif(writer: Any, buffer: PixelBuffer) -> None:
    """Append ``buffer`` to an active GIF writer."""

    writer.append_data(buffer.pixels)


def run(argv=None) -> ExplorerSession:
    """Parse ``argv``, render the start view and every key, and write the outputs."""

    parser = build_parser()
    opt = parser.parse_args(argv)

    global VERBOSE
    VERBOSE = bool(opt.verbose)

    config = config_from_args(opt, parser)
    keys = parse_keys(opt.keys)

    log("TensorFlow version: %s" % tf.__version__)
    log("Backend: %s, output %dx%d" % ((config.backend,) + config.output_size))

    session = ExplorerSession(config)

    gif_writer = None
    if opt.gif is not None:
        gif_path = Path(opt.gif).expanduser().resolve()
        gif_path.parent.mkdir(parents=True, exist_ok=True)
        gif_writer = imageio.get_writer(str(gif_path), mode='I', duration=0.5, loop=0)

    try:
        buffer = session.start()
        if gif_writer is not None:
            write_gif(gif_writer, buffer)

        for index, key in enumerate(keys):
            print("key {0} out of {1}".format(index + 1, len(keys)), end='\r')
            if command_for_key(key) is None:
                log("Ignoring key '%s'" % key)
                continue
            buffer = session.handle_key(key)
            log("%s -> center=(%.6g, %.6g) zoom=%.6g"
                % (key, session.viewport.center[0], session.viewport.center[1], session.viewport.zoom))
            if gif_writer is not None:
                write_gif(gif_writer, buffer)
    finally:
        if gif_writer is not None:
            gif_writer.close()

    output_path = Path(opt.output).expanduser().resolve()
    write_single_image(session.buffer.to_image(), output_path)
    log("Wrote %s after %d renders" % (output_path, session.render_count))
    return session


def main(argv=None):
    run(argv)


if __name__ == '__main__':
    main()
