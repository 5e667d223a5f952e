"""Command-line entry point: python -m mandelview [options]."""

import logging
from argparse import ArgumentParser
from dataclasses import replace

from .colormaps import list_palette_names
from .settings import load_settings


def build_parser():
    parser = ArgumentParser(prog='mandelview', description='Interactive Mandelbrot set viewer.')

    parser.add_argument('--settings', type=str, dest='settings_path', metavar='PATH',
                        help='JSON settings file (default: settings.json next to the package)')
    parser.add_argument('--width', type=int, help='window width in pixels')
    parser.add_argument('--height', type=int, help='window height in pixels')
    parser.add_argument('--iterations', type=int, dest='max_iterations',
                        help='initial maximum iteration count')
    parser.add_argument('--palette', choices=list_palette_names(), help='initial palette')
    parser.add_argument('--fps', type=int, help='display frame rate')
    parser.add_argument('--no-cursor', dest='highlight_cursor', action='store_false', default=None,
                        help='do not highlight the pixel being computed')
    parser.add_argument('--save-dir', type=str, dest='save_dir',
                        help='directory for images saved with the S key')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='enable debug logging of scans and palette rebuilds')

    return parser


def settings_from_args(opt):
    """Merge parsed command-line options over the loaded settings file."""
    settings = load_settings(opt.settings_path)
    overrides = {
        name: getattr(opt, name)
        for name in ('width', 'height', 'max_iterations', 'palette', 'fps',
                     'highlight_cursor', 'save_dir')
        if getattr(opt, name) is not None
    }
    return replace(settings, **overrides).validate()


def main(argv=None):
    parser = build_parser()
    opt = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if opt.verbose else logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    try:
        settings = settings_from_args(opt)
    except ValueError as e:
        parser.error(str(e))

    from .app import run
    run(settings)
