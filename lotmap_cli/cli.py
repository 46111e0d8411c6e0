"""
lotmap CLI - Main entry point.

Loads a parking scheme from JSON, runs it through the same service and view
model the map screen uses, and prints the layout or writes a preview image.
"""

import argparse
import json
import logging
import sys
import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import cv2
import yaml

from lotmap_scheme import (
    EventType,
    GeometryNormalizer,
    MainThreadDispatcher,
    ReadyScheme,
    SchemeViewModel,
    Size,
)
from lotmap_viewer import (
    FileSchemeFetcher,
    ParkingSchemeService,
    SchemeSurface,
    ViewerConfig,
)
from lotmap_wire import SchemePayload
from lotmap_wire.logging import create_logger

logger = logging.getLogger(__name__)


def setup_logging(level: str = "WARNING") -> None:
    """
    Setup root logging for the CLI.

    Args:
        level: Level name (DEBUG, INFO, WARNING, ERROR)
    """
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        raise ValueError(f"Invalid log level: {level}")

    logging.basicConfig(
        level=numeric,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def load_config(config_path: Optional[str]) -> ViewerConfig:
    """
    Load viewer configuration (defaults when no path given).

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If YAML is invalid
    """
    if config_path is None:
        return ViewerConfig.default()

    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        return ViewerConfig.from_yaml(path)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {config_path}: {e}")


def parse_size(value: str) -> Tuple[float, float]:
    """Parse 'WIDTHxHEIGHT' (e.g. 390x844)."""
    try:
        width, height = value.lower().split("x")
        size = (float(width), float(height))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected WIDTHxHEIGHT, got {value!r}")
    if size[0] <= 0 or size[1] <= 0:
        raise argparse.ArgumentTypeError(f"Size must be positive, got {value!r}")
    return size


def scheme_source(
    scheme_path: Optional[Path],
    config: ViewerConfig,
) -> Tuple[FileSchemeFetcher, str]:
    """
    Fetcher and parking id for a command.

    An explicit scheme file wins; otherwise the scheme is read from
    source.directory as <parking_id>.json.

    Raises:
        ValueError: If neither a file nor a configured parking_id is given
    """
    if scheme_path is not None:
        return FileSchemeFetcher(scheme_path), config.parking_id or scheme_path.stem

    if config.parking_id is None:
        raise ValueError("No scheme given: pass a scheme file or set parking_id in the config")
    return FileSchemeFetcher(config.source.directory), config.parking_id


def load_surface(
    scheme_path: Optional[Path],
    config: ViewerConfig,
    viewport: Optional[Tuple[float, float]] = None,
    timeout: float = 10.0,
    log_level: int = logging.WARNING,
) -> SchemeSurface:
    """
    Load a scheme file through ParkingSchemeService and wait for the layout.

    Args:
        scheme_path: JSON payload file (None: config source + parking_id)
        config: Viewer configuration
        viewport: Override for the configured viewport (width, height)
        timeout: Seconds to wait for LAYOUT_READY / ERROR
        log_level: Level for the structured loggers

    Returns:
        SchemeSurface holding the final state (check .error)

    Raises:
        TimeoutError: If no layout or error arrives in time
    """
    fetcher, parking_id = scheme_source(scheme_path, config)
    dispatcher = MainThreadDispatcher()
    viewport_size = Size(*viewport) if viewport else config.viewport.viewport_size
    viewmodel = SchemeViewModel(
        viewport_size=viewport_size,
        settings=config.scheme_settings(),
        dispatcher=dispatcher,
        logger=create_logger("viewmodel", level=log_level),
    )
    surface = SchemeSurface()
    viewmodel.add_observer(surface.on_event)

    service = ParkingSchemeService(
        parking_id=parking_id,
        fetcher=fetcher,
        viewmodel=viewmodel,
        place_size=config.scheme.place_footprint,
        logger=create_logger("service", level=log_level),
    )

    def finished() -> bool:
        return any(
            e.event_type in (EventType.MIN_SCALE_READY, EventType.ERROR)
            for e in surface.events
        )

    try:
        service.load_scheme()
        deadline = time.monotonic() + timeout
        while not finished():
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise TimeoutError(f"No layout for {parking_id} after {timeout}s")
            dispatcher.run_pending(timeout=min(remaining, 0.1))
    finally:
        service.close()

    return surface


def describe_layout(surface: SchemeSurface) -> Dict[str, Any]:
    """JSON-compatible summary of a loaded surface."""
    if surface.error is not None:
        return {'error': surface.error}

    state = surface.state
    result: Dict[str, Any] = {
        'content_size': [surface.content_size.width, surface.content_size.height],
        'min_scale': surface.zoom.minimum if surface.zoom else None,
        'max_scale': surface.zoom.maximum if surface.zoom else None,
        'content_origin': [surface.content_origin.x, surface.content_origin.y],
        'empty': not isinstance(state, ReadyScheme),
    }
    if isinstance(state, ReadyScheme):
        result['place_count'] = state.model.place_count
        result['line_count'] = state.model.line_count
        result['scheme_rect'] = {
            'origin': [state.rect.origin.x, state.rect.origin.y],
            'size': [state.rect.size.width, state.rect.size.height],
        }
    return result


def scheme_argument(args: argparse.Namespace) -> Optional[Path]:
    return Path(args.scheme) if args.scheme else None


def cmd_fit(args: argparse.Namespace, config: ViewerConfig) -> int:
    surface = load_surface(
        scheme_argument(args), config,
        viewport=args.viewport,
        log_level=logging.getLogger().getEffectiveLevel(),
    )
    print(json.dumps(describe_layout(surface), indent=2))
    return 0 if surface.error is None else 1


def cmd_render(args: argparse.Namespace, config: ViewerConfig) -> int:
    surface = load_surface(
        scheme_argument(args), config,
        viewport=args.viewport,
        log_level=logging.getLogger().getEffectiveLevel(),
    )
    if surface.error is not None:
        print(f"Error: {surface.error}", file=sys.stderr)
        return 1

    image = surface.render(scale=args.scale)
    if image is None:
        print("Scheme has no places; nothing to render", file=sys.stderr)
        return 1

    output = Path(args.output)
    output.parent.mkdir(parents=True, exist_ok=True)
    if not cv2.imwrite(str(output), image):
        print(f"Error: could not write {output}", file=sys.stderr)
        return 1

    print(f"✓ Preview written: {output} ({image.shape[1]}x{image.shape[0]})")
    return 0


def cmd_inspect(args: argparse.Namespace, config: ViewerConfig) -> int:
    """Normalize synchronously and print the raw/padded bounds."""
    fetcher, parking_id = scheme_source(scheme_argument(args), config)
    payload = fetcher.fetch(parking_id)
    decoded = SchemePayload.from_dict(payload)
    model = decoded.to_scheme_model(config.scheme.place_footprint)

    settings = config.scheme_settings()
    result = GeometryNormalizer.normalize(
        model,
        width_offset=settings.width_offset,
        height_offset=settings.height_offset,
        bounds_mode=settings.bounds_mode,
    )

    summary = {
        'floors': decoded.floor_count,
        'place_count': result.model.place_count,
        'line_count': result.model.line_count,
        'scheme_rect': {
            'origin': [result.rect.origin.x, result.rect.origin.y],
            'size': [result.rect.size.width, result.rect.size.height],
        },
        'issues': list(result.issues),
    }
    print(json.dumps(summary, indent=2))
    return 0


SCHEME_HELP = 'Path to scheme JSON (default: <source.directory>/<parking_id>.json)'


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lotmap-cli",
        description="lotmap CLI - Inspect, fit and preview parking schemes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Zoom bounds for a phone-sized viewport
  lotmap-cli fit data/schemes/sample_floor.json --viewport 390x844

  # Preview image at the fitted zoom
  lotmap-cli render data/schemes/sample_floor.json --output runs/preview.png

  # Bounds and dropped geometry
  lotmap-cli inspect data/schemes/sample_floor.json

  # Scheme named by parking_id in the configured source directory
  lotmap-cli --config config/viewer.yaml fit
"""
    )

    # Global arguments
    parser.add_argument(
        "--config",
        default=None,
        help="Viewer config YAML (default: built-in defaults)"
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level (default: WARNING)"
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    fit = subparsers.add_parser('fit', help='Print content size and zoom bounds')
    fit.add_argument('scheme', nargs='?', default=None, help=SCHEME_HELP)
    fit.add_argument('--viewport', type=parse_size, default=None, help='WIDTHxHEIGHT')

    render = subparsers.add_parser('render', help='Write a preview image')
    render.add_argument('scheme', nargs='?', default=None, help=SCHEME_HELP)
    render.add_argument('--output', default='scheme_preview.png', help='Output image path')
    render.add_argument('--viewport', type=parse_size, default=None, help='WIDTHxHEIGHT')
    render.add_argument('--scale', type=float, default=None, help='Zoom (default: fitted minimum)')

    inspect = subparsers.add_parser('inspect', help='Print bounds and dropped geometry')
    inspect.add_argument('scheme', nargs='?', default=None, help=SCHEME_HELP)

    return parser


COMMANDS = {
    'fit': cmd_fit,
    'render': cmd_render,
    'inspect': cmd_inspect,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        setup_logging(args.log_level)
        config = load_config(args.config)
        return COMMANDS[args.command](args, config)
    except Exception as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
