"""Command-line interface for Screenshot Menu.

Entry point flow:
1. Parse arguments (introspection flags short-circuit)
2. Load configuration and resolve the screenshot directory
3. Check that grimblast, rofi and notify-send are on PATH
4. Route to instant, instant-area, or interactive mode
"""

import argparse
import atexit
import json
import logging
import sys
import uuid
from pathlib import Path
from typing import Callable, Optional

from . import __version__
from .capture import (
    CaptureError,
    CaptureRequest,
    DestinationMode,
    ImageFormat,
    RegionMode,
    RelocationError,
    capture,
)
from .config import (
    Config,
    config_defaults,
    config_schema,
    config_to_dict,
    load_config,
    validate_config_file,
)
from .emit import EVENT_CATALOG, add_handler, configure, emit
from .interactive import run_interactive
from .menu import MenuError, PromptCancelled
from .paths import screenshot_directory
from .tools import MissingToolError, ensure_tools

log = logging.getLogger(__name__)

FATAL_ERRORS = (MissingToolError, PromptCancelled, MenuError, CaptureError, RelocationError)


def create_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="screenshot-menu",
        description="Screenshot helper for Wayland (grimblast + rofi)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                            # Interactive menus (default)
  %(prog)s --instant                  # Full screen straight to disk
  %(prog)s --instant-area             # Select an area, save to disk
  %(prog)s ~/shots --format jpg       # Interactive, custom directory, JPEG
  %(prog)s --rofi-config ~/.config/rofi/shot.rasi
""",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"screenshot-menu {__version__}",
    )
    parser.add_argument(
        "--config",
        metavar="PATH",
        help="Path to config file (default: platform config dir)",
    )

    # Introspection
    parser.add_argument(
        "--print-defaults",
        action="store_true",
        help="Print default configuration as JSON and exit",
    )
    parser.add_argument(
        "--print-config-schema",
        action="store_true",
        help="Print configuration schema as JSON and exit",
    )
    parser.add_argument(
        "--validate-config",
        action="store_true",
        help="Validate configuration file and exit",
    )
    parser.add_argument(
        "--print-resolved",
        action="store_true",
        help="Print resolved configuration as JSON and exit",
    )
    parser.add_argument(
        "--print-event-catalog",
        action="store_true",
        help="Print event catalog as JSON and exit",
    )

    # Capture modes (mutually exclusive)
    mode_group = parser.add_mutually_exclusive_group()
    mode_group.add_argument(
        "--instant",
        action="store_true",
        help="Take an immediate full-screen screenshot and save it (no UI)",
    )
    mode_group.add_argument(
        "--instant-area",
        action="store_true",
        help="Select an area immediately and save it (no menus)",
    )
    mode_group.add_argument(
        "--interactive",
        action="store_true",
        help="Use the rofi menus (default)",
    )

    parser.add_argument(
        "dir",
        nargs="?",
        type=Path,
        help="Screenshot directory (default: XDG_SCREENSHOTS_DIR or ~/Pictures)",
    )
    parser.add_argument(
        "--format", "-f",
        metavar="FORMAT",
        help="Image format: png or jpg (default: png)",
    )
    parser.add_argument(
        "--rofi-config",
        metavar="PATH",
        type=Path,
        help="rofi config file passed to every menu",
    )

    parser.add_argument(
        "--no-events",
        action="store_true",
        help="Do not write structured events to stderr",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    return parser


def _emit_json(payload) -> None:
    print(json.dumps(payload, indent=2, sort_keys=True))


def _handle_introspection(args: argparse.Namespace) -> Optional[int]:
    config_path = Path(args.config).expanduser() if args.config else None

    if args.print_defaults:
        _emit_json(config_defaults())
        return 0

    if args.print_config_schema:
        _emit_json(config_schema())
        return 0

    if args.validate_config:
        errors = validate_config_file(config_path)
        if errors:
            for error in errors:
                print(error, file=sys.stderr)
            return 1
        return 0

    if args.print_resolved:
        _emit_json(config_to_dict(load_config(config_path=config_path)))
        return 0

    if args.print_event_catalog:
        _emit_json({"catalog": EVENT_CATALOG})
        return 0

    return None


def _log_event(event: dict) -> None:
    log.debug("event %s: %s", event["event_type"], event["data"])


def _selected_mode(args: argparse.Namespace) -> str:
    if args.instant:
        return "instant"
    if args.instant_area:
        return "instant-area"
    return "interactive"


def run_operation(mode: str, action: Callable[[], Optional[Path]]) -> int:
    """Run one capture workflow, reporting fatal errors as exit status 1."""
    operation_id = str(uuid.uuid4())
    emit("operation.started", {"operation_id": operation_id, "mode": mode})

    try:
        path = action()
    except FATAL_ERRORS as e:
        emit("error.handled", {"error_type": type(e).__name__, "message": str(e), "mode": mode})
        emit("operation.completed", {
            "operation_id": operation_id,
            "mode": mode,
            "success": False,
            "error_message": str(e),
        })
        log.error("%s", e)
        return 1

    emit("operation.completed", {
        "operation_id": operation_id,
        "mode": mode,
        "success": True,
        "file_path": str(path) if path else None,
    })
    return 0


def main(args: Optional[list[str]] = None) -> int:
    """Main entry point.

    Args:
        args: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    parser = create_argument_parser()
    parsed_args = parser.parse_args(args)

    result = _handle_introspection(parsed_args)
    if result is not None:
        return result

    logging.basicConfig(
        level=logging.DEBUG if parsed_args.debug else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    configure("screenshot-menu", stderr=not parsed_args.no_events)
    if parsed_args.no_events:
        add_handler(_log_event)
    atexit.register(lambda: emit("shutdown", {}))

    config_path = Path(parsed_args.config).expanduser() if parsed_args.config else None
    config: Config = load_config(
        config_path=config_path,
        overrides={
            "default_format": parsed_args.format,
            "rofi_config": parsed_args.rofi_config,
        },
    )

    shot_dir = screenshot_directory(parsed_args.dir)
    emit("config.resolved", {
        "config_path": str(config_path or "default"),
        "source": "cli" if config_path else "default",
        "screenshot_dir": str(shot_dir),
    })

    mode = _selected_mode(parsed_args)
    try:
        ensure_tools(config.required_tools())
    except MissingToolError as e:
        emit("error.handled", {"error_type": "MissingToolError", "message": str(e), "mode": mode})
        log.error("%s", e)
        return 1

    image_format = ImageFormat.parse(config.default_format)

    if parsed_args.instant or parsed_args.instant_area:
        region = RegionMode.FULL_SCREEN if parsed_args.instant else RegionMode.AREA_SELECTION
        request = CaptureRequest(
            region=region,
            destination=DestinationMode.SAVE,
            target_dir=shot_dir,
            image_format=image_format,
        )
        return run_operation(mode, lambda: capture(request, config))

    return run_operation(
        mode,
        lambda: run_interactive(shot_dir, image_format, config.rofi_config, config),
    )


if __name__ == "__main__":
    sys.exit(main())
