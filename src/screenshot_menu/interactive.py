"""Guided capture: timing, region and destination menus.

Menus are asked in a fixed order; dismissing any of them aborts the whole
flow before anything is captured.
"""

import logging
from pathlib import Path
from typing import Optional

from . import notify
from .capture import (
    CaptureRequest,
    DestinationMode,
    ImageFormat,
    RegionMode,
    capture,
)
from .config import Config, get_config
from .menu import prompt

log = logging.getLogger(__name__)

TIMING_OPTIONS = ["Immediate", "Delayed"]
DELAY_OPTIONS = ["5s", "10s", "20s", "30s", "60s"]
DEFAULT_DELAY = 5

# Option -> mode, in display order. Unknown choices take the *_FALLBACK value.
REGION_CHOICES = {
    "Capture Everything": RegionMode.FULL_SCREEN,
    "Capture Active Display": RegionMode.ACTIVE_OUTPUT,
    "Capture Selection": RegionMode.AREA_SELECTION,
}
REGION_FALLBACK = RegionMode.AREA_SELECTION

DESTINATION_CHOICES = {
    "Copy": DestinationMode.COPY,
    "Save": DestinationMode.SAVE,
    "Copy & Save": DestinationMode.COPY_AND_SAVE,
    "Edit": DestinationMode.EDIT,
}
DESTINATION_FALLBACK = DestinationMode.EDIT


def parse_delay(choice: str) -> int:
    """Seconds from a label like "20s"; unparsable labels give the default."""
    digits = choice.rstrip("s")
    if not (digits.isascii() and digits.isdigit()):
        return DEFAULT_DELAY
    return int(digits)


def choose_delay(rofi_config: Optional[Path], config: Config) -> int:
    when = prompt("Take screenshot", TIMING_OPTIONS, rofi_config, config)
    if when != "Delayed":
        return 0
    return parse_delay(prompt("Choose timer", DELAY_OPTIONS, rofi_config, config))


def choose_region(rofi_config: Optional[Path], config: Config) -> RegionMode:
    choice = prompt("Type of screenshot", list(REGION_CHOICES), rofi_config, config)
    return REGION_CHOICES.get(choice, REGION_FALLBACK)


def choose_destination(rofi_config: Optional[Path], config: Config) -> DestinationMode:
    choice = prompt("How to save", list(DESTINATION_CHOICES), rofi_config, config)
    return DESTINATION_CHOICES.get(choice, DESTINATION_FALLBACK)


def run_interactive(
    target_dir: Path,
    image_format: ImageFormat = ImageFormat.PNG,
    rofi_config: Optional[Path] = None,
    config: Optional[Config] = None,
) -> Optional[Path]:
    """Ask for a capture through menus, count down if requested, then capture.

    Returns:
        Final path of the saved screenshot, or None if no file was written

    Raises:
        PromptCancelled: If any menu is dismissed
        CaptureError: If grimblast fails
    """
    config = config or get_config()

    delay = choose_delay(rofi_config, config)
    region = choose_region(rofi_config, config)
    destination = choose_destination(rofi_config, config)

    request = CaptureRequest(
        region=region,
        destination=destination,
        target_dir=target_dir,
        image_format=image_format,
        rofi_config=rofi_config,
    )
    log.debug("Request: %s (delay %ds)", request, delay)

    if delay > 0:
        notify.countdown(delay, config)

    return capture(request, config)
