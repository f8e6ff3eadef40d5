"""Desktop notifications and the pre-capture countdown."""

import logging
import subprocess
import time
from typing import Optional

from .config import Config, get_config

log = logging.getLogger(__name__)

# Final stretch of a countdown that gets one notification per second
TICK_WINDOW = 10


def send(title: str, body: str, config: Optional[Config] = None) -> None:
    """Show a notification via notify-send. Failures are ignored."""
    config = config or get_config()
    try:
        subprocess.run(
            [config.notify_send, "-t", str(config.notify_timeout_ms), title, body],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
    except (OSError, subprocess.SubprocessError) as e:
        log.debug("Could not show notification: %s", e)


def countdown(seconds: int, config: Optional[Config] = None) -> None:
    """Count down to a capture.

    Delays longer than ten seconds get a single notification up front and a
    silent wait; the last ten seconds are announced one by one.
    """
    if seconds > TICK_WINDOW:
        send("Taking screenshot", f"in {seconds} seconds", config)
        time.sleep(seconds - TICK_WINDOW)
        seconds = TICK_WINDOW

    while seconds > 0:
        send("Taking screenshot", f"in {seconds} seconds", config)
        time.sleep(1)
        seconds -= 1
