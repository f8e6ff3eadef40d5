"""Screenshot capture through grimblast.

grimblast does the actual grab and applies the destination action (clipboard,
file, editor). It writes into the home directory; a written file is moved
into the screenshot directory afterwards.
"""

import logging
import shutil
import subprocess
from contextlib import contextmanager, nullcontext
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Iterator, Optional

from . import notify
from .config import Config, get_config
from .emit import emit
from .paths import home_dir
from .tools import has_tool

log = logging.getLogger(__name__)


class CaptureError(Exception):
    """Raised when capture fails."""
    pass


class RelocationError(Exception):
    """Raised when a captured file cannot be placed in the screenshot directory."""

    def __init__(self, source: Path, dest: Path, reason: Exception):
        super().__init__(f"Could not move {source} to {dest}: {reason}")
        self.source = source
        self.dest = dest


class RegionMode(Enum):
    """What grimblast captures. Values are grimblast's target keywords."""

    FULL_SCREEN = "screen"
    ACTIVE_OUTPUT = "output"
    AREA_SELECTION = "area"


class DestinationMode(Enum):
    """What grimblast does with the image. Values are grimblast's action keywords."""

    COPY = "copy"
    SAVE = "save"
    COPY_AND_SAVE = "copysave"
    EDIT = "edit"


class ImageFormat(Enum):
    PNG = "png"
    JPEG = "jpg"

    @property
    def extension(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: Optional[str]) -> "ImageFormat":
        """Map a user-supplied format name; anything but jpg/jpeg is PNG."""
        if value and value.lower() in ("jpg", "jpeg"):
            return cls.JPEG
        return cls.PNG


@dataclass(frozen=True)
class CaptureRequest:
    """Everything needed for one capture attempt."""

    region: RegionMode
    destination: DestinationMode
    target_dir: Path
    image_format: ImageFormat = ImageFormat.PNG
    rofi_config: Optional[Path] = None


def timestamped_filename(
    image_format: ImageFormat = ImageFormat.PNG,
    now: Optional[datetime] = None,
) -> str:
    """Build screenshot_DDMMYYYY_HHMMSS.<ext> from local time."""
    now = now or datetime.now()
    return f"screenshot_{now.strftime('%d%m%Y_%H%M%S')}.{image_format.extension}"


@contextmanager
def freeze_screen(config: Optional[Config] = None) -> Iterator[Optional[subprocess.Popen]]:
    """Freeze the display with hyprpicker for the duration of the block.

    Yields the helper process, or None if hyprpicker is unavailable or fails
    to start. The helper is killed on every exit path and never waited on.
    """
    config = config or get_config()

    proc = None
    if has_tool(config.hyprpicker):
        try:
            proc = subprocess.Popen(
                [config.hyprpicker, "-r", "-z"],
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
            log.debug("Screen frozen (pid %d)", proc.pid)
        except OSError as e:
            log.debug("Could not start %s: %s", config.hyprpicker, e)
    else:
        log.debug("%s not found, selecting without freeze", config.hyprpicker)

    try:
        yield proc
    finally:
        if proc is not None:
            try:
                proc.kill()
            except OSError as e:
                log.debug("Could not stop %s: %s", config.hyprpicker, e)


def relocate(source: Path, target_dir: Path) -> Path:
    """Move a file into target_dir, keeping its name.

    Tries a rename first and falls back to copy + delete (e.g. across
    filesystems). A source that cannot be deleted after copying is left behind.

    Returns:
        Final path of the file

    Raises:
        RelocationError: If neither rename nor copy succeeds
    """
    dest = target_dir / source.name
    try:
        source.rename(dest)
        return dest
    except OSError as e:
        log.debug("Rename failed (%s), copying instead", e)

    try:
        shutil.copy(source, dest)
    except OSError as e:
        raise RelocationError(source, dest, e) from e

    try:
        source.unlink()
    except OSError as e:
        log.warning("Could not remove %s: %s", source, e)
    return dest


def capture(
    request: CaptureRequest,
    config: Optional[Config] = None,
    home: Optional[Path] = None,
) -> Optional[Path]:
    """Run grimblast for a request and file the result.

    Args:
        request: What to capture and where it goes
        config: Configuration object. If None, uses global config.
        home: Directory grimblast writes into (defaults to $HOME)

    Returns:
        Final path of the saved screenshot, or None if grimblast wrote no
        file (clipboard-only destinations)

    Raises:
        CaptureError: If grimblast fails
        RelocationError: If the written file cannot be moved
    """
    config = config or get_config()
    home = home or home_dir()

    name = timestamped_filename(request.image_format)
    temp_path = home / name

    cmd = [
        config.grimblast,
        "--notify",
        request.destination.value,
        request.region.value,
        str(temp_path),
    ]
    freeze = request.region is RegionMode.AREA_SELECTION and config.freeze_screen

    with freeze_screen(config) if freeze else nullcontext():
        log.debug("Running %s", " ".join(cmd))
        try:
            result = subprocess.run(cmd)
        except FileNotFoundError as e:
            raise CaptureError(f"{config.grimblast} not found") from e
        except OSError as e:
            raise CaptureError(f"could not run {config.grimblast}: {e}") from e

    if result.returncode != 0:
        raise CaptureError(f"{config.grimblast} failed (exit {result.returncode})")

    if not temp_path.is_file():
        log.debug("No file written for %s", request.destination.value)
        return None

    final_path = relocate(temp_path, request.target_dir)
    log.info("Screenshot saved: %s", final_path)

    emit("artifact.created", {
        "file_path": str(final_path),
        "file_type": "screenshot",
        "region": request.region.value,
        "destination": request.destination.value,
        "format": request.image_format.extension,
    })
    notify.send("Screenshot saved", f"DIR: {request.target_dir}", config)

    return final_path
