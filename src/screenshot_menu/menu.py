"""Single-choice menus through rofi's dmenu mode."""

import logging
import subprocess
from pathlib import Path
from typing import Optional, Sequence

from .config import Config, get_config
from .tools import MissingToolError

log = logging.getLogger(__name__)


class MenuError(Exception):
    """Raised when rofi cannot be started."""
    pass


class PromptCancelled(Exception):
    """Raised when the user dismisses a menu."""

    def __init__(self, title: str):
        super().__init__(f"menu cancelled: {title}")
        self.title = title


def prompt(
    title: str,
    options: Sequence[str],
    rofi_config: Optional[Path] = None,
    config: Optional[Config] = None,
) -> str:
    """Show a menu and return the chosen option.

    Args:
        title: Prompt shown next to the input field
        options: Choices, in display order
        rofi_config: Optional rofi config file
        config: Configuration object. If None, uses global config.

    Returns:
        The selected line, stripped

    Raises:
        PromptCancelled: If rofi exits non-zero (e.g. Escape pressed)
        MissingToolError: If rofi is not installed
        MenuError: If rofi cannot be started
    """
    config = config or get_config()

    cmd = [config.rofi, "-dmenu", "-i", "-no-show-icons", "-p", title]
    if rofi_config:
        cmd += ["-config", str(rofi_config)]

    try:
        result = subprocess.run(
            cmd,
            input="\n".join(options),
            stdout=subprocess.PIPE,
            text=True,
        )
    except FileNotFoundError as e:
        raise MissingToolError(config.rofi) from e
    except OSError as e:
        raise MenuError(f"could not run {config.rofi}: {e}") from e

    if result.returncode != 0:
        log.debug("%s exited with %d", config.rofi, result.returncode)
        raise PromptCancelled(title)

    choice = result.stdout.strip()
    log.debug("%s -> %r", title, choice)
    return choice
