"""Screenshot directory resolution.

Precedence (highest to lowest):
1. Explicit directory given on the command line
2. XDG_SCREENSHOTS_DIR environment variable
3. XDG_SCREENSHOTS_DIR entry in ~/.config/user-dirs.dirs
4. ~/Pictures

Resolution itself is pure: callers pass the environment snapshot and the
contents of user-dirs.dirs, so nothing here reads global state except the
small helpers that gather those inputs.
"""

import logging
import os
from pathlib import Path
from typing import Mapping, Optional

log = logging.getLogger(__name__)

SCREENSHOTS_ENV = "XDG_SCREENSHOTS_DIR"
USER_DIRS_FILE = Path(".config") / "user-dirs.dirs"
HOME_PLACEHOLDER = "$HOME"


def home_dir(environ: Optional[Mapping[str, str]] = None) -> Path:
    """Home directory from $HOME, or the current directory if unset."""
    environ = os.environ if environ is None else environ
    return Path(environ.get("HOME", "."))


def _substitute_home(value: str, home: Path) -> Path:
    return Path(value.replace(HOME_PLACEHOLDER, str(home)))


def _from_user_dirs(text: str, home: Path) -> Optional[Path]:
    prefix = f"{SCREENSHOTS_ENV}="
    for line in text.splitlines():
        if line.startswith(prefix):
            raw = line[len(prefix):].strip().strip('"')
            return _substitute_home(raw, home)
    return None


def read_user_dirs(home: Path) -> Optional[str]:
    """Contents of user-dirs.dirs under home, or None if unreadable."""
    try:
        return (home / USER_DIRS_FILE).read_text()
    except (OSError, UnicodeDecodeError) as e:
        log.debug("No user-dirs file: %s", e)
        return None


def resolve_directory(
    override: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
    user_dirs: Optional[str] = None,
) -> Path:
    """Resolve the screenshot directory.

    Args:
        override: Explicit directory, used verbatim when given
        environ: Environment snapshot (defaults to os.environ)
        user_dirs: Contents of user-dirs.dirs, if any

    Returns:
        The directory screenshots are placed in (not created)
    """
    if override is not None:
        return Path(override)

    environ = os.environ if environ is None else environ
    home = home_dir(environ)

    value = environ.get(SCREENSHOTS_ENV)
    if value is not None:
        return _substitute_home(value, home)

    if user_dirs:
        found = _from_user_dirs(user_dirs, home)
        if found is not None:
            return found

    return home / "Pictures"


def ensure_directory(path: Path) -> Path:
    """Create the directory if missing. Failures are left to surface on write."""
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        log.debug("Could not create %s: %s", path, e)
    return path


def screenshot_directory(override: Optional[Path] = None) -> Path:
    """Resolve the screenshot directory from the live environment and create it."""
    environ = dict(os.environ)
    user_dirs = None
    if override is None and SCREENSHOTS_ENV not in environ:
        user_dirs = read_user_dirs(home_dir(environ))
    return ensure_directory(resolve_directory(override, environ, user_dirs))
