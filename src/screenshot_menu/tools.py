"""Pre-flight checks for the external programs this tool drives."""

import logging
import shutil
from typing import Iterable

log = logging.getLogger(__name__)


class MissingToolError(Exception):
    """Raised when a required program is not on PATH."""

    def __init__(self, name: str):
        super().__init__(f"required tool not found in PATH: {name}")
        self.name = name


def has_tool(name: str) -> bool:
    """Check whether a program is on PATH."""
    return shutil.which(name) is not None


def ensure_tools(names: Iterable[str]) -> None:
    """Verify every required program is on PATH.

    Raises:
        MissingToolError: For the first program that is missing
    """
    for name in names:
        if not has_tool(name):
            raise MissingToolError(name)
        log.debug("Found %s", name)
