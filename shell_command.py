#!/usr/bin/env python3
"""
Shell command synthesis and clipboard delivery for Kenosis

Builds an `rm -rf` command line for a list of directories and hands it to the
system clipboard utility through its standard input.
"""

import logging
import os
import re
import shlex
import shutil
import subprocess
import sys
from typing import Optional

logger = logging.getLogger(__name__)

CLIPBOARD_TIMEOUT = 10

# Characters that stay special inside a double-quoted POSIX shell word
_DOUBLE_QUOTE_SPECIALS = re.compile(r'([\\"`$])')

LINUX_CLIPBOARD_COMMANDS = [
    ["wl-copy"],
    ["xclip", "-selection", "clipboard"],
    ["xsel", "--clipboard", "--input"],
]


def quote_path(path: str) -> str:
    """Wrap path in double quotes, escaping \\, ", ` and $"""
    return '"' + _DOUBLE_QUOTE_SPECIALS.sub(r"\\\1", path) + '"'


def build_removal_command(paths: list[str]) -> str:
    """Build a multi-line `rm -rf` command removing every path

    Raises:
        ValueError: If no paths are given
    """
    if not paths:
        raise ValueError("Cannot build a removal command without paths")

    lines = ["rm -rf"] + [f"\t{quote_path(p)}" for p in paths]
    return " \\\n".join(lines)


def default_clipboard_command() -> Optional[list[str]]:
    """Pick the clipboard utility for this platform, or None if none is installed"""
    if sys.platform == "darwin":
        return ["pbcopy"]
    if sys.platform == "win32":
        return ["clip"]
    for command in LINUX_CLIPBOARD_COMMANDS:
        if shutil.which(command[0]):
            return command
    return None


def copy_to_clipboard(text: str, command: Optional[str] = None) -> bool:
    """Copy text to the clipboard via an external utility

    The text is sent as filesystem-encoded bytes so paths that are not valid
    UTF-8 reach the clipboard unchanged. The utility's output goes to
    /dev/null: xclip and friends fork a child that keeps serving the
    selection, and waiting on its pipes would block until it exits.

    Args:
        text: Text to place on the clipboard
        command: Clipboard command line overriding the platform default

    Returns:
        True if the utility ran successfully, False otherwise
    """
    argv = shlex.split(command) if command else default_clipboard_command()
    if not argv:
        logger.warning("No clipboard utility found")
        return False

    data = os.fsencode(text)
    logger.debug("Copying %d bytes with %s", len(data), " ".join(argv))
    try:
        subprocess.run(
            argv,
            input=data,
            check=True,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            timeout=CLIPBOARD_TIMEOUT,
        )
    except FileNotFoundError:
        logger.warning("Clipboard utility %r is not installed", argv[0])
        return False
    except subprocess.CalledProcessError as e:
        logger.warning("Clipboard utility %r failed with exit status %d", argv[0], e.returncode)
        return False
    except subprocess.TimeoutExpired:
        logger.warning("Clipboard utility %r did not finish within %ds", argv[0], CLIPBOARD_TIMEOUT)
        return False
    except OSError as e:
        logger.warning("Could not run clipboard utility %r: %s", argv[0], e)
        return False
    return True
