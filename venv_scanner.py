#!/usr/bin/env python3
"""
Virtual Environment Scanner for Kenosis

Walks a directory tree looking for Python virtual environments, identified by
a pyvenv.cfg file directly inside a directory, and measures how much space
each one occupies.

Symbolic links to directories are never followed, neither while scanning nor
while measuring sizes.
"""

import logging
import os
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

logger = logging.getLogger(__name__)

ENVIRONMENT_MARKER = "pyvenv.cfg"
PROGRESS_INTERVAL = 200


class TraversalAction(Enum):
    """What the walker should do after visiting a directory"""

    CONTINUE = "continue"
    SKIP_SUBTREE = "skip_subtree"
    ABORT = "abort"


@dataclass(frozen=True)
class EnvironmentRecord:
    path: str
    size: int


@dataclass(frozen=True)
class IgnoredRecord:
    path: str
    reason: str


@dataclass
class ScanResult:
    root_path: str
    environments: list[EnvironmentRecord] = field(default_factory=list)
    ignored: list[IgnoredRecord] = field(default_factory=list)
    directories_scanned: int = 0
    scan_duration: float = 0.0

    @property
    def total_size(self) -> int:
        return sum(env.size for env in self.environments)

    def ranked(self) -> list[EnvironmentRecord]:
        """Environments by size, largest first; equal sizes keep discovery order."""
        return sorted(self.environments, key=lambda env: env.size, reverse=True)


def _is_directory(entry: os.DirEntry) -> bool:
    try:
        return entry.is_dir(follow_symlinks=False)
    except OSError:
        return False


def _error_reason(error: OSError) -> str:
    return error.strerror or str(error)


def walk_tree(
    root: str,
    visit: Callable[[str, list[os.DirEntry]], TraversalAction],
    on_error: Optional[Callable[[str, OSError], None]] = None,
) -> bool:
    """Depth-first pre-order walk driven by the visit callback

    Args:
        root: Directory to start from
        visit: Called with (path, entries) for every listable directory
        on_error: Called with (path, error) when a directory cannot be listed

    Returns:
        False if a visit returned ABORT, True once the whole tree was walked
    """
    stack = [root]
    while stack:
        path = stack.pop()
        try:
            with os.scandir(path) as it:
                entries = list(it)
        except OSError as e:
            if on_error:
                on_error(path, e)
            continue

        action = visit(path, entries)
        if action is TraversalAction.ABORT:
            return False
        if action is TraversalAction.SKIP_SUBTREE:
            continue

        # Reversed so siblings are popped in listing order
        children = [entry.path for entry in entries if _is_directory(entry)]
        stack.extend(reversed(children))

    return True


def directory_size(path: str) -> int:
    """Return the apparent size in bytes of all regular files below path.

    Unreadable directories and files count as zero.
    """
    total = 0
    stack = [path]
    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as it:
                entries = list(it)
        except OSError as e:
            logger.debug("Cannot list %s while sizing: %s", current, _error_reason(e))
            continue

        for entry in entries:
            try:
                if entry.is_dir(follow_symlinks=False):
                    stack.append(entry.path)
                elif entry.is_file(follow_symlinks=False):
                    total += entry.stat(follow_symlinks=False).st_size
            except OSError as e:
                logger.debug("Cannot stat %s: %s", entry.path, _error_reason(e))

    return total


def is_hidden_name(name: str) -> bool:
    return name.startswith(".") and name not in (".", "..")


class VenvScanner:
    """Finds virtual environments below a root directory"""

    def __init__(
        self,
        include_hidden: bool = False,
        progress_callback: Optional[Callable[[int], None]] = None,
    ):
        """Initialize scanner

        Args:
            include_hidden: Descend into directories whose name starts with a dot
            progress_callback: Called with the number of directories scanned so far
        """
        self.include_hidden = include_hidden
        self.progress_callback = progress_callback

    def scan(self, root: str) -> ScanResult:
        result = ScanResult(root_path=root)
        start = time.monotonic()

        def visit(path: str, entries: list[os.DirEntry]) -> TraversalAction:
            result.directories_scanned += 1
            if self.progress_callback and result.directories_scanned % PROGRESS_INTERVAL == 0:
                self.progress_callback(result.directories_scanned)

            if any(entry.name == ENVIRONMENT_MARKER for entry in entries):
                size = directory_size(path)
                logger.debug("Found environment %s (%d bytes)", path, size)
                result.environments.append(EnvironmentRecord(path=path, size=size))
                return TraversalAction.SKIP_SUBTREE

            if path != root and not self.include_hidden and is_hidden_name(os.path.basename(path)):
                logger.debug("Skipping hidden directory %s", path)
                return TraversalAction.SKIP_SUBTREE

            return TraversalAction.CONTINUE

        def on_error(path: str, error: OSError):
            reason = _error_reason(error)
            logger.debug("Ignoring %s: %s", path, reason)
            result.ignored.append(IgnoredRecord(path=path, reason=reason))

        walk_tree(root, visit, on_error)

        result.scan_duration = time.monotonic() - start
        return result
