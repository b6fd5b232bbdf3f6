#!/usr/bin/env python3
"""
Auxiliary utility functions for Kenosis

Formatting helpers shared by the reporter and the console output.
"""

import os
import pathlib
from typing import Optional

SIZE_UNITS = ("B", "KB", "MB", "GB", "TB")


def format_bytes(size_bytes: int) -> str:
    """Format byte size into human-readable string

    Args:
        size_bytes: Size in bytes to format

    Returns:
        Formatted string like "1.50 KB" or "3.20 GB", never scaled past TB
    """
    value = float(size_bytes)
    unit_index = 0
    # Compare the displayed value so 1048575 reads "1.00 MB", not "1024.00 KB"
    while round(value, 2) >= 1024 and unit_index < len(SIZE_UNITS) - 1:
        value /= 1024
        unit_index += 1
    return f"{value:.2f} {SIZE_UNITS[unit_index]}"


def printable_path(path: str) -> str:
    """Return path with undecodable filename bytes shown as \\xNN escapes"""
    return os.fsencode(path).decode("utf-8", "backslashreplace")


def format_path_for_display(path: str, home_path: Optional[str] = None) -> str:
    """Format file path for display by replacing home directory with ~

    Args:
        path: File path to format
        home_path: Home directory path (defaults to platform home)

    Returns:
        Printable path with a leading home directory replaced by ~ if applicable
    """
    path = printable_path(path)
    if home_path is None:
        home_path = str(pathlib.Path.home())

    if home_path in ("", "/"):
        return path
    if path == home_path:
        return "~"
    if path.startswith(home_path.rstrip("/") + "/"):
        return "~" + path[len(home_path.rstrip("/")) :]
    return path
