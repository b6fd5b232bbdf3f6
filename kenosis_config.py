#!/usr/bin/env python3
"""
Configuration management for Kenosis

Persists default scan options and run statistics between invocations.
"""

import json
import pathlib
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Optional

DEFAULT_CONFIG_DIR = pathlib.Path.home() / ".kenosis"


def _default_stats() -> dict:
    return {"total_runs": 0, "environments_found": 0, "bytes_found": 0}


@dataclass
class KenosisConfig:
    """Configuration for Kenosis"""

    include_hidden: bool = False
    show_ignored: bool = False
    copy_to_clipboard: bool = True
    clipboard_command: Optional[str] = None
    last_run: Optional[str] = None
    stats: dict = field(default_factory=_default_stats)

    def record_run(self, environments_found: int, bytes_found: int):
        """Update run statistics after a completed scan"""
        for key, value in _default_stats().items():
            self.stats.setdefault(key, value)
        self.stats["total_runs"] += 1
        self.stats["environments_found"] += environments_found
        self.stats["bytes_found"] += bytes_found
        self.last_run = datetime.now(timezone.utc).isoformat()

    def to_dict(self) -> dict:
        """Convert to dictionary"""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "KenosisConfig":
        """Create from dictionary"""
        return cls(
            include_hidden=bool(data.get("include_hidden", False)),
            show_ignored=bool(data.get("show_ignored", False)),
            copy_to_clipboard=bool(data.get("copy_to_clipboard", True)),
            clipboard_command=data.get("clipboard_command"),
            last_run=data.get("last_run"),
            stats=dict(data.get("stats") or _default_stats()),
        )


class ConfigManager:
    """Manages loading and saving configuration"""

    def __init__(self, config_dir: Optional[pathlib.Path] = None):
        self.config_dir = config_dir or DEFAULT_CONFIG_DIR
        self.config_file = self.config_dir / "config.json"

    def load(self) -> KenosisConfig:
        """Load configuration from file"""
        if self.config_file.exists():
            try:
                with self.config_file.open() as f:
                    data = json.load(f)
                    return KenosisConfig.from_dict(data)
            except (json.JSONDecodeError, AttributeError, TypeError, ValueError, OSError):
                # If config is corrupted or unreadable, return default
                return KenosisConfig()
        return KenosisConfig()

    def save(self, config: KenosisConfig):
        """Save configuration to file"""
        self.config_dir.mkdir(parents=True, exist_ok=True)
        with self.config_file.open("w") as f:
            json.dump(config.to_dict(), f, indent=2)
