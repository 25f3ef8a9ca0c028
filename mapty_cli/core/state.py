"""Runtime state shared by Mapty commands."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

from rich.console import Console


@dataclass
class CLIState:
    """Output options, loaded configuration and resolved storage location."""

    json_output: bool
    plain_output: bool
    verbose: bool
    quiet: bool
    config_path: Path
    config: Dict[str, Any]
    storage_file: Path
    console: Console

    @property
    def sort_cycle(self) -> str:
        return str(self.config.get("display", {}).get("sort_cycle", "restore"))
