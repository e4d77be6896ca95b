from __future__ import annotations

from dataclasses import dataclass

from rich.console import Console

from embedkit.core.config import EmbedSettings


@dataclass(slots=True)
class CLIContext:
    settings: EmbedSettings
    console: Console
