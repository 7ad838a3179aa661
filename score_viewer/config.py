"""
Runtime settings.

Built once at startup (Settings.from_env) and passed to the components that
need them, so nothing below main.py reads the environment.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    credentials_path: Path = Path("credentials.json")
    tick_seconds: float = Field(default=1.0, gt=0)
    gate_ticks: int = Field(default=5, ge=1)      # gated tick = every 5th tick
    workers: int = Field(default=4, ge=1)
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 8000

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            credentials_path=os.getenv("SCORE_VIEWER_CREDENTIALS", "credentials.json"),
            tick_seconds=os.getenv("SCORE_VIEWER_TICK_SECONDS", "1.0"),
            gate_ticks=os.getenv("SCORE_VIEWER_GATE_TICKS", "5"),
            workers=os.getenv("SCORE_VIEWER_WORKERS", "4"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            host=os.getenv("SCORE_VIEWER_HOST", "127.0.0.1"),
            port=os.getenv("SCORE_VIEWER_PORT", "8000"),
        )
