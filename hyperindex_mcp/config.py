# -*- coding: utf-8 -*-
"""
Runtime configuration and logging setup.

Everything is read from environment variables (optionally from a local .env
file) so the server can be tuned from an MCP client's launch config:

- MCP_LOG_LEVEL                  DEBUG|INFO|WARNING|ERROR (default INFO)
- HYPERINDEX_SERVER_NAME         name advertised to MCP clients
- HYPERINDEX_INIT_COMMAND        command prefix used by initialize_indexer
- HYPERINDEX_INIT_TIMEOUT        seconds allowed per scaffold attempt
- HYPERINDEX_FALLBACK_DELAY      seconds to wait before sending synthetic Enter presses
- HYPERINDEX_FALLBACK_KEYSTROKES number of Enter presses sent by the fallback
- HYPERINDEX_SUCCESS_MARKERS     comma-separated output markers (empty disables the check)
- HYPERINDEX_HOME                base directory for default project locations
"""

import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

DEFAULT_INIT_COMMAND = "pnpx envio init contract-import explorer"
DEFAULT_SUCCESS_MARKERS = ("Initialization complete", "Successfully")


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {raw!r}") from e


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


def _env_markers(name: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
    raw = os.getenv(name)
    if raw is None:
        return default
    return tuple(m.strip() for m in raw.split(",") if m.strip())


@dataclass(frozen=True)
class Settings:
    log_level: str = "INFO"
    server_name: str = "HyperIndex_Server"
    init_command: str = DEFAULT_INIT_COMMAND
    init_timeout: float = 300.0
    fallback_delay: float = 2.0
    fallback_keystrokes: int = 10
    success_markers: Tuple[str, ...] = DEFAULT_SUCCESS_MARKERS
    home_dir: Optional[Path] = field(default=None)

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "Settings":
        """Build settings from the environment, loading .env first if present."""
        if dotenv:
            load_dotenv()
        home = os.getenv("HYPERINDEX_HOME")
        return cls(
            log_level=os.getenv("MCP_LOG_LEVEL", "INFO").upper(),
            server_name=os.getenv("HYPERINDEX_SERVER_NAME", "HyperIndex_Server"),
            init_command=os.getenv("HYPERINDEX_INIT_COMMAND", DEFAULT_INIT_COMMAND),
            init_timeout=_env_float("HYPERINDEX_INIT_TIMEOUT", 300.0),
            fallback_delay=_env_float("HYPERINDEX_FALLBACK_DELAY", 2.0),
            fallback_keystrokes=_env_int("HYPERINDEX_FALLBACK_KEYSTROKES", 10),
            success_markers=_env_markers("HYPERINDEX_SUCCESS_MARKERS", DEFAULT_SUCCESS_MARKERS),
            home_dir=Path(home).expanduser() if home else None,
        )

    @property
    def resolved_home(self) -> Path:
        return self.home_dir if self.home_dir is not None else Path.home()


def configure_logging(level: str = "INFO") -> None:
    """
    Send logs to stderr so they don't interfere with MCP frames on stdout.
    Unknown level names fall back to INFO.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        stream=sys.stderr,
    )
