"""
Runtime configuration.

Values are read once from the process environment.  A ``.env`` file in the
working directory (or any parent) is loaded first so local overrides work
without a manual ``export``.

    VISUALCODER_LOG_LEVEL          DEBUG | INFO | WARNING ...   (default INFO)
    VISUALCODER_DECLARATION_SCOPE  function | block             (default function)
    VISUALCODER_EXPAND_NESTED_DEFINITIONS
                                   true | false: walk bodies of definitions
                                   met inside a walk       (default false)
    VISUALCODER_HOST               bind address for the server  (default 0.0.0.0)
    VISUALCODER_PORT               bind port for the server     (default 3001)
    VISUALCODER_CORS_ORIGINS       comma separated origins      (default *)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List

from dotenv import load_dotenv


DECLARATION_SCOPES = ("function", "block")


@dataclass(frozen=True)
class Settings:
    log_level: str = "INFO"
    declaration_scope: str = "function"
    expand_nested_definitions: bool = False
    host: str = "0.0.0.0"
    port: int = 3001
    cors_origins: List[str] = field(default_factory=lambda: ["*"])

    @property
    def block_scoped_declarations(self) -> bool:
        return self.declaration_scope == "block"


_TRUTHY = ("1", "true", "yes", "on")


def _split_csv(raw: str) -> List[str]:
    return [part.strip() for part in raw.split(",") if part.strip()]


def load_settings() -> Settings:
    """Build a Settings object from the current environment."""
    load_dotenv()

    scope = os.environ.get("VISUALCODER_DECLARATION_SCOPE", "function").strip().lower()
    if scope not in DECLARATION_SCOPES:
        logging.getLogger(__name__).warning(
            f"Unknown declaration scope '{scope}', falling back to 'function'"
        )
        scope = "function"

    try:
        port = int(os.environ.get("VISUALCODER_PORT", "3001"))
    except ValueError:
        logging.getLogger(__name__).warning("VISUALCODER_PORT is not an integer, using 3001")
        port = 3001

    return Settings(
        log_level=os.environ.get("VISUALCODER_LOG_LEVEL", "INFO").upper(),
        declaration_scope=scope,
        expand_nested_definitions=os.environ.get(
            "VISUALCODER_EXPAND_NESTED_DEFINITIONS", ""
        ).strip().lower() in _TRUTHY,
        host=os.environ.get("VISUALCODER_HOST", "0.0.0.0"),
        port=port,
        cors_origins=_split_csv(os.environ.get("VISUALCODER_CORS_ORIGINS", "*")) or ["*"],
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()


def configure_logging(level: str | None = None) -> None:
    """Apply the configured log level to the root logger."""
    logging.basicConfig(
        level=(level or get_settings().log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


__all__ = ["Settings", "load_settings", "get_settings", "configure_logging"]
