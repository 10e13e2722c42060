"""Runtime settings for the todoc command.

Settings come from the environment and are overridden by command-line flags:

    TODOC_WORKSPACE   directory scanned by --all (default: current directory)
    TODOC_OUTPUT_DIR  write pages here instead of beside each source file
    TODOC_STRICT      "1"/"true": undocumented functions fail the run
    TODOC_DEBUG       "1"/"true": debug logging (DEBUG is honoured too)

Settings are passed explicitly to the entry point; the extractors never
read them.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path


def _flag(value: str | None) -> bool:
    return (value or "").lower() in ("1", "true")


@dataclass(frozen=True)
class Settings:
    workspace: Path = field(default_factory=Path.cwd)
    output_dir: Path | None = None
    strict: bool = False
    debug: bool = False

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        workspace = env.get("TODOC_WORKSPACE")
        output_dir = env.get("TODOC_OUTPUT_DIR")
        return cls(
            workspace=Path(workspace) if workspace else Path.cwd(),
            output_dir=Path(output_dir) if output_dir else None,
            strict=_flag(env.get("TODOC_STRICT")),
            debug=_flag(env.get("TODOC_DEBUG")) or _flag(env.get("DEBUG")),
        )

    def with_overrides(self, **overrides) -> Settings:
        """Return a copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    @property
    def log_level(self) -> int:
        return logging.DEBUG if self.debug else logging.INFO
