"""Shell configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_HISTORY_FILE = ".dynshell_history"


@dataclass
class ShellConfig:
    """Configuration for a shell session."""

    # AWS target
    region: str | None = None
    endpoint_url: str | None = None

    # Shell
    history_file: Path | None = Path(DEFAULT_HISTORY_FILE)
    log_level: str = "WARNING"

    @classmethod
    def from_environment(cls) -> ShellConfig:
        """Create ShellConfig from environment variables."""
        history = os.environ.get("DYNSHELL_HISTORY_FILE", DEFAULT_HISTORY_FILE)
        return cls(
            region=os.environ.get("AWS_REGION") or os.environ.get("AWS_DEFAULT_REGION"),
            endpoint_url=os.environ.get("AWS_ENDPOINT_URL") or None,
            history_file=Path(history) if history else None,
            log_level=os.environ.get("DYNSHELL_LOG_LEVEL", "WARNING").upper(),
        )

    def override(
        self,
        region: str | None = None,
        endpoint_url: str | None = None,
        history_file: Path | None = None,
        log_level: str | None = None,
    ) -> ShellConfig:
        """Return a copy with the given non-None values replaced."""
        return ShellConfig(
            region=region or self.region,
            endpoint_url=endpoint_url or self.endpoint_url,
            history_file=history_file or self.history_file,
            log_level=(log_level or self.log_level).upper(),
        )
