"""
Client configuration.

Values come from code or from the environment:

    TCPSESSION_READ_SIZE        Max bytes per read() (default: 8192)
    TCPSESSION_CONNECT_TIMEOUT  Seconds for resolve and for connect,
                                empty or "none" for no limit (default: 30)
    TCPSESSION_LOG_LEVEL        Logging level (default: INFO)
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional


@dataclass
class ClientConfig:
    """Settings shared by a connector and the sessions it creates."""

    read_size: int = 8192
    """Upper bound on the bytes delivered by a single read event."""

    connect_timeout: Optional[float] = 30.0
    """
    Time limit applied to name resolution and, separately, to connection
    establishment. None disables the limit.
    """

    log_level: str = "INFO"
    """Level applied by configure_logging() to the ``tcpsession`` loggers."""

    @classmethod
    def from_env(cls) -> "ClientConfig":
        """Create configuration from TCPSESSION_* environment variables."""
        timeout = os.getenv("TCPSESSION_CONNECT_TIMEOUT", "30").strip()
        return cls(
            read_size=int(os.getenv("TCPSESSION_READ_SIZE", "8192")),
            connect_timeout=None if timeout.lower() in ("", "none") else float(timeout),
            log_level=os.getenv("TCPSESSION_LOG_LEVEL", "INFO"),
        )

    def validate(self) -> None:
        """Raise ValueError for settings that cannot work."""
        if self.read_size < 1:
            raise ValueError(f"read_size must be >= 1, got {self.read_size}")

        if self.connect_timeout is not None and self.connect_timeout <= 0:
            raise ValueError(f"connect_timeout must be > 0 or None, got {self.connect_timeout}")

        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValueError(f"Unknown log_level: {self.log_level!r}")

    def configure_logging(self) -> None:
        """Install a basic console handler and apply log_level."""
        level = getattr(logging, self.log_level.upper(), logging.INFO)
        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        )
        logging.getLogger("tcpsession").setLevel(level)
