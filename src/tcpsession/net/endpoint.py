"""Host/port pair targeted by a connection attempt."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Endpoint:
    host: str
    port: int

    def __post_init__(self):
        if not self.host:
            raise ValueError("Endpoint host cannot be empty")
        if isinstance(self.port, bool) or not isinstance(self.port, int):
            raise ValueError(f"Endpoint port must be an int, got {self.port!r}")
        if not 0 <= self.port <= 65535:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

    def __str__(self) -> str:
        if ":" in self.host:
            return f"[{self.host}]:{self.port}"
        return f"{self.host}:{self.port}"
