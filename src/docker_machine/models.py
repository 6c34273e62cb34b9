"""Core value types shared across docker_machine."""

from collections.abc import Mapping
from enum import Enum

EnvironmentMap = Mapping[str, str]


class DockerType(str, Enum):
    """
    Where the Docker daemon runs.

    DAEMON
        The engine runs on the same host and is reached through its local socket.
    REMOTE
        The engine is reachable over a network address, optionally with TLS.
    """

    DAEMON = "daemon"
    REMOTE = "remote"

    @classmethod
    def parse(cls, value: "str | DockerType") -> "DockerType":
        """Parse a docker type name case-insensitively."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ", ".join(t.value for t in cls)
            raise ValueError(f"Unknown docker type: {value!r}. Expected one of: {valid}") from None
