"""
Custom exceptions for docker_machine.

Every error carries a human-readable message and an optional details dict
for structured error information:
- Validation failures (missing or contradictory variables)
- Host resolution failures (malformed DOCKER_HOST values)
- Configuration failures (invalid settings, unreadable environment files)
"""

from typing import Any


class DockerMachineError(Exception):
    """
    Base exception for all docker_machine errors.

    Parameters
    ----------
    message : str
        Human-readable error message
    details : dict[str, Any], optional
        Structured error details for logging/debugging

    Examples
    --------
    >>> error = DockerMachineError("Bad environment", details={"mode": "remote"})
    >>> error.message
    'Bad environment'
    >>> error.details["mode"]
    'remote'
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(DockerMachineError):
    """
    Raised when an environment does not satisfy a connection mode.

    Examples include:
    - DOCKER_HOST missing for a remote daemon
    - DOCKER_TLS_VERIFY set without DOCKER_CERT_PATH (or vice versa)
    - Additional environment redefining a reserved variable
    """

    pass


class ResolutionError(DockerMachineError):
    """Raised when a host string cannot be resolved to an IP or hostname."""

    pass


class ConfigurationError(DockerMachineError):
    """Raised when settings or an environment file are invalid."""

    pass
