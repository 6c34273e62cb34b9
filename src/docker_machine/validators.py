"""
Environment validators for each connection mode.

Each validator is a pure check over a mapping of variable names to values and
raises ``ValidationError`` on the first problem found. A ``None`` environment
is treated as empty.
"""

import logging
from collections.abc import Mapping

from .config import UNIX_PROTOCOL, EnvironmentVariables
from .exceptions import ValidationError
from .models import DockerType

logger = logging.getLogger(__name__)


def _is_set(environment: Mapping[str, str], name: str) -> bool:
    return bool(environment.get(name))


def validate_daemon_environment(environment: Mapping[str, str] | None) -> None:
    """
    Check an environment can be used against a local Docker daemon.

    TLS variables must be unset, and DOCKER_HOST, if set, must point at a
    local unix socket.

    Raises
    ------
    ValidationError
        If remote-only variables are set
    """
    environment = environment or {}
    conflicting = [
        name
        for name in (EnvironmentVariables.DOCKER_TLS_VERIFY, EnvironmentVariables.DOCKER_CERT_PATH)
        if _is_set(environment, name)
    ]
    docker_host = environment.get(EnvironmentVariables.DOCKER_HOST, "")
    if docker_host and not docker_host.startswith(UNIX_PROTOCOL):
        conflicting.insert(0, EnvironmentVariables.DOCKER_HOST)

    if conflicting:
        raise ValidationError(
            f"These variables were set: {', '.join(conflicting)}. "
            "They cannot be set when connecting to a local docker daemon.",
            details={"mode": "daemon", "conflicting": conflicting},
        )
    logger.debug("Daemon environment is valid")


def validate_remote_environment(environment: Mapping[str, str] | None) -> None:
    """
    Check an environment describes a reachable remote Docker daemon.

    DOCKER_HOST is required. DOCKER_TLS_VERIFY and DOCKER_CERT_PATH must be
    either both set or both unset.

    Raises
    ------
    ValidationError
        If DOCKER_HOST is missing or the TLS variables are inconsistent
    """
    environment = environment or {}
    missing = []
    if not _is_set(environment, EnvironmentVariables.DOCKER_HOST):
        missing.append(EnvironmentVariables.DOCKER_HOST)

    tls_verify = _is_set(environment, EnvironmentVariables.DOCKER_TLS_VERIFY)
    cert_path = _is_set(environment, EnvironmentVariables.DOCKER_CERT_PATH)
    if tls_verify and not cert_path:
        missing.append(EnvironmentVariables.DOCKER_CERT_PATH)
    elif cert_path and not tls_verify:
        missing.append(EnvironmentVariables.DOCKER_TLS_VERIFY)

    if missing:
        raise ValidationError(
            f"Missing required environment variables: {', '.join(missing)}. "
            "Please run `docker-machine env <machine-name>` and ensure they are set.",
            details={"mode": "remote", "missing": missing},
        )
    logger.debug("Remote environment is valid")


def validate_additional_environment(environment: Mapping[str, str] | None) -> None:
    """
    Check user-supplied variables leave the connection variables alone.

    Raises
    ------
    ValidationError
        If any reserved variable is present, whatever its value
    """
    environment = environment or {}
    conflicting = [name for name in EnvironmentVariables.reserved() if name in environment]
    if conflicting:
        raise ValidationError(
            f"The following variables: {', '.join(conflicting)} cannot exist in your "
            "additional environment variable block as they will interfere with Docker.",
            details={"mode": "additional", "conflicting": conflicting},
        )
    logger.debug(f"Additional environment is valid ({len(environment)} variables)")


_VALIDATORS = {
    DockerType.DAEMON: validate_daemon_environment,
    DockerType.REMOTE: validate_remote_environment,
}


def detect_docker_type(environment: Mapping[str, str] | None) -> DockerType:
    """
    Pick the docker type an environment describes.

    Returns the first docker type, in declaration order, whose validator
    accepts ``environment``. Falls back to DAEMON when none does, so the
    daemon validator reports the problem on ``build()``.

    Examples
    --------
    >>> detect_docker_type({})
    <DockerType.DAEMON: 'daemon'>
    >>> detect_docker_type({"DOCKER_HOST": "tcp://192.168.99.100:2376"})
    <DockerType.REMOTE: 'remote'>
    """
    for docker_type in DockerType:
        try:
            _VALIDATORS[docker_type](environment)
        except ValidationError:
            continue
        logger.debug(f"Detected {docker_type.value} docker environment")
        return docker_type
    return DockerType.DAEMON
