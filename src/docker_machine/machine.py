"""
Connection builders and the resolved connection configuration.

Two fluent builders produce a ``ConnectionConfig``:

- ``local_machine()`` starts from a snapshot of the process environment and
  validates it for the local docker type. Unless one is given or configured,
  the docker type is detected from that snapshot: a daemon on this host, or a
  remote engine exported by `docker-machine env`.
- ``remote_machine()`` starts empty; callers describe the daemon with
  ``host()`` and ``with_tls()``.

Both validate the environment, resolve the host IP, validate the additional
environment and merge it on top, additions winning.

Examples
--------
>>> config = (
...     remote_machine()
...     .host("tcp://10.0.0.5:2376")
...     .with_tls("/certs")
...     .with_additional_environment_variable("COMPOSE_PROJECT_NAME", "it")
...     .build()
... )
>>> config.ip
'10.0.0.5'
>>> config.environment["DOCKER_TLS_VERIFY"]
'1'
"""

import logging
import os
from collections.abc import Mapping, MutableMapping
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from .config import DockerMachineSettings, EnvironmentVariables, load_settings
from .environment import merge_environments, snapshot_environment
from .exceptions import ConfigurationError
from .models import DockerType, EnvironmentMap
from .resolvers import HostIpResolver, RemoteHostIpResolver, is_valid_host, resolver_for
from .validators import (
    detect_docker_type,
    validate_additional_environment,
    validate_daemon_environment,
    validate_remote_environment,
)

logger = logging.getLogger(__name__)


@runtime_checkable
class DockerConfiguration(Protocol):
    """Anything that can prepare the environment of a docker-compose process."""

    def configured_docker_compose_process_environment(
        self, base: Mapping[str, str] | None = None
    ) -> dict[str, str]: ...


class ConnectionConfig(BaseModel):
    """
    Resolved Docker connection: the daemon address and the environment to launch with.

    Instances are frozen and safe to share.

    Parameters
    ----------
    host_ip : str
        IP address or hostname of the daemon
    environment : Mapping[str, str]
        Environment to inject into the launched process

    Examples
    --------
    >>> config = ConnectionConfig(host_ip="10.0.0.5", environment={"DOCKER_HOST": "tcp://10.0.0.5"})
    >>> config.ip
    '10.0.0.5'
    >>> config.environment["DOCKER_HOST"]
    'tcp://10.0.0.5'
    """

    model_config = ConfigDict(frozen=True)

    host_ip: str = Field(..., description="Daemon IP address or hostname")
    environment: Mapping[str, str] = Field(
        default_factory=dict, description="Environment for the launched process"
    )

    @field_validator("host_ip")
    @classmethod
    def validate_host_ip(cls, v: str) -> str:
        """Ensure the host is an IP address or a hostname."""
        if not is_valid_host(v):
            raise ValueError(f"Invalid docker host IP: {v!r}")
        return v

    @field_validator("environment", mode="before")
    @classmethod
    def copy_environment(cls, v: Any) -> Any:
        """Treat None as empty and copy any mapping into a plain dict."""
        if v is None:
            return {}
        if isinstance(v, Mapping):
            return dict(v)
        return v

    @field_validator("environment")
    @classmethod
    def freeze_environment(cls, v: Mapping[str, str]) -> EnvironmentMap:
        return snapshot_environment(v)

    @field_serializer("environment")
    def serialize_environment(self, v: EnvironmentMap) -> dict[str, str]:
        return dict(v)

    @property
    def ip(self) -> str:
        """Resolved daemon address, for display and health checks."""
        return self.host_ip

    def get_ip(self) -> str:
        return self.host_ip

    def configure_launch_environment(self, target_environment: MutableMapping[str, str]) -> None:
        """
        Copy the resolved environment into ``target_environment``.

        Keys already present in the target are overwritten; unrelated keys are
        left untouched.
        """
        target_environment.update(self.environment)

    def configured_docker_compose_process_environment(
        self, base: Mapping[str, str] | None = None
    ) -> dict[str, str]:
        """
        Build the environment for a docker-compose process.

        Parameters
        ----------
        base : Mapping[str, str], optional
            Inherited environment (default: the current ``os.environ``)

        Returns
        -------
        dict[str, str]
            A fresh mutable copy of ``base`` augmented with this configuration
        """
        environment = dict(os.environ if base is None else base)
        self.configure_launch_environment(environment)
        return environment

    @staticmethod
    def local_machine(docker_type: DockerType | str | None = None) -> "LocalBuilder":
        return local_machine(docker_type)

    @staticmethod
    def remote_machine() -> "RemoteBuilder":
        return remote_machine()

    # the frozen-model default hashes field values, and a mapping is unhashable
    def __hash__(self) -> int:
        return hash((self.host_ip, frozenset(self.environment.items())))

    def __repr__(self) -> str:
        return f"ConnectionConfig(host_ip={self.host_ip!r}, environment_keys={sorted(self.environment)!r})"


class LocalBuilder:
    """
    Builds a connection to the docker engine configured for this machine.

    The system environment is snapshotted when the builder is created, so
    later changes to ``os.environ`` do not affect ``build()``.
    """

    def __init__(
        self,
        docker_type: DockerType | str | None,
        system_environment: Mapping[str, str] | None,
        settings: DockerMachineSettings | None = None,
    ) -> None:
        settings = settings or load_settings().machine
        self._system_environment = snapshot_environment(system_environment)
        if docker_type is None:
            docker_type = settings.docker_type or detect_docker_type(self._system_environment)
        try:
            self.docker_type = DockerType.parse(docker_type)
        except ValueError as e:
            raise ConfigurationError(str(e), details={"docker_type": str(docker_type)}) from e
        self._additional_environment: dict[str, str] = {}
        self._resolver: HostIpResolver = resolver_for(self.docker_type, settings.localhost_ip)

    def with_additional_environment_variable(self, key: str, value: str) -> "LocalBuilder":
        self._additional_environment[key] = value
        return self

    def with_environment(self, new_environment: Mapping[str, str] | None) -> "LocalBuilder":
        """Replace the additional environment; ``None`` clears it."""
        self._additional_environment = dict(new_environment or {})
        return self

    def build(self) -> ConnectionConfig:
        """
        Validate, resolve and merge into a ``ConnectionConfig``.

        Raises
        ------
        ValidationError
            If the system or additional environment is invalid
        ResolutionError
            If DOCKER_HOST cannot be resolved
        """
        if self.docker_type is DockerType.DAEMON:
            validate_daemon_environment(self._system_environment)
        else:
            validate_remote_environment(self._system_environment)

        docker_host = self._system_environment.get(EnvironmentVariables.DOCKER_HOST, "")
        host_ip = self._resolver.resolve_ip(docker_host)

        validate_additional_environment(self._additional_environment)
        environment = merge_environments(self._system_environment, self._additional_environment)

        logger.info(f"Resolved local {self.docker_type.value} docker at {host_ip}")
        return ConnectionConfig(host_ip=host_ip, environment=environment)


class RemoteBuilder:
    """Builds a connection to a docker engine reachable over the network."""

    def __init__(self, settings: DockerMachineSettings | None = None) -> None:
        settings = settings or load_settings().machine
        self._tls_verify_value = settings.tls_verify_value
        self._docker_environment: dict[str, str] = {}
        self._additional_environment: dict[str, str] = {}
        self._resolver = RemoteHostIpResolver()

    def host(self, hostname: str) -> "RemoteBuilder":
        self._docker_environment[EnvironmentVariables.DOCKER_HOST] = hostname
        return self

    def with_tls(self, cert_path: str) -> "RemoteBuilder":
        """Enable TLS verification with the certificates under ``cert_path``."""
        self._docker_environment[EnvironmentVariables.DOCKER_TLS_VERIFY] = self._tls_verify_value
        self._docker_environment[EnvironmentVariables.DOCKER_CERT_PATH] = cert_path
        return self

    def without_tls(self) -> "RemoteBuilder":
        self._docker_environment.pop(EnvironmentVariables.DOCKER_TLS_VERIFY, None)
        self._docker_environment.pop(EnvironmentVariables.DOCKER_CERT_PATH, None)
        return self

    def with_additional_environment_variable(self, key: str, value: str) -> "RemoteBuilder":
        self._additional_environment[key] = value
        return self

    def with_environment(self, new_environment: Mapping[str, str] | None) -> "RemoteBuilder":
        """Replace the additional environment; ``None`` clears it."""
        self._additional_environment = dict(new_environment or {})
        return self

    def build(self) -> ConnectionConfig:
        """
        Validate, resolve and merge into a ``ConnectionConfig``.

        Raises
        ------
        ValidationError
            If the docker or additional environment is invalid
        ResolutionError
            If the host cannot be resolved
        """
        validate_remote_environment(self._docker_environment)
        validate_additional_environment(self._additional_environment)

        docker_host = self._docker_environment.get(EnvironmentVariables.DOCKER_HOST, "")
        host_ip = self._resolver.resolve_ip(docker_host)

        environment = merge_environments(self._docker_environment, self._additional_environment)
        logger.info(f"Resolved remote docker at {host_ip}")
        return ConnectionConfig(host_ip=host_ip, environment=environment)


# =============================================================================
# Entry points
# =============================================================================


def local_machine(
    docker_type: DockerType | str | None = None,
    system_environment: Mapping[str, str] | None = None,
    settings: DockerMachineSettings | None = None,
) -> LocalBuilder:
    """
    Start building a connection to the local docker engine.

    Parameters
    ----------
    docker_type : DockerType or str, optional
        Docker type (default: ``DOCKER_MACHINE_DOCKER_TYPE`` setting, else
        detected from ``system_environment``)
    system_environment : Mapping[str, str], optional
        Environment to start from (default: snapshot of ``os.environ``)
    settings : DockerMachineSettings, optional
        Settings to use instead of loading them from the environment

    Returns
    -------
    LocalBuilder
        Fluent builder

    Raises
    ------
    ConfigurationError
        If ``docker_type`` is not a known docker type
    """
    settings = settings or load_settings().machine
    if system_environment is None:
        system_environment = os.environ
    return LocalBuilder(docker_type, system_environment, settings)


def remote_machine(settings: DockerMachineSettings | None = None) -> RemoteBuilder:
    """Start building a connection to a docker engine over the network."""
    return RemoteBuilder(settings)
