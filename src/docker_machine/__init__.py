"""docker_machine - resolve the environment used to reach a Docker daemon."""

from .config import (
    LOCALHOST_IP,
    DockerMachineSettings,
    EnvironmentVariables,
    LoggingSettings,
    Settings,
    load_environment_file,
    load_settings,
)
from .environment import merge_environments, snapshot_environment
from .exceptions import (
    ConfigurationError,
    DockerMachineError,
    ResolutionError,
    ValidationError,
)
from .machine import (
    ConnectionConfig,
    DockerConfiguration,
    LocalBuilder,
    RemoteBuilder,
    local_machine,
    remote_machine,
)
from .models import DockerType, EnvironmentMap
from .resolvers import (
    DaemonHostIpResolver,
    HostIpResolver,
    RemoteHostIpResolver,
    resolver_for,
)
from .validators import (
    detect_docker_type,
    validate_additional_environment,
    validate_daemon_environment,
    validate_remote_environment,
)

__all__ = [
    # Builders
    "local_machine",
    "remote_machine",
    "LocalBuilder",
    "RemoteBuilder",
    "ConnectionConfig",
    "DockerConfiguration",
    # Types
    "DockerType",
    "EnvironmentMap",
    # Environment
    "merge_environments",
    "snapshot_environment",
    "validate_daemon_environment",
    "validate_remote_environment",
    "validate_additional_environment",
    "detect_docker_type",
    # Resolution
    "HostIpResolver",
    "DaemonHostIpResolver",
    "RemoteHostIpResolver",
    "resolver_for",
    # Config
    "EnvironmentVariables",
    "LOCALHOST_IP",
    "DockerMachineSettings",
    "LoggingSettings",
    "Settings",
    "load_settings",
    "load_environment_file",
    # Errors
    "DockerMachineError",
    "ValidationError",
    "ResolutionError",
    "ConfigurationError",
]
