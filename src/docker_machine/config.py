"""
Configuration management for docker_machine.

Environment variable names used to talk to Docker are plain constants on
``EnvironmentVariables``. Behaviour knobs are Pydantic Settings read from the
environment (prefixed with DOCKER_MACHINE_) and an optional .env file:
- Connection settings (default docker type, loopback address, TLS flag value)
- Logging settings

Additional environment variables can also be loaded from a YAML file.
"""

import ipaddress
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError
from .models import DockerType


class EnvironmentVariables:
    """Names of the variables Docker clients read to find their daemon."""

    DOCKER_HOST = "DOCKER_HOST"
    DOCKER_TLS_VERIFY = "DOCKER_TLS_VERIFY"
    DOCKER_CERT_PATH = "DOCKER_CERT_PATH"

    @classmethod
    def reserved(cls) -> tuple[str, str, str]:
        """Variables that determine the connection mode."""
        return (cls.DOCKER_HOST, cls.DOCKER_TLS_VERIFY, cls.DOCKER_CERT_PATH)


LOCALHOST_IP = "127.0.0.1"
TCP_PROTOCOL = "tcp://"
UNIX_PROTOCOL = "unix://"


class DockerMachineSettings(BaseSettings):
    """
    Connection resolution settings.

    Parameters
    ----------
    docker_type : DockerType, optional
        Docker type assumed by ``local_machine()`` when none is given
        (default: detected from the system environment)
    localhost_ip : str
        Address reported for a daemon on the local interface
    tls_verify_value : str
        Value written to DOCKER_TLS_VERIFY by ``with_tls``

    Environment Variables
    ---------------------
    DOCKER_MACHINE_DOCKER_TYPE : str
        "daemon" or "remote"; unset to detect
    DOCKER_MACHINE_LOCALHOST_IP : str
        Loopback address override

    Examples
    --------
    >>> settings = DockerMachineSettings()
    >>> settings.docker_type is None
    True
    >>> settings.localhost_ip
    '127.0.0.1'
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_prefix="DOCKER_MACHINE_",
    )

    docker_type: DockerType | None = Field(None, description="Default docker type")
    localhost_ip: str = Field(default=LOCALHOST_IP, description="Local daemon address")
    tls_verify_value: str = Field(default="1", min_length=1, description="DOCKER_TLS_VERIFY value")

    @field_validator("docker_type", mode="before")
    @classmethod
    def validate_docker_type(cls, v: Any) -> DockerType | None:
        """Accept docker type names in any case."""
        if v is None or v == "":
            return None
        return DockerType.parse(v)

    @field_validator("localhost_ip")
    @classmethod
    def validate_localhost_ip(cls, v: str) -> str:
        """Ensure the loopback override is an IP address."""
        try:
            ipaddress.ip_address(v)
        except ValueError:
            raise ValueError(f"localhost_ip must be an IP address. Got: {v}") from None
        return v


class LoggingSettings(BaseSettings):
    """
    Logging configuration.

    Parameters
    ----------
    log_level : str
        Logging level ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

    Environment Variables
    ---------------------
    DOCKER_MACHINE_LOG_LEVEL : str
        Logging level
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_prefix="DOCKER_MACHINE_",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING",
        description="Logging level",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v


class Settings(BaseSettings):
    """
    All docker_machine settings.

    Parameters
    ----------
    machine : DockerMachineSettings
        Connection resolution settings
    logging : LoggingSettings
        Logging configuration
    """

    model_config = SettingsConfigDict(extra="ignore")

    machine: DockerMachineSettings = Field(default_factory=DockerMachineSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


# =============================================================================
# Convenience functions
# =============================================================================


def load_settings(env_file: Path | str | None = None) -> Settings:
    """
    Load settings from the environment and an optional .env file.

    Parameters
    ----------
    env_file : Path or str, optional
        Path to .env file (default: .env in current directory)

    Returns
    -------
    Settings
        Loaded settings

    Raises
    ------
    ConfigurationError
        If any setting fails validation
    """
    try:
        if env_file:
            return Settings(
                machine=DockerMachineSettings(_env_file=str(env_file)),
                logging=LoggingSettings(_env_file=str(env_file)),
            )
        return Settings()
    except PydanticValidationError as e:
        raise ConfigurationError(
            "Invalid docker_machine settings",
            details={"errors": e.errors(include_url=False), "env_file": env_file},
        ) from e


def _stringify(key: str, value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    raise ConfigurationError(
        f"Environment variable {key} must have a scalar value",
        details={"key": key, "type": type(value).__name__},
    )


def load_environment_file(path: Path | str) -> dict[str, str]:
    """
    Load additional environment variables from a YAML mapping.

    Parameters
    ----------
    path : Path or str
        YAML file holding a flat ``NAME: value`` mapping

    Returns
    -------
    dict[str, str]
        Variables with every value converted to a string

    Raises
    ------
    ConfigurationError
        If the file is missing, malformed, or not a flat mapping
    """
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"Environment file not found: {path}", details={"path": str(path)})

    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Cannot parse environment file: {path}",
            details={"path": str(path), "error": str(e)},
        ) from e

    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Environment file must contain a mapping: {path}",
            details={"path": str(path), "type": type(data).__name__},
        )

    return {str(key): _stringify(str(key), value) for key, value in data.items()}
