"""
Host IP resolution strategies.

The address recorded for a Docker daemon depends only on where the daemon
runs: a local daemon is always on the loopback interface, while a remote
daemon's address is taken from its DOCKER_HOST URL.
"""

import ipaddress
import logging
import re
from abc import ABC, abstractmethod
from urllib.parse import urlsplit

from .config import LOCALHOST_IP, TCP_PROTOCOL, UNIX_PROTOCOL
from .exceptions import ResolutionError
from .models import DockerType

logger = logging.getLogger(__name__)

_HOSTNAME_LABEL = re.compile(r"^(?!-)[A-Za-z0-9-]{1,63}(?<!-)$")


def is_valid_host(host: str) -> bool:
    """Return True for an IP address or an RFC 1123 hostname."""
    try:
        ipaddress.ip_address(host)
        return True
    except ValueError:
        pass
    if not host or len(host) > 253:
        return False
    labels = host.rstrip(".").split(".")
    # dotted numbers that failed to parse as an IP are a typo, not a hostname
    if all(label.isdigit() for label in labels):
        return False
    return all(_HOSTNAME_LABEL.match(label) for label in labels)


class HostIpResolver(ABC):
    """Turns a raw DOCKER_HOST value into the address of the daemon."""

    @abstractmethod
    def resolve_ip(self, raw_host: str) -> str:
        """
        Resolve the daemon address.

        Parameters
        ----------
        raw_host : str
            Value of DOCKER_HOST, or "" when unset

        Returns
        -------
        str
            IP address or hostname of the daemon

        Raises
        ------
        ResolutionError
            If ``raw_host`` is malformed for this strategy
        """


class DaemonHostIpResolver(HostIpResolver):
    """Resolves a daemon on the local interface to a fixed loopback address."""

    def __init__(self, localhost_ip: str = LOCALHOST_IP) -> None:
        self.localhost_ip = localhost_ip

    def resolve_ip(self, raw_host: str) -> str:
        raw_host = raw_host or ""
        if raw_host and not raw_host.startswith(UNIX_PROTOCOL):
            raise ResolutionError(
                f"Local docker daemon must be addressed through a unix socket. Got: {raw_host}",
                details={"raw_host": raw_host, "reason": "not a unix socket"},
            )
        logger.debug(f"Local daemon resolved to {self.localhost_ip}")
        return self.localhost_ip


class RemoteHostIpResolver(HostIpResolver):
    """Extracts the host part of ``tcp://host:port`` or bare ``host[:port]``."""

    def resolve_ip(self, raw_host: str) -> str:
        raw_host = (raw_host or "").strip()
        if not raw_host:
            raise ResolutionError(
                "DOCKER_HOST cannot be blank/null",
                details={"raw_host": raw_host, "reason": "blank"},
            )

        if "://" in raw_host:
            scheme = raw_host.split("://", 1)[0].lower()
            if f"{scheme}://" != TCP_PROTOCOL:
                raise ResolutionError(
                    f"Remote DOCKER_HOST must use the tcp scheme. Got: {raw_host}",
                    details={"raw_host": raw_host, "reason": f"unsupported scheme {scheme}"},
                )
            url = raw_host
        else:
            url = TCP_PROTOCOL + raw_host

        try:
            parts = urlsplit(url)
            parts.port  # noqa: B018 - raises on a non-numeric or out of range port
        except ValueError as e:
            raise ResolutionError(
                f"Malformed DOCKER_HOST: {raw_host}",
                details={"raw_host": raw_host, "reason": str(e)},
            ) from e

        host = parts.hostname
        if not host:
            raise ResolutionError(
                f"No host found in DOCKER_HOST: {raw_host}",
                details={"raw_host": raw_host, "reason": "missing host"},
            )
        if not is_valid_host(host):
            raise ResolutionError(
                f"Invalid host in DOCKER_HOST: {host}",
                details={"raw_host": raw_host, "reason": "invalid host"},
            )

        logger.debug(f"Remote daemon {raw_host} resolved to {host}")
        return host


def resolver_for(docker_type: DockerType, localhost_ip: str = LOCALHOST_IP) -> HostIpResolver:
    """Pick the resolution strategy for a docker type."""
    if DockerType.parse(docker_type) is DockerType.DAEMON:
        return DaemonHostIpResolver(localhost_ip)
    return RemoteHostIpResolver()
