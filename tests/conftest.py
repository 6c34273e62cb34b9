"""Pytest configuration and shared fixtures."""

import os

import pytest

from docker_machine.config import DockerMachineSettings


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch, tmp_path):
    """Isolate tests from the caller's Docker variables and .env file."""
    for name in list(os.environ):
        if name.startswith("DOCKER_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def settings():
    """Default settings, ignoring any .env file."""
    return DockerMachineSettings(_env_file=None)


@pytest.fixture
def remote_tls_environment():
    """A complete remote environment with TLS enabled."""
    return {
        "DOCKER_HOST": "tcp://10.0.0.5:2376",
        "DOCKER_TLS_VERIFY": "1",
        "DOCKER_CERT_PATH": "/home/user/.docker/machine/certs",
    }
