"""Tests for docker_machine.validators module."""

import pytest

from docker_machine.exceptions import ValidationError
from docker_machine.models import DockerType
from docker_machine.validators import (
    detect_docker_type,
    validate_additional_environment,
    validate_daemon_environment,
    validate_remote_environment,
)


class TestValidateDaemonEnvironment:
    """Tests for the local daemon validator."""

    def test_empty_environment_is_valid(self):
        """Test an empty environment passes."""
        validate_daemon_environment({})

    def test_none_is_treated_as_empty(self):
        """Test a None environment passes."""
        validate_daemon_environment(None)

    def test_unrelated_variables_are_valid(self):
        """Test variables unrelated to Docker are ignored."""
        validate_daemon_environment({"PATH": "/usr/bin", "HOME": "/root"})

    def test_unix_socket_host_is_valid(self):
        """Test DOCKER_HOST may point at the local socket."""
        validate_daemon_environment({"DOCKER_HOST": "unix:///var/run/docker.sock"})

    def test_tcp_host_is_rejected(self):
        """Test a network DOCKER_HOST conflicts with a local daemon."""
        with pytest.raises(ValidationError) as exc_info:
            validate_daemon_environment({"DOCKER_HOST": "tcp://10.0.0.5:2376"})
        assert exc_info.value.details["conflicting"] == ["DOCKER_HOST"]
        assert exc_info.value.details["mode"] == "daemon"

    def test_tls_variables_are_rejected(self):
        """Test TLS variables conflict with a local daemon."""
        with pytest.raises(ValidationError) as exc_info:
            validate_daemon_environment({"DOCKER_TLS_VERIFY": "1", "DOCKER_CERT_PATH": "/certs"})
        assert exc_info.value.details["conflicting"] == ["DOCKER_TLS_VERIFY", "DOCKER_CERT_PATH"]
        assert "cannot be set when connecting to a local docker daemon" in str(exc_info.value)

    def test_empty_tls_values_are_not_set(self):
        """Test empty TLS values count as unset."""
        validate_daemon_environment({"DOCKER_TLS_VERIFY": "", "DOCKER_CERT_PATH": ""})


class TestValidateRemoteEnvironment:
    """Tests for the remote daemon validator."""

    def test_host_only_is_valid(self):
        """Test a plain tcp host without TLS passes."""
        validate_remote_environment({"DOCKER_HOST": "tcp://10.0.0.5:2375"})

    def test_host_with_tls_is_valid(self, remote_tls_environment):
        """Test a host with both TLS variables passes."""
        validate_remote_environment(remote_tls_environment)

    def test_missing_host(self):
        """Test DOCKER_HOST is required."""
        with pytest.raises(ValidationError) as exc_info:
            validate_remote_environment({})
        assert exc_info.value.details["missing"] == ["DOCKER_HOST"]

    def test_none_is_missing_host(self):
        """Test a None environment is missing DOCKER_HOST."""
        with pytest.raises(ValidationError):
            validate_remote_environment(None)

    def test_blank_host(self):
        """Test a blank DOCKER_HOST counts as missing."""
        with pytest.raises(ValidationError):
            validate_remote_environment({"DOCKER_HOST": ""})

    def test_verify_without_cert_path(self):
        """Test DOCKER_TLS_VERIFY requires DOCKER_CERT_PATH."""
        with pytest.raises(ValidationError) as exc_info:
            validate_remote_environment({"DOCKER_HOST": "tcp://h:2376", "DOCKER_TLS_VERIFY": "1"})
        assert exc_info.value.details["missing"] == ["DOCKER_CERT_PATH"]

    def test_cert_path_without_verify(self):
        """Test DOCKER_CERT_PATH requires DOCKER_TLS_VERIFY."""
        with pytest.raises(ValidationError) as exc_info:
            validate_remote_environment({"DOCKER_HOST": "tcp://h:2376", "DOCKER_CERT_PATH": "/certs"})
        assert exc_info.value.details["missing"] == ["DOCKER_TLS_VERIFY"]

    def test_reports_all_missing_variables(self):
        """Test missing host and TLS pairing are reported together."""
        with pytest.raises(ValidationError) as exc_info:
            validate_remote_environment({"DOCKER_TLS_VERIFY": "1"})
        assert exc_info.value.details["missing"] == ["DOCKER_HOST", "DOCKER_CERT_PATH"]
        assert "DOCKER_HOST, DOCKER_CERT_PATH" in exc_info.value.message


class TestValidateAdditionalEnvironment:
    """Tests for the additional environment validator."""

    def test_unrelated_variables_are_valid(self):
        """Test ordinary overrides pass."""
        validate_additional_environment({"COMPOSE_PROJECT_NAME": "it", "SOME_VAR": "x"})

    def test_none_is_valid(self):
        """Test a None environment passes."""
        validate_additional_environment(None)

    @pytest.mark.parametrize("name", ["DOCKER_HOST", "DOCKER_TLS_VERIFY", "DOCKER_CERT_PATH"])
    def test_reserved_variable_is_rejected(self, name):
        """Test each reserved variable is rejected."""
        with pytest.raises(ValidationError) as exc_info:
            validate_additional_environment({name: "anything"})
        assert exc_info.value.details["conflicting"] == [name]

    def test_reserved_variable_with_empty_value_is_rejected(self):
        """Test presence alone is enough to be rejected."""
        with pytest.raises(ValidationError):
            validate_additional_environment({"DOCKER_HOST": ""})


class TestDetectDockerType:
    """Tests for docker type detection."""

    def test_empty_environment_is_daemon(self):
        """Test no Docker variables means a local daemon."""
        assert detect_docker_type({}) is DockerType.DAEMON
        assert detect_docker_type(None) is DockerType.DAEMON

    def test_unix_socket_is_daemon(self):
        """Test a local socket DOCKER_HOST means a local daemon."""
        assert detect_docker_type({"DOCKER_HOST": "unix:///var/run/docker.sock"}) is DockerType.DAEMON

    def test_docker_machine_environment_is_remote(self, remote_tls_environment):
        """Test the variables exported by docker-machine mean a remote engine."""
        assert detect_docker_type(remote_tls_environment) is DockerType.REMOTE

    def test_tcp_host_without_tls_is_remote(self):
        """Test a plain tcp DOCKER_HOST means a remote engine."""
        assert detect_docker_type({"DOCKER_HOST": "tcp://10.0.0.5:2375"}) is DockerType.REMOTE

    def test_inconsistent_environment_falls_back_to_daemon(self):
        """Test an environment no validator accepts falls back to a daemon."""
        assert detect_docker_type({"DOCKER_CERT_PATH": "/certs"}) is DockerType.DAEMON
