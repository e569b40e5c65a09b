import pytest
from unittest.mock import Mock, patch

from session_launcher.errors import ValidationError
from session_launcher.validation import (
    is_down_level_username,
    is_fqdn,
    ping_command,
    probe_reachable,
    validate_host,
    validate_username,
)


class TestUsername:
    @pytest.mark.parametrize("username", ["", "corp\\alice", "CORP\\svc-backup", "\\alice"])
    def test_accepted(self, username):
        assert is_down_level_username(username)
        assert validate_username(username) == username

    @pytest.mark.parametrize("username", ["alice", "alice@corp.example", "corp/alice"])
    def test_rejected(self, username):
        assert not is_down_level_username(username)
        with pytest.raises(ValidationError, match="down-level"):
            validate_username(username)


class TestFqdn:
    @pytest.mark.parametrize(
        "host",
        [
            "host.corp.example",
            "server01",
            "a-b.example.com",
            "10.0.0.example",
            "x" * 63 + ".example",
        ],
    )
    def test_valid(self, host):
        assert is_fqdn(host)

    @pytest.mark.parametrize(
        "host",
        [
            "",
            "bad host",
            "host..example",
            "host.example.",
            "-start.example",
            "end-.example",
            "10.0.0.1",
            "host.123",
            "x" * 64 + ".example",
            ("a" * 60 + ".") * 5,
            "host_name.example",
            "host.corp.example\n",
            "host\n.corp.example",
        ],
    )
    def test_invalid(self, host):
        assert not is_fqdn(host)

    def test_total_length_limit(self):
        host = ".".join(["a" * 63] * 4)
        assert len(host) == 255
        assert is_fqdn(host)
        assert not is_fqdn(host + "a")


class TestValidateHost:
    def test_shape_checked_before_probe(self):
        probe = Mock(return_value=True)

        with pytest.raises(ValidationError, match="not a valid FQDN"):
            validate_host("bad host", probe)

        probe.assert_not_called()

    def test_unreachable(self):
        probe = Mock(return_value=False)

        with pytest.raises(ValidationError, match="reachability"):
            validate_host("host.corp.example", probe)

        probe.assert_called_once_with("host.corp.example")

    def test_reachable(self):
        probe = Mock(return_value=True)

        assert validate_host("host.corp.example", probe) == "host.corp.example"
        probe.assert_called_once_with("host.corp.example")


class TestProbe:
    @patch("session_launcher.validation.platform.system", return_value="Linux")
    def test_posix_ping_command(self, _system):
        assert ping_command("host.corp.example", 2) == ["ping", "-c", "2", "host.corp.example"]

    @patch("session_launcher.validation.platform.system", return_value="Windows")
    def test_windows_ping_command(self, _system):
        assert ping_command("host.corp.example") == ["ping", "-n", "1", "host.corp.example"]

    @patch("session_launcher.validation.subprocess.run")
    def test_probe_success(self, mock_run):
        mock_run.return_value = Mock(returncode=0)

        assert probe_reachable("host.corp.example") is True
        mock_run.assert_called_once()

    @patch("session_launcher.validation.subprocess.run")
    def test_probe_failure(self, mock_run):
        mock_run.return_value = Mock(returncode=1)

        assert probe_reachable("host.corp.example") is False

    @patch("session_launcher.validation.subprocess.run", side_effect=FileNotFoundError("ping"))
    def test_probe_without_ping_binary(self, _run):
        assert probe_reachable("host.corp.example") is False
