"""Tests for the typer CLI: raw output, overrides, error exit codes."""

import json

import pytest
from pydantic import ValidationError
from typer.testing import CliRunner

import cli.main as cli_main
from adapters import http_client
from cli.ui_components import format_raw_response
from core.domain.models import ApiResponse

runner = CliRunner()


@pytest.fixture
def patched_client(monkeypatch, vmm):
    """Route the CLI's client through the recording transport; remember the settings used."""
    used = []
    real_build_client = http_client.build_client

    def fake_build_client(settings):
        used.append(settings)
        return real_build_client(settings, transport=vmm.transport)

    monkeypatch.setattr(cli_main, "build_client", fake_build_client)
    return used


class TestBootSourceCommand:
    def test_defaults_and_raw_output(self, vmm, patched_client):
        result = runner.invoke(cli_main.app, ["boot-source"])

        assert result.exit_code == 0, result.output
        assert result.stdout.splitlines()[0] == "HTTP/1.1 204 No Content"
        assert vmm.requests[0].url.path == "/boot-source"
        body = json.loads(vmm.requests[0].content)
        assert body["kernel_image_path"] == "./loader-stripped-64.elf"
        assert body["boot_args"].endswith("/hello")

    def test_options_override_settings(self, vmm, patched_client):
        result = runner.invoke(
            cli_main.app, ["boot-source", "-k", "/srv/vmlinux", "--boot-args", "console=ttyS0"]
        )
        assert result.exit_code == 0, result.output
        assert json.loads(vmm.requests[0].content) == {
            "kernel_image_path": "/srv/vmlinux",
            "boot_args": "console=ttyS0",
        }

    def test_empty_kernel_path_is_usage_error(self, vmm, patched_client):
        result = runner.invoke(cli_main.app, ["boot-source", "-k", ""])
        assert result.exit_code == 2
        assert vmm.requests == []

    def test_no_trailing_newline_after_body(self, make_vmm, monkeypatch):
        vmm = make_vmm(status_code=400, body={"fault_message": "bad"})
        real_build_client = http_client.build_client
        monkeypatch.setattr(
            cli_main, "build_client", lambda settings: real_build_client(settings, transport=vmm.transport)
        )
        result = runner.invoke(cli_main.app, ["boot-source"])
        assert result.exit_code == 0, result.output
        assert result.stdout.endswith("}")

    def test_socket_option(self, tmp_path, vmm, patched_client):
        sock = tmp_path / "other.sock"
        result = runner.invoke(cli_main.app, ["--socket", str(sock), "boot-source"])
        assert result.exit_code == 0, result.output
        assert patched_client[0].api_socket == sock


class TestDriveCommand:
    def test_defaults(self, vmm, patched_client):
        result = runner.invoke(cli_main.app, ["drive"])
        assert result.exit_code == 0, result.output
        assert vmm.requests[0].method == "PUT"
        assert vmm.requests[0].url.path == "/drives/rootfs"
        assert json.loads(vmm.requests[0].content) == {
            "drive_id": "rootfs",
            "path_on_host": "./usr.zfs",
            "is_root_device": False,
            "is_read_only": False,
        }

    def test_flags(self, vmm, patched_client):
        result = runner.invoke(
            cli_main.app, ["drive", "-i", "data", "-p", "/srv/data.img", "--root", "--read-only"]
        )
        assert result.exit_code == 0, result.output
        assert vmm.requests[0].url.path == "/drives/data"
        body = json.loads(vmm.requests[0].content)
        assert body["is_root_device"] is True
        assert body["is_read_only"] is True

    @pytest.mark.parametrize("option", ["-i", "-p"])
    def test_empty_option_is_usage_error(self, option, vmm, patched_client):
        result = runner.invoke(cli_main.app, ["drive", option, ""])
        assert result.exit_code == 2
        assert vmm.requests == []

    def test_env_settings_used(self, monkeypatch, vmm, patched_client):
        monkeypatch.setenv("FCCTL_DRIVE_PATH_ON_HOST", "/var/lib/vm/rootfs.ext4")
        result = runner.invoke(cli_main.app, ["drive"])
        assert result.exit_code == 0, result.output
        assert json.loads(vmm.requests[0].content)["path_on_host"] == "/var/lib/vm/rootfs.ext4"

    def test_invalid_drive_id_is_usage_error(self, vmm, patched_client):
        result = runner.invoke(cli_main.app, ["drive", "-i", "a/b"])
        assert result.exit_code == 2
        assert vmm.requests == []


class TestMachineConfigCommand:
    def test_put(self, vmm, patched_client):
        result = runner.invoke(cli_main.app, ["machine-config", "--vcpus", "2", "--mem-mib", "128"])
        assert result.exit_code == 0, result.output
        assert vmm.requests[0].url.path == "/machine-config"
        assert json.loads(vmm.requests[0].content)["vcpu_count"] == 2


class TestTransportFailure:
    def test_invalid_env_setting_exits_1(self, monkeypatch):
        monkeypatch.setenv("FCCTL_HTTP_TIMEOUT_SECONDS", "abc")
        result = runner.invoke(cli_main.app, ["boot-source"])
        assert result.exit_code == 1
        assert not isinstance(result.exception, ValidationError)
        assert "HTTP/1.1" not in result.stdout

    def test_missing_socket_exits_1(self, tmp_path):
        result = runner.invoke(
            cli_main.app, ["--socket", str(tmp_path / "missing.sock"), "boot-source"]
        )
        assert result.exit_code == 1
        assert "HTTP/1.1" not in result.stdout


class TestReadFifoCommand:
    def test_prints_until_sentinel_then_notice(self, tmp_path):
        path = tmp_path / "lines.txt"
        path.write_text("alpha\nbeta\nquit\ngamma\n", encoding="utf-8")

        result = runner.invoke(cli_main.app, ["read-fifo", str(path)])

        assert result.exit_code == 0, result.output
        assert result.stdout.splitlines() == ["alpha", "beta", cli_main.EXIT_NOTICE]

    def test_empty_sentinel_is_usage_error(self, tmp_path):
        path = tmp_path / "lines.txt"
        path.write_text("alpha\n", encoding="utf-8")
        result = runner.invoke(cli_main.app, ["read-fifo", str(path), "--sentinel", ""])
        assert result.exit_code == 2

    def test_missing_path_is_usage_error(self, tmp_path):
        result = runner.invoke(cli_main.app, ["read-fifo", str(tmp_path / "nope")])
        assert result.exit_code == 2


class TestDoctor:
    def test_reports_missing_socket(self, tmp_path):
        result = runner.invoke(
            cli_main.app, ["--socket", str(tmp_path / "missing.sock"), "doctor", "run"]
        )
        assert result.exit_code == 0, result.output
        assert "API socket" in result.stdout
        assert "FAIL" in result.stdout

    def test_show_config(self):
        result = runner.invoke(cli_main.app, ["doctor", "show-config"])
        assert result.exit_code == 0, result.output
        assert "api_socket" in result.stdout


def test_format_raw_response_matches_curl_layout():
    response = ApiResponse(
        status_code=400,
        reason_phrase="Bad Request",
        headers=[("Content-Type", "application/json"), ("Content-Length", "2")],
        body="{}",
    )
    assert format_raw_response(response) == (
        "HTTP/1.1 400 Bad Request\r\n"
        "Content-Type: application/json\r\n"
        "Content-Length: 2\r\n"
        "\r\n"
        "{}"
    )
