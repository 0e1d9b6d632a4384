"""Doctor command for environment diagnostics."""

from __future__ import annotations

import stat
from pathlib import Path

import httpx
import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import build_client
from adapters.vmm_api import FirecrackerApi
from cli.ui_components import build_instance_table, build_settings_table
from core.config import AppSettings, get_user_env_file
from core.domain.models import InstanceInfo

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


def _settings(ctx: typer.Context) -> AppSettings:
    return ctx.obj if isinstance(ctx.obj, AppSettings) else AppSettings()


def _check_socket(path: Path) -> tuple[bool, str]:
    try:
        mode = path.stat().st_mode
    except OSError as exc:
        return False, str(exc)
    if not stat.S_ISSOCK(mode):
        return False, f"{path} exists but is not a socket"
    return True, str(path)


def _check_api(settings: AppSettings) -> tuple[InstanceInfo | None, str]:
    try:
        with build_client(settings) as client:
            info = FirecrackerApi(client).get_instance_info()
        return info, f"{info.state} ({info.vmm_version})"
    except (httpx.HTTPError, ValueError) as exc:
        return None, str(exc)


def _check_file(value: str) -> tuple[bool, str]:
    path = Path(value)
    if path.is_file():
        return True, str(path.resolve())
    return False, f"{value} not found"


@app.command()
def run(ctx: typer.Context) -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = _settings(ctx)

    table = Table(title="fcctl doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    ok_socket, detail_socket = _check_socket(settings.api_socket)
    table.add_row("API socket", "OK" if ok_socket else "FAIL", detail_socket)

    info: InstanceInfo | None = None
    if ok_socket:
        info, detail_api = _check_api(settings)
        table.add_row("API reachable", "OK" if info else "FAIL", detail_api)
    else:
        table.add_row("API reachable", "SKIPPED", "socket missing")

    # Las rutas se resuelven en el host del VMM; aquí solo avisamos.
    ok_kernel, detail_kernel = _check_file(settings.kernel_image_path)
    table.add_row("Kernel image", "OK" if ok_kernel else "WARN", detail_kernel)
    ok_drive, detail_drive = _check_file(settings.drive_path_on_host)
    table.add_row("Drive image", "OK" if ok_drive else "WARN", detail_drive)

    _console.print(table)

    if info is not None:
        _console.print(build_instance_table(info))

    if not ok_socket:
        _console.print(
            "\n[yellow]Note:[/yellow] start the VMM with `--api-sock` pointing at "
            f"{settings.api_socket} or set FCCTL_API_SOCKET."
        )


@app.command(name="show-config")
def show_config(ctx: typer.Context) -> None:
    """Print the effective settings (env vars, .env files, defaults)."""

    _console.print(build_settings_table(_settings(ctx)))
    _console.print(f"[dim]User env file: {get_user_env_file()}[/dim]")
