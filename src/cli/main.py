"""CLI principal (Typer).

Comandos:
- `boot-source`: PUT /boot-source
- `drive`: PUT /drives/<id>
- `machine-config`: PUT /machine-config
- `read-fifo`: lee un named pipe hasta el centinela
- `doctor ...`: diagnóstico del entorno

Las respuestas HTTP se imprimen crudas en stdout; logs y errores van a stderr.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional

import httpx
import typer
from pydantic import ValidationError
from rich.markup import escape

from adapters.fifo_reader import read_until_sentinel
from adapters.http_client import build_client
from adapters.vmm_api import FirecrackerApi
from cli import doctor
from cli.ui_components import make_console, print_raw_response
from core.config import AppSettings
from core.domain.models import ApiResponse, BlockDevice, BootSource, MachineConfig
from core.logging_config import setup_logging

app = typer.Typer(
    no_args_is_help=True,
    help="Configure a local microVM manager over its control socket.",
)
app.add_typer(doctor.app, name="doctor")

logger = logging.getLogger(__name__)

_err_console = make_console(stderr=True)

EXIT_NOTICE = "Reader exiting"


def _settings(ctx: typer.Context) -> AppSettings:
    if not isinstance(ctx.obj, AppSettings):
        ctx.obj = AppSettings()
    return ctx.obj


@app.callback()
def main(
    ctx: typer.Context,
    socket: Optional[Path] = typer.Option(
        None,
        "--socket",
        "-s",
        help="Path to the VMM API socket (default: FCCTL_API_SOCKET or /tmp/firecracker.socket).",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging on stderr."),
) -> None:
    try:
        settings = AppSettings()
    except ValidationError as exc:
        _err_console.print(f"[red]Invalid configuration:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc
    if socket is not None:
        settings = settings.model_copy(update={"api_socket": socket})
    ctx.obj = settings
    setup_logging(logging.DEBUG if verbose else settings.log_level)


def _build_model(factory: Callable[[], object]):
    try:
        return factory()
    except ValidationError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _send(settings: AppSettings, call: Callable[[FirecrackerApi], ApiResponse]) -> None:
    try:
        with build_client(settings) as client:
            response = call(FirecrackerApi(client))
    except httpx.TransportError as exc:
        logger.error("request to %s failed: %s", settings.api_socket, exc)
        _err_console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc
    print_raw_response(response)


@app.command("boot-source")
def boot_source(
    ctx: typer.Context,
    kernel_image_path: Optional[str] = typer.Option(
        None, "--kernel-image-path", "-k", help="Kernel image path on the host."
    ),
    boot_args: Optional[str] = typer.Option(None, "--boot-args", "-a", help="Guest kernel command line."),
) -> None:
    """Set the kernel image and boot arguments (PUT /boot-source)."""

    settings = _settings(ctx)
    model = _build_model(
        lambda: BootSource(
            kernel_image_path=(
                kernel_image_path if kernel_image_path is not None else settings.kernel_image_path
            ),
            boot_args=boot_args if boot_args is not None else settings.boot_args,
        )
    )
    _send(settings, lambda api: api.put_boot_source(model))


@app.command("drive")
def drive(
    ctx: typer.Context,
    drive_id: Optional[str] = typer.Option(None, "--drive-id", "-i", help="Drive identifier."),
    path_on_host: Optional[str] = typer.Option(None, "--path-on-host", "-p", help="Backing file on the host."),
    is_root_device: Optional[bool] = typer.Option(
        None, "--root/--no-root", help="Expose the drive as the root device."
    ),
    is_read_only: Optional[bool] = typer.Option(
        None, "--read-only/--read-write", help="Attach the drive read-only."
    ),
    partuuid: Optional[str] = typer.Option(None, "--partuuid", help="Root partition PARTUUID."),
) -> None:
    """Attach a block device (PUT /drives/<drive-id>)."""

    settings = _settings(ctx)
    model = _build_model(
        lambda: BlockDevice(
            drive_id=drive_id if drive_id is not None else settings.drive_id,
            path_on_host=path_on_host if path_on_host is not None else settings.drive_path_on_host,
            is_root_device=settings.drive_is_root_device if is_root_device is None else is_root_device,
            is_read_only=settings.drive_is_read_only if is_read_only is None else is_read_only,
            partuuid=partuuid,
        )
    )
    _send(settings, lambda api: api.put_drive(model))


@app.command("machine-config")
def machine_config(
    ctx: typer.Context,
    vcpu_count: int = typer.Option(1, "--vcpus", help="Number of vCPUs."),
    mem_size_mib: int = typer.Option(64, "--mem-mib", help="Guest memory in MiB."),
    ht_enabled: bool = typer.Option(False, "--ht/--no-ht", help="Enable hyperthreading."),
    cpu_template: Optional[str] = typer.Option(None, "--cpu-template", help="CPU template name."),
) -> None:
    """Set vCPU count and memory size (PUT /machine-config)."""

    settings = _settings(ctx)
    model = _build_model(
        lambda: MachineConfig(
            vcpu_count=vcpu_count,
            mem_size_mib=mem_size_mib,
            ht_enabled=ht_enabled,
            cpu_template=cpu_template,
        )
    )
    _send(settings, lambda api: api.put_machine_config(model))


@app.command("read-fifo")
def read_fifo(
    ctx: typer.Context,
    path: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Named pipe to read."),
    sentinel: Optional[str] = typer.Option(None, "--sentinel", help="Line that stops the reader."),
) -> None:
    """Print lines from a named pipe until the sentinel line (default: quit)."""

    settings = _settings(ctx)
    if sentinel == "":
        raise typer.BadParameter("sentinel must not be empty", param_hint="--sentinel")
    try:
        read_until_sentinel(
            path,
            on_line=typer.echo,
            sentinel=sentinel if sentinel is not None else settings.fifo_sentinel,
        )
    except KeyboardInterrupt:
        raise typer.Exit(code=130)
    except OSError as exc:
        _err_console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc
    typer.echo(EXIT_NOTICE)


def run() -> None:
    app()


if __name__ == "__main__":
    run()
