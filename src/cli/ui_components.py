"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Mantiene en un solo sitio qué va a stdout (salida de comando) y qué a stderr.
"""

from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from core.config import AppSettings
from core.domain.models import ApiResponse, InstanceInfo


def make_console(*, stderr: bool = False) -> Console:
    """Consola sin resaltado automático: la salida debe ser texto literal."""

    return Console(stderr=stderr, highlight=False, soft_wrap=True)


def format_raw_response(response: ApiResponse) -> str:
    """Reconstruye la respuesta como la imprime `curl -i` (status, headers, cuerpo)."""

    status_line = f"{response.http_version} {response.status_code}"
    if response.reason_phrase:
        status_line = f"{status_line} {response.reason_phrase}"
    lines = [status_line]
    lines.extend(f"{name}: {value}" for name, value in response.headers)
    return "\r\n".join(lines) + "\r\n\r\n" + response.body


def print_raw_response(response: ApiResponse) -> None:
    # click.echo escribe bytes literales; Rich eliminaría los `\r` de la respuesta.
    # Sin salto de línea final, igual que `curl -i`.
    typer.echo(format_raw_response(response), nl=False)


def build_instance_table(info: InstanceInfo) -> Table:
    table = Table(title="Instance")
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")
    table.add_row("id", info.id)
    table.add_row("state", info.state)
    table.add_row("vmm_version", info.vmm_version)
    if info.app_name:
        table.add_row("app_name", info.app_name)
    return table


def build_settings_table(settings: AppSettings) -> Table:
    """Tabla con la configuración efectiva (env + .env + defaults)."""

    table = Table(title="fcctl settings")
    table.add_column("Setting", style="bright_green", no_wrap=True)
    table.add_column("Value", style="white")
    for name, value in settings.model_dump(mode="json").items():
        table.add_row(name, "" if value is None else str(value))
    return table
